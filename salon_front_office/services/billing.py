"""
Billing Service

Turns bill drafts into stored bills: prefilled from completed appointments
or assembled from the service catalog, priced by the derivation engine.
"""

import datetime as dt
import logging
from typing import Callable, List, Optional, Union

from pydantic import ValidationError as PydanticValidationError

from ..config import Settings
from ..core import queries
from ..core.derivation import BillTotals, calculate_totals
from ..core.linking import (
    BillDraft,
    bill_from_draft,
    draft_from_appointment,
    draft_from_bill,
    line_from_service,
)
from ..exceptions import ValidationError
from ..models import Appointment, AppointmentStatus, Bill, Customer, PaymentStatus, Service
from .store import EntityStore

logger = logging.getLogger(__name__)


class BillingService:
    """Service for creating and managing bills"""

    def __init__(self, store: EntityStore, settings: Settings,
                 clock: Callable[[], dt.datetime] = dt.datetime.now):
        """
        Initialize BillingService

        Args:
            store: Entity store holding the canonical collections
            settings: Front office settings (default tax and discount rates)
            clock: Returns the current local time
        """
        self.store = store
        self.settings = settings
        self.clock = clock

    def new_draft(self) -> BillDraft:
        return BillDraft(
            tax_percent=self.settings.DEFAULT_TAX_PERCENT,
            discount_percent=self.settings.DEFAULT_DISCOUNT_PERCENT,
        )

    def draft_for_appointment(self, appointment_id: str) -> BillDraft:
        """Prefill a draft from a completed appointment, priced as booked."""
        appointment = self.store.appointments.get(appointment_id)
        return draft_from_appointment(
            appointment,
            tax_percent=self.settings.DEFAULT_TAX_PERCENT,
            discount_percent=self.settings.DEFAULT_DISCOUNT_PERCENT,
        )

    def add_service_line(self, draft: BillDraft, service_id: str, quantity: int = 1) -> BillDraft:
        """Append a catalog service to the draft at the service's current price."""
        service = self.store.services.get(service_id)
        return draft.with_lines(draft.lines + (line_from_service(service, quantity),))

    def remove_line(self, draft: BillDraft, index: int) -> BillDraft:
        if not 0 <= index < len(draft.lines):
            raise ValidationError(f"No line at position {index}", field="lines")
        lines = list(draft.lines)
        del lines[index]
        return draft.with_lines(lines)

    def preview(self, draft: BillDraft) -> BillTotals:
        return calculate_totals(draft.lines, draft.discount_percent, draft.tax_percent)

    def _resolve_customer_id(self, draft: BillDraft) -> str:
        if draft.customer_id:
            return draft.customer_id
        if draft.appointment_id:
            appointment = self.store.appointments.find(draft.appointment_id)
            if appointment is not None:
                return appointment.customer_id
        wanted = draft.customer_name.strip().lower()
        for customer in self.store.customers.value:
            if customer.name.lower() == wanted:
                return customer.id
        return self.store.generate_id()

    def _named_lines(self, draft: BillDraft) -> BillDraft:
        """Fill in missing service names from the catalog."""
        lines = []
        for line in draft.lines:
            if not line.service_name:
                service = self.store.services.find(line.service_id)
                if service is None:
                    raise ValidationError(f"Unknown service '{line.service_id}' on bill line", field="lines")
                line = line.model_copy(update={"service_name": service.name})
            lines.append(line)
        return draft.with_lines(lines)

    def save(self, draft: BillDraft, bill_id: Optional[str] = None) -> Bill:
        """
        Validate a draft and store it as a bill

        Args:
            draft: Bill draft to save
            bill_id: Id of the bill being edited; a new bill is created when omitted

        Returns:
            The stored bill

        Raises:
            ValidationError: If the draft is incomplete or a rate is out of range
            NotFoundError: If bill_id or a newly linked appointment does not exist
        """
        if not draft.customer_name.strip():
            raise ValidationError("Missing required fields: customer_name", field="customer_name")
        if not draft.lines:
            raise ValidationError("A bill needs at least one service line", field="lines")

        existing = self.store.bills.get(bill_id) if bill_id else None
        if draft.appointment_id and (existing is None or draft.appointment_id != existing.appointment_id):
            self._check_billable(draft.appointment_id)
        draft = self._named_lines(draft)
        totals = self.preview(draft)

        try:
            bill = bill_from_draft(
                draft,
                totals,
                bill_id=existing.id if existing else self.store.generate_id(),
                customer_id=existing.customer_id if existing else self._resolve_customer_id(draft),
                date=existing.date if existing else self.clock(),
            )
        except ValidationError as e:
            logger.warning(f"Rejected bill for {draft.customer_name}: {len(e.errors)} validation error(s)")
            raise

        if existing:
            self.store.update_bill(bill)
            logger.info(f"Updated bill {bill.id} for {bill.customer_name}: total {bill.total:.2f}")
        else:
            self.store.add_bill(bill)
            logger.info(f"Created bill {bill.id} for {bill.customer_name}: total {bill.total:.2f}")
        return bill

    def _check_billable(self, appointment_id: str) -> None:
        appointment = self.store.appointments.get(appointment_id)
        if appointment.status != AppointmentStatus.COMPLETED:
            raise ValidationError(
                f"Appointment {appointment_id} is {appointment.status.value}; only completed appointments can be billed",
                field="appointment_id",
            )

    def edit_draft(self, bill_id: str) -> BillDraft:
        return draft_from_bill(self.store.bills.get(bill_id))

    def update_payment_status(self, bill_id: str, status: Union[str, PaymentStatus]) -> Bill:
        current = self.store.bills.get(bill_id)
        try:
            updated = Bill.model_validate({**current.model_dump(), "payment_status": status})
        except PydanticValidationError as e:
            raise ValidationError.from_pydantic(e) from e
        self.store.update_bill(updated)
        logger.info(f"Bill {bill_id} payment status: {current.payment_status.value} -> {updated.payment_status.value}")
        return updated

    def record_customer_visit(self, bill_id: str) -> Customer:
        """Add a bill to its customer's visit count and spend.

        Nothing calls this automatically; the caller decides when a bill counts as a visit.
        """
        bill = self.store.bills.get(bill_id)
        customer = self.store.customers.get(bill.customer_id)
        last_visit = bill.date if customer.last_visit is None else max(customer.last_visit, bill.date)
        updated = Customer.model_validate({
            **customer.model_dump(),
            "total_visits": customer.total_visits + 1,
            "total_spent": customer.total_spent + bill.total,
            "last_visit": last_visit,
        })
        self.store.update_customer(updated)
        logger.info(f"Recorded visit for customer {customer.id}: {updated.total_visits} visits, "
                    f"{updated.total_spent:.2f} spent")
        return updated

    def get(self, bill_id: str) -> Bill:
        return self.store.bills.get(bill_id)

    def list(self, status: Optional[str] = queries.ALL, search: str = "") -> List[Bill]:
        return queries.filter_bills(self.store.bills.value, status, search)

    def billable_appointments(self) -> List[Appointment]:
        return queries.billable_appointments(self.store.appointments.value)

    def active_services(self) -> List[Service]:
        return queries.active_services(self.store.services.value)
