"""
Appointment to bill linking.

Builds bill drafts from completed appointments or from the service catalog,
and turns drafts into Bill records. The two line sources price differently:

- a line from an appointment uses the price stored on the appointment
- a line picked from the catalog uses the service's current price
"""

import datetime as dt
from typing import Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field
from pydantic import ValidationError as PydanticValidationError

from ..exceptions import ValidationError
from ..models import (
    Appointment,
    AppointmentStatus,
    Bill,
    BillService,
    Customer,
    PaymentMethod,
    PaymentStatus,
    Service,
)
from .derivation import BillTotals, LineItemDraft


class BillDraft(BaseModel):
    """Editable state of a bill before it is saved."""

    model_config = ConfigDict(frozen=True)

    appointment_id: Optional[str] = None
    customer_id: Optional[str] = None
    customer_name: str = ""
    lines: Tuple[LineItemDraft, ...] = ()
    discount_percent: float = 0.0
    tax_percent: float = 0.0
    payment_method: PaymentMethod = PaymentMethod.CASH
    payment_status: PaymentStatus = PaymentStatus.PENDING
    notes: Optional[str] = None

    def with_lines(self, lines) -> "BillDraft":
        return self.model_copy(update={"lines": tuple(lines)})


def draft_from_appointment(appointment: Appointment, tax_percent: float = 0.0,
                           discount_percent: float = 0.0) -> BillDraft:
    if appointment.status != AppointmentStatus.COMPLETED:
        raise ValidationError(
            f"Appointment {appointment.id} is {appointment.status.value}; only completed appointments can be billed",
            field="appointment_id",
        )
    try:
        line = LineItemDraft(
            service_id=appointment.service_id,
            service_name=appointment.service_name,
            quantity=1,
            price=appointment.price,
        )
        return BillDraft(
            appointment_id=appointment.id,
            customer_id=appointment.customer_id,
            customer_name=appointment.customer_name,
            lines=(line,),
            discount_percent=discount_percent,
            tax_percent=tax_percent,
        )
    except PydanticValidationError as e:
        raise ValidationError.from_pydantic(e) from e


def line_from_service(service: Service, quantity: int = 1) -> LineItemDraft:
    if not service.is_active:
        raise ValidationError(f"Service '{service.name}' is not active", field="service_id")
    try:
        return LineItemDraft(
            service_id=service.id,
            service_name=service.name,
            quantity=quantity,
            price=service.price,
        )
    except PydanticValidationError as e:
        raise ValidationError.from_pydantic(e) from e


def draft_from_bill(bill: Bill) -> BillDraft:
    """Reopen a saved bill; lines keep the prices that were charged."""
    try:
        lines = tuple(
            LineItemDraft(
                service_id=line.service_id,
                service_name=line.service_name,
                quantity=line.quantity,
                price=line.price,
            )
            for line in bill.services
        )
        return BillDraft(
            appointment_id=bill.appointment_id,
            customer_id=bill.customer_id,
            customer_name=bill.customer_name,
            lines=lines,
            discount_percent=bill.discount_percent,
            tax_percent=bill.tax_percent,
            payment_method=bill.payment_method,
            payment_status=bill.payment_status,
            notes=bill.notes,
        )
    except PydanticValidationError as e:
        raise ValidationError.from_pydantic(e) from e


def bill_from_draft(draft: BillDraft, totals: BillTotals, bill_id: str,
                    customer_id: str, date: dt.datetime) -> Bill:
    """Materialize a Bill. Every line must already carry its service name."""
    try:
        services = []
        for line, line_total in zip(draft.lines, totals.line_totals):
            services.append(BillService(
                service_id=line.service_id,
                service_name=line.service_name or "",
                quantity=line.quantity,
                price=line.price,
                total=line_total,
            ))
        return Bill(
            id=bill_id,
            appointment_id=draft.appointment_id,
            customer_id=customer_id,
            customer_name=draft.customer_name,
            services=tuple(services),
            subtotal=totals.subtotal,
            tax=totals.tax_amount,
            discount=totals.discount_amount,
            total=totals.total,
            tax_percent=totals.tax_percent,
            discount_percent=totals.discount_percent,
            payment_method=draft.payment_method,
            payment_status=draft.payment_status,
            date=date,
            notes=draft.notes,
        )
    except PydanticValidationError as e:
        raise ValidationError.from_pydantic(e) from e


def appointment_from_selection(appointment_id: str, customer: Customer, service: Service,
                               date: dt.date, time: str, now: dt.datetime,
                               notes: Optional[str] = None,
                               status: AppointmentStatus = AppointmentStatus.SCHEDULED,
                               created_at: Optional[dt.datetime] = None) -> Appointment:
    """Build an appointment holding copies of the customer's and service's current fields."""
    try:
        return Appointment(
            id=appointment_id,
            customer_id=customer.id,
            customer_name=customer.name,
            customer_phone=customer.phone,
            customer_email=customer.email,
            service_id=service.id,
            service_name=service.name,
            duration=service.duration,
            price=service.price,
            date=date,
            time=time,
            status=status,
            notes=notes,
            created_at=created_at or now,
            updated_at=now,
        )
    except PydanticValidationError as e:
        raise ValidationError.from_pydantic(e) from e
