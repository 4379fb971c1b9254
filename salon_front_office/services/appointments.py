"""
Appointment Service

Handles scheduling, editing, status changes and deletion of appointments
through the entity store.
"""

import datetime as dt
import logging
from typing import Callable, List, Optional, Union

from pydantic import ValidationError as PydanticValidationError

from ..core import queries
from ..core.linking import appointment_from_selection
from ..exceptions import ValidationError
from ..models import Appointment, AppointmentStatus, Customer, Service
from .store import EntityStore

logger = logging.getLogger(__name__)


class AppointmentService:
    """Service for managing salon appointments"""

    def __init__(self, store: EntityStore, clock: Callable[[], dt.datetime] = dt.datetime.now):
        """
        Initialize AppointmentService

        Args:
            store: Entity store holding the canonical collections
            clock: Returns the current local time
        """
        self.store = store
        self.clock = clock

    def _require(self, **fields) -> None:
        missing = [name for name, value in fields.items() if value is None or (isinstance(value, str) and not value.strip())]
        if missing:
            raise ValidationError(f"Missing required fields: {', '.join(missing)}", field=missing[0])

    def _bookable_service(self, service_id: str) -> Service:
        service = self.store.services.get(service_id)
        if not service.is_active:
            raise ValidationError(f"Service '{service.name}' is not active", field="service_id")
        return service

    def _resolve_customer(self, customer_id: Optional[str], name: str, phone: str,
                          email: str, now: dt.datetime) -> Customer:
        """Find the customer by id, then by phone; otherwise build a new one (not yet stored)."""
        if customer_id:
            return self.store.customers.get(customer_id)

        for customer in self.store.customers.value:
            if customer.phone == phone.strip():
                return customer

        return Customer(
            id=self.store.generate_id(),
            name=name,
            phone=phone,
            email=email,
            created_at=now,
        )

    def schedule(self, customer_name: str, customer_phone: str, customer_email: str,
                 service_id: str, date: dt.date, time: str, notes: Optional[str] = None,
                 customer_id: Optional[str] = None) -> Appointment:
        """
        Book a new appointment

        Args:
            customer_name: Name shown on the appointment
            customer_phone: Contact phone, also used to match an existing customer
            customer_email: Contact email
            service_id: Catalog service to book; must be active
            date: Calendar date of the visit
            time: Local time of day, HH:MM
            notes: Optional free text
            customer_id: Existing customer to book for (optional)

        Returns:
            The stored appointment

        Raises:
            ValidationError: If required fields are missing or invalid
            NotFoundError: If the service or customer id is unknown
        """
        self._require(customer_name=customer_name, customer_phone=customer_phone,
                      customer_email=customer_email, service_id=service_id, date=date, time=time)
        now = self.clock()
        service = self._bookable_service(service_id)

        try:
            customer = self._resolve_customer(customer_id, customer_name, customer_phone, customer_email, now)
            # The form's contact details win over what is on file
            booked_as = customer.model_copy(update={
                "name": customer_name.strip(),
                "phone": customer_phone.strip(),
                "email": customer_email.strip(),
            })
            appointment = appointment_from_selection(
                appointment_id=self.store.generate_id(),
                customer=booked_as,
                service=service,
                date=date,
                time=time,
                now=now,
                notes=notes,
            )
        except PydanticValidationError as e:
            logger.warning(f"Rejected appointment for {customer_name}: {e.error_count()} validation error(s)")
            raise ValidationError.from_pydantic(e) from e
        except ValidationError as e:
            logger.warning(f"Rejected appointment for {customer_name}: {e.message}")
            raise

        if self.store.customers.find(customer.id) is None:
            self.store.add_customer(customer)
            logger.info(f"Registered new customer {customer.id} ({customer.name})")

        self.store.add_appointment(appointment)
        logger.info(f"Scheduled appointment {appointment.id}: {appointment.service_name} for "
                    f"{appointment.customer_name} on {appointment.date} at {appointment.time}")
        return appointment

    def edit(self, appointment_id: str, customer_name: Optional[str] = None,
             customer_phone: Optional[str] = None, customer_email: Optional[str] = None,
             service_id: Optional[str] = None, date: Optional[dt.date] = None,
             time: Optional[str] = None, notes: Optional[str] = None) -> Appointment:
        """Change an appointment's details, keeping its id, status and creation time.

        Picking a service copies that service's current name, duration and price.
        """
        current = self.store.appointments.get(appointment_id)
        changes = {"updated_at": self.clock()}

        if customer_name is not None:
            changes["customer_name"] = customer_name
        if customer_phone is not None:
            changes["customer_phone"] = customer_phone
        if customer_email is not None:
            changes["customer_email"] = customer_email
        if service_id is not None:
            service = self._bookable_service(service_id)
            changes.update(
                service_id=service.id,
                service_name=service.name,
                duration=service.duration,
                price=service.price,
            )
        if date is not None:
            changes["date"] = date
        if time is not None:
            changes["time"] = time
        if notes is not None:
            changes["notes"] = notes

        updated = self._revalidate(current, changes)
        self.store.update_appointment(updated)
        logger.info(f"Updated appointment {appointment_id}")
        return updated

    def update_status(self, appointment_id: str, status: Union[str, AppointmentStatus]) -> Appointment:
        current = self.store.appointments.get(appointment_id)
        updated = self._revalidate(current, {"status": status, "updated_at": self.clock()})
        self.store.update_appointment(updated)
        logger.info(f"Appointment {appointment_id} status: {current.status.value} -> {updated.status.value}")
        return updated

    def delete(self, appointment_id: str) -> None:
        self.store.delete_appointment(appointment_id)
        logger.info(f"Deleted appointment {appointment_id}")

    def get(self, appointment_id: str) -> Appointment:
        return self.store.appointments.get(appointment_id)

    def list(self, status: Optional[str] = queries.ALL, search: str = "") -> List[Appointment]:
        return queries.filter_appointments(self.store.appointments.value, status, search)

    def bookable_services(self) -> List[Service]:
        return queries.active_services(self.store.services.value)

    def _revalidate(self, current: Appointment, changes: dict) -> Appointment:
        try:
            return Appointment.model_validate({**current.model_dump(), **changes})
        except PydanticValidationError as e:
            logger.warning(f"Rejected change to appointment {current.id}: {e.error_count()} validation error(s)")
            raise ValidationError.from_pydantic(e) from e
