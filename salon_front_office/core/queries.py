"""
List filtering and sorting for the appointment and bill views.

Both lists filter by status (or the "all" sentinel) and by a case-insensitive
search term. Appointments come back earliest first, bills most recent first.
"""

from enum import Enum
from typing import Callable, Iterable, List, Optional, Sequence, Type, TypeVar

from ..exceptions import ValidationError
from ..models import Appointment, AppointmentStatus, Bill, PaymentStatus, Service

ALL = "all"

T = TypeVar("T")


def _resolve_status(status: Optional[str], enum: Type[Enum]) -> Optional[Enum]:
    if status is None or status == ALL:
        return None
    try:
        return enum(status)
    except ValueError:
        allowed = ", ".join([ALL] + [member.value for member in enum])
        raise ValidationError(f"Unknown status '{status}'; expected one of: {allowed}", field="status") from None


def _matches(term: str, fields: Sequence[Optional[str]]) -> bool:
    return any(term in (value or "").lower() for value in fields)


def _filter(items: Iterable[T], status: Optional[Enum], status_of: Callable[[T], Enum],
            search: str, fields_of: Callable[[T], Sequence[Optional[str]]]) -> List[T]:
    term = (search or "").strip().lower()
    result = []
    for item in items:
        if status is not None and status_of(item) != status:
            continue
        if term and not _matches(term, fields_of(item)):
            continue
        result.append(item)
    return result


def filter_appointments(appointments: Iterable[Appointment], status: Optional[str] = ALL,
                        search: str = "") -> List[Appointment]:
    """Filter appointments and sort them by date, earliest first."""
    wanted = _resolve_status(status, AppointmentStatus)
    filtered = _filter(
        appointments,
        wanted,
        lambda a: a.status,
        search,
        lambda a: (a.customer_name, a.service_name, a.customer_phone),
    )
    return sorted(filtered, key=lambda a: a.date)


def filter_bills(bills: Iterable[Bill], status: Optional[str] = ALL, search: str = "") -> List[Bill]:
    """Filter bills by payment status and sort them by date, most recent first."""
    wanted = _resolve_status(status, PaymentStatus)
    filtered = _filter(
        bills,
        wanted,
        lambda b: b.payment_status,
        search,
        lambda b: (b.customer_name, b.id),
    )
    return sorted(filtered, key=lambda b: b.date, reverse=True)


def recent_appointments(appointments: Iterable[Appointment], limit: int = 5) -> List[Appointment]:
    """Most recently created appointments first."""
    return sorted(appointments, key=lambda a: a.created_at, reverse=True)[:limit]


def billable_appointments(appointments: Iterable[Appointment]) -> List[Appointment]:
    return [a for a in appointments if a.status == AppointmentStatus.COMPLETED]


def active_services(services: Iterable[Service]) -> List[Service]:
    return [s for s in services if s.is_active]
