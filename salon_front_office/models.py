"""
Data models for the salon front office: catalog services, customers,
appointments and bills.

Appointments and bills carry copies of customer and service display fields
taken when they were created. Those copies are never re-synced with the
catalog, so a bill always shows the price that was charged.
"""

import datetime as dt
import math
import re
from enum import Enum
from typing import Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

# Tolerance for comparing derived currency amounts
AMOUNT_TOLERANCE = 1e-6

TIME_PATTERN = re.compile(r"^([01]\d|2[0-3]):[0-5]\d$")
EMAIL_PATTERN = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")


def amounts_match(left: float, right: float) -> bool:
    return math.isclose(left, right, rel_tol=0.0, abs_tol=AMOUNT_TOLERANCE)


class AppointmentStatus(str, Enum):
    SCHEDULED = "scheduled"
    COMPLETED = "completed"
    CANCELLED = "cancelled"
    NO_SHOW = "no-show"


class PaymentMethod(str, Enum):
    CASH = "cash"
    CARD = "card"
    ONLINE = "online"


class PaymentStatus(str, Enum):
    PENDING = "pending"
    PAID = "paid"
    PARTIAL = "partial"
    REFUNDED = "refunded"


class Entity(BaseModel):
    """Base for everything the entity store keeps, keyed by a unique id."""

    model_config = ConfigDict(frozen=True, str_strip_whitespace=True)

    id: str = Field(min_length=1)


class Service(Entity):
    name: str = Field(min_length=1)
    description: str = ""
    duration: int = Field(gt=0, description="minutes")
    price: float = Field(ge=0, allow_inf_nan=False)
    category: str = ""
    is_active: bool = True


class Customer(Entity):
    name: str = Field(min_length=1)
    phone: str = Field(min_length=1)
    email: str
    date_of_birth: Optional[dt.date] = None
    address: Optional[str] = None
    notes: Optional[str] = None
    total_visits: int = Field(default=0, ge=0)
    total_spent: float = Field(default=0.0, ge=0, allow_inf_nan=False)
    last_visit: Optional[dt.datetime] = None
    created_at: dt.datetime

    @field_validator("email")
    @classmethod
    def validate_email(cls, value: str) -> str:
        if not EMAIL_PATTERN.match(value):
            raise ValueError("email must be a valid address")
        return value


class Appointment(Entity):
    customer_id: str = Field(min_length=1)
    customer_name: str = Field(min_length=1)
    customer_phone: str = Field(min_length=1)
    customer_email: str
    service_id: str = Field(min_length=1)
    service_name: str = Field(min_length=1)
    duration: int = Field(gt=0, description="minutes")
    price: float = Field(ge=0, allow_inf_nan=False)
    date: dt.date
    time: str = Field(description="local time of day, HH:MM")
    status: AppointmentStatus = AppointmentStatus.SCHEDULED
    notes: Optional[str] = None
    created_at: dt.datetime
    updated_at: dt.datetime

    @field_validator("customer_email")
    @classmethod
    def validate_email(cls, value: str) -> str:
        if not EMAIL_PATTERN.match(value):
            raise ValueError("customer_email must be a valid address")
        return value

    @field_validator("time")
    @classmethod
    def validate_time(cls, value: str) -> str:
        if not TIME_PATTERN.match(value):
            raise ValueError("time must be HH:MM (24h)")
        return value

    @model_validator(mode="after")
    def check_timestamps(self) -> "Appointment":
        if self.updated_at < self.created_at:
            raise ValueError("updated_at must not be earlier than created_at")
        return self


class BillService(BaseModel):
    """One line on a bill. service_name and price are copies taken at billing time."""

    model_config = ConfigDict(frozen=True)

    service_id: str = Field(min_length=1)
    service_name: str
    quantity: int = Field(ge=1, strict=True)
    price: float = Field(ge=0, allow_inf_nan=False)
    total: float = Field(ge=0, allow_inf_nan=False)

    @model_validator(mode="after")
    def check_total(self) -> "BillService":
        if not amounts_match(self.total, self.quantity * self.price):
            raise ValueError("line total must equal quantity * price")
        return self


class Bill(Entity):
    appointment_id: Optional[str] = None
    customer_id: str = Field(min_length=1)
    customer_name: str = Field(min_length=1)
    services: Tuple[BillService, ...] = Field(min_length=1)
    subtotal: float = Field(ge=0, allow_inf_nan=False)
    tax: float = Field(ge=0, allow_inf_nan=False)
    discount: float = Field(ge=0, allow_inf_nan=False)
    total: float = Field(allow_inf_nan=False)
    tax_percent: float = Field(default=0.0, ge=0, le=50)
    discount_percent: float = Field(default=0.0, ge=0, le=100)
    payment_method: PaymentMethod = PaymentMethod.CASH
    payment_status: PaymentStatus = PaymentStatus.PENDING
    date: dt.datetime
    notes: Optional[str] = None

    @model_validator(mode="after")
    def check_amounts(self) -> "Bill":
        line_sum = sum(line.total for line in self.services)
        if not amounts_match(self.subtotal, line_sum):
            raise ValueError("subtotal must equal the sum of line totals")
        if not amounts_match(self.total, self.subtotal + self.tax - self.discount):
            raise ValueError("total must equal subtotal + tax - discount")
        if self.total < -AMOUNT_TOLERANCE:
            raise ValueError("total must not be negative")
        return self


class DashboardStats(BaseModel):
    """Point-in-time figures for the dashboard. Derived, never stored."""

    model_config = ConfigDict(frozen=True)

    today_appointments: int
    today_revenue: float
    monthly_revenue: float
    total_customers: int
    pending_appointments: int
    completed_appointments: int
    # No revenue history is kept, so growth figures are supplied from outside
    revenue_growth: Optional[float] = None
    customer_growth: Optional[float] = None


class DailyRevenue(BaseModel):
    model_config = ConfigDict(frozen=True)

    day: dt.date
    revenue: float
