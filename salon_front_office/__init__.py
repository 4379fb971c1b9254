"""
Salon Front Office

Domain core for a salon front desk: appointment scheduling, billing and
dashboard metrics over an injected in-memory entity store.
"""

from .app import FrontOffice, create_front_office
from .config import Settings, get_settings
from .core.derivation import BillTotals, LineItemDraft, calculate_totals
from .core.linking import BillDraft
from .exceptions import NotFoundError, SalonError, ValidationError
from .models import (
    Appointment,
    AppointmentStatus,
    Bill,
    BillService,
    Customer,
    DailyRevenue,
    DashboardStats,
    PaymentMethod,
    PaymentStatus,
    Service,
)
from .services.store import EntityStore, Subscription

__all__ = [
    'FrontOffice',
    'create_front_office',
    'Settings',
    'get_settings',
    'BillTotals',
    'LineItemDraft',
    'calculate_totals',
    'BillDraft',
    'NotFoundError',
    'SalonError',
    'ValidationError',
    'Appointment',
    'AppointmentStatus',
    'Bill',
    'BillService',
    'Customer',
    'DailyRevenue',
    'DashboardStats',
    'PaymentMethod',
    'PaymentStatus',
    'Service',
    'EntityStore',
    'Subscription',
]

__version__ = '1.0.0'
