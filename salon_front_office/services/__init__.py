"""
Service layer modules built on the entity store.

This module contains service implementations for:
- The in-memory entity store and its subscriptions
- Appointment scheduling
- Billing
- Dashboard metrics
- Demo seed data
"""

from . import store
from . import appointments
from . import billing
from . import dashboard
from . import seed

__all__ = [
    'store',
    'appointments',
    'billing',
    'dashboard',
    'seed'
]
