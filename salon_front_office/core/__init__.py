"""
Core front office logic, free of any store or UI.

This module contains the pure computations for:
- Bill totals (subtotal, tax, discount, total)
- Linking completed appointments to bill drafts
- Filtering and sorting appointment and bill lists
- Dashboard statistics
"""

from . import derivation
from . import linking
from . import queries
from . import dashboard

__all__ = [
    'derivation',
    'linking',
    'queries',
    'dashboard'
]
