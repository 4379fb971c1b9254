"""
Dashboard Service

Recomputes dashboard figures from the store's current snapshots on every call.
"""

import datetime as dt
import logging
from typing import Callable, List, Optional

from ..config import Settings
from ..core import queries
from ..core.dashboard import compute_dashboard_stats, revenue_by_day
from ..models import Appointment, DailyRevenue, DashboardStats
from .store import EntityStore

logger = logging.getLogger(__name__)


class DashboardService:
    """Point-in-time business metrics for the front desk"""

    def __init__(self, store: EntityStore, settings: Settings,
                 clock: Callable[[], dt.datetime] = dt.datetime.now):
        self.store = store
        self.settings = settings
        self.clock = clock

    def stats(self) -> DashboardStats:
        stats = compute_dashboard_stats(
            self.store.appointments.value,
            self.store.bills.value,
            self.store.customers.value,
            now=self.clock(),
            revenue_growth=self.settings.REVENUE_GROWTH,
            customer_growth=self.settings.CUSTOMER_GROWTH,
        )
        logger.debug(f"Dashboard stats computed: {stats.model_dump()}")
        return stats

    def recent_appointments(self, limit: Optional[int] = None) -> List[Appointment]:
        if limit is None:
            limit = self.settings.RECENT_APPOINTMENTS_LIMIT
        return queries.recent_appointments(self.store.appointments.value, limit)

    def revenue_chart(self, days: Optional[int] = None) -> List[DailyRevenue]:
        if days is None:
            days = self.settings.REVENUE_CHART_DAYS
        return revenue_by_day(self.store.bills.value, self.clock(), days)
