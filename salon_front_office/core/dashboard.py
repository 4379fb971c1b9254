"""
Dashboard aggregation over store snapshots.

Windows are local calendar periods: a day runs from midnight to the next
midnight, a month from the 1st at 00:00 to the 1st of the next month.
Lower bounds are inclusive, upper bounds exclusive.
"""

import datetime as dt
from typing import Iterable, List, Optional, Sequence, Tuple

from ..models import (
    Appointment,
    AppointmentStatus,
    Bill,
    Customer,
    DailyRevenue,
    DashboardStats,
)


def day_window(now: dt.datetime) -> Tuple[dt.datetime, dt.datetime]:
    start = dt.datetime.combine(now.date(), dt.time.min)
    return start, start + dt.timedelta(days=1)


def month_window(now: dt.datetime) -> Tuple[dt.datetime, dt.datetime]:
    start = dt.datetime(now.year, now.month, 1)
    if now.month == 12:
        end = dt.datetime(now.year + 1, 1, 1)
    else:
        end = dt.datetime(now.year, now.month + 1, 1)
    return start, end


def revenue_between(bills: Iterable[Bill], start: dt.datetime, end: dt.datetime) -> float:
    return sum((b.total for b in bills if start <= b.date < end), 0.0)


def compute_dashboard_stats(appointments: Sequence[Appointment], bills: Sequence[Bill],
                            customers: Sequence[Customer], now: dt.datetime,
                            revenue_growth: Optional[float] = None,
                            customer_growth: Optional[float] = None) -> DashboardStats:
    today = now.date()
    day_start, day_end = day_window(now)
    month_start, month_end = month_window(now)

    return DashboardStats(
        today_appointments=sum(1 for a in appointments if a.date == today),
        today_revenue=revenue_between(bills, day_start, day_end),
        monthly_revenue=revenue_between(bills, month_start, month_end),
        total_customers=len(customers),
        pending_appointments=sum(1 for a in appointments if a.status == AppointmentStatus.SCHEDULED),
        completed_appointments=sum(1 for a in appointments if a.status == AppointmentStatus.COMPLETED),
        revenue_growth=revenue_growth,
        customer_growth=customer_growth,
    )


def revenue_by_day(bills: Sequence[Bill], now: dt.datetime, days: int = 7) -> List[DailyRevenue]:
    """Revenue per day for the trailing window ending today, oldest first."""
    today_start, _ = day_window(now)
    chart = []
    for offset in range(days - 1, -1, -1):
        start = today_start - dt.timedelta(days=offset)
        chart.append(DailyRevenue(
            day=start.date(),
            revenue=revenue_between(bills, start, start + dt.timedelta(days=1)),
        ))
    return chart
