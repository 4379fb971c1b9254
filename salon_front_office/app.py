"""
Front office wiring

Builds one entity store and the services that share it.
"""

import datetime as dt
import logging
from dataclasses import dataclass
from typing import Callable, Optional

from .config import Settings, get_settings
from .logging_conf import configure_logging
from .services.appointments import AppointmentService
from .services.billing import BillingService
from .services.dashboard import DashboardService
from .services.seed import demo_store
from .services.store import EntityStore

logger = logging.getLogger(__name__)


@dataclass
class FrontOffice:
    settings: Settings
    store: EntityStore
    appointments: AppointmentService
    billing: BillingService
    dashboard: DashboardService


def create_front_office(settings: Optional[Settings] = None, store: Optional[EntityStore] = None,
                        seed: Optional[bool] = None,
                        clock: Callable[[], dt.datetime] = dt.datetime.now,
                        setup_logging: bool = True) -> FrontOffice:
    """
    Create the front office services around a single store

    Args:
        settings: Settings to use; read from the environment when omitted
        store: Existing store (e.g. loaded from a backing source); takes precedence over seeding
        seed: Start from demo data; defaults to settings.SEED_DEMO_DATA
        clock: Returns the current local time
        setup_logging: Configure the package logger from settings
    """
    settings = settings or get_settings()
    if setup_logging:
        configure_logging(settings.LOG_LEVEL, settings.LOG_JSON)

    if store is None:
        use_seed = settings.SEED_DEMO_DATA if seed is None else seed
        store = demo_store(clock()) if use_seed else EntityStore()

    logger.info(f"{settings.BUSINESS_NAME} front office ready")
    return FrontOffice(
        settings=settings,
        store=store,
        appointments=AppointmentService(store, clock),
        billing=BillingService(store, settings, clock),
        dashboard=DashboardService(store, settings, clock),
    )
