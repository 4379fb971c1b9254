import datetime as dt
import io
import json
import logging

import pytest
from pydantic import ValidationError as PydanticValidationError

from salon_front_office import create_front_office
from salon_front_office.config import Settings
from salon_front_office.logging_conf import JsonFormatter, configure_logging

NOW = dt.datetime(2024, 3, 15, 12, 0)


class TestSettings:
    """Unit tests for Settings"""

    def test_defaults(self, monkeypatch):
        monkeypatch.delenv("SALON_DEFAULT_TAX_PERCENT", raising=False)
        settings = Settings(_env_file=None)
        assert settings.DEFAULT_TAX_PERCENT == 8.5
        assert settings.DEFAULT_DISCOUNT_PERCENT == 0.0
        assert settings.REVENUE_GROWTH is None
        assert settings.RECENT_APPOINTMENTS_LIMIT == 5

    def test_environment_override(self, monkeypatch):
        monkeypatch.setenv("SALON_DEFAULT_TAX_PERCENT", "12")
        monkeypatch.setenv("SALON_REVENUE_GROWTH", "15.5")
        settings = Settings(_env_file=None)
        assert settings.DEFAULT_TAX_PERCENT == 12.0
        assert settings.REVENUE_GROWTH == 15.5

    @pytest.mark.parametrize("field, value", [
        ("DEFAULT_TAX_PERCENT", 51),
        ("DEFAULT_DISCOUNT_PERCENT", -1),
        ("REVENUE_CHART_DAYS", 0),
    ])
    def test_out_of_range_rejected(self, field, value):
        with pytest.raises(PydanticValidationError):
            Settings(_env_file=None, **{field: value})


class TestLogging:
    """Unit tests for logging configuration"""

    def test_json_formatter_includes_extra(self):
        record = logging.LogRecord("salon_front_office.test", logging.INFO, __file__, 1,
                                   "bill saved", None, None)
        record.bill_id = "b1"
        payload = json.loads(JsonFormatter().format(record))
        assert payload["message"] == "bill saved"
        assert payload["level"] == "INFO"
        assert payload["bill_id"] == "b1"

    def test_configure_logging_single_handler(self):
        stream = io.StringIO()
        configure_logging("DEBUG", json_format=True, handler=logging.StreamHandler(stream))
        configure_logging("DEBUG", json_format=True, handler=logging.StreamHandler(stream))
        logger = logging.getLogger("salon_front_office")

        logging.getLogger("salon_front_office.services.store").debug("hello")

        assert len(logger.handlers) == 1
        lines = [line for line in stream.getvalue().splitlines() if line]
        assert json.loads(lines[-1])["message"] == "hello"


class TestCreateFrontOffice:
    """Unit tests for the front office wiring"""

    def test_seeded_front_office(self):
        office = create_front_office(Settings(_env_file=None), seed=True, clock=lambda: NOW,
                                     setup_logging=False)
        assert len(office.store.services) == 7
        assert office.dashboard.stats().today_appointments == 2
        assert office.billing.store is office.store
        assert office.appointments.store is office.store

    def test_empty_front_office(self):
        office = create_front_office(Settings(_env_file=None), seed=False, setup_logging=False)
        assert office.store.snapshot("appointments") == ()
