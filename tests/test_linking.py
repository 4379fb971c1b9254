import datetime as dt

import pytest

from salon_front_office.core.derivation import calculate_totals
from salon_front_office.core.linking import (
    appointment_from_selection,
    bill_from_draft,
    draft_from_appointment,
    draft_from_bill,
    line_from_service,
)
from salon_front_office.exceptions import ValidationError
from salon_front_office.models import AppointmentStatus, Customer, Service

NOW = dt.datetime(2024, 3, 15, 9, 30)


class TestLinking:
    """Unit tests for appointment to bill linking"""

    @pytest.fixture
    def customer(self):
        return Customer(id="c1", name="Sarah Johnson", phone="+1-555-0101",
                        email="sarah.j@email.com", created_at=NOW)

    @pytest.fixture
    def facial(self):
        return Service(id="1", name="Facial Treatment", duration=60, price=80.0, category="Facial")

    @pytest.fixture
    def completed_appointment(self, customer, facial):
        appointment = appointment_from_selection("a1", customer, facial, NOW.date(), "10:00", NOW)
        return appointment.model_copy(update={"status": AppointmentStatus.COMPLETED})

    def test_appointment_snapshots_fields(self, customer, facial):
        """Test that a new appointment copies customer and service fields"""
        appointment = appointment_from_selection("a1", customer, facial, NOW.date(), "10:00", NOW)

        assert appointment.customer_name == "Sarah Johnson"
        assert appointment.customer_phone == "+1-555-0101"
        assert appointment.service_name == "Facial Treatment"
        assert appointment.price == 80.0
        assert appointment.duration == 60
        assert appointment.status == AppointmentStatus.SCHEDULED
        assert appointment.created_at == appointment.updated_at == NOW

    def test_draft_from_completed_appointment(self, completed_appointment):
        """Test the prefilled draft for a completed appointment"""
        draft = draft_from_appointment(completed_appointment, tax_percent=8.5)

        assert draft.appointment_id == "a1"
        assert draft.customer_id == "c1"
        assert draft.customer_name == "Sarah Johnson"
        assert len(draft.lines) == 1
        line = draft.lines[0]
        assert (line.service_id, line.service_name, line.quantity, line.price) == ("1", "Facial Treatment", 1, 80.0)
        assert draft.tax_percent == 8.5

    def test_appointment_line_uses_booked_price(self, completed_appointment, facial):
        """Test that a catalog price change does not reprice an appointment's line"""
        repriced = facial.model_copy(update={"price": 95.0})

        draft = draft_from_appointment(completed_appointment)
        catalog_line = line_from_service(repriced)

        assert draft.lines[0].price == 80.0
        assert catalog_line.price == 95.0

    @pytest.mark.parametrize("status", [
        AppointmentStatus.SCHEDULED, AppointmentStatus.CANCELLED, AppointmentStatus.NO_SHOW,
    ])
    def test_only_completed_appointments_billable(self, completed_appointment, status):
        """Test that unfinished appointments cannot be billed"""
        appointment = completed_appointment.model_copy(update={"status": status})
        with pytest.raises(ValidationError):
            draft_from_appointment(appointment)

    def test_inactive_service_not_selectable(self, facial):
        """Test that retired services cannot be added to a new bill"""
        retired = facial.model_copy(update={"is_active": False})
        with pytest.raises(ValidationError):
            line_from_service(retired)

    def test_bill_from_draft_and_back(self, completed_appointment):
        """Test materializing a bill and reopening it as a draft"""
        draft = draft_from_appointment(completed_appointment, tax_percent=10, discount_percent=5)
        totals = calculate_totals(draft.lines, draft.discount_percent, draft.tax_percent)

        bill = bill_from_draft(draft, totals, bill_id="b1", customer_id="c1", date=NOW)

        assert bill.subtotal == 80.0
        assert bill.tax == 8.0
        assert bill.discount == 4.0
        assert bill.total == 84.0
        assert bill.services[0].total == 80.0
        assert bill.appointment_id == "a1"

        reopened = draft_from_bill(bill)
        assert reopened.lines == draft.lines
        assert reopened.tax_percent == 10
        assert reopened.discount_percent == 5

    def test_invalid_quantity_raises_package_error(self, facial):
        """Test that a rejected catalog line surfaces as the front office error"""
        with pytest.raises(ValidationError) as exc_info:
            line_from_service(facial, quantity=0)
        assert exc_info.value.field == "quantity"

    def test_invalid_time_raises_package_error(self, customer, facial):
        with pytest.raises(ValidationError) as exc_info:
            appointment_from_selection("a1", customer, facial, NOW.date(), "25:99", NOW)
        assert exc_info.value.field == "time"

    def test_bill_from_empty_draft_raises_package_error(self, completed_appointment):
        """Test that a bill without lines is rejected with the front office error"""
        draft = draft_from_appointment(completed_appointment).with_lines(())
        totals = calculate_totals((), 0, 0)
        with pytest.raises(ValidationError):
            bill_from_draft(draft, totals, bill_id="b1", customer_id="c1", date=NOW)
