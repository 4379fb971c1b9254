import datetime as dt

import pytest
from unittest.mock import Mock

from salon_front_office.exceptions import NotFoundError, ValidationError
from salon_front_office.models import Customer, Service
from salon_front_office.services.store import EntityStore

NOW = dt.datetime(2024, 3, 15, 9, 30)


def make_service(service_id="s1", price=40.0, **overrides):
    fields = dict(id=service_id, name=f"Service {service_id}", duration=30, price=price, category="Hair")
    fields.update(overrides)
    return Service(**fields)


class TestEntityStore:
    """Unit tests for the in-memory entity store"""

    @pytest.fixture
    def store(self):
        """Create a store with two catalog services"""
        return EntityStore(services=[make_service("s1"), make_service("s2", price=55.0)])

    def test_initial_collections(self, store):
        """Test that seeded collections are exposed as snapshots"""
        assert [s.id for s in store.snapshot("services")] == ["s1", "s2"]
        assert store.snapshot("appointments") == ()
        assert store.snapshot("bills") == ()

    def test_duplicate_ids_in_initial_data_rejected(self):
        """Test that initial data must have unique ids"""
        with pytest.raises(ValidationError):
            EntityStore(services=[make_service("s1"), make_service("s1")])

    def test_subscribe_replays_latest_snapshot(self, store):
        """Test that a new subscriber receives the current snapshot immediately"""
        listener = Mock()
        store.subscribe("services", listener)

        listener.assert_called_once()
        snapshot = listener.call_args[0][0]
        assert [s.id for s in snapshot] == ["s1", "s2"]

    def test_add_notifies_subscribers(self, store):
        """Test that add appends and re-notifies"""
        received = []
        store.subscribe("services", received.append)

        store.add_service(make_service("s3"))

        assert len(received) == 2
        assert [s.id for s in received[-1]] == ["s1", "s2", "s3"]

    def test_listeners_called_in_registration_order(self, store):
        """Test that listeners are notified in the order they subscribed"""
        calls = []
        store.subscribe("services", lambda snap: calls.append("first"))
        store.subscribe("services", lambda snap: calls.append("second"))
        calls.clear()

        store.add_service(make_service("s3"))

        assert calls == ["first", "second"]

    def test_other_collections_not_notified(self, store):
        """Test that a mutation only notifies its own collection"""
        listener = Mock()
        store.subscribe("bills", listener)
        listener.reset_mock()

        store.add_service(make_service("s3"))

        listener.assert_not_called()

    def test_unsubscribe(self, store):
        """Test that an unsubscribed listener stops receiving updates"""
        listener = Mock()
        subscription = store.subscribe("services", listener)
        subscription.unsubscribe()
        listener.reset_mock()

        store.add_service(make_service("s3"))

        listener.assert_not_called()
        assert subscription.active is False

    def test_unsubscribe_same_listener_twice(self, store):
        """Test that each handle removes only its own registration"""
        calls = []

        def first(snap):
            calls.append("a")

        def second(snap):
            calls.append("b")

        store.subscribe("services", first)
        store.subscribe("services", second)
        repeat = store.subscribe("services", first)
        repeat.unsubscribe()
        calls.clear()

        store.add_service(make_service("s3"))

        assert calls == ["a", "b"]

    def test_listener_error_after_mutation_applied(self, store):
        """Test that a failing listener surfaces to the caller but the change is kept"""
        listener = Mock(side_effect=[None, RuntimeError("listener failed")])
        store.subscribe("services", listener)

        with pytest.raises(RuntimeError):
            store.add_service(make_service("s3"))

        assert [s.id for s in store.snapshot("services")] == ["s1", "s2", "s3"]

    def test_listener_failing_on_replay_not_registered(self, store):
        """Test that a listener raising on its initial snapshot is never called again"""
        listener = Mock(side_effect=RuntimeError("listener failed"))
        with pytest.raises(RuntimeError):
            store.subscribe("services", listener)
        listener.reset_mock()

        store.add_service(make_service("s3"))

        listener.assert_not_called()
        assert len(store.snapshot("services")) == 3

    def test_update_round_trip(self, store):
        """Test that an update is visible to a new subscriber exactly once"""
        repriced = make_service("s1", price=99.0)
        store.update_service(repriced)

        received = []
        store.subscribe("services", received.append)
        matching = [s for s in received[0] if s.id == "s1"]

        assert matching == [repriced]

    def test_update_keeps_position(self, store):
        """Test that update replaces in place"""
        store.update_service(make_service("s1", price=10.0))
        assert [s.id for s in store.snapshot("services")] == ["s1", "s2"]

    def test_update_unknown_id_raises(self, store):
        """Test that updating an unknown id is an explicit error"""
        listener = Mock()
        store.subscribe("services", listener)
        listener.reset_mock()

        with pytest.raises(NotFoundError) as exc_info:
            store.update_service(make_service("missing"))

        assert exc_info.value.entity_id == "missing"
        assert exc_info.value.collection == "services"
        listener.assert_not_called()
        assert len(store.snapshot("services")) == 2

    def test_add_duplicate_id_raises(self, store):
        """Test that ids stay unique"""
        with pytest.raises(ValidationError):
            store.add_service(make_service("s1"))
        assert len(store.snapshot("services")) == 2

    def test_add_wrong_type_raises(self, store):
        """Test that a collection only accepts its own entity type"""
        customer = Customer(id="c1", name="Ana", phone="555", email="ana@example.com", created_at=NOW)
        with pytest.raises(ValidationError):
            store.services.add(customer)

    def test_delete_appointment_unknown_id_raises(self, store):
        """Test that deleting an unknown appointment is an explicit error"""
        with pytest.raises(NotFoundError):
            store.delete_appointment("nope")

    def test_unknown_collection_name(self, store):
        """Test subscribing to a collection that does not exist"""
        with pytest.raises(ValidationError):
            store.subscribe("invoices", Mock())

    def test_snapshots_are_immutable(self, store):
        """Test that snapshots cannot be used to mutate the store"""
        snapshot = store.snapshot("services")
        assert isinstance(snapshot, tuple)
        with pytest.raises(Exception):
            snapshot[0].price = 1.0
        assert store.services.get("s1").price == 40.0

    def test_generate_id_unique(self):
        """Test that generated ids do not collide at salon scale"""
        ids = {EntityStore.generate_id() for _ in range(5000)}
        assert len(ids) == 5000

    def test_get_and_find(self, store):
        """Test id lookups"""
        assert store.services.get("s2").price == 55.0
        assert store.services.find("zzz") is None
        with pytest.raises(NotFoundError):
            store.services.get("zzz")
