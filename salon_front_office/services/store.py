"""
In-memory entity store

Holds the canonical appointments, customers, services and bills. Every
collection keeps its latest snapshot plus an ordered list of listeners;
a new listener gets the current snapshot right away and again after every
add/update/delete.
"""

import logging
import uuid
from typing import Callable, Dict, Generic, Iterable, List, Optional, Tuple, Type, TypeVar

from ..exceptions import NotFoundError, ValidationError
from ..models import Appointment, Bill, Customer, Entity, Service

logger = logging.getLogger(__name__)

E = TypeVar("E", bound=Entity)
Listener = Callable[[Tuple[E, ...]], None]

APPOINTMENTS = "appointments"
CUSTOMERS = "customers"
SERVICES = "services"
BILLS = "bills"


class Subscription:
    """Handle returned by subscribe(); call unsubscribe() to stop updates."""

    def __init__(self, collection: "Collection", listener: Callable):
        self._collection = collection
        self._listener = listener
        self.active = True

    def unsubscribe(self) -> None:
        if self.active:
            self._collection._remove_subscription(self)
            self.active = False


class Collection(Generic[E]):
    """Ordered collection of one entity type, keyed by id."""

    def __init__(self, name: str, model: Type[E], items: Iterable[E] = ()):
        self.name = name
        self.model = model
        self._items: List[E] = []
        self._subscriptions: List[Subscription] = []
        for item in items:
            self._check_type(item)
            if self._index_of(item.id) is not None:
                raise ValidationError(f"Duplicate {name} id '{item.id}' in initial data", field="id")
            self._items.append(item)

    @property
    def value(self) -> Tuple[E, ...]:
        return tuple(self._items)

    def __len__(self) -> int:
        return len(self._items)

    def _check_type(self, entity: object) -> None:
        if not isinstance(entity, self.model):
            raise ValidationError(
                f"{self.name} only accepts {self.model.__name__}, got {type(entity).__name__}"
            )

    def _index_of(self, entity_id: str) -> Optional[int]:
        for index, item in enumerate(self._items):
            if item.id == entity_id:
                return index
        return None

    def find(self, entity_id: str) -> Optional[E]:
        index = self._index_of(entity_id)
        return None if index is None else self._items[index]

    def get(self, entity_id: str) -> E:
        entity = self.find(entity_id)
        if entity is None:
            raise NotFoundError(self.name, entity_id)
        return entity

    def subscribe(self, listener: Listener) -> Subscription:
        listener(self.value)
        subscription = Subscription(self, listener)
        self._subscriptions.append(subscription)
        return subscription

    def _remove_subscription(self, subscription: Subscription) -> None:
        # Identity match, so the same callable subscribed twice keeps its other registration
        self._subscriptions = [s for s in self._subscriptions if s is not subscription]

    def _emit(self) -> None:
        snapshot = self.value
        for subscription in list(self._subscriptions):
            subscription._listener(snapshot)

    def add(self, entity: E) -> E:
        self._check_type(entity)
        if self._index_of(entity.id) is not None:
            raise ValidationError(f"{self.name} already contains id '{entity.id}'", field="id")
        self._items.append(entity)
        logger.debug(f"Added {self.name} entry {entity.id}")
        self._emit()
        return entity

    def update(self, entity: E) -> E:
        self._check_type(entity)
        index = self._index_of(entity.id)
        if index is None:
            raise NotFoundError(self.name, entity.id)
        self._items[index] = entity
        logger.debug(f"Updated {self.name} entry {entity.id}")
        self._emit()
        return entity

    def delete(self, entity_id: str) -> None:
        index = self._index_of(entity_id)
        if index is None:
            raise NotFoundError(self.name, entity_id)
        del self._items[index]
        logger.debug(f"Deleted {self.name} entry {entity_id}")
        self._emit()


class EntityStore:
    """Authoritative holder of the front office collections.

    Pass one instance to every service that needs it; there is no global store.
    """

    def __init__(self, services: Iterable[Service] = (), customers: Iterable[Customer] = (),
                 appointments: Iterable[Appointment] = (), bills: Iterable[Bill] = ()):
        self.services: Collection[Service] = Collection(SERVICES, Service, services)
        self.customers: Collection[Customer] = Collection(CUSTOMERS, Customer, customers)
        self.appointments: Collection[Appointment] = Collection(APPOINTMENTS, Appointment, appointments)
        self.bills: Collection[Bill] = Collection(BILLS, Bill, bills)
        self._collections: Dict[str, Collection] = {
            APPOINTMENTS: self.appointments,
            CUSTOMERS: self.customers,
            SERVICES: self.services,
            BILLS: self.bills,
        }
        logger.info(
            f"Entity store ready: {len(self.services)} services, {len(self.customers)} customers, "
            f"{len(self.appointments)} appointments, {len(self.bills)} bills"
        )

    def collection(self, name: str) -> Collection:
        try:
            return self._collections[name]
        except KeyError:
            raise ValidationError(f"Unknown collection '{name}'", field="collection") from None

    def subscribe(self, name: str, listener: Listener) -> Subscription:
        """Register a listener; it is called now with the current snapshot and after each change."""
        return self.collection(name).subscribe(listener)

    def snapshot(self, name: str) -> tuple:
        return self.collection(name).value

    @staticmethod
    def generate_id() -> str:
        return uuid.uuid4().hex

    # Appointments
    def add_appointment(self, appointment: Appointment) -> Appointment:
        return self.appointments.add(appointment)

    def update_appointment(self, appointment: Appointment) -> Appointment:
        return self.appointments.update(appointment)

    def delete_appointment(self, appointment_id: str) -> None:
        self.appointments.delete(appointment_id)

    # Customers
    def add_customer(self, customer: Customer) -> Customer:
        return self.customers.add(customer)

    def update_customer(self, customer: Customer) -> Customer:
        return self.customers.update(customer)

    # Services
    def add_service(self, service: Service) -> Service:
        return self.services.add(service)

    def update_service(self, service: Service) -> Service:
        return self.services.update(service)

    # Bills
    def add_bill(self, bill: Bill) -> Bill:
        return self.bills.add(bill)

    def update_bill(self, bill: Bill) -> Bill:
        return self.bills.update(bill)
