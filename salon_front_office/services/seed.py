"""
Demo data for a single-location salon.

Stands in for a real backing store: supplies the initial collections the
entity store starts from. Appointment and bill dates are relative to `now`
so the dashboard has something to show for today.
"""

import datetime as dt
from typing import Dict, List, Optional

from ..models import (
    Appointment,
    Bill,
    BillService,
    Customer,
    PaymentMethod,
    PaymentStatus,
    Service,
)
from .store import EntityStore

# id, name, description, duration, price, category
SERVICE_CATALOG = [
    ("1", "Facial Treatment", "Deep cleansing facial with moisturizing", 60, 80.0, "Facial"),
    ("2", "Manicure", "Classic nail care and polish", 45, 35.0, "Nails"),
    ("3", "Pedicure", "Foot care with polish and massage", 60, 45.0, "Nails"),
    ("4", "Hair Cut & Style", "Professional haircut and styling", 90, 65.0, "Hair"),
    ("5", "Hair Color", "Full hair coloring service", 120, 120.0, "Hair"),
    ("6", "Eyebrow Threading", "Precision eyebrow shaping", 20, 25.0, "Facial"),
    ("7", "Makeup Application", "Professional makeup for special events", 45, 75.0, "Makeup"),
]

# id, name, phone, email, visits, spent, last visit, created
CUSTOMERS = [
    ("1", "Sarah Johnson", "+1-555-0101", "sarah.j@email.com", 12, 960.0, dt.datetime(2024, 1, 15), dt.datetime(2023, 6, 15)),
    ("2", "Emma Wilson", "+1-555-0102", "emma.w@email.com", 8, 640.0, dt.datetime(2024, 1, 10), dt.datetime(2023, 8, 20)),
    ("3", "Olivia Brown", "+1-555-0103", "olivia.b@email.com", 15, 1200.0, dt.datetime(2024, 1, 12), dt.datetime(2023, 5, 10)),
    ("4", "Ava Davis", "+1-555-0104", "ava.d@email.com", 6, 480.0, dt.datetime(2024, 1, 8), dt.datetime(2023, 9, 25)),
    ("5", "Isabella Miller", "+1-555-0105", "isabella.m@email.com", 10, 800.0, dt.datetime(2024, 1, 14), dt.datetime(2023, 7, 12)),
]

# id, customer id, service id, day offset from today, time
APPOINTMENTS = [
    ("1", "1", "1", 0, "10:00"),
    ("2", "2", "2", 0, "14:00"),
    ("3", "3", "4", 1, "11:00"),
]


def demo_collections(now: Optional[dt.datetime] = None) -> Dict[str, List]:
    now = now or dt.datetime.now()

    services = [
        Service(id=sid, name=name, description=desc, duration=duration, price=price, category=category)
        for sid, name, desc, duration, price, category in SERVICE_CATALOG
    ]
    customers = [
        Customer(id=cid, name=name, phone=phone, email=email, total_visits=visits,
                 total_spent=spent, last_visit=last_visit, created_at=created)
        for cid, name, phone, email, visits, spent, last_visit, created in CUSTOMERS
    ]
    services_by_id = {s.id: s for s in services}
    customers_by_id = {c.id: c for c in customers}

    appointments = []
    for aid, cid, sid, offset, time in APPOINTMENTS:
        customer = customers_by_id[cid]
        service = services_by_id[sid]
        appointments.append(Appointment(
            id=aid,
            customer_id=customer.id,
            customer_name=customer.name,
            customer_phone=customer.phone,
            customer_email=customer.email,
            service_id=service.id,
            service_name=service.name,
            duration=service.duration,
            price=service.price,
            date=now.date() + dt.timedelta(days=offset),
            time=time,
            created_at=now,
            updated_at=now,
        ))

    facial = services_by_id["1"]
    bills = [
        Bill(
            id="1",
            appointment_id="1",
            customer_id="1",
            customer_name="Sarah Johnson",
            services=(BillService(service_id=facial.id, service_name=facial.name,
                                  quantity=1, price=facial.price, total=facial.price),),
            subtotal=80.0,
            tax=8.0,
            discount=0.0,
            total=88.0,
            tax_percent=10.0,
            payment_method=PaymentMethod.CARD,
            payment_status=PaymentStatus.PAID,
            date=now,
        )
    ]

    return {
        "services": services,
        "customers": customers,
        "appointments": appointments,
        "bills": bills,
    }


def demo_store(now: Optional[dt.datetime] = None) -> EntityStore:
    return EntityStore(**demo_collections(now))
