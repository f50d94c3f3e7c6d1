from sqlalchemy.orm import Session

from reward_tiers.errors import NotFound, ValidationError
from reward_tiers.models.customer import Customer


CUSTOMER_STATUSES = {"ACTIVE", "BLOCKED"}


def find_customer(db: Session, brand: str, profile_id: str):
    return (
        db.query(Customer)
        .filter(
            Customer.brand == brand,
            Customer.profile_id == profile_id,
        )
        .first()
    )


def get_customer(db: Session, brand: str, profile_id: str) -> Customer:
    customer = find_customer(db, brand, profile_id)
    if not customer:
        raise NotFound(f"Customer {profile_id!r} not found")
    return customer


def upsert_customer(db: Session, brand: str, profile_id: str, payload: dict | None = None) -> Customer:
    if not (profile_id or "").strip():
        raise ValidationError("profileId must not be empty")

    customer = find_customer(db, brand, profile_id)

    if not customer:
        customer = Customer(
            brand=brand,
            profile_id=profile_id,
            status="ACTIVE",
        )
        db.add(customer)
        db.flush()

    if payload:
        if "name" in payload and payload["name"]:
            customer.name = payload["name"].strip()

    db.flush()
    return customer


def set_customer_status(db: Session, customer: Customer, status: str) -> Customer:
    value = (status or "").strip().upper()
    if value not in CUSTOMER_STATUSES:
        raise ValidationError(f"status must be one of {', '.join(sorted(CUSTOMER_STATUSES))}")

    customer.status = value
    db.flush()
    return customer
