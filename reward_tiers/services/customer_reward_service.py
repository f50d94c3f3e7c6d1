import logging

from sqlalchemy.orm import Session

from reward_tiers.errors import BusinessRuleViolation, InvalidReference
from reward_tiers.models.customer import Customer
from reward_tiers.services.reward_repository import reward_exists


logger = logging.getLogger(__name__)

BLOCKED_STATUSES = {"BLOCKED"}


def is_blocked(customer: Customer) -> bool:
    return (customer.status or "").upper() in BLOCKED_STATUSES


def _normalize_link(code) -> str | None:
    if code is None or not str(code).strip():
        return None
    return str(code).strip().upper()


def validate_reward_link(db: Session, brand: str, customer: Customer, code) -> str | None:
    """Check a new value for ``customer.reward_code`` without writing it.

    Returns the normalized value (``None`` clears the link).
    """
    new_code = _normalize_link(code)

    if new_code is not None and not reward_exists(db, brand, new_code):
        raise InvalidReference(f"Reward {new_code!r} does not exist")

    # rewriting the current value is always allowed, even when blocked
    if new_code != customer.reward_code and is_blocked(customer):
        raise BusinessRuleViolation("cannot change reward tier of a blocked customer")

    return new_code


def assign_reward(db: Session, brand: str, customer: Customer, code) -> Customer:
    new_code = validate_reward_link(db, brand, customer, code)

    if customer.reward_code != new_code:
        logger.info(
            "customer reward changed",
            extra={
                "brand": brand,
                "profile_id": customer.profile_id,
                "from_code": customer.reward_code,
                "to_code": new_code,
            },
        )
        customer.reward_code = new_code
        db.flush()

    return customer
