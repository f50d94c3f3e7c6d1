import logging
from datetime import date, datetime, timezone
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation

from sqlalchemy.orm import Session

from reward_tiers.errors import NotFound, RewardInUse, ValidationError
from reward_tiers.models.customer import Customer
from reward_tiers.models.reward import Reward


logger = logging.getLogger(__name__)

CODE_MAX_LENGTH = 30
DESCRIPTION_MAX_LENGTH = 250

TWO_PLACES = Decimal("0.01")
MAX_DISCOUNT_PERCENTAGE = Decimal("100")
# largest value rewards.minimum_purchase (Numeric(12, 2)) can hold
MAX_MINIMUM_PURCHASE = Decimal("9999999999.99")

# fields callers may change through update_reward
UPDATABLE_FIELDS = ("description", "discount_percentage", "minimum_purchase")


def _today() -> date:
    return datetime.now(timezone.utc).date()


def touch(reward: Reward) -> Reward:
    reward.last_modified_date = _today()
    return reward


def normalize_code(code) -> str:
    value = (code or "").strip().upper()
    if not value:
        raise ValidationError("code must not be empty")
    if len(value) > CODE_MAX_LENGTH:
        raise ValidationError(f"code must be at most {CODE_MAX_LENGTH} characters")
    return value


def _validate_description(description) -> str:
    if description is None or not str(description).strip():
        raise ValidationError("description must not be empty")
    description = str(description)
    if len(description) > DESCRIPTION_MAX_LENGTH:
        raise ValidationError(f"description must be at most {DESCRIPTION_MAX_LENGTH} characters")
    return description


def _to_amount(value, field: str) -> Decimal:
    if value is None:
        raise ValidationError(f"{field} is required")
    try:
        amount = Decimal(str(value)).quantize(TWO_PLACES, rounding=ROUND_HALF_UP)
    except (InvalidOperation, ValueError):
        raise ValidationError(f"{field} must be a decimal number")
    if not amount.is_finite():
        raise ValidationError(f"{field} must be a decimal number")
    return amount


def _validate_discount_percentage(value) -> Decimal:
    pct = _to_amount(value, "discount_percentage")
    if pct < 0 or pct > MAX_DISCOUNT_PERCENTAGE:
        raise ValidationError("discount_percentage must be between 0 and 100")
    return pct


def _validate_minimum_purchase(value) -> Decimal:
    amount = _to_amount(value, "minimum_purchase")
    if amount < 0:
        raise ValidationError("minimum_purchase must be >= 0")
    if amount > MAX_MINIMUM_PURCHASE:
        raise ValidationError(f"minimum_purchase must be <= {MAX_MINIMUM_PURCHASE}")
    return amount


_FIELD_VALIDATORS = {
    "description": _validate_description,
    "discount_percentage": _validate_discount_percentage,
    "minimum_purchase": _validate_minimum_purchase,
}


def _find(db: Session, brand: str, code: str) -> Reward | None:
    return (
        db.query(Reward)
        .filter(Reward.brand == brand, Reward.code == code)
        .first()
    )


def lookup_code(code) -> str | None:
    """Normalize a code for reading; None when no stored code can match it."""
    value = (code or "").strip().upper()
    if not value or len(value) > CODE_MAX_LENGTH:
        return None
    return value


def get_reward(db: Session, brand: str, code: str) -> Reward:
    value = lookup_code(code)
    reward = _find(db, brand, value) if value else None
    if not reward:
        raise NotFound(f"Reward {code!r} not found")
    return reward


def reward_exists(db: Session, brand: str, code: str) -> bool:
    value = lookup_code(code)
    if value is None:
        return False
    return (
        db.query(Reward.code)
        .filter(Reward.brand == brand, Reward.code == value)
        .first()
        is not None
    )


def is_empty(db: Session, brand: str) -> bool:
    return db.query(Reward.code).filter(Reward.brand == brand).first() is None


def list_rewards(db: Session, brand: str) -> list[Reward]:
    return db.query(Reward).filter(Reward.brand == brand).order_by(Reward.code.asc()).all()


def insert_reward(
    db: Session,
    brand: str,
    *,
    code: str,
    description: str,
    discount_percentage=Decimal("0"),
    minimum_purchase=Decimal("0"),
) -> Reward:
    code = normalize_code(code)
    reward = Reward(
        brand=brand,
        code=code,
        description=_validate_description(description),
        discount_percentage=_validate_discount_percentage(discount_percentage),
        minimum_purchase=_validate_minimum_purchase(minimum_purchase),
    )
    if _find(db, brand, code):
        raise ValidationError(f"Reward {code!r} already exists")

    touch(reward)
    db.add(reward)
    db.flush()

    logger.debug("reward inserted", extra={"brand": brand, "code": code})
    return reward


def update_reward(db: Session, brand: str, code: str, changes: dict) -> Reward:
    """Apply ``changes`` (field -> new value) to an existing reward.

    Every value is validated before anything is written, so a rejected update
    leaves the record untouched.
    """
    reward = get_reward(db, brand, code)

    unknown = set(changes) - set(UPDATABLE_FIELDS)
    if unknown:
        raise ValidationError(f"fields cannot be updated: {', '.join(sorted(unknown))}")

    validated = {field: _FIELD_VALIDATORS[field](value) for field, value in changes.items()}
    for field, value in validated.items():
        setattr(reward, field, value)

    touch(reward)
    db.flush()

    logger.debug("reward updated", extra={"brand": brand, "code": reward.code, "fields": sorted(validated)})
    return reward


def rename_reward(db: Session, brand: str, old_code: str, new_code: str) -> Reward:
    """Change the key of a reward and repoint every customer that referenced it.

    The record itself is kept: only ``code`` and ``last_modified_date`` change.
    Both writes happen in the caller's transaction.
    """
    reward = get_reward(db, brand, old_code)
    old_code = reward.code
    new_code = normalize_code(new_code)

    if _find(db, brand, new_code):
        raise ValidationError(f"Reward {new_code!r} already exists")

    reward.code = new_code
    touch(reward)
    db.flush()

    # On Postgres the ON UPDATE CASCADE already moved these rows; the sweep
    # covers stores without enforced foreign keys and in-session customers.
    repointed = (
        db.query(Customer)
        .filter(Customer.brand == brand, Customer.reward_code == old_code)
        .update({Customer.reward_code: new_code}, synchronize_session="evaluate")
    )
    db.flush()

    logger.debug(
        "reward renamed",
        extra={"brand": brand, "old_code": old_code, "new_code": new_code, "repointed": repointed},
    )
    return reward


def count_references(db: Session, brand: str, code: str) -> int:
    return (
        db.query(Customer.id)
        .filter(Customer.brand == brand, Customer.reward_code == code)
        .count()
    )


def delete_reward(db: Session, brand: str, code: str) -> None:
    reward = get_reward(db, brand, code)

    refs = count_references(db, brand, reward.code)
    if refs:
        raise RewardInUse(f"Reward {reward.code!r} is still assigned to {refs} customer(s)")

    db.delete(reward)
    db.flush()

    logger.debug("reward deleted", extra={"brand": brand, "code": reward.code})
