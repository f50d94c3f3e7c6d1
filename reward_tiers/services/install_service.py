import logging
from decimal import Decimal

from sqlalchemy.orm import Session

from reward_tiers.errors import BootstrapError, RewardTiersError
from reward_tiers.models.reward import Reward
from reward_tiers.services.data_version_service import BASELINE_DATA_VERSION, set_data_version
from reward_tiers.services.reward_repository import insert_reward, is_empty


logger = logging.getLogger(__name__)

# (code, description, discount percentage)
CANONICAL_REWARDS = (
    ("GOLD", "Gold Level", Decimal("20")),
    ("SILVER", "Silver Level", Decimal("10")),
    ("BRONZE", "Bronze Level", Decimal("5")),
)


def seed_reward(db: Session, brand: str, code: str, description: str, discount_percentage) -> Reward:
    return insert_reward(
        db,
        brand,
        code=code,
        description=description,
        discount_percentage=discount_percentage,
        minimum_purchase=Decimal("0"),
    )


def on_first_activation(db: Session, brand: str) -> list[str]:
    """Seed the canonical catalog for ``brand`` if it has no rewards yet.

    Returns the seeded codes, or an empty list when the store already holds
    rewards (nothing is touched in that case). Commits on success.
    """
    if not is_empty(db, brand):
        logger.info("reward catalog already populated; install skipped", extra={"brand": brand})
        return []

    try:
        for code, description, discount in CANONICAL_REWARDS:
            seed_reward(db, brand, code, description, discount)
        set_data_version(db, brand, BASELINE_DATA_VERSION)
        db.commit()
    except RewardTiersError as e:
        db.rollback()
        logger.exception("reward catalog seeding failed", extra={"brand": brand})
        raise BootstrapError(f"Seeding reward catalog failed: {e.message}") from e

    codes = [code for code, _, _ in CANONICAL_REWARDS]
    logger.info("reward catalog seeded", extra={"brand": brand, "codes": codes})
    return codes
