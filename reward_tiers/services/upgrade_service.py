"""Versioned data upgrades for the reward catalog.

Each entry of ``UPGRADE_STEPS`` moves a brand's data from the previous
version to the key version. A step and the marker advance are committed
together, so a failed step leaves the stored version where it was.
"""

import logging
from dataclasses import dataclass
from decimal import Decimal

from sqlalchemy.orm import Session

from reward_tiers.errors import MigrationPrecondition
from reward_tiers.services.data_version_service import get_data_version, set_data_version
from reward_tiers.services.install_service import on_first_activation, seed_reward
from reward_tiers.services.reward_repository import rename_reward, reward_exists, update_reward


logger = logging.getLogger(__name__)

CURRENT_DATA_VERSION = 2


@dataclass(frozen=True)
class NeedsUpgrade:
    from_version: int


@dataclass(frozen=True)
class UpToDate:
    pass


UP_TO_DATE = UpToDate()


def resolve_upgrade_state(stored_version: int, target_version: int = CURRENT_DATA_VERSION):
    if stored_version > target_version:
        raise MigrationPrecondition(
            f"Stored data version {stored_version} is newer than application version {target_version}"
        )
    if stored_version < target_version:
        return NeedsUpgrade(from_version=stored_version)
    return UP_TO_DATE


def _upgrade_to_v2(db: Session, brand: str):
    has_bronze = reward_exists(db, brand, "BRONZE")
    has_aluminum = reward_exists(db, brand, "ALUMINUM")

    if has_bronze and has_aluminum:
        raise MigrationPrecondition("Both BRONZE and ALUMINUM exist; cannot rename BRONZE to ALUMINUM")

    if has_bronze:
        rename_reward(db, brand, "BRONZE", "ALUMINUM")
    elif has_aluminum:
        # left behind by an earlier run that did not advance the marker
        logger.info("BRONZE already renamed to ALUMINUM; rename skipped", extra={"brand": brand})
    else:
        raise MigrationPrecondition("Reward 'BRONZE' not found; cannot upgrade to data version 2")

    update_reward(db, brand, "ALUMINUM", {"description": "Aluminum Level"})

    if reward_exists(db, brand, "PLATINUM"):
        logger.info("PLATINUM already present; insert skipped", extra={"brand": brand})
    else:
        seed_reward(db, brand, "PLATINUM", "Platinum level", Decimal("50"))


UPGRADE_STEPS = {
    2: _upgrade_to_v2,
}


def on_version_change(
    db: Session,
    brand: str,
    stored_version: int,
    target_version: int = CURRENT_DATA_VERSION,
) -> list[int]:
    """Apply every upgrade step between ``stored_version`` and ``target_version``.

    Returns the versions whose steps ran. Raises on the first failing step
    after rolling it back.
    """
    state = resolve_upgrade_state(stored_version, target_version)
    if isinstance(state, UpToDate):
        return []

    applied = []
    pending = sorted(v for v in UPGRADE_STEPS if stored_version < v <= target_version)
    for version in pending:
        try:
            UPGRADE_STEPS[version](db, brand)
            set_data_version(db, brand, version)
            db.commit()
        except Exception:
            db.rollback()
            logger.exception(
                "data upgrade step failed",
                extra={"brand": brand, "from_version": stored_version, "step_version": version},
            )
            raise

        applied.append(version)
        logger.info("data upgrade step applied", extra={"brand": brand, "version": version})

    # versions without a registered step need no data changes
    if get_data_version(db, brand) < target_version:
        set_data_version(db, brand, target_version)
        db.commit()

    logger.info(
        "data version advanced",
        extra={"brand": brand, "from_version": stored_version, "to_version": target_version, "applied": applied},
    )
    return applied


def run_pending_upgrades(db: Session, brand: str) -> list[int]:
    return on_version_change(db, brand, get_data_version(db, brand), CURRENT_DATA_VERSION)


def activate_brand(db: Session, brand: str) -> list[int]:
    on_first_activation(db, brand)
    return run_pending_upgrades(db, brand)
