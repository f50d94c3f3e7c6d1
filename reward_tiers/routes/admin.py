from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from reward_tiers.db import get_db
from reward_tiers.deps.brand import get_active_brand
from reward_tiers.schemas.lifecycle import InstallOut, LifecycleStatusOut, UpgradeOut
from reward_tiers.services.data_version_service import get_data_version
from reward_tiers.services.install_service import on_first_activation
from reward_tiers.services.upgrade_service import (
    CURRENT_DATA_VERSION,
    NeedsUpgrade,
    on_version_change,
    resolve_upgrade_state,
)


router = APIRouter(prefix="/admin/lifecycle", tags=["admin-lifecycle"])


@router.get("", response_model=LifecycleStatusOut)
def lifecycle_status(
    brand: str = Depends(get_active_brand),
    db: Session = Depends(get_db),
):
    stored = get_data_version(db, brand)
    state = resolve_upgrade_state(stored, CURRENT_DATA_VERSION)
    return {
        "brand": brand,
        "storedVersion": stored,
        "targetVersion": CURRENT_DATA_VERSION,
        "state": "NEEDS_UPGRADE" if isinstance(state, NeedsUpgrade) else "UP_TO_DATE",
    }


@router.post("/install", response_model=InstallOut)
def install(
    brand: str = Depends(get_active_brand),
    db: Session = Depends(get_db),
):
    codes = on_first_activation(db, brand)
    return {"brand": brand, "seeded": bool(codes), "codes": codes}


@router.post("/upgrade", response_model=UpgradeOut)
def upgrade(
    brand: str = Depends(get_active_brand),
    db: Session = Depends(get_db),
):
    stored = get_data_version(db, brand)
    applied = on_version_change(db, brand, stored, CURRENT_DATA_VERSION)
    return {"brand": brand, "fromVersion": stored, "toVersion": CURRENT_DATA_VERSION, "applied": applied}
