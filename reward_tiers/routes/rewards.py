from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from reward_tiers.db import get_db
from reward_tiers.deps.brand import get_active_brand
from reward_tiers.schemas.reward import RewardCreate, RewardOut, RewardRename, RewardUpdate
from reward_tiers.services import reward_repository


router = APIRouter(prefix="/rewards", tags=["rewards"])


@router.get("", response_model=list[RewardOut])
def list_rewards(
    active_brand: str = Depends(get_active_brand),
    db: Session = Depends(get_db),
):
    return reward_repository.list_rewards(db, active_brand)


@router.post("", response_model=RewardOut, status_code=201)
def create_reward(
    payload: RewardCreate,
    active_brand: str = Depends(get_active_brand),
    db: Session = Depends(get_db),
):
    reward = reward_repository.insert_reward(
        db,
        active_brand,
        code=payload.code,
        description=payload.description,
        discount_percentage=payload.discount_percentage,
        minimum_purchase=payload.minimum_purchase,
    )
    db.commit()
    db.refresh(reward)
    return reward


@router.get("/{code}", response_model=RewardOut)
def get_reward(
    code: str,
    active_brand: str = Depends(get_active_brand),
    db: Session = Depends(get_db),
):
    return reward_repository.get_reward(db, active_brand, code)


@router.patch("/{code}", response_model=RewardOut)
def update_reward(
    code: str,
    payload: RewardUpdate,
    active_brand: str = Depends(get_active_brand),
    db: Session = Depends(get_db),
):
    data = payload.model_dump(exclude_unset=True)
    reward = reward_repository.update_reward(db, active_brand, code, data)
    db.commit()
    db.refresh(reward)
    return reward


@router.post("/{code}/rename", response_model=RewardOut)
def rename_reward(
    code: str,
    payload: RewardRename,
    active_brand: str = Depends(get_active_brand),
    db: Session = Depends(get_db),
):
    reward = reward_repository.rename_reward(db, active_brand, code, payload.new_code)
    db.commit()
    db.refresh(reward)
    return reward


@router.delete("/{code}")
def delete_reward(
    code: str,
    active_brand: str = Depends(get_active_brand),
    db: Session = Depends(get_db),
):
    reward_repository.delete_reward(db, active_brand, code)
    db.commit()
    return {"deleted": True}
