from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from reward_tiers.db import get_db
from reward_tiers.deps.brand import get_active_brand
from reward_tiers.schemas.customer import (
    CustomerOut,
    CustomerRewardAssign,
    CustomerStatusUpdate,
    CustomerUpsert,
)
from reward_tiers.services.customer_reward_service import assign_reward
from reward_tiers.services.customer_service import get_customer, set_customer_status, upsert_customer


router = APIRouter(prefix="/customers", tags=["customers"])


@router.post("/upsert", response_model=CustomerOut)
def upsert_customer_route(
    payload: CustomerUpsert,
    active_brand: str = Depends(get_active_brand),
    db: Session = Depends(get_db),
):
    customer = upsert_customer(db, active_brand, payload.profileId, {"name": payload.name})
    db.commit()
    db.refresh(customer)
    return customer


@router.get("/{profile_id}", response_model=CustomerOut)
def get_customer_route(
    profile_id: str,
    active_brand: str = Depends(get_active_brand),
    db: Session = Depends(get_db),
):
    return get_customer(db, active_brand, profile_id)


@router.put("/{profile_id}/reward", response_model=CustomerOut)
def assign_customer_reward(
    profile_id: str,
    payload: CustomerRewardAssign,
    active_brand: str = Depends(get_active_brand),
    db: Session = Depends(get_db),
):
    customer = get_customer(db, active_brand, profile_id)
    assign_reward(db, active_brand, customer, payload.reward_code)
    db.commit()
    db.refresh(customer)
    return customer


@router.put("/{profile_id}/status", response_model=CustomerOut)
def update_customer_status(
    profile_id: str,
    payload: CustomerStatusUpdate,
    active_brand: str = Depends(get_active_brand),
    db: Session = Depends(get_db),
):
    customer = get_customer(db, active_brand, profile_id)
    set_customer_status(db, customer, payload.status)
    db.commit()
    db.refresh(customer)
    return customer
