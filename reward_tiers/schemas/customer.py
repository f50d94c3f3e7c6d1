from datetime import datetime
from decimal import Decimal
from typing import Literal, Optional

from uuid import UUID

from pydantic import BaseModel


class CustomerUpsert(BaseModel):
    profileId: str

    name: Optional[str] = None


class CustomerRewardAssign(BaseModel):
    # None or "" clears the link
    reward_code: Optional[str] = None


class CustomerStatusUpdate(BaseModel):
    status: Literal["ACTIVE", "BLOCKED"]


class CustomerRewardSummary(BaseModel):
    code: str
    description: str
    discount_percentage: Decimal

    class Config:
        from_attributes = True


class CustomerOut(BaseModel):
    id: UUID
    brand: str
    profile_id: str

    name: Optional[str] = None
    status: str

    reward_code: Optional[str] = None
    reward: Optional[CustomerRewardSummary] = None

    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True
