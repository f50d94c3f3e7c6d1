from datetime import date
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel


class RewardCreate(BaseModel):
    code: str
    description: str
    discount_percentage: Decimal = Decimal("0")
    minimum_purchase: Decimal = Decimal("0")


class RewardUpdate(BaseModel):
    description: Optional[str] = None
    discount_percentage: Optional[Decimal] = None
    minimum_purchase: Optional[Decimal] = None


class RewardRename(BaseModel):
    new_code: str


class RewardOut(BaseModel):
    brand: str
    code: str
    description: str
    discount_percentage: Decimal
    minimum_purchase: Decimal
    last_modified_date: date

    class Config:
        from_attributes = True
