from typing import Literal

from pydantic import BaseModel


class LifecycleStatusOut(BaseModel):
    brand: str
    storedVersion: int
    targetVersion: int
    state: Literal["NEEDS_UPGRADE", "UP_TO_DATE"]


class InstallOut(BaseModel):
    brand: str
    seeded: bool
    codes: list[str]


class UpgradeOut(BaseModel):
    brand: str
    fromVersion: int
    toVersion: int
    applied: list[int]
