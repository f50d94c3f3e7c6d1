import uuid
from sqlalchemy import Column, ForeignKeyConstraint, String, TIMESTAMP, UniqueConstraint, Uuid
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from reward_tiers.db import Base
from reward_tiers.models.reward import Reward


class Customer(Base):
    __tablename__ = "customers"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)

    brand = Column(String(50), nullable=False)
    profile_id = Column(String(100), nullable=False)

    name = Column(String(100))

    status = Column(String(20), nullable=False, default="ACTIVE")  # ACTIVE / BLOCKED

    # optional link to rewards.code, written through services.customer_reward_service
    reward_code = Column(String(30), nullable=True)

    created_at = Column(TIMESTAMP, server_default=func.now())
    updated_at = Column(TIMESTAMP, server_default=func.now(), onupdate=func.now())

    reward = relationship(Reward, viewonly=True, lazy="joined")

    __table_args__ = (
        UniqueConstraint("brand", "profile_id", name="uq_customers_brand_profile_id"),
        ForeignKeyConstraint(
            ["brand", "reward_code"],
            ["rewards.brand", "rewards.code"],
            name="fk_customers_reward",
            onupdate="CASCADE",
        ),
    )
