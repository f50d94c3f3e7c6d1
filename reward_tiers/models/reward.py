from sqlalchemy import CheckConstraint, Column, Date, Numeric, String

from reward_tiers.db import Base


class Reward(Base):
    __tablename__ = "rewards"

    brand = Column(String(50), primary_key=True)
    code = Column(String(30), primary_key=True)

    description = Column(String(250), nullable=False)

    # stored with 2 fractional digits, see services.reward_repository
    discount_percentage = Column(Numeric(5, 2), nullable=False, default=0)
    minimum_purchase = Column(Numeric(12, 2), nullable=False, default=0)

    # system-set on every insert, update and rename
    last_modified_date = Column(Date, nullable=False)

    __table_args__ = (
        CheckConstraint(
            "discount_percentage >= 0 AND discount_percentage <= 100",
            name="ck_rewards_discount_percentage_range",
        ),
        CheckConstraint("minimum_purchase >= 0", name="ck_rewards_minimum_purchase_non_negative"),
        CheckConstraint("description <> ''", name="ck_rewards_description_not_empty"),
    )
