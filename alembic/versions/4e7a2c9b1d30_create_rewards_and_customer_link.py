"""create rewards, customers reward link and data_versions

Revision ID: 4e7a2c9b1d30
Revises: 
Create Date: 2026-10-12

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = "4e7a2c9b1d30"
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Upgrade schema."""
    bind = op.get_bind()
    inspector = sa.inspect(bind)

    if not inspector.has_table("rewards"):
        op.create_table(
            "rewards",
            sa.Column("brand", sa.String(length=50), nullable=False),
            sa.Column("code", sa.String(length=30), nullable=False),
            sa.Column("description", sa.String(length=250), nullable=False),
            sa.Column("discount_percentage", sa.Numeric(5, 2), nullable=False),
            sa.Column("minimum_purchase", sa.Numeric(12, 2), nullable=False),
            sa.Column("last_modified_date", sa.Date(), nullable=False),
            sa.PrimaryKeyConstraint("brand", "code", name="pk_rewards"),
            sa.CheckConstraint(
                "discount_percentage >= 0 AND discount_percentage <= 100",
                name="ck_rewards_discount_percentage_range",
            ),
            sa.CheckConstraint("minimum_purchase >= 0", name="ck_rewards_minimum_purchase_non_negative"),
            sa.CheckConstraint("description <> ''", name="ck_rewards_description_not_empty"),
        )

    if not inspector.has_table("customers"):
        op.create_table(
            "customers",
            sa.Column("id", sa.Uuid(), primary_key=True, nullable=False),
            sa.Column("brand", sa.String(length=50), nullable=False),
            sa.Column("profile_id", sa.String(length=100), nullable=False),
            sa.Column("name", sa.String(length=100), nullable=True),
            sa.Column("status", sa.String(length=20), nullable=False, server_default="ACTIVE"),
            sa.Column("reward_code", sa.String(length=30), nullable=True),
            sa.Column("created_at", sa.TIMESTAMP(), server_default=sa.text("now()"), nullable=True),
            sa.Column("updated_at", sa.TIMESTAMP(), server_default=sa.text("now()"), nullable=True),
            sa.UniqueConstraint("brand", "profile_id", name="uq_customers_brand_profile_id"),
        )

    customer_cols = {c["name"] for c in inspector.get_columns("customers")}
    if "reward_code" not in customer_cols:
        op.add_column("customers", sa.Column("reward_code", sa.String(length=30), nullable=True))

    existing_fks = {fk.get("name") for fk in inspector.get_foreign_keys("customers")}
    if "fk_customers_reward" not in existing_fks:
        op.create_foreign_key(
            "fk_customers_reward",
            "customers",
            "rewards",
            ["brand", "reward_code"],
            ["brand", "code"],
            onupdate="CASCADE",
        )

    existing_indexes = {ix["name"] for ix in inspector.get_indexes("customers")}
    if "ix_customers_brand_reward_code" not in existing_indexes:
        op.create_index("ix_customers_brand_reward_code", "customers", ["brand", "reward_code"])

    if not inspector.has_table("data_versions"):
        op.create_table(
            "data_versions",
            sa.Column("brand", sa.String(length=50), primary_key=True, nullable=False),
            sa.Column("version", sa.Integer(), nullable=False),
            sa.Column("updated_at", sa.TIMESTAMP(), server_default=sa.text("now()"), nullable=True),
        )


def downgrade() -> None:
    """Downgrade schema."""
    bind = op.get_bind()
    inspector = sa.inspect(bind)

    if inspector.has_table("data_versions"):
        op.drop_table("data_versions")

    if inspector.has_table("customers"):
        existing_indexes = {ix["name"] for ix in inspector.get_indexes("customers")}
        if "ix_customers_brand_reward_code" in existing_indexes:
            op.drop_index("ix_customers_brand_reward_code", table_name="customers")
        existing_fks = {fk.get("name") for fk in inspector.get_foreign_keys("customers")}
        if "fk_customers_reward" in existing_fks:
            op.drop_constraint("fk_customers_reward", "customers", type_="foreignkey")
        op.drop_column("customers", "reward_code")

    if inspector.has_table("rewards"):
        op.drop_table("rewards")
