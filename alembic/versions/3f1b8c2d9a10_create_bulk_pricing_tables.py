"""create hosting plans, pricing tiers and bulk pricing configs

Revision ID: 3f1b8c2d9a10
Revises:
Create Date: 2025-09-10 02:19:54.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


revision: str = "3f1b8c2d9a10"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "hosting_plans",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("plan_name", sa.Text(), nullable=False),
        sa.Column("storage_gb", sa.Float(), nullable=False),
        sa.Column("cpu_cores", sa.Integer(), nullable=True),
        sa.Column("ram_gb", sa.Float(), nullable=True),
        sa.Column("selling_price", sa.Float(), nullable=False),
        sa.Column("base_price_per_gb", sa.Float(), nullable=True),
        sa.Column("plan_multiplier", sa.Float(), nullable=False, server_default="1.0"),
        sa.Column("cost_per_gb", sa.Float(), nullable=True),
        sa.Column("use_bulk_pricing", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
    )

    op.create_table(
        "pricing_tiers",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("storage_gb", sa.Integer(), nullable=False),
        sa.Column("discount_percentage", sa.Float(), nullable=False),
        sa.Column("sort_order", sa.Integer(), nullable=False),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.UniqueConstraint("storage_gb", name="uq_pricing_tiers_storage_gb"),
    )
    op.create_index("ix_pricing_tiers_sort_order", "pricing_tiers", ["sort_order"])

    op.create_table(
        "bulk_pricing_configs",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("name", sa.Text(), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("base_price_per_gb", sa.Float(), nullable=False),
        sa.Column("cost_per_gb", sa.Float(), nullable=False),
        sa.Column("plan_multipliers", sa.JSON(), nullable=False),
        sa.Column("tier_discounts", sa.JSON(), nullable=False),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("is_default", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.UniqueConstraint("name", name="uq_bulk_pricing_configs_name"),
    )
    op.create_index("ix_bulk_pricing_configs_is_active", "bulk_pricing_configs", ["is_active"])
    op.create_index("ix_bulk_pricing_configs_is_default", "bulk_pricing_configs", ["is_default"])


def downgrade() -> None:
    op.drop_index("ix_bulk_pricing_configs_is_default", table_name="bulk_pricing_configs")
    op.drop_index("ix_bulk_pricing_configs_is_active", table_name="bulk_pricing_configs")
    op.drop_table("bulk_pricing_configs")
    op.drop_index("ix_pricing_tiers_sort_order", table_name="pricing_tiers")
    op.drop_table("pricing_tiers")
    op.drop_table("hosting_plans")
