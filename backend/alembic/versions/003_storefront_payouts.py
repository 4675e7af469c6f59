# backend/alembic/versions/003_storefront_payouts.py
"""Materials, orders and payouts

Revision ID: 003_storefront_payouts
Revises: 002_availability_booking
Create Date: 2026-09-01 00:00:02.000000
"""
from typing import Sequence, Union

import sqlalchemy as sa

from alembic import op

# revision identifiers, used by Alembic.
revision: str = "003_storefront_payouts"
down_revision: Union[str, None] = "002_availability_booking"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    print("Creating storefront and payout tables...")

    op.create_table(
        "materials",
        sa.Column("id", sa.String(26), nullable=False),
        sa.Column("teacher_id", sa.String(26), nullable=False),
        sa.Column("title", sa.String(255), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("price", sa.Numeric(12, 2), nullable=False),
        sa.Column("file_key", sa.String(500), nullable=True),
        sa.Column("is_published", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.ForeignKeyConstraint(["teacher_id"], ["teachers.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
        sa.CheckConstraint("price >= 0", name="ck_materials_price_non_negative"),
    )
    op.create_index("ix_materials_teacher_id", "materials", ["teacher_id"])
    op.create_index("idx_materials_published", "materials", ["is_published"])

    op.create_table(
        "orders",
        sa.Column("id", sa.String(26), nullable=False),
        sa.Column("buyer_profile_id", sa.String(26), nullable=False),
        sa.Column("material_id", sa.String(26), nullable=False),
        sa.Column("amount", sa.Numeric(12, 2), nullable=False),
        sa.Column("status", sa.String(20), nullable=False, server_default="PENDING"),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.ForeignKeyConstraint(["buyer_profile_id"], ["profiles.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["material_id"], ["materials.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
        sa.CheckConstraint(
            "status IN ('PENDING','PAID','CANCELLED','REFUNDED')", name="ck_orders_status"
        ),
    )
    op.create_index("ix_orders_buyer_profile_id", "orders", ["buyer_profile_id"])
    op.create_index("ix_orders_material_id", "orders", ["material_id"])

    op.create_table(
        "payouts",
        sa.Column("id", sa.String(26), nullable=False),
        sa.Column("teacher_id", sa.String(26), nullable=False),
        sa.Column("amount", sa.Numeric(12, 2), nullable=False),
        sa.Column("status", sa.String(20), nullable=False, server_default="REQUESTED"),
        sa.Column("requested_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("processed_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("notes", sa.Text(), nullable=True),
        sa.ForeignKeyConstraint(["teacher_id"], ["teachers.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
        sa.CheckConstraint("amount > 0", name="ck_payouts_amount_positive"),
        sa.CheckConstraint(
            "status IN ('REQUESTED','PROCESSING','PAID','FAILED')", name="ck_payouts_status"
        ),
    )
    op.create_index("ix_payouts_teacher_id", "payouts", ["teacher_id"])

    print("Storefront and payout tables created")


def downgrade() -> None:
    op.drop_index("ix_payouts_teacher_id", table_name="payouts")
    op.drop_table("payouts")
    op.drop_index("ix_orders_material_id", table_name="orders")
    op.drop_index("ix_orders_buyer_profile_id", table_name="orders")
    op.drop_table("orders")
    op.drop_index("idx_materials_published", table_name="materials")
    op.drop_index("ix_materials_teacher_id", table_name="materials")
    op.drop_table("materials")
