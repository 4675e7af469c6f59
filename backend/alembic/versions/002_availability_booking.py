# backend/alembic/versions/002_availability_booking.py
"""Availability, bookings, payments, sessions and reviews

Revision ID: 002_availability_booking
Revises: 001_initial_schema
Create Date: 2026-09-01 00:00:01.000000

Bookings snapshot their window so a booking survives slot deletion. The
no-double-booking rule is a partial unique index: cancelled and refunded
bookings free their window for rebooking.
"""
from typing import Sequence, Union

import sqlalchemy as sa

from alembic import op

# revision identifiers, used by Alembic.
revision: str = "002_availability_booking"
down_revision: Union[str, None] = "001_initial_schema"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

ACTIVE_BOOKING_PREDICATE = "status NOT IN ('CANCELLED', 'REFUNDED')"


def upgrade() -> None:
    """Create the booking lifecycle tables."""
    print("Creating availability and booking tables...")

    op.create_table(
        "availability_slots",
        sa.Column("id", sa.String(26), nullable=False),
        sa.Column("teacher_id", sa.String(26), nullable=False),
        sa.Column("start_time", sa.DateTime(timezone=True), nullable=False),
        sa.Column("end_time", sa.DateTime(timezone=True), nullable=False),
        sa.Column("is_booked", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.ForeignKeyConstraint(["teacher_id"], ["teachers.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("teacher_id", "start_time", name="uq_availability_teacher_start"),
        sa.CheckConstraint("start_time < end_time", name="ck_availability_time_order"),
    )
    op.create_index("ix_availability_slots_teacher_id", "availability_slots", ["teacher_id"])
    op.create_index(
        "idx_availability_teacher_window",
        "availability_slots",
        ["teacher_id", "start_time", "end_time"],
    )

    op.create_table(
        "bookings",
        sa.Column("id", sa.String(26), nullable=False),
        sa.Column("teacher_id", sa.String(26), nullable=False),
        sa.Column("student_profile_id", sa.String(26), nullable=False),
        sa.Column("slot_id", sa.String(26), nullable=True),
        sa.Column("start_time", sa.DateTime(timezone=True), nullable=False),
        sa.Column("end_time", sa.DateTime(timezone=True), nullable=False),
        sa.Column("status", sa.String(20), nullable=False, server_default="PENDING"),
        sa.Column("total_price", sa.Numeric(12, 2), nullable=False),
        sa.Column("mode", sa.String(10), nullable=False, server_default="ONLINE"),
        sa.Column("notes", sa.Text(), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=True),
        sa.ForeignKeyConstraint(["teacher_id"], ["teachers.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["student_profile_id"], ["profiles.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["slot_id"], ["availability_slots.id"], ondelete="SET NULL"),
        sa.PrimaryKeyConstraint("id"),
        sa.CheckConstraint("start_time < end_time", name="ck_bookings_time_order"),
        sa.CheckConstraint("total_price >= 0", name="ck_bookings_price_non_negative"),
        sa.CheckConstraint(
            "status IN ('PENDING','PAID','CONFIRMED','COMPLETED','CANCELLED','REFUNDED')",
            name="ck_bookings_status",
        ),
        sa.CheckConstraint("mode IN ('ONLINE','OFFLINE')", name="ck_bookings_mode"),
    )
    op.create_index("ix_bookings_id", "bookings", ["id"])
    op.create_index("ix_bookings_teacher_id", "bookings", ["teacher_id"])
    op.create_index("ix_bookings_student_profile_id", "bookings", ["student_profile_id"])
    op.create_index("ix_bookings_status", "bookings", ["status"])
    op.create_index("idx_bookings_teacher_status", "bookings", ["teacher_id", "status"])
    op.create_index(
        "uq_bookings_teacher_window",
        "bookings",
        ["teacher_id", "start_time", "end_time"],
        unique=True,
        postgresql_where=sa.text(ACTIVE_BOOKING_PREDICATE),
        sqlite_where=sa.text(ACTIVE_BOOKING_PREDICATE),
    )

    op.create_table(
        "payments",
        sa.Column("id", sa.String(26), nullable=False),
        sa.Column("booking_id", sa.String(26), nullable=False),
        sa.Column("gateway", sa.String(20), nullable=False, server_default="MIDTRANS"),
        sa.Column("gateway_ref", sa.String(120), nullable=False),
        sa.Column("amount", sa.Numeric(12, 2), nullable=False),
        sa.Column("status", sa.String(20), nullable=False, server_default="PENDING"),
        sa.Column("redirect_url", sa.String(500), nullable=True),
        sa.Column("payload", sa.JSON(), nullable=True),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.func.now(),
        ),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=True),
        sa.ForeignKeyConstraint(["booking_id"], ["bookings.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("booking_id"),
        sa.CheckConstraint("status IN ('PENDING','SUCCESS','FAILED')", name="ck_payments_status"),
        sa.CheckConstraint("amount >= 0", name="ck_payments_amount_non_negative"),
    )
    op.create_index("ix_payments_gateway_ref", "payments", ["gateway_ref"], unique=True)
    op.create_index("ix_payments_status", "payments", ["status"])

    op.create_table(
        "sessions",
        sa.Column("id", sa.String(26), nullable=False),
        sa.Column("booking_id", sa.String(26), nullable=False),
        sa.Column("meeting_link", sa.String(500), nullable=True),
        sa.Column("location", sa.Text(), nullable=True),
        sa.Column("started_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("ended_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.ForeignKeyConstraint(["booking_id"], ["bookings.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("booking_id"),
    )

    op.create_table(
        "reviews",
        sa.Column("id", sa.String(26), nullable=False),
        sa.Column("booking_id", sa.String(26), nullable=False),
        sa.Column("rating", sa.Integer(), nullable=False),
        sa.Column("comment", sa.Text(), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=True),
        sa.ForeignKeyConstraint(["booking_id"], ["bookings.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("booking_id"),
        sa.CheckConstraint("rating >= 1 AND rating <= 5", name="ck_reviews_rating_range"),
    )

    print("Availability and booking tables created")


def downgrade() -> None:
    print("Dropping availability and booking tables...")

    op.drop_table("reviews")
    op.drop_table("sessions")
    op.drop_index("ix_payments_status", table_name="payments")
    op.drop_index("ix_payments_gateway_ref", table_name="payments")
    op.drop_table("payments")
    op.drop_index("uq_bookings_teacher_window", table_name="bookings")
    op.drop_index("idx_bookings_teacher_status", table_name="bookings")
    op.drop_index("ix_bookings_status", table_name="bookings")
    op.drop_index("ix_bookings_student_profile_id", table_name="bookings")
    op.drop_index("ix_bookings_teacher_id", table_name="bookings")
    op.drop_index("ix_bookings_id", table_name="bookings")
    op.drop_table("bookings")
    op.drop_index("idx_availability_teacher_window", table_name="availability_slots")
    op.drop_index("ix_availability_slots_teacher_id", table_name="availability_slots")
    op.drop_table("availability_slots")
