# backend/alembic/versions/001_initial_schema.py
"""Initial schema - Users, profiles, teachers and skills

Revision ID: 001_initial_schema
Revises:
Create Date: 2026-09-01 00:00:00.000000

Identity rows come from the external auth provider; this schema only holds
the local account, its single profile (which carries the role) and the
teacher extension row. Roles are VARCHAR, not a native ENUM.
"""
from typing import Sequence, Union

import sqlalchemy as sa

from alembic import op

# revision identifiers, used by Alembic.
revision: str = "001_initial_schema"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Create user, profile, teacher and skill tables."""
    print("Creating users, profiles and teachers...")

    op.create_table(
        "users",
        sa.Column("id", sa.String(26), nullable=False),
        sa.Column("email", sa.String(255), nullable=False),
        sa.Column("hashed_password", sa.String(255), nullable=True),
        sa.Column("email_verified_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_users_email", "users", ["email"], unique=True)

    op.create_table(
        "profiles",
        sa.Column("id", sa.String(26), nullable=False),
        sa.Column("user_id", sa.String(26), nullable=False),
        sa.Column("role", sa.String(20), nullable=False, server_default="STUDENT"),
        sa.Column("full_name", sa.String(255), nullable=False),
        sa.Column("bio", sa.Text(), nullable=True),
        sa.Column("avatar_url", sa.String(500), nullable=True),
        sa.Column("city", sa.String(120), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("user_id"),
    )
    op.create_index("idx_profiles_role", "profiles", ["role"])

    op.create_table(
        "teachers",
        sa.Column("id", sa.String(26), nullable=False),
        sa.Column("profile_id", sa.String(26), nullable=False),
        sa.Column("experience_years", sa.Integer(), nullable=True),
        sa.Column("price_per_hour", sa.Numeric(12, 2), nullable=False, server_default="0"),
        sa.Column("avg_rating", sa.Numeric(3, 2), nullable=False, server_default="0"),
        sa.Column("review_count", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("is_verified", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.ForeignKeyConstraint(["profile_id"], ["profiles.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("profile_id"),
        sa.CheckConstraint("price_per_hour >= 0", name="ck_teachers_price_non_negative"),
        sa.CheckConstraint(
            "avg_rating >= 0 AND avg_rating <= 5", name="ck_teachers_avg_rating_range"
        ),
    )

    op.create_table(
        "skills",
        sa.Column("id", sa.String(26), nullable=False),
        sa.Column("name", sa.String(120), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("name"),
    )

    op.create_table(
        "teacher_skills",
        sa.Column("teacher_id", sa.String(26), nullable=False),
        sa.Column("skill_id", sa.String(26), nullable=False),
        sa.ForeignKeyConstraint(["teacher_id"], ["teachers.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["skill_id"], ["skills.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("teacher_id", "skill_id"),
    )

    op.create_table(
        "platform_settings",
        sa.Column("key", sa.String(64), nullable=False),
        sa.Column("value", sa.JSON(), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint("key"),
    )

    print("Initial schema created")


def downgrade() -> None:
    """Drop all tables created in upgrade."""
    print("Dropping initial schema...")

    op.drop_table("platform_settings")
    op.drop_table("teacher_skills")
    op.drop_table("skills")
    op.drop_table("teachers")
    op.drop_index("idx_profiles_role", table_name="profiles")
    op.drop_table("profiles")
    op.drop_index("ix_users_email", table_name="users")
    op.drop_table("users")
