# backend/app/models/teacher.py
"""
Teacher profile extension and skill catalog.

``avg_rating`` and ``review_count`` are denormalized aggregates maintained
by the rating aggregator; never write them from request handlers.
"""

from datetime import datetime, timezone

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    Column,
    DateTime,
    ForeignKey,
    Integer,
    Numeric,
    String,
    Table,
)
from sqlalchemy.orm import relationship
import ulid

from ..database import Base

teacher_skills = Table(
    "teacher_skills",
    Base.metadata,
    Column(
        "teacher_id",
        String(26),
        ForeignKey("teachers.id", ondelete="CASCADE"),
        primary_key=True,
    ),
    Column(
        "skill_id",
        String(26),
        ForeignKey("skills.id", ondelete="CASCADE"),
        primary_key=True,
    ),
)


class Teacher(Base):
    __tablename__ = "teachers"

    id = Column(String(26), primary_key=True, default=lambda: str(ulid.ULID()))
    profile_id = Column(
        String(26), ForeignKey("profiles.id", ondelete="CASCADE"), nullable=False, unique=True
    )
    experience_years = Column(Integer, nullable=True)
    price_per_hour = Column(Numeric(12, 2), nullable=False, default=0)
    avg_rating = Column(Numeric(3, 2), nullable=False, default=0)
    review_count = Column(Integer, nullable=False, default=0)
    is_verified = Column(Boolean, nullable=False, default=False)
    created_at = Column(
        DateTime(timezone=True), nullable=False, default=lambda: datetime.now(timezone.utc)
    )

    profile = relationship("Profile", back_populates="teacher")
    skills = relationship("Skill", secondary=teacher_skills, back_populates="teachers")

    __table_args__ = (
        CheckConstraint("price_per_hour >= 0", name="ck_teachers_price_non_negative"),
        CheckConstraint("avg_rating >= 0 AND avg_rating <= 5", name="ck_teachers_avg_rating_range"),
    )

    def __repr__(self) -> str:
        return f"<Teacher {self.id} rate={self.price_per_hour} avg={self.avg_rating}>"


class Skill(Base):
    __tablename__ = "skills"

    id = Column(String(26), primary_key=True, default=lambda: str(ulid.ULID()))
    name = Column(String(120), nullable=False, unique=True)

    teachers = relationship("Teacher", secondary=teacher_skills, back_populates="skills")

    def __repr__(self) -> str:
        return f"<Skill {self.name}>"
