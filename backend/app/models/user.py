# backend/app/models/user.py
"""
User and profile models.

Credentials live on ``users`` (managed by the external identity provider);
every marketplace participant has exactly one ``profiles`` row carrying
the role.
"""

from datetime import datetime, timezone

from sqlalchemy import Boolean, Column, DateTime, ForeignKey, Index, String, Text
from sqlalchemy.orm import relationship
import ulid

from ..core.enums import RoleName
from ..database import Base


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class User(Base):
    __tablename__ = "users"

    id = Column(String(26), primary_key=True, default=lambda: str(ulid.ULID()))
    email = Column(String(255), nullable=False, unique=True, index=True)
    hashed_password = Column(String(255), nullable=True)
    email_verified_at = Column(DateTime(timezone=True), nullable=True)
    is_active = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow)

    profile = relationship(
        "Profile", back_populates="user", uselist=False, cascade="all, delete-orphan"
    )

    def __repr__(self) -> str:
        return f"<User {self.email}>"


class Profile(Base):
    __tablename__ = "profiles"

    id = Column(String(26), primary_key=True, default=lambda: str(ulid.ULID()))
    user_id = Column(
        String(26), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, unique=True
    )
    role = Column(String(20), nullable=False, default=RoleName.STUDENT.value)
    full_name = Column(String(255), nullable=False)
    bio = Column(Text, nullable=True)
    avatar_url = Column(String(500), nullable=True)
    city = Column(String(120), nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow)

    user = relationship("User", back_populates="profile")
    teacher = relationship(
        "Teacher", back_populates="profile", uselist=False, cascade="all, delete-orphan"
    )

    __table_args__ = (Index("idx_profiles_role", "role"),)

    @property
    def role_name(self) -> RoleName:
        return RoleName(self.role)

    def __repr__(self) -> str:
        return f"<Profile {self.full_name} ({self.role})>"
