# backend/app/models/material.py
"""Downloadable learning materials sold by teachers, and the orders that buy them."""

from datetime import datetime, timezone
from enum import Enum

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    Column,
    DateTime,
    ForeignKey,
    Index,
    Numeric,
    String,
    Text,
)
from sqlalchemy.orm import relationship
import ulid

from ..database import Base


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class OrderStatus(str, Enum):
    PENDING = "PENDING"
    PAID = "PAID"
    CANCELLED = "CANCELLED"
    REFUNDED = "REFUNDED"


class Material(Base):
    __tablename__ = "materials"

    id = Column(String(26), primary_key=True, default=lambda: str(ulid.ULID()))
    teacher_id = Column(
        String(26), ForeignKey("teachers.id", ondelete="CASCADE"), nullable=False, index=True
    )
    title = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    price = Column(Numeric(12, 2), nullable=False)
    file_key = Column(String(500), nullable=True)
    is_published = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow)

    teacher = relationship("Teacher")
    orders = relationship("Order", back_populates="material", cascade="all, delete-orphan")

    __table_args__ = (
        CheckConstraint("price >= 0", name="ck_materials_price_non_negative"),
        Index("idx_materials_published", "is_published"),
    )

    def __repr__(self) -> str:
        return f"<Material {self.title} published={self.is_published}>"


class Order(Base):
    __tablename__ = "orders"

    id = Column(String(26), primary_key=True, default=lambda: str(ulid.ULID()))
    buyer_profile_id = Column(
        String(26), ForeignKey("profiles.id", ondelete="CASCADE"), nullable=False, index=True
    )
    material_id = Column(
        String(26), ForeignKey("materials.id", ondelete="CASCADE"), nullable=False, index=True
    )
    amount = Column(Numeric(12, 2), nullable=False)
    status = Column(String(20), nullable=False, default=OrderStatus.PENDING.value)
    created_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow)

    buyer = relationship("Profile")
    material = relationship("Material", back_populates="orders")

    __table_args__ = (
        CheckConstraint(
            "status IN ('PENDING','PAID','CANCELLED','REFUNDED')", name="ck_orders_status"
        ),
    )

    def __repr__(self) -> str:
        return f"<Order {self.id} material={self.material_id} status={self.status}>"
