# backend/app/schemas/material.py
"""Material and order schemas."""

from decimal import Decimal
from typing import Any, Optional

from pydantic import Field

from ..models.material import OrderStatus
from ._strict_base import StrictModel, StrictRequestModel
from .base import Money, StandardizedModel, UtcDatetime


class MaterialCreate(StrictRequestModel):
    title: str = Field(..., min_length=1, max_length=255)
    description: Optional[str] = Field(None, max_length=5000)
    price: Decimal = Field(..., ge=0)
    file_key: Optional[str] = Field(None, max_length=500)


class MaterialUpdate(StrictRequestModel):
    title: Optional[str] = Field(None, min_length=1, max_length=255)
    description: Optional[str] = Field(None, max_length=5000)
    price: Optional[Decimal] = Field(None, ge=0)
    file_key: Optional[str] = Field(None, max_length=500)
    is_published: Optional[bool] = None


class MaterialResponse(StandardizedModel):
    id: str
    teacher_id: str
    teacher_name: Optional[str] = None
    title: str
    description: Optional[str] = None
    price: Money
    is_published: bool
    created_at: UtcDatetime

    @classmethod
    def from_material(cls, material: Any) -> "MaterialResponse":
        teacher = material.teacher
        profile = teacher.profile if teacher is not None else None
        return cls(
            id=material.id,
            teacher_id=material.teacher_id,
            teacher_name=profile.full_name if profile is not None else None,
            title=material.title,
            description=material.description,
            price=Decimal(str(material.price)),
            is_published=bool(material.is_published),
            created_at=material.created_at,
        )


class OrderCreate(StrictRequestModel):
    material_id: str


class OrderStatusUpdate(StrictRequestModel):
    status: OrderStatus


class OrderResponse(StandardizedModel):
    id: str
    buyer_profile_id: str
    material_id: str
    material_title: Optional[str] = None
    amount: Money
    status: OrderStatus
    created_at: UtcDatetime

    @classmethod
    def from_order(cls, order: Any) -> "OrderResponse":
        material = order.material
        return cls(
            id=order.id,
            buyer_profile_id=order.buyer_profile_id,
            material_id=order.material_id,
            material_title=material.title if material is not None else None,
            amount=Decimal(str(order.amount)),
            status=order.status,
            created_at=order.created_at,
        )


class DownloadResponse(StrictModel):
    download_url: str
