# backend/app/repositories/material_repository.py
from decimal import Decimal
import logging
from typing import List, Optional

from sqlalchemy.orm import Session, joinedload

from ..models.material import Material, Order, OrderStatus
from ..models.teacher import Teacher
from .base_repository import BaseRepository, Page
from .filters import build_predicates, ilike_any

logger = logging.getLogger(__name__)


class MaterialRepository(BaseRepository[Material]):
    def __init__(self, db: Session):
        super().__init__(db, Material)

    def get_with_teacher(self, material_id: str) -> Optional[Material]:
        return (
            self.db.query(Material)
            .options(joinedload(Material.teacher).joinedload(Teacher.profile))
            .filter(Material.id == material_id)
            .first()
        )

    def list_published(
        self,
        *,
        search: Optional[str] = None,
        teacher_id: Optional[str] = None,
        min_price: Optional[Decimal] = None,
        max_price: Optional[Decimal] = None,
        page: int,
        limit: int,
    ) -> Page[Material]:
        predicates = build_predicates(
            Material.is_published.is_(True),
            ilike_any(search, Material.title, Material.description),
            Material.teacher_id == teacher_id if teacher_id else None,
            Material.price >= min_price if min_price is not None else None,
            Material.price <= max_price if max_price is not None else None,
        )
        query = (
            self.db.query(Material)
            .options(joinedload(Material.teacher).joinedload(Teacher.profile))
            .filter(*predicates)
            .order_by(Material.created_at.desc())
        )
        return self.paginate(query, page=page, limit=limit)

    def list_for_teacher(self, teacher_id: str) -> List[Material]:
        return (
            self.db.query(Material)
            .filter(Material.teacher_id == teacher_id)
            .order_by(Material.created_at.desc())
            .all()
        )


class OrderRepository(BaseRepository[Order]):
    def __init__(self, db: Session):
        super().__init__(db, Order)

    def get_with_material(self, order_id: str) -> Optional[Order]:
        return (
            self.db.query(Order)
            .options(joinedload(Order.material))
            .filter(Order.id == order_id)
            .first()
        )

    def list_orders(
        self,
        *,
        buyer_profile_id: Optional[str] = None,
        status: Optional[OrderStatus] = None,
        page: int,
        limit: int,
    ) -> Page[Order]:
        predicates = build_predicates(
            Order.buyer_profile_id == buyer_profile_id if buyer_profile_id else None,
            Order.status == status.value if status else None,
        )
        query = (
            self.db.query(Order)
            .options(joinedload(Order.material))
            .filter(*predicates)
            .order_by(Order.created_at.desc())
        )
        return self.paginate(query, page=page, limit=limit)

    def has_paid_order(self, buyer_profile_id: str, material_id: str) -> bool:
        return self.exists(
            buyer_profile_id=buyer_profile_id,
            material_id=material_id,
            status=OrderStatus.PAID.value,
        )

    def recent(self, *, buyer_profile_id: str, limit: int = 5) -> List[Order]:
        return (
            self.db.query(Order)
            .options(joinedload(Order.material))
            .filter(Order.buyer_profile_id == buyer_profile_id)
            .order_by(Order.created_at.desc())
            .limit(limit)
            .all()
        )
