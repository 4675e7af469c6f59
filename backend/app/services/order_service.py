# backend/app/services/order_service.py
"""
Order Service.

Students buy published materials. An order records the price at purchase
time; the file becomes downloadable once the order is PAID.
"""

import logging
from typing import Dict, Optional

from sqlalchemy.orm import Session

from ..core.config import settings
from ..core.enums import Action, RoleName
from ..core.exceptions import (
    ConflictException,
    ForbiddenException,
    InvalidStateException,
    NotFoundException,
)
from ..core.permissions import authorize
from ..models.material import Order, OrderStatus
from ..principal import Principal
from ..repositories.base_repository import Page
from ..repositories.factory import RepositoryFactory
from .base import BaseService

logger = logging.getLogger(__name__)


def download_url_for(material_id: str) -> str:
    return f"{settings.app_url.rstrip('/')}/api/materials/{material_id}/file"


class OrderService(BaseService):
    def __init__(self, db: Session):
        super().__init__(db)
        self.order_repository = RepositoryFactory.create_order_repository(db)
        self.material_repository = RepositoryFactory.create_material_repository(db)

    @BaseService.measure_operation("list_orders")
    def list_orders(
        self,
        principal: Principal,
        *,
        status: Optional[OrderStatus] = None,
        page: int = 1,
        limit: int = 10,
    ) -> Page[Order]:
        if principal.is_admin:
            return self.order_repository.list_orders(status=status, page=page, limit=limit)
        if principal.role is not RoleName.STUDENT:
            raise ForbiddenException("Only students have orders", code="FORBIDDEN")
        return self.order_repository.list_orders(
            buyer_profile_id=principal.profile_id, status=status, page=page, limit=limit
        )

    def get_order(self, principal: Principal, order_id: str) -> Order:
        order = self._get(order_id)
        if not principal.is_admin and order.buyer_profile_id != principal.profile_id:
            raise NotFoundException("Order not found", code="ORDER_NOT_FOUND")
        return order

    @BaseService.measure_operation("create_order")
    def create_order(self, principal: Principal, material_id: str) -> Order:
        """
        Raises:
            NotFoundException: material missing or unpublished
            ConflictException: the caller already owns the material
        """
        authorize(principal, Action.ORDER_CREATE)
        material = self.material_repository.get_by_id(material_id)
        if material is None or not material.is_published:
            raise NotFoundException("Material not found", code="MATERIAL_NOT_FOUND")
        if self.order_repository.has_paid_order(principal.profile_id, material_id):
            raise ConflictException("Material already purchased", code="ALREADY_PURCHASED")

        with self.transaction():
            order = self.order_repository.create(
                buyer_profile_id=principal.profile_id,
                material_id=material_id,
                amount=material.price,
                status=OrderStatus.PENDING.value,
            )
        self.logger.info(f"Order {order.id} created for material {material_id}")
        return order

    @BaseService.measure_operation("update_order_status")
    def update_status(self, principal: Principal, order_id: str, new_status: OrderStatus) -> Order:
        """Students may only cancel their own PENDING orders; admins may set any status."""
        order = self._get(order_id)
        is_owner = order.buyer_profile_id == principal.profile_id
        action = Action.ORDER_CANCEL if new_status is OrderStatus.CANCELLED else Action.ORDER_OVERRIDE
        authorize(principal, action, is_owner=is_owner)

        current = OrderStatus(order.status)
        if current is new_status:
            return order
        if not principal.is_admin and current is not OrderStatus.PENDING:
            raise InvalidStateException(
                "Only pending orders can be cancelled",
                current=current.value,
                requested=new_status.value,
            )

        with self.transaction():
            self.order_repository.update(order.id, status=new_status.value)
        self.logger.info(f"Order {order_id} moved {current.value} -> {new_status.value}")
        return order

    def download(self, principal: Principal, order_id: str) -> Dict[str, str]:
        order = self._get(order_id)
        authorize(
            principal,
            Action.ORDER_DOWNLOAD,
            is_owner=order.buyer_profile_id == principal.profile_id,
        )
        if OrderStatus(order.status) is not OrderStatus.PAID:
            raise InvalidStateException("Order is not paid", current=order.status)
        return {"download_url": download_url_for(order.material_id)}

    def _get(self, order_id: str) -> Order:
        order = self.order_repository.get_with_material(order_id)
        if order is None:
            raise NotFoundException("Order not found", code="ORDER_NOT_FOUND")
        return order
