# backend/app/services/material_service.py
from decimal import Decimal
import logging
from typing import Any, Optional

from sqlalchemy.orm import Session

from ..core.enums import Action
from ..core.exceptions import NotFoundException, ValidationException
from ..core.permissions import authorize
from ..models.material import Material
from ..principal import Principal
from ..repositories.base_repository import Page
from ..repositories.factory import RepositoryFactory
from .base import BaseService

logger = logging.getLogger(__name__)

_EDITABLE_FIELDS = ("title", "description", "price", "file_key", "is_published")


def _validate_price(price: Any) -> None:
    if price is not None and Decimal(str(price)) < 0:
        raise ValidationException("price must not be negative", code="INVALID_PRICE")


class MaterialService(BaseService):
    """Teacher-authored downloadable materials. New materials start unpublished."""

    def __init__(self, db: Session):
        super().__init__(db)
        self.material_repository = RepositoryFactory.create_material_repository(db)

    @BaseService.measure_operation("list_materials")
    def list_published(
        self,
        *,
        search: Optional[str] = None,
        teacher_id: Optional[str] = None,
        min_price: Optional[Decimal] = None,
        max_price: Optional[Decimal] = None,
        page: int = 1,
        limit: int = 10,
    ) -> Page[Material]:
        return self.material_repository.list_published(
            search=search,
            teacher_id=teacher_id,
            min_price=min_price,
            max_price=max_price,
            page=page,
            limit=limit,
        )

    def get_material(self, material_id: str, principal: Optional[Principal] = None) -> Material:
        """Published materials are public; drafts are visible to their teacher and admins."""
        material = self.material_repository.get_with_teacher(material_id)
        if material is None:
            raise NotFoundException("Material not found", code="MATERIAL_NOT_FOUND")
        if not material.is_published and not self._can_see_draft(principal, material):
            raise NotFoundException("Material not found", code="MATERIAL_NOT_FOUND")
        return material

    @BaseService.measure_operation("create_material")
    def create_material(
        self,
        principal: Principal,
        *,
        title: str,
        price: Decimal,
        description: Optional[str] = None,
        file_key: Optional[str] = None,
    ) -> Material:
        authorize(principal, Action.MATERIAL_CREATE)
        teacher_id = self.require_teacher_id(principal)
        if not title or not title.strip():
            raise ValidationException("title is required")
        _validate_price(price)

        with self.transaction():
            material = self.material_repository.create(
                teacher_id=teacher_id,
                title=title.strip(),
                description=description,
                price=price,
                file_key=file_key,
                is_published=False,
            )
        self.logger.info(f"Material {material.id} created by teacher {teacher_id}")
        return material

    @BaseService.measure_operation("update_material")
    def update_material(self, principal: Principal, material_id: str, **changes: Any) -> Material:
        material = self._get(material_id)
        authorize(principal, Action.MATERIAL_UPDATE, is_owner=self._is_owner(principal, material))
        _validate_price(changes.get("price"))

        updates = {key: changes[key] for key in _EDITABLE_FIELDS if changes.get(key) is not None}
        if updates:
            with self.transaction():
                self.material_repository.update(material_id, **updates)
        return material

    @BaseService.measure_operation("delete_material")
    def delete_material(self, principal: Principal, material_id: str) -> None:
        material = self._get(material_id)
        authorize(principal, Action.MATERIAL_DELETE, is_owner=self._is_owner(principal, material))
        with self.transaction():
            self.material_repository.delete(material_id)
        self.logger.info(f"Material {material_id} deleted by {principal.user_id}")

    def _get(self, material_id: str) -> Material:
        material = self.material_repository.get_by_id(material_id)
        if material is None:
            raise NotFoundException("Material not found", code="MATERIAL_NOT_FOUND")
        return material

    @staticmethod
    def _is_owner(principal: Principal, material: Material) -> bool:
        return principal.teacher_id is not None and material.teacher_id == principal.teacher_id

    def _can_see_draft(self, principal: Optional[Principal], material: Material) -> bool:
        if principal is None:
            return False
        return principal.is_admin or self._is_owner(principal, material)
