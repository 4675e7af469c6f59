# backend/tests/services/test_storefront_services.py
"""Materials and orders."""

from decimal import Decimal

import pytest

from app.core.exceptions import (
    ConflictException,
    ForbiddenException,
    InvalidStateException,
    NotFoundException,
    ValidationException,
)
from app.models.material import OrderStatus
from app.services.material_service import MaterialService
from app.services.order_service import OrderService


@pytest.fixture
def materials(db):
    return MaterialService(db)


@pytest.fixture
def orders(db):
    return OrderService(db)


@pytest.fixture
def published(materials, teacher):
    material = materials.create_material(
        teacher.principal, title="  Calculus Workbook ", price=Decimal("75000"), file_key="calc.pdf"
    )
    return materials.update_material(teacher.principal, material.id, is_published=True)


class TestMaterials:
    def test_new_materials_start_as_drafts(self, materials, teacher):
        material = materials.create_material(teacher.principal, title="Notes", price=Decimal("0"))
        assert material.is_published is False
        assert material.teacher_id == teacher.teacher.id

    def test_title_is_trimmed(self, published):
        assert published.title == "Calculus Workbook"

    def test_drafts_hidden_from_public_and_students(self, materials, teacher, student, admin):
        draft = materials.create_material(teacher.principal, title="Draft", price=Decimal("1000"))

        with pytest.raises(NotFoundException):
            materials.get_material(draft.id)
        with pytest.raises(NotFoundException):
            materials.get_material(draft.id, student.principal)
        assert materials.get_material(draft.id, teacher.principal).id == draft.id
        assert materials.get_material(draft.id, admin.principal).id == draft.id

    def test_public_list_only_shows_published(self, materials, teacher, published):
        materials.create_material(teacher.principal, title="Draft", price=Decimal("1000"))
        page = materials.list_published()
        assert [m.id for m in page.items] == [published.id]

    def test_negative_price_rejected(self, materials, teacher):
        with pytest.raises(ValidationException):
            materials.create_material(teacher.principal, title="Bad", price=Decimal("-1"))

    def test_only_owner_edits(self, materials, other_teacher, published):
        with pytest.raises(ForbiddenException):
            materials.update_material(other_teacher.principal, published.id, title="Mine now")

    def test_students_cannot_create(self, materials, student):
        with pytest.raises(ForbiddenException):
            materials.create_material(student.principal, title="Nope", price=Decimal("1"))

    def test_admin_deletes_any(self, materials, admin, published):
        materials.delete_material(admin.principal, published.id)
        with pytest.raises(NotFoundException):
            materials.get_material(published.id, admin.principal)


class TestOrders:
    def test_order_snapshots_price(self, orders, materials, student, teacher, published):
        order = orders.create_order(student.principal, published.id)
        materials.update_material(teacher.principal, published.id, price=Decimal("90000"))

        assert order.amount == Decimal("75000")
        assert order.status == OrderStatus.PENDING.value

    def test_unpublished_material_cannot_be_ordered(self, orders, materials, student, teacher):
        draft = materials.create_material(teacher.principal, title="Draft", price=Decimal("1000"))
        with pytest.raises(NotFoundException):
            orders.create_order(student.principal, draft.id)

    def test_paid_material_cannot_be_bought_twice(self, orders, admin, student, published):
        order = orders.create_order(student.principal, published.id)
        orders.update_status(admin.principal, order.id, OrderStatus.PAID)

        with pytest.raises(ConflictException):
            orders.create_order(student.principal, published.id)

    def test_download_requires_paid_order(self, orders, admin, student, published):
        order = orders.create_order(student.principal, published.id)
        with pytest.raises(InvalidStateException):
            orders.download(student.principal, order.id)

        orders.update_status(admin.principal, order.id, OrderStatus.PAID)
        link = orders.download(student.principal, order.id)
        assert link["download_url"].endswith(f"/api/materials/{published.id}/file")

    def test_student_cancels_only_pending(self, orders, admin, student, published):
        order = orders.create_order(student.principal, published.id)
        orders.update_status(student.principal, order.id, OrderStatus.CANCELLED)
        assert order.status == OrderStatus.CANCELLED.value

        paid = orders.create_order(student.principal, published.id)
        orders.update_status(admin.principal, paid.id, OrderStatus.PAID)
        with pytest.raises(InvalidStateException):
            orders.update_status(student.principal, paid.id, OrderStatus.CANCELLED)

    def test_student_cannot_mark_paid(self, orders, student, published):
        order = orders.create_order(student.principal, published.id)
        with pytest.raises(ForbiddenException):
            orders.update_status(student.principal, order.id, OrderStatus.PAID)

    def test_orders_are_private(self, orders, student, other_student, teacher, admin, published):
        order = orders.create_order(student.principal, published.id)

        with pytest.raises(NotFoundException):
            orders.get_order(other_student.principal, order.id)
        with pytest.raises(ForbiddenException):
            orders.list_orders(teacher.principal)
        assert orders.list_orders(student.principal).total == 1
        assert orders.list_orders(other_student.principal).total == 0
        assert orders.list_orders(admin.principal).total == 1
