# backend/tests/conftest.py
"""
Pytest configuration for the marketplace backend.

Tests run against an in-memory SQLite database that is created fresh for
every test. The payment gateway is always the in-memory fake.
"""

import os

# Set test configuration BEFORE any app imports!
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["MIDTRANS_SERVER_KEY"] = "test-server-key"
os.environ["MIDTRANS_VERIFY_STATUS"] = "false"
os.environ["SECRET_KEY"] = "test-secret-key"
os.environ["CI"] = "true"

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from decimal import Decimal
from typing import Callable, Dict, Optional

from fastapi.testclient import TestClient
import pytest
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from app.api.dependencies import database as database_deps
from app.api.dependencies.services import get_payment_gateway
from app.auth import create_access_token
from app.core.config import settings
from app.core.enums import RoleName
from app.database import Base, build_engine, get_db
from app.integrations.midtrans_client import FakeMidtransClient, notification_signature
from app.main import app
from app.models.availability import AvailabilitySlot
from app.models.booking import Booking, BookingStatus
from app.models.teacher import Teacher
from app.models.user import Profile, User
from app.principal import Principal

settings.is_testing = True

test_engine = build_engine("sqlite://", poolclass=StaticPool)
TestSessionLocal = sessionmaker(
    autocommit=False, autoflush=False, bind=test_engine, expire_on_commit=False
)

# A Monday far enough ahead that every slot is in the future.
BASE_TIME = datetime(2030, 1, 7, 9, 0, tzinfo=timezone.utc)


@dataclass
class Account:
    user: User
    profile: Profile
    teacher: Optional[Teacher] = None

    @property
    def principal(self) -> Principal:
        return Principal(
            user_id=self.user.id,
            email=self.user.email,
            role=RoleName(self.profile.role),
            profile_id=self.profile.id,
            teacher_id=self.teacher.id if self.teacher is not None else None,
        )

    @property
    def headers(self) -> Dict[str, str]:
        token = create_access_token(data={"sub": self.user.id})
        return {"Authorization": f"Bearer {token}"}


@pytest.fixture(scope="function")
def db():
    """A fresh schema and session per test."""
    Base.metadata.create_all(bind=test_engine)
    session = TestSessionLocal()

    yield session

    session.rollback()
    session.close()
    Base.metadata.drop_all(bind=test_engine)


@pytest.fixture
def gateway() -> FakeMidtransClient:
    return FakeMidtransClient()


@pytest.fixture
def client(db: Session, gateway: FakeMidtransClient):
    """Create a test client bound to the test session and the fake gateway."""

    def override_get_db():
        yield db

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[database_deps.get_db] = override_get_db
    app.dependency_overrides[get_payment_gateway] = lambda: gateway

    test_client = TestClient(app)

    yield test_client

    app.dependency_overrides.clear()
    test_client.close()


@pytest.fixture
def make_account(db: Session) -> Callable[..., Account]:
    """Build a user with a profile (and a teacher row for teachers)."""
    counter = {"n": 0}

    def _make(
        role: RoleName = RoleName.STUDENT,
        *,
        full_name: Optional[str] = None,
        price_per_hour: Decimal = Decimal("100000"),
        is_active: bool = True,
        with_profile: bool = True,
    ) -> Account:
        counter["n"] += 1
        email = f"{role.value.lower()}{counter['n']}@example.com"
        user = User(email=email, is_active=is_active)
        db.add(user)
        db.flush()
        if not with_profile:
            db.commit()
            return Account(user=user, profile=None)  # type: ignore[arg-type]

        profile = Profile(
            user_id=user.id,
            role=role.value,
            full_name=full_name or f"Test {role.value.title()} {counter['n']}",
        )
        db.add(profile)
        db.flush()

        teacher = None
        if role is RoleName.TEACHER:
            teacher = Teacher(profile_id=profile.id, price_per_hour=price_per_hour)
            db.add(teacher)
            db.flush()
        db.commit()
        return Account(user=user, profile=profile, teacher=teacher)

    return _make


@pytest.fixture
def student(make_account) -> Account:
    return make_account(RoleName.STUDENT, full_name="Siti Student")


@pytest.fixture
def other_student(make_account) -> Account:
    return make_account(RoleName.STUDENT, full_name="Budi Student")


@pytest.fixture
def teacher(make_account) -> Account:
    return make_account(RoleName.TEACHER, full_name="Tara Teacher")


@pytest.fixture
def other_teacher(make_account) -> Account:
    return make_account(RoleName.TEACHER, full_name="Toni Teacher")


@pytest.fixture
def admin(make_account) -> Account:
    return make_account(RoleName.ADMIN, full_name="Ada Admin")


@pytest.fixture
def make_slot(db: Session) -> Callable[..., AvailabilitySlot]:
    def _make(
        teacher: Account,
        start: datetime = BASE_TIME,
        hours: float = 1,
        *,
        is_booked: bool = False,
    ) -> AvailabilitySlot:
        slot = AvailabilitySlot(
            teacher_id=teacher.teacher.id,
            start_time=start,
            end_time=start + timedelta(hours=hours),
            is_booked=is_booked,
        )
        db.add(slot)
        db.commit()
        return slot

    return _make


@pytest.fixture
def make_booking(db: Session, make_slot) -> Callable[..., Booking]:
    """Insert a booking in any status directly, holding its slot."""

    def _make(
        student: Account,
        teacher: Account,
        *,
        status: BookingStatus = BookingStatus.PENDING,
        start: datetime = BASE_TIME,
        hours: float = 1,
        total_price: Decimal = Decimal("100000"),
    ) -> Booking:
        releases = status in (BookingStatus.CANCELLED, BookingStatus.REFUNDED)
        slot = make_slot(teacher, start, hours, is_booked=not releases)
        booking = Booking(
            teacher_id=teacher.teacher.id,
            student_profile_id=student.profile.id,
            slot_id=slot.id,
            start_time=slot.start_time,
            end_time=slot.end_time,
            status=status.value,
            total_price=total_price,
        )
        db.add(booking)
        db.commit()
        return booking

    return _make


def signed_notification(
    order_id: str,
    transaction_status: str,
    *,
    status_code: str = "200",
    gross_amount: str = "100000.00",
    fraud_status: Optional[str] = None,
) -> dict:
    """A gateway notification body with a valid signature for the test server key."""
    payload = {
        "order_id": order_id,
        "transaction_status": transaction_status,
        "status_code": status_code,
        "gross_amount": gross_amount,
        "signature_key": notification_signature(
            order_id, status_code, gross_amount, settings.midtrans_server_key.get_secret_value()
        ),
    }
    if fraud_status is not None:
        payload["fraud_status"] = fraud_status
    return payload


@pytest.fixture
def notification() -> Callable[..., dict]:
    return signed_notification
