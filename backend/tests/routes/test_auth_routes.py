# backend/tests/routes/test_auth_routes.py
"""401 means "who are you?", 403 means "you may not"."""

from datetime import timedelta

from app.auth import create_access_token
from app.core.enums import RoleName


def test_missing_token_is_401(client):
    response = client.get("/api/v1/bookings")

    assert response.status_code == 401
    assert response.headers["WWW-Authenticate"] == "Bearer"
    body = response.json()
    assert body["status"] == 401
    assert body["title"] == "Unauthorized"


def test_garbage_token_is_401(client):
    response = client.get("/api/v1/bookings", headers={"Authorization": "Bearer not-a-jwt"})
    assert response.status_code == 401


def test_expired_token_is_401(client, student):
    token = create_access_token(data={"sub": student.user.id}, expires_delta=timedelta(seconds=-1))
    response = client.get("/api/v1/bookings", headers={"Authorization": f"Bearer {token}"})
    assert response.status_code == 401


def test_token_for_unknown_user_is_401(client):
    token = create_access_token(data={"sub": "01HNOSUCHUSER0000000000000"})
    response = client.get("/api/v1/bookings", headers={"Authorization": f"Bearer {token}"})
    assert response.status_code == 401


def test_user_without_profile_is_403(client, make_account):
    account = make_account(with_profile=False)
    response = client.get("/api/v1/bookings", headers=account.headers)

    assert response.status_code == 403
    assert response.json()["code"] == "PROFILE_REQUIRED"


def test_deactivated_user_is_403(client, make_account):
    account = make_account(RoleName.STUDENT, is_active=False)
    response = client.get("/api/v1/bookings", headers=account.headers)

    assert response.status_code == 403
    assert response.json()["code"] == "ACCOUNT_INACTIVE"


def test_wrong_role_is_403(client, student):
    response = client.post(
        "/api/v1/availability",
        json={"slots": [{"start_time": "2030-01-07T09:00:00Z", "end_time": "2030-01-07T10:00:00Z"}]},
        headers=student.headers,
    )

    assert response.status_code == 403
    assert response.json()["code"] == "FORBIDDEN"


def test_admin_endpoints_require_admin(client, teacher, admin):
    assert client.get("/api/v1/admin/settings").status_code == 401
    assert client.get("/api/v1/admin/settings", headers=teacher.headers).status_code == 403

    response = client.get("/api/v1/admin/settings", headers=admin.headers)
    assert response.status_code == 200
    assert set(response.json()) >= {"commission_rate", "min_payout_amount", "payout_processing_days"}


def test_onboarding_needs_only_an_account(client, make_account):
    account = make_account(with_profile=False)

    response = client.post(
        "/api/v1/onboarding",
        json={"role": "TEACHER", "full_name": "Guru Baru", "price_per_hour": 90000},
        headers=account.headers,
    )

    assert response.status_code == 201
    assert response.json()["role"] == "TEACHER"
    assert client.get("/api/v1/bookings", headers=account.headers).status_code == 200


def test_request_id_is_echoed(client):
    response = client.get("/health", headers={"X-Request-ID": "req-123"})
    assert response.status_code == 200
    assert response.headers["X-Request-ID"] == "req-123"
