# backend/tests/routes/test_webhook_routes.py
"""Midtrans notification endpoint."""

import pytest

WEBHOOK = "/api/v1/webhooks/midtrans"


@pytest.fixture
def payment_ref(client, student, teacher, make_booking):
    booking = make_booking(student, teacher)
    response = client.post("/api/v1/payments", json={"booking_id": booking.id}, headers=student.headers)
    assert response.status_code == 201
    assert response.json()["payment_url"].startswith("https://")
    payment = client.get(f"/api/v1/payments/{response.json()['payment_id']}", headers=student.headers)
    return booking.id, payment.json()["gateway_ref"]


def test_settlement_pays_booking_and_is_idempotent(client, student, payment_ref, notification):
    booking_id, ref = payment_ref
    body = notification(ref, "settlement")

    first = client.post(WEBHOOK, json=body)
    assert first.status_code == 200
    assert first.json() == {"status": "success", "outcome": "success"}

    second = client.post(WEBHOOK, json=body)
    assert second.status_code == 200
    assert second.json()["outcome"] == "duplicate"

    booking = client.get(f"/api/v1/bookings/{booking_id}", headers=student.headers)
    assert booking.json()["status"] == "PAID"


def test_bad_signature_is_rejected(client, payment_ref, notification):
    _, ref = payment_ref
    body = notification(ref, "settlement")
    body["signature_key"] = "0" * 128

    response = client.post(WEBHOOK, json=body)

    assert response.status_code == 400
    assert response.json()["detail"] == "Invalid signature"


def test_unknown_reference_is_acknowledged(client, notification):
    response = client.post(WEBHOOK, json=notification("booking-nope-1", "settlement"))

    assert response.status_code == 200
    assert response.json() == {"status": "ignored", "outcome": "unknown_reference"}


def test_unrecognized_status_is_acknowledged(client, student, payment_ref, notification):
    booking_id, ref = payment_ref

    response = client.post(WEBHOOK, json=notification(ref, "refund"))

    assert response.status_code == 200
    assert response.json()["status"] == "ignored"
    booking = client.get(f"/api/v1/bookings/{booking_id}", headers=student.headers)
    assert booking.json()["status"] == "PENDING"


def test_unreadable_body_is_rejected(client):
    response = client.post(WEBHOOK, content=b"{not json", headers={"Content-Type": "application/json"})
    assert response.status_code == 400

    response = client.post(WEBHOOK, json=["not", "an", "object"])
    assert response.status_code == 400
