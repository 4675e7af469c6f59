# backend/tests/routes/test_booking_routes.py
from datetime import datetime, timedelta, timezone

BASE_TIME = datetime(2030, 1, 7, 9, 0, tzinfo=timezone.utc)


def test_slot_booking_flow(client, student, teacher):
    created = client.post(
        "/api/v1/availability",
        json={
            "slots": [
                {"start_time": "2030-01-07T09:00:00Z", "end_time": "2030-01-07T11:00:00Z"},
                {"start_time": "2030-01-07T11:00:00Z", "end_time": "2030-01-07T12:00:00Z"},
            ]
        },
        headers=teacher.headers,
    )
    assert created.status_code == 201
    slot_id = created.json()[0]["id"]

    booked = client.post("/api/v1/bookings", json={"slot_id": slot_id}, headers=student.headers)
    assert booked.status_code == 201
    booking = booked.json()
    assert booking["status"] == "PENDING"
    assert booking["total_price"] == 200000.0
    assert booking["teacher_name"] == "Tara Teacher"

    public = client.get("/api/v1/availability", params={"teacher_id": teacher.teacher.id})
    assert [slot["is_booked"] for slot in public.json()] == [True, False]

    again = client.post("/api/v1/bookings", json={"slot_id": slot_id}, headers=student.headers)
    assert again.status_code == 409
    assert again.json()["code"] == "ALREADY_BOOKED"

    cancelled = client.patch(
        f"/api/v1/bookings/{booking['id']}/status",
        json={"status": "CANCELLED"},
        headers=student.headers,
    )
    assert cancelled.status_code == 200
    assert cancelled.json()["status"] == "CANCELLED"


def test_overlapping_slot_batch_is_rejected_whole(client, teacher):
    response = client.post(
        "/api/v1/availability",
        json={
            "slots": [
                {"start_time": "2030-01-07T09:00:00Z", "end_time": "2030-01-07T10:00:00Z"},
                {"start_time": "2030-01-07T09:30:00Z", "end_time": "2030-01-07T10:30:00Z"},
            ]
        },
        headers=teacher.headers,
    )

    assert response.status_code == 409
    assert response.json()["code"] == "SLOT_CONFLICT"
    listed = client.get("/api/v1/availability", params={"teacher_id": teacher.teacher.id})
    assert listed.json() == []


def test_reversed_slot_window_is_a_validation_error(client, teacher):
    response = client.post(
        "/api/v1/availability",
        json={"slots": [{"start_time": "2030-01-07T10:00:00Z", "end_time": "2030-01-07T09:00:00Z"}]},
        headers=teacher.headers,
    )

    assert response.status_code == 400
    assert response.json()["code"] == "VALIDATION_ERROR"


def test_list_is_paginated(client, student, teacher, make_booking):
    for day in range(3):
        make_booking(student, teacher, start=BASE_TIME + timedelta(days=day))

    response = client.get("/api/v1/bookings", params={"page": 2, "limit": 2}, headers=student.headers)

    assert response.status_code == 200
    body = response.json()
    assert len(body["data"]) == 1
    assert body["pagination"] == {"page": 2, "limit": 2, "total": 3, "total_pages": 2}


def test_page_limit_is_bounded(client, student):
    response = client.get("/api/v1/bookings", params={"limit": 1000}, headers=student.headers)
    assert response.status_code == 400


def test_teacher_cannot_cancel_through_api(client, student, teacher, make_booking):
    booking = make_booking(student, teacher)
    response = client.patch(
        f"/api/v1/bookings/{booking.id}/status",
        json={"status": "CANCELLED"},
        headers=teacher.headers,
    )
    assert response.status_code == 403


def test_unknown_booking_is_problem_404(client, student):
    response = client.get("/api/v1/bookings/missing", headers=student.headers)

    assert response.status_code == 404
    body = response.json()
    assert body["code"] == "BOOKING_NOT_FOUND"
    assert body["instance"] == "/api/v1/bookings/missing"
    assert body["type"] == "about:blank"


def test_review_rating_out_of_range(client, student, teacher, make_booking):
    from app.models.booking import BookingStatus

    booking = make_booking(student, teacher, status=BookingStatus.COMPLETED)
    response = client.post(
        "/api/v1/reviews",
        json={"booking_id": booking.id, "rating": 6},
        headers=student.headers,
    )
    assert response.status_code == 400
