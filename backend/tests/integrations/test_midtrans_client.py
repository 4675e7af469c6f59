# backend/tests/integrations/test_midtrans_client.py
import hashlib
import json

import httpx
import pytest

from app.integrations.midtrans_client import (
    CustomerDetails,
    FakeMidtransClient,
    MidtransClient,
    MidtransError,
    notification_signature,
    verify_notification_signature,
)

SERVER_KEY = "SB-Mid-server-test"
CUSTOMER = CustomerDetails(full_name="Siti Nur Aisyah", email="siti@example.com")


def make_client(handler) -> MidtransClient:
    return MidtransClient(
        server_key=SERVER_KEY,
        snap_base_url="https://app.sandbox.midtrans.com/snap/v1",
        api_base_url="https://api.sandbox.midtrans.com/v2",
        transport=httpx.MockTransport(handler),
    )


class TestSignature:
    def test_signature_is_sha512_of_concatenated_fields(self):
        expected = hashlib.sha512(b"order-1200100000.00" + SERVER_KEY.encode()).hexdigest()
        assert notification_signature("order-1", "200", "100000.00", SERVER_KEY) == expected

    def test_verify_accepts_matching_signature(self):
        payload = {
            "order_id": "order-1",
            "status_code": "200",
            "gross_amount": "100000.00",
            "signature_key": notification_signature("order-1", "200", "100000.00", SERVER_KEY),
        }
        assert verify_notification_signature(payload, SERVER_KEY)

    @pytest.mark.parametrize(
        "payload",
        [
            {"order_id": "order-1", "status_code": "200", "gross_amount": "100000.00"},
            {
                "order_id": "order-1",
                "status_code": "200",
                "gross_amount": "999.00",
                "signature_key": notification_signature("order-1", "200", "100000.00", SERVER_KEY),
            },
            {"order_id": "order-1", "signature_key": ""},
        ],
    )
    def test_verify_rejects_missing_or_tampered_signature(self, payload):
        assert not verify_notification_signature(payload, SERVER_KEY)

    def test_verify_rejects_when_no_server_key(self):
        payload = {"order_id": "o", "signature_key": notification_signature("o", "", "", "")}
        assert not verify_notification_signature(payload, "")


class TestMidtransClient:
    def test_create_transaction_posts_snap_payload(self):
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["url"] = str(request.url)
            seen["auth"] = request.headers["Authorization"]
            seen["body"] = json.loads(request.content)
            return httpx.Response(
                201, json={"token": "tok", "redirect_url": "https://pay.example.com/tok"}
            )

        transaction = make_client(handler).create_transaction(
            order_id="booking-1-1", amount=200000, customer=CUSTOMER, item_name="Lesson"
        )

        assert transaction.reference == "booking-1-1"
        assert transaction.redirect_url == "https://pay.example.com/tok"
        assert seen["url"] == "https://app.sandbox.midtrans.com/snap/v1/transactions"
        assert seen["auth"].startswith("Basic ")
        assert seen["body"]["transaction_details"] == {"order_id": "booking-1-1", "gross_amount": 200000}
        assert seen["body"]["customer_details"]["first_name"] == "Siti"
        assert seen["body"]["customer_details"]["last_name"] == "Nur Aisyah"

    def test_error_status_raises_midtrans_error(self):
        client = make_client(lambda request: httpx.Response(500, text="oops"))
        with pytest.raises(MidtransError) as exc_info:
            client.get_status("booking-1-1")
        assert exc_info.value.status_code == 500

    def test_missing_redirect_url_is_an_error(self):
        client = make_client(lambda request: httpx.Response(201, json={"token": "tok"}))
        with pytest.raises(MidtransError):
            client.create_transaction(
                order_id="booking-1-1", amount=1, customer=CUSTOMER, item_name="Lesson"
            )

    def test_get_status_hits_core_api(self):
        def handler(request: httpx.Request) -> httpx.Response:
            assert request.url.path == "/v2/booking-1-1/status"
            return httpx.Response(200, json={"transaction_status": "settlement"})

        assert make_client(handler).get_status("booking-1-1") == {"transaction_status": "settlement"}

    def test_server_key_is_required(self):
        with pytest.raises(ValueError):
            MidtransClient(server_key="", snap_base_url="https://s", api_base_url="https://a")


def test_fake_client_tracks_created_transactions():
    fake = FakeMidtransClient()
    transaction = fake.create_transaction(
        order_id="booking-9-1", amount=50000, customer=CUSTOMER, item_name="Lesson"
    )

    status = fake.get_status(transaction.reference)
    assert status["transaction_status"] == "pending"
    assert status["gross_amount"] == "50000.00"
    with pytest.raises(MidtransError):
        fake.get_status("unknown")
