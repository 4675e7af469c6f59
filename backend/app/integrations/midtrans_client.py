"""Minimal Midtrans client: Snap checkout creation, status lookup and notification signatures."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
import hashlib
import hmac
import json
import logging
from typing import Any, Dict, Mapping, Optional, Protocol, cast
from uuid import uuid4

import httpx
from pydantic import SecretStr

logger = logging.getLogger(__name__)


class MidtransError(RuntimeError):
    """Raised when the Midtrans API cannot be reached or responds with an error."""

    def __init__(self, message: str, status_code: Optional[int] = None, *, error_body: Any = None):
        super().__init__(message)
        self.status_code = status_code
        self.error_body = error_body


class GatewayStatus(str, Enum):
    """
    Closed set of Midtrans ``transaction_status`` values we act on.

    Anything else (refund, partial_refund, chargeback, ...) is not mapped and
    must be ignored by callers.
    """

    CAPTURE = "capture"
    SETTLEMENT = "settlement"
    PENDING = "pending"
    AUTHORIZE = "authorize"
    DENY = "deny"
    CANCEL = "cancel"
    EXPIRE = "expire"
    FAILURE = "failure"

    @classmethod
    def parse(cls, raw: Any) -> Optional["GatewayStatus"]:
        if not isinstance(raw, str):
            return None
        try:
            return cls(raw.strip().lower())
        except ValueError:
            return None


@dataclass(frozen=True)
class CustomerDetails:
    full_name: str
    email: str

    def as_payload(self) -> Dict[str, str]:
        first, _, rest = self.full_name.strip().partition(" ")
        return {"first_name": first or "-", "last_name": rest or "-", "email": self.email}


@dataclass(frozen=True)
class GatewayTransaction:
    reference: str
    redirect_url: str
    token: Optional[str] = None


class PaymentGatewayClient(Protocol):
    def create_transaction(
        self,
        *,
        order_id: str,
        amount: int,
        customer: CustomerDetails,
        item_name: str,
    ) -> GatewayTransaction: ...

    def get_status(self, reference: str) -> Dict[str, Any]: ...


def notification_signature(
    order_id: str, status_code: str, gross_amount: str, server_key: str
) -> str:
    raw = f"{order_id}{status_code}{gross_amount}{server_key}".encode("utf-8")
    return hashlib.sha512(raw).hexdigest()


def verify_notification_signature(payload: Mapping[str, Any], server_key: str) -> bool:
    """Check ``signature_key`` = sha512(order_id + status_code + gross_amount + server_key)."""
    provided = payload.get("signature_key")
    if not isinstance(provided, str) or not provided or not server_key:
        return False
    expected = notification_signature(
        str(payload.get("order_id", "")),
        str(payload.get("status_code", "")),
        str(payload.get("gross_amount", "")),
        server_key,
    )
    return hmac.compare_digest(expected, provided.strip().lower())


class MidtransClient:
    """Thin client for the Midtrans Snap and Core status APIs."""

    def __init__(
        self,
        *,
        server_key: str | SecretStr,
        snap_base_url: str,
        api_base_url: str,
        timeout: float = 15.0,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        secret_value = server_key.get_secret_value() if isinstance(server_key, SecretStr) else server_key
        if not secret_value:
            raise ValueError("Midtrans server key must be provided")

        self._server_key = secret_value
        self._snap_base_url = snap_base_url.rstrip("/")
        self._api_base_url = api_base_url.rstrip("/")
        self._timeout = timeout
        self._transport = transport
        # Midtrans authenticates with the server key as the basic-auth username and a blank password.
        self._auth = httpx.BasicAuth(self._server_key, "")

    def create_transaction(
        self,
        *,
        order_id: str,
        amount: int,
        customer: CustomerDetails,
        item_name: str,
    ) -> GatewayTransaction:
        """Create a Snap checkout and return its redirect URL."""
        body = {
            "transaction_details": {"order_id": order_id, "gross_amount": amount},
            "customer_details": customer.as_payload(),
            "item_details": [
                {
                    "id": order_id,
                    "price": amount,
                    "quantity": 1,
                    "name": item_name[:50],
                    "category": "Education",
                }
            ],
        }
        data = self._request("POST", f"{self._snap_base_url}/transactions", json_body=body)
        redirect_url = data.get("redirect_url")
        if not isinstance(redirect_url, str) or not redirect_url:
            raise MidtransError("Midtrans response missing redirect_url", error_body=data)
        return GatewayTransaction(reference=order_id, redirect_url=redirect_url, token=data.get("token"))

    def get_status(self, reference: str) -> Dict[str, Any]:
        """Fetch the authoritative transaction status for an order reference."""
        if not reference:
            raise ValueError("reference must be provided")
        return self._request("GET", f"{self._api_base_url}/{reference}/status")

    def _request(
        self,
        method: str,
        url: str,
        *,
        json_body: Dict[str, Any] | None = None,
    ) -> Dict[str, Any]:
        with httpx.Client(
            timeout=self._timeout,
            transport=self._transport,
            auth=self._auth,
            headers={"Accept": "application/json", "Content-Type": "application/json"},
        ) as client:
            try:
                response = client.request(method, url, json=json_body)
                response.raise_for_status()
            except httpx.HTTPStatusError as exc:
                status = exc.response.status_code
                logger.error(
                    "Midtrans API error %s for %s %s: %s",
                    status,
                    method,
                    url,
                    exc.response.text[:500],
                )
                raise MidtransError(
                    f"Midtrans API responded with status {status}",
                    status_code=status,
                    error_body=exc.response.text[:500],
                ) from exc
            except httpx.RequestError as exc:
                logger.error("Midtrans request failure for %s %s: %s", method, url, str(exc))
                raise MidtransError("Failed to reach Midtrans API") from exc

        try:
            return cast(Dict[str, Any], response.json())
        except json.JSONDecodeError as exc:
            logger.error("Invalid JSON from Midtrans for %s %s", method, url)
            raise MidtransError("Received malformed JSON from Midtrans") from exc


class FakeMidtransClient:
    """In-memory stand-in used when no server key is configured (local development, tests)."""

    def __init__(self, redirect_base_url: str = "https://app.sandbox.midtrans.com/snap/v2/vtweb") -> None:
        self._redirect_base_url = redirect_base_url.rstrip("/")
        self.statuses: Dict[str, Dict[str, Any]] = {}
        self._logger = logging.getLogger(self.__class__.__name__)

    def create_transaction(
        self,
        *,
        order_id: str,
        amount: int,
        customer: CustomerDetails,
        item_name: str,
    ) -> GatewayTransaction:
        token = uuid4().hex
        self.statuses[order_id] = {
            "order_id": order_id,
            "transaction_status": GatewayStatus.PENDING.value,
            "gross_amount": f"{amount}.00",
            "status_code": "201",
        }
        self._logger.debug(f"Fake transaction created for {order_id}")
        return GatewayTransaction(
            reference=order_id, redirect_url=f"{self._redirect_base_url}/{token}", token=token
        )

    def get_status(self, reference: str) -> Dict[str, Any]:
        status = self.statuses.get(reference)
        if status is None:
            raise MidtransError(f"Transaction {reference} not found", status_code=404)
        return dict(status)
