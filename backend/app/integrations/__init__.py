"""External service integrations."""

from .midtrans_client import (
    CustomerDetails,
    FakeMidtransClient,
    GatewayStatus,
    GatewayTransaction,
    MidtransClient,
    MidtransError,
    PaymentGatewayClient,
)

__all__ = [
    "CustomerDetails",
    "FakeMidtransClient",
    "GatewayStatus",
    "GatewayTransaction",
    "MidtransClient",
    "MidtransError",
    "PaymentGatewayClient",
]
