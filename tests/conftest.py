"""Pytest fixtures for testing"""

import json
from decimal import Decimal
from typing import Any, Callable, Dict

import httpx
import pytest

from c2p_gateway.domain import crypto
from c2p_gateway.domain.models import ClientContext, Credentials, DeviceInfo, Location, TransactionRequest
from c2p_gateway.domain.retry import RetryPolicy
from c2p_gateway.infrastructure.clients.mercantil import MercantilClient

TEST_SECRET = "test-secret-key"
TEST_CLIENT_ID = "81188330-test-client"
TEST_ENDPOINT = "https://gateway.test/mercantil-banco/sandbox/v1/payment/c2p"


@pytest.fixture
def credentials() -> Credentials:
    return Credentials(
        client_id=TEST_CLIENT_ID,
        merchant_id="200284",
        secret_key=TEST_SECRET,
        endpoint=TEST_ENDPOINT,
    )


@pytest.fixture
def transaction() -> TransactionRequest:
    """Reference C2P transaction used across the suite"""
    return TransactionRequest(
        amount=Decimal("100.00"),
        destination_bank_id="0105",
        destination_id="V18367443",
        origin_mobile_number="584141234567",
        destination_mobile_number="584241234567",
    )


@pytest.fixture
def client_context() -> ClientContext:
    return ClientContext(
        ip_address="192.168.1.1",
        user_agent="Mozilla/5.0 (Windows NT 10.0; Win64; x64)",
        device_info=DeviceInfo(
            manufacturer="Samsung",
            model="Galaxy",
            os_version="Android 12",
            location=Location(lat=10.5, lng=-66.9),
        ),
    )


@pytest.fixture
def fast_retry() -> RetryPolicy:
    """Three attempts with no backoff delay"""
    return RetryPolicy(max_retries=3, base_delay_ms=0, max_delay_ms=0)


def _gateway_payload(code: Any = 0, gu_id: str = "9f1c2d3e") -> Dict[str, Any]:
    payload: Dict[str, Any] = {
        "processingDate": "2026-10-17 10:15:00",
        "infoMsg": {
            "guId": gu_id,
            "channel": "06",
            "subchannel": "01",
            "applId": "",
            "personId": "",
            "userId": "",
            "token": "",
            "action": "trx",
        },
    }
    if code is not None:
        payload["code"] = code
    return payload


def _encrypted_response(payload: Dict[str, Any], secret: str = TEST_SECRET, status_code: int = 200) -> httpx.Response:
    return httpx.Response(status_code, json={"data": crypto.encrypt(json.dumps(payload), secret)})


@pytest.fixture
def gateway_payload() -> Callable[..., Dict[str, Any]]:
    """Factory for decrypted C2P response bodies"""
    return _gateway_payload


@pytest.fixture
def encrypted_response() -> Callable[..., httpx.Response]:
    """Factory for {"data": ciphertext} gateway responses"""
    return _encrypted_response


@pytest.fixture
def make_client(credentials: Credentials, fast_retry: RetryPolicy) -> Callable[..., MercantilClient]:
    """Build a client whose transport is served by `handler`"""

    def _make(handler: Callable, timeout: float = 5.0, retry_policy: RetryPolicy | None = None) -> MercantilClient:
        return MercantilClient(
            credentials,
            timeout=timeout,
            retry_policy=retry_policy or fast_retry,
            transport=httpx.MockTransport(handler),
        )

    return _make
