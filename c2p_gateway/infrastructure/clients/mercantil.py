"""Mercantil Banco C2P HTTP client for requesting payment confirmation keys"""

import asyncio
import itertools
import json
import logging
import time
from dataclasses import replace
from decimal import Decimal
from typing import Any, Dict, NoReturn

import httpx

from c2p_gateway.config import settings
from c2p_gateway.domain import crypto
from c2p_gateway.domain.errors import ErrorCode, NormalizedError, catalog_error, classify
from c2p_gateway.domain.exceptions import (
    CryptoFault,
    GatewayFault,
    HTTPStatusFault,
    NetworkFault,
    PaymentGatewayError,
    TransportTimeout,
    ValidationFault,
)
from c2p_gateway.domain.models import (
    DEFAULT_DEVICE_VALUE,
    ClientContext,
    Credentials,
    DeviceInfo,
    GatewayResponse,
    Location,
    TransactionRequest,
)
from c2p_gateway.domain.retry import RetryPolicy
from c2p_gateway.domain.validation import validate_transaction
from c2p_gateway.infrastructure.observability.logging import log_gateway_error
from c2p_gateway.infrastructure.observability.metrics import gateway_error_counter, gateway_latency_histogram
from c2p_gateway.infrastructure.retry import execute_with_retry

logger = logging.getLogger(__name__)

CLIENT_ID_HEADER = "X-IBM-Client-Id"

INTEGRATOR_ID = 1
TERMINAL_ID = "1"
TRX_TYPE = "compra"
PAYMENT_METHOD = "c2p"
CURRENCY = "VES"


def canonical_json(payload: Dict[str, Any]) -> str:
    """Compact JSON in insertion order, the form the bank decrypts and parses"""
    return json.dumps(payload, separators=(",", ":"), ensure_ascii=False)


def _json_amount(amount: Decimal) -> int | float:
    # Integral amounts go out as JSON integers (100, not 100.0)
    if amount == amount.to_integral_value():
        return int(amount)
    return float(amount)


_invoice_sequence = itertools.count()


def default_invoice_number() -> str:
    """Epoch milliseconds plus a process-wide sequence, distinct for calls in the same millisecond"""
    return f"INV{int(time.time() * 1000)}{next(_invoice_sequence) % 10000:04d}"


class MercantilClient:
    """
    Client for the Mercantil C2P payment-key endpoint.

    Holds only the immutable credentials; each call is independent and may
    run concurrently with others.
    """

    def __init__(
        self,
        credentials: Credentials,
        timeout: float | None = None,
        retry_policy: RetryPolicy | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.credentials = credentials
        self.timeout = timeout or settings.http_timeout_seconds
        self.retry_policy = retry_policy or RetryPolicy(
            max_retries=settings.gateway_max_retries,
            base_delay_ms=settings.gateway_backoff_base_ms,
            max_delay_ms=settings.gateway_backoff_max_ms,
        )
        self._transport = transport

    @classmethod
    def from_settings(cls, environment: str | None = None, **kwargs: Any) -> "MercantilClient":
        """
        Build a client from environment configuration.

        Raises:
            PaymentGatewayError: CONFIG_001 if the environment selector is unknown
        """
        try:
            credentials = settings.credentials_for(environment)
        except ValueError as e:
            error = catalog_error(ErrorCode.CONFIG_001)
            log_gateway_error(error, {"operation": "from_settings", "environment": environment})
            raise PaymentGatewayError(error) from e
        return cls(credentials, **kwargs)

    def validate_credentials(self) -> bool:
        """True if all credential fields are present, merchant id is numeric and the secret is usable"""
        creds = self.credentials
        return (
            bool(creds.client_id)
            and bool(creds.merchant_id)
            and creds.merchant_id.strip().isdigit()
            and bool(creds.endpoint)
            and crypto.validate_secret(creds.secret_key)
        )

    async def request_payment_key(
        self,
        transaction: TransactionRequest,
        client_context: ClientContext,
        retry: bool = True,
    ) -> GatewayResponse:
        """
        Request a C2P payment key.

        Configuration and validation failures are raised before any
        encryption or network I/O and never enter the retry loop. The
        returned response may still carry a business failure; check
        `GatewayResponse.is_success`.

        Raises:
            PaymentGatewayError: On any unrecoverable condition
        """
        if not self.validate_credentials():
            self._fail_fast(catalog_error(ErrorCode.CONFIG_001), None)

        try:
            transaction = validate_transaction(transaction)
        except ValidationFault as e:
            self._fail_fast(classify(e), e)

        # One invoice number for every attempt of this request
        if not transaction.invoice_number:
            transaction = replace(transaction, invoice_number=default_invoice_number())

        policy = self.retry_policy if retry else replace(self.retry_policy, max_retries=1)

        async def attempt() -> GatewayResponse:
            try:
                return await self._request_once(transaction, client_context)
            except GatewayFault as e:
                error = classify(e)
                gateway_error_counter.labels(code=error.code).inc()
                raise PaymentGatewayError(error) from e

        return await execute_with_retry(attempt, policy)

    def _fail_fast(self, error: NormalizedError, cause: Exception | None) -> NoReturn:
        gateway_error_counter.labels(code=error.code).inc()
        log_gateway_error(error, {"operation": "request_payment_key", "endpoint": self.credentials.endpoint})
        raise PaymentGatewayError(error) from cause

    def build_envelope(self, transaction: TransactionRequest, client_context: ClientContext) -> Dict[str, Any]:
        """
        Build the C2P request envelope with the three sensitive fields
        individually encrypted.

        Raises:
            CryptoFault: If field encryption fails
        """
        secret = self.credentials.secret_key
        device = client_context.device_info or DeviceInfo()
        location = device.location or Location()

        return {
            "merchant_identify": {
                "integratorId": INTEGRATOR_ID,
                "merchantId": int(self.credentials.merchant_id),
                "terminalId": TERMINAL_ID,
            },
            "client_identify": {
                "ipaddress": client_context.ip_address,
                "browser_agent": client_context.user_agent,
                "mobile": {
                    "manufacturer": device.manufacturer or DEFAULT_DEVICE_VALUE,
                    "model": device.model or DEFAULT_DEVICE_VALUE,
                    "os_version": device.os_version or DEFAULT_DEVICE_VALUE,
                    "location": {"lat": location.lat, "lng": location.lng},
                },
            },
            "transaction_c2p": {
                "amount": _json_amount(Decimal(transaction.amount)),
                "currency": CURRENCY,
                "destination_bank_id": transaction.destination_bank_id,
                "destination_id": crypto.encrypt(transaction.destination_id, secret),
                "origin_mobile_number": crypto.encrypt(transaction.origin_mobile_number, secret),
                "destination_mobile_number": crypto.encrypt(transaction.destination_mobile_number, secret),
                "trx_type": TRX_TYPE,
                "payment_method": PAYMENT_METHOD,
                "invoice_number": transaction.invoice_number or default_invoice_number(),
            },
        }

    def encrypt_envelope(self, envelope: Dict[str, Any]) -> Dict[str, str]:
        """Wrap the encrypted canonical JSON envelope as {"data": ciphertext}"""
        return {"data": crypto.encrypt(canonical_json(envelope), self.credentials.secret_key)}

    def _headers(self) -> Dict[str, str]:
        return {
            "Content-Type": "application/json",
            "Accept": "application/json",
            CLIENT_ID_HEADER: self.credentials.client_id,
        }

    async def _request_once(self, transaction: TransactionRequest, client_context: ClientContext) -> GatewayResponse:
        envelope = self.build_envelope(transaction, client_context)
        body = self.encrypt_envelope(envelope)

        logger.info(
            "Requesting C2P payment key",
            extra={
                "endpoint": self.credentials.endpoint,
                "invoice_number": envelope["transaction_c2p"]["invoice_number"],
                "amount": str(transaction.amount),
            },
        )

        response = await self._post(body)
        return self._parse_response(response)

    async def _post(self, body: Dict[str, str]) -> httpx.Response:
        """
        POST the encrypted body, bounded by the client timeout.

        The AsyncClient is closed on every exit path, including cancellation.

        Raises:
            TransportTimeout: If the call exceeds the timeout
            NetworkFault: On connection-level failures
        """
        async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
            try:
                with gateway_latency_histogram.time():
                    return await asyncio.wait_for(
                        client.post(
                            self.credentials.endpoint,
                            content=canonical_json(body),
                            headers=self._headers(),
                        ),
                        timeout=self.timeout,
                    )
            except (httpx.TimeoutException, asyncio.TimeoutError) as e:
                raise TransportTimeout(f"Mercantil API timeout after {self.timeout}s") from e
            except httpx.RequestError as e:
                raise NetworkFault(f"Network connection to Mercantil API failed: {type(e).__name__}") from e

    def _parse_response(self, response: httpx.Response) -> GatewayResponse:
        """
        Interpret a gateway HTTP response.

        An encrypted body ({"data": ...}) is decrypted first. If that fails,
        the raw body is treated as an already-plaintext response; this
        fallback is logged separately from hard failures.

        Raises:
            HTTPStatusFault: On non-2xx status
            GatewayFault: If the body is not a JSON object
        """
        if not response.is_success:
            raise HTTPStatusFault(response.status_code, response.reason_phrase)

        try:
            payload = response.json()
        except ValueError as e:
            raise GatewayFault(f"Gateway returned a non-JSON body: {e}") from e

        if not isinstance(payload, dict):
            raise GatewayFault("Gateway response is not a JSON object")

        data = payload.get("data")
        if isinstance(data, str):
            try:
                decrypted = crypto.decrypt(data, self.credentials.secret_key)
                return GatewayResponse.from_payload(json.loads(decrypted))
            except (CryptoFault, ValueError, TypeError) as e:
                logger.warning(
                    "Gateway response could not be decrypted; treating body as plaintext",
                    extra={"endpoint": self.credentials.endpoint, "error_type": type(e).__name__},
                )
        else:
            logger.debug("Gateway response is plaintext", extra={"endpoint": self.credentials.endpoint})

        return GatewayResponse.from_payload(payload)
