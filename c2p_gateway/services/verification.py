"""Payment verification through the Mercantil C2P key request"""

import time
from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import Optional

from c2p_gateway.config import settings
from c2p_gateway.domain.errors import ErrorCode, catalog_error, classify
from c2p_gateway.domain.exceptions import PaymentGatewayError, ValidationFault
from c2p_gateway.domain.models import ClientContext, DeviceInfo, Location, TransactionRequest
from c2p_gateway.domain.validation import format_payment_reference, to_international_mobile
from c2p_gateway.infrastructure.clients.mercantil import MercantilClient
from c2p_gateway.infrastructure.observability.logging import log_gateway_error
from c2p_gateway.infrastructure.observability.metrics import record_outcome

MERCANTIL_BANK_NAME = "mercantil"


@dataclass
class PaymentVerificationRequest:
    """Form-shaped input, already schema-validated by the web layer"""

    sender_bank: str
    receiver_bank: str
    reference: str
    amount: Decimal
    phone: str
    date: str
    destination_phone: Optional[str] = None
    destination_id: Optional[str] = None


@dataclass
class VerificationResult:
    verification_id: str
    processing_date: Optional[str]
    response_code: int
    gu_id: Optional[str]
    reference: str
    amount: Decimal


def is_mercantil_bank(bank_name: str) -> bool:
    return MERCANTIL_BANK_NAME in bank_name.lower()


def _destination_mobile(request: PaymentVerificationRequest) -> str:
    # The merchant's receiving number applies when the form does not carry one
    number = request.destination_phone or settings.mercantil_destination_mobile
    if not number:
        raise ValidationFault("Destination mobile number is not available", code=ErrorCode.VAL_007.value)
    try:
        return to_international_mobile(number)
    except ValidationFault as e:
        raise ValidationFault("Invalid destination mobile number", code=ErrorCode.VAL_007.value) from e


def build_transaction(request: PaymentVerificationRequest) -> TransactionRequest:
    """
    Map form input onto a C2P transaction.

    Raises:
        ValidationFault: If the receiver bank is not Mercantil, or the date,
            phone numbers or reference are malformed
    """
    if not is_mercantil_bank(request.receiver_bank):
        raise ValidationFault(
            f"Receiver bank not supported: {request.receiver_bank}", code=ErrorCode.C2P_002.value
        )

    try:
        date.fromisoformat(request.date)
    except (TypeError, ValueError) as e:
        raise ValidationFault("Invalid date", code=ErrorCode.VAL_004.value) from e

    reference = format_payment_reference(request.reference)
    if not reference:
        raise ValidationFault("Invalid payment reference", code=ErrorCode.VAL_002.value)

    return TransactionRequest(
        amount=request.amount,
        destination_bank_id=settings.mercantil_destination_bank_id,
        destination_id=request.destination_id or reference,
        origin_mobile_number=to_international_mobile(request.phone),
        destination_mobile_number=_destination_mobile(request),
        invoice_number=f"INV-{reference}",
    )


def web_client_context(ip_address: str, user_agent: str) -> ClientContext:
    return ClientContext(
        ip_address=ip_address,
        user_agent=user_agent,
        device_info=DeviceInfo(manufacturer="Web", model="Browser", location=Location()),
    )


async def verify_payment(
    request: PaymentVerificationRequest,
    client_context: ClientContext,
    client: MercantilClient,
) -> VerificationResult:
    """
    Request a C2P payment key for a verification form submission.

    A response the bank marks as failed (code absent or 99999) is reported
    as C2P_001 even though the HTTP exchange succeeded.

    Raises:
        PaymentGatewayError: On validation, transport, or business failure
    """
    try:
        transaction = build_transaction(request)
    except ValidationFault as e:
        error = classify(e)
        log_gateway_error(error, {"operation": "verify_payment", "reference": request.reference})
        record_outcome("failed")
        raise PaymentGatewayError(error) from e

    try:
        response = await client.request_payment_key(transaction, client_context)
    except PaymentGatewayError:
        record_outcome("failed")
        raise

    if not response.is_success:
        error = catalog_error(ErrorCode.C2P_001)
        log_gateway_error(
            error,
            {
                "operation": "verify_payment",
                "reference": request.reference,
                "response_code": response.code,
                "gu_id": response.info_msg.gu_id,
                "processing_date": response.processing_date,
            },
        )
        record_outcome("rejected")
        raise PaymentGatewayError(error)

    record_outcome("approved")
    return VerificationResult(
        verification_id=f"MER-{int(time.time() * 1000)}",
        processing_date=response.processing_date,
        response_code=response.code,
        gu_id=response.info_msg.gu_id,
        reference=format_payment_reference(request.reference),
        amount=transaction.amount,
    )
