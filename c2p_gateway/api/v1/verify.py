"""POST /v1/verify-payment - Mercantil C2P payment verification endpoint"""

import time
from datetime import datetime, timezone

from fastapi import APIRouter, Depends, Request

from c2p_gateway.api.dependencies import get_client_context, get_mercantil_client, get_request_id
from c2p_gateway.api.v1.schemas import VerificationDetails, VerifyPaymentRequest, VerifyPaymentResponse
from c2p_gateway.domain.exceptions import PaymentGatewayError
from c2p_gateway.domain.models import ClientContext
from c2p_gateway.infrastructure.clients.mercantil import MercantilClient
from c2p_gateway.infrastructure.observability.logging import log_verification
from c2p_gateway.services.verification import PaymentVerificationRequest, verify_payment

router = APIRouter()


@router.post("/verify-payment", response_model=VerifyPaymentResponse)
async def verify_payment_endpoint(
    request_body: VerifyPaymentRequest,
    request: Request,
    client_context: ClientContext = Depends(get_client_context),
    client: MercantilClient = Depends(get_mercantil_client),
):
    """
    Verify a mobile payment by requesting a C2P key from Mercantil Banco.

    Flow:
    1. Map the form onto a C2P transaction (only Mercantil receivers are supported)
    2. Request the C2P key (with retries)
    3. Return the verification payload, or the normalized error rendered by
       the application's exception handler
    """
    start_time = time.perf_counter()
    request_id = get_request_id(request)

    try:
        result = await verify_payment(
            PaymentVerificationRequest(
                sender_bank=request_body.sender_bank,
                receiver_bank=request_body.receiver_bank,
                reference=request_body.reference,
                amount=request_body.amount,
                phone=request_body.phone,
                date=request_body.date,
                destination_phone=request_body.destination_phone,
                destination_id=request_body.destination_id,
            ),
            client_context,
            client,
        )
    except PaymentGatewayError as e:
        duration_ms = (time.perf_counter() - start_time) * 1000
        log_verification(request_id, None, e.error.code, None, duration_ms)
        raise

    duration_ms = (time.perf_counter() - start_time) * 1000
    log_verification(request_id, result.verification_id, "verified", result.response_code, duration_ms)

    return VerifyPaymentResponse(
        success=True,
        status="verified",
        message="Solicitud de clave C2P procesada exitosamente",
        details=VerificationDetails(
            verification_id=result.verification_id,
            reference=result.reference,
            amount=float(result.amount),
            bank="Mercantil Banco",
            processing_date=result.processing_date,
            gu_id=result.gu_id,
            response_code=result.response_code,
            timestamp=datetime.now(timezone.utc).isoformat(),
        ),
    )
