"""Pydantic schemas for API request/response validation"""

from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, Field


class VerifyPaymentRequest(BaseModel):
    """Request body for POST /v1/verify-payment"""

    sender_bank: str = Field(..., alias="senderBank", min_length=1, description="Bank the payment was sent from")
    receiver_bank: str = Field(..., alias="receiverBank", min_length=1, description="Bank the payment was sent to")
    reference: str = Field(..., min_length=1, description="Payment reference")
    amount: Decimal = Field(..., gt=0, description="Payment amount in VES")
    phone: str = Field(..., min_length=1, description="Payer mobile number")
    date: str = Field(..., min_length=1, description="Payment date, YYYY-MM-DD")
    destination_phone: Optional[str] = Field(None, alias="destinationPhone", description="Receiver mobile number")
    destination_id: Optional[str] = Field(None, alias="destinationId", description="Receiver identification")

    model_config = {"populate_by_name": True}


class VerificationDetails(BaseModel):
    verification_id: Optional[str] = None
    reference: Optional[str] = None
    amount: Optional[float] = None
    bank: Optional[str] = None
    processing_date: Optional[str] = None
    gu_id: Optional[str] = None
    response_code: Optional[int] = None
    error_code: Optional[str] = None
    severity: Optional[str] = None
    retryable: Optional[bool] = None
    timestamp: str


class VerifyPaymentResponse(BaseModel):
    """Response for POST /v1/verify-payment"""

    success: bool
    status: str  # verified | error
    message: str
    details: VerificationDetails
