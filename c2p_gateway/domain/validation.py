"""Local validation and normalization of C2P transaction data"""

import re
from dataclasses import replace
from decimal import Decimal, InvalidOperation

from c2p_gateway.domain.exceptions import ValidationFault
from c2p_gateway.domain.models import TransactionRequest

MOBILE_PATTERN = re.compile(r"^58[0-9]{10}$")
LOCAL_MOBILE_PATTERN = re.compile(r"^04[0-9]{9}$")

_SEPARATORS = re.compile(r"[\s-]")
_FORMATTING = re.compile(r"[\s\-()]")


def strip_mobile(number: str) -> str:
    """Remove whitespace and hyphens"""
    return _SEPARATORS.sub("", number)


def is_valid_mobile(number: object) -> bool:
    """International Venezuelan mobile: 58 followed by 10 digits"""
    return isinstance(number, str) and MOBILE_PATTERN.match(strip_mobile(number)) is not None


def format_venezuelan_phone_number(phone_number: str) -> str:
    """
    Normalize a phone number to the local 04XXXXXXXXX form.

    Accepts spaces, hyphens, parentheses and a +58 / 58 country prefix,
    which replaces the leading trunk 0.

    Raises:
        ValidationFault: If the result is not 11 digits starting with 04
    """
    cleaned = _FORMATTING.sub("", phone_number or "")
    if cleaned.startswith("+58"):
        cleaned = "0" + cleaned[3:]
    elif cleaned.startswith("58") and len(cleaned) == 12:
        cleaned = "0" + cleaned[2:]

    if not LOCAL_MOBILE_PATTERN.match(cleaned):
        raise ValidationFault(
            "Invalid Venezuelan phone number, expected format 04XX-XXXXXXX",
            code="VAL_001",
        )
    return cleaned


def to_international_mobile(phone_number: str) -> str:
    """04XX-XXXXXXX (or any accepted variant) to the 58XXXXXXXXXX wire form"""
    return "58" + format_venezuelan_phone_number(phone_number)[1:]


def format_payment_reference(reference: str) -> str:
    """Remove whitespace and uppercase"""
    return re.sub(r"\s", "", reference).upper()


def _as_amount(value: object) -> Decimal:
    if isinstance(value, bool):
        raise ValidationFault("Invalid amount", code="VAL_003")
    try:
        amount = value if isinstance(value, Decimal) else Decimal(str(value))
    except (InvalidOperation, ValueError, TypeError) as e:
        raise ValidationFault("Invalid amount", code="VAL_003") from e
    if not amount.is_finite() or amount <= 0:
        raise ValidationFault("Invalid amount", code="VAL_003")
    return amount


def validate_transaction(tx: TransactionRequest) -> TransactionRequest:
    """
    Check a transaction before any encryption or I/O.

    Returns a copy with the amount as Decimal and the mobile numbers
    stripped of separators.

    Raises:
        ValidationFault: With the catalog code of the first violated rule
    """
    amount = _as_amount(tx.amount)

    if not isinstance(tx.destination_bank_id, str) or not tx.destination_bank_id.strip():
        raise ValidationFault("Invalid destination bank code", code="VAL_005")

    if not isinstance(tx.destination_id, str) or not tx.destination_id.strip():
        raise ValidationFault("Invalid destination identification", code="VAL_006")

    if not is_valid_mobile(tx.origin_mobile_number):
        raise ValidationFault("Invalid origin mobile number", code="VAL_001")

    if not is_valid_mobile(tx.destination_mobile_number):
        raise ValidationFault("Invalid destination mobile number", code="VAL_007")

    if tx.invoice_number is not None:
        if not isinstance(tx.invoice_number, str) or not tx.invoice_number.strip():
            raise ValidationFault("Invalid invoice number", code="VAL_002")

    return replace(
        tx,
        amount=amount,
        origin_mobile_number=strip_mobile(tx.origin_mobile_number),
        destination_mobile_number=strip_mobile(tx.destination_mobile_number),
    )
