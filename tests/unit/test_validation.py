"""Unit tests for transaction validation and phone formatting"""

from dataclasses import replace
from decimal import Decimal

import pytest

from c2p_gateway.domain.exceptions import ValidationFault
from c2p_gateway.domain.validation import (
    format_payment_reference,
    format_venezuelan_phone_number,
    is_valid_mobile,
    to_international_mobile,
    validate_transaction,
)


def test_mobile_with_country_code_passes():
    assert is_valid_mobile("584141234567")


def test_mobile_without_country_code_fails():
    assert not is_valid_mobile("041412345")


@pytest.mark.parametrize("number", ["58 414 123 4567", "58-414-1234567", " 584241234567 "])
def test_mobile_separators_are_stripped(number):
    assert is_valid_mobile(number)


@pytest.mark.parametrize("number", ["04141234567", "5841412345678", "58414123456a", "", None])
def test_invalid_mobiles(number):
    assert not is_valid_mobile(number)


def test_valid_transaction_is_normalized(transaction):
    tx = validate_transaction(replace(transaction, origin_mobile_number="58-414-123 4567", amount=100))

    assert tx.origin_mobile_number == "584141234567"
    assert tx.amount == Decimal("100")
    assert isinstance(tx.amount, Decimal)


@pytest.mark.parametrize(
    "field, value, code",
    [
        ("amount", Decimal("0"), "VAL_003"),
        ("amount", Decimal("-5.00"), "VAL_003"),
        ("amount", "abc", "VAL_003"),
        ("amount", True, "VAL_003"),
        ("amount", Decimal("NaN"), "VAL_003"),
        ("destination_bank_id", "", "VAL_005"),
        ("destination_id", "   ", "VAL_006"),
        ("origin_mobile_number", "041412345", "VAL_001"),
        ("destination_mobile_number", "04241234567", "VAL_007"),
        ("invoice_number", "   ", "VAL_002"),
    ],
)
def test_validation_rules(transaction, field, value, code):
    with pytest.raises(ValidationFault) as exc_info:
        validate_transaction(replace(transaction, **{field: value}))
    assert exc_info.value.code == code


def test_amount_is_checked_first(transaction):
    bad = replace(transaction, amount=0, origin_mobile_number="bad")
    with pytest.raises(ValidationFault) as exc_info:
        validate_transaction(bad)
    assert exc_info.value.code == "VAL_003"


def test_supplied_invoice_number_is_kept(transaction):
    assert validate_transaction(replace(transaction, invoice_number="INV-42")).invoice_number == "INV-42"


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("0414-1234567", "04141234567"),
        ("(0414) 123 4567", "04141234567"),
        ("+58 414 1234567", "04141234567"),
        ("584241234567", "04241234567"),
    ],
)
def test_format_venezuelan_phone_number(raw, expected):
    assert format_venezuelan_phone_number(raw) == expected


@pytest.mark.parametrize("raw", ["041412345", "02121234567", "+1 555 1234567", ""])
def test_format_venezuelan_phone_number_rejects(raw):
    with pytest.raises(ValidationFault) as exc_info:
        format_venezuelan_phone_number(raw)
    assert exc_info.value.code == "VAL_001"


def test_to_international_mobile():
    assert to_international_mobile("0414-1234567") == "584141234567"
    assert is_valid_mobile(to_international_mobile("+58 424 1234567"))


def test_format_payment_reference():
    assert format_payment_reference(" ab 12 cd ") == "AB12CD"
