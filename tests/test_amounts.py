"""Unit tests for amount coercion and minor-unit conversion."""

import math

import pytest

from payintent.services.api.service import (
    PaymentIntentError,
    coerce_amount,
    is_valid_amount,
    parse_request,
    processor_error_message,
    to_minor_units,
)


@pytest.mark.parametrize(
    ("amount", "expected"),
    [(10, 1000), (10.004, 1000), (19.995, 2000), (0.01, 1), (0.005, 1), (1234.5, 123450)],
)
def test_minor_units_round_half_up(amount, expected):
    """Conversion rounds half up on the decimal value, not the binary product."""

    assert to_minor_units(amount) == expected


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        (25, 25.0),
        (12.5, 12.5),
        ("19.99", 19.99),
        (" 7 ", 7.0),
        ("-3", -3.0),
        ("1e3", 1000.0),
        (".5", 0.5),
        ("5.", 5.0),
        ("0x10", 16.0),
        ("0o17", 15.0),
        ("0B101", 5.0),
        ("", 0.0),
        ("   ", 0.0),
    ],
)
def test_coerce_numeric_values(raw, expected):
    assert coerce_amount(raw) == expected


@pytest.mark.parametrize(
    "raw",
    [
        None,
        True,
        False,
        "abc",
        [],
        {},
        [10],
        {"value": 10},
        "1_000",
        "\u0665",
        "\uff11\uff10",
        "inf",
        "nan",
        "NaN",
        "1e",
        "0x",
        "+0x10",
        "0b12",
        "12abc",
    ],
)
def test_coerce_non_numeric_values_is_nan(raw):
    assert math.isnan(coerce_amount(raw))


@pytest.mark.parametrize(("raw", "expected"), [("Infinity", math.inf), ("+Infinity", math.inf), ("-Infinity", -math.inf)])
def test_coerce_infinity_spellings(raw, expected):
    """Infinity parses, so the finite check is what rejects it."""

    assert coerce_amount(raw) == expected
    assert not is_valid_amount(coerce_amount(raw))


def test_coerce_huge_integer_overflows_to_infinity():
    assert coerce_amount(10**400) == math.inf


@pytest.mark.parametrize("amount", [0.01, 1, 19.995, 1e9])
def test_valid_amounts(amount):
    assert is_valid_amount(amount)


@pytest.mark.parametrize("amount", [0, -0.0, -5, math.nan, math.inf, -math.inf])
def test_invalid_amounts(amount):
    assert not is_valid_amount(amount)


def test_parse_empty_body_defaults_currency():
    request = parse_request(b"")
    assert request.amount is None
    assert request.resolved_currency == "eur"


def test_parse_keeps_currency_as_given():
    request = parse_request(b'{"amount": 5, "currency": "USD", "ignored": 1}')
    assert request.amount == 5
    assert request.resolved_currency == "USD"


@pytest.mark.parametrize("body", [b"{not json", b"[1, 2]", b'"text"', b'{"currency": 12}'])
def test_parse_rejects_bad_bodies(body):
    with pytest.raises(PaymentIntentError) as info:
        parse_request(body)
    assert info.value.status_code == 400
    assert info.value.message == "Invalid JSON body"


def test_processor_error_message_passthrough():
    assert processor_error_message(RuntimeError("card declined")) == "card declined"
    assert processor_error_message(RuntimeError({"code": 1})) == "Internal Server Error"
    assert processor_error_message(RuntimeError()) == "Internal Server Error"
