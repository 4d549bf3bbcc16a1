from __future__ import annotations

import pytest

from user_service.errors import ValidationError
from user_service.validation import (
    AGE_NOT_POSITIVE,
    EMAIL_INVALID,
    NAME_EMPTY,
    find_violation,
    validate,
)


@pytest.mark.parametrize(
    ("name", "email", "age"),
    [
        ("Alice", "alice@x.com", 30),
        ("  Bob  ", "@", 1),
        ("Zoë", "user@localhost", 120),
    ],
)
def test_valid_input_passes(name, email, age) -> None:
    assert find_violation(name, email, age) is None
    validate(name, email, age)


@pytest.mark.parametrize(
    ("name", "email", "age", "expected"),
    [
        (None, "a@b.com", 30, NAME_EMPTY),
        ("", "a@b.com", 30, NAME_EMPTY),
        ("   \t", "a@b.com", 30, NAME_EMPTY),
        ("Alice", None, 30, EMAIL_INVALID),
        ("Alice", "alice.example.com", 30, EMAIL_INVALID),
        ("Alice", "", 30, EMAIL_INVALID),
        ("Alice", "a@b.com", 0, AGE_NOT_POSITIVE),
        ("Alice", "a@b.com", -5, AGE_NOT_POSITIVE),
    ],
)
def test_single_violation_reports_its_rule(name, email, age, expected) -> None:
    assert find_violation(name, email, age) == expected
    with pytest.raises(ValidationError) as excinfo:
        validate(name, email, age)
    assert excinfo.value.reason == expected
    assert str(excinfo.value) == expected


def test_name_rule_wins_over_email_and_age() -> None:
    assert find_violation("", "not-an-email", -1) == NAME_EMPTY


def test_email_rule_wins_over_age() -> None:
    assert find_violation("Alice", "not-an-email", 0) == EMAIL_INVALID


def test_validation_error_is_a_value_error() -> None:
    with pytest.raises(ValueError):
        validate("Alice", "a@b.com", 0)
