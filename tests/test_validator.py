"""
Unit tests for the field-level validation engine.
"""

import pytest

from utils.validator import (
    EMAIL_RX,
    ValidationFailed,
    Validator,
    matches,
    permitted_value,
    unique,
)


def test_new_validator_is_valid():
    v = Validator()
    assert v.valid
    assert v.errors == {}


def test_check_records_failure():
    v = Validator()
    v.check(False, "title", "must be provided")
    assert not v.valid
    assert v.errors == {"title": "must be provided"}


def test_passing_check_records_nothing():
    v = Validator()
    v.check(True, "title", "must be provided")
    assert v.valid


def test_first_error_wins_per_field():
    v = Validator()
    v.check(False, "page", "must be greater than zero")
    v.check(False, "page", "must be a maximum of 10 million")
    assert v.errors == {"page": "must be greater than zero"}


def test_all_fields_are_collected():
    v = Validator()
    v.check(False, "title", "must be provided")
    v.check(False, "year", "must be provided")
    v.check(True, "runtime", "must be provided")
    assert set(v.errors) == {"title", "year"}


def test_ensure_valid_raises_with_every_error():
    v = Validator()
    v.check(False, "name", "must be provided")
    v.check(False, "email", "must be a valid email address")
    with pytest.raises(ValidationFailed) as exc:
        v.ensure_valid()
    assert exc.value.errors == {
        "name": "must be provided",
        "email": "must be a valid email address",
    }


def test_ensure_valid_passes_when_clean():
    Validator().ensure_valid()


def test_failure_mapping_is_a_copy():
    v = Validator()
    v.add_error("name", "must be provided")
    failure = ValidationFailed(v.errors)
    v.add_error("email", "must be provided")
    assert failure.errors == {"name": "must be provided"}


def test_permitted_value():
    assert permitted_value("-year", "id", "-year")
    assert not permitted_value("year; DROP TABLE movies", "id", "-year")


def test_unique():
    assert unique(["drama", "war"])
    assert not unique(["drama", "drama"])
    assert unique([])


@pytest.mark.parametrize("email", ["alice@example.com", "a.b+c@sub.example.org"])
def test_email_rx_accepts(email):
    assert matches(email, EMAIL_RX)


@pytest.mark.parametrize("email", ["", "alice", "alice@", "@example.com", "alice@-example.com"])
def test_email_rx_rejects(email):
    assert not matches(email, EMAIL_RX)


def test_email_rx_rejects_trailing_newline():
    assert not matches("alice@example.com\n", EMAIL_RX)
