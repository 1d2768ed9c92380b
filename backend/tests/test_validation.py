import logging

import pytest

from contactform.lib.decoding import IncomingMessage
from contactform.lib.validation import EMAIL_RE, TEXT_RE, validate_incoming_message


def make_msg(**overrides) -> IncomingMessage:
    fields = {"Name": "Jo", "Email": "jo@example.com", "Title": "Hi", "Body": "Hello there"}
    fields.update(overrides)
    return IncomingMessage.model_validate(fields)


@pytest.mark.parametrize(
    "email",
    [
        "jo@example.com",
        "jo.smith@mail.example.co.uk",
        "first-last+tag@example.org",
        '"jo doe"@example.com',
        "jo@[192.168.0.1]",
    ],
)
def test_email_pattern_accepts(email):
    assert EMAIL_RE.fullmatch(email)


@pytest.mark.parametrize(
    "email",
    [
        "",
        "jo",
        "jo@example",
        "jo@@example.com",
        "jo..smith@example.com",
        "jo@example.c",
        "jo smith@example.com",
        "<jo>@example.com",
        "jo@example.com\n",
    ],
)
def test_email_pattern_rejects(email):
    assert not EMAIL_RE.fullmatch(email)


@pytest.mark.parametrize(
    "text",
    ["", "Hello there", "Q: $5 & 10% off? #1 'ok' \"yes\" ^_^ a.b-c @ home, now!"],
)
def test_text_pattern_accepts(text):
    assert TEXT_RE.fullmatch(text)


@pytest.mark.parametrize(
    "text",
    ["<script>", "a > b", "one; two", "line\nbreak", "tab\there", "café", "(x)", "a/b"],
)
def test_text_pattern_rejects(text):
    assert not TEXT_RE.fullmatch(text)


def test_valid_message_passes():
    assert validate_incoming_message(make_msg()) is True


@pytest.mark.parametrize(
    "field,value",
    [
        ("Email", "not-an-email"),
        ("Name", "Jo <admin>"),
        ("Title", "Hi; DROP TABLE"),
        ("Body", "<b>bold</b>"),
    ],
)
def test_each_field_is_checked(field, value):
    assert validate_incoming_message(make_msg(**{field: value})) is False


def test_validation_short_circuits_on_email(caplog):
    msg = make_msg(Email="bad", Name="<bad>")
    with caplog.at_level(logging.DEBUG, logger="uvicorn.error"):
        assert validate_incoming_message(msg) is False
    failures = [r.getMessage() for r in caplog.records if "failed validation" in r.getMessage()]
    assert failures == ["[contact] rejected submission: Email failed validation"]
