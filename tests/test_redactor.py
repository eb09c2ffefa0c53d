"""Unit tests for the PII redactor."""

import pytest

from evalboard.engine.redactor import REDACTION_TOKEN, find_pii, redact


@pytest.mark.parametrize(
    "text, kind",
    [
        ("mail jane.doe+test@example.co.uk today", "email"),
        ("card 4111 1111 1111 1111 on file", "card"),
        ("card 4111-1111-1111-1111 on file", "card"),
        ("ssn 123-45-6789 please", "ssn"),
        ("call 555-123-4567 now", "phone"),
        ("call (555) 123-4567 now", "phone"),
        ("call +1 555 123 4567 now", "phone"),
        ("call 555.123.4567 now", "phone"),
        ("host 192.168.0.12 is up", "ipv4"),
    ],
)
def test_detects_each_kind(text, kind):
    """Each supported shape is detected and masked once."""
    assert [k for k, _ in find_pii(text)] == [kind]
    masked, count = redact(text)
    assert count == 1
    assert REDACTION_TOKEN in masked


def test_counts_every_span():
    """Count equals the number of replaced spans."""
    text = "Reach me at bob@example.com or 555-123-4567, SSN 123-45-6789."
    masked, count = redact(text)
    assert count == 3
    assert masked == f"Reach me at {REDACTION_TOKEN} or {REDACTION_TOKEN}, SSN {REDACTION_TOKEN}."


def test_text_without_pii_unchanged():
    """Plain prose, short numbers and years are left alone."""
    text = "Order 12345 shipped in 2024; version 1.2.3 is current."
    assert redact(text) == (text, 0)


def test_empty_text():
    assert redact("") == ("", 0)


@pytest.mark.parametrize(
    "text",
    [
        "Contact alice@example.com, phone (555) 123-4567.",
        "a@b.com5551234567",
        "ip 10.0.0.1 and card 4111111111111111 and 123-45-6789",
        "[REDACTED]555-123-4567",
        "no pii here",
    ],
)
def test_redaction_idempotent(text):
    """Masking already-masked text finds nothing more."""
    masked, _ = redact(text)
    assert redact(masked) == (masked, 0)


def test_placeholder_not_detected():
    assert redact(REDACTION_TOKEN) == (REDACTION_TOKEN, 0)
