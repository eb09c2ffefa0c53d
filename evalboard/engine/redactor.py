"""PII redactor - masks identifiable spans in free text and counts them."""

import re

REDACTION_TOKEN = "[REDACTED]"

# Order matters: at a given position the first alternative that matches wins,
# so longer digit shapes (cards, SSNs) are tried before phone numbers.
PII_PATTERNS: dict[str, str] = {
    "email": r"[A-Za-z0-9._%+-]+@[A-Za-z0-9.-]+\.[A-Za-z]{2,}",
    "card": r"(?:\d{4}[ -]?){3}\d{4}",
    "ssn": r"\d{3}-\d{2}-\d{4}",
    "phone": r"(?:\+?1[-.\s]?)?(?:\(\d{3}\)|\d{3})[-.\s]?\d{3}[-.\s]?\d{4}",
    "ipv4": r"(?:(?:25[0-5]|2[0-4]\d|1?\d?\d)\.){3}(?:25[0-5]|2[0-4]\d|1?\d?\d)",
}

# A span may not touch a word character or a bracket. The placeholder is
# bracketed, so text next to an earlier replacement never matches on a rescan.
_BEFORE = r"(?<![\w\[\]+])"
_AFTER = r"(?![\w\[\]])"

_COMBINED = re.compile(
    "|".join(f"(?P<{name}>{_BEFORE}{pattern}{_AFTER})" for name, pattern in PII_PATTERNS.items())
)


def redact(text: str) -> tuple[str, int]:
    """
    Replace every PII span in text with REDACTION_TOKEN.
    Returns (masked_text, spans_replaced). Spans never overlap.
    """
    if not text:
        return text, 0
    return _COMBINED.subn(REDACTION_TOKEN, text)


def find_pii(text: str) -> list[tuple[str, str]]:
    """List (kind, matched_text) pairs in scan order, without masking."""
    return [(m.lastgroup or "", m.group(0)) for m in _COMBINED.finditer(text or "")]
