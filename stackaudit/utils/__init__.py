"""Utility modules."""

from stackaudit.utils.sanitizer import REDACTED, redact_secrets, sanitize_for_display

__all__ = [
    "REDACTED",
    "redact_secrets",
    "sanitize_for_display",
]
