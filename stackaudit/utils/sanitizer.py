"""
Redaction of credential-looking values in text the audit echoes back.

Evidence lines come straight from source files and commit messages, so the
matched value must never reach the terminal or a CI log.
"""

from __future__ import annotations

import re

from stackaudit.constants import MAX_REPORT_VALUE_LENGTH, SECRET_KEYWORDS, SECRET_PATTERNS

REDACTED = "[REDACTED]"

_CONTROL_CHARS = re.compile(r"[\x00-\x08\x0b\x0c\x0e-\x1f\x7f]")

# Longest keyword first so "secret_key" wins over "secret"
_KEYWORD_ASSIGNMENT = re.compile(
    r"(?i)("
    + "|".join(re.escape(kw) for kw in sorted(SECRET_KEYWORDS, key=len, reverse=True))
    + r")\s*[:=]\s*['\"]?[^\s'\"]+['\"]?"
)


def redact_secrets(text: str) -> str:
    """Replace known token shapes and `keyword = value` assignments."""
    for pattern in SECRET_PATTERNS.values():
        text = pattern.sub(REDACTED, text)
    return _KEYWORD_ASSIGNMENT.sub(lambda m: f"{m.group(1)}={REDACTED}", text)


def sanitize_for_display(value: object, max_length: int = MAX_REPORT_VALUE_LENGTH) -> str:
    """
    Prepare one evidence line for the console.

    Control characters are dropped, secrets redacted and the result cut to
    max_length characters, ending in "..." when cut.
    """
    if value is None:
        return ""

    text = redact_secrets(_CONTROL_CHARS.sub("", str(value)))
    if len(text) > max_length:
        text = text[:max_length - 3] + "..."
    return text
