"""Character whitelist for untrusted claim parameters."""

from __future__ import annotations

import string
from typing import Optional

ALLOWED_PUNCTUATION = frozenset(".,-:/_")
ALLOWED_CHARS = frozenset(string.ascii_letters + string.digits) | ALLOWED_PUNCTUATION


def is_valid(value: Optional[str]) -> bool:
    """Return True when ``value`` is absent or only uses whitelisted characters."""
    if not value:
        return True
    return all(ch in ALLOWED_CHARS for ch in value)
