"""Typed extraction of claim request parameters."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Mapping, Optional
from urllib.parse import parse_qsl

from .validator import is_valid

QUERY_FIELDS = {"key": "key", "token": "token", "rooms": "rooms", "url": "base_url"}


class InvalidClaimParameters(ValueError):
    """Raised when claim parameters are missing or fail the whitelist."""

    def __init__(self, field: str, reason: str) -> None:
        super().__init__(f"{field}: {reason}")
        self.field = field
        self.reason = reason


@dataclass(frozen=True)
class ClaimCredentials:
    """Validated values handed to the remote claim call."""

    token: str
    base_url: str
    rooms: Optional[str] = None


@dataclass(frozen=True)
class ClaimParameters:
    key: Optional[str] = None
    token: Optional[str] = None
    rooms: Optional[str] = None
    base_url: Optional[str] = None

    @classmethod
    def from_mapping(cls, values: Mapping[str, str]) -> "ClaimParameters":
        """Build from already-decoded query values, ignoring unknown and empty ones."""
        fields = {}
        for name, attr in QUERY_FIELDS.items():
            value = values.get(name)
            if value:
                fields[attr] = value
        return cls(**fields)

    @classmethod
    def from_query_string(cls, query: str) -> "ClaimParameters":
        """Parse ``a=1&b=2``; later duplicates override earlier ones."""
        values: dict[str, str] = {}
        for name, value in parse_qsl(query or "", keep_blank_values=False):
            if name and value:
                values[name] = value
        return cls.from_mapping(values)

    def credentials(self) -> ClaimCredentials:
        """Return validated credentials or raise :class:`InvalidClaimParameters`."""
        if not self.token:
            raise InvalidClaimParameters("token", "missing")
        if not self.base_url:
            raise InvalidClaimParameters("url", "missing")
        for field, value in (("token", self.token), ("url", self.base_url), ("rooms", self.rooms)):
            if not is_valid(value):
                raise InvalidClaimParameters(field, "contains forbidden characters")
        return ClaimCredentials(token=self.token, base_url=self.base_url, rooms=self.rooms)
