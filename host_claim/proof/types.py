"""Proof token datatypes."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional
from uuid import UUID

NULL_UUID = UUID(int=0)


@dataclass(frozen=True)
class ProofToken:
    value: UUID
    backing_path: Optional[str] = None

    @property
    def canonical(self) -> str:
        """Lowercase hyphenated form written to disk and typed by operators."""
        return str(self.value)

    @property
    def is_null(self) -> bool:
        return self.value == NULL_UUID
