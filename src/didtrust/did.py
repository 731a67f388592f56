"""Decentralized identifier value type."""

from __future__ import annotations

from dataclasses import dataclass

from didtrust.errors import InvalidDIDError


@dataclass(frozen=True)
class DID:
    uri: str = ""

    def __str__(self) -> str:
        return self.uri

    @property
    def empty(self) -> bool:
        return self.uri == ""

    @property
    def method(self) -> str:
        parts = self.uri.split(":")
        if len(parts) == 3:
            return parts[1]
        return ""

    @property
    def identifier(self) -> str:
        parts = self.uri.split(":")
        if len(parts) == 3:
            return parts[2]
        return ""


def from_string(value: str) -> DID:
    """Parse ``did:<method>:<identifier>``; the empty string is the zero DID."""
    if value:
        parts = value.split(":")
        if len(parts) != 3 or not all(parts):
            raise InvalidDIDError(f"invalid DID: {value}")

    return DID(uri=value)
