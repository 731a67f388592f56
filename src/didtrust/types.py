"""Shared datatypes for didtrust."""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum
from typing import Any


class KeyType(IntEnum):
    ED25519 = 1
    SECP256K1 = 2
    ETH = 4


@dataclass(frozen=True)
class KeyID:
    """Opaque peer id carrying a marshalled public key."""

    public_key: bytes


@dataclass(frozen=True)
class LedgerKeyOutput:
    key: str
    address: str


@dataclass(frozen=True)
class LedgerSignECDSAOutput:
    v: int
    r: str
    s: str


@dataclass(frozen=True)
class LedgerSignOutput:
    ecdsa: LedgerSignECDSAOutput


class JsonDict(dict[str, Any]):
    """Typed alias for JSON dictionaries read from the ledger CLI."""
