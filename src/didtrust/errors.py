"""Exceptions raised by didtrust."""

from __future__ import annotations


class DIDError(ValueError):
    """Base exception for DID operations."""


class InvalidDIDError(DIDError):
    """Malformed DID string, or a DID of the wrong method."""


class UnsupportedKeyTypeError(DIDError):
    """Key type or multicodec tag that has no DID key encoding."""


class InvalidKeyError(DIDError):
    """Key bytes that do not unmarshal to a key of the expected type."""


class MultibaseDecodeError(DIDError):
    """Malformed multibase text."""


class UnsupportedEncodingError(MultibaseDecodeError):
    """Well-formed multibase text in a base other than base58btc."""


class TruncatedPayloadError(DIDError):
    """Decoded payload ends before the varint tag or the key body."""


class InvalidVarintError(DIDError):
    """Varint that overflows 64 bits or is not minimally encoded."""


class InvalidSignatureError(DIDError):
    """Signature verification failed."""


class NoAnchorMethodError(DIDError):
    """No anchor factory is registered for the DID method."""


class AnchorResolutionError(DIDError):
    """Resolving an anchor for a DID failed; the cause is chained."""


class NoProviderError(DIDError):
    """No signing provider is registered for the DID."""


class HardwareKeyError(DIDError):
    """Private key material cannot leave a hardware signer."""


class LedgerError(DIDError):
    """The ledger CLI could not be run or produced unusable output."""
