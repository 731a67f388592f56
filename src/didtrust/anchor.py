"""Verification anchors and signing providers bound to a DID."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Protocol

from didtrust.did import DID
from didtrust.didkey import format_key_uri, parse_key_uri
from didtrust.errors import InvalidDIDError, InvalidSignatureError, UnsupportedKeyTypeError
from didtrust.keys import AnyPublicKey, PrivateKey, PublicKey, public_key_from_id
from didtrust.types import KeyID


class Anchor(Protocol):
    """Public key material that verifies signatures made under a DID."""

    @property
    def did(self) -> DID: ...

    @property
    def public_key(self) -> PublicKey: ...

    def verify(self, data: bytes, sig: bytes) -> None: ...


class Provider(Protocol):
    """Private key material that signs statements for a DID."""

    @property
    def did(self) -> DID: ...

    def sign(self, data: bytes) -> bytes: ...

    def anchor(self) -> Anchor: ...

    def private_key(self) -> PrivateKey: ...


@dataclass(frozen=True)
class PublicKeyAnchor:
    did: DID
    public_key: PublicKey

    def verify(self, data: bytes, sig: bytes) -> None:
        if not self.public_key.verify(data, sig):
            raise InvalidSignatureError(f"signature verification failed for {self.did}")


@dataclass(frozen=True)
class PrivateKeyProvider:
    did: DID
    key: PrivateKey = field(repr=False)

    def sign(self, data: bytes) -> bytes:
        return self.key.sign(data)

    def anchor(self) -> PublicKeyAnchor:
        return PublicKeyAnchor(did=self.did, public_key=self.key.public_key())

    def private_key(self) -> PrivateKey:
        return self.key


def from_public_key(pubk: PublicKey) -> DID:
    """DID for ``pubk``; the empty DID when the key type is unsupported."""
    return DID(uri=format_key_uri(pubk))


def from_id(key_id: KeyID) -> DID:
    return from_public_key(public_key_from_id(key_id))


def public_key_from_did(did: DID) -> AnyPublicKey:
    if did.method != "key":
        raise InvalidDIDError(f"not a key DID: {did}")
    return parse_key_uri(did.uri)


def _key_did(pubk: PublicKey) -> DID:
    did = from_public_key(pubk)
    if did.empty:
        raise UnsupportedKeyTypeError(f"cannot encode key type {pubk.key_type} as a DID")
    return did


def anchor_from_public_key(pubk: PublicKey) -> PublicKeyAnchor:
    return PublicKeyAnchor(did=_key_did(pubk), public_key=pubk)


def provider_from_private_key(privk: PrivateKey) -> PrivateKeyProvider:
    return PrivateKeyProvider(did=_key_did(privk.public_key()), key=privk)
