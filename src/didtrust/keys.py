"""Typed key pairs backing DID anchors and providers.

Three algorithms are supported, each as its own public/private key class:

- Ed25519 (``nacl.signing``), 32 raw public key bytes.
- Secp256k1 (``ecdsa``), 33-byte compressed point; signs sha256 digests and
  emits DER signatures.
- Ethereum-style secp256k1, same point format; signs the keccak256 digest of
  the personal-message envelope ``"\\x19Ethereum Signed Message:\\n" + len``.
"""

from __future__ import annotations

import hashlib
from dataclasses import dataclass, field
from typing import Callable, ClassVar, Protocol, Union

from ecdsa import SECP256k1, BadSignatureError as EcdsaBadSignatureError
from ecdsa import SigningKey as EcdsaSigningKey
from ecdsa import VerifyingKey as EcdsaVerifyingKey
from ecdsa.errors import MalformedPointError
from ecdsa.util import sigdecode_der, sigencode_der
from eth_utils import keccak
from nacl.exceptions import BadSignatureError
from nacl.signing import SigningKey, VerifyKey

from didtrust.errors import (
    InvalidKeyError,
    InvalidVarintError,
    TruncatedPayloadError,
    UnsupportedKeyTypeError,
)
from didtrust.types import KeyID, KeyType
from didtrust.uvarint import put_uvarint, read_uvarint

ED25519_PUBLIC_KEY_SIZE = 32
ED25519_SEED_SIZE = 32
SECP256K1_COMPRESSED_SIZE = 33
SECP256K1_UNCOMPRESSED_SIZE = 65
SECP256K1_SECRET_SIZE = 32

ETH_MESSAGE_PREFIX = b"\x19Ethereum Signed Message:\n"

# protobuf field tags of the marshalled key envelope
_FIELD_TYPE = 0x08
_FIELD_DATA = 0x12


class PublicKey(Protocol):
    @property
    def key_type(self) -> int: ...

    def raw(self) -> bytes: ...

    def verify(self, data: bytes, sig: bytes) -> bool: ...


class PrivateKey(Protocol):
    @property
    def key_type(self) -> int: ...

    def raw(self) -> bytes: ...

    def sign(self, data: bytes) -> bytes: ...

    def public_key(self) -> PublicKey: ...


def eth_message_hash(data: bytes) -> bytes:
    return keccak(ETH_MESSAGE_PREFIX + str(len(data)).encode("ascii") + data)


def _verifying_key(point: bytes) -> EcdsaVerifyingKey:
    return EcdsaVerifyingKey.from_string(point, curve=SECP256k1)


def _signing_key(secret: bytes) -> EcdsaSigningKey:
    return EcdsaSigningKey.from_string(secret, curve=SECP256k1)


def _compressed_point(data: bytes) -> bytes:
    if len(data) not in (SECP256K1_COMPRESSED_SIZE, SECP256K1_UNCOMPRESSED_SIZE):
        raise InvalidKeyError(f"malformed secp256k1 public key: {len(data)} bytes")
    try:
        return _verifying_key(data).to_string("compressed")
    except (MalformedPointError, ValueError) as error:
        raise InvalidKeyError(f"malformed secp256k1 public key: {error}") from error


@dataclass(frozen=True)
class Ed25519PublicKey:
    data: bytes
    key_type: ClassVar[KeyType] = KeyType.ED25519

    def __post_init__(self) -> None:
        if len(self.data) != ED25519_PUBLIC_KEY_SIZE:
            raise InvalidKeyError(
                f"expected ed25519 public key data size to be {ED25519_PUBLIC_KEY_SIZE}, got {len(self.data)}",
            )
        object.__setattr__(self, "data", bytes(self.data))

    def raw(self) -> bytes:
        return bytes(self.data)

    def verify(self, data: bytes, sig: bytes) -> bool:
        try:
            VerifyKey(self.data).verify(data, sig)
        except (BadSignatureError, ValueError):
            return False
        return True


@dataclass(frozen=True)
class Secp256k1PublicKey:
    data: bytes
    key_type: ClassVar[KeyType] = KeyType.SECP256K1

    def __post_init__(self) -> None:
        # points are always held compressed
        object.__setattr__(self, "data", _compressed_point(self.data))

    def raw(self) -> bytes:
        return bytes(self.data)

    def verify(self, data: bytes, sig: bytes) -> bool:
        try:
            return _verifying_key(self.data).verify(
                sig,
                data,
                hashfunc=hashlib.sha256,
                sigdecode=sigdecode_der,
            )
        except EcdsaBadSignatureError:
            return False


@dataclass(frozen=True)
class EthPublicKey:
    data: bytes
    key_type: ClassVar[KeyType] = KeyType.ETH

    def __post_init__(self) -> None:
        object.__setattr__(self, "data", _compressed_point(self.data))

    def raw(self) -> bytes:
        return bytes(self.data)

    def verify(self, data: bytes, sig: bytes) -> bool:
        try:
            return _verifying_key(self.data).verify_digest(
                sig,
                eth_message_hash(data),
                sigdecode=sigdecode_der,
            )
        except EcdsaBadSignatureError:
            return False


@dataclass(frozen=True)
class Ed25519PrivateKey:
    seed: bytes = field(repr=False)
    key_type: ClassVar[KeyType] = KeyType.ED25519

    def raw(self) -> bytes:
        return bytes(self.seed)

    def sign(self, data: bytes) -> bytes:
        return SigningKey(self.seed).sign(data).signature

    def public_key(self) -> Ed25519PublicKey:
        return Ed25519PublicKey(bytes(SigningKey(self.seed).verify_key))


@dataclass(frozen=True)
class Secp256k1PrivateKey:
    secret: bytes = field(repr=False)
    key_type: ClassVar[KeyType] = KeyType.SECP256K1

    def raw(self) -> bytes:
        return bytes(self.secret)

    def sign(self, data: bytes) -> bytes:
        return _signing_key(self.secret).sign_deterministic(
            data,
            hashfunc=hashlib.sha256,
            sigencode=sigencode_der,
        )

    def public_key(self) -> Secp256k1PublicKey:
        point = _signing_key(self.secret).get_verifying_key().to_string("compressed")
        return Secp256k1PublicKey(point)


@dataclass(frozen=True)
class EthPrivateKey:
    secret: bytes = field(repr=False)
    key_type: ClassVar[KeyType] = KeyType.ETH

    def raw(self) -> bytes:
        return bytes(self.secret)

    def sign(self, data: bytes) -> bytes:
        return _signing_key(self.secret).sign_digest_deterministic(
            eth_message_hash(data),
            hashfunc=hashlib.sha256,
            sigencode=sigencode_der,
        )

    def public_key(self) -> EthPublicKey:
        point = _signing_key(self.secret).get_verifying_key().to_string("compressed")
        return EthPublicKey(point)


AnyPublicKey = Union[Ed25519PublicKey, Secp256k1PublicKey, EthPublicKey]
AnyPrivateKey = Union[Ed25519PrivateKey, Secp256k1PrivateKey, EthPrivateKey]


def unmarshal_ed25519_public_key(data: bytes) -> Ed25519PublicKey:
    return Ed25519PublicKey(bytes(data))


def unmarshal_secp256k1_public_key(data: bytes) -> Secp256k1PublicKey:
    return Secp256k1PublicKey(bytes(data))


def unmarshal_eth_public_key(data: bytes) -> EthPublicKey:
    return EthPublicKey(bytes(data))


def unmarshal_private_key(key_type: KeyType, data: bytes) -> AnyPrivateKey:
    if key_type == KeyType.ED25519:
        if len(data) != ED25519_SEED_SIZE:
            raise InvalidKeyError(f"expected ed25519 seed size to be {ED25519_SEED_SIZE}, got {len(data)}")
        return Ed25519PrivateKey(bytes(data))

    if key_type not in (KeyType.SECP256K1, KeyType.ETH):
        raise UnsupportedKeyTypeError(f"unsupported key type: {key_type}")
    if len(data) != SECP256K1_SECRET_SIZE:
        raise InvalidKeyError(f"expected secp256k1 secret size to be {SECP256K1_SECRET_SIZE}, got {len(data)}")
    try:
        _signing_key(data)
    except (MalformedPointError, ValueError) as error:
        raise InvalidKeyError(f"malformed secp256k1 private key: {error}") from error
    if key_type == KeyType.ETH:
        return EthPrivateKey(bytes(data))
    return Secp256k1PrivateKey(bytes(data))


def generate_key_pair(key_type: KeyType) -> tuple[AnyPrivateKey, AnyPublicKey]:
    if key_type == KeyType.ED25519:
        private_key: AnyPrivateKey = Ed25519PrivateKey(bytes(SigningKey.generate()))
    elif key_type == KeyType.SECP256K1:
        private_key = Secp256k1PrivateKey(EcdsaSigningKey.generate(curve=SECP256k1).to_string())
    elif key_type == KeyType.ETH:
        private_key = EthPrivateKey(EcdsaSigningKey.generate(curve=SECP256k1).to_string())
    else:
        raise UnsupportedKeyTypeError(f"unsupported key type: {key_type}")
    return private_key, private_key.public_key()


_PUBLIC_KEY_UNMARSHALLERS: dict[int, Callable[[bytes], AnyPublicKey]] = {
    KeyType.ED25519: unmarshal_ed25519_public_key,
    KeyType.SECP256K1: unmarshal_secp256k1_public_key,
    KeyType.ETH: unmarshal_eth_public_key,
}


def marshal_public_key(pubk: PublicKey) -> bytes:
    raw = pubk.raw()
    return (
        bytes([_FIELD_TYPE])
        + put_uvarint(int(pubk.key_type))
        + bytes([_FIELD_DATA])
        + put_uvarint(len(raw))
        + raw
    )


def unmarshal_public_key(data: bytes) -> AnyPublicKey:
    key_type: int | None = None
    raw: bytes | None = None
    offset = 0
    try:
        while offset < len(data):
            tag = data[offset]
            offset += 1
            if tag == _FIELD_TYPE:
                key_type, read = read_uvarint(data, offset)
                offset += read
            elif tag == _FIELD_DATA:
                size, read = read_uvarint(data, offset)
                offset += read
                if offset + size > len(data):
                    raise InvalidKeyError("marshalled public key data is truncated")
                raw = bytes(data[offset:offset + size])
                offset += size
            else:
                raise InvalidKeyError(f"unexpected field 0x{tag:02x} in marshalled public key")
    except (TruncatedPayloadError, InvalidVarintError) as error:
        raise InvalidKeyError(f"malformed marshalled public key: {error}") from error

    if key_type is None or raw is None:
        raise InvalidKeyError("marshalled public key is missing its type or data")

    unmarshal = _PUBLIC_KEY_UNMARSHALLERS.get(key_type)
    if unmarshal is None:
        raise UnsupportedKeyTypeError(f"unsupported key type: {key_type}")
    return unmarshal(raw)


def id_from_public_key(pubk: PublicKey) -> KeyID:
    return KeyID(public_key=marshal_public_key(pubk))


def public_key_from_id(key_id: KeyID) -> AnyPublicKey:
    return unmarshal_public_key(key_id.public_key)
