from __future__ import annotations

from dataclasses import dataclass

import multibase
import pytest
from ecdsa import SECP256k1, SigningKey, VerifyingKey
from ecdsa.util import sigencode_der

from didtrust.anchor import anchor_from_public_key, from_public_key, public_key_from_did
from didtrust.didkey import format_key_uri, parse_key_uri
from didtrust.errors import (
    InvalidDIDError,
    InvalidKeyError,
    InvalidVarintError,
    MultibaseDecodeError,
    TruncatedPayloadError,
    UnsupportedEncodingError,
    UnsupportedKeyTypeError,
)
from didtrust.keys import eth_message_hash, generate_key_pair, unmarshal_eth_public_key
from didtrust.types import KeyType
from didtrust.uvarint import put_uvarint


@dataclass(frozen=True)
class BogusKey:
    key_type: int = 0xAA

    def raw(self) -> bytes:
        return b"\x01\x02\x03"

    def verify(self, data: bytes, sig: bytes) -> bool:
        return False


@dataclass(frozen=True)
class BadRawKey:
    key_type: int = KeyType.ED25519

    def raw(self) -> bytes:
        raise RuntimeError("raw failure")

    def verify(self, data: bytes, sig: bytes) -> bool:
        return False


def _key_uri(payload: bytes, encoding: str = "base58btc") -> str:
    encoded = multibase.encode(encoding, payload)
    if isinstance(encoded, bytes):
        encoded = encoded.decode("ascii")
    return f"did:key:{encoded}"


@pytest.mark.parametrize("key_type", list(KeyType))
def test_key_uri_round_trip(key_type: KeyType) -> None:
    _, pubk = generate_key_pair(key_type)

    uri = format_key_uri(pubk)

    assert uri.startswith("did:key:z")
    assert format_key_uri(pubk) == uri
    recovered = parse_key_uri(uri)
    assert recovered == pubk
    assert recovered.raw() == pubk.raw()


def test_ed25519_uri_uses_the_standard_prefix() -> None:
    _, pubk = generate_key_pair(KeyType.ED25519)
    assert format_key_uri(pubk).startswith("did:key:z6Mk")


def test_did_from_public_key_round_trip() -> None:
    _, pubk = generate_key_pair(KeyType.SECP256K1)

    did = from_public_key(pubk)

    assert did.method == "key"
    assert public_key_from_did(did) == pubk


def test_eth_key_verifies_personal_message_signatures() -> None:
    sk = SigningKey.generate(curve=SECP256k1)
    pubk = unmarshal_eth_public_key(sk.get_verifying_key().to_string("compressed"))

    did = from_public_key(pubk)
    assert public_key_from_did(did) == pubk

    msg = b"eth-personal-message"
    sig = sk.sign_digest(eth_message_hash(msg), sigencode=sigencode_der)
    anchor = anchor_from_public_key(pubk)
    anchor.verify(msg, sig)
    assert pubk.verify(b"tamper", sig) is False


def test_parse_rejects_non_base58_multibase() -> None:
    with pytest.raises(UnsupportedEncodingError, match="unexpected multibase"):
        parse_key_uri("did:key:uSGVsbG8")


def test_unsupported_encoding_is_a_decode_error() -> None:
    with pytest.raises(MultibaseDecodeError):
        parse_key_uri("did:key:uSGVsbG8")


@pytest.mark.parametrize("uri", ["did:key:z!@#$", "did:key:notBase58", "did:key:"])
def test_parse_rejects_malformed_multibase(uri: str) -> None:
    with pytest.raises(MultibaseDecodeError, match="decoding multibase"):
        parse_key_uri(uri)


def test_parse_rejects_unknown_codec() -> None:
    uri = _key_uri(put_uvarint(0x99) + b"\xff" * 32)
    with pytest.raises(UnsupportedKeyTypeError):
        parse_key_uri(uri)


def test_parse_rejects_tag_without_key_bytes() -> None:
    uri = _key_uri(put_uvarint(0xED))
    with pytest.raises(TruncatedPayloadError):
        parse_key_uri(uri)


def test_parse_rejects_short_key_body() -> None:
    uri = _key_uri(put_uvarint(0xE7) + b"\x02" * 10)
    with pytest.raises(TruncatedPayloadError):
        parse_key_uri(uri)


def test_parse_rejects_truncated_varint() -> None:
    uri = _key_uri(b"\x81")
    with pytest.raises(TruncatedPayloadError):
        parse_key_uri(uri)


def test_parse_rejects_overlong_ed25519_body() -> None:
    uri = _key_uri(put_uvarint(0xED) + b"\x01" * 33)
    with pytest.raises(InvalidKeyError):
        parse_key_uri(uri)


def test_parse_requires_key_prefix() -> None:
    with pytest.raises(InvalidDIDError):
        parse_key_uri("did:web:xyz")


def test_format_unsupported_key_type_is_empty() -> None:
    assert format_key_uri(BogusKey()) == ""
    assert from_public_key(BogusKey()).empty is True


def test_format_raw_failure_is_empty() -> None:
    assert format_key_uri(BadRawKey()) == ""


def test_parse_rejects_non_minimal_varint() -> None:
    uri = _key_uri(b"\x81\x00" + b"\x01" * 32)
    with pytest.raises(InvalidVarintError):
        parse_key_uri(uri)


@pytest.mark.parametrize("key_type", [KeyType.SECP256K1, KeyType.ETH])
def test_directly_built_uncompressed_keys_round_trip(key_type: KeyType) -> None:
    _, pubk = generate_key_pair(key_type)
    uncompressed = VerifyingKey.from_string(pubk.raw(), curve=SECP256k1).to_string("uncompressed")

    key = type(pubk)(uncompressed)

    assert parse_key_uri(format_key_uri(key)) == key
