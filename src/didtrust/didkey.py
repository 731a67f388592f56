"""``did:key`` codec: multicodec-tagged public keys in base58btc multibase."""

from __future__ import annotations

import logging
from typing import Callable

import multibase

from didtrust.errors import (
    InvalidDIDError,
    MultibaseDecodeError,
    TruncatedPayloadError,
    UnsupportedEncodingError,
    UnsupportedKeyTypeError,
)
from didtrust.keys import (
    ED25519_PUBLIC_KEY_SIZE,
    SECP256K1_COMPRESSED_SIZE,
    AnyPublicKey,
    PublicKey,
    unmarshal_ed25519_public_key,
    unmarshal_eth_public_key,
    unmarshal_secp256k1_public_key,
)
from didtrust.types import KeyType
from didtrust.uvarint import put_uvarint, read_uvarint

logger = logging.getLogger(__name__)

MULTICODEC_ED25519_PUB = 0xED
MULTICODEC_SECP256K1_PUB = 0xE7
MULTICODEC_ETH_PUB = 0xEF01

KEY_PREFIX = "did:key"
MULTIBASE_ENCODING = "base58btc"

_MULTICODEC_BY_KEY_TYPE: dict[int, int] = {
    KeyType.ED25519: MULTICODEC_ED25519_PUB,
    KeyType.SECP256K1: MULTICODEC_SECP256K1_PUB,
    KeyType.ETH: MULTICODEC_ETH_PUB,
}

# multicodec -> (minimum key body size, unmarshal routine)
_KEY_DECODERS: dict[int, tuple[int, Callable[[bytes], AnyPublicKey]]] = {
    MULTICODEC_ED25519_PUB: (ED25519_PUBLIC_KEY_SIZE, unmarshal_ed25519_public_key),
    MULTICODEC_SECP256K1_PUB: (SECP256K1_COMPRESSED_SIZE, unmarshal_secp256k1_public_key),
    MULTICODEC_ETH_PUB: (SECP256K1_COMPRESSED_SIZE, unmarshal_eth_public_key),
}


def format_key_uri(pubk: PublicKey) -> str:
    """Encode ``pubk`` as a ``did:key`` URI.

    Returns the empty string when the key type has no multicodec tag or the
    raw key bytes cannot be obtained; callers must treat ``""`` as failure.
    """
    codec = _MULTICODEC_BY_KEY_TYPE.get(pubk.key_type)
    if codec is None:
        logger.error("unsupported key type: %s", pubk.key_type)
        return ""

    try:
        raw = pubk.raw()
    except Exception as error:  # noqa: BLE001
        logger.error("raw public key bytes unavailable: %s", error)
        return ""

    encoded = multibase.encode(MULTIBASE_ENCODING, put_uvarint(codec) + raw)
    if isinstance(encoded, bytes):
        encoded = encoded.decode("ascii")
    return f"{KEY_PREFIX}:{encoded}"


def parse_key_uri(uri: str) -> AnyPublicKey:
    prefix = f"{KEY_PREFIX}:"
    if not uri.startswith(prefix):
        raise InvalidDIDError(f"decentralized identifier is not a 'key' type: {uri}")

    payload = uri[len(prefix):].encode("utf-8")
    try:
        encoding = multibase.get_codec(payload).encoding
    except Exception as error:  # noqa: BLE001
        raise MultibaseDecodeError(f"decoding multibase: {error}") from error

    if encoding != MULTIBASE_ENCODING:
        raise UnsupportedEncodingError(f"unexpected multibase encoding: {encoding}")

    try:
        data = multibase.decode(payload)
    except Exception as error:  # noqa: BLE001
        raise MultibaseDecodeError(f"decoding multibase: {error}") from error

    codec, read = read_uvarint(data)
    decoder = _KEY_DECODERS.get(codec)
    if decoder is None:
        raise UnsupportedKeyTypeError(f"unsupported multicodec key type: 0x{codec:x}")

    size, unmarshal = decoder
    body = data[read:]
    if len(body) < size:
        raise TruncatedPayloadError(
            f"key body for multicodec 0x{codec:x} needs {size} bytes, got {len(body)}",
        )
    return unmarshal(body)
