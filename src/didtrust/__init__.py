"""didtrust: did:key identities, signing anchors, and a cached trust context."""

from didtrust.anchor import (
    Anchor,
    PrivateKeyProvider,
    Provider,
    PublicKeyAnchor,
    anchor_from_public_key,
    from_id,
    from_public_key,
    provider_from_private_key,
    public_key_from_did,
)
from didtrust.did import DID, from_string
from didtrust.didkey import format_key_uri, parse_key_uri
from didtrust.errors import (
    AnchorResolutionError,
    DIDError,
    HardwareKeyError,
    InvalidDIDError,
    InvalidKeyError,
    InvalidSignatureError,
    InvalidVarintError,
    LedgerError,
    MultibaseDecodeError,
    NoAnchorMethodError,
    NoProviderError,
    TruncatedPayloadError,
    UnsupportedEncodingError,
    UnsupportedKeyTypeError,
)
from didtrust.keys import generate_key_pair, id_from_public_key, public_key_from_id
from didtrust.ledger import LedgerWalletProvider
from didtrust.resolver import AnchorResolver
from didtrust.trust_context import ANCHOR_ENTRY_TTL_SECONDS, TrustContext
from didtrust.types import KeyID, KeyType

__all__ = [
    "ANCHOR_ENTRY_TTL_SECONDS",
    "Anchor",
    "AnchorResolutionError",
    "AnchorResolver",
    "DID",
    "DIDError",
    "HardwareKeyError",
    "InvalidDIDError",
    "InvalidKeyError",
    "InvalidSignatureError",
    "InvalidVarintError",
    "KeyID",
    "KeyType",
    "LedgerError",
    "LedgerWalletProvider",
    "MultibaseDecodeError",
    "NoAnchorMethodError",
    "NoProviderError",
    "PrivateKeyProvider",
    "Provider",
    "PublicKeyAnchor",
    "TrustContext",
    "TruncatedPayloadError",
    "UnsupportedEncodingError",
    "UnsupportedKeyTypeError",
    "anchor_from_public_key",
    "format_key_uri",
    "from_id",
    "from_public_key",
    "from_string",
    "generate_key_pair",
    "id_from_public_key",
    "parse_key_uri",
    "provider_from_private_key",
    "public_key_from_did",
    "public_key_from_id",
]

__version__ = "0.0.1"
