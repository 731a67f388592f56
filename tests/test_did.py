from __future__ import annotations

import pytest

from didtrust.did import DID, from_string
from didtrust.errors import InvalidDIDError


def test_from_string_parses_method_and_identifier() -> None:
    did = from_string("did:example:123456789abcdefghi")

    assert did.method == "example"
    assert did.identifier == "123456789abcdefghi"
    assert str(did) == "did:example:123456789abcdefghi"
    assert did.empty is False


@pytest.mark.parametrize(
    "value",
    ["invalid:did", "did::invalid", "did:example:", "did:example:123:456"],
)
def test_from_string_rejects_malformed(value: str) -> None:
    with pytest.raises(InvalidDIDError):
        from_string(value)


def test_from_string_empty_is_zero_did() -> None:
    did = from_string("")

    assert did == DID()
    assert did.empty is True
    assert str(did) == ""
    assert did.method == ""
    assert did.identifier == ""


@pytest.mark.parametrize("uri", ["did:key", "did::", "notaDID"])
def test_method_and_identifier_blank_for_unvalidated_uris(uri: str) -> None:
    did = DID(uri=uri)
    assert did.method == ""
    assert did.identifier == ""


def test_equality_and_hashing() -> None:
    a = DID("did:key:abc")
    b = DID("did:key:abc")
    c = DID("did:key:def")

    assert a == b and b == a
    assert a != c
    assert len({a, b, c}) == 2
