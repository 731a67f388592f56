"""Per-method anchor construction for arbitrary DIDs."""

from __future__ import annotations

import threading
from typing import Callable, Mapping

from didtrust.anchor import Anchor, PublicKeyAnchor, public_key_from_did
from didtrust.did import DID
from didtrust.errors import NoAnchorMethodError

AnchorFactory = Callable[[DID], Anchor]


def make_key_anchor(did: DID) -> PublicKeyAnchor:
    return PublicKeyAnchor(did=did, public_key=public_key_from_did(did))


DEFAULT_ANCHOR_METHODS: Mapping[str, AnchorFactory] = {
    "key": make_key_anchor,
}


class AnchorResolver:
    """Maps DID methods to anchor factories.

    Each resolver owns its table; registering a method on one instance does
    not affect any other.
    """

    def __init__(self, methods: Mapping[str, AnchorFactory] | None = None) -> None:
        self._methods: dict[str, AnchorFactory] = dict(
            DEFAULT_ANCHOR_METHODS if methods is None else methods,
        )
        self._lock = threading.Lock()

    def register(self, method: str, factory: AnchorFactory) -> None:
        if not method:
            raise ValueError("DID method is required")
        with self._lock:
            self._methods[method] = factory

    def unregister(self, method: str) -> None:
        with self._lock:
            self._methods.pop(method, None)

    def methods(self) -> list[str]:
        with self._lock:
            return sorted(self._methods)

    def resolve(self, did: DID) -> Anchor:
        with self._lock:
            factory = self._methods.get(did.method)
        if factory is None:
            raise NoAnchorMethodError(f"no anchor method for {did.method or did.uri!r}")
        return factory(did)
