"""Thread-safe registry of verification anchors and signing providers.

Anchors are cached with a TTL that is pushed forward on every lookup;
providers are registered explicitly and never expire. Unknown anchors are
resolved lazily through an :class:`~didtrust.resolver.AnchorResolver`.

Usage:
    ctx = TrustContext()
    ctx.start(gc_interval=60)

    anchor = ctx.get_anchor(did)
    anchor.verify(payload, signature)

    ctx.stop()
"""

from __future__ import annotations

import logging
import threading
import time
from dataclasses import dataclass

from didtrust.anchor import Anchor, Provider, provider_from_private_key
from didtrust.did import DID
from didtrust.errors import AnchorResolutionError, NoProviderError
from didtrust.keys import PrivateKey
from didtrust.resolver import AnchorResolver

logger = logging.getLogger(__name__)

# Anchor cache entries live for one hour after their last lookup
ANCHOR_ENTRY_TTL_SECONDS = 3600

DEFAULT_GC_INTERVAL_SECONDS = 60


@dataclass
class _AnchorEntry:
    anchor: Anchor
    expires_at: float


@dataclass
class _GCTask:
    thread: threading.Thread
    stop_event: threading.Event

    def cancel(self) -> None:
        self.stop_event.set()


class TrustContext:
    """Concurrency-safe anchor cache and provider registry.

    Args:
        resolver: Resolver used for anchors that are not cached. A resolver
            with the default ``key`` method is created if not provided.
        ttl_seconds: Lifetime of a cached anchor after its last lookup.
    """

    def __init__(
        self,
        resolver: AnchorResolver | None = None,
        ttl_seconds: float = ANCHOR_ENTRY_TTL_SECONDS,
    ) -> None:
        self._resolver = resolver or AnchorResolver()
        self._ttl = ttl_seconds
        self._anchors: dict[DID, _AnchorEntry] = {}
        self._providers: dict[DID, Provider] = {}
        self._gc_task: _GCTask | None = None
        self._lock = threading.Lock()

    @classmethod
    def with_provider(cls, provider: Provider, resolver: AnchorResolver | None = None) -> TrustContext:
        ctx = cls(resolver)
        ctx.add_provider(provider)
        return ctx

    @classmethod
    def with_private_key(cls, privk: PrivateKey, resolver: AnchorResolver | None = None) -> TrustContext:
        return cls.with_provider(provider_from_private_key(privk), resolver)

    @property
    def resolver(self) -> AnchorResolver:
        return self._resolver

    @property
    def is_running(self) -> bool:
        with self._lock:
            return self._gc_task is not None

    def anchors(self) -> list[DID]:
        with self._lock:
            return list(self._anchors)

    def providers(self) -> list[DID]:
        with self._lock:
            return list(self._providers)

    def get_anchor(self, did: DID) -> Anchor:
        """Return the anchor for ``did``, resolving and caching it on a miss.

        Raises:
            AnchorResolutionError: The resolver failed; the resolver's
                exception is chained as ``__cause__``.
        """
        with self._lock:
            entry = self._anchors.get(did)
            if entry is not None:
                entry.expires_at = time.monotonic() + self._ttl
                return entry.anchor

        logger.debug("Anchor cache miss for %s", did)
        try:
            anchor = self._resolver.resolve(did)
        except Exception as error:
            raise AnchorResolutionError(f"get anchor for did {did}: {error}") from error

        self.add_anchor(anchor)
        return anchor

    def get_provider(self, did: DID) -> Provider:
        with self._lock:
            provider = self._providers.get(did)
        if provider is None:
            raise NoProviderError(f"no provider for {did}")
        return provider

    def add_anchor(self, anchor: Anchor) -> None:
        with self._lock:
            self._anchors[anchor.did] = _AnchorEntry(
                anchor=anchor,
                expires_at=time.monotonic() + self._ttl,
            )

    def add_provider(self, provider: Provider) -> None:
        with self._lock:
            self._providers[provider.did] = provider

    def start(self, gc_interval: float = DEFAULT_GC_INTERVAL_SECONDS) -> None:
        """Start the background sweep, replacing any loop already running."""
        if gc_interval <= 0:
            raise ValueError("gc_interval must be positive")

        with self._lock:
            if self._gc_task is not None:
                self._gc_task.cancel()

            stop_event = threading.Event()
            thread = threading.Thread(
                target=self._gc_loop,
                args=(stop_event, gc_interval),
                name="didtrust-anchor-gc",
                daemon=True,
            )
            self._gc_task = _GCTask(thread=thread, stop_event=stop_event)
            thread.start()

        logger.debug("Anchor GC started with interval %ss", gc_interval)

    def stop(self) -> None:
        with self._lock:
            if self._gc_task is None:
                return
            self._gc_task.cancel()
            self._gc_task = None

        logger.debug("Anchor GC stopped")

    def _gc_loop(self, stop_event: threading.Event, gc_interval: float) -> None:
        while not stop_event.wait(gc_interval):
            self._sweep_expired_anchors()

    def _sweep_expired_anchors(self) -> int:
        """Remove anchor entries whose expiry is in the past."""
        now = time.monotonic()
        with self._lock:
            expired = [did for did, entry in self._anchors.items() if entry.expires_at < now]
            for did in expired:
                del self._anchors[did]

        if expired:
            logger.debug("Anchor GC: removed %d expired anchors", len(expired))
        return len(expired)
