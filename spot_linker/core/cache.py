"""
Thread-safe in-memory result cache for spot-linker.

Stores the MatchOutcome of each track under the track's cache key
(lower-cased title and artists, duration excluded) for a fixed TTL.

Lifecycle:
    The cache lives as long as the process. Nothing is written to disk;
    a restart starts empty. Expired entries are dropped lazily on get()
    and in bulk by cleanup_expired().

Contract with the matcher:
    LinkService reads the cache before a track enters the matching
    pipeline and writes exactly once after the pipeline concludes. Only
    cache misses reach YouTubeMatcher.evaluate_batch().

Usage:
    cache = MatchCache(ttl_seconds=24 * 3600)

    outcome = cache.get(track)
    if outcome is None:
        outcome = await matcher.match_track(track)
        cache.set(track, outcome)
"""

import threading
import time
from typing import TYPE_CHECKING, Callable

if TYPE_CHECKING:
    from spot_linker.spotify.models import TrackDescriptor
    from spot_linker.youtube.models import MatchOutcome


DEFAULT_TTL_SECONDS = 24 * 60 * 60


class MatchCache:
    """
    In-memory TTL cache of MatchOutcome keyed by TrackDescriptor.cache_key.

    All public methods acquire self._lock, so a single cache can be shared
    between the event loop and worker threads.

    Attributes:
        ttl_seconds: Lifetime of an entry in seconds.
    """

    def __init__(
        self,
        ttl_seconds: float = DEFAULT_TTL_SECONDS,
        clock: Callable[[], float] = time.monotonic
    ) -> None:
        """
        Args:
            ttl_seconds: Lifetime of each entry. Must be positive.
            clock: Monotonic time source in seconds; injectable for tests.
        """
        if ttl_seconds <= 0:
            raise ValueError("ttl_seconds must be positive")
        self.ttl_seconds = ttl_seconds
        self._clock = clock
        self._lock = threading.Lock()
        self._entries: dict[str, tuple["MatchOutcome", float]] = {}

    def _is_expired(self, stored_at: float, now: float) -> bool:
        return now - stored_at > self.ttl_seconds

    def get(self, track: "TrackDescriptor") -> "MatchOutcome | None":
        """
        Return the cached outcome for a track, or None on miss/expiry.

        Expired entries are removed as a side effect.
        """
        key = track.cache_key
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return None

            outcome, stored_at = entry
            if self._is_expired(stored_at, self._clock()):
                del self._entries[key]
                return None

            return outcome

    def set(self, track: "TrackDescriptor", outcome: "MatchOutcome") -> None:
        """Store (or replace) the outcome for a track."""
        with self._lock:
            self._entries[track.cache_key] = (outcome, self._clock())

    def cleanup_expired(self) -> int:
        """
        Remove every expired entry.

        Returns:
            Number of entries removed.
        """
        now = self._clock()
        with self._lock:
            expired = [
                key for key, (_, stored_at) in self._entries.items()
                if self._is_expired(stored_at, now)
            ]
            for key in expired:
                del self._entries[key]
        return len(expired)

    def stats(self) -> dict[str, int]:
        """Return cache statistics ({'size': N})."""
        with self._lock:
            return {"size": len(self._entries)}

    def clear(self) -> None:
        """Drop all entries."""
        with self._lock:
            self._entries.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)
