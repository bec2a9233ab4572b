"""
Caller layer around the YouTube matcher.

LinkService is what a web endpoint or the CLI talks to. It enforces the
batch contract the matcher assumes, serves repeated tracks from the
result cache, and only sends cache misses to the matcher.

Workflow (link_batch):
    1. Validate: non-empty, at most max_batch_size tracks, every track
       has a title and artists
    2. Look every track up in MatchCache
    3. evaluate_batch() the misses
    4. Cache each fresh outcome once (search errors are not cached)
    5. Merge cached and fresh outcomes back into input order

Usage:
    service = LinkService(matcher, cache, max_batch_size=10)
    response = await service.link_batch(tracks)
    for result in response.results:
        print(result.track.title, result.outcome.youtube_url)
"""

from dataclasses import dataclass
from typing import Any

from spot_linker.core.cache import MatchCache
from spot_linker.core.exceptions import BatchValidationError
from spot_linker.core.logger import get_logger
from spot_linker.core.progress import MatchingProgressBar
from spot_linker.spotify.models import TrackDescriptor
from spot_linker.youtube.matcher import YouTubeMatcher
from spot_linker.youtube.models import MatchOutcome, ReasonCode


logger = get_logger(__name__)


DEFAULT_MAX_BATCH_SIZE = 10


@dataclass(frozen=True)
class TrackResult:
    """A track paired with its outcome."""

    track: TrackDescriptor
    outcome: MatchOutcome

    def to_dict(self) -> dict[str, Any]:
        return {"track": self.track.to_dict(), **self.outcome.to_dict()}


@dataclass(frozen=True)
class BatchResponse:
    """
    Outcomes of one or more batches.

    Attributes:
        results: One TrackResult per input track, in input order.
        cached: Number of outcomes served from the cache.
        searched: Number of tracks sent to the matcher.
    """

    results: tuple[TrackResult, ...]
    cached: int
    searched: int

    def to_dict(self) -> dict[str, Any]:
        return {
            "results": [result.to_dict() for result in self.results],
            "cached": self.cached,
            "searched": self.searched,
        }


class LinkService:
    """
    Batch validation, caching and ordering around YouTubeMatcher.

    Attributes:
        _matcher: The matcher that evaluates cache misses.
        _cache: Result cache shared across batches.
        max_batch_size: Maximum tracks accepted by link_batch().
    """

    def __init__(
        self,
        matcher: YouTubeMatcher,
        cache: MatchCache,
        max_batch_size: int = DEFAULT_MAX_BATCH_SIZE
    ) -> None:
        self._matcher = matcher
        self._cache = cache
        self.max_batch_size = max_batch_size

    def validate_batch(self, tracks: list[TrackDescriptor]) -> None:
        """
        Check the batch contract before any search happens.

        Raises:
            BatchValidationError: If the batch is empty, too large, or a
                                  track lacks a title or artists.
        """
        if not tracks:
            raise BatchValidationError("Please provide at least one track")

        if len(tracks) > self.max_batch_size:
            raise BatchValidationError(
                f"Maximum {self.max_batch_size} tracks per batch",
                details={"batch_size": len(tracks), "max_batch_size": self.max_batch_size}
            )

        for position, track in enumerate(tracks):
            if not track.title.strip() or not track.artists.strip():
                raise BatchValidationError(
                    "Each track must have a title and artists",
                    details={"position": position, "track": track.to_dict()}
                )

    async def link_batch(
        self,
        tracks: list[TrackDescriptor],
        progress_bar: MatchingProgressBar | None = None
    ) -> BatchResponse:
        """
        Link one bounded batch of tracks to YouTube.

        Args:
            tracks: At most max_batch_size tracks.
            progress_bar: Optional progress bar; cached tracks count as done.

        Returns:
            BatchResponse with results in input order.

        Raises:
            BatchValidationError: If the batch violates the contract.
        """
        self.validate_batch(tracks)

        outcomes: list[MatchOutcome | None] = [None] * len(tracks)
        miss_positions: list[int] = []

        for position, track in enumerate(tracks):
            cached = self._cache.get(track)
            if cached is not None:
                logger.debug(f"Cache hit: {track.display_name}")
                outcomes[position] = cached
                if progress_bar is not None:
                    progress_bar.update(cached, cached=True)
            else:
                miss_positions.append(position)

        if miss_positions:
            misses = [tracks[position] for position in miss_positions]
            fresh = await self._matcher.evaluate_batch(misses, progress_bar=progress_bar)
            for position, track, outcome in zip(miss_positions, misses, fresh):
                # Search errors are transient; the track is searched again next time
                if outcome.reason != ReasonCode.SEARCH_ERROR:
                    self._cache.set(track, outcome)
                outcomes[position] = outcome

        logger.debug(
            f"Batch done: {len(tracks) - len(miss_positions)} cached, "
            f"{len(miss_positions)} searched"
        )

        return BatchResponse(
            results=tuple(
                TrackResult(track=track, outcome=outcome)
                for track, outcome in zip(tracks, outcomes)
            ),
            cached=len(tracks) - len(miss_positions),
            searched=len(miss_positions),
        )

    async def link_tracks(
        self,
        tracks: list[TrackDescriptor],
        progress_bar: MatchingProgressBar | None = None
    ) -> BatchResponse:
        """
        Link any number of tracks by splitting them into bounded batches.

        Batches run one after another; concurrency stays bounded by the
        matcher within each batch.

        Raises:
            BatchValidationError: If the list is empty or a track is invalid.
        """
        if not tracks:
            raise BatchValidationError("Please provide at least one track")

        results: list[TrackResult] = []
        cached = 0
        searched = 0

        for start in range(0, len(tracks), self.max_batch_size):
            batch = tracks[start:start + self.max_batch_size]
            response = await self.link_batch(batch, progress_bar=progress_bar)
            results.extend(response.results)
            cached += response.cached
            searched += response.searched

        return BatchResponse(results=tuple(results), cached=cached, searched=searched)
