"""
YouTube search collaborator for spot-linker.

Wraps ytmusicapi's video search and converts raw results into
CandidateVideo objects. The matcher only needs an async callable
`query -> list[CandidateVideo]`; YouTubeSearcher is the production one,
tests pass plain async functions.

ytmusicapi is synchronous, so each search runs in a worker thread and
the event loop stays free for the other track pipelines.

No retries happen here: a failed search raises SearchError and the
matcher moves on to the next query string.

Dependencies:
    - ytmusicapi: YouTube Music API client
"""

import asyncio
from typing import Any, Awaitable, Callable

from ytmusicapi import YTMusic

from spot_linker.core.exceptions import SearchError
from spot_linker.core.logger import get_logger
from spot_linker.youtube.models import CandidateVideo


logger = get_logger(__name__)


SearchFunction = Callable[[str], Awaitable[list[CandidateVideo]]]

DEFAULT_SEARCH_LIMIT = 20


class YouTubeSearcher:
    """
    Async YouTube video search backed by ytmusicapi.

    Instances are callable, so one can be passed directly as the
    matcher's search function:

        searcher = YouTubeSearcher(language="en", limit=20)
        matcher = YouTubeMatcher(searcher)

    Thread Safety:
        search_sync() may run in several worker threads at once. The
        ytmusicapi client is stateless for search operations.
    """

    def __init__(
        self,
        language: str = "en",
        limit: int = DEFAULT_SEARCH_LIMIT,
        ytmusic: YTMusic | None = None
    ) -> None:
        """
        Args:
            language: Interface language for ytmusicapi.
            limit: Number of results requested per query.
            ytmusic: Optional pre-built client (created lazily otherwise).
        """
        self._language = language
        self._limit = limit
        self._ytmusic = ytmusic

    @property
    def ytmusic(self) -> YTMusic:
        if self._ytmusic is None:
            self._ytmusic = YTMusic(language=self._language)
        return self._ytmusic

    async def __call__(self, query: str) -> list[CandidateVideo]:
        return await self.search(query)

    async def search(self, query: str) -> list[CandidateVideo]:
        """
        Search YouTube videos without blocking the event loop.

        Raises:
            SearchError: If the backend call fails.
        """
        return await asyncio.to_thread(self.search_sync, query)

    def search_sync(self, query: str) -> list[CandidateVideo]:
        """
        Search YouTube videos and convert the results.

        Args:
            query: Free-text search query.

        Returns:
            Candidates in backend order. Results without a video ID are skipped.

        Raises:
            SearchError: If the backend call fails.
        """
        try:
            raw_results = self.ytmusic.search(
                query,
                filter="videos",
                limit=self._limit,
                ignore_spelling=True
            )
        except Exception as e:
            raise SearchError(
                f"YouTube search failed: {e}",
                query=query,
                details={"query": query, "original_error": str(e)}
            ) from e

        return self._convert_results(raw_results or [])

    def _convert_results(self, raw_results: list[dict[str, Any]]) -> list[CandidateVideo]:
        candidates = []
        for raw in raw_results:
            if not isinstance(raw, dict) or not raw.get("videoId"):
                continue
            try:
                candidates.append(CandidateVideo.from_ytmusic_result(raw))
            except (TypeError, ValueError) as e:
                logger.debug(f"Failed to parse search result: {e}")
        return candidates
