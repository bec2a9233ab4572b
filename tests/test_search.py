# tests/test_search.py
"""Test the ytmusicapi-backed search collaborator"""

from unittest.mock import patch

import pytest

from spot_linker.core.exceptions import SearchError
from spot_linker.youtube import search as search_module
from spot_linker.youtube.search import YouTubeSearcher


class StubYTMusic:
    """Records search() calls and replays a canned result or error"""

    def __init__(self, results=None, error=None):
        self.results = results
        self.error = error
        self.calls = []

    def search(self, query, filter=None, limit=20, ignore_spelling=False):
        self.calls.append({
            "query": query,
            "filter": filter,
            "limit": limit,
            "ignore_spelling": ignore_spelling,
        })
        if self.error is not None:
            raise self.error
        return self.results


RAW_RESULTS = [
    {
        "videoId": "JGwWNGJdvx8",
        "title": "Ed Sheeran - Shape of You (Official Music Video)",
        "artists": [{"name": "Ed Sheeran", "id": "UC0C-w0YjGpqDXGB8IHb662A"}],
        "duration": "4:24",
        "views": "6.4B",
    },
    {"title": "Episode without a video id"},
    "not a result",
    {"videoId": "_dK2tDK9grQ", "title": "Shape of You (Lyrics)", "duration": "3:54", "views": "12M"},
]


class TestSearchSync:
    """Test YouTubeSearcher.search_sync()"""

    def test_converts_results_in_backend_order(self):
        searcher = YouTubeSearcher(ytmusic=StubYTMusic(results=RAW_RESULTS))

        candidates = searcher.search_sync("Shape of You Ed Sheeran")

        assert [c.url for c in candidates] == [
            "https://www.youtube.com/watch?v=JGwWNGJdvx8",
            "https://www.youtube.com/watch?v=_dK2tDK9grQ",
        ]
        assert candidates[0].channel_name == "Ed Sheeran"
        assert candidates[0].duration_seconds == 264
        assert candidates[1].view_count == 12_000_000

    def test_requests_videos_with_configured_limit(self):
        ytmusic = StubYTMusic(results=[])
        searcher = YouTubeSearcher(limit=7, ytmusic=ytmusic)

        searcher.search_sync("Stay The Kid LAROI")

        assert ytmusic.calls == [{
            "query": "Stay The Kid LAROI",
            "filter": "videos",
            "limit": 7,
            "ignore_spelling": True,
        }]

    def test_missing_results_are_empty(self):
        searcher = YouTubeSearcher(ytmusic=StubYTMusic(results=None))
        assert searcher.search_sync("anything") == []

    def test_backend_failure_becomes_search_error(self):
        error = ConnectionError("Connection reset by peer")
        searcher = YouTubeSearcher(ytmusic=StubYTMusic(error=error))

        with pytest.raises(SearchError) as exc_info:
            searcher.search_sync("Perfect Ed Sheeran official audio")

        assert exc_info.value.query == "Perfect Ed Sheeran official audio"
        assert exc_info.value.details["original_error"] == "Connection reset by peer"
        assert exc_info.value.__cause__ is error


class TestAsyncSearch:
    """Test the awaitable search entry points"""

    @pytest.mark.asyncio
    async def test_searcher_is_callable(self):
        ytmusic = StubYTMusic(results=RAW_RESULTS[:1])
        searcher = YouTubeSearcher(ytmusic=ytmusic)

        candidates = await searcher("Shape of You Ed Sheeran")

        assert [c.url for c in candidates] == ["https://www.youtube.com/watch?v=JGwWNGJdvx8"]
        assert ytmusic.calls[0]["query"] == "Shape of You Ed Sheeran"

    @pytest.mark.asyncio
    async def test_failure_propagates_from_worker_thread(self):
        searcher = YouTubeSearcher(ytmusic=StubYTMusic(error=RuntimeError("HTTP 429")))

        with pytest.raises(SearchError):
            await searcher.search("Shape of You Ed Sheeran")


class TestClientCreation:
    """Test the lazily created ytmusicapi client"""

    def test_client_is_created_once_with_language(self):
        with patch.object(search_module, "YTMusic") as ytmusic_cls:
            searcher = YouTubeSearcher(language="de")

            assert searcher.ytmusic is searcher.ytmusic

        ytmusic_cls.assert_called_once_with(language="de")
