"""Test configuration and fixtures"""

import asyncio

import pytest

from spot_linker.spotify.models import TrackDescriptor
from spot_linker.youtube.models import CandidateVideo


def make_candidate(
    title="Ed Sheeran - Shape of You (Official Music Video)",
    video_id="JGwWNGJdvx8",
    channel_name="Ed Sheeran",
    duration="3:54",
    view_count=500_000_000
):
    """Build a CandidateVideo with realistic defaults"""
    return CandidateVideo(
        title=title,
        url=f"https://www.youtube.com/watch?v={video_id}",
        channel_name=channel_name,
        duration_timestamp=duration,
        view_count=view_count,
    )


class FakeSearch:
    """
    Async search stand-in.

    Responses are looked up by the first key contained in the query; a
    value can be a list of candidates or an exception instance to raise.
    Records every query and the peak number of searches in flight.
    """

    def __init__(self, responses=None, delays=None, default=None):
        self.responses = responses or {}
        self.delays = delays or {}
        self.default = default if default is not None else []
        self.queries = []
        self.in_flight = 0
        self.max_in_flight = 0

    def _lookup(self, mapping, query, default):
        for key, value in mapping.items():
            if key in query:
                return value
        return default

    async def __call__(self, query):
        self.queries.append(query)
        self.in_flight += 1
        self.max_in_flight = max(self.max_in_flight, self.in_flight)
        try:
            await asyncio.sleep(self._lookup(self.delays, query, 0))
            response = self._lookup(self.responses, query, self.default)
            if isinstance(response, Exception):
                raise response
            return list(response)
        finally:
            self.in_flight -= 1


@pytest.fixture
def shape_of_you():
    """Track with a known duration (about 3:53)"""
    return TrackDescriptor(title="Shape of You", artists="Ed Sheeran", duration_ms=233713)


@pytest.fixture
def official_video():
    """The official upload for shape_of_you"""
    return make_candidate()


@pytest.fixture
def fake_search():
    return FakeSearch()


@pytest.fixture
def sample_track_data():
    """Spotify Web API track object"""
    return {
        'id': 'test_track_123',
        'name': 'Test Song',
        'artists': [
            {'id': 'artist_123', 'name': 'Test Artist'},
            {'id': 'artist_456', 'name': 'Guest Artist'},
        ],
        'album': {'id': 'album_123', 'name': 'Test Album'},
        'duration_ms': 210000,  # 3:30
        'explicit': False,
        'popularity': 75,
    }
