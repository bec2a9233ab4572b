# tests/test_scoring.py
"""Test candidate scoring"""

import pytest

from spot_linker.spotify.models import TrackDescriptor
from spot_linker.youtube.filters import filter_candidates
from spot_linker.youtube.scoring import (
    has_duration_match,
    is_artist_verified,
    is_official_channel,
    popularity_points,
    score_candidate,
    strip_featuring,
    title_similarity,
)

from conftest import make_candidate


class TestSignals:
    """Test individual scoring signals"""

    def test_strip_featuring(self):
        """Test featured-artist annotations are removed"""
        assert strip_featuring("Song (feat. Other)") == "Song"
        assert strip_featuring("Song [ft. Other] (Official Video)") == "Song (Official Video)"
        assert strip_featuring("Song feat. Other") == "Song"
        assert strip_featuring("Song FT Other") == "Song"
        assert strip_featuring("Gift of Love") == "Gift of Love"

    def test_title_similarity_ignores_featuring(self):
        """Test feat. annotations do not cost similarity"""
        track = TrackDescriptor("Stay (feat. Justin Bieber)", "The Kid LAROI, Justin Bieber")
        candidate = make_candidate(title="The Kid LAROI - Stay")
        assert title_similarity(track, candidate) == 100

    def test_duration_match_tolerance(self, shape_of_you):
        """Test the 5 second tolerance"""
        assert has_duration_match(shape_of_you, make_candidate(duration="3:54"))
        assert has_duration_match(shape_of_you, make_candidate(duration="3:58"))
        assert not has_duration_match(shape_of_you, make_candidate(duration="3:59"))

    def test_duration_match_needs_both_durations(self, shape_of_you):
        """Test unknown durations never match"""
        no_duration = TrackDescriptor("Shape of You", "Ed Sheeran")
        assert not has_duration_match(no_duration, make_candidate(duration="3:54"))
        assert not has_duration_match(shape_of_you, make_candidate(duration="0:00"))

    def test_artist_verification(self):
        """Test the artist is looked for in title and channel"""
        in_channel = make_candidate(title="Shape of You", channel_name="Ed Sheeran")
        in_title = make_candidate(title="Ed Sheeran - Shape of You", channel_name="Lyrics Hub")
        absent = make_candidate(title="Pasta Recipe", channel_name="Cooking Daily")

        assert is_artist_verified("Ed Sheeran", in_channel)
        assert is_artist_verified("Ed Sheeran", in_title)
        assert not is_artist_verified("Ed Sheeran", absent)

    def test_official_channel(self):
        """Test official channel patterns and artist-named channels"""
        assert is_official_channel("Ed Sheeran", "Ed Sheeran - Topic")
        assert is_official_channel("Ed Sheeran", "EdSheeranVEVO")
        assert is_official_channel("Ed Sheeran", "Ed Sheeran")
        assert not is_official_channel("Ed Sheeran", "Lyrics Hub")

    def test_popularity_points(self):
        """Test view count thresholds are strict"""
        assert popularity_points(10_000_001) == 5.0
        assert popularity_points(10_000_000) == 2.5
        assert popularity_points(1_000_001) == 2.5
        assert popularity_points(1_000_000) == 0.0
        assert popularity_points(0) == 0.0


class TestScoreCandidate:
    """Test score_candidate()"""

    def test_official_video_scores_full_marks(self, shape_of_you, official_video):
        """Test the official upload collects every signal"""
        scored = score_candidate(shape_of_you, official_video)

        assert scored.score == pytest.approx(100.0)
        assert scored.has_duration_match
        assert scored.is_official_channel
        assert scored.title_similarity == 100

    def test_scoring_is_deterministic(self, shape_of_you, official_video):
        """Test the same pair always scores the same"""
        assert score_candidate(shape_of_you, official_video) == score_candidate(
            shape_of_you, official_video
        )

    def test_zero_duration_candidate(self, shape_of_you):
        """Test a 0:00 candidate survives filtering but earns no duration points"""
        candidate = make_candidate(duration="0:00")

        assert filter_candidates(shape_of_you, [candidate]) == [candidate]

        scored = score_candidate(shape_of_you, candidate)
        assert not scored.has_duration_match
        assert scored.score == pytest.approx(75.0)

    def test_unrelated_video_scores_low(self, shape_of_you):
        """Test an unrelated video stays below the match threshold"""
        candidate = make_candidate(
            title="Pasta Recipe", channel_name="Cooking Daily", duration="9:00", view_count=100
        )
        assert score_candidate(shape_of_you, candidate).score < 40

    def test_score_is_bounded(self, shape_of_you):
        """Test scores stay within 0-100"""
        candidates = [
            make_candidate(),
            make_candidate(title="", channel_name="", duration="", view_count=0),
            make_candidate(title="Ed Sheeran Official VEVO audio music video", channel_name="EdSheeranVEVO"),
        ]
        for candidate in candidates:
            assert 0.0 <= score_candidate(shape_of_you, candidate).score <= 100.0
