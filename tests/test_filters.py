# tests/test_filters.py
"""Test candidate filtering"""

from spot_linker.spotify.models import TrackDescriptor
from spot_linker.youtube.filters import (
    filter_candidates,
    has_negative_keyword,
    has_plausible_duration,
)

from conftest import make_candidate


TRACK_200S = TrackDescriptor(title="Song", artists="Artist", duration_ms=200_000)


class TestNegativeKeywords:
    """Test the title denylist"""

    def test_alternate_versions_are_rejected(self):
        """Test common alternate-version markers"""
        assert has_negative_keyword("Shape of You (Karaoke Version)")
        assert has_negative_keyword("Shape of You - Live at Wembley")
        assert has_negative_keyword("Shape of You [Slowed + Reverb]")
        assert has_negative_keyword("shape of you 8D AUDIO")
        assert has_negative_keyword("Shape of You (Piano Version)")

    def test_clean_titles_pass(self):
        """Test official uploads are kept"""
        assert not has_negative_keyword("Ed Sheeran - Shape of You (Official Music Video)")
        assert not has_negative_keyword("Shape of You (Official Audio)")

    def test_matching_is_plain_substring(self):
        """Test keywords match inside longer words too"""
        assert has_negative_keyword("Alive")
        assert has_negative_keyword("Discovery")


class TestDurationPlausibility:
    """Test the duration window"""

    def test_window_bounds(self):
        """Test 10 seconds shorter to 30 seconds longer is accepted"""
        assert has_plausible_duration(TRACK_200S, make_candidate(duration="3:50"))      # +30
        assert not has_plausible_duration(TRACK_200S, make_candidate(duration="3:51"))  # +31
        assert has_plausible_duration(TRACK_200S, make_candidate(duration="3:10"))      # -10
        assert not has_plausible_duration(TRACK_200S, make_candidate(duration="3:09"))  # -11

    def test_unknown_durations_pass(self):
        """Test missing durations never reject a candidate"""
        no_duration = TrackDescriptor(title="Song", artists="Artist")
        assert has_plausible_duration(no_duration, make_candidate(duration="1:00:00"))
        assert has_plausible_duration(TRACK_200S, make_candidate(duration="0:00"))
        assert has_plausible_duration(TRACK_200S, make_candidate(duration="LIVE"))


class TestFilterCandidates:
    """Test filter_candidates()"""

    def test_keeps_order_of_survivors(self):
        """Test survivors keep backend order"""
        candidates = [
            make_candidate(title="Song (Official Audio)", video_id="a", duration="3:20"),
            make_candidate(title="Song (Cover)", video_id="b", duration="3:20"),
            make_candidate(title="Song 1 Hour Loop", video_id="c", duration="1:00:00"),
            make_candidate(title="Song", video_id="d", duration="3:25"),
        ]

        survivors = filter_candidates(TRACK_200S, candidates)

        assert [c.url[-1] for c in survivors] == ["a", "d"]

    def test_only_top_results_are_considered(self):
        """Test results past the limit are ignored"""
        candidates = [
            make_candidate(title="Song (Cover)", video_id=f"v{i}", duration="3:20")
            for i in range(10)
        ]
        candidates.append(make_candidate(title="Song", video_id="late", duration="3:20"))

        assert filter_candidates(TRACK_200S, candidates) == []
        assert len(filter_candidates(TRACK_200S, candidates, limit=11)) == 1

    def test_empty_input(self):
        assert filter_candidates(TRACK_200S, []) == []
