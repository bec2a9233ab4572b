"""
Candidate filtering for YouTube matching.

Removes search results that must never be scored: alternate versions
named in the title (karaoke, cover, live, ...) and videos whose length
makes them a compilation or a snippet of the track.

Only the top MAX_CANDIDATES raw results of a query are considered.
"""

from spot_linker.spotify.models import TrackDescriptor
from spot_linker.youtube.models import CandidateVideo


MAX_CANDIDATES = 10

# Title substrings marking a categorically different recording
NEGATIVE_KEYWORDS = (
    "karaoke",
    "cover",
    "instrumental",
    "remix",
    "tutorial",
    "reaction",
    "live",
    "acoustic version",
    "piano version",
    "slowed",
    "reverb",
    "8d audio",
)

# Longer than the track by more than this: likely a mix or compilation
MAX_EXTRA_SECONDS = 30

# Shorter than the track by more than this: likely a short or snippet
MAX_MISSING_SECONDS = 10


def has_negative_keyword(title: str) -> bool:
    """Check if a video title contains any denylisted keyword (case-insensitive)."""
    lower = title.lower()
    return any(keyword in lower for keyword in NEGATIVE_KEYWORDS)


def has_plausible_duration(track: TrackDescriptor, candidate: CandidateVideo) -> bool:
    """
    Check whether a candidate's length is compatible with the track.

    Returns True when either duration is unknown; an unparseable
    timestamp is never grounds for rejection.
    """
    track_seconds = track.duration_seconds
    candidate_seconds = candidate.duration_seconds
    if track_seconds is None or candidate_seconds is None:
        return True

    delta = candidate_seconds - track_seconds
    return -MAX_MISSING_SECONDS <= delta <= MAX_EXTRA_SECONDS


def filter_candidates(
    track: TrackDescriptor,
    candidates: list[CandidateVideo],
    limit: int = MAX_CANDIDATES
) -> list[CandidateVideo]:
    """
    Keep the candidates worth scoring.

    Args:
        track: Track being matched.
        candidates: Raw results of one query, in backend order.
        limit: How many raw results to consider.

    Returns:
        Survivors in input order. Empty if every considered result was
        dropped.
    """
    return [
        candidate for candidate in candidates[:limit]
        if not has_negative_keyword(candidate.title)
        and has_plausible_duration(track, candidate)
    ]
