"""
Candidate scoring for YouTube matching.

Scores one (track, candidate) pair by summing independent signals,
capped at 100:

    Signal               Points  Rule
    Title similarity     40      token-set ratio of "{title} {primary artist}"
                                 vs candidate title, feat. annotations stripped
    Duration match       25      |track - candidate| <= 5 s, both known
    Artist verification  15      partial ratio of artist vs title or channel > 80
    Official channel     10      vevo / "- topic" / official in channel name,
                                 or token-set ratio of artist vs channel > 85
    Positive keyword      5      official, audio, music video, vevo in title
    Popularity            5      > 10M views (2.5 for > 1M)

Title similarity dominates; popularity only breaks near-ties.

Dependencies:
    - rapidfuzz: Fuzzy string matching
"""

import re

from rapidfuzz import fuzz, utils

from spot_linker.spotify.models import TrackDescriptor
from spot_linker.youtube.models import CandidateVideo, ScoredCandidate


TITLE_SIMILARITY_POINTS = 40.0
DURATION_MATCH_POINTS = 25.0
ARTIST_MATCH_POINTS = 15.0
OFFICIAL_CHANNEL_POINTS = 10.0
POSITIVE_KEYWORD_POINTS = 5.0
HIGH_VIEWS_POINTS = 5.0
MEDIUM_VIEWS_POINTS = 2.5
MAX_SCORE = 100.0

DURATION_MATCH_TOLERANCE_SECONDS = 5
ARTIST_MATCH_THRESHOLD = 80
OFFICIAL_CHANNEL_THRESHOLD = 85
HIGH_VIEWS = 10_000_000
MEDIUM_VIEWS = 1_000_000

OFFICIAL_CHANNEL_PATTERNS = ("vevo", "- topic", "official")
POSITIVE_KEYWORDS = ("official", "audio", "music video", "vevo")

# "(feat. X)", "[ft. X]" anywhere, or a trailing "feat. X" / "ft. X"
_FEAT_BRACKETED_RE = re.compile(r"\s*[\(\[]\s*(?:feat|ft)\.?\s[^\)\]]*[\)\]]", re.IGNORECASE)
_FEAT_TRAILING_RE = re.compile(r"\s+(?:feat|ft)\.?\s.*$", re.IGNORECASE)


def strip_featuring(text: str) -> str:
    """
    Remove featured-artist annotations from a title.

    Examples:
        "Song (feat. Other)" -> "Song"
        "Song [ft. Other] (Official Video)" -> "Song (Official Video)"
        "Song feat. Other" -> "Song"
    """
    text = _FEAT_BRACKETED_RE.sub("", text)
    text = _FEAT_TRAILING_RE.sub("", text)
    return " ".join(text.split())


def title_similarity(track: TrackDescriptor, candidate: CandidateVideo) -> float:
    """Token-set similarity (0-100) between track title + artist and video title."""
    track_text = f"{strip_featuring(track.title)} {track.primary_artist}"
    candidate_text = strip_featuring(candidate.title)
    return fuzz.token_set_ratio(
        track_text, candidate_text, processor=utils.default_process
    )


def has_duration_match(track: TrackDescriptor, candidate: CandidateVideo) -> bool:
    """True if both durations are known and within the match tolerance."""
    track_seconds = track.duration_seconds
    candidate_seconds = candidate.duration_seconds
    if track_seconds is None or candidate_seconds is None:
        return False
    return abs(track_seconds - candidate_seconds) <= DURATION_MATCH_TOLERANCE_SECONDS


def is_artist_verified(artist: str, candidate: CandidateVideo) -> bool:
    """True if the artist name shows up in the video title or channel name."""
    for text in (candidate.title, candidate.channel_name):
        ratio = fuzz.partial_ratio(artist, text, processor=utils.default_process)
        if ratio > ARTIST_MATCH_THRESHOLD:
            return True
    return False


def is_official_channel(artist: str, channel_name: str) -> bool:
    """True if the channel looks like the rights holder or the artist's own account."""
    lower = channel_name.lower()
    if any(pattern in lower for pattern in OFFICIAL_CHANNEL_PATTERNS):
        return True
    ratio = fuzz.token_set_ratio(artist, channel_name, processor=utils.default_process)
    return ratio > OFFICIAL_CHANNEL_THRESHOLD


def has_positive_keyword(title: str) -> bool:
    lower = title.lower()
    return any(keyword in lower for keyword in POSITIVE_KEYWORDS)


def popularity_points(view_count: int) -> float:
    if view_count > HIGH_VIEWS:
        return HIGH_VIEWS_POINTS
    if view_count > MEDIUM_VIEWS:
        return MEDIUM_VIEWS_POINTS
    return 0.0


def score_candidate(track: TrackDescriptor, candidate: CandidateVideo) -> ScoredCandidate:
    """
    Calculate the match score of one candidate for one track.

    Pure function: the same pair always yields the same ScoredCandidate.

    Args:
        track: Track being matched.
        candidate: A candidate that survived filtering.

    Returns:
        ScoredCandidate with the capped total score and the tie-break
        facts (duration match, official channel, raw title similarity).
    """
    artist = track.primary_artist

    similarity = title_similarity(track, candidate)
    duration_match = has_duration_match(track, candidate)
    official = is_official_channel(artist, candidate.channel_name)

    score = similarity / 100 * TITLE_SIMILARITY_POINTS
    if duration_match:
        score += DURATION_MATCH_POINTS
    if is_artist_verified(artist, candidate):
        score += ARTIST_MATCH_POINTS
    if official:
        score += OFFICIAL_CHANNEL_POINTS
    if has_positive_keyword(candidate.title):
        score += POSITIVE_KEYWORD_POINTS
    score += popularity_points(candidate.view_count)

    return ScoredCandidate(
        candidate=candidate,
        score=min(score, MAX_SCORE),
        has_duration_match=duration_match,
        is_official_channel=official,
        title_similarity=similarity,
    )
