"""
Data models for YouTube search results and matching outcomes.

This module defines dataclasses for YouTube search candidates, their
scored form, and the per-track outcome returned by the matcher.

Lifetimes:
    CandidateVideo  - one query's processing, never persisted
    ScoredCandidate - one track's ranking, discarded after the winner is chosen
    MatchOutcome    - returned to the caller and cached, never mutated
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any


class Confidence(str, Enum):
    """Confidence band of a selected video."""
    HIGH = "HIGH"
    MEDIUM = "MEDIUM"
    LOW = "LOW"


class ReasonCode(str, Enum):
    """
    Why an outcome has the URL/confidence it has.

    Values are wire-visible and stable.
    """
    MATCHED = "matched"
    NO_RESULTS = "no_results"
    LOW_CONFIDENCE = "low_confidence"
    NEGATIVE_KEYWORD = "negative_keyword"
    NO_MATCH = "no_match"
    SEARCH_ERROR = "search_error"


def parse_duration_timestamp(timestamp: str | None) -> int | None:
    """
    Parse a colon-delimited duration string to seconds.

    Args:
        timestamp: Duration in format "M:SS", "H:MM:SS" or plain seconds.

    Returns:
        Duration in seconds, or None if parsing fails. "0:00" parses to 0,
        which is distinct from a failed parse.

    Examples:
        "3:33" -> 213
        "1:02:15" -> 3735
        "0:00" -> 0
        "" -> None
        "LIVE" -> None
    """
    if not timestamp:
        return None

    parts = timestamp.strip().split(":")
    if not 1 <= len(parts) <= 3:
        return None
    if not all(part.isdigit() for part in parts):
        return None

    seconds = 0
    for part in parts:
        seconds = seconds * 60 + int(part)
    return seconds


def parse_view_count(views: Any) -> int:
    """
    Parse a view count as returned by ytmusicapi.

    Args:
        views: An int, or a string like "1.5M views", "532K", "1,234".

    Returns:
        View count as int, 0 if missing or unparseable.
    """
    if isinstance(views, bool):
        return 0
    if isinstance(views, int):
        return max(views, 0)
    if not isinstance(views, str) or not views:
        return 0

    views_str = views.lower().replace(",", "").replace("views", "").strip()
    multiplier = 1
    if views_str.endswith("b"):
        multiplier = 1_000_000_000
    elif views_str.endswith("m"):
        multiplier = 1_000_000
    elif views_str.endswith("k"):
        multiplier = 1_000
    if multiplier != 1:
        views_str = views_str[:-1]

    try:
        return int(float(views_str) * multiplier)
    except ValueError:
        return 0


@dataclass(frozen=True)
class CandidateVideo:
    """
    Immutable representation of one YouTube search result.

    Attributes:
        title: Video title as it appears on YouTube.
               Example: "Ed Sheeran - Shape of You (Official Music Video)"

        url: Full YouTube URL for the video.
             Example: "https://www.youtube.com/watch?v=JGwWNGJdvx8"

        channel_name: Uploading channel.
                      Example: "Ed Sheeran"

        duration_timestamp: Duration as shown by YouTube, "3:54" or "1:02:15".
                            May be empty or malformed.

        view_count: Number of views, 0 if unknown.

    Class Methods:
        from_ytmusic_result: Create from ytmusicapi search result.
    """

    title: str
    url: str
    channel_name: str
    duration_timestamp: str
    view_count: int = 0

    @property
    def duration_seconds(self) -> int | None:
        """
        Duration in seconds, or None when unknown.

        A parsed zero ("0:00") is the backend's placeholder for an
        unavailable duration and is reported as None too.
        """
        seconds = parse_duration_timestamp(self.duration_timestamp)
        if not seconds:
            return None
        return seconds

    @classmethod
    def from_ytmusic_result(cls, result: dict[str, Any]) -> "CandidateVideo":
        """
        Create a CandidateVideo from a ytmusicapi search result.

        Args:
            result: Dictionary from ytmusicapi.YTMusic.search(filter="videos").

        Behavior:
            1. Build URL from videoId
            2. Use the first artist entry as channel name
            3. Keep the duration string as-is (parsed lazily)
            4. Parse view count strings like "1.5M views"
        """
        video_id = result.get("videoId", "")

        artists_data = result.get("artists") or []
        channel_name = ""
        if isinstance(artists_data, list):
            for artist in artists_data:
                if isinstance(artist, dict) and artist.get("name"):
                    channel_name = artist["name"]
                    break

        duration = result.get("duration") or ""
        if not duration and result.get("duration_seconds"):
            seconds = int(result["duration_seconds"])
            duration = f"{seconds // 60}:{seconds % 60:02d}"

        return cls(
            title=result.get("title") or "",
            url=f"https://www.youtube.com/watch?v={video_id}",
            channel_name=channel_name,
            duration_timestamp=duration,
            view_count=parse_view_count(result.get("views")),
        )


@dataclass(frozen=True)
class ScoredCandidate:
    """
    A CandidateVideo with its match score and tie-break facts.

    Attributes:
        candidate: The scored video.
        score: Total match score, 0-100.
        has_duration_match: Duration within tolerance of the track.
        is_official_channel: Channel recognized as the artist's own.
        title_similarity: Raw token-set similarity ratio, 0-100.
    """

    candidate: CandidateVideo
    score: float
    has_duration_match: bool
    is_official_channel: bool
    title_similarity: float

    @property
    def rank_key(self) -> tuple[float, bool, bool, float, int]:
        """Sort key: higher is better on every component, in priority order."""
        return (
            self.score,
            self.has_duration_match,
            self.is_official_channel,
            self.title_similarity,
            self.candidate.view_count,
        )


@dataclass(frozen=True)
class MatchOutcome:
    """
    Result of matching one track to YouTube.

    An outcome is never an error: the worst case is reason=SEARCH_ERROR
    with no URL.

    Attributes:
        youtube_url: Selected video URL, None if nothing was selected.
        matched_title: Selected video title.
        matched_channel: Selected video channel.
        matched_duration: Selected video duration string.
        confidence: Confidence band, set iff youtube_url is set.
        reason: Reason code explaining the outcome.
        score: Score of the best candidate, when one was scored.

    Invariants (checked on construction):
        - confidence is not None iff youtube_url is not None
        - reason is MATCHED iff confidence is HIGH or MEDIUM
        - reason is LOW_CONFIDENCE iff confidence is LOW
    """

    youtube_url: str | None
    matched_title: str | None
    matched_channel: str | None
    matched_duration: str | None
    confidence: Confidence | None
    reason: ReasonCode
    score: float | None = None

    def __post_init__(self) -> None:
        if (self.confidence is None) != (self.youtube_url is None):
            raise ValueError("confidence must be set if and only if youtube_url is set")
        is_matched_band = self.confidence in (Confidence.HIGH, Confidence.MEDIUM)
        if (self.reason == ReasonCode.MATCHED) != is_matched_band:
            raise ValueError("reason 'matched' requires HIGH or MEDIUM confidence")
        if (self.reason == ReasonCode.LOW_CONFIDENCE) != (self.confidence == Confidence.LOW):
            raise ValueError("reason 'low_confidence' requires LOW confidence")

    @property
    def has_url(self) -> bool:
        return self.youtube_url is not None

    @classmethod
    def matched(cls, scored: ScoredCandidate, confidence: Confidence) -> "MatchOutcome":
        """
        Create an outcome that carries a URL.

        LOW confidence yields reason LOW_CONFIDENCE, HIGH/MEDIUM yield MATCHED.
        """
        reason = (
            ReasonCode.LOW_CONFIDENCE if confidence == Confidence.LOW
            else ReasonCode.MATCHED
        )
        video = scored.candidate
        return cls(
            youtube_url=video.url,
            matched_title=video.title,
            matched_channel=video.channel_name,
            matched_duration=video.duration_timestamp or None,
            confidence=confidence,
            reason=reason,
            score=scored.score,
        )

    @classmethod
    def unmatched(cls, reason: ReasonCode, score: float | None = None) -> "MatchOutcome":
        """Create a URL-less outcome."""
        return cls(
            youtube_url=None,
            matched_title=None,
            matched_channel=None,
            matched_duration=None,
            confidence=None,
            reason=reason,
            score=score,
        )

    def to_dict(self) -> dict[str, Any]:
        """Convert to a JSON-ready dict."""
        return {
            "youtube_url": self.youtube_url,
            "title": self.matched_title,
            "channel": self.matched_channel,
            "duration": self.matched_duration,
            "confidence": self.confidence.value if self.confidence else None,
            "reason": self.reason.value,
            "score": round(self.score, 1) if self.score is not None else None,
        }
