"""
Data models for Spotify entities.

This module defines the immutable track descriptor that the upstream
playlist fetcher produces and the YouTube matcher consumes read-only.

Design Decisions:
    - The dataclass is frozen (immutable) to prevent accidental modification
    - Artists are kept as one comma-joined string, first entry is primary,
      which is the form used to build search queries
    - Identity (cache_key) is title + artists, case-folded; duration only
      participates in scoring

Usage:
    from spot_linker.spotify.models import TrackDescriptor

    track = TrackDescriptor(
        title="Shape of You",
        artists="Ed Sheeran",
        duration_ms=233713,
    )
"""

from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class TrackDescriptor:
    """
    Immutable description of one song to match.

    Attributes:
        title: Track title as it appears on Spotify.
               Example: "Shape of You"

        artists: All artist names joined with ", ". The first entry
                 is the primary artist.
                 Example: "Calvin Harris, Dua Lipa"

        duration_ms: Track duration in milliseconds, if known.
                     Used for duration filtering and scoring.
                     Example: 233713 (about 3:53)

    Class Methods:
        from_spotify_api: Create from a Spotify Web API track object.
        from_dict: Create from a plain mapping (track files, JSON bodies).
    """

    title: str
    artists: str
    duration_ms: int | None = None

    @property
    def primary_artist(self) -> str:
        """First artist of the comma-joined list."""
        return self.artists.split(",")[0].strip()

    @property
    def duration_seconds(self) -> float | None:
        """
        Duration in seconds, or None if unknown.

        Zero and negative lengths are placeholders and count as unknown,
        the same as for candidate videos.
        """
        if self.duration_ms is None or self.duration_ms <= 0:
            return None
        return self.duration_ms / 1000

    @property
    def cache_key(self) -> str:
        """Case-folded identity used by MatchCache."""
        return f"{self.title.lower()}|{self.artists.lower()}"

    @property
    def display_name(self) -> str:
        """'Artists - Title' for log messages."""
        return f"{self.artists} - {self.title}"

    @classmethod
    def from_spotify_api(cls, track_data: dict[str, Any]) -> "TrackDescriptor":
        """
        Create a TrackDescriptor from a Spotify Web API track object.

        Args:
            track_data: The 'track' object from a playlist item, e.g.
                        {"name": ..., "artists": [{"name": ...}], "duration_ms": ...}

        Returns:
            TrackDescriptor with artists joined by ", ".
            Tracks without artists get "Unknown" as artist.
        """
        artist_names = [
            a.get("name", "") for a in track_data.get("artists") or []
            if isinstance(a, dict) and a.get("name")
        ]

        duration_ms = track_data.get("duration_ms")
        if not isinstance(duration_ms, int) or duration_ms <= 0:
            duration_ms = None

        return cls(
            title=track_data.get("name", ""),
            artists=", ".join(artist_names) or "Unknown",
            duration_ms=duration_ms,
        )

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "TrackDescriptor":
        """
        Create a TrackDescriptor from a plain mapping.

        Accepts "title" or "name" for the title, "artists" or "artist"
        for the artists (a list is joined with ", "), and an optional
        "duration_ms".

        Raises:
            ValueError: If duration_ms is present but not an integer.
        """
        title = data.get("title", data.get("name", ""))
        artists = data.get("artists", data.get("artist", ""))
        if isinstance(artists, (list, tuple)):
            artists = ", ".join(str(a) for a in artists)

        duration_ms = data.get("duration_ms")
        if duration_ms is not None:
            if isinstance(duration_ms, bool) or not isinstance(duration_ms, int):
                raise ValueError(f"duration_ms must be an integer, got {duration_ms!r}")

        return cls(
            title=str(title).strip(),
            artists=str(artists).strip(),
            duration_ms=duration_ms,
        )

    def to_dict(self) -> dict[str, Any]:
        """Convert to a JSON-ready dict."""
        return {
            "title": self.title,
            "artists": self.artists,
            "duration_ms": self.duration_ms,
        }
