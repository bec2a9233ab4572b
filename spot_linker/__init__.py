"""
spot-linker: Link Spotify tracks to YouTube videos.

This package finds a YouTube video for each track of a Spotify playlist
and labels every link with a confidence band, without ever failing a
whole batch because one track could not be matched.

Architecture:
    The package is organized into the following modules:

    - core: Shared infrastructure (config, cache, logging, progress, exceptions)
    - spotify: Track descriptors built from Spotify data
    - youtube: Search, filtering, scoring, ranking and batch matching

Matching Pipeline (per track):
    queries -> search -> filter -> score -> rank -> classify -> MatchOutcome

Usage:
    From command line:
        $ spot-link --track "Shape of You" --artist "Ed Sheeran" --duration 3:53
        $ spot-link --file tracks.yaml --json

    From Python:
        from spot_linker import LinkService, MatchCache, YouTubeMatcher, YouTubeSearcher

        service = LinkService(YouTubeMatcher(YouTubeSearcher()), MatchCache())
        response = await service.link_batch(tracks)
"""

__version__ = "0.1.0"
__author__ = "spot-linker contributors"

from spot_linker.core.cache import MatchCache
from spot_linker.core.exceptions import (
    BatchValidationError,
    ConfigError,
    SearchError,
    SpotLinkerError,
)
from spot_linker.spotify.models import TrackDescriptor
from spot_linker.youtube.matcher import YouTubeMatcher, evaluate_batch
from spot_linker.youtube.models import (
    CandidateVideo,
    Confidence,
    MatchOutcome,
    ReasonCode,
    ScoredCandidate,
)
from spot_linker.youtube.search import YouTubeSearcher
from spot_linker.youtube.service import BatchResponse, LinkService, TrackResult

__all__ = [
    "__version__",
    # Models
    "TrackDescriptor",
    "CandidateVideo",
    "ScoredCandidate",
    "MatchOutcome",
    "Confidence",
    "ReasonCode",
    # Matching
    "YouTubeMatcher",
    "YouTubeSearcher",
    "evaluate_batch",
    "LinkService",
    "BatchResponse",
    "TrackResult",
    "MatchCache",
    # Exceptions
    "SpotLinkerError",
    "ConfigError",
    "SearchError",
    "BatchValidationError",
]
