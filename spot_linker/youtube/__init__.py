"""
YouTube integration module for spot-linker.

This module provides functionality for matching Spotify tracks to
YouTube videos.

Components:
    - CandidateVideo / ScoredCandidate / MatchOutcome: Data models
    - YouTubeSearcher: ytmusicapi-backed async search
    - YouTubeMatcher: Per-track pipeline and bounded-concurrency batches
    - LinkService: Batch validation and caching around the matcher

Usage:
    from spot_linker.youtube import YouTubeMatcher, YouTubeSearcher

    matcher = YouTubeMatcher(YouTubeSearcher())
    outcomes = await matcher.evaluate_batch(tracks)

    matched = [o for o in outcomes if o.youtube_url]
"""

from spot_linker.youtube.matcher import (
    YouTubeMatcher,
    build_search_queries,
    classify_score,
    evaluate_batch,
    rank_candidates,
    select_best_candidate,
)
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
    # Models
    "CandidateVideo",
    "ScoredCandidate",
    "MatchOutcome",
    "Confidence",
    "ReasonCode",
    # Matcher
    "YouTubeMatcher",
    "build_search_queries",
    "rank_candidates",
    "select_best_candidate",
    "classify_score",
    "evaluate_batch",
    # Search
    "YouTubeSearcher",
    # Service
    "LinkService",
    "BatchResponse",
    "TrackResult",
]
