"""
YouTube matching for spot-linker.

This module finds the best YouTube video for each Spotify track and
runs batches of tracks with bounded concurrency.

Matching Algorithm (per track):
    1. Build queries, most specific first:
       "{title} {artists} official audio", "... official", "{title} {artists}"
    2. Search each query in turn until one returns results
       (a failing search is skipped like an empty one)
    3. Filter the top 10 results (negative keywords, implausible duration);
       if everything is filtered, stop with negative_keyword
    4. Score the survivors (see scoring.py)
    5. Rank: score, duration match, official channel, title similarity, views
    6. Classify the winner: <40 no match, <50 LOW, <70 MEDIUM, else HIGH

Batch Workflow:
    1. Start one pipeline per track, at most `concurrency` (default 2) at once
    2. Any unexpected error inside a pipeline becomes a search_error outcome
    3. Outcomes are stored by position, so output order equals input order

Usage:
    from spot_linker.youtube.matcher import YouTubeMatcher
    from spot_linker.youtube.search import YouTubeSearcher

    matcher = YouTubeMatcher(YouTubeSearcher())
    outcomes = await matcher.evaluate_batch(tracks)
"""

import asyncio

from spot_linker.core.logger import (
    get_logger,
    format_matched_message,
    format_no_match_message,
    log_match_review,
)
from spot_linker.core.progress import MatchingProgressBar
from spot_linker.spotify.models import TrackDescriptor
from spot_linker.youtube.filters import MAX_CANDIDATES, filter_candidates
from spot_linker.youtube.models import (
    Confidence,
    MatchOutcome,
    ReasonCode,
    ScoredCandidate,
)
from spot_linker.youtube.scoring import score_candidate
from spot_linker.youtube.search import SearchFunction


logger = get_logger(__name__)


# =============================================================================
# CONFIDENCE THRESHOLDS
# =============================================================================

# Below this the best candidate is rejected outright
MIN_MATCH_SCORE = 40.0
MEDIUM_CONFIDENCE_SCORE = 50.0
HIGH_CONFIDENCE_SCORE = 70.0

# A runner-up within this many points is logged for review
CLOSE_MATCH_THRESHOLD = 5.0

# Concurrent track pipelines; the search backend is unofficial
DEFAULT_CONCURRENCY = 2

QUERY_SUFFIXES = ("official audio", "official", "")


def build_search_queries(track: TrackDescriptor) -> list[str]:
    """
    Build the ordered search queries for a track, most specific first.

    Example:
        ["Shape of You Ed Sheeran official audio",
         "Shape of You Ed Sheeran official",
         "Shape of You Ed Sheeran"]
    """
    base = f"{track.title} {track.artists}"
    return [f"{base} {suffix}" if suffix else base for suffix in QUERY_SUFFIXES]


def rank_candidates(scored: list[ScoredCandidate]) -> list[ScoredCandidate]:
    """
    Order scored candidates best first.

    Candidates with identical rank keys keep their input order.
    """
    return sorted(scored, key=lambda s: s.rank_key, reverse=True)


def select_best_candidate(scored: list[ScoredCandidate]) -> ScoredCandidate | None:
    """Return the top-ranked candidate, or None for an empty list."""
    if not scored:
        return None
    return rank_candidates(scored)[0]


def classify_score(score: float) -> Confidence | None:
    """
    Map a winning score to a confidence band.

    Returns:
        None below MIN_MATCH_SCORE (no match), else LOW, MEDIUM or HIGH.
    """
    if score < MIN_MATCH_SCORE:
        return None
    if score < MEDIUM_CONFIDENCE_SCORE:
        return Confidence.LOW
    if score < HIGH_CONFIDENCE_SCORE:
        return Confidence.MEDIUM
    return Confidence.HIGH


def build_outcome(best: ScoredCandidate) -> MatchOutcome:
    """Turn the winning candidate into a MatchOutcome."""
    confidence = classify_score(best.score)
    if confidence is None:
        return MatchOutcome.unmatched(ReasonCode.NO_MATCH, score=best.score)
    return MatchOutcome.matched(best, confidence)


class YouTubeMatcher:
    """
    Matches Spotify tracks to YouTube videos.

    Attributes:
        _search: Async search function `query -> list[CandidateVideo]`.
        _concurrency: Maximum number of track pipelines running at once.
        _max_candidates: Raw results considered per query.

    Failure Isolation:
        match_track() lets unexpected errors propagate. evaluate_batch()
        catches them per track and substitutes a search_error outcome,
        so one failing track never aborts its siblings.

    Example:
        matcher = YouTubeMatcher(searcher)

        # Match single track
        outcome = await matcher.match_track(track)

        # Match a batch, two tracks at a time
        outcomes = await matcher.evaluate_batch(tracks)
    """

    def __init__(
        self,
        search: SearchFunction,
        concurrency: int = DEFAULT_CONCURRENCY,
        max_candidates: int = MAX_CANDIDATES
    ) -> None:
        if concurrency < 1:
            raise ValueError("concurrency must be at least 1")
        self._search = search
        self._concurrency = concurrency
        self._max_candidates = max_candidates

    async def match_track(self, track: TrackDescriptor) -> MatchOutcome:
        """
        Find the best YouTube match for a single track.

        Queries are tried strictly one after another. The first query with
        a non-empty result list decides the outcome; later queries only
        run when earlier ones returned nothing or failed.

        Returns:
            MatchOutcome. When every query raised, the reason is
            search_error; when no query returned results, no_results.
        """
        logger.debug(f"Matching track: {track.display_name}")

        queries = build_search_queries(track)
        failed_queries = 0

        for query in queries:
            try:
                candidates = await self._search(query)
            except Exception as e:
                failed_queries += 1
                logger.warning(f"Search failed for query '{query}': {e}")
                continue

            if not candidates:
                logger.debug(f"No results for query: {query}")
                continue

            survivors = filter_candidates(track, candidates, self._max_candidates)
            if not survivors:
                logger.debug(
                    f"All {min(len(candidates), self._max_candidates)} results filtered "
                    f"for query: {query}"
                )
                outcome = MatchOutcome.unmatched(ReasonCode.NEGATIVE_KEYWORD)
                self._log_review(track, outcome, [])
                return outcome

            ranked = rank_candidates([score_candidate(track, c) for c in survivors])
            best = ranked[0]
            outcome = build_outcome(best)

            logger.debug(
                f"Best candidate for {track.display_name}: {best.candidate.title} "
                f"(score: {best.score:.1f}, query: '{query}')"
            )
            self._log_review(track, outcome, ranked)
            return outcome

        if failed_queries == len(queries):
            reason = ReasonCode.SEARCH_ERROR
        else:
            reason = ReasonCode.NO_RESULTS
        outcome = MatchOutcome.unmatched(reason)
        self._log_review(track, outcome, [])
        return outcome

    async def evaluate_batch(
        self,
        tracks: list[TrackDescriptor],
        progress_bar: MatchingProgressBar | None = None
    ) -> list[MatchOutcome]:
        """
        Match a batch of tracks with bounded concurrency.

        The batch size is not checked here; callers bound it.

        Args:
            tracks: Tracks to match, in caller order.
            progress_bar: Optional progress bar updated as tracks finish.

        Returns:
            One MatchOutcome per track, in input order.
        """
        if not tracks:
            return []

        semaphore = asyncio.Semaphore(self._concurrency)
        outcomes: list[MatchOutcome | None] = [None] * len(tracks)

        async def process_track(index: int, track: TrackDescriptor) -> None:
            async with semaphore:
                outcome = await self._run_pipeline(track)
            outcomes[index] = outcome
            try:
                self._report(track, outcome, progress_bar)
            except Exception as e:
                logger.error(f"Failed to report outcome for {track.display_name}: {e}")

        await asyncio.gather(
            *(process_track(index, track) for index, track in enumerate(tracks))
        )

        return list(outcomes)

    async def _run_pipeline(self, track: TrackDescriptor) -> MatchOutcome:
        """Run match_track(), converting unexpected errors into search_error."""
        try:
            return await self.match_track(track)
        except Exception as e:
            logger.error(f"Error matching {track.display_name}: {e}", exc_info=True)
            return MatchOutcome.unmatched(ReasonCode.SEARCH_ERROR)

    def _report(
        self,
        track: TrackDescriptor,
        outcome: MatchOutcome,
        progress_bar: MatchingProgressBar | None
    ) -> None:
        if outcome.has_url:
            logger.debug(
                f"Matched [{outcome.confidence.value}]: {track.display_name} -> "
                f"{outcome.youtube_url}"
            )
        else:
            logger.debug(f"No match: {track.display_name} ({outcome.reason.value})")

        if progress_bar is None:
            return

        if outcome.has_url:
            progress_bar.log(format_matched_message(
                track.artists, track.title, outcome.youtube_url, outcome.confidence.value
            ))
        else:
            progress_bar.log(format_no_match_message(
                track.artists, track.title, outcome.reason.value
            ))
        progress_bar.update(outcome)

    def _log_review(
        self,
        track: TrackDescriptor,
        outcome: MatchOutcome,
        ranked: list[ScoredCandidate]
    ) -> None:
        """Send outcomes that deserve a human look to the match review log."""
        alternatives = []
        if ranked:
            best_score = ranked[0].score
            alternatives = [
                (s.candidate.title, s.candidate.url, s.score)
                for s in ranked[1:]
                if best_score - s.score <= CLOSE_MATCH_THRESHOLD
            ]

        if outcome.reason == ReasonCode.MATCHED and not alternatives:
            return

        log_match_review(
            logger,
            track_title=track.title,
            track_artists=track.artists,
            reason=outcome.reason.value,
            confidence=outcome.confidence.value if outcome.confidence else None,
            score=outcome.score,
            youtube_title=outcome.matched_title,
            youtube_url=outcome.youtube_url,
            alternatives=alternatives,
        )


# =============================================================================
# Convenience Functions
# =============================================================================

async def evaluate_batch(
    search: SearchFunction,
    tracks: list[TrackDescriptor],
    concurrency: int = DEFAULT_CONCURRENCY
) -> list[MatchOutcome]:
    """
    Match a batch of tracks with a throwaway matcher.

    Args:
        search: Async search function.
        tracks: Tracks to match.
        concurrency: Maximum concurrent track pipelines.

    Returns:
        One MatchOutcome per track, in input order.
    """
    matcher = YouTubeMatcher(search, concurrency=concurrency)
    return await matcher.evaluate_batch(tracks)
