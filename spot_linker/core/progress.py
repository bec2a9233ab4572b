"""
Progress bar handling for spot-linker using Rich library.

One bar per run. Every finished track, whether it came from the cache
or from a fresh search, advances the bar and the outcome tally next to it.

Usage:
    from spot_linker.core.progress import MatchingProgressBar

    with MatchingProgressBar(total=len(tracks)) as progress:
        response = await service.link_tracks(tracks, progress_bar=progress)
"""

from collections import Counter
from typing import TYPE_CHECKING, Optional

from rich import get_console
from rich.progress import (
    BarColumn,
    MofNCompleteColumn,
    Progress,
    TaskID,
    TextColumn,
    TimeElapsedColumn,
)
from rich.table import Column
from rich.text import Text
from rich.theme import Theme

if TYPE_CHECKING:
    from spot_linker.youtube.models import MatchOutcome


PROGRESS_THEME = Theme({
    "bar.back": "grey23",
    "bar.complete": "rgb(165,66,129)",
    "bar.finished": "rgb(114,156,31)",
    "progress.percentage": "white",
})

# Tally buckets, in display order
TALLY_STYLES = (
    ("HIGH", "green"),
    ("MEDIUM", "cyan"),
    ("LOW", "yellow"),
    ("none", "red"),
)


class MatchingProgressBar:
    """
    Progress bar for YouTube matching.

    Displays:
    - Description (e.g., "Matching")
    - Tally per confidence band, unmatched last, cache hits in brackets
    - Progress bar, done/total and elapsed time

    Example:
        Matching   HIGH 12  MEDIUM 3  LOW 1  none 2 (cached 4)  ━━━━━━━━━━  18/40 0:00:21

    update() is called from the event loop thread only, so no locking
    is needed around the counters.
    """

    def __init__(self, total: int, description: str = "Matching", status_width: int = 48):
        """
        Args:
            total: Total number of tracks.
            description: Label on the left.
            status_width: Width of the tally column.
        """
        self.total = total
        self.description = description
        self.completed = 0
        self.cached = 0
        self.tally: Counter[str] = Counter()

        self.console = get_console()
        self.progress = Progress(
            TextColumn(
                "[white]{task.description}",
                table_column=Column(width=10, no_wrap=True, overflow="ellipsis"),
            ),
            TextColumn(
                "{task.fields[status]}",
                table_column=Column(width=status_width, no_wrap=True),
            ),
            BarColumn(bar_width=30),
            MofNCompleteColumn(),
            TimeElapsedColumn(),
            console=self.console,
            transient=False,
        )

        self.task_id: Optional[TaskID] = None
        self._started = False

    @property
    def matched(self) -> int:
        """Tracks that received a URL, any confidence."""
        return self.completed - self.tally["none"]

    def __enter__(self) -> "MatchingProgressBar":
        self.start()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.stop()

    def start(self) -> None:
        if self._started:
            return
        self.console.push_theme(PROGRESS_THEME)
        self.progress.start()
        self.task_id = self.progress.add_task(
            self.description, total=self.total, status=self.status_text()
        )
        self._started = True

    def stop(self) -> None:
        if not self._started:
            return
        self.progress.stop()
        self.console.pop_theme()
        self._started = False

    def log(self, message: str) -> None:
        """
        Print a line above the bar.

        The message may carry ANSI colors (see format_matched_message) and
        free text such as video titles, so it is never parsed as markup.
        """
        self.progress.console.print(Text.from_ansi(message), highlight=False)

    def status_text(self) -> str:
        parts = [
            f"[{style}]{bucket} {self.tally[bucket]}[/{style}]"
            for bucket, style in TALLY_STYLES
            if self.tally[bucket] or bucket in ("HIGH", "none")
        ]
        if self.cached:
            parts.append(f"[dim](cached {self.cached})[/dim]")
        return "  ".join(parts)

    def update(self, outcome: "MatchOutcome", cached: bool = False) -> None:
        """
        Record one finished track.

        Args:
            outcome: The track's outcome.
            cached: True when the outcome was served from the cache.
        """
        self.completed += 1
        bucket = outcome.confidence.value if outcome.confidence is not None else "none"
        self.tally[bucket] += 1
        if cached:
            self.cached += 1

        if self.task_id is not None:
            self.progress.update(
                self.task_id,
                completed=self.completed,
                status=self.status_text(),
            )
