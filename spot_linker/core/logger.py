"""
Logging configuration for spot-linker.

This module sets up the logging system with multiple outputs:
    - Console: Real-time progress with tqdm-compatible formatting
    - log_full.log: Complete log of all events (DEBUG and above)
    - log_errors.log: Only ERROR and CRITICAL level messages
    - match_review.log: Tracks whose outcome deserves a human look
      (low confidence, no match, everything filtered, search errors,
      or a runner-up within a few points of the selected video)

The logging system follows the principle: everything to screen is also saved
to file, then filtered into specialized files.

Log File Locations:
    All log files are created in the log directory from config.yaml.
    Each run gets its own timestamped files.

Usage:
    from spot_linker.core.logger import setup_logging, get_logger

    setup_logging(log_dir)  # Call once at startup
    logger = get_logger(__name__)  # Get logger for each module

    logger.info("Starting batch")
"""

import logging
import sys
from datetime import datetime
from pathlib import Path
from typing import TextIO

from tqdm import tqdm


# Log file name prefixes (a run timestamp is appended)
LOG_FULL_PREFIX = "log_full"
LOG_ERRORS_PREFIX = "log_errors"
MATCH_REVIEW_PREFIX = "match_review"

# Log format for file output (detailed with timestamp)
FILE_LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
FILE_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


class Colors:
    """ANSI color codes for terminal output."""
    RESET = "\033[0m"
    RED = "\033[31m"
    GREEN = "\033[32m"
    YELLOW = "\033[33m"
    BLUE = "\033[34m"
    CYAN = "\033[36m"
    WHITE = "\033[37m"
    BOLD = "\033[1m"


class ColoredConsoleFormatter(logging.Formatter):
    """
    Custom formatter that adds colors to console output.

    Colors:
        - DEBUG: Blue
        - INFO: Green
        - WARNING: Yellow
        - ERROR: Red
        - CRITICAL: Bold Red
    """

    LEVEL_COLORS = {
        logging.DEBUG: Colors.BLUE,
        logging.INFO: Colors.GREEN,
        logging.WARNING: Colors.YELLOW,
        logging.ERROR: Colors.RED,
        logging.CRITICAL: Colors.BOLD + Colors.RED,
    }

    def format(self, record: logging.LogRecord) -> str:
        color = self.LEVEL_COLORS.get(record.levelno, Colors.WHITE)
        colored_levelname = f"{color}{record.levelname}{Colors.RESET}"
        return f"{colored_levelname}: {record.getMessage()}"


class TqdmLoggingHandler(logging.Handler):
    """
    Logging handler that writes to console without breaking progress bars.

    Progress bars redraw in place on stderr. Plain logging to stderr
    interleaves with the redraws; tqdm.write() prints above the bar instead.

    Attributes:
        stream: The output stream (defaults to sys.stderr).
    """

    def __init__(self, stream: TextIO = sys.stderr) -> None:
        super().__init__()
        self.stream = stream

    def emit(self, record: logging.LogRecord) -> None:
        try:
            msg = self.format(record)
            tqdm.write(msg, file=self.stream)
        except Exception:
            self.handleError(record)


class MatchReviewHandler(logging.Handler):
    """
    Custom handler that captures match outcomes that need review.

    This handler listens for log records that carry match review
    information and writes them to match_review.log in a
    human-readable format:

        Shape of You - Ed Sheeran
        Outcome: low_confidence (LOW, score: 44.0)
        Selected: Shape of You (Lyrics) https://www.youtube.com/watch?v=yyyyy
        Alternatives:
          - Shape Of You [Official Video] https://www.youtube.com/watch?v=zzzzz (score: 41.5)

    The handler looks for specific extra fields in log records:
        - 'review_track_title': The track title
        - 'review_track_artists': The track artists
        - 'review_reason': The outcome reason code value
        - 'review_confidence': The confidence label (optional)
        - 'review_score': The selected score (optional)
        - 'review_youtube_title': The selected video title (optional)
        - 'review_youtube_url': The selected video URL (optional)
        - 'review_alternatives': List of (title, url, score) tuples (optional)

    Only records containing these fields are written to the report.

    Attributes:
        report_path: Path to the match_review.log file.
        report_file: Open file handle (opened by open()).
    """

    def __init__(self, report_path: Path) -> None:
        super().__init__()
        self.report_path = report_path
        self.report_file: TextIO | None = None

    def open(self) -> None:
        """
        Open the report file for writing.

        Called by setup_logging() after handler is created.
        """
        self.report_file = open(self.report_path, "w", encoding="utf-8")

    def emit(self, record: logging.LogRecord) -> None:
        """
        Write review info to the report if present in the log record.

        Records without 'review_track_title' are ignored.
        """
        if not hasattr(record, "review_track_title"):
            return

        if self.report_file is None:
            return

        try:
            title = getattr(record, "review_track_title", "Unknown")
            artists = getattr(record, "review_track_artists", "Unknown")
            reason = getattr(record, "review_reason", "")
            confidence = getattr(record, "review_confidence", None)
            score = getattr(record, "review_score", None)
            youtube_title = getattr(record, "review_youtube_title", None)
            youtube_url = getattr(record, "review_youtube_url", None)
            alternatives = getattr(record, "review_alternatives", None) or []

            outcome = f"Outcome: {reason}"
            if confidence is not None and score is not None:
                outcome += f" ({confidence}, score: {score:.1f})"
            elif score is not None:
                outcome += f" (score: {score:.1f})"

            self.acquire()
            try:
                self.report_file.write(f"{title} - {artists}\n")
                self.report_file.write(f"{outcome}\n")
                if youtube_url:
                    self.report_file.write(f"Selected: {youtube_title} {youtube_url}\n")
                if alternatives:
                    self.report_file.write("Alternatives:\n")
                    for alt_title, alt_url, alt_score in alternatives:
                        self.report_file.write(
                            f"  - {alt_title} {alt_url} (score: {alt_score:.1f})\n"
                        )
                self.report_file.write("\n")
                self.report_file.flush()
            finally:
                self.release()
        except Exception:
            self.handleError(record)

    def close(self) -> None:
        """
        Close the report file handle.

        Safe to call multiple times.
        """
        if self.report_file is not None:
            self.report_file.close()
            self.report_file = None
        super().close()


class ErrorOnlyFilter(logging.Filter):
    """
    Filter that only allows ERROR and CRITICAL level records.

    Used by the error log file handler to exclude DEBUG, INFO, and WARNING.
    """

    def filter(self, record: logging.LogRecord) -> bool:
        return record.levelno >= logging.ERROR


def setup_logging(log_dir: Path, verbose: bool = False) -> None:
    """
    Configure the logging system for the application.

    This function should be called ONCE at application startup, after
    the configuration is loaded but before any other operations.

    Args:
        log_dir: Directory where log files will be created.
        verbose: If True, the console also shows DEBUG records.

    Behavior:
        1. Create log_dir if it doesn't exist
        2. Generate timestamp for this run's log files
        3. Configure root logger level to DEBUG
        4. Console handler (TqdmLoggingHandler), INFO or DEBUG, colored
        5. log_full_{timestamp}.log, DEBUG, full format
        6. log_errors_{timestamp}.log, ERROR+ via ErrorOnlyFilter
        7. match_review_{timestamp}.log via MatchReviewHandler

    See Also:
        log_match_review(): Helper to log with correct extra fields
    """
    log_dir.mkdir(parents=True, exist_ok=True)

    timestamp = datetime.now().strftime("%Y-%m-%d_%H-%M-%S")

    root_logger = logging.getLogger()
    root_logger.setLevel(logging.DEBUG)

    # Remove any existing handlers
    root_logger.handlers.clear()

    console_handler = TqdmLoggingHandler()
    console_handler.setLevel(logging.DEBUG if verbose else logging.INFO)
    console_handler.setFormatter(ColoredConsoleFormatter())
    root_logger.addHandler(console_handler)

    full_log_path = log_dir / f"{LOG_FULL_PREFIX}_{timestamp}.log"
    full_handler = logging.FileHandler(full_log_path, mode="w", encoding="utf-8")
    full_handler.setLevel(logging.DEBUG)
    full_handler.setFormatter(logging.Formatter(FILE_LOG_FORMAT, FILE_DATE_FORMAT))
    root_logger.addHandler(full_handler)

    error_log_path = log_dir / f"{LOG_ERRORS_PREFIX}_{timestamp}.log"
    error_handler = logging.FileHandler(error_log_path, mode="w", encoding="utf-8")
    error_handler.setLevel(logging.DEBUG)  # Filter handles the level restriction
    error_handler.setFormatter(logging.Formatter(FILE_LOG_FORMAT, FILE_DATE_FORMAT))
    error_handler.addFilter(ErrorOnlyFilter())
    root_logger.addHandler(error_handler)

    review_path = log_dir / f"{MATCH_REVIEW_PREFIX}_{timestamp}.log"
    review_handler = MatchReviewHandler(review_path)
    review_handler.open()
    root_logger.addHandler(review_handler)

    # ytmusicapi and urllib3 are chatty at DEBUG
    for noisy in ("urllib3", "requests", "ytmusicapi"):
        logging.getLogger(noisy).setLevel(logging.WARNING)


def get_logger(name: str) -> logging.Logger:
    """
    Get a logger instance for a module.

    This is a convenience wrapper around logging.getLogger() that ensures
    consistent logger naming throughout the application.

    Args:
        name: The logger name, typically __name__ of the calling module.

    Note:
        Loggers obtained before setup_logging() is called will have no
        handlers and will not produce output.
    """
    return logging.getLogger(name)


def format_matched_message(artists: str, title: str, url: str, confidence: str) -> str:
    """Format a 'Matched' message with colors."""
    color = Colors.GREEN if confidence != "LOW" else Colors.YELLOW
    return (
        f"{color}Matched{Colors.RESET} [{confidence}]: "
        f"{artists} - {title} -> "
        f"{Colors.CYAN}{url}{Colors.RESET}"
    )


def format_no_match_message(artists: str, title: str, reason: str) -> str:
    """Format a 'No match' message with colors."""
    return (
        f"{Colors.RED}No match{Colors.RESET}: "
        f"{artists} - {title} "
        f"({reason})"
    )


def log_match_review(
    logger: logging.Logger,
    track_title: str,
    track_artists: str,
    reason: str,
    confidence: str | None = None,
    score: float | None = None,
    youtube_title: str | None = None,
    youtube_url: str | None = None,
    alternatives: list[tuple[str, str, float]] | None = None
) -> None:
    """
    Log a match outcome that should be reviewed by the user.

    This is a convenience function that logs with the correct extra
    fields for the MatchReviewHandler to pick up.

    Args:
        logger: The logger to use for the message.
        track_title: Title of the track being matched.
        track_artists: Artists of the track being matched.
        reason: ReasonCode value of the outcome.
        confidence: Confidence label, if the outcome carries a URL.
        score: Score of the selected (or best rejected) candidate.
        youtube_title: Title of the selected video.
        youtube_url: URL of the selected video.
        alternatives: (title, url, score) tuples for close runner-ups.

    Example:
        log_match_review(
            logger,
            track_title="Shape of You",
            track_artists="Ed Sheeran",
            reason="low_confidence",
            confidence="LOW",
            score=44.0,
            youtube_title="Shape of You (Lyrics)",
            youtube_url="https://www.youtube.com/watch?v=yyy",
        )
    """
    logger.debug(
        f"Review suggested for: {track_artists} - {track_title} ({reason})",
        extra={
            "review_track_title": track_title,
            "review_track_artists": track_artists,
            "review_reason": reason,
            "review_confidence": confidence,
            "review_score": score,
            "review_youtube_title": youtube_title,
            "review_youtube_url": youtube_url,
            "review_alternatives": alternatives,
        }
    )


def shutdown_logging() -> None:
    """
    Properly shut down the logging system.

    Flushes and closes every handler on the root logger, then removes them.
    Typically called in a finally block at application exit.
    """
    root_logger = logging.getLogger()

    for handler in root_logger.handlers[:]:
        handler.flush()
        handler.close()
        root_logger.removeHandler(handler)
