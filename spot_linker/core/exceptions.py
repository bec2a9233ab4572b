"""
Exception classes for spot-linker.

This module defines all custom exceptions used throughout the application.
Each exception is designed to provide clear, actionable error messages
and to distinguish between different failure modes.

Exception Hierarchy:
    SpotLinkerError (base)
        ConfigError - Configuration file issues
        SearchError - YouTube search backend issues
        BatchValidationError - Caller-side batch contract violations

Note:
    The matching core never lets these escape a batch. SearchError is raised
    by the search collaborator and absorbed per query; only the caller layer
    (LinkService) and the CLI let errors reach the user.
"""


class SpotLinkerError(Exception):
    """
    Base exception for all spot-linker errors.

    All custom exceptions in this project inherit from this class,
    allowing callers to catch all spot-linker errors with a single
    except clause if desired.

    Attributes:
        message: Human-readable error description.
        details: Optional dictionary with additional context (e.g., query, track).

    Example:
        try:
            # some operation
        except SpotLinkerError as e:
            logger.error(f"Operation failed: {e.message}")
            if e.details:
                logger.debug(f"Details: {e.details}")
    """

    def __init__(self, message: str, details: dict | None = None) -> None:
        """
        Initialize the base exception.

        Args:
            message: Human-readable error description that will be shown to the user.
            details: Optional dictionary containing additional context about the error.
                     Common keys include:
                     - 'query': Search query involved in the error
                     - 'track': "Title - Artists" of the track involved
                     - 'original_error': The underlying exception if wrapping another error
        """
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        """Return the error message for display."""
        return self.message


class ConfigError(SpotLinkerError):
    """
    Raised when there's an issue with the configuration file.

    This is a CRITICAL error that should stop program execution.

    Common causes:
        - Explicit config path does not exist
        - config.yaml has invalid YAML syntax
        - Invalid field values (e.g., zero concurrency, negative TTL)

    Example:
        raise ConfigError(
            "'matching.concurrency' must be a positive integer",
            details={'field': 'matching.concurrency', 'value': 0}
        )
    """
    pass


class SearchError(SpotLinkerError):
    """
    Raised when a single YouTube search call fails.

    This is a NON-CRITICAL error. The matcher treats a failed query like
    an empty one and moves on to the next query string for the same track.
    It is never retried with the same query.

    Common causes:
        - Network connectivity issues
        - Rate limiting / abuse detection by the unofficial backend
        - Malformed or empty API responses

    Attributes:
        query: The search query that failed.

    Example:
        raise SearchError(
            "YouTube search failed: Connection reset",
            query="Shape of You Ed Sheeran official audio",
            details={'original_error': 'Connection reset by peer'}
        )
    """

    def __init__(
        self,
        message: str,
        details: dict | None = None,
        query: str | None = None
    ) -> None:
        """
        Initialize search error with the failing query.

        Args:
            message: Human-readable error description.
            details: Optional additional context.
            query: The query string that was being searched.
        """
        super().__init__(message, details)
        self.query = query


class BatchValidationError(SpotLinkerError):
    """
    Raised when a batch violates the caller-side contract.

    The matcher assumes batches are bounded and every track has a title
    and artists. LinkService checks this before any search happens and
    raises this error instead of starting a partial batch.

    Common causes:
        - Empty batch
        - More tracks than matching.max_batch_size
        - A track with an empty title or artists field

    Example:
        raise BatchValidationError(
            "Maximum 10 tracks per batch",
            details={'batch_size': 12, 'max_batch_size': 10}
        )
    """
    pass
