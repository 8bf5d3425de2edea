"""Custom exception hierarchy for the lineup sync pipeline.

All application exceptions inherit from :class:`LineupSyncError`, which
carries an optional ``provider_name`` so error handlers can identify which
external collaborator (e.g. "http_page", "spotify", "sqlite") caused the
failure.

The hierarchy is organized by failure class:

    LineupSyncError  (base -- catch-all for any pipeline error)
    +-- ScrapeError          (page fetch / parse failure)
    +-- StorageError         (relational store failure)
    +-- CatalogError         (music-catalog API failure)
    +-- RateLimitError       (catalog rate limit, carries retry_after)
    +-- ConfigurationError   (unknown festival, missing credentials)
    +-- PipelineError        (orchestration, run lock)

Callers decide severity from context: a ``ScrapeError`` raised for an index
page aborts the source, the same error for a detail page is recorded and
the batch continues.
"""


class LineupSyncError(Exception):
    """Base exception for all lineup sync errors.

    The ``__str__`` method prefixes the provider name in brackets for
    structured log output, e.g. ``[spotify] Token exchange failed``.
    """

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        provider_name: str | None = None,
    ) -> None:
        self._message = message
        self._provider_name = provider_name
        super().__init__(self._message)

    @property
    def message(self) -> str:
        return self._message

    @property
    def provider_name(self) -> str | None:
        return self._provider_name

    def __str__(self) -> str:
        if self._provider_name:
            return f"[{self._provider_name}] {self._message}"
        return self._message


# ---------------------------------------------------------------------------
# Scraping
# ---------------------------------------------------------------------------

class ScrapeError(LineupSyncError):
    """Raised when a festival page cannot be fetched or parsed."""

    def __init__(
        self,
        message: str = "Page scrape failed",
        provider_name: str | None = None,
    ) -> None:
        super().__init__(message=message, provider_name=provider_name)


# ---------------------------------------------------------------------------
# External service / provider errors
# ---------------------------------------------------------------------------

class StorageError(LineupSyncError):
    """Raised when the relational lineup store rejects a read or write."""

    def __init__(
        self,
        message: str = "Lineup store operation failed",
        provider_name: str | None = None,
    ) -> None:
        super().__init__(message=message, provider_name=provider_name)


class CatalogError(LineupSyncError):
    """Raised when a music-catalog API call fails for a non rate-limit reason."""

    def __init__(
        self,
        message: str = "Catalog API call failed",
        provider_name: str | None = None,
    ) -> None:
        super().__init__(message=message, provider_name=provider_name)


class RateLimitError(LineupSyncError):
    """Raised when a catalog API signals rate limiting.

    ``retry_after`` is the server-specified wait in seconds.
    """

    def __init__(
        self,
        message: str = "Rate limit exceeded",
        provider_name: str | None = None,
        retry_after: float = 60.0,
    ) -> None:
        self._retry_after = retry_after
        super().__init__(message=message, provider_name=provider_name)

    @property
    def retry_after(self) -> float:
        return self._retry_after


# ---------------------------------------------------------------------------
# Orchestration / configuration errors
# ---------------------------------------------------------------------------

class ConfigurationError(LineupSyncError):
    """Raised when configuration is invalid or missing at startup."""

    def __init__(
        self,
        message: str = "Invalid or missing configuration",
        provider_name: str | None = None,
    ) -> None:
        super().__init__(message=message, provider_name=provider_name)


class PipelineError(LineupSyncError):
    """Raised when pipeline orchestration fails (run lock held, etc.)."""

    def __init__(
        self,
        message: str = "Pipeline orchestration failed",
        provider_name: str | None = None,
    ) -> None:
        super().__init__(message=message, provider_name=provider_name)
