"""Error taxonomy for resume analysis."""

from __future__ import annotations


class ResumeAnalyzerError(Exception):
    """Base class for every failure raised by this package."""

    status: int | None = None


class ModelServiceError(ResumeAnalyzerError):
    """The model service rejected a request (non-retryable)."""

    def __init__(self, message: str, status: int | None = None):
        super().__init__(message)
        self.status = status


class RateLimitedError(ModelServiceError):
    """The model service throttled the request.

    Attributes:
        retry_after: Seconds the service asked us to wait, if it said so.
    """

    def __init__(self, message: str = "Rate limit exceeded", retry_after: float | None = None):
        super().__init__(message, status=429)
        self.retry_after = retry_after


class MissingCredentialsError(ResumeAnalyzerError):
    status = 401

    def __init__(self, message: str = "API key not found. Set ANTHROPIC_API_KEY in the environment or .env file."):
        super().__init__(message)


class MalformedExtractionError(ResumeAnalyzerError):
    """A chunk extraction response was not a JSON object of the expected shape."""

    status = 422


class MalformedReportError(ResumeAnalyzerError):
    """The aggregation response was not parseable into a report."""

    status = 422


class IncompleteReportError(MalformedReportError):
    def __init__(self, field: str):
        super().__init__(f"Invalid response: missing required field '{field}'")
        self.field = field


class ScoreOutOfRangeError(MalformedReportError):
    def __init__(self, score: object):
        super().__init__(f"Invalid score: must be between 60 and 100 (got {score!r})")
        self.score = score


class AnalysisError(ResumeAnalyzerError):
    """Single failure type surfaced by the orchestrator.

    The underlying failure is kept as ``__cause__``.
    """

    def __init__(self, message: str, status: int | None = None):
        super().__init__(message)
        self.message = message
        self.status = status
