"""Error taxonomy for the fact-checking pipeline.

Every failure that can reach a caller derives from ``FactCheckError`` and
carries the HTTP status code plus a single-line message that is safe to
show to the caller. Diagnostic detail is kept on the exception for logging
and never echoed back.
"""

from typing import Iterable, Optional


class FactCheckError(Exception):
    """Base class for caller-visible pipeline failures."""

    status_code: int = 500
    public_message: str = "Failed to analyze article"

    def __init__(
        self,
        public_message: Optional[str] = None,
        *,
        status_code: Optional[int] = None,
        detail: Optional[str] = None,
    ):
        """Initialize the error.

        Args:
            public_message: Message surfaced to the caller
            status_code: HTTP status override
            detail: Internal diagnostic detail (logged only)
        """
        if public_message is not None:
            self.public_message = public_message
        if status_code is not None:
            self.status_code = status_code
        self.detail = detail
        super().__init__(detail or self.public_message)


class ValidationError(FactCheckError):
    """Malformed, oversized or missing input."""

    status_code = 400
    public_message = "Invalid input"


class AdmissionRejected(FactCheckError):
    """Caller exceeded the request quota for the current window."""

    status_code = 429
    public_message = "Rate limit exceeded. Please try again later."

    def __init__(self, retry_after: float = 0.0):
        super().__init__()
        self.retry_after = retry_after
        self.remaining_requests = 0


class ModerationRejected(FactCheckError):
    """Input was flagged by the content-safety classifier."""

    status_code = 400

    def __init__(self, categories: Iterable[str]):
        self.categories = sorted(categories)
        super().__init__(
            f"Content flagged as inappropriate: {', '.join(self.categories)}"
        )


class ConfigurationError(FactCheckError):
    """Required configuration (the provider credential) is missing."""

    status_code = 500
    public_message = "AI analysis service temporarily unavailable"


class UpstreamError(FactCheckError):
    """The completion provider or the search backend failed."""

    status_code = 500
    public_message = "AI analysis service failed to complete the request"


class UpstreamTimeoutError(UpstreamError):
    """An upstream call or the request deadline timed out."""

    status_code = 408
    public_message = "The analysis took too long to complete. Please try again."


class SchemaMismatchError(UpstreamError):
    """Provider output did not match the declared output schema."""

    def __init__(self, schema_name: str, detail: Optional[str] = None):
        self.schema_name = schema_name
        super().__init__(detail=f"{schema_name}: {detail}" if detail else schema_name)


class ArticleExtractionError(FactCheckError):
    """The article URL could not be fetched or turned into text."""

    status_code = 500
    public_message = "Failed to extract article"
