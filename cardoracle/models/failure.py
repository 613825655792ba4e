"""
Failure classification for tool and ingest errors.

Every failure a tool surfaces is a KnownError subclass so it can be
rendered as user-visible text. Response types:

- ConfigurationError: required connection parameters are missing
- UpstreamError: the card provider answered with a non-success status
- SchemaDriftError: the body parsed but no longer matches our models
- StoreUnavailableError: the collection store cannot serve the request
- ToolInputError: tool arguments failed parameter validation
"""

from enum import Enum
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from cardoracle.models.validation import ValidationResult


class FailureKind(str, Enum):
    """Classification of failure types."""

    # Input validation failures
    INVALID_INPUT = "invalid_input"

    # Resource failures
    NOT_FOUND = "not_found"

    # Configuration
    CONFIGURATION = "configuration"

    # Service failures
    SERVICE_UNAVAILABLE = "service_unavailable"
    EXTERNAL_API_ERROR = "external_api_error"
    SCHEMA_DRIFT = "schema_drift"
    BATCH_WRITE_FAILED = "batch_write_failed"


class KnownError(Exception):
    """
    Base class for exceptions that represent known, explainable failures.

    Subclass this for errors where the system knows exactly what went wrong.
    """

    def __init__(
        self,
        kind: FailureKind,
        message: str,
        detail: str | None = None,
        suggestion: str | None = None,
    ):
        self.kind = kind
        self.message = message
        self.detail = detail
        self.suggestion = suggestion
        super().__init__(message)

    def to_text(self) -> str:
        """Render the failure as user-visible text."""
        lines = [self.message]
        if self.detail:
            lines.append(self.detail)
        if self.suggestion:
            lines.append(self.suggestion)
        return "\n".join(lines)


class ConfigurationError(KnownError):
    """Raised when required connection parameters are missing."""

    def __init__(self, message: str):
        super().__init__(
            kind=FailureKind.CONFIGURATION,
            message=message,
            suggestion="Set WEAVIATE_URL and WEAVIATE_API_KEY.",
        )


class UpstreamError(KnownError):
    """
    Raised when the card provider returns a non-success response.

    Provider-supplied detail text is preferred over the generic status message.
    """

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        kind: FailureKind = FailureKind.EXTERNAL_API_ERROR,
    ):
        self.status_code = status_code
        super().__init__(kind=kind, message=message)

    @classmethod
    def from_payload(cls, status_code: int, payload: Any) -> "UpstreamError":
        """Build an error from a Scryfall error object (or anything else)."""
        kind = FailureKind.NOT_FOUND if status_code == 404 else FailureKind.EXTERNAL_API_ERROR
        if isinstance(payload, dict):
            details = payload.get("details")
            if isinstance(details, str):
                return cls(f"Scryfall API error: {details}", status_code, kind)
            error = payload.get("error")
            if isinstance(error, str):
                return cls(f"Scryfall API error: {status_code} - {error}", status_code, kind)
        return cls(f"Scryfall API error: {status_code} - Unknown error", status_code, kind)


class SchemaDriftError(KnownError):
    """
    Raised when a response parses as JSON but fails schema validation.

    Signals a provider contract change rather than a bad request.
    """

    def __init__(self, result: "ValidationResult[Any]"):
        self.result = result
        super().__init__(
            kind=FailureKind.SCHEMA_DRIFT,
            message=(
                "The card data from Scryfall did not match our expected schema. "
                "This might mean the API has changed."
            ),
            detail=result.describe(),
        )


class StoreUnavailableError(KnownError):
    """Raised when the collection store cannot serve a request."""

    def __init__(self, message: str, detail: str | None = None):
        super().__init__(
            kind=FailureKind.SERVICE_UNAVAILABLE,
            message=message,
            detail=detail,
        )


class BatchWriteError(KnownError):
    """Raised when the store rejects part or all of a bulk insert."""

    def __init__(self, message: str, failed_ids: tuple[str, ...] = ()):
        self.failed_ids = failed_ids
        super().__init__(kind=FailureKind.BATCH_WRITE_FAILED, message=message)


class ToolInputError(KnownError):
    """Raised when tool arguments fail parameter validation."""

    def __init__(self, tool_name: str, detail: str):
        self.tool_name = tool_name
        super().__init__(
            kind=FailureKind.INVALID_INPUT,
            message=f"Invalid arguments for {tool_name}",
            detail=detail,
        )
