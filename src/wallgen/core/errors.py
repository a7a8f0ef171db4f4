"""Exception hierarchy for the Wallgen gateway.

Every failure the core can surface is a :class:`GatewayError` carrying the
HTTP status it should be reported with, a short ``error`` title, and a
human-readable ``message``.  The FastAPI layer translates these into JSON
responses; the core never raises ``HTTPException`` itself.

Taxonomy
--------
- Credential errors: :class:`MissingCredentialError` (401).
- Prompt errors (language model): :class:`UpstreamPromptError`,
  :class:`EmptyPromptResponse`, :class:`MalformedPromptResponse` -- all
  subclasses of :class:`PromptGenerationError` and reported as 502.
- Render errors (fal.ai): :class:`RenderServiceError` and its subclasses,
  which carry the upstream status when it is a valid HTTP error code.
- Transport errors on the CDN: :class:`ImageFetchFailed` (502).
"""

from __future__ import annotations


def normalize_status(status: int | None) -> int:
    """Pass *status* through when it is an HTTP error code, else 500."""
    if status is not None and 400 <= status < 600:
        return status
    return 500


class GatewayError(Exception):
    """Base class for errors reported to the caller."""

    status_code: int = 500
    error: str = "Internal server error"

    def __init__(self, message: str, *, status_code: int | None = None) -> None:
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code

    def to_dict(self) -> dict:
        return {"error": self.error, "message": self.message}


class MissingCredentialError(GatewayError):
    status_code = 401
    error = "Missing credentials"


class InvalidUploadError(GatewayError):
    status_code = 400
    error = "Invalid upload"


# ---------------------------------------------------------------------------
# Language-model (prompt synthesis) failures.
# ---------------------------------------------------------------------------


class PromptGenerationError(GatewayError):
    status_code = 502
    error = "Prompt generation failed"


class UpstreamPromptError(PromptGenerationError):
    """The language-model call failed at the network or service level.

    Attributes:
        upstream_status: HTTP status returned by the service, or ``None``
            when the request never produced a response.
    """

    def __init__(self, message: str, upstream_status: int | None = None) -> None:
        super().__init__(message)
        self.upstream_status = upstream_status


class EmptyPromptResponse(PromptGenerationError):
    """The service answered but carried no text payload."""


class MalformedPromptResponse(PromptGenerationError):
    """The text payload was not JSON of the expected shape."""


# ---------------------------------------------------------------------------
# Render-service failures.
# ---------------------------------------------------------------------------


class RenderServiceError(GatewayError):
    """A call to the render service failed.

    The reported status is the upstream one when it lies in 400-599,
    otherwise a generic 500.
    """

    error = "Render service error"

    def __init__(self, message: str, upstream_status: int | None = None) -> None:
        super().__init__(message, status_code=normalize_status(upstream_status))
        self.upstream_status = upstream_status


class QueueSubmissionFailed(RenderServiceError):
    error = "Queue submission failed"


class NoImageProduced(GatewayError):
    status_code = 500
    error = "No image was generated by the model"


class ImageFetchFailed(GatewayError):
    status_code = 502
    error = "Failed to fetch the generated image from CDN"


class CatalogUnavailable(GatewayError):
    status_code = 502
    error = "Failed to fetch models from fal.ai"
