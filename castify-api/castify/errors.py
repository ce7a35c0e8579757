"""Failure taxonomy for the link-to-cast pipeline.

Each stage raises one of the ``CastifyError`` subclasses below. ``classify``
maps any exception to exactly one ``ConversionError``, which is what the HTTP
layer reports back to the client.
"""

from dataclasses import dataclass
from enum import Enum
from typing import ClassVar, Optional


class ErrorKind(str, Enum):
    BAD_REQUEST = "BadRequest"
    GATEWAY_TIMEOUT = "GatewayTimeout"
    UPSTREAM_ERROR = "UpstreamError"
    UNPROCESSABLE_CONTENT = "UnprocessableContent"
    PUBLISH_REJECTED = "PublishRejected"
    CONFIGURATION_ERROR = "ConfigurationError"
    INTERNAL_ERROR = "InternalError"


@dataclass(frozen=True)
class ConversionError:
    kind: ErrorKind
    message: str
    http_status: int


class CastifyError(Exception):
    """Base class for every classified pipeline failure."""

    kind: ClassVar[ErrorKind] = ErrorKind.INTERNAL_ERROR
    default_status: ClassVar[int] = 500
    default_message: ClassVar[str] = "Unexpected error"

    def __init__(self, message: Optional[str] = None, http_status: Optional[int] = None):
        self.message = message or self.default_message
        self.http_status = http_status or self.default_status
        super().__init__(self.message)

    def to_conversion_error(self) -> ConversionError:
        return ConversionError(
            kind=self.kind, message=self.message, http_status=self.http_status
        )


class BadRequestError(CastifyError):
    kind = ErrorKind.BAD_REQUEST
    default_status = 400
    default_message = "Invalid request"


class FetchError(CastifyError):
    """The source page could not be retrieved."""

    kind = ErrorKind.UPSTREAM_ERROR
    default_status = 502
    default_message = "Could not fetch the URL."


class FetchTimeoutError(FetchError):
    kind = ErrorKind.GATEWAY_TIMEOUT
    default_status = 504
    default_message = "Timed out fetching the URL."


class UpstreamHTTPError(FetchError):
    """The source site answered with a non-2xx status."""

    def __init__(self, status_code: int):
        self.status_code = status_code
        super().__init__(
            upstream_status_message(status_code),
            http_status=status_code if status_code >= 400 else 502,
        )


class UpstreamUnreachableError(FetchError):
    default_message = "Could not reach the URL."


class ParseError(CastifyError):
    """The page lacks metadata the active policy requires."""

    kind = ErrorKind.UNPROCESSABLE_CONTENT
    default_status = 422
    default_message = "Image blocked or not found. Try a different link."


class PublishError(CastifyError):
    kind = ErrorKind.PUBLISH_REJECTED
    default_status = 500
    default_message = "Publish failed"


class ConfigurationError(CastifyError):
    kind = ErrorKind.CONFIGURATION_ERROR
    default_status = 500
    default_message = "Service is not configured"


class InternalError(CastifyError):
    pass


def upstream_status_message(status_code: int) -> str:
    if status_code == 403:
        return "Access denied (403)"
    if status_code == 404:
        return "URL not found (404)"
    return f"HTTP error {status_code}"


def classify(exc: BaseException) -> ConversionError:
    if isinstance(exc, CastifyError):
        return exc.to_conversion_error()
    return InternalError().to_conversion_error()
