"""Error taxonomy for conan-readme-mcp.

Every failure carries a discrete :class:`ErrorKind` assigned where the
failure is detected (validators, HTTP status mapping). Callers branch on
``exc.kind`` rather than on message text.

Hierarchy::

    PackageReadmeError         (UNKNOWN)
    +-- ValidationError        (INVALID_INPUT)
    +-- PackageNotFoundError   (NOT_FOUND)
    +-- VersionNotFoundError   (NOT_FOUND)
    +-- RateLimitError         (RATE_LIMITED)
    +-- ServiceUnavailableError(SERVICE_UNAVAILABLE)
    +-- NetworkError           (NETWORK_FAILURE)
    +-- UpstreamError          (UNKNOWN, any other HTTP status)
"""

from __future__ import annotations

import enum
import typing as t


class ErrorKind(str, enum.Enum):
    INVALID_INPUT = "INVALID_INPUT"
    NOT_FOUND = "NOT_FOUND"
    RATE_LIMITED = "RATE_LIMITED"
    SERVICE_UNAVAILABLE = "SERVICE_UNAVAILABLE"
    NETWORK_FAILURE = "NETWORK_FAILURE"
    UNKNOWN = "UNKNOWN"


RETRYABLE_KINDS = frozenset(
    {ErrorKind.RATE_LIMITED, ErrorKind.SERVICE_UNAVAILABLE, ErrorKind.NETWORK_FAILURE}
)


class PackageReadmeError(Exception):
    """Base error. Subclasses pin ``kind``; ``status_code`` is the upstream HTTP status if any."""

    kind: ErrorKind = ErrorKind.UNKNOWN

    def __init__(self, message: str, *, status_code: t.Optional[int] = None) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code


class ValidationError(PackageReadmeError):
    kind = ErrorKind.INVALID_INPUT

    def __init__(self, message: str, field: t.Optional[str] = None) -> None:
        super().__init__(message)
        self.field = field


class PackageNotFoundError(PackageReadmeError):
    kind = ErrorKind.NOT_FOUND

    def __init__(self, package_name: str) -> None:
        super().__init__(f"Package '{package_name}' not found", status_code=404)
        self.package_name = package_name


class VersionNotFoundError(PackageReadmeError):
    kind = ErrorKind.NOT_FOUND

    def __init__(self, package_name: str, version: str) -> None:
        super().__init__(f"Version '{version}' not found for package '{package_name}'", status_code=404)
        self.package_name = package_name
        self.version = version


class RateLimitError(PackageReadmeError):
    kind = ErrorKind.RATE_LIMITED

    def __init__(self, service: str, retry_after: t.Optional[float] = None) -> None:
        message = f"Rate limit exceeded for {service}"
        if retry_after is not None:
            message += f". Retry after {retry_after:g} seconds"
        super().__init__(message, status_code=429)
        self.retry_after = retry_after


class ServiceUnavailableError(PackageReadmeError):
    kind = ErrorKind.SERVICE_UNAVAILABLE


class NetworkError(PackageReadmeError):
    kind = ErrorKind.NETWORK_FAILURE


class UpstreamError(PackageReadmeError):
    kind = ErrorKind.UNKNOWN


def is_retryable(exc: BaseException) -> bool:
    return isinstance(exc, PackageReadmeError) and exc.kind in RETRYABLE_KINDS
