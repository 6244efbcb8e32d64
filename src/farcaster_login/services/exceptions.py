"""Service error hierarchy for login verification.

This module defines the exception hierarchy for service-level errors:
- ServiceError: Base for all service errors
- TransientError: Retryable errors (network, timeouts, rejected RPC calls)
- PermanentError: Non-retryable errors (malformed or invalid input)

Login errors carry an ErrorKind code so callers can branch on a closed set of
outcomes. They are returned inside Err results rather than raised.
"""

from enum import Enum


class ErrorKind(str, Enum):
    """Infrastructure error codes."""

    VALIDATION_FAILURE = "bad_request.validation_failure"
    NETWORK_UNAVAILABLE = "unavailable.network_failure"


class ServiceError(Exception):
    """Base exception for all service errors."""

    pass


class TransientError(ServiceError):
    """Transient error that may succeed on retry.

    Examples:
    - Network timeouts
    - RPC endpoint unreachable
    - Rejected contract calls
    """

    pass


class PermanentError(ServiceError):
    """Permanent error that will not succeed on retry.

    Examples:
    - Malformed address or signature
    - Wrong chain id
    - Missing or duplicated fid resource
    """

    pass


class LoginError(ServiceError):
    """Base exception for login errors.

    Attributes:
        kind: Error code identifying the failure class
        message: Human-readable message, passed through verbatim from the source
    """

    kind: ErrorKind

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    @property
    def retryable(self) -> bool:
        return isinstance(self, TransientError)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, LoginError):
            return NotImplemented
        return self.kind == other.kind and self.message == other.message

    def __hash__(self) -> int:
        return hash((self.kind, self.message))

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.message!r})"


class ValidationFailure(PermanentError, LoginError):
    """Caller-supplied data violates a structural or semantic rule."""

    kind = ErrorKind.VALIDATION_FAILURE


class NetworkUnavailable(TransientError, LoginError):
    """The chain could not be reached (transport error, timeout, rejected call)."""

    kind = ErrorKind.NETWORK_UNAVAILABLE
