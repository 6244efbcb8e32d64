"""Sign In With Farcaster login verification.

Build a login message, verify its signature and check that the signer owns
the claimed fid on the Farcaster IdRegistry.
"""

from farcaster_login.models.login import (
    InvalidSignature,
    LoginParams,
    Message,
    OwnershipMismatch,
    VerificationError,
    VerificationOutcome,
)
from farcaster_login.result import Err, Ok, Result
from farcaster_login.services.blockchain.id_registry import IdRegistryClient, OwnershipChecker
from farcaster_login.services.exceptions import (
    ErrorKind,
    LoginError,
    NetworkUnavailable,
    ValidationFailure,
)
from farcaster_login.services.fid_resource import parse_fid
from farcaster_login.services.login import LoginVerifier
from farcaster_login.services.siwe_message import build, parse_message

__all__ = [
    "build",
    "parse_message",
    "parse_fid",
    "LoginVerifier",
    "IdRegistryClient",
    "OwnershipChecker",
    "LoginParams",
    "Message",
    "VerificationOutcome",
    "VerificationError",
    "InvalidSignature",
    "OwnershipMismatch",
    "ErrorKind",
    "LoginError",
    "ValidationFailure",
    "NetworkUnavailable",
    "Ok",
    "Err",
    "Result",
]
