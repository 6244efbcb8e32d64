"""Login data model.

All value types are frozen dataclasses; nothing here performs validation
beyond normalising the resource list.
"""

from farcaster_login.models.login import (
    InvalidSignature,
    LoginParams,
    Message,
    OwnershipMismatch,
    SignerOutcome,
    VerificationError,
    VerificationOutcome,
)

__all__ = [
    "LoginParams",
    "Message",
    "InvalidSignature",
    "OwnershipMismatch",
    "VerificationError",
    "SignerOutcome",
    "VerificationOutcome",
]
