"""Login message and verification outcome values."""

from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import Union


@dataclass(frozen=True)
class LoginParams:
    """Fields of a Sign In With Farcaster message, as supplied by the caller."""

    domain: str
    statement: str
    address: str
    uri: str
    version: str
    nonce: str
    issued_at: str  # ISO-8601
    chain_id: int
    resources: Sequence[str] = ()

    def __post_init__(self) -> None:
        # Normalise to a tuple so the params stay immutable
        object.__setattr__(self, "resources", tuple(self.resources))


@dataclass(frozen=True)
class Message:
    """A validated login message.

    Only produced by successful validation. The text returned by
    prepare_message() is exactly what the wallet signs and what verification
    recovers the signer from.
    """

    params: LoginParams
    fid: int
    text: str = field(repr=False)

    @property
    def domain(self) -> str:
        return self.params.domain

    @property
    def statement(self) -> str:
        return self.params.statement

    @property
    def address(self) -> str:
        return self.params.address

    @property
    def uri(self) -> str:
        return self.params.uri

    @property
    def version(self) -> str:
        return self.params.version

    @property
    def nonce(self) -> str:
        return self.params.nonce

    @property
    def issued_at(self) -> str:
        return self.params.issued_at

    @property
    def chain_id(self) -> int:
        return self.params.chain_id

    @property
    def resources(self) -> tuple[str, ...]:
        return tuple(self.params.resources)

    def prepare_message(self) -> str:
        """Return the canonical EIP-4361 text to sign."""
        return self.text


@dataclass(frozen=True)
class InvalidSignature:
    """The signature does not resolve to the address claimed in the message."""

    expected_address: str
    resolved_address: str | None  # None when the signature could not be decoded


@dataclass(frozen=True)
class OwnershipMismatch:
    """The verified signer is not the IdRegistry custody address of the fid."""

    fid: int
    claimed_owner: str
    actual_owner: str


VerificationError = Union[InvalidSignature, OwnershipMismatch]


@dataclass(frozen=True)
class SignerOutcome:
    """Result of the signature step.

    address is the verified signer on success, or the recovered address
    (possibly None) on failure.
    """

    success: bool
    address: str | None
    error: InvalidSignature | None = None


@dataclass(frozen=True)
class VerificationOutcome:
    """Answer to "is this login valid?".

    A failed login is still an outcome: success is False and error says why.
    """

    data: Message
    success: bool
    fid: int
    error: VerificationError | None = None
