"""Sign In With Farcaster message construction and validation.

A Farcaster login message is a Sign In With Ethereum (EIP-4361) message with
three Farcaster-specific rules on top of the SIWE format:
- the statement contains "Log in With Farcaster"
- the chain id is 10 (OP Mainnet, where the IdRegistry lives)
- exactly one resource is a farcaster://fids/<fid> URI

The EIP-4361 field rules, serialization and parsing come from the siwe
library. build() is the only way to obtain a Message. It is a pure function
of its input and reports the first failing field in a fixed order: address,
other SIWE fields, statement, chain id, resources.
"""

import re

from pydantic import ValidationError
from siwe import SiweMessage

from farcaster_login.models.login import LoginParams, Message
from farcaster_login.result import Err, Ok, Result
from farcaster_login.services.error_classifier import classify_error
from farcaster_login.services.exceptions import LoginError, ValidationFailure
from farcaster_login.services.fid_resource import find_fid

FARCASTER_STATEMENT = "Log in With Farcaster"
OP_MAINNET_CHAIN_ID = 10

# Rules the EIP-4361 grammar enforces when parsing that SiweMessage does not
# check on construction. Without them build() could sign text parse_message()
# rejects.
DOMAIN_PATTERN = re.compile(r"[^\s/?#]+")
NONCE_PATTERN = re.compile(r"[A-Za-z0-9]{8,}")
WHITESPACE_PATTERN = re.compile(r"\s")

# Error reported for each field, in reporting order
FIELD_ERRORS = {
    "address": "invalid address",
    "domain": "invalid domain",
    "uri": "invalid uri",
    "version": "invalid message version",
    "nonce": "invalid nonce",
    "issued_at": "invalid issuedAt",
    "statement": "Invalid statement",
    "chain_id": f"Chain ID must be {OP_MAINNET_CHAIN_ID}",
    "resources": "invalid resource",
}

# SiweMessage may report camelCase aliases in error locations
FIELD_ALIASES = {"chainId": "chain_id", "issuedAt": "issued_at"}


def _is_malformed_resource(resource: object) -> bool:
    return not isinstance(resource, str) or WHITESPACE_PATTERN.search(resource) is not None


def _rule_violations(params: LoginParams) -> set[str]:
    """Return the fields breaking rules checked here rather than by SiweMessage."""
    violations = set()
    if not isinstance(params.domain, str) or not DOMAIN_PATTERN.fullmatch(params.domain):
        violations.add("domain")
    if not isinstance(params.nonce, str) or not NONCE_PATTERN.fullmatch(params.nonce):
        violations.add("nonce")
    if (
        not isinstance(params.statement, str)
        or FARCASTER_STATEMENT not in params.statement
        or "\n" in params.statement
    ):
        violations.add("statement")
    if params.chain_id != OP_MAINNET_CHAIN_ID:
        violations.add("chain_id")
    if any(_is_malformed_resource(resource) for resource in params.resources):
        violations.add("resources")
    return violations


def _error_fields(error: ValidationError) -> set[str]:
    fields = set()
    for detail in error.errors():
        if detail["loc"]:
            name = str(detail["loc"][0])
            fields.add(FIELD_ALIASES.get(name, name))
    return fields


def _first_failure(fields: set[str]) -> ValidationFailure | None:
    for field_name, message in FIELD_ERRORS.items():
        if field_name in fields:
            return ValidationFailure(message)
    return None


def to_siwe_message(params: LoginParams) -> SiweMessage:
    """Convert params to a siwe SiweMessage.

    Raises:
        pydantic.ValidationError: If a field breaks the EIP-4361 rules
    """
    return SiweMessage(
        domain=params.domain,
        address=params.address,
        statement=params.statement or None,
        uri=params.uri,
        version=params.version,
        chain_id=params.chain_id,
        nonce=params.nonce,
        issued_at=params.issued_at,
        resources=list(params.resources) or None,
    )


def prepare_message(params: LoginParams) -> str:
    """Serialize params to the canonical EIP-4361 text.

    Raises:
        pydantic.ValidationError: If a field breaks the EIP-4361 rules
    """
    return to_siwe_message(params).prepare_message()


def build(params: LoginParams) -> Result[Message, LoginError]:
    """Validate login params and build the signable message.

    Args:
        params: Caller-supplied message fields

    Returns:
        Ok(Message) with the embedded fid, or Err(ValidationFailure) naming the
        first rule that failed

    Example:
        >>> result = build(LoginParams(
        ...     domain="example.com",
        ...     statement="Log in With Farcaster",
        ...     address="0x63C378DDC446DFf1d831B9B96F7d338FE6bd4231",
        ...     uri="https://example.com/login",
        ...     version="1",
        ...     nonce="12345678",
        ...     issued_at="2023-10-01T00:00:00.000Z",
        ...     chain_id=10,
        ...     resources=["farcaster://fids/1234"],
        ... ))
        >>> result.unwrap().fid
        1234
    """
    try:
        violations = _rule_violations(params)
        try:
            siwe_message = to_siwe_message(params)
        except ValidationError as e:
            return Err(_first_failure(violations | _error_fields(e)) or classify_error(e))

        failure = _first_failure(violations)
        if failure is not None:
            return Err(failure)

        # Keep the URIs as the library serializes them so text and fields agree
        params = LoginParams(
            domain=params.domain,
            statement=params.statement,
            address=params.address,
            uri=str(siwe_message.uri),
            version=params.version,
            nonce=params.nonce,
            issued_at=params.issued_at,
            chain_id=params.chain_id,
            resources=[str(resource) for resource in siwe_message.resources or ()],
        )
    except (TypeError, ValueError) as e:
        return Err(classify_error(e))

    fid_result = find_fid(params.resources)
    if isinstance(fid_result, Err):
        return fid_result

    return Ok(Message(params=params, fid=fid_result.value, text=siwe_message.prepare_message()))


def parse_message(text: str) -> Result[Message, LoginError]:
    """Parse canonical EIP-4361 text and validate it with build().

    Used for messages that arrive as text (wallet output, files) rather than
    as LoginParams.
    """
    try:
        fields = SiweMessage.from_message(text).model_dump(mode="json")
    except Exception as e:
        # Grammar failures raise the ABNF parser's own error type
        return Err(ValidationFailure(f"invalid message: {e}"))

    return build(
        LoginParams(
            domain=fields["domain"],
            statement=fields["statement"] or "",
            address=fields["address"],
            uri=fields["uri"],
            version=fields["version"],
            nonce=fields["nonce"],
            issued_at=fields["issued_at"],
            chain_id=fields["chain_id"],
            resources=fields["resources"] or (),
        )
    )
