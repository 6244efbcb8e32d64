"""Farcaster login verification.

Verifies a Sign In With Farcaster login in three steps:
1. Verify the message signature against message.address
2. Parse the fid from the message resources
3. If the signature is valid, check that the signer owns the fid on-chain

A login that fails verification is an expected answer, not an error: verify()
returns Ok(VerificationOutcome(success=False, error=...)). Err is reserved for
malformed messages (ValidationFailure) and unreachable chain infrastructure
(NetworkUnavailable). verify() never raises.
"""

import structlog

from farcaster_login.models.login import Message, OwnershipMismatch, VerificationOutcome
from farcaster_login.result import Err, Ok, Result
from farcaster_login.services.blockchain.id_registry import OwnershipChecker
from farcaster_login.services.error_classifier import classify_error
from farcaster_login.services.exceptions import LoginError
from farcaster_login.services.fid_resource import parse_fid
from farcaster_login.services.signature import Providers, addresses_equal, verify_signature

logger = structlog.get_logger()


class LoginVerifier:
    """Verifies login messages against signatures and IdRegistry ownership."""

    def __init__(self, ownership: OwnershipChecker, providers: Providers | None = None):
        """
        Args:
            ownership: Resolves the current owner address of a fid
            providers: Chain id to AsyncWeb3 mapping for smart wallet signatures
        """
        self.ownership = ownership
        self.providers = dict(providers or {})

    async def verify(
        self, message: Message, signature: bytes | str
    ) -> Result[VerificationOutcome, LoginError]:
        """Verify a signed login message.

        Args:
            message: Message returned by build() or parse_message()
            signature: Signature over message.prepare_message()

        Returns:
            Ok(VerificationOutcome) for both valid and invalid logins, or
            Err(ValidationFailure | NetworkUnavailable)

        Example:
            >>> verifier = LoginVerifier(ownership=IdRegistryClient(w3))
            >>> result = await verifier.verify(message, signature)
            >>> if result.is_ok() and result.unwrap().success:
            ...     act_as(result.unwrap().fid)
        """
        try:
            signer = await verify_signature(message, signature, self.providers)
        except Exception as e:
            error = classify_error(e)
            logger.error(
                "login.signature_check_failed",
                address=message.address,
                error=error.message,
                error_kind=error.kind.value,
            )
            return Err(error)

        fid_result = parse_fid(message)
        if isinstance(fid_result, Err):
            logger.warning(
                "login.invalid_fid_resource",
                address=message.address,
                error=fid_result.error.message,
            )
            return fid_result
        fid = fid_result.value

        if not signer.success:
            logger.warning("login.signature_invalid", fid=fid, address=message.address)
            return Ok(VerificationOutcome(data=message, success=False, fid=fid, error=signer.error))

        try:
            owner = await self.ownership.owner_of(fid)
        except Exception as e:
            error = classify_error(e, network=True)
            logger.error(
                "login.ownership_lookup_failed",
                fid=fid,
                error=error.message,
                error_type=type(e).__name__,
            )
            return Err(error)

        # success implies an address is set
        signer_address = signer.address or message.address
        if not addresses_equal(owner, signer_address):
            logger.warning(
                "login.ownership_mismatch",
                fid=fid,
                signer=signer_address,
                owner=owner,
            )
            return Ok(
                VerificationOutcome(
                    data=message,
                    success=False,
                    fid=fid,
                    error=OwnershipMismatch(
                        fid=fid, claimed_owner=signer_address, actual_owner=owner
                    ),
                )
            )

        logger.info("login.verified", fid=fid, address=signer_address)
        return Ok(VerificationOutcome(data=message, success=True, fid=fid))
