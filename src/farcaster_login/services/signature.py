"""Login message signature verification (EIP-191 and ERC-1271).

This module verifies that a login message was signed by the address it
claims, using:
- EIP-191 personal message signature recovery (EOA wallets)
- ERC-1271 contract signature verification (smart wallets), when a provider
  for the message's chain is available

A bad signature is not an error: it resolves to a SignerOutcome carrying
InvalidSignature. Only RPC failures during the ERC-1271 fallback raise.
"""

from collections.abc import Mapping

import structlog
from eth_account import Account
from eth_account.messages import _hash_eip191_message, encode_defunct
from eth_utils.address import to_checksum_address
from web3 import AsyncWeb3

from farcaster_login.abi import get_contract_abi
from farcaster_login.models.login import InvalidSignature, Message, SignerOutcome
from farcaster_login.services.error_classifier import classify_error

logger = structlog.get_logger()

# ERC-1271 magic value for valid signatures
ERC1271_MAGIC_VALUE = bytes.fromhex("1626ba7e")

Providers = Mapping[int, AsyncWeb3]


def decode_signature(signature: bytes | str) -> bytes | None:
    """Return raw signature bytes, or None if the hex string is malformed."""
    if isinstance(signature, (bytes, bytearray)):
        return bytes(signature)
    try:
        return bytes.fromhex(signature.removeprefix("0x"))
    except (AttributeError, ValueError):
        return None


def addresses_equal(a: str, b: str) -> bool:
    """Compare two addresses after EIP-55 normalisation (case-insensitive hex)."""
    try:
        return to_checksum_address(a) == to_checksum_address(b)
    except (TypeError, ValueError):
        return False


def expand_compact_signature(signature_bytes: bytes) -> bytes:
    """Expand a 64-byte EIP-2098 signature (r, yParity|s) to 65-byte (r, s, v) form."""
    r, y_parity_and_s = signature_bytes[:32], signature_bytes[32:]
    y_parity = y_parity_and_s[0] >> 7
    s = bytes([y_parity_and_s[0] & 0x7F]) + y_parity_and_s[1:]
    return r + s + bytes([27 + y_parity])


def recover_signer(text: str, signature_bytes: bytes) -> str | None:
    """Recover the EIP-191 signer of text, or None if the signature is unusable.

    Accepts 65-byte (r, s, v) and 64-byte EIP-2098 compact signatures.
    """
    if len(signature_bytes) == 64:
        signature_bytes = expand_compact_signature(signature_bytes)
    if len(signature_bytes) != 65:
        return None
    try:
        return Account.recover_message(encode_defunct(text=text), signature=signature_bytes)
    except Exception as e:
        # eth_keys rejects out-of-range r/s/v values
        logger.debug(
            "signature.recovery_failed",
            error=str(e),
            error_type=type(e).__name__,
        )
        return None


async def is_valid_contract_signature(
    w3: AsyncWeb3, address: str, text: str, signature_bytes: bytes
) -> bool:
    """Check an ERC-1271 signature by calling isValidSignature on the wallet contract.

    Raises:
        NetworkUnavailable: If the RPC call fails
    """
    checksummed = to_checksum_address(address)
    try:
        contract_code = await w3.eth.get_code(checksummed)
        if len(contract_code) == 0:
            logger.debug("erc1271.contract_not_deployed", wallet_address=checksummed)
            return False

        contract = w3.eth.contract(address=checksummed, abi=get_contract_abi("ERC1271"))

        # Full EIP-191 prefixed hash, the same digest the wallet signed
        message_hash = _hash_eip191_message(encode_defunct(text=text))
        magic_value = await contract.functions.isValidSignature(
            message_hash, signature_bytes
        ).call()
    except Exception as e:
        logger.error(
            "erc1271.contract_call_error",
            wallet_address=checksummed,
            error=str(e),
            error_type=type(e).__name__,
        )
        raise classify_error(e, network=True) from e

    # Convert result to bytes if it's hex string
    if isinstance(magic_value, str):
        magic_value = bytes.fromhex(magic_value.removeprefix("0x"))
    elif isinstance(magic_value, int):
        magic_value = magic_value.to_bytes(4, byteorder="big")

    return bytes(magic_value) == ERC1271_MAGIC_VALUE


async def verify_signature(
    message: Message,
    signature: bytes | str,
    providers: Providers | None = None,
) -> SignerOutcome:
    """Verify that message was signed by message.address.

    Args:
        message: Validated login message
        signature: 65-byte or 64-byte compact ECDSA signature, or ERC-1271 data
                   (bytes or 0x-prefixed hex)
        providers: Chain id to AsyncWeb3 mapping. When the message's chain has
                   a provider, a failed EOA recovery falls back to ERC-1271.

    Returns:
        SignerOutcome; success carries the checksummed signer address

    Raises:
        NetworkUnavailable: If the ERC-1271 fallback could not reach the chain
    """
    text = message.prepare_message()
    signature_bytes = decode_signature(signature)

    if signature_bytes is None:
        logger.warning("signature.malformed", wallet_address=message.address)
        return SignerOutcome(
            success=False,
            address=None,
            error=InvalidSignature(expected_address=message.address, resolved_address=None),
        )

    recovered = recover_signer(text, signature_bytes)
    if recovered is not None and addresses_equal(recovered, message.address):
        logger.info("eip191_signature_verification_success", wallet_address=recovered)
        return SignerOutcome(success=True, address=recovered)

    w3 = (providers or {}).get(message.chain_id)
    if w3 is not None and await is_valid_contract_signature(
        w3, message.address, text, signature_bytes
    ):
        signer = to_checksum_address(message.address)
        logger.info("erc1271_signature_verification_success", wallet_address=signer)
        return SignerOutcome(success=True, address=signer)

    logger.warning(
        "signature_verification_failed",
        wallet_address=message.address,
        recovered_address=recovered,
        signature_length=len(signature_bytes),
    )
    return SignerOutcome(
        success=False,
        address=recovered,
        error=InvalidSignature(expected_address=message.address, resolved_address=recovered),
    )
