"""CLI commands for checking Farcaster logins against OP Mainnet.

Usage:
    python -m farcaster_login.cli <command> [OPTIONS]

Examples:
    # Verify a signed login message
    python -m farcaster_login.cli verify --message-file login.txt --signature 0xabc...

    # Show the custody address of a fid
    python -m farcaster_login.cli owner 1234

    # Show the fid owned by an address
    python -m farcaster_login.cli fid 0x63C378DDC446DFf1d831B9B96F7d338FE6bd4231

    # Verbose logging
    python -m farcaster_login.cli -v owner 1234
"""

import asyncio
import sys
from argparse import ArgumentParser, Namespace
from pathlib import Path

import structlog
from web3 import Web3

from farcaster_login.core.config import Settings, configure_logging
from farcaster_login.core.dependencies import create_login_verifier, create_w3
from farcaster_login.models.login import InvalidSignature
from farcaster_login.result import Err
from farcaster_login.services.blockchain.id_registry import IdRegistryClient
from farcaster_login.services.exceptions import ErrorKind
from farcaster_login.services.siwe_message import parse_message

logger = structlog.get_logger()

EXIT_VALID = 0
EXIT_INVALID_LOGIN = 1
EXIT_VALIDATION_FAILURE = 2
EXIT_NETWORK_UNAVAILABLE = 3

ERROR_EXIT_CODES = {
    ErrorKind.VALIDATION_FAILURE: EXIT_VALIDATION_FAILURE,
    ErrorKind.NETWORK_UNAVAILABLE: EXIT_NETWORK_UNAVAILABLE,
}


def build_parser() -> ArgumentParser:
    """Build the command-line argument parser."""
    parser = ArgumentParser(
        prog="farcaster-login",
        description="Verify Sign In With Farcaster logins",
        epilog="Reads OPTIMISM_RPC_URL and ID_REGISTRY_ADDRESS from the environment",
    )

    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Enable verbose logging (DEBUG level)",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    verify = subparsers.add_parser("verify", help="Verify a signed login message")
    verify.add_argument(
        "--message-file",
        type=Path,
        required=True,
        help="File containing the EIP-4361 message text",
    )
    verify.add_argument(
        "--signature",
        required=True,
        help="Hex signature over the message (0x-prefixed)",
    )

    owner = subparsers.add_parser("owner", help="Show the custody address of a fid")
    owner.add_argument("fid", type=int, help="Farcaster ID")

    fid = subparsers.add_parser("fid", help="Show the fid owned by an address")
    fid.add_argument("address", help="Ethereum address")

    return parser


async def run_verify(args: Namespace, settings: Settings) -> int:
    """Verify a login message file and print the outcome."""
    message_result = parse_message(args.message_file.read_text())
    if isinstance(message_result, Err):
        print(f"Invalid message: {message_result.error.message}", file=sys.stderr)
        return EXIT_VALIDATION_FAILURE

    verifier = create_login_verifier(settings)
    result = await verifier.verify(message_result.value, args.signature)

    if isinstance(result, Err):
        print(f"Error ({result.error.kind.value}): {result.error.message}", file=sys.stderr)
        return ERROR_EXIT_CODES[result.error.kind]

    outcome = result.value
    if outcome.success:
        print(f"Login valid: fid {outcome.fid} owned by {outcome.data.address}")
        return EXIT_VALID

    if isinstance(outcome.error, InvalidSignature):
        print(
            f"Login invalid: signature resolves to {outcome.error.resolved_address}, "
            f"expected {outcome.error.expected_address}"
        )
    elif outcome.error is not None:
        print(
            f"Login invalid: fid {outcome.fid} is owned by {outcome.error.actual_owner}, "
            f"not {outcome.error.claimed_owner}"
        )
    return EXIT_INVALID_LOGIN


async def run_owner(args: Namespace, settings: Settings) -> int:
    """Print the custody address of a fid."""
    client = IdRegistryClient(create_w3(settings), settings.id_registry_address)
    print(await client.owner_of(args.fid))
    return EXIT_VALID


async def run_fid(args: Namespace, settings: Settings) -> int:
    """Print the fid owned by an address (0 if it owns none)."""
    if not Web3.is_address(args.address):
        print(f"Error: invalid address {args.address!r}", file=sys.stderr)
        return EXIT_VALIDATION_FAILURE

    client = IdRegistryClient(create_w3(settings), settings.id_registry_address)
    print(await client.fid_of(args.address))
    return EXIT_VALID


COMMANDS = {
    "verify": run_verify,
    "owner": run_owner,
    "fid": run_fid,
}


async def async_main(argv: list[str] | None = None) -> int:
    """Main CLI entry point (async).

    Returns:
        Exit code: 0 (valid), 1 (invalid login), 2 (validation failure),
        3 (network unavailable)
    """
    args = build_parser().parse_args(argv)

    # Initialize settings and logging
    settings = Settings()  # type: ignore[call-arg]

    if args.verbose:
        settings.log_level = "DEBUG"

    configure_logging(settings)

    logger.info("cli.started", command=args.command, rpc_url=settings.optimism_rpc_url)

    try:
        return await COMMANDS[args.command](args, settings)

    except KeyboardInterrupt:
        logger.info("cli.interrupted")
        print("\nInterrupted by user", file=sys.stderr)
        return 130  # Standard exit code for SIGINT

    except OSError as e:
        logger.error("cli.io_error", error=str(e), error_type=type(e).__name__)
        print(f"\nError: {e}", file=sys.stderr)
        return EXIT_VALIDATION_FAILURE

    except Exception as e:
        # RPC failures from owner/fid lookups
        logger.error(
            "cli.unexpected_error",
            error=str(e),
            error_type=type(e).__name__,
        )
        print(f"\nError: {e}", file=sys.stderr)
        return EXIT_NETWORK_UNAVAILABLE


def main() -> None:
    """Synchronous entry point for CLI."""
    sys.exit(asyncio.run(async_main()))


if __name__ == "__main__":
    main()
