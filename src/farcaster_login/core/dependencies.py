"""Construction of chain clients and the login verifier from settings."""

from aiohttp import ClientTimeout
from web3 import AsyncHTTPProvider, AsyncWeb3

from farcaster_login.core.config import Settings
from farcaster_login.services.blockchain.id_registry import IdRegistryClient
from farcaster_login.services.login import LoginVerifier
from farcaster_login.services.siwe_message import OP_MAINNET_CHAIN_ID


def create_w3(settings: Settings) -> AsyncWeb3:
    """Create an AsyncWeb3 instance for the configured OP Mainnet RPC."""
    return AsyncWeb3(
        AsyncHTTPProvider(
            settings.optimism_rpc_url,
            request_kwargs={"timeout": ClientTimeout(total=settings.rpc_timeout_seconds)},
        )
    )


def create_login_verifier(settings: Settings, w3: AsyncWeb3 | None = None) -> LoginVerifier:
    """Wire a LoginVerifier to the IdRegistry on the configured RPC.

    Args:
        settings: Application settings
        w3: Optional existing AsyncWeb3 instance (created from settings if omitted)

    Returns:
        LoginVerifier using the IdRegistry for ownership and, when smart wallet
        support is enabled, the same connection for ERC-1271 checks
    """
    w3 = w3 or create_w3(settings)
    id_registry = IdRegistryClient(w3, contract_address=settings.id_registry_address)
    providers = {OP_MAINNET_CHAIN_ID: w3} if settings.smart_wallet_support else {}
    return LoginVerifier(ownership=id_registry, providers=providers)
