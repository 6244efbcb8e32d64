"""Farcaster IdRegistry read client.

Resolves the custody (owner) address of a fid from the IdRegistry contract on
OP Mainnet. The client is read-only and performs no retries: a failed RPC call
propagates to the caller, which decides how to report it.
"""

from typing import Protocol

import structlog
from web3 import AsyncWeb3

from farcaster_login.abi import get_contract_abi

logger = structlog.get_logger()

# IdRegistry on OP Mainnet
DEFAULT_ID_REGISTRY_ADDRESS = "0x00000000Fc6c5F01Fc30151999387Bb99A9f489b"


class OwnershipChecker(Protocol):
    """Anything that can resolve the current owner of a fid."""

    async def owner_of(self, fid: int) -> str: ...


class IdRegistryClient:
    """Read-only IdRegistry contract client."""

    def __init__(self, w3: AsyncWeb3, contract_address: str = DEFAULT_ID_REGISTRY_ADDRESS):
        """Initialize client with blockchain connection.

        Args:
            w3: AsyncWeb3 instance connected to OP Mainnet
            contract_address: IdRegistry contract address
        """
        self.w3 = w3
        self.contract_address = AsyncWeb3.to_checksum_address(contract_address)
        self.contract = self.w3.eth.contract(
            address=self.contract_address, abi=get_contract_abi("IdRegistry")
        )

    async def owner_of(self, fid: int) -> str:
        """Return the checksummed custody address of fid.

        Unregistered fids resolve to the zero address.

        Raises:
            Exception: Whatever the RPC transport raised; not wrapped here
        """
        custody = await self.contract.functions.custodyOf(fid).call()
        owner = AsyncWeb3.to_checksum_address(custody)
        logger.debug("id_registry.owner_resolved", fid=fid, owner=owner)
        return owner

    async def fid_of(self, address: str) -> int:
        """Return the fid currently owned by address, or 0 if it owns none."""
        fid = await self.contract.functions.idOf(AsyncWeb3.to_checksum_address(address)).call()
        logger.debug("id_registry.fid_resolved", address=address, fid=fid)
        return int(fid)
