"""Contract ABI utilities.

ABIs are stored as JSON files in this directory and loaded at runtime:
- IdRegistry.json: Farcaster IdRegistry read functions (custodyOf, idOf)
- ERC1271.json: isValidSignature for smart contract wallets
"""

import json
from functools import lru_cache
from pathlib import Path


@lru_cache(maxsize=None)
def _load_abi(contract_name: str) -> tuple[dict, ...]:
    abi_path = Path(__file__).parent / f"{contract_name}.json"

    if not abi_path.exists():
        raise FileNotFoundError(f"ABI file not found: {abi_path}")

    with open(abi_path) as f:
        return tuple(json.load(f))


def get_contract_abi(contract_name: str = "IdRegistry") -> list[dict]:
    """Load contract ABI from package resources.

    Args:
        contract_name: Name of the contract (default: "IdRegistry")

    Returns:
        ABI as list of function descriptors

    Raises:
        FileNotFoundError: If ABI file doesn't exist for the specified contract

    Example:
        >>> abi = get_contract_abi()
        >>> contract = w3.eth.contract(address=addr, abi=abi)
    """
    return list(_load_abi(contract_name))
