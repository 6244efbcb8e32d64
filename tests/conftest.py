"""pytest fixtures for farcaster_login tests.

Provides:
- test_environment: Autouse fixture forcing APP_ENV=test
- test_wallet / different_wallet: Deterministic signing accounts
- valid_params: LoginParams that pass every build() rule
- sign: Helper signing a message's canonical text
"""

import os
from dataclasses import replace

import pytest
from eth_account import Account
from eth_account.messages import encode_defunct

from farcaster_login.models.login import LoginParams, Message


@pytest.fixture(scope="session", autouse=True)
def test_environment():
    """Run every test with APP_ENV=test so Settings skips startup validation."""
    previous = os.environ.get("APP_ENV")
    os.environ["APP_ENV"] = "test"
    yield
    if previous is None:
        os.environ.pop("APP_ENV", None)
    else:
        os.environ["APP_ENV"] = previous


@pytest.fixture
def test_wallet():
    """Create a test wallet with known private key for signature generation."""
    private_key = "0x1234567890abcdef1234567890abcdef1234567890abcdef1234567890abcdef"
    account = Account.from_key(private_key)
    return {
        "address": account.address,  # Checksummed address
        "private_key": private_key,
        "account": account,
    }


@pytest.fixture
def different_wallet():
    """Create a different test wallet for negative tests."""
    private_key = "0xfedcba0987654321fedcba0987654321fedcba0987654321fedcba0987654321"
    account = Account.from_key(private_key)
    return {
        "address": account.address,
        "private_key": private_key,
        "account": account,
    }


@pytest.fixture
def valid_params():
    """Login params accepted by build()."""
    return LoginParams(
        domain="example.com",
        statement="Log in With Farcaster",
        address="0x63C378DDC446DFf1d831B9B96F7d338FE6bd4231",
        uri="https://example.com/login",
        version="1",
        nonce="12345678",
        issued_at="2023-10-01T00:00:00.000Z",
        chain_id=10,
        resources=("farcaster://fids/1234",),
    )


@pytest.fixture
def wallet_params(valid_params, test_wallet):
    """valid_params claiming the test wallet's address."""
    return replace(valid_params, address=test_wallet["address"])


@pytest.fixture
def sign():
    """Return a helper that signs message.prepare_message() with a wallet."""

    def _sign(wallet: dict, message: Message) -> bytes:
        signed = wallet["account"].sign_message(encode_defunct(text=message.prepare_message()))
        return bytes(signed.signature)

    return _sign
