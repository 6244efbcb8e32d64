"""Settings and dependency wiring tests."""

import pytest
import structlog
from pydantic import ValidationError
from web3 import AsyncWeb3

from farcaster_login.core.config import Settings, configure_logging
from farcaster_login.core.dependencies import create_login_verifier, create_w3
from farcaster_login.services.blockchain.id_registry import (
    DEFAULT_ID_REGISTRY_ADDRESS,
    IdRegistryClient,
)


def test_defaults():
    settings = Settings()  # type: ignore[call-arg]

    assert settings.app_env == "test"
    assert settings.optimism_rpc_url == "https://mainnet.optimism.io"
    assert settings.id_registry_address == DEFAULT_ID_REGISTRY_ADDRESS
    assert settings.smart_wallet_support is True


def test_environment_overrides(monkeypatch):
    monkeypatch.setenv("OPTIMISM_RPC_URL", "http://localhost:8545")
    monkeypatch.setenv("SMART_WALLET_SUPPORT", "false")

    settings = Settings()  # type: ignore[call-arg]

    assert settings.optimism_rpc_url == "http://localhost:8545"
    assert settings.smart_wallet_support is False


def test_invalid_registry_address_rejected_outside_tests(monkeypatch):
    monkeypatch.setenv("APP_ENV", "production")
    monkeypatch.setenv("ID_REGISTRY_ADDRESS", "0xnope")

    with pytest.raises(ValidationError, match="ID_REGISTRY_ADDRESS"):
        Settings()  # type: ignore[call-arg]


def test_invalid_rpc_url_rejected_outside_tests(monkeypatch):
    monkeypatch.setenv("APP_ENV", "development")
    monkeypatch.setenv("OPTIMISM_RPC_URL", "ws://localhost:8546")

    with pytest.raises(ValidationError, match="OPTIMISM_RPC_URL"):
        Settings()  # type: ignore[call-arg]


def test_create_login_verifier_wires_registry_and_providers():
    settings = Settings()  # type: ignore[call-arg]

    verifier = create_login_verifier(settings)

    assert isinstance(verifier.ownership, IdRegistryClient)
    assert verifier.ownership.contract_address == DEFAULT_ID_REGISTRY_ADDRESS
    assert set(verifier.providers) == {10}
    assert isinstance(verifier.providers[10], AsyncWeb3)


def test_create_login_verifier_without_smart_wallets(monkeypatch):
    monkeypatch.setenv("SMART_WALLET_SUPPORT", "false")
    settings = Settings()  # type: ignore[call-arg]

    verifier = create_login_verifier(settings, w3=create_w3(settings))

    assert verifier.providers == {}


@pytest.mark.parametrize("app_env", ["production", "development"])
def test_configure_logging(app_env, monkeypatch):
    monkeypatch.setenv("LOG_LEVEL", "DEBUG")
    settings = Settings()  # type: ignore[call-arg]
    settings.app_env = app_env

    try:
        configure_logging(settings)
        assert structlog.is_configured()
    finally:
        structlog.reset_defaults()
