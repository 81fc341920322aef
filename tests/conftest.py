"""Pytest fixtures for clob-keygen tests."""

import pytest

from clob_keygen.config import KeygenConfig
from clob_keygen.constants import POLYGON_MAINNET
from clob_keygen.types import AttestationRequest, CredentialBundle


# Test wallet private key (DO NOT use in production)
TEST_PRIVATE_KEY = "0xac0974bec39a17e36ba4a6b4d238ff944bacb478cbed5efcae784d7bf4f2ff80"
TEST_ADDRESS = "0xf39Fd6e51aad88F6F4ce6aB8827279cffFb92266"

# base64("secret-key-bytes")
TEST_API_SECRET = "c2VjcmV0LWtleS1ieXRlcw=="


@pytest.fixture
def private_key() -> str:
    """Test wallet private key."""
    return TEST_PRIVATE_KEY


@pytest.fixture
def test_address() -> str:
    """Test Ethereum address."""
    return TEST_ADDRESS


@pytest.fixture
def chain_id() -> int:
    """Test chain ID."""
    return POLYGON_MAINNET


@pytest.fixture
def host() -> str:
    """Primary issuance service."""
    return "https://clob.example.com"


@pytest.fixture
def mirror() -> str:
    """Mirror issuance service."""
    return "https://relayer.example.com"


@pytest.fixture
def api_secret() -> str:
    """Base64 API secret."""
    return TEST_API_SECRET


@pytest.fixture
def bundle(test_address, api_secret) -> CredentialBundle:
    """Credentials as minted by the service."""
    return CredentialBundle(
        api_key="key-1",
        api_secret=api_secret,
        passphrase="pass-1",
        address=test_address,
    )


@pytest.fixture
def attestation(test_address) -> AttestationRequest:
    """A signed attestation."""
    return AttestationRequest(
        address=test_address,
        signature="0x" + "ab" * 65,
        timestamp="1700000000",
        nonce="0",
    )


@pytest.fixture
def config(host) -> KeygenConfig:
    """Single-endpoint configuration."""
    return KeygenConfig(base_urls=(host,))


@pytest.fixture
def mirrored_config(host, mirror) -> KeygenConfig:
    """Two-endpoint configuration."""
    return KeygenConfig(base_urls=(host, mirror))
