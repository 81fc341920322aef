"""
Constants for the CLOB key generation client.
"""

from typing import Dict, FrozenSet, Tuple

# Chain IDs
POLYGON_MAINNET = 137
POLYGON_AMOY = 80002

SUPPORTED_CHAIN_IDS: FrozenSet[int] = frozenset({POLYGON_MAINNET, POLYGON_AMOY})

CHAIN_NAMES: Dict[int, str] = {
    POLYGON_MAINNET: "Polygon Mainnet",
    POLYGON_AMOY: "Amoy",
}

# API endpoints
ENDPOINTS = {
    "create_api_key": "/auth/api-key",
    "api_keys": "/auth/api-keys",
    "revoke_api_key": "/auth/api-key",
}

# Header suffixes, joined to the product prefix (e.g. FORKAST_ADDRESS)
HEADER_ADDRESS = "ADDRESS"
HEADER_SIGNATURE = "SIGNATURE"
HEADER_TIMESTAMP = "TIMESTAMP"
HEADER_NONCE = "NONCE"
HEADER_API_KEY = "API_KEY"
HEADER_PASSPHRASE = "PASSPHRASE"
HEADER_API_SECRET = "API_SECRET"

DEFAULT_HEADER_PREFIX = "FORKAST"

# EIP-712 attestation
CLOB_DOMAIN_NAME = "ClobAuthDomain"
CLOB_DOMAIN_VERSION = "1"
CLOB_AUTH_PRIMARY_TYPE = "ClobAuth"
ATTESTATION_MESSAGE = "This message attests that I control the given wallet"
DEFAULT_NONCE = "0"

# Response field aliases, probed in order
API_KEY_ALIASES: Tuple[str, ...] = ("apiKey", "api_key", "key", "id")
API_SECRET_ALIASES: Tuple[str, ...] = (
    "apiSecret",
    "api_secret",
    "apiSecretBase64",
    "api_secret_base64",
    "secret",
    "secretKey",
    "secret_key",
)
PASSPHRASE_ALIASES: Tuple[str, ...] = (
    "passphrase",
    "api_passphrase",
    "passphraseHex",
    "passphrase_hex",
    "api_passphrase_hex",
)

# Keys probed when pulling a human message out of an error body
ERROR_MESSAGE_KEYS: Tuple[str, ...] = ("message", "error", "detail", "reason")

# Upstream messages longer than this are truncated before display
MAX_ERROR_MESSAGE_LENGTH = 200

DEFAULT_TIMEOUT = 30.0
