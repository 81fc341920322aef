"""
CLOB Keygen Client

A Python client for minting CLOB API credentials from a wallet attestation
and managing them with signed requests.
"""

from clob_keygen.attestation import (
    build_attestation,
    ensure_supported_chain,
    sign_attestation,
)
from clob_keygen.client import KeygenClient
from clob_keygen.config import KeygenConfig
from clob_keygen.crypto import hmac_sha256
from clob_keygen.exceptions import (
    ApiError,
    AttestationError,
    AuthError,
    ConfigurationError,
    ConsistencyError,
    IssuanceError,
    KeygenError,
    RateLimitError,
    SignatureError,
    TransportError,
)
from clob_keygen.issuance import IssuanceClient, normalize_credentials
from clob_keygen.keys import KeyManagementClient
from clob_keygen.signer import RequestSigner, build_path_with_query, string_to_sign
from clob_keygen.types import (
    AttestationRequest,
    AuthContext,
    CredentialBundle,
    EndpointSet,
    ReconciliationPolicy,
    SecretEncoding,
    SigningMaterial,
    TagEncoding,
)
from clob_keygen.utils import extract_message, sanitize_message

__version__ = "0.1.0"

__all__ = [
    # Main client
    "KeygenClient",
    "KeygenConfig",
    "IssuanceClient",
    "KeyManagementClient",
    "RequestSigner",
    # Functions
    "build_attestation",
    "build_path_with_query",
    "ensure_supported_chain",
    "extract_message",
    "hmac_sha256",
    "normalize_credentials",
    "sanitize_message",
    "sign_attestation",
    "string_to_sign",
    # Types
    "AttestationRequest",
    "AuthContext",
    "CredentialBundle",
    "EndpointSet",
    "ReconciliationPolicy",
    "SecretEncoding",
    "SigningMaterial",
    "TagEncoding",
    # Exceptions
    "KeygenError",
    "ApiError",
    "AttestationError",
    "AuthError",
    "ConfigurationError",
    "ConsistencyError",
    "IssuanceError",
    "RateLimitError",
    "SignatureError",
    "TransportError",
]
