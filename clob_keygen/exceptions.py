"""
Exceptions for the CLOB key generation client.
"""

from typing import Optional


class KeygenError(Exception):
    """Base exception for all key generation errors."""

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class ConfigurationError(KeygenError):
    """Raised when no usable base URL or setting is configured."""


class AttestationError(KeygenError):
    """Raised when the wallet attestation cannot be built or signed.

    Covers a rejected signature, an unsupported network and a malformed nonce.
    """


class SignatureError(KeygenError):
    """Raised when an HMAC request signature cannot be computed."""


class ApiError(KeygenError):
    """Raised when an upstream service returns a non-success response."""

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        endpoint: Optional[str] = None,
    ) -> None:
        self.status_code = status_code
        self.endpoint = endpoint
        super().__init__(message)

    def __str__(self) -> str:
        if self.status_code is not None:
            return f"[{self.status_code}] {self.message}"
        return self.message


class IssuanceError(ApiError):
    """Raised when an upstream service fails to mint API credentials."""


class AuthError(ApiError):
    """Raised when an upstream service rejects the held credentials (401/403).

    Callers should treat the stored credential bundle as stale and discard it.
    """

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        endpoint: Optional[str] = None,
        required_level: Optional[str] = None,
    ) -> None:
        self.required_level = required_level
        super().__init__(message, status_code=status_code, endpoint=endpoint)


class RateLimitError(ApiError):
    """Raised when an upstream service rate limits the caller (429)."""


class ConsistencyError(KeygenError):
    """Raised when mirrored services return different credentials."""


class TransportError(KeygenError):
    """Raised on network failures or unparsable responses."""

    def __init__(self, message: str, endpoint: Optional[str] = None) -> None:
        self.endpoint = endpoint
        super().__init__(message)
