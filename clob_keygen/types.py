"""
Data types and models for the CLOB key generation client.
"""

import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Iterable, Iterator, Optional, Tuple

from clob_keygen.constants import (
    DEFAULT_HEADER_PREFIX,
    DEFAULT_NONCE,
    HEADER_ADDRESS,
    HEADER_API_KEY,
    HEADER_API_SECRET,
    HEADER_PASSPHRASE,
)
from clob_keygen.exceptions import AttestationError, ConfigurationError

_NONCE_RE = re.compile(r"^\d+$")


class ReconciliationPolicy(str, Enum):
    """How issuance results from several endpoints are combined."""

    REQUIRE_IDENTICAL = "require_identical"
    FIRST_SUCCESS_WINS = "first_success_wins"


class SecretEncoding(str, Enum):
    """Encoding of the API secret handed out by the issuer."""

    BASE64 = "base64"
    RAW = "raw"


class TagEncoding(str, Enum):
    """Encoding of the HMAC tag sent in the signature header."""

    BASE64URL = "base64url"
    BASE64URL_NOPAD = "base64url_nopad"
    HEX = "hex"


@dataclass
class AuthContext:
    """Credentials needed to sign authenticated requests."""

    address: str
    api_key: str
    api_secret: str = field(repr=False)
    passphrase: str = field(repr=False)


@dataclass
class CredentialBundle:
    """API credentials minted for a wallet address."""

    api_key: str
    api_secret: str = field(repr=False)
    passphrase: str = field(repr=False)
    address: str

    def __post_init__(self) -> None:
        """Validate that every field is present."""
        for name in ("api_key", "api_secret", "passphrase", "address"):
            value = getattr(self, name)
            if not isinstance(value, str) or not value:
                raise ValueError(f"CredentialBundle.{name} must be a non-empty string")

    def same_credentials(self, other: "CredentialBundle") -> bool:
        """Check whether two bundles carry the same key/secret/passphrase."""
        return (
            self.api_key == other.api_key
            and self.api_secret == other.api_secret
            and self.passphrase == other.passphrase
        )

    def auth_context(self) -> AuthContext:
        """Derive the signing context for authenticated calls."""
        return AuthContext(
            address=self.address,
            api_key=self.api_key,
            api_secret=self.api_secret,
            passphrase=self.passphrase,
        )

    def to_env(self, prefix: str = DEFAULT_HEADER_PREFIX) -> str:
        """Render the bundle as a .env block for one-time export."""
        return "\n".join(
            [
                f"{prefix}_{HEADER_ADDRESS}={self.address}",
                f"{prefix}_{HEADER_API_KEY}={self.api_key}",
                f"{prefix}_{HEADER_API_SECRET}={self.api_secret}",
                f"{prefix}_{HEADER_PASSPHRASE}={self.passphrase}",
            ]
        )

    @classmethod
    def from_env(
        cls, env: Dict[str, str], prefix: str = DEFAULT_HEADER_PREFIX
    ) -> "CredentialBundle":
        """Load a previously exported bundle from environment variables."""
        return cls(
            api_key=env.get(f"{prefix}_{HEADER_API_KEY}", ""),
            api_secret=env.get(f"{prefix}_{HEADER_API_SECRET}", ""),
            passphrase=env.get(f"{prefix}_{HEADER_PASSPHRASE}", ""),
            address=env.get(f"{prefix}_{HEADER_ADDRESS}", ""),
        )


@dataclass
class AttestationRequest:
    """A signed attestation ready to be exchanged for credentials."""

    address: str
    signature: str
    timestamp: str
    nonce: str = DEFAULT_NONCE

    def __post_init__(self) -> None:
        """Validate the attestation fields."""
        if not _NONCE_RE.match(self.nonce):
            raise AttestationError("Nonce must contain digits only.")
        if not self.timestamp.isdigit():
            raise AttestationError("Timestamp must be a decimal Unix seconds string.")
        if not self.address:
            raise AttestationError("Attestation address is required.")
        if not self.signature:
            raise AttestationError("Attestation signature is required.")


@dataclass
class SigningMaterial:
    """Inputs of a single request signature."""

    method: str
    path_with_query: str
    timestamp: str
    body: Optional[str] = None


class EndpointSet:
    """Ordered, de-duplicated set of upstream base URLs."""

    def __init__(self, urls: Iterable[Optional[str]]) -> None:
        """Initialize the endpoint set.

        Args:
            urls: Candidate base URLs. Blank and missing values are skipped,
                trailing slashes are removed and duplicates collapsed.

        Raises:
            ConfigurationError: If no usable URL remains.
        """
        unique = []
        for url in urls:
            if url is None:
                continue
            cleaned = url.strip().rstrip("/")
            if cleaned and cleaned not in unique:
                unique.append(cleaned)

        if not unique:
            raise ConfigurationError("CLOB_URL or RELAYER_URL must be defined.")

        self._urls: Tuple[str, ...] = tuple(unique)

    @property
    def primary(self) -> str:
        """The first configured base URL."""
        return self._urls[0]

    @property
    def is_mirrored(self) -> bool:
        """Whether more than one endpoint is configured."""
        return len(self._urls) > 1

    def __iter__(self) -> Iterator[str]:
        return iter(self._urls)

    def __len__(self) -> int:
        return len(self._urls)

    def __eq__(self, other: Any) -> bool:
        if not isinstance(other, EndpointSet):
            return NotImplemented
        return self._urls == other._urls

    def __repr__(self) -> str:
        return f"EndpointSet({list(self._urls)!r})"
