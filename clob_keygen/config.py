"""
Configuration for the CLOB key generation client.
"""

import os
from dataclasses import dataclass, field
from typing import Mapping, Optional, Tuple

from clob_keygen.constants import DEFAULT_HEADER_PREFIX, DEFAULT_TIMEOUT
from clob_keygen.exceptions import ConfigurationError
from clob_keygen.types import (
    EndpointSet,
    ReconciliationPolicy,
    SecretEncoding,
    TagEncoding,
)
from clob_keygen.utils import parse_bool


@dataclass(frozen=True)
class KeygenConfig:
    """Process-wide settings for the key generation client.

    Attributes:
        base_urls: Primary and optional mirror base URLs.
        header_prefix: Product-specific header prefix (e.g. "FORKAST").
        product_name: Name used in user-facing messages.
        debug_errors: Append raw upstream text to user-facing messages.
        reconciliation: Policy for combining multi-endpoint issuance.
        secret_encoding: Encoding of issued API secrets.
        tag_encoding: Encoding of request signatures.
        timeout: HTTP timeout in seconds.
    """

    base_urls: Tuple[str, ...]
    header_prefix: str = DEFAULT_HEADER_PREFIX
    product_name: Optional[str] = None
    debug_errors: bool = False
    reconciliation: ReconciliationPolicy = ReconciliationPolicy.REQUIRE_IDENTICAL
    secret_encoding: SecretEncoding = SecretEncoding.BASE64
    tag_encoding: TagEncoding = TagEncoding.BASE64URL
    timeout: float = DEFAULT_TIMEOUT
    endpoints: EndpointSet = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        """Validate settings and build the endpoint set."""
        # Fail fast when no base URL is configured
        object.__setattr__(self, "endpoints", EndpointSet(self.base_urls))
        object.__setattr__(self, "base_urls", tuple(self.endpoints))
        object.__setattr__(self, "header_prefix", self.header_prefix.strip().upper())
        if not self.header_prefix:
            raise ConfigurationError("Header prefix must not be empty.")
        if self.timeout <= 0:
            raise ConfigurationError(f"Timeout must be positive, got {self.timeout}")

    @property
    def product(self) -> str:
        """Product name for messages, derived from the prefix if unset."""
        return self.product_name or self.header_prefix.title()

    @classmethod
    def from_env(
        cls,
        environ: Optional[Mapping[str, str]] = None,
        dotenv: bool = True,
    ) -> "KeygenConfig":
        """Load settings from environment variables.

        Reads CLOB_URL, RELAYER_URL, KEYGEN_HEADER_PREFIX, KEYGEN_PRODUCT_NAME,
        <PREFIX>_DEBUG_ERRORS, KEYGEN_RECONCILIATION, KEYGEN_SECRET_ENCODING,
        KEYGEN_SIGNATURE_ENCODING and KEYGEN_TIMEOUT.

        Args:
            environ: Mapping to read instead of os.environ.
            dotenv: Load a .env file into os.environ first.

        Returns:
            The configuration.

        Raises:
            ConfigurationError: If no base URL is set or a value is invalid.
        """
        if dotenv:
            from dotenv import find_dotenv, load_dotenv

            load_dotenv(find_dotenv(usecwd=True))

        env = os.environ if environ is None else environ
        prefix = (env.get("KEYGEN_HEADER_PREFIX") or DEFAULT_HEADER_PREFIX).strip().upper()

        try:
            reconciliation = ReconciliationPolicy(
                (env.get("KEYGEN_RECONCILIATION") or "require_identical").strip().lower()
            )
            secret_encoding = SecretEncoding(
                (env.get("KEYGEN_SECRET_ENCODING") or "base64").strip().lower()
            )
            tag_encoding = TagEncoding(
                (env.get("KEYGEN_SIGNATURE_ENCODING") or "base64url").strip().lower()
            )
            timeout = float(env.get("KEYGEN_TIMEOUT") or DEFAULT_TIMEOUT)
        except ValueError as e:
            raise ConfigurationError(f"Invalid configuration value: {e}") from e

        return cls(
            base_urls=tuple(
                value for value in (env.get("CLOB_URL"), env.get("RELAYER_URL")) if value
            ),
            header_prefix=prefix,
            product_name=env.get("KEYGEN_PRODUCT_NAME") or None,
            debug_errors=parse_bool(env.get(f"{prefix}_DEBUG_ERRORS")),
            reconciliation=reconciliation,
            secret_encoding=secret_encoding,
            tag_encoding=tag_encoding,
            timeout=timeout,
        )
