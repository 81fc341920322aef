"""
Request signing for authenticated CLOB key management calls.
"""

import time
from typing import Callable, Dict, Mapping, Optional
from urllib.parse import quote_plus, urlencode

from clob_keygen.constants import (
    DEFAULT_HEADER_PREFIX,
    HEADER_ADDRESS,
    HEADER_API_KEY,
    HEADER_PASSPHRASE,
    HEADER_SIGNATURE,
    HEADER_TIMESTAMP,
)
from clob_keygen.crypto import hmac_sha256
from clob_keygen.types import AuthContext, SecretEncoding, SigningMaterial, TagEncoding


def _quote_form(
    value: str,
    safe: str = "",
    encoding: Optional[str] = None,
    errors: Optional[str] = None,
) -> str:
    # Browser form encoding: "*" stays literal, "~" is escaped
    return quote_plus(value, safe + "*", encoding, errors).replace("~", "%7E")


def build_path_with_query(path: str, params: Optional[Mapping[str, str]] = None) -> str:
    """Serialize a path and its query string exactly as sent on the wire.

    The result must be used both for the request URL and for the string to
    sign; rebuilding the query elsewhere can change its encoding. Values use
    application/x-www-form-urlencoded as browsers serialize it: spaces become
    "+" and only alphanumerics and "*-._" are left unescaped.

    Args:
        path: The request path.
        params: Query parameters, serialized in insertion order.

    Returns:
        The path, followed by "?" and the encoded query when params are given.
    """
    if not params:
        return path
    return f"{path}?{urlencode(params, quote_via=_quote_form)}"


def string_to_sign(material: SigningMaterial) -> str:
    """Build the canonical string: timestamp + METHOD + path + body."""
    return (
        f"{material.timestamp}{material.method.upper()}"
        f"{material.path_with_query}{material.body or ''}"
    )


class RequestSigner:
    """Signs authenticated requests with an HMAC of the API secret."""

    def __init__(
        self,
        header_prefix: str = DEFAULT_HEADER_PREFIX,
        secret_encoding: SecretEncoding = SecretEncoding.BASE64,
        tag_encoding: TagEncoding = TagEncoding.BASE64URL,
        clock: Callable[[], float] = time.time,
    ) -> None:
        """Initialize the signer.

        Args:
            header_prefix: Product-specific header prefix (e.g. "FORKAST").
            secret_encoding: How issued API secrets are encoded.
            tag_encoding: Encoding of the signature header value.
            clock: Time source, overridable for tests.
        """
        self._prefix = header_prefix
        self._secret_encoding = secret_encoding
        self._tag_encoding = tag_encoding
        self._clock = clock

    @property
    def header_prefix(self) -> str:
        """Get the header prefix."""
        return self._prefix

    def header(self, suffix: str) -> str:
        """Full header name for a suffix such as "ADDRESS"."""
        return f"{self._prefix}_{suffix}"

    def timestamp(self) -> str:
        """Sample the current time in whole Unix seconds."""
        return str(int(self._clock()))

    def signature(self, api_secret: str, material: SigningMaterial) -> str:
        """Compute the signature tag for a signing material."""
        return hmac_sha256(
            api_secret,
            string_to_sign(material),
            secret_encoding=self._secret_encoding,
            tag_encoding=self._tag_encoding,
        )

    def sign(
        self,
        auth: AuthContext,
        method: str,
        path_with_query: str,
        body: Optional[str] = None,
    ) -> Dict[str, str]:
        """Sign a request and build its authentication headers.

        The timestamp is sampled here, immediately before signing, and the
        same value is sent in the timestamp header.

        Args:
            auth: The credentials to sign with.
            method: HTTP method.
            path_with_query: Path plus encoded query, as sent.
            body: Optional serialized request body.

        Returns:
            Headers to attach to the request.
        """
        material = SigningMaterial(
            method=method,
            path_with_query=path_with_query,
            timestamp=self.timestamp(),
            body=body,
        )
        return {
            self.header(HEADER_ADDRESS): auth.address,
            self.header(HEADER_API_KEY): auth.api_key,
            self.header(HEADER_PASSPHRASE): auth.passphrase,
            self.header(HEADER_TIMESTAMP): material.timestamp,
            self.header(HEADER_SIGNATURE): self.signature(auth.api_secret, material),
        }
