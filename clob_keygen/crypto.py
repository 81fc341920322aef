"""
HMAC signing primitive for authenticated CLOB requests.
"""

import base64
import binascii
import hashlib
import hmac
import re

from clob_keygen.exceptions import SignatureError
from clob_keygen.types import SecretEncoding, TagEncoding

_WHITESPACE_RE = re.compile(r"\s+")


def decode_secret(
    secret: str, encoding: SecretEncoding = SecretEncoding.BASE64
) -> bytes:
    """Decode an API secret into raw key bytes.

    Base64 secrets may use the standard or URL-safe alphabet and may omit
    padding; embedded whitespace is ignored.

    Args:
        secret: The API secret as returned by the issuer.
        encoding: How the issuer encoded the secret.

    Returns:
        The HMAC key bytes.

    Raises:
        SignatureError: If the secret is empty or not valid base64.
    """
    if not secret:
        raise SignatureError("API secret is required for signing")

    if encoding == SecretEncoding.RAW:
        return secret.encode("utf-8")

    normalized = _WHITESPACE_RE.sub("", secret).replace("-", "+").replace("_", "/")
    normalized += "=" * (-len(normalized) % 4)
    try:
        return base64.b64decode(normalized, validate=True)
    except (binascii.Error, ValueError) as e:
        raise SignatureError(f"API secret is not valid base64: {e}") from e


def hmac_sha256(
    secret: str,
    message: str,
    secret_encoding: SecretEncoding = SecretEncoding.BASE64,
    tag_encoding: TagEncoding = TagEncoding.BASE64URL,
    strip_padding: bool = False,
) -> str:
    """Compute an HMAC-SHA256 tag over a message.

    Args:
        secret: The API secret.
        message: The string to sign.
        secret_encoding: How the secret is encoded.
        tag_encoding: Output encoding of the tag.
        strip_padding: Drop trailing "=" from base64url output. Implied by
            TagEncoding.BASE64URL_NOPAD.

    Returns:
        The encoded tag.
    """
    key = decode_secret(secret, secret_encoding)
    digest = hmac.new(key, message.encode("utf-8"), hashlib.sha256).digest()

    if tag_encoding == TagEncoding.HEX:
        return digest.hex()

    tag = base64.urlsafe_b64encode(digest).decode("ascii")
    if strip_padding or tag_encoding == TagEncoding.BASE64URL_NOPAD:
        tag = tag.rstrip("=")
    return tag
