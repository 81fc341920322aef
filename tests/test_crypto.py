"""Tests for the HMAC signing primitive."""

import pytest

from clob_keygen.crypto import decode_secret, hmac_sha256
from clob_keygen.exceptions import SignatureError
from clob_keygen.types import SecretEncoding, TagEncoding

MESSAGE = "1700000000GET/auth/api-keys"


class TestDecodeSecret:
    """Tests for decode_secret."""

    def test_standard_base64(self, api_secret):
        assert decode_secret(api_secret) == b"secret-key-bytes"

    def test_missing_padding_and_whitespace(self):
        assert decode_secret("c2VjcmV0LWtl\n eS1ieXRlcw") == b"secret-key-bytes"

    def test_urlsafe_alphabet(self):
        # 0xfb 0xff encodes to "+/8=" / "-_8="
        assert decode_secret("-_8=") == decode_secret("+/8=") == b"\xfb\xff"

    def test_raw(self):
        assert decode_secret("plain", SecretEncoding.RAW) == b"plain"

    def test_empty_secret(self):
        with pytest.raises(SignatureError, match="required"):
            decode_secret("")

    def test_invalid_base64(self):
        with pytest.raises(SignatureError, match="not valid base64"):
            decode_secret("not base64 at all!")


class TestHmacSha256:
    """Tests for hmac_sha256."""

    def test_known_base64url_vector(self, api_secret):
        assert hmac_sha256(api_secret, MESSAGE) == "HWHcEvb_hRJIJeJA4Tu27br2rZZmOxjPKxQl-HftFsE="

    def test_known_hex_vector(self, api_secret):
        tag = hmac_sha256(api_secret, MESSAGE, tag_encoding=TagEncoding.HEX)
        assert tag == "1d61dc12f6ff85124825e240e13bb6edbaf6ad96663b18cf2b1425f877ed16c1"

    def test_raw_secret_matches_decoded_base64(self, api_secret):
        raw = hmac_sha256("secret-key-bytes", MESSAGE, secret_encoding=SecretEncoding.RAW)
        assert raw == hmac_sha256(api_secret, MESSAGE)

    def test_strip_padding(self, api_secret):
        tag = hmac_sha256(api_secret, MESSAGE, strip_padding=True)
        assert tag == "HWHcEvb_hRJIJeJA4Tu27br2rZZmOxjPKxQl-HftFsE"

    def test_deterministic(self, api_secret):
        assert hmac_sha256(api_secret, MESSAGE) == hmac_sha256(api_secret, MESSAGE)

    def test_message_changes_tag(self, api_secret):
        assert hmac_sha256(api_secret, MESSAGE) != hmac_sha256(api_secret, MESSAGE + "x")

    def test_nopad_encoding(self, api_secret):
        tag = hmac_sha256(api_secret, MESSAGE, tag_encoding=TagEncoding.BASE64URL_NOPAD)
        assert tag == "HWHcEvb_hRJIJeJA4Tu27br2rZZmOxjPKxQl-HftFsE"
