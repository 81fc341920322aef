"""Tests for configuration loading."""

import pytest

from clob_keygen.config import KeygenConfig
from clob_keygen.exceptions import ConfigurationError
from clob_keygen.types import EndpointSet, ReconciliationPolicy, TagEncoding


class TestEndpointSet:
    """Tests for EndpointSet."""

    def test_dedupes_and_trims(self):
        endpoints = EndpointSet([" https://a.com/ ", "https://a.com", None, "", "https://b.com"])
        assert list(endpoints) == ["https://a.com", "https://b.com"]
        assert endpoints.primary == "https://a.com"
        assert endpoints.is_mirrored

    def test_single(self):
        endpoints = EndpointSet(["https://a.com"])
        assert len(endpoints) == 1
        assert not endpoints.is_mirrored

    def test_empty(self):
        with pytest.raises(ConfigurationError):
            EndpointSet([None, "  "])


class TestKeygenConfig:
    """Tests for KeygenConfig."""

    def test_defaults(self, host):
        config = KeygenConfig(base_urls=(host,))
        assert config.header_prefix == "FORKAST"
        assert config.product == "Forkast"
        assert config.debug_errors is False
        assert config.reconciliation == ReconciliationPolicy.REQUIRE_IDENTICAL
        assert config.timeout == 30.0

    def test_fails_fast_without_urls(self):
        with pytest.raises(ConfigurationError):
            KeygenConfig(base_urls=())

    def test_invalid_timeout(self, host):
        with pytest.raises(ConfigurationError, match="Timeout"):
            KeygenConfig(base_urls=(host,), timeout=0)

    def test_from_env(self, host, mirror):
        config = KeygenConfig.from_env(
            {
                "CLOB_URL": host,
                "RELAYER_URL": f"{mirror}/",
                "KEYGEN_HEADER_PREFIX": "kuest",
                "KUEST_DEBUG_ERRORS": "on",
                "KEYGEN_RECONCILIATION": "FIRST_SUCCESS_WINS",
                "KEYGEN_SIGNATURE_ENCODING": "hex",
                "KEYGEN_TIMEOUT": "5",
            },
            dotenv=False,
        )
        assert config.base_urls == (host, mirror)
        assert config.header_prefix == "KUEST"
        assert config.product == "Kuest"
        assert config.debug_errors is True
        assert config.reconciliation == ReconciliationPolicy.FIRST_SUCCESS_WINS
        assert config.tag_encoding == TagEncoding.HEX
        assert config.timeout == 5.0

    def test_from_env_unpadded_signature(self, host):
        config = KeygenConfig.from_env(
            {"CLOB_URL": host, "KEYGEN_SIGNATURE_ENCODING": "BASE64URL_NOPAD"}, dotenv=False
        )
        assert config.tag_encoding == TagEncoding.BASE64URL_NOPAD

    def test_from_env_relayer_only(self, mirror):
        config = KeygenConfig.from_env({"RELAYER_URL": mirror}, dotenv=False)
        assert config.base_urls == (mirror,)

    def test_from_env_duplicate_urls(self, host):
        config = KeygenConfig.from_env({"CLOB_URL": host, "RELAYER_URL": host}, dotenv=False)
        assert len(config.endpoints) == 1

    def test_debug_flag_uses_prefix(self, host):
        config = KeygenConfig.from_env(
            {"CLOB_URL": host, "KUEST_DEBUG_ERRORS": "1"}, dotenv=False
        )
        assert config.debug_errors is False

    def test_from_env_missing_urls(self):
        with pytest.raises(ConfigurationError, match="CLOB_URL or RELAYER_URL"):
            KeygenConfig.from_env({}, dotenv=False)

    def test_from_env_invalid_policy(self, host):
        with pytest.raises(ConfigurationError, match="Invalid configuration value"):
            KeygenConfig.from_env(
                {"CLOB_URL": host, "KEYGEN_RECONCILIATION": "majority"}, dotenv=False
            )

    def test_from_env_loads_dotenv(self, tmp_path, monkeypatch, host):
        (tmp_path / ".env").write_text(f"CLOB_URL={host}\n")
        monkeypatch.chdir(tmp_path)
        # Record the original values so teardown undoes what load_dotenv sets
        for name in ("CLOB_URL", "RELAYER_URL"):
            monkeypatch.setenv(name, "unset")
            monkeypatch.delenv(name)

        config = KeygenConfig.from_env()

        assert config.base_urls == (host,)
