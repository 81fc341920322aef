"""Tests for the KeygenClient session facade."""

import pytest
import respx
from httpx import Response

from clob_keygen import KeygenClient
from clob_keygen.attestation import recover_attestation_signer
from clob_keygen.exceptions import (
    AttestationError,
    AuthError,
    ConfigurationError,
    ConsistencyError,
    TransportError,
)
from clob_keygen.types import AttestationRequest, CredentialBundle

CREDS = {"apiKey": "key-1", "secret": "c2VjcmV0LWtleS1ieXRlcw==", "passphrase": "pass-1"}


@pytest.fixture
async def client(config):
    client = KeygenClient(config)
    yield client
    await client.close()


@pytest.fixture
async def authed_client(config, bundle):
    client = KeygenClient(config, bundle=bundle)
    yield client
    await client.close()


class TestCredentialBundle:
    """Tests for CredentialBundle."""

    def test_repr_hides_secret(self, bundle):
        text = repr(bundle)
        assert bundle.api_secret not in text
        assert "pass-1" not in text
        assert "key-1" in text

    def test_requires_all_fields(self, test_address):
        with pytest.raises(ValueError, match="api_secret"):
            CredentialBundle(api_key="k", api_secret="", passphrase="p", address=test_address)

    def test_to_env(self, bundle):
        assert bundle.to_env().splitlines() == [
            f"FORKAST_ADDRESS={bundle.address}",
            "FORKAST_API_KEY=key-1",
            f"FORKAST_API_SECRET={bundle.api_secret}",
            "FORKAST_PASSPHRASE=pass-1",
        ]

    def test_env_round_trip_with_prefix(self, bundle):
        env = dict(line.split("=", 1) for line in bundle.to_env("KUEST").splitlines())
        assert CredentialBundle.from_env(env, "KUEST") == bundle


class TestCreateApiKey:
    """Tests for credential issuance through the client."""

    @respx.mock
    async def test_create_stores_bundle(self, client, host, attestation):
        respx.post(f"{host}/auth/api-key").mock(return_value=Response(200, json=CREDS))

        bundle = await client.create_api_key(attestation)

        assert client.bundle is bundle
        assert client.has_credentials
        assert bundle.address == attestation.address

    @respx.mock
    async def test_create_with_private_key(self, client, host, private_key, test_address, chain_id):
        route = respx.post(f"{host}/auth/api-key").mock(return_value=Response(200, json=CREDS))

        bundle = await client.create_api_key_with_private_key(private_key, chain_id, nonce="3")

        assert bundle.address == test_address
        headers = route.calls.last.request.headers
        assert headers["FORKAST_NONCE"] == "3"
        signed = AttestationRequest(
            address=headers["FORKAST_ADDRESS"],
            signature=headers["FORKAST_SIGNATURE"],
            timestamp=headers["FORKAST_TIMESTAMP"],
            nonce=headers["FORKAST_NONCE"],
        )
        assert recover_attestation_signer(signed, chain_id) == test_address

    async def test_create_on_unsupported_chain(self, client, private_key):
        with pytest.raises(AttestationError, match="Switch to"):
            await client.create_api_key_with_private_key(private_key, 1)
        assert not client.has_credentials

    @respx.mock
    async def test_mismatch_leaves_no_bundle(self, mirrored_config, host, mirror, attestation):
        respx.post(f"{host}/auth/api-key").mock(return_value=Response(200, json=CREDS))
        respx.post(f"{mirror}/auth/api-key").mock(
            return_value=Response(200, json={**CREDS, "passphrase": "other"})
        )

        async with KeygenClient(mirrored_config) as client:
            with pytest.raises(ConsistencyError):
                await client.create_api_key(attestation)
            assert client.bundle is None


class TestManageKeys:
    """Tests for list/revoke through the client."""

    async def test_list_requires_credentials(self, client):
        with pytest.raises(AuthError, match="Generate an API key"):
            await client.list_api_keys()

    @respx.mock
    async def test_list(self, authed_client, host):
        respx.get(f"{host}/auth/api-keys").mock(return_value=Response(200, json=["key-1", "key-2"]))

        assert await authed_client.list_api_keys() == ["key-1", "key-2"]
        assert authed_client.has_credentials

    @respx.mock
    async def test_forbidden_discards_bundle(self, authed_client, host):
        respx.get(f"{host}/auth/api-keys").mock(return_value=Response(403))

        with pytest.raises(AuthError):
            await authed_client.list_api_keys()
        assert authed_client.bundle is None

    @respx.mock
    async def test_transport_error_keeps_bundle(self, authed_client, host):
        respx.get(f"{host}/auth/api-keys").mock(return_value=Response(200, text="not json"))

        with pytest.raises(TransportError):
            await authed_client.list_api_keys()
        assert authed_client.has_credentials

    @respx.mock
    async def test_revoke_other_key_keeps_bundle(self, authed_client, host):
        respx.route(method="DELETE", host="clob.example.com", path="/auth/api-key").mock(
            return_value=Response(200, json={"revoked": True})
        )

        assert await authed_client.revoke_api_key("key-2") is True
        assert authed_client.has_credentials

    @respx.mock
    async def test_revoke_active_key_discards_bundle(self, authed_client, host):
        respx.route(method="DELETE", host="clob.example.com", path="/auth/api-key").mock(
            return_value=Response(200, json={})
        )

        assert await authed_client.revoke_api_key("key-1") is False
        assert authed_client.bundle is None

    @respx.mock
    async def test_revoke_unauthorized_discards_bundle(self, authed_client):
        respx.route(method="DELETE", host="clob.example.com", path="/auth/api-key").mock(
            return_value=Response(401)
        )

        with pytest.raises(AuthError):
            await authed_client.revoke_api_key("key-2")
        assert authed_client.bundle is None

    def test_disconnect(self, config, bundle):
        client = KeygenClient(config, bundle=bundle)
        client.disconnect()
        assert client.bundle is None


class TestFromEnv:
    """Tests for KeygenClient.from_env."""

    async def test_from_env(self, monkeypatch, host):
        monkeypatch.setenv("CLOB_URL", host)
        monkeypatch.delenv("RELAYER_URL", raising=False)

        async with KeygenClient.from_env(dotenv=False) as client:
            assert list(client.config.endpoints) == [host]

    def test_from_env_without_urls(self, monkeypatch):
        monkeypatch.delenv("CLOB_URL", raising=False)
        monkeypatch.delenv("RELAYER_URL", raising=False)

        with pytest.raises(ConfigurationError, match="CLOB_URL or RELAYER_URL"):
            KeygenClient.from_env(dotenv=False)
