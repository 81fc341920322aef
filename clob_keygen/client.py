"""
Main client for minting and managing CLOB API credentials.
"""

import logging
from typing import Any, List, Optional

import httpx

from clob_keygen.attestation import ensure_supported_chain, sign_attestation
from clob_keygen.config import KeygenConfig
from clob_keygen.constants import DEFAULT_NONCE
from clob_keygen.exceptions import AuthError
from clob_keygen.http import HttpClient
from clob_keygen.issuance import IssuanceClient
from clob_keygen.keys import KeyManagementClient
from clob_keygen.signer import RequestSigner
from clob_keygen.types import AttestationRequest, AuthContext, CredentialBundle

logger = logging.getLogger(__name__)


class KeygenClient:
    """Client for minting, listing and revoking CLOB API keys.

    The client holds at most one credential bundle in memory. The bundle is
    discarded on disconnect, when the active key is revoked, and whenever an
    upstream service rejects it.
    """

    def __init__(
        self,
        config: KeygenConfig,
        http_client: Optional[httpx.AsyncClient] = None,
        bundle: Optional[CredentialBundle] = None,
    ) -> None:
        """Initialize the client.

        Args:
            config: Client configuration.
            http_client: Optional pre-built httpx client.
            bundle: Optional previously minted credentials.
        """
        self._config = config
        self._http = HttpClient(
            timeout=config.timeout,
            product=config.product,
            debug=config.debug_errors,
            client=http_client,
        )
        self._signer = RequestSigner(
            header_prefix=config.header_prefix,
            secret_encoding=config.secret_encoding,
            tag_encoding=config.tag_encoding,
        )
        self._issuance = IssuanceClient(
            self._http,
            config.endpoints,
            header_prefix=config.header_prefix,
            policy=config.reconciliation,
        )
        self._keys = KeyManagementClient(self._http, config.endpoints, self._signer)
        self._bundle = bundle

    @classmethod
    def from_env(cls, dotenv: bool = True) -> "KeygenClient":
        """Create a client from environment variables.

        Args:
            dotenv: Load a .env file first.

        Returns:
            The configured client.

        Raises:
            ConfigurationError: If no base URL is configured.
        """
        return cls(KeygenConfig.from_env(dotenv=dotenv))

    async def close(self) -> None:
        """Close the client and release resources."""
        await self._http.close()

    async def __aenter__(self) -> "KeygenClient":
        """Enter context manager."""
        return self

    async def __aexit__(self, *args: Any) -> None:
        """Exit context manager."""
        await self.close()

    @property
    def config(self) -> KeygenConfig:
        """Get the client configuration."""
        return self._config

    @property
    def bundle(self) -> Optional[CredentialBundle]:
        """Get the credential bundle held for this session, if any."""
        return self._bundle

    @property
    def has_credentials(self) -> bool:
        """Check if the client holds a credential bundle."""
        return self._bundle is not None

    @property
    def signer(self) -> RequestSigner:
        """Get the request signer."""
        return self._signer

    def disconnect(self) -> None:
        """Forget the held credential bundle."""
        if self._bundle is not None:
            logger.info("Discarding credentials for %s", self._bundle.address)
        self._bundle = None

    def _require_auth(self) -> AuthContext:
        """Get the signing context of the held bundle.

        Raises:
            AuthError: If no credentials are held.
        """
        if not self._bundle:
            raise AuthError(
                "Generate an API key before managing credentials.",
                required_level="api key",
            )
        return self._bundle.auth_context()

    # =========================================================================
    # Credential Issuance
    # =========================================================================

    async def create_api_key(self, attestation: AttestationRequest) -> CredentialBundle:
        """Exchange a signed attestation for API credentials.

        The minted bundle replaces any bundle held by the client.

        Args:
            attestation: The wallet-signed attestation.

        Returns:
            The minted credentials.

        Raises:
            IssuanceError: If the services refused to mint credentials.
            ConsistencyError: If mirrored services disagree.
            TransportError: If no service was reachable.
        """
        bundle = await self._issuance.issue(attestation)
        self._bundle = bundle
        logger.info("Minted API key %s for %s", bundle.api_key, bundle.address)
        return bundle

    async def create_api_key_with_private_key(
        self,
        private_key: str,
        chain_id: int,
        nonce: str = DEFAULT_NONCE,
    ) -> CredentialBundle:
        """Sign the attestation locally and exchange it for credentials.

        Args:
            private_key: The wallet private key.
            chain_id: The chain ID; must be a supported chain.
            nonce: Decimal nonce. A new nonce derives a new key.

        Returns:
            The minted credentials.

        Raises:
            AttestationError: If the chain is unsupported or signing fails.
        """
        ensure_supported_chain(chain_id)
        attestation = sign_attestation(private_key, chain_id, nonce=nonce)
        return await self.create_api_key(attestation)

    # =========================================================================
    # Key Management (Requires Credentials)
    # =========================================================================

    async def list_api_keys(self) -> List[str]:
        """List the API keys registered for the held credentials' wallet.

        Returns:
            API key strings.

        Raises:
            AuthError: If no credentials are held or they were rejected. In
                the latter case the held bundle is discarded.
        """
        auth = self._require_auth()
        try:
            return await self._keys.list_keys(auth)
        except AuthError:
            self.disconnect()
            raise

    async def revoke_api_key(self, api_key: str) -> bool:
        """Revoke an API key.

        Revoking the key of the held bundle discards the bundle.

        Args:
            api_key: The key to revoke.

        Returns:
            Whether an upstream service acknowledged the revocation.

        Raises:
            AuthError: If no credentials are held or they were rejected. In
                the latter case the held bundle is discarded.
        """
        auth = self._require_auth()
        try:
            revoked = await self._keys.revoke_key(auth, api_key)
        except AuthError:
            self.disconnect()
            raise

        if self._bundle is not None and self._bundle.api_key == api_key:
            self.disconnect()
        return revoked
