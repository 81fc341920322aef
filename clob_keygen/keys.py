"""
Listing and revoking API keys with signed requests.
"""

import logging
from typing import Any, List, Optional

from clob_keygen.constants import ENDPOINTS
from clob_keygen.exceptions import AuthError, KeygenError, TransportError
from clob_keygen.http import HttpClient
from clob_keygen.issuance import most_informative
from clob_keygen.signer import RequestSigner, build_path_with_query
from clob_keygen.types import AuthContext, EndpointSet

logger = logging.getLogger(__name__)

LIST_FAILED = "Failed to load keys."
REVOKE_FAILED = "Failed to revoke key."


def parse_key_list(payload: Any) -> List[str]:
    """Keep the non-empty string entries of a key list payload.

    Raises:
        TypeError: If the payload is not a JSON array.
    """
    if not isinstance(payload, list):
        raise TypeError("Unexpected response when listing keys.")
    return [value for value in payload if isinstance(value, str) and value]


def parse_revoked(payload: Any) -> bool:
    """Read the "revoked" acknowledgement flag; absent means False."""
    return isinstance(payload, dict) and payload.get("revoked") is True


def _surface(errors: List[KeygenError]) -> KeygenError:
    # Stale credentials must reach the caller so it can discard them.
    for error in errors:
        if isinstance(error, AuthError):
            return error
    return most_informative(errors)


class KeyManagementClient:
    """Lists and revokes API keys on every endpoint of an EndpointSet."""

    def __init__(
        self,
        http: HttpClient,
        endpoints: EndpointSet,
        signer: RequestSigner,
    ) -> None:
        """Initialize the key management client.

        Args:
            http: Shared HTTP transport.
            endpoints: Base URLs holding the keys.
            signer: Request signer.
        """
        self._http = http
        self._endpoints = endpoints
        self._signer = signer

    async def list_keys_from(self, base_url: str, auth: AuthContext) -> List[str]:
        """List the API keys registered on a single endpoint.

        Raises:
            AuthError: If the credentials were rejected.
            ApiError: On other upstream failures.
            TransportError: On network failures or a non-array payload.
        """
        path = ENDPOINTS["api_keys"]
        headers = self._signer.sign(auth, "GET", path)
        response = await self._http.request("GET", base_url, path, headers=headers)
        self._http.check_response(response, base_url, "list keys", LIST_FAILED)

        payload = self._http.parse_json(response, base_url)
        try:
            return parse_key_list(payload)
        except TypeError as e:
            logger.warning("list keys on %s returned %s", base_url, type(payload).__name__)
            raise TransportError(str(e), endpoint=base_url) from e

    async def list_keys(self, auth: AuthContext) -> List[str]:
        """List API keys across all endpoints.

        Returns the union of keys in first-seen order. Individual endpoint
        failures are logged and tolerated while at least one succeeds.

        Args:
            auth: The credentials to sign with.

        Returns:
            API key strings.

        Raises:
            KeygenError: The most relevant failure when every endpoint failed.
        """
        keys: List[str] = []
        errors: List[KeygenError] = []
        succeeded = False

        for base_url in self._endpoints:
            try:
                fetched = await self.list_keys_from(base_url, auth)
            except KeygenError as e:
                logger.warning("list keys failed on %s: %s", base_url, e)
                errors.append(e)
                continue

            succeeded = True
            for key in fetched:
                if key not in keys:
                    keys.append(key)

        if succeeded:
            return keys

        raise _surface(errors)

    async def revoke_key_on(
        self, base_url: str, auth: AuthContext, api_key: str
    ) -> bool:
        """Revoke an API key on a single endpoint.

        Returns:
            Whether the endpoint acknowledged the revocation.

        Raises:
            AuthError: If the credentials were rejected.
            ApiError: On other upstream failures.
            TransportError: On network failures.
        """
        path_with_query = build_path_with_query(
            ENDPOINTS["revoke_api_key"], {"apiKey": api_key}
        )
        headers = self._signer.sign(auth, "DELETE", path_with_query)
        response = await self._http.request(
            "DELETE", base_url, path_with_query, headers=headers
        )
        self._http.check_response(response, base_url, "revoke key", REVOKE_FAILED)

        try:
            payload = response.json()
        except ValueError:
            logger.debug("revoke key on %s returned a non-JSON body", base_url)
            return False
        return parse_revoked(payload)

    async def revoke_key(self, auth: AuthContext, api_key: str) -> bool:
        """Revoke an API key on all endpoints.

        The call succeeds when at least one endpoint accepted the request;
        failures on the others are only logged.

        Args:
            auth: The credentials to sign with.
            api_key: The key to revoke.

        Returns:
            True if any endpoint acknowledged the revocation with
            {"revoked": true}.

        Raises:
            KeygenError: The most relevant failure when every endpoint failed.
        """
        acknowledged: Optional[bool] = None
        errors: List[KeygenError] = []

        for base_url in self._endpoints:
            try:
                revoked = await self.revoke_key_on(base_url, auth, api_key)
            except KeygenError as e:
                logger.warning("revoke key failed on %s: %s", base_url, e)
                errors.append(e)
                continue
            acknowledged = bool(acknowledged) or revoked

        if acknowledged is not None:
            if errors:
                logger.info(
                    "Revoked key on %d of %d endpoints",
                    len(self._endpoints) - len(errors),
                    len(self._endpoints),
                )
            return acknowledged

        raise _surface(errors)
