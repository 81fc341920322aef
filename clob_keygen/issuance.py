"""
Credential issuance across one or more upstream services.
"""

import asyncio
import logging
from typing import Any, Dict, List, Optional, Sequence, Union

from clob_keygen.constants import (
    API_KEY_ALIASES,
    API_SECRET_ALIASES,
    DEFAULT_HEADER_PREFIX,
    ENDPOINTS,
    HEADER_ADDRESS,
    HEADER_NONCE,
    HEADER_SIGNATURE,
    HEADER_TIMESTAMP,
    PASSPHRASE_ALIASES,
)
from clob_keygen.exceptions import (
    ApiError,
    ConsistencyError,
    IssuanceError,
    KeygenError,
    TransportError,
)
from clob_keygen.http import HttpClient
from clob_keygen.types import (
    AttestationRequest,
    CredentialBundle,
    EndpointSet,
    ReconciliationPolicy,
)

logger = logging.getLogger(__name__)

ISSUE_FAILED = "Failed to generate API key."


def _read_first(record: Dict[str, Any], aliases: Sequence[str]) -> Optional[str]:
    for key in aliases:
        candidate = record.get(key)
        if isinstance(candidate, str) and candidate:
            return candidate
    return None


def normalize_credentials(payload: Any, address: str) -> CredentialBundle:
    """Normalize an issuance response into a credential bundle.

    The body may be flat or wrapped in a {"data": {...}} envelope, and each
    field is looked up under several aliases.

    Args:
        payload: Decoded JSON response body.
        address: The wallet address the credentials belong to.

    Returns:
        The credential bundle.

    Raises:
        IssuanceError: If the payload is not an object or lacks a field.
            The message lists the keys present, never their values.
    """
    if not isinstance(payload, dict):
        raise IssuanceError("Unexpected response when minting API key.")

    record = payload
    if isinstance(payload.get("data"), dict):
        record = payload["data"]

    api_key = _read_first(record, API_KEY_ALIASES)
    api_secret = _read_first(record, API_SECRET_ALIASES)
    passphrase = _read_first(record, PASSPHRASE_ALIASES)

    if not api_key or not api_secret or not passphrase:
        keys = ", ".join(record.keys()) or "none"
        raise IssuanceError(f"Service did not return API credentials. Payload keys: {keys}")

    return CredentialBundle(
        api_key=api_key,
        api_secret=api_secret,
        passphrase=passphrase,
        address=address,
    )


def most_informative(errors: Sequence[BaseException]) -> BaseException:
    """Pick the failure most useful to surface.

    Upstream API errors beat transport errors, which beat anything else.
    """
    for preferred in (ApiError, KeygenError):
        for error in errors:
            if isinstance(error, preferred) and not isinstance(error, TransportError):
                return error
    for error in errors:
        if isinstance(error, TransportError):
            return error
    return errors[0]


class IssuanceClient:
    """Mints API credentials from every endpoint of an EndpointSet."""

    def __init__(
        self,
        http: HttpClient,
        endpoints: EndpointSet,
        header_prefix: str = DEFAULT_HEADER_PREFIX,
        policy: ReconciliationPolicy = ReconciliationPolicy.REQUIRE_IDENTICAL,
    ) -> None:
        """Initialize the issuance client.

        Args:
            http: Shared HTTP transport.
            endpoints: Base URLs to mint credentials from.
            header_prefix: Product-specific header prefix.
            policy: How to reconcile results from several endpoints.
        """
        self._http = http
        self._endpoints = endpoints
        self._prefix = header_prefix
        self._policy = policy

    @property
    def policy(self) -> ReconciliationPolicy:
        """Get the reconciliation policy."""
        return self._policy

    def _headers(self, attestation: AttestationRequest) -> Dict[str, str]:
        return {
            f"{self._prefix}_{HEADER_ADDRESS}": attestation.address,
            f"{self._prefix}_{HEADER_SIGNATURE}": attestation.signature,
            f"{self._prefix}_{HEADER_TIMESTAMP}": attestation.timestamp,
            f"{self._prefix}_{HEADER_NONCE}": attestation.nonce,
        }

    async def issue_from(
        self, base_url: str, attestation: AttestationRequest
    ) -> CredentialBundle:
        """Mint credentials from a single endpoint.

        Raises:
            IssuanceError: If the service rejects the attestation.
            TransportError: On network or parse failures.
        """
        response = await self._http.request(
            "POST",
            base_url,
            ENDPOINTS["create_api_key"],
            headers=self._headers(attestation),
        )
        self._http.check_response(
            response,
            base_url,
            "create key",
            ISSUE_FAILED,
            error_cls=IssuanceError,
            classify=False,
        )
        payload = self._http.parse_json(response, base_url)
        try:
            return normalize_credentials(payload, attestation.address)
        except IssuanceError as e:
            e.endpoint = base_url
            e.status_code = response.status_code
            logger.warning("create key on %s returned no credentials: %s", base_url, e.message)
            raise

    async def issue(self, attestation: AttestationRequest) -> CredentialBundle:
        """Mint credentials from every configured endpoint and reconcile them.

        Args:
            attestation: The signed attestation.

        Returns:
            The reconciled credential bundle.

        Raises:
            IssuanceError: If minting failed.
            ConsistencyError: If endpoints returned different credentials.
            TransportError: If every endpoint was unreachable.
        """
        targets = list(self._endpoints)
        results: List[Union[CredentialBundle, BaseException]] = await asyncio.gather(
            *(self.issue_from(base_url, attestation) for base_url in targets),
            return_exceptions=True,
        )

        successes: List[CredentialBundle] = []
        failures: List[BaseException] = []
        for result in results:
            if isinstance(result, CredentialBundle):
                successes.append(result)
            elif isinstance(result, Exception):
                failures.append(result)
            else:
                raise result

        if not successes:
            raise most_informative(failures)

        if self._policy == ReconciliationPolicy.FIRST_SUCCESS_WINS:
            return self._first_success(successes, failures)
        return self._require_identical(successes, failures, len(targets))

    def _first_success(
        self, successes: List[CredentialBundle], failures: List[BaseException]
    ) -> CredentialBundle:
        first = successes[0]
        if failures:
            logger.info(
                "Issued API key on %d of %d endpoints",
                len(successes),
                len(successes) + len(failures),
            )
        if any(not first.same_credentials(other) for other in successes[1:]):
            logger.warning("Endpoints returned different credentials; using the first")
        return first

    def _require_identical(
        self,
        successes: List[CredentialBundle],
        failures: List[BaseException],
        total: int,
    ) -> CredentialBundle:
        if failures:
            logger.warning(
                "Issued API key on %d of %d endpoints; failed endpoints were skipped",
                len(successes),
                total,
            )

        first = successes[0]
        if any(not first.same_credentials(other) for other in successes[1:]):
            logger.error("Endpoints returned mismatched credentials across %d services", total)
            raise ConsistencyError("Services returned mismatched API credentials.")

        return first
