"""
Async HTTP transport for the CLOB key generation client.
"""

import logging
from typing import Any, Dict, Optional, Type

import httpx

from clob_keygen.constants import DEFAULT_TIMEOUT
from clob_keygen.exceptions import ApiError, AuthError, RateLimitError, TransportError
from clob_keygen.utils import extract_message, sanitize_message

logger = logging.getLogger(__name__)


def resolve_url(base_url: str, path_with_query: str) -> str:
    """Join an absolute path onto the scheme and host of a base URL.

    The query is appended verbatim so it is never re-encoded.
    """
    origin = httpx.URL(base_url)
    return f"{origin.scheme}://{origin.netloc.decode('ascii')}{path_with_query}"


class HttpClient:
    """Thin wrapper over httpx.AsyncClient that converts failures to typed errors.

    Every call targets an explicit base URL, so one transport serves all
    endpoints of an EndpointSet.
    """

    def __init__(
        self,
        timeout: float = DEFAULT_TIMEOUT,
        product: str = "Forkast",
        debug: bool = False,
        client: Optional[httpx.AsyncClient] = None,
    ) -> None:
        """Initialize the HTTP client.

        Args:
            timeout: Request timeout in seconds.
            product: Product name used in user-facing messages.
            debug: Append raw upstream text to user-facing messages.
            client: Optional pre-built httpx client.
        """
        self._product = product
        self._debug = debug
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(
            timeout=timeout,
            headers={"Accept": "application/json"},
        )

    @property
    def product(self) -> str:
        """Get the product name."""
        return self._product

    @property
    def debug(self) -> bool:
        """Whether raw upstream messages are shown to users."""
        return self._debug

    async def close(self) -> None:
        """Close the underlying client if this instance created it."""
        if self._owns_client:
            await self._client.aclose()

    async def __aenter__(self) -> "HttpClient":
        return self

    async def __aexit__(self, *args: Any) -> None:
        await self.close()

    async def request(
        self,
        method: str,
        base_url: str,
        path_with_query: str,
        headers: Optional[Dict[str, str]] = None,
        content: Optional[str] = None,
    ) -> httpx.Response:
        """Send a single request.

        The path is resolved against the origin of the base URL, so a path
        segment on the base URL is dropped and the wire path stays
        byte-identical to the one that was signed.

        Args:
            method: HTTP method.
            base_url: Endpoint base URL.
            path_with_query: Path plus encoded query.
            headers: Request headers.
            content: Optional request body.

        Returns:
            The raw response.

        Raises:
            TransportError: On network failures.
        """
        url = resolve_url(base_url, path_with_query)
        try:
            return await self._client.request(
                method, url, headers=headers, content=content
            )
        except httpx.HTTPError as e:
            logger.warning("%s %s failed: %s", method, url, e)
            raise TransportError(
                f"Could not reach {self._product}. Check your connection and retry.",
                endpoint=base_url,
            ) from e

    def parse_json(self, response: httpx.Response, base_url: str) -> Any:
        """Decode a JSON response body.

        Raises:
            TransportError: If the body is not valid JSON.
        """
        try:
            return response.json()
        except ValueError as e:
            logger.warning(
                "Unparsable response from %s (status %d): %s",
                base_url,
                response.status_code,
                e,
            )
            raise TransportError(
                f"Unexpected response from {self._product}.", endpoint=base_url
            ) from e

    def check_response(
        self,
        response: httpx.Response,
        base_url: str,
        operation: str,
        fallback: str,
        error_cls: Type[ApiError] = ApiError,
        classify: bool = True,
    ) -> None:
        """Raise a typed error for a non-success response.

        Args:
            response: The response to check.
            base_url: The endpoint the response came from.
            operation: Short description used in logs (e.g. "list keys").
            fallback: Message used when the body carries none.
            error_cls: Error type for unclassified failures.
            classify: Map 401/403 to AuthError and 429 to RateLimitError.

        Raises:
            ApiError: Or a subclass, with a sanitized message.
        """
        if response.is_success:
            return

        try:
            raw_message = extract_message(response.json()) or fallback
        except ValueError:
            raw_message = fallback

        status = response.status_code
        logger.warning(
            "%s failed on %s (status %d): %s", operation, base_url, status, raw_message
        )

        message = sanitize_message(
            status, raw_message, product=self._product, debug=self._debug
        )

        if classify and status in (401, 403):
            raise AuthError(
                message, status_code=status, endpoint=base_url, required_level="api key"
            )
        if classify and status == 429:
            raise RateLimitError(message, status_code=status, endpoint=base_url)
        raise error_cls(message, status_code=status, endpoint=base_url)
