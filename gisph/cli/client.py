"""
HTTP Client for the GIS.ph API.

Provides an async HTTP client for the regions API. Requests carry a bearer
token when an API key is configured, and every failure is normalized into
one of the typed errors in gisph.core.exceptions:

    ApiError      - the API answered with a non-2xx status
    NetworkError  - no response was received
    RequestError  - the request could not be built or sent
"""

from typing import Any

import httpx

from gisph import __version__
from gisph.core.exceptions import ApiError, NetworkError, RequestError
from gisph.core.logging import get_logger, log_with_source

logger = get_logger(__name__)

DEFAULT_TIMEOUT = 30.0
USER_AGENT = f"gisph-cli/{__version__}"


class APIClient:
    """
    HTTP client for API communication.

    Features:
    - Bearer authentication when an API key is set
    - Versioned path prefix (/v1)
    - Structured logging of requests/responses
    - Typed errors instead of raw httpx exceptions

    Usage:
        async with APIClient("https://api.gis.ph", api_key="...") as client:
            regions = await client.get_regions({"limit": 10})
    """

    def __init__(
        self,
        base_url: str,
        api_key: str | None = None,
        timeout: float = DEFAULT_TIMEOUT,
        api_prefix: str = "/v1",
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        """
        Initialize the API client.

        Args:
            base_url: API base URL.
            api_key: Bearer token. No Authorization header is sent when None.
            timeout: Request timeout in seconds.
            api_prefix: Path prefix for the versioned resource endpoints.
            transport: Optional httpx transport (tests inject a MockTransport).
        """
        self.base_url = base_url.rstrip("/")
        self.api_key = api_key
        self.timeout = timeout
        self.api_prefix = "/" + api_prefix.strip("/")
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    async def __aenter__(self) -> "APIClient":
        return self

    async def __aexit__(self, *args: Any) -> None:
        await self.close()

    def _headers(self) -> dict[str, str]:
        headers = {
            "Content-Type": "application/json",
            "User-Agent": USER_AGENT,
        }
        if self.api_key:
            headers["Authorization"] = f"Bearer {self.api_key}"
        return headers

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create the HTTP client."""
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(
                base_url=self.base_url,
                timeout=self.timeout,
                headers=self._headers(),
                follow_redirects=True,
                transport=self._transport,
            )
        return self._client

    async def close(self) -> None:
        """Close the HTTP client."""
        if self._client and not self._client.is_closed:
            await self._client.aclose()
            self._client = None

    async def request(
        self,
        method: str,
        path: str,
        **kwargs: Any,
    ) -> Any:
        """
        Make an HTTP request to the API and return the decoded body.

        Args:
            method: HTTP method (GET, POST, etc.)
            path: API path (e.g., /v1/regions)
            **kwargs: Additional arguments for httpx

        Returns:
            Parsed JSON body, or the raw text when the body is not JSON.

        Raises:
            ApiError: On a non-2xx response
            NetworkError: When no response was received
            RequestError: When the request could not be built
        """
        try:
            client = await self._get_client()
        except (httpx.InvalidURL, ValueError) as e:
            raise RequestError(str(e)) from e

        log_with_source(
            logger,
            "api",
            "debug",
            "API request",
            method=method,
            path=path,
        )

        try:
            response = await client.request(method, path, **kwargs)
        except (httpx.InvalidURL, httpx.UnsupportedProtocol) as e:
            raise RequestError(str(e)) from e
        except httpx.TransportError as e:
            log_with_source(
                logger,
                "api",
                "debug",
                "API unreachable",
                method=method,
                path=path,
                error=str(e),
            )
            raise NetworkError(self.base_url) from e
        except httpx.HTTPError as e:
            raise RequestError(str(e)) from e

        log_with_source(
            logger,
            "api",
            "debug",
            "API response",
            method=method,
            path=path,
            status_code=response.status_code,
        )

        if not response.is_success:
            raise ApiError(response.status_code, _error_message(response))

        try:
            return response.json()
        except ValueError:
            return response.text

    async def get(self, path: str, params: dict[str, Any] | None = None) -> Any:
        """Make a GET request."""
        return await self.request("GET", path, params=params or {})

    async def post(self, path: str, data: Any = None) -> Any:
        """Make a POST request."""
        return await self.request("POST", path, json=data if data is not None else {})

    async def put(self, path: str, data: Any = None) -> Any:
        """Make a PUT request."""
        return await self.request("PUT", path, json=data if data is not None else {})

    async def delete(self, path: str) -> Any:
        """Make a DELETE request."""
        return await self.request("DELETE", path)

    # Regions
    async def get_regions(self, params: dict[str, Any] | None = None) -> Any:
        """List regions, optionally filtered by query parameters."""
        return await self.get(f"{self.api_prefix}/regions", params)

    async def get_region_by_id(self, region_id: str | int) -> Any:
        """Get a single region."""
        return await self.get(f"{self.api_prefix}/regions/{region_id}")


def _error_message(response: httpx.Response) -> str:
    """Server-provided message if the body carries one, else the reason phrase."""
    try:
        body = response.json()
    except ValueError:
        body = None

    if isinstance(body, dict) and body.get("message"):
        return str(body["message"])
    return response.reason_phrase or f"HTTP {response.status_code}"
