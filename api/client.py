"""
API client for the draft clock service

aiohttp-based HTTP client for the league persistence API.
Provides connection pooling, error mapping, and session management.
"""
import aiohttp
import logging
from typing import Optional, List, Dict, Any
from urllib.parse import urljoin, urlencode

from config import get_config
from exceptions import APIException, PersistenceConflict

logger = logging.getLogger(f'{__name__}.APIClient')

# Truncation length for response bodies in debug logs
LOG_TRUNCATE = 1200

OK_STATUSES = (200, 201)


def _truncate(data: Any) -> str:
    text = str(data)
    if len(text) > LOG_TRUNCATE:
        return text[:LOG_TRUNCATE] + "..."
    return text


class APIClient:
    """
    Async HTTP client for the league persistence API.

    Features:
    - Connection pooling with proper session management
    - Bearer token authentication
    - 404 mapped to None, 409 mapped to PersistenceConflict
    - Debug logging with response truncation
    """

    def __init__(self, base_url: Optional[str] = None, api_token: Optional[str] = None):
        """
        Initialize API client with configuration.

        Args:
            base_url: Override default database URL from config
            api_token: Override default API token from config

        Raises:
            ValueError: If required configuration is missing
        """
        config = get_config()
        self.base_url = base_url or config.db_url
        self.api_token = api_token or config.api_token
        self.api_version = config.api_version
        self._session: Optional[aiohttp.ClientSession] = None

        if not self.base_url:
            raise ValueError("DB_URL must be configured")
        if not self.api_token:
            raise ValueError("API_TOKEN must be configured")

        logger.debug(f"APIClient initialized with base_url: {self.base_url}")

    @property
    def headers(self) -> Dict[str, str]:
        """Get headers with authentication and content type."""
        return {
            'Authorization': f'Bearer {self.api_token}',
            'Content-Type': 'application/json',
            'User-Agent': 'Fantasy-Draft-Clock/1.0'
        }

    def _build_url(self, endpoint: str, object_id: Optional[int] = None) -> str:
        """
        Build complete API URL from components.

        Args:
            endpoint: API endpoint path (may contain sub-paths like 'fantasyleagues/3/draft/picks')
            object_id: Optional object ID to append

        Returns:
            Complete URL for API request
        """
        if endpoint.startswith(('http://', 'https://')):
            return endpoint

        path = f"v{self.api_version}/{endpoint}"
        if object_id is not None:
            path += f"/{object_id}"

        return urljoin(self.base_url.rstrip('/') + '/', path)

    def _add_params(self, url: str, params: Optional[List[tuple]] = None) -> str:
        """
        Add query parameters to URL.

        Args:
            url: Base URL
            params: List of (key, value) tuples

        Returns:
            URL with query parameters appended
        """
        if not params:
            return url

        separator = "&" if "?" in url else "?"
        return f"{url}{separator}{urlencode(params)}"

    async def _ensure_session(self) -> None:
        """Ensure aiohttp session exists and is not closed."""
        if self._session is None or self._session.closed:
            connector = aiohttp.TCPConnector(
                limit=100,  # Total connection pool size
                limit_per_host=30,  # Connections per host
                ttl_dns_cache=300,  # DNS cache TTL
                use_dns_cache=True
            )

            config = get_config()
            timeout = aiohttp.ClientTimeout(total=config.default_timeout * 3, connect=config.default_timeout)

            self._session = aiohttp.ClientSession(
                headers=self.headers,
                connector=connector,
                timeout=timeout
            )

            logger.debug("Created new aiohttp session with connection pooling")

    async def _check_status(
        self,
        method: str,
        url: str,
        response: aiohttp.ClientResponse
    ) -> bool:
        """
        Map error statuses onto exceptions.

        Returns:
            False for 404 (caller returns None), True when the body can be read

        Raises:
            PersistenceConflict: On 409
            APIException: On any other error status
        """
        if response.status in OK_STATUSES:
            return True
        if response.status == 404:
            logger.warning(f"Resource not found for {method}: {url}")
            return False
        if response.status == 401:
            logger.error(f"Authentication failed for {method}: {url}")
            raise APIException("Authentication failed - check API token")
        if response.status == 403:
            logger.error(f"Access forbidden for {method}: {url}")
            raise APIException("Access forbidden - insufficient permissions")

        error_text = await response.text()
        if response.status == 409:
            logger.info(f"{method} conflict: {url} - {error_text}")
            raise PersistenceConflict(f"{method} conflict: {error_text}")

        logger.error(f"{method} error {response.status}: {url} - {error_text}")
        raise APIException(f"{method} request failed with status {response.status}: {error_text}")

    async def _request(
        self,
        method: str,
        url: str,
        json_data: Optional[Dict[str, Any]] = None,
        timeout: Optional[int] = None
    ) -> Optional[Dict[str, Any]]:
        await self._ensure_session()

        request_timeout = aiohttp.ClientTimeout(total=timeout) if timeout else None

        try:
            async with self._session.request(method, url, json=json_data, timeout=request_timeout) as response:
                if not await self._check_status(method, url, response):
                    return None

                data = await response.json()
                logger.debug(f"{method} Response: {_truncate(data)}")
                return data

        except APIException:
            raise
        except aiohttp.ClientError as e:
            logger.error(f"HTTP client error for {method} {url}: {e}")
            raise APIException(f"Network error: {e}")
        except Exception as e:
            logger.error(f"Unexpected error in {method} {url}: {e}")
            raise APIException(f"{method} failed: {e}")

    async def get(
        self,
        endpoint: str,
        object_id: Optional[int] = None,
        params: Optional[List[tuple]] = None,
        timeout: Optional[int] = None
    ) -> Optional[Dict[str, Any]]:
        """
        Make GET request to API.

        Args:
            endpoint: API endpoint
            object_id: Optional object ID
            params: Query parameters
            timeout: Request timeout override

        Returns:
            JSON response data or None for 404

        Raises:
            APIException: For HTTP errors or network issues
        """
        url = self._add_params(self._build_url(endpoint, object_id), params)
        logger.debug(f"GET: {endpoint} id: {object_id} params: {params}")
        return await self._request('GET', url, timeout=timeout)

    async def post(
        self,
        endpoint: str,
        data: Dict[str, Any],
        timeout: Optional[int] = None
    ) -> Optional[Dict[str, Any]]:
        """
        Make POST request to API.

        Args:
            endpoint: API endpoint
            data: Request payload
            timeout: Request timeout override

        Returns:
            JSON response data or None for 404

        Raises:
            PersistenceConflict: If a conditional create lost a race (409)
            APIException: For HTTP errors or network issues
        """
        url = self._build_url(endpoint)
        logger.debug(f"POST: {endpoint} data: {data}")
        return await self._request('POST', url, json_data=data, timeout=timeout)

    async def patch(
        self,
        endpoint: str,
        data: Optional[Dict[str, Any]] = None,
        object_id: Optional[int] = None,
        params: Optional[List[tuple]] = None,
        timeout: Optional[int] = None
    ) -> Optional[Dict[str, Any]]:
        """
        Make PATCH request to API.

        Conditional updates pass their precondition as a query parameter
        (e.g. expected_pick); the API answers 409 when it no longer holds.

        Args:
            endpoint: API endpoint
            data: Fields to update
            object_id: Optional object ID
            params: Query parameters
            timeout: Request timeout override

        Returns:
            JSON response data or None for 404

        Raises:
            PersistenceConflict: If the precondition failed (409)
            APIException: For HTTP errors or network issues
        """
        url = self._add_params(self._build_url(endpoint, object_id), params)
        logger.debug(f"PATCH: {endpoint} id: {object_id} data: {data} params: {params}")
        return await self._request('PATCH', url, json_data=data or {}, timeout=timeout)

    async def close(self) -> None:
        """Close the HTTP session and clean up resources."""
        if self._session and not self._session.closed:
            await self._session.close()
            logger.debug("Closed aiohttp session")

    async def __aenter__(self):
        """Async context manager entry."""
        await self._ensure_session()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        """Async context manager exit with cleanup."""
        await self.close()


# Global API client instance for reuse
_global_client: Optional[APIClient] = None


async def get_global_client() -> APIClient:
    """
    Get global API client instance with automatic session management.

    Returns:
        Shared APIClient instance
    """
    global _global_client
    if _global_client is None:
        _global_client = APIClient()

    await _global_client._ensure_session()
    return _global_client


async def cleanup_global_client() -> None:
    """Clean up global API client. Call when a worker job or the process shuts down."""
    global _global_client
    if _global_client:
        await _global_client.close()
        _global_client = None
