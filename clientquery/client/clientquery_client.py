"""ClientQuery Client

HTTP client for posting ProcessQuery request graphs to SharePoint webs.
"""

import httpx
import logging
import asyncio
from datetime import datetime, timedelta
from typing import Optional, Dict, Any

from .config.client_config_loader import ClientQueryClientConfig, ClientConfigurationError
from .endpoint.termsets_endpoint import TermSetsEndpoint
from .endpoint.termgroups_endpoint import TermGroupsEndpoint
from .endpoint.permission_requests_endpoint import PermissionRequestsEndpoint
from .utils.client_utils import ClientQueryClientError, TransportError
from .clientquery_client_inf import ClientQueryClientInterface

logger = logging.getLogger(__name__)

PROCESS_QUERY_PATH = "/_vti_bin/client.svc/ProcessQuery"
CONTEXT_INFO_PATH = "/_api/contextinfo"

# Refresh the request digest this long before the server lets it expire
DIGEST_REFRESH_MARGIN_SECONDS = 60


class RequestDigest:
    """Form digest issued by a web's contextinfo endpoint."""

    def __init__(self, value: str, timeout_seconds: int):
        self.value = value
        self.expires_at = datetime.now() + timedelta(seconds=timeout_seconds)

    def is_expired(self) -> bool:
        return datetime.now() >= self.expires_at - timedelta(seconds=DIGEST_REFRESH_MARGIN_SECONDS)


class ClientQueryClient(ClientQueryClientInterface):
    """
    ClientQuery HTTP client.

    Sends requests with the configured bearer token, obtains and caches the
    form digest each web requires for ProcessQuery posts, and retries
    transient connection failures.
    """

    def __init__(self, config_path: Optional[str] = None, *,
                 config: Optional[ClientQueryClientConfig] = None,
                 transport: Optional[httpx.AsyncBaseTransport] = None):
        """
        Initialize the ClientQuery client.

        Args:
            config_path: Path to the client configuration YAML file (optional if config provided)
            config: Pre-configured ClientQueryClientConfig object (takes precedence over config_path)
            transport: Optional httpx transport, used to route requests in tests
        """
        self.config: Optional[ClientQueryClientConfig] = None
        self.async_session: Optional[httpx.AsyncClient] = None
        self.is_open: bool = False
        self._transport = transport

        self._digests: Dict[str, RequestDigest] = {}
        self._digest_lock = asyncio.Lock()

        try:
            if config is not None:
                self.config = config
                logger.info(f"ClientQuery client initialized with provided config object: {self.config}")
            else:
                self.config = ClientQueryClientConfig(config_path)
                logger.info(f"ClientQuery client initialized with config: {self.config}")
        except ClientConfigurationError as e:
            logger.error(f"Failed to load client configuration: {e}")
            raise ClientQueryClientError(f"Configuration error: {e}")

        # Initialize endpoint handlers
        self.termsets = TermSetsEndpoint(self)
        self.termgroups = TermGroupsEndpoint(self)
        self.permission_requests = PermissionRequestsEndpoint(self)

    async def open(self) -> None:
        """
        Open the HTTP session.

        Raises:
            ClientQueryClientError: If no configuration is loaded
        """
        if self.is_open:
            logger.warning("Client is already open")
            return

        if not self.config:
            raise ClientQueryClientError("No configuration loaded")

        headers = {
            'Accept': 'application/json;odata=nometadata',
            'User-Agent': f'{self.config.get_application_name()}/1.0'
        }
        access_token = self.config.get_access_token()
        if access_token:
            headers['Authorization'] = f'Bearer {access_token}'
        else:
            logger.warning("No access token configured - requests will be sent unauthenticated")

        session_kwargs: Dict[str, Any] = {
            'timeout': self.config.get_timeout(),
            'headers': headers,
            'follow_redirects': True,
        }
        if self._transport is not None:
            session_kwargs['transport'] = self._transport

        self.async_session = httpx.AsyncClient(**session_kwargs)
        self.is_open = True
        logger.info("ClientQuery client opened successfully")

    async def close(self) -> None:
        """Close the HTTP session and drop cached request digests."""
        if not self.is_open:
            logger.warning("Client is already closed")
            return

        await self._cleanup_session()
        logger.info("ClientQuery client closed")

    async def _cleanup_session(self) -> None:
        if self.async_session:
            try:
                await self.async_session.aclose()
            except Exception as e:
                logger.warning(f"Error closing HTTP session: {e}")
        self.async_session = None
        self.is_open = False
        self._digests.clear()

    def is_connected(self) -> bool:
        return self.is_open and self.async_session is not None

    # Transient connection errors worth retrying
    _RETRYABLE_EXCEPTIONS = (
        httpx.ConnectError,
        httpx.RemoteProtocolError,
        httpx.ReadError,
        httpx.WriteError,
        httpx.ConnectTimeout,
        httpx.ReadTimeout,
        ConnectionResetError,
    )

    async def _make_authenticated_request(self, method: str, url: str, **kwargs) -> httpx.Response:
        """
        Make a request with retry on transient connection errors and 502/503/504.

        Args:
            method: HTTP method
            url: Request URL
            **kwargs: Additional request parameters

        Returns:
            Response object

        Raises:
            TransportError: If the request fails or returns a non-2xx status
        """
        if not self.is_connected():
            raise ClientQueryClientError("Client is not connected")

        max_retries = self.config.get_max_retries()
        retry_delay = self.config.get_retry_delay()

        for attempt in range(max_retries + 1):
            try:
                response = await self.async_session.request(method, url, **kwargs)
                response.raise_for_status()
                return response
            except httpx.HTTPStatusError as e:
                status = e.response.status_code
                if status in (502, 503, 504) and attempt < max_retries:
                    logger.warning(
                        f"HTTP {status} on {method} {url} "
                        f"(attempt {attempt + 1}/{max_retries + 1}) - retrying in {retry_delay}s"
                    )
                    await asyncio.sleep(retry_delay)
                    continue
                raise TransportError(f"Request failed: {e}", status_code=status,
                                     response_text=e.response.text)
            except self._RETRYABLE_EXCEPTIONS as e:
                if attempt < max_retries:
                    logger.warning(
                        f"Connection error on {method} {url}: {type(e).__name__}: {e} "
                        f"(attempt {attempt + 1}/{max_retries + 1}) - retrying in {retry_delay}s"
                    )
                    await asyncio.sleep(retry_delay)
                    continue
                raise TransportError(
                    f"Request failed after {max_retries + 1} attempts: {type(e).__name__}: {e}")
            except httpx.HTTPError as e:
                raise TransportError(f"Request failed: {e}")

        raise TransportError(f"Request failed after {max_retries + 1} attempts")

    async def _get_request_digest(self, web_url: str) -> str:
        """
        Return a valid form digest for ``web_url``, fetching a new one when needed.

        Raises:
            TransportError: If the contextinfo request fails
        """
        key = web_url.rstrip('/')
        async with self._digest_lock:
            digest = self._digests.get(key)
            if digest is not None and not digest.is_expired():
                return digest.value

            logger.info(f"Requesting form digest for {key}")
            response = await self._make_authenticated_request('POST', f"{key}{CONTEXT_INFO_PATH}")
            try:
                info = response.json()
                digest = RequestDigest(info['FormDigestValue'], int(info.get('FormDigestTimeoutSeconds', 1800)))
            except (ValueError, KeyError, TypeError) as e:
                raise TransportError(f"Invalid contextinfo response from {key}: {e}",
                                     status_code=response.status_code, response_text=response.text)
            self._digests[key] = digest
            return digest.value

    def _invalidate_digest(self, web_url: str) -> None:
        self._digests.pop(web_url.rstrip('/'), None)

    async def process_query(self, web_url: str, body: str) -> str:
        """
        Post a ProcessQuery request body and return the raw response text.

        A 403 response is taken to mean the cached digest went stale; the
        digest is refreshed and the request sent once more.

        Args:
            web_url: URL of the web that hosts the target objects
            body: Serialized request graph

        Returns:
            Response text (a JSON array)

        Raises:
            TransportError: If the request fails
        """
        url = f"{web_url.rstrip('/')}{PROCESS_QUERY_PATH}"
        logger.debug(f"ProcessQuery request to {url}: {body}")

        for attempt in range(2):
            digest = await self._get_request_digest(web_url)
            headers = {'X-RequestDigest': digest, 'Content-Type': 'text/xml'}
            try:
                response = await self._make_authenticated_request('POST', url, content=body.encode('utf-8'),
                                                                  headers=headers)
            except TransportError as e:
                if e.status_code == 403 and attempt == 0:
                    logger.warning("Received 403 Forbidden - refreshing form digest and retrying")
                    self._invalidate_digest(web_url)
                    continue
                raise
            logger.debug(f"ProcessQuery response from {url}: {response.text}")
            return response.text

        raise TransportError(f"ProcessQuery request to {url} was rejected", status_code=403)

    def get_server_info(self) -> Dict[str, Any]:
        """
        Get information about the configured server and session.

        Returns:
            Dictionary with server and session information
        """
        return {
            'admin_url': self.config.get_admin_url(),
            'site_url': self.config.get_site_url(),
            'application_name': self.config.get_application_name(),
            'timeout': self.config.get_timeout(),
            'max_retries': self.config.get_max_retries(),
            'is_connected': self.is_connected(),
            'authentication': {
                'has_access_token': bool(self.config.get_access_token()),
                'cached_digests': len(self._digests),
            },
            'mock': False,
        }

    def __str__(self) -> str:
        status = "connected" if self.is_connected() else "disconnected"
        return f"ClientQueryClient(admin_url={self.config.get_admin_url()}, status={status})"

    def __repr__(self) -> str:
        return self.__str__()
