"""Mock ClientQuery Client

Mock implementation of ClientQueryClientInterface for testing.
Endpoints are the same classes the HTTP client uses; only the ProcessQuery
round trip is replaced by canned responses.
"""

import json
import logging
from collections import deque
from typing import Any, Callable, Deque, Dict, List, NamedTuple, Optional, Union

from ...client.clientquery_client_inf import ClientQueryClientInterface
from ...client.config.client_config_loader import ClientQueryClientConfig
from ...client.endpoint.permission_requests_endpoint import PermissionRequestsEndpoint
from ...client.endpoint.termgroups_endpoint import TermGroupsEndpoint
from ...client.endpoint.termsets_endpoint import TermSetsEndpoint
from ...client.utils.client_utils import TransportError

logger = logging.getLogger(__name__)

# A responder sees every request and returns a response text, or None to pass
Responder = Callable[[str, str], Optional[str]]


class RecordedRequest(NamedTuple):
    web_url: str
    body: str


class MockClientQueryClient(ClientQueryClientInterface):
    """
    Mock implementation of ClientQueryClientInterface.

    Responses come from registered responders first, then from the queue of
    canned responses in FIFO order. Every request body is recorded in
    ``requests``.
    """

    def __init__(self, config_path: Optional[str] = None, *, config: Optional[ClientQueryClientConfig] = None):
        """
        Initialize the mock ClientQuery client.

        Args:
            config_path: Optional config path, used only when no config object is given
            config: Optional config object
        """
        self.config = config if config is not None else ClientQueryClientConfig(config_path)
        self.is_open = False
        self.requests: List[RecordedRequest] = []
        self._responders: List[Responder] = []
        self._queued: Deque[str] = deque()

        self.termsets = TermSetsEndpoint(self)
        self.termgroups = TermGroupsEndpoint(self)
        self.permission_requests = PermissionRequestsEndpoint(self)

        logger.info(f"Mock ClientQuery client initialized with config: {self.config}")

    # Connection Management

    async def open(self) -> None:
        if self.is_open:
            logger.warning("Mock client is already open")
            return
        self.is_open = True
        logger.info("Mock client connection opened")

    async def close(self) -> None:
        if not self.is_open:
            logger.warning("Mock client is already closed")
            return
        self.is_open = False
        logger.info("Mock client connection closed")

    def is_connected(self) -> bool:
        return self.is_open

    def get_server_info(self) -> Dict[str, Any]:
        return {
            'admin_url': self.config.get_admin_url(),
            'site_url': self.config.get_site_url(),
            'application_name': self.config.get_application_name(),
            'is_connected': self.is_connected(),
            'queued_responses': len(self._queued),
            'recorded_requests': len(self.requests),
            'mock': True,
        }

    # Canned responses

    def add_responder(self, responder: Responder) -> None:
        """Register a callable consulted, in registration order, for every request."""
        self._responders.append(responder)

    def queue_response(self, response: Union[str, List[Any]]) -> None:
        """
        Queue a response for the next request no responder answers.

        Args:
            response: Response text, or a JSON-serializable list encoded on queueing
        """
        if not isinstance(response, str):
            response = json.dumps(response)
        self._queued.append(response)

    def reset(self) -> None:
        """Forget recorded requests, responders and queued responses."""
        self.requests.clear()
        self._responders.clear()
        self._queued.clear()

    async def process_query(self, web_url: str, body: str) -> str:
        """
        Record the request and answer it from the responders or the queue.

        Raises:
            TransportError: If nothing can answer the request
        """
        if not self.is_connected():
            raise TransportError("Mock client is not connected")

        self.requests.append(RecordedRequest(web_url, body))
        logger.debug(f"Mock ProcessQuery request to {web_url}: {body}")

        for responder in self._responders:
            response = responder(web_url, body)
            if response is not None:
                return response

        if self._queued:
            return self._queued.popleft()

        raise TransportError(f"No mock response available for request {len(self.requests)} to {web_url}")

    def __str__(self) -> str:
        status = "connected" if self.is_connected() else "disconnected"
        return f"MockClientQueryClient(status={status}, requests={len(self.requests)})"
