"""
ClientQuery Client Base Endpoint

Base class for all ClientQuery client endpoint implementations.
"""

import logging
from typing import Optional

from ...query.correlator import CorrelatedResult, correlate
from ...query.graph import ActionGraphBuilder, Graph
from ...query.serializer import serialize
from ..utils.client_utils import ClientQueryClientError, validate_web_url

logger = logging.getLogger(__name__)


class BaseEndpoint:
    """Base class for ClientQuery client endpoints."""

    def __init__(self, client):
        """
        Initialize the endpoint with a reference to the main client.

        Args:
            client: The ClientQueryClient or MockClientQueryClient instance
        """
        self.client = client

    def _check_connection(self):
        """Check if the client is connected."""
        if not self.client.is_connected():
            raise ClientQueryClientError("Client is not connected")

    def _get_admin_url(self) -> str:
        return self.client.config.get_admin_url()

    def _resolve_web_url(self, web_url: Optional[str]) -> str:
        """Use ``web_url`` when given, otherwise the tenant admin site."""
        if web_url is None:
            return self._get_admin_url()
        validate_web_url(web_url)
        return web_url

    def _new_builder(self) -> ActionGraphBuilder:
        """Each request gets its own builder and id allocator."""
        return ActionGraphBuilder()

    async def _execute(self, web_url: str, graph: Graph) -> CorrelatedResult:
        """
        Serialize ``graph``, post it to ``web_url`` and correlate the response.

        Args:
            web_url: Web whose ProcessQuery endpoint receives the request
            graph: Built request graph

        Returns:
            CorrelatedResult for a successful batch

        Raises:
            BusinessError: If the server rejected the batch
            ProtocolViolationError: If a retrieval action has no result
            MalformedResponseError: If the response cannot be parsed
            TransportError: If the HTTP round trip failed
        """
        body = serialize(graph, **self.client.config.get_envelope_settings())
        response_text = await self.client.process_query(web_url, body)
        result = correlate(graph, response_text)
        result.raise_for_error()
        return result
