"""ClientQuery Client Interface

Abstract base class defining the interface for ClientQuery clients.
This interface is implemented by the HTTP client and by the mock client so
endpoints can run their request graphs against either.
"""

from abc import ABC, abstractmethod
from typing import Any, Dict


class ClientQueryClientInterface(ABC):
    """
    Abstract interface for ClientQuery clients.

    The only protocol-facing operation is ``process_query``: post one request
    body to a web's ProcessQuery endpoint and return the raw response text.
    Everything above it (graph building, correlation, identity threading)
    lives in the endpoints.
    """

    # Connection Management

    @abstractmethod
    async def open(self) -> None:
        """Open the client connection."""
        pass

    @abstractmethod
    async def close(self) -> None:
        """Close the client connection."""
        pass

    @abstractmethod
    def is_connected(self) -> bool:
        """Check if the client is currently connected."""
        pass

    @abstractmethod
    def get_server_info(self) -> Dict[str, Any]:
        """Get information about the configured server."""
        pass

    # Transport

    @abstractmethod
    async def process_query(self, web_url: str, body: str) -> str:
        """
        Post a ProcessQuery request body to ``web_url`` and return the response text.

        Raises:
            TransportError: On network failure, non-2xx status or auth failure
        """
        pass

    # Context Manager Support

    async def __aenter__(self):
        await self.open()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()
