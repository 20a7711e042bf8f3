"""
ClientQuery Client Permission Requests Endpoint

Approves and denies pending API permission requests of the tenant's
SharePoint Online Client Extensibility service principal.
"""

import logging
from typing import Optional

from .base_endpoint import BaseEndpoint
from ..utils.client_utils import validate_required_params, validate_guid
from ...query.parameters import guid_param

logger = logging.getLogger(__name__)

PERMISSION_REQUEST_MANAGER_TYPE_ID = "104e8f06-1e00-4675-99c6-1b9b504ed8d8"


class PermissionRequestsEndpoint(BaseEndpoint):
    """Client endpoint for service principal permission requests."""

    async def deny_permission_request(self, id: str, web_url: Optional[str] = None) -> None:
        """
        Deny a pending permission request.

        Args:
            id: Id of the permission request
            web_url: Web to run against; defaults to the tenant admin site

        Raises:
            ClientQueryClientError: If the id is invalid
            BusinessError: If the server rejected the request (for example an unknown id)
        """
        await self._resolve_permission_request(id, "Deny", web_url)

    async def approve_permission_request(self, id: str, web_url: Optional[str] = None) -> None:
        """
        Approve a pending permission request.

        Args:
            id: Id of the permission request
            web_url: Web to run against; defaults to the tenant admin site
        """
        await self._resolve_permission_request(id, "Approve", web_url)

    async def _resolve_permission_request(self, id: str, method_name: str, web_url: Optional[str]) -> None:
        self._check_connection()
        validate_required_params(id=id)
        validate_guid('id', id)

        builder = self._new_builder()
        manager = builder.add_constructor(PERMISSION_REQUEST_MANAGER_TYPE_ID)
        builder.add_object_path(manager)
        requests = builder.add_property_access(manager, "PermissionRequests")
        builder.add_object_path(requests)
        request = builder.add_instance_method(requests, "GetById", [guid_param(id)])
        builder.add_object_path(request)
        builder.invoke_method(request, method_name)

        logger.info(f"{method_name} permission request {id}")
        await self._execute(self._resolve_web_url(web_url), builder.build())
