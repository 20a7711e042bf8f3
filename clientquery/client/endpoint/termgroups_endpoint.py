"""
ClientQuery Client Term Groups Endpoint

Creates taxonomy term groups in the default site collection term store.
"""

import logging
import uuid
from typing import Optional

from .base_endpoint import BaseEndpoint
from .taxonomy_paths import CREATED_OBJECT, TERM_STORE, add_term_store_paths
from ..utils.client_utils import (
    ClientQueryClientError, validate_required_params, validate_guid, validate_optional_string,
)
from ...model.taxonomy_model import TermGroup
from ...query.errors import BusinessError, ClientQueryError, RefinementError
from ...query.graph import PropertySelection
from ...query.identity import IdentityTable
from ...query.parameters import guid_param, string_param
from ...query.values import normalize_object

logger = logging.getLogger(__name__)

TERM_GROUP_PROPERTIES = PropertySelection.only("Name", "Id", "Description")


class TermGroupsEndpoint(BaseEndpoint):
    """Client endpoint for term group operations."""

    async def add_term_group(self, name: str, *, id: Optional[str] = None,
                             description: Optional[str] = None,
                             web_url: Optional[str] = None) -> TermGroup:
        """
        Create a term group.

        Args:
            name: Name of the new term group
            id: Id for the new term group; generated when omitted
            description: Optional description, set in a follow-up request
            web_url: Web to run against; defaults to the tenant admin site

        Returns:
            The created term group

        Raises:
            ClientQueryClientError: If the arguments are invalid
            BusinessError: If the server rejected the creation
            RefinementError: If the group was created but the description could not be set
        """
        self._check_connection()
        validate_required_params(name=name)
        if id is not None:
            validate_guid('id', id)
        validate_optional_string('description', description)

        target = self._resolve_web_url(web_url)
        identities = IdentityTable()

        builder = self._new_builder()
        term_store, term_store_identity = add_term_store_paths(builder)
        group = builder.add_instance_method(
            term_store, "CreateGroup", [string_param(name), guid_param(id or str(uuid.uuid4()))])
        builder.add_object_path(group)
        group_identity = builder.query_identity(group)
        group_query = builder.query_properties(group, TERM_GROUP_PROPERTIES)

        logger.info(f"Creating term group '{name}'")
        result = await self._execute(target, builder.build())

        result.remember(identities, TERM_STORE, term_store_identity)
        result.remember(identities, CREATED_OBJECT, group_identity)
        created = TermGroup.model_validate(normalize_object(result.value(group_query)))

        if description is None:
            return created

        builder = self._new_builder()
        group_path = builder.add_identity_literal(identities.recall(CREATED_OBJECT))
        term_store_path = builder.add_identity_literal(identities.recall(TERM_STORE))
        builder.set_property(group_path, "Description", string_param(description))
        builder.commit(term_store_path)

        try:
            await self._execute(target, builder.build())
        except (ClientQueryError, ClientQueryClientError) as e:
            message = e.message if isinstance(e, BusinessError) else str(e)
            logger.error(f"Term group '{name}' was created but its description could not be set: {message}")
            raise RefinementError(message, created=created, cause=e) from e

        created.description = description
        return created
