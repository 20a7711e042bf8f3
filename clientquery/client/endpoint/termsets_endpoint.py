"""
ClientQuery Client Term Sets Endpoint

Creates taxonomy term sets. Creation and refinement (description, custom
properties) are two separate ProcessQuery round trips: the second one resumes
at the created term set through the identity returned by the first.
"""

import logging
import uuid
from typing import Dict, Optional

from .base_endpoint import BaseEndpoint
from .taxonomy_paths import CREATED_OBJECT, DEFAULT_LCID, TERM_STORE, add_term_store_paths
from ..utils.client_utils import (
    ClientQueryClientError, validate_required_params, validate_guid, validate_exclusive_params,
    validate_optional_string, validate_string_dict,
)
from ...model.taxonomy_model import TermSet
from ...query.errors import BusinessError, ClientQueryError, RefinementError
from ...query.identity import IdentityTable
from ...query.parameters import guid_param, int32_param, string_param
from ...query.values import normalize_object

logger = logging.getLogger(__name__)


class TermSetsEndpoint(BaseEndpoint):
    """Client endpoint for term set operations."""

    async def add_term_set(self, name: str, *, term_group_id: Optional[str] = None,
                           term_group_name: Optional[str] = None, id: Optional[str] = None,
                           description: Optional[str] = None,
                           custom_properties: Optional[Dict[str, str]] = None,
                           web_url: Optional[str] = None) -> TermSet:
        """
        Create a term set in a term group of the default site collection term store.

        Args:
            name: Name of the new term set
            term_group_id: Id of the term group (mutually exclusive with term_group_name)
            term_group_name: Name of the term group (mutually exclusive with term_group_id)
            id: Id for the new term set; generated when omitted
            description: Optional description, set in a follow-up request
            custom_properties: Optional custom properties, set in a follow-up request
            web_url: Web to run against; defaults to the tenant admin site

        Returns:
            The created term set, including any requested refinements

        Raises:
            ClientQueryClientError: If the arguments are invalid
            BusinessError: If the server rejected the creation
            RefinementError: If the term set was created but setting the
                description or custom properties failed
        """
        self._check_connection()
        validate_required_params(name=name)
        selector = validate_exclusive_params(term_group_id=term_group_id, term_group_name=term_group_name)
        if term_group_id is not None:
            validate_guid('term_group_id', term_group_id)
        if id is not None:
            validate_guid('id', id)
        validate_optional_string('description', description)
        validate_string_dict('custom_properties', custom_properties)

        target = self._resolve_web_url(web_url)
        term_set_id = id or str(uuid.uuid4())
        identities = IdentityTable()

        # Phase 1: create the term set and capture its identity
        builder = self._new_builder()
        term_store, term_store_identity = add_term_store_paths(builder)

        groups = builder.add_property_access(term_store, "Groups")
        builder.add_object_path(groups)
        if selector == 'term_group_id':
            group = builder.add_instance_method(groups, "GetById", [guid_param(term_group_id)])
        else:
            group = builder.add_instance_method(groups, "GetByName", [string_param(term_group_name)])
        builder.add_object_path(group)
        builder.query_identity(group)

        term_set = builder.add_instance_method(
            group, "CreateTermSet",
            [string_param(name), guid_param(term_set_id), int32_param(DEFAULT_LCID)],
        )
        builder.add_object_path(term_set)
        term_set_identity = builder.query_identity(term_set)
        term_set_query = builder.query_properties(term_set)

        logger.info(f"Creating term set '{name}' in term group {term_group_id or term_group_name}")
        result = await self._execute(target, builder.build())

        result.remember(identities, TERM_STORE, term_store_identity)
        result.remember(identities, CREATED_OBJECT, term_set_identity)
        created = TermSet.model_validate(normalize_object(result.value(term_set_query)))

        if description is None and not custom_properties:
            return created

        # Phase 2: refine the created term set
        builder = self._new_builder()
        term_set_path = builder.add_identity_literal(identities.recall(CREATED_OBJECT))
        term_store_path = builder.add_identity_literal(identities.recall(TERM_STORE))
        if description is not None:
            builder.set_property(term_set_path, "Description", string_param(description))
        for key, value in (custom_properties or {}).items():
            builder.invoke_method(term_set_path, "SetCustomProperty", [string_param(key), string_param(value)])
        builder.commit(term_store_path)

        logger.info(f"Updating term set '{name}' with description/custom properties")
        try:
            await self._execute(target, builder.build())
        except (ClientQueryError, ClientQueryClientError) as e:
            message = e.message if isinstance(e, BusinessError) else str(e)
            logger.error(f"Term set '{name}' was created but could not be updated: {message}")
            raise RefinementError(message, created=created, cause=e) from e

        if description is not None:
            created.description = description
        if custom_properties:
            created.custom_properties.update(custom_properties)
        return created
