"""Object paths shared by the taxonomy endpoints."""

from typing import Tuple

from ...query.graph import ActionGraphBuilder

TAXONOMY_SESSION_TYPE_ID = "981cbc68-9edc-4f8d-872f-71146fcbb84f"

DEFAULT_LCID = 1033

# Identity table names
TERM_STORE = "termStore"
CREATED_OBJECT = "createdObject"


def add_term_store_paths(builder: ActionGraphBuilder) -> Tuple[int, int]:
    """
    Navigate from the taxonomy session to the default site collection term store.

    Returns:
        (term store path id, term store identity query id)
    """
    session = builder.add_static_method(TAXONOMY_SESSION_TYPE_ID, "GetTaxonomySession")
    builder.add_object_path(session)
    builder.query_identity(session)

    term_store = builder.add_instance_method(session, "GetDefaultSiteCollectionTermStore")
    builder.add_object_path(term_store)
    term_store_identity = builder.query_identity(term_store)
    return term_store, term_store_identity
