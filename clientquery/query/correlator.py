"""
ClientQuery Response Correlator

Maps the flat ProcessQuery response array back onto the ids of the request
graph that produced it.

Response layout::

    [ {batch metadata}, id, payload, id, payload, ... ]

Pairs may arrive in any order. When the metadata carries an ErrorInfo record
the batch failed as a whole and the remaining entries are not read.
"""

import json
import logging
from typing import Any, Dict, List, Optional, Union

from pydantic import ValidationError

from ..model.query_model import BatchMetadata, ErrorInfo
from .errors import BusinessError, MalformedResponseError, ProtocolViolationError
from .graph import Graph
from .identity import IdentityTable, IdentityToken

logger = logging.getLogger(__name__)

OBJECT_IDENTITY_FIELD = "_ObjectIdentity_"
OBJECT_TYPE_FIELD = "_ObjectType_"


class CorrelatedResult:
    """
    Outcome of correlating one response with its graph.

    ``values`` maps action ids to payloads, ``identities`` maps action ids to
    the identity tokens found in those payloads. When ``error_info`` is set
    both are empty and ``raise_for_error()`` raises ``BusinessError``.
    """

    def __init__(self, metadata: BatchMetadata,
                 values: Optional[Dict[int, Any]] = None,
                 identities: Optional[Dict[int, IdentityToken]] = None,
                 retrieval_ids: Optional[List[int]] = None):
        self.metadata = metadata
        self.retrieval_ids: List[int] = list(retrieval_ids or [])
        self.values: Dict[int, Any] = values or {}
        self.identities: Dict[int, IdentityToken] = identities or {}

    @property
    def error_info(self) -> Optional[ErrorInfo]:
        return self.metadata.error_info

    @property
    def is_success(self) -> bool:
        return self.metadata.error_info is None

    @property
    def is_error(self) -> bool:
        return self.metadata.error_info is not None

    def raise_for_error(self) -> None:
        """Raise exception if the batch was rejected."""
        error = self.metadata.error_info
        if error is not None:
            raise BusinessError(
                error.message,
                code=error.code,
                type_name=error.type_name,
                trace_correlation_id=error.trace_correlation_id or self.metadata.trace_correlation_id,
                value=error.value,
            )

    @property
    def retrieved(self) -> Dict[int, Any]:
        """Payloads of the retrieval actions (identity and property queries) only."""
        return {i: self.values[i] for i in self.retrieval_ids if i in self.values}

    def value(self, action_id: int) -> Any:
        self.raise_for_error()
        return self.values[action_id]

    def identity_for(self, action_id: int) -> IdentityToken:
        """Return the identity token carried by the payload of ``action_id``."""
        self.raise_for_error()
        try:
            return self.identities[action_id]
        except KeyError:
            raise ProtocolViolationError(
                f"Payload of action {action_id} carries no {OBJECT_IDENTITY_FIELD}",
                missing_ids=[action_id],
            ) from None

    def remember(self, table: IdentityTable, name: str, action_id: int) -> IdentityToken:
        """Store the identity returned for ``action_id`` in ``table`` under ``name``."""
        token = self.identity_for(action_id)
        table.remember(name, token)
        return token

    def __len__(self) -> int:
        return len(self.values)

    def __repr__(self) -> str:
        if self.is_error:
            return f"CorrelatedResult(error={self.metadata.error_info.message!r})"
        return f"CorrelatedResult(values={sorted(self.values)}, identities={sorted(self.identities)})"


def _decode(response: Union[str, bytes, List[Any]]) -> List[Any]:
    if isinstance(response, (str, bytes, bytearray)):
        try:
            response = json.loads(response)
        except ValueError as e:
            raise MalformedResponseError(f"Response is not valid JSON: {e}") from e
    if not isinstance(response, list):
        raise MalformedResponseError(
            f"Response must be a JSON array, got {type(response).__name__}")
    if not response:
        raise MalformedResponseError("Response array is empty; batch metadata is missing")
    return response


def _parse_metadata(entry: Any) -> BatchMetadata:
    if not isinstance(entry, dict):
        raise MalformedResponseError(
            f"Response entry 0 must be the batch metadata object, got {type(entry).__name__}")
    try:
        return BatchMetadata.model_validate(entry)
    except ValidationError as e:
        raise MalformedResponseError(f"Invalid batch metadata: {e}") from e


def correlate(graph: Graph, response: Union[str, bytes, List[Any]]) -> CorrelatedResult:
    """
    Correlate a ProcessQuery response with the graph that was submitted.

    Args:
        graph: The graph whose serialization produced the request
        response: Raw response text or the decoded JSON array

    Returns:
        CorrelatedResult holding either the error record or the id-keyed payloads

    Raises:
        MalformedResponseError: If the response does not have the expected shape
        ProtocolViolationError: If a retrieval action has no entry in a successful response
    """
    entries = _decode(response)
    metadata = _parse_metadata(entries[0])

    if metadata.error_info is not None:
        logger.info(f"Batch rejected by server: {metadata.error_info.message} "
                    f"({metadata.error_info.type_name}, code {metadata.error_info.code})")
        return CorrelatedResult(metadata)

    rest = entries[1:]
    if len(rest) % 2 != 0:
        raise MalformedResponseError(
            f"Response has {len(rest)} entries after the batch metadata; expected (id, payload) pairs")

    values: Dict[int, Any] = {}
    identities: Dict[int, IdentityToken] = {}
    for index in range(0, len(rest), 2):
        action_id, payload = rest[index], rest[index + 1]
        if isinstance(action_id, bool) or not isinstance(action_id, int):
            raise MalformedResponseError(
                f"Expected an integer id at response position {index + 1}, got {action_id!r}")
        if action_id in values:
            logger.warning(f"Response repeats id {action_id}; keeping the later payload")
        values[action_id] = payload

        if isinstance(payload, dict) and OBJECT_IDENTITY_FIELD in payload:
            token = payload[OBJECT_IDENTITY_FIELD]
            if isinstance(token, str) and token:
                identities[action_id] = IdentityToken(token)
            else:
                logger.warning(f"Ignoring empty or non-string {OBJECT_IDENTITY_FIELD} for id {action_id}")

    missing = [action_id for action_id in graph.retrieval_action_ids if action_id not in values]
    if missing:
        raise ProtocolViolationError(
            f"Response is missing results for retrieval actions {missing}", missing_ids=missing)

    logger.debug(f"Correlated {len(values)} response entries, {len(identities)} identities")
    return CorrelatedResult(metadata, values, identities, graph.retrieval_action_ids)
