"""
ClientQuery Action Graph

Node models for ProcessQuery object paths and actions, and the builder that
allocates their ids and checks that every reference points at an object path
of the same graph.
"""

import logging
import re
import uuid
from enum import Enum
from typing import Any, List, Optional, Sequence, Set, Tuple, Union

from pydantic import BaseModel, ConfigDict, Field

from .errors import DanglingReferenceError, GraphSealedError
from .identifier import IdAllocator
from .identity import IdentityToken
from .parameters import GUID_PATTERN, Parameter, string_param

logger = logging.getLogger(__name__)

MEMBER_NAME_PATTERN = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")

COMMIT_METHOD_NAME = "CommitAll"


class ObjectPathKind(str, Enum):
    STATIC_METHOD = "StaticMethod"
    CONSTRUCTOR = "Constructor"
    METHOD = "Method"
    PROPERTY = "Property"
    IDENTITY = "Identity"


class ActionKind(str, Enum):
    OBJECT_PATH = "ObjectPath"
    OBJECT_IDENTITY_QUERY = "ObjectIdentityQuery"
    QUERY = "Query"
    SET_PROPERTY = "SetProperty"
    INVOKE_METHOD = "Method"


RETRIEVAL_ACTIONS = frozenset({ActionKind.OBJECT_IDENTITY_QUERY, ActionKind.QUERY})


class PropertySelection(BaseModel):
    """Which properties of a queried object the server should return."""
    model_config = ConfigDict(frozen=True)

    select_all: bool = Field(True, description="Return every scalar property")
    properties: Tuple[str, ...] = Field((), description="Scalar properties to return explicitly")

    @classmethod
    def all(cls) -> 'PropertySelection':
        return cls()

    @classmethod
    def only(cls, *names: str) -> 'PropertySelection':
        for name in names:
            _check_member_name(name, "property")
        return cls(select_all=False, properties=tuple(names))


class ObjectPathNode(BaseModel):
    """How to reach or construct one server-side object."""
    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    id: int
    kind: ObjectPathKind
    parent_id: Optional[int] = None
    name: Optional[str] = None
    type_id: Optional[uuid.UUID] = None
    parameters: Tuple[Parameter, ...] = ()
    identity: Optional[IdentityToken] = None


class ActionNode(BaseModel):
    """What to do with an object reached through an object path."""
    model_config = ConfigDict(frozen=True)

    id: int
    kind: ActionKind
    target_path_id: int
    name: Optional[str] = None
    parameters: Tuple[Parameter, ...] = ()
    selection: Optional[PropertySelection] = None

    @property
    def is_retrieval(self) -> bool:
        return self.kind in RETRIEVAL_ACTIONS


class Graph(BaseModel):
    """An immutable, fully built request graph."""
    model_config = ConfigDict(frozen=True)

    object_paths: Tuple[ObjectPathNode, ...] = ()
    actions: Tuple[ActionNode, ...] = ()

    @property
    def retrieval_action_ids(self) -> List[int]:
        return [a.id for a in self.actions if a.is_retrieval]

    def object_path(self, path_id: int) -> ObjectPathNode:
        for node in self.object_paths:
            if node.id == path_id:
                return node
        raise KeyError(path_id)

    def action(self, action_id: int) -> ActionNode:
        for node in self.actions:
            if node.id == action_id:
                return node
        raise KeyError(action_id)

    @property
    def all_ids(self) -> List[int]:
        return sorted([n.id for n in self.object_paths] + [a.id for a in self.actions])


def _check_member_name(name: Any, role: str) -> str:
    if not isinstance(name, str) or not MEMBER_NAME_PATTERN.match(name):
        raise ValueError(f"Invalid {role} name: {name!r}")
    return name


def _parse_type_id(type_id: Union[str, uuid.UUID]) -> uuid.UUID:
    if isinstance(type_id, uuid.UUID):
        return type_id
    text = str(type_id)
    if text.startswith('{') and text.endswith('}'):
        text = text[1:-1]
    if not GUID_PATTERN.fullmatch(text):
        raise ValueError(f"Invalid type id: {type_id!r}")
    return uuid.UUID(text)


class ActionGraphBuilder:
    """
    Accumulates object path and action nodes under one id allocator.

    Every ``add_*`` / action method returns the id given to the new node so
    later calls can use it as a parent or target. Nothing is sent anywhere;
    ``build()`` freezes the nodes into a ``Graph`` for serialization.
    """

    def __init__(self, allocator: Optional[IdAllocator] = None):
        self.allocator = allocator or IdAllocator()
        self._object_paths: List[ObjectPathNode] = []
        self._actions: List[ActionNode] = []
        self._path_ids: Set[int] = set()
        self._sealed = False

    # Object paths

    def add_static_method(self, type_id: Union[str, uuid.UUID], method_name: str,
                          parameters: Sequence[Parameter] = ()) -> int:
        """Call a static method of the server type identified by ``type_id``."""
        return self._add_path(
            kind=ObjectPathKind.STATIC_METHOD,
            name=_check_member_name(method_name, "method"),
            type_id=_parse_type_id(type_id),
            parameters=tuple(parameters),
        )

    def add_constructor(self, type_id: Union[str, uuid.UUID],
                        parameters: Sequence[Parameter] = ()) -> int:
        """Construct a new instance of the server type identified by ``type_id``."""
        return self._add_path(
            kind=ObjectPathKind.CONSTRUCTOR,
            type_id=_parse_type_id(type_id),
            parameters=tuple(parameters),
        )

    def add_instance_method(self, parent_id: int, method_name: str,
                            parameters: Sequence[Parameter] = ()) -> int:
        """Call a method on the object reached by ``parent_id``."""
        self._require_path(parent_id, "parent")
        return self._add_path(
            kind=ObjectPathKind.METHOD,
            parent_id=parent_id,
            name=_check_member_name(method_name, "method"),
            parameters=tuple(parameters),
        )

    def add_property_access(self, parent_id: int, property_name: str) -> int:
        """Read an object-valued property of the object reached by ``parent_id``."""
        self._require_path(parent_id, "parent")
        return self._add_path(
            kind=ObjectPathKind.PROPERTY,
            parent_id=parent_id,
            name=_check_member_name(property_name, "property"),
        )

    def add_identity_literal(self, token: IdentityToken) -> int:
        """Resume at an object whose identity was captured by an earlier request."""
        if not isinstance(token, IdentityToken):
            raise TypeError(f"Expected IdentityToken, got {type(token).__name__}")
        return self._add_path(kind=ObjectPathKind.IDENTITY, identity=token)

    # Actions

    def add_object_path(self, target_path_id: int) -> int:
        """Ask the server to materialise the object path ``target_path_id``."""
        return self._add_action(ActionKind.OBJECT_PATH, target_path_id)

    def query_identity(self, target_path_id: int) -> int:
        """Request the ``_ObjectIdentity_`` of the object at ``target_path_id``."""
        return self._add_action(ActionKind.OBJECT_IDENTITY_QUERY, target_path_id)

    def query_properties(self, target_path_id: int,
                         selection: Optional[PropertySelection] = None) -> int:
        """Request a property snapshot of the object at ``target_path_id``."""
        return self._add_action(ActionKind.QUERY, target_path_id,
                                selection=selection or PropertySelection.all())

    def set_property(self, target_path_id: int, name: str, value: Parameter) -> int:
        if isinstance(value, str):
            value = string_param(value)
        return self._add_action(ActionKind.SET_PROPERTY, target_path_id,
                                name=_check_member_name(name, "property"),
                                parameters=(value,))

    def invoke_method(self, target_path_id: int, method_name: str,
                      parameters: Sequence[Parameter] = ()) -> int:
        return self._add_action(ActionKind.INVOKE_METHOD, target_path_id,
                                name=_check_member_name(method_name, "method"),
                                parameters=tuple(parameters))

    def commit(self, root_identity_id: int) -> int:
        """Flush pending mutations through ``CommitAll`` on the given root object."""
        return self.invoke_method(root_identity_id, COMMIT_METHOD_NAME)

    # Build

    def build(self) -> Graph:
        """Freeze the accumulated nodes. The builder cannot be modified afterwards."""
        self._sealed = True
        if not self._actions:
            logger.warning("Building a request graph with no actions")
        return Graph(object_paths=tuple(self._object_paths), actions=tuple(self._actions))

    @property
    def is_sealed(self) -> bool:
        return self._sealed

    def _check_open(self) -> None:
        if self._sealed:
            raise GraphSealedError("Graph has already been built; start a new builder")

    def _require_path(self, ref_id: Any, role: str) -> None:
        if isinstance(ref_id, bool) or not isinstance(ref_id, int) or ref_id not in self._path_ids:
            raise DanglingReferenceError(
                f"{role.capitalize()} id {ref_id!r} is not an object path of this graph",
                reference_id=ref_id if isinstance(ref_id, int) else None,
            )

    def _add_path(self, **fields: Any) -> int:
        self._check_open()
        node_id = self.allocator.next()
        self._object_paths.append(ObjectPathNode(id=node_id, **fields))
        self._path_ids.add(node_id)
        return node_id

    def _add_action(self, kind: ActionKind, target_path_id: int, **fields: Any) -> int:
        self._check_open()
        self._require_path(target_path_id, "target")
        node_id = self.allocator.next()
        self._actions.append(ActionNode(id=node_id, kind=kind, target_path_id=target_path_id, **fields))
        return node_id
