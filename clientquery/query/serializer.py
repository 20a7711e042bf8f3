"""
ClientQuery Request Serializer

Renders a built request graph into the ``<Request>`` envelope posted to the
ProcessQuery endpoint. Output depends only on the graph and the envelope
settings, so the same graph always produces the same body.
"""

import logging
from typing import List

from .graph import ActionKind, ActionNode, Graph, ObjectPathKind, ObjectPathNode, PropertySelection
from .parameters import encode_parameter, encode_parameter_list, escape_xml

logger = logging.getLogger(__name__)

CLIENT_QUERY_NAMESPACE = "http://schemas.microsoft.com/sharepoint/clientquery/2009"
DEFAULT_SCHEMA_VERSION = "15.0.0.0"
DEFAULT_LIBRARY_VERSION = "16.0.0.0"
DEFAULT_APPLICATION_NAME = "ClientQuery"


def _element(tag: str, attributes: List[tuple], children: str = '') -> str:
    attrs = ''.join(f' {name}="{value}"' for name, value in attributes)
    if children:
        return f'<{tag}{attrs}>{children}</{tag}>'
    return f'<{tag}{attrs} />'


def _braced(type_id) -> str:
    return '{' + str(type_id) + '}'


class RequestSerializer:
    """Serializer bound to one set of envelope attributes."""

    def __init__(self, application_name: str = DEFAULT_APPLICATION_NAME,
                 schema_version: str = DEFAULT_SCHEMA_VERSION,
                 library_version: str = DEFAULT_LIBRARY_VERSION):
        self.application_name = application_name
        self.schema_version = schema_version
        self.library_version = library_version

    def serialize(self, graph: Graph) -> str:
        if not isinstance(graph, Graph):
            raise TypeError(f"Expected Graph, got {type(graph).__name__}; call build() on the builder first")
        if not graph.actions:
            logger.warning("Serializing a request graph with no actions")

        actions = ''.join(self._render_action(a) for a in sorted(graph.actions, key=lambda a: a.id))
        paths = ''.join(self._render_object_path(p) for p in sorted(graph.object_paths, key=lambda p: p.id))

        body = (
            f'<Request AddExpandoFieldTypeSuffix="true" SchemaVersion="{escape_xml(self.schema_version)}" '
            f'LibraryVersion="{escape_xml(self.library_version)}" '
            f'ApplicationName="{escape_xml(self.application_name)}" '
            f'xmlns="{CLIENT_QUERY_NAMESPACE}">'
            f'{_section("Actions", actions)}{_section("ObjectPaths", paths)}'
            '</Request>'
        )
        logger.debug(f"Serialized request graph: {len(graph.actions)} actions, "
                     f"{len(graph.object_paths)} object paths")
        return body

    def _render_action(self, action: ActionNode) -> str:
        target = ('ObjectPathId', action.target_path_id)

        if action.kind in (ActionKind.OBJECT_PATH, ActionKind.OBJECT_IDENTITY_QUERY):
            return _element(action.kind.value, [('Id', action.id), target])

        if action.kind == ActionKind.QUERY:
            return _element('Query', [('Id', action.id), target],
                            _render_selection(action.selection or PropertySelection.all()))

        if action.kind == ActionKind.SET_PROPERTY:
            return _element('SetProperty', [('Id', action.id), target, ('Name', action.name)],
                            ''.join(encode_parameter(p) for p in action.parameters))

        if action.kind == ActionKind.INVOKE_METHOD:
            return _element('Method', [('Name', action.name), ('Id', action.id), target],
                            encode_parameter_list(action.parameters))

        raise ValueError(f"Unsupported action kind: {action.kind}")

    def _render_object_path(self, node: ObjectPathNode) -> str:
        params = encode_parameter_list(node.parameters)

        if node.kind == ObjectPathKind.STATIC_METHOD:
            return _element('StaticMethod', [('Id', node.id), ('Name', node.name),
                                             ('TypeId', _braced(node.type_id))], params)

        if node.kind == ObjectPathKind.CONSTRUCTOR:
            return _element('Constructor', [('Id', node.id), ('TypeId', _braced(node.type_id))], params)

        if node.kind == ObjectPathKind.METHOD:
            return _element('Method', [('Id', node.id), ('ParentId', node.parent_id),
                                       ('Name', node.name)], params)

        if node.kind == ObjectPathKind.PROPERTY:
            return _element('Property', [('Id', node.id), ('ParentId', node.parent_id),
                                         ('Name', node.name)])

        if node.kind == ObjectPathKind.IDENTITY:
            # Identity tokens are replayed exactly as the server issued them.
            return _element('Identity', [('Id', node.id), ('Name', node.identity.value)])

        raise ValueError(f"Unsupported object path kind: {node.kind}")


def _section(tag: str, children: str) -> str:
    return f'<{tag}>{children}</{tag}>' if children else f'<{tag} />'


def _render_selection(selection: PropertySelection) -> str:
    properties = ''.join(
        _element('Property', [('Name', name), ('ScalarProperty', 'true')])
        for name in selection.properties
    )
    select_all = 'true' if selection.select_all else 'false'
    return _element('Query', [('SelectAllProperties', select_all)], _section('Properties', properties))


def serialize(graph: Graph, application_name: str = DEFAULT_APPLICATION_NAME,
              schema_version: str = DEFAULT_SCHEMA_VERSION,
              library_version: str = DEFAULT_LIBRARY_VERSION) -> str:
    """
    Serialize a request graph into a ProcessQuery request body.

    Args:
        graph: Graph returned by ``ActionGraphBuilder.build()``
        application_name: Value of the ApplicationName envelope attribute
        schema_version: Client query schema version
        library_version: Client library version

    Returns:
        The XML request body
    """
    return RequestSerializer(application_name, schema_version, library_version).serialize(graph)
