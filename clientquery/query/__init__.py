"""
ClientQuery Protocol

Request graph construction, serialization and response correlation for the
ProcessQuery object protocol.
"""

from .errors import (
    ClientQueryError, BusinessError, ProtocolViolationError, MalformedResponseError,
    DanglingReferenceError, UnknownIdentityError, GraphSealedError, RefinementError,
)
from .identifier import IdAllocator
from .parameters import (
    Parameter, StringParameter, Int32Parameter, GuidParameter, BooleanParameter, EnumParameter,
    NullParameter, string_param, int32_param, guid_param, bool_param, enum_param, null_param,
    encode_parameter, escape_xml,
)
from .identity import IdentityToken, IdentityTable
from .graph import ActionGraphBuilder, Graph, PropertySelection, ObjectPathKind, ActionKind
from .serializer import RequestSerializer, serialize
from .correlator import CorrelatedResult, correlate
from .values import normalize_object, normalize_value

__all__ = [
    'ClientQueryError',
    'BusinessError',
    'ProtocolViolationError',
    'MalformedResponseError',
    'DanglingReferenceError',
    'UnknownIdentityError',
    'GraphSealedError',
    'RefinementError',
    'IdAllocator',
    'Parameter',
    'StringParameter',
    'Int32Parameter',
    'GuidParameter',
    'BooleanParameter',
    'EnumParameter',
    'NullParameter',
    'string_param',
    'int32_param',
    'guid_param',
    'bool_param',
    'enum_param',
    'null_param',
    'encode_parameter',
    'escape_xml',
    'IdentityToken',
    'IdentityTable',
    'ActionGraphBuilder',
    'Graph',
    'PropertySelection',
    'ObjectPathKind',
    'ActionKind',
    'RequestSerializer',
    'serialize',
    'CorrelatedResult',
    'correlate',
    'normalize_object',
    'normalize_value',
]
