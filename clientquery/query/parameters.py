"""ClientQuery Parameter Models

Typed scalar parameters for object path and action nodes, and their rendering
into ``<Parameter Type="...">`` wire fragments.
"""

import re
import uuid
from typing import Annotated, Any, Iterable, Literal, Union

from pydantic import BaseModel, ConfigDict, Field, StrictBool, StrictInt, StrictStr, field_validator

INT32_MIN = -2 ** 31
INT32_MAX = 2 ** 31 - 1

GUID_PATTERN = re.compile(r"^[0-9a-fA-F]{8}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{12}$")

_XML_ENTITIES = (
    ('&', '&amp;'),
    ('<', '&lt;'),
    ('>', '&gt;'),
    ('"', '&quot;'),
    ("'", '&apos;'),
)


def escape_xml(value: str) -> str:
    """Replace the five XML predefined-entity characters; nothing else changes."""
    for char, entity in _XML_ENTITIES:
        value = value.replace(char, entity)
    return value


class _ParameterBase(BaseModel):
    model_config = ConfigDict(frozen=True)


class StringParameter(_ParameterBase):
    type: Literal['String'] = 'String'
    value: StrictStr = Field(..., description="Literal text, escaped on rendering")

    def render_value(self) -> str:
        return escape_xml(self.value)


class Int32Parameter(_ParameterBase):
    type: Literal['Int32'] = 'Int32'
    value: StrictInt = Field(..., description="Signed 32-bit integer")

    @field_validator('value')
    @classmethod
    def _check_range(cls, v: int) -> int:
        if not INT32_MIN <= v <= INT32_MAX:
            raise ValueError(f"{v} does not fit in a signed 32-bit integer")
        return v

    def render_value(self) -> str:
        return str(self.value)


class GuidParameter(_ParameterBase):
    type: Literal['Guid'] = 'Guid'
    value: uuid.UUID = Field(..., description="GUID rendered in braced lowercase form")

    @field_validator('value', mode='before')
    @classmethod
    def _parse_guid(cls, v: Any) -> uuid.UUID:
        if isinstance(v, uuid.UUID):
            return v
        if not isinstance(v, str):
            raise ValueError(f"GUID must be a string or UUID, got {type(v).__name__}")
        text = v
        if text.startswith('{') and text.endswith('}'):
            text = text[1:-1]
        if not GUID_PATTERN.fullmatch(text):
            raise ValueError(f"'{v}' is not a valid GUID")
        return uuid.UUID(text)

    def render_value(self) -> str:
        return '{' + str(self.value) + '}'


class BooleanParameter(_ParameterBase):
    type: Literal['Boolean'] = 'Boolean'
    value: StrictBool

    def render_value(self) -> str:
        return 'true' if self.value else 'false'


class EnumParameter(_ParameterBase):
    type: Literal['Enum'] = 'Enum'
    value: StrictInt = Field(..., description="Numeric value of the server-side enum member")

    def render_value(self) -> str:
        return str(self.value)


class NullParameter(_ParameterBase):
    type: Literal['Null'] = 'Null'

    def render_value(self) -> str:
        return ''


Parameter = Annotated[
    Union[StringParameter, Int32Parameter, GuidParameter, BooleanParameter, EnumParameter, NullParameter],
    Field(discriminator='type'),
]


def string_param(value: str) -> StringParameter:
    return StringParameter(value=value)


def int32_param(value: int) -> Int32Parameter:
    return Int32Parameter(value=value)


def guid_param(value: Union[str, uuid.UUID]) -> GuidParameter:
    return GuidParameter(value=value)


def bool_param(value: bool) -> BooleanParameter:
    return BooleanParameter(value=value)


def enum_param(value: int) -> EnumParameter:
    return EnumParameter(value=value)


def null_param() -> NullParameter:
    return NullParameter()


def encode_parameter(parameter: Parameter) -> str:
    """
    Render one parameter as its wire fragment.

    Args:
        parameter: Any of the typed parameter models

    Returns:
        ``<Parameter Type="T">value</Parameter>``, or the self-closing form
        for Null parameters
    """
    if isinstance(parameter, NullParameter):
        return '<Parameter Type="Null" />'
    if not isinstance(parameter, _ParameterBase):
        raise TypeError(f"Cannot encode {type(parameter).__name__} as a ProcessQuery parameter")
    return f'<Parameter Type="{parameter.type}">{parameter.render_value()}</Parameter>'


def encode_parameter_list(parameters: Iterable[Parameter]) -> str:
    """Render a ``<Parameters>`` block, or an empty string when there are none."""
    fragments = [encode_parameter(p) for p in parameters]
    if not fragments:
        return ''
    return '<Parameters>' + ''.join(fragments) + '</Parameters>'
