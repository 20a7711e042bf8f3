"""Tests for the typed ProcessQuery parameters and their wire encoding."""

import random
import uuid
import xml.etree.ElementTree as ET

import pytest
from pydantic import ValidationError

from clientquery.query.parameters import (
    INT32_MAX, INT32_MIN, StringParameter, bool_param, encode_parameter, encode_parameter_list,
    enum_param, escape_xml, guid_param, int32_param, null_param, string_param,
)

ESCAPE_ALPHABET = "&<>\"'abcXYZ 1"


def random_strings(seed, count=300, max_length=20):
    rng = random.Random(seed)
    return [''.join(rng.choice(ESCAPE_ALPHABET) for _ in range(rng.randint(0, max_length)))
            for _ in range(count)]


class TestEscapeXml:

    def test_escapes_predefined_entities(self):
        assert escape_xml('a & b') == 'a &amp; b'
        assert escape_xml('<Value 1') == '&lt;Value 1'
        assert escape_xml('PnPTermSets>') == 'PnPTermSets&gt;'
        assert escape_xml('"quoted"') == '&quot;quoted&quot;'
        assert escape_xml("it's") == 'it&apos;s'

    def test_ampersand_escaped_once(self):
        assert escape_xml('&lt;') == '&amp;lt;'

    def test_other_text_unchanged(self):
        text = 'Ünïcødé text with spaces\tand tabs'
        assert escape_xml(text) == text


class TestEncodeParameter:

    def test_string(self):
        assert encode_parameter(string_param('PnP-Organizations')) == \
            '<Parameter Type="String">PnP-Organizations</Parameter>'

    def test_string_is_escaped(self):
        assert encode_parameter(string_param('<Value 1')) == '<Parameter Type="String">&lt;Value 1</Parameter>'

    @pytest.mark.parametrize("text", [
        'plain',
        '<Value 1',
        'PnPTermSets>',
        'Tom & Jerry',
        '"double" and \'single\'',
        '<a href="x">&amp;</a>',
        '',
    ])
    def test_string_survives_xml_parsing(self, text):
        fragment = encode_parameter(string_param(text))
        assert (ET.fromstring(fragment).text or '') == text

    @pytest.mark.parametrize("text", random_strings(20181001))
    def test_random_string_survives_xml_parsing(self, text):
        fragment = encode_parameter(string_param(text))
        assert (ET.fromstring(fragment).text or '') == text

    def test_int32(self):
        assert encode_parameter(int32_param(1033)) == '<Parameter Type="Int32">1033</Parameter>'
        assert encode_parameter(int32_param(-5)) == '<Parameter Type="Int32">-5</Parameter>'

    def test_int32_bounds(self):
        assert int32_param(INT32_MAX).value == INT32_MAX
        assert int32_param(INT32_MIN).value == INT32_MIN
        with pytest.raises(ValidationError):
            int32_param(INT32_MAX + 1)
        with pytest.raises(ValidationError):
            int32_param(INT32_MIN - 1)

    def test_int32_rejects_non_integers(self):
        with pytest.raises(ValidationError):
            int32_param('1033')
        with pytest.raises(ValidationError):
            int32_param(True)

    def test_guid_rendered_braced_lowercase(self):
        fragment = encode_parameter(guid_param('0E8F395E-FF58-4D45-9FF7-E331AB728BEB'))
        assert fragment == '<Parameter Type="Guid">{0e8f395e-ff58-4d45-9ff7-e331ab728beb}</Parameter>'

    def test_guid_accepts_braces_and_uuid(self):
        expected = '{0e8f395e-ff58-4d45-9ff7-e331ab728beb}'
        assert guid_param('{0e8f395e-ff58-4d45-9ff7-e331ab728beb}').render_value() == expected
        assert guid_param(uuid.UUID('0e8f395e-ff58-4d45-9ff7-e331ab728beb')).render_value() == expected

    @pytest.mark.parametrize("value", [
        'invalid',
        '0e8f395e-ff58-4d45-9ff7',
        '0e8f395eff584d459ff7e331ab728beb',
        ' 0e8f395e-ff58-4d45-9ff7-e331ab728beb ',
        '0e8f395e-ff58-4d45-9ff7-e331ab728beb\n',
        42,
    ])
    def test_guid_rejects_invalid_values(self, value):
        with pytest.raises(ValidationError):
            guid_param(value)

    def test_boolean(self):
        assert encode_parameter(bool_param(True)) == '<Parameter Type="Boolean">true</Parameter>'
        assert encode_parameter(bool_param(False)) == '<Parameter Type="Boolean">false</Parameter>'
        with pytest.raises(ValidationError):
            bool_param(1)

    def test_enum(self):
        assert encode_parameter(enum_param(2)) == '<Parameter Type="Enum">2</Parameter>'

    def test_null(self):
        assert encode_parameter(null_param()) == '<Parameter Type="Null" />'

    def test_string_rejects_non_strings(self):
        with pytest.raises(ValidationError):
            string_param(5)
        with pytest.raises(ValidationError):
            string_param(None)

    def test_parameters_are_immutable(self):
        param = string_param('x')
        with pytest.raises(ValidationError):
            param.value = 'y'

    def test_rejects_foreign_objects(self):
        with pytest.raises(TypeError):
            encode_parameter('plain string')


class TestEncodeParameterList:

    def test_empty_list_renders_nothing(self):
        assert encode_parameter_list([]) == ''

    def test_preserves_order(self):
        params = [string_param('Prop1'), string_param('Value 1')]
        assert encode_parameter_list(params) == (
            '<Parameters><Parameter Type="String">Prop1</Parameter>'
            '<Parameter Type="String">Value 1</Parameter></Parameters>'
        )

    def test_discriminated_models_can_be_validated_from_dicts(self):
        param = StringParameter.model_validate({'type': 'String', 'value': 'abc'})
        assert param == string_param('abc')
