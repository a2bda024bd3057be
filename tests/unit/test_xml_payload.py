"""Unit tests for the setPropertiesSimple XML body."""

import pytest

from openkm_mcp.utils.xml_payload import build_simple_properties_xml
from openkm_mcp.utils.xml_payload import invalid_property_keys
from openkm_mcp.utils.xml_payload import is_xml_name
from openkm_mcp.utils.xml_payload import render_value


class TestIsXmlName:
    """Tests for is_xml_name."""

    @pytest.mark.parametrize("key", ["okp:technology.type", "_private", "a-b", "title", "x1"])
    def test_valid_names(self, key):
        assert is_xml_name(key)

    @pytest.mark.parametrize("key", ["", "1abc", "has space", "a<b", "-lead", ".dot", "a/b"])
    def test_invalid_names(self, key):
        assert not is_xml_name(key)

    def test_invalid_property_keys(self):
        assert invalid_property_keys({"ok": 1, "not ok": 2, "9x": 3}) == ["not ok", "9x"]


class TestRenderValue:
    """Tests for render_value."""

    @pytest.mark.parametrize(
        "value, expected",
        [(None, ""), (True, "true"), (False, "false"), (3, "3"), (2.5, "2.5"), ("text", "text")],
    )
    def test_render(self, value, expected):
        assert render_value(value) == expected


class TestBuildSimplePropertiesXml:
    """Tests for build_simple_properties_xml."""

    def test_single_property(self):
        body = build_simple_properties_xml({"okp:technology.type": "manual"})

        assert body == (
            "<simplePropertiesGroup>\n"
            "<okp:technology.type>manual</okp:technology.type>\n"
            "</simplePropertiesGroup>"
        )

    def test_keeps_key_order(self):
        body = build_simple_properties_xml({"okp:b": "2", "okp:a": "1"})

        assert body.index("<okp:b>") < body.index("<okp:a>")

    def test_values_are_escaped(self):
        body = build_simple_properties_xml({"okp:note": "R&D <draft>"})

        assert "<okp:note>R&amp;D &lt;draft&gt;</okp:note>" in body

    def test_invalid_key_raises(self):
        with pytest.raises(ValueError, match="bad key"):
            build_simple_properties_xml({"bad key": "v"})
