"""XML body for OpenKM's ``setPropertiesSimple`` endpoint.

The wire shape is a ``<simplePropertiesGroup>`` root holding one element per
property, named after the property key::

    <simplePropertiesGroup>
    <okp:technology.type>manual</okp:technology.type>
    </simplePropertiesGroup>

Keys become tag names, so they must be valid XML names; values are escaped.
"""

from __future__ import annotations

import re
from collections.abc import Mapping
from typing import Any
from xml.sax.saxutils import escape

ROOT_ELEMENT = "simplePropertiesGroup"

# XML 1.0 Name production, limited to name characters below U+0300.
_XML_NAME_RE = re.compile(r"^[A-Za-z_:À-ÖØ-öø-˿][A-Za-z0-9_:.\-·À-ÖØ-öø-˿]*$")


def is_xml_name(key: str) -> bool:
    """Check if ``key`` can be used verbatim as an element name."""
    return bool(_XML_NAME_RE.match(key))


def render_value(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def invalid_property_keys(properties: Mapping[str, Any]) -> list[str]:
    """Return the keys that cannot be emitted as element names."""
    return [key for key in properties if not is_xml_name(key)]


def build_simple_properties_xml(properties: Mapping[str, Any]) -> str:
    """Build the ``setPropertiesSimple`` body.

    Raises:
        ValueError: A key is not a valid XML element name.
    """
    invalid = invalid_property_keys(properties)
    if invalid:
        raise ValueError(f"Property keys are not valid XML names: {', '.join(invalid)}")
    elements = "\n".join(f"<{key}>{escape(render_value(value))}</{key}>" for key, value in properties.items())
    return f"<{ROOT_ELEMENT}>\n{elements}\n</{ROOT_ELEMENT}>"
