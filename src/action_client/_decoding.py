"""Content-type driven decoding of response bodies."""

import json
import xml.etree.ElementTree as ET
from typing import Any, Optional

from .models.errors import ResponseDecodeError

DEFAULT_CHARSET = "utf-8"

JSON_MEDIA_TYPES = frozenset({"application/json", "text/json"})
XML_MEDIA_TYPES = frozenset({"application/xml", "text/xml"})


def parse_content_type(content_type: Optional[str]) -> tuple[str, dict[str, str]]:
    """Split a ``Content-Type`` value into its media type and parameters.

    Examples:
        >>> parse_content_type("application/json;charset=UTF-8")
        ('application/json', {'charset': 'UTF-8'})
    """
    if not content_type:
        return "", {}
    media_type, *raw_params = content_type.split(";")
    params: dict[str, str] = {}
    for raw in raw_params:
        name, sep, value = raw.partition("=")
        if sep:
            params[name.strip().lower()] = value.strip().strip('"')
    return media_type.strip().lower(), params


def is_json(media_type: str) -> bool:
    return media_type in JSON_MEDIA_TYPES or media_type.endswith("+json")


def is_xml(media_type: str) -> bool:
    return media_type in XML_MEDIA_TYPES or media_type.endswith("+xml")


def decode(content_type: Optional[str], body: bytes) -> Any:
    """Decode ``body`` according to ``content_type``.

    JSON media types decode to Python values, XML media types to an
    ``xml.etree.ElementTree.ElementTree``. Any other content type, including a
    missing one, returns the bytes unchanged. A zero-length JSON or XML body
    decodes to ``None``; a whitespace-only body is malformed and raises.

    Raises:
        ResponseDecodeError: The body does not parse as its content type.
    """
    media_type, params = parse_content_type(content_type)

    if not (is_json(media_type) or is_xml(media_type)):
        return body
    if not body:
        return None

    if is_json(media_type):
        charset = params.get("charset", DEFAULT_CHARSET)
        try:
            return json.loads(body.decode(charset))
        except (LookupError, UnicodeDecodeError, json.JSONDecodeError) as e:
            raise ResponseDecodeError(str(content_type), body, str(e)) from e

    try:
        return ET.ElementTree(ET.fromstring(body))
    except ET.ParseError as e:
        raise ResponseDecodeError(str(content_type), body, str(e)) from e
