"""
Header Serializer

Encodes the container's JSON header in one of three formats:

- raw:      compact UTF-8 JSON
- base64:   base64 of the compact JSON text
- prettify: UTF-8 JSON indented by two spaces

Keys are always sorted so identical input gives identical bytes.
"""

import base64
import binascii
import json
from typing import Any, Dict

JSON_FORMAT_RAW = 'raw'
JSON_FORMAT_BASE64 = 'base64'
JSON_FORMAT_PRETTIFY = 'prettify'
JSON_FORMATS = (JSON_FORMAT_RAW, JSON_FORMAT_BASE64, JSON_FORMAT_PRETTIFY)


def encode_header(header: Dict[str, Any], json_format: str = JSON_FORMAT_BASE64) -> bytes:
    """
    Serialize the header dictionary.

    Args:
        header: Header dictionary (JSON-compatible values only)
        json_format: One of JSON_FORMATS

    Returns:
        Header bytes
    """
    if json_format == JSON_FORMAT_PRETTIFY:
        text = json.dumps(header, sort_keys=True, ensure_ascii=False, indent=2, separators=(',', ': '))
        return text.encode('utf-8')

    text = json.dumps(header, sort_keys=True, ensure_ascii=False, separators=(',', ':'))
    if json_format == JSON_FORMAT_RAW:
        return text.encode('utf-8')
    if json_format == JSON_FORMAT_BASE64:
        return base64.b64encode(text.encode('utf-8'))

    raise ValueError(f"Unknown JSON format '{json_format}', expected one of {', '.join(JSON_FORMATS)}")


def decode_header(data: bytes) -> Dict[str, Any]:
    """
    Parse header bytes written in any of the three formats.

    Plain JSON always starts with '{'; anything else is treated as base64.

    Raises:
        ValueError: If the bytes are neither JSON nor base64-wrapped JSON
    """
    stripped = data.lstrip()
    if not stripped.startswith(b'{'):
        try:
            stripped = base64.b64decode(stripped, validate=True)
        except binascii.Error as e:
            raise ValueError(f"Header is neither JSON nor base64: {e}") from e
    return json.loads(stripped.decode('utf-8'))
