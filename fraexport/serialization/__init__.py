"""
Serialization Package

Header encoding, binary region bookkeeping and the .fra container layout.
"""

from .binary_region import BinaryRegion
from .header_serializer import (
    JSON_FORMAT_RAW, JSON_FORMAT_BASE64, JSON_FORMAT_PRETTIFY, JSON_FORMATS,
    encode_header, decode_header,
)
from .container_serializer import BlobRecord, ResourceContainer, ContainerSerializer, read_container
