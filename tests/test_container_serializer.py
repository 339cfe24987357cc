"""
Tests for the .fra container layout: header formats, binary offsets and
the length prefix.
"""
import base64
import io
import json
import struct

import pytest

from fraexport.atlas import AtlasPacker
from fraexport.errors import SerializationError
from fraexport.imaging import PixelBuffer, decode_image
from fraexport.project import AssetEntry, AssetMetadata
from fraexport.serialization import (
    BinaryRegion, BlobRecord, ContainerSerializer, ResourceContainer, JSON_FORMATS,
    encode_header, decode_header, read_container,
)
from fraexport.utils import read_length_prefixed, write_length_prefixed
from conftest import RED, GREEN


def blob(asset_id, data, **extra):
    record = {'version': 0, 'id': asset_id, 'guid': f"{asset_id}-guid", 'tags': [], 'metadata': {}}
    record.update(extra)
    return BlobRecord(record=record, data=data)


def packed_sheets():
    packer = AtlasPacker()
    for guid, color in (("a", RED), ("b", GREEN)):
        entry = AssetEntry(metadata=AssetMetadata(guid=guid, id=guid), filename=f"{guid}.png",
                           pixels=PixelBuffer.blank(6, 4, color))
        packer.place_image(entry, "default")
    packer.place_image(AssetEntry(metadata=AssetMetadata(guid="c", id="c"),
                                  pixels=PixelBuffer.blank(3, 3, RED)), "stage")
    return packer.sheets


@pytest.fixture
def container():
    return ResourceContainer(
        spritesheets=packed_sheets(),
        images=[blob("logo", b"\x89PNG fake logo")],
        audio=[blob("jump", b"ID3" + b"\x00" * 29, format="mp3"), blob("land", b"OggS" * 5, format="ogg")],
        binary=[blob("data", bytes(range(256)))],
        scripts=[{'id': 'manifest', 'value': '{}', 'language': None}],
        entities=[{'id': 'hero', 'animations': []}],
        nine_slices=[{'id': 'panel', 'sheetIndex': 0, 'frameIndex': 0}],
    )


# ══════════════════════════════════════════════════════════════════════════
# Header encoding
# ══════════════════════════════════════════════════════════════════════════

class TestHeaderFormats:

    HEADER = {'version': '0.0.17', 'scripts': [{'value': 'café ✓', 'n': 1.5}], 'entities': []}

    @pytest.mark.parametrize("fmt", JSON_FORMATS)
    def test_every_format_decodes_to_the_same_header(self, fmt):
        assert decode_header(encode_header(self.HEADER, fmt)) == self.HEADER

    def test_raw_is_compact_json(self):
        data = encode_header({'b': 1, 'a': [1, 2]}, 'raw')
        assert data == b'{"a":[1,2],"b":1}'

    def test_base64_wraps_raw(self):
        raw = encode_header(self.HEADER, 'raw')
        assert encode_header(self.HEADER, 'base64') == base64.b64encode(raw)

    def test_prettify_is_indented(self):
        text = encode_header({'a': 1}, 'prettify').decode('utf-8')
        assert text == '{\n  "a": 1\n}'

    def test_non_ascii_is_utf8(self):
        assert 'café'.encode('utf-8') in encode_header({'v': 'café'}, 'raw')

    def test_unknown_format(self):
        with pytest.raises(ValueError):
            encode_header({}, 'yaml')

    def test_garbage_header(self):
        with pytest.raises(ValueError):
            decode_header(b'!!not base64!!')


# ══════════════════════════════════════════════════════════════════════════
# Binary region
# ══════════════════════════════════════════════════════════════════════════

class TestBinaryRegion:

    def test_append_returns_offsets(self):
        region = BinaryRegion()
        assert region.append(b"abc") == (0, 3)
        assert region.append(b"") == (3, 0)
        assert region.append(b"defg") == (3, 4)
        assert region.getvalue() == b"abcdefg"

    def test_verify_detects_gap(self):
        region = BinaryRegion()
        region.append(b"abcdef")
        with pytest.raises(SerializationError):
            region.verify([{'bytesOffset': 0, 'bytesLength': 2}, {'bytesOffset': 3, 'bytesLength': 3}])

    def test_verify_detects_overlap(self):
        region = BinaryRegion()
        region.append(b"abcdef")
        with pytest.raises(SerializationError):
            region.verify([{'bytesOffset': 0, 'bytesLength': 4}, {'bytesOffset': 2, 'bytesLength': 4}])

    def test_verify_detects_short_total(self):
        region = BinaryRegion()
        region.append(b"abcdef")
        with pytest.raises(SerializationError):
            region.verify([{'bytesOffset': 0, 'bytesLength': 5}])


class TestLengthPrefix:

    def test_big_endian_u32(self):
        out = io.BytesIO()
        write_length_prefixed(out, b"hello")
        assert out.getvalue() == b"\x00\x00\x00\x05hello"

    def test_truncated(self):
        with pytest.raises(ValueError):
            read_length_prefixed(b"\x00\x00\x00\x09abc")


# ══════════════════════════════════════════════════════════════════════════
# Container
# ══════════════════════════════════════════════════════════════════════════

class TestContainer:

    @pytest.mark.parametrize("fmt", JSON_FORMATS)
    def test_header_round_trips(self, container, fmt):
        data = ContainerSerializer(json_format=fmt).serialize(container)
        header, _ = read_container(data)
        assert set(header) == {'version', 'spritesheets', 'images', 'audio', 'binary',
                               'scripts', 'entities', 'nineSlices'}
        assert header['version'] == '0.0.17'
        assert header['scripts'] == container.scripts
        assert header['entities'] == container.entities
        assert header['nineSlices'] == container.nine_slices

    def test_prefix_matches_header_length(self, container):
        data = ContainerSerializer(json_format='raw').serialize(container)
        (length,) = struct.unpack('>I', data[:4])
        json.loads(data[4:4 + length].decode('utf-8'))

    def test_offsets_tile_the_binary_region(self, container):
        header, binary = read_container(ContainerSerializer().serialize(container))
        records = header['spritesheets'] + header['images'] + header['audio'] + header['binary']
        expected = 0
        for record in records:
            assert record['bytesOffset'] == expected
            expected += record['bytesLength']
        assert expected == len(binary)

    def test_payloads_are_written_verbatim(self, container):
        header, binary = read_container(ContainerSerializer().serialize(container))
        for record, source in zip(header['audio'] + header['binary'], container.audio + container.binary):
            start = record['bytesOffset']
            assert binary[start:start + record['bytesLength']] == source.data
        assert header['audio'][0]['format'] == 'mp3'
        assert header['audio'][1]['id'] == 'land'

    def test_spritesheet_records(self, container):
        header, binary = read_container(ContainerSerializer().serialize(container))
        default, stage = header['spritesheets']
        assert default['group'] == 'default'
        assert default['version'] == 0
        assert default['frames'] == [0, 0, 6, 4, 7, 0, 6, 4]
        assert stage['group'] == 'stage'
        assert stage['frames'] == [0, 0, 3, 3]

        png = binary[default['bytesOffset']:default['bytesOffset'] + default['bytesLength']]
        sheet = decode_image(png)
        assert (sheet.width, sheet.height) == (128, 128)
        assert tuple(sheet.pixels[0, 7]) == GREEN

    def test_recompressed_sheets_decode_identically(self, container):
        plain_header, plain = read_container(ContainerSerializer(recompress=False).serialize(container))
        packed_header, packed = read_container(ContainerSerializer(recompress=True).serialize(container))
        for a, b in zip(plain_header['spritesheets'], packed_header['spritesheets']):
            first = decode_image(plain[a['bytesOffset']:a['bytesOffset'] + a['bytesLength']])
            second = decode_image(packed[b['bytesOffset']:b['bytesOffset'] + b['bytesLength']])
            assert first == second

    def test_output_is_deterministic(self, container):
        serializer = ContainerSerializer(json_format='raw')
        assert serializer.serialize(container) == serializer.serialize(container)

    def test_empty_container(self):
        header, binary = read_container(ContainerSerializer(json_format='raw').serialize(ResourceContainer()))
        assert binary == b''
        assert header['spritesheets'] == [] and header['nineSlices'] == []

    def test_unknown_format_rejected(self):
        with pytest.raises(ValueError):
            ContainerSerializer(json_format='xml')
