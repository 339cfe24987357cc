"""
Shared fixtures for fraexport tests.

Provides pixel buffer builders, PNG payloads and minimal project/entity
dictionaries in the editor's metadata schema.
"""
import io

import pytest
from PIL import Image

from fraexport.constants import PLUGIN_METADATA_KEY
from fraexport.imaging import PixelBuffer
from fraexport.utils import init_logging, reset_counts


RED = (255, 0, 0, 255)
GREEN = (0, 255, 0, 255)
BLUE = (0, 0, 255, 255)


# ── Logging ─────────────────────────────────────────────────────────────

@pytest.fixture(scope="session", autouse=True)
def _quiet_logging(tmp_path_factory):
    init_logging(tmp_path_factory.mktemp("logs") / "export.log", quiet=True)


@pytest.fixture(autouse=True)
def _fresh_log_counts():
    reset_counts()
    yield
    reset_counts()


# ── Pixel helpers ───────────────────────────────────────────────────────

def canvas_with_block(canvas_w, canvas_h, block_x, block_y, block_w, block_h, color=RED):
    """Transparent canvas with one opaque rectangle."""
    canvas = PixelBuffer.blank(canvas_w, canvas_h)
    canvas.blit(PixelBuffer.blank(block_w, block_h, color), block_x, block_y)
    return canvas


def png_bytes(buffer):
    out = io.BytesIO()
    Image.fromarray(buffer.pixels).save(out, format="PNG")
    return out.getvalue()


def plugin_metadata(**values):
    """pluginMetadata dict holding the engine namespace."""
    return {PLUGIN_METADATA_KEY: dict(values)}


# ── Project dictionaries ────────────────────────────────────────────────

def image_symbol(symbol_id, image_guid, **fields):
    data = {"$id": symbol_id, "type": "IMAGE", "imageAsset": image_guid,
            "x": 0, "y": 0, "alpha": 1, "pivotX": 0, "pivotY": 0,
            "rotation": 0, "scaleX": 1, "scaleY": 1, "pluginMetadata": {}}
    data.update(fields)
    return data


def box_symbol(symbol_id, **fields):
    data = {"$id": symbol_id, "type": "COLLISION_BOX", "color": "0xff0000",
            "x": 0, "y": 0, "alpha": 1, "pivotX": 0, "pivotY": 0,
            "rotation": 0, "scaleX": 1, "scaleY": 1, "pluginMetadata": {}}
    data.update(fields)
    return data


def keyframe(keyframe_id, keyframe_type, symbol=None, length=1, **fields):
    data = {"$id": keyframe_id, "type": keyframe_type, "length": length,
            "symbol": symbol, "pluginMetadata": {}}
    data.update(fields)
    return data


def layer(layer_id, layer_type, keyframe_ids, name=None, **fields):
    data = {"$id": layer_id, "name": name or layer_id, "type": layer_type,
            "keyframes": list(keyframe_ids), "pluginMetadata": {}}
    data.update(fields)
    return data


def entity_dict(guid="entity-guid", entity_id="hero", animations=None, layers=None,
                keyframes=None, symbols=None, **fields):
    data = {"guid": guid, "id": entity_id, "export": True, "version": 3, "tags": [],
            "pluginMetadata": {}, "animations": animations or [], "layers": layers or [],
            "keyframes": keyframes or [], "symbols": symbols or []}
    data.update(fields)
    return data


@pytest.fixture
def red_block_png():
    """PNG of a 4x4 red block at (2, 3) on a 16x16 transparent canvas."""
    return png_bytes(canvas_with_block(16, 16, 2, 3, 4, 4))
