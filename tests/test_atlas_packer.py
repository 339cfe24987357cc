"""
Tests for AtlasPacker: trimming, deduplication, shelf packing and growth.
"""
import random

import pytest

from fraexport.atlas import AtlasPacker, placeholder_asset
from fraexport.constants import PLACEHOLDER_GUID
from fraexport.imaging import PixelBuffer, Point, Rect
from fraexport.project import AssetEntry, AssetMetadata
from fraexport.utils import get_warnings
from conftest import RED, GREEN, BLUE, canvas_with_block


def make_asset(guid, pixels, filename=None):
    return AssetEntry(metadata=AssetMetadata(guid=guid, id=guid), filename=filename or f"{guid}.png",
                      pixels=pixels)


def is_power_of_two(value):
    return value > 0 and value & (value - 1) == 0


# ══════════════════════════════════════════════════════════════════════════
# Trimming
# ══════════════════════════════════════════════════════════════════════════

class TestTrimming:

    def test_trim_to_visible_bounds(self):
        packer = AtlasPacker()
        frame = packer.place_image(make_asset("a", canvas_with_block(50, 40, 7, 9, 10, 5)), "default")
        assert frame.trim_offset == Point(7, 9)
        assert (frame.frame_rect.width, frame.frame_rect.height) == (10, 5)
        assert frame.trimmed_pixels == PixelBuffer.blank(10, 5, RED)

    def test_fully_transparent_canvas_gives_one_pixel(self):
        packer = AtlasPacker()
        frame = packer.place_image(make_asset("empty", PixelBuffer.blank(100, 100)), "default")
        assert frame.trim_offset == Point(0, 0)
        assert (frame.frame_rect.width, frame.frame_rect.height) == (1, 1)

    def test_oversized_image_is_clamped_with_warning(self):
        packer = AtlasPacker(default_width=16, default_height=16, max_width=32, max_height=32)
        frame = packer.place_image(make_asset("wide", PixelBuffer.blank(40, 8, RED), "wide.png"), "default")
        assert frame.frame_rect.width == 32
        assert frame.frame_rect.height == 8
        assert any("wide.png" in w and "width" in w for w in get_warnings())


# ══════════════════════════════════════════════════════════════════════════
# Caching and deduplication
# ══════════════════════════════════════════════════════════════════════════

class TestDeduplication:

    def test_identical_pixels_share_frame_but_not_trim_offset(self):
        packer = AtlasPacker()
        first = packer.place_image(make_asset("a", canvas_with_block(20, 20, 2, 3, 4, 4)), "default")
        second = packer.place_image(make_asset("b", canvas_with_block(30, 30, 10, 5, 4, 4)), "default")

        assert second.frame_rect == first.frame_rect
        assert second.sheet_index == first.sheet_index
        assert second.frame_index == first.frame_index
        assert first.trim_offset == Point(2, 3)
        assert second.trim_offset == Point(10, 5)
        assert len(packer.sheets[0].rects) == 1

    def test_same_size_different_pixels_are_packed_separately(self):
        packer = AtlasPacker()
        first = packer.place_image(make_asset("a", PixelBuffer.blank(4, 4, RED)), "default")
        second = packer.place_image(make_asset("b", PixelBuffer.blank(4, 4, GREEN)), "default")
        assert first.frame_index != second.frame_index
        assert not first.frame_rect.intersects(second.frame_rect)

    def test_same_asset_is_cached_per_group(self):
        packer = AtlasPacker()
        asset = make_asset("a", PixelBuffer.blank(4, 4, RED))
        assert packer.place_image(asset, "default") is packer.place_image(asset, "default")
        assert packer.get_cached_frame("default", "a") is not None
        assert packer.get_cached_frame("other", "a") is None

    def test_groups_never_share_sheets(self):
        packer = AtlasPacker()
        asset = make_asset("a", PixelBuffer.blank(4, 4, RED))
        default_frame = packer.place_image(asset, "default")
        hero_frame = packer.place_image(asset, "hero")

        assert [s.group_id for s in packer.sheets] == ["default", "hero"]
        assert default_frame.sheet_index == 0
        assert hero_frame.sheet_index == 0
        assert hero_frame.frame_index == 0


# ══════════════════════════════════════════════════════════════════════════
# Shelf packing and growth
# ══════════════════════════════════════════════════════════════════════════

class TestPacking:

    def test_frames_advance_with_padding(self):
        packer = AtlasPacker(padding=1)
        first = packer.place_image(make_asset("a", PixelBuffer.blank(10, 10, RED)), "default")
        second = packer.place_image(make_asset("b", PixelBuffer.blank(6, 12, GREEN)), "default")
        assert first.frame_rect == Rect(0, 0, 10, 10)
        assert second.frame_rect == Rect(11, 0, 6, 12)
        assert packer.sheets[0].frame_table() == [0, 0, 10, 10, 11, 0, 6, 12]

    def test_sheet_grows_by_doubling(self):
        packer = AtlasPacker(default_width=128, default_height=128)
        packer.place_image(make_asset("a", PixelBuffer.blank(200, 20, RED)), "default")
        sheet = packer.sheets[0]
        assert (sheet.width, sheet.height) == (256, 128)

    def test_axes_grow_independently(self):
        packer = AtlasPacker(default_width=16, default_height=16, max_width=256, max_height=256)
        packer.place_image(make_asset("tall", PixelBuffer.blank(8, 100, RED)), "default")
        sheet = packer.sheets[0]
        assert (sheet.width, sheet.height) == (16, 128)

    def test_image_at_maximum_fits(self):
        packer = AtlasPacker(default_width=16, default_height=16, max_width=64, max_height=64)
        frame = packer.place_image(make_asset("full", PixelBuffer.blank(64, 64, RED)), "default")
        assert frame.frame_rect == Rect(0, 0, 64, 64)
        assert (packer.sheets[0].width, packer.sheets[0].height) == (64, 64)

    def test_row_wraps_at_maximum_width(self):
        packer = AtlasPacker(default_width=16, default_height=16, max_width=32, max_height=64, padding=1)
        packer.place_image(make_asset("a", PixelBuffer.blank(20, 10, RED)), "default")
        wrapped = packer.place_image(make_asset("b", PixelBuffer.blank(20, 5, GREEN)), "default")
        assert wrapped.frame_rect == Rect(0, 11, 20, 5)

    def test_full_sheet_opens_a_new_one(self):
        packer = AtlasPacker(default_width=16, default_height=16, max_width=32, max_height=32, padding=0)
        first = packer.place_image(make_asset("a", PixelBuffer.blank(32, 32, RED)), "default")
        second = packer.place_image(make_asset("b", PixelBuffer.blank(8, 8, GREEN)), "default")

        assert len(packer.sheets) == 2
        assert packer.sheets[0].frozen
        assert not packer.sheets[1].frozen
        assert (first.sheet_index, first.frame_index) == (0, 0)
        assert (second.sheet_index, second.frame_index) == (1, 0)
        assert second.frame_rect == Rect(0, 0, 8, 8)
        assert packer.sheets[1].group_sheet_index == 1

    def test_random_sequences_never_overlap_and_stay_power_of_two(self):
        rng = random.Random(1234)
        packer = AtlasPacker(default_width=16, default_height=16, max_width=128, max_height=128)
        for i in range(150):
            width, height = rng.randint(1, 60), rng.randint(1, 60)
            color = (rng.randint(0, 255), rng.randint(0, 255), rng.randint(0, 255), 255)
            group = rng.choice(["default", "hero"])
            packer.place_image(make_asset(f"img{i}", PixelBuffer.blank(width, height, color)), group)

        assert len(packer.sheets) > 2
        for sheet in packer.sheets:
            assert is_power_of_two(sheet.width) and sheet.width <= 128
            assert is_power_of_two(sheet.height) and sheet.height <= 128
            bounds = Rect(0, 0, sheet.width, sheet.height)
            for index, rect in enumerate(sheet.rects):
                assert bounds.contains_rect(rect)
                for other in sheet.rects[index + 1:]:
                    assert not rect.intersects(other)

    def test_placed_pixels_land_on_sheet(self):
        packer = AtlasPacker()
        packer.place_image(make_asset("a", PixelBuffer.blank(3, 3, RED)), "default")
        frame = packer.place_image(make_asset("b", PixelBuffer.blank(3, 3, BLUE)), "default")
        sheet = packer.sheets[0].buffer
        assert sheet.copy_region(frame.frame_rect) == PixelBuffer.blank(3, 3, BLUE)


class TestLifecycle:

    def test_release_drops_everything(self):
        packer = AtlasPacker()
        packer.place_image(make_asset("a", PixelBuffer.blank(4, 4, RED)), "default")
        packer.release()
        assert packer.sheets == []
        assert packer.get_cached_frame("default", "a") is None

    def test_invalid_sizes_rejected(self):
        with pytest.raises(ValueError):
            AtlasPacker(default_width=100)
        with pytest.raises(ValueError):
            AtlasPacker(default_width=256, max_width=128)

    def test_placeholder_asset(self):
        asset = placeholder_asset()
        assert asset.guid == PLACEHOLDER_GUID
        assert (asset.pixels.width, asset.pixels.height) == (100, 100)
        assert tuple(asset.pixels.pixels[0, 0]) == (0xFF, 0x14, 0x93, 0xFF)
