"""
Atlas Packer

Trims, deduplicates and shelf-packs image assets into spritesheets.

Strategy (per spritesheet group):
1. Trim the image to its visible bounds (1x1 when fully transparent)
2. Reuse a cached frame when the same asset was placed before, or when an
   already placed frame has byte-identical trimmed pixels
3. Otherwise write it at the sheet cursor, left to right in rows, growing
   the sheet by doubling and opening a new sheet once the maximum size is
   reached

Groups never share sheets. Placement is order dependent, so a packer must
only ever be driven by one sequential loop.
"""

import math
from typing import Dict, List, Optional, Tuple

from fraexport.constants import (
    DEFAULT_SHEET_WIDTH, DEFAULT_SHEET_HEIGHT, MAX_SHEET_WIDTH, MAX_SHEET_HEIGHT,
    DEFAULT_SHEET_PADDING, PLACEHOLDER_GUID, PLACEHOLDER_FILENAME, PLACEHOLDER_SIZE,
    PLACEHOLDER_COLOR,
)
from fraexport.imaging import PixelBuffer, Point, Rect
from fraexport.project import AssetEntry, AssetMetadata
from fraexport.utils import logDebug, logWarning
from .data_types import SheetWriteState, SpriteFrame


def placeholder_asset() -> AssetEntry:
    """Opaque deep pink image standing in for a missing image asset."""
    metadata = AssetMetadata(guid=PLACEHOLDER_GUID, id='', export=True, version=0)
    pixels = PixelBuffer.blank(PLACEHOLDER_SIZE, PLACEHOLDER_SIZE, PLACEHOLDER_COLOR)
    return AssetEntry(metadata=metadata, filename=PLACEHOLDER_FILENAME, pixels=pixels)


class AtlasPacker:
    """
    Owns every spritesheet of one export.

    Usage:
        packer = AtlasPacker()
        frame = packer.place_image(asset_entry, "default")
        for sheet in packer.sheets:
            encode(sheet.buffer, sheet.frame_table())
        packer.release()
    """

    def __init__(self, default_width: int = DEFAULT_SHEET_WIDTH,
                 default_height: int = DEFAULT_SHEET_HEIGHT,
                 max_width: int = MAX_SHEET_WIDTH,
                 max_height: int = MAX_SHEET_HEIGHT,
                 padding: int = DEFAULT_SHEET_PADDING):
        """
        Args:
            default_width: Width of a freshly opened sheet (power of two)
            default_height: Height of a freshly opened sheet (power of two)
            max_width: Sheets never grow wider than this (power of two)
            max_height: Sheets never grow taller than this (power of two)
            padding: Gap in pixels between neighbouring frames and rows
        """
        for name, value in (('default_width', default_width), ('default_height', default_height),
                            ('max_width', max_width), ('max_height', max_height)):
            if value <= 0 or value & (value - 1):
                raise ValueError(f"{name} must be a power of two, got {value}")
        if default_width > max_width or default_height > max_height:
            raise ValueError("Default sheet size exceeds maximum sheet size")

        self.default_width = default_width
        self.default_height = default_height
        self.max_width = max_width
        self.max_height = max_height
        self.padding = padding

        # group -> guid -> SpriteFrame
        self._frame_cache: Dict[str, Dict[str, SpriteFrame]] = {}
        # group -> (width, height) -> frames holding distinct pixels
        self._pixel_cache: Dict[str, Dict[Tuple[int, int], List[SpriteFrame]]] = {}
        # group -> sheet currently being written
        self._open_sheets: Dict[str, SheetWriteState] = {}
        # every sheet in creation order
        self._sheets: List[SheetWriteState] = []

    @property
    def sheets(self) -> List[SheetWriteState]:
        """All sheets (frozen and open) in creation order."""
        return list(self._sheets)

    def get_cached_frame(self, group: str, guid: str) -> Optional[SpriteFrame]:
        return self._frame_cache.get(group, {}).get(guid)

    def place_image(self, asset: AssetEntry, group: str) -> SpriteFrame:
        """
        Get the sprite frame for an image asset, packing it on first use.

        Args:
            asset: Asset entry with decoded pixels
            group: Spritesheet group name

        Returns:
            SpriteFrame (cached per group and asset guid)
        """
        group_frames = self._frame_cache.setdefault(group, {})
        cached = group_frames.get(asset.guid)
        if cached is not None:
            logDebug(f"Skipping ImageAsset duplicate: {asset.filename}")
            return cached

        logDebug(f"Writing ImageAsset to sheet: {asset.filename} (group: {group})")

        trimmed, trim_offset = self._trim(asset)

        # Reuse the placement of an identical bitmap from this group
        bucket = self._pixel_cache.setdefault(group, {}).setdefault((trimmed.width, trimmed.height), [])
        for candidate in bucket:
            if candidate.trimmed_pixels.equals(trimmed):
                frame = SpriteFrame(
                    sheet_index=candidate.sheet_index,
                    frame_index=candidate.frame_index,
                    frame_rect=candidate.frame_rect,
                    trim_offset=trim_offset,
                    trimmed_pixels=candidate.trimmed_pixels,
                )
                group_frames[asset.guid] = frame
                logDebug(f"Using duplicate sprite from cache: {asset.filename}")
                return frame

        frame = self._write_to_sheet(group, trimmed, trim_offset)
        group_frames[asset.guid] = frame
        bucket.append(frame)
        return frame

    def _trim(self, asset: AssetEntry) -> Tuple[PixelBuffer, Point]:
        """Cut the visible area out of the source, clamped to the maximum sheet size."""
        source: PixelBuffer = asset.pixels
        bounds = source.visible_bounds()

        x = math.floor(bounds.x) if bounds else 0
        y = math.floor(bounds.y) if bounds else 0
        width = bounds.width if bounds else 1
        height = bounds.height if bounds else 1

        if width > self.max_width:
            logWarning(f"Image '{asset.filename}' exceeds maximum sheet width "
                       f"({width} > {self.max_width}), cropping")
            width = self.max_width
        if height > self.max_height:
            logWarning(f"Image '{asset.filename}' exceeds maximum sheet height "
                       f"({height} > {self.max_height}), cropping")
            height = self.max_height

        return source.copy_region(Rect(x, y, width, height)), Point(x, y)

    def _open_sheet(self, group: str) -> SheetWriteState:
        previous = self._open_sheets.get(group)
        if previous is not None:
            previous.frozen = True
        sheet = SheetWriteState(
            group_id=group,
            group_sheet_index=0 if previous is None else previous.group_sheet_index + 1,
            buffer=PixelBuffer.blank(self.default_width, self.default_height),
        )
        self._open_sheets[group] = sheet
        self._sheets.append(sheet)
        logDebug(f"Opened sheet {sheet.group_sheet_index} for group '{group}'")
        return sheet

    def _auto_resize(self, sheet: SheetWriteState, width: int, height: int):
        """Double each overflowing axis while the placement stays within the maximum."""
        while (sheet.cursor_x + width > sheet.width
               and sheet.cursor_x + width <= self.max_width
               and sheet.width * 2 <= self.max_width):
            sheet.buffer = sheet.buffer.resized(sheet.width * 2, sheet.height)
        while (sheet.cursor_y + height > sheet.height
               and sheet.cursor_y + height <= self.max_height
               and sheet.height * 2 <= self.max_height):
            sheet.buffer = sheet.buffer.resized(sheet.width, sheet.height * 2)

    @staticmethod
    def _fits(sheet: SheetWriteState, width: int, height: int) -> bool:
        return sheet.cursor_x + width <= sheet.width and sheet.cursor_y + height <= sheet.height

    def _write_to_sheet(self, group: str, trimmed: PixelBuffer, trim_offset: Point) -> SpriteFrame:
        sheet = self._open_sheets.get(group)
        if sheet is None:
            sheet = self._open_sheet(group)

        width, height = trimmed.width, trimmed.height

        if sheet.cursor_x + width > self.max_width:
            # Next row
            sheet.cursor_x = 0
            sheet.cursor_y = sheet.max_y + self.padding

        self._auto_resize(sheet, width, height)

        if not self._fits(sheet, width, height):
            # Out of space: continue on a fresh sheet
            sheet = self._open_sheet(group)
            self._auto_resize(sheet, width, height)

        sheet.buffer.blit(trimmed, sheet.cursor_x, sheet.cursor_y)

        frame = SpriteFrame(
            sheet_index=sheet.group_sheet_index,
            frame_index=sheet.frame_index,
            frame_rect=Rect(sheet.cursor_x, sheet.cursor_y, width, height),
            trim_offset=trim_offset,
            trimmed_pixels=trimmed,
        )
        sheet.rects.append(frame.frame_rect)

        sheet.max_y = max(sheet.max_y, sheet.cursor_y + height)
        sheet.cursor_x += width + self.padding
        sheet.frame_index += 1

        return frame

    def release(self):
        """Drop every cached bitmap and sheet buffer."""
        self._frame_cache.clear()
        self._pixel_cache.clear()
        self._open_sheets.clear()
        self._sheets.clear()
