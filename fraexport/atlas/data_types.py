"""
Data types for atlas packing.
"""

from dataclasses import dataclass, field
from typing import List

from fraexport.imaging import PixelBuffer, Point, Rect


@dataclass
class SpriteFrame:
    """
    Where an image asset lives on a spritesheet.

    Frames deduplicated by pixel content share sheet_index, frame_index,
    frame_rect and trimmed_pixels, but each keeps its own trim_offset since
    the offset depends on the source image's untrimmed bounds.
    """
    sheet_index: int  # Sheet index within the spritesheet group
    frame_index: int  # Frame index within that sheet
    frame_rect: Rect  # Sheet-local placement
    trim_offset: Point  # Top left of the visible area in the untrimmed source
    trimmed_pixels: PixelBuffer


@dataclass
class SheetWriteState:
    """
    Write progress of one spritesheet.

    Only the newest sheet of a group is written to; earlier ones are frozen.
    """
    group_id: str
    group_sheet_index: int
    buffer: PixelBuffer
    cursor_x: int = 0
    cursor_y: int = 0
    max_y: int = 0  # Bottom of the current row
    frame_index: int = 0  # Index the next placed frame receives
    rects: List[Rect] = field(default_factory=list)
    frozen: bool = False

    @property
    def width(self) -> int:
        return self.buffer.width

    @property
    def height(self) -> int:
        return self.buffer.height

    def frame_table(self) -> List[int]:
        """Flat [x, y, w, h, ...] list of placed frames in placement order."""
        frames: List[int] = []
        for rect in self.rects:
            frames.extend(rect.to_list())
        return frames
