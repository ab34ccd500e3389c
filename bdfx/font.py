"""Font model: typed, read-only records produced by the BDF parser."""

from dataclasses import dataclass, field

import numpy as np


@dataclass(frozen=True)
class Size:
    """SIZE declaration: point size and device resolution."""
    point_size: int
    resolution_x: int
    resolution_y: int


@dataclass(frozen=True)
class BoundingBox:
    """Extent and offset of a bitmap relative to its origin.

    ``origin_y`` is usually negative for the font-wide box, pulling the
    baseline up from the bottom edge by the descent.
    """
    width: int
    height: int
    origin_x: int
    origin_y: int

    @property
    def bytes_per_row(self) -> int:
        return (self.width + 7) // 8


@dataclass(frozen=True)
class Properties:
    """Recognised STARTPROPERTIES entries.

    font_descent / font_ascent are line-spacing hints only; baseline
    placement comes from the font bounding box.
    """
    font_descent: int | None = None
    font_ascent: int | None = None
    default_char: int | None = None


@dataclass(frozen=True)
class Glyph:
    name: str
    code: int
    scalable_width: tuple[int, int]
    device_width: tuple[int, int]
    bounding_box: BoundingBox
    bytes: bytes
    bitmap: tuple[tuple[int, ...], ...]

    @property
    def character(self) -> str:
        """The character this glyph encodes, or '' for unencoded glyphs."""
        if 0 <= self.code <= 0x10FFFF:
            return chr(self.code)
        return ""

    @property
    def advance(self) -> int:
        return self.device_width[0]

    def to_array(self) -> np.ndarray:
        """Glyph bits as a ``height x width`` uint8 array."""
        bbox = self.bounding_box
        return np.array(self.bitmap, dtype=np.uint8).reshape(bbox.height, bbox.width)

    def __repr__(self) -> str:
        return f"Glyph(name={self.name!r}, code={self.code})"


@dataclass(frozen=True)
class Font:
    version: str
    name: str
    size: Size | None
    bounding_box: BoundingBox
    properties: Properties = field(default_factory=Properties)
    total_chars: int | None = None
    glyphs: dict[int, Glyph] = field(default_factory=dict)

    @property
    def baseline(self) -> int:
        """Canvas row of the nominal baseline, counted from the top."""
        return self.bounding_box.height + self.bounding_box.origin_y

    @property
    def glyph_count(self) -> int:
        return len(self.glyphs)

    def __repr__(self) -> str:
        return f"Font(name={self.name!r}, glyphs={len(self.glyphs)})"


def all_characters(font: Font) -> str:
    """Every glyph's character concatenated, in file order."""
    return "".join(glyph.character for glyph in font.glyphs.values())
