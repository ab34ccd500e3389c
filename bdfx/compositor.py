"""Text compositor: stamps glyphs from a Font onto a growing bitmap.

Glyphs are placed relative to the font baseline
(``font.bounding_box.height + font.bounding_box.origin_y`` rows from the
top). The canvas starts zero columns wide and is widened for each glyph;
ink is OR-ed in, so overlapping glyphs never erase each other.
"""

import numpy as np
from PIL import Image

from bdfx.errors import GlyphGeometryError, NoGlyphsAvailable
from bdfx.font import Font, Glyph
from bdfx.logging import audit, get_logger, trace

log = get_logger("compositor")

FALLBACK_CHAR = "?"


# ---------------------------------------------------------------------------
# Canvas
# ---------------------------------------------------------------------------

class Bitmap:
    """Row-major 1-bit canvas that only ever grows to the right."""

    def __init__(self, height: int):
        self.width = 0
        self.height = height
        self.rows: list[list[int]] = [[] for _ in range(height)]

    def __getitem__(self, row: int) -> list[int]:
        return self.rows[row]

    def __len__(self) -> int:
        return self.height

    def __iter__(self):
        return iter(self.rows)

    def __repr__(self) -> str:
        return f"Bitmap(width={self.width}, height={self.height})"

    def grow(self, columns: int):
        """Append ``columns`` blank columns to every row."""
        if columns <= 0:
            return
        for row in self.rows:
            row.extend([0] * columns)
        self.width += columns

    def stamp(self, glyph: Glyph, row_start: int, column_start: int):
        """OR the glyph's bits into the canvas with its top-left at (row_start, column_start)."""
        bbox = glyph.bounding_box
        if bbox.height and (row_start < 0 or row_start + bbox.height > self.height):
            raise GlyphGeometryError(
                f"glyph {glyph.name!r} rows {row_start}..{row_start + bbox.height - 1} "
                f"fall outside canvas height {self.height}")
        if bbox.width and (column_start < 0 or column_start + bbox.width > self.width):
            raise GlyphGeometryError(
                f"glyph {glyph.name!r} columns {column_start}..{column_start + bbox.width - 1} "
                f"fall outside canvas width {self.width}")

        for y, bits in enumerate(glyph.bitmap):
            row = self.rows[row_start + y]
            for x, bit in enumerate(bits):
                row[column_start + x] |= bit

    def to_array(self) -> np.ndarray:
        """Canvas as a ``height x width`` uint8 array of 0/1."""
        return np.array(self.rows, dtype=np.uint8).reshape(self.height, self.width)

    def to_image(
        self,
        scale: int = 1,
        fg_color: tuple[int, int, int] = (0, 0, 0),
        bg_color: tuple[int, int, int] = (255, 255, 255),
    ) -> Image.Image:
        """Render the canvas as an RGB image, enlarged with nearest-neighbour."""
        img = Image.new("RGB", (max(self.width, 1), max(self.height, 1)), bg_color)
        if self.width and self.height:
            pixels = img.load()
            for y, row in enumerate(self.rows):
                for x, bit in enumerate(row):
                    if bit:
                        pixels[x, y] = fg_color
        if scale > 1:
            img = img.resize((img.width * scale, img.height * scale), Image.NEAREST)
        return img

    def to_text(self, on: str = "#", off: str = ".") -> str:
        return "\n".join("".join(on if bit else off for bit in row) for row in self.rows)


# ---------------------------------------------------------------------------
# Glyph lookup
# ---------------------------------------------------------------------------

def resolve_glyph(font: Font, char: str) -> Glyph:
    """Find the glyph for ``char``, falling back when the font lacks it.

    Order: the glyph itself, the font's DEFAULT_CHAR, '?', then the first
    glyph in the font.
    """
    glyph = font.glyphs.get(ord(char))
    if glyph is not None:
        return glyph

    default_char = font.properties.default_char
    if default_char is not None and default_char in font.glyphs:
        glyph = font.glyphs[default_char]
    elif ord(FALLBACK_CHAR) in font.glyphs:
        glyph = font.glyphs[ord(FALLBACK_CHAR)]
    elif font.glyphs:
        glyph = next(iter(font.glyphs.values()))
    else:
        raise NoGlyphsAvailable(f"font {font.name!r} has no glyphs to draw {char!r}")

    log.debug("glyph fallback: %r (code %d) -> %s", char, ord(char), glyph.name)
    return glyph


# ---------------------------------------------------------------------------
# Composition
# ---------------------------------------------------------------------------

def _composite_pass(font: Font, text: str, bitmap: Bitmap, xpos: int, kerning_bias: int) -> int:
    """Draw ``text`` once onto ``bitmap`` starting at ``xpos``; returns the new xpos."""
    baseline = font.baseline
    for char in text:
        glyph = resolve_glyph(font, char)
        bbox = glyph.bounding_box

        row_start = baseline - bbox.origin_y - bbox.height
        columns_to_add = max(glyph.advance, bbox.width)

        # Reserve blank columns so a glyph reaching left of its origin
        # never lands on a negative column.
        if bitmap.width < -bbox.origin_x:
            xpos = -bbox.origin_x
            columns_to_add += xpos

        # Positive kerning can push the glyph past the columns reserved above
        overflow = xpos + bbox.origin_x + bbox.width - (bitmap.width + columns_to_add)
        if overflow > 0:
            columns_to_add += overflow

        bitmap.grow(columns_to_add)
        bitmap.stamp(glyph, row_start, xpos + bbox.origin_x)

        xpos += glyph.advance + kerning_bias
    return xpos


@trace
def composite(font: Font, text: str, *, repeat_count: int = 0, kerning_bias: int = 0) -> Bitmap:
    """Lay ``text`` out in ``font`` and return the resulting bitmap.

    Args:
        font: Parsed font.
        text: Characters to draw, left to right.
        repeat_count: Extra times to draw the text after the first pass,
            continuing on the same canvas.
        kerning_bias: Pixels added to every glyph's advance (may be negative).

    Raises:
        NoGlyphsAvailable: a character needs a fallback and the font is empty.
        GlyphGeometryError: a glyph would be drawn outside the canvas.
    """
    bitmap = Bitmap(font.bounding_box.height)
    passes = 1 + max(repeat_count, 0)
    xpos = 0
    for _ in range(passes):
        xpos = _composite_pass(font, text, bitmap, xpos, kerning_bias)

    audit("text.composited", logger=log, font=font.name, chars=len(text),
          passes=passes, width=bitmap.width, height=bitmap.height)
    return bitmap
