"""BDF font parser: turns Glyph Bitmap Distribution Format text into a Font.

The grammar is line-oriented: the first whitespace-separated token of each
line is a keyword, the rest are its arguments. Sections opened by
STARTFONT, STARTPROPERTIES and STARTCHAR must be closed by their END*
keyword, innermost first. Unknown keywords are skipped so that newer BDF
extensions (METRICSSET, VVECTOR, ...) still load.
"""

from pathlib import Path

import numpy as np

from bdfx.errors import GlyphGeometryError, MalformedFont
from bdfx.font import BoundingBox, Font, Glyph, Properties, Size
from bdfx.logging import audit, get_logger, trace

log = get_logger("parser")

# END* keyword -> the START* keyword it closes
SECTION_ENDS = {
    "ENDFONT": "STARTFONT",
    "ENDPROPERTIES": "STARTPROPERTIES",
    "ENDCHAR": "STARTCHAR",
}

# Keywords that only make sense between STARTCHAR and ENDCHAR
GLYPH_KEYWORDS = {"ENCODING", "SWIDTH", "DWIDTH", "BBX", "BITMAP", "ENDCHAR"}

PROPERTY_FIELDS = {
    "FONT_DESCENT": "font_descent",
    "FONT_ASCENT": "font_ascent",
    "DEFAULT_CHAR": "default_char",
}


# ---------------------------------------------------------------------------
# Token helpers
# ---------------------------------------------------------------------------

def _ints(tokens: list[str], count: int, source: str, lineno: int) -> list[int]:
    """Parse ``count`` base-10 integers following the keyword."""
    args = tokens[1:1 + count]
    if len(args) < count:
        raise MalformedFont(f"{tokens[0]} expects {count} values, got {len(args)}", source, lineno)
    try:
        return [int(a) for a in args]
    except ValueError:
        raise MalformedFont(f"{tokens[0]} has a non-integer value: {' '.join(args)}",
                            source, lineno) from None


def _word(tokens: list[str]) -> str:
    return tokens[1] if len(tokens) > 1 else ""


# ---------------------------------------------------------------------------
# Bitmap rows
# ---------------------------------------------------------------------------

def decode_rows(lines: list[str], start: int, bbox: BoundingBox,
                source: str = "<string>") -> tuple[bytes, tuple[tuple[int, ...], ...]]:
    """Decode ``bbox.height`` hex rows beginning at ``lines[start]``.

    Each row holds ``ceil(width / 8)`` bytes; bits are unpacked MSB-first
    and the padding past ``bbox.width`` is dropped.
    """
    remaining = len(lines) - start
    if bbox.height > remaining:
        raise GlyphGeometryError(
            f"BITMAP declares {bbox.height} rows but only {remaining} lines follow", source, start)

    hex_len = bbox.bytes_per_row * 2
    data = bytearray()
    rows = []
    for offset in range(bbox.height):
        lineno = start + offset + 1
        row_hex = lines[start + offset].strip()[:hex_len]
        if len(row_hex) < hex_len:
            raise GlyphGeometryError(
                f"bitmap row {row_hex!r} is shorter than {bbox.bytes_per_row} bytes", source, lineno)
        try:
            row_bytes = bytes.fromhex(row_hex)
        except ValueError:
            raise GlyphGeometryError(f"bitmap row {row_hex!r} is not hexadecimal",
                                     source, lineno) from None
        data += row_bytes
        bits = np.unpackbits(np.frombuffer(row_bytes, dtype=np.uint8))[:bbox.width]
        rows.append(tuple(bits.tolist()))
    return bytes(data), tuple(rows)


# ---------------------------------------------------------------------------
# Parsing
# ---------------------------------------------------------------------------

def _close_section(stack: list[str], keyword: str, source: str, lineno: int):
    opener = SECTION_ENDS[keyword]
    if not stack or stack[-1] != opener:
        current = stack[-1] if stack else "no open section"
        raise MalformedFont(f"{keyword} does not close {current}", source, lineno)
    stack.pop()


def _finish_glyph(draft: dict, source: str, lineno: int) -> Glyph:
    if "code" not in draft:
        raise MalformedFont(f"glyph {draft['name']!r} has no ENCODING", source, lineno)
    if "bounding_box" not in draft:
        raise MalformedFont(f"glyph {draft['name']!r} has no BBX", source, lineno)

    bbox = draft["bounding_box"]
    if "bytes" not in draft:
        if bbox.height > 0:
            raise GlyphGeometryError(
                f"glyph {draft['name']!r} declares {bbox.height} rows but has no BITMAP",
                source, lineno)
        draft["bytes"], draft["bitmap"] = b"", ()

    return Glyph(
        name=draft["name"],
        code=draft["code"],
        scalable_width=draft.get("scalable_width", (0, 0)),
        device_width=draft.get("device_width", (0, 0)),
        bounding_box=bbox,
        bytes=draft["bytes"],
        bitmap=draft["bitmap"],
    )


@trace
def parse(raw_text: str | None, source: str = "<string>") -> Font:
    """Parse BDF source text into a Font.

    Args:
        raw_text: Complete contents of a .bdf file.
        source: Name used in error messages (usually the file path).

    Raises:
        MalformedFont: empty input, unbalanced sections, bad numbers.
        GlyphGeometryError: bitmap rows that do not match the glyph's BBX.
    """
    if not raw_text or not raw_text.strip():
        raise MalformedFont("font text is empty", source)

    lines = raw_text.splitlines()
    stack: list[str] = []
    meta: dict = {}
    properties: dict = {}
    glyphs: dict[int, Glyph] = {}
    draft: dict | None = None

    i = 0
    while i < len(lines):
        lineno = i + 1
        tokens = lines[i].split()
        i += 1
        if not tokens:
            continue
        keyword = tokens[0]

        if keyword in GLYPH_KEYWORDS and draft is None:
            raise MalformedFont(f"{keyword} outside of STARTCHAR", source, lineno)

        if keyword == "STARTFONT":
            stack.append(keyword)
            meta["version"] = _word(tokens)
        elif keyword == "FONT":
            meta["name"] = _word(tokens)
        elif keyword == "SIZE":
            meta["size"] = Size(*_ints(tokens, 3, source, lineno))
        elif keyword == "FONTBOUNDINGBOX":
            meta["bounding_box"] = BoundingBox(*_ints(tokens, 4, source, lineno))
        elif keyword == "STARTPROPERTIES":
            stack.append(keyword)
        elif keyword in PROPERTY_FIELDS:
            properties[PROPERTY_FIELDS[keyword]] = _ints(tokens, 1, source, lineno)[0]
        elif keyword == "CHARS":
            meta["total_chars"] = _ints(tokens, 1, source, lineno)[0]
        elif keyword == "STARTCHAR":
            stack.append(keyword)
            draft = {"name": _word(tokens)}
        elif keyword == "ENCODING":
            draft["code"] = _ints(tokens, 1, source, lineno)[0]
        elif keyword == "SWIDTH":
            draft["scalable_width"] = tuple(_ints(tokens, 2, source, lineno))
        elif keyword == "DWIDTH":
            draft["device_width"] = tuple(_ints(tokens, 2, source, lineno))
        elif keyword == "BBX":
            draft["bounding_box"] = BoundingBox(*_ints(tokens, 4, source, lineno))
        elif keyword == "BITMAP":
            if "bounding_box" not in draft:
                raise MalformedFont(f"BITMAP before BBX in glyph {draft['name']!r}", source, lineno)
            bbox = draft["bounding_box"]
            draft["bytes"], draft["bitmap"] = decode_rows(lines, i, bbox, source)
            i += max(bbox.height, 0)
        elif keyword in SECTION_ENDS:
            _close_section(stack, keyword, source, lineno)
            if keyword == "ENDCHAR":
                glyph = _finish_glyph(draft, source, lineno)
                glyphs[glyph.code] = glyph
                draft = None

    if stack:
        raise MalformedFont(f"unterminated section(s): {', '.join(stack)}", source)
    if "bounding_box" not in meta:
        raise MalformedFont("missing FONTBOUNDINGBOX", source)

    font = Font(
        version=meta.get("version", ""),
        name=meta.get("name", ""),
        size=meta.get("size"),
        bounding_box=meta["bounding_box"],
        properties=Properties(**properties),
        total_chars=meta.get("total_chars"),
        glyphs=glyphs,
    )
    audit("font.parsed", logger=log, source=source, name=font.name,
          glyphs=font.glyph_count, declared=font.total_chars)
    return font


# ---------------------------------------------------------------------------
# Loading from disk
# ---------------------------------------------------------------------------

def read_font_text(path: str | Path) -> str:
    """Read a .bdf file as text. Raises FileNotFoundError if it is missing."""
    return Path(path).read_text(encoding="ascii", errors="replace")


@trace
def load_font(path: str | Path) -> Font:
    """Read and parse the BDF font at ``path``."""
    font = parse(read_font_text(path), source=str(path))
    audit("font.loaded", logger=log, path=str(path), name=font.name)
    return font
