import logging

import pytest

from bdfx.parser import parse

FONT_4X6 = """\
STARTFONT 2.1
COMMENT Cut-down copy of the misc-fixed 4x6 font
FONT -Misc-Fixed-Medium-R-Normal--6-60-75-75-C-40-ISO10646-1
SIZE 6 75 75
FONTBOUNDINGBOX 4 6 0 -1
STARTPROPERTIES 3
FONT_DESCENT 1
FONT_ASCENT 5
DEFAULT_CHAR 0
ENDPROPERTIES
CHARS 3
STARTCHAR space
ENCODING 32
SWIDTH 640 0
DWIDTH 4 0
BBX 4 6 0 -1
BITMAP
00
00
00
00
00
00
ENDCHAR
STARTCHAR A
ENCODING 65
SWIDTH 640 0
DWIDTH 4 0
BBX 4 6 0 -1
BITMAP
40
A0
E0
A0
A0
00
ENDCHAR
STARTCHAR question
ENCODING 63
SWIDTH 640 0
DWIDTH 4 0
BBX 4 6 0 -1
BITMAP
c0
20
40
00
40
00
ENDCHAR
ENDFONT
"""

# Glyph wider than one byte, shorter than the font box
FONT_WIDE = """\
STARTFONT 2.1
FONT wide
SIZE 10 75 75
FONTBOUNDINGBOX 10 4 0 -1
CHARS 1
STARTCHAR C0001
ENCODING 65
SWIDTH 1000 0
DWIDTH 10 0
BBX 10 3 0 0
BITMAP
FFC0
7F80
C0C0
ENDCHAR
ENDFONT
"""

# 'j' hangs two columns left of its origin
FONT_LEFT_BEARING = """\
STARTFONT 2.1
FONT bearing
SIZE 6 75 75
FONTBOUNDINGBOX 6 4 -2 -1
CHARS 2
STARTCHAR j
ENCODING 106
SWIDTH 500 0
DWIDTH 3 0
BBX 4 3 -2 -1
BITMAP
30
10
30
ENDCHAR
STARTCHAR i
ENCODING 105
SWIDTH 500 0
DWIDTH 2 0
BBX 1 3 0 0
BITMAP
80
80
80
ENDCHAR
ENDFONT
"""

FONT_EMPTY = """\
STARTFONT 2.1
FONT empty
SIZE 6 75 75
FONTBOUNDINGBOX 4 6 0 -1
CHARS 0
ENDFONT
"""


@pytest.fixture
def font_4x6_text():
    return FONT_4X6


@pytest.fixture
def font_4x6():
    return parse(FONT_4X6)


@pytest.fixture
def font_wide():
    return parse(FONT_WIDE)


@pytest.fixture
def font_bearing():
    return parse(FONT_LEFT_BEARING)


@pytest.fixture
def font_empty():
    return parse(FONT_EMPTY)


@pytest.fixture
def font_file(tmp_path):
    path = tmp_path / "4x6.bdf"
    path.write_text(FONT_4X6, encoding="ascii")
    return path


@pytest.fixture(autouse=True)
def _reset_bdfx_logger():
    yield
    root = logging.getLogger("bdfx")
    for handler in root.handlers:
        handler.close()
    root.handlers.clear()
    root.setLevel(logging.NOTSET)
