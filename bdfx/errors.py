"""Exceptions raised while loading BDF fonts and compositing text."""


class BdfError(Exception):
    """Base class for every error raised by bdfx."""


class MalformedFont(BdfError, ValueError):
    """The font text is empty or structurally broken."""

    def __init__(self, message: str, source: str | None = None, line: int | None = None):
        self.source = source
        self.line = line
        where = []
        if source:
            where.append(source)
        if line is not None:
            where.append(f"line {line}")
        if where:
            message = f"{', '.join(where)}: {message}"
        super().__init__(message)


class GlyphGeometryError(MalformedFont):
    """Glyph metrics disagree with its bitmap data or with the canvas."""


class NoGlyphsAvailable(BdfError, LookupError):
    """No glyph could stand in for a character because the font is empty."""
