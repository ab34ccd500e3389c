"""bdfx CLI: inspect BDF fonts and render text with them."""

import argparse
import sys
from pathlib import Path

from bdfx.errors import BdfError
from bdfx.logging import audit, get_logger, setup_logging

log = get_logger("cli")


def _parse_hex_color(s: str) -> tuple[int, int, int]:
    """Parse a hex colour string (with or without '#') to an RGB tuple."""
    s = s.lstrip("#")
    if len(s) != 6:
        raise argparse.ArgumentTypeError(f"expected RRGGBB, got {s!r}")
    try:
        return tuple(int(s[i : i + 2], 16) for i in (0, 2, 4))
    except ValueError:
        raise argparse.ArgumentTypeError(f"expected RRGGBB, got {s!r}") from None


def cmd_info(args):
    """Print font metadata."""
    from bdfx.parser import load_font

    font = load_font(args.font)
    bbox = font.bounding_box
    props = font.properties
    print(f"Font:         {font.name or '(unnamed)'} (BDF {font.version or '?'})")
    if font.size is not None:
        print(f"Size:         {font.size.point_size}pt @ {font.size.resolution_x}x{font.size.resolution_y} dpi")
    print(f"Bounding box: {bbox.width}x{bbox.height} origin ({bbox.origin_x}, {bbox.origin_y})")
    print(f"Baseline:     row {font.baseline}")
    print(f"Ascent:       {props.font_ascent if props.font_ascent is not None else '-'}")
    print(f"Descent:      {props.font_descent if props.font_descent is not None else '-'}")
    print(f"Default char: {props.default_char if props.default_char is not None else '-'}")
    declared = font.total_chars if font.total_chars is not None else "-"
    print(f"Glyphs:       {font.glyph_count} (declared {declared})")


def cmd_chars(args):
    """Print every character the font defines."""
    from bdfx.font import all_characters
    from bdfx.parser import load_font

    print(all_characters(load_font(args.font)))


def cmd_render(args):
    """Render text to the terminal or to a PNG."""
    from bdfx.compositor import composite
    from bdfx.parser import load_font

    font = load_font(args.font)
    bitmap = composite(font, args.text, repeat_count=args.repeat, kerning_bias=args.kerning)

    if args.output is None:
        print(bitmap.to_text(on=args.on, off=args.off))
        return

    output = Path(args.output)
    output.parent.mkdir(parents=True, exist_ok=True)
    img = bitmap.to_image(scale=args.scale, fg_color=args.color, bg_color=args.background)
    img.save(output)
    print(f"Rendered: {output} ({img.size[0]}x{img.size[1]}, bitmap {bitmap.width}x{bitmap.height})")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="bdfx", description="bdfx: BDF bitmap font reader and text renderer")

    # Global logging flags
    parser.add_argument("-V", "--verbose", action="store_true", help="Enable DEBUG-level logging")
    parser.add_argument("--log-file", default=None, help="Write JSON logs to file")

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # --- info ---
    p_info = subparsers.add_parser("info", help="Show font metadata")
    p_info.add_argument("font", help="Path to a .bdf file")

    # --- chars ---
    p_chars = subparsers.add_parser("chars", help="Print all characters in the font")
    p_chars.add_argument("font", help="Path to a .bdf file")

    # --- render ---
    p_render = subparsers.add_parser("render", help="Render text with the font")
    p_render.add_argument("font", help="Path to a .bdf file")
    p_render.add_argument("text", help="Text to render")
    p_render.add_argument("-o", "--output", default=None, help="Save PNG here instead of printing")
    p_render.add_argument("-r", "--repeat", type=int, default=0, help="Extra times to repeat the text")
    p_render.add_argument("-k", "--kerning", type=int, default=0, help="Pixels added to every advance")
    p_render.add_argument("--scale", type=int, default=1, help="PNG pixel size per bitmap cell")
    p_render.add_argument("--color", type=_parse_hex_color, default=(0, 0, 0),
                          help="Ink colour (hex e.g. '000000')")
    p_render.add_argument("--background", type=_parse_hex_color, default=(255, 255, 255),
                          help="Background colour (hex)")
    p_render.add_argument("--on", default="#", help="Character for set cells in text output")
    p_render.add_argument("--off", default=".", help="Character for blank cells in text output")

    return parser


def main(argv: list[str] | None = None):
    parser = build_parser()
    args = parser.parse_args(argv)

    # Setup logging before any command runs
    level = "DEBUG" if args.verbose else "WARNING"
    setup_logging(level=level, log_file=args.log_file)
    audit("cli.start", logger=log, command=args.command, verbose=args.verbose)

    if args.command is None:
        parser.print_help()
        sys.exit(1)

    commands = {
        "info": cmd_info,
        "chars": cmd_chars,
        "render": cmd_render,
    }
    try:
        commands[args.command](args)
    except FileNotFoundError as exc:
        print(f"bdfx: no such font file: {exc.filename}", file=sys.stderr)
        sys.exit(1)
    except BdfError as exc:
        print(f"bdfx: {exc}", file=sys.stderr)
        sys.exit(1)
    audit("cli.done", logger=log, command=args.command)


if __name__ == "__main__":
    main()
