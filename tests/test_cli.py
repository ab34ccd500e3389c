import pytest
from PIL import Image

from bdfx.cli import _parse_hex_color, main


def test_render_to_terminal(font_file, capsys):
    main(["render", str(font_file), "A"])
    out = capsys.readouterr().out.splitlines()
    assert out[:3] == [".#..", "#.#.", "###."]


def test_render_with_repeat_and_custom_cells(font_file, capsys):
    main(["render", str(font_file), "A", "--repeat", "1", "--on", "@", "--off", " "])
    first = capsys.readouterr().out.splitlines()[0]
    assert first == " @   @  "


def test_render_to_png(font_file, tmp_path, capsys):
    output = tmp_path / "out" / "a.png"
    main(["render", str(font_file), "AA", "-o", str(output), "--scale", "2", "--color", "#ff0000"])
    assert "Rendered:" in capsys.readouterr().out
    with Image.open(output) as img:
        assert img.size == (16, 12)
        assert img.convert("RGB").getpixel((2, 0)) == (255, 0, 0)


def test_info(font_file, capsys):
    main(["info", str(font_file)])
    out = capsys.readouterr().out
    assert "Bounding box: 4x6 origin (0, -1)" in out
    assert "Glyphs:       3 (declared 3)" in out


def test_chars(font_file, capsys):
    main(["chars", str(font_file)])
    assert capsys.readouterr().out == " A?\n"


def test_missing_font_exits_with_error(tmp_path, capsys):
    with pytest.raises(SystemExit) as excinfo:
        main(["info", str(tmp_path / "missing.bdf")])
    assert excinfo.value.code == 1
    assert "no such font file" in capsys.readouterr().err


def test_malformed_font_exits_with_error(tmp_path, capsys):
    path = tmp_path / "broken.bdf"
    path.write_text("STARTFONT 2.1\nFONTBOUNDINGBOX 4 6 0 -1\n")
    with pytest.raises(SystemExit) as excinfo:
        main(["render", str(path), "A"])
    assert excinfo.value.code == 1
    assert "unterminated section" in capsys.readouterr().err


def test_no_command_prints_help():
    with pytest.raises(SystemExit) as excinfo:
        main([])
    assert excinfo.value.code == 1


def test_parse_hex_color():
    assert _parse_hex_color("#0a0B0c") == (10, 11, 12)
    assert _parse_hex_color("ffffff") == (255, 255, 255)
