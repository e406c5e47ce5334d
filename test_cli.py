"""
Test the terminal front-end end to end: create a magic image, view both
images, and analyze it with report export.
"""
import io
import json

import pytest
from PIL import Image

from magicimage.cli import main


def fake_image(prefix: bytes, size: int) -> bytes:
    return prefix + b"\x00" * (size - len(prefix))


def write(tmp_path, name, data):
    path = tmp_path / name
    path.write_bytes(data)
    return str(path)


def test_create_and_view(tmp_path, capsys):
    a = fake_image(b"\xFF\xD8\xFF", 3000)
    b = fake_image(b"\x89PNG\r\n\x1A\n", 1500)
    img1 = write(tmp_path, "photo1.jpg", a)
    img2 = write(tmp_path, "photo2.png", b)
    magic = str(tmp_path / "magic.jpg")

    assert main(["create", img1, img2, magic]) == 0
    out = capsys.readouterr().out
    assert "Content type: image/jpeg" in out
    assert "Second image: 3000 - 4499" in out

    first = str(tmp_path / "first.jpg")
    assert main(["view", magic, first]) == 0
    assert (tmp_path / "first.jpg").read_bytes() == a

    hidden = str(tmp_path / "hidden.png")
    assert main(["view", "-m", magic, hidden]) == 0
    assert (tmp_path / "hidden.png").read_bytes() == b
    out = capsys.readouterr().out
    assert "Format: PNG (image/png)" in out


def test_create_warns_on_unknown(tmp_path, capsys):
    img1 = write(tmp_path, "a.bin", b"\x00" * 1200)
    img2 = write(tmp_path, "b.gif", fake_image(b"GIF8", 1200))
    assert main(["create", img1, img2, str(tmp_path / "out.bin")]) == 0
    assert "Unknown image format for the first image" in capsys.readouterr().out


def test_view_without_hidden_image(tmp_path, capsys):
    plain = write(tmp_path, "plain.png", fake_image(b"\x89PNG\r\n\x1A\n", 2000))
    assert main(["view", "-m", plain]) == 1
    assert "No hidden second image found" in capsys.readouterr().err
    assert main(["view", "-n", plain]) == 0


def test_view_no_signature(tmp_path, capsys):
    zeros = write(tmp_path, "zeros.bin", b"\x00" * 10)
    assert main(["view", zeros]) == 1
    assert "No valid image format found" in capsys.readouterr().err


def test_view_missing_file(tmp_path, capsys):
    assert main(["view", str(tmp_path / "nope.jpg")]) == 1
    assert "Error:" in capsys.readouterr().err


def test_max_size_flag(tmp_path, capsys):
    big = write(tmp_path, "big.png", fake_image(b"\x89PNG\r\n\x1A\n", 5000))
    assert main(["--max-size", "1000", "view", big]) == 1
    assert "limit" in capsys.readouterr().err


def test_min_gap_flag(tmp_path):
    # 100-byte first image: lost with the default gap, found with a small one
    data = fake_image(b"BM", 100) + fake_image(b"GIF8", 2000)
    magic = write(tmp_path, "magic.bmp", data)
    assert main(["view", "-m", magic]) == 1
    out = str(tmp_path / "hidden.gif")
    assert main(["--min-gap", "50", "view", "-m", magic, out]) == 0
    assert (tmp_path / "hidden.gif").read_bytes() == data[100:]


def test_min_gap_must_be_positive(tmp_path, capsys):
    magic = write(tmp_path, "magic.png", fake_image(b"\x89PNG\r\n\x1A\n", 2000))
    for gap in ("0", "-3"):
        with pytest.raises(SystemExit) as exc:
            main(["--min-gap", gap, "analyze", magic])
        assert exc.value.code == 2
        assert "--min-gap" in capsys.readouterr().err


def test_script_entry_point():
    import main as script
    assert script.main is main


def test_analyze(tmp_path, capsys):
    buf = io.BytesIO()
    Image.new("RGB", (16, 8), "blue").save(buf, "PNG")
    png = buf.getvalue()
    first = png + b"\x00" * (1200 - len(png))
    data = first + fake_image(b"\xFF\xD8\xFF", 1500)
    magic = write(tmp_path, "magic.png", data)

    assert main(["analyze", magic]) == 0
    out = capsys.readouterr().out
    assert "Magic image with 2 images" in out
    assert "16x8" in out

    report = str(tmp_path / "report.json")
    table = str(tmp_path / "report.csv")
    assert main(["analyze", magic, "--json", report, "--csv", table]) == 0
    data = json.loads((tmp_path / "report.json").read_text())
    assert [r["format"] for r in data["regions"]] == ["PNG", "JPEG"]
    assert data["regions"][0]["dimensions"] == "16x8"
    assert (tmp_path / "report.csv").read_text().count("\n") == 3


def test_analyze_plain_data(tmp_path, capsys):
    zeros = write(tmp_path, "zeros.bin", b"\x00" * 10)
    assert main(["analyze", "--no-probe", zeros]) == 0
    assert "No recognisable image format found" in capsys.readouterr().out
