"""
Test whole-file loading: mmap reads, the size ceiling, and the format
pre-check performed before any analysis runs.
"""
import pytest

from magicimage.errors import FileTooLargeError, UnsupportedFormatError
from magicimage.reader import (
    MAX_FILE_SIZE,
    FileReader,
    declared_content_type,
    read_image_file,
)

PNG = b"\x89PNG\r\n\x1A\n"


def test_reads_whole_file(tmp_path):
    data = PNG + bytes(range(256)) * 20
    path = tmp_path / "a.png"
    path.write_bytes(data)
    assert read_image_file(str(path)) == data


def test_empty_file_falls_back_to_plain_read(tmp_path):
    path = tmp_path / "empty.bin"
    path.write_bytes(b"")
    with open(path, "rb") as f:
        reader = FileReader(f, 0)
        assert not reader.is_mmap
        assert reader.read_all() == b""
        reader.close()
    assert read_image_file(str(path)) == b""


def test_file_reader_uses_mmap(tmp_path):
    path = tmp_path / "data.bin"
    path.write_bytes(b"A" * 4096 + b"B" * 4096)
    with open(path, "rb") as f:
        with FileReader(f, 8192) as reader:
            assert reader.is_mmap
            assert reader.size == 8192
            assert reader.read_all() == b"A" * 4096 + b"B" * 4096
        assert not reader.is_mmap


def test_size_ceiling(tmp_path):
    assert MAX_FILE_SIZE == 50 * 1024 * 1024
    path = tmp_path / "big.png"
    path.write_bytes(PNG + b"\x00" * 2000)
    with pytest.raises(FileTooLargeError) as exc:
        read_image_file(str(path), max_size=1000)
    assert exc.value.size == 2008
    assert exc.value.limit == 1000
    # A zero limit disables the check
    assert len(read_image_file(str(path), max_size=0)) == 2008


def test_require_signature(tmp_path):
    good = tmp_path / "good.png"
    good.write_bytes(PNG + b"\x00" * 10)
    bad = tmp_path / "bad.png"
    bad.write_bytes(b"not an image")
    assert read_image_file(str(good), require_signature=True).startswith(PNG)
    with pytest.raises(UnsupportedFormatError):
        read_image_file(str(bad), require_signature=True)
    # Without the check any bytes are accepted
    assert read_image_file(str(bad)) == b"not an image"


def test_missing_file_raises_oserror(tmp_path):
    with pytest.raises(OSError):
        read_image_file(str(tmp_path / "nope.png"))


def test_declared_content_type():
    assert declared_content_type("photo.jpg") == "image/jpeg"
    assert declared_content_type("photo.png") == "image/png"
    assert declared_content_type("photo.gif") == "image/gif"
    # No image-like extension: fall back to the bytes
    assert declared_content_type("photo", PNG + b"\x00") == "image/png"
    assert declared_content_type("photo") == "application/octet-stream"
