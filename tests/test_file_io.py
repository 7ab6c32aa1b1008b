"""Tests for chunkmerge.services.file_io."""
from __future__ import annotations

import pytest

from chunkmerge.services.file_io import FileIOService, LineEnding


@pytest.fixture
def service() -> FileIOService:
    return FileIOService()


class TestReadFile:
    def test_reads_utf8(self, service, tmp_path):
        path = tmp_path / "base.txt"
        path.write_bytes("café über\nnaïve résumé jalapeño\n".encode("utf-8"))

        result = service.read_file(path)

        assert result.success
        assert result.text == "café über\nnaïve résumé jalapeño\n"
        assert result.content.line_ending == LineEnding.LF
        assert result.content.line_count == 2

    def test_ascii_reported_as_utf8(self, service, tmp_path):
        path = tmp_path / "plain.txt"
        path.write_bytes(b"plain ascii text\n")

        assert service.read_file(path).content.encoding == "utf-8"

    def test_keeps_crlf(self, service, tmp_path):
        path = tmp_path / "dos.txt"
        path.write_bytes(b"one\r\ntwo\r\n")

        result = service.read_file(path)

        assert result.text == "one\r\ntwo\r\n"
        assert result.content.line_ending == LineEnding.CRLF

    def test_utf8_bom(self, service, tmp_path):
        path = tmp_path / "bom.txt"
        path.write_bytes(b"\xef\xbb\xbfhello\n")

        result = service.read_file(path)

        assert result.content.bom
        assert result.text == "hello\n"

    def test_missing_file(self, service, tmp_path):
        result = service.read_file(tmp_path / "nope.txt")

        assert not result.success
        assert "File not found" in result.error
        assert result.text == ""

    def test_directory(self, service, tmp_path):
        assert not service.read_file(tmp_path).success

    def test_binary_file(self, service, tmp_path):
        path = tmp_path / "image.png"
        path.write_bytes(b"\x89PNG\r\n\x1a\n\x00\x00")

        result = service.read_file(path)

        assert not result.success
        assert result.is_binary

    def test_too_large(self, tmp_path):
        path = tmp_path / "big.txt"
        path.write_text("x" * 100)

        result = FileIOService(max_text_size=10).read_file(path)

        assert not result.success
        assert "too large" in result.error

    def test_forced_encoding_falls_back(self, service, tmp_path):
        path = tmp_path / "latin.txt"
        path.write_bytes(b"caf\xe9\n")

        result = service.read_file(path, encoding="utf-8")

        assert result.success
        assert result.content.encoding == "latin-1"
        assert result.text == "café\n"


class TestWriteText:
    def test_writes_new_file(self, service, tmp_path):
        path = tmp_path / "out" / "merged.txt"

        result = service.write_text(path, "merged\n")

        assert result.success
        assert result.bytes_written == 7
        assert result.backup_path is None
        assert path.read_text() == "merged\n"

    def test_backup_of_existing_file(self, service, tmp_path):
        path = tmp_path / "base.txt"
        path.write_text("old\n")

        result = service.write_text(path, "new\n", create_backup=True)

        assert result.backup_path == tmp_path / "base.txt.orig"
        assert result.backup_path.read_text() == "old\n"
        assert path.read_text() == "new\n"

    def test_no_temporary_files_left(self, service, tmp_path):
        path = tmp_path / "base.txt"
        service.write_text(path, "content\n")

        assert [p.name for p in tmp_path.iterdir()] == ["base.txt"]

    def test_unencodable_content(self, service, tmp_path):
        result = service.write_text(tmp_path / "a.txt", "☃", encoding="ascii")

        assert not result.success
        assert result.error


@pytest.mark.parametrize("content,expected", [
    ("a\nb\n", LineEnding.LF),
    ("a\r\nb\r\n", LineEnding.CRLF),
    ("a\rb\r", LineEnding.CR),
    ("a\r\nb\n", LineEnding.MIXED),
    ("no newline", LineEnding.NONE),
])
def test_detect_line_ending(content, expected):
    assert FileIOService.detect_line_ending(content) == expected
