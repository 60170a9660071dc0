"""Tests for host capabilities: file lookup and reading."""

import base64

import pytest

from nca_signer.errors import FileReadError
from nca_signer.sdk import LocalFileHost, MemoryFileHost, PathFileSource, read_file_base64


class TestLocalFileHost:
    def test_file_selects_itself(self, tmp_path):
        """A file path selects just that file."""
        document = tmp_path / "doc.pdf"
        document.write_bytes(b"x")

        source = LocalFileHost().find(str(document))

        assert isinstance(source, PathFileSource)
        assert source.selected_files() == [document]

    def test_directory_selects_files_in_name_order(self, tmp_path):
        """A directory selects its files sorted by name."""
        (tmp_path / "b.txt").write_text("b")
        (tmp_path / "a.txt").write_text("a")
        (tmp_path / "nested").mkdir()

        source = LocalFileHost().find(str(tmp_path))

        assert source.selected_files() == [tmp_path / "a.txt", tmp_path / "b.txt"]

    def test_empty_directory_selects_nothing(self, tmp_path):
        """An empty directory selects no files."""
        assert LocalFileHost().find(str(tmp_path)).selected_files() == []

    def test_missing_path_not_found(self, tmp_path):
        """A missing path resolves to None."""
        assert LocalFileHost().find(str(tmp_path / "nope")) is None

    def test_relative_ids_use_root(self, tmp_path):
        """Relative ids resolve against the root."""
        (tmp_path / "doc.pdf").write_bytes(b"x")

        source = LocalFileHost(root=tmp_path).find("doc.pdf")

        assert source.selected_files() == [tmp_path / "doc.pdf"]


class TestMemoryFileHost:
    def test_registered_selection(self, tmp_path):
        """Registered selections are found by id."""
        host = MemoryFileHost()
        host.add("upload", [tmp_path / "a", str(tmp_path / "b")])

        assert host.find("upload").selected_files() == [tmp_path / "a", tmp_path / "b"]
        assert host.find("other") is None


class TestReadFileBase64:
    @pytest.mark.asyncio
    async def test_reads_whole_file(self, tmp_path):
        """The whole file comes back base64 encoded."""
        document = tmp_path / "doc.bin"
        document.write_bytes(bytes(range(256)))

        encoded = await read_file_base64(document)

        assert base64.b64decode(encoded) == bytes(range(256))

    @pytest.mark.asyncio
    async def test_missing_file(self, tmp_path):
        """A missing file raises FileReadError."""
        with pytest.raises(FileReadError, match="File reading failed"):
            await read_file_base64(tmp_path / "missing")

    @pytest.mark.asyncio
    async def test_directory_is_read_error(self, tmp_path):
        """Reading a directory raises FileReadError."""
        with pytest.raises(FileReadError):
            await read_file_base64(tmp_path)
