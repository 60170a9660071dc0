"""Host capabilities consumed by the signing pipeline.

- FileHost: resolves an input identifier to a FileSource (or None)
- FileSource: yields the currently selected files
- read_file_base64: whole-file reader producing base64 text
- ArtifactSaver: persists a Blob under a filename
"""

from __future__ import annotations

import asyncio
import base64
import logging
from collections.abc import Sequence
from dataclasses import dataclass, field
from pathlib import Path
from typing import Protocol, runtime_checkable

from ..errors import FileReadError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Blob:
    """Binary payload tagged with a MIME type."""

    data: bytes
    mime_type: str

    @property
    def size(self) -> int:
        return len(self.data)


@runtime_checkable
class FileSource(Protocol):
    def selected_files(self) -> Sequence[Path]: ...


@runtime_checkable
class FileHost(Protocol):
    def find(self, input_id: str) -> FileSource | None: ...


@runtime_checkable
class ArtifactSaver(Protocol):
    def save(self, blob: Blob, filename: str) -> None: ...


@dataclass
class PathFileSource:
    """Selection backed by a filesystem path.

    A file selects itself; a directory selects its regular files in name order.
    """

    path: Path

    def selected_files(self) -> list[Path]:
        if self.path.is_file():
            return [self.path]
        if self.path.is_dir():
            return sorted(p for p in self.path.iterdir() if p.is_file())
        return []


class LocalFileHost:
    """Resolves input identifiers as filesystem paths.

    Relative identifiers are resolved against root when one is given.
    """

    def __init__(self, root: Path | None = None):
        self.root = root

    def find(self, input_id: str) -> PathFileSource | None:
        path = Path(input_id).expanduser()
        if self.root is not None and not path.is_absolute():
            path = self.root / path
        if not path.exists():
            return None
        return PathFileSource(path)


@dataclass
class StaticFileSource:
    files: list[Path] = field(default_factory=list)

    def selected_files(self) -> list[Path]:
        return list(self.files)


class MemoryFileHost:
    """FileHost holding explicitly registered selections."""

    def __init__(self) -> None:
        self._sources: dict[str, StaticFileSource] = {}

    def add(self, input_id: str, files: Sequence[Path | str] = ()) -> StaticFileSource:
        source = StaticFileSource([Path(f) for f in files])
        self._sources[input_id] = source
        return source

    def find(self, input_id: str) -> StaticFileSource | None:
        return self._sources.get(input_id)


async def read_file_base64(path: Path) -> str:
    """Read a whole file and return its content base64 encoded.

    Raises:
        FileReadError: If the file cannot be read
    """
    loop = asyncio.get_running_loop()
    try:
        data = await loop.run_in_executor(None, path.read_bytes)
    except OSError as e:
        raise FileReadError(f"File reading failed: {e}") from e
    logger.debug(f"Read {len(data)} bytes from {path}")
    return base64.b64encode(data).decode("ascii")


class DirectorySaver:
    """Saves blobs as files inside a directory."""

    def __init__(self, directory: Path):
        self.directory = Path(directory)
        self.saved: list[Path] = []

    def path_for(self, filename: str) -> Path:
        # Only the final component is honored
        return self.directory / Path(filename).name

    def save(self, blob: Blob, filename: str) -> None:
        target = self.path_for(filename)
        self.directory.mkdir(parents=True, exist_ok=True)
        target.write_bytes(blob.data)
        self.saved.append(target)
        logger.info(f"Saved {blob.size} bytes ({blob.mime_type}) to {target}")
