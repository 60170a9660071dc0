"""Signing pipeline: selected file -> base64 -> sign command -> CMS artifact."""

from __future__ import annotations

import base64
import logging
from collections.abc import Awaitable, Callable
from pathlib import Path

from ..config import CMS_MIME_TYPE, DEFAULT_CMS_FILENAME
from ..errors import (
    FileReadError,
    InputNotFoundError,
    NCASignerError,
    NoFileError,
    NoInputLinkedError,
)
from .client import SignerClient
from .host import ArtifactSaver, Blob, DirectorySaver, FileHost, LocalFileHost, read_file_base64

logger = logging.getLogger(__name__)

FileReader = Callable[[Path], Awaitable[str]]


class SigningPipeline:
    """Signs the file selected in a linked input and saves the result."""

    def __init__(
        self,
        client: SignerClient,
        host: FileHost | None = None,
        saver: ArtifactSaver | None = None,
        reader: FileReader = read_file_base64,
    ):
        self._client = client
        self._host = host or LocalFileHost()
        self._saver = saver or DirectorySaver(client.config.output_dir)
        self._reader = reader
        self._file_input_id: str | None = None

    @property
    def file_input_id(self) -> str | None:
        return self._file_input_id

    def link_file_input(self, input_id: str) -> None:
        """Designate the input source used by sign_selected_file()."""
        self._file_input_id = input_id

    async def sign_selected_file(self) -> str:
        """Sign the first file selected in the linked input.

        Returns:
            The signed artifact (base64 CMS) exactly as returned by the service

        Raises:
            NoInputLinkedError: If no input was linked
            InputNotFoundError: If the host cannot locate the linked input
            NoFileError: If the input has no selected files
            FileReadError: If the file cannot be read
        """
        input_id = self._file_input_id
        if not input_id:
            raise NoInputLinkedError()

        source = self._host.find(input_id)
        if source is None:
            raise InputNotFoundError(input_id)

        files = source.selected_files()
        if not files:
            raise NoFileError()

        path = files[0]
        try:
            content = await self._reader(path)
        except NCASignerError:
            raise
        except OSError as e:
            raise FileReadError(f"File reading failed: {e}") from e

        logger.info(f"Signing {path}")
        return await self._client.create_cades_from_base64(content)

    def materialize_download(self, artifact: str, filename: str = DEFAULT_CMS_FILENAME) -> None:
        """Decode a base64 artifact and hand it to the saver as a CMS blob.

        Characters outside the base64 alphabet (line breaks) are ignored; padding
        errors (binascii.Error) propagate unchanged.
        """
        data = base64.b64decode(artifact)
        self._saver.save(Blob(data, CMS_MIME_TYPE), filename)

    download_cms_file = materialize_download
