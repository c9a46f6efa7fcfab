"""
Import sources — resolve a named resource to its text.

Exports from the meter-reading tools arrive as UTF-8 (sometimes with BOM) or,
from older Windows installs, latin-1. Decoding happens here so the importers
only ever see str.
"""

import abc
import logging
from pathlib import Path

from meterhub.services.ingestion.base import SourceNotFoundError

logger = logging.getLogger(__name__)


def decode_bytes(data: bytes) -> str:
    """Decode export bytes: utf-8-sig first (strips BOM), latin-1 as fallback."""
    try:
        return data.decode("utf-8-sig")
    except UnicodeDecodeError:
        logger.warning("Import file is not valid UTF-8; decoding as latin-1")
        return data.decode("latin-1")


class ImportSource(abc.ABC):
    @abc.abstractmethod
    def read_text(self, name: str) -> str:
        """Return the decoded content of `name`. Raises SourceNotFoundError."""


class DirectorySource(ImportSource):
    """Reads import files from a directory (the batch import data path)."""

    def __init__(self, root: str):
        self.root = Path(root)

    def read_text(self, name: str) -> str:
        path = self.root / name
        if not path.is_file():
            raise SourceNotFoundError(str(path))
        return decode_bytes(path.read_bytes())

