"""Host file images."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Union

from .errors import EmptyFile, FileStoreError

logger = logging.getLogger("sam9boot.files")

PathLike = Union[str, Path]


@dataclass(frozen=True)
class FileImage:
    path: str
    data: bytes

    @property
    def length(self) -> int:
        return len(self.data)

    def __len__(self) -> int:
        return len(self.data)


def load(path: PathLike, count: Optional[int] = None) -> FileImage:
    """Load ``path``; with ``count`` only its first ``count`` bytes.

    A file shorter than ``count`` is a read error.
    """
    name = str(path)
    try:
        data = Path(path).read_bytes()
    except OSError as exc:
        raise FileStoreError(f"Failed to load file '{name}' (open error: {exc.strerror or exc})") from exc
    if not data:
        raise EmptyFile(f"Failed to load file '{name}' (zero length)")
    if count is not None:
        if count > len(data):
            raise FileStoreError(f"Failed to load file '{name}' ({count} bytes, read error)")
        data = data[:count]
    logger.debug("loaded %d bytes from %s", len(data), name)
    return FileImage(path=name, data=data)


def save(path: PathLike, data: bytes) -> int:
    name = str(path)
    try:
        with open(path, "wb") as handle:
            handle.write(data)
    except OSError as exc:
        raise FileStoreError(f"Error writing {len(data)} bytes to file '{name}' ({exc.strerror or exc})") from exc
    logger.debug("wrote %d bytes to %s", len(data), name)
    return len(data)


__all__ = ["FileImage", "load", "save"]
