"""Whole-block file reads and writes for record files."""

import logging
import os
from contextlib import suppress
from pathlib import Path
from typing import Optional

from ncserial.core.exceptions import FileOperationError

logger = logging.getLogger(__name__)


def write_block(path: Path, block: bytes) -> Path:
    """Write ``block`` to ``path`` in one piece, creating or overwriting it.

    The block goes to a sibling temporary file first and is then moved into
    place, so readers never see a half-written record under ``path``. No
    fsync is issued.

    Raises:
        FileOperationError: If the file cannot be written
    """
    path = Path(path)
    temp_path = path.with_name(path.name + '.tmp')
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(temp_path, 'wb') as f:
            f.write(block)
        os.replace(temp_path, path)
    except OSError as exc:
        with suppress(OSError):
            temp_path.unlink()
        raise FileOperationError(f"Failed to write {path}: {exc}") from exc

    logger.debug("Wrote %d bytes to %s", len(block), path)
    return path


def read_block(path: Path, size: Optional[int] = None) -> bytes:
    """Read a whole record file, or only its first ``size`` bytes.

    Raises:
        FileOperationError: If the file is missing or cannot be read
    """
    path = Path(path)
    if not path.is_file():
        raise FileOperationError(f"Record file not found: {path}")
    try:
        with open(path, 'rb') as f:
            return f.read() if size is None else f.read(size)
    except OSError as exc:
        raise FileOperationError(f"Failed to read {path}: {exc}") from exc
