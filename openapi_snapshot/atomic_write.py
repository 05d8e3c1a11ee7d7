# openapi_snapshot/atomic_write.py
from __future__ import annotations

import os
import uuid
from contextlib import suppress
from pathlib import Path
from typing import Union

from .errors import IoError


def _temp_path_for(path: Path) -> Path:
    name = path.name or "openapi_snapshot"
    return path.parent / f".{name}.{os.getpid()}.{uuid.uuid4().hex}.tmp"


def write_atomic(path: Union[str, Path], contents: str) -> None:
    """
    Replace `path` with `contents` so readers see either the old file or the
    new one, never a partial write.
    """
    path = Path(path)
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise IoError(f"failed to create output directory: {e}") from e

    tmp = _temp_path_for(path)
    try:
        # O_EXCL: fail rather than clobber an existing file
        fd = os.open(tmp, os.O_WRONLY | os.O_CREAT | os.O_EXCL, 0o644)
    except OSError as e:
        raise IoError(f"failed to create temp file: {e}") from e

    step = "write"
    try:
        with os.fdopen(fd, "w", encoding="utf-8", newline="") as fh:
            fh.write(contents)
            step = "flush"
            fh.flush()
            os.fsync(fh.fileno())
        step = "move"
        os.replace(tmp, path)
    except OSError as e:
        with suppress(OSError):
            tmp.unlink()
        raise IoError(f"failed to {step} temp file: {e}") from e
