"""Write generated modules to the output directory.

Emission is all-or-nothing up to the point where files start landing on
disk:

1. File names are checked for collisions (two operations normalising to the
   same name) before anything is touched.
2. The output directory is created if needed and must be writable.
3. Every destination is checked for existence; without ``overwrite`` the
   first existing one aborts the run and nothing is written.
4. Files are written concurrently, each through an atomic temp-file-then-rename
   so that a reader never sees a half-written module. The emitter joins on
   every write before reporting, and raises the first failure once all writes
   have settled.
"""

from __future__ import annotations

import contextlib
import logging
import os
import tempfile
from concurrent.futures import ThreadPoolExecutor, wait
from pathlib import Path

from specval.exceptions import FileExistsError_, FileSystemError, NameCollisionError
from specval.models import GeneratedModule

logger = logging.getLogger(__name__)

FILE_MODE = 0o600


def _atomic_write(path: Path, data: str) -> None:
    """Write *data* to *path* through a sibling temp file and ``os.replace``.

    Readers see either the previous file or the complete new one. The temp
    file is removed if anything fails before the rename.
    """
    handle, tmp_name = tempfile.mkstemp(dir=path.parent, prefix=f".{path.name}.", suffix=".tmp")
    try:
        with os.fdopen(handle, "w", encoding="utf-8", newline="\n") as stream:
            stream.write(data)
            stream.flush()
            os.fsync(stream.fileno())
        os.chmod(tmp_name, FILE_MODE)
        os.replace(tmp_name, path)
    except BaseException:
        with contextlib.suppress(OSError):
            os.unlink(tmp_name)
        raise


def check_collisions(modules: list[GeneratedModule]) -> None:
    """Raise :class:`NameCollisionError` if two modules share a file name."""
    seen: set[str] = set()
    for module in modules:
        if module.file_name in seen:
            raise NameCollisionError(
                f"several operations generate the file {module.file_name}, "
                "rename one of their paths"
            )
        seen.add(module.file_name)


def ensure_output_directory(directory: Path) -> None:
    """Create *directory* if missing and check it is writable.

    Raises:
        FileSystemError: If the directory cannot be created or written to.
    """
    try:
        directory.mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        raise FileSystemError(
            f"cannot create or access directory {directory}, check your permissions"
        ) from exc
    if not directory.is_dir() or not os.access(directory, os.W_OK):
        raise FileSystemError(
            f"cannot create or access directory {directory}, check your permissions"
        )


def emit(
    modules: list[GeneratedModule],
    directory: Path,
    overwrite: bool = False,
    workers: int = 4,
) -> list[Path]:
    """Write every module under *directory*.

    Args:
        modules: The modules to write; file names must be unique.
        directory: Destination directory, created if missing.
        overwrite: Replace existing files instead of failing.
        workers: Number of writer threads.

    Returns:
        The written paths, in the order of *modules*.

    Raises:
        NameCollisionError: If two modules share a file name.
        FileSystemError: If the directory is unusable or a write fails.
        FileExistsError_: If a destination exists and *overwrite* is false.
    """
    check_collisions(modules)
    ensure_output_directory(directory)

    paths = [directory / module.file_name for module in modules]
    if not overwrite:
        for path in paths:
            if path.exists():
                raise FileExistsError_(str(path))

    with ThreadPoolExecutor(max_workers=workers) as executor:
        futures = [
            executor.submit(_atomic_write, path, module.source_text)
            for path, module in zip(paths, modules)
        ]
        wait(futures)

    for path, future in zip(paths, futures):
        exc = future.exception()
        if exc is not None:
            raise FileSystemError(f"cannot write file {path}: {exc}") from exc

    logger.debug("Wrote %d file(s) to %s", len(paths), directory)
    return paths
