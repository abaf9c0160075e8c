from __future__ import annotations

from pathlib import Path

from .models import StorageError


def ensure_directory(path: Path) -> Path:
    try:
        path.mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        raise StorageError(f"Failed to create directory {path}: {exc}") from exc
    return path


def copy_file_contents(src: Path, dst: Path) -> int:
    """Copy ``src`` to ``dst`` by reading the whole file and writing it back out.

    An existing ``dst`` is overwritten. Returns the number of bytes written.
    """
    try:
        data = src.read_bytes()
    except OSError as exc:
        raise StorageError(f"Failed to read source file: {exc}") from exc
    try:
        dst.write_bytes(data)
    except OSError as exc:
        raise StorageError(f"Failed to write destination file: {exc}") from exc
    return len(data)


def rewrite_text(path: Path, text: str) -> None:
    """Truncate ``path`` and write ``text``, creating the parent directory if needed."""
    ensure_directory(path.parent)
    try:
        with path.open("w", encoding="utf-8") as fh:
            fh.write(text)
    except OSError as exc:
        raise StorageError(f"Failed to write database: {exc}") from exc


def remove_file(path: Path) -> None:
    try:
        path.unlink()
    except OSError as exc:
        raise StorageError(f"Failed to delete file: {exc}") from exc
