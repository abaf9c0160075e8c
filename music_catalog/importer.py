from __future__ import annotations

import logging
import time
from pathlib import Path
from threading import Lock
from typing import Callable, Iterable, Optional

from .fs_utils import copy_file_contents, ensure_directory
from .models import StorageError, TrackRecord
from .resolver import MetadataResolver

logger = logging.getLogger(__name__)

ID_PREFIX = "music_"


def _now_ms() -> int:
    return time.time_ns() // 1_000_000


def parse_track_id(track_id: str) -> Optional[int]:
    if not track_id.startswith(ID_PREFIX):
        return None
    value = track_id[len(ID_PREFIX):]
    return int(value) if value.isascii() and value.isdigit() else None


class IdGenerator:
    """Hands out ``music_<milliseconds>`` ids that strictly increase, even within one millisecond."""

    def __init__(self, existing: Iterable[str] = (), clock: Callable[[], int] = _now_ms) -> None:
        self._clock = clock
        self._lock = Lock()
        seen = [value for value in (parse_track_id(track_id) for track_id in existing) if value is not None]
        self._last = max(seen, default=0)

    def next_id(self) -> str:
        with self._lock:
            stamp = max(self._clock(), self._last + 1)
            self._last = stamp
        return f"{ID_PREFIX}{stamp}"


class ImportPipeline:
    """Copies a source file into managed storage and builds its catalog record.

    Nothing here touches the catalog; committing the record is up to the caller.
    If resolution fails after the copy, the copied file stays where it is.
    """

    def __init__(self, music_dir: Path, resolver: MetadataResolver, ids: IdGenerator) -> None:
        self.music_dir = music_dir
        self.resolver = resolver
        self.ids = ids

    def destination_for(self, source: Path) -> Path:
        if not source.name:
            raise StorageError("Invalid file path")
        return self.music_dir / source.name

    def prepare(self, source: Path) -> TrackRecord:
        destination = self.destination_for(source)
        if not source.is_file():
            raise StorageError(f"Failed to open source file: {source} is not a file")
        ensure_directory(self.music_dir)
        if destination.exists():
            logger.warning("Overwriting managed file %s", destination)
        size = copy_file_contents(source, destination)
        logger.debug("Copied %s -> %s (%d bytes)", source, destination, size)

        metadata = self.resolver.resolve(destination)
        record = TrackRecord(
            id=self.ids.next_id(),
            title=metadata.title,
            artist=metadata.artist,
            path=str(destination.resolve()),
            favorite=False,
            genre=metadata.genre,
            album=metadata.album,
            album_art=metadata.album_art,
            duration=metadata.duration,
        )
        logger.info("Prepared %s: %s - %s", record.id, record.artist, record.title)
        return record
