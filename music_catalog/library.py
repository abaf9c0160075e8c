from __future__ import annotations

import logging
from pathlib import Path
from threading import Lock
from typing import List, Optional

from .fs_utils import remove_file
from .importer import ImportPipeline
from .models import StorageError, TrackRecord
from .store import CatalogStore

logger = logging.getLogger(__name__)


class MusicLibrary:
    """
    Catalog operations exposed to the host shell.

    Every operation that reads or writes the catalog holds ``_lock`` for its
    whole duration, disk I/O included. Each mutation is followed by a full save;
    when the save fails the error propagates but the in-memory change stays, so
    callers should re-list after a failure.
    """

    def __init__(self, store: CatalogStore, pipeline: ImportPipeline) -> None:
        self.store = store
        self.pipeline = pipeline
        self._lock = Lock()

    def upload_file(self, source: str | Path) -> TrackRecord:
        # Copy and tag reading run unlocked; only the commit is serialized.
        record = self.pipeline.prepare(Path(source))
        with self._lock:
            self.store.add(record)
            self.store.persist()
        logger.info("Imported %s as %s", source, record.id)
        return record.copy()

    def get_metadata(self, track_id: str) -> TrackRecord:
        with self._lock:
            return self.store.get(track_id)

    def delete_music(self, track_id: str) -> None:
        with self._lock:
            record = self.store.remove(track_id)
            file_error: Optional[StorageError] = None
            try:
                remove_file(Path(record.path))
            except StorageError as exc:
                logger.warning("Removed %s from catalog but could not delete %s: %s", track_id, record.path, exc)
                file_error = exc
            self.store.persist()
        if file_error is not None:
            raise file_error
        logger.info("Deleted %s (%s)", track_id, record.path)

    def set_favorite(self, track_id: str, favorite: bool) -> None:
        with self._lock:
            self.store.set_favorite(track_id, favorite)
            self.store.persist()
        logger.debug("Set favorite=%s on %s", favorite, track_id)

    def list_all(self) -> List[TrackRecord]:
        with self._lock:
            return self.store.get_all()
