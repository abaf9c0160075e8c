from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Dict, Iterator, List

from .fs_utils import rewrite_text
from .models import NotFoundError, SerializationError, TrackRecord

logger = logging.getLogger(__name__)


class CatalogStore:
    """
    In-memory catalog of track records backed by a single JSON document.

    The document is rewritten in full by ``persist``; there is no journal. The
    store does no locking of its own: callers serialize access (see
    ``MusicLibrary``) so that a mutation and the save that follows it happen
    under one lock.
    """

    def __init__(self, path: Path) -> None:
        self.path = path
        self._tracks: Dict[str, TrackRecord] = {}

    def load(self) -> None:
        """Replace the in-memory catalog with the document on disk.

        A missing file gives an empty catalog. An unreadable or malformed file
        also gives an empty catalog; the problem is logged and the next
        ``persist`` overwrites it.
        """
        self._tracks = {}
        if not self.path.exists():
            logger.debug("No catalog at %s; starting empty", self.path)
            return
        try:
            raw = self.path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            logger.warning("Failed to read catalog %s, starting empty: %s", self.path, exc)
            return
        try:
            self._tracks = self.decode(raw)
        except SerializationError as exc:
            logger.warning("Catalog %s is not valid, starting empty: %s", self.path, exc)
            return
        logger.info("Loaded %d track(s) from %s", len(self._tracks), self.path)

    def persist(self) -> None:
        rewrite_text(self.path, self.encode())

    def encode(self) -> str:
        document = {"tracks": {track_id: record.to_record() for track_id, record in self._tracks.items()}}
        try:
            return json.dumps(document, indent=2, ensure_ascii=False)
        except (TypeError, ValueError) as exc:
            raise SerializationError(f"Failed to serialize database: {exc}") from exc

    @staticmethod
    def decode(raw: str) -> Dict[str, TrackRecord]:
        try:
            document = json.loads(raw)
        except ValueError as exc:
            raise SerializationError(f"Invalid catalog JSON: {exc}") from exc
        if not isinstance(document, dict) or not isinstance(document.get("tracks"), dict):
            raise SerializationError("Catalog document has no 'tracks' object")
        tracks: Dict[str, TrackRecord] = {}
        for track_id, payload in document["tracks"].items():
            record = TrackRecord.from_record(payload)
            if record.id != track_id:
                raise SerializationError(f"Track key {track_id} does not match record id {record.id}")
            tracks[track_id] = record
        return tracks

    def add(self, record: TrackRecord) -> None:
        self._tracks[record.id] = record

    def remove(self, track_id: str) -> TrackRecord:
        try:
            return self._tracks.pop(track_id)
        except KeyError:
            raise NotFoundError(track_id) from None

    def set_favorite(self, track_id: str, favorite: bool) -> None:
        record = self._tracks.get(track_id)
        if record is None:
            raise NotFoundError(track_id)
        record.favorite = favorite

    def get(self, track_id: str) -> TrackRecord:
        record = self._tracks.get(track_id)
        if record is None:
            raise NotFoundError(track_id)
        return record.copy()

    def get_all(self) -> List[TrackRecord]:
        return [record.copy() for record in self._tracks.values()]

    def ids(self) -> List[str]:
        return list(self._tracks)

    def __contains__(self, track_id: object) -> bool:
        return track_id in self._tracks

    def __len__(self) -> int:
        return len(self._tracks)

    def __iter__(self) -> Iterator[TrackRecord]:
        return iter(self.get_all())
