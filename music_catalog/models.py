from __future__ import annotations

from dataclasses import asdict, dataclass, fields, replace
from pathlib import Path
from typing import Any, Dict, Optional

UNKNOWN_TITLE = "Unknown Title"
UNKNOWN_ARTIST = "Unknown Artist"


@dataclass(slots=True)
class TrackRecord:
    id: str
    title: str
    artist: str
    path: str
    favorite: bool = False
    genre: Optional[str] = None
    album: Optional[str] = None
    album_art: Optional[str] = None
    duration: Optional[int] = None

    def to_record(self) -> Dict[str, object]:
        return asdict(self)

    def copy(self) -> "TrackRecord":
        return replace(self)

    @classmethod
    def from_record(cls, payload: Any) -> "TrackRecord":
        if not isinstance(payload, dict):
            raise SerializationError(f"Track entry must be an object, got {type(payload).__name__}")
        for key in ("id", "title", "artist", "path"):
            if not isinstance(payload.get(key), str):
                raise SerializationError(f"Track entry has invalid '{key}'")
        favorite = payload.get("favorite", False)
        if not isinstance(favorite, bool):
            raise SerializationError("Track entry has invalid 'favorite'")
        duration = payload.get("duration")
        if duration is not None and (isinstance(duration, bool) or not isinstance(duration, int)):
            raise SerializationError("Track entry has invalid 'duration'")
        for key in ("genre", "album", "album_art"):
            value = payload.get(key)
            if value is not None and not isinstance(value, str):
                raise SerializationError(f"Track entry has invalid '{key}'")
        known = {f.name for f in fields(cls)}
        return cls(**{key: value for key, value in payload.items() if key in known})


@dataclass(slots=True)
class TagReading:
    """Partial metadata produced by a single extractor; any field may be missing."""

    title: Optional[str] = None
    artist: Optional[str] = None
    genre: Optional[str] = None
    album: Optional[str] = None
    album_art: Optional[str] = None
    duration: Optional[int] = None


@dataclass(slots=True)
class ResolvedMetadata:
    title: str
    artist: str
    genre: Optional[str] = None
    album: Optional[str] = None
    album_art: Optional[str] = None
    duration: Optional[int] = None

    @classmethod
    def from_reading(cls, path: Path, reading: TagReading) -> "ResolvedMetadata":
        return cls(
            title=reading.title or default_title(path),
            artist=reading.artist or UNKNOWN_ARTIST,
            genre=reading.genre,
            album=reading.album,
            album_art=reading.album_art,
            duration=reading.duration,
        )


def default_title(path: Path) -> str:
    return path.stem or UNKNOWN_TITLE


class CatalogError(Exception):
    """Base class for failures reported back to the caller of a catalog operation."""


class NotFoundError(CatalogError):
    def __init__(self, track_id: str) -> None:
        super().__init__(f"Track with id {track_id} not found")
        self.track_id = track_id


class StorageError(CatalogError):
    """Raised when a file cannot be opened, read, written, copied or deleted."""


class SerializationError(CatalogError):
    """Raised when the catalog document cannot be encoded or decoded."""


class ExtractionError(Exception):
    """Raised when a tag reader cannot parse a file; callers fall back to another reader."""


class DurationUnavailable(ExtractionError):
    """Raised when a probe finds no usable timing data."""
