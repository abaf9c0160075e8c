from __future__ import annotations

from pathlib import Path
from typing import Protocol

from ..models import TagReading


class TagExtractor(Protocol):
    name: str

    def extract(self, path: Path) -> TagReading: ...


class AlbumArtSource(Protocol):
    name: str

    def album_art(self, path: Path) -> str: ...


class DurationProbe(Protocol):
    name: str

    def probe(self, path: Path) -> int: ...
