from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

from mutagen import MutagenError
from mutagen.id3 import ID3

from ..models import ExtractionError, TagReading
from .artwork import to_data_uri

logger = logging.getLogger(__name__)


class ID3TagExtractor:
    """Reads ID3 frames directly, without going through format detection.

    Used as the fallback when the general reader rejects a file (for example an
    MP3 whose audio frames are damaged but whose tag is intact) and as the
    supplemental source for cover art.
    """

    name = "id3"

    def extract(self, path: Path) -> TagReading:
        tags = self._read(path)
        return TagReading(
            title=self._text(tags, "TIT2"),
            artist=self._text(tags, "TPE1"),
            genre=self._genre(tags),
            album=self._text(tags, "TALB"),
            album_art=self._picture(tags),
        )

    def album_art(self, path: Path) -> str:
        art = self._picture(self._read(path))
        if art is None:
            raise ExtractionError("No album art found with id3")
        return art

    @staticmethod
    def _read(path: Path) -> ID3:
        try:
            return ID3(path)
        except (MutagenError, OSError) as exc:
            raise ExtractionError(f"Failed to extract metadata with id3: {exc}") from exc

    @staticmethod
    def _text(tags: ID3, frame_id: str) -> Optional[str]:
        frames = tags.getall(frame_id)
        if not frames or not frames[0].text:
            return None
        value = str(frames[0].text[0]).strip()
        return value or None

    @staticmethod
    def _genre(tags: ID3) -> Optional[str]:
        frames = tags.getall("TCON")
        if not frames:
            return None
        genres = frames[0].genres or frames[0].text
        if not genres:
            return None
        return str(genres[0]).strip() or None

    @staticmethod
    def _picture(tags: ID3) -> Optional[str]:
        frames = tags.getall("APIC")
        if not frames:
            return None
        picture = frames[0]
        return to_data_uri(picture.data, picture.mime)
