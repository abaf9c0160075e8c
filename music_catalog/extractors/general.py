from __future__ import annotations

import base64
import binascii
import logging
from pathlib import Path
from typing import Any, Optional

from mutagen import File as MutagenFile
from mutagen import MutagenError
from mutagen.flac import Picture
from mutagen.id3 import ID3
from mutagen.mp4 import MP4Cover, MP4Tags

from ..models import ExtractionError, TagReading
from .artwork import to_data_uri

logger = logging.getLogger(__name__)

_MP4_COVER_MIME = {
    MP4Cover.FORMAT_JPEG: "image/jpeg",
    MP4Cover.FORMAT_PNG: "image/png",
}


class MutagenTagExtractor:
    """General multi-format reader: ID3, MP4 atoms, Vorbis comments and FLAC pictures."""

    name = "mutagen"

    def extract(self, path: Path) -> TagReading:
        try:
            audio = MutagenFile(path)
        except (MutagenError, OSError) as exc:
            raise ExtractionError(f"Failed to extract metadata with mutagen: {exc}") from exc
        if audio is None:
            raise ExtractionError(f"Failed to extract metadata with mutagen: unsupported format {path.suffix or path.name}")

        reading = TagReading(duration=self._duration(audio))
        tags = audio.tags
        if tags is not None:
            if isinstance(tags, ID3):
                reading.title = self._id3_text(tags, "TIT2")
                reading.artist = self._id3_text(tags, "TPE1")
                reading.album = self._id3_text(tags, "TALB")
                reading.genre = self._id3_genre(tags)
            elif isinstance(tags, MP4Tags):
                reading.title = self._mp4_text(tags, "\xa9nam")
                reading.artist = self._mp4_text(tags, "\xa9ART")
                reading.album = self._mp4_text(tags, "\xa9alb")
                reading.genre = self._mp4_text(tags, "\xa9gen")
            else:
                reading.title = self._vorbis_text(tags, "title")
                reading.artist = self._vorbis_text(tags, "artist")
                reading.album = self._vorbis_text(tags, "album")
                reading.genre = self._vorbis_text(tags, "genre")
        reading.album_art = self._album_art(audio)
        return reading

    @staticmethod
    def _duration(audio: Any) -> Optional[int]:
        info = getattr(audio, "info", None)
        length = getattr(info, "length", None)
        if not length:
            return None
        seconds = int(length)
        return seconds if seconds > 0 else None

    @staticmethod
    def _clean(value: Any) -> Optional[str]:
        if value is None:
            return None
        if isinstance(value, bytes):
            value = value.decode("utf-8", errors="replace")
        text = str(value).strip()
        return text or None

    def _id3_text(self, tags: ID3, frame_id: str) -> Optional[str]:
        frames = tags.getall(frame_id)
        if not frames or not frames[0].text:
            return None
        return self._clean(frames[0].text[0])

    def _id3_genre(self, tags: ID3) -> Optional[str]:
        frames = tags.getall("TCON")
        if not frames:
            return None
        # TCON.genres expands numeric references such as "(13)".
        genres = getattr(frames[0], "genres", None) or frames[0].text
        return self._clean(genres[0]) if genres else None

    def _mp4_text(self, tags: Any, key: str) -> Optional[str]:
        value = tags.get(key)
        if not value:
            return None
        return self._clean(value[0])

    def _vorbis_text(self, tags: Any, key: str) -> Optional[str]:
        try:
            value = tags.get(key) or tags.get(key.upper())
        except (KeyError, ValueError):
            return None
        if not value:
            return None
        if isinstance(value, (list, tuple)):
            return self._clean(value[0])
        return self._clean(value)

    def _album_art(self, audio: Any) -> Optional[str]:
        pictures = getattr(audio, "pictures", None)
        if pictures:
            return to_data_uri(pictures[0].data, pictures[0].mime)

        tags = audio.tags
        if tags is None:
            return None
        if isinstance(tags, ID3):
            frames = tags.getall("APIC")
            if frames:
                return to_data_uri(frames[0].data, frames[0].mime)
            return None
        if isinstance(tags, MP4Tags):
            covers = tags.get("covr")
            if not covers:
                return None
            cover = covers[0]
            return to_data_uri(bytes(cover), _MP4_COVER_MIME.get(getattr(cover, "imageformat", None)))
        return self._vorbis_picture(tags)

    def _vorbis_picture(self, tags: Any) -> Optional[str]:
        try:
            blocks = tags.get("metadata_block_picture")
        except (KeyError, ValueError):
            return None
        for block in blocks or []:
            try:
                picture = Picture(base64.b64decode(block))
            except (binascii.Error, MutagenError, ValueError) as exc:
                logger.debug("Skipping malformed embedded picture: %s", exc)
                continue
            return to_data_uri(picture.data, picture.mime)
        return None
