from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional, Sequence

from .config import ExtractionSettings
from .extractors import ART_SOURCES, DURATION_PROBES, EXTRACTORS
from .extractors.protocols import AlbumArtSource, DurationProbe, TagExtractor
from .models import DurationUnavailable, ExtractionError, ResolvedMetadata, TagReading

logger = logging.getLogger(__name__)


class MetadataResolver:
    """
    Best-effort metadata for one audio file.

    Title, artist, genre and album come from a single reading: the first
    extractor in order that can parse the file. Album art and duration are the
    fields most often missing from any one reader, so when the chosen reading
    lacks them they are looked up separately from the art sources and duration
    probes. Extraction problems never escape; defaults fill whatever is left.
    """

    def __init__(
        self,
        extractors: Sequence[TagExtractor],
        art_sources: Sequence[AlbumArtSource] = (),
        duration_probes: Sequence[DurationProbe] = (),
    ) -> None:
        if not extractors:
            raise ValueError("MetadataResolver needs at least one extractor")
        self.extractors = list(extractors)
        self.art_sources = list(art_sources)
        self.duration_probes = list(duration_probes)

    @classmethod
    def from_settings(cls, settings: Optional[ExtractionSettings] = None) -> "MetadataResolver":
        settings = settings or ExtractionSettings()
        # One instance per strategy name, so the id3 reader serves both roles.
        instances: dict[str, object] = {}

        def build(name: str, registry: dict) -> object:
            if name not in registry:
                raise ValueError(f"Unknown metadata strategy: {name}")
            if name not in instances:
                instances[name] = registry[name]()
            return instances[name]

        return cls(
            extractors=[build(name, EXTRACTORS) for name in settings.extractor_order],
            art_sources=[build(name, ART_SOURCES) for name in settings.art_sources],
            duration_probes=[build(name, DURATION_PROBES) for name in settings.duration_probes],
        )

    def resolve(self, path: Path) -> ResolvedMetadata:
        reading = self._first_reading(path)
        if reading is None:
            logger.warning("No tag reader could parse %s; using defaults", path)
            reading = TagReading()
        if reading.album_art is None:
            reading.album_art = self._album_art(path)
        if reading.duration is None:
            reading.duration = self._duration(path)
        return ResolvedMetadata.from_reading(path, reading)

    def _first_reading(self, path: Path) -> Optional[TagReading]:
        for extractor in self.extractors:
            try:
                reading = extractor.extract(path)
            except ExtractionError as exc:
                logger.debug("%s could not read %s: %s", extractor.name, path, exc)
                continue
            logger.debug("Read tags for %s with %s", path, extractor.name)
            return reading
        return None

    def _album_art(self, path: Path) -> Optional[str]:
        for source in self.art_sources:
            try:
                art = source.album_art(path)
            except ExtractionError as exc:
                logger.debug("%s found no album art in %s: %s", source.name, path, exc)
                continue
            if art:
                logger.debug("Album art for %s supplied by %s", path, source.name)
                return art
        return None

    def _duration(self, path: Path) -> Optional[int]:
        for probe in self.duration_probes:
            try:
                seconds = probe.probe(path)
            except DurationUnavailable as exc:
                logger.debug("%s probe gave no duration for %s: %s", probe.name, path, exc)
                continue
            if seconds and seconds > 0:
                return seconds
        return None
