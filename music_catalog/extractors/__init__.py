"""Tag-reading strategies consulted by the metadata resolver."""

from .duration import ContainerDurationProbe, MPEGDurationProbe
from .general import MutagenTagExtractor
from .id3 import ID3TagExtractor
from .protocols import AlbumArtSource, DurationProbe, TagExtractor

EXTRACTORS = {
    MutagenTagExtractor.name: MutagenTagExtractor,
    ID3TagExtractor.name: ID3TagExtractor,
}

ART_SOURCES = {
    ID3TagExtractor.name: ID3TagExtractor,
}

DURATION_PROBES = {
    MPEGDurationProbe.name: MPEGDurationProbe,
    ContainerDurationProbe.name: ContainerDurationProbe,
}

__all__ = [
    "ART_SOURCES",
    "AlbumArtSource",
    "ContainerDurationProbe",
    "DURATION_PROBES",
    "DurationProbe",
    "EXTRACTORS",
    "ID3TagExtractor",
    "MPEGDurationProbe",
    "MutagenTagExtractor",
    "TagExtractor",
]
