from __future__ import annotations

from pathlib import Path
from typing import List, Optional

import yaml
from pydantic import BaseModel, Field, field_validator

from .extractors import ART_SOURCES, DURATION_PROBES, EXTRACTORS

DEFAULT_DATA_ROOT = Path("~/.local/share/music-catalog")
DEFAULT_EXTRACTOR_ORDER = ["mutagen", "id3"]
DEFAULT_ART_SOURCES = ["id3"]
DEFAULT_DURATION_PROBES = ["mpeg", "container"]


class StorageSettings(BaseModel):
    data_root: Path = Field(default=DEFAULT_DATA_ROOT, validate_default=True)
    catalog_filename: str = "music_db.json"
    music_dirname: str = "music"

    @field_validator("data_root", mode="before")
    @classmethod
    def _expand_root(cls, value: str | Path) -> Path:
        return Path(value).expanduser().resolve()

    @property
    def catalog_path(self) -> Path:
        return self.data_root / self.catalog_filename

    @property
    def music_dir(self) -> Path:
        return self.data_root / self.music_dirname


def _check_names(values: List[str], known: dict, kind: str) -> List[str]:
    unknown = [name for name in values if name not in known]
    if unknown:
        raise ValueError(f"Unknown {kind}: {', '.join(unknown)} (known: {', '.join(sorted(known))})")
    return values


class ExtractionSettings(BaseModel):
    extractor_order: List[str] = Field(default_factory=lambda: list(DEFAULT_EXTRACTOR_ORDER))
    art_sources: List[str] = Field(default_factory=lambda: list(DEFAULT_ART_SOURCES))
    duration_probes: List[str] = Field(default_factory=lambda: list(DEFAULT_DURATION_PROBES))

    @field_validator("extractor_order")
    @classmethod
    def _known_extractors(cls, values: List[str]) -> List[str]:
        if not values:
            raise ValueError("extractor_order needs at least one extractor")
        return _check_names(values, EXTRACTORS, "extractor")

    @field_validator("art_sources")
    @classmethod
    def _known_art_sources(cls, values: List[str]) -> List[str]:
        return _check_names(values, ART_SOURCES, "art source")

    @field_validator("duration_probes")
    @classmethod
    def _known_probes(cls, values: List[str]) -> List[str]:
        return _check_names(values, DURATION_PROBES, "duration probe")


class Settings(BaseModel):
    storage: StorageSettings = StorageSettings()
    extraction: ExtractionSettings = ExtractionSettings()

    @classmethod
    def load(cls, path: Optional[Path] = None) -> "Settings":
        if path is None:
            return cls()
        with path.open("r", encoding="utf-8") as fh:
            raw = yaml.safe_load(fh)
        return cls.model_validate(raw or {})


def find_config(explicit_path: Optional[Path]) -> Optional[Path]:
    if explicit_path:
        if not explicit_path.exists():
            raise FileNotFoundError(f"Config file not found: {explicit_path}")
        return explicit_path
    cwd = Path.cwd()
    for candidate in (cwd / "config.yaml", cwd / "config.yml"):
        if candidate.exists():
            return candidate
    return None
