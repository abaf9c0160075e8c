from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from ..config import Settings
from ..models import SerializationError, TrackRecord
from ..resolver import MetadataResolver
from ..store import CatalogStore
from .output import CheckLine, error, ok, preview, warning


@dataclass(slots=True)
class DoctorReport:
    ok: bool
    checks: list[CheckLine]

    def lines(self) -> list[str]:
        return [check.render() for check in self.checks]


def _check_data_root(root: Path) -> CheckLine:
    if not root.exists():
        return warning("Data root", f"{root} does not exist yet")
    if not os.access(root, os.W_OK):
        return error("Data root", f"{root} is not writable")
    return ok("Data root", str(root))


def _read_catalog(path: Path) -> tuple[CheckLine, list[TrackRecord]]:
    if not path.exists():
        return ok("Catalog", f"{path} not created yet"), []
    try:
        tracks = CatalogStore.decode(path.read_text(encoding="utf-8"))
    except (OSError, UnicodeDecodeError) as exc:
        return error("Catalog", f"unreadable: {exc}"), []
    except SerializationError as exc:
        # Startup would silently reset this file to an empty catalog.
        return error("Catalog", f"corrupt, will load as empty: {exc}"), []
    return ok("Catalog", f"{len(tracks)} track(s)"), list(tracks.values())


def _check_missing_files(tracks: list[TrackRecord]) -> CheckLine:
    missing = [track.id for track in tracks if not Path(track.path).is_file()]
    if missing:
        return warning("Managed files", f"{len(missing)} missing: {preview(missing)}")
    return ok("Managed files", "all present")


def _check_orphans(music_dir: Path, tracks: list[TrackRecord]) -> CheckLine:
    if not music_dir.is_dir():
        return ok("Orphaned files", "no music directory")
    referenced = {Path(track.path).name for track in tracks}
    try:
        orphans = sorted(
            entry.name for entry in music_dir.iterdir() if entry.is_file() and entry.name not in referenced
        )
    except OSError as exc:
        return error("Orphaned files", f"cannot list {music_dir}: {exc}")
    if orphans:
        return warning("Orphaned files", f"{len(orphans)} without a catalog entry: {preview(orphans)}")
    return ok("Orphaned files", "none")


def _check_extraction(settings: Settings) -> CheckLine:
    try:
        resolver = MetadataResolver.from_settings(settings.extraction)
    except ValueError as exc:
        return error("Extraction", str(exc))
    chain = " > ".join(extractor.name for extractor in resolver.extractors)
    return ok("Extraction", chain)


def run(settings: Settings) -> DoctorReport:
    """Inspect the data directory without modifying it."""
    storage = settings.storage
    checks = [_check_data_root(storage.data_root)]
    catalog_check, tracks = _read_catalog(storage.catalog_path)
    checks.append(catalog_check)
    checks.append(_check_missing_files(tracks))
    checks.append(_check_orphans(storage.music_dir, tracks))
    checks.append(_check_extraction(settings))
    return DoctorReport(ok=not any(check.failed for check in checks), checks=checks)
