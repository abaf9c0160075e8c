from __future__ import annotations

import logging
from dataclasses import dataclass

from .config import Settings
from .fs_utils import ensure_directory
from .host import HostCommands
from .importer import IdGenerator, ImportPipeline
from .library import MusicLibrary
from .models import StorageError
from .resolver import MetadataResolver
from .store import CatalogStore

logger = logging.getLogger(__name__)


@dataclass
class MusicCatalogApp:
    settings: Settings
    store: CatalogStore
    resolver: MetadataResolver
    library: MusicLibrary
    commands: HostCommands

    @classmethod
    def create(cls, settings: Settings) -> "MusicCatalogApp":
        storage = settings.storage
        try:
            ensure_directory(storage.music_dir)
        except StorageError as exc:
            # Import retries the mkdir.
            logger.warning("Could not create music directory %s: %s", storage.music_dir, exc)
        store = CatalogStore(storage.catalog_path)
        store.load()
        resolver = MetadataResolver.from_settings(settings.extraction)
        pipeline = ImportPipeline(storage.music_dir, resolver, IdGenerator(store.ids()))
        library = MusicLibrary(store, pipeline)
        return cls(
            settings=settings,
            store=store,
            resolver=resolver,
            library=library,
            commands=HostCommands(library),
        )

    def close(self) -> None:
        # The last successful save is authoritative; nothing to flush.
        logger.debug("Closing catalog at %s (%d tracks)", self.store.path, len(self.store))
