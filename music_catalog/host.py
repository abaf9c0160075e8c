from __future__ import annotations

import inspect
import logging
from dataclasses import dataclass
from typing import Any, Callable, Dict, Optional

from .library import MusicLibrary
from .models import CatalogError

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class CommandResult:
    ok: bool
    data: Any = None
    error: Optional[str] = None

    def to_payload(self) -> Dict[str, Any]:
        if self.ok:
            return {"ok": True, "data": self.data}
        return {"ok": False, "error": self.error}


def _success(data: Any = None) -> CommandResult:
    return CommandResult(ok=True, data=data)


def _failure(message: str) -> CommandResult:
    return CommandResult(ok=False, error=message)


class HostCommands:
    """Request/response surface for the desktop shell.

    Each command returns either its payload (records as plain dicts) or an
    error string; catalog failures never escape as exceptions.
    """

    def __init__(self, library: MusicLibrary) -> None:
        self.library = library
        self._commands: Dict[str, Callable[..., CommandResult]] = {
            "upload_music_file": self.upload_music_file,
            "get_music_metadata": self.get_music_metadata,
            "delete_music": self.delete_music,
            "set_favorite": self.set_favorite,
            "get_all_music": self.get_all_music,
        }

    @property
    def names(self) -> list[str]:
        return sorted(self._commands)

    def invoke(self, name: str, /, **kwargs: Any) -> CommandResult:
        handler = self._commands.get(name)
        if handler is None:
            return _failure(f"Unknown command: {name}")
        try:
            inspect.signature(handler).bind(**kwargs)
        except TypeError as exc:
            return _failure(f"Invalid arguments for {name}: {exc}")
        return handler(**kwargs)

    def upload_music_file(self, file_path: str) -> CommandResult:
        try:
            record = self.library.upload_file(file_path)
        except CatalogError as exc:
            logger.error("Upload of %s failed: %s", file_path, exc)
            return _failure(str(exc))
        return _success(record.to_record())

    def get_music_metadata(self, id: str) -> CommandResult:
        try:
            record = self.library.get_metadata(id)
        except CatalogError as exc:
            return _failure(str(exc))
        return _success(record.to_record())

    def delete_music(self, id: str) -> CommandResult:
        try:
            self.library.delete_music(id)
        except CatalogError as exc:
            logger.error("Delete of %s failed: %s", id, exc)
            return _failure(str(exc))
        return _success()

    def set_favorite(self, id: str, favorite: bool) -> CommandResult:
        if not isinstance(favorite, bool):
            return _failure(f"Invalid favorite value for {id}: expected a boolean, got {favorite!r}")
        try:
            self.library.set_favorite(id, favorite)
        except CatalogError as exc:
            return _failure(str(exc))
        return _success()

    def get_all_music(self) -> CommandResult:
        return _success([record.to_record() for record in self.library.list_all()])
