from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Optional, Sequence

from .app import MusicCatalogApp
from .commands import doctor as cmd_doctor
from .config import Settings, find_config
from .host import CommandResult

LOG_FORMAT = "%(levelname).1s | %(name)s | %(message)s"

C_RESET = "\033[0m"
LEVEL_COLORS = {
    logging.DEBUG: "\033[36m",  # Cyan
    logging.INFO: "\033[37m",  # Light gray
    logging.WARNING: "\033[33m",  # Yellow
    logging.ERROR: "\033[31m",  # Red
    logging.CRITICAL: "\033[35m",  # Magenta
}


class ShortPathFormatter(logging.Formatter):
    """Strips the data root from log messages so managed paths stay readable."""

    def __init__(self, fmt: str, roots: list[Path]) -> None:
        super().__init__(fmt)
        self.roots = [str(root) for root in roots if root]

    def _shorten(self, message: str) -> str:
        for root in self.roots:
            message = message.replace(f"{root}/", "")
            message = message.replace(root, "")
        return message

    def format(self, record: logging.LogRecord) -> str:
        return self._shorten(super().format(record))


class ColorFormatter(ShortPathFormatter):
    def format(self, record: logging.LogRecord) -> str:
        message = super().format(record)
        color = LEVEL_COLORS.get(record.levelno)
        if not color:
            return message
        return f"{color}{message}{C_RESET}"


def configure_logging(level_name: str, roots: list[Path]) -> None:
    level = getattr(logging, level_name.upper(), logging.INFO)
    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.setLevel(level)
    handler = logging.StreamHandler(sys.stderr)
    if sys.stderr.isatty():
        handler.setFormatter(ColorFormatter(LOG_FORMAT, roots))
    else:
        handler.setFormatter(ShortPathFormatter(LOG_FORMAT, roots))
    root_logger.addHandler(handler)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="music-catalog", description="Local music catalog")
    parser.add_argument("--config", type=Path, help="Path to config.yaml")
    parser.add_argument("--log-level", default="WARNING", help="Python logging level")

    subparsers = parser.add_subparsers(dest="command", required=True)
    upload_parser = subparsers.add_parser("upload", help="Import audio files into the catalog")
    upload_parser.add_argument("paths", nargs="+", type=Path)
    show_parser = subparsers.add_parser("show", help="Print one track record")
    show_parser.add_argument("id")
    delete_parser = subparsers.add_parser("delete", help="Remove a track and its managed file")
    delete_parser.add_argument("id")
    favorite_parser = subparsers.add_parser("favorite", help="Mark a track as favorite")
    favorite_parser.add_argument("id")
    favorite_parser.add_argument("--off", action="store_true", help="Clear the favorite flag instead")
    subparsers.add_parser("list", help="Print every track record")
    subparsers.add_parser("doctor", help="Check the data directory and catalog file")
    return parser


def _emit(result: CommandResult) -> bool:
    if result.ok:
        if result.data is not None:
            print(json.dumps(result.data, indent=2, ensure_ascii=False))
        return True
    print(f"error: {result.error}", file=sys.stderr)
    return False


def main(argv: Optional[Sequence[str]] = None) -> None:
    args = build_parser().parse_args(argv)
    settings = Settings.load(find_config(args.config))
    configure_logging(args.log_level, [settings.storage.data_root])

    if args.command == "doctor":
        report = cmd_doctor.run(settings)
        for line in report.lines():
            print(line)
        if not report.ok:
            raise SystemExit(1)
        return

    app = MusicCatalogApp.create(settings)
    commands = app.commands
    succeeded = True
    try:
        match args.command:
            case "upload":
                for path in args.paths:
                    succeeded = _emit(commands.upload_music_file(str(path.expanduser().resolve()))) and succeeded
            case "show":
                succeeded = _emit(commands.get_music_metadata(args.id))
            case "delete":
                succeeded = _emit(commands.delete_music(args.id))
            case "favorite":
                succeeded = _emit(commands.set_favorite(args.id, not args.off))
            case "list":
                succeeded = _emit(commands.get_all_music())
            case _:
                raise SystemExit(f"Unknown command: {args.command}")
    finally:
        app.close()
    if not succeeded:
        raise SystemExit(1)
