from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Optional

import av
from av.error import FFmpegError
from mutagen import MutagenError
from mutagen.mp3 import MP3

from ..models import DurationUnavailable

logger = logging.getLogger(__name__)

# Container durations are reported in AV_TIME_BASE units.
AV_TIME_BASE = 1_000_000


class MPEGDurationProbe:
    """Computes duration from the MPEG audio frames (Xing/VBRI header or CBR estimate)."""

    name = "mpeg"

    def probe(self, path: Path) -> int:
        try:
            audio = MP3(path)
        except (MutagenError, OSError) as exc:
            raise DurationUnavailable(f"Failed to extract duration: {exc}") from exc
        seconds = int(audio.info.length or 0)
        if seconds <= 0:
            raise DurationUnavailable("Could not determine duration")
        return seconds


class ContainerDurationProbe:
    """Opens the file with FFmpeg (PyAV) and derives duration from stream timing."""

    name = "container"

    def probe(self, path: Path) -> int:
        try:
            with av.open(str(path), metadata_errors="ignore") as container:
                for stream in container.streams:
                    seconds = self._stream_seconds(stream)
                    if seconds:
                        return seconds
                seconds = self._container_seconds(container)
        except (FFmpegError, OSError, UnicodeDecodeError, ValueError) as exc:
            raise DurationUnavailable(f"Error while probing media: {exc}") from exc
        if seconds:
            return seconds
        raise DurationUnavailable("Could not determine duration")

    @staticmethod
    def _stream_seconds(stream: Any) -> Optional[int]:
        # stream.duration counts ticks of time_base (sample frames for most audio codecs).
        ticks = getattr(stream, "duration", None)
        time_base = getattr(stream, "time_base", None)
        if ticks and time_base and time_base.denominator > 0:
            seconds = int(ticks * time_base)
            if seconds > 0:
                return seconds
        frames = getattr(stream, "frames", None)
        sample_rate = getattr(stream, "sample_rate", None)
        frame_size = getattr(getattr(stream, "codec_context", None), "frame_size", None)
        if frames and sample_rate and frame_size:
            seconds = (frames * frame_size) // sample_rate
            if seconds > 0:
                return seconds
        return None

    @staticmethod
    def _container_seconds(container: Any) -> Optional[int]:
        duration = getattr(container, "duration", None)
        if not duration:
            return None
        seconds = int(duration // AV_TIME_BASE)
        return seconds if seconds > 0 else None
