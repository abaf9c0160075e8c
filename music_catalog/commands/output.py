from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

OK = "OK"
WARNING = "WARNING"
ERROR = "ERROR"


@dataclass(frozen=True, slots=True)
class CheckLine:
    label: str
    status: str
    detail: Optional[str] = None

    @property
    def failed(self) -> bool:
        return self.status == ERROR

    def render(self) -> str:
        if self.detail:
            return f"{self.label}: {self.status} ({self.detail})"
        return f"{self.label}: {self.status}"


def ok(label: str, detail: Optional[str] = None) -> CheckLine:
    return CheckLine(label, OK, detail)


def warning(label: str, detail: Optional[str] = None) -> CheckLine:
    return CheckLine(label, WARNING, detail)


def error(label: str, detail: Optional[str] = None) -> CheckLine:
    return CheckLine(label, ERROR, detail)


def preview(items: list[str], limit: int = 3) -> str:
    shown = ", ".join(items[:limit])
    if len(items) > limit:
        shown += f", +{len(items) - limit} more"
    return shown
