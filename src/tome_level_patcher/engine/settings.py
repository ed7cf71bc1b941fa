"""User settings for the patcher.

Stored as JSON next to the patch, e.g. {"Format": "Spell Tome (<level>): <spell>"}.
A missing file means defaults; the CLI writes the defaults out so the user
has something to edit.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from tome_level_patcher.errors import SettingsError


DEFAULT_FORMAT = "Spell Tome (<level>): <spell>"


@dataclass(slots=True)
class Settings:
    """Rename template; see rename_format for the recognised tokens."""

    format: str = DEFAULT_FORMAT

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Settings":
        fmt = data.get("Format", DEFAULT_FORMAT)
        if not isinstance(fmt, str):
            raise SettingsError(f"'Format' must be a string, got {fmt!r}")
        return cls(format=fmt)

    def to_dict(self) -> dict[str, Any]:
        return {"Format": self.format}


def load_settings(path: Path) -> Settings:
    if not path.exists():
        return Settings()
    try:
        payload = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        raise SettingsError(f"{path}: invalid JSON: {exc}") from None
    if not isinstance(payload, dict):
        raise SettingsError(f"{path}: settings must be a JSON object")
    return Settings.from_dict(payload)


def write_settings(path: Path, settings: Settings) -> None:
    path.write_text(json.dumps(settings.to_dict(), indent=2) + "\n", encoding="utf-8")
