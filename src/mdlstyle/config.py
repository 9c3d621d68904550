"""StyleSettings dataclass and loader for mdlstyle's own settings."""

from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass
from pathlib import Path

logger = logging.getLogger(__name__)

DEFAULT_STYLE_FILENAME = ".mdl_style.rb"
SETTINGS_FILENAME = ".mdlstyle.json"


@dataclass
class StyleSettings:
    strict: bool = True
    filename: str = DEFAULT_STYLE_FILENAME


def load_settings(path: Path | None = None) -> StyleSettings:
    """Load settings from the "mdlstyle" section of .mdlstyle.json, then env vars."""
    settings = StyleSettings()
    if path is None:
        path = Path.cwd() / SETTINGS_FILENAME
    if path.exists():
        try:
            text = path.read_text(encoding="utf-8")
            if text.strip():
                data = json.loads(text)
                section = data.get("mdlstyle", {}) if isinstance(data, dict) else {}
                if isinstance(section, dict):
                    _apply(settings, section)
        except (json.JSONDecodeError, OSError) as e:
            logger.warning(f"Failed to load mdlstyle settings from {path}: {e}")
    if env_strict := os.environ.get("MDLSTYLE_STRICT"):
        settings.strict = env_strict.lower() in ("true", "1", "yes")
    if env_filename := os.environ.get("MDLSTYLE_FILENAME"):
        settings.filename = env_filename
    return settings


def _apply(settings: StyleSettings, data: dict[str, object]) -> None:
    if "strict" in data and isinstance(data["strict"], bool):
        settings.strict = data["strict"]
    if "filename" in data and isinstance(data["filename"], str) and data["filename"]:
        settings.filename = data["filename"]
