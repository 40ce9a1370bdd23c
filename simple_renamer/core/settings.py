"""
settings.py - User Settings

Saved templates and first-run state, persisted as JSON. The renaming
engine never reads these; the CLI and GUI inject them.
"""

from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import List, Optional
import json
import logging
import os

from .templates import DEFAULT_TEMPLATES, normalize_templates

logger = logging.getLogger(__name__)

SETTINGS_ENV = "SIMPLE_RENAMER_SETTINGS"


def default_settings_path() -> Path:
    override = os.environ.get(SETTINGS_ENV)
    if override:
        return Path(override).expanduser()
    return Path.home() / ".simple_renamer" / "settings.json"


@dataclass
class Settings:
    """User settings"""
    templates: List[str] = field(default_factory=lambda: list(DEFAULT_TEMPLATES))
    has_seen_tutorial: bool = False

    @classmethod
    def load(cls, path: Optional[Path] = None) -> "Settings":
        """Load settings, falling back to defaults if missing or unreadable"""
        path = Path(path) if path else default_settings_path()
        if not path.exists():
            return cls()

        try:
            data = json.loads(path.read_text(encoding="utf-8"))
            templates = normalize_templates(data.get("templates", []))
            return cls(
                templates=templates or list(DEFAULT_TEMPLATES),
                has_seen_tutorial=bool(data.get("has_seen_tutorial", False)),
            )
        except (OSError, ValueError, AttributeError, TypeError) as e:
            logger.warning("Ignoring unreadable settings file %s: %s", path, e)
            return cls()

    def save(self, path: Optional[Path] = None) -> Path:
        path = Path(path) if path else default_settings_path()
        path.parent.mkdir(parents=True, exist_ok=True)
        self.templates = normalize_templates(self.templates)
        path.write_text(json.dumps(asdict(self), ensure_ascii=False, indent=2), encoding="utf-8")
        return path

    def reset_templates(self) -> None:
        self.templates = list(DEFAULT_TEMPLATES)
