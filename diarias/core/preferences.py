"""Theme and view-mode choices kept on this machine only."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Literal, Optional

from pydantic import BaseModel, ValidationError

from ..config import data_dir

logger = logging.getLogger(__name__)

Theme = Literal["light", "dark"]
ViewMode = Literal["card", "list"]


class Preferences(BaseModel):
    theme: Theme = "light"
    view_mode: ViewMode = "card"


class PreferenceStore:
    """Reads and writes ``preferences.json``; independent of who is signed in."""

    def __init__(self, path: Optional[Path] = None) -> None:
        self.path = path or data_dir() / "preferences.json"

    def load(self) -> Preferences:
        if not self.path.exists():
            return Preferences()
        try:
            return Preferences.model_validate_json(self.path.read_text(encoding="utf-8"))
        except (OSError, ValidationError) as exc:
            logger.warning("Resetting unreadable preferences %s: %s", self.path, exc)
            return Preferences()

    def save(self, prefs: Preferences) -> Preferences:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(json.dumps(prefs.model_dump(), indent=2), encoding="utf-8")
        return prefs

    def update(self, theme: Optional[Theme] = None, view_mode: Optional[ViewMode] = None) -> Preferences:
        prefs = self.load()
        changes = {k: v for k, v in (("theme", theme), ("view_mode", view_mode)) if v is not None}
        return self.save(Preferences.model_validate({**prefs.model_dump(), **changes}))

    def toggle_theme(self) -> Preferences:
        current = self.load()
        return self.update(theme="dark" if current.theme == "light" else "light")
