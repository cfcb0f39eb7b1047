"""Theme system for the dashboard TUI.

Dark and light palettes for the chrome around the status panel. Metric,
persona and banner colors come from the rendered view and do not change
with the theme.
"""

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Literal

from ..core.global_paths import GlobalPath
from ..util.log import Log

log = Log.create({"service": "tui.theme"})

ThemeMode = Literal["dark", "light"]


@dataclass(frozen=True)
class Theme:
    """Theme color definitions as hex strings."""

    name: str
    background: str
    background_panel: str
    text: str
    text_muted: str
    primary: str
    success: str
    warning: str
    error: str
    border: str


DARK_THEME = Theme(
    name="dark",
    background="#0a0a0a",
    background_panel="#141414",
    text="#eeeeee",
    text_muted="#808080",
    primary="#3b7dd8",
    success="#4ade80",
    warning="#fbbf24",
    error="#f87171",
    border="#333333",
)

LIGHT_THEME = Theme(
    name="light",
    background="#ffffff",
    background_panel="#f5f5f5",
    text="#1a1a1a",
    text_muted="#666666",
    primary="#2563eb",
    success="#16a34a",
    warning="#ca8a04",
    error="#dc2626",
    border="#d1d5db",
)

THEMES: Dict[str, Theme] = {
    "dark": DARK_THEME,
    "light": LIGHT_THEME,
}


class ThemeManager:
    """Theme selection and persistence.

    The preference lives in the state directory so that toggling the
    theme in the TUI survives restarts without touching config files.
    """

    _mode: ThemeMode = "dark"

    @classmethod
    def get_theme(cls) -> Theme:
        return THEMES[cls._mode]

    @classmethod
    def get_mode(cls) -> ThemeMode:
        return cls._mode

    @classmethod
    def set_mode(cls, mode: ThemeMode, *, persist: bool = True) -> None:
        if mode not in THEMES:
            raise ValueError(f"unknown theme: {mode}")
        cls._mode = mode
        if persist:
            cls._save_preference()

    @classmethod
    def toggle_mode(cls) -> ThemeMode:
        """Toggle between dark and light mode and return the new mode."""
        new_mode: ThemeMode = "light" if cls._mode == "dark" else "dark"
        cls.set_mode(new_mode)
        return new_mode

    @classmethod
    def _get_prefs_path(cls) -> Path:
        return Path(GlobalPath.state()) / "theme.json"

    @classmethod
    def _save_preference(cls) -> None:
        prefs_path = cls._get_prefs_path()
        try:
            prefs_path.parent.mkdir(parents=True, exist_ok=True)
            prefs_path.write_text(json.dumps({"mode": cls._mode}), encoding="utf-8")
        except OSError as e:
            log.warn("failed to save theme preference", {"path": str(prefs_path), "error": str(e)})

    @classmethod
    def load_preference(cls) -> ThemeMode:
        """Load the saved mode; keeps the current one if nothing usable is stored."""
        prefs_path = cls._get_prefs_path()
        if not prefs_path.exists():
            return cls._mode
        try:
            data = json.loads(prefs_path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as e:
            log.warn("failed to read theme preference", {"path": str(prefs_path), "error": str(e)})
            return cls._mode
        mode = data.get("mode") if isinstance(data, dict) else None
        if mode in THEMES:
            cls._mode = mode
        return cls._mode
