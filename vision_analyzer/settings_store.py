"""Stored user settings layered under the process environment."""

from __future__ import annotations

import logging
import os
from collections.abc import Mapping
from pathlib import Path

from .config import AppConfig

logger = logging.getLogger(__name__)

SETTINGS_DIR = "vision_analyzer"
SETTINGS_FILE = "settings.yaml"


def default_settings_path(
    environ: Mapping[str, str] | None = None,
    *,
    windows: bool | None = None,
) -> Path:
    """Resolve the per-user settings file (``%APPDATA%`` on Windows, XDG elsewhere)."""
    env = os.environ if environ is None else environ
    if windows is None:
        windows = os.name == "nt"
    if windows:
        root = env.get("APPDATA") or str(Path.home() / "AppData" / "Roaming")
    else:
        root = env.get("XDG_CONFIG_HOME") or str(Path.home() / ".config")
    return Path(root).expanduser() / SETTINGS_DIR / SETTINGS_FILE


class SettingsStore:
    """Reads the settings file and overlays ``OPENROUTER_*`` style variables on it.

    ``load`` is what the command line uses: file values first, environment
    second. ``load_stored`` returns the file contents alone, which is what
    ``save`` round-trips.
    """

    def __init__(
        self,
        path: Path | None = None,
        *,
        environ: Mapping[str, str] | None = None,
    ) -> None:
        self._environ = environ
        self._path = path or default_settings_path(environ)

    @property
    def path(self) -> Path:
        return self._path

    @property
    def exists(self) -> bool:
        return self._path.is_file()

    def load_stored(self) -> AppConfig:
        if not self.exists:
            logger.debug("No settings file at %s; using defaults", self._path)
            return AppConfig()
        return AppConfig.load(self._path)

    def load(self) -> AppConfig:
        return AppConfig.from_env(self._environ, base=self.load_stored())

    def save(self, config: AppConfig) -> Path:
        config.save(self._path)
        logger.info("Saved settings to %s", self._path)
        return self._path
