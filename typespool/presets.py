"""Named option presets stored in the user's config directory.

Presets are plain option mappings (see TypewriterOptions.to_mapping) kept in
a single JSON file, so a favourite animation can be replayed by name.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Dict, Optional

import platformdirs

from .config import TypewriterOptions
from .errors import ConfigError

logger = logging.getLogger(__name__)


class PresetStore:
    """Manages persistent storage of named presets.

    Presets live in ``presets.json`` in the platform config directory,
    mapping preset names to option mappings.
    """

    def __init__(self, config_dir: Optional[Path] = None):
        """Initialize preset storage, optionally in a custom directory."""
        self._config_dir = Path(config_dir or platformdirs.user_config_dir("typespool"))
        self._presets_file = self._config_dir / "presets.json"
        self._cache: Optional[Dict[str, Dict[str, Any]]] = None

    @property
    def path(self) -> Path:
        return self._presets_file

    def _ensure_config_dir(self) -> None:
        try:
            self._config_dir.mkdir(parents=True, exist_ok=True)
        except (OSError, PermissionError) as e:
            logger.warning(f"Could not create config directory {self._config_dir}: {e}")

    def _load_all(self) -> Dict[str, Dict[str, Any]]:
        """Load every preset from disk.

        Returns:
            Mapping of preset names to option mappings. Empty if the file
            doesn't exist or can't be read.
        """
        if self._cache is not None:
            return self._cache

        if not self._presets_file.exists():
            self._cache = {}
            return self._cache

        try:
            with open(self._presets_file, 'r', encoding='utf-8') as f:
                data = json.load(f)
        except (json.JSONDecodeError, OSError) as e:
            logger.warning(f"Could not load presets from {self._presets_file}: {e}")
            self._cache = {}
            return self._cache

        if not isinstance(data, dict):
            logger.warning("Presets file has invalid format (not a dict), ignoring")
            data = {}
        self._cache = data
        return self._cache

    def _save_all(self, presets: Dict[str, Dict[str, Any]]) -> bool:
        """Save every preset to disk atomically (temp file + rename)."""
        self._ensure_config_dir()
        temp_file = self._presets_file.with_suffix('.tmp')
        try:
            with open(temp_file, 'w', encoding='utf-8') as f:
                json.dump(presets, f, indent=2)
            temp_file.replace(self._presets_file)
            self._cache = presets
            return True
        except (OSError, TypeError) as e:
            logger.warning(f"Could not save presets to {self._presets_file}: {e}")
            try:
                if temp_file.exists():
                    temp_file.unlink()
            except OSError:
                pass
            return False

    def list_presets(self) -> list[str]:
        return sorted(self._load_all())

    def load_preset(self, name: str, **overrides) -> TypewriterOptions:
        """Build options from a stored preset.

        Args:
            name: Preset name.
            **overrides: Options that replace the stored ones.

        Raises:
            ConfigError: If the preset doesn't exist or holds invalid options.
        """
        presets = self._load_all()
        if name not in presets:
            raise ConfigError(f"Unknown preset: {name!r}")
        stored = presets[name]
        if not isinstance(stored, dict):
            raise ConfigError(f"Preset {name!r} is not a mapping")
        return TypewriterOptions.from_mapping({**stored, **overrides})

    def save_preset(self, name: str, options: TypewriterOptions) -> bool:
        """Store options under a name, replacing any preset with that name."""
        if not name:
            raise ConfigError("Preset name must not be empty")
        presets = dict(self._load_all())
        presets[name] = options.to_mapping()
        return self._save_all(presets)

    def delete_preset(self, name: str) -> bool:
        presets = dict(self._load_all())
        if presets.pop(name, None) is None:
            return False
        return self._save_all(presets)

    def clear_cache(self) -> None:
        """Clear the in-memory cache of presets."""
        self._cache = None


# Global instance
_store: Optional[PresetStore] = None


def get_presets() -> PresetStore:
    """Get the global preset store instance."""
    global _store
    if _store is None:
        _store = PresetStore()
    return _store
