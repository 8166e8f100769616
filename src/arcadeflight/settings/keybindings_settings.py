"""Keybindings settings management.

Default keybindings ship in the packaged ``config/keybindings.yaml``. Users
can override individual actions in:
    ~/.arcadeflight/keybindings.yaml

The packaged file maps action names to pygame key names. The user file holds
a list of overrides, each replacing the default keys of one action or
unbinding it entirely:

    bindings:
      - action: pitch_up
        keys: [i, up]
      - action: toggle_gear
        unbound: true

Typical usage:
    from arcadeflight.settings.keybindings_settings import KeybindingsSettings

    settings = KeybindingsSettings()
    settings.load()
    bindings = settings.effective_bindings()
"""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

from arcadeflight.core.resource_path import get_config_path, get_user_dir

logger = logging.getLogger(__name__)

# Used when the packaged defaults file is missing or unreadable
DEFAULT_BINDINGS: dict[str, list[str]] = {
    "pitch_up": ["w", "up"],
    "pitch_down": ["s", "down"],
    "roll_left": ["a", "left"],
    "roll_right": ["d", "right"],
    "throttle_up": ["left shift", "right shift"],
    "throttle_down": ["left ctrl", "right ctrl"],
    "flaps_extend": ["f"],
    "flaps_retract": ["g"],
    "toggle_pause": ["space"],
    "cycle_camera": ["c"],
    "toggle_gear": ["l"],
    "quit": ["escape"],
}


@dataclass
class BindingOverride:
    """Single binding override from the user file.

    Attributes:
        action: Action name (e.g., "pitch_up").
        keys: List of pygame key names (e.g., ["down", "s"]).
        unbound: If True, action is explicitly unbound.
    """

    action: str
    keys: list[str] = field(default_factory=list)
    unbound: bool = False

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "BindingOverride":
        """Create from dictionary."""
        return cls(
            action=data.get("action", ""),
            keys=[str(k) for k in data.get("keys", [])],
            unbound=data.get("unbound", False),
        )


class KeybindingsSettings:
    """Keybindings with packaged defaults and user overrides.

    Attributes:
        defaults: Action name -> key names from the packaged file.
        overrides: User overrides, in file order.
    """

    def __init__(self, settings_dir: Path | str | None = None) -> None:
        """Initialize keybindings settings.

        Args:
            settings_dir: Directory holding the user override file
                (defaults to ~/.arcadeflight).
        """
        self._settings_dir = Path(settings_dir) if settings_dir is not None else get_user_dir()
        self.defaults: dict[str, list[str]] = {k: list(v) for k, v in DEFAULT_BINDINGS.items()}
        self.overrides: list[BindingOverride] = []

    @property
    def settings_path(self) -> Path:
        """Get path to the user override file."""
        return self._settings_dir / "keybindings.yaml"

    def load_defaults(self, path: Path | str | None = None) -> bool:
        """Load default bindings from the packaged YAML file.

        Args:
            path: Defaults file (packaged config/keybindings.yaml if None).

        Returns:
            True if loaded, False if the built-in defaults remain in use.
        """
        defaults_path = Path(path) if path is not None else get_config_path("keybindings.yaml")
        if not defaults_path.exists():
            logger.warning("Default keybindings not found at %s", defaults_path)
            return False

        try:
            with open(defaults_path, encoding="utf-8") as f:
                data = yaml.safe_load(f) or {}
            bindings = data.get("bindings", {})
            self.defaults = {
                str(action): [str(k) for k in keys] for action, keys in bindings.items()
            }
            logger.debug("Loaded %d default keybindings", len(self.defaults))
            return True

        except Exception as e:
            logger.error("Failed to load default keybindings: %s", e)
            return False

    def load(self) -> bool:
        """Load defaults and the user override file.

        Returns:
            True if a user override file was loaded, False otherwise.
        """
        self.load_defaults()

        if not self.settings_path.exists():
            logger.debug("No user keybindings file at %s", self.settings_path)
            return False

        try:
            with open(self.settings_path, encoding="utf-8") as f:
                data = yaml.safe_load(f) or {}

            self.overrides = [BindingOverride.from_dict(b) for b in data.get("bindings", [])]
            logger.info("Loaded %d keybinding overrides", len(self.overrides))
            return True

        except Exception as e:
            logger.error("Failed to load keybindings: %s", e)
            return False

    def effective_bindings(self) -> dict[str, list[str]]:
        """Defaults with overrides applied.

        Returns:
            Action name -> key names. Unbound actions are omitted.
        """
        bindings = {action: list(keys) for action, keys in self.defaults.items()}
        for override in self.overrides:
            if override.unbound:
                bindings.pop(override.action, None)
            else:
                bindings[override.action] = list(override.keys)
        return bindings

    def detect_conflicts(self) -> list[dict[str, Any]]:
        """Find keys bound to more than one action.

        Returns:
            List of {"key": name, "actions": [...]} descriptions.
        """
        seen: dict[str, list[str]] = {}
        for action, keys in self.effective_bindings().items():
            for key in keys:
                seen.setdefault(key.lower(), []).append(action)

        return [
            {"key": key, "actions": actions} for key, actions in seen.items() if len(actions) > 1
        ]
