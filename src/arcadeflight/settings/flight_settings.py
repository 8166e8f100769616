"""Flight model and simulation settings.

Settings are read from the packaged ``config/flight_model.yaml`` and may be
overridden by ``~/.arcadeflight/flight_model.yaml``. The file selects a
flight model preset and optional per-field overrides:

    preset: aerodynamic
    overrides:
      gravity_per_tick: 0.012
    simulation:
      start_paused: true
      initial_camera: chase
      max_ticks_per_frame: 5

Typical usage:
    from arcadeflight.settings import FlightSettings

    settings = FlightSettings()
    settings.load()
    config = settings.build_config()
"""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

from arcadeflight.core.resource_path import get_config_path, get_user_dir
from arcadeflight.physics.flight_model.base import FlightModelConfig

logger = logging.getLogger(__name__)

PRESET_AERODYNAMIC = "aerodynamic"
PRESET_BASELINE = "baseline"

PRESETS: dict[str, FlightModelConfig] = {
    PRESET_AERODYNAMIC: FlightModelConfig.aerodynamic(),
    PRESET_BASELINE: FlightModelConfig.baseline(),
}

CAMERA_MODES = ("chase", "cockpit", "free")


def get_preset(name: str) -> FlightModelConfig:
    """Look up a flight model preset.

    Args:
        name: Preset name ("aerodynamic" or "baseline").

    Returns:
        Preset configuration.

    Raises:
        ValueError: If the preset is unknown.
    """
    try:
        return PRESETS[name.lower()]
    except KeyError:
        raise ValueError(
            f"Unknown flight model preset: {name!r} (expected one of {sorted(PRESETS)})"
        ) from None


def resolve_flight_config(data: dict[str, Any]) -> FlightModelConfig:
    """Build a FlightModelConfig from a preset name plus overrides.

    Args:
        data: Dictionary with an optional "preset" key; every other key is
            treated as a FlightModelConfig field override.

    Returns:
        Resolved configuration.

    Raises:
        ValueError: If the preset is unknown or an override is invalid.
    """
    base = get_preset(data.get("preset", PRESET_AERODYNAMIC))
    overrides = {key: value for key, value in data.items() if key != "preset"}
    return FlightModelConfig.from_dict(overrides, base=base)


@dataclass
class FlightSettings:
    """Flight model and simulation settings.

    Attributes:
        preset: Flight model preset name.
        overrides: FlightModelConfig field overrides applied on top of the preset.
        start_paused: Whether the simulation waits for the start action.
        initial_camera: Camera mode at startup ("chase", "cockpit" or "free").
        max_ticks_per_frame: Upper bound on ticks integrated per rendered frame.
    """

    preset: str = PRESET_AERODYNAMIC
    overrides: dict[str, Any] = field(default_factory=dict)
    start_paused: bool = True
    initial_camera: str = "chase"
    max_ticks_per_frame: int = 5

    def build_config(self) -> FlightModelConfig:
        """Resolve the flight model configuration.

        Raises:
            ValueError: If the preset or an override is invalid.
        """
        return resolve_flight_config({"preset": self.preset, **self.overrides})

    def apply(self, data: dict[str, Any]) -> None:
        """Merge values from a settings dictionary.

        Every value is validated before any is assigned, so a rejected
        dictionary leaves the settings unchanged.

        Args:
            data: Parsed YAML content.

        Raises:
            ValueError: If a section or value has the wrong type, the preset
                is unknown or an override is invalid.
        """
        if not isinstance(data, dict):
            raise ValueError(f"settings must be a mapping, got {type(data).__name__}")

        preset = str(data.get("preset", self.preset))
        overrides = data.get("overrides") or {}
        if not isinstance(overrides, dict):
            raise ValueError(f"overrides must be a mapping, got {overrides!r}")
        merged = {**self.overrides, **overrides}
        resolve_flight_config({"preset": preset, **merged})

        simulation = data.get("simulation") or {}
        if not isinstance(simulation, dict):
            raise ValueError(f"simulation must be a mapping, got {simulation!r}")

        start_paused = simulation.get("start_paused", self.start_paused)
        if not isinstance(start_paused, bool):
            raise ValueError(f"start_paused must be a boolean, got {start_paused!r}")

        max_ticks = simulation.get("max_ticks_per_frame", self.max_ticks_per_frame)
        if isinstance(max_ticks, bool) or not isinstance(max_ticks, int):
            raise ValueError(f"max_ticks_per_frame must be an integer, got {max_ticks!r}")

        initial_camera = self.initial_camera
        camera = simulation.get("initial_camera")
        if camera is not None:
            if str(camera).lower() in CAMERA_MODES:
                initial_camera = str(camera).lower()
            else:
                logger.warning("Unknown initial camera %r, keeping %s", camera, initial_camera)

        self.preset = preset
        self.overrides = merged
        self.start_paused = start_paused
        self.initial_camera = initial_camera
        self.max_ticks_per_frame = max(1, max_ticks)

    def load(self, path: Path | str | None = None) -> bool:
        """Load settings from a YAML file.

        A file that fails to parse or validate is logged and skipped.

        Args:
            path: Settings file. Defaults to the packaged file followed by the
                user override file.

        Returns:
            True if at least one file was loaded, False otherwise.
        """
        paths = (
            [Path(path)]
            if path is not None
            else [get_config_path("flight_model.yaml"), get_user_dir() / "flight_model.yaml"]
        )

        loaded = False
        for settings_path in paths:
            if not settings_path.exists():
                logger.debug("No flight settings at %s", settings_path)
                continue
            try:
                with open(settings_path, encoding="utf-8") as f:
                    data = yaml.safe_load(f) or {}
                self.apply(data)
                loaded = True
                logger.info("Loaded flight settings from %s", settings_path)
            except Exception as e:
                logger.error("Failed to load flight settings from %s: %s", settings_path, e)
        return loaded
