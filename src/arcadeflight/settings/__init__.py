"""User settings management for arcadeflight.

This package provides YAML-backed settings: the flight model preset and
simulation options, and keyboard bindings with per-user overrides.
"""

from arcadeflight.settings.flight_settings import (
    PRESET_AERODYNAMIC,
    PRESET_BASELINE,
    FlightSettings,
    get_preset,
    resolve_flight_config,
)
from arcadeflight.settings.keybindings_settings import (
    DEFAULT_BINDINGS,
    BindingOverride,
    KeybindingsSettings,
)

__all__ = [
    # Flight settings
    "FlightSettings",
    "PRESET_AERODYNAMIC",
    "PRESET_BASELINE",
    "get_preset",
    "resolve_flight_config",
    # Keybindings
    "BindingOverride",
    "DEFAULT_BINDINGS",
    "KeybindingsSettings",
]
