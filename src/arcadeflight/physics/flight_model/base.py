"""Data model for the arcade flight model.

This module defines the immutable values that flow through one simulation
tick: the aircraft's kinematic state, the accumulated resource state
(throttle, flaps, fuel, engine temperature, gear), the derived instrument
snapshot and the configuration that selects which optional effects the
integrator applies.

Typical usage example:
    from arcadeflight.physics.flight_model.base import FlightModelConfig, FlightState

    config = FlightModelConfig.aerodynamic()
    state = FlightState.initial(config)
"""

import math
from dataclasses import asdict, dataclass, field, fields, replace
from enum import Enum
from typing import Any

from arcadeflight.physics.vectors import Vector3

# Attitude limits (radians)
MAX_PITCH = math.pi / 4
MAX_ROLL = math.pi / 6

# Resource ranges
MAX_THROTTLE = 100.0
MAX_FLAPS = 40.0
MAX_FUEL = 100.0


def clamp(value: float, low: float, high: float) -> float:
    """Clamp value to the closed range [low, high]."""
    return max(low, min(high, value))


def round_half_up(value: float, digits: int = 0) -> float:
    """Round half away from negative infinity, like a cockpit display does.

    Python's round() uses banker's rounding, which makes a HUD value flicker
    between neighbours at exact halves. Displays round 2.5 to 3 and -2.5 to -2.

    Args:
        value: Value to round.
        digits: Number of decimal places.

    Returns:
        Rounded value.
    """
    scale = 10.0**digits
    return math.floor(value * scale + 0.5) / scale


class EngineStatus(Enum):
    """Engine status shown on the HUD."""

    IDLE = "IDLE"
    RUNNING = "RUNNING"
    FUEL_OUT = "FUEL OUT"

    @classmethod
    def from_resources(cls, fuel: float, throttle: float) -> "EngineStatus":
        """Derive status from fuel and throttle.

        Args:
            fuel: Fuel remaining (0-100).
            throttle: Throttle setting (0-100).

        Returns:
            FUEL_OUT when the tank is empty, RUNNING with throttle applied,
            IDLE otherwise.
        """
        if fuel <= 0.0:
            return cls.FUEL_OUT
        if throttle > 0.0:
            return cls.RUNNING
        return cls.IDLE


@dataclass(frozen=True)
class Orientation:
    """Euler angles in radians.

    Negative pitch raises the nose. Positive roll banks left.

    Attributes:
        pitch: Rotation about the X axis.
        roll: Rotation about the Z axis.
        yaw: Rotation about the Y axis (unbounded, wraps for heading display).
    """

    pitch: float = 0.0
    roll: float = 0.0
    yaw: float = 0.0


@dataclass(frozen=True)
class AircraftKinematics:
    """Position, orientation and velocity of the aircraft.

    Attributes:
        position: Position in world units.
        orientation: Euler angles in radians.
        velocity: Velocity in world units per tick.
    """

    position: Vector3 = field(default_factory=Vector3.zero)
    orientation: Orientation = field(default_factory=Orientation)
    velocity: Vector3 = field(default_factory=Vector3.zero)


@dataclass(frozen=True)
class ResourceState:
    """Accumulated, full-precision control and engine state.

    Attributes:
        throttle: Throttle setting (0-100).
        flaps: Flap deflection in degrees (0-40).
        fuel: Fuel remaining in percent (0-100).
        engine_temp: Engine temperature in degrees Celsius.
        landing_gear: True when the gear is down.
    """

    throttle: float = 0.0
    flaps: float = 0.0
    fuel: float = MAX_FUEL
    engine_temp: float = 75.0
    landing_gear: bool = True


@dataclass(frozen=True)
class Weather:
    """Static, cosmetic weather shown on the HUD."""

    condition: str = "CLEAR"
    wind_speed_kts: int = 5
    temperature_c: int = 15


@dataclass(frozen=True)
class InstrumentSnapshot:
    """Display-ready instrument values, rounded for the HUD.

    Attributes:
        speed: Speed (display scale, knots).
        altitude: Altitude (display scale, feet).
        heading: Heading in degrees (0-359).
        vertical_speed: Vertical speed (feet per minute).
        g_force: G-force (one decimal).
        throttle: Throttle percent.
        flaps: Flap degrees.
        fuel: Fuel percent (one decimal).
        engine_temp: Engine temperature in degrees Celsius.
        engine_status: Engine status.
        landing_gear: True when the gear is down.
        weather: Cosmetic weather.
    """

    speed: int = 0
    altitude: int = 0
    heading: int = 0
    vertical_speed: int = 0
    g_force: float = 1.0
    throttle: int = 0
    flaps: int = 0
    fuel: float = MAX_FUEL
    engine_temp: int = 75
    engine_status: EngineStatus = EngineStatus.IDLE
    landing_gear: bool = True
    weather: Weather = field(default_factory=Weather)

    def to_dict(self) -> dict[str, Any]:
        """Convert to a plain dictionary (enum flattened to its label)."""
        data = asdict(self)
        data["engine_status"] = self.engine_status.value
        return data


@dataclass(frozen=True)
class FlightModelConfig:  # pylint: disable=too-many-instance-attributes
    """Selects the optional effects and constants of the integrator.

    Rates are per tick. The defaults reproduce the full aerodynamic variant;
    ``baseline()`` turns every optional effect off, leaving thrust and drag.

    Attributes:
        flaps: Apply flaps-extend/flaps-retract controls.
        gravity: Subtract the gravity constant from vertical velocity.
        lift: Add lift along world up.
        flaps_drag: Divide the drag factor by 1 + flaps/200.
        fuel_consumption: Burn fuel proportional to throttle.
        engine_temperature: Lag engine temperature toward a throttle target.
        tick_rate: Reference ticks per second.
        throttle_step: Throttle change per tick while held.
        flaps_step: Flap change per tick while held.
        pitch_rate: Pitch change per tick (radians).
        roll_rate: Roll change per tick (radians).
        yaw_rate: Yaw change per tick while rolling (radians).
        thrust_scale: Thrust at full throttle (world units per tick squared).
        lift_coefficient: Lift scale factor.
        gravity_per_tick: Gravity constant (world units per tick squared).
        drag_factor: Velocity retained per tick before flap drag.
        fuel_burn_rate: Fuel burned per tick at full throttle.
        engine_temp_idle: Engine temperature target at idle.
        engine_temp_range: Extra target temperature at full throttle.
        engine_temp_smoothing: First-order lag factor per tick.
    """

    flaps: bool = True
    gravity: bool = True
    lift: bool = True
    flaps_drag: bool = True
    fuel_consumption: bool = True
    engine_temperature: bool = True

    tick_rate: float = 60.0
    throttle_step: float = 2.0
    flaps_step: float = 10.0
    pitch_rate: float = 0.02
    roll_rate: float = 0.03
    yaw_rate: float = 0.01
    thrust_scale: float = 0.5
    lift_coefficient: float = 0.1
    gravity_per_tick: float = 0.01
    drag_factor: float = 0.98
    fuel_burn_rate: float = 0.02
    engine_temp_idle: float = 75.0
    engine_temp_range: float = 50.0
    engine_temp_smoothing: float = 0.1

    @classmethod
    def aerodynamic(cls) -> "FlightModelConfig":
        """Every optional effect enabled."""
        return cls()

    @classmethod
    def baseline(cls) -> "FlightModelConfig":
        """Thrust and plain drag only."""
        return cls(
            flaps=False,
            gravity=False,
            lift=False,
            flaps_drag=False,
            fuel_consumption=False,
            engine_temperature=False,
        )

    @property
    def tick_seconds(self) -> float:
        """Duration of one tick in seconds."""
        return 1.0 / self.tick_rate

    @classmethod
    def from_dict(
        cls, data: dict[str, Any], base: "FlightModelConfig | None" = None
    ) -> "FlightModelConfig":
        """Create a config by overriding fields of base.

        Args:
            data: Field overrides. Unknown keys are ignored.
            base: Config to start from (defaults to aerodynamic).

        Returns:
            New configuration.

        Raises:
            ValueError: If a value has the wrong type or tick_rate is not positive.
        """
        base = base if base is not None else cls()
        overrides: dict[str, Any] = {}
        for f in fields(cls):
            if f.name not in data:
                continue
            value = data[f.name]
            if f.type in (bool, "bool"):
                if not isinstance(value, bool):
                    raise ValueError(f"{f.name} must be a boolean, got {value!r}")
            elif isinstance(value, bool) or not isinstance(value, int | float):
                raise ValueError(f"{f.name} must be a number, got {value!r}")
            else:
                value = float(value)
            overrides[f.name] = value

        config = replace(base, **overrides)
        if config.tick_rate <= 0.0:
            raise ValueError("tick_rate must be positive")
        return config

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for YAML serialization."""
        return asdict(self)


@dataclass(frozen=True)
class FlightState:
    """Everything one tick reads and produces.

    Attributes:
        kinematics: Aircraft pose and velocity.
        resources: Throttle, flaps, fuel, engine temperature and gear.
        instruments: Instruments derived from the two above.
        tick: Number of ticks integrated so far.
    """

    kinematics: AircraftKinematics = field(default_factory=AircraftKinematics)
    resources: ResourceState = field(default_factory=ResourceState)
    instruments: InstrumentSnapshot = field(default_factory=InstrumentSnapshot)
    tick: int = 0

    @classmethod
    def initial(cls, config: FlightModelConfig | None = None) -> "FlightState":
        """State at simulation start: at the origin, at rest, idle.

        Args:
            config: Flight model configuration (sets the idle engine temperature).

        Returns:
            Initial state with instruments derived from it.
        """
        config = config if config is not None else FlightModelConfig()
        resources = ResourceState(engine_temp=config.engine_temp_idle)
        instruments = InstrumentSnapshot(
            engine_temp=int(round_half_up(resources.engine_temp)),
            engine_status=EngineStatus.from_resources(resources.fuel, resources.throttle),
            landing_gear=resources.landing_gear,
        )
        return cls(resources=resources, instruments=instruments)

    def with_landing_gear(self, down: bool) -> "FlightState":
        """Copy with the gear position changed (instrument updated too)."""
        return replace(
            self,
            resources=replace(self.resources, landing_gear=down),
            instruments=replace(self.instruments, landing_gear=down),
        )
