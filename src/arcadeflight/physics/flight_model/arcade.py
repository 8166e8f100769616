"""Arcade flight model: one fixed tick of flight dynamics.

The integrator works in per-tick units (reference 60 ticks per second), so
every rate below is "per tick" rather than "per second". The physics are
deliberately simple: thrust along the nose, optional lift along world up,
optional gravity, multiplicative drag and single-step Euler integration.

Which effects apply is selected by FlightModelConfig, so the plain
thrust-and-drag variant and the full variant with lift, gravity, flaps, fuel
and engine temperature share one code path.

Order of operations within a tick:
    1. throttle       5. lift            9. ground clamp
    2. flaps          6. gravity        10. instruments
    3. attitude       7. drag           11. fuel, engine temperature, status
    4. thrust         8. position

Typical usage example:
    from arcadeflight.physics.flight_model.arcade import step
    from arcadeflight.physics.flight_model.base import FlightModelConfig, FlightState

    config = FlightModelConfig.aerodynamic()
    state = FlightState.initial(config)
    state = step(state, frozenset({FlightControl.THROTTLE_UP}), config)
"""

import math
from collections.abc import Iterable
from dataclasses import replace

from arcadeflight.core.input import EMPTY_SNAPSHOT, ControlSnapshot, FlightControl
from arcadeflight.core.logging_system import get_logger
from arcadeflight.physics.flight_model.base import (
    MAX_FLAPS,
    MAX_FUEL,
    MAX_PITCH,
    MAX_ROLL,
    MAX_THROTTLE,
    AircraftKinematics,
    EngineStatus,
    FlightModelConfig,
    FlightState,
    InstrumentSnapshot,
    Orientation,
    ResourceState,
    clamp,
    round_half_up,
)
from arcadeflight.physics.vectors import Vector3
from arcadeflight.settings.flight_settings import resolve_flight_config

logger = get_logger(__name__)

# Display scales
SPEED_DISPLAY_SCALE = 100.0  # world units/tick -> knots
ALTITUDE_DISPLAY_SCALE = 10.0  # world units -> feet
VERTICAL_SPEED_SCALE = 600.0  # world units/tick -> feet/minute
G_FORCE_DIVISOR = 100.0

FORWARD = Vector3(0.0, 0.0, 1.0)


def sanitize(state: FlightState) -> FlightState:
    """Clamp externally supplied state into its valid ranges.

    Args:
        state: State that may hold out-of-range values.

    Returns:
        State with throttle, flaps, fuel, pitch, roll and height clamped.
    """
    resources = state.resources
    kinematics = state.kinematics
    orientation = kinematics.orientation
    return replace(
        state,
        resources=replace(
            resources,
            throttle=clamp(resources.throttle, 0.0, MAX_THROTTLE),
            flaps=clamp(resources.flaps, 0.0, MAX_FLAPS),
            fuel=clamp(resources.fuel, 0.0, MAX_FUEL),
        ),
        kinematics=replace(
            kinematics,
            position=kinematics.position.with_y(max(0.0, kinematics.position.y)),
            orientation=replace(
                orientation,
                pitch=clamp(orientation.pitch, -MAX_PITCH, MAX_PITCH),
                roll=clamp(orientation.roll, -MAX_ROLL, MAX_ROLL),
            ),
        ),
    )


def _update_throttle(throttle: float, controls: ControlSnapshot, config: FlightModelConfig) -> float:
    if FlightControl.THROTTLE_UP in controls:
        throttle = min(MAX_THROTTLE, throttle + config.throttle_step)
    if FlightControl.THROTTLE_DOWN in controls:
        throttle = max(0.0, throttle - config.throttle_step)
    return throttle


def _update_flaps(flaps: float, controls: ControlSnapshot, config: FlightModelConfig) -> float:
    if not config.flaps:
        return flaps
    if FlightControl.FLAPS_EXTEND in controls:
        flaps = min(MAX_FLAPS, flaps + config.flaps_step)
    if FlightControl.FLAPS_RETRACT in controls:
        flaps = max(0.0, flaps - config.flaps_step)
    return flaps


def _update_attitude(
    orientation: Orientation, controls: ControlSnapshot, config: FlightModelConfig
) -> Orientation:
    """Apply pitch and roll commands.

    Negative pitch raises the nose. Each roll command also yaws the aircraft
    into the turn (coordinated turn coupling).
    """
    pitch, roll, yaw = orientation.pitch, orientation.roll, orientation.yaw

    if FlightControl.PITCH_UP in controls:
        pitch = max(-MAX_PITCH, pitch - config.pitch_rate)
    if FlightControl.PITCH_DOWN in controls:
        pitch = min(MAX_PITCH, pitch + config.pitch_rate)
    if FlightControl.ROLL_LEFT in controls:
        roll = min(MAX_ROLL, roll + config.roll_rate)
        yaw -= config.yaw_rate
    if FlightControl.ROLL_RIGHT in controls:
        roll = max(-MAX_ROLL, roll - config.roll_rate)
        yaw += config.yaw_rate

    return Orientation(pitch=pitch, roll=roll, yaw=yaw)


def thrust_vector(throttle: float, orientation: Orientation, config: FlightModelConfig) -> Vector3:
    """Thrust along the aircraft's nose.

    Args:
        throttle: Throttle setting (0-100).
        orientation: Orientation after this tick's attitude update.
        config: Flight model configuration.

    Returns:
        Velocity change for this tick.
    """
    magnitude = (throttle / MAX_THROTTLE) * config.thrust_scale
    return (FORWARD * magnitude).rotated_xyz(orientation.pitch, orientation.yaw, orientation.roll)


def lift_force(speed: float, pitch: float, flaps: float, config: FlightModelConfig) -> float:
    """Vertical lift for this tick.

    Args:
        speed: Airspeed before thrust is applied (world units/tick).
        pitch: Pitch after this tick's attitude update (negative is nose up).
        flaps: Flap degrees (each degree adds 1% lift).
        config: Flight model configuration.

    Returns:
        Upward velocity change (negative when nose down).
    """
    return speed * math.sin(-pitch) * (1.0 + flaps / 100.0) * config.lift_coefficient


def drag_multiplier(flaps: float, config: FlightModelConfig) -> float:
    """Velocity retained per tick after drag."""
    divisor = 1.0 + flaps / 200.0 if config.flaps_drag else 1.0
    return config.drag_factor / divisor


def derive_instruments(
    kinematics: AircraftKinematics,
    resources: ResourceState,
    previous_height: float,
) -> InstrumentSnapshot:
    """Compute display values from the new state.

    Args:
        kinematics: Collision-resolved kinematics after this tick.
        resources: Resources after this tick.
        previous_height: Height before this tick.

    Returns:
        Rounded instrument snapshot.
    """
    vertical_speed = (kinematics.position.y - previous_height) * VERTICAL_SPEED_SCALE
    g_force = abs(vertical_speed) / G_FORCE_DIVISOR + 1.0
    speed = kinematics.velocity.magnitude() * SPEED_DISPLAY_SCALE
    altitude = max(0.0, kinematics.position.y * ALTITUDE_DISPLAY_SCALE)
    heading = math.degrees(kinematics.orientation.yaw) % 360.0

    return InstrumentSnapshot(
        speed=int(round_half_up(speed)),
        altitude=int(round_half_up(altitude)),
        heading=int(round_half_up(heading)) % 360,
        vertical_speed=int(round_half_up(vertical_speed)),
        g_force=round_half_up(g_force, 1),
        throttle=int(round_half_up(resources.throttle)),
        flaps=int(round_half_up(resources.flaps)),
        fuel=round_half_up(resources.fuel, 1),
        engine_temp=int(round_half_up(resources.engine_temp)),
        engine_status=EngineStatus.from_resources(resources.fuel, resources.throttle),
        landing_gear=resources.landing_gear,
    )


def _update_engine(resources: ResourceState, config: FlightModelConfig) -> ResourceState:
    fuel = resources.fuel
    engine_temp = resources.engine_temp
    power = resources.throttle / MAX_THROTTLE

    if config.fuel_consumption:
        fuel = max(0.0, fuel - power * config.fuel_burn_rate)
    if config.engine_temperature:
        target = config.engine_temp_idle + power * config.engine_temp_range
        engine_temp += (target - engine_temp) * config.engine_temp_smoothing

    return replace(resources, fuel=fuel, engine_temp=engine_temp)


def step(
    state: FlightState,
    controls: ControlSnapshot = EMPTY_SNAPSHOT,
    config: FlightModelConfig | None = None,
) -> FlightState:
    """Advance the simulation by exactly one tick.

    Pure function: the input state is not modified and identical inputs
    always produce identical outputs.

    Args:
        state: State before the tick.
        controls: Controls held during this tick.
        config: Effects and constants (aerodynamic variant if None).

    Returns:
        State after the tick.
    """
    config = config if config is not None else FlightModelConfig()
    state = sanitize(state)
    kinematics = state.kinematics
    resources = state.resources

    throttle = _update_throttle(resources.throttle, controls, config)
    flaps = _update_flaps(resources.flaps, controls, config)
    orientation = _update_attitude(kinematics.orientation, controls, config)

    velocity = kinematics.velocity
    speed = velocity.magnitude()
    velocity = velocity + thrust_vector(throttle, orientation, config)
    if config.lift:
        velocity = velocity + Vector3(0.0, lift_force(speed, orientation.pitch, flaps, config), 0.0)
    if config.gravity:
        velocity = velocity - Vector3(0.0, config.gravity_per_tick, 0.0)
    velocity = velocity * drag_multiplier(flaps, config)

    previous_height = kinematics.position.y
    position = kinematics.position + velocity

    # Hard floor: vertical momentum is discarded, not reflected
    if position.y < 0.0:
        position = position.with_y(0.0)
        velocity = velocity.with_y(0.0)

    new_kinematics = AircraftKinematics(position=position, orientation=orientation, velocity=velocity)
    new_resources = _update_engine(replace(resources, throttle=throttle, flaps=flaps), config)

    return FlightState(
        kinematics=new_kinematics,
        resources=new_resources,
        instruments=derive_instruments(new_kinematics, new_resources, previous_height),
        tick=state.tick + 1,
    )


def run(
    state: FlightState,
    control_sequence: Iterable[ControlSnapshot],
    config: FlightModelConfig | None = None,
) -> list[FlightState]:
    """Apply step() once per snapshot.

    Args:
        state: Initial state.
        control_sequence: One control snapshot per tick.
        config: Flight model configuration.

    Returns:
        States after each tick (initial state excluded).
    """
    trajectory: list[FlightState] = []
    for controls in control_sequence:
        state = step(state, controls, config)
        trajectory.append(state)
    return trajectory


class ArcadeFlightModel:
    """Stateful wrapper around step() for the simulation driver.

    Examples:
        >>> model = ArcadeFlightModel()
        >>> model.initialize({"preset": "baseline"})
        >>> state = model.update(frozenset({FlightControl.THROTTLE_UP}))
        >>> state.instruments.throttle
        2
    """

    def __init__(self, config: FlightModelConfig | None = None) -> None:
        """Initialize the flight model.

        Args:
            config: Configuration (aerodynamic variant if None).
        """
        self.config = config if config is not None else FlightModelConfig()
        self.state = FlightState.initial(self.config)
        self._updates = 0

    def initialize(self, config: dict) -> None:
        """Configure from a dictionary and reset to the initial state.

        Args:
            config: Dictionary with an optional "preset" ("aerodynamic" or
                "baseline") and any FlightModelConfig field overrides.

        Raises:
            ValueError: If the preset is unknown or a value is invalid.
        """
        self.config = resolve_flight_config(config)
        self.state = FlightState.initial(self.config)
        self._updates = 0
        logger.info(
            "Initialized arcade flight model: gravity=%s lift=%s flaps=%s fuel=%s",
            self.config.gravity,
            self.config.lift,
            self.config.flaps,
            self.config.fuel_consumption,
        )

    def update(self, controls: ControlSnapshot = EMPTY_SNAPSHOT) -> FlightState:
        """Advance one tick.

        Args:
            controls: Controls held during this tick.

        Returns:
            New state.
        """
        previous_status = self.state.instruments.engine_status
        self.state = step(self.state, controls, self.config)
        self._updates += 1

        status = self.state.instruments.engine_status
        if status != previous_status:
            logger.info("Engine status: %s -> %s", previous_status.value, status.value)
        return self.state

    def get_state(self) -> FlightState:
        """Current state (immutable)."""
        return self.state

    def reset(self, initial_state: FlightState | None = None) -> None:
        """Reset to a new state.

        Args:
            initial_state: State to resume from (clamped into range). The
                initial state for the current config if None.
        """
        if initial_state is None:
            self.state = FlightState.initial(self.config)
        else:
            self.state = sanitize(initial_state)
        self._updates = 0

    def set_landing_gear(self, down: bool) -> None:
        """Set the landing gear position (no effect on dynamics)."""
        self.state = self.state.with_landing_gear(down)

    def get_update_count(self) -> int:
        """Number of ticks integrated since the last reset."""
        return self._updates
