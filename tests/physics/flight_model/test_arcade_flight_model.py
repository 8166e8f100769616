"""Tests for the arcade flight model."""

import math
import random
from dataclasses import replace

import pytest

from arcadeflight.core.input import FlightControl
from arcadeflight.physics.flight_model.arcade import (
    ArcadeFlightModel,
    drag_multiplier,
    lift_force,
    run,
    step,
    thrust_vector,
)
from arcadeflight.physics.flight_model.base import (
    MAX_PITCH,
    MAX_ROLL,
    AircraftKinematics,
    EngineStatus,
    FlightModelConfig,
    FlightState,
    Orientation,
    ResourceState,
)
from arcadeflight.physics.vectors import Vector3

NONE = frozenset()
THROTTLE_UP = frozenset({FlightControl.THROTTLE_UP})
THROTTLE_DOWN = frozenset({FlightControl.THROTTLE_DOWN})
PITCH_UP = frozenset({FlightControl.PITCH_UP})
PITCH_DOWN = frozenset({FlightControl.PITCH_DOWN})
ROLL_LEFT = frozenset({FlightControl.ROLL_LEFT})
ROLL_RIGHT = frozenset({FlightControl.ROLL_RIGHT})
FLAPS_EXTEND = frozenset({FlightControl.FLAPS_EXTEND})
FLAPS_RETRACT = frozenset({FlightControl.FLAPS_RETRACT})


def state_at(height: float, velocity: Vector3 | None = None, **resources) -> FlightState:
    """State at a given height with optional velocity and resource values."""
    state = FlightState.initial()
    return replace(
        state,
        kinematics=AircraftKinematics(
            position=Vector3(0.0, height, 0.0),
            velocity=velocity if velocity is not None else Vector3.zero(),
        ),
        resources=replace(state.resources, **resources),
    )


def random_controls(rng: random.Random, count: int) -> list[frozenset]:
    """Random held-control sets, each control held about a third of the time."""
    controls = list(FlightControl)
    return [frozenset(c for c in controls if rng.random() < 0.3) for _ in range(count)]


class TestInitialState:
    """Test the state at simulation start."""

    def test_at_origin_and_at_rest(self) -> None:
        """Test the aircraft starts at the origin with no motion."""
        state = FlightState.initial()
        assert state.kinematics.position == Vector3.zero()
        assert state.kinematics.velocity == Vector3.zero()
        assert state.kinematics.orientation == Orientation()
        assert state.tick == 0

    def test_initial_instruments(self) -> None:
        """Test the instrument readings before the first tick."""
        instruments = FlightState.initial().instruments
        assert instruments.engine_status is EngineStatus.IDLE
        assert instruments.throttle == 0
        assert instruments.fuel == 100.0
        assert instruments.engine_temp == 75
        assert instruments.altitude == 0
        assert instruments.landing_gear is True
        assert instruments.weather.condition == "CLEAR"


class TestThrottleAndFlaps:
    """Test throttle and flap controls."""

    def test_throttle_up_steps_by_two(self) -> None:
        """Test one tick of throttle up adds two percent."""
        state = step(FlightState.initial(), THROTTLE_UP)
        assert state.resources.throttle == 2.0
        assert state.instruments.throttle == 2

    def test_throttle_clamps_at_limits(self) -> None:
        """Test throttle stays within 0 to 100 percent."""
        state = FlightState.initial()
        for _ in range(60):
            state = step(state, THROTTLE_UP)
        assert state.resources.throttle == 100.0

        for _ in range(60):
            state = step(state, THROTTLE_DOWN)
        assert state.resources.throttle == 0.0

    def test_both_throttle_controls_cancel(self) -> None:
        """Test holding both throttle controls leaves throttle unchanged."""
        state = state_at(0.0, throttle=50.0)
        state = step(state, THROTTLE_UP | THROTTLE_DOWN)
        assert state.resources.throttle == 50.0

    def test_flaps_extend_and_retract(self) -> None:
        """Test flaps move in ten degree steps up to 40."""
        state = FlightState.initial()
        state = step(state, FLAPS_EXTEND)
        assert state.resources.flaps == 10.0
        for _ in range(5):
            state = step(state, FLAPS_EXTEND)
        assert state.resources.flaps == 40.0
        assert state.instruments.flaps == 40

        for _ in range(5):
            state = step(state, FLAPS_RETRACT)
        assert state.resources.flaps == 0.0

    def test_flaps_ignored_when_not_modeled(self) -> None:
        """Test flap controls do nothing in the baseline model."""
        state = step(FlightState.initial(), FLAPS_EXTEND, FlightModelConfig.baseline())
        assert state.resources.flaps == 0.0


class TestAttitude:
    """Test pitch, roll and yaw updates."""

    def test_pitch_up_lowers_pitch_angle(self) -> None:
        """Test pitch up raises the nose by lowering the pitch angle."""
        state = step(FlightState.initial(), PITCH_UP)
        assert state.kinematics.orientation.pitch == pytest.approx(-0.02)

    def test_pitch_down_raises_pitch_angle(self) -> None:
        """Test pitch down lowers the nose."""
        state = step(FlightState.initial(), PITCH_DOWN)
        assert state.kinematics.orientation.pitch == pytest.approx(0.02)

    @pytest.mark.parametrize("controls, limit", [(PITCH_UP, -MAX_PITCH), (PITCH_DOWN, MAX_PITCH)])
    def test_pitch_clamped_however_long_held(self, controls: frozenset, limit: float) -> None:
        """Test pitch never passes its limit."""
        state = FlightState.initial()
        for _ in range(200):
            state = step(state, controls)
            assert -MAX_PITCH <= state.kinematics.orientation.pitch <= MAX_PITCH
        assert state.kinematics.orientation.pitch == pytest.approx(limit)

    @pytest.mark.parametrize("controls, limit", [(ROLL_LEFT, MAX_ROLL), (ROLL_RIGHT, -MAX_ROLL)])
    def test_roll_clamped_however_long_held(self, controls: frozenset, limit: float) -> None:
        """Test roll never passes its limit."""
        state = FlightState.initial()
        for _ in range(200):
            state = step(state, controls)
            assert -MAX_ROLL <= state.kinematics.orientation.roll <= MAX_ROLL
        assert state.kinematics.orientation.roll == pytest.approx(limit)

    def test_roll_left_yaws_left(self) -> None:
        """Test rolling left also turns the heading left."""
        state = step(FlightState.initial(), ROLL_LEFT)
        orientation = state.kinematics.orientation
        assert orientation.roll == pytest.approx(0.03)
        assert orientation.yaw == pytest.approx(-0.01)

    def test_yaw_keeps_turning_after_roll_limit(self) -> None:
        """Test yaw continues while roll is held at its limit."""
        state = FlightState.initial()
        for _ in range(100):
            state = step(state, ROLL_RIGHT)
        assert state.kinematics.orientation.roll == pytest.approx(-MAX_ROLL)
        assert state.kinematics.orientation.yaw == pytest.approx(1.0)


class TestForces:
    """Test thrust, lift and drag helpers."""

    def test_thrust_along_nose_when_level(self) -> None:
        """Test level thrust points straight down +Z."""
        thrust = thrust_vector(100.0, Orientation(), FlightModelConfig())
        assert thrust.x == pytest.approx(0.0)
        assert thrust.y == pytest.approx(0.0)
        assert thrust.z == pytest.approx(0.5)

    def test_thrust_follows_yaw(self) -> None:
        """Test thrust turns with the heading."""
        thrust = thrust_vector(100.0, Orientation(yaw=math.pi / 2), FlightModelConfig())
        assert thrust.x == pytest.approx(0.5)
        assert thrust.z == pytest.approx(0.0, abs=1e-12)

    def test_thrust_climbs_when_nose_up(self) -> None:
        """Test a raised nose gives thrust an upward component."""
        thrust = thrust_vector(50.0, Orientation(pitch=-0.2), FlightModelConfig())
        assert thrust.y == pytest.approx(0.25 * math.sin(0.2))
        assert thrust.z == pytest.approx(0.25 * math.cos(0.2))

    def test_thrust_ignores_roll(self) -> None:
        """Test bank angle does not change thrust."""
        level = thrust_vector(100.0, Orientation(pitch=-0.1, yaw=0.3), FlightModelConfig())
        banked = thrust_vector(100.0, Orientation(pitch=-0.1, yaw=0.3, roll=0.4), FlightModelConfig())
        assert banked.x == pytest.approx(level.x)
        assert banked.y == pytest.approx(level.y)
        assert banked.z == pytest.approx(level.z)

    def test_lift_grows_with_flaps(self) -> None:
        """Test full flaps add forty percent lift."""
        config = FlightModelConfig()
        clean = lift_force(1.0, -math.pi / 6, 0.0, config)
        full_flaps = lift_force(1.0, -math.pi / 6, 40.0, config)
        assert clean == pytest.approx(0.05)
        assert full_flaps == pytest.approx(0.07)

    def test_lift_negative_when_nose_down(self) -> None:
        """Test a lowered nose produces downward lift."""
        assert lift_force(1.0, 0.2, 0.0, FlightModelConfig()) < 0.0

    def test_flaps_increase_drag(self) -> None:
        """Test flaps reduce the drag multiplier only when modeled."""
        config = FlightModelConfig()
        assert drag_multiplier(0.0, config) == pytest.approx(0.98)
        assert drag_multiplier(40.0, config) == pytest.approx(0.98 / 1.2)
        assert drag_multiplier(40.0, FlightModelConfig.baseline()) == pytest.approx(0.98)


class TestGroundCollision:
    """Test the ground clamp."""

    def test_falling_through_ground_is_clamped(self) -> None:
        """Test a descent through the ground stops at height zero."""
        state = state_at(0.05, Vector3(0.0, -0.2, 0.0))
        state = step(state, NONE)
        assert state.kinematics.position.y == 0.0
        assert state.kinematics.velocity.y == 0.0
        assert state.instruments.altitude == 0

    def test_vertical_speed_measured_on_clamped_height(self) -> None:
        """Test vertical speed uses the clamped height change."""
        state = state_at(0.05, Vector3(0.0, -0.2, 0.0))
        state = step(state, NONE)
        assert state.instruments.vertical_speed == -30

    def test_horizontal_velocity_kept_on_ground(self) -> None:
        """Test ground contact keeps forward motion."""
        state = state_at(0.0, Vector3(0.0, 0.0, 0.3))
        state = step(state, NONE)
        assert state.kinematics.velocity.z == pytest.approx(0.3 * 0.98)
        assert state.kinematics.position.z == pytest.approx(0.3 * 0.98)


class TestInstruments:
    """Test instrument derivation."""

    def test_vertical_speed_and_g_force(self) -> None:
        """Test vertical speed in feet per minute and the g readout."""
        state = state_at(5.0, Vector3(0.0, -0.1, 0.0))
        state = step(state, NONE, FlightModelConfig(lift=False))

        # v.y = (-0.1 - 0.01) * 0.98 = -0.1078 -> -64.68 ft/min
        assert state.kinematics.velocity.y == pytest.approx(-0.1078)
        assert state.instruments.vertical_speed == -65
        assert state.instruments.g_force == pytest.approx(1.6)

    def test_altitude_scale(self) -> None:
        """Test altitude reads ten feet per world unit."""
        state = step(state_at(5.0), NONE, FlightModelConfig.baseline())
        assert state.instruments.altitude == 50

    def test_heading_wraps_into_range(self) -> None:
        """Test a small left turn reads as 359 degrees."""
        state = step(FlightState.initial(), ROLL_LEFT)
        assert state.instruments.heading == 359

    def test_heading_never_reads_360(self) -> None:
        """Test a heading just below north rounds to 0."""
        state = replace(
            FlightState.initial(),
            kinematics=AircraftKinematics(orientation=Orientation(yaw=-0.00001)),
        )
        state = step(state, NONE)
        assert state.instruments.heading == 0

    def test_speed_display_scale(self) -> None:
        """Test speed reads a hundred knots per unit per tick."""
        state = step(state_at(0.0, Vector3(0.0, 0.0, 0.5)), NONE)
        assert state.instruments.speed == 49  # 0.5 * 0.98 * 100

    def test_engine_temperature_lags_toward_target(self) -> None:
        """Test temperature moves a tenth of the way to its target."""
        state = step(state_at(0.0, throttle=100.0), NONE)
        assert state.resources.engine_temp == pytest.approx(80.0)
        assert state.instruments.engine_temp == 80

    def test_engine_temperature_constant_in_baseline(self) -> None:
        """Test temperature does not change in the baseline model."""
        state = step(state_at(0.0, throttle=100.0), NONE, FlightModelConfig.baseline())
        assert state.resources.engine_temp == pytest.approx(75.0)

    def test_internal_state_not_rounded(self) -> None:
        """Test rounding applies to instruments only."""
        state = step(state_at(0.0, throttle=100.0), NONE)
        assert state.resources.fuel == pytest.approx(99.98)
        assert state.instruments.fuel == 100.0

    def test_instruments_to_dict(self) -> None:
        """Test instruments convert to a plain dictionary."""
        data = FlightState.initial().instruments.to_dict()
        assert data["engine_status"] == "IDLE"
        assert data["weather"]["wind_speed_kts"] == 5


class TestFuelAndEngineStatus:
    """Test fuel consumption and engine status."""

    def test_fuel_burn_proportional_to_throttle(self) -> None:
        """Test burn rate scales with throttle."""
        state = step(state_at(0.0, throttle=50.0), NONE)
        assert state.resources.fuel == pytest.approx(100.0 - 0.01)

    def test_no_burn_at_idle(self) -> None:
        """Test no fuel is used at zero throttle."""
        state = step(FlightState.initial(), NONE)
        assert state.resources.fuel == 100.0
        assert state.instruments.engine_status is EngineStatus.IDLE

    def test_fuel_out_is_sticky(self) -> None:
        """Test the engine stays out once fuel is gone."""
        state = state_at(0.0, throttle=100.0, fuel=0.01)
        state = step(state, NONE)
        assert state.resources.fuel == 0.0
        assert state.instruments.engine_status is EngineStatus.FUEL_OUT

        for controls in [THROTTLE_DOWN] * 60 + [THROTTLE_UP] * 10 + [NONE] * 10:
            state = step(state, controls)
            assert state.instruments.engine_status is EngineStatus.FUEL_OUT

    def test_fuel_never_leaves_range(self) -> None:
        """Test fuel only falls and never goes negative."""
        state = state_at(0.0, fuel=0.5)
        for _ in range(200):
            previous = state.resources.fuel
            state = step(state, THROTTLE_UP)
            assert 0.0 <= state.resources.fuel <= 100.0
            assert state.resources.fuel <= previous

    def test_no_burn_when_consumption_disabled(self) -> None:
        """Test fuel is constant in the baseline model."""
        state = step(state_at(0.0, throttle=100.0), NONE, FlightModelConfig.baseline())
        assert state.resources.fuel == 100.0
        assert state.instruments.engine_status is EngineStatus.RUNNING


class TestOutOfRangeInput:
    """Test clamping of externally supplied state."""

    def test_resources_clamped(self) -> None:
        """Test out-of-range resources are pulled into range."""
        state = FlightState(
            resources=ResourceState(throttle=150.0, flaps=90.0, fuel=-5.0),
        )
        state = step(state, NONE)
        assert state.resources.throttle == 100.0
        assert state.resources.flaps == 40.0
        assert state.resources.fuel == 0.0
        assert state.instruments.engine_status is EngineStatus.FUEL_OUT

    def test_attitude_clamped(self) -> None:
        """Test out-of-range attitude is pulled to the limits."""
        state = FlightState(
            kinematics=AircraftKinematics(orientation=Orientation(pitch=2.0, roll=-3.0)),
        )
        state = step(state, NONE)
        assert state.kinematics.orientation.pitch == pytest.approx(MAX_PITCH)
        assert state.kinematics.orientation.roll == pytest.approx(-MAX_ROLL)

    def test_negative_height_clamped(self) -> None:
        """Test a state below ground is lifted to height zero."""
        state = step(state_at(-3.0), NONE)
        assert state.kinematics.position.y == 0.0
        assert state.instruments.altitude == 0


class TestScenarios:
    """End-to-end scenarios over many ticks."""

    def test_full_throttle_from_rest(self) -> None:
        """Test the aircraft keeps moving forward under rising throttle."""
        state = FlightState.initial()
        previous_z = state.kinematics.position.z
        statuses = []

        for tick in range(1, 51):
            state = step(state, THROTTLE_UP)
            statuses.append(state.instruments.engine_status)
            assert state.kinematics.position.z > previous_z, f"z stalled at tick {tick}"
            previous_z = state.kinematics.position.z

        assert state.resources.throttle == 100.0
        assert statuses[0] is EngineStatus.RUNNING
        assert all(status is EngineStatus.RUNNING for status in statuses)

    def test_falls_to_ground_under_gravity(self) -> None:
        """Test gravity brings the aircraft down and holds it there."""
        config = FlightModelConfig(lift=False)
        state = state_at(5.0)
        previous_y = state.kinematics.position.y
        for _ in range(500):
            state = step(state, NONE, config)
            if state.kinematics.position.y == 0.0:
                break
            assert state.kinematics.position.y < previous_y
            previous_y = state.kinematics.position.y
        else:
            pytest.fail("aircraft never reached the ground")

        assert state.kinematics.velocity.y == 0.0
        for _ in range(20):
            state = step(state, NONE, config)
            assert state.kinematics.position.y == 0.0
            assert state.kinematics.velocity.y == 0.0

    def test_baseline_has_no_gravity(self) -> None:
        """Test height holds steady in the baseline model."""
        state = state_at(5.0)
        for _ in range(30):
            state = step(state, NONE, FlightModelConfig.baseline())
        assert state.kinematics.position.y == 5.0

    def test_takeoff_with_nose_up(self) -> None:
        """Test speed plus a raised nose leaves the ground."""
        state = FlightState.initial()
        for _ in range(50):
            state = step(state, THROTTLE_UP)
        for _ in range(20):
            state = step(state, PITCH_UP)
        for _ in range(60):
            state = step(state, NONE)
        assert state.kinematics.position.y > 0.0
        assert state.instruments.altitude > 0

    def test_invariants_hold_for_random_input(self) -> None:
        """Test every bounded quantity stays in range for random controls."""
        rng = random.Random(1234)
        state = FlightState.initial()
        for controls in random_controls(rng, 2000):
            previous_fuel = state.resources.fuel
            state = step(state, controls)

            orientation = state.kinematics.orientation
            assert -MAX_PITCH <= orientation.pitch <= MAX_PITCH
            assert -MAX_ROLL <= orientation.roll <= MAX_ROLL
            assert state.kinematics.position.y >= 0.0
            assert state.instruments.altitude >= 0
            assert 0.0 <= state.resources.throttle <= 100.0
            assert 0.0 <= state.resources.flaps <= 40.0
            assert 0.0 <= state.resources.fuel <= previous_fuel
            assert 0 <= state.instruments.heading <= 359

    def test_deterministic(self) -> None:
        """Test the same controls give the same states."""
        sequence = random_controls(random.Random(99), 500)
        first = run(FlightState.initial(), sequence)
        second = run(FlightState.initial(), sequence)
        assert first == second
        assert first[-1].tick == 500


class TestArcadeFlightModel:
    """Test the stateful wrapper."""

    def test_update_increments_counter(self) -> None:
        """Test each update counts one tick."""
        model = ArcadeFlightModel()
        model.update(NONE)
        model.update(THROTTLE_UP)
        assert model.get_update_count() == 2
        assert model.get_state().tick == 2

    def test_initialize_with_preset(self) -> None:
        """Test initialize applies a preset and overrides."""
        model = ArcadeFlightModel()
        model.initialize({"preset": "baseline", "thrust_scale": 1.0})
        assert model.config.gravity is False
        assert model.config.thrust_scale == 1.0
        assert model.get_state() == FlightState.initial(model.config)

    def test_initialize_unknown_preset(self) -> None:
        """Test initialize rejects unknown presets."""
        model = ArcadeFlightModel()
        with pytest.raises(ValueError, match="Unknown flight model preset"):
            model.initialize({"preset": "hypersonic"})

    def test_reset_clamps_state(self) -> None:
        """Test reset clamps a supplied state."""
        model = ArcadeFlightModel()
        model.update(THROTTLE_UP)
        model.reset(state_at(-1.0, fuel=500.0))
        state = model.get_state()
        assert state.kinematics.position.y == 0.0
        assert state.resources.fuel == 100.0
        assert model.get_update_count() == 0

    def test_reset_to_initial(self) -> None:
        """Test reset with no state returns to the start."""
        model = ArcadeFlightModel()
        model.update(THROTTLE_UP)
        model.reset()
        assert model.get_state() == FlightState.initial(model.config)

    def test_landing_gear_has_no_effect_on_dynamics(self) -> None:
        """Test gear position is shown but does not change motion."""
        with_gear = ArcadeFlightModel()
        without_gear = ArcadeFlightModel()
        without_gear.set_landing_gear(False)
        assert without_gear.get_state().instruments.landing_gear is False

        for _ in range(30):
            with_gear.update(THROTTLE_UP)
            without_gear.update(THROTTLE_UP)

        assert with_gear.get_state().kinematics == without_gear.get_state().kinematics
        assert without_gear.get_state().instruments.landing_gear is False
