"""Simulation driver: fixed-rate ticks, pause, camera and gear actions.

The driver owns the input aggregator, the flight model and the camera
controller. The render loop reports elapsed wall-clock time once per frame
and the scheduler turns it into a whole number of fixed ticks. Each tick
takes one snapshot of the held controls, so input that changes mid-frame is
seen whole by the next tick or not at all.

Pausing suspends scheduling entirely. Time that passes while paused is
discarded, so resuming never replays missed ticks.

Typical usage example:
    from arcadeflight.core.simulation import Simulation

    sim = Simulation()
    sim.start()
    while running:
        manager.process_events(pygame.event.get())
        frame = sim.advance(clock.tick(60) / 1000.0)
        renderer.draw(frame)
"""

from dataclasses import dataclass

from arcadeflight.core.camera import CameraController, CameraMode, CameraTransform
from arcadeflight.core.input import InputAggregator, UserAction
from arcadeflight.core.logging_system import get_logger
from arcadeflight.physics.flight_model.arcade import ArcadeFlightModel
from arcadeflight.physics.flight_model.base import (
    AircraftKinematics,
    FlightModelConfig,
    FlightState,
    InstrumentSnapshot,
)

logger = get_logger(__name__)

DEFAULT_MAX_TICKS_PER_FRAME = 5


class FixedTickScheduler:
    """Converts frame time into fixed ticks with an accumulator.

    Leftover time carries over to the next frame. At most ``max_ticks`` are
    produced per frame; time beyond that is dropped so a long stall (window
    drag, debugger) does not trigger a burst of catch-up ticks.
    """

    def __init__(self, tick_seconds: float, max_ticks: int = DEFAULT_MAX_TICKS_PER_FRAME) -> None:
        """Initialize the scheduler.

        Args:
            tick_seconds: Duration of one tick.
            max_ticks: Maximum ticks per frame.

        Raises:
            ValueError: If tick_seconds or max_ticks is not positive.
        """
        if tick_seconds <= 0.0:
            raise ValueError("tick_seconds must be positive")
        if max_ticks < 1:
            raise ValueError("max_ticks must be at least 1")
        self.tick_seconds = tick_seconds
        self.max_ticks = max_ticks
        self._accumulator = 0.0
        self.paused = True

    def pause(self) -> None:
        self.paused = True
        self._accumulator = 0.0

    def resume(self) -> None:
        self.paused = False
        self._accumulator = 0.0

    def ticks_for(self, elapsed: float) -> int:
        """Number of ticks to run for a frame.

        Args:
            elapsed: Wall-clock seconds since the previous frame.

        Returns:
            Tick count (0 while paused).
        """
        if self.paused or elapsed <= 0.0:
            return 0

        self._accumulator += elapsed
        ticks = int(self._accumulator / self.tick_seconds)
        if ticks > self.max_ticks:
            logger.debug("Dropping %d ticks after a long frame", ticks - self.max_ticks)
            ticks = self.max_ticks
            self._accumulator = 0.0
        else:
            self._accumulator -= ticks * self.tick_seconds
        return ticks


@dataclass(frozen=True)
class FrameOutput:
    """Read-only data handed to the presentation layer each frame.

    Attributes:
        kinematics: Aircraft pose for mesh placement.
        instruments: Values for the HUD.
        camera: Camera transform, or None when the orbit controls own it.
        camera_mode: Current camera mode.
        playing: False while paused.
        ticks: Ticks integrated during this frame.
    """

    kinematics: AircraftKinematics
    instruments: InstrumentSnapshot
    camera: CameraTransform | None
    camera_mode: CameraMode
    playing: bool
    ticks: int = 0


class Simulation:
    """Drives the flight model and camera from held controls.

    Examples:
        >>> sim = Simulation()
        >>> sim.aggregator.activate("throttle_up")
        >>> sim.start()
        >>> frame = sim.advance(1.0 / 60.0)
        >>> frame.instruments.throttle
        2
    """

    def __init__(
        self,
        config: FlightModelConfig | None = None,
        aggregator: InputAggregator | None = None,
        camera_mode: CameraMode = CameraMode.CHASE,
        max_ticks_per_frame: int = DEFAULT_MAX_TICKS_PER_FRAME,
    ) -> None:
        """Initialize the simulation (paused).

        Args:
            config: Flight model configuration (aerodynamic variant if None).
            aggregator: Input aggregator (a new one if None).
            camera_mode: Initial camera mode.
            max_ticks_per_frame: Upper bound on ticks per advance() call.
        """
        self.flight_model = ArcadeFlightModel(config)
        self.aggregator = aggregator if aggregator is not None else InputAggregator()
        self.camera = CameraController(camera_mode)
        self.scheduler = FixedTickScheduler(self.flight_model.config.tick_seconds, max_ticks_per_frame)
        self.camera.update(self.flight_model.get_state().kinematics)
        logger.info("Simulation initialized (paused)")

    @property
    def playing(self) -> bool:
        return not self.scheduler.paused

    @property
    def state(self) -> FlightState:
        return self.flight_model.get_state()

    def start(self) -> None:
        """Start or resume tick scheduling."""
        if self.playing:
            return
        self.scheduler.resume()
        logger.info("Simulation started at tick %d", self.state.tick)

    def pause(self) -> None:
        """Suspend tick scheduling."""
        if not self.playing:
            return
        self.scheduler.pause()
        logger.info("Simulation paused at tick %d", self.state.tick)

    def toggle_pause(self) -> bool:
        """Toggle between playing and paused.

        Returns:
            True if now playing.
        """
        if self.playing:
            self.pause()
        else:
            self.start()
        return self.playing

    def cycle_camera(self) -> CameraMode:
        """Advance the camera mode and place the camera for the current pose."""
        mode = self.camera.cycle()
        self.camera.update(self.state.kinematics)
        return mode

    def toggle_landing_gear(self) -> bool:
        """Flip the landing gear.

        Returns:
            True if the gear is now down.
        """
        down = not self.state.resources.landing_gear
        self.flight_model.set_landing_gear(down)
        logger.info("Landing gear %s", "down" if down else "up")
        return down

    def reset(self) -> None:
        """Return the aircraft to the initial state (paused state unchanged)."""
        self.flight_model.reset()
        self.aggregator.release_all()
        self.camera.update(self.state.kinematics)
        logger.info("Simulation reset")

    def handle_action(self, action: UserAction) -> None:
        """Apply a one-shot user action between ticks.

        QUIT is left to the caller.
        """
        if action is UserAction.TOGGLE_PAUSE:
            self.toggle_pause()
        elif action is UserAction.CYCLE_CAMERA:
            self.cycle_camera()
        elif action is UserAction.TOGGLE_GEAR:
            self.toggle_landing_gear()

    def tick(self) -> FlightState:
        """Run exactly one tick.

        Does nothing while paused; held controls stay queued for the first
        tick after resuming.

        Returns:
            Flight state after the tick (unchanged while paused).
        """
        if not self.playing:
            return self.state
        state = self.flight_model.update(self.aggregator.snapshot())
        self.camera.update(state.kinematics)
        return state

    def advance(self, elapsed: float) -> FrameOutput:
        """Run the ticks due for a frame and collect the frame output.

        Args:
            elapsed: Wall-clock seconds since the previous frame.

        Returns:
            Output for the presentation layer.
        """
        ticks = self.scheduler.ticks_for(elapsed)
        for _ in range(ticks):
            self.tick()
        return self.frame(ticks)

    def frame(self, ticks: int = 0) -> FrameOutput:
        """Current output without advancing."""
        state = self.state
        camera = None if self.camera.is_free else self.camera.last_transform
        return FrameOutput(
            kinematics=state.kinematics,
            instruments=state.instruments,
            camera=camera,
            camera_mode=self.camera.mode,
            playing=self.playing,
            ticks=ticks,
        )
