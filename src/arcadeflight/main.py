"""arcadeflight - arcade-style flight simulator.

Main entry point for the application. Initializes Pygame, creates the game
window, sets up the simulation and runs the main loop.

Typical usage:
    python -m arcadeflight.main
    python -m arcadeflight.main --preset baseline --camera cockpit
    python -m arcadeflight.main --start
"""

import argparse
import sys

import pygame

from arcadeflight.core.camera import CameraMode
from arcadeflight.core.input import InputConfig, InputManager, UserAction
from arcadeflight.core.logging_system import get_logger, initialize_logging
from arcadeflight.core.resource_path import get_config_path
from arcadeflight.core.simulation import FrameOutput, Simulation
from arcadeflight.settings import FlightSettings, KeybindingsSettings
from arcadeflight.ui.hud import HudRenderer
from arcadeflight.ui.viewport import OrbitCamera, SceneRenderer
from arcadeflight.version import get_version

logger = get_logger(__name__)

FRAME_RATE = 60


class ArcadeFlight:
    """Main application class.

    Manages initialization, the main loop and shutdown.
    """

    def __init__(self, args: argparse.Namespace | None = None) -> None:
        """Initialize the application.

        Args:
            args: Command line arguments (optional).

        Raises:
            ValueError: If the flight model settings are invalid.
        """
        self.args = args or argparse.Namespace(
            preset=None, camera=None, start=False, settings=None, log_config=None
        )

        # Initialize logging first
        log_config = self.args.log_config or str(get_config_path("logging.yaml"))
        initialize_logging(log_config, use_platform_dir=True)
        logger.info("arcadeflight %s starting up...", get_version())

        # Settings
        self.flight_settings = FlightSettings()
        self.flight_settings.load(self.args.settings)
        if self.args.preset:
            self.flight_settings.preset = self.args.preset
        if self.args.camera:
            self.flight_settings.initial_camera = self.args.camera

        self.keybindings = KeybindingsSettings()
        self.keybindings.load()
        for conflict in self.keybindings.detect_conflicts():
            logger.warning("Key %s bound to several actions: %s", conflict["key"], conflict["actions"])

        # Initialize Pygame
        pygame.init()
        pygame.display.set_caption("arcadeflight")
        self.screen = pygame.display.set_mode((1024, 700), pygame.RESIZABLE)
        self.clock = pygame.time.Clock()
        self.running = True

        # Simulation
        self.simulation = Simulation(
            config=self.flight_settings.build_config(),
            camera_mode=CameraMode(self.flight_settings.initial_camera),
            max_ticks_per_frame=self.flight_settings.max_ticks_per_frame,
        )
        if self.args.start or not self.flight_settings.start_paused:
            self.simulation.start()

        # Input (key names resolve only after pygame.init())
        input_config = InputConfig.from_key_names(self.keybindings.effective_bindings())
        self.input_manager = InputManager(self.simulation.aggregator, input_config)

        # Presentation
        self.scene = SceneRenderer()
        self.hud = HudRenderer()
        self.orbit = OrbitCamera()

        logger.info("arcadeflight initialized successfully")

    def run(self) -> None:
        """Run the main loop."""
        logger.info("Starting main loop")

        while self.running:
            dt = self.clock.tick(FRAME_RATE) / 1000.0

            self._process_events()
            frame = self.simulation.advance(dt)
            self._render(frame)

            pygame.display.flip()

        self._shutdown()

    def _process_events(self) -> None:
        """Process pygame events."""
        events = pygame.event.get()

        for event in events:
            if event.type == pygame.VIDEORESIZE:
                self.screen = pygame.display.set_mode((event.w, event.h), pygame.RESIZABLE)
                logger.debug("Window resized to %dx%d", event.w, event.h)
            elif self.simulation.camera.is_free:
                self.orbit.handle_event(event)

        for action in self.input_manager.process_events(events):
            if action is UserAction.QUIT:
                self.running = False
            else:
                self.simulation.handle_action(action)

    def _render(self, frame: FrameOutput) -> None:
        """Render scene and HUD."""
        camera = frame.camera
        if camera is None:
            camera = self.orbit.transform(frame.kinematics.position)
        self.scene.draw(self.screen, camera, frame.kinematics)
        self.hud.draw(self.screen, frame.instruments, frame.camera_mode, frame.playing)

    def _shutdown(self) -> None:
        """Clean shutdown of all systems."""
        logger.info("arcadeflight shutting down at tick %d", self.simulation.state.tick)
        pygame.quit()
        logger.info("Shutdown complete")


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command line arguments.

    Args:
        argv: Arguments (sys.argv[1:] if None).

    Returns:
        Parsed arguments
    """
    parser = argparse.ArgumentParser(description="arcadeflight - arcade-style flight simulator")

    parser.add_argument(
        "--preset",
        choices=["aerodynamic", "baseline"],
        help="Flight model preset (overrides flight_model.yaml)",
    )

    parser.add_argument(
        "--camera",
        choices=[mode.value for mode in CameraMode],
        help="Initial camera mode",
    )

    parser.add_argument(
        "--start",
        action="store_true",
        help="Start the simulation immediately instead of paused",
    )

    parser.add_argument(
        "--settings",
        type=str,
        help="Flight settings YAML file (default: packaged + ~/.arcadeflight)",
    )

    parser.add_argument(
        "--log-config",
        type=str,
        help="Logging configuration YAML file",
    )

    parser.add_argument("--version", action="version", version=f"%(prog)s {get_version()}")

    return parser.parse_args(argv)


def main() -> int:
    """Main entry point.

    Returns:
        Exit code (0 for success).
    """
    try:
        args = parse_args()
        app = ArcadeFlight(args)
        app.run()
        return 0
    except Exception as e:  # pylint: disable=broad-exception-caught
        logger.exception("Fatal error: %s", e)
        return 1


if __name__ == "__main__":
    sys.exit(main())
