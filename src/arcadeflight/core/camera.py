"""Camera mode state machine.

Three modes are cycled by an explicit user action, CHASE -> COCKPIT -> FREE
-> CHASE. CHASE and COCKPIT place the camera relative to the aircraft every
tick; FREE leaves the camera to the user-driven orbit controls of the
presentation layer.

Typical usage example:
    from arcadeflight.core.camera import CameraController

    camera = CameraController()
    camera.cycle()  # CHASE -> COCKPIT
    transform = camera.update(state.kinematics)
    if transform is not None:
        renderer.look_at(transform.eye, transform.target)
"""

from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum

from arcadeflight.core.logging_system import get_logger
from arcadeflight.physics.flight_model.base import AircraftKinematics
from arcadeflight.physics.vectors import Vector3

logger = get_logger(__name__)

COCKPIT_EYE_OFFSET = Vector3(0.0, 2.0, 1.0)
COCKPIT_LOOK_AHEAD = Vector3(0.0, 0.0, 10.0)
CHASE_EYE_OFFSET = Vector3(0.0, 5.0, -15.0)


class CameraMode(Enum):
    """Camera viewpoints, in cycle order."""

    CHASE = "chase"
    COCKPIT = "cockpit"
    FREE = "free"

    def next(self) -> "CameraMode":
        """Mode that follows this one in the cycle."""
        modes = list(CameraMode)
        return modes[(modes.index(self) + 1) % len(modes)]


@dataclass(frozen=True)
class CameraTransform:
    """Camera placement for one frame.

    Attributes:
        eye: Camera position in world units.
        target: Point the camera looks at.
    """

    eye: Vector3
    target: Vector3


def cockpit_camera(kinematics: AircraftKinematics) -> CameraTransform:
    """Camera just above and ahead of the pilot's seat.

    The look target is a fixed world-space +Z offset, not the aircraft's
    heading, so the view does not turn with the aircraft.
    """
    position = kinematics.position
    return CameraTransform(eye=position + COCKPIT_EYE_OFFSET, target=position + COCKPIT_LOOK_AHEAD)


def chase_camera(kinematics: AircraftKinematics) -> CameraTransform:
    """Camera above and behind the aircraft, looking at it."""
    position = kinematics.position
    return CameraTransform(eye=position + CHASE_EYE_OFFSET, target=position)


def free_camera(kinematics: AircraftKinematics) -> None:  # pylint: disable=unused-argument
    """No placement: the orbit controls own the camera."""
    return None


CameraHandler = Callable[[AircraftKinematics], CameraTransform | None]

CAMERA_HANDLERS: dict[CameraMode, CameraHandler] = {
    CameraMode.CHASE: chase_camera,
    CameraMode.COCKPIT: cockpit_camera,
    CameraMode.FREE: free_camera,
}


class CameraController:
    """Holds the current camera mode and computes the camera transform.

    Examples:
        >>> camera = CameraController()
        >>> camera.mode
        <CameraMode.CHASE: 'chase'>
        >>> camera.cycle()
        <CameraMode.COCKPIT: 'cockpit'>
    """

    def __init__(
        self,
        mode: CameraMode = CameraMode.CHASE,
        handlers: dict[CameraMode, CameraHandler] | None = None,
    ) -> None:
        """Initialize the camera controller.

        Args:
            mode: Initial camera mode.
            handlers: Placement function per mode (defaults to CAMERA_HANDLERS).

        Raises:
            ValueError: If a mode has no handler.
        """
        self.handlers = dict(handlers) if handlers is not None else dict(CAMERA_HANDLERS)
        missing = [m.value for m in CameraMode if m not in self.handlers]
        if missing:
            raise ValueError(f"No camera handler for mode(s): {', '.join(missing)}")
        self.mode = mode
        self.last_transform: CameraTransform | None = None

    @property
    def is_free(self) -> bool:
        """True when the camera is left to the user's orbit controls."""
        return self.mode is CameraMode.FREE

    def cycle(self) -> CameraMode:
        """Advance to the next mode.

        Returns:
            The new mode.
        """
        previous = self.mode
        self.mode = self.mode.next()
        logger.info("Camera mode: %s -> %s", previous.value, self.mode.value)
        return self.mode

    def update(self, kinematics: AircraftKinematics | None) -> CameraTransform | None:
        """Compute the camera transform for this tick.

        Args:
            kinematics: Aircraft pose, or None if not produced yet.

        Returns:
            Camera transform, or None in FREE mode or without a pose.
        """
        if kinematics is None:
            return None
        self.last_transform = self.handlers[self.mode](kinematics)
        return self.last_transform
