"""3D viewport: pinhole projection, orbit camera and scene drawing.

The scene is deliberately minimal: a ground grid, a runway along +Z and a
wireframe aircraft. Points are projected through a look-at camera built from
the CameraTransform produced by the camera state machine, or from the
OrbitCamera while the camera is in FREE mode.
"""

import math
from dataclasses import dataclass

import pygame  # pylint: disable=no-member

from arcadeflight.core.camera import CameraTransform
from arcadeflight.physics.flight_model.base import AircraftKinematics
from arcadeflight.physics.vectors import Vector3

WORLD_UP = Vector3(0.0, 1.0, 0.0)
NEAR_PLANE = 0.1

SKY_COLOR = (30, 64, 120)
GROUND_COLOR = (34, 197, 94)
GRID_COLOR = (22, 163, 74)
RUNWAY_COLOR = (55, 65, 81)
RUNWAY_MARKING_COLOR = (251, 191, 36)
AIRCRAFT_COLOR = (229, 231, 235)

RUNWAY_HALF_WIDTH = 10.0
RUNWAY_HALF_LENGTH = 100.0
GRID_EXTENT = 500
GRID_SPACING = 50

# Wireframe in aircraft axes (x right, y up, z forward)
AIRCRAFT_SEGMENTS: list[tuple[Vector3, Vector3]] = [
    (Vector3(0.0, 0.0, 2.0), Vector3(0.0, 0.0, -2.0)),  # fuselage
    (Vector3(-3.0, 0.0, 0.0), Vector3(3.0, 0.0, 0.0)),  # wings
    (Vector3(-1.0, 0.0, -1.5), Vector3(1.0, 0.0, -1.5)),  # tailplane
    (Vector3(0.0, 0.0, -1.5), Vector3(0.0, 1.0, -1.5)),  # fin
]


@dataclass(frozen=True)
class Projection:
    """Pinhole camera for one frame."""

    eye: Vector3
    right: Vector3
    up: Vector3
    forward: Vector3
    focal_length: float
    center: tuple[float, float]

    @classmethod
    def look_at(
        cls, transform: CameraTransform, screen_size: tuple[int, int], fov_deg: float = 75.0
    ) -> "Projection":
        """Build a projection from a camera transform.

        Args:
            transform: Eye and target.
            screen_size: Surface width and height in pixels.
            fov_deg: Vertical field of view.

        Returns:
            Projection for the frame.
        """
        forward = (transform.target - transform.eye).normalized()
        if forward.magnitude_squared() == 0.0:
            forward = Vector3(0.0, 0.0, 1.0)
        right = forward.cross(WORLD_UP).normalized()
        if right.magnitude_squared() == 0.0:
            # Looking straight up or down
            right = Vector3(1.0, 0.0, 0.0)
        up = right.cross(forward)

        width, height = screen_size
        focal_length = (height / 2.0) / math.tan(math.radians(fov_deg) / 2.0)
        return cls(transform.eye, right, up, forward, focal_length, (width / 2.0, height / 2.0))

    def to_camera(self, point: Vector3) -> Vector3:
        d = point - self.eye
        return Vector3(d.dot(self.right), d.dot(self.up), d.dot(self.forward))

    def project(self, point: Vector3) -> tuple[float, float] | None:
        """Screen coordinates of a world point, or None behind the camera."""
        local = self.to_camera(point)
        if local.z <= NEAR_PLANE:
            return None
        return self._to_screen(local)

    def project_segment(
        self, start: Vector3, end: Vector3
    ) -> tuple[tuple[float, float], tuple[float, float]] | None:
        """Project a segment, clipping it against the near plane."""
        a = self.to_camera(start)
        b = self.to_camera(end)
        if a.z <= NEAR_PLANE and b.z <= NEAR_PLANE:
            return None
        if a.z <= NEAR_PLANE:
            a = _clip(a, b)
        elif b.z <= NEAR_PLANE:
            b = _clip(b, a)
        return self._to_screen(a), self._to_screen(b)

    def _to_screen(self, local: Vector3) -> tuple[float, float]:
        cx, cy = self.center
        return (
            cx + local.x / local.z * self.focal_length,
            cy - local.y / local.z * self.focal_length,
        )


def _clip(behind: Vector3, front: Vector3) -> Vector3:
    t = (NEAR_PLANE - behind.z) / (front.z - behind.z)
    return behind + (front - behind) * t


class OrbitCamera:
    """Mouse-driven orbit around the aircraft for FREE camera mode.

    Drag with the left button to orbit, use the wheel to zoom.
    """

    MIN_DISTANCE = 5.0
    MAX_DISTANCE = 200.0
    MAX_ELEVATION = math.radians(85.0)

    def __init__(self, distance: float = 22.0, azimuth: float = 0.0, elevation: float = 0.47) -> None:
        self.distance = distance
        self.azimuth = azimuth
        self.elevation = elevation
        self.sensitivity = 0.01

    def handle_event(self, event: pygame.event.Event) -> None:
        if event.type == pygame.MOUSEMOTION and event.buttons[0]:
            dx, dy = event.rel
            self.azimuth -= dx * self.sensitivity
            self.elevation = max(
                -self.MAX_ELEVATION,
                min(self.MAX_ELEVATION, self.elevation + dy * self.sensitivity),
            )
        elif event.type == pygame.MOUSEWHEEL:
            self.distance = max(
                self.MIN_DISTANCE, min(self.MAX_DISTANCE, self.distance * (0.9**event.y))
            )

    def transform(self, target: Vector3) -> CameraTransform:
        """Camera transform orbiting target."""
        horizontal = self.distance * math.cos(self.elevation)
        offset = Vector3(
            horizontal * math.sin(self.azimuth),
            self.distance * math.sin(self.elevation),
            -horizontal * math.cos(self.azimuth),
        )
        return CameraTransform(eye=target + offset, target=target)


class SceneRenderer:
    """Draws ground, runway and aircraft for a camera transform."""

    def draw(
        self, surface: pygame.Surface, camera: CameraTransform, kinematics: AircraftKinematics
    ) -> None:
        surface.fill(SKY_COLOR)
        projection = Projection.look_at(camera, surface.get_size())

        self._draw_ground(surface, projection)
        self._draw_runway(surface, projection)
        self._draw_aircraft(surface, projection, kinematics)

    def _draw_ground(self, surface: pygame.Surface, projection: Projection) -> None:
        # The camera never rolls, so the horizon is a horizontal line
        level = projection.forward.with_y(0.0).normalized()
        if level.magnitude_squared() > 0.0:
            horizon = projection.project(projection.eye + level * 1.0e5)
            if horizon is not None:
                width, height = surface.get_size()
                top = max(0, int(horizon[1]))
                if top < height:
                    surface.fill(GROUND_COLOR, pygame.Rect(0, top, width, height - top))
        elif projection.forward.y < 0.0:
            surface.fill(GROUND_COLOR)

        for offset in range(-GRID_EXTENT, GRID_EXTENT + 1, GRID_SPACING):
            self._line(surface, projection, Vector3(offset, 0.0, -GRID_EXTENT),
                       Vector3(offset, 0.0, GRID_EXTENT), GRID_COLOR)
            self._line(surface, projection, Vector3(-GRID_EXTENT, 0.0, offset),
                       Vector3(GRID_EXTENT, 0.0, offset), GRID_COLOR)

    def _draw_runway(self, surface: pygame.Surface, projection: Projection) -> None:
        corners = [
            Vector3(-RUNWAY_HALF_WIDTH, 0.01, -RUNWAY_HALF_LENGTH),
            Vector3(RUNWAY_HALF_WIDTH, 0.01, -RUNWAY_HALF_LENGTH),
            Vector3(RUNWAY_HALF_WIDTH, 0.01, RUNWAY_HALF_LENGTH),
            Vector3(-RUNWAY_HALF_WIDTH, 0.01, RUNWAY_HALF_LENGTH),
        ]
        self._fill_polygon(surface, projection, corners, RUNWAY_COLOR)
        self._line(surface, projection, Vector3(0.0, 0.02, -RUNWAY_HALF_LENGTH),
                   Vector3(0.0, 0.02, RUNWAY_HALF_LENGTH), RUNWAY_MARKING_COLOR, width=2)

    def _draw_aircraft(
        self, surface: pygame.Surface, projection: Projection, kinematics: AircraftKinematics
    ) -> None:
        o = kinematics.orientation
        for start, end in AIRCRAFT_SEGMENTS:
            world_start = kinematics.position + start.rotated_xyz(o.pitch, o.yaw, o.roll)
            world_end = kinematics.position + end.rotated_xyz(o.pitch, o.yaw, o.roll)
            self._line(surface, projection, world_start, world_end, AIRCRAFT_COLOR, width=3)

    @staticmethod
    def _line(
        surface: pygame.Surface,
        projection: Projection,
        start: Vector3,
        end: Vector3,
        color: tuple[int, int, int],
        width: int = 1,
    ) -> None:
        segment = projection.project_segment(start, end)
        if segment is not None:
            pygame.draw.line(surface, color, segment[0], segment[1], width)

    @staticmethod
    def _fill_polygon(
        surface: pygame.Surface,
        projection: Projection,
        corners: list[Vector3],
        color: tuple[int, int, int],
    ) -> None:
        points = [projection.project(corner) for corner in corners]
        visible = [p for p in points if p is not None]
        # Partially visible polygons are left to the grid lines
        if len(visible) == len(corners):
            pygame.draw.polygon(surface, color, visible)
