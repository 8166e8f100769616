"""Immutable 3D vector used by the flight model and camera.

World space is right-handed with Y up and +Z pointing along the aircraft's
initial forward direction.

Typical usage example:
    from arcadeflight.physics.vectors import Vector3

    velocity = Vector3(0.0, 0.0, 0.5)
    position = Vector3.zero() + velocity
    speed = velocity.magnitude()
"""

import math
from dataclasses import dataclass


@dataclass(frozen=True)
class Vector3:
    """Three-component vector.

    Instances are frozen so a kinematic state can be shared between the tick
    function and the presentation layer without defensive copies.

    Attributes:
        x: X component (lateral).
        y: Y component (up).
        z: Z component (forward).
    """

    x: float = 0.0
    y: float = 0.0
    z: float = 0.0

    @staticmethod
    def zero() -> "Vector3":
        """Return the zero vector."""
        return Vector3(0.0, 0.0, 0.0)

    def __add__(self, other: "Vector3") -> "Vector3":
        return Vector3(self.x + other.x, self.y + other.y, self.z + other.z)

    def __sub__(self, other: "Vector3") -> "Vector3":
        return Vector3(self.x - other.x, self.y - other.y, self.z - other.z)

    def __mul__(self, scalar: float) -> "Vector3":
        return Vector3(self.x * scalar, self.y * scalar, self.z * scalar)

    __rmul__ = __mul__

    def __truediv__(self, scalar: float) -> "Vector3":
        return Vector3(self.x / scalar, self.y / scalar, self.z / scalar)

    def __neg__(self) -> "Vector3":
        return Vector3(-self.x, -self.y, -self.z)

    def magnitude(self) -> float:
        """Euclidean length."""
        return math.sqrt(self.x * self.x + self.y * self.y + self.z * self.z)

    def magnitude_squared(self) -> float:
        return self.x * self.x + self.y * self.y + self.z * self.z

    def dot(self, other: "Vector3") -> float:
        return self.x * other.x + self.y * other.y + self.z * other.z

    def cross(self, other: "Vector3") -> "Vector3":
        return Vector3(
            self.y * other.z - self.z * other.y,
            self.z * other.x - self.x * other.z,
            self.x * other.y - self.y * other.x,
        )

    def normalized(self) -> "Vector3":
        """Unit vector in the same direction (zero vector stays zero)."""
        length = self.magnitude()
        if length == 0.0:
            return Vector3.zero()
        return self / length

    def with_y(self, y: float) -> "Vector3":
        """Copy with the Y component replaced."""
        return Vector3(self.x, y, self.z)

    def rotated_xyz(self, pitch: float, yaw: float, roll: float) -> "Vector3":
        """Rotate by Euler angles applied in X-Y-Z order.

        The combined matrix is Rx(pitch) * Ry(yaw) * Rz(roll), so roll is
        applied to the vector first and pitch last.

        Args:
            pitch: Rotation about X in radians.
            yaw: Rotation about Y in radians.
            roll: Rotation about Z in radians.

        Returns:
            Rotated vector.
        """
        cos_r, sin_r = math.cos(roll), math.sin(roll)
        x1 = self.x * cos_r - self.y * sin_r
        y1 = self.x * sin_r + self.y * cos_r
        z1 = self.z

        cos_y, sin_y = math.cos(yaw), math.sin(yaw)
        x2 = x1 * cos_y + z1 * sin_y
        y2 = y1
        z2 = -x1 * sin_y + z1 * cos_y

        cos_p, sin_p = math.cos(pitch), math.sin(pitch)
        return Vector3(
            x2,
            y2 * cos_p - z2 * sin_p,
            y2 * sin_p + z2 * cos_p,
        )
