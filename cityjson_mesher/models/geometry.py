"""
Core geometry types for CityJSON Mesher.

Provides the Point3D value type used by the planar projector. Points
are immutable; vector helpers always return new instances.
"""

from dataclasses import dataclass
from typing import Sequence
import math


@dataclass(frozen=True, slots=True)
class Point3D:
    """3D point or vector in target model coordinates."""
    x: float
    y: float
    z: float

    @staticmethod
    def from_sequence(values: Sequence[float]) -> 'Point3D':
        """Build a point from an [x, y, z] list or tuple."""
        return Point3D(float(values[0]), float(values[1]), float(values[2]))

    def __sub__(self, other: 'Point3D') -> 'Point3D':
        """Vector subtraction."""
        return Point3D(self.x - other.x, self.y - other.y, self.z - other.z)

    def __add__(self, other: 'Point3D') -> 'Point3D':
        """Vector addition."""
        return Point3D(self.x + other.x, self.y + other.y, self.z + other.z)

    def scaled(self, factor: float) -> 'Point3D':
        """Multiply every component by factor."""
        return Point3D(self.x * factor, self.y * factor, self.z * factor)

    def dot(self, other: 'Point3D') -> float:
        """Dot product."""
        return self.x * other.x + self.y * other.y + self.z * other.z

    def cross(self, other: 'Point3D') -> 'Point3D':
        """Cross product (self x other)."""
        return Point3D(
            self.y * other.z - self.z * other.y,
            self.z * other.x - self.x * other.z,
            self.x * other.y - self.y * other.x
        )

    def length(self) -> float:
        """Euclidean length."""
        return math.sqrt(self.x * self.x + self.y * self.y + self.z * self.z)

    def distance_to(self, other: 'Point3D') -> float:
        """Euclidean distance to another point."""
        return (self - other).length()

    def normalized(self) -> 'Point3D':
        """
        Unit vector in the same direction.

        A zero-length vector is returned unchanged, so degenerate loops
        produce a zero normal instead of raising.
        """
        length = self.length()
        if length == 0.0:
            return self
        return Point3D(self.x / length, self.y / length, self.z / length)
