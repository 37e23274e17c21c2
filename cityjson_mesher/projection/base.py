"""
Projection interface for CityJSON Mesher.
"""

from abc import ABC, abstractmethod
from typing import Tuple

from ..models.geometry import Point3D


class IProjector(ABC):
    """
    Abstract interface for surface projection.

    Implementations map 3D points of one surface into a 2D coordinate
    system suitable for polygon triangulation.
    """

    @abstractmethod
    def project(self, point: Point3D) -> Tuple[float, float]:
        """
        Project a point to 2D.

        Args:
            point: 3D point on (or near) the surface

        Returns:
            (x, y) tuple in the surface's 2D coordinate system
        """
        pass
