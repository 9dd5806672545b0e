"""
Geolocation Interface

Port interface deciding whether a reported position lies inside a geo-fence.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from ...domain.resources.value_objects import GeoFence


class GeoFenceChecker(ABC):
    """Abstract interface for geo-fence membership checks."""

    @abstractmethod
    def is_inside(self, fence: GeoFence, latitude: float, longitude: float) -> bool:
        """Check whether a coordinate lies inside ``fence``.

        Args:
            fence: The event's geo-fence.
            latitude: Reported latitude in degrees.
            longitude: Reported longitude in degrees.

        Returns:
            True if the point is within the fence radius.
        """
        ...
