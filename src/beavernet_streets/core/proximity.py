"""Nearest-intersection search for GPS fixes."""

import math
from typing import Optional

from shapely.geometry import Point

from beavernet_streets.data.constants import DEFAULT_MAX_DISTANCE
from beavernet_streets.data.models import Intersection
from beavernet_streets.data.store import StreetDataStore


class ProximityFinder:
    """
    Finds the intersection closest to a coordinate.

    Distance is planar Euclidean over raw (longitude, latitude) degrees,
    not geodesic. A degree of longitude is shorter than a degree of
    latitude away from the equator, so the tolerance is an ellipse on the
    ground. max_distance is in the same degree units.
    """

    def __init__(self, store: StreetDataStore):
        """
        Initialize with a street data store.

        Args:
            store: Store holding intersections (must already be loaded)
        """
        self._store = store

    def find_closest_intersection(
        self,
        latitude: float,
        longitude: float,
        max_distance: float = DEFAULT_MAX_DISTANCE,
    ) -> Optional[Intersection]:
        """
        Find the nearest intersection strictly within max_distance.

        Candidates are scanned in dataset order and must be strictly closer
        than the best so far, so the first of two equidistant intersections
        wins and one exactly at max_distance does not qualify.

        Args:
            latitude: Latitude (decimal degrees)
            longitude: Longitude (decimal degrees)
            max_distance: Tolerance in degrees

        Returns:
            Closest Intersection, or None if nothing is in range or the
            inputs are not finite numbers
        """
        try:
            lat, lon, limit = float(latitude), float(longitude), float(max_distance)
        except (TypeError, ValueError):
            return None
        if not all(math.isfinite(v) for v in (lat, lon, limit)):
            return None

        # Shapely uses (x, y) = (lon, lat)
        query = Point(lon, lat)

        closest: Optional[Intersection] = None
        min_distance = limit
        for intersection in self._store.intersections:
            point = intersection.point
            if point is None:
                continue
            distance = query.distance(point)
            if distance < min_distance:
                min_distance = distance
                closest = intersection

        return closest
