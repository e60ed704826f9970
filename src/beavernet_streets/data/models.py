"""Street segment and intersection records."""

import math
from dataclasses import dataclass
from typing import Any, Dict, Optional, Tuple

from shapely.geometry import Point


def is_blank(name: Optional[str]) -> bool:
    """True for None, empty, and whitespace-only names."""
    return name is None or name.strip() == ""


@dataclass(frozen=True)
class StreetSegment:
    """One named street and its neighbours in the street name index."""

    object_id: Optional[int] = None
    street: Optional[str] = None
    street_behind: Optional[str] = None
    street_ahead: Optional[str] = None
    status: Optional[str] = None
    owner: Optional[str] = None

    @property
    def names(self) -> Tuple[str, ...]:
        """Non-blank names, in field order (street, behind, ahead)."""
        candidates = (self.street, self.street_behind, self.street_ahead)
        return tuple(n for n in candidates if n is not None and not is_blank(n))

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            "object_id": self.object_id,
            "street": self.street,
            "street_behind": self.street_behind,
            "street_ahead": self.street_ahead,
            "status": self.status,
            "owner": self.owner,
        }


@dataclass(frozen=True)
class Intersection:
    """A named junction of up to four streets at a single point."""

    object_id: Optional[int] = None
    name: Optional[str] = None
    street1: Optional[str] = None
    street2: Optional[str] = None
    street3: Optional[str] = None
    street4: Optional[str] = None
    coordinates: Optional[Tuple[float, float]] = None  # (longitude, latitude)
    junction: Optional[str] = None

    @property
    def members(self) -> Tuple[str, ...]:
        """Non-blank member streets, street1 through street4."""
        candidates = (self.street1, self.street2, self.street3, self.street4)
        return tuple(s for s in candidates if s is not None and not is_blank(s))

    @property
    def longitude(self) -> Optional[float]:
        return self.coordinates[0] if self.coordinates else None

    @property
    def latitude(self) -> Optional[float]:
        return self.coordinates[1] if self.coordinates else None

    @property
    def point(self) -> Optional[Point]:
        """Location as a shapely Point (x=longitude, y=latitude)."""
        if self.coordinates is None:
            return None
        lon, lat = self.coordinates
        if not (math.isfinite(lon) and math.isfinite(lat)):
            return None
        return Point(lon, lat)

    @property
    def cross_street(self) -> Optional[str]:
        """
        The street a dispatcher records as the cross street.

        Conventionally street1 is the main street, so this is street2,
        falling back to street1 for single-street junctions.
        """
        for candidate in (self.street2, self.street1):
            if candidate is not None and not is_blank(candidate):
                return candidate
        return None

    @property
    def selected_cross_street(self) -> Optional[str]:
        """Cross street filled in when this intersection is picked; None if it repeats street1."""
        cross = self.cross_street
        if cross is None or cross == self.street1:
            return None
        return cross

    def has_member(self, street_name: str) -> bool:
        """Whole-string, case-insensitive membership test."""
        target = street_name.strip().lower()
        return any(member.lower() == target for member in self.members)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            "object_id": self.object_id,
            "name": self.name,
            "members": list(self.members),
            "longitude": self.longitude,
            "latitude": self.latitude,
            "junction": self.junction,
        }
