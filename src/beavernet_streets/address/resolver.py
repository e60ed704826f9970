"""Detect streets in free-text addresses and suggest intersections."""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from beavernet_streets.data.constants import MAX_SUGGESTED_INTERSECTIONS
from beavernet_streets.data.models import Intersection
from beavernet_streets.data.store import StreetDataStore


@dataclass
class IntersectionAnalysis:
    """Result from analyzing an address for streets and intersections."""

    detected_streets: List[str] = field(default_factory=list)
    suggested_intersections: List[Intersection] = field(default_factory=list)
    cross_street: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            "detected_streets": list(self.detected_streets),
            "suggested_intersections": [i.to_dict() for i in self.suggested_intersections],
            "cross_street": self.cross_street,
        }


class IntersectionResolver:
    """
    Resolve a free-text address to intersection suggestions.

    A known street is "detected" when its name appears anywhere in the
    address (case-insensitive). The first detected street anchors the
    suggestions; when several streets are detected and one intersection
    covers all of them, that intersection and its cross street are returned.

    Every "first" here follows dataset load order. The store must already
    be loaded.
    """

    def __init__(
        self,
        store: StreetDataStore,
        max_suggestions: int = MAX_SUGGESTED_INTERSECTIONS,
    ):
        """
        Initialize with a street data store.

        Args:
            store: Store holding street segments and intersections
            max_suggestions: Cap on suggested intersections
        """
        self._store = store
        self.max_suggestions = max_suggestions

    def find_intersections_for_street(self, street_name: Optional[str]) -> List[Intersection]:
        """
        Find intersections that have a street as a member.

        Whole-name comparison, ignoring case and surrounding whitespace of
        the query: "Main" does not match a member named "Main Street East".

        Args:
            street_name: Street name

        Returns:
            Matching intersections in dataset order
        """
        if street_name is None or street_name.strip() == "":
            return []

        return [i for i in self._store.intersections if i.has_member(street_name)]

    def detect_streets(self, address: Optional[str]) -> List[str]:
        """
        Known street names contained in an address.

        Returns:
            Distinct names in first-seen order
        """
        normalized = (address or "").strip().lower()
        if not normalized:
            return []

        # dict preserves insertion order
        detected: Dict[str, None] = {}
        for name in self._store.street_names():
            if name not in detected and name.lower() in normalized:
                detected[name] = None
        return list(detected)

    def analyze_address(self, address: Optional[str]) -> IntersectionAnalysis:
        """
        Analyze an address for streets, intersections, and a cross street.

        Args:
            address: Free-text address as typed by the user

        Returns:
            IntersectionAnalysis. cross_street is set only when several
            streets were detected and one intersection covers them all.
        """
        detected = self.detect_streets(address)
        if not detected:
            return IntersectionAnalysis()

        main_street = detected[0]
        baseline = self.find_intersections_for_street(main_street)

        if len(detected) > 1:
            precise = self._find_covering_intersection(detected)
            if precise is not None:
                return IntersectionAnalysis(
                    detected_streets=detected,
                    suggested_intersections=[precise],
                    cross_street=self._cross_street(precise, main_street),
                )

        return IntersectionAnalysis(
            detected_streets=detected,
            suggested_intersections=baseline[: self.max_suggestions],
        )

    def _find_covering_intersection(self, streets: List[str]) -> Optional[Intersection]:
        """
        First intersection whose members cover every street.

        A street is covered when some member contains it (substring, any
        case), so "Park" is covered by a member named "Park Ave".
        """
        wanted = [s.lower() for s in streets]
        for intersection in self._store.intersections:
            members = [m.lower() for m in intersection.members]
            if all(any(street in member for member in members) for street in wanted):
                return intersection
        return None

    def _cross_street(self, intersection: Intersection, main_street: str) -> Optional[str]:
        """First member (street1..street4) that is not the main street."""
        main = main_street.lower()
        for member in intersection.members:
            if member.lower() != main:
                return member
        return None
