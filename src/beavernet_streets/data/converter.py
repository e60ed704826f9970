"""Convert GeoJSON features into StreetSegment and Intersection records."""

import logging
import math
from typing import Any, Dict, List, Mapping, Optional, Tuple

from beavernet_streets.data.constants import INTERSECTION_PROPERTIES, STREET_PROPERTIES
from beavernet_streets.data.loader import features_of
from beavernet_streets.data.models import Intersection, StreetSegment

logger = logging.getLogger(__name__)


def _text(value: Any) -> Optional[str]:
    """Property value as a string; None for missing and null values."""
    if value is None:
        return None
    if isinstance(value, float) and math.isnan(value):
        # geopandas writes missing attributes as NaN in some drivers
        return None
    if isinstance(value, str):
        return value
    return str(value)


def _object_id(value: Any) -> Optional[int]:
    """OBJECTID as an int, or None when missing or not integral."""
    if value is None or isinstance(value, bool):
        return None
    try:
        as_float = float(value)
    except (TypeError, ValueError):
        return None
    if not math.isfinite(as_float) or not as_float.is_integer():
        return None
    return int(as_float)


def _point_coordinates(geometry: Any) -> Optional[Tuple[float, float]]:
    """
    (longitude, latitude) from a GeoJSON geometry.

    Accepts a Point, or a bare [lon, lat] pair under "coordinates" for
    exports that omit the geometry type. Anything else yields None.
    """
    if not isinstance(geometry, Mapping):
        return None
    geom_type = geometry.get("type")
    if geom_type not in (None, "Point"):
        return None

    coords = geometry.get("coordinates")
    if not isinstance(coords, (list, tuple)) or len(coords) < 2:
        return None
    try:
        lon, lat = float(coords[0]), float(coords[1])
    except (TypeError, ValueError):
        return None
    if not (math.isfinite(lon) and math.isfinite(lat)):
        return None
    return lon, lat


def _properties(feature: Mapping[str, Any]) -> Mapping[str, Any]:
    props = feature.get("properties")
    return props if isinstance(props, Mapping) else {}


def street_from_feature(feature: Mapping[str, Any]) -> StreetSegment:
    """Build a StreetSegment from one street name index feature."""
    props = _properties(feature)
    fields = STREET_PROPERTIES
    return StreetSegment(
        object_id=_object_id(props.get(fields["object_id"])),
        street=_text(props.get(fields["street"])),
        street_behind=_text(props.get(fields["street_behind"])),
        street_ahead=_text(props.get(fields["street_ahead"])),
        status=_text(props.get(fields["status"])),
        owner=_text(props.get(fields["owner"])),
    )


def intersection_from_feature(feature: Mapping[str, Any]) -> Intersection:
    """Build an Intersection from one road intersection feature."""
    props = _properties(feature)
    fields = INTERSECTION_PROPERTIES
    return Intersection(
        object_id=_object_id(props.get(fields["object_id"])),
        name=_text(props.get(fields["name"])),
        street1=_text(props.get(fields["street1"])),
        street2=_text(props.get(fields["street2"])),
        street3=_text(props.get(fields["street3"])),
        street4=_text(props.get(fields["street4"])),
        coordinates=_point_coordinates(feature.get("geometry")),
        junction=_text(props.get(fields["junction"])),
    )


def convert_streets(document: Dict[str, Any], source: str = "streets") -> List[StreetSegment]:
    """
    Convert a street name index document into StreetSegments.

    Features that are not objects are skipped; missing properties become
    None. Feature order is preserved.

    Raises:
        DatasetFormatError: Document is not a GeoJSON-like object
    """
    streets = []
    for i, feature in enumerate(features_of(document, source)):
        if not isinstance(feature, Mapping):
            logger.debug("Skipping street feature %d in %s: not an object", i, source)
            continue
        streets.append(street_from_feature(feature))
    return streets


def convert_intersections(
    document: Dict[str, Any], source: str = "intersections"
) -> List[Intersection]:
    """
    Convert a road intersection document into Intersections.

    Same tolerance rules as convert_streets. Features without a usable point
    geometry are kept with coordinates=None.
    """
    intersections = []
    for i, feature in enumerate(features_of(document, source)):
        if not isinstance(feature, Mapping):
            logger.debug("Skipping intersection feature %d in %s: not an object", i, source)
            continue
        intersection = intersection_from_feature(feature)
        if intersection.coordinates is None:
            logger.debug(
                "Intersection %s in %s has no point geometry", intersection.object_id, source
            )
        intersections.append(intersection)
    return intersections
