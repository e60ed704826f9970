"""Dataset locations, GeoJSON field names, and loader configuration."""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple, Union

# Source may be an http(s) URL, a file:// URL, or a local path
Source = Union[str, Path]

DEFAULT_DATA_BASE_URL = "http://localhost:5000"

# Niagara Falls open-data exports served by the dashboard under /data
DATASET_URLS: Dict[str, str] = {
    "streets": (
        "{base_url}/data/"
        "Niagara_Falls_Street_Name_Index_-8670139053025367381_1752312661882.geojson"
    ),
    "intersections": (
        "{base_url}/data/"
        "Niagara_Falls_Road_Intersections_-1092401235777495093_1752312814144.geojson"
    ),
}

# GeoJSON property name for each StreetSegment field
STREET_PROPERTIES: Dict[str, str] = {
    "object_id": "OBJECTID",
    "street": "STREET",
    "street_behind": "STREET_BACK",
    "street_ahead": "STREET_AHEAD",
    "status": "STATUS",
    "owner": "OWNER",
}

# GeoJSON property name for each Intersection field
INTERSECTION_PROPERTIES: Dict[str, str] = {
    "object_id": "OBJECTID",
    "name": "INT_NAME",
    "street1": "STREET1",
    "street2": "STREET2",
    "street3": "STREET3",
    "street4": "STREET4",
    "junction": "JUNCTION",
}

# Minimum trimmed query length for street search
MIN_QUERY_LENGTH = 2

# Caps applied by the resolver and the suggestion facade
MAX_SUGGESTED_INTERSECTIONS = 10
DEFAULT_SUGGESTION_LIMIT = 8

# Planar tolerance in raw degrees (roughly 1 km at Niagara Falls latitudes)
DEFAULT_MAX_DISTANCE = 0.01

ENV_DATA_BASE_URL = "BEAVERNET_DATA_BASE_URL"
ENV_STREETS_SOURCE = "BEAVERNET_STREETS_SOURCE"
ENV_INTERSECTIONS_SOURCE = "BEAVERNET_INTERSECTIONS_SOURCE"
ENV_FETCH_TIMEOUT = "BEAVERNET_FETCH_TIMEOUT"


def dataset_url(dataset: str, base_url: str = DEFAULT_DATA_BASE_URL) -> str:
    """Build the default URL for a dataset ("streets" or "intersections")."""
    if dataset not in DATASET_URLS:
        raise ValueError(f"Unknown dataset: {dataset}. Expected one of {sorted(DATASET_URLS)}")
    return DATASET_URLS[dataset].format(base_url=base_url.rstrip("/"))


@dataclass
class StreetDataConfig:
    """Where the two datasets live and how to fetch them."""

    streets_source: Source = dataset_url("streets")
    intersections_source: Source = dataset_url("intersections")
    timeout: float = 30.0  # seconds, total per request
    retries: int = 3
    use_fallback: bool = False  # serve the built-in sample when loading fails

    @classmethod
    def from_env(cls, **overrides: Any) -> "StreetDataConfig":
        """
        Build a config from BEAVERNET_* environment variables.

        Keyword arguments that are not None take precedence over the
        environment.
        """
        base_url = os.environ.get(ENV_DATA_BASE_URL, DEFAULT_DATA_BASE_URL)
        values: Dict[str, Any] = {
            "streets_source": os.environ.get(
                ENV_STREETS_SOURCE, dataset_url("streets", base_url)
            ),
            "intersections_source": os.environ.get(
                ENV_INTERSECTIONS_SOURCE, dataset_url("intersections", base_url)
            ),
        }
        timeout = os.environ.get(ENV_FETCH_TIMEOUT)
        if timeout:
            try:
                values["timeout"] = float(timeout)
            except ValueError:
                raise ValueError(f"{ENV_FETCH_TIMEOUT} must be a number, got: {timeout!r}")

        values.update({k: v for k, v in overrides.items() if v is not None})
        return cls(**values)


# =============================================================================
# Built-in sample data (served only when use_fallback=True)
# =============================================================================

# (OBJECTID, STREET, STREET_BACK, STREET_AHEAD)
_FALLBACK_STREETS: List[Tuple[int, str, str, str]] = [
    (1, "QUEEN ST", "KING ST", "PRINCESS ST"),
    (2, "KING ST", "QUEEN ST", "FALLS AV"),
    (3, "FALLS AV", "KING ST", "MAIN ST"),
    (4, "MAIN ST", "FALLS AV", "STANLEY AV"),
    (5, "STANLEY AV", "MAIN ST", "PORTAGE RD"),
    (6, "PORTAGE RD", "STANLEY AV", "DRUMMOND RD"),
    (7, "DRUMMOND RD", "PORTAGE RD", "MORRISON ST"),
    (8, "MORRISON ST", "DRUMMOND RD", "MONTROSE RD"),
    (9, "MONTROSE RD", "MORRISON ST", "THOROLD STONE RD"),
    (10, "THOROLD STONE RD", "MONTROSE RD", "CITY LIMITS"),
]

# (OBJECTID, INT_NAME, STREET1, STREET2, longitude, latitude)
_FALLBACK_INTERSECTIONS: List[Tuple[int, str, str, str, float, float]] = [
    (1, "QUEEN ST @ KING ST", "QUEEN ST", "KING ST", -79.0747, 43.0896),
    (2, "KING ST @ FALLS AV", "KING ST", "FALLS AV", -79.0745, 43.0889),
    (3, "FALLS AV @ MAIN ST", "FALLS AV", "MAIN ST", -79.0743, 43.0882),
    (4, "MAIN ST @ STANLEY AV", "MAIN ST", "STANLEY AV", -79.0741, 43.0875),
    (5, "STANLEY AV @ PORTAGE RD", "STANLEY AV", "PORTAGE RD", -79.0739, 43.0868),
]


def fallback_documents() -> Tuple[Dict[str, Any], Dict[str, Any]]:
    """Return the built-in sample as (streets, intersections) GeoJSON documents."""
    streets = {
        "type": "FeatureCollection",
        "features": [
            {
                "type": "Feature",
                "geometry": None,
                "properties": {
                    "OBJECTID": oid,
                    "STREET": street,
                    "STREET_BACK": behind,
                    "STREET_AHEAD": ahead,
                    "STATUS": "Existing",
                    "OWNER": "City of Niagara Falls",
                },
            }
            for oid, street, behind, ahead in _FALLBACK_STREETS
        ],
    }
    intersections = {
        "type": "FeatureCollection",
        "features": [
            {
                "type": "Feature",
                "geometry": {"type": "Point", "coordinates": [lon, lat]},
                "properties": {
                    "OBJECTID": oid,
                    "INT_NAME": name,
                    "STREET1": street1,
                    "STREET2": street2,
                    "STREET3": "",
                    "STREET4": "",
                    "JUNCTION": "YES",
                },
            }
            for oid, name, street1, street2, lon, lat in _FALLBACK_INTERSECTIONS
        ],
    }
    return streets, intersections


def resolve_source(source: Optional[Source]) -> Optional[Source]:
    """Expand ~ in local paths; URLs pass through unchanged."""
    if source is None:
        return None
    if isinstance(source, Path):
        return source.expanduser()
    if source.startswith(("http://", "https://", "file://")):
        return source
    return Path(source).expanduser()
