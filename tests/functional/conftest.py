"""Helper functions for functional tests with mocked HTTP responses.

This module provides helper functions for creating mock data:
- Street name index documents (STREET / STREET_BACK / STREET_AHEAD)
- Road intersection documents (INT_NAME / STREET1..STREET4 + Point)

All mock data uses synthetic but realistic streets around downtown
Niagara Falls, Ontario.
"""

import json
from pathlib import Path
from typing import Iterable, List, Optional, Sequence

from aioresponses import aioresponses
from yarl import URL

BASE_URL = "http://dashboard.test"
STREETS_URL = f"{BASE_URL}/data/streets.geojson"
INTERSECTIONS_URL = f"{BASE_URL}/data/intersections.geojson"

# Queen St & Victoria Ave (approximate)
DOWNTOWN_LON = -79.0745
DOWNTOWN_LAT = 43.1010


def street_feature(
    object_id: int,
    street: Optional[str],
    behind: Optional[str] = None,
    ahead: Optional[str] = None,
) -> dict:
    """One street name index feature."""
    return {
        "type": "Feature",
        "geometry": None,
        "properties": {
            "OBJECTID": object_id,
            "STREET": street,
            "STREET_BACK": behind,
            "STREET_AHEAD": ahead,
            "STATUS": "Existing",
            "OWNER": "City of Niagara Falls",
        },
    }


def intersection_feature(
    object_id: int,
    name: Optional[str],
    streets: Sequence[Optional[str]],
    coordinates: Optional[Sequence[float]] = None,
) -> dict:
    """One road intersection feature; coordinates are (lon, lat)."""
    members = list(streets) + [None] * (4 - len(streets))
    geometry = None
    if coordinates is not None:
        geometry = {"type": "Point", "coordinates": list(coordinates)}
    return {
        "type": "Feature",
        "geometry": geometry,
        "properties": {
            "OBJECTID": object_id,
            "INT_NAME": name,
            "STREET1": members[0],
            "STREET2": members[1],
            "STREET3": members[2],
            "STREET4": members[3],
            "JUNCTION": "YES",
        },
    }


def write_geojson(path: Path, document) -> Path:
    """Write a GeoJSON document to disk."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(document))
    return path


def feature_collection(features: Iterable[dict]) -> dict:
    return {"type": "FeatureCollection", "features": list(features)}


def create_downtown_streets() -> dict:
    """Street name index for a few downtown blocks."""
    return feature_collection(
        [
            street_feature(1, "Queen St", behind="Erie Ave", ahead="Victoria Ave"),
            street_feature(2, "Victoria Ave", behind="Bridge St", ahead="Queen St"),
            street_feature(3, "Erie Ave", behind="Park St", ahead="Queen St"),
            street_feature(4, "Park St", ahead="Erie Ave"),
        ]
    )


def create_downtown_intersections() -> dict:
    """Road intersections for the downtown streets."""
    return feature_collection(
        [
            intersection_feature(
                201, "Queen St & Victoria Ave", ["Queen St", "Victoria Ave"],
                (DOWNTOWN_LON, DOWNTOWN_LAT),
            ),
            intersection_feature(
                202, "Queen St & Erie Ave", ["Queen St", "Erie Ave"],
                (DOWNTOWN_LON - 0.004, DOWNTOWN_LAT - 0.001),
            ),
            intersection_feature(
                203, "Erie Ave & Park St", ["Erie Ave", "Park St"],
                (DOWNTOWN_LON - 0.005, DOWNTOWN_LAT + 0.002),
            ),
            intersection_feature(
                204, "Victoria Ave & Bridge St", ["Victoria Ave", "Bridge St"],
                (DOWNTOWN_LON + 0.001, DOWNTOWN_LAT + 0.006),
            ),
        ]
    )


def create_grid_intersections(count: int, street: str = "Lundy's Lane") -> dict:
    """`count` intersections of one street with numbered cross streets."""
    return feature_collection(
        intersection_feature(
            300 + i,
            f"{street} & Cross {i}",
            [street, f"Cross {i}"],
            (DOWNTOWN_LON + 0.001 * i, DOWNTOWN_LAT),
        )
        for i in range(count)
    )


def setup_dataset_mocks(
    mocked: aioresponses,
    streets: Optional[dict] = None,
    intersections: Optional[dict] = None,
    repeat: bool = False,
) -> None:
    """Serve both datasets from the mocked dashboard."""
    mocked.get(
        STREETS_URL,
        body=json.dumps(streets if streets is not None else create_downtown_streets()),
        content_type="application/geo+json",
        repeat=repeat,
    )
    mocked.get(
        INTERSECTIONS_URL,
        body=json.dumps(
            intersections if intersections is not None else create_downtown_intersections()
        ),
        content_type="application/geo+json",
        repeat=repeat,
    )


def request_count(mocked: aioresponses, url: str) -> int:
    """Number of GET requests made to a URL."""
    return len(mocked.requests.get(("GET", URL(url)), []))


def names(intersections: List) -> List[Optional[str]]:
    return [i.name for i in intersections]
