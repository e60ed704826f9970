"""Fixtures for unit tests: stores populated without any I/O."""

import pytest

from beavernet_streets.data.converter import convert_intersections, convert_streets
from beavernet_streets.data.models import Intersection, StreetSegment
from beavernet_streets.data.store import StreetDataStore


def make_store(streets=(), intersections=()) -> StreetDataStore:
    """A loaded store holding the given records."""
    store = StreetDataStore()
    store._publish(list(streets), list(intersections))
    return store


@pytest.fixture
def sample_store(sample_streets_geojson, sample_intersections_geojson):
    """Loaded store over the shared sample documents."""
    return make_store(
        convert_streets(sample_streets_geojson),
        convert_intersections(sample_intersections_geojson),
    )


@pytest.fixture
def empty_store():
    return make_store()


def located(object_id, lon, lat, *streets, name=None) -> Intersection:
    """Intersection at (lon, lat) with the given member streets."""
    members = list(streets) + [None] * (4 - len(streets))
    return Intersection(
        object_id=object_id,
        name=name or " & ".join(streets),
        street1=members[0],
        street2=members[1],
        street3=members[2],
        street4=members[3],
        coordinates=(lon, lat),
    )


def segment(street, behind=None, ahead=None) -> StreetSegment:
    return StreetSegment(street=street, street_behind=behind, street_ahead=ahead)
