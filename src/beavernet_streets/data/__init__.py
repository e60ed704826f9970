"""Data loading for beavernet-streets."""

from beavernet_streets.data.constants import DATASET_URLS, StreetDataConfig
from beavernet_streets.data.converter import convert_intersections, convert_streets
from beavernet_streets.data.loader import (
    DatasetFormatError,
    DatasetLoader,
    DatasetLoadError,
    DownloadError,
    LoadCoordinator,
)
from beavernet_streets.data.models import Intersection, StreetSegment
from beavernet_streets.data.store import StreetDataStore

__all__ = [
    "StreetDataStore",
    "StreetDataConfig",
    "DatasetLoader",
    "LoadCoordinator",
    "DatasetLoadError",
    "DownloadError",
    "DatasetFormatError",
    "convert_streets",
    "convert_intersections",
    "Intersection",
    "StreetSegment",
    "DATASET_URLS",
]
