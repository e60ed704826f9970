"""
beavernet-streets: Street and intersection resolution for dispatch address entry.

Suggests street names while an address is typed, detects the streets an
address mentions, infers the cross street, and finds the intersection
nearest to a GPS fix. Street and intersection datasets are GeoJSON exports
fetched once and held in memory.
"""

from beavernet_streets.address.resolver import IntersectionAnalysis
from beavernet_streets.core.lookup import AddressSuggestions, StreetLookup
from beavernet_streets.data.constants import StreetDataConfig, fallback_documents
from beavernet_streets.data.loader import DatasetFormatError, DatasetLoadError, DownloadError
from beavernet_streets.data.models import Intersection, StreetSegment
from beavernet_streets.data.store import StreetDataStore

__version__ = "0.1.0"
__all__ = [
    # Main API
    "StreetLookup",
    "StreetDataConfig",
    "StreetDataStore",
    # Results
    "AddressSuggestions",
    "IntersectionAnalysis",
    "Intersection",
    "StreetSegment",
    # Exceptions
    "DatasetLoadError",
    "DownloadError",
    "DatasetFormatError",
    # Sample data
    "fallback_documents",
]
