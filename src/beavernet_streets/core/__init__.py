"""Core functionality for beavernet-streets."""

from beavernet_streets.core.lookup import AddressSuggestions, StreetLookup
from beavernet_streets.core.proximity import ProximityFinder

__all__ = [
    "StreetLookup",
    "AddressSuggestions",
    "ProximityFinder",
]
