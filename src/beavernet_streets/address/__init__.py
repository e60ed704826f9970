"""Street search and intersection resolution for beavernet-streets."""

from beavernet_streets.address.matcher import StreetMatcher
from beavernet_streets.address.resolver import IntersectionAnalysis, IntersectionResolver

__all__ = [
    "StreetMatcher",
    "IntersectionResolver",
    "IntersectionAnalysis",
]
