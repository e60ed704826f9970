"""Main StreetLookup class - the primary user interface."""

import asyncio
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Union

import pandas as pd

from beavernet_streets.address.matcher import StreetMatcher
from beavernet_streets.address.resolver import IntersectionAnalysis, IntersectionResolver
from beavernet_streets.core.proximity import ProximityFinder
from beavernet_streets.data.constants import (
    DEFAULT_MAX_DISTANCE,
    DEFAULT_SUGGESTION_LIMIT,
    MIN_QUERY_LENGTH,
    StreetDataConfig,
)
from beavernet_streets.data.models import Intersection
from beavernet_streets.data.store import StreetDataStore


@dataclass
class AddressSuggestions:
    """Everything the address input shows for one (debounced) keystroke."""

    address: str = ""
    streets: List[str] = field(default_factory=list)
    analysis: IntersectionAnalysis = field(default_factory=IntersectionAnalysis)

    @property
    def has_suggestions(self) -> bool:
        """Whether there is anything to show in the dropdown."""
        return bool(self.streets) or bool(self.analysis.suggested_intersections)

    @property
    def cross_street(self) -> Optional[str]:
        return self.analysis.cross_street

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            "address": self.address,
            "streets": list(self.streets),
            **self.analysis.to_dict(),
        }


class StreetLookup:
    """
    Main interface for beavernet-streets.

    Owns one StreetDataStore; every method loads the datasets on first use
    and then answers from memory. Load failures never raise: the lookup
    behaves as if no streets were known.

    Example usage:
        >>> lookup = StreetLookup()
        >>> result = await lookup.analyze_address("123 Main St near Park Ave")
        >>> print(result.detected_streets, result.cross_street)
        >>> await lookup.close()
    """

    def __init__(
        self,
        config: Optional[StreetDataConfig] = None,
        store: Optional[StreetDataStore] = None,
    ):
        """
        Initialize StreetLookup.

        Args:
            config: Dataset sources and fetch settings. Ignored if store is given
            store: Pre-built store to share between consumers
        """
        self._store = store or StreetDataStore(config=config)
        self._matcher = StreetMatcher(self._store)
        self._resolver = IntersectionResolver(self._store)
        self._proximity = ProximityFinder(self._store)

    @property
    def store(self) -> StreetDataStore:
        return self._store

    async def close(self):
        """Close all async sessions."""
        await self._store.close()

    async def ensure_loaded(self) -> None:
        """Load the datasets if they are not loaded yet."""
        await self._store.ensure_loaded()

    def reset(self) -> None:
        """Drop cached data so the next call reloads it."""
        self._store.reset()

    async def search_streets(self, query: Optional[str]) -> List[str]:
        """
        Street names containing a partial query, sorted.

        Args:
            query: Partial street name (at least 2 characters after trimming)

        Returns:
            Distinct sorted street names
        """
        await self.ensure_loaded()
        return self._matcher.search_streets(query)

    async def find_intersections_for_street(self, street_name: Optional[str]) -> List[Intersection]:
        """Intersections having street_name as a member (whole name, any case)."""
        await self.ensure_loaded()
        return self._resolver.find_intersections_for_street(street_name)

    async def analyze_address(self, address: Optional[str]) -> IntersectionAnalysis:
        """
        Detect streets in an address and suggest intersections.

        Args:
            address: Free-text address

        Returns:
            IntersectionAnalysis with detected streets, up to 10 suggested
            intersections, and a cross street when one intersection matches
            every detected street
        """
        await self.ensure_loaded()
        return self._resolver.analyze_address(address)

    async def find_closest_intersection(
        self,
        latitude: float,
        longitude: float,
        max_distance: float = DEFAULT_MAX_DISTANCE,
    ) -> Optional[Intersection]:
        """
        Nearest intersection to a GPS fix.

        Args:
            latitude: Latitude (decimal degrees)
            longitude: Longitude (decimal degrees)
            max_distance: Planar tolerance in degrees

        Returns:
            Closest Intersection within max_distance, or None
        """
        await self.ensure_loaded()
        return self._proximity.find_closest_intersection(latitude, longitude, max_distance)

    async def cross_street_near(
        self,
        latitude: float,
        longitude: float,
        max_distance: float = DEFAULT_MAX_DISTANCE,
    ) -> Optional[str]:
        """Cross street to auto-fill from a GPS fix, if an intersection is near."""
        closest = await self.find_closest_intersection(latitude, longitude, max_distance)
        if closest is None:
            return None
        return closest.cross_street

    async def suggest(
        self,
        address: Optional[str],
        limit: int = DEFAULT_SUGGESTION_LIMIT,
    ) -> AddressSuggestions:
        """
        Street and intersection suggestions for an address being typed.

        Callers are expected to debounce keystrokes and drop stale results;
        this method has no notion of request identity.

        Args:
            address: Current contents of the address field
            limit: Maximum street suggestions to return

        Returns:
            AddressSuggestions (empty for inputs shorter than 2 characters)
        """
        text = address or ""
        if len(text.strip()) < MIN_QUERY_LENGTH:
            return AddressSuggestions(address=text)

        await self.ensure_loaded()
        streets = self._matcher.search_streets(text)
        analysis = self._resolver.analyze_address(text)
        return AddressSuggestions(
            address=text,
            streets=streets[: max(0, limit)],
            analysis=analysis,
        )

    async def analyze_batch(
        self,
        addresses: Union[List[str], pd.Series],
        progress: bool = True,
    ) -> pd.DataFrame:
        """
        Analyze many addresses.

        Args:
            addresses: List or Series of address strings
            progress: Show progress bar

        Returns:
            DataFrame with one row per address, in input order
        """
        if isinstance(addresses, pd.Series):
            addresses = addresses.tolist()

        await self.ensure_loaded()

        rows = []
        if progress:
            from tqdm import tqdm

            iterator = tqdm(addresses, desc="Analyzing")
        else:
            iterator = addresses

        for address in iterator:
            text = None if _is_missing(address) else str(address)
            analysis = self._resolver.analyze_address(text)
            rows.append(
                {
                    "address": text,
                    "detected_streets": "; ".join(analysis.detected_streets),
                    "suggested_intersections": "; ".join(
                        i.name or "" for i in analysis.suggested_intersections
                    ),
                    "cross_street": analysis.cross_street,
                }
            )

        return pd.DataFrame(
            rows,
            columns=["address", "detected_streets", "suggested_intersections", "cross_street"],
        )

    async def analyze_many(self, addresses: List[str]) -> List[IntersectionAnalysis]:
        """Analyze several addresses concurrently, sharing one load."""
        return list(await asyncio.gather(*[self.analyze_address(a) for a in addresses]))


def _is_missing(value: Any) -> bool:
    if value is None:
        return True
    try:
        return bool(pd.isna(value))
    except (TypeError, ValueError):
        return False
