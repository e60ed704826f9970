"""Street name search for address autocompletion."""

from typing import List, Optional, Set

from beavernet_streets.data.constants import MIN_QUERY_LENGTH
from beavernet_streets.data.store import StreetDataStore


class StreetMatcher:
    """
    Substring search over every known street name.

    Names come from street segments (street, street behind, street ahead)
    and from intersection members. The store must already be loaded;
    against an empty store every search returns [].
    """

    def __init__(self, store: StreetDataStore):
        """
        Initialize with a street data store.

        Args:
            store: Store holding street segments and intersections
        """
        self._store = store

    def search_streets(self, query: Optional[str]) -> List[str]:
        """
        Find street names containing a partial query.

        Args:
            query: Partial street name, any case

        Returns:
            Distinct matching names, sorted. Empty for queries shorter than
            two characters after trimming.
        """
        normalized = (query or "").strip().lower()
        if len(normalized) < MIN_QUERY_LENGTH:
            return []

        matches: Set[str] = set()
        for name in self._store.street_names():
            if normalized in name.lower():
                matches.add(name)

        return sorted(matches)
