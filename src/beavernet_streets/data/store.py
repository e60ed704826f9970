"""In-memory street and intersection store with load-once semantics."""

import asyncio
import logging
from typing import Dict, Iterator, List, Optional, Tuple, Union

from beavernet_streets.data.constants import StreetDataConfig, fallback_documents
from beavernet_streets.data.converter import convert_intersections, convert_streets
from beavernet_streets.data.loader import DatasetLoader, DatasetLoadError, LoadCoordinator
from beavernet_streets.data.models import Intersection, StreetSegment

logger = logging.getLogger(__name__)


class StreetDataStore:
    """
    Holds the street segments and intersections for one consumer.

    Data is fetched lazily by ensure_loaded() and kept until reset().
    Loading is best-effort: a failed fetch or parse is logged and leaves
    the store empty (or serves the built-in sample when the config has
    use_fallback set), and the next ensure_loaded() tries again.

    Both collections are tuples published together once a load succeeds,
    so readers never see a half-populated store. Iteration order is the
    feature order of the source documents.
    """

    def __init__(
        self,
        config: Optional[StreetDataConfig] = None,
        loader: Optional[DatasetLoader] = None,
    ):
        """
        Initialize store.

        Args:
            config: Dataset sources and fetch settings. Defaults to StreetDataConfig()
            loader: Dataset loader. Defaults to one built from config
        """
        self.config = config or StreetDataConfig()
        self.loader = loader or DatasetLoader(
            timeout=self.config.timeout,
            retries=self.config.retries,
        )
        self._coordinator = LoadCoordinator()
        self._streets: Tuple[StreetSegment, ...] = ()
        self._intersections: Tuple[Intersection, ...] = ()
        self._loaded = False
        self._using_fallback = False
        self._generation = 0  # bumped by reset()

    @property
    def is_loaded(self) -> bool:
        return self._loaded

    @property
    def using_fallback(self) -> bool:
        """True when the built-in sample is being served."""
        return self._using_fallback

    @property
    def streets(self) -> Tuple[StreetSegment, ...]:
        return self._streets

    @property
    def intersections(self) -> Tuple[Intersection, ...]:
        return self._intersections

    async def close(self):
        """Close the loader's HTTP session."""
        await self.loader.close()

    async def ensure_loaded(self) -> None:
        """
        Load both datasets unless already loaded.

        Concurrent callers share a single load. Never raises for fetch or
        parse failures.
        """
        if self._loaded:
            return

        async def do_load():
            if self._loaded:
                return
            await self._load()

        await self._coordinator.run_once("datasets", do_load)

    async def _load(self) -> None:
        generation = self._generation
        streets_source = self.config.streets_source
        intersections_source = self.config.intersections_source

        results = await asyncio.gather(
            self.loader.load(streets_source),
            self.loader.load(intersections_source),
            return_exceptions=True,
        )

        try:
            for result in results:
                if isinstance(result, BaseException):
                    raise result
            streets_doc, intersections_doc = results
            streets = convert_streets(streets_doc, str(streets_source))  # type: ignore[arg-type]
            intersections = convert_intersections(
                intersections_doc, str(intersections_source)  # type: ignore[arg-type]
            )
        except DatasetLoadError as e:
            if generation != self._generation:
                logger.debug("Store was reset during load; discarding failed load")
                return
            logger.warning("Failed to load street data: %s", e)
            if self.config.use_fallback:
                self._install_fallback()
            return

        if generation != self._generation:
            logger.debug("Store was reset during load; discarding loaded data")
            return

        self._publish(streets, intersections)
        logger.info(
            "Loaded %d streets and %d intersections", len(self._streets), len(self._intersections)
        )

    def _install_fallback(self) -> None:
        streets_doc, intersections_doc = fallback_documents()
        self._publish(
            convert_streets(streets_doc, "fallback"),
            convert_intersections(intersections_doc, "fallback"),
        )
        self._using_fallback = True
        logger.warning(
            "Using fallback data: %d streets and %d intersections",
            len(self._streets),
            len(self._intersections),
        )

    def _publish(
        self,
        streets: List[StreetSegment],
        intersections: List[Intersection],
    ) -> None:
        self._streets = tuple(streets)
        self._intersections = tuple(intersections)
        self._using_fallback = False
        self._loaded = True

    def reset(self) -> None:
        """Forget loaded data; the next ensure_loaded() fetches again."""
        self._generation += 1
        self._streets = ()
        self._intersections = ()
        self._loaded = False
        self._using_fallback = False

    def street_names(self) -> Iterator[str]:
        """
        Every non-blank street name, repeats included.

        Street segment fields (street, behind, ahead) come first in dataset
        order, then intersection members street1..street4.
        """
        for segment in self._streets:
            yield from segment.names
        for intersection in self._intersections:
            yield from intersection.members

    def stats(self) -> Dict[str, Union[int, bool]]:
        """Record counts for reporting."""
        return {
            "loaded": self._loaded,
            "fallback": self._using_fallback,
            "streets": len(self._streets),
            "intersections": len(self._intersections),
            "located_intersections": sum(1 for i in self._intersections if i.point is not None),
            "distinct_street_names": len(set(self.street_names())),
        }
