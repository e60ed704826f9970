"""Fetch street and intersection datasets from URLs or local files."""

import asyncio
import json
import logging
from pathlib import Path
from typing import Any, Callable, Coroutine, Dict, Optional, TypeVar
from urllib.parse import unquote, urlparse

import aiohttp
import geopandas as gpd

from beavernet_streets.data.constants import Source, resolve_source

logger = logging.getLogger(__name__)

T = TypeVar("T")

USER_AGENT = "beavernet-streets/0.1.0"

# Read with the json module; anything else goes through geopandas/GDAL
JSON_SUFFIXES = {".json", ".geojson"}


class DatasetLoadError(Exception):
    """Base class for dataset loading failures."""


class DownloadError(DatasetLoadError):
    """Error retrieving a dataset."""

    def __init__(self, url: str, status_code: int, message: str = ""):
        self.url = url
        self.status_code = status_code
        super().__init__(f"Failed to download {url}: HTTP {status_code}. {message}")


class DatasetFormatError(DatasetLoadError):
    """Dataset was retrieved but is not a usable GeoJSON document."""

    def __init__(self, source: str, message: str = ""):
        self.source = source
        super().__init__(f"Invalid dataset {source}: {message}")


class LoadCoordinator:
    """
    Coordinates concurrent loads to prevent duplicate requests.

    When a load starts, other requesters for the same resource await the
    same task rather than starting their own.
    """

    def __init__(self):
        self._lock = asyncio.Lock()
        self._pending: Dict[str, "asyncio.Task[Any]"] = {}

    async def run_once(self, resource_key: str, load_func: Callable[[], Coroutine[Any, Any, T]]) -> T:
        """
        Run load_func once per resource, even with concurrent callers.

        Args:
            resource_key: Unique identifier for the resource
            load_func: Async function that performs the load

        Returns:
            Whatever load_func returns (shared by all concurrent callers)
        """
        async with self._lock:
            if resource_key in self._pending:
                task = self._pending[resource_key]
            else:
                task = asyncio.create_task(load_func())
                self._pending[resource_key] = task

        try:
            return await asyncio.shield(task)
        finally:
            async with self._lock:
                if resource_key in self._pending and self._pending[resource_key].done():
                    del self._pending[resource_key]

    @property
    def pending(self) -> int:
        """Number of loads currently in flight."""
        return len(self._pending)


def features_of(document: Any, source: str) -> list:
    """
    Return the feature list of a GeoJSON-like document.

    A document without a "features" key has no records. Anything that is
    not an object, or whose features are not a list, is rejected.
    """
    if not isinstance(document, dict):
        raise DatasetFormatError(source, f"expected a JSON object, got {type(document).__name__}")
    features = document.get("features")
    if features is None:
        logger.warning("Dataset %s has no features", source)
        return []
    if not isinstance(features, list):
        raise DatasetFormatError(source, "'features' is not a list")
    return features


def _read_local(path: Path) -> Dict[str, Any]:
    """Read a local dataset into a GeoJSON mapping."""
    if not path.exists():
        raise DownloadError(str(path), 0, "File not found")

    if path.suffix.lower() in JSON_SUFFIXES:
        try:
            with open(path, "r", encoding="utf-8") as f:
                return json.load(f)
        except OSError as e:
            raise DownloadError(str(path), 0, str(e))
        except ValueError as e:
            raise DatasetFormatError(str(path), str(e))

    # Shapefiles, GeoPackages, zipped shapefiles, ...
    try:
        gdf = gpd.read_file(path)
    except OSError as e:
        raise DownloadError(str(path), 0, str(e))
    except (RuntimeError, ValueError) as e:
        raise DatasetFormatError(str(path), str(e))

    # Coordinates must be longitude/latitude degrees
    if gdf.crs is not None and not gdf.crs.is_geographic:
        gdf = gdf.to_crs("EPSG:4326")
    return json.loads(gdf.to_json())


class DatasetLoader:
    """
    Loads GeoJSON-like datasets.

    Sources:
    - http(s) URLs: fetched with aiohttp, retried on client errors
    - file:// URLs and local paths: .json/.geojson read directly, any other
      format GDAL understands read through geopandas

    Concurrent requests for the same URL share one fetch.
    """

    def __init__(self, timeout: float = 30.0, retries: int = 3):
        """
        Initialize loader.

        Args:
            timeout: Total request timeout in seconds
            retries: Number of attempts for failed HTTP requests
        """
        self.timeout = timeout
        self.retries = max(1, retries)
        self._session: Optional[aiohttp.ClientSession] = None
        self._coordinator = LoadCoordinator()

    async def _get_session(self) -> aiohttp.ClientSession:
        """Get or create aiohttp session."""
        if self._session is None or self._session.closed:
            timeout = aiohttp.ClientTimeout(total=self.timeout)
            self._session = aiohttp.ClientSession(
                timeout=timeout,
                headers={"User-Agent": USER_AGENT},
            )
        return self._session

    async def close(self):
        """Close the aiohttp session."""
        if self._session and not self._session.closed:
            await self._session.close()

    async def load(self, source: Source) -> Dict[str, Any]:
        """
        Load one dataset document.

        Args:
            source: URL or local path

        Returns:
            Parsed GeoJSON-like mapping

        Raises:
            DownloadError: Source could not be retrieved
            DatasetFormatError: Source is not valid JSON / GeoJSON
        """
        resolved = resolve_source(source)

        if isinstance(resolved, Path):
            return await self._load_file(resolved)

        if resolved is None:
            raise DownloadError(str(source), 0, "no source configured")
        if resolved.startswith("file://"):
            return await self._load_file(Path(unquote(urlparse(resolved).path)))

        url = resolved

        async def do_fetch():
            return await self._fetch_url(url)

        return await self._coordinator.run_once(url, do_fetch)

    async def _load_file(self, path: Path) -> Dict[str, Any]:
        """Read a local file without blocking the event loop."""
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(None, _read_local, path)

    async def _fetch_url(self, url: str) -> Dict[str, Any]:
        """
        Fetch a URL with retries.

        404 is not retried. Other HTTP and connection errors are retried and
        wrapped in DownloadError once attempts are exhausted.
        """
        for attempt in range(self.retries):
            try:
                return await self._get_json(url)
            except (aiohttp.ClientError, asyncio.TimeoutError) as e:
                logger.debug("Attempt %d/%d for %s failed: %s", attempt + 1, self.retries, url, e)
                if attempt == self.retries - 1:
                    status = getattr(e, "status", 0) or 0
                    raise DownloadError(url, status, str(e) or type(e).__name__)

        # retries >= 1, so the loop always returns or raises
        raise DownloadError(url, 0, "no attempts made")

    async def _get_json(self, url: str) -> Dict[str, Any]:
        """Single GET, decoded as JSON regardless of content type."""
        session = await self._get_session()

        async with session.get(url) as response:
            if response.status == 404:
                raise DownloadError(url, 404, "File not found")
            response.raise_for_status()
            body = await response.read()

        try:
            return json.loads(body)
        except ValueError as e:
            raise DatasetFormatError(url, str(e))
