"""Province boundary sources and the per-application boundary cache.

The boundary document is fetched once and memoized by a BoundaryCache owned
by the application (``app.state``) and injected into endpoints, so tests can
substitute a fresh cache or source.
"""
import asyncio
import json
import logging
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Optional

import httpx
from fastapi import Request
from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from commons_youth.config import Settings
from commons_youth.geo.models import BoundaryFeature, features_from_collection

logger = logging.getLogger(__name__)

EMPTY_COLLECTION: dict[str, Any] = {"type": "FeatureCollection", "features": []}


class BoundaryDataSource(ABC):
    """Where the province boundary FeatureCollection comes from."""

    @abstractmethod
    async def fetch(self) -> dict[str, Any]:
        """Fetch the GeoJSON FeatureCollection document."""
        ...


class FileBoundarySource(BoundaryDataSource):
    """GeoJSON file on local disk."""

    def __init__(self, path: str):
        self.path = Path(path)

    def _read(self) -> dict[str, Any]:
        with open(self.path, "r", encoding="utf-8") as f:
            return json.load(f)

    async def fetch(self) -> dict[str, Any]:
        return await asyncio.to_thread(self._read)


class HttpBoundarySource(BoundaryDataSource):
    """GeoJSON document served over HTTP(S)."""

    def __init__(self, url: str, timeout: float = 15.0):
        self.url = url
        self.timeout = timeout

    async def fetch(self) -> dict[str, Any]:
        if not self.url:
            raise ValueError("Boundary URL not configured. Please check BOUNDARY_URL in .env")
        async with httpx.AsyncClient(timeout=self.timeout) as client:
            response = await client.get(self.url)
            response.raise_for_status()
            return response.json()


class DatabaseBoundarySource(BoundaryDataSource):
    """Boundaries imported into the province_boundaries PostGIS table."""

    QUERY = text("""
        SELECT jsonb_build_object(
            'type',     'FeatureCollection',
            'features', COALESCE(jsonb_agg(features.feature), '[]'::jsonb)
        )
        FROM (
          SELECT jsonb_build_object(
            'type',       'Feature',
            'id',         id,
            'geometry',   ST_AsGeoJSON(geom)::jsonb,
            'properties', COALESCE(properties, '{}'::jsonb) || jsonb_build_object('name', name)
          ) AS feature
          FROM province_boundaries
          ORDER BY name
        ) features;
    """)

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]):
        self.session_factory = session_factory

    async def fetch(self) -> dict[str, Any]:
        async with self.session_factory() as session:
            result = await session.execute(self.QUERY)
            return result.scalar() or dict(EMPTY_COLLECTION)


class BoundaryCache:
    """Initialize-once holder for the parsed boundary features.

    A failed load is logged and yields no features; it is not memoized, so
    the next page load tries the source again.
    """

    def __init__(self, source: BoundaryDataSource):
        self.source = source
        self._collection: Optional[dict[str, Any]] = None
        self._features: Optional[list[BoundaryFeature]] = None
        self._lock = asyncio.Lock()

    @property
    def is_loaded(self) -> bool:
        return self._features is not None

    async def get_features(self) -> list[BoundaryFeature]:
        if self._features is not None:
            return self._features

        async with self._lock:
            if self._features is None:
                try:
                    collection = await self.source.fetch()
                    features = features_from_collection(collection)
                except Exception as e:
                    logger.error(f"Failed to load province boundaries: {e}", exc_info=True)
                    return []
                self._collection = collection
                self._features = features
                logger.info(f"Loaded {len(features)} province boundaries")
        return self._features

    async def get_collection(self) -> dict[str, Any]:
        await self.get_features()
        return self._collection if self._collection is not None else dict(EMPTY_COLLECTION)

    def reset(self) -> None:
        """Drop the memoized document; the next access reloads it."""
        self._collection = None
        self._features = None


def build_boundary_source(
    settings: Settings,
    session_factory: Optional[async_sessionmaker[AsyncSession]] = None,
) -> BoundaryDataSource:
    """Create the boundary source selected by BOUNDARY_SOURCE."""
    if settings.BOUNDARY_SOURCE == "url":
        return HttpBoundarySource(settings.BOUNDARY_URL, timeout=settings.BOUNDARY_FETCH_TIMEOUT)
    if settings.BOUNDARY_SOURCE == "database":
        if session_factory is None:
            from commons_youth.database import async_session
            session_factory = async_session
        return DatabaseBoundarySource(session_factory)
    return FileBoundarySource(settings.BOUNDARY_PATH)


def get_boundary_cache(request: Request) -> BoundaryCache:
    """FastAPI dependency returning the application's boundary cache."""
    return request.app.state.boundary_cache
