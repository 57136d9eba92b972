# medimap/infra/repo/memory_repo.py
from __future__ import annotations

import json
import os
import re
import logging
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional

from medimap.domain.geo import haversine_km
from medimap.domain.models import CatalogEntry, GeoPoint, SellingLocation
from medimap.domain.ports import CatalogRepoPort
from medimap.infra.repo.documents import entries_from_docs, locations_from_docs

logger = logging.getLogger(__name__)


class InMemoryCatalogRepo(CatalogRepoPort):
    """
    Same contract as MongoCatalogRepo over plain Mongo-shaped dicts.

    Used with CATALOG_BACKEND=memory (optionally seeded from CATALOG_SEED_FILE)
    and by the test-suite. Insertion order is the store order.
    """

    def __init__(self, medicines: Iterable[Dict[str, Any]] = (), pharmacies: Iterable[Dict[str, Any]] = ()):
        self._medicines: List[Dict[str, Any]] = [dict(d) for d in medicines]
        self._pharmacies: List[Dict[str, Any]] = [dict(d) for d in pharmacies]

    @classmethod
    def from_env(cls) -> "InMemoryCatalogRepo":
        """Seed file layout: {"medicines": [...], "pharmacies": [...]}."""
        path = os.getenv("CATALOG_SEED_FILE")
        if not path:
            return cls()
        data = json.loads(Path(path).read_text(encoding="utf-8"))
        logger.info("memory catalog seeded from %s", path)
        return cls(data.get("medicines", []), data.get("pharmacies", []))

    # ------- health -------
    async def ensure_indexes(self) -> None:
        return None

    async def ping(self) -> bool:
        return True

    # ------- catalog -------
    @staticmethod
    def _in_stock(doc: Dict[str, Any]) -> bool:
        qty = doc.get("quantity") or 0
        return isinstance(qty, (int, float)) and qty > 0 and doc.get("outOfStock") is not True

    async def find_in_stock(self, query: Optional[str] = None) -> List[CatalogEntry]:
        q = (query or "").strip()
        rx = re.compile(re.escape(q), re.IGNORECASE) if q else None
        docs = [
            d for d in self._medicines
            if self._in_stock(d) and (rx is None or rx.search(d.get("name") or ""))
        ]
        return entries_from_docs(docs)

    async def find_popular(self, limit: int = 10) -> List[CatalogEntry]:
        docs = [d for d in self._medicines if self._in_stock(d)]
        docs.sort(key=lambda d: d.get("quantity") or 0, reverse=True)
        return entries_from_docs(docs[:limit])

    async def get_entry(self, entry_id: str) -> Optional[CatalogEntry]:
        docs = [d for d in self._medicines if str(d.get("_id")) == entry_id]
        found = entries_from_docs(docs[:1])
        return found[0] if found else None

    async def find_by_pharmacy(self, pharmacy_id: str) -> List[CatalogEntry]:
        docs = [
            d for d in self._medicines
            if self._in_stock(d) and str(d.get("pharmacy")) == pharmacy_id
        ]
        docs.sort(key=lambda d: d.get("name") or "")
        return entries_from_docs(docs)

    # ------- pharmacies -------
    async def get_pharmacy(self, pharmacy_id: str) -> Optional[SellingLocation]:
        return (await self.get_pharmacies([pharmacy_id])).get(pharmacy_id)

    async def get_pharmacies(self, ids: Iterable[str]) -> Dict[str, SellingLocation]:
        wanted = set(ids)
        docs = [d for d in self._pharmacies if str(d.get("_id")) in wanted]
        return {loc.id: loc for loc in locations_from_docs(docs)}

    async def find_pharmacies_near(self, point: GeoPoint, max_distance_m: int) -> List[SellingLocation]:
        max_km = max_distance_m / 1000.0
        hits = []
        for loc in locations_from_docs(self._pharmacies):
            if loc.point is None:
                continue
            d = haversine_km(point, loc.point)
            if d <= max_km:
                hits.append((d, loc))
        hits.sort(key=lambda h: h[0])
        return [loc for _, loc in hits]
