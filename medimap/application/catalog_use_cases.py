# medimap/application/catalog_use_cases.py
"""Read-only catalog views that sit next to the search: popular, details, per-pharmacy, nearby."""
from __future__ import annotations

import os
import logging
from typing import List, Optional, Tuple

from medimap.domain.geo import haversine_km
from medimap.domain.models import GeoPoint, ListedEntry, NearbyPharmacy, SellingLocation
from medimap.domain.ports import CatalogRepoPort

POPULAR_LIMIT = int(os.getenv("POPULAR_LIMIT", "10"))
NEARBY_RADIUS_M = int(os.getenv("NEARBY_RADIUS_M", "5000"))

logger = logging.getLogger("medimap.search")


class PopularMedicinesUseCase:
    def __init__(self, repo: CatalogRepoPort, limit: int = POPULAR_LIMIT):
        self.repo = repo
        self.limit = limit

    async def run(self) -> List[ListedEntry]:
        entries = await self.repo.find_popular(limit=self.limit)
        locations = await self.repo.get_pharmacies({e.pharmacy_id for e in entries}) if entries else {}
        return [ListedEntry(entry=e, location=locations.get(e.pharmacy_id)) for e in entries]


class MedicineDetailsUseCase:
    def __init__(self, repo: CatalogRepoPort):
        self.repo = repo

    async def run(self, entry_id: str) -> Optional[ListedEntry]:
        entry = await self.repo.get_entry(entry_id)
        if entry is None:
            return None
        return ListedEntry(entry=entry, location=await self.repo.get_pharmacy(entry.pharmacy_id))


class PharmacyCatalogUseCase:
    def __init__(self, repo: CatalogRepoPort):
        self.repo = repo

    async def run(self, pharmacy_id: str) -> Optional[Tuple[SellingLocation, List[ListedEntry]]]:
        """None when the pharmacy itself does not exist."""
        pharmacy = await self.repo.get_pharmacy(pharmacy_id)
        if pharmacy is None:
            return None
        entries = await self.repo.find_by_pharmacy(pharmacy_id)
        return pharmacy, [ListedEntry(entry=e, location=pharmacy) for e in entries]


class NearbyPharmaciesUseCase:
    def __init__(self, repo: CatalogRepoPort, radius_m: int = NEARBY_RADIUS_M):
        self.repo = repo
        self.radius_m = radius_m

    async def run(self, observer: GeoPoint) -> List[NearbyPharmacy]:
        found = await self.repo.find_pharmacies_near(observer, self.radius_m)
        out = [
            NearbyPharmacy(location=loc, distance_km=haversine_km(observer, loc.point))
            for loc in found
            if loc.point is not None
        ]
        # stable: keeps the store's own nearest-first order on exact ties
        out.sort(key=lambda p: p.distance_km)
        logger.info("[nearby] radius_m=%d found=%d", self.radius_m, len(out))
        return out
