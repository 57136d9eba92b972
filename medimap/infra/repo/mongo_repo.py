# medimap/infra/repo/mongo_repo.py
from __future__ import annotations

import os
import logging
from typing import Any, Dict, Iterable, List, Optional

from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorCollection
from pymongo import ASCENDING, DESCENDING, GEOSPHERE
from pymongo.errors import OperationFailure

from medimap.domain.geo import to_geojson
from medimap.domain.models import CatalogEntry, GeoPoint, SellingLocation
from medimap.domain.ports import CatalogRepoPort
from medimap.infra.repo.documents import (
    entries_from_docs, in_stock_filter, locations_from_docs, to_object_id,
)

MONGO_URI        = os.getenv("MONGO_URI", "mongodb://localhost:27017")
DB_NAME          = os.getenv("MONGO_DB", "medimap")
MEDICINES_COLL   = os.getenv("MONGO_MEDICINES_COLL", "medicines")
PHARMACIES_COLL  = os.getenv("MONGO_PHARMACIES_COLL", "pharmacies")

logger = logging.getLogger(__name__)

# Only what the search side serializes; description stays for the details view.
MEDICINE_PROJECTION = {
    "name": 1, "strength": 1, "type": 1, "unit": 1, "description": 1,
    "price": 1, "quantity": 1, "outOfStock": 1, "requiresPrescription": 1, "pharmacy": 1,
}
PHARMACY_PROJECTION = {
    "name": 1, "city": 1, "address": 1, "phone": 1,
    "location": 1, "deliveryAvailable": 1, "rating": 1,
}


class MongoCatalogRepo(CatalogRepoPort):
    """
    Async repository over `medicines` (one document per pharmacy listing) and
    `pharmacies`. Read-only: the portals own every write.

    Store order is pinned to `_id` ascending (ObjectIds grow with insertion),
    so equal prices/distances always tie-break the same way.
    """

    def __init__(self, client: Optional[AsyncIOMotorClient] = None) -> None:
        self.client = client or AsyncIOMotorClient(MONGO_URI)
        self.db = self.client[DB_NAME]
        self.medicines: AsyncIOMotorCollection = self.db[MEDICINES_COLL]
        self.pharmacies: AsyncIOMotorCollection = self.db[PHARMACIES_COLL]

    # ──────────────────────────────────────────────────────────────
    #  Indexing / health
    # ──────────────────────────────────────────────────────────────
    async def ensure_indexes(self) -> None:
        """
        - pharmacies.location: 2dsphere (needed by $near)
        - medicines.pharmacy: per-pharmacy catalog
        - medicines.quantity: popular list
        An index that already exists with other options is left alone.
        """
        wanted = [
            (self.pharmacies, [("location", GEOSPHERE)]),
            (self.medicines, [("pharmacy", ASCENDING)]),
            (self.medicines, [("quantity", DESCENDING)]),
        ]
        for coll, keys in wanted:
            try:
                await coll.create_index(keys)
            except OperationFailure as e:
                logger.warning("create_index %s on %s failed: %s", keys, coll.name, e)

    async def ping(self) -> bool:
        res = await self.db.command("ping")
        return bool(res.get("ok"))

    # ──────────────────────────────────────────────────────────────
    #  Catalog
    # ──────────────────────────────────────────────────────────────
    async def find_in_stock(self, query: Optional[str] = None) -> List[CatalogEntry]:
        cursor = self.medicines.find(in_stock_filter(query), MEDICINE_PROJECTION).sort("_id", ASCENDING)
        return entries_from_docs([doc async for doc in cursor])

    async def find_popular(self, limit: int = 10) -> List[CatalogEntry]:
        cursor = (
            self.medicines.find(in_stock_filter(), MEDICINE_PROJECTION)
            .sort([("quantity", DESCENDING), ("_id", ASCENDING)])
            .limit(limit)
        )
        return entries_from_docs([doc async for doc in cursor])

    async def get_entry(self, entry_id: str) -> Optional[CatalogEntry]:
        oid = to_object_id(entry_id)
        if oid is None:
            return None
        doc = await self.medicines.find_one({"_id": oid}, MEDICINE_PROJECTION)
        found = entries_from_docs([doc] if doc else [])
        return found[0] if found else None

    async def find_by_pharmacy(self, pharmacy_id: str) -> List[CatalogEntry]:
        oid = to_object_id(pharmacy_id)
        if oid is None:
            return []
        flt = {**in_stock_filter(), "pharmacy": oid}
        cursor = self.medicines.find(flt, MEDICINE_PROJECTION).sort([("name", ASCENDING), ("_id", ASCENDING)])
        return entries_from_docs([doc async for doc in cursor])

    # ──────────────────────────────────────────────────────────────
    #  Pharmacies
    # ──────────────────────────────────────────────────────────────
    async def get_pharmacy(self, pharmacy_id: str) -> Optional[SellingLocation]:
        oid = to_object_id(pharmacy_id)
        if oid is None:
            return None
        doc = await self.pharmacies.find_one({"_id": oid}, PHARMACY_PROJECTION)
        found = locations_from_docs([doc] if doc else [])
        return found[0] if found else None

    async def get_pharmacies(self, ids: Iterable[str]) -> Dict[str, SellingLocation]:
        oids = [oid for oid in (to_object_id(i) for i in set(ids)) if oid is not None]
        if not oids:
            return {}
        cursor = self.pharmacies.find({"_id": {"$in": oids}}, PHARMACY_PROJECTION)
        return {loc.id: loc for loc in locations_from_docs([doc async for doc in cursor])}

    async def find_pharmacies_near(self, point: GeoPoint, max_distance_m: int) -> List[SellingLocation]:
        # $near already returns nearest first
        flt: Dict[str, Any] = {
            "location": {
                "$near": {
                    "$geometry": to_geojson(point),
                    "$maxDistance": max_distance_m,
                }
            }
        }
        cursor = self.pharmacies.find(flt, PHARMACY_PROJECTION)
        return locations_from_docs([doc async for doc in cursor])
