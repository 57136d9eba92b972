# medimap/presentation/routers.py
from __future__ import annotations

import logging
from typing import List, Literal, Optional

from fastapi import APIRouter, Depends, HTTPException, Path, Query
from fastapi.exceptions import RequestValidationError

from medimap.infra.api.security import require_api_key
from medimap.application.commands import SearchMedicinesCommand
from medimap.application.search_use_case import SearchMedicinesUseCase
from medimap.application.catalog_use_cases import (
    MedicineDetailsUseCase, NearbyPharmaciesUseCase,
    PharmacyCatalogUseCase, PopularMedicinesUseCase,
)
from medimap.container import (
    get_details_use_case, get_nearby_use_case, get_pharmacy_catalog_use_case,
    get_popular_use_case, get_search_use_case,
)
from medimap.domain.models import GeoPoint
from medimap.domain.services.search_ranker import SortMode
from medimap.presentation.schemas import (
    MedicineDetail, NearbyPharmaciesResponse, NearbyPharmacyItem,
    PharmacyBrief, PharmacyCatalogResponse, PopularMedicineItem, SearchResultItem,
)

logger = logging.getLogger(__name__)

OBJECT_ID_PATTERN = r"^[0-9a-fA-F]{24}$"

WIRE_SORT = {
    "price_asc": SortMode.PRICE_ASCENDING,
    "price_desc": SortMode.PRICE_DESCENDING,
}


def _observer(latitude: Optional[float], longitude: Optional[float]) -> Optional[GeoPoint]:
    """Both coordinates or neither; a lone one is a client error, never (x, 0)."""
    if latitude is None and longitude is None:
        return None
    if latitude is None or longitude is None:
        missing = "latitude" if latitude is None else "longitude"
        raise RequestValidationError([{
            "type": "missing",
            "loc": ("query", missing),
            "msg": "latitude and longitude must be supplied together",
            "input": None,
        }])
    return GeoPoint(longitude=longitude, latitude=latitude)


# Semua endpoint di bawah /api, API key opsional (REQUIRE_API_KEY=1)
router = APIRouter(prefix="/api", dependencies=[Depends(require_api_key)])
medicines = APIRouter(prefix="/medicines", tags=["medicines"])
pharmacies = APIRouter(prefix="/pharmacies", tags=["pharmacies"])


# ── SEARCH ───────────────────────────────────────────────────────
@medicines.get("/search", response_model=List[SearchResultItem])
async def search_medicines(
    query: Optional[str] = Query(None, description="Case-insensitive substring of the medicine name"),
    latitude: Optional[float] = Query(None, ge=-90, le=90),
    longitude: Optional[float] = Query(None, ge=-180, le=180),
    delivery: Optional[Literal["true", "false"]] = Query(None),
    sort: Optional[Literal["price_asc", "price_desc"]] = Query(None),
    uc: SearchMedicinesUseCase = Depends(get_search_use_case),
):
    cmd = SearchMedicinesCommand(
        query=query,
        observer=_observer(latitude, longitude),
        delivery_only=(delivery == "true"),
        sort=WIRE_SORT.get(sort) if sort else None,
    )
    try:
        results = await uc.run(cmd)
    except Exception:
        logger.exception("search failed query=%r", query)
        raise HTTPException(status_code=500, detail="Failed to search medicines")
    return [SearchResultItem.from_ranked(r) for r in results]


# ── POPULAR ──────────────────────────────────────────────────────
@medicines.get("/popular", response_model=List[PopularMedicineItem])
async def popular_medicines(uc: PopularMedicinesUseCase = Depends(get_popular_use_case)):
    try:
        items = await uc.run()
    except Exception:
        logger.exception("popular medicines failed")
        raise HTTPException(status_code=500, detail="Failed to fetch popular medicines")
    return [PopularMedicineItem.from_listed(i) for i in items]


# ── PHARMACY CATALOG ─────────────────────────────────────────────
@medicines.get("/pharmacy/{pharmacy_id}", response_model=PharmacyCatalogResponse)
async def medicines_by_pharmacy(
    pharmacy_id: str = Path(..., pattern=OBJECT_ID_PATTERN),
    uc: PharmacyCatalogUseCase = Depends(get_pharmacy_catalog_use_case),
):
    try:
        found = await uc.run(pharmacy_id)
    except Exception:
        logger.exception("pharmacy catalog failed pharmacy_id=%s", pharmacy_id)
        raise HTTPException(status_code=500, detail="Failed to fetch pharmacy medicines")
    if found is None:
        raise HTTPException(status_code=404, detail="Pharmacy not found")
    pharmacy, items = found
    return PharmacyCatalogResponse(
        pharmacy=PharmacyBrief.from_location(pharmacy),
        medicines=[MedicineDetail.from_listed(i) for i in items],
    )


# ── DETAILS (keep last: catches every other /medicines/{x}) ─────
@medicines.get("/{medicine_id}", response_model=MedicineDetail)
async def medicine_details(
    medicine_id: str = Path(..., pattern=OBJECT_ID_PATTERN),
    uc: MedicineDetailsUseCase = Depends(get_details_use_case),
):
    try:
        item = await uc.run(medicine_id)
    except Exception:
        logger.exception("medicine details failed id=%s", medicine_id)
        raise HTTPException(status_code=500, detail="Failed to fetch medicine details")
    if item is None:
        raise HTTPException(status_code=404, detail="Medicine not found")
    return MedicineDetail.from_listed(item)


# ── NEARBY PHARMACIES ────────────────────────────────────────────
@pharmacies.get("/nearby", response_model=NearbyPharmaciesResponse)
async def nearby_pharmacies(
    latitude: float = Query(..., ge=-90, le=90),
    longitude: float = Query(..., ge=-180, le=180),
    uc: NearbyPharmaciesUseCase = Depends(get_nearby_use_case),
):
    try:
        found = await uc.run(GeoPoint(longitude=longitude, latitude=latitude))
    except Exception:
        logger.exception("nearby pharmacies failed")
        raise HTTPException(status_code=500, detail="Failed to fetch pharmacies")
    return NearbyPharmaciesResponse(pharmacies=[NearbyPharmacyItem.from_nearby(p) for p in found])


router.include_router(medicines)
router.include_router(pharmacies)
