# medimap/infra/repo/documents.py
"""
Mongo document <-> domain mapping, shared by the Motor repo and the in-memory repo.

Documents keep the field names the portals write (camelCase, `pharmacy` as an
ObjectId reference, `location` as GeoJSON).
"""
from __future__ import annotations

import logging
import re
from typing import Any, Dict, Iterable, List, Optional

from bson import ObjectId
from pydantic import ValidationError

from medimap.domain.geo import parse_geojson_point
from medimap.domain.models import CatalogEntry, MedicineType, SellingLocation

logger = logging.getLogger(__name__)

_TYPES = {t.value.lower(): t for t in MedicineType}


def to_object_id(value: Any) -> Optional[ObjectId]:
    if isinstance(value, ObjectId):
        return value
    if isinstance(value, str) and ObjectId.is_valid(value):
        return ObjectId(value)
    return None


def in_stock_filter(query: Optional[str] = None) -> Dict[str, Any]:
    """Stock filter, plus a literal case-insensitive substring match on `name`."""
    flt: Dict[str, Any] = {"quantity": {"$gt": 0}, "outOfStock": {"$ne": True}}
    q = (query or "").strip()
    if q:
        flt["name"] = {"$regex": re.escape(q), "$options": "i"}
    return flt


def _medicine_type(raw: Any) -> Optional[MedicineType]:
    if not isinstance(raw, str):
        return None
    return _TYPES.get(raw.strip().lower())


def entry_from_doc(doc: Dict[str, Any]) -> CatalogEntry:
    return CatalogEntry(
        id=str(doc["_id"]),
        name=doc.get("name") or "",
        strength=doc.get("strength") or None,
        type=_medicine_type(doc.get("type")),
        unit=doc.get("unit") or "",
        description=doc.get("description") or None,
        price=doc.get("price"),
        quantity=doc.get("quantity") or 0,
        out_of_stock=bool(doc.get("outOfStock", False)),
        requires_prescription=bool(doc.get("requiresPrescription", False)),
        pharmacy_id=str(doc.get("pharmacy")),
    )


def location_from_doc(doc: Dict[str, Any]) -> SellingLocation:
    return SellingLocation(
        id=str(doc["_id"]),
        name=doc.get("name") or "",
        city=doc.get("city") or None,
        address=doc.get("address") or None,
        phone=doc.get("phone") or None,
        point=parse_geojson_point(doc.get("location")),
        delivery_available=doc.get("deliveryAvailable") is True,
        rating=doc.get("rating"),
    )


def entries_from_docs(docs: Iterable[Dict[str, Any]]) -> List[CatalogEntry]:
    out: List[CatalogEntry] = []
    for d in docs:
        try:
            out.append(entry_from_doc(d))
        except (KeyError, ValidationError) as e:
            # bad listings are skipped, the rest still map
            logger.warning("skip malformed medicine doc _id=%s: %s", d.get("_id"), e)
    return out


def locations_from_docs(docs: Iterable[Dict[str, Any]]) -> List[SellingLocation]:
    out: List[SellingLocation] = []
    for d in docs:
        try:
            out.append(location_from_doc(d))
        except (KeyError, ValidationError) as e:
            logger.warning("skip malformed pharmacy doc _id=%s: %s", d.get("_id"), e)
    return out
