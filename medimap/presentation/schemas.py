# medimap/presentation/schemas.py
"""
Wire schemas. Field names are snake_case in Python and camelCase on the wire
(`deliveryAvailable`, `requiresPrescription`), which is what the patient app
and the portals already read.
"""
from __future__ import annotations

from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from medimap.domain.models import CatalogEntry, ListedEntry, NearbyPharmacy, RankedResult, SellingLocation


def _km(d: Optional[float]) -> Optional[float]:
    # null stays null: "unknown distance" is not "0 km"
    return None if d is None else round(d, 2)


class WireModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# ── shared pieces ────────────────────────────────────────────────
class MedicineSummary(WireModel):
    id: str
    name: str
    strength: Optional[str] = None
    type: Optional[str] = None
    unit: str = ""

    @classmethod
    def from_entry(cls, e: CatalogEntry) -> "MedicineSummary":
        return cls(
            id=e.id, name=e.name, strength=e.strength,
            type=e.type.value if e.type else None, unit=e.unit,
        )


class PharmacyBrief(WireModel):
    id: str
    name: str
    city: Optional[str] = None
    delivery_available: bool = False
    rating: Optional[float] = None

    @classmethod
    def from_location(cls, loc: SellingLocation) -> "PharmacyBrief":
        return cls(
            id=loc.id, name=loc.name, city=loc.city,
            delivery_available=loc.delivery_available, rating=loc.rating,
        )


class PharmacySummary(PharmacyBrief):
    distance: Optional[float] = Field(None, description="km from the caller, null when unknown")


# ── SEARCH ───────────────────────────────────────────────────────
class SearchResultItem(WireModel):
    medicine: MedicineSummary
    price: float
    pharmacy: PharmacySummary
    available: bool

    @classmethod
    def from_ranked(cls, r: RankedResult) -> "SearchResultItem":
        brief = PharmacyBrief.from_location(r.location)
        return cls(
            medicine=MedicineSummary.from_entry(r.entry),
            price=r.price,
            pharmacy=PharmacySummary(**brief.model_dump(), distance=_km(r.distance_km)),
            available=r.available,
        )


# ── POPULAR / DETAILS / PHARMACY CATALOG ─────────────────────────
class PopularMedicineItem(MedicineSummary):
    price: float
    quantity: int
    pharmacy: Optional[PharmacyBrief] = None

    @classmethod
    def from_listed(cls, item: ListedEntry) -> "PopularMedicineItem":
        e = item.entry
        return cls(
            **MedicineSummary.from_entry(e).model_dump(),
            price=e.price,
            quantity=e.quantity,
            pharmacy=PharmacyBrief.from_location(item.location) if item.location else None,
        )


class MedicineDetail(MedicineSummary):
    description: Optional[str] = None
    price: float
    quantity: int
    requires_prescription: bool = False
    available: bool
    pharmacy: Optional[PharmacyBrief] = None

    @classmethod
    def from_listed(cls, item: ListedEntry) -> "MedicineDetail":
        e = item.entry
        return cls(
            **MedicineSummary.from_entry(e).model_dump(),
            description=e.description,
            price=e.price,
            quantity=e.quantity,
            requires_prescription=e.requires_prescription,
            available=e.available,
            pharmacy=PharmacyBrief.from_location(item.location) if item.location else None,
        )


class PharmacyCatalogResponse(WireModel):
    pharmacy: PharmacyBrief
    medicines: List[MedicineDetail]


# ── NEARBY PHARMACIES ────────────────────────────────────────────
class NearbyPharmacyItem(PharmacyBrief):
    address: Optional[str] = None
    phone: Optional[str] = None
    distance: float

    @classmethod
    def from_nearby(cls, p: NearbyPharmacy) -> "NearbyPharmacyItem":
        loc = p.location
        return cls(
            **PharmacyBrief.from_location(loc).model_dump(),
            address=loc.address,
            phone=loc.phone,
            distance=_km(p.distance_km),
        )


class NearbyPharmaciesResponse(WireModel):
    pharmacies: List[NearbyPharmacyItem]


# ── ERRORS ───────────────────────────────────────────────────────
class ValidationErrorResponse(BaseModel):
    message: str = "Validation error"
    errors: List[Any] = []
