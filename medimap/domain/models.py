# medimap/domain/models.py
from __future__ import annotations

from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class MedicineType(str, Enum):
    TABLET = "Tablet"
    SYRUP = "Syrup"
    INJECTION = "Injection"


class GeoPoint(BaseModel):
    """WGS84 point. Either both coordinates exist or there is no point at all."""
    model_config = ConfigDict(frozen=True)

    longitude: float = Field(..., ge=-180.0, le=180.0)
    latitude: float = Field(..., ge=-90.0, le=90.0)


class SellingLocation(BaseModel):
    """A pharmacy as seen by the search side (read-only)."""
    id: str
    name: str
    city: Optional[str] = None
    address: Optional[str] = None
    phone: Optional[str] = None
    point: Optional[GeoPoint] = None
    delivery_available: bool = False
    rating: Optional[float] = None


class CatalogEntry(BaseModel):
    id: str
    name: str
    strength: Optional[str] = None
    type: Optional[MedicineType] = None
    unit: str = ""
    description: Optional[str] = None
    price: float = Field(..., gt=0)
    quantity: int = Field(0, ge=0)
    out_of_stock: bool = False
    requires_prescription: bool = False
    pharmacy_id: str

    @property
    def available(self) -> bool:
        # quantity and the explicit flag must both say "in stock"
        return self.quantity > 0 and not self.out_of_stock


class RankedResult(BaseModel):
    entry: CatalogEntry
    price: float
    location: SellingLocation
    distance_km: Optional[float] = None
    available: bool


class ListedEntry(BaseModel):
    """Catalog entry with its (possibly unresolved) pharmacy, no distance."""
    entry: CatalogEntry
    location: Optional[SellingLocation] = None


class NearbyPharmacy(BaseModel):
    location: SellingLocation
    distance_km: float
