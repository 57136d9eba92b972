# medimap/domain/ports.py
from __future__ import annotations
from abc import ABC, abstractmethod
from typing import Dict, Iterable, List, Optional

from medimap.domain.models import CatalogEntry, GeoPoint, SellingLocation


class CatalogRepoPort(ABC):
    """Read-only access to catalog entries (`medicines`) and pharmacies."""

    @abstractmethod
    async def ensure_indexes(self) -> None: ...

    @abstractmethod
    async def ping(self) -> bool: ...

    # ---- catalog ----
    @abstractmethod
    async def find_in_stock(self, query: Optional[str] = None) -> List[CatalogEntry]:
        """quantity > 0, not flagged out of stock, name contains `query` (case-insensitive).
        Results come back in store order."""

    @abstractmethod
    async def find_popular(self, limit: int = 10) -> List[CatalogEntry]: ...

    @abstractmethod
    async def get_entry(self, entry_id: str) -> Optional[CatalogEntry]: ...

    @abstractmethod
    async def find_by_pharmacy(self, pharmacy_id: str) -> List[CatalogEntry]: ...

    # ---- pharmacies ----
    @abstractmethod
    async def get_pharmacy(self, pharmacy_id: str) -> Optional[SellingLocation]: ...

    @abstractmethod
    async def get_pharmacies(self, ids: Iterable[str]) -> Dict[str, SellingLocation]: ...

    @abstractmethod
    async def find_pharmacies_near(self, point: GeoPoint, max_distance_m: int) -> List[SellingLocation]: ...
