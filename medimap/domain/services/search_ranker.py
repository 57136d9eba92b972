# medimap/domain/services/search_ranker.py
from __future__ import annotations

from enum import Enum
from typing import Iterable, List, Mapping, Optional, Tuple

from medimap.domain.geo import haversine_km
from medimap.domain.models import CatalogEntry, GeoPoint, RankedResult, SellingLocation


class SortMode(str, Enum):
    PRICE_ASCENDING = "price_ascending"
    PRICE_DESCENDING = "price_descending"
    NEAREST = "nearest"
    RETRIEVAL = "retrieval"   # keep store order


def resolve_sort_mode(requested: Optional[SortMode], observer: Optional[GeoPoint]) -> SortMode:
    if requested is not None:
        return requested
    return SortMode.NEAREST if observer is not None else SortMode.RETRIEVAL


def nearest_key(result: RankedResult) -> Tuple[bool, float]:
    # unknown distance sorts after every known one, whatever its magnitude
    d = result.distance_km
    return (d is None, d if d is not None else 0.0)


def price_key(result: RankedResult) -> float:
    return result.price


class GeoSearchRanker:
    """
    Turns retrieved catalog entries into an ordered list of RankedResult.

    Pure and synchronous: no I/O, no mutation of its inputs. Every sort is
    stable, so ties keep the order the store returned.
    """

    def rank(
        self,
        entries: Iterable[CatalogEntry],
        locations: Mapping[str, SellingLocation],
        *,
        observer: Optional[GeoPoint] = None,
        delivery_only: bool = False,
        sort_mode: Optional[SortMode] = None,
    ) -> List[RankedResult]:
        mode = resolve_sort_mode(sort_mode, observer)

        results: List[RankedResult] = []
        for entry in entries:
            if not entry.available:
                continue
            loc = locations.get(entry.pharmacy_id)
            if loc is None:
                continue
            if delivery_only and not loc.delivery_available:
                continue
            results.append(
                RankedResult(
                    entry=entry,
                    price=entry.price,
                    location=loc,
                    distance_km=self.distance_to(observer, loc),
                    available=entry.available,
                )
            )

        if mode == SortMode.PRICE_ASCENDING:
            return sorted(results, key=price_key)
        if mode == SortMode.PRICE_DESCENDING:
            return sorted(results, key=price_key, reverse=True)
        if mode == SortMode.NEAREST:
            return sorted(results, key=nearest_key)
        return results

    @staticmethod
    def distance_to(observer: Optional[GeoPoint], loc: SellingLocation) -> Optional[float]:
        if observer is None or loc.point is None:
            return None
        return haversine_km(observer, loc.point)
