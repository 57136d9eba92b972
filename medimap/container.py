# medimap/container.py
import os
from functools import lru_cache

from fastapi import Depends

from medimap.domain.ports import CatalogRepoPort
from medimap.domain.services.search_ranker import GeoSearchRanker
from medimap.infra.repo.memory_repo import InMemoryCatalogRepo
from medimap.infra.repo.mongo_repo import MongoCatalogRepo

from medimap.application.search_use_case import SearchMedicinesUseCase
from medimap.application.catalog_use_cases import (
    MedicineDetailsUseCase, NearbyPharmaciesUseCase,
    PharmacyCatalogUseCase, PopularMedicinesUseCase,
)

@lru_cache
def _repo() -> CatalogRepoPort:
    backend = os.getenv("CATALOG_BACKEND", "mongo").strip().lower()
    if backend == "memory":
        return InMemoryCatalogRepo.from_env()
    if backend != "mongo":
        raise ValueError(f"Unknown CATALOG_BACKEND={backend!r} (expected 'mongo' or 'memory')")
    return MongoCatalogRepo()

@lru_cache
def _ranker() -> GeoSearchRanker: return GeoSearchRanker()

# Routes depend on get_repo, so tests only need to override this one provider.
def get_repo() -> CatalogRepoPort: return _repo()

def get_search_use_case(repo: CatalogRepoPort = Depends(get_repo)) -> SearchMedicinesUseCase:
    return SearchMedicinesUseCase(repo, ranker=_ranker())

def get_popular_use_case(repo: CatalogRepoPort = Depends(get_repo)) -> PopularMedicinesUseCase:
    return PopularMedicinesUseCase(repo)

def get_details_use_case(repo: CatalogRepoPort = Depends(get_repo)) -> MedicineDetailsUseCase:
    return MedicineDetailsUseCase(repo)

def get_pharmacy_catalog_use_case(repo: CatalogRepoPort = Depends(get_repo)) -> PharmacyCatalogUseCase:
    return PharmacyCatalogUseCase(repo)

def get_nearby_use_case(repo: CatalogRepoPort = Depends(get_repo)) -> NearbyPharmaciesUseCase:
    return NearbyPharmaciesUseCase(repo)
