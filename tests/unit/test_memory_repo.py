import asyncio

from conftest import MEDICINES, PHARMACIES, medicine_doc, oid, pharmacy_doc
from medimap.domain.models import GeoPoint
from medimap.infra.repo.memory_repo import InMemoryCatalogRepo


def _repo():
    return InMemoryCatalogRepo(MEDICINES, PHARMACIES)


def test_find_in_stock_filters_and_keeps_insertion_order():
    found = asyncio.run(_repo().find_in_stock("panadol"))
    assert [e.id for e in found] == [oid(101), oid(102), oid(103), oid(104)]
    assert all(e.available for e in found)


def test_query_is_literal_substring_not_pattern():
    repo = InMemoryCatalogRepo([
        medicine_doc(1, "Vit.C", 1),
        medicine_doc(2, "VitxC", 1),
    ], [pharmacy_doc(1, "P")])
    found = asyncio.run(repo.find_in_stock("vit.c"))
    assert [e.name for e in found] == ["Vit.C"]


def test_find_popular_orders_by_quantity():
    found = asyncio.run(_repo().find_popular(limit=3))
    assert [e.quantity for e in found] == [40, 12, 10]


def test_find_by_pharmacy_sorted_by_name():
    found = asyncio.run(_repo().find_by_pharmacy(oid(1)))
    assert [e.name for e in found] == ["Amoxicillin 250", "Aspirin", "Panadol"]


def test_get_entry_returns_out_of_stock_too():
    e = asyncio.run(_repo().get_entry(oid(105)))
    assert e is not None and e.available is False
    assert asyncio.run(_repo().get_entry(oid(999))) is None


def test_find_pharmacies_near_uses_radius_and_skips_pointless():
    near = asyncio.run(_repo().find_pharmacies_near(GeoPoint(longitude=38.74, latitude=9.03), 5000))
    assert [p.name for p in near] == ["Merkato Pharmacy", "Kenema Pharmacy"]


def test_get_pharmacies_ignores_unknown_ids():
    found = asyncio.run(_repo().get_pharmacies([oid(1), oid(999)]))
    assert list(found) == [oid(1)]
