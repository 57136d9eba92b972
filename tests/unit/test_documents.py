import re

from bson import ObjectId

from medimap.domain.models import MedicineType
from medimap.infra.repo.documents import (
    entries_from_docs, entry_from_doc, in_stock_filter, location_from_doc, to_object_id,
)


def test_in_stock_filter_without_query():
    assert in_stock_filter() == {"quantity": {"$gt": 0}, "outOfStock": {"$ne": True}}
    assert in_stock_filter("   ") == in_stock_filter()


def test_in_stock_filter_escapes_query():
    flt = in_stock_filter("Vit. C (500)")
    assert flt["name"] == {"$regex": re.escape("Vit. C (500)"), "$options": "i"}


def test_entry_from_doc_maps_portal_fields():
    pharmacy = ObjectId()
    doc = {
        "_id": ObjectId(), "name": "Panadol", "strength": "500mg", "type": "tablet",
        "price": 25, "quantity": 4, "outOfStock": False, "requiresPrescription": True,
        "pharmacy": pharmacy,
    }
    e = entry_from_doc(doc)
    assert e.type == MedicineType.TABLET
    assert e.pharmacy_id == str(pharmacy)
    assert e.requires_prescription is True
    assert e.unit == ""
    assert e.available


def test_unknown_type_maps_to_none():
    doc = {"_id": "x", "name": "Gel", "type": "Cream", "price": 3, "quantity": 1, "pharmacy": "p"}
    assert entry_from_doc(doc).type is None


def test_location_without_coordinates_has_no_point():
    loc = location_from_doc({"_id": "p", "name": "Piassa", "location": {"type": "Point"}})
    assert loc.point is None
    assert loc.delivery_available is False


def test_delivery_flag_must_be_true_not_truthy():
    loc = location_from_doc({"_id": "p", "name": "Piassa", "deliveryAvailable": "yes"})
    assert loc.delivery_available is False


def test_malformed_docs_are_skipped():
    docs = [
        {"_id": "ok", "name": "A", "price": 1, "quantity": 1, "pharmacy": "p"},
        {"_id": "bad-price", "name": "B", "price": -1, "quantity": 1, "pharmacy": "p"},
        {"name": "no-id", "price": 1, "quantity": 1, "pharmacy": "p"},
    ]
    assert [e.id for e in entries_from_docs(docs)] == ["ok"]


def test_to_object_id():
    raw = "0123456789abcdef01234567"
    assert to_object_id(raw) == ObjectId(raw)
    assert to_object_id("not-an-id") is None
    assert to_object_id(None) is None
