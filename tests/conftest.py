# tests/conftest.py
import pytest
from fastapi.testclient import TestClient

from main import app
from medimap.container import get_repo
from medimap.infra.repo.memory_repo import InMemoryCatalogRepo

# Addis Ababa, near Meskel Square
ADDIS = {"latitude": 9.03, "longitude": 38.74}


def oid(n: int) -> str:
    return f"{n:024x}"


def pharmacy_doc(n, name, *, lon=None, lat=None, delivery=False, city="Addis Ababa", rating=4.0, **extra):
    doc = {"_id": oid(n), "name": name, "city": city, "deliveryAvailable": delivery, "rating": rating}
    if lon is not None and lat is not None:
        doc["location"] = {"type": "Point", "coordinates": [lon, lat]}
    doc.update(extra)
    return doc


def medicine_doc(n, name, pharmacy, *, price=10.0, quantity=10, out_of_stock=False,
                 type="Tablet", strength="500mg", **extra):
    doc = {
        "_id": oid(n), "name": name, "strength": strength, "type": type, "unit": "box",
        "price": price, "quantity": quantity, "outOfStock": out_of_stock,
        "requiresPrescription": False, "pharmacy": oid(pharmacy),
    }
    doc.update(extra)
    return doc


PHARMACIES = [
    pharmacy_doc(1, "Kenema Pharmacy", lon=38.75, lat=9.02, delivery=True, rating=4.5),
    pharmacy_doc(2, "Bole Pharmacy", lon=38.80, lat=9.10, delivery=True),
    # stored point without coordinates: must behave as "no location"
    pharmacy_doc(3, "Piassa Pharmacy", delivery=True, location={"type": "Point", "coordinates": []}),
    pharmacy_doc(4, "Merkato Pharmacy", lon=38.741, lat=9.031, delivery=False),
    pharmacy_doc(5, "Nairobi Pharmacy", lon=36.82, lat=-1.29, delivery=False, city="Nairobi"),
]

MEDICINES = [
    medicine_doc(101, "Panadol Extra", 2, price=30.0, quantity=5),
    medicine_doc(102, "Panadol", 1, price=25.0, quantity=10),
    medicine_doc(103, "panadol syrup", 3, price=40.0, quantity=3, type="Syrup", strength="120ml"),
    medicine_doc(104, "Panadol", 4, price=20.0, quantity=8),
    medicine_doc(105, "Panadol", 1, price=22.0, quantity=10, out_of_stock=True),
    medicine_doc(106, "Panadol", 2, price=21.0, quantity=0),
    medicine_doc(107, "Amoxicillin 250", 1, price=12.5, quantity=3, strength="250mg"),
    medicine_doc(108, "Co-Amoxiclav", 4, price=55.0, quantity=7),
    medicine_doc(109, "AMOXIL", 2, price=18.0, quantity=0),
    medicine_doc(110, "Aspirin", 1, price=5.0, quantity=40),
    medicine_doc(111, "Aspirin", 2, price=9.0, quantity=12),
    medicine_doc(112, "Aspirin", 4, price=7.0, quantity=6),
    medicine_doc(113, "Aspirin", 5, price=9.0, quantity=2),
]


@pytest.fixture
def catalog_repo() -> InMemoryCatalogRepo:
    return InMemoryCatalogRepo(MEDICINES, PHARMACIES)


@pytest.fixture
def make_client():
    def _make(repo):
        app.dependency_overrides[get_repo] = lambda: repo
        return TestClient(app)
    yield _make
    app.dependency_overrides.clear()


@pytest.fixture
def client(make_client, catalog_repo) -> TestClient:
    return make_client(catalog_repo)
