from fastapi.testclient import TestClient

from conftest import MEDICINES, PHARMACIES
from main import app
from medimap.container import get_repo
from medimap.infra.repo.memory_repo import InMemoryCatalogRepo


class IndexSpyRepo(InMemoryCatalogRepo):
    def __init__(self, *args, fail=False, **kwargs):
        super().__init__(*args, **kwargs)
        self.fail = fail
        self.index_calls = 0

    async def ensure_indexes(self) -> None:
        self.index_calls += 1
        if self.fail:
            raise ConnectionError("mongo down")


def test_startup_ensures_indexes_before_first_request():
    repo = IndexSpyRepo(MEDICINES, PHARMACIES)
    app.dependency_overrides[get_repo] = lambda: repo
    try:
        with TestClient(app) as cli:
            assert repo.index_calls == 1
            res = cli.get("/api/pharmacies/nearby", params={"latitude": "9.03", "longitude": "38.74"})
            assert res.status_code == 200
    finally:
        app.dependency_overrides.clear()


def test_startup_survives_index_failure(caplog):
    repo = IndexSpyRepo(MEDICINES, PHARMACIES, fail=True)
    app.dependency_overrides[get_repo] = lambda: repo
    try:
        with caplog.at_level("ERROR", logger="medimap.request"):
            with TestClient(app) as cli:
                assert cli.get("/healthz").json() == {"ok": True}
        assert repo.index_calls == 1
        assert "Ensuring store indexes failed at startup" in caplog.text
    finally:
        app.dependency_overrides.clear()
