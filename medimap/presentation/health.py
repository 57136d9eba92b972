# medimap/presentation/health.py
from fastapi import APIRouter, Depends
import logging
from medimap.container import get_repo
from medimap.domain.ports import CatalogRepoPort

router = APIRouter(tags=["health"])
logger = logging.getLogger(__name__)

@router.get("/healthz")
async def healthz():
    # Liveness: proses hidup
    return {"ok": True}

@router.get("/readyz")
async def readyz(repo: CatalogRepoPort = Depends(get_repo)):
    checks = {}; ok = True
    # Store reachable + indexes in place
    try:
        checks["store"] = await repo.ping()
        await repo.ensure_indexes()
        ok = ok and checks["store"]
    except Exception as e:
        logger.warning("readyz: store check failed: %s", e)
        checks["store"] = False; checks["store_error"] = str(e); ok = False
    checks["backend"] = type(repo).__name__
    return {"ok": ok, **checks}
