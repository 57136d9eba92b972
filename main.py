# main.py
from dotenv import load_dotenv
load_dotenv()

import os
import logging

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

# Router utama (/api/medicines, /api/pharmacies)
from medimap.presentation.routers import router as api_router
from medimap.presentation.health import router as health_router
from medimap.presentation.schemas import ValidationErrorResponse

# --- logging config HARUS di atas ---
logging.basicConfig(
    level=os.getenv("LOG_LEVEL", "INFO").upper(),
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
)

app = FastAPI(
    title="MediMap Search",
    version=os.getenv("APP_VERSION", "0.1.0"),
)

# gunakan logger aplikasi sendiri, bukan 'uvicorn.access'
app_logger = logging.getLogger("medimap.request")

@app.middleware("http")
async def log_requests(request: Request, call_next):
    app_logger.info("Incoming %s %s", request.method, request.url.path)
    try:
        response = await call_next(request)
        app_logger.info("Completed %s %s -> %s", request.method, request.url.path, response.status_code)
        return response
    except Exception:
        app_logger.exception("Unhandled error on %s %s", request.method, request.url.path)
        raise

# ─────────────────────────────────────────────────────────────
# CORS (atur via env: CORS_ALLOW_ORIGINS="https://foo.com,https://bar.com")
# ─────────────────────────────────────────────────────────────
raw_origins = os.getenv("CORS_ALLOW_ORIGINS", "*")
allow_origins = [o.strip().rstrip("/") for o in raw_origins.split(",") if o.strip()]

app.add_middleware(
    CORSMiddleware,
    allow_origins=allow_origins,
    allow_credentials="*" not in allow_origins,
    allow_methods=["*"],
    allow_headers=["*"],
)

# ─────────────────────────────────────────────────────────────
# Errors: validation -> 400 {"message", "errors"} (kontrak lama klien)
# ─────────────────────────────────────────────────────────────
@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    app_logger.info("Validation error on %s %s: %s", request.method, request.url.path, exc.errors())
    payload = ValidationErrorResponse(errors=jsonable_encoder(exc.errors()))
    return JSONResponse(status_code=400, content=payload.model_dump())

# ─────────────────────────────────────────────────────────────
# Routes
# ─────────────────────────────────────────────────────────────
app.include_router(api_router)
app.include_router(health_router)

@app.get("/")
async def root():
    return {
        "name": "MediMap Search",
        "version": os.getenv("APP_VERSION", "0.1.0"),
        "ok": True,
    }


# ─────────────────────────────────────────────────────────────
# Startup: indexes ($near butuh 2dsphere pada pharmacies.location)
# ─────────────────────────────────────────────────────────────
@app.on_event("startup")
async def ensure_store_indexes():
    from medimap.container import get_repo
    provider = app.dependency_overrides.get(get_repo, get_repo)
    try:
        await provider().ensure_indexes()
        app_logger.info("Store indexes ensured")
    except Exception:
        # service still starts; /readyz retries and reports the store state
        app_logger.exception("Ensuring store indexes failed at startup")
