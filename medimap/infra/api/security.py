# medimap/infra/api/security.py
"""
Optional shared-key guard for the /api routes.

Off unless REQUIRE_API_KEY=1: the patient app calls search anonymously. When on,
callers (portals, other services) send SERVICE_API_KEY in X-Api-Key.
"""
import os
import hmac
import logging

from fastapi import Depends, HTTPException, Request, status
from fastapi.security.api_key import APIKeyHeader

log = logging.getLogger("medimap.auth")

API_KEY_HEADER = "X-Api-Key"
_key_header = APIKeyHeader(name=API_KEY_HEADER, auto_error=False)


def guard_enabled() -> bool:
    return os.getenv("REQUIRE_API_KEY", "0") == "1"


async def require_api_key(request: Request, api_key: str | None = Depends(_key_header)) -> None:
    # env is read per request so the guard can be flipped without a restart
    if not guard_enabled():
        return
    route = f"{request.method} {request.url.path}"
    service_key = os.getenv("SERVICE_API_KEY", "")
    if not service_key:
        log.error("refused %s: REQUIRE_API_KEY=1 but SERVICE_API_KEY is empty", route)
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail="Service key not configured")
    if not api_key:
        log.warning("refused %s: missing %s", route, API_KEY_HEADER)
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Missing API key")
    if not hmac.compare_digest(api_key.encode(), service_key.encode()):
        log.warning("refused %s: wrong %s", route, API_KEY_HEADER)
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid API key")
