# backend/agenda/middleware/audit.py
# One JSON line per request on "agenda.audit".
# 5xx responses and unhandled errors go out at WARNING, everything else at INFO.
# Read-only: never touches the database or the response.

import json
import logging
import time

from fastapi import Request

logger = logging.getLogger("agenda.audit")


def _audit_record(request: Request, status: int, started: float) -> dict:
    return {
        "method": request.method,
        "path": request.url.path,
        "query": request.url.query or None,
        "status": status,
        "business_id": getattr(request.state, "business_id", None),
        "ip": request.headers.get("X-Real-IP") or (request.client.host if request.client else None),
        "duration_ms": round((time.perf_counter() - started) * 1000, 1),
    }


async def audit_middleware(request: Request, call_next):
    started = time.perf_counter()

    try:
        response = await call_next(request)
    except Exception:
        logger.warning(json.dumps(_audit_record(request, 500, started)))
        raise

    record = _audit_record(request, response.status_code, started)
    level = logging.WARNING if response.status_code >= 500 else logging.INFO
    logger.log(level, json.dumps(record))

    return response
