# backend/agenda/middleware/auth.py
# Reads the caller's business from X-Business-Id (set by the auth proxy).
# Does NOT reject: routes that need a business depend on get_business_id.

from fastapi import Request

BUSINESS_HEADER = "X-Business-Id"


async def auth_middleware(request: Request, call_next):
    request.state.business_id = None

    raw = request.headers.get(BUSINESS_HEADER)
    if raw and raw.strip().isdigit():
        request.state.business_id = int(raw.strip())

    return await call_next(request)
