# backend/agenda/dependencies.py
"""
Caller context for business-scoped routes.

The authenticating proxy in front of the API resolves the session and
forwards the caller's business as X-Business-Id. The auth middleware
copies it to request.state; routes get it explicitly through
get_current_business. Nothing in the core reads ambient session state.
"""

from fastapi import Depends, Request
from sqlalchemy.orm import Session

from .database import get_db
from .models.tables import Businesses
from .services.errors import NotFound, Unauthorized


def get_business_id(request: Request) -> int:
    business_id = getattr(request.state, "business_id", None)
    if business_id is None:
        raise Unauthorized("Unauthorized")
    return business_id


def get_current_business(
    business_id: int = Depends(get_business_id),
    db: Session = Depends(get_db),
) -> Businesses:
    business = db.get(Businesses, business_id)
    if not business:
        raise NotFound("Business not found")
    return business
