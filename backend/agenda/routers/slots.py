# backend/agenda/routers/slots.py
"""
Slots API endpoint.

GET /slots?date=YYYY-MM-DD&serviceId=<id> → ["HH:MM", ...]
"""

from datetime import date

from fastapi import APIRouter, Depends, Query
from redis import Redis
from sqlalchemy.orm import Session

from ..database import get_db
from ..dependencies import get_current_business
from ..models.tables import Businesses
from ..redis_client import get_redis
from ..services.slots import calculate_available_slots, get_booking_config

router = APIRouter(prefix="/slots", tags=["slots"])


@router.get("", response_model=list[str])
def get_slots(
    target_date: date = Query(..., alias="date"),
    service_id: int = Query(..., alias="serviceId"),
    business: Businesses = Depends(get_current_business),
    db: Session = Depends(get_db),
    redis: Redis | None = Depends(get_redis),
):
    """Bookable start times for a service on a business-local date."""
    return calculate_available_slots(
        db=db,
        business_id=business.id,
        service_id=service_id,
        target_date=target_date,
        config=get_booking_config(),
        redis=redis,
    )
