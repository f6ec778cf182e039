# backend/agenda/services/slots/availability.py
"""
Slot query: which start times are bookable for a service on a date.

Flow: working hours → candidate slots → conflict filter.

- Working window: Redis cache when available, database otherwise
- Appointments and absences: always read fresh from the database

The result is advisory. It may go stale as soon as it is returned; the
booking committer re-validates every write.
"""

import logging
from datetime import date

from redis import Redis
from sqlalchemy import or_
from sqlalchemy.orm import Session

from ...models.tables import Absences, Appointments, Services, WorkingDays
from ..errors import NotFound
from .config import BookingConfig, get_booking_config
from .conflicts import absence_intervals, appointment_intervals, filter_available
from .generator import generate_slots
from .intervals import Interval
from .redis_store import WindowRedisStore
from .working_hours import WorkingWindow, resolve_working_window

logger = logging.getLogger(__name__)


def calculate_available_slots(
    db: Session,
    business_id: int,
    service_id: int,
    target_date: date,
    config: BookingConfig | None = None,
    redis: Redis | None = None,
) -> list[str]:
    """
    Calculate available "HH:MM" start times.

    Raises:
        NotFound: service unknown to the business (or inactive)
    """
    config = config or get_booking_config()

    # Step 1: Service
    service = get_active_service(db, business_id, service_id)
    if not service:
        raise NotFound("Service not found")

    # Step 2: Working window
    window = get_working_window(db, business_id, target_date, config, redis)
    if not window.is_open:
        return []

    # Step 3: Candidates
    candidates = generate_slots(
        window.interval, service.duration_minutes, config.slot_step_minutes
    )

    # Step 4: Blockers overlapping the window
    blockers = absence_intervals(
        _get_absences(db, business_id, window.interval),
        config.open_ended_absence_blocks,
    )
    blockers += appointment_intervals(
        _get_confirmed_appointments(db, business_id, window.interval)
    )

    available = filter_available(candidates, blockers)
    logger.debug(
        f"Slots business={business_id} service={service_id} date={target_date}: "
        f"{len(available)} available, {len(blockers)} blockers"
    )
    return available


# ── Working window (with cache) ─────────────────────────────────────────


def get_working_window(
    db: Session,
    business_id: int,
    target_date: date,
    config: BookingConfig,
    redis: Redis | None,
) -> WorkingWindow:
    """Resolve the working window, using Redis cache when available."""
    if redis is not None:
        store = WindowRedisStore(redis, config)
        cached = store.get_window(business_id, target_date)
        if cached is not None:
            return cached

        # Cache miss: resolve and store
        window = resolve_working_window(_get_working_days(db, business_id), target_date)
        store.store_window(business_id, target_date, window)
        return window

    # No Redis: resolve on the fly
    return resolve_working_window(_get_working_days(db, business_id), target_date)


# ── Database helpers ─────────────────────────────────────────────────────


def get_active_service(db: Session, business_id: int, service_id: int):
    """Get active service by ID, scoped to the business."""
    return db.query(Services).filter(
        Services.id == service_id,
        Services.business_id == business_id,
        Services.active.is_(True),
    ).first()


def _get_working_days(db: Session, business_id: int) -> list:
    return db.query(WorkingDays).filter(WorkingDays.business_id == business_id).all()


def _get_absences(db: Session, business_id: int, window: Interval) -> list:
    """Absences that may touch the window, open-ended ones included."""
    return (
        db.query(Absences)
        .filter(
            Absences.business_id == business_id,
            Absences.start_date < window.end,
            or_(Absences.end_date.is_(None), Absences.end_date > window.start),
        )
        .all()
    )


def _get_confirmed_appointments(db: Session, business_id: int, window: Interval) -> list:
    return (
        db.query(Appointments)
        .filter(
            Appointments.business_id == business_id,
            Appointments.status == "CONFIRMED",
            Appointments.start_at < window.end,
            Appointments.end_at > window.start,
        )
        .all()
    )
