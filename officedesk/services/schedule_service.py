# officedesk/services/schedule_service.py
import logging
from datetime import date
from typing import Optional
from officedesk.core.config import settings
from officedesk.models.availability import OfficeAvailabilityConfig, default_schedule
from officedesk.repositories import appointments_repo, offices_repo
from officedesk.services import availability

logger = logging.getLogger(__name__)

def office_default_config(office_id: str) -> OfficeAvailabilityConfig:
    return OfficeAvailabilityConfig(
        office_id=office_id,
        default_schedule=default_schedule(),
        slot_duration=settings.default_slot_duration,
    )

async def get_office_config(office_id: str) -> OfficeAvailabilityConfig:
    """
    Oficina sin documento guardado: horario por defecto (L-V 9-17).
    Documento sin horario semanal: sin disponibilidad.
    """
    raw = await offices_repo.get_availability(office_id)
    if raw is None:
        return office_default_config(office_id)
    return availability.load_config(raw)

async def save_office_config(office_id: str, cfg: OfficeAvailabilityConfig) -> OfficeAvailabilityConfig:
    data = cfg.model_dump(mode="json", by_alias=True, exclude={"office_id"})
    await offices_repo.upsert_availability(office_id, data)
    logger.info("Disponibilidad de la oficina %s actualizada", office_id)
    return cfg.model_copy(update={"office_id": office_id})

async def free_slots(office_id: str, day: date, today: Optional[date] = None) -> dict:
    cfg = await get_office_config(office_id)
    existing = await appointments_repo.list_for_office_day(office_id, day.isoformat())
    slots = availability.available_slots(cfg, day, existing, today=today)
    return {
        "date": day.isoformat(),
        "working_day": availability.is_open(day, cfg),
        "available_slots": [s._asdict() for s in slots],
        "booked_slots": sorted(availability.booked_times(existing)),
        "total_slots": len(slots),
    }

async def next_open_day(office_id: str, from_date: date) -> dict:
    cfg = await get_office_config(office_id)
    try:
        day = availability.next_working_day(from_date, cfg, lookahead=settings.booking_lookahead_days)
    except availability.NoWorkingDayFound as exc:
        logger.info("Oficina %s sin días laborables: %s", office_id, exc)
        return {"date": None, "exhausted": True, "lookahead_days": exc.lookahead}
    return {"date": day.isoformat(), "exhausted": False, "lookahead_days": settings.booking_lookahead_days}
