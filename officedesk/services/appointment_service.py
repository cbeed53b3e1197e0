# officedesk/services/appointment_service.py
import logging
from datetime import date, datetime, timezone
from typing import Dict, Any, Optional
from fastapi import HTTPException
from pymongo.errors import DuplicateKeyError
from officedesk.models.appointment import AppointmentInDB, AppointmentCreate, AppointmentUpdate
from officedesk.models.common import AppointmentStatus
from officedesk.repositories import appointments_repo as repo
from officedesk.repositories import requests_repo, users_repo
from officedesk.services import lifecycle
from officedesk.services.request_service import ensure_allowed, check_visible
from officedesk.services.schedule_service import get_office_config
from officedesk.utils.mongo_helpers import fix_mongo_id, to_mongo

logger = logging.getLogger(__name__)

SLOT_TAKEN = lifecycle.GuardResult.deny(lifecycle.SLOT_UNAVAILABLE, "slot no longer available")

def _slot_status_code(result: lifecycle.GuardResult) -> int:
    # hueco ocupado = conflicto; fecha pasada o día cerrado = entrada no válida
    return 409 if result.code == lifecycle.SLOT_UNAVAILABLE else 422

async def get_or_404(appointment_id: str) -> dict:
    doc = await repo.find_by_id(appointment_id)
    if not doc:
        raise HTTPException(404, "Appointment not found")
    return doc

async def _check_slot(office_id: str, day: date, time: Optional[str], exclude_id: Optional[str] = None):
    cfg = await get_office_config(office_id)
    existing = await repo.list_for_office_day(office_id, day.isoformat(), exclude_id=exclude_id)
    result = lifecycle.check_slot(cfg, day, time, existing, today=date.today())
    ensure_allowed(result, _slot_status_code(result))

async def _assigned_staff(staff_id: Optional[str], req: dict, actor: dict) -> Optional[str]:
    """Solo personal (staff/admin) de la oficina de la solicitud puede quedar asignado."""
    if staff_id is None:
        return actor["id"] if actor.get("role") == "staff" else None
    user = await users_repo.find_by_id(staff_id)
    if not user or user.get("role") not in ("staff", "admin") or user.get("office_id") != req["office_id"]:
        logger.warning("Asignación inválida de %s a la solicitud %s", staff_id, req["id"])
        raise HTTPException(400, "Invalid staff assignment")
    return staff_id

async def create_appointment(payload: AppointmentCreate, actor: dict) -> dict:
    # siempre se relee la solicitud: el estado que mande el cliente no cuenta
    req = await requests_repo.find_by_id(payload.request_id)
    if not req:
        raise HTTPException(404, "Request not found")
    check_visible(req, actor)
    ensure_allowed(lifecycle.can_create_appointment(req))
    await _check_slot(req["office_id"], payload.date, payload.time)

    staff_id = await _assigned_staff(payload.staff_id, req, actor)
    appt = AppointmentInDB(
        request_id=req["id"], office_id=req["office_id"], user_id=req["user_id"],
        date=payload.date, time=payload.time, notes=payload.notes, staff_id=staff_id,
    )
    doc = to_mongo(appt.model_dump())
    try:
        await repo.insert(doc)
    except DuplicateKeyError:
        logger.warning("Hueco %s %s ya reservado en la oficina %s", doc["date"], doc["time"], doc["office_id"])
        ensure_allowed(SLOT_TAKEN)
    logger.info("Cita %s creada para la solicitud %s", appt.id, req["id"])
    return fix_mongo_id(doc)

async def get_appointment(appointment_id: str, actor: dict) -> dict:
    doc = await get_or_404(appointment_id)
    check_visible(doc, actor)
    return fix_mongo_id(doc)

async def list_appointments(actor: dict, request_id: Optional[str] = None) -> list:
    filt: Dict[str,Any] = {}
    if request_id:
        filt["request_id"] = request_id
    if actor.get("role") == "customer":
        filt["user_id"] = actor["id"]
    elif actor.get("office_id"):
        filt["office_id"] = actor["office_id"]
    return fix_mongo_id(await repo.list_by(filt))

async def update_appointment(appointment_id: str, payload: AppointmentUpdate, actor: dict) -> dict:
    doc = await get_or_404(appointment_id)
    check_visible(doc, actor)
    ensure_allowed(lifecycle.can_mutate_appointment(doc))

    changes = to_mongo(payload.model_dump(exclude_unset=True))
    if not changes:
        return fix_mongo_id(doc)
    if "date" in changes or "time" in changes:
        day = payload.date or date.fromisoformat(doc["date"])
        time = changes["time"] if "time" in changes else doc.get("time")
        await _check_slot(doc["office_id"], day, time, exclude_id=appointment_id)

    changes["updated_at"] = datetime.now(timezone.utc)
    try:
        await repo.update_by_id(appointment_id, {"$set": changes})
    except DuplicateKeyError:
        ensure_allowed(SLOT_TAKEN)
    return fix_mongo_id(await repo.find_by_id(appointment_id))

async def delete_appointment(appointment_id: str, actor: dict) -> None:
    doc = await get_or_404(appointment_id)
    check_visible(doc, actor)
    ensure_allowed(lifecycle.can_mutate_appointment(doc))
    await repo.delete_by_id(appointment_id)
    logger.info("Cita %s borrada por %s", appointment_id, actor["id"])

async def transition(appointment_id: str, to_status: AppointmentStatus, actor: dict, notes: Optional[str] = None) -> dict:
    doc = await get_or_404(appointment_id)
    check_visible(doc, actor)
    if actor.get("role") == "customer":
        # el cliente solo puede cancelar, y solo mientras la cita sigue editable
        if to_status is not AppointmentStatus.CANCELLED:
            raise HTTPException(403, "No autorizado")
        ensure_allowed(lifecycle.can_mutate_appointment(doc))
    ensure_allowed(lifecycle.can_transition_appointment(doc, to_status))

    set_ops: Dict[str,Any] = {"status": to_status.value, "updated_at": datetime.now(timezone.utc)}
    if notes:
        set_ops["notes"] = notes
    if actor.get("role") in ("staff", "admin") and to_status in (AppointmentStatus.APPROVED, AppointmentStatus.REJECTED):
        set_ops["staff_id"] = actor["id"]
    await repo.update_by_id(appointment_id, {"$set": set_ops})
    logger.info("Cita %s: %s → %s (%s)", appointment_id, doc["status"], to_status.value, actor["id"])
    return fix_mongo_id(await repo.find_by_id(appointment_id))
