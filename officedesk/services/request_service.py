# officedesk/services/request_service.py
import logging
from datetime import datetime, timezone
from typing import Dict, Any, Optional
from fastapi import HTTPException
from officedesk.models.common import ApprovalStatus, TRACK_FIELDS
from officedesk.models.request import RequestInDB, RequestCreate, RequestUpdate, StateEvent
from officedesk.repositories import requests_repo as repo
from officedesk.services import lifecycle
from officedesk.services.approval import resolve_request
from officedesk.utils.mongo_helpers import fix_mongo_id, to_mongo
from officedesk.utils.pagination import page_meta

logger = logging.getLogger(__name__)

def ensure_allowed(result: lifecycle.GuardResult, status_code: int = 409):
    """Convierte una guarda denegada en un error HTTP con el motivo concreto."""
    if not result.ok:
        raise HTTPException(status_code=status_code, detail={"code": result.code, "reason": result.reason})

def normalize(doc: Dict[str,Any]) -> Dict[str,Any]:
    out = fix_mongo_id(doc)
    out.setdefault("status_by_staff", ApprovalStatus.PENDING.value)
    out.setdefault("status_by_admin", ApprovalStatus.PENDING.value)
    out.setdefault("state_history", [])
    # proyección para la UI; nunca se guarda
    out["overall_status"] = resolve_request(out).value
    return out

def overall_status_filter(status: ApprovalStatus) -> Dict[str,Any]:
    """Traduce el estado global derivado a un filtro Mongo sobre las dos pistas."""
    staff, admin = TRACK_FIELDS["staff"], TRACK_FIELDS["admin"]
    if status is ApprovalStatus.REJECTED:
        return {"$or": [{staff: "rejected"}, {admin: "rejected"}]}
    if status is ApprovalStatus.APPROVED:
        return {staff: "approved", admin: "approved"}
    return {
        staff: {"$ne": "rejected"}, admin: {"$ne": "rejected"},
        "$nor": [{staff: "approved", admin: "approved"}],
    }

async def get_or_404(request_id: str) -> dict:
    doc = await repo.find_by_id(request_id)
    if not doc:
        raise HTTPException(404, "Request not found")
    return doc

def check_visible(doc: dict, actor: dict):
    if actor.get("role") == "customer":
        if doc.get("user_id") != actor["id"]:
            raise HTTPException(403, "No autorizado")
    elif actor.get("office_id") and doc.get("office_id") != actor["office_id"]:
        raise HTTPException(403, "La solicitud no pertenece a su oficina")

async def create_request(payload: RequestCreate, actor: dict) -> dict:
    req = RequestInDB(user_id=actor["id"], **payload.model_dump())
    doc = to_mongo(req.model_dump())
    await repo.insert(doc)
    logger.info("Solicitud %s creada por %s para el servicio %s", req.id, actor["id"], req.service_id)
    return normalize(doc)

async def get_request(request_id: str, actor: dict) -> dict:
    doc = await get_or_404(request_id)
    check_visible(doc, actor)
    return normalize(doc)

async def list_requests(actor: dict, page: int, page_size: int,
                        status: Optional[ApprovalStatus] = None, office_id: Optional[str] = None) -> dict:
    filt: Dict[str,Any] = {}
    if actor.get("role") == "customer":
        filt["user_id"] = actor["id"]
    elif actor.get("office_id"):
        filt["office_id"] = actor["office_id"]
    elif office_id:
        filt["office_id"] = office_id
    if status:
        filt.update(overall_status_filter(status))

    total = await repo.count(filt)
    m = page_meta(total, page, page_size)
    items = await repo.list_paginated(filt, "created_at", -1, m.offset, page_size)
    return {"items": [normalize(d) for d in items], **m.model_dump()}

async def update_request(request_id: str, payload: RequestUpdate, actor: dict) -> dict:
    doc = await get_or_404(request_id)
    if doc.get("user_id") != actor["id"]:
        raise HTTPException(403, "Solo el solicitante puede editar la solicitud")
    ensure_allowed(lifecycle.can_mutate_request(doc))

    changes = to_mongo(payload.model_dump(exclude_unset=True))
    if not changes:
        return normalize(doc)
    changes["updated_at"] = datetime.now(timezone.utc)
    await repo.update_by_id(request_id, {"$set": changes})
    return normalize(await repo.find_by_id(request_id))

async def delete_request(request_id: str, actor: dict) -> None:
    doc = await get_or_404(request_id)
    if doc.get("user_id") != actor["id"]:
        raise HTTPException(403, "Solo el solicitante puede borrar la solicitud")
    ensure_allowed(lifecycle.can_mutate_request(doc))
    await repo.delete_by_id(request_id)
    logger.info("Solicitud %s borrada por %s", request_id, actor["id"])

async def decide(request_id: str, track: str, decision: str, note: Optional[str], actor: dict) -> dict:
    """Registra la decisión de una pista (staff o admin) sobre estado recién leído."""
    doc = await get_or_404(request_id)
    check_visible(doc, actor)
    ensure_allowed(lifecycle.can_decide_track(doc, track))

    upd = lifecycle.apply_track_decision(doc, track, decision)
    now = datetime.now(timezone.utc)
    set_ops = {upd.field: upd.value.value, f"{track}_decided_by": actor["id"], "updated_at": now}
    if note and note.strip():
        set_ops["approve_note"] = note.strip()
    ops: Dict[str,Any] = {"$set": set_ops}
    if upd.crossed:
        ev = StateEvent(from_status=upd.before, to_status=upd.after, at=now, by_user_id=actor["id"], track=track)
        ops["$push"] = {"state_history": to_mongo(ev.model_dump())}

    # otra decisión pudo ganar entre la lectura y la escritura
    if not await repo.update_if_pending(request_id, upd.field, ops):
        logger.warning("Pista %s de la solicitud %s decidida en paralelo", track, request_id)
        ensure_allowed(lifecycle.GuardResult.deny(lifecycle.TRACK_ALREADY_DECIDED, f"{track} track already decided"))
    if upd.crossed:
        logger.info("Solicitud %s pasa a %s (%s por %s)", request_id, upd.after.value, track, actor["id"])
    return normalize(await repo.find_by_id(request_id))
