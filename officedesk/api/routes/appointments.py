# officedesk/api/routes/appointments.py
from fastapi import APIRouter, Depends, Body
from typing import Optional
from officedesk.api.deps import get_current_user, require_role
from officedesk.models.appointment import AppointmentCreate, AppointmentUpdate, AppointmentDecisionPayload
from officedesk.models.common import AppointmentStatus
from officedesk.services import appointment_service as svc

router = APIRouter()

@router.post("", status_code=201)
async def create_appointment(payload: AppointmentCreate, current=Depends(get_current_user)):
    return await svc.create_appointment(payload, current)

@router.get("")
async def list_appointments(request_id: Optional[str] = None, current=Depends(get_current_user)):
    return {"items": await svc.list_appointments(current, request_id=request_id)}

@router.get("/{appointment_id}")
async def get_appointment(appointment_id: str, current=Depends(get_current_user)):
    return await svc.get_appointment(appointment_id, current)

@router.patch("/{appointment_id}")
async def update_appointment(appointment_id: str, payload: AppointmentUpdate, current=Depends(get_current_user)):
    return await svc.update_appointment(appointment_id, payload, current)

@router.delete("/{appointment_id}")
async def delete_appointment(appointment_id: str, current=Depends(get_current_user)):
    await svc.delete_appointment(appointment_id, current)
    return {"ok": True}

@router.post("/{appointment_id}/decision")
async def decide(appointment_id: str, payload: AppointmentDecisionPayload, current=Depends(require_role(["staff","admin"]))):
    to_status = AppointmentStatus.APPROVED if payload.action == "approve" else AppointmentStatus.REJECTED
    return await svc.transition(appointment_id, to_status, current, notes=payload.notes)

@router.post("/{appointment_id}/complete")
async def complete(appointment_id: str, current=Depends(require_role(["staff","admin"]))):
    return await svc.transition(appointment_id, AppointmentStatus.COMPLETED, current)

@router.post("/{appointment_id}/cancel")
async def cancel(appointment_id: str, payload: dict = Body(default_factory=dict), current=Depends(get_current_user)):
    return await svc.transition(appointment_id, AppointmentStatus.CANCELLED, current, notes=payload.get("notes"))
