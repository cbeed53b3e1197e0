# officedesk/api/routes/requests.py
from fastapi import APIRouter, Query, Depends
from typing import Optional
from officedesk.api.deps import get_current_user, require_role
from officedesk.core.config import settings
from officedesk.models.common import ApprovalStatus
from officedesk.models.request import RequestCreate, RequestUpdate, TrackDecisionPayload
from officedesk.services import request_service as svc

router = APIRouter()

@router.post("", status_code=201)
async def create_request(payload: RequestCreate, current=Depends(require_role(["customer"]))):
    return await svc.create_request(payload, current)

@router.get("")
async def get_requests(
    current=Depends(get_current_user),
    page: int = Query(1, ge=1),
    page_size: int = Query(10, ge=1, le=settings.max_page_size),
    status: Optional[ApprovalStatus] = None,
    office_id: Optional[str] = None,
):
    return await svc.list_requests(current, page, page_size, status=status, office_id=office_id)

@router.get("/{request_id}")
async def get_request(request_id: str, current=Depends(get_current_user)):
    return await svc.get_request(request_id, current)

@router.patch("/{request_id}")
async def update_request(request_id: str, payload: RequestUpdate, current=Depends(require_role(["customer"]))):
    return await svc.update_request(request_id, payload, current)

@router.delete("/{request_id}")
async def delete_request(request_id: str, current=Depends(require_role(["customer"]))):
    await svc.delete_request(request_id, current)
    return {"ok": True}

# cada pista tiene su propio endpoint: nunca se tocan las dos en la misma mutación
@router.post("/{request_id}/staff-decision")
async def staff_decision(request_id: str, payload: TrackDecisionPayload, current=Depends(require_role(["staff"]))):
    return await svc.decide(request_id, "staff", payload.decision, payload.note, current)

@router.post("/{request_id}/admin-decision")
async def admin_decision(request_id: str, payload: TrackDecisionPayload, current=Depends(require_role(["admin"]))):
    return await svc.decide(request_id, "admin", payload.decision, payload.note, current)
