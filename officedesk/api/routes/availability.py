# officedesk/api/routes/availability.py
import datetime as dt
from fastapi import APIRouter, HTTPException, Query, Depends
from typing import Optional
from officedesk.api.deps import require_role
from officedesk.models.availability import OfficeAvailabilityConfig
from officedesk.services import schedule_service as svc
from officedesk.services.availability import parse_date

# ScheduleConfigError se traduce a 422 en main.py
router = APIRouter()

def _date_param(value: str) -> dt.date:
    try:
        return parse_date(value)
    except ValueError:
        raise HTTPException(400, "Invalid date format. Use YYYY-MM-DD")

@router.get("/{office_id}/availability")
async def get_availability(office_id: str, date: Optional[str] = None):
    cfg = await svc.get_office_config(office_id)
    out = {"config": cfg.model_dump(mode="json", by_alias=True)}
    if date:
        out.update(await svc.free_slots(office_id, _date_param(date), today=dt.date.today()))
    return out

@router.put("/{office_id}/availability")
async def put_availability(office_id: str, cfg: OfficeAvailabilityConfig, current=Depends(require_role(["admin"]))):
    if current.get("office_id") and current["office_id"] != office_id:
        raise HTTPException(403, "La oficina no es suya")
    saved = await svc.save_office_config(office_id, cfg)
    return {"ok": True, "config": saved.model_dump(mode="json", by_alias=True)}

@router.get("/{office_id}/availability/slots")
async def get_slots(office_id: str, date: str = Query(..., description="YYYY-MM-DD")):
    return await svc.free_slots(office_id, _date_param(date), today=dt.date.today())

@router.get("/{office_id}/availability/next-working-day")
async def get_next_working_day(office_id: str, from_: Optional[str] = Query(None, alias="from")):
    start = _date_param(from_) if from_ else dt.date.today()
    return await svc.next_open_day(office_id, start)
