# officedesk/repositories/appointments_repo.py
from typing import Dict, Any, List
from officedesk.core.db import get_db

async def find_by_id(appointment_id: str) -> dict | None:
    return await get_db().appointments.find_one({"id": appointment_id})

async def insert(doc: dict):
    # DuplicateKeyError del índice de huecos sube tal cual al servicio
    await get_db().appointments.insert_one(doc)

async def update_by_id(appointment_id: str, ops: Dict[str,Any]):
    await get_db().appointments.update_one({"id": appointment_id}, ops)

async def delete_by_id(appointment_id: str) -> int:
    res = await get_db().appointments.delete_one({"id": appointment_id})
    return res.deleted_count

async def list_for_office_day(office_id: str, day: str, exclude_id: str | None = None) -> List[dict]:
    """Citas de una oficina en un día ("YYYY-MM-DD"), filtradas en la consulta."""
    filt: Dict[str,Any] = {"office_id": office_id, "date": day}
    if exclude_id:
        filt["id"] = {"$ne": exclude_id}
    cur = get_db().appointments.find(filt, {"_id": 0, "id": 1, "time": 1, "status": 1})
    return await cur.to_list(length=None)

async def list_by(filt: Dict[str,Any], limit: int = 500) -> List[dict]:
    cur = get_db().appointments.find(filt).sort([("date",1),("time",1)]).limit(limit)
    return await cur.to_list(length=limit)
