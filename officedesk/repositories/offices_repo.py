# officedesk/repositories/offices_repo.py
from datetime import datetime, timezone
from officedesk.core.db import get_db

async def get_availability(office_id: str) -> dict | None:
    return await get_db().office_availability.find_one({"office_id": office_id}, {"_id": 0})

async def upsert_availability(office_id: str, doc: dict) -> dict:
    now = datetime.now(timezone.utc)
    data = {**doc, "office_id": office_id, "updated_at": now}
    await get_db().office_availability.update_one(
        {"office_id": office_id},
        {"$set": data, "$setOnInsert": {"created_at": now}},
        upsert=True,
    )
    return data
