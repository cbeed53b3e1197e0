from officedesk.core.db import get_db

async def find_by_id(user_id: str) -> dict | None:
    return await get_db().users.find_one({"id": user_id}, {"_id": 0, "password_hash": 0})
