# officedesk/repositories/requests_repo.py
from typing import Dict, Any, List
from officedesk.core.db import get_db

async def find_by_id(request_id: str) -> dict | None:
    return await get_db().requests.find_one({"id": request_id})

async def insert(doc: dict):
    await get_db().requests.insert_one(doc)

async def update_by_id(request_id: str, ops: Dict[str,Any]):
    await get_db().requests.update_one({"id": request_id}, ops)

async def update_if_pending(request_id: str, field: str, ops: Dict[str,Any]) -> int:
    """Escribe solo si la pista sigue en pending; devuelve matched_count."""
    res = await get_db().requests.update_one({"id": request_id, field: "pending"}, ops)
    return res.matched_count

async def delete_by_id(request_id: str) -> int:
    res = await get_db().requests.delete_one({"id": request_id})
    return res.deleted_count

async def list_paginated(filt: Dict[str,Any], sort_field: str, sort_dir: int, skip: int, limit: int) -> List[dict]:
    cur = get_db().requests.find(filt).sort(sort_field, sort_dir).skip(skip).limit(limit)
    return await cur.to_list(length=limit)

async def count(filt: Dict[str,Any]) -> int:
    return await get_db().requests.count_documents(filt)
