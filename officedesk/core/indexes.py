# officedesk/core/indexes.py
import logging
from officedesk.core.db import get_db
from officedesk.models.common import BLOCKING_APPOINTMENT_STATES

logger = logging.getLogger(__name__)

SLOT_INDEX_NAME = "uniq_office_slot"

async def ensure_core_indexes(db):
    # requests
    await db.requests.create_index("id", unique=True)
    await db.requests.create_index([("user_id",1),("created_at",-1)])
    await db.requests.create_index([("office_id",1),("created_at",-1)])
    await db.requests.create_index([("status_by_staff",1)])
    await db.requests.create_index([("status_by_admin",1)])

    # appointments: búsqueda por solicitud y por oficina+día
    await db.appointments.create_index("id", unique=True)
    await db.appointments.create_index([("request_id",1)])
    await db.appointments.create_index([("office_id",1),("date",1)])

    # availability / users
    await db.office_availability.create_index("office_id", unique=True)
    await db.users.create_index([("username",1)], unique=True)

async def ensure_slot_index(db):
    """
    Un hueco (oficina, día, hora) solo puede tener una cita viva. Es la única
    exclusión mutua del sistema: dos reservas simultáneas del mismo hueco
    terminan en DuplicateKeyError para la segunda.
    """
    await db.appointments.create_index(
        [("office_id",1),("date",1),("time",1)],
        name=SLOT_INDEX_NAME,
        unique=True,
        partialFilterExpression={
            "status": {"$in": sorted(s.value for s in BLOCKING_APPOINTMENT_STATES)},
            "time": {"$type": "string"},
        },
    )

async def migrate_requests_schema(db):
    await db.requests.update_many({"status_by_staff":{"$exists":False}}, {"$set":{"status_by_staff":"pending"}})
    await db.requests.update_many({"status_by_admin":{"$exists":False}}, {"$set":{"status_by_admin":"pending"}})
    await db.requests.update_many({"state_history":{"$exists":False}}, {"$set":{"state_history":[]}})

async def startup_tasks():
    db = get_db()
    for task in (ensure_core_indexes, ensure_slot_index, migrate_requests_schema):
        try:
            await task(db)
        except Exception as e:
            logger.exception("Error en %s: %s", task.__name__, e)
