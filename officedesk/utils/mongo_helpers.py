# officedesk/utils/mongo_helpers.py
from datetime import date, datetime
from enum import Enum
from bson import ObjectId

def fix_mongo_id(doc):
    """
    Quita/convierte ObjectId de MongoDB para que FastAPI pueda serializarlo.
    Soporta dicts, listas y documentos anidados.
    """
    if not doc:
        return doc

    if isinstance(doc, list):
        return [fix_mongo_id(d) for d in doc]

    if isinstance(doc, dict):
        new_doc = {}
        for k, v in doc.items():
            if k == "_id":
                continue
            if isinstance(v, ObjectId):
                new_doc[k] = str(v)
            else:
                new_doc[k] = fix_mongo_id(v)
        return new_doc

    return doc

def to_mongo(value):
    """
    Prepara un valor para BSON: enums a su valor y `date` a "YYYY-MM-DD"
    (BSON solo conoce datetime). Los datetime se guardan tal cual.
    """
    if isinstance(value, dict):
        return {str(k.isoformat() if isinstance(k, date) else k): to_mongo(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [to_mongo(v) for v in value]
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, datetime):
        return value
    if isinstance(value, date):
        return value.isoformat()
    return value
