# officedesk/api/deps.py
from fastapi import Depends, HTTPException
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
import jwt
from officedesk.core.security import decode_token
from officedesk.core.db import get_db
from typing import List
from officedesk.models.common import Role

security = HTTPBearer()

async def get_current_user(credentials: HTTPAuthorizationCredentials = Depends(security)):
    token = credentials.credentials
    try:
        payload = decode_token(token)
    except jwt.PyJWTError:
        raise HTTPException(status_code=401, detail="Credenciales inválidas")
    username = payload.get("sub")
    if not username:
        raise HTTPException(status_code=401, detail="Credenciales inválidas")

    user = await get_db().users.find_one({"username": username}, {"_id": 0, "password_hash": 0})
    if not user:
        raise HTTPException(status_code=401, detail="Usuario no encontrado")
    return user  # dict

def require_role(roles: List[Role]):
    async def checker(user=Depends(get_current_user)):
        if user.get("role") not in roles:
            raise HTTPException(status_code=403, detail="No autorizado")
        return user
    return checker
