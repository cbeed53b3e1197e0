# officedesk/api/routes/auth.py
from fastapi import APIRouter, HTTPException, Body, Request as FastAPIRequest, Depends
from officedesk.core.rate_limit import limiter, LOGIN_LIMIT
from officedesk.core.db import get_db
from officedesk.core.security import verify_password, create_access_token
from officedesk.api.deps import get_current_user
from officedesk.utils.mongo_helpers import fix_mongo_id

router = APIRouter(prefix="/auth")

@router.post("/login")
@limiter.limit(LOGIN_LIMIT)
async def login(request: FastAPIRequest, user_login: dict = Body(...)):
    if "username" not in user_login or "password" not in user_login:
        raise HTTPException(422, "username/password required")

    user_doc = await get_db().users.find_one({"username": user_login["username"]})
    if not user_doc or not verify_password(user_login["password"], user_doc["password_hash"]):
        raise HTTPException(401, "Incorrect username or password")

    token = create_access_token(sub=user_doc["username"], role=user_doc["role"])
    safe_user = fix_mongo_id(user_doc)
    safe_user.pop("password_hash", None)
    return {"access_token": token, "token_type": "bearer", "user": safe_user}

@router.get("/me")
async def me(current_user=Depends(get_current_user)):
    return current_user
