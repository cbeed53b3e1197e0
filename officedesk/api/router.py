# officedesk/api/router.py
from fastapi import APIRouter
from officedesk.api.routes import auth, requests, appointments, availability

api_router = APIRouter()
api_router.include_router(auth.router, tags=["auth"])
api_router.include_router(requests.router, prefix="/requests", tags=["requests"])
api_router.include_router(appointments.router, prefix="/appointments", tags=["appointments"])
api_router.include_router(availability.router, prefix="/offices", tags=["availability"])
