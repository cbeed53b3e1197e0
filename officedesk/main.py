# officedesk/main.py
import logging
import os
from contextlib import asynccontextmanager
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import JSONResponse

from officedesk.api.router import api_router
from officedesk.core.config import settings
from officedesk.core.db import close_db
from officedesk.core.indexes import startup_tasks
from officedesk.core import rate_limit
from officedesk.services.approval import InvalidStatusError
from officedesk.services.availability import ScheduleConfigError

APP_NAME = os.getenv("APP_NAME", "OfficeDesk Backend")
APP_VERSION = os.getenv("APP_VERSION", "0.1.0")

logging.basicConfig(
    level=getattr(logging, settings.log_level.upper(), logging.INFO),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)

# --- CORS: .env + fronts locales ---
defaults = {
    "http://localhost:3000",
    "http://127.0.0.1:3000",
    "http://localhost:5173",
    "http://127.0.0.1:5173",
}
CORS_ORIGINS = sorted(set((settings.cors_origins or []) + list(defaults)))


@asynccontextmanager
async def lifespan(app: FastAPI):
    # índices y migraciones (idempotente)
    await startup_tasks()
    logger.info("%s %s listo", APP_NAME, APP_VERSION)
    yield
    await close_db()


app = FastAPI(title=APP_NAME, version=APP_VERSION, lifespan=lifespan)

# --- IMPORTANTE: CORS primero ---
app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
app.add_middleware(GZipMiddleware, minimum_size=1024)

# SlowAPI: conecta el limiter usado en /auth/login
rate_limit.install(app)


# Datos guardados con forma inválida: error de integración, no de negocio
@app.exception_handler(ScheduleConfigError)
@app.exception_handler(InvalidStatusError)
async def invalid_shape_handler(request: Request, exc: ValueError):
    logger.error("Dato mal formado en %s: %s", request.url.path, exc)
    return JSONResponse(status_code=422, content={"detail": {"code": "invalid_input", "reason": str(exc)}})


app.include_router(api_router, prefix="")

@app.get("/health")
async def health():
    return {"ok": True}

# Runner local opcional
if __name__ == "__main__":
    import uvicorn
    uvicorn.run("officedesk.main:app", reload=True, host="0.0.0.0", port=int(os.getenv("PORT", 8000)))
