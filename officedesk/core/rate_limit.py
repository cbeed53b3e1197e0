# officedesk/core/rate_limit.py
from fastapi import FastAPI
from slowapi import Limiter, _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded
from slowapi.util import get_remote_address
from officedesk.core.config import settings

# por IP; solo /auth/login lleva límite explícito
limiter = Limiter(key_func=get_remote_address, enabled=True)
LOGIN_LIMIT = settings.login_rate_limit

def install(app: FastAPI) -> None:
    """Cuelga el limiter de app.state y responde 429 al superar el límite."""
    app.state.limiter = limiter
    app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)
