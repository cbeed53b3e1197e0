# officedesk/core/config.py
from typing import List, Union
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
import json


class Settings(BaseSettings):
    # === MongoDB ===
    mongo_url: str = Field(default="mongodb://localhost:27017", validation_alias="MONGO_URL")
    db_name: str = Field(default="officedesk", validation_alias="DB_NAME")
    mongo_tls: bool = Field(default=False, validation_alias="MONGO_TLS")

    # === Seguridad / JWT ===
    secret_key: str = Field(default="change-me", validation_alias="SECRET_KEY")
    algorithm: str = Field(default="HS256", validation_alias="ALGORITHM")
    access_token_expire_minutes: int = Field(default=30, validation_alias="ACCESS_TOKEN_EXPIRE_MINUTES")
    login_rate_limit: str = Field(default="5/minute", validation_alias="LOGIN_RATE_LIMIT")

    # === CORS ===
    # Acepta JSON (["http://a","https://b"]) o lista separada por comas ("http://a,https://b")
    cors_origins: Union[str, List[str]] = Field(default="", validation_alias="CORS_ORIGINS")

    # === Paginación ===
    max_page_size: int = Field(default=50, validation_alias="MAX_PAGE_SIZE")

    # === Agenda ===
    booking_lookahead_days: int = Field(default=14, ge=1, validation_alias="BOOKING_LOOKAHEAD_DAYS")
    default_slot_duration: int = Field(default=30, gt=0, validation_alias="DEFAULT_SLOT_DURATION")

    # === Logging ===
    log_level: str = Field(default="INFO", validation_alias="LOG_LEVEL")

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    @field_validator("cors_origins", mode="before")
    @classmethod
    def _parse_cors_origins(cls, v):
        if v is None:
            return []
        if isinstance(v, list):
            return v
        if isinstance(v, str):
            s = v.strip()
            if not s:
                return []
            if s.startswith("["):
                try:
                    data = json.loads(s)
                    if isinstance(data, list):
                        return [str(x).strip() for x in data if str(x).strip()]
                except json.JSONDecodeError:
                    # si parece JSON pero está mal formado, caemos al split por comas
                    pass
            return [item.strip() for item in s.split(",") if item.strip()]
        return [str(v).strip()] if str(v).strip() else []


# Instancia global usada por main.py y los servicios
settings = Settings()
