"""
SkillShots Configuration
Database, auth, Gemini and SMTP settings
"""

import os
from typing import Optional

from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict


def _env_bool(name: str, default: bool = False) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


class Configuration(BaseModel):
    """
    Immutable runtime settings.

    Built once at startup and handed to the services that need it
    (content generation, mailer, auth). Nothing below the HTTP layer
    reads the environment directly.
    """
    model_config = ConfigDict(frozen=True)

    # MongoDB
    mongo_url: str = "mongodb://localhost:27017"
    mongo_db_name: str = "skillshots_db"

    # Auth
    jwt_secret_key: str = "change-me"
    jwt_algorithm: str = "HS256"
    jwt_expire_days: int = 30

    # Gemini
    gemini_api_key: Optional[str] = None
    gemini_flash_model: str = "gemini-2.5-flash"
    gemini_pro_model: str = "gemini-2.5-pro"
    gemini_tts_model: str = "gemini-2.5-flash-preview-tts"
    gemini_tts_voice: str = "Kore"
    gemini_api_base: str = "https://generativelanguage.googleapis.com/v1beta"
    gemini_timeout_seconds: float = 60.0
    thinking_budget: int = 1024

    # Catalog
    everyone_group_id: str = "group-3"
    default_creator_email: str = "alex@example.com"

    # SMTP (disabled unless explicitly enabled)
    smtp_enabled: bool = False
    smtp_host: Optional[str] = None
    smtp_port: int = 587
    smtp_user: Optional[str] = None
    smtp_password: Optional[str] = None
    smtp_sender: str = "no-reply@skillshots.local"

    version: str = "unknown"
    log_level: str = "INFO"


def load_configuration() -> Configuration:
    """Read settings from the environment (and a local .env file if present)."""
    load_dotenv()

    defaults = Configuration()
    return Configuration(
        mongo_url=os.getenv("MONGO_URL", defaults.mongo_url),
        mongo_db_name=os.getenv("MONGO_DB_NAME", defaults.mongo_db_name),
        jwt_secret_key=os.getenv("JWT_SECRET_KEY", defaults.jwt_secret_key),
        jwt_expire_days=int(os.getenv("JWT_EXPIRE_DAYS", defaults.jwt_expire_days)),
        gemini_api_key=os.getenv("GEMINI_API_KEY"),
        gemini_flash_model=os.getenv("GEMINI_FLASH_MODEL", defaults.gemini_flash_model),
        gemini_pro_model=os.getenv("GEMINI_PRO_MODEL", defaults.gemini_pro_model),
        gemini_tts_model=os.getenv("GEMINI_TTS_MODEL", defaults.gemini_tts_model),
        gemini_tts_voice=os.getenv("GEMINI_TTS_VOICE", defaults.gemini_tts_voice),
        everyone_group_id=os.getenv("EVERYONE_GROUP_ID", defaults.everyone_group_id),
        default_creator_email=os.getenv("DEFAULT_CREATOR_EMAIL", defaults.default_creator_email).lower(),
        smtp_enabled=_env_bool("SMTP_ENABLED"),
        smtp_host=os.getenv("SMTP_HOST"),
        smtp_port=int(os.getenv("SMTP_PORT", defaults.smtp_port)),
        smtp_user=os.getenv("SMTP_USER"),
        smtp_password=os.getenv("SMTP_PASSWORD"),
        smtp_sender=os.getenv("SMTP_SENDER", defaults.smtp_sender),
        version=os.getenv("VERSION", defaults.version),
        log_level=os.getenv("LOG_LEVEL", defaults.log_level),
    )
