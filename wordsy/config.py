from pydantic_settings import BaseSettings
from dotenv import load_dotenv
from datetime import tzinfo
from typing import Optional
from zoneinfo import ZoneInfo
import logging

load_dotenv()
logger = logging.getLogger(__name__)


class Settings(BaseSettings):
    # Database
    database_url: str = "sqlite:///./database/wordsy.db"

    # Content generation (OpenAI)
    openai_api_key: str = ""
    openai_model: str = "gpt-3.5-turbo"
    openai_timeout_seconds: float = 30.0

    # Quiz Configuration
    quiz_min_words: int = 3
    quiz_max_words: int = 10
    quiz_session_timeout_minutes: int = 120

    # Language Configuration
    default_language: str = "en"
    default_translate_language: str = "en"

    # Calendar day boundaries for the progress ledger (IANA name, system zone if empty)
    timezone: Optional[str] = None

    # Application Configuration
    debug: bool = False

    model_config = {
        "env_file": ".env",
        "case_sensitive": False,
        "extra": "ignore"  # Ignore extra fields
    }

    def get_timezone(self) -> Optional[tzinfo]:
        """Configured ledger time zone, None means the system local zone"""
        if not self.timezone:
            return None
        try:
            return ZoneInfo(self.timezone)
        except Exception:
            logger.warning(f"⚠️ Unknown timezone '{self.timezone}' - falling back to system local time")
            return None

    def is_content_generation_configured(self) -> bool:
        """Check if the OpenAI key is present"""
        is_configured = bool(self.openai_api_key)

        if is_configured:
            logger.info("✅ Content generation configured")
        else:
            logger.warning("⚠️ OPENAI_API_KEY missing - quiz and sentence generation will fail")

        return is_configured


settings = Settings()
