from datetime import date
from pathlib import Path
from typing import Optional

from pydantic_settings import BaseSettings, SettingsConfigDict

DOCKER_DATA_DIR = Path("/app/data")


def default_database_url() -> str:
    data_dir = DOCKER_DATA_DIR if DOCKER_DATA_DIR.exists() else Path("./data")
    return f"sqlite+aiosqlite:///{data_dir / 'urfu_schedule.db'}"


class Settings(BaseSettings):
    # UrFU schedule API
    API_URL: str = "https://urfu.ru/api/v2"
    USER_AGENT: str = "Mozilla/5.0"
    HTTP_TIMEOUT: float = 30.0
    SEARCH_LIMIT: int = 10

    # query printed by the urfu-schedule command
    GROUP_ID: str = "59774"
    START_DATE: date = date(2025, 3, 17)
    END_DATE: date = date(2025, 3, 23)

    # bot only
    BOT_TOKEN: Optional[str] = None
    DATABASE_URL: str = default_database_url()

    LOG_LEVEL: str = "INFO"

    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", extra="ignore"
    )


settings = Settings()
