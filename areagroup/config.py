from dataclasses import dataclass
import os

from dotenv import load_dotenv


load_dotenv()


@dataclass(frozen=True)
class Settings:
    app_name: str
    database_url: str
    log_level: str


def get_settings() -> Settings:
    return Settings(
        app_name=os.getenv("APP_NAME", "areagroup"),
        database_url=os.getenv("DATABASE_URL", "sqlite:///./conversions.db"),
        log_level=os.getenv("LOG_LEVEL", "INFO"),
    )
