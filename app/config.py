"""Application settings loaded from environment variables / .env."""

from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict

BASE_DIR = Path(__file__).resolve().parent.parent


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env", case_sensitive=True, extra="ignore"
    )

    # Application
    APP_NAME: str = "Recursero Progress"
    APP_DEBUG: bool = False
    LOG_LEVEL: str = "INFO"

    # Database
    DATA_DIR: Path = BASE_DIR / "data"
    DATABASE_URL: str = f"sqlite+aiosqlite:///{BASE_DIR / 'data' / 'progress.db'}"

    # Progress rules
    DEFAULT_ACTIVITIES_PER_LEVEL: int = 5
    # When the highest completed level is fully cleared but the catalog has no
    # next level, still report level + 1 as unlocked.
    UNLOCK_BEYOND_CATALOG: bool = True

    # Narrative reports
    REPORT_RECENT_DAYS: int = 7
    USE_MOCK_TEXT_GENERATOR: bool = True
    GEMINI_API_KEY: str = ""
    GEMINI_MODEL: str = "gemini-1.5-flash"
    GEMINI_API_URL: str = "https://generativelanguage.googleapis.com/v1beta"
    TEXT_GENERATOR_TIMEOUT: float = 30.0


settings = Settings()
