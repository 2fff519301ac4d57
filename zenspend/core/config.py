from pydantic_settings import BaseSettings, SettingsConfigDict
from pathlib import Path


class Settings(BaseSettings):
    APP_NAME: str = "ZenSpend Backend"
    ENV: str = "dev"

    # SQLite file under <project>/data so the path does not depend on the CWD
    _default_db_path = Path(__file__).resolve().parents[2] / "data" / "zenspend.db"
    DATABASE_URL: str = f"sqlite:///{_default_db_path}"
    AUTO_CREATE_SCHEMA: bool = True

    CORS_ORIGINS: list[str] = ["*"]
    TIMEZONE: str = "UTC"
    LOG_LEVEL: str = "INFO"

    RECURRING_DEFAULT_MONTHS: int = 12
    RECURRING_MAX_MONTHS: int = 24

    DEFAULT_MONTHLY_INCOME: float = 8000
    DEFAULT_CURRENCY: str = "$"

    ASSISTANT_API_URL: str = "http://localhost:3001/api"
    ASSISTANT_TIMEOUT: float = 10.0

    model_config = SettingsConfigDict(env_file=(".env",), env_prefix="ZENSPEND_", case_sensitive=False)


settings = Settings()
