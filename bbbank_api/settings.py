from typing import Optional
from pydantic import HttpUrl, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    APP_TITLE: str = "BBBank API"
    APP_VERSION: str = "1.0.0"

    API_URL: HttpUrl = HttpUrl("http://localhost:8000")

    DATABASE_URL: SecretStr
    DATABASE_NAME: str = "bbbank"

    ALLOWED_ORIGINS: Optional[str] = None

    # Rate limiting
    RATE_LIMIT_ENABLED: bool = True
    ACCOUNT_RATE_LIMIT: str = "60/minute"

    LOG_LEVEL: str = "INFO"

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")


settings = Settings(**{})
