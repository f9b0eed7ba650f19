from pydantic import HttpUrl
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    API_URL_BASE: HttpUrl = HttpUrl("http://localhost:8000/api/")
    REQUEST_TIMEOUT: float = 10.0

    # Account number validator
    DEBOUNCE_MS: int = 1000
    SKIP_EMPTY_VALUES: bool = True
    ABORT_IN_FLIGHT: bool = True

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")


settings = Settings(**{})
