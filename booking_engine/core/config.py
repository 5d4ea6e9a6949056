from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    ENV: str = "dev"
    LOG_LEVEL: str = "INFO"
    BUSINESS_TIMEZONE: str = "UTC"

    SLOT_STEP_MINUTES: int = 30
    DEFAULT_SERVICE_DURATION_MINUTES: int = 30
    MIN_ADVANCE_MINUTES: int = 60
    RATING_REQUIRES_COMPLETED: bool = False

    STORE_PROVIDER: str = "memory"
    BOOKING_DATA_PATH: str = "./data/bookings.json"

    DIRECTORY_BASE_URL: str | None = None
    DIRECTORY_API_KEY: str | None = None
    UPSTREAM_TIMEOUT_SECONDS: float = 10.0

    NOTIFY_WEBHOOK_URL: str | None = None
    PAYMENT_WEBHOOK_SECRET: str | None = None


settings = Settings()
