from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    ENV: str = "dev"
    LOG_LEVEL: str = "INFO"
    BUSINESS_TIMEZONE: str = "Asia/Tokyo"

    STORE_PROVIDER: str | None = None  # "memory" | "json" | "supabase"; None picks by ENV
    BOOKING_DATA_DIR: str = "./data/bookings"

    SUPABASE_URL: str | None = None
    SUPABASE_SERVICE_KEY: str | None = None
    SUPABASE_BOOKINGS_TABLE: str = "bookings"
    HTTP_TIMEOUT_SECONDS: float = 10.0


settings = Settings()
