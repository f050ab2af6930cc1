from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    redis_url: str = "redis://localhost:6379/0"

    # Prepended to every store key; empty keeps the plain browser-style keys
    key_prefix: str = ""

    # Countdown timers
    timer_tick_seconds: float = 1.0

    # Format used for recipe lastModified stamps (local wall-clock time)
    timestamp_format: str = "%Y-%m-%d %H:%M:%S"

    # External identity providers offered on the login page
    oauth_providers: list[str] = ["google", "github"]

    rate_limit: str = "100/minute"

    # CORS
    cors_origins: list[str] = [
        "http://localhost:3000",
        "http://127.0.0.1:3000",
        "http://localhost",
        "http://127.0.0.1",
    ]


settings = Settings()
