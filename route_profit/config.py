"""Centralised application settings loaded from environment / .env file."""

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    # Database (embedded SQLite file by default)
    database_url: str = "sqlite+aiosqlite:///./route_history.db"

    # Redis
    redis_url: str = "redis://localhost:6379/0"
    history_lock_enabled: bool = False  # serialise history writes across processes
    history_lock_ttl_seconds: int = 10
    history_lock_wait_seconds: float = 5.0

    # History
    history_limit: int = 500  # most recent entries kept

    # Geocoding (OpenStreetMap Nominatim)
    geocoder_base_url: str = "https://nominatim.openstreetmap.org/search"
    geocoder_country_suffix: str = "Brasil"
    geocoder_user_agent: str = "route-profit/1.0"
    geocoder_timeout_seconds: float = 10.0
    geocode_parallel: bool = False  # serial by default to respect rate limits

    # Route economics
    average_speed_kmh: float = 60.0

    # API
    rate_limit: str = "100/minute"
    log_level: str = "INFO"

    model_config = {"env_file": ".env", "env_prefix": "ROUTE_PROFIT_", "extra": "ignore"}


settings = Settings()
