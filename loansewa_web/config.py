"""Configuration management using Pydantic Settings"""

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application configuration loaded from environment variables"""

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    # Backend API
    api_base_url: str = "http://localhost:8000/api"

    # Service
    service_name: str = "loansewa-web"
    log_level: str = "INFO"

    # HTTP Client
    http_timeout_seconds: float = 5.0

    # Browser session (signed cookie)
    session_secret: str = "change-me-in-production"
    session_cookie: str = "loansewa_session"
    session_max_age_seconds: int = 14 * 24 * 60 * 60

    # Charts
    score_chart_max: int = 900
    loan_chart_floor: int = 500_000
    chart_series_length: int = 6


settings = Settings()
