from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    app_name: str = "Request Stats API"
    debug: bool = False
    log_level: str = "INFO"  # DEBUG logs one line per recorded request
    # CORS: "*" for dev; in production set to comma-separated origins, e.g. "https://app.example.com,https://admin.example.com"
    cors_origins: str = "*"

    stats_path: str = "/stats"  # JSON snapshot endpoint
    stats_reset_interval_seconds: float = Field(default=1.0, gt=0)  # How often status_code_count is cleared


def get_settings() -> Settings:
    return Settings()
