from pathlib import Path

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="SEATLOCK_",
        env_file=".env",
        env_ignore_empty=True,
        extra="ignore",
    )

    seat_count: int = Field(default=10, ge=1)
    lock_ttl_seconds: float = Field(default=60.0, gt=0)
    # Upper bound for per-request TTLs; also keeps timer delays within what threading accepts
    max_lock_ttl_seconds: float = Field(default=86400.0, gt=0)
    # Timers fire this long after a deadline so the clock has certainly passed it
    expiry_grace_seconds: float = Field(default=0.05, ge=0)
    active_expiry_enabled: bool = True
    # 0 disables the periodic sweep
    sweep_interval_seconds: float = Field(default=0.0, ge=0)

    log_level: str = "INFO"
    host: str = "127.0.0.1"
    port: int = Field(default=3000, ge=1, le=65535)
    port_retries: int = Field(default=10, ge=0)
    openapi_path: Path = Path(__file__).resolve().parents[1] / "openapi/openapi.yaml"

    @model_validator(mode="after")
    def check_default_ttl_within_max(self) -> "Settings":
        if self.lock_ttl_seconds > self.max_lock_ttl_seconds:
            raise ValueError("lock_ttl_seconds must not exceed max_lock_ttl_seconds")
        return self


settings = Settings()
