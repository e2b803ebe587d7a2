from pydantic import field_validator
from pydantic_settings import BaseSettings
from typing import List, Optional


class PushSettings(BaseSettings):
    # VAPID identity
    VAPID_PUBLIC_KEY: Optional[str] = None
    VAPID_PRIVATE_KEY: Optional[str] = None  # base64url raw scalar or PEM
    VAPID_SUBJECT: str = "mailto:admin@nerdiversary.app"

    # Scheduling
    LEAD_MINUTES: List[int] = [1440, 60, 0]
    QUERY_BATCH_SIZE: int = 90
    TICK_INTERVAL_SECONDS: int = 60
    TICK_LEASE_SECONDS: int = 55
    HORIZON_YEARS: int = 120

    # Delivery
    TTL_SECONDS: int = 86400
    URGENCY: str = "normal"
    TIMEOUT_SECONDS: float = 10.0
    PUBLIC_URL: str = "https://nerdiversary.app/"

    # Sent ledger (Redis)
    SENT_LEDGER_ENABLED: bool = True
    SENT_LEDGER_TTL_SECONDS: int = 172800

    # Celery configuration
    CELERY_BROKER_URL: str = "redis://localhost:6379/0"
    CELERY_RESULT_BACKEND: Optional[str] = None
    WORKER_CONCURRENCY: int = 4

    # Metrics
    METRICS_ENABLED: bool = True

    @field_validator("LEAD_MINUTES")
    @classmethod
    def validate_lead_minutes(cls, v: List[int]) -> List[int]:
        if not v:
            raise ValueError("At least one lead time is required")
        if any(lead < 0 for lead in v):
            raise ValueError("Lead times must be non-negative minutes")
        return sorted(set(v), reverse=True)

    @field_validator("URGENCY")
    @classmethod
    def validate_urgency(cls, v: str) -> str:
        if v not in ("very-low", "low", "normal", "high"):
            raise ValueError(f"Unsupported Urgency value: {v}")
        return v

    class Config:
        env_prefix = "PUSH_"
        env_file = ".env"
        extra = "ignore"


settings = PushSettings()
