"""Application settings models."""

from pydantic import BaseModel, ConfigDict, Field, field_validator

from kubescope.constants.defaults import (
    EVENT_AGE_HOURS_DEFAULT,
    HIGH_RESTART_THRESHOLD_DEFAULT,
    HOST_DEFAULT,
    JWT_ALGORITHMS_DEFAULT,
    KUBECTL_BINARY_DEFAULT,
    LOG_LEVEL_DEFAULT,
    PENDING_WARNING_MINUTES_DEFAULT,
    PORT_DEFAULT,
    TOP_PODS_LIMIT_DEFAULT,
)
from kubescope.constants.limits import (
    MAX_CONCURRENT_REQUESTS,
    STREAM_INTERVAL_MIN,
    TOP_PODS_LIMIT_MAX,
)
from kubescope.constants.timeouts import (
    CLUSTER_REQUEST_TIMEOUT,
    KUBECTL_COMMAND_TIMEOUT,
    STREAM_INTERVAL_SECONDS,
)


class AppSettings(BaseModel):
    """Application settings model with validation."""

    model_config = ConfigDict(populate_by_name=True)

    # Cluster access
    kube_context: str | None = None
    kubectl_binary: str = KUBECTL_BINARY_DEFAULT
    request_timeout: str = CLUSTER_REQUEST_TIMEOUT
    command_timeout_seconds: int = Field(default=KUBECTL_COMMAND_TIMEOUT, ge=1)
    max_concurrent_requests: int = Field(default=MAX_CONCURRENT_REQUESTS, ge=1)

    # Streaming and metrics
    stream_interval_seconds: float = Field(
        default=STREAM_INTERVAL_SECONDS, ge=STREAM_INTERVAL_MIN
    )
    top_pods_limit: int = Field(default=TOP_PODS_LIMIT_DEFAULT, ge=1, le=TOP_PODS_LIMIT_MAX)

    # Classification thresholds
    event_age_hours: float = Field(default=EVENT_AGE_HOURS_DEFAULT, gt=0)
    pending_warning_minutes: int = Field(default=PENDING_WARNING_MINUTES_DEFAULT, ge=0)
    high_restart_threshold: int = Field(default=HIGH_RESTART_THRESHOLD_DEFAULT, ge=0)

    # Auth (tokens are issued by the external auth service)
    auth_enabled: bool = True
    jwt_secret: str = ""
    jwt_algorithms: list[str] = Field(default_factory=lambda: list(JWT_ALGORITHMS_DEFAULT))

    # Server
    host: str = HOST_DEFAULT
    port: int = Field(default=PORT_DEFAULT, ge=1, le=65535)
    log_level: str = LOG_LEVEL_DEFAULT
    cors_origins: list[str] = Field(default_factory=lambda: ["http://localhost:3000"])

    @field_validator("log_level")
    @classmethod
    def _normalize_log_level(cls, value: str) -> str:
        return value.upper()


class ConfigError(Exception):
    """Base exception for configuration errors."""


class ConfigLoadError(ConfigError):
    """Raised when settings fail to load."""
