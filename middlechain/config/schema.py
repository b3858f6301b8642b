"""Engine settings using Pydantic."""

from pydantic import ConfigDict, Field
from pydantic_settings import BaseSettings


class ChainSettings(BaseSettings):
    """Logging and telemetry switches shared by every chain of one registry."""

    model_config = ConfigDict(extra="ignore", populate_by_name=True, env_prefix="MIDDLECHAIN_")

    log_aborts: bool = True
    trace_steps: bool = False
    metrics_enabled: bool = True
    metric_prefix: str = Field(default="middlechain", min_length=1, pattern=r"^[a-zA-Z_][a-zA-Z0-9_]*$")
