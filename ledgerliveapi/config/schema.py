"""Configuration schema using Pydantic.

Defaults work without any file; values may come from ~/.ledgerliveapi/config.json
or LEDGER_LIVE_API_* environment variables.
"""

from typing import Literal

from pydantic import BaseModel, Field, ConfigDict
from pydantic_settings import BaseSettings


class LoggingConfig(BaseModel):
    """Call logger configuration."""
    enabled: bool = True
    namespace: str = "LL-API"  # Prefix bound to every record emitted by the call logger
    level: str = "INFO"


class BridgeConfig(BaseModel):
    """RPC bridge behaviour."""
    # replace: a second connect() drops the live session (its pending calls are rejected)
    # reject: a second connect() raises AlreadyConnectedError
    reconnect_policy: Literal["replace", "reject"] = "replace"


class TransportConfig(BaseModel):
    """Default WebSocket transport settings."""
    url: str = "ws://127.0.0.1:8891"
    open_timeout: float = 10.0


class Config(BaseSettings):
    """Root configuration for ledgerliveapi."""
    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    bridge: BridgeConfig = Field(default_factory=BridgeConfig)
    transport: TransportConfig = Field(default_factory=TransportConfig)

    model_config = ConfigDict(
        env_prefix="LEDGER_LIVE_API_",
        env_nested_delimiter="__"
    )
