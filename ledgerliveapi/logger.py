"""Call logger for the RPC bridge.

The bridge reports every request, settlement and connection transition through
an object exposing ``log``/``warn``/``error``. The default implementation writes
to loguru; callers may pass any object with the same three methods.
"""

from __future__ import annotations

import sys
from typing import Any, Protocol, runtime_checkable

from loguru import logger

from ledgerliveapi.config.schema import Config, LoggingConfig


@runtime_checkable
class CallLogger(Protocol):
    """Three-level logging contract consumed by the bridge."""

    def log(self, message: str, *args: Any) -> None:
        ...

    def warn(self, message: str, *args: Any) -> None:
        ...

    def error(self, message: str, *args: Any) -> None:
        ...


def _format_args(args: tuple[Any, ...]) -> str:
    if not args:
        return ""
    parts = []
    for arg in args:
        try:
            parts.append(repr(arg))
        except Exception:
            parts.append(f"<{type(arg).__name__}>")
    return " " + " ".join(parts)


class Logger:
    """Namespaced loguru-backed call logger. Never raises."""

    def __init__(self, namespace: str = "LL-API", enabled: bool = True):
        self.namespace = namespace
        self.enabled = enabled
        self._logger = logger.bind(namespace=namespace)

    @classmethod
    def from_config(cls, config: LoggingConfig) -> "Logger":
        return cls(namespace=config.namespace, enabled=config.enabled)

    def log(self, message: str, *args: Any) -> None:
        self._emit("INFO", message, args)

    def warn(self, message: str, *args: Any) -> None:
        self._emit("WARNING", message, args)

    def error(self, message: str, *args: Any) -> None:
        self._emit("ERROR", message, args)

    def _emit(self, level: str, message: str, args: tuple[Any, ...]) -> None:
        if not self.enabled:
            return
        try:
            self._logger.opt(depth=2).log(level, "[{}] {}{}", self.namespace, message, _format_args(args))
        except Exception:
            # Logging is observational only.
            return


_SINK_IDS: dict[str, int] = {}


def configure_logging(config: Config | None = None) -> None:
    """Enable ledgerliveapi records and route them to stderr at the configured level."""
    cfg = (config or Config()).logging
    if not cfg.enabled:
        logger.disable("ledgerliveapi")
        return
    logger.enable("ledgerliveapi")
    previous = _SINK_IDS.pop("stderr", None)
    if previous is not None:
        logger.remove(previous)
    _SINK_IDS["stderr"] = logger.add(
        sys.stderr,
        level=cfg.level,
        format="<dim>{time:HH:mm:ss.SSS}</dim> | <level>{level: <8}</level> | <level>{message}</level>",
    )
