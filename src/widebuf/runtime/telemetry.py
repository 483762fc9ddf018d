"""Telemetry for widebuf built on telelog.

Buffers report three kinds of records:

* ``record_event`` for one-off facts (precondition failures, null pointers,
  storage growth),
* ``operation_span`` around the operations worth profiling (raw ingestion,
  splicing, splitting, handing units to a nul-aware sibling),
* failures inside a span, logged before the exception propagates.

Settings come from ``WIDEBUF_*`` environment variables or a named preset and
are turned into a ``telelog.Config`` once per ``configure`` call.
"""

from __future__ import annotations

import os
from contextlib import contextmanager
from dataclasses import dataclass, field, replace
from typing import Any, Dict, Iterator, Mapping, MutableMapping, Optional, cast

import telelog  # type: ignore[import]

tl = cast(Any, telelog)

ENV_PREFIX = "WIDEBUF_"
COMPONENT = "buffer"

_TRUTHY = frozenset({"1", "true", "yes", "on"})


def _flag(environ: Mapping[str, str], name: str, default: bool) -> bool:
    raw = environ.get(f"{ENV_PREFIX}{name}")
    if raw is None:
        return default
    return raw.strip().lower() in _TRUTHY


@dataclass(frozen=True)
class TelemetrySettings:
    """Everything widebuf needs to build a telelog configuration."""

    logger_name: str = "widebuf"
    level: str = "WARNING"
    console: bool = True
    colored: bool = True
    json: bool = False
    log_file: str = ""
    buffer_size: Optional[int] = None

    @classmethod
    def from_env(
        cls, environ: Optional[Mapping[str, str]] = None
    ) -> "TelemetrySettings":
        env = os.environ if environ is None else environ
        buffer_size = None
        if _flag(env, "LOG_BUFFERED", False):
            buffer_size = int(env.get(f"{ENV_PREFIX}LOG_BUFFER_SIZE") or "2048")
        return cls(
            logger_name=env.get(f"{ENV_PREFIX}LOGGER") or "widebuf",
            level=(env.get(f"{ENV_PREFIX}LOG_LEVEL") or "WARNING").upper(),
            console=not _flag(env, "DISABLE_CONSOLE", False),
            colored=not _flag(env, "NO_COLOR", False),
            json=_flag(env, "LOG_JSON", False),
            log_file=env.get(f"{ENV_PREFIX}LOG_FILE") or "",
            buffer_size=buffer_size,
        )

    def to_config(self) -> Any:
        config = tl.Config()
        config.with_min_level(self.level)
        config.with_console_output(self.console)
        if self.console:
            config.with_colored_output(self.colored)
        config.with_json_format(self.json)
        if self.log_file:
            config.with_file_output(self.log_file)
        if self.buffer_size is not None:
            config.with_buffering(True)
            config.with_buffer_size(self.buffer_size)
        config.with_profiling(True)
        return config


_PRESETS: Dict[str, TelemetrySettings] = {
    "development": TelemetrySettings(level="DEBUG"),
    "production": TelemetrySettings(
        console=False, log_file="widebuf.log", buffer_size=2048
    ),
    "performance": TelemetrySettings(
        level="DEBUG",
        console=False,
        json=True,
        log_file="widebuf-performance.log",
        buffer_size=2048,
    ),
}


def preset_settings(
    name: str, environ: Optional[Mapping[str, str]] = None
) -> TelemetrySettings:
    """Return a named preset; ``WIDEBUF_LOG_FILE`` still redirects file output."""

    try:
        settings = _PRESETS[name.lower()]
    except KeyError as exc:
        raise ValueError(f"Unknown preset '{name}'.") from exc
    env = os.environ if environ is None else environ
    log_file = env.get(f"{ENV_PREFIX}LOG_FILE")
    if log_file and settings.log_file:
        settings = replace(settings, log_file=log_file)
    return settings


_active: Optional[TelemetrySettings] = None
_config: Optional[Any] = None
_loggers: MutableMapping[str, Any] = {}


def configure(
    *, settings: Optional[TelemetrySettings] = None, preset: Optional[str] = None
) -> TelemetrySettings:
    """Replace the active configuration and drop cached loggers."""

    global _active, _config
    if settings is not None and preset is not None:
        raise ValueError("Provide either `settings` or `preset`, not both.")
    if preset is not None:
        settings = preset_settings(preset)
    elif settings is None:
        settings = TelemetrySettings.from_env()

    _config = settings.to_config()
    _active = settings
    _loggers.clear()
    return settings


def active_settings() -> TelemetrySettings:
    if _active is None:
        return configure()
    return _active


def get_logger(name: Optional[str] = None) -> Any:
    """Return the cached telelog logger for ``name`` (default: the widebuf logger)."""

    settings = active_settings()
    logger_name = name or settings.logger_name
    if logger_name not in _loggers:
        _loggers[logger_name] = tl.Logger.with_config(logger_name, _config)
    return _loggers[logger_name]


def _text(value: Any) -> str:
    return value if isinstance(value, str) else str(value)


def _emit(log: Any, level: str, message: str, payload: Dict[str, Any]) -> None:
    name = level.lower()
    structured = getattr(log, f"{name}_with", None)
    if structured is not None:
        structured(message, [(key, _text(val)) for key, val in payload.items()])
        return
    plain = getattr(log, name, None)
    if plain is None:
        raise ValueError(f"Unsupported log level '{level}'.")
    plain(f"{message} {payload}")


def record_event(
    name: str,
    *,
    level: str = "info",
    data: Optional[Dict[str, Any]] = None,
) -> None:
    """Emit ``event::<name>`` with ``data`` attached as key/value pairs."""

    _emit(get_logger(), level, f"event::{name}", {"event": name, **(data or {})})


@dataclass
class SpanHandle:
    operation: str
    metadata: Dict[str, str] = field(default_factory=dict)

    def add_metadata(self, key: str, value: Any) -> None:
        self.metadata[key] = _text(value)


@contextmanager
def operation_span(
    operation: str, *, owner: Any, length: int
) -> Iterator[SpanHandle]:
    """Profile one buffer operation as ``buffer::<operation>``.

    ``owner`` is a buffer class or instance; its type name and ``length`` are
    attached as logger context while the block runs. An exception escaping
    the block is logged at error level and re-raised unchanged.
    """

    log = get_logger()
    owner_type = owner if isinstance(owner, type) else type(owner)
    name = f"{COMPONENT}::{operation}"
    handle = SpanHandle(
        operation=name,
        metadata={"type": owner_type.__name__, "length": str(length)},
    )
    for key, value in handle.metadata.items():
        log.add_context(key, value)
    try:
        with log.track_component(COMPONENT), log.profile(name):
            yield handle
    except Exception as exc:
        payload = {"span": name, **handle.metadata}
        payload["reason"] = f"{type(exc).__name__}: {exc}"
        _emit(log, "error", "span::fail", payload)
        raise
    else:
        _emit(log, "debug", "span::complete", {"span": name, **handle.metadata})
    finally:
        for key in ("type", "length"):
            log.remove_context(key)


__all__ = [
    "SpanHandle",
    "TelemetrySettings",
    "active_settings",
    "configure",
    "get_logger",
    "operation_span",
    "preset_settings",
    "record_event",
]
