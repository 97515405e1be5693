"""Logging and profiling for the markdown engine, on top of telelog.

Engine code uses four entry points: ``configure``, ``get_logger``,
``record_event`` and ``span``. Settings come from a ``TelemetrySettings``
value, either one of the named presets or one read from the
``MARKDOWN_ENGINE_*`` environment.
"""

from __future__ import annotations

import os
from contextlib import ExitStack, contextmanager
from dataclasses import dataclass, field, replace
from typing import Any, Dict, Iterator, List, MutableMapping, Optional, Tuple, cast

import telelog  # type: ignore[import]

tl = cast(Any, telelog)

ENV_PREFIX = "MARKDOWN_ENGINE_"
DEFAULT_LOGGER_NAME = os.getenv(f"{ENV_PREFIX}LOGGER", "markdown_engine")

_TRUTHY = frozenset({"1", "true", "yes", "on"})


def _env(name: str) -> Optional[str]:
    return os.getenv(f"{ENV_PREFIX}{name}")


def _env_flag(name: str) -> bool:
    return (_env(name) or "").lower() in _TRUTHY


@dataclass(frozen=True, slots=True)
class TelemetrySettings:
    """Everything the engine decides about a telelog ``Config``.

    Profiling is always switched on; spans rely on ``logger.profile``.
    """

    min_level: str = "INFO"
    console: bool = True
    colored: bool = True
    json_format: bool = False
    log_file: str = ""
    buffered: bool = False
    buffer_size: Optional[int] = None

    @classmethod
    def from_env(cls) -> "TelemetrySettings":
        buffered = _env_flag("LOG_BUFFERED")
        return cls(
            min_level=(_env("LOG_LEVEL") or "INFO").upper(),
            console=not _env_flag("DISABLE_CONSOLE"),
            colored=not _env_flag("NO_COLOR"),
            json_format=_env_flag("LOG_JSON"),
            log_file=_env("LOG_FILE") or "",
            buffered=buffered,
            buffer_size=int(_env("LOG_BUFFER_SIZE") or "2048") if buffered else None,
        )

    def build(self) -> Any:
        config = tl.Config()
        config.with_min_level(self.min_level)
        config.with_console_output(self.console)
        if self.console:
            config.with_colored_output(self.colored)
        if self.json_format:
            config.with_json_format(True)
        if self.log_file:
            config.with_file_output(self.log_file)
        if self.buffered:
            config.with_buffering(True)
            if self.buffer_size is not None:
                config.with_buffer_size(self.buffer_size)
        config.with_profiling(True)
        return config


PRESETS: Dict[str, TelemetrySettings] = {
    "development": TelemetrySettings(min_level="DEBUG"),
    "production": TelemetrySettings(
        console=False, log_file="markdown_engine.log", buffered=True
    ),
    "performance": TelemetrySettings(
        min_level="DEBUG",
        console=False,
        json_format=True,
        log_file="markdown_engine-performance.log",
        buffered=True,
    ),
}

_LOGGER_CACHE: MutableMapping[str, Any] = {}
_ACTIVE_CONFIG: Optional[Any] = None


def _preset_settings(preset: str) -> TelemetrySettings:
    settings = PRESETS.get(preset.lower())
    if settings is None:
        raise ValueError(f"Unknown telemetry preset '{preset}'; expected one of {sorted(PRESETS)}.")
    log_file = _env("LOG_FILE")
    return replace(settings, log_file=log_file) if log_file and settings.log_file else settings


def configure(*, config: Optional[Any] = None, preset: Optional[str] = None) -> None:
    """Swap the telelog configuration used by every logger handed out afterwards.

    ``config`` adopts a ready ``tl.Config`` (profiling is forced on);
    ``preset`` names an entry of ``PRESETS``. Passing neither re-reads the
    environment. Cached loggers are dropped either way.
    """

    global _ACTIVE_CONFIG
    if config is not None and preset:
        raise ValueError("Provide either `config` or `preset`, not both.")

    if preset:
        _ACTIVE_CONFIG = _preset_settings(preset).build()
    elif config is not None:
        config.with_profiling(True)
        _ACTIVE_CONFIG = config
    else:
        _ACTIVE_CONFIG = TelemetrySettings.from_env().build()
    _LOGGER_CACHE.clear()


def get_logger(name: Optional[str] = None) -> Any:
    global _ACTIVE_CONFIG
    logger_name = name or DEFAULT_LOGGER_NAME
    cached = _LOGGER_CACHE.get(logger_name)
    if cached is None:
        if _ACTIVE_CONFIG is None:
            _ACTIVE_CONFIG = TelemetrySettings.from_env().build()
        cached = _LOGGER_CACHE[logger_name] = tl.Logger.with_config(logger_name, _ACTIVE_CONFIG)
    return cached


def _text(value: Any) -> str:
    if isinstance(value, (dict, list, tuple, set)):
        return repr(value)
    return value if isinstance(value, str) else str(value)


def _emit(logger: Any, level: str, message: str, payload: Dict[str, Any]) -> None:
    """Log with structured pairs when the logger has ``<level>_with``."""

    level = level.lower()
    structured = getattr(logger, f"{level}_with", None)
    if structured is not None:
        structured(message, [(str(key), _text(value)) for key, value in payload.items()])
        return
    plain = getattr(logger, level, None)
    if plain is None:
        raise ValueError(f"Unsupported log level '{level}'.")
    plain(f"{message} {payload}")


def record_event(
    name: str,
    *,
    level: str = "info",
    data: Optional[Dict[str, Any]] = None,
    logger_name: Optional[str] = None,
) -> None:
    _emit(get_logger(logger_name), level, f"event::{name}", {"event": name, **(data or {})})


@dataclass
class SpanHandle:
    logger: Any
    span_name: str
    component_name: Optional[str] = None
    metadata: Dict[str, Any] = field(default_factory=dict)

    def add_metadata(self, key: str, value: Any) -> None:
        self.metadata[key] = _text(value)

    def _payload(self, extra: Dict[str, Any]) -> Dict[str, Any]:
        payload: Dict[str, Any] = {"span": self.span_name, **self.metadata}
        if self.component_name:
            payload["component"] = self.component_name
        payload.update({key: _text(value) for key, value in extra.items()})
        return payload

    def fail(self, reason: str) -> None:
        _emit(self.logger, "error", "span::fail", self._payload({"reason": reason}))


def _component_name(name: str, component: Optional[str | bool]) -> Optional[str]:
    if component is True:
        return name
    return component if isinstance(component, str) else None


@contextmanager
def span(
    name: str,
    *,
    logger_name: Optional[str] = None,
    component: Optional[str | bool] = None,
    metadata: Optional[Dict[str, Any]] = None,
) -> Iterator[SpanHandle]:
    """Profile the block as ``name``; failures are logged and re-raised.

    ``component`` also tracks the block as a telelog component (``True`` reuses
    ``name``). ``metadata`` is pushed as logger context while the block runs.
    """

    log = get_logger(logger_name)
    context: List[Tuple[str, str]] = [(key, _text(value)) for key, value in (metadata or {}).items()]
    handle = SpanHandle(log, name, _component_name(name, component), dict(context))

    for key, value in context:
        log.add_context(key, value)
    try:
        with ExitStack() as stack:
            if handle.component_name:
                stack.enter_context(log.track_component(handle.component_name))
            stack.enter_context(log.profile(name))
            try:
                yield handle
            except Exception as exc:
                handle.fail(str(exc))
                raise
    finally:
        for key, _ in context:
            log.remove_context(key)


configure()
logger = get_logger()

__all__ = [
    "PRESETS",
    "SpanHandle",
    "TelemetrySettings",
    "configure",
    "get_logger",
    "logger",
    "record_event",
    "span",
]
