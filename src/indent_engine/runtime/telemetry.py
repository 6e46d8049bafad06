"""Structured logging and profiling for indent decisions, on top of telelog.

The engine emits two kinds of records: ``record_event`` for one-off facts
(a decision taken, a buffer read that failed) and ``span`` around work worth
timing (a decision, a buffer transaction). Output is silent unless enabled
through ``INDENT_ENGINE_*`` environment variables or ``configure``.
"""

from __future__ import annotations

import os
from contextlib import ExitStack, contextmanager
from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, List, MutableMapping, Optional, Tuple, cast

import telelog  # type: ignore[import]

tl = cast(Any, telelog)

ENV_PREFIX = "INDENT_ENGINE_"
DEFAULT_LOGGER_NAME = os.getenv(f"{ENV_PREFIX}LOGGER", "indent_engine")

# Settings map onto ``Config.with_<option>(value)``.
PRESETS: Dict[str, Dict[str, Any]] = {
    "development": {
        "min_level": "DEBUG",
        "console_output": True,
        "colored_output": True,
    },
    "performance": {
        "min_level": "DEBUG",
        "console_output": False,
        "json_format": True,
        "profiling": True,
        "file_output": "indent_engine-performance.log",
    },
}

_LOGGER_CACHE: MutableMapping[str, Any] = {}
_ACTIVE_CONFIG: Optional[Any] = None

Pairs = List[Tuple[str, str]]


def _env(name: str) -> Optional[str]:
    return os.getenv(f"{ENV_PREFIX}{name}")


def _env_flag(name: str) -> bool:
    return (_env(name) or "").lower() in {"1", "true", "yes", "on"}


def _stringify(value: Any) -> str:
    if isinstance(value, str):
        return value
    return repr(value) if isinstance(value, (dict, list, tuple, set)) else str(value)


def _pairs(data: Dict[str, Any]) -> Pairs:
    return [(str(key), _stringify(value)) for key, value in data.items()]


def preset_settings(preset: str) -> Dict[str, Any]:
    try:
        settings = dict(PRESETS[preset.lower()])
    except KeyError:
        raise ValueError(f"Unknown preset '{preset}'.") from None
    if "file_output" in settings and _env("LOG_FILE"):
        settings["file_output"] = _env("LOG_FILE")
    return settings


def env_settings() -> Dict[str, Any]:
    """Settings derived from ``INDENT_ENGINE_*`` variables.

    Console output is opt-in (``CONSOLE``) since a decision runs on every
    Enter keystroke.
    """

    console = _env_flag("CONSOLE")
    settings: Dict[str, Any] = {
        "min_level": (_env("LOG_LEVEL") or "INFO").upper(),
        "console_output": console,
    }
    if console:
        settings["colored_output"] = not _env_flag("NO_COLOR")
    if _env_flag("LOG_JSON"):
        settings["json_format"] = True
    if _env("LOG_FILE"):
        settings["file_output"] = _env("LOG_FILE")
    if _env_flag("PROFILE"):
        settings["profiling"] = True
    return settings


def build_config(settings: Dict[str, Any]) -> Any:
    config = tl.Config()
    for option, value in settings.items():
        getattr(config, f"with_{option}")(value)
    return config


def configure(*, config: Optional[Any] = None, preset: Optional[str] = None) -> None:
    """Replace the active telelog configuration.

    Pass an explicit ``telelog.Config`` or the name of one of ``PRESETS``, not
    both. With neither, the configuration is rebuilt from the environment.
    Cached loggers are dropped either way.
    """

    global _ACTIVE_CONFIG
    if config is not None and preset:
        raise ValueError("Provide either `config` or `preset`, not both.")

    if preset:
        config = build_config(preset_settings(preset))
    elif config is None:
        config = build_config(env_settings())

    _ACTIVE_CONFIG = config
    _LOGGER_CACHE.clear()


def get_logger(name: Optional[str] = None) -> Any:
    """Return a cached ``telelog.Logger`` for ``name`` (engine logger by default)."""

    global _ACTIVE_CONFIG
    if _ACTIVE_CONFIG is None:
        _ACTIVE_CONFIG = build_config(env_settings())
    logger_name = name or DEFAULT_LOGGER_NAME
    if logger_name not in _LOGGER_CACHE:
        _LOGGER_CACHE[logger_name] = tl.Logger.with_config(logger_name, _ACTIVE_CONFIG)
    return _LOGGER_CACHE[logger_name]


def _emit(log: Any, level: str, message: str, payload: Dict[str, Any]) -> None:
    # Loggers without ``<level>_with`` get the payload folded into the message.
    name = str(level).lower()
    structured = getattr(log, f"{name}_with", None)
    if structured is not None:
        structured(message, _pairs(payload))
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
    logger_name: Optional[str] = None,
) -> None:
    """Emit ``event::<name>`` with ``data`` attached as key/value pairs."""

    _emit(get_logger(logger_name), level, f"event::{name}", {"event": name, **(data or {})})


@dataclass
class SpanHandle:
    """Yielded by ``span``; metadata added here is reported if the block fails."""

    span_name: str
    component_name: Optional[str] = None
    metadata: Dict[str, str] = field(default_factory=dict)

    def add_metadata(self, key: str, value: Any) -> None:
        self.metadata[key] = _stringify(value)

    def payload(self, **extra: Any) -> Dict[str, Any]:
        payload: Dict[str, Any] = {"span": self.span_name, **self.metadata}
        if self.component_name:
            payload["component"] = self.component_name
        payload.update({key: _stringify(value) for key, value in extra.items()})
        return payload


@contextmanager
def span(
    name: str,
    *,
    logger_name: Optional[str] = None,
    component: Optional[str | bool] = None,
    metadata: Optional[Dict[str, Any]] = None,
) -> Iterator[SpanHandle]:
    """Profile a block and optionally track it as a telelog component.

    ``component=True`` reuses ``name`` as the component. ``metadata`` is
    pushed as logger context while the block runs. An exception escaping the
    block is logged as ``span::fail`` and re-raised.
    """

    log = get_logger(logger_name)
    component_name = name if component is True else component or None
    handle = SpanHandle(
        span_name=name,
        component_name=component_name,
        metadata={key: _stringify(value) for key, value in (metadata or {}).items()},
    )
    context_keys = list(handle.metadata)
    for key in context_keys:
        log.add_context(key, handle.metadata[key])

    with ExitStack() as stack:
        if component_name:
            stack.enter_context(log.track_component(component_name))
        stack.enter_context(log.profile(name))
        try:
            yield handle
        except Exception as exc:
            _emit(log, "error", "span::fail", handle.payload(reason=str(exc)))
            raise
        finally:
            for key in context_keys:
                log.remove_context(key)


__all__ = [
    "PRESETS",
    "SpanHandle",
    "build_config",
    "configure",
    "env_settings",
    "get_logger",
    "preset_settings",
    "record_event",
    "span",
]
