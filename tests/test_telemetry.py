from __future__ import annotations

from contextlib import contextmanager
from types import SimpleNamespace
from typing import Any, Dict, Iterator, List, Tuple

import pytest

from indent_engine.runtime import telemetry


class RecordingConfig:
    def __init__(self) -> None:
        self.calls: List[Tuple[str, Any]] = []

    def __getattr__(self, name: str) -> Any:
        if not name.startswith("with_"):
            raise AttributeError(name)
        return lambda value: self.calls.append((name[len("with_") :], value))


class FakeLogger:
    def __init__(self) -> None:
        self.records: List[Tuple[str, str, Dict[str, str]]] = []
        self.context: Dict[str, str] = {}
        self.profiled: List[str] = []
        self.components: List[str] = []

    def info_with(self, message: str, pairs: List[Tuple[str, str]]) -> None:
        self.records.append(("info", message, dict(pairs)))

    def error_with(self, message: str, pairs: List[Tuple[str, str]]) -> None:
        self.records.append(("error", message, dict(pairs)))

    def add_context(self, key: str, value: str) -> None:
        self.context[key] = value

    def remove_context(self, key: str) -> None:
        del self.context[key]

    @contextmanager
    def profile(self, name: str) -> Iterator[None]:
        self.profiled.append(name)
        yield

    @contextmanager
    def track_component(self, name: str) -> Iterator[None]:
        self.components.append(name)
        yield


@pytest.fixture
def recording_config(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(telemetry, "tl", SimpleNamespace(Config=RecordingConfig))
    monkeypatch.setattr(telemetry, "_ACTIVE_CONFIG", None)
    monkeypatch.setattr(telemetry, "_LOGGER_CACHE", {})
    for name in ("CONSOLE", "NO_COLOR", "LOG_JSON", "LOG_FILE", "LOG_LEVEL", "PROFILE"):
        monkeypatch.delenv(f"INDENT_ENGINE_{name}", raising=False)


@pytest.fixture
def fake_logger(monkeypatch: pytest.MonkeyPatch) -> FakeLogger:
    logger = FakeLogger()
    monkeypatch.setattr(telemetry, "get_logger", lambda name=None: logger)
    return logger


@pytest.mark.parametrize("preset", sorted(telemetry.PRESETS))
def test_presets_apply_every_setting(recording_config: None, preset: str) -> None:
    telemetry.configure(preset=preset.upper())

    assert dict(telemetry._ACTIVE_CONFIG.calls) == telemetry.PRESETS[preset]


def test_performance_preset_honours_log_file(
    recording_config: None, monkeypatch: pytest.MonkeyPatch
) -> None:
    monkeypatch.setenv("INDENT_ENGINE_LOG_FILE", "decisions.log")

    telemetry.configure(preset="performance")

    assert ("file_output", "decisions.log") in telemetry._ACTIVE_CONFIG.calls


def test_environment_defaults_keep_console_quiet(recording_config: None) -> None:
    telemetry.configure()

    assert telemetry._ACTIVE_CONFIG.calls == [
        ("min_level", "INFO"),
        ("console_output", False),
    ]


def test_environment_opt_ins(recording_config: None, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("INDENT_ENGINE_CONSOLE", "yes")
    monkeypatch.setenv("INDENT_ENGINE_NO_COLOR", "1")
    monkeypatch.setenv("INDENT_ENGINE_LOG_LEVEL", "error")
    monkeypatch.setenv("INDENT_ENGINE_PROFILE", "on")

    assert telemetry.env_settings() == {
        "min_level": "ERROR",
        "console_output": True,
        "colored_output": False,
        "profiling": True,
    }


def test_configure_rejects_conflicting_arguments() -> None:
    with pytest.raises(ValueError):
        telemetry.configure(config=object(), preset="development")


def test_configure_rejects_unknown_preset() -> None:
    with pytest.raises(ValueError):
        telemetry.configure(preset="verbose")


def test_record_event_sends_string_pairs(fake_logger: FakeLogger) -> None:
    telemetry.record_event("indent.decision", data={"offset": 4, "branch": None})

    assert fake_logger.records == [
        (
            "info",
            "event::indent.decision",
            {"event": "indent.decision", "offset": "4", "branch": "None"},
        )
    ]


def test_record_event_folds_payload_for_plain_loggers(monkeypatch: pytest.MonkeyPatch) -> None:
    messages: List[str] = []
    monkeypatch.setattr(
        telemetry, "get_logger", lambda name=None: SimpleNamespace(warning=messages.append)
    )

    telemetry.record_event("x", level="WARNING", data={"a": 1})

    assert messages == ["event::x {'event': 'x', 'a': 1}"]
    with pytest.raises(ValueError):
        telemetry.record_event("x", level="shout")


def test_span_tracks_component_and_clears_context(fake_logger: FakeLogger) -> None:
    with telemetry.span("indent::decide", component="indent", metadata={"offset": 3}) as handle:
        assert fake_logger.context == {"offset": "3"}
        handle.add_metadata("status", "handled")

    assert fake_logger.profiled == ["indent::decide"]
    assert fake_logger.components == ["indent"]
    assert fake_logger.context == {}
    assert fake_logger.records == []


def test_span_logs_failure_and_reraises(fake_logger: FakeLogger) -> None:
    with pytest.raises(RuntimeError):
        with telemetry.span("buffer::edit", component=True, metadata={"buffer": "b"}) as handle:
            handle.add_metadata("step", 2)
            raise RuntimeError("boom")

    assert fake_logger.records == [
        (
            "error",
            "span::fail",
            {
                "span": "buffer::edit",
                "buffer": "b",
                "step": "2",
                "component": "buffer::edit",
                "reason": "boom",
            },
        )
    ]
    assert fake_logger.components == ["buffer::edit"]
    assert fake_logger.context == {}
