from contextlib import contextmanager

import pytest

from widebuf.runtime import telemetry
from widebuf.runtime.telemetry import TelemetrySettings


class RecordingLogger:
    def __init__(self) -> None:
        self.context: dict[str, str] = {}
        self.records: list[tuple[str, str, dict[str, str]]] = []
        self.components: list[str] = []
        self.profiles: list[str] = []

    def add_context(self, key: str, value: str) -> None:
        self.context[key] = value

    def remove_context(self, key: str) -> None:
        self.context.pop(key, None)

    @contextmanager
    def track_component(self, name: str):
        self.components.append(name)
        yield

    @contextmanager
    def profile(self, name: str):
        self.profiles.append(name)
        yield

    def debug_with(self, message: str, pairs) -> None:
        self.records.append(("debug", message, dict(pairs)))

    def error_with(self, message: str, pairs) -> None:
        self.records.append(("error", message, dict(pairs)))


@pytest.fixture(autouse=True)
def restore_default_config():
    yield
    telemetry.configure()


@pytest.fixture
def recording_logger(monkeypatch) -> RecordingLogger:
    log = RecordingLogger()
    monkeypatch.setattr(telemetry, "get_logger", lambda name=None: log)
    return log


def test_settings_defaults_without_environment() -> None:
    settings = TelemetrySettings.from_env({})

    assert settings == TelemetrySettings()
    assert settings.level == "WARNING"
    assert settings.console
    assert settings.buffer_size is None


def test_settings_read_every_environment_switch() -> None:
    settings = TelemetrySettings.from_env(
        {
            "WIDEBUF_LOGGER": "ffi",
            "WIDEBUF_LOG_LEVEL": "debug",
            "WIDEBUF_DISABLE_CONSOLE": "1",
            "WIDEBUF_NO_COLOR": "yes",
            "WIDEBUF_LOG_JSON": "true",
            "WIDEBUF_LOG_FILE": "out.log",
            "WIDEBUF_LOG_BUFFERED": "on",
            "WIDEBUF_LOG_BUFFER_SIZE": "64",
        }
    )

    assert settings == TelemetrySettings(
        logger_name="ffi",
        level="DEBUG",
        console=False,
        colored=False,
        json=True,
        log_file="out.log",
        buffer_size=64,
    )


def test_buffered_logging_uses_default_size() -> None:
    settings = TelemetrySettings.from_env({"WIDEBUF_LOG_BUFFERED": "1"})

    assert settings.buffer_size == 2048


@pytest.mark.parametrize(
    ("name", "level", "console", "log_file"),
    [
        ("development", "DEBUG", True, ""),
        ("production", "WARNING", False, "widebuf.log"),
        ("PERFORMANCE", "DEBUG", False, "widebuf-performance.log"),
    ],
)
def test_presets(name: str, level: str, console: bool, log_file: str) -> None:
    settings = telemetry.preset_settings(name, {})

    assert settings.level == level
    assert settings.console is console
    assert settings.log_file == log_file


def test_preset_file_output_follows_environment() -> None:
    env = {"WIDEBUF_LOG_FILE": "/tmp/elsewhere.log"}

    assert telemetry.preset_settings("production", env).log_file == env[
        "WIDEBUF_LOG_FILE"
    ]
    assert telemetry.preset_settings("development", env).log_file == ""


def test_unknown_preset_is_rejected() -> None:
    with pytest.raises(ValueError):
        telemetry.configure(preset="verbose")


def test_settings_and_preset_are_exclusive() -> None:
    with pytest.raises(ValueError):
        telemetry.configure(settings=TelemetrySettings(), preset="development")


@pytest.mark.parametrize("preset", ["development", "production", "performance"])
def test_configure_builds_each_preset(preset: str, tmp_path, monkeypatch) -> None:
    monkeypatch.setenv("WIDEBUF_LOG_FILE", str(tmp_path / "widebuf.log"))

    settings = telemetry.configure(preset=preset)

    assert telemetry.active_settings() is settings
    assert telemetry.get_logger() is not None


def test_configure_with_explicit_settings(tmp_path) -> None:
    settings = TelemetrySettings(
        logger_name="widebuf.custom",
        console=False,
        json=True,
        log_file=str(tmp_path / "custom.log"),
        buffer_size=16,
    )

    assert telemetry.configure(settings=settings) is settings
    assert telemetry.get_logger() is telemetry.get_logger("widebuf.custom")


def test_get_logger_is_cached_until_reconfigured() -> None:
    first = telemetry.get_logger("widebuf.test")
    assert telemetry.get_logger("widebuf.test") is first

    telemetry.configure()

    assert telemetry.get_logger("widebuf.test") is not first


def test_record_event_rejects_unknown_level() -> None:
    with pytest.raises(ValueError):
        telemetry.record_event("test::event", level="loud")


def test_operation_span_profiles_and_reports_metadata(recording_logger) -> None:
    with telemetry.operation_span("split_off", owner=int, length=5) as handle:
        assert recording_logger.context == {"type": "int", "length": "5"}
        handle.add_metadata("tail", 2)

    assert recording_logger.components == ["buffer"]
    assert recording_logger.profiles == ["buffer::split_off"]
    assert recording_logger.context == {}
    level, message, payload = recording_logger.records[-1]
    assert (level, message) == ("debug", "span::complete")
    assert payload["tail"] == "2"
    assert payload["span"] == "buffer::split_off"


def test_operation_span_logs_failure_and_reraises(recording_logger) -> None:
    with pytest.raises(RuntimeError):
        with telemetry.operation_span("insert_view", owner=object(), length=1):
            raise RuntimeError("boom")

    level, message, payload = recording_logger.records[-1]
    assert (level, message) == ("error", "span::fail")
    assert payload["type"] == "object"
    assert payload["reason"] == "RuntimeError: boom"
    assert recording_logger.context == {}
