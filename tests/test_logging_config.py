import pytest
import structlog
from structlog.testing import capture_logs

from app.core.logging_config import configure_logging


@pytest.fixture(autouse=True)
def restore_logging():
    yield
    configure_logging("info", "console")


def test_level_filters_lower_events() -> None:
    configure_logging("warning", "console")
    log = structlog.get_logger()

    with capture_logs() as entries:
        log.info("quiet.event")
        log.warning("loud.event", key="value")

    assert [e["event"] for e in entries] == ["loud.event"]
    assert entries[0]["key"] == "value"


def test_debug_level_keeps_everything() -> None:
    configure_logging("DEBUG", "console")
    with capture_logs() as entries:
        structlog.get_logger().debug("cache.swept", removed=3)
    assert len(entries) == 1
    assert entries[0]["event"] == "cache.swept"
    assert entries[0]["removed"] == 3
    assert entries[0]["log_level"] == "debug"


def test_unknown_level_falls_back_to_info() -> None:
    configure_logging("chatty", "console")
    log = structlog.get_logger()
    with capture_logs() as entries:
        log.debug("hidden.event")
        log.info("shown.event")
    assert [e["event"] for e in entries] == ["shown.event"]


def test_format_selects_renderer() -> None:
    configure_logging("info", "json")
    assert isinstance(structlog.get_config()["processors"][-1], structlog.processors.JSONRenderer)

    configure_logging("info", "console")
    assert isinstance(structlog.get_config()["processors"][-1], structlog.dev.ConsoleRenderer)
