"""Unit tests for structured logging configuration and correlation IDs."""

import uuid

import pytest
import structlog

from badge_consensus.infrastructure.observability import (
    configure_structlog,
    correlation_id_processor,
    generate_correlation_id,
    get_correlation_id,
    get_logger_for_service,
    set_correlation_id,
)


@pytest.fixture(autouse=True)
def _restore_structlog():
    yield
    structlog.reset_defaults()
    set_correlation_id("")


class TestCorrelationId:
    def test_generated_ids_are_uuid4(self) -> None:
        correlation_id = generate_correlation_id()

        assert uuid.UUID(correlation_id).version == 4
        assert correlation_id != generate_correlation_id()

    def test_default_is_empty(self) -> None:
        assert get_correlation_id() == ""

    def test_set_and_get(self) -> None:
        set_correlation_id("req-123")

        assert get_correlation_id() == "req-123"

    def test_processor_adds_id_when_set(self) -> None:
        set_correlation_id("req-456")

        event_dict = correlation_id_processor(None, "info", {"event": "x"})

        assert event_dict["correlation_id"] == "req-456"

    def test_processor_skips_when_unset(self) -> None:
        event_dict = correlation_id_processor(None, "info", {"event": "x"})

        assert "correlation_id" not in event_dict


class TestConfigureStructlog:
    @pytest.mark.parametrize("environment", ["production", "development"])
    def test_configures_without_error(self, environment: str) -> None:
        configure_structlog(environment=environment)

        assert structlog.is_configured()

    def test_production_renders_json(self, capsys: pytest.CaptureFixture[str]) -> None:
        configure_structlog(environment="production")
        set_correlation_id("req-789")

        structlog.get_logger().info("approval_recorded", voter="0xA")

        output = capsys.readouterr().out
        assert '"event": "approval_recorded"' in output
        assert '"correlation_id": "req-789"' in output
        assert '"voter": "0xA"' in output

    def test_log_level_env_filters(
        self,
        monkeypatch: pytest.MonkeyPatch,
        capsys: pytest.CaptureFixture[str],
    ) -> None:
        monkeypatch.setenv("LOG_LEVEL", "WARNING")
        configure_structlog(environment="production")

        structlog.get_logger().info("hidden_event")
        structlog.get_logger().warning("shown_event")

        output = capsys.readouterr().out
        assert "hidden_event" not in output
        assert "shown_event" in output


def test_logger_for_service_binds_context(capsys: pytest.CaptureFixture[str]) -> None:
    configure_structlog(environment="production")

    get_logger_for_service("ConsensusControllerService").info("bound_event")

    output = capsys.readouterr().out
    assert '"service": "ConsensusControllerService"' in output
    assert '"component": "consensus"' in output
