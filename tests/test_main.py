"""
AccessLog - Configuration & Application Factory Tests
=======================================================

What:  Tests for Settings validation and the FastAPI app built by create_app().
How:   Settings are constructed directly with keyword overrides; the app is
       driven through an HTTPX AsyncClient.
"""

import logging
from unittest.mock import MagicMock

import pytest
from httpx import ASGITransport, AsyncClient
from pydantic import ValidationError

from accesslog import __version__
from accesslog.config import Settings
from accesslog.main import create_app, setup_logging


class TestSettings:

    def test_defaults(self):
        cfg = Settings()
        assert cfg.access_log_format == "common"
        assert cfg.access_logger_name == "accesslog.access"
        assert cfg.skip_paths_list == []

    def test_format_normalized(self):
        assert Settings(access_log_format="Combined").access_log_format == "combined"

    def test_unknown_format_rejected(self):
        with pytest.raises(ValidationError, match="access_log_format"):
            Settings(access_log_format="json")

    def test_level_validated(self):
        assert Settings(access_log_level="warning").access_log_level == "WARNING"
        with pytest.raises(ValidationError):
            Settings(log_level="LOUD")

    def test_skip_paths_list(self):
        cfg = Settings(access_log_skip_paths=" /health, /metrics ,,")
        assert cfg.skip_paths_list == ["/health", "/metrics"]

    def test_reads_environment(self, monkeypatch):
        monkeypatch.setenv("ACCESS_LOG_FORMAT", "combined")
        monkeypatch.setenv("ACCESS_LOG_SKIP_PATHS", "/health")
        cfg = Settings()
        assert cfg.access_log_format == "combined"
        assert cfg.skip_paths_list == ["/health"]


class TestSetupLogging:

    def test_access_logger_prints_bare_message(self, monkeypatch):
        basic_config = MagicMock()
        monkeypatch.setattr(logging, "basicConfig", basic_config)
        cfg = Settings(access_logger_name="accesslog.tests.setup", access_log_level="WARNING")

        setup_logging(cfg)

        assert basic_config.call_args.kwargs["force"] is True
        access_logger = logging.getLogger("accesslog.tests.setup")
        assert access_logger.propagate is False
        assert access_logger.level == logging.WARNING
        assert len(access_logger.handlers) == 1
        record = logging.LogRecord("accesslog.tests.setup", logging.WARNING, __file__, 1, "%s", ("line",), None)
        assert access_logger.handlers[0].format(record) == "line"


@pytest.fixture
def make_client(access_logger):
    def _make(**overrides):
        app = create_app(Settings(**overrides), access_logger=access_logger)
        transport = ASGITransport(app=app, raise_app_exceptions=False)
        return app, AsyncClient(transport=transport, base_url="http://test")

    return _make


class TestCreateApp:

    @pytest.mark.asyncio
    async def test_health_logged(self, make_client, access_lines):
        _, client = make_client()
        async with client:
            response = await client.get("/health")

        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "healthy"
        assert body["version"] == __version__
        assert body["access_log_format"] == "common"

        lines = access_lines()
        assert len(lines) == 1
        assert lines[0].endswith(f'"GET /health HTTP/1.1" 200 {len(response.content)}')

    @pytest.mark.asyncio
    async def test_combined_from_settings(self, make_client, access_lines):
        _, client = make_client(access_log_format="combined")
        async with client:
            await client.get("/health", headers={"User-Agent": "monitor/1.0"})

        assert access_lines()[0].endswith('"" "monitor/1.0"')

    @pytest.mark.asyncio
    async def test_skip_paths_from_settings(self, make_client, access_lines):
        _, client = make_client(access_log_skip_paths="/health")
        async with client:
            assert (await client.get("/health")).status_code == 200
            assert (await client.get("/missing")).status_code == 404

        lines = access_lines()
        assert len(lines) == 1
        assert '"GET /missing HTTP/1.1" 404' in lines[0]

    @pytest.mark.asyncio
    async def test_unhandled_error_logged_as_500(self, make_client, access_lines):
        app, client = make_client()

        @app.get("/boom")
        async def boom():
            raise RuntimeError("boom")

        async with client:
            response = await client.get("/boom")

        assert response.status_code == 500
        assert response.json()["error"] == "internal_server_error"
        lines = access_lines()
        assert len(lines) == 1
        assert lines[0].endswith('"GET /boom HTTP/1.1" 500 0')
