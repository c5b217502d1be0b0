import logging
from unittest import mock

import pytest
from fastapi.testclient import TestClient

from todo_api.logging_config import configure_logging
from todo_api.main import create_app
from todo_api.repositories import InMemoryRepository
from todo_api.server import build_server, main, settings_from_args
from todo_api.settings import Settings, get_settings


class TestSettings:
    def test_defaults(self, monkeypatch):
        for name in [
            "TODO_HOST_ADDRESS", "TODO_DATABASE_NAME", "TODO_COLLECTION_NAME", "TODO_LISTEN_HOST",
            "TODO_LISTEN_PORT", "PERSISTENCE_BACKEND", "TODO_SHUTDOWN_GRACE_PERIOD",
            "TODO_IDLE_TIMEOUT", "LOG_LEVEL",
        ]:
            monkeypatch.delenv(name, raising=False)
        assert get_settings() == Settings()
        s = Settings()
        assert s.host_address == "localhost:27017"
        assert s.database_name == "demo_todo"
        assert s.collection_name == "Todo"
        assert s.listen_port == 9000
        assert s.shutdown_grace_period == 5

    def test_env_overrides(self, monkeypatch):
        monkeypatch.setenv("TODO_HOST_ADDRESS", "mongodb://db:27017")
        monkeypatch.setenv("TODO_DATABASE_NAME", "todos")
        monkeypatch.setenv("TODO_COLLECTION_NAME", "items")
        monkeypatch.setenv("TODO_LISTEN_PORT", "9100")
        monkeypatch.setenv("PERSISTENCE_BACKEND", "Memory")
        s = get_settings()
        assert s.host_address == "mongodb://db:27017"
        assert s.database_name == "todos"
        assert s.collection_name == "items"
        assert s.listen_port == 9100
        assert s.persistence_backend == "memory"

    def test_bad_values_fall_back(self, monkeypatch):
        monkeypatch.setenv("TODO_LISTEN_PORT", "not-a-port")
        monkeypatch.setenv("PERSISTENCE_BACKEND", "postgres")
        s = get_settings()
        assert s.listen_port == 9000
        assert s.persistence_backend == "mongo"

    def test_log_level_aliases_and_unknown_names(self, monkeypatch):
        monkeypatch.setenv("LOG_LEVEL", "warn")
        assert get_settings().log_level == "WARNING"
        monkeypatch.setenv("LOG_LEVEL", "verbose")
        assert get_settings().log_level == "INFO"
        assert settings_from_args(["--log-level", "fatal"], base=Settings()).log_level == "CRITICAL"
        assert settings_from_args(["--log-level", "nonsense"], base=Settings()).log_level == "INFO"

    def test_command_line_overrides(self):
        base = Settings(database_name="from-env")
        s = settings_from_args(
            ["--port", "9200", "--collection-name", "Tasks", "--backend", "memory", "--log-level", "debug"],
            base=base,
        )
        assert s.listen_port == 9200
        assert s.collection_name == "Tasks"
        assert s.persistence_backend == "memory"
        assert s.log_level == "DEBUG"
        # Untouched options keep their environment value
        assert s.database_name == "from-env"


class TestServer:
    def test_build_server_uses_grace_period(self):
        settings = Settings(persistence_backend="memory", listen_port=9300, shutdown_grace_period=5)
        server = build_server(settings)
        assert server.config.port == 9300
        assert server.config.timeout_graceful_shutdown == 5
        assert server.config.timeout_keep_alive == 60

    def test_build_server_accepts_any_log_level(self):
        warn = build_server(Settings(persistence_backend="memory", log_level="WARN"))
        assert warn.config.log_level == "warning"
        unknown = build_server(Settings(persistence_backend="memory", log_level="nonsense"))
        assert unknown.config.log_level == "info"

    def test_main_logs_clean_stop(self, caplog):
        with mock.patch("todo_api.server.build_server") as build, mock.patch("todo_api.server.configure_logging"):
            build.return_value.run.side_effect = KeyboardInterrupt
            with caplog.at_level(logging.INFO, logger="todo_api.server"):
                assert main(["--backend", "memory"]) == 0
        assert "Server gracefully stopped" in caplog.text

    def test_main_failed_startup_is_not_reported_as_clean_stop(self, caplog):
        with mock.patch("todo_api.server.build_server") as build, mock.patch("todo_api.server.configure_logging"):
            build.return_value.run.side_effect = SystemExit(1)
            with caplog.at_level(logging.INFO, logger="todo_api.server"):
                with pytest.raises(SystemExit):
                    main(["--backend", "memory"])
        assert "Server gracefully stopped" not in caplog.text

    def test_lifespan_builds_and_releases_repository(self):
        app = create_app(Settings(persistence_backend="memory"))
        assert app.state.repository is None
        with TestClient(app) as client:
            assert isinstance(app.state.repository, InMemoryRepository)
            assert client.post("/todo/", json={"title": "During"}).status_code == 201
        assert app.state.repository is None

    def test_injected_repository_is_left_open(self):
        repo = InMemoryRepository()
        app = create_app(Settings(persistence_backend="memory"), repository=repo)
        with TestClient(app):
            pass
        assert app.state.repository is repo


class TestLogging:
    def test_configure_logging_is_idempotent(self):
        root = logging.getLogger()
        configure_logging("debug")
        configure_logging("warning")
        handlers = [h for h in root.handlers if h.get_name() == "todo_api"]
        assert len(handlers) == 1
        assert root.level == logging.WARNING
        configure_logging("nonsense")
        assert root.level == logging.INFO
        for h in handlers:
            root.removeHandler(h)
