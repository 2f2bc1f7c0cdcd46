"""Smoke tests for AppFactory wiring."""

import asyncio

import pytest

from fitfocus.application.sessions.manager import SessionManager
from fitfocus.domain.errors import ConfigurationError
from fitfocus.domain.sessions.models import BJJSession
from fitfocus.infrastructure.app_factory import AppFactory
from fitfocus.infrastructure.events.logging_event_logger import LoggingEventLogger
from fitfocus.infrastructure.sessions.file_persistence import FileSessionPersistence
from fitfocus.infrastructure.sessions.in_memory_remote import InMemoryRemoteSessionService
from fitfocus.infrastructure.sessions.mock_persistence import MockSessionPersistence
from fitfocus.modules.config import AppSettings, ConfigManager
from fitfocus.modules.session_cache import SqlSessionPersistence
from fitfocus.modules.session_cache.database import reset_engine


@pytest.fixture(autouse=True)
def _isolated_factory_env(monkeypatch, tmp_path):
    for var in ("USE_MOCK_REMOTE", "SESSION_CACHE_BACKEND", "SESSION_CACHE_DIR", "APP_DATA_DIR", "SESSION_CACHE_DB_URL"):
        monkeypatch.delenv(var, raising=False)
    monkeypatch.chdir(tmp_path)
    reset_engine()
    yield
    reset_engine()


def make_factory(tmp_path, remote=None, **overrides):
    settings = AppSettings(session_cache_dir=str(tmp_path), **overrides)
    return AppFactory(config_manager=ConfigManager(settings), remote=remote)


class TestLocalBackends:
    def test_file_backend(self, tmp_path):
        factory = make_factory(tmp_path, use_mock_remote=True)
        local = factory.get_local_persistence()
        assert isinstance(local, FileSessionPersistence)
        assert local.file_path == tmp_path / "bjj_sessions.json"

    def test_sql_backend(self, tmp_path):
        factory = make_factory(tmp_path, use_mock_remote=True, session_cache_backend="sql")
        assert isinstance(factory.get_local_persistence(), SqlSessionPersistence)
        assert (tmp_path / "bjj_sessions.db").exists()

    def test_memory_backend_starts_empty(self, tmp_path):
        factory = make_factory(tmp_path, use_mock_remote=True, session_cache_backend="memory")
        local = factory.get_local_persistence()
        assert isinstance(local, MockSessionPersistence)
        assert local.get_sessions() == []


class TestRemote:
    def test_mock_remote_from_settings(self, tmp_path):
        factory = make_factory(tmp_path, use_mock_remote=True, remote_collection_name="sessions_dev")
        remote = factory.get_remote_service()
        assert isinstance(remote, InMemoryRemoteSessionService)
        assert remote.collection_name == "sessions_dev"

    def test_injected_remote_wins(self, tmp_path):
        remote = InMemoryRemoteSessionService()
        factory = make_factory(tmp_path, remote=remote, use_mock_remote=True)
        assert factory.get_remote_service() is remote

    def test_missing_remote_raises(self, tmp_path):
        with pytest.raises(ConfigurationError) as exc_info:
            make_factory(tmp_path)
        assert exc_info.value.code == "REMOTE_NOT_CONFIGURED"


class TestSessionManager:
    def test_default_event_logger_follows_settings(self, tmp_path):
        factory = make_factory(tmp_path, use_mock_remote=True, feature_metrics_logging_enabled=True)
        assert isinstance(factory.event_logger, LoggingEventLogger)
        assert factory.event_logger.metrics_enabled is True

    @pytest.mark.asyncio
    async def test_end_to_end_with_file_cache(self, tmp_path):
        factory = make_factory(tmp_path, use_mock_remote=True)
        manager = factory.create_session_manager()
        assert isinstance(manager, SessionManager)
        assert manager.sessions == []

        await manager.create_session(BJJSession(session_id="s1", user_id="u1", duration=3600))
        manager.start_listening("u1")
        for _ in range(10):
            await asyncio.sleep(0)
        await manager.wait_for_local_saves()
        manager.stop_listening()

        assert [s.session_id for s in manager.sessions] == ["s1"]
        reloaded = make_factory(tmp_path, use_mock_remote=True).create_session_manager()
        assert [s.session_id for s in reloaded.sessions] == ["s1"]
        assert reloaded.sessions[0].duration_in_minutes == 60
