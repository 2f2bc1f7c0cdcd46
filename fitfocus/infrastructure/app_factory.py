"""Application factory for dependency injection and wiring."""

import logging
from typing import Optional

from fitfocus.application.sessions.manager import SessionManager
from fitfocus.domain.errors import ConfigurationError
from fitfocus.infrastructure.events.logging_event_logger import LoggingEventLogger
from fitfocus.infrastructure.sessions.file_persistence import FileSessionPersistence
from fitfocus.infrastructure.sessions.in_memory_remote import InMemoryRemoteSessionService
from fitfocus.infrastructure.sessions.mock_persistence import MockSessionPersistence
from fitfocus.infrastructure.sessions.services import SessionServicesBundle
from fitfocus.interfaces.events import EventLogger
from fitfocus.interfaces.sessions import LocalSessionPersistence, RemoteSessionService
from fitfocus.modules.config import ConfigManager
from fitfocus.modules.session_cache import SqlSessionPersistence, get_session_factory, init_database

logger = logging.getLogger(__name__)


class AppFactory:
    """Application factory that wires dependencies (simple in-memory DI).

    The remote document-store client is external; pass one in, or set
    USE_MOCK_REMOTE=true to use the in-process collection.
    """

    def __init__(
        self,
        config_manager: Optional[ConfigManager] = None,
        remote: Optional[RemoteSessionService] = None,
        event_logger: Optional[EventLogger] = None,
    ) -> None:
        # Configuration
        self.config_manager = config_manager or ConfigManager()
        settings = self.config_manager.app_settings

        # Local session cache
        self.local_persistence = self._create_local_persistence()

        # Remote session collection
        if remote is not None:
            self.remote_service = remote
        elif settings.use_mock_remote:
            logger.info("Using InMemoryRemoteSessionService (in-process, no cloud backend)")
            self.remote_service = InMemoryRemoteSessionService(
                collection_name=settings.remote_collection_name
            )
        else:
            raise ConfigurationError(
                "No remote session service configured. Pass one to AppFactory or set USE_MOCK_REMOTE=true.",
                code="REMOTE_NOT_CONFIGURED",
            )

        self.event_logger = event_logger or LoggingEventLogger(config=self.config_manager)

        logger.info("AppFactory initialized (cache backend=%s)", settings.session_cache_backend)

    def _create_local_persistence(self) -> LocalSessionPersistence:
        settings = self.config_manager.app_settings
        backend = settings.session_cache_backend
        if backend == "file":
            logger.info("Using FileSessionPersistence at %s", settings.session_cache_path)
            return FileSessionPersistence(
                settings.session_cache_path.parent, settings.session_cache_file_name
            )
        if backend == "sql":
            db_url = settings.resolved_session_cache_db_url
            logger.info("Using SqlSessionPersistence")
            engine = init_database(db_url)
            return SqlSessionPersistence(get_session_factory(engine))
        if backend == "memory":
            logger.info("Using MockSessionPersistence (nothing is persisted)")
            return MockSessionPersistence([])
        raise ConfigurationError(f"Unknown session cache backend: {backend}")

    def create_session_services(self) -> SessionServicesBundle:
        return SessionServicesBundle(remote=self.remote_service, local=self.local_persistence)

    def create_session_manager(self) -> SessionManager:
        return SessionManager(self.create_session_services(), event_logger=self.event_logger)

    # Accessors
    def get_config_manager(self) -> ConfigManager:  # noqa: D401
        return self.config_manager

    def get_remote_service(self) -> RemoteSessionService:  # noqa: D401
        return self.remote_service

    def get_local_persistence(self) -> LocalSessionPersistence:  # noqa: D401
        return self.local_persistence
