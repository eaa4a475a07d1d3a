"""
Service initialization and dependency injection for the MEDDPICC API.

Creates and manages the qualification service and its stores.
"""

import logging
from typing import Optional

from config.settings import get_settings, Settings
from database.session import get_session_factory
from qualification.assessment_store import (
    AssessmentStore,
    ConfigurationStore,
    InMemoryAssessmentStore,
    InMemoryConfigurationStore,
)
from qualification.db_assessment_store import DbAssessmentStore, DbConfigurationStore
from qualification.service import QualificationService

logger = logging.getLogger(__name__)


class Services:
    """Container for all application services."""

    def __init__(self):
        self.settings: Optional[Settings] = None
        self.assessment_store: Optional[AssessmentStore] = None
        self.config_store: Optional[ConfigurationStore] = None
        self.qualification: Optional[QualificationService] = None
        self.storage_backend: str = "none"
        self._initialized = False

    def initialize(self):
        """Initialize all services."""
        if self._initialized:
            return

        self.settings = get_settings()
        self._init_stores()
        self._init_qualification()
        self._initialized = True
        logger.info(f"All services initialized (storage: {self.storage_backend})")

    def _init_stores(self):
        """Pick database or in-memory stores."""
        if self.settings.uses_database:
            try:
                factory = get_session_factory()
            except RuntimeError:
                logger.warning("DATABASE_URL set but database not initialized, using in-memory stores")
            else:
                self.assessment_store = DbAssessmentStore(factory)
                self.config_store = DbConfigurationStore(factory)
                self.storage_backend = "database"
                return

        self.assessment_store = InMemoryAssessmentStore()
        self.config_store = InMemoryConfigurationStore()
        self.storage_backend = "memory"

    def _init_qualification(self):
        """Initialize the qualification service."""
        self.qualification = QualificationService(
            store=self.assessment_store,
            config_store=self.config_store,
            default_created_by=self.settings.default_created_by,
            export_schema_version=self.settings.export_schema_version,
        )
        logger.info("Qualification service ready")

    @property
    def is_ready(self) -> bool:
        return self._initialized and self.qualification is not None

    def health(self) -> dict:
        """Return health status of all services."""
        return {
            "initialized": self._initialized,
            "storage": self.storage_backend,
            "qualification": self.qualification is not None,
        }


# Singleton
_services = Services()


def get_services() -> Services:
    """Get the global services instance."""
    return _services


def initialize_services():
    """Initialize all services (called at startup)."""
    _services.initialize()


def reset_services():
    """Drop the global services instance (used by tests)."""
    global _services
    _services = Services()


def get_qualification_service() -> QualificationService:
    """FastAPI dependency for the qualification service."""
    services = get_services()
    if not services.is_ready:
        initialize_services()
    return services.qualification
