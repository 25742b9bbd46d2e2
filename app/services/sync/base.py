"""
Base class and utilities for sync services.

Contains the shared session handling and the dialect-aware INSERT used
for race-safe find-or-create.
"""
import logging

from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.ext.asyncio import AsyncSession

from app.config import get_settings

logger = logging.getLogger(__name__)
settings = get_settings()


# ==================== Base Sync Service ====================

class BaseSyncService:
    """
    Base class for all sync services.

    Provides common functionality:
    - Database session management
    - INSERT ... ON CONFLICT for the active dialect
    """

    def __init__(self, db: AsyncSession):
        """
        Initialize the sync service.

        Args:
            db: SQLAlchemy async session
        """
        self.db = db

    def insert(self, model):
        """
        Dialect-specific ``insert()`` supporting ``on_conflict_do_nothing``.

        PostgreSQL in production, SQLite in tests.
        """
        dialect = self.db.bind.dialect.name if self.db.bind is not None else "postgresql"
        if dialect == "sqlite":
            return sqlite.insert(model)
        return postgresql.insert(model)
