"""SQLAlchemy-backed record sources."""

from graphql_connection.core.database.source import SelectSource

__all__ = ["SelectSource"]
