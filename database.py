"""
Database bootstrap for the SQLite store.
"""

import logging
import sqlite3

from infrastructure.schema_manager import SchemaManager

logger = logging.getLogger("sidebet.database")


class Database:
    """
    Ensures the schema exists for a database path.

    Constructing a Database is idempotent: migrations that were already
    applied are skipped.
    """

    def __init__(self, db_path: str = "sidebet.db"):
        self.db_path = db_path
        self.use_uri = db_path.startswith("file:")
        SchemaManager(db_path, use_uri=self.use_uri).initialize()

    def get_connection(self) -> sqlite3.Connection:
        conn = sqlite3.connect(self.db_path, uri=self.use_uri)
        conn.row_factory = sqlite3.Row
        return conn
