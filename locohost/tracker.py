"""
Optional bridge to the Conductor workspace database

The database is another application's private SQLite file. It is opened
read-only, queried once per enumeration cycle, and any problem with it simply
means there is no tracker data for that cycle.
"""
import logging
import sqlite3
from pathlib import Path
from types import MappingProxyType
from typing import Mapping, Optional

from .models import WorkspaceRecord

logger = logging.getLogger(__name__)

CONDUCTOR_DB = Path.home() / 'Library/Application Support/com.conductor.app/conductor.db'

WORKSPACES_QUERY = "SELECT id, directory_name, state FROM workspaces WHERE state != 'archived'"


class TrackerStore:
    def __init__(self, db_path: Optional[Path] = None):
        self.db_path = Path(db_path) if db_path else CONDUCTOR_DB

    def snapshot(self) -> Optional[Mapping[str, WorkspaceRecord]]:
        """Return non-archived workspaces keyed by directory name, or None"""
        if not self.db_path.exists():
            return None

        try:
            conn = sqlite3.connect(f"{self.db_path.resolve().as_uri()}?mode=ro", uri=True)
        except sqlite3.Error as e:
            logger.debug("Cannot open tracker database %s: %s", self.db_path, e)
            return None

        try:
            conn.row_factory = sqlite3.Row
            rows = conn.execute(WORKSPACES_QUERY).fetchall()
            lookup = {}
            for row in rows:
                record = WorkspaceRecord(
                    id=str(row['id']),
                    directory_name=row['directory_name'],
                    state=row['state'],
                )
                lookup[record.directory_name] = record
        except (sqlite3.Error, IndexError, KeyError, TypeError) as e:
            logger.debug("Tracker query failed: %s", e)
            return None
        finally:
            conn.close()

        return MappingProxyType(lookup)
