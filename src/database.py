"""Database module for storing enriched advisories."""
import json
import sqlite3
from datetime import datetime
from typing import List, Dict, Optional
from contextlib import contextmanager
import logging

logger = logging.getLogger(__name__)


class AdvisoryDatabase:
    """
    Document store for enriched advisories.
    One JSON document per advisoryid; writes replace the whole document.
    """

    def __init__(self, db_path: str):
        """Initialize database connection."""
        self.db_path = db_path
        self._init_database()

    @contextmanager
    def get_connection(self):
        """Context manager for database connections."""
        conn = sqlite3.connect(self.db_path)
        conn.row_factory = sqlite3.Row
        try:
            yield conn
            conn.commit()
        except Exception:
            conn.rollback()
            raise
        finally:
            conn.close()

    def _init_database(self):
        """Create database tables if they don't exist."""
        with self.get_connection() as conn:
            cursor = conn.cursor()
            cursor.execute('''
                CREATE TABLE IF NOT EXISTS advisories (
                    advisoryid INTEGER PRIMARY KEY,
                    document TEXT NOT NULL,
                    window_count INTEGER DEFAULT 0,
                    created_at DATETIME DEFAULT CURRENT_TIMESTAMP,
                    updated_at DATETIME DEFAULT CURRENT_TIMESTAMP
                )
            ''')

            logger.info(f"Database initialized at {self.db_path}")

    def upsert_advisory(self, document: Dict) -> str:
        """
        Insert or wholesale-replace the document matching its advisoryid.

        Returns:
            "inserted" or "updated"
        """
        advisory_id = document['advisoryid']
        payload = json.dumps(document)
        window_count = len(document.get('parsedDetails') or [])
        now = datetime.now().isoformat()

        with self.get_connection() as conn:
            cursor = conn.cursor()

            # Only used for reporting; the write below is a single atomic upsert
            existed = self._exists(cursor, advisory_id)

            cursor.execute('''
                INSERT INTO advisories (advisoryid, document, window_count, updated_at)
                VALUES (?, ?, ?, ?)
                ON CONFLICT(advisoryid) DO UPDATE SET
                    document = excluded.document,
                    window_count = excluded.window_count,
                    updated_at = excluded.updated_at
            ''', (advisory_id, payload, window_count, now))

            return "updated" if existed else "inserted"

    def _exists(self, cursor, advisory_id: int) -> bool:
        """Check whether a document is stored for this advisoryid."""
        cursor.execute(
            'SELECT advisoryid FROM advisories WHERE advisoryid = ?',
            (advisory_id,)
        )
        return cursor.fetchone() is not None

    def get_advisory(self, advisory_id: int) -> Optional[Dict]:
        """Get one stored advisory document by id."""
        with self.get_connection() as conn:
            cursor = conn.cursor()
            cursor.execute(
                'SELECT document FROM advisories WHERE advisoryid = ?',
                (advisory_id,)
            )
            row = cursor.fetchone()
            return json.loads(row['document']) if row else None

    def get_all_advisories(self) -> List[Dict]:
        """Get every stored advisory document."""
        with self.get_connection() as conn:
            cursor = conn.cursor()
            cursor.execute('SELECT document FROM advisories ORDER BY advisoryid')
            return [json.loads(row['document']) for row in cursor.fetchall()]

    def count(self) -> int:
        """Number of stored advisories."""
        with self.get_connection() as conn:
            cursor = conn.cursor()
            cursor.execute('SELECT COUNT(*) AS total FROM advisories')
            return cursor.fetchone()['total']

    def get_statistics(self) -> Dict:
        """Get summary statistics."""
        with self.get_connection() as conn:
            cursor = conn.cursor()

            cursor.execute('''
                SELECT COUNT(*) AS total,
                       COALESCE(SUM(CASE WHEN window_count > 0 THEN 1 ELSE 0 END), 0) AS with_windows,
                       COALESCE(SUM(window_count), 0) AS windows
                FROM advisories
            ''')
            row = cursor.fetchone()

            return {
                'total_advisories': row['total'],
                'advisories_with_windows': row['with_windows'],
                'total_windows': row['windows'],
            }
