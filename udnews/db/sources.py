"""Source management in database."""

from datetime import datetime
from typing import Any, Dict, List, Optional

from psycopg import Connection, sql

from ..config import SourceConfig
from ..models import Source, SourceStatus

EDITABLE_SOURCE_FIELDS = ("name", "url", "is_active", "last_fetched", "status")


class SourceManager:
    """Manage sources in database."""

    def sync_sources(
        self,
        conn: Connection,
        sources: List[SourceConfig],
    ) -> Dict[str, int]:
        """
        Sync sources from config to database.

        Returns:
            Mapping of source URL to database ID
        """
        source_map = {}

        with conn.cursor() as cur:
            for source in sources:
                # Upsert source; health columns are owned by ingestion
                cur.execute(
                    """
                    INSERT INTO sources (name, url, is_active)
                    VALUES (%s, %s, %s)
                    ON CONFLICT (url) DO UPDATE SET
                        name = EXCLUDED.name,
                        is_active = EXCLUDED.is_active
                    RETURNING id
                    """,
                    (source.name, source.url, source.is_active),
                )

                source_id = cur.fetchone()["id"]
                source_map[source.url] = source_id

        conn.commit()
        return source_map

    def get_sources(self, conn: Connection) -> List[Source]:
        """Get all sources from database."""
        with conn.cursor() as cur:
            cur.execute("SELECT * FROM sources ORDER BY id")
            return [Source(**row) for row in cur.fetchall()]

    def get_source(self, conn: Connection, source_id: int) -> Optional[Source]:
        """Get a source by ID."""
        with conn.cursor() as cur:
            cur.execute("SELECT * FROM sources WHERE id = %s", (source_id,))
            row = cur.fetchone()
            return Source(**row) if row else None

    def create_source(self, conn: Connection, source: SourceConfig) -> Source:
        """Insert a new source."""
        with conn.cursor() as cur:
            cur.execute(
                """
                INSERT INTO sources (name, url, is_active, status)
                VALUES (%s, %s, %s, %s)
                RETURNING *
                """,
                (source.name, source.url, source.is_active, SourceStatus.UNKNOWN.value),
            )
            row = cur.fetchone()

        conn.commit()
        return Source(**row)

    def update_source(
        self,
        conn: Connection,
        source_id: int,
        fields: Dict[str, Any],
    ) -> Optional[Source]:
        """Update fields of a source in a single statement."""
        unknown = set(fields) - set(EDITABLE_SOURCE_FIELDS)
        if unknown:
            raise ValueError(f"Cannot update source fields: {', '.join(sorted(unknown))}")
        if not fields:
            return self.get_source(conn, source_id)

        values = [v.value if isinstance(v, SourceStatus) else v for v in fields.values()]
        assignments = sql.SQL(", ").join(
            sql.SQL("{} = %s").format(sql.Identifier(name)) for name in fields
        )
        with conn.cursor() as cur:
            cur.execute(
                sql.SQL("UPDATE sources SET {} WHERE id = %s RETURNING *").format(assignments),
                (*values, source_id),
            )
            row = cur.fetchone()

        conn.commit()
        return Source(**row) if row else None

    def update_source_status(
        self,
        conn: Connection,
        source_id: int,
        status: SourceStatus,
        last_fetched: Optional[datetime] = None,
    ) -> Optional[Source]:
        """Write status and (on success) fetch time together."""
        fields: Dict[str, Any] = {"status": status}
        if last_fetched is not None:
            fields["last_fetched"] = last_fetched
        return self.update_source(conn, source_id, fields)

    def delete_source(self, conn: Connection, source_id: int) -> bool:
        """Delete a source by ID."""
        with conn.cursor() as cur:
            cur.execute("DELETE FROM sources WHERE id = %s", (source_id,))
            deleted = cur.rowcount > 0

        conn.commit()
        return deleted
