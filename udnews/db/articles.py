"""Article storage queries."""

from typing import Any, Dict, List, Optional

from psycopg import Connection, sql

from ..models import Article, NewArticle

# Columns an operator may edit after creation.
EDITABLE_ARTICLE_FIELDS = (
    "title",
    "description",
    "content",
    "link",
    "source",
    "image_url",
    "published_at",
)


class ArticleStorage:
    """Handle article storage and deduplication."""

    def get_articles(
        self,
        conn: Connection,
        limit: int = 50,
        offset: int = 0,
        source: Optional[str] = None,
    ) -> List[Article]:
        """Get articles newest first."""
        with conn.cursor() as cur:
            query = "SELECT * FROM articles"
            params: List[Any] = []

            if source:
                query += " WHERE source = %s"
                params.append(source)

            query += " ORDER BY published_at DESC, id DESC LIMIT %s OFFSET %s"
            params.extend([limit, offset])

            cur.execute(query, params)
            return [Article(**row) for row in cur.fetchall()]

    def get_article_by_link(self, conn: Connection, link: str) -> Optional[Article]:
        """Get an article by exact link."""
        with conn.cursor() as cur:
            cur.execute("SELECT * FROM articles WHERE link = %s", (link,))
            row = cur.fetchone()
            return Article(**row) if row else None

    def insert_article(self, conn: Connection, article: NewArticle) -> Optional[Article]:
        """
        Insert article unless the link is already stored.

        Returns:
            The new article, or None when the unique link constraint
            rejected the row
        """
        with conn.cursor() as cur:
            cur.execute(
                """
                INSERT INTO articles (
                    title, description, content, link,
                    source, image_url, published_at
                ) VALUES (
                    %s, %s, %s, %s, %s, %s, %s
                )
                ON CONFLICT (link) DO NOTHING
                RETURNING *
                """,
                (
                    article.title,
                    article.description,
                    article.content,
                    article.link,
                    article.source,
                    article.image_url,
                    article.published_at,
                ),
            )
            row = cur.fetchone()

        conn.commit()
        return Article(**row) if row else None

    def update_article(
        self,
        conn: Connection,
        article_id: int,
        fields: Dict[str, Any],
    ) -> Optional[Article]:
        """Update editable fields of an article."""
        unknown = set(fields) - set(EDITABLE_ARTICLE_FIELDS)
        if unknown:
            raise ValueError(f"Cannot update article fields: {', '.join(sorted(unknown))}")
        if not fields:
            return self.get_article(conn, article_id)

        assignments = sql.SQL(", ").join(
            sql.SQL("{} = %s").format(sql.Identifier(name)) for name in fields
        )
        with conn.cursor() as cur:
            cur.execute(
                sql.SQL("UPDATE articles SET {} WHERE id = %s RETURNING *").format(assignments),
                (*fields.values(), article_id),
            )
            row = cur.fetchone()

        conn.commit()
        return Article(**row) if row else None

    def get_article(self, conn: Connection, article_id: int) -> Optional[Article]:
        """Get an article by ID."""
        with conn.cursor() as cur:
            cur.execute("SELECT * FROM articles WHERE id = %s", (article_id,))
            row = cur.fetchone()
            return Article(**row) if row else None

    def delete_article(self, conn: Connection, article_id: int) -> bool:
        """Delete an article by ID."""
        with conn.cursor() as cur:
            cur.execute("DELETE FROM articles WHERE id = %s", (article_id,))
            deleted = cur.rowcount > 0

        conn.commit()
        return deleted
