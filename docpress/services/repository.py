"""Postgres storage for published posts (psycopg + SQL).

Posts are keyed on ``slug``: inserting a slug that already exists is a no-op
and reports "already published" instead of failing.
"""

from typing import Iterable, Optional

import psycopg
from psycopg.conninfo import make_conninfo

from docpress.config import Settings
from docpress.errors import PersistenceError
from docpress.models.post import InsertedPost, PostRecord

SCHEMA_STATEMENTS: list[str] = [
    """
    CREATE TABLE IF NOT EXISTS blogs (
      id BIGSERIAL PRIMARY KEY,
      title TEXT NOT NULL,
      slug TEXT NOT NULL UNIQUE,
      category TEXT,
      excerpt TEXT,
      content TEXT NOT NULL,
      image TEXT,
      meta_title TEXT NOT NULL,
      meta_description TEXT,
      keywords TEXT,
      author TEXT,
      image_title TEXT,
      created_at TIMESTAMPTZ NOT NULL DEFAULT now()
    );
    """,
]

INSERT_POST_SQL = """
    INSERT INTO blogs (
      title, slug, category, excerpt, content, image, meta_title,
      meta_description, keywords, author, image_title
    )
    VALUES (
      %(title)s, %(slug)s, %(category)s, %(excerpt)s, %(content)s, %(image)s, %(meta_title)s,
      %(meta_description)s, %(keywords)s, %(author)s, %(image_title)s
    )
    ON CONFLICT (slug) DO NOTHING
    RETURNING id, slug
"""


def dsn_from_settings(settings: Settings) -> str:
    return make_conninfo(
        host=settings.DB_HOST,
        port=settings.DB_PORT,
        dbname=settings.DB_DATABASE,
        user=settings.DB_USER,
        password=settings.DB_PASSWORD or None,
    )


class PostRepository:
    def __init__(self, pg_dsn: str):
        self.pg_dsn = pg_dsn

    @classmethod
    def from_settings(cls, settings: Settings) -> "PostRepository":
        return cls(dsn_from_settings(settings))

    def check_connection(self) -> None:
        """Raise :class:`PersistenceError` when the database is unreachable."""
        try:
            with psycopg.connect(self.pg_dsn, autocommit=True) as conn:
                conn.execute("SELECT 1")
        except psycopg.Error as exc:
            raise PersistenceError(f"Database connection failed: {exc}") from exc

    def ensure_schema(self, *, statements: Optional[Iterable[str]] = None) -> None:
        """Create the ``blogs`` table if it does not exist yet."""
        stmts = list(statements) if statements is not None else SCHEMA_STATEMENTS
        try:
            with psycopg.connect(self.pg_dsn, autocommit=True) as conn:
                with conn.cursor() as cur:
                    for s in stmts:
                        cur.execute(s)
        except psycopg.Error as exc:
            raise PersistenceError(f"Schema creation failed: {exc}") from exc

    def insert_post(self, record: PostRecord) -> Optional[InsertedPost]:
        """Insert *record*; return *None* when its slug is already published."""
        try:
            with psycopg.connect(self.pg_dsn, autocommit=True) as conn:
                with conn.cursor() as cur:
                    cur.execute(INSERT_POST_SQL, record.model_dump())
                    row = cur.fetchone()
        except psycopg.Error as exc:
            raise PersistenceError(f"Could not save post {record.slug!r}: {exc}") from exc

        if row is None:
            return None
        return InsertedPost(id=row[0], slug=row[1])
