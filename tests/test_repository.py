"""Tests for PostRepository with psycopg replaced by mocks."""

from unittest.mock import MagicMock, patch

import psycopg
import pytest

from docpress.config import Settings
from docpress.errors import PersistenceError
from docpress.models.post import InsertedPost, PostRecord
from docpress.services.repository import (
    INSERT_POST_SQL,
    SCHEMA_STATEMENTS,
    PostRepository,
    dsn_from_settings,
)

_RECORD = PostRecord(
    title="Online Prescriptions Explained Simply",
    slug="online-prescriptions",
    content="<p>Body.</p>",
    meta_title="Online Prescriptions | Medicly",
)


def _mock_connect(row=None):
    """A psycopg.connect replacement whose cursor returns *row*."""
    connect = MagicMock()
    conn = connect.return_value.__enter__.return_value
    cursor = conn.cursor.return_value.__enter__.return_value
    cursor.fetchone.return_value = row
    return connect, conn, cursor


class TestDsn:
    def test_settings_are_mapped(self):
        settings = Settings(
            DB_HOST="db.internal", DB_PORT=6543, DB_DATABASE="blog", DB_USER="writer", DB_PASSWORD="pw"
        )
        dsn = dsn_from_settings(settings)
        assert "host=db.internal" in dsn
        assert "port=6543" in dsn
        assert "dbname=blog" in dsn
        assert "user=writer" in dsn
        assert "password=pw" in dsn

    def test_empty_password_is_omitted(self):
        assert "password" not in dsn_from_settings(Settings(DB_PASSWORD=""))


class TestInsertPost:
    def test_new_slug_returns_inserted_row(self):
        connect, _conn, cursor = _mock_connect(row=(42, "online-prescriptions"))
        with patch("docpress.services.repository.psycopg.connect", connect):
            inserted = PostRepository("dbname=test").insert_post(_RECORD)

        assert inserted == InsertedPost(id=42, slug="online-prescriptions")
        sql, params = cursor.execute.call_args.args
        assert sql == INSERT_POST_SQL
        assert params["slug"] == "online-prescriptions"
        assert params["category"] is None
        connect.assert_called_once_with("dbname=test", autocommit=True)

    def test_existing_slug_returns_none(self):
        connect, _conn, _cursor = _mock_connect(row=None)
        with patch("docpress.services.repository.psycopg.connect", connect):
            assert PostRepository("dbname=test").insert_post(_RECORD) is None

    def test_insert_ignores_conflicting_slug(self):
        assert "ON CONFLICT (slug) DO NOTHING" in INSERT_POST_SQL

    def test_database_error_is_wrapped(self):
        connect = MagicMock(side_effect=psycopg.OperationalError("connection refused"))
        with patch("docpress.services.repository.psycopg.connect", connect):
            with pytest.raises(PersistenceError) as exc_info:
                PostRepository("dbname=test").insert_post(_RECORD)
        assert "online-prescriptions" in exc_info.value.message
        assert "connection refused" in exc_info.value.message


class TestSchemaAndConnection:
    def test_ensure_schema_runs_every_statement(self):
        connect, _conn, cursor = _mock_connect()
        with patch("docpress.services.repository.psycopg.connect", connect):
            PostRepository("dbname=test").ensure_schema()
        assert cursor.execute.call_count == len(SCHEMA_STATEMENTS)

    def test_slug_column_is_unique(self):
        assert "slug TEXT NOT NULL UNIQUE" in SCHEMA_STATEMENTS[0]

    def test_check_connection(self):
        connect, conn, _cursor = _mock_connect()
        with patch("docpress.services.repository.psycopg.connect", connect):
            PostRepository("dbname=test").check_connection()
        conn.execute.assert_called_once_with("SELECT 1")

    def test_check_connection_failure(self):
        connect = MagicMock(side_effect=psycopg.OperationalError("no route to host"))
        with patch("docpress.services.repository.psycopg.connect", connect):
            with pytest.raises(PersistenceError):
                PostRepository("dbname=test").check_connection()
