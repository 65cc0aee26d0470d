"""
Query Executor
==============

Thin wrapper over a SQLAlchemy engine (and its connection pool).
Statements are plain SQL with named ``:param`` placeholders; rows come back
as dicts. ``transaction()`` scopes several statements to one pooled
connection and commits or rolls back as a unit.
"""

import os
from sqlalchemy import create_engine, event, text
from sqlalchemy.engine import make_url


def _enable_sqlite_foreign_keys(dbapi_connection, connection_record):
    """SQLite only enforces ON DELETE CASCADE when asked to, per connection"""
    cursor = dbapi_connection.cursor()
    cursor.execute('PRAGMA foreign_keys=ON')
    cursor.close()


class ConnectionExecutor:
    """Runs statements on one already checked-out connection"""

    def __init__(self, connection):
        self.connection = connection

    def run(self, statement, params=None):
        result = self.connection.execute(text(statement), params or {})
        if not result.returns_rows:
            return []
        return [dict(row) for row in result.mappings()]

    def run_one(self, statement, params=None):
        result = self.connection.execute(text(statement), params or {})
        row = result.mappings().first()
        return dict(row) if row else None

    def run_many(self, statement, param_list):
        """Execute one statement for every parameter set (bulk insert)"""
        param_list = list(param_list)
        if not param_list:
            return 0
        result = self.connection.execute(text(statement), param_list)
        return result.rowcount

    def run_insert(self, statement, params=None):
        """Execute an INSERT and return the new row id"""
        result = self.connection.execute(text(statement), params or {})
        return result.lastrowid

    def run_write(self, statement, params=None):
        """Execute an UPDATE/DELETE and return the affected row count"""
        result = self.connection.execute(text(statement), params or {})
        return result.rowcount


class Database:
    """Pool-backed executor shared by all repositories of one app"""

    def __init__(self, url, **engine_options):
        self.url = make_url(url)

        if self.url.get_backend_name() == 'sqlite' and self.url.database not in (None, '', ':memory:'):
            db_dir = os.path.dirname(os.path.abspath(self.url.database))
            os.makedirs(db_dir, exist_ok=True)

        self.engine = create_engine(self.url, **engine_options)
        if self.engine.dialect.name == 'sqlite':
            event.listen(self.engine, 'connect', _enable_sqlite_foreign_keys)

    def run(self, statement, params=None):
        with self.engine.begin() as conn:
            return ConnectionExecutor(conn).run(statement, params)

    def run_one(self, statement, params=None):
        with self.engine.begin() as conn:
            return ConnectionExecutor(conn).run_one(statement, params)

    def run_many(self, statement, param_list):
        with self.engine.begin() as conn:
            return ConnectionExecutor(conn).run_many(statement, param_list)

    def run_write(self, statement, params=None):
        with self.engine.begin() as conn:
            return ConnectionExecutor(conn).run_write(statement, params)

    def transaction(self, work):
        """
        Run ``work(executor)`` inside one transaction on one connection.

        Commits when ``work`` returns, rolls back and re-raises on any
        exception. The connection goes back to the pool on every path.
        """
        conn = self.engine.connect()
        trans = conn.begin()
        try:
            result = work(ConnectionExecutor(conn))
            trans.commit()
            return result
        except Exception:
            if trans.is_active:
                trans.rollback()
            raise
        finally:
            conn.close()

    def init_schema(self, statements):
        """Create tables and indexes; statements must be idempotent"""
        with self.engine.begin() as conn:
            for statement in statements:
                conn.execute(text(statement))

    def dispose(self):
        self.engine.dispose()
