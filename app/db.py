from flask_sqlalchemy import SQLAlchemy
from sqlalchemy import event, inspect, text
from contextlib import contextmanager
import logging
import time
from exceptions import DatabaseException
from utils import now_utc  # noqa: F401 - re-exported for the models

# Retrieve main logger
logger = logging.getLogger("main")

db = SQLAlchemy()


@contextmanager
def transaction(session=None):
    """
    Run a block of statements as one unit: commit when the block finishes,
    roll back and re-raise on any exception.

    The session is scoped to the app context, its connection goes back to
    the pool on commit/rollback and the session itself is removed at teardown.
    """
    session = session or db.session
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise


def upsert(session, model, values, index_elements, update_columns):
    """INSERT ... ON CONFLICT DO UPDATE for the dialects we deploy on."""
    dialect = session.get_bind().dialect.name
    if dialect == "postgresql":
        from sqlalchemy.dialects.postgresql import insert
    elif dialect == "sqlite":
        from sqlalchemy.dialects.sqlite import insert
    else:
        raise DatabaseException(f"Upsert is not supported on {dialect}")

    stmt = insert(model.__table__).values(**values)
    stmt = stmt.on_conflict_do_update(
        index_elements=index_elements,
        set_={column: stmt.excluded[column] for column in update_columns},
    )
    return session.execute(stmt)


def _register_query_timing(engine, slow_query_ms):
    from metrics import db_query_duration_seconds, db_slow_queries_total

    if event.contains(engine, "before_cursor_execute", _before_cursor_execute):
        return

    event.listen(engine, "before_cursor_execute", _before_cursor_execute)

    @event.listens_for(engine, "after_cursor_execute")
    def _after_cursor_execute(conn, cursor, statement, parameters, context, executemany):
        started = conn.info.get("query_start_time", [])
        if not started:
            return
        duration = time.perf_counter() - started.pop()
        operation = statement.lstrip().split(" ", 1)[0].upper()
        db_query_duration_seconds.labels(operation=operation).observe(duration)
        if duration * 1000 > slow_query_ms:
            db_slow_queries_total.inc()
            logger.warning(f"Slow query ({duration * 1000:.0f}ms): {statement[:200]}")


def _before_cursor_execute(conn, cursor, statement, parameters, context, executemany):
    conn.info.setdefault("query_start_time", []).append(time.perf_counter())


def _add_missing_columns(engine):
    """Add model columns that an older table does not have yet."""
    inspector = inspect(engine)
    with engine.connect() as conn:
        for table in db.metadata.sorted_tables:
            if not inspector.has_table(table.name):
                continue
            existing = {c["name"] for c in inspector.get_columns(table.name)}
            for column in table.columns:
                if column.name in existing:
                    continue
                col_type = column.type.compile(dialect=engine.dialect)
                logger.info(f"Adding missing column {column.name} to {table.name} table...")
                conn.execute(text(f"ALTER TABLE {table.name} ADD COLUMN {column.name} {col_type}"))
        conn.commit()


def init_db(app):
    import models  # noqa: F401 - registers the tables on db.metadata

    with app.app_context():
        @event.listens_for(db.engine, "connect")
        def set_sqlite_pragma(dbapi_connection, connection_record):
            import sqlite3
            if not isinstance(dbapi_connection, sqlite3.Connection):
                return

            cursor = dbapi_connection.cursor()
            cursor.execute("PRAGMA foreign_keys=ON;")
            cursor.execute("PRAGMA busy_timeout=30000;")
            cursor.close()

        _register_query_timing(db.engine, app.config.get("SLOW_QUERY_MS", 100))

        db.create_all()
        _add_missing_columns(db.engine)
        logger.info("Database schema is up to date.")
