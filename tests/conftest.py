"""Shared fixtures: an in-memory SQLite store and a client bound to it."""

from contextlib import contextmanager

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import event
from sqlalchemy.exc import OperationalError
from sqlalchemy.pool import StaticPool

from order_service.infrastructure.db import Database
from order_service.main import create_app


@pytest.fixture
def database():
    db = Database(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    db.init_models()
    yield db
    db.dispose()


@pytest.fixture
def client(database):
    app = create_app(database=database)
    with TestClient(app) as client:
        yield client


@pytest.fixture
def session(database):
    db = database.SessionLocal()
    try:
        yield db
    finally:
        db.close()


@contextmanager
def failing_statement(engine, prefix: str):
    """Make every statement starting with ``prefix`` fail with OperationalError."""

    def _fail(conn, cursor, statement, parameters, context, executemany):
        if statement.lstrip().upper().startswith(prefix.upper()):
            raise OperationalError(statement, parameters, Exception("injected failure"))

    event.listen(engine, "before_cursor_execute", _fail)
    try:
        yield
    finally:
        event.remove(engine, "before_cursor_execute", _fail)


@contextmanager
def recorded_statements(engine):
    statements = []

    def _record(conn, cursor, statement, parameters, context, executemany):
        statements.append(statement)

    event.listen(engine, "before_cursor_execute", _record)
    try:
        yield statements
    finally:
        event.remove(engine, "before_cursor_execute", _record)


@pytest.fixture
def fail_on(database):
    """``with fail_on("INSERT INTO items"): ...``"""
    return lambda prefix: failing_statement(database.engine, prefix)


@pytest.fixture
def statements(database):
    with recorded_statements(database.engine) as recorded:
        yield recorded
