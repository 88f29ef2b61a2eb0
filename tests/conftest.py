import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from app.db import Base, enable_sqlite_transactions, get_db
from app.main import app


@pytest.fixture
def engine():
    eng = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    enable_sqlite_transactions(eng)
    Base.metadata.create_all(eng)
    yield eng
    eng.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(bind=engine, autoflush=False, autocommit=False)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def add(db):
    def _add(*objs):
        for obj in objs:
            db.add(obj)
        db.commit()
        return objs[0] if len(objs) == 1 else objs

    return _add


@pytest.fixture
def seed(session_factory):
    """Insert rows through a short-lived session and return their ids."""

    def _seed(*objs):
        ids = [obj.id for obj in objs]
        session = session_factory()
        try:
            session.add_all(objs)
            session.commit()
        finally:
            session.close()
        return ids[0] if len(ids) == 1 else ids

    return _seed


@pytest.fixture
def client(session_factory):
    def _get_test_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = _get_test_db
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


@pytest.fixture
def file_session_factory(tmp_path):
    """
    Separate connections on one SQLite file; BEGIN IMMEDIATE makes writers
    queue on the database lock the way row locks queue them on PostgreSQL.
    """
    eng = create_engine(
        f"sqlite:///{tmp_path / 'ledger.db'}",
        connect_args={"check_same_thread": False, "timeout": 30},
    )
    enable_sqlite_transactions(eng, begin_statement="BEGIN IMMEDIATE")
    Base.metadata.create_all(eng)
    yield sessionmaker(bind=eng, autoflush=False, autocommit=False)
    eng.dispose()
