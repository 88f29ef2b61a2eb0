import logging
import urllib.parse
from contextlib import contextmanager

from fastapi import HTTPException
from sqlalchemy import create_engine, event
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker, declarative_base

from app.errors import TransactionFailure
from app.settings import DATABASE_URL as _RAW_DATABASE_URL

logger = logging.getLogger(__name__)


def normalize_database_url(url: str) -> str:
    # sqlite paths have no netloc; a urlparse round trip would drop the "//"
    if url.startswith("sqlite"):
        return url
    # Ensure proper encoding by parsing and reconstructing the URL
    try:
        return urllib.parse.urlunparse(urllib.parse.urlparse(url))
    except ValueError:
        return url.encode("utf-8", errors="replace").decode("utf-8")


def enable_sqlite_transactions(engine, begin_statement="BEGIN"):
    """
    pysqlite defers BEGIN until the first write, so a SAVEPOINT opened before
    it would RELEASE straight into the database. Hand BEGIN to SQLAlchemy.
    """

    @event.listens_for(engine, "connect")
    def _on_connect(dbapi_connection, connection_record):
        dbapi_connection.isolation_level = None

    @event.listens_for(engine, "begin")
    def _on_begin(conn):
        conn.exec_driver_sql(begin_statement)

    return engine


def create_db_engine(url: str):
    connect_args = {}
    if url.startswith("postgres"):
        connect_args = {"options": "-c timezone=utc"}
    elif url.startswith("sqlite"):
        connect_args = {"check_same_thread": False}

    eng = create_engine(url, connect_args=connect_args)
    if url.startswith("sqlite"):
        enable_sqlite_transactions(eng)
    return eng


DATABASE_URL = normalize_database_url(_RAW_DATABASE_URL)
engine = create_db_engine(DATABASE_URL)

SessionLocal = sessionmaker(bind=engine, autoflush=False, autocommit=False)
Base = declarative_base()


def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


@contextmanager
def atomic(db: Session):
    """
    Unit of work for one ledger operation.

    Everything flushed inside the block commits together. Any exception rolls
    the whole transaction back; storage errors surface as TransactionFailure.
    """
    try:
        yield db
        db.commit()
    except HTTPException:
        db.rollback()
        raise
    except SQLAlchemyError as e:
        db.rollback()
        logger.exception("ledger transaction rolled back", extra={"error": str(e)})
        raise TransactionFailure(str(e)) from e
    except Exception:
        db.rollback()
        raise
