# ResultSheet - Student results manager
# Copyright (C) 2026 (linuxdev)
#
# This program is free software: you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation, either version 3 of the License, or
# (at your option) any later version.
#
# This program is distributed in the hope that it will be useful,
# but WITHOUT ANY WARRANTY; without even the implied warranty of
# MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE.  See the
# GNU General Public License for more details.
#
# You should have received a copy of the GNU General Public License
# along with this program.  If not, see <https://www.gnu.org/licenses/>.


import logging
from contextlib import contextmanager
from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.exc import IntegrityError, OperationalError
from sqlalchemy.orm import sessionmaker, declarative_base, Session
from config import settings
from exceptions import TransientStoreError, ValidationError

logger = logging.getLogger(__name__)

Base = declarative_base()


def make_engine(url):
    connect_args = {}
    if url.startswith("sqlite"):
        connect_args["check_same_thread"] = False
    return create_engine(url, connect_args=connect_args)


@event.listens_for(Engine, "connect")
def _enable_sqlite_foreign_keys(dbapi_connection, connection_record):
    # SQLite ignores ON DELETE CASCADE unless this is set per connection
    if type(dbapi_connection).__module__.startswith("sqlite3"):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()


engine = make_engine(settings.database_url)
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


@contextmanager
def atomic(db: Session):
    """Run a block of writes as one transaction.

    Commits on success. Any failure rolls back everything done inside the
    block; lost connections are reported as TransientStoreError.
    """
    try:
        yield db
        db.commit()
    except OperationalError as exc:
        db.rollback()
        logger.error("Database unavailable: %s", exc)
        raise TransientStoreError("Database is temporarily unavailable") from exc
    except IntegrityError as exc:
        db.rollback()
        logger.warning("Rejected conflicting write: %s", exc.orig)
        raise ValidationError("Conflicting write, please reload and try again") from exc
    except Exception:
        db.rollback()
        raise
