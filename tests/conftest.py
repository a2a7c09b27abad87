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


import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from database import Base, get_db
from main import app
import crud_ops
import models  # noqa: F401

ADMIN_EMAIL = "office@example.com"
ADMIN_PASSWORD = "s3cret"


@pytest.fixture()
def engine(tmp_path):
    engine = create_engine(f"sqlite:///{tmp_path / 'test.db'}", connect_args={"check_same_thread": False})
    Base.metadata.create_all(engine)
    yield engine
    Base.metadata.drop_all(engine)
    engine.dispose()


@pytest.fixture()
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture()
def db(session_factory):
    s = session_factory()
    yield s
    s.rollback(); s.close()


@pytest.fixture()
def client(session_factory):
    def override_get_db():
        s = session_factory()
        try:
            yield s
        finally:
            s.close()

    app.dependency_overrides[get_db] = override_get_db
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture()
def admin(db):
    return crud_ops.create_admin(db, ADMIN_EMAIL, ADMIN_PASSWORD, is_super_admin=True)


@pytest.fixture()
def admin_client(client, admin):
    r = client.post("/api/login", json={"email": ADMIN_EMAIL, "password": ADMIN_PASSWORD})
    assert r.status_code == 200
    return client


@pytest.fixture()
def school(db):
    """A session with one class holding two subjects and two students."""
    academic_session = crud_ops.create_session(db, "2025-26")
    school_class = crud_ops.create_class(db, "Class 10", academic_session.id)
    maths = crud_ops.create_subject(db, "Maths", school_class.id, max_marks=80, date="2025-03-01")
    science = crud_ops.create_subject(db, "Science", school_class.id, max_marks=20, date="2025-03-02")
    asha = crud_ops.create_student(db, "Asha", "101", school_class.id)
    ravi = crud_ops.create_student(db, "Ravi", "102", school_class.id, is_paid=True)
    return {
        "session": academic_session,
        "class": school_class,
        "subjects": [maths, science],
        "students": [asha, ravi],
    }
