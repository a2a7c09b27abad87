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


import os
from fastapi import APIRouter, Depends, Request
from fastapi.templating import Jinja2Templates
from sqlalchemy.orm import Session
from config import settings, DEFAULT_BRANDING
from database import get_db
from exceptions import NotFoundError
from marksheet import build_marksheet
from router_auth import get_current_admin
import crud_ops

router = APIRouter()
templates = Jinja2Templates(directory=os.path.join(os.path.dirname(__file__), "templates"))


def branding(db: Session):
    """Settings shown in page headers, with defaults for unset keys."""
    values = dict(DEFAULT_BRANDING)
    values.update(crud_ops.get_settings(db, DEFAULT_BRANDING.keys()))
    return values


def render(request: Request, db: Session, admin, name: str, context: dict):
    page = {"branding": branding(db), "current_admin": admin, "is_admin": admin is not None}
    page.update(context)
    return templates.TemplateResponse(request, name, page)


@router.get("/")
def home(request: Request, db: Session = Depends(get_db), admin=Depends(get_current_admin)):
    return render(request, db, admin, "landing.html", {})


@router.get("/sessions")
def sessions_page(request: Request, db: Session = Depends(get_db), admin=Depends(get_current_admin)):
    return render(request, db, admin, "sessions.html", {"sessions": crud_ops.get_sessions(db)})


@router.get("/sessions/{session_id}")
def session_page(session_id: int, request: Request, db: Session = Depends(get_db),
                 admin=Depends(get_current_admin)):
    academic_session = crud_ops.get_session(db, session_id)
    if not academic_session:
        raise NotFoundError("Session", session_id)

    return render(request, db, admin, "session.html", {
        "academic_session": academic_session,
        "classes": crud_ops.get_classes(db, session_id),
    })


@router.get("/classes/{class_id}")
def class_page(class_id: int, request: Request, db: Session = Depends(get_db), admin=Depends(get_current_admin)):
    school_class = crud_ops.get_class(db, class_id)
    if not school_class:
        raise NotFoundError("Class", class_id)

    return render(request, db, admin, "class.html", {
        "school_class": school_class,
        "students": crud_ops.get_students(db, class_id),
        "subjects": crud_ops.get_subjects(db, class_id),
    })


@router.get("/students/{student_id}")
def marksheet_page(student_id: int, request: Request, db: Session = Depends(get_db),
                   admin=Depends(get_current_admin)):
    student = crud_ops.get_student(db, student_id)
    if not student:
        raise NotFoundError("Student", student_id)

    if settings.lock_unpaid_results and not student.is_paid and admin is None:
        return render(request, db, admin, "locked.html", {"student": student})

    return render(request, db, admin, "marksheet.html", {
        "student": student,
        "summary": build_marksheet(student),
    })
