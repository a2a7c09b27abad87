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


from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.orm import Session
from typing import List, Optional
from database import get_db
from exceptions import NotFoundError
from marksheet import build_marksheet
from router_auth import clean_text as _clean, require_admin, require_super_admin
import crud_ops
import schemas

router = APIRouter(prefix="/api")


def _clean_changes(model):
    return {key: _clean(value) for key, value in model.model_dump(exclude_unset=True).items()}


# Settings

@router.get("/settings/{key}", response_model=schemas.SettingValue)
def read_setting(key: str, db: Session = Depends(get_db)):
    return {"value": crud_ops.get_setting(db, key)}


@router.post("/settings", response_model=schemas.SettingValue, dependencies=[Depends(require_admin)])
def write_setting(payload: schemas.SettingUpdate, db: Session = Depends(get_db)):
    value = _clean(payload.value)
    crud_ops.set_setting(db, _clean(payload.key), value)
    return {"value": value}


# Sessions

@router.get("/sessions", response_model=List[schemas.Session])
def list_sessions(db: Session = Depends(get_db)):
    return crud_ops.get_sessions(db)


@router.get("/sessions/{session_id}", response_model=schemas.Session)
def read_session(session_id: int, db: Session = Depends(get_db)):
    db_session = crud_ops.get_session(db, session_id)
    if not db_session:
        raise NotFoundError("Session", session_id)
    return db_session


@router.post("/sessions", response_model=schemas.Session, status_code=status.HTTP_201_CREATED,
             dependencies=[Depends(require_admin)])
def add_session(payload: schemas.SessionCreate, db: Session = Depends(get_db)):
    return crud_ops.create_session(db, _clean(payload.name))


@router.patch("/sessions/{session_id}", response_model=schemas.Session, dependencies=[Depends(require_admin)])
def edit_session(session_id: int, payload: schemas.SessionUpdate, db: Session = Depends(get_db)):
    return crud_ops.update_session(db, session_id, **_clean_changes(payload))


@router.delete("/sessions/{session_id}", status_code=status.HTTP_204_NO_CONTENT,
               dependencies=[Depends(require_admin)])
def remove_session(session_id: int, db: Session = Depends(get_db)):
    crud_ops.delete_session(db, session_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


# Classes

@router.get("/classes", response_model=List[schemas.SchoolClass])
def list_classes(session_id: Optional[int] = Query(default=None, alias="sessionId"), db: Session = Depends(get_db)):
    return crud_ops.get_classes(db, session_id)


@router.get("/classes/{class_id}", response_model=schemas.SchoolClass)
def read_class(class_id: int, db: Session = Depends(get_db)):
    db_class = crud_ops.get_class(db, class_id)
    if not db_class:
        raise NotFoundError("Class", class_id)
    return db_class


@router.post("/classes", response_model=schemas.SchoolClass, status_code=status.HTTP_201_CREATED,
             dependencies=[Depends(require_admin)])
def add_class(payload: schemas.ClassCreate, db: Session = Depends(get_db)):
    return crud_ops.create_class(db, _clean(payload.name), payload.session_id)


@router.patch("/classes/{class_id}", response_model=schemas.SchoolClass, dependencies=[Depends(require_admin)])
def edit_class(class_id: int, payload: schemas.ClassUpdate, db: Session = Depends(get_db)):
    return crud_ops.update_class(db, class_id, **_clean_changes(payload))


@router.delete("/classes/{class_id}", status_code=status.HTTP_204_NO_CONTENT,
               dependencies=[Depends(require_admin)])
def remove_class(class_id: int, db: Session = Depends(get_db)):
    crud_ops.delete_class(db, class_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


# Students

@router.get("/students", response_model=List[schemas.StudentWithMarks])
def list_students(class_id: Optional[int] = Query(default=None, alias="classId"), db: Session = Depends(get_db)):
    return crud_ops.get_students(db, class_id)


@router.get("/students/{student_id}", response_model=schemas.StudentWithMarks)
def read_student(student_id: int, db: Session = Depends(get_db)):
    student = crud_ops.get_student(db, student_id)
    if not student:
        raise NotFoundError("Student", student_id)
    return student


@router.get("/students/{student_id}/marksheet", response_model=schemas.Marksheet)
def read_marksheet(student_id: int, db: Session = Depends(get_db)):
    student = crud_ops.get_student(db, student_id)
    if not student:
        raise NotFoundError("Student", student_id)
    summary = build_marksheet(student)
    return {
        "student": student,
        "total_obtained": summary.total_obtained,
        "total_max": summary.total_max,
        "percentage": summary.percentage,
        "status": summary.status,
    }


@router.post("/students", response_model=schemas.Student, status_code=status.HTTP_201_CREATED,
             dependencies=[Depends(require_admin)])
def add_student(payload: schemas.StudentCreate, db: Session = Depends(get_db)):
    return crud_ops.create_student(db, _clean(payload.name), _clean(payload.roll_no), payload.class_id, payload.is_paid)


@router.patch("/students/{student_id}", response_model=schemas.StudentWithMarks,
              dependencies=[Depends(require_admin)])
def edit_student(student_id: int, payload: schemas.StudentUpdate, db: Session = Depends(get_db)):
    return crud_ops.update_student(db, student_id, _clean_changes(payload))


@router.delete("/students/{student_id}", status_code=status.HTTP_204_NO_CONTENT,
               dependencies=[Depends(require_admin)])
def remove_student(student_id: int, db: Session = Depends(get_db)):
    crud_ops.delete_student(db, student_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post("/students/{student_id}/marks", response_model=schemas.StudentWithMarks,
             dependencies=[Depends(require_admin)])
def save_marks(student_id: int, entries: List[schemas.MarkEntry], db: Session = Depends(get_db)):
    for entry in entries:
        entry.subject = _clean(entry.subject)
    return crud_ops.save_student_marks(db, student_id, entries)


# Subjects

@router.get("/subjects", response_model=List[schemas.Subject])
def list_subjects(class_id: Optional[int] = Query(default=None, alias="classId"), db: Session = Depends(get_db)):
    return crud_ops.get_subjects(db, class_id)


@router.post("/subjects", response_model=schemas.Subject, status_code=status.HTTP_201_CREATED,
             dependencies=[Depends(require_admin)])
def add_subject(payload: schemas.SubjectCreate, db: Session = Depends(get_db)):
    return crud_ops.create_subject(db, _clean(payload.name), payload.class_id, payload.max_marks, payload.date)


@router.patch("/subjects/{subject_id}", response_model=schemas.Subject, dependencies=[Depends(require_admin)])
def edit_subject(subject_id: int, payload: schemas.SubjectUpdate, db: Session = Depends(get_db)):
    return crud_ops.update_subject(db, subject_id, _clean_changes(payload))


@router.delete("/subjects/{subject_id}", status_code=status.HTTP_204_NO_CONTENT,
               dependencies=[Depends(require_admin)])
def remove_subject(subject_id: int, db: Session = Depends(get_db)):
    crud_ops.delete_subject(db, subject_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


# Marks

@router.get("/marks/{mark_id}", response_model=schemas.MarkWithSubject)
def read_mark(mark_id: int, db: Session = Depends(get_db)):
    mark = crud_ops.get_mark(db, mark_id)
    if not mark:
        raise NotFoundError("Mark", mark_id)
    return mark


@router.put("/marks", response_model=schemas.Mark, dependencies=[Depends(require_admin)])
def upsert_mark(payload: schemas.MarkUpdate, db: Session = Depends(get_db)):
    return crud_ops.update_mark(db, payload.student_id, payload.subject_id, payload.obtained)


@router.delete("/marks/{mark_id}", status_code=status.HTTP_204_NO_CONTENT,
               dependencies=[Depends(require_admin)])
def remove_mark(mark_id: int, db: Session = Depends(get_db)):
    crud_ops.delete_mark(db, mark_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


# Admins

@router.post("/admins", response_model=schemas.Admin, status_code=status.HTTP_201_CREATED,
             dependencies=[Depends(require_super_admin)])
def add_admin(payload: schemas.AdminCreate, db: Session = Depends(get_db)):
    return crud_ops.create_admin(db, _clean(payload.email), payload.password)
