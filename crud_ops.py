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
from sqlalchemy import func
from sqlalchemy.orm import Session, selectinload, joinedload
from passlib.context import CryptContext
from database import atomic
from exceptions import NotFoundError, ValidationError
from models import Admin, AcademicSession, SchoolClass, Student, Subject, Mark, Setting
from schemas import normalize_obtained, check_iso_date

logger = logging.getLogger(__name__)

# Configure argon2 for password hashing
pwd_context = CryptContext(schemes=["argon2"], deprecated="auto", argon2__rounds=10, argon2__memory_cost=1024, argon2__parallelism=2)


def get_password_hash(password):
    return pwd_context.hash(password)


def verify_password(plain_password, hashed_password):
    return pwd_context.verify(plain_password, hashed_password)


def _require(db: Session, model, entity_id: int, label: str):
    instance = db.get(model, entity_id)
    if instance is None:
        raise NotFoundError(label, entity_id)
    return instance


def _clean_obtained(obtained):
    try:
        return normalize_obtained(obtained)
    except ValueError as exc:
        raise ValidationError(str(exc))


def _clean_date(value):
    try:
        return check_iso_date(value)
    except ValueError as exc:
        raise ValidationError(str(exc))


# Admins

def get_admin_by_email(db: Session, email: str):
    return db.query(Admin).filter(Admin.email == email.strip().lower()).first()


def get_admin(db: Session, admin_id: int):
    return db.get(Admin, admin_id)


def create_admin(db: Session, email: str, password: str, is_super_admin: bool = False):
    email = email.strip().lower()
    if get_admin_by_email(db, email):
        raise ValidationError("An admin with this email already exists")
    with atomic(db):
        db_admin = Admin(email=email, password=get_password_hash(password), is_super_admin=is_super_admin)
        db.add(db_admin)
    db.refresh(db_admin)
    logger.info("Created admin %s", email)
    return db_admin


def authenticate_admin(db: Session, email: str, password: str):
    """Return the admin for valid credentials, otherwise None."""
    admin = get_admin_by_email(db, email)
    if not admin:
        return None
    if not verify_password(password, admin.password):
        return None
    return admin


# Sessions

def get_sessions(db: Session):
    return db.query(AcademicSession).order_by(AcademicSession.id).all()


def get_session(db: Session, session_id: int):
    return db.get(AcademicSession, session_id)


def create_session(db: Session, name: str):
    with atomic(db):
        db_session = AcademicSession(name=name)
        db.add(db_session)
    db.refresh(db_session)
    logger.info("Created session %s (%s)", db_session.id, name)
    return db_session


def update_session(db: Session, session_id: int, name: str = None):
    with atomic(db):
        db_session = _require(db, AcademicSession, session_id, "Session")
        if name is not None:
            db_session.name = name
    db.refresh(db_session)
    return db_session


def delete_session(db: Session, session_id: int):
    with atomic(db):
        _require(db, AcademicSession, session_id, "Session")
        class_ids = [row.id for row in db.query(SchoolClass.id).filter(SchoolClass.session_id == session_id)]
        for class_id in class_ids:
            _delete_class(db, class_id)
        db.query(AcademicSession).filter(AcademicSession.id == session_id).delete(synchronize_session=False)
    logger.info("Deleted session %s with %d classes", session_id, len(class_ids))


# Classes

def get_classes(db: Session, session_id: int = None):
    query = db.query(SchoolClass)
    if session_id is not None:
        query = query.filter(SchoolClass.session_id == session_id)
    return query.order_by(SchoolClass.id).all()


def get_class(db: Session, class_id: int):
    return db.get(SchoolClass, class_id)


def create_class(db: Session, name: str, session_id: int):
    with atomic(db):
        _require(db, AcademicSession, session_id, "Session")
        db_class = SchoolClass(name=name, session_id=session_id)
        db.add(db_class)
    db.refresh(db_class)
    logger.info("Created class %s (%s) in session %s", db_class.id, name, session_id)
    return db_class


def update_class(db: Session, class_id: int, name: str = None, session_id: int = None):
    with atomic(db):
        db_class = _require(db, SchoolClass, class_id, "Class")
        if name is not None:
            db_class.name = name
        if session_id is not None and session_id != db_class.session_id:
            _require(db, AcademicSession, session_id, "Session")
            db_class.session_id = session_id
    db.refresh(db_class)
    return db_class


def _delete_class(db: Session, class_id: int):
    student_ids = [row.id for row in db.query(Student.id).filter(Student.class_id == class_id)]
    for student_id in student_ids:
        _delete_student(db, student_id)
    subject_ids = [row.id for row in db.query(Subject.id).filter(Subject.class_id == class_id)]
    for subject_id in subject_ids:
        _delete_subject(db, subject_id)
    db.query(SchoolClass).filter(SchoolClass.id == class_id).delete(synchronize_session=False)


def delete_class(db: Session, class_id: int):
    with atomic(db):
        _require(db, SchoolClass, class_id, "Class")
        _delete_class(db, class_id)
    logger.info("Deleted class %s", class_id)


# Students

def _student_query(db: Session):
    return db.query(Student).options(selectinload(Student.marks).joinedload(Mark.subject))


def get_students(db: Session, class_id: int = None):
    query = _student_query(db)
    if class_id is not None:
        query = query.filter(Student.class_id == class_id)
    return query.order_by(Student.id).all()


def get_student(db: Session, student_id: int):
    return _student_query(db).filter(Student.id == student_id).first()


def _add_zero_marks_for_student(db: Session, student: Student):
    subjects = db.query(Subject).filter(Subject.class_id == student.class_id).order_by(Subject.id).all()
    for subject in subjects:
        db.add(Mark(student_id=student.id, subject_id=subject.id, obtained="0"))
    db.flush()
    return len(subjects)


def create_student(db: Session, name: str, roll_no: str, class_id: int, is_paid: bool = False):
    """Insert a student and a zero mark for every subject of its class."""
    with atomic(db):
        _require(db, SchoolClass, class_id, "Class")
        db_student = Student(name=name, roll_no=roll_no, class_id=class_id, is_paid=is_paid)
        db.add(db_student)
        db.flush()
        created = _add_zero_marks_for_student(db, db_student)
    db.refresh(db_student)
    logger.info("Created student %s in class %s with %d marks", db_student.id, class_id, created)
    return db_student


def update_student(db: Session, student_id: int, changes: dict):
    """Apply a partial update.

    Moving a student to another class replaces its marks with zero marks for
    the subjects of the new class.
    """
    with atomic(db):
        db_student = _require(db, Student, student_id, "Student")
        new_class_id = changes.get("class_id")
        for field in ("name", "roll_no", "is_paid"):
            if changes.get(field) is not None:
                setattr(db_student, field, changes[field])
        if new_class_id is not None and new_class_id != db_student.class_id:
            _require(db, SchoolClass, new_class_id, "Class")
            db.query(Mark).filter(Mark.student_id == student_id).delete(synchronize_session=False)
            db_student.class_id = new_class_id
            db.flush()
            _add_zero_marks_for_student(db, db_student)
    return get_student(db, student_id)


def _delete_student(db: Session, student_id: int):
    db.query(Mark).filter(Mark.student_id == student_id).delete(synchronize_session=False)
    db.query(Student).filter(Student.id == student_id).delete(synchronize_session=False)


def delete_student(db: Session, student_id: int):
    with atomic(db):
        _require(db, Student, student_id, "Student")
        _delete_student(db, student_id)
    logger.info("Deleted student %s", student_id)


# Subjects

def get_subjects(db: Session, class_id: int = None):
    query = db.query(Subject)
    if class_id is not None:
        query = query.filter(Subject.class_id == class_id)
    return query.order_by(Subject.id).all()


def get_subject(db: Session, subject_id: int):
    return db.get(Subject, subject_id)


def get_subject_by_name(db: Session, class_id: int, name: str):
    return db.query(Subject).filter(
        Subject.class_id == class_id,
        func.lower(Subject.name) == name.strip().lower()
    ).first()


def _add_zero_marks_for_subject(db: Session, subject: Subject):
    students = db.query(Student).filter(Student.class_id == subject.class_id).order_by(Student.id).all()
    for student in students:
        db.add(Mark(student_id=student.id, subject_id=subject.id, obtained="0"))
    db.flush()
    return len(students)


def _insert_subject(db: Session, name: str, max_marks: int, date: str, class_id: int):
    db_subject = Subject(name=name, max_marks=max_marks, date=date, class_id=class_id)
    db.add(db_subject)
    db.flush()
    created = _add_zero_marks_for_subject(db, db_subject)
    logger.info("Created subject %s in class %s with %d marks", db_subject.id, class_id, created)
    return db_subject


def create_subject(db: Session, name: str, class_id: int, max_marks: int = 100, date: str = None):
    """Insert a subject and a zero mark for every student of its class."""
    date = _clean_date(date)
    with atomic(db):
        _require(db, SchoolClass, class_id, "Class")
        db_subject = _insert_subject(db, name, max_marks, date, class_id)
    db.refresh(db_subject)
    return db_subject


def update_subject(db: Session, subject_id: int, changes: dict):
    with atomic(db):
        db_subject = _require(db, Subject, subject_id, "Subject")
        for field in ("name", "max_marks"):
            if changes.get(field) is not None:
                setattr(db_subject, field, changes[field])
        if "date" in changes:
            db_subject.date = _clean_date(changes["date"])
        new_class_id = changes.get("class_id")
        if new_class_id is not None and new_class_id != db_subject.class_id:
            _require(db, SchoolClass, new_class_id, "Class")
            db.query(Mark).filter(Mark.subject_id == subject_id).delete(synchronize_session=False)
            db_subject.class_id = new_class_id
            db.flush()
            _add_zero_marks_for_subject(db, db_subject)
    db.refresh(db_subject)
    return db_subject


def _delete_subject(db: Session, subject_id: int):
    db.query(Mark).filter(Mark.subject_id == subject_id).delete(synchronize_session=False)
    db.query(Subject).filter(Subject.id == subject_id).delete(synchronize_session=False)


def delete_subject(db: Session, subject_id: int):
    with atomic(db):
        _require(db, Subject, subject_id, "Subject")
        _delete_subject(db, subject_id)
    logger.info("Deleted subject %s", subject_id)


# Marks

def get_mark(db: Session, mark_id: int):
    return db.get(Mark, mark_id)


def get_marks_for_student(db: Session, student_id: int):
    return db.query(Mark).options(joinedload(Mark.subject)).filter(Mark.student_id == student_id).order_by(Mark.id).all()


def _upsert_mark(db: Session, student_id: int, subject_id: int, obtained):
    obtained = _clean_obtained(obtained)
    student = _require(db, Student, student_id, "Student")
    subject = _require(db, Subject, subject_id, "Subject")
    if student.class_id != subject.class_id:
        raise ValidationError("Student and subject belong to different classes")

    mark = db.query(Mark).filter(Mark.student_id == student_id, Mark.subject_id == subject_id).first()
    if mark:
        mark.obtained = obtained
    else:
        mark = Mark(student_id=student_id, subject_id=subject_id, obtained=obtained)
        db.add(mark)
    db.flush()
    return mark


def update_mark(db: Session, student_id: int, subject_id: int, obtained):
    """Set the obtained score for a student and subject, inserting the row if needed."""
    with atomic(db):
        mark = _upsert_mark(db, student_id, subject_id, obtained)
    db.refresh(mark)
    return mark


def delete_mark(db: Session, mark_id: int):
    with atomic(db):
        _require(db, Mark, mark_id, "Mark")
        db.query(Mark).filter(Mark.id == mark_id).delete(synchronize_session=False)


def save_student_marks(db: Session, student_id: int, entries):
    """Apply every marksheet row for a student in one transaction.

    Rows carrying an ``id`` edit that mark and its subject. Rows without one
    are matched to a subject of the student's class by name, creating the
    subject when none exists. Rows with a blank subject name are skipped.
    """
    with atomic(db):
        student = _require(db, Student, student_id, "Student")
        for entry in entries:
            name = (entry.subject or "").strip()
            if not name:
                continue

            if entry.id is not None:
                mark = db.query(Mark).filter(Mark.id == entry.id, Mark.student_id == student_id).first()
                if not mark:
                    raise NotFoundError("Mark", entry.id)
                subject = mark.subject
                if subject.name != name:
                    subject.name = name
                if subject.max_marks != entry.max:
                    subject.max_marks = entry.max
                if entry.date and subject.date != entry.date:
                    subject.date = _clean_date(entry.date)
            else:
                subject = get_subject_by_name(db, student.class_id, name)
                if subject is None:
                    subject = _insert_subject(db, name, entry.max, _clean_date(entry.date), student.class_id)

            _upsert_mark(db, student_id, subject.id, entry.obtained)
    logger.info("Saved %d marksheet rows for student %s", len(entries), student_id)
    return get_student(db, student_id)


# Settings

def get_setting(db: Session, key: str):
    setting = db.query(Setting).filter(Setting.key == key).first()
    # Empty values read back as unset
    return setting.value if setting and setting.value else None


def get_settings(db: Session, keys):
    rows = db.query(Setting).filter(Setting.key.in_(list(keys))).all()
    return {row.key: row.value for row in rows if row.value}


def set_setting(db: Session, key: str, value: str):
    with atomic(db):
        setting = db.query(Setting).filter(Setting.key == key).first()
        if setting:
            setting.value = value
        else:
            db.add(Setting(key=key, value=value))
    logger.info("Setting %s updated", key)
