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
from sqlalchemy import func
import crud_ops
from exceptions import NotFoundError, ValidationError
from models import Mark, Student, Subject, SchoolClass, AcademicSession
from schemas import MarkEntry


def count(db, model, *criteria):
    return db.query(func.count(model.id)).filter(*criteria).scalar()


def test_create_student_adds_zero_mark_per_subject(db, school):
    new_student = crud_ops.create_student(db, "Meena", "103", school["class"].id)
    marks = crud_ops.get_marks_for_student(db, new_student.id)
    assert len(marks) == 2
    assert {m.subject_id for m in marks} == {s.id for s in school["subjects"]}
    assert all(m.obtained == "0" for m in marks)


def test_create_student_in_class_without_subjects(db, school):
    empty = crud_ops.create_class(db, "Class 9", school["session"].id)
    student = crud_ops.create_student(db, "Nobody", "1", empty.id)
    assert crud_ops.get_marks_for_student(db, student.id) == []


def test_create_subject_adds_zero_mark_per_student(db, school):
    subject = crud_ops.create_subject(db, "English", school["class"].id, max_marks=50)
    assert count(db, Mark, Mark.subject_id == subject.id) == 2
    assert count(db, Mark, Mark.subject_id == subject.id, Mark.obtained == "0") == 2


def test_create_student_for_unknown_class(db):
    with pytest.raises(NotFoundError):
        crud_ops.create_student(db, "Ghost", "0", 999)
    assert count(db, Student) == 0


def test_update_mark_is_idempotent(db, school):
    student, subject = school["students"][0], school["subjects"][0]
    crud_ops.update_mark(db, student.id, subject.id, "55")
    mark = crud_ops.update_mark(db, student.id, subject.id, "55")
    assert mark.obtained == "55"
    assert count(db, Mark, Mark.student_id == student.id, Mark.subject_id == subject.id) == 1


def test_update_mark_inserts_missing_row(db, school):
    student, subject = school["students"][0], school["subjects"][0]
    db.query(Mark).filter(Mark.student_id == student.id, Mark.subject_id == subject.id).delete()
    db.commit()
    mark = crud_ops.update_mark(db, student.id, subject.id, 12.5)
    assert mark.obtained == "12.5"
    assert count(db, Mark, Mark.student_id == student.id, Mark.subject_id == subject.id) == 1


def test_update_mark_rejects_non_numeric(db, school):
    student, subject = school["students"][0], school["subjects"][0]
    with pytest.raises(ValidationError):
        crud_ops.update_mark(db, student.id, subject.id, "forty")


def test_update_mark_rejects_subject_of_other_class(db, school):
    other = crud_ops.create_class(db, "Class 9", school["session"].id)
    foreign_subject = crud_ops.create_subject(db, "Art", other.id)
    with pytest.raises(ValidationError):
        crud_ops.update_mark(db, school["students"][0].id, foreign_subject.id, "5")


def test_update_mark_unknown_student(db, school):
    with pytest.raises(NotFoundError):
        crud_ops.update_mark(db, 999, school["subjects"][0].id, "5")


def test_get_student_includes_marks_with_subject(db, school):
    student = crud_ops.get_student(db, school["students"][0].id)
    assert [m.subject.name for m in student.marks] == ["Maths", "Science"]
    assert student.marks[0].subject.max_marks == 80


def test_delete_student_removes_marks(db, school):
    student_id = school["students"][0].id
    crud_ops.delete_student(db, student_id)
    assert crud_ops.get_student(db, student_id) is None
    assert count(db, Mark, Mark.student_id == student_id) == 0
    assert count(db, Mark) == 2


def test_delete_subject_removes_marks(db, school):
    subject_id = school["subjects"][0].id
    crud_ops.delete_subject(db, subject_id)
    assert crud_ops.get_subject(db, subject_id) is None
    assert count(db, Mark, Mark.subject_id == subject_id) == 0


def test_delete_class_cascades(db, school):
    other = crud_ops.create_class(db, "Class 9", school["session"].id)
    crud_ops.create_subject(db, "Art", other.id)
    crud_ops.create_student(db, "Kiran", "201", other.id)
    students_before = count(db, Student)
    subjects_before = count(db, Subject)

    crud_ops.delete_class(db, school["class"].id)

    assert count(db, Student) == students_before - 2
    assert count(db, Subject) == subjects_before - 2
    assert count(db, SchoolClass) == 1
    # only the other class's single mark remains
    assert count(db, Mark) == 1


def test_delete_session_cascades(db, school):
    crud_ops.delete_session(db, school["session"].id)
    assert count(db, AcademicSession) == 0
    assert count(db, SchoolClass) == 0
    assert count(db, Student) == 0
    assert count(db, Subject) == 0
    assert count(db, Mark) == 0


@pytest.mark.parametrize("delete", [
    crud_ops.delete_session,
    crud_ops.delete_class,
    crud_ops.delete_student,
    crud_ops.delete_subject,
    crud_ops.delete_mark,
])
def test_delete_missing_raises_not_found(db, delete):
    with pytest.raises(NotFoundError):
        delete(db, 12345)


def test_update_missing_raises_not_found(db):
    with pytest.raises(NotFoundError):
        crud_ops.update_student(db, 1, {"name": "x"})
    with pytest.raises(NotFoundError):
        crud_ops.update_subject(db, 1, {"name": "x"})
    with pytest.raises(NotFoundError):
        crud_ops.update_session(db, 1, name="x")
    with pytest.raises(NotFoundError):
        crud_ops.update_class(db, 1, name="x")


def test_moving_student_replaces_marks(db, school):
    other = crud_ops.create_class(db, "Class 9", school["session"].id)
    art = crud_ops.create_subject(db, "Art", other.id)
    student = crud_ops.update_student(db, school["students"][0].id, {"class_id": other.id, "is_paid": True})
    assert student.class_id == other.id
    assert student.is_paid is True
    assert [m.subject_id for m in student.marks] == [art.id]
    assert student.marks[0].obtained == "0"


def test_moving_subject_replaces_marks(db, school):
    other = crud_ops.create_class(db, "Class 9", school["session"].id)
    kiran = crud_ops.create_student(db, "Kiran", "201", other.id)
    subject = crud_ops.update_subject(db, school["subjects"][0].id, {"class_id": other.id, "max_marks": 90})
    assert subject.max_marks == 90
    marks = db.query(Mark).filter(Mark.subject_id == subject.id).all()
    assert [m.student_id for m in marks] == [kiran.id]


def test_save_student_marks_edits_and_creates(db, school):
    student = crud_ops.get_student(db, school["students"][0].id)
    maths_mark = next(m for m in student.marks if m.subject.name == "Maths")
    entries = [
        MarkEntry(id=maths_mark.id, subject="Mathematics", date="2025-03-05", obtained="70", max=80),
        MarkEntry(subject="science", obtained="15", max=20),
        MarkEntry(subject="Computer", date="2025-03-09", obtained="30", max=50),
        MarkEntry(subject="   ", obtained="10", max=10),
    ]
    result = crud_ops.save_student_marks(db, student.id, entries)

    by_subject = {m.subject.name: m for m in result.marks}
    assert set(by_subject) == {"Mathematics", "Science", "Computer"}
    assert by_subject["Mathematics"].obtained == "70"
    assert by_subject["Mathematics"].subject.date == "2025-03-05"
    assert by_subject["Science"].obtained == "15"
    assert by_subject["Computer"].subject.max_marks == 50

    # the new subject belongs to the class, so the classmate got a zero mark
    ravi = crud_ops.get_student(db, school["students"][1].id)
    assert {m.subject.name: m.obtained for m in ravi.marks}["Computer"] == "0"


def test_save_student_marks_rolls_back_on_failure(db, school):
    student_id = school["students"][0].id
    entries = [
        MarkEntry(subject="Maths", obtained="60", max=80),
        MarkEntry(id=99999, subject="Science", obtained="10", max=20),
    ]
    with pytest.raises(NotFoundError):
        crud_ops.save_student_marks(db, student_id, entries)
    db.expire_all()
    marks = {m.subject.name: m.obtained for m in crud_ops.get_student(db, student_id).marks}
    assert marks == {"Maths": "0", "Science": "0"}


def test_settings_upsert(db):
    assert crud_ops.get_setting(db, "nonexistent") is None
    crud_ops.set_setting(db, "app_name", "X")
    assert crud_ops.get_setting(db, "app_name") == "X"
    crud_ops.set_setting(db, "app_name", "Y")
    assert crud_ops.get_setting(db, "app_name") == "Y"
    assert crud_ops.get_settings(db, ["app_name", "director"]) == {"app_name": "Y"}


def test_empty_setting_reads_as_unset(db):
    crud_ops.set_setting(db, "app_link", "")
    assert crud_ops.get_setting(db, "app_link") is None


def test_admin_authentication(db):
    admin = crud_ops.create_admin(db, "Head@Example.com", "pw")
    assert admin.is_super_admin is False
    assert admin.password != "pw"
    assert crud_ops.authenticate_admin(db, "head@example.com", "pw").id == admin.id
    assert crud_ops.authenticate_admin(db, "head@example.com", "wrong") is None
    assert crud_ops.authenticate_admin(db, "nobody@example.com", "pw") is None


def test_duplicate_admin_email(db):
    crud_ops.create_admin(db, "a@example.com", "pw")
    with pytest.raises(ValidationError):
        crud_ops.create_admin(db, "A@example.com", "pw2")
