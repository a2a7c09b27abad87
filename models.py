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


from sqlalchemy import Column, Integer, String, ForeignKey, Boolean, UniqueConstraint
from sqlalchemy.orm import relationship
from database import Base


class Admin(Base):
    __tablename__ = "admins"

    id = Column(Integer, primary_key=True, index=True)
    email = Column(String, unique=True, index=True, nullable=False)
    password = Column(String, nullable=False)  # argon2 hash
    is_super_admin = Column(Boolean, nullable=False, default=False)


class AcademicSession(Base):
    __tablename__ = "sessions"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, nullable=False)

    classes = relationship("SchoolClass", back_populates="session", passive_deletes=True)


class SchoolClass(Base):
    __tablename__ = "classes"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, nullable=False)
    session_id = Column(Integer, ForeignKey("sessions.id", ondelete="CASCADE"), nullable=False, index=True)

    session = relationship("AcademicSession", back_populates="classes")
    students = relationship("Student", back_populates="school_class", passive_deletes=True)
    subjects = relationship("Subject", back_populates="school_class", passive_deletes=True)


class Student(Base):
    __tablename__ = "students"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, nullable=False)
    roll_no = Column(String, nullable=False)
    class_id = Column(Integer, ForeignKey("classes.id", ondelete="CASCADE"), nullable=False, index=True)
    is_paid = Column(Boolean, nullable=False, default=False)

    school_class = relationship("SchoolClass", back_populates="students")
    marks = relationship("Mark", back_populates="student", passive_deletes=True, order_by="Mark.id")


class Subject(Base):
    __tablename__ = "subjects"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, nullable=False)
    max_marks = Column(Integer, nullable=False, default=100)
    date = Column(String, nullable=True)  # ISO date, YYYY-MM-DD
    class_id = Column(Integer, ForeignKey("classes.id", ondelete="CASCADE"), nullable=False, index=True)

    school_class = relationship("SchoolClass", back_populates="subjects")
    marks = relationship("Mark", back_populates="subject", passive_deletes=True)


class Mark(Base):
    __tablename__ = "marks"

    id = Column(Integer, primary_key=True, index=True)
    student_id = Column(Integer, ForeignKey("students.id", ondelete="CASCADE"), nullable=False, index=True)
    subject_id = Column(Integer, ForeignKey("subjects.id", ondelete="CASCADE"), nullable=False, index=True)
    obtained = Column(String, nullable=False, default="0")

    student = relationship("Student", back_populates="marks")
    subject = relationship("Subject", back_populates="marks")

    # One row per student and subject; writes go through upsert
    __table_args__ = (UniqueConstraint("student_id", "subject_id", name="uq_mark_student_subject"),)


class Setting(Base):
    __tablename__ = "settings"

    id = Column(Integer, primary_key=True, index=True)
    key = Column(String, unique=True, index=True, nullable=False)
    value = Column(String, nullable=False, default="")
