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


from datetime import date as date_type
from decimal import Decimal, InvalidOperation
from pydantic import BaseModel, Field, field_validator
from pydantic.alias_generators import to_camel
from typing import List, Optional

MAX_OBTAINED = Decimal("100000")


def normalize_obtained(value):
    """Return an obtained score as a decimal string, rejecting non-numbers."""
    if isinstance(value, bool) or value is None:
        raise ValueError("obtained must be a number")
    text = str(value).strip()
    try:
        number = Decimal(text)
    except InvalidOperation:
        raise ValueError("obtained must be a number")
    if not number.is_finite() or number < 0:
        raise ValueError("obtained must be a non-negative number")
    if number > MAX_OBTAINED:
        raise ValueError(f"obtained must not exceed {MAX_OBTAINED}")
    number = abs(number)
    if number == number.to_integral_value():
        number = number.to_integral_value()
    # plain notation: "1E2" is stored as "100"
    return format(number, "f")


def check_iso_date(value):
    if value in (None, ""):
        return None
    try:
        date_type.fromisoformat(value)
    except (TypeError, ValueError):
        raise ValueError("date must be in YYYY-MM-DD format")
    return value


class ApiModel(BaseModel):
    class Config:
        from_attributes = True
        alias_generator = to_camel
        populate_by_name = True
        str_strip_whitespace = True


# Sessions

class SessionBase(ApiModel):
    name: str = Field(min_length=1)


class SessionCreate(SessionBase):
    pass


class SessionUpdate(ApiModel):
    name: Optional[str] = Field(default=None, min_length=1)


class Session(SessionBase):
    id: int


# Classes

class ClassBase(ApiModel):
    name: str = Field(min_length=1)
    session_id: int


class ClassCreate(ClassBase):
    pass


class ClassUpdate(ApiModel):
    name: Optional[str] = Field(default=None, min_length=1)
    session_id: Optional[int] = None


class SchoolClass(ClassBase):
    id: int


# Students

class StudentBase(ApiModel):
    name: str = Field(min_length=1)
    roll_no: str = Field(min_length=1)
    class_id: int
    is_paid: bool = False


class StudentCreate(StudentBase):
    pass


class StudentUpdate(ApiModel):
    name: Optional[str] = Field(default=None, min_length=1)
    roll_no: Optional[str] = Field(default=None, min_length=1)
    class_id: Optional[int] = None
    is_paid: Optional[bool] = None


class Student(StudentBase):
    id: int


# Subjects

class SubjectBase(ApiModel):
    name: str = Field(min_length=1)
    max_marks: int = Field(default=100, ge=0)
    date: Optional[str] = None
    class_id: int

    @field_validator("date")
    @classmethod
    def validate_date(cls, value):
        return check_iso_date(value)


class SubjectCreate(SubjectBase):
    pass


class SubjectUpdate(ApiModel):
    name: Optional[str] = Field(default=None, min_length=1)
    max_marks: Optional[int] = Field(default=None, ge=0)
    date: Optional[str] = None
    class_id: Optional[int] = None

    @field_validator("date")
    @classmethod
    def validate_date(cls, value):
        return check_iso_date(value)


class Subject(SubjectBase):
    id: int


# Marks

class Mark(ApiModel):
    id: int
    student_id: int
    subject_id: int
    obtained: str


class MarkWithSubject(Mark):
    subject: Subject


class MarkUpdate(ApiModel):
    student_id: int
    subject_id: int
    obtained: str

    @field_validator("obtained", mode="before")
    @classmethod
    def validate_obtained(cls, value):
        return normalize_obtained(value)


class MarkEntry(ApiModel):
    """One row of the marksheet editor."""

    id: Optional[int] = None
    subject: str = ""
    date: Optional[str] = None
    obtained: str = "0"
    max: int = Field(default=100, ge=0)

    @field_validator("obtained", mode="before")
    @classmethod
    def validate_obtained(cls, value):
        return normalize_obtained(value)

    @field_validator("date")
    @classmethod
    def validate_date(cls, value):
        return check_iso_date(value)


class StudentWithMarks(Student):
    marks: List[MarkWithSubject] = []


class Marksheet(ApiModel):
    student: StudentWithMarks
    total_obtained: float
    total_max: int
    percentage: float
    status: str


# Settings

class SettingValue(ApiModel):
    value: Optional[str] = None


class SettingUpdate(ApiModel):
    key: str = Field(min_length=1)
    value: str


# Admins

class AdminCreate(ApiModel):
    class Config:
        str_strip_whitespace = False

    email: str = Field(min_length=3)
    password: str = Field(min_length=1)


class Admin(ApiModel):
    id: int
    email: str
    is_super_admin: bool


class LoginRequest(ApiModel):
    class Config:
        str_strip_whitespace = False

    email: str
    password: str
