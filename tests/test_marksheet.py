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


from types import SimpleNamespace
from marksheet import MarkLine, summarize, build_marksheet, PASSED, FAILED


def line(obtained, max_marks, subject="Subject"):
    return MarkLine(subject=subject, obtained=obtained, max_marks=max_marks)


def test_empty_marks_fail_with_zero_percentage():
    summary = summarize([])
    assert summary.total_obtained == 0
    assert summary.total_max == 0
    assert summary.percentage == 0
    assert summary.status == FAILED


def test_totals_and_pass():
    summary = summarize([line("40", 80), line("20", 20)])
    assert summary.total_obtained == 60
    assert summary.total_max == 100
    assert summary.percentage == 60.00
    assert summary.status == PASSED


def test_below_pass_mark_fails():
    summary = summarize([line("10", 100)])
    assert summary.percentage == 10.00
    assert summary.status == FAILED


def test_exactly_pass_mark_passes():
    assert summarize([line("33", 100)]).status == PASSED


def test_status_uses_unrounded_percentage():
    # 32.996% rounds to 33.00 for display but is still below the pass mark
    summary = summarize([line("32.996", 100)])
    assert summary.percentage == 33.0
    assert summary.status == FAILED


def test_percentage_rounded_to_two_places():
    assert summarize([line("1", 3)]).percentage == 33.33


def test_decimal_and_unparseable_obtained():
    summary = summarize([line("12.5", 50), line("abc", 50)])
    assert summary.total_obtained == 12.5
    assert summary.total_max == 100
    assert summary.percentage == 12.5


def test_zero_max_marks_does_not_divide():
    summary = summarize([line("5", 0)])
    assert summary.percentage == 0
    assert summary.status == FAILED


def test_build_marksheet_from_student():
    subject = SimpleNamespace(name="Maths", max_marks=50, date="2025-01-01")
    student = SimpleNamespace(marks=[
        SimpleNamespace(id=1, obtained="45", subject=subject),
        SimpleNamespace(id=2, obtained="5", subject=SimpleNamespace(name="", max_marks=50, date=None)),
    ])
    summary = build_marksheet(student)
    assert [l.subject for l in summary.lines] == ["Maths", "General"]
    assert summary.total_obtained == 50
    assert summary.percentage == 50.0
    assert summary.status == PASSED
