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


from dataclasses import dataclass, field
from typing import Iterable, List, Optional

PASS_PERCENTAGE = 33
PASSED = "PASSED"
FAILED = "FAILED"


@dataclass
class MarkLine:
    subject: str
    obtained: str
    max_marks: int
    date: Optional[str] = None
    mark_id: Optional[int] = None


@dataclass
class Summary:
    total_obtained: float
    total_max: int
    percentage: float
    status: str
    lines: List[MarkLine] = field(default_factory=list)


def _to_number(value):
    try:
        return float(value)
    except (TypeError, ValueError):
        return 0.0


def summarize(lines: Iterable[MarkLine]) -> Summary:
    """Total a student's marks and decide the result.

    Nothing here is stored; callers recompute from the current marks.
    """
    lines = list(lines)
    total_obtained = sum(_to_number(line.obtained) for line in lines)
    total_max = sum(int(line.max_marks or 0) for line in lines)
    percentage = (total_obtained / total_max) * 100 if total_max > 0 else 0.0
    status = PASSED if percentage >= PASS_PERCENTAGE else FAILED
    return Summary(total_obtained=total_obtained, total_max=total_max,
                   percentage=round(percentage, 2), status=status, lines=lines)


def lines_for_student(student) -> List[MarkLine]:
    return [
        MarkLine(
            subject=mark.subject.name or "General",
            obtained=mark.obtained,
            max_marks=mark.subject.max_marks,
            date=mark.subject.date,
            mark_id=mark.id,
        )
        for mark in student.marks
    ]


def build_marksheet(student) -> Summary:
    return summarize(lines_for_student(student))
