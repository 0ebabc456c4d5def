"""One class session as an attendance-taking unit."""
import logging
from typing import Dict, Iterable, List

from TutorDesk.core.models import Attendance, ClassSchedule, Grade, Status, Student

logger = logging.getLogger(__name__)


class AttendanceAlreadyMarkedError(RuntimeError):
    """Raised when attendance is submitted for a session that already has rows."""

    def __init__(self, class_id):
        super().__init__(f"Attendance for session {class_id} has already been marked")
        self.class_id = class_id


def is_session_marked(class_id, attendance: Iterable[Attendance]) -> bool:
    return any(a.class_id == class_id for a in attendance)


def eligible_students(session: ClassSchedule, students: Iterable[Student]) -> List[Student]:
    """Active students enrolled in the session's grade, by name."""
    grade = Grade(session.grade)
    selected = [s for s in students if s.grade == grade and s.status == Status.ACTIVE]
    selected.sort(key=lambda s: s.name.lower())
    return selected


def build_attendance_records(session: ClassSchedule, students: Iterable[Student],
                             present_map: Dict[str, bool]) -> List[Attendance]:
    """
    One unsaved row per eligible student. Students missing from
    ``present_map`` are recorded absent.
    """
    return [
        Attendance(
            id="",
            student_id=s.id,
            class_id=session.id,
            date=session.date,
            is_present=bool(present_map.get(s.id, False)),
        )
        for s in eligible_students(session, students)
    ]


def ensure_not_marked(class_id, attendance: Iterable[Attendance]):
    if is_session_marked(class_id, attendance):
        logger.warning("Rejected repeat attendance submission for session %s", class_id)
        raise AttendanceAlreadyMarkedError(class_id)
