"""Teacher salary computation.

Everything here is a pure function of the teacher record and the sessions
handed in; nothing is read from or written to the store.
"""
import logging
from typing import Iterable, List, Optional

from TutorDesk.core.models import (
    ClassSchedule, GRADE_ALL, Grade, PaymentType, SalaryComputation, SessionEarning, Teacher,
)
from TutorDesk.core.utils import round_half_up

logger = logging.getLogger(__name__)


def _grade_code(grade) -> str:
    return grade.value if isinstance(grade, Grade) else str(grade)


def sessions_in_scope(sessions: Iterable[ClassSchedule], teacher_id, month, year, grade_scope=GRADE_ALL) -> List[ClassSchedule]:
    """Sessions of ``teacher_id`` in month/year, narrowed to one grade unless scope is 'All'."""
    year = str(year)
    scope = None if grade_scope in (None, GRADE_ALL) else _grade_code(grade_scope)
    selected = [
        s for s in sessions
        if s.teacher_id == teacher_id
        and s.month == month
        and str(s.year) == year
        and (scope is None or _grade_code(s.grade) == scope)
    ]
    selected.sort(key=lambda s: (s.date, s.start_time))
    return selected


def effective_rate(session: ClassSchedule, teacher: Optional[Teacher]) -> float:
    """The session's override when set, otherwise the teacher's base rate."""
    if session.rate_override is not None:
        return float(session.rate_override)
    if teacher is None:
        return 0.0
    return float(teacher.rate)


def session_earnings(teacher: Optional[Teacher], sessions: List[ClassSchedule]) -> List[SessionEarning]:
    """
    Per-session contribution to the payable amount.

    Hourly teachers earn hours x rate per session. Monthly teachers have each
    session's rate spread evenly over the number of sessions in scope. An
    unknown teacher earns nothing.
    """
    count = len(sessions)
    earnings = []
    for session in sessions:
        if teacher is None:
            earnings.append(SessionEarning(session, 0.0, 0.0))
            continue
        rate = effective_rate(session, teacher)
        if teacher.payment_type == PaymentType.HOURLY:
            earned = session.total_hours * rate
        else:
            earned = rate / count
        earnings.append(SessionEarning(session, rate, earned))
    return earnings


def compute_salary(teacher_id, month, year, grade_scope, schedules, teachers) -> SalaryComputation:
    """
    Classes, hours and amount payable for one teacher, period and grade scope.

    ``schedules`` and ``teachers`` are the loaded tables (any iterables); the
    result is recomputed from them on every call.
    """
    teacher = next((t for t in teachers if t.id == teacher_id), None)
    selected = sessions_in_scope(schedules, teacher_id, month, year, grade_scope)
    earnings = session_earnings(teacher, selected)

    total_hours = round_half_up(sum(s.total_hours for s in selected), 2)
    amount_payable = round_half_up(sum(e.earned for e in earnings), 2)
    if teacher is None and selected:
        logger.warning("Teacher %s not found; %d sessions counted with no pay", teacher_id, len(selected))

    return SalaryComputation(
        total_classes=len(selected),
        total_hours=total_hours,
        amount_payable=amount_payable,
        sessions=tuple(earnings),
    )
