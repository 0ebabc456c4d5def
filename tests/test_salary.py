from TutorDesk.core.models import GRADE_ALL, Grade, PaymentType
from TutorDesk.core.salary import compute_salary, effective_rate, session_earnings, sessions_in_scope

from conftest import make_session, make_teacher


def test_hourly_teacher_is_paid_hours_times_rate():
    teacher = make_teacher(rate=500)
    sessions = [
        make_session("CLS-1", "15:00", "17:00", date="2025-03-03"),
        make_session("CLS-2", "14:00", "17:00", date="2025-03-10"),
    ]
    result = compute_salary("TCH-1", "March", "2025", GRADE_ALL, sessions, [teacher])
    assert result.total_classes == 2
    assert result.total_hours == 5
    assert result.amount_payable == 2500


def test_monthly_rate_is_spread_over_sessions():
    teacher = make_teacher(payment_type=PaymentType.MONTHLY, rate=10000)
    sessions = [make_session(f"CLS-{i}", date=f"2025-03-{i + 1:02d}") for i in range(4)]
    result = compute_salary("TCH-1", "March", "2025", GRADE_ALL, sessions, [teacher])
    assert result.total_classes == 4
    assert result.amount_payable == 10000
    assert [e.earned for e in result.sessions] == [2500] * 4


def test_session_override_replaces_base_rate():
    teacher = make_teacher(rate=500)
    sessions = [make_session("CLS-1", "15:00", "17:00", rate_override=800)]
    result = compute_salary("TCH-1", "March", "2025", GRADE_ALL, sessions, [teacher])
    assert result.amount_payable == 1600
    assert result.sessions[0].rate == 800


def test_zero_override_is_honoured():
    teacher = make_teacher(rate=500)
    session = make_session("CLS-1", rate_override=0)
    assert effective_rate(session, teacher) == 0
    assert compute_salary("TCH-1", "March", "2025", GRADE_ALL, [session], [teacher]).amount_payable == 0


def test_monthly_teacher_with_no_sessions_gets_nothing():
    teacher = make_teacher(payment_type=PaymentType.MONTHLY, rate=10000)
    result = compute_salary("TCH-1", "March", "2025", GRADE_ALL, [], [teacher])
    assert result.total_classes == 0
    assert result.amount_payable == 0
    assert session_earnings(teacher, []) == []


def test_scope_filters_teacher_month_year_and_grade():
    sessions = [
        make_session("CLS-1", date="2025-03-03", grade="8"),
        make_session("CLS-2", date="2025-03-04", grade="9"),
        make_session("CLS-3", date="2025-04-01", grade="8"),
        make_session("CLS-4", date="2024-03-05", grade="8"),
        make_session("CLS-5", date="2025-03-06", grade="8", teacher_id="TCH-2"),
    ]
    assert [s.id for s in sessions_in_scope(sessions, "TCH-1", "March", "2025")] == ["CLS-1", "CLS-2"]
    assert [s.id for s in sessions_in_scope(sessions, "TCH-1", "March", 2025, Grade.G9)] == ["CLS-2"]
    assert [s.id for s in sessions_in_scope(sessions, "TCH-1", "March", "2025", "8")] == ["CLS-1"]


def test_unknown_teacher_counts_sessions_without_pay():
    sessions = [
        make_session("CLS-1", teacher_id="TCH-404"),
        make_session("CLS-2", date="2025-03-11", teacher_id="TCH-404"),
    ]
    result = compute_salary("TCH-404", "March", "2025", GRADE_ALL, sessions, [])
    assert result.total_classes == 2
    assert result.total_hours == 4
    assert result.amount_payable == 0


def test_compute_salary_is_idempotent():
    teacher = make_teacher(rate=333.33)
    sessions = [make_session("CLS-1", "09:15", "10:35"), make_session("CLS-2", "10:00", "10:20", date="2025-03-12")]
    first = compute_salary("TCH-1", "March", "2025", GRADE_ALL, sessions, [teacher])
    second = compute_salary("TCH-1", "March", "2025", GRADE_ALL, sessions, [teacher])
    assert first == second
    assert first.amount_payable == round(first.amount_payable, 2)
