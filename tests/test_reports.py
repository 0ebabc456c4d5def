from TutorDesk.core.models import PaymentType, Status
from TutorDesk.data import insert_attendance
from TutorDesk.core.reports import (
    attendance_by_subject_report, dashboard_stats, finance_totals, salary_breakdown_report,
    schedule_report, student_payment_report, teacher_directory_report, teacher_payment_report,
)


def _seed(state):
    teacher = state.add_teacher("Nimal Perera", "Mathematics", ["8"], PaymentType.HOURLY, 500)
    monthly = state.add_teacher("Ama Fernando", "English", ["9"], PaymentType.MONTHLY, 8000)
    s1 = state.add_student("Kasun", "Sunil", "8")
    state.add_student("Dilini", "Ruwan", "9", status=Status.INACTIVE)
    c1 = state.add_schedule("8", "Mathematics", teacher.id, "2025-03-03", "15:00", "17:00")
    state.add_schedule("8", "Mathematics", teacher.id, "2025-03-10", "14:00", "17:00", rate_override=800)
    state.add_schedule("9", "English", monthly.id, "2025-03-04", "09:00", "10:00")
    state.mark_attendance(c1.id, {s1.id: True})
    draft = state.new_student_payment_draft(s1.id, month="March", year="2025", total_fee=5000)
    draft.paid_amount = 2000
    state.save_student_payment(draft)
    state.add_teacher_payment(teacher.id, "March", "2025", amount_paid=1000)
    return teacher, monthly, s1


def test_salary_breakdown_has_total_row(state):
    teacher, _, _ = _seed(state)
    report = salary_breakdown_report(state, teacher.id, "March", "2025", currency="Rs.")
    assert report.title == "Salary Breakdown - Nimal Perera (March 2025)"
    assert report.filename_stem == "Salary_Slip_Nimal_Perera_March_2025"
    assert report.headers == ["Date", "Grade", "Subject", "Time", "Duration", "Rate Applied", "Earned"]
    assert report.rows[0][3] == "15:00 - 17:00"
    assert report.rows[1][5] == "Rs. 800.00"
    assert report.rows[1][6] == "Rs. 2,400.00"
    assert report.rows[-1] == ["TOTAL", "", "", "", "5.00 hrs", "", "Rs. 3,400.00"]


def test_salary_breakdown_for_missing_teacher(state):
    report = salary_breakdown_report(state, "TCH-GONE", "March", "2025", currency="Rs.")
    assert report.title.startswith("Salary Breakdown - Unknown")
    assert report.rows == [["TOTAL", "", "", "", "0.00 hrs", "", "Rs. 0.00"]]


def test_tables_resolve_names(state):
    teacher, _, student = _seed(state)
    payments = student_payment_report(state, currency="Rs.")
    assert payments.rows[0][1] == "Kasun"
    assert payments.rows[0][4] == "March 2025"
    assert payments.rows[0][-1] == "Partially Paid"

    directory = teacher_directory_report(state, currency="Rs.")
    assert {r[1] for r in directory.rows} == {"Nimal Perera", "Ama Fernando"}

    payouts = teacher_payment_report(state, currency="Rs.")
    assert payouts.rows[0][1] == "Nimal Perera"
    assert payouts.rows[0][7] == "Rs. 500.00 / hr"
    assert payouts.rows[0][10] == "Partial"

    state.delete_teacher(teacher.id)
    assert schedule_report(state).rows[0][3] == "Unknown"
    assert teacher_payment_report(state, currency="Rs.").rows[0][7] == "N/A"


def test_schedule_report_format(state):
    _seed(state)
    rows = schedule_report(state).rows
    assert rows[0][:3] == ["2025-03-03", "Grade 8", "Mathematics"]
    assert rows[0][5:] == ["15:00 - 17:00", "2.0 hr"]


def test_attendance_percentage(state):
    _, _, student = _seed(state)
    report = attendance_by_subject_report(state)
    assert report.rows == [["Kasun", student.id, "Grade 8", "Mathematics", 1, 1, 0, 100.0]]


def test_dashboard_and_finance_totals(state):
    _seed(state)
    stats = dashboard_stats(state)
    assert stats["active_students"] == 1
    assert stats["teachers"] == 2
    assert stats["classes"] == 3
    assert stats["total_revenue"] == 2000
    assert stats["students_per_grade"]["Grade 8"] == 1
    assert stats["students_per_grade"]["Grade 11"] == 0

    totals = finance_totals(state)
    assert totals == {"total_collections": 2000, "total_outstanding": 3000, "total_teacher_payout": 1000}


def test_attendance_percentage_rounds_half_up(state):
    teacher = state.add_teacher("Nimal Perera", "Mathematics", ["8"], PaymentType.HOURLY, 500)
    student = state.add_student("Kasun", "Sunil", "8")
    session = state.add_schedule("8", "Mathematics", teacher.id, "2025-03-03", "15:00", "17:00")
    for i in range(16):
        insert_attendance(student.id, session.id, session.date, i == 0)
    state.reload()
    row = attendance_by_subject_report(state).rows[0]
    assert row[4:] == [16, 1, 15, 6.3]
