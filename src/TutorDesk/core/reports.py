"""Tabular report shaping.

Each builder returns a ReportTable (title, headers, rows, filename stem) that
the exporter renders; nothing here touches files. Rows referencing removed
teachers or students show "Unknown".
"""
from collections import OrderedDict
from dataclasses import dataclass
from typing import List

from TutorDesk.core.models import GRADE_ALL, Grade, Status
from TutorDesk.core.reconciliation import payout_status
from TutorDesk.core.salary import compute_salary
from TutorDesk.core.utils import format_currency, round_half_up, today_iso

UNKNOWN = "Unknown"


@dataclass
class ReportTable:
    title: str
    headers: List[str]
    rows: List[list]
    filename_stem: str


def _index(items):
    return {x.id: x for x in items}


def _name(lookup, key):
    item = lookup.get(key)
    return item.name if item else UNKNOWN


def _grade_label(grade):
    code = grade.value if isinstance(grade, Grade) else str(grade)
    return "All Grades" if code == GRADE_ALL else f"Grade {code}"


def student_payment_report(state, currency=None) -> ReportTable:
    students = _index(state.students)
    headers = ["Payment ID", "Student Name", "Student ID", "Grade", "Month", "Total Fee",
               "Paid", "Outstanding", "Date", "Status"]
    rows = [
        [
            p.id,
            _name(students, p.student_id),
            p.student_id,
            _grade_label(p.grade),
            f"{p.month} {p.year}",
            format_currency(p.total_fee, currency),
            format_currency(p.paid_amount, currency),
            format_currency(p.outstanding_amount, currency),
            p.date,
            p.status.value,
        ]
        for p in state.student_payments
    ]
    return ReportTable("Student Payment Collection Report", headers, rows, f"Student_Payments_{today_iso()}")


def teacher_directory_report(state, currency=None) -> ReportTable:
    headers = ["Teacher ID", "Teacher Name", "Subject", "Grades", "Payment Type", "Rate", "Contact", "Status"]
    rows = [
        [
            t.id,
            t.name,
            t.subject,
            ", ".join(g.value for g in t.grades),
            t.payment_type.value,
            format_currency(t.rate, currency),
            t.whatsapp or t.contact,
            t.status.value,
        ]
        for t in state.teachers
    ]
    return ReportTable("Teacher Directory & Compensation Report", headers, rows, f"Teacher_Records_{today_iso()}")


def teacher_payment_report(state, currency=None) -> ReportTable:
    teachers = _index(state.teachers)
    headers = ["Payment ID", "Teacher Name", "Teacher ID", "Month", "Scope", "Total Classes", "Total Hours",
               "Rate", "Payable", "Paid", "Status", "Date"]
    rows = []
    for p in state.teacher_payments:
        teacher = teachers.get(p.teacher_id)
        rate = f"{format_currency(teacher.rate, currency)} / {teacher.rate_unit}" if teacher else "N/A"
        rows.append([
            p.id,
            teacher.name if teacher else UNKNOWN,
            p.teacher_id,
            p.month,
            _grade_label(p.grade),
            p.total_classes,
            p.total_hours,
            rate,
            format_currency(p.amount_payable, currency),
            format_currency(p.amount_paid, currency),
            payout_status(p.amount_paid, p.amount_payable).value,
            p.date,
        ])
    return ReportTable("Teacher Monthly Salary & Hours Report", headers, rows,
                       f"Teacher_Payments_Detailed_{today_iso()}")


def schedule_report(state) -> ReportTable:
    teachers = _index(state.teachers)
    headers = ["Date", "Grade", "Subject", "Teacher Name", "Teacher ID", "Time", "Duration"]
    rows = [
        [
            s.date,
            _grade_label(s.grade),
            s.subject,
            _name(teachers, s.teacher_id),
            s.teacher_id,
            f"{s.start_time} - {s.end_time}",
            f"{s.total_hours} hr",
        ]
        for s in sorted(state.schedules, key=lambda s: (s.date, s.start_time))
    ]
    return ReportTable("Class Schedule & Logs Report", headers, rows, f"Class_Logs_{today_iso()}")


def salary_breakdown_report(state, teacher_id, month, year, grade_scope=GRADE_ALL, currency=None) -> ReportTable:
    """Per-session earnings for one teacher and period, closed by a TOTAL row."""
    teacher = state.get_teacher(teacher_id)
    salary = compute_salary(teacher_id, month, year, grade_scope, state.schedules, state.teachers)
    headers = ["Date", "Grade", "Subject", "Time", "Duration", "Rate Applied", "Earned"]
    rows = [
        [
            e.session.date,
            _grade_label(e.session.grade),
            e.session.subject,
            f"{e.session.start_time} - {e.session.end_time}",
            f"{e.session.total_hours} hr",
            format_currency(e.rate, currency),
            format_currency(round_half_up(e.earned, 2), currency),
        ]
        for e in salary.sessions
    ]
    rows.append(["TOTAL", "", "", "", f"{salary.total_hours:.2f} hrs", "", format_currency(salary.amount_payable, currency)])

    name = teacher.name if teacher else UNKNOWN
    title = f"Salary Breakdown - {name} ({month} {year})"
    if grade_scope not in (None, GRADE_ALL):
        title += f" - {_grade_label(grade_scope)}"
    stem = f"Salary_Slip_{'_'.join(name.split())}_{month}_{year}"
    return ReportTable(title, headers, rows, stem)


def attendance_by_subject_report(state) -> ReportTable:
    """Attendance percentage for each student in each subject they were marked in."""
    students = _index(state.students)
    schedules = _index(state.schedules)
    tally = OrderedDict()
    for a in sorted(state.attendance, key=lambda a: a.date):
        session = schedules.get(a.class_id)
        subject = session.subject if session else UNKNOWN
        present, total = tally.get((a.student_id, subject), (0, 0))
        tally[(a.student_id, subject)] = (present + (1 if a.is_present else 0), total + 1)

    headers = ["Student Name", "Student ID", "Grade", "Subject", "Sessions", "Present", "Absent", "Attendance %"]
    rows = []
    for (student_id, subject), (present, total) in tally.items():
        student = students.get(student_id)
        rows.append([
            student.name if student else UNKNOWN,
            student_id,
            _grade_label(student.grade) if student else UNKNOWN,
            subject,
            total,
            present,
            total - present,
            round_half_up(present / total * 100, 1) if total else 0,
        ])
    rows.sort(key=lambda r: (r[0].lower(), r[3].lower()))
    return ReportTable("Attendance Percentage by Subject", headers, rows, f"Attendance_By_Subject_{today_iso()}")


def dashboard_stats(state) -> dict:
    per_grade = OrderedDict((g.label, 0) for g in Grade)
    for s in state.students:
        per_grade[s.grade.label] += 1
    return {
        "active_students": sum(1 for s in state.students if s.status == Status.ACTIVE),
        "teachers": len(state.teachers),
        "total_revenue": sum(p.paid_amount for p in state.student_payments),
        "classes": len(state.schedules),
        "students_per_grade": per_grade,
    }


def finance_totals(state) -> dict:
    return {
        "total_collections": sum(p.paid_amount for p in state.student_payments),
        "total_outstanding": sum(p.outstanding_amount for p in state.student_payments),
        "total_teacher_payout": sum(p.amount_paid for p in state.teacher_payments),
    }


def recent_student_payments(state, limit=5):
    return list(reversed(state.student_payments[-limit:]))
