import sqlite3
from dataclasses import replace

import pytest

from TutorDesk.core.models import (
    DEFAULT_ACADEMY, Grade, PaymentStatus, PaymentType, Status, StudentPayment, TeacherPayment,
)
from TutorDesk.data import (
    class_has_attendance, create_tables, delete_teacher_by_id, fetch_attendance_for_class,
    fetch_schedules, fetch_schedules_for_period, fetch_student_payments_by_student,
    fetch_student_payments_for_period, fetch_students,
    fetch_teacher_payments, fetch_teacher_payments_for_month, get_academy_info, get_schedule_by_id,
    get_setting, get_setting_bool, get_teacher_by_id, insert_attendance, insert_schedule, insert_student,
    insert_student_payment, insert_teacher, insert_teacher_payment, update_schedule_by_id,
    update_student_by_id, update_student_payment_by_id, update_teacher_by_id,
)


def test_teacher_round_trip_keeps_grades(db):
    teacher = insert_teacher("Nimal", "Science", ["8", Grade.G6], PaymentType.MONTHLY, 12000)
    assert teacher.id.startswith("TCH-")
    stored = get_teacher_by_id(teacher.id)
    assert stored.grades == (Grade.G6, Grade.G8)
    assert stored.payment_type == PaymentType.MONTHLY
    assert stored.rate_unit == "mo"


def test_negative_rate_rejected(db):
    with pytest.raises(ValueError):
        insert_teacher("Nimal", "Science", ["8"], "Hourly", -1)


def test_schedule_derived_fields(db):
    schedule = insert_schedule("8", "Maths", "TCH-1", "2025-03-10", "15:00", "16:30")
    assert schedule.total_hours == 1.5
    assert (schedule.month, schedule.year) == ("March", "2025")
    assert schedule.rate_override is None

    moved = schedule.with_date("2025-04-02").with_times("15:00", "18:00")
    stored = update_schedule_by_id(moved)
    assert stored.month == "April"
    assert get_schedule_by_id(schedule.id).total_hours == 3.0


def test_schedule_override_stored_including_zero(db):
    schedule = insert_schedule("8", "Maths", "TCH-1", "2025-03-10", "15:00", "16:00", rate_override=0)
    assert get_schedule_by_id(schedule.id).rate_override == 0
    with pytest.raises(ValueError):
        insert_schedule("8", "Maths", "TCH-1", "2025-03-10", "15:00", "16:00", rate_override=-5)


def test_schedules_for_period_lookup(db):
    insert_schedule("8", "Maths", "TCH-1", "2025-03-10", "15:00", "16:00")
    insert_schedule("9", "Maths", "TCH-1", "2025-03-11", "15:00", "16:00")
    insert_schedule("8", "Maths", "TCH-1", "2025-04-01", "15:00", "16:00")
    insert_schedule("8", "Maths", "TCH-2", "2025-03-12", "15:00", "16:00")
    assert len(fetch_schedules_for_period("TCH-1", "March", 2025)) == 2
    assert len(fetch_schedules_for_period("TCH-1", "March", "2025", "All")) == 2
    assert len(fetch_schedules_for_period("TCH-1", "March", "2025", "9")) == 1


def test_deleting_teacher_leaves_sessions(db):
    teacher = insert_teacher("Nimal", "Science", ["8"], "Hourly", 500)
    insert_schedule("8", "Science", teacher.id, "2025-03-10", "15:00", "16:00")
    delete_teacher_by_id(teacher.id)
    assert get_teacher_by_id(teacher.id) is None
    assert [s.teacher_id for s in fetch_schedules()] == [teacher.id]


def test_student_payment_status_is_recomputed_on_store(db):
    student = insert_student("Kasun", "Sunil", "8")
    bogus = StudentPayment(
        id="", student_id=student.id, grade=Grade.G8, month="March", year="2025", date="2025-03-05",
        total_fee=5000, paid_amount=2000, outstanding_amount=0, status=PaymentStatus.PAID,
    )
    stored = insert_student_payment(bogus)
    assert stored.id.startswith("PAY-")
    assert stored.outstanding_amount == 3000
    assert stored.status == PaymentStatus.PARTIAL
    assert fetch_student_payments_for_period("8", "March", "2025")[0].status == PaymentStatus.PARTIAL

    stored.paid_amount = 5000
    updated = update_student_payment_by_id(stored)
    assert updated.status == PaymentStatus.PAID
    assert updated.outstanding_amount == 0


def test_student_payment_rejects_negative_amounts(db):
    bad = StudentPayment(
        id="", student_id="STU-1", grade=Grade.G8, month="March", year="2025", date="2025-03-05",
        total_fee=-1, paid_amount=0, outstanding_amount=0, status=PaymentStatus.UNPAID,
    )
    with pytest.raises(ValueError):
        insert_student_payment(bad)


def test_teacher_payments_ordered_newest_first(db):
    for date in ("2025-02-28", "2025-03-31"):
        insert_teacher_payment(TeacherPayment(
            id="", teacher_id="TCH-1", month="March 2025", grade="All", total_classes=1,
            total_hours=2, amount_payable=1000, amount_paid=1000, date=date,
        ))
    payouts = fetch_teacher_payments()
    assert [p.date for p in payouts] == ["2025-03-31", "2025-02-28"]
    assert all(p.id.startswith("TPY-") for p in payouts)
    assert len(fetch_teacher_payments_for_month("March 2025")) == 2
    assert fetch_teacher_payments_for_month("March 2025", "8") == []


def test_attendance_helpers(db):
    assert not class_has_attendance("CLS-1")
    insert_attendance("STU-1", "CLS-1", "2025-03-10", True)
    insert_attendance("STU-1", "CLS-2", "2025-03-11", False)
    assert class_has_attendance("CLS-1")
    assert not class_has_attendance("CLS-3")


def test_attendance_for_class_lookup(db):
    insert_attendance("STU-1", "CLS-1", "2025-03-10", True)
    insert_attendance("STU-2", "CLS-1", "2025-03-10", False)
    insert_attendance("STU-1", "CLS-2", "2025-03-11", True)
    rows = fetch_attendance_for_class("CLS-1")
    assert {a.student_id: a.is_present for a in rows} == {"STU-1": True, "STU-2": False}
    assert all(a.id.startswith("ATT-") for a in rows)
    assert fetch_attendance_for_class("CLS-9") == []


def test_academy_default_is_stored_on_first_read(db):
    info = get_academy_info()
    assert info.name == DEFAULT_ACADEMY.name
    info.name = "Changed"
    assert DEFAULT_ACADEMY.name == "MECDA Academy"


def test_default_settings_seeded(db):
    assert get_setting_bool("whatsapp_enabled", False) is True
    assert get_setting("currency_prefix") == "Rs."


def test_migrations_add_missing_columns(tmp_path, monkeypatch):
    path = tmp_path / "old.db"
    monkeypatch.setenv("TUTORDESK_DB_PATH", str(path))
    conn = sqlite3.connect(path)
    conn.execute("""
        CREATE TABLE schedules (id TEXT PRIMARY KEY, grade TEXT NOT NULL, subject TEXT, teacher_id TEXT NOT NULL,
            date TEXT NOT NULL, start_time TEXT NOT NULL, end_time TEXT NOT NULL,
            total_hours REAL NOT NULL DEFAULT 0, month TEXT NOT NULL, year TEXT NOT NULL,
            created_at TEXT, updated_at TEXT)
    """)
    conn.execute("""
        CREATE TABLE teacher_payments (id TEXT PRIMARY KEY, teacher_id TEXT NOT NULL, month TEXT NOT NULL,
            grade TEXT NOT NULL DEFAULT 'All', total_classes INTEGER NOT NULL DEFAULT 0,
            total_hours REAL NOT NULL DEFAULT 0, amount_payable REAL NOT NULL DEFAULT 0,
            amount_paid REAL NOT NULL DEFAULT 0, created_at TEXT, updated_at TEXT)
    """)
    conn.execute(
        "INSERT INTO teacher_payments (id, teacher_id, month, created_at) VALUES ('TPY-OLD', 'TCH-1', 'March 2025', '2025-03-31 10:00:00')"
    )
    conn.commit()
    conn.close()

    create_tables()

    conn = sqlite3.connect(path)
    cols = {row[1] for row in conn.execute("PRAGMA table_info(schedules)")}
    conn.close()
    assert "rate_override" in cols
    assert fetch_teacher_payments()[0].date == "2025-03-31"


def test_student_payments_by_student_lookup(db):
    kasun = insert_student("Kasun", "Sunil", "8")
    dilini = insert_student("Dilini", "Ruwan", "8")
    for student_id, month, date in [
        (kasun.id, "April", "2025-04-05"),
        (kasun.id, "March", "2025-03-05"),
        (dilini.id, "March", "2025-03-06"),
    ]:
        insert_student_payment(StudentPayment(
            id="", student_id=student_id, grade=Grade.G8, month=month, year="2025", date=date,
            total_fee=5000, paid_amount=5000, outstanding_amount=0, status=PaymentStatus.UNPAID,
        ))
    payments = fetch_student_payments_by_student(kasun.id)
    assert [p.month for p in payments] == ["March", "April"]
    assert all(p.status == PaymentStatus.PAID for p in payments)
    assert fetch_student_payments_by_student("STU-NONE") == []


def test_updates_return_records_with_enum_fields(db):
    teacher = insert_teacher("Nimal", "Science", ["8"], PaymentType.HOURLY, 500)
    stored = update_teacher_by_id(replace(teacher, payment_type="Monthly", status="Inactive", grades="9,8", rate="700"))
    assert stored.payment_type is PaymentType.MONTHLY
    assert stored.status is Status.INACTIVE
    assert stored.grades == (Grade.G8, Grade.G9)
    assert stored.rate == 700.0
    assert get_teacher_by_id(teacher.id) == stored

    student = insert_student("Kasun", "Sunil", "8")
    stored = update_student_by_id(replace(student, grade="9", status="Inactive"))
    assert stored.grade is Grade.G9
    assert stored.status is Status.INACTIVE
    assert fetch_students() == [stored]
