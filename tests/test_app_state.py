from dataclasses import replace

import pytest

from TutorDesk.core.app_state import AppState, SCHEDULES, STUDENT_PAYMENTS, TEACHER_PAYMENTS
from TutorDesk.core.attendance_gate import AttendanceAlreadyMarkedError
from TutorDesk.core.models import Grade, PaymentStatus, PaymentType, PayoutStatus, Status
from TutorDesk.core.reconciliation import StudentPaymentDraft
from TutorDesk.core.reports import dashboard_stats, teacher_directory_report
from TutorDesk.data import fetch_attendance, fetch_teacher_payments, insert_attendance


@pytest.fixture
def events(bus):
    seen = []
    bus.subscribe(seen.append)
    return seen


@pytest.fixture
def teacher(state):
    return state.add_teacher("Nimal Perera", "Mathematics", ["8"], PaymentType.HOURLY, 500)


def test_initialize_loads_default_profile(state):
    assert state.academy_info.name == "MECDA Academy"
    assert state.teachers == []


def test_mutations_update_cache_and_publish(state, teacher, events):
    schedule = state.add_schedule("8", "Mathematics", teacher.id, "2025-03-10", "15:00", "17:00")
    assert state.get_schedule(schedule.id) == schedule
    assert events[-1] == SCHEDULES

    state.delete_schedule(schedule.id)
    assert state.get_schedule(schedule.id) is None


def test_failed_write_leaves_cache_untouched(state, events):
    with pytest.raises(ValueError):
        state.add_teacher("Bad", "Art", ["8"], PaymentType.HOURLY, -10)
    assert state.teachers == []
    assert events == []


def test_names_fall_back_to_unknown(state, teacher):
    assert state.teacher_name(teacher.id) == "Nimal Perera"
    assert state.teacher_name("TCH-GONE") == "Unknown"
    assert state.student_name("STU-GONE") == "Unknown"


def test_committed_payout_is_not_changed_by_later_sessions(state, teacher, events):
    state.add_schedule("8", "Mathematics", teacher.id, "2025-03-03", "15:00", "17:00")
    state.add_schedule("8", "Mathematics", teacher.id, "2025-03-10", "14:00", "17:00")
    record = state.add_teacher_payment(teacher.id, "March", "2025")
    assert record.amount_payable == 2500
    assert record.month == "March 2025"
    assert events[-1] == TEACHER_PAYMENTS

    state.add_schedule("8", "Mathematics", teacher.id, "2025-03-17", "15:00", "17:00")
    assert state.compute_salary(teacher.id, "March", "2025").amount_payable == 3500
    assert fetch_teacher_payments()[0].amount_payable == 2500
    assert state.teacher_payments[0].amount_payable == 2500


def test_editing_payout_recomputes_and_keeps_paid_amount(state, teacher):
    state.add_schedule("8", "Mathematics", teacher.id, "2025-03-03", "15:00", "17:00")
    record = state.add_teacher_payment(teacher.id, "March", "2025", amount_paid=600, date="2025-03-31")
    state.add_schedule("8", "Mathematics", teacher.id, "2025-03-10", "15:00", "17:00")

    draft = state.edit_payout_draft(record)
    assert (draft.month, draft.year) == ("March", "2025")
    assert draft.computation.amount_payable == 2000
    assert draft.amount_paid == 600
    assert draft.status == PayoutStatus.PARTIAL

    updated = state.commit_payout(draft)
    assert updated.id == record.id
    assert updated.amount_payable == 2000
    assert len(state.teacher_payments) == 1


def test_payout_for_single_grade(state):
    teacher = state.add_teacher("Ama", "English", ["8", "9"], PaymentType.HOURLY, 400)
    state.add_schedule("8", "English", teacher.id, "2025-03-03", "15:00", "16:00")
    state.add_schedule("9", "English", teacher.id, "2025-03-04", "15:00", "17:00")
    draft = state.new_payout_draft(teacher.id, "March", "2025", Grade.G9)
    assert draft.grade_scope == "9"
    assert draft.computation.total_classes == 1
    assert draft.amount_paid == 800


def test_new_student_payment_notifies_guardian_once(state, notifier, events):
    student = state.add_student("Kasun", "Sunil", "8", whatsapp="0771234567")
    draft = state.new_student_payment_draft(student.id, total_fee=3000)
    assert draft.grade == Grade.G8
    draft.paid_amount = 1000
    payment = state.save_student_payment(draft)
    assert payment.status == PaymentStatus.PARTIAL
    assert notifier.sent == [(student.id, payment.id)]
    assert events[-1] == STUDENT_PAYMENTS

    edit = StudentPaymentDraft.from_record(payment)
    edit.paid_amount = 3000
    updated = state.save_student_payment(edit)
    assert updated.status == PaymentStatus.PAID
    assert len(notifier.sent) == 1
    assert len(state.student_payments) == 1


def test_attendance_marked_once_per_session(state, teacher):
    s1 = state.add_student("Amal", "", "8")
    s2 = state.add_student("Bimal", "", "8")
    state.add_student("Chamal", "", "9")
    session = state.add_schedule("8", "Mathematics", teacher.id, "2025-03-10", "15:00", "17:00")

    assert [s.id for s in state.students_for_session(session.id)] == [s1.id, s2.id]
    saved = state.mark_attendance(session.id, {s1.id: True})
    assert {a.student_id: a.is_present for a in saved} == {s1.id: True, s2.id: False}
    assert state.is_session_marked(session.id)

    with pytest.raises(AttendanceAlreadyMarkedError):
        state.mark_attendance(session.id, {s2.id: True})
    assert len(fetch_attendance()) == 2


def test_attendance_for_unknown_session(state):
    with pytest.raises(KeyError):
        state.mark_attendance("CLS-NOPE", {})


def test_external_change_reloads_from_store(db, bus, qapp):
    first = AppState(bus=bus).initialize()
    other = AppState().initialize()
    other.add_teacher("Written Elsewhere", "Art", ["7"], PaymentType.MONTHLY, 9000)
    assert first.teachers == []

    seen = []
    bus.subscribe(seen.append)
    bus.external_change.emit("teachers")
    assert [t.name for t in first.teachers] == ["Written Elsewhere"]
    assert seen == ["teachers"]


def test_update_teacher_payment_refreezes(state, teacher):
    state.add_schedule("8", "Mathematics", teacher.id, "2025-03-03", "15:00", "16:00")
    record = state.add_teacher_payment(teacher.id, "March", "2025")
    state.add_schedule("8", "Mathematics", teacher.id, "2025-03-04", "15:00", "16:00")
    updated = state.update_teacher_payment(record)
    assert updated.id == record.id
    assert updated.total_classes == 2
    assert updated.amount_paid == 500
    assert fetch_teacher_payments()[0].amount_payable == 1000


def test_teacher_edit_from_form_values_keeps_enums(state, teacher):
    # combo boxes hand enum data back as plain strings
    stored = state.update_teacher(replace(teacher, payment_type="Monthly", status="Inactive", grades=["9", "8"]))
    assert stored.payment_type is PaymentType.MONTHLY
    assert stored.status is Status.INACTIVE
    assert stored.grades == (Grade.G8, Grade.G9)
    assert state.get_teacher(teacher.id) is stored

    row = teacher_directory_report(state).rows[0]
    assert row[3:5] == ["8, 9", "Monthly"]
    assert row[-1] == "Inactive"


def test_student_edit_from_form_values_keeps_enums(state):
    student = state.add_student("Kasun", "Sunil", "8")
    stored = state.update_student(replace(student, grade="9", status="Active"))
    assert stored.grade is Grade.G9
    assert state.get_student(student.id).grade is Grade.G9

    stats = dashboard_stats(state)
    assert stats["students_per_grade"]["Grade 9"] == 1
    assert stats["students_per_grade"]["Grade 8"] == 0


def test_attendance_written_by_another_instance_blocks_marking(state, teacher, events):
    student = state.add_student("Amal", "", "8")
    session = state.add_schedule("8", "Mathematics", teacher.id, "2025-03-10", "15:00", "17:00")
    # another instance writes straight to the store; this cache has not reloaded
    insert_attendance(student.id, session.id, session.date, True)
    assert state.attendance == []
    assert state.is_session_marked(session.id)

    del events[:]
    with pytest.raises(AttendanceAlreadyMarkedError):
        state.mark_attendance(session.id, {student.id: False})
    assert len(fetch_attendance()) == 1
    assert events == []


def test_update_teacher_payment_rejects_negative_paid_amount(state, teacher):
    state.add_schedule("8", "Mathematics", teacher.id, "2025-03-03", "15:00", "16:00")
    record = state.add_teacher_payment(teacher.id, "March", "2025")
    with pytest.raises(ValueError):
        state.update_teacher_payment(replace(record, amount_paid=-1))
    assert fetch_teacher_payments()[0].amount_paid == record.amount_paid
    assert state.teacher_payments == [record]
