"""Application state shared by every window.

One ``AppState`` is created at startup and handed to each window. It keeps an
in-memory copy of every table, routes all mutations through the store, and
announces each one on the ChangeBus. A store write that raises leaves the
cache as it was.
"""
import logging
from dataclasses import replace
from typing import Dict, List, Optional

from TutorDesk.data import (
    create_tables,
    fetch_teachers, insert_teacher, update_teacher_by_id, delete_teacher_by_id,
    fetch_students, insert_student, update_student_by_id, delete_student_by_id,
    fetch_schedules, insert_schedule, update_schedule_by_id, delete_schedule_by_id,
    fetch_attendance, class_has_attendance, insert_attendance,
    fetch_student_payments, insert_student_payment, update_student_payment_by_id, delete_student_payment_by_id,
    fetch_teacher_payments, insert_teacher_payment, update_teacher_payment_by_id, delete_teacher_payment_by_id,
    get_academy_info, save_academy_info, ensure_bool_setting,
)
from TutorDesk.core.attendance_gate import (
    AttendanceAlreadyMarkedError, build_attendance_records, eligible_students, ensure_not_marked,
    is_session_marked,
)
from TutorDesk.core.models import (
    AcademyProfile, Attendance, ClassSchedule, GRADE_ALL, SalaryComputation, Student,
    StudentPayment, Teacher, TeacherPayment,
)
from TutorDesk.core.reconciliation import PayoutDraft, StudentPaymentDraft
from TutorDesk.core.salary import compute_salary
from TutorDesk.core.utils import current_period, parse_period, today_iso

logger = logging.getLogger(__name__)

UNKNOWN = "Unknown"

TEACHERS = "teachers"
STUDENTS = "students"
SCHEDULES = "schedules"
ATTENDANCE = "attendance"
STUDENT_PAYMENTS = "student_payments"
TEACHER_PAYMENTS = "teacher_payments"
ACADEMY_INFO = "academy_info"


class AppState:

    def __init__(self, bus=None, notifier=None):
        self.bus = bus
        self.notifier = notifier
        self.teachers: List[Teacher] = []
        self.students: List[Student] = []
        self.schedules: List[ClassSchedule] = []
        self.attendance: List[Attendance] = []
        self.student_payments: List[StudentPayment] = []
        self.teacher_payments: List[TeacherPayment] = []
        self.academy_info: Optional[AcademyProfile] = None
        if bus is not None:
            bus.subscribe_external(self._on_external_change)

    # ---------- loading ----------
    def initialize(self):
        create_tables()
        ensure_bool_setting("whatsapp_enabled", default=True)
        self.reload()
        return self

    def reload(self):
        """Replace every cached table with what is in the store now."""
        self.teachers = fetch_teachers()
        self.students = fetch_students()
        self.schedules = fetch_schedules()
        self.attendance = fetch_attendance()
        self.student_payments = fetch_student_payments()
        self.teacher_payments = fetch_teacher_payments()
        self.academy_info = get_academy_info()
        logger.info(
            "Loaded %d teachers, %d students, %d sessions",
            len(self.teachers), len(self.students), len(self.schedules),
        )

    def _on_external_change(self, table):
        self.reload()
        if self.bus is not None:
            self.bus.data_changed.emit(table)

    def _changed(self, table):
        if self.bus is not None:
            self.bus.publish(table)

    @staticmethod
    def _replace_in(items, record):
        return [record if x.id == record.id else x for x in items]

    # ---------- lookups ----------
    def get_teacher(self, teacher_id) -> Optional[Teacher]:
        return next((t for t in self.teachers if t.id == teacher_id), None)

    def get_student(self, student_id) -> Optional[Student]:
        return next((s for s in self.students if s.id == student_id), None)

    def get_schedule(self, schedule_id) -> Optional[ClassSchedule]:
        return next((s for s in self.schedules if s.id == schedule_id), None)

    def teacher_name(self, teacher_id) -> str:
        teacher = self.get_teacher(teacher_id)
        return teacher.name if teacher else UNKNOWN

    def student_name(self, student_id) -> str:
        student = self.get_student(student_id)
        return student.name if student else UNKNOWN

    # ---------- teachers ----------
    def add_teacher(self, name, subject, grades, payment_type, rate, contact="", whatsapp="", status="Active"):
        teacher = insert_teacher(name, subject, grades, payment_type, rate, contact, whatsapp, status)
        self.teachers = self.teachers + [teacher]
        self._changed(TEACHERS)
        return teacher

    def update_teacher(self, teacher: Teacher):
        stored = update_teacher_by_id(teacher)
        self.teachers = self._replace_in(self.teachers, stored)
        self._changed(TEACHERS)
        return stored

    def delete_teacher(self, teacher_id):
        # sessions and payouts keep pointing at the removed id
        delete_teacher_by_id(teacher_id)
        self.teachers = [t for t in self.teachers if t.id != teacher_id]
        self._changed(TEACHERS)

    # ---------- students ----------
    def add_student(self, name, guardian_name, grade, contact="", whatsapp="", status="Active"):
        student = insert_student(name, guardian_name, grade, contact, whatsapp, status)
        self.students = self.students + [student]
        self._changed(STUDENTS)
        return student

    def update_student(self, student: Student):
        stored = update_student_by_id(student)
        self.students = self._replace_in(self.students, stored)
        self._changed(STUDENTS)
        return stored

    def delete_student(self, student_id):
        delete_student_by_id(student_id)
        self.students = [s for s in self.students if s.id != student_id]
        self._changed(STUDENTS)

    # ---------- schedules ----------
    def add_schedule(self, grade, subject, teacher_id, date, start_time, end_time, rate_override=None):
        schedule = insert_schedule(grade, subject, teacher_id, date, start_time, end_time, rate_override)
        self.schedules = self.schedules + [schedule]
        self._changed(SCHEDULES)
        return schedule

    def update_schedule(self, schedule: ClassSchedule):
        stored = update_schedule_by_id(schedule)
        self.schedules = self._replace_in(self.schedules, stored)
        self._changed(SCHEDULES)
        return stored

    def delete_schedule(self, schedule_id):
        delete_schedule_by_id(schedule_id)
        self.schedules = [s for s in self.schedules if s.id != schedule_id]
        self._changed(SCHEDULES)

    # ---------- attendance ----------
    def is_session_marked(self, class_id) -> bool:
        return is_session_marked(class_id, self.attendance) or class_has_attendance(class_id)

    def students_for_session(self, class_id) -> List[Student]:
        session = self.get_schedule(class_id)
        if session is None:
            return []
        return eligible_students(session, self.students)

    def mark_attendance(self, class_id, present_map: Dict[str, bool]) -> List[Attendance]:
        """
        Record one row per active student of the session's grade.

        Raises AttendanceAlreadyMarkedError if the session has any rows, in
        the cache or in the store (another instance may have written them).
        Rows are written one at a time; on a failure the rows already
        written stay in the store and in the cache.
        """
        session = self.get_schedule(class_id)
        if session is None:
            raise KeyError(f"Unknown class session {class_id}")
        ensure_not_marked(class_id, self.attendance)
        if class_has_attendance(class_id):
            logger.warning("Session %s was already marked by another instance", class_id)
            raise AttendanceAlreadyMarkedError(class_id)

        saved = []
        try:
            for record in build_attendance_records(session, self.students, present_map):
                saved.append(insert_attendance(record.student_id, record.class_id, record.date, record.is_present))
        finally:
            if saved:
                self.attendance = self.attendance + saved
                self._changed(ATTENDANCE)
        logger.info("Attendance marked for session %s (%d students)", class_id, len(saved))
        return saved

    # ---------- student payments ----------
    def new_student_payment_draft(self, student_id="", **kwargs) -> StudentPaymentDraft:
        student = self.get_student(student_id)
        if student is not None and "grade" not in kwargs:
            kwargs["grade"] = student.grade
        month, year = current_period()
        kwargs.setdefault("month", month)
        kwargs.setdefault("year", year)
        return StudentPaymentDraft(student_id=student_id, **kwargs)

    def save_student_payment(self, draft: StudentPaymentDraft) -> StudentPayment:
        """Commit a draft; new entries also send the guardian a receipt."""
        if draft.is_edit:
            return self.update_student_payment(draft.to_record())
        return self.add_student_payment(draft.to_record())

    def add_student_payment(self, payment: StudentPayment) -> StudentPayment:
        stored = insert_student_payment(payment)
        self.student_payments = self.student_payments + [stored]
        self._changed(STUDENT_PAYMENTS)
        student = self.get_student(stored.student_id)
        if self.notifier is not None and student is not None:
            self.notifier.send_payment_notification(student, stored)
        return stored

    def update_student_payment(self, payment: StudentPayment) -> StudentPayment:
        stored = update_student_payment_by_id(payment)
        self.student_payments = self._replace_in(self.student_payments, stored)
        self._changed(STUDENT_PAYMENTS)
        return stored

    def delete_student_payment(self, payment_id):
        delete_student_payment_by_id(payment_id)
        self.student_payments = [p for p in self.student_payments if p.id != payment_id]
        self._changed(STUDENT_PAYMENTS)

    # ---------- salary & teacher payments ----------
    def compute_salary(self, teacher_id, month, year, grade_scope=GRADE_ALL) -> SalaryComputation:
        return compute_salary(teacher_id, month, year, grade_scope, self.schedules, self.teachers)

    def new_payout_draft(self, teacher_id="", month=None, year=None, grade_scope=GRADE_ALL) -> PayoutDraft:
        default_month, default_year = current_period()
        draft = PayoutDraft(compute=self.compute_salary)
        draft.select(
            teacher_id=teacher_id,
            month=month or default_month,
            year=year or default_year,
            grade_scope=grade_scope,
        )
        return draft

    def edit_payout_draft(self, payment: TeacherPayment) -> PayoutDraft:
        """Draft for an existing payout; the paid amount is kept as recorded."""
        month, year = parse_period(payment.month)
        draft = PayoutDraft(
            compute=self.compute_salary,
            payment_id=payment.id,
            date=payment.date or today_iso(),
            amount_paid=payment.amount_paid,
            amount_paid_overridden=True,
        )
        draft.select(teacher_id=payment.teacher_id, month=month, year=year, grade_scope=payment.grade)
        return draft

    def commit_payout(self, draft: PayoutDraft) -> TeacherPayment:
        """Freeze the draft's current numbers; later schedule edits do not reach them."""
        draft.refresh()
        record = draft.to_record()
        if draft.payment_id:
            update_teacher_payment_by_id(record)
            self.teacher_payments = self._replace_in(self.teacher_payments, record)
        else:
            record = insert_teacher_payment(record)
            self.teacher_payments = [record] + self.teacher_payments
        self._changed(TEACHER_PAYMENTS)
        return record

    def add_teacher_payment(self, teacher_id, month, year, grade_scope=GRADE_ALL, amount_paid=None, date=None):
        draft = self.new_payout_draft(teacher_id, month, year, grade_scope)
        if amount_paid is not None:
            draft.set_amount_paid(amount_paid)
        if date:
            draft.date = date
        return self.commit_payout(draft)

    def update_teacher_payment(self, payment: TeacherPayment) -> TeacherPayment:
        """
        Re-freeze an existing payout against the sessions as they are now.

        Only the id, teacher, period, scope, date and amount paid are read from
        ``payment``; class count, hours and payable are recomputed. A negative
        amount paid raises ValueError before anything is written.
        """
        if payment.amount_paid < 0:
            raise ValueError("amount paid must be non-negative")
        return self.commit_payout(self.edit_payout_draft(payment))

    def delete_teacher_payment(self, payment_id):
        delete_teacher_payment_by_id(payment_id)
        self.teacher_payments = [p for p in self.teacher_payments if p.id != payment_id]
        self._changed(TEACHER_PAYMENTS)

    def payouts_for_teacher(self, teacher_id) -> List[TeacherPayment]:
        return sorted(
            (p for p in self.teacher_payments if p.teacher_id == teacher_id),
            key=lambda p: p.date,
            reverse=True,
        )

    # ---------- academy ----------
    def update_academy_info(self, profile: AcademyProfile):
        save_academy_info(profile)
        self.academy_info = replace(profile)
        self._changed(ACADEMY_INFO)
        return self.academy_info
