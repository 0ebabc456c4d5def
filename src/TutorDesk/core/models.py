"""Domain types for the academy ledger.

Committed records (``Teacher`` ... ``TeacherPayment``) are plain data as stored.
Live values computed on every read (``SalaryComputation``, ``SessionEarning``,
``FeeReconciliation``) are separate frozen types and are never persisted.
"""
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import List, Optional, Tuple

from TutorDesk.core.utils import calculate_hours, month_year_of


class Grade(str, Enum):
    G6 = "6"
    G7 = "7"
    G8 = "8"
    G9 = "9"
    G10 = "10"
    G11 = "11"

    @property
    def label(self) -> str:
        return f"Grade {self.value}"


GRADE_ALL = "All"


class PaymentType(str, Enum):
    HOURLY = "Hourly"
    MONTHLY = "Monthly"


class Status(str, Enum):
    ACTIVE = "Active"
    INACTIVE = "Inactive"


class PaymentStatus(str, Enum):
    PAID = "Paid"
    PARTIAL = "Partially Paid"
    UNPAID = "Unpaid"


class PayoutStatus(str, Enum):
    CLEARED = "Cleared"
    PARTIAL = "Partial"


def parse_grades(raw) -> Tuple[Grade, ...]:
    """Grades from the stored "6,7,8" form (or any iterable of codes)."""
    if not raw:
        return ()
    if isinstance(raw, str):
        raw = raw.split(",")
    codes = [g.value if isinstance(g, Grade) else str(g).strip() for g in raw]
    grades = {Grade(code) for code in codes if code}
    return tuple(sorted(grades, key=lambda g: int(g.value)))


@dataclass
class AcademyProfile:
    name: str
    address: str = ""
    email: str = ""
    contact: str = ""
    logo_path: Optional[str] = None


DEFAULT_ACADEMY = AcademyProfile(
    name="MECDA Academy",
    address="123 Education Lane, Colombo, Sri Lanka",
    email="info@mecda.edu",
    contact="+94 11 234 5678",
)


@dataclass
class Teacher:
    id: str
    name: str
    subject: str = ""
    grades: Tuple[Grade, ...] = ()
    payment_type: PaymentType = PaymentType.HOURLY
    rate: float = 0.0
    contact: str = ""
    whatsapp: str = ""
    status: Status = Status.ACTIVE

    @property
    def rate_unit(self) -> str:
        return "hr" if self.payment_type == PaymentType.HOURLY else "mo"


@dataclass
class Student:
    id: str
    name: str
    guardian_name: str = ""
    grade: Grade = Grade.G6
    contact: str = ""
    whatsapp: str = ""
    status: Status = Status.ACTIVE


@dataclass
class ClassSchedule:
    id: str
    grade: Grade
    subject: str
    teacher_id: str
    date: str
    start_time: str
    end_time: str
    total_hours: float
    month: str
    year: str
    rate_override: Optional[float] = None

    def with_date(self, date):
        """Copy moved to another date; month/year follow the date."""
        month, year = month_year_of(date)
        return replace(self, date=date, month=month, year=year)

    def with_times(self, start_time, end_time):
        return replace(
            self,
            start_time=start_time,
            end_time=end_time,
            total_hours=calculate_hours(start_time, end_time),
        )


def build_schedule(id, grade, subject, teacher_id, date, start_time, end_time, rate_override=None):
    """Create a session with its derived fields filled in."""
    month, year = month_year_of(date)
    return ClassSchedule(
        id=id,
        grade=Grade(grade),
        subject=subject,
        teacher_id=teacher_id,
        date=date,
        start_time=start_time,
        end_time=end_time,
        total_hours=calculate_hours(start_time, end_time),
        month=month,
        year=year,
        rate_override=rate_override,
    )


@dataclass
class Attendance:
    id: str
    student_id: str
    class_id: str
    date: str
    is_present: bool


@dataclass
class StudentPayment:
    id: str
    student_id: str
    grade: Grade
    month: str
    year: str
    date: str
    total_fee: float
    paid_amount: float
    outstanding_amount: float
    status: PaymentStatus
    remarks: str = ""


@dataclass
class TeacherPayment:
    id: str
    teacher_id: str
    month: str
    grade: str
    total_classes: int
    total_hours: float
    amount_payable: float
    amount_paid: float
    date: str = ""


@dataclass(frozen=True)
class SessionEarning:
    session: ClassSchedule
    rate: float
    earned: float


@dataclass(frozen=True)
class SalaryComputation:
    total_classes: int
    total_hours: float
    amount_payable: float
    sessions: Tuple[SessionEarning, ...] = field(default=())


@dataclass(frozen=True)
class FeeReconciliation:
    outstanding_amount: float
    status: PaymentStatus
