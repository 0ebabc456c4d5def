"""Paid / payable / outstanding bookkeeping for both ledgers."""
import logging
from dataclasses import dataclass, field
from typing import Callable, Optional

from TutorDesk.core.models import (
    FeeReconciliation, GRADE_ALL, Grade, PaymentStatus, PayoutStatus, SalaryComputation,
    StudentPayment, TeacherPayment,
)
from TutorDesk.core.utils import format_period, today_iso

logger = logging.getLogger(__name__)


def reconcile_student_fee(total_fee, paid_amount) -> FeeReconciliation:
    total_fee = float(total_fee or 0)
    paid_amount = float(paid_amount or 0)
    outstanding = max(0.0, total_fee - paid_amount)
    if total_fee > 0 and paid_amount >= total_fee:
        status = PaymentStatus.PAID
    elif 0 < paid_amount < total_fee:
        status = PaymentStatus.PARTIAL
    else:
        status = PaymentStatus.UNPAID
    return FeeReconciliation(outstanding_amount=outstanding, status=status)


def payout_status(amount_paid, amount_payable) -> PayoutStatus:
    if float(amount_paid) >= float(amount_payable):
        return PayoutStatus.CLEARED
    return PayoutStatus.PARTIAL


class StudentPaymentDraft:
    """
    A fee entry being filled in. Outstanding amount and status follow
    total_fee/paid_amount on every change and cannot be set directly.
    """

    def __init__(self, student_id="", grade=Grade.G6, month="", year="", date=None,
                 total_fee=0.0, paid_amount=0.0, remarks="", payment_id=None):
        self.payment_id = payment_id
        self.student_id = student_id
        self.grade = Grade(grade)
        self.month = month
        self.year = str(year)
        self.date = date or today_iso()
        self.remarks = remarks
        self._total_fee = float(total_fee)
        self._paid_amount = float(paid_amount)
        self._reconciliation = reconcile_student_fee(self._total_fee, self._paid_amount)

    @classmethod
    def from_record(cls, payment: StudentPayment):
        return cls(
            student_id=payment.student_id,
            grade=payment.grade,
            month=payment.month,
            year=payment.year,
            date=payment.date,
            total_fee=payment.total_fee,
            paid_amount=payment.paid_amount,
            remarks=payment.remarks,
            payment_id=payment.id,
        )

    @property
    def is_edit(self) -> bool:
        return self.payment_id is not None

    @property
    def total_fee(self) -> float:
        return self._total_fee

    @total_fee.setter
    def total_fee(self, value):
        self._total_fee = float(value)
        self._recompute()

    @property
    def paid_amount(self) -> float:
        return self._paid_amount

    @paid_amount.setter
    def paid_amount(self, value):
        self._paid_amount = float(value)
        self._recompute()

    @property
    def outstanding_amount(self) -> float:
        return self._reconciliation.outstanding_amount

    @property
    def status(self) -> PaymentStatus:
        return self._reconciliation.status

    def _recompute(self):
        self._reconciliation = reconcile_student_fee(self._total_fee, self._paid_amount)

    def to_record(self, payment_id=None) -> StudentPayment:
        return StudentPayment(
            id=payment_id or self.payment_id or "",
            student_id=self.student_id,
            grade=self.grade,
            month=self.month,
            year=self.year,
            date=self.date,
            total_fee=self._total_fee,
            paid_amount=self._paid_amount,
            outstanding_amount=self.outstanding_amount,
            status=self.status,
            remarks=self.remarks,
        )


@dataclass
class PayoutDraft:
    """
    The teacher payout form. ``compute`` is called with
    (teacher_id, month, year, grade_scope) and returns the live
    SalaryComputation; it is re-run on every selection change. Until the
    operator types an amount, ``amount_paid`` follows the payable.
    """
    compute: Callable[..., SalaryComputation]
    teacher_id: str = ""
    month: str = ""
    year: str = ""
    grade_scope: str = GRADE_ALL
    payment_id: Optional[str] = None
    date: str = field(default_factory=today_iso)
    computation: SalaryComputation = field(default_factory=lambda: SalaryComputation(0, 0.0, 0.0))
    amount_paid: float = 0.0
    amount_paid_overridden: bool = False

    def select(self, teacher_id=None, month=None, year=None, grade_scope=None):
        if teacher_id is not None:
            self.teacher_id = teacher_id
        if month is not None:
            self.month = month
        if year is not None:
            self.year = str(year)
        if grade_scope is not None:
            self.grade_scope = grade_scope.value if isinstance(grade_scope, Grade) else grade_scope
        self.refresh()
        return self.computation

    def refresh(self):
        if not self.teacher_id:
            self.computation = SalaryComputation(0, 0.0, 0.0)
        else:
            self.computation = self.compute(self.teacher_id, self.month, self.year, self.grade_scope)
        if not self.amount_paid_overridden:
            self.amount_paid = self.computation.amount_payable

    def set_amount_paid(self, amount):
        amount = float(amount)
        if amount < 0:
            raise ValueError("amount paid must be non-negative")
        self.amount_paid = amount
        self.amount_paid_overridden = True

    @property
    def period(self) -> str:
        return format_period(self.month, self.year)

    @property
    def status(self) -> PayoutStatus:
        return payout_status(self.amount_paid, self.computation.amount_payable)

    def to_record(self, payment_id=None) -> TeacherPayment:
        """Freeze the current numbers into a committed payout record."""
        return TeacherPayment(
            id=payment_id or self.payment_id or "",
            teacher_id=self.teacher_id,
            month=self.period,
            grade=self.grade_scope,
            total_classes=self.computation.total_classes,
            total_hours=self.computation.total_hours,
            amount_payable=self.computation.amount_payable,
            amount_paid=self.amount_paid,
            date=self.date,
        )
