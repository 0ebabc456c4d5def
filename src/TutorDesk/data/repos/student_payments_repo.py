import logging
from TutorDesk.data.db import tx
from TutorDesk.core.models import StudentPayment, Grade, PaymentStatus
from TutorDesk.core.reconciliation import reconcile_student_fee
from TutorDesk.core.utils import new_id

logger = logging.getLogger(__name__)


def _row_to_payment(row):
	return StudentPayment(
		id=row["id"],
		student_id=row["student_id"],
		grade=Grade(row["grade"]),
		month=row["month"],
		year=row["year"],
		date=row["date"],
		total_fee=float(row["total_fee"] or 0),
		paid_amount=float(row["paid_amount"] or 0),
		outstanding_amount=float(row["outstanding_amount"] or 0),
		status=PaymentStatus(row["status"]),
		remarks=row["remarks"] or "",
	)


def _check_amounts(total_fee, paid_amount):
	if total_fee < 0:
		raise ValueError("total fee must be non-negative")
	if paid_amount < 0:
		raise ValueError("paid amount must be non-negative")


def fetch_student_payments():
	with tx() as conn:
		c = conn.cursor()
		c.execute("SELECT * FROM student_payments ORDER BY date, created_at")
		return [_row_to_payment(r) for r in c.fetchall()]


def fetch_student_payments_by_student(student_id):
	with tx() as conn:
		c = conn.cursor()
		c.execute(
			"SELECT * FROM student_payments WHERE student_id = ? ORDER BY year, date",
			(student_id,),
		)
		return [_row_to_payment(r) for r in c.fetchall()]


def fetch_student_payments_for_period(grade, month, year):
	with tx() as conn:
		c = conn.cursor()
		c.execute(
			"""
			SELECT * FROM student_payments
			WHERE grade = ? AND month = ? AND year = ?
			ORDER BY date
			""",
			(Grade(grade).value, month, str(year)),
		)
		return [_row_to_payment(r) for r in c.fetchall()]




def insert_student_payment(payment):
	"""
	Store a new fee entry. Outstanding amount and status are recomputed from
	total_fee/paid_amount whatever the caller put in them.
	"""
	_check_amounts(payment.total_fee, payment.paid_amount)
	rec = reconcile_student_fee(payment.total_fee, payment.paid_amount)
	stored = StudentPayment(
		id=new_id("PAY"),
		student_id=payment.student_id,
		grade=Grade(payment.grade),
		month=payment.month,
		year=str(payment.year),
		date=payment.date,
		total_fee=float(payment.total_fee),
		paid_amount=float(payment.paid_amount),
		outstanding_amount=rec.outstanding_amount,
		status=rec.status,
		remarks=payment.remarks,
	)
	with tx() as conn:
		conn.execute(
			"""
			INSERT INTO student_payments (id, student_id, grade, month, year, date, total_fee, paid_amount,
				outstanding_amount, status, remarks)
			VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
			""",
			(stored.id, stored.student_id, stored.grade.value, stored.month, stored.year, stored.date,
			 stored.total_fee, stored.paid_amount, stored.outstanding_amount, stored.status.value, stored.remarks),
		)
	logger.info("Student payment %s recorded for %s (%s)", stored.id, stored.student_id, stored.status.value)
	return stored


def update_student_payment_by_id(payment):
	_check_amounts(payment.total_fee, payment.paid_amount)
	rec = reconcile_student_fee(payment.total_fee, payment.paid_amount)
	stored = StudentPayment(
		id=payment.id,
		student_id=payment.student_id,
		grade=Grade(payment.grade),
		month=payment.month,
		year=str(payment.year),
		date=payment.date,
		total_fee=float(payment.total_fee),
		paid_amount=float(payment.paid_amount),
		outstanding_amount=rec.outstanding_amount,
		status=rec.status,
		remarks=payment.remarks,
	)
	with tx() as conn:
		conn.execute(
			"""
			UPDATE student_payments
			SET student_id=?, grade=?, month=?, year=?, date=?, total_fee=?, paid_amount=?,
				outstanding_amount=?, status=?, remarks=?, updated_at=datetime('now','localtime')
			WHERE id=?
			""",
			(stored.student_id, stored.grade.value, stored.month, stored.year, stored.date, stored.total_fee,
			 stored.paid_amount, stored.outstanding_amount, stored.status.value, stored.remarks, stored.id),
		)
	return stored


def delete_student_payment_by_id(payment_id):
	with tx() as conn:
		conn.execute("DELETE FROM student_payments WHERE id = ?", (payment_id,))
