import logging
from TutorDesk.data.db import tx
from TutorDesk.core.models import TeacherPayment, GRADE_ALL
from TutorDesk.core.utils import new_id

logger = logging.getLogger(__name__)


def _row_to_payment(row):
	return TeacherPayment(
		id=row["id"],
		teacher_id=row["teacher_id"],
		month=row["month"],
		grade=row["grade"] or GRADE_ALL,
		total_classes=int(row["total_classes"] or 0),
		total_hours=float(row["total_hours"] or 0),
		amount_payable=float(row["amount_payable"] or 0),
		amount_paid=float(row["amount_paid"] or 0),
		date=row["date"] or "",
	)


def _check(payment):
	if payment.amount_paid < 0:
		raise ValueError("amount paid must be non-negative")
	if payment.total_classes < 0 or payment.total_hours < 0:
		raise ValueError("class and hour totals must be non-negative")


def fetch_teacher_payments():
	with tx() as conn:
		c = conn.cursor()
		c.execute("SELECT * FROM teacher_payments ORDER BY date DESC, created_at DESC")
		return [_row_to_payment(r) for r in c.fetchall()]


def fetch_teacher_payments_for_month(month, grade=None):
	"""Payouts for a "Month Year" period, optionally only those scoped to ``grade``."""
	query = "SELECT * FROM teacher_payments WHERE month = ?"
	params = [month]
	if grade:
		query += " AND grade = ?"
		params.append(grade)
	query += " ORDER BY date DESC"
	with tx() as conn:
		c = conn.cursor()
		c.execute(query, params)
		return [_row_to_payment(r) for r in c.fetchall()]






def insert_teacher_payment(payment):
	"""Store a payout snapshot as given; the numbers are never recomputed here."""
	_check(payment)
	stored = TeacherPayment(
		id=new_id("TPY"),
		teacher_id=payment.teacher_id,
		month=payment.month,
		grade=payment.grade or GRADE_ALL,
		total_classes=int(payment.total_classes),
		total_hours=float(payment.total_hours),
		amount_payable=float(payment.amount_payable),
		amount_paid=float(payment.amount_paid),
		date=payment.date,
	)
	with tx() as conn:
		conn.execute(
			"""
			INSERT INTO teacher_payments (id, teacher_id, month, grade, total_classes, total_hours,
				amount_payable, amount_paid, date)
			VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)
			""",
			(stored.id, stored.teacher_id, stored.month, stored.grade, stored.total_classes, stored.total_hours,
			 stored.amount_payable, stored.amount_paid, stored.date),
		)
	logger.info("Teacher payment %s committed for %s (%s)", stored.id, stored.teacher_id, stored.month)
	return stored


def update_teacher_payment_by_id(payment):
	_check(payment)
	with tx() as conn:
		conn.execute(
			"""
			UPDATE teacher_payments
			SET teacher_id=?, month=?, grade=?, total_classes=?, total_hours=?, amount_payable=?,
				amount_paid=?, date=?, updated_at=datetime('now','localtime')
			WHERE id=?
			""",
			(payment.teacher_id, payment.month, payment.grade or GRADE_ALL, int(payment.total_classes),
			 float(payment.total_hours), float(payment.amount_payable), float(payment.amount_paid),
			 payment.date, payment.id),
		)
	return payment


def delete_teacher_payment_by_id(payment_id):
	with tx() as conn:
		conn.execute("DELETE FROM teacher_payments WHERE id = ?", (payment_id,))
