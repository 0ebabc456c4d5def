import logging
from dataclasses import replace
from TutorDesk.data.db import tx
from TutorDesk.core.models import Teacher, PaymentType, Status, parse_grades
from TutorDesk.core.utils import new_id

logger = logging.getLogger(__name__)


def _row_to_teacher(row):
	return Teacher(
		id=row["id"],
		name=row["name"],
		subject=row["subject"] or "",
		grades=parse_grades(row["grades"]),
		payment_type=PaymentType(row["payment_type"]),
		rate=float(row["rate"] or 0),
		contact=row["contact"] or "",
		whatsapp=row["whatsapp"] or "",
		status=Status(row["status"]),
	)


def _grades_text(grades):
	return ",".join(g.value for g in parse_grades(grades))


def fetch_teachers():
	with tx() as conn:
		c = conn.cursor()
		c.execute("SELECT * FROM teachers ORDER BY name COLLATE NOCASE")
		return [_row_to_teacher(r) for r in c.fetchall()]




def get_teacher_by_id(teacher_id):
	with tx() as conn:
		c = conn.cursor()
		c.execute("SELECT * FROM teachers WHERE id = ?", (teacher_id,))
		row = c.fetchone()
		return _row_to_teacher(row) if row else None


def insert_teacher(name, subject, grades, payment_type, rate, contact="", whatsapp="", status=Status.ACTIVE):
	if rate < 0:
		raise ValueError("rate must be non-negative")
	teacher = Teacher(
		id=new_id("TCH"),
		name=name,
		subject=subject,
		grades=parse_grades(grades),
		payment_type=PaymentType(payment_type),
		rate=float(rate),
		contact=contact,
		whatsapp=whatsapp,
		status=Status(status),
	)
	with tx() as conn:
		conn.execute(
			"""
			INSERT INTO teachers (id, name, subject, grades, payment_type, rate, contact, whatsapp, status)
			VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)
			""",
			(teacher.id, teacher.name, teacher.subject, _grades_text(teacher.grades),
			 teacher.payment_type.value, teacher.rate, teacher.contact, teacher.whatsapp, teacher.status.value),
		)
	logger.info("Teacher %s added (%s)", teacher.id, teacher.name)
	return teacher


def update_teacher_by_id(teacher):
	"""Full replace of the stored row; returns the record with its enum fields restored."""
	teacher = replace(
		teacher,
		grades=parse_grades(teacher.grades),
		payment_type=PaymentType(teacher.payment_type),
		rate=float(teacher.rate),
		status=Status(teacher.status),
	)
	if teacher.rate < 0:
		raise ValueError("rate must be non-negative")
	with tx() as conn:
		conn.execute(
			"""
			UPDATE teachers
			SET name=?, subject=?, grades=?, payment_type=?, rate=?, contact=?, whatsapp=?, status=?,
				updated_at=datetime('now','localtime')
			WHERE id=?
			""",
			(teacher.name, teacher.subject, _grades_text(teacher.grades), teacher.payment_type.value,
			 teacher.rate, teacher.contact, teacher.whatsapp, teacher.status.value, teacher.id),
		)
	return teacher


def delete_teacher_by_id(teacher_id):
	with tx() as conn:
		conn.execute("DELETE FROM teachers WHERE id=?", (teacher_id,))
