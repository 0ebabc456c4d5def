import logging
from dataclasses import replace
from TutorDesk.data.db import tx
from TutorDesk.core.models import Student, Grade, Status
from TutorDesk.core.utils import new_id

logger = logging.getLogger(__name__)


def _row_to_student(row):
	return Student(
		id=row["id"],
		name=row["name"],
		guardian_name=row["guardian_name"] or "",
		grade=Grade(row["grade"]),
		contact=row["contact"] or "",
		whatsapp=row["whatsapp"] or "",
		status=Status(row["status"]),
	)


def fetch_students(grade=None):
	query = "SELECT * FROM students"
	params = []
	if grade:
		query += " WHERE grade = ?"
		params.append(Grade(grade).value)
	query += " ORDER BY name COLLATE NOCASE"
	with tx() as conn:
		c = conn.cursor()
		c.execute(query, params)
		return [_row_to_student(r) for r in c.fetchall()]




def insert_student(name, guardian_name, grade, contact="", whatsapp="", status=Status.ACTIVE):
	student = Student(
		id=new_id("STU"),
		name=name,
		guardian_name=guardian_name,
		grade=Grade(grade),
		contact=contact,
		whatsapp=whatsapp,
		status=Status(status),
	)
	with tx() as conn:
		conn.execute(
			"""
			INSERT INTO students (id, name, guardian_name, grade, contact, whatsapp, status)
			VALUES (?, ?, ?, ?, ?, ?, ?)
			""",
			(student.id, student.name, student.guardian_name, student.grade.value,
			 student.contact, student.whatsapp, student.status.value),
		)
	logger.info("Student %s added (%s)", student.id, student.name)
	return student


def update_student_by_id(student):
	student = replace(student, grade=Grade(student.grade), status=Status(student.status))
	with tx() as conn:
		conn.execute(
			"""
			UPDATE students
			SET name=?, guardian_name=?, grade=?, contact=?, whatsapp=?, status=?, updated_at=datetime('now','localtime')
			WHERE id=?
			""",
			(student.name, student.guardian_name, student.grade.value, student.contact,
			 student.whatsapp, student.status.value, student.id),
		)
	return student


def delete_student_by_id(student_id):
	with tx() as conn:
		conn.execute("DELETE FROM students WHERE id=?", (student_id,))
