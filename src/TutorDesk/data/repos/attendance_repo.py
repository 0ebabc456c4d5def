import logging
from TutorDesk.data.db import tx
from TutorDesk.core.models import Attendance
from TutorDesk.core.utils import new_id

logger = logging.getLogger(__name__)


def _row_to_attendance(row):
	return Attendance(
		id=row["id"],
		student_id=row["student_id"],
		class_id=row["class_id"],
		date=row["date"],
		is_present=bool(row["is_present"]),
	)


def fetch_attendance():
	with tx() as conn:
		c = conn.cursor()
		c.execute("SELECT * FROM attendance ORDER BY date, created_at")
		return [_row_to_attendance(r) for r in c.fetchall()]


def fetch_attendance_for_class(class_id):
	with tx() as conn:
		c = conn.cursor()
		c.execute("SELECT * FROM attendance WHERE class_id = ?", (class_id,))
		return [_row_to_attendance(r) for r in c.fetchall()]


def class_has_attendance(class_id):
	with tx() as conn:
		c = conn.cursor()
		c.execute("SELECT COUNT(*) FROM attendance WHERE class_id = ?", (class_id,))
		return c.fetchone()[0] > 0


def insert_attendance(student_id, class_id, date, is_present):
	"""Insert one row in its own transaction."""
	record = Attendance(
		id=new_id("ATT"),
		student_id=student_id,
		class_id=class_id,
		date=date,
		is_present=bool(is_present),
	)
	with tx() as conn:
		conn.execute(
			"""
			INSERT INTO attendance (id, student_id, class_id, date, is_present)
			VALUES (?, ?, ?, ?, ?)
			""",
			(record.id, record.student_id, record.class_id, record.date, int(record.is_present)),
		)
	return record
