import logging
from TutorDesk.data.db import tx
from TutorDesk.core.models import ClassSchedule, Grade, GRADE_ALL, build_schedule
from TutorDesk.core.utils import new_id

logger = logging.getLogger(__name__)


def _row_to_schedule(row):
	override = row["rate_override"]
	return ClassSchedule(
		id=row["id"],
		grade=Grade(row["grade"]),
		subject=row["subject"] or "",
		teacher_id=row["teacher_id"],
		date=row["date"],
		start_time=row["start_time"],
		end_time=row["end_time"],
		total_hours=float(row["total_hours"] or 0),
		month=row["month"],
		year=row["year"],
		rate_override=float(override) if override is not None else None,
	)


def _check_override(rate_override):
	if rate_override is not None and rate_override < 0:
		raise ValueError("rate override must be non-negative")


def fetch_schedules():
	with tx() as conn:
		c = conn.cursor()
		c.execute("SELECT * FROM schedules ORDER BY date, start_time")
		return [_row_to_schedule(r) for r in c.fetchall()]


def fetch_schedules_for_period(teacher_id, month, year, grade=None):
	"""
	Sessions of one teacher in one month; ``grade`` narrows to a single grade
	unless it is None or 'All'.
	"""
	query = "SELECT * FROM schedules WHERE teacher_id = ? AND month = ? AND year = ?"
	params = [teacher_id, month, str(year)]
	if grade and grade != GRADE_ALL:
		query += " AND grade = ?"
		params.append(Grade(grade).value)
	query += " ORDER BY date, start_time"
	with tx() as conn:
		c = conn.cursor()
		c.execute(query, params)
		return [_row_to_schedule(r) for r in c.fetchall()]




def get_schedule_by_id(schedule_id):
	with tx() as conn:
		c = conn.cursor()
		c.execute("SELECT * FROM schedules WHERE id = ?", (schedule_id,))
		row = c.fetchone()
		return _row_to_schedule(row) if row else None


def insert_schedule(grade, subject, teacher_id, date, start_time, end_time, rate_override=None):
	"""Hours and month/year are derived here; callers never pass them."""
	_check_override(rate_override)
	schedule = build_schedule(new_id("CLS"), grade, subject, teacher_id, date, start_time, end_time, rate_override)
	with tx() as conn:
		conn.execute(
			"""
			INSERT INTO schedules (id, grade, subject, teacher_id, date, start_time, end_time,
				total_hours, month, year, rate_override)
			VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
			""",
			(schedule.id, schedule.grade.value, schedule.subject, schedule.teacher_id, schedule.date,
			 schedule.start_time, schedule.end_time, schedule.total_hours, schedule.month, schedule.year,
			 schedule.rate_override),
		)
	logger.info("Session %s scheduled on %s for teacher %s", schedule.id, schedule.date, schedule.teacher_id)
	return schedule


def update_schedule_by_id(schedule):
	"""
	Full replace. Hours and month/year are re-derived from the record's own
	times and date so an edit can never leave them inconsistent.
	"""
	_check_override(schedule.rate_override)
	schedule = build_schedule(
		schedule.id, schedule.grade, schedule.subject, schedule.teacher_id, schedule.date,
		schedule.start_time, schedule.end_time, schedule.rate_override,
	)
	with tx() as conn:
		conn.execute(
			"""
			UPDATE schedules
			SET grade=?, subject=?, teacher_id=?, date=?, start_time=?, end_time=?, total_hours=?,
				month=?, year=?, rate_override=?, updated_at=datetime('now','localtime')
			WHERE id=?
			""",
			(schedule.grade.value, schedule.subject, schedule.teacher_id, schedule.date, schedule.start_time,
			 schedule.end_time, schedule.total_hours, schedule.month, schedule.year, schedule.rate_override,
			 schedule.id),
		)
	return schedule


def delete_schedule_by_id(schedule_id):
	with tx() as conn:
		conn.execute("DELETE FROM schedules WHERE id=?", (schedule_id,))
