import logging
from TutorDesk.data.db import tx

logger = logging.getLogger(__name__)


def _add_column_if_missing(table, column, ddl):
	with tx() as conn:
		c = conn.cursor()
		c.execute(f"PRAGMA table_info({table})")
		cols = [row[1] for row in c.fetchall()]
		if column in cols:
			return False
		c.execute(f"ALTER TABLE {table} ADD COLUMN {column} {ddl}")
		logger.info("Added column %s.%s", table, column)
		return True


def migrate_schedules_rate_override():
	"""Per-session rate override; NULL means the teacher's base rate applies."""
	return _add_column_if_missing("schedules", "rate_override", "REAL")


def migrate_teacher_payments_date():
	added = _add_column_if_missing("teacher_payments", "date", "TEXT")
	if added:
		# backfill the commit date from the row creation time
		with tx() as conn:
			conn.execute("UPDATE teacher_payments SET date = substr(created_at, 1, 10) WHERE date IS NULL")
	return added


def migrate_academy_info_logo_path():
	return _add_column_if_missing("academy_info", "logo_path", "TEXT")
