import logging
from TutorDesk.data.db import get_connection
from TutorDesk.data.migrations import (
	migrate_schedules_rate_override,
	migrate_teacher_payments_date,
	migrate_academy_info_logo_path,
)

logger = logging.getLogger(__name__)


def create_tables():
	"""Create all tables and lookup indexes. Safe to call on every start."""
	conn = get_connection()
	try:
		c = conn.cursor()

		# Teachers table
		# grades is a comma separated list of grade codes ("6,7,8")
		c.execute("""
			CREATE TABLE IF NOT EXISTS teachers (
				id TEXT PRIMARY KEY,
				name TEXT NOT NULL,
				subject TEXT,
				grades TEXT NOT NULL DEFAULT '',
				payment_type TEXT NOT NULL DEFAULT 'Hourly',
				rate REAL NOT NULL DEFAULT 0,
				contact TEXT,
				whatsapp TEXT,
				status TEXT NOT NULL DEFAULT 'Active',
				created_at TEXT DEFAULT (datetime('now','localtime')),
				updated_at TEXT DEFAULT (datetime('now','localtime'))
			);
		""")
		# Students table
		c.execute("""
			CREATE TABLE IF NOT EXISTS students (
				id TEXT PRIMARY KEY,
				name TEXT NOT NULL,
				guardian_name TEXT,
				grade TEXT NOT NULL,
				contact TEXT,
				whatsapp TEXT,
				status TEXT NOT NULL DEFAULT 'Active',
				created_at TEXT DEFAULT (datetime('now','localtime')),
				updated_at TEXT DEFAULT (datetime('now','localtime'))
			);
		""")
		# Class schedules (one row per teaching session)
		# teacher_id is not a foreign key: deleted teachers leave their sessions behind
		c.execute("""
			CREATE TABLE IF NOT EXISTS schedules (
				id TEXT PRIMARY KEY,
				grade TEXT NOT NULL,
				subject TEXT,
				teacher_id TEXT NOT NULL,
				date TEXT NOT NULL,
				start_time TEXT NOT NULL,
				end_time TEXT NOT NULL,
				total_hours REAL NOT NULL DEFAULT 0,
				month TEXT NOT NULL,
				year TEXT NOT NULL,
				created_at TEXT DEFAULT (datetime('now','localtime')),
				updated_at TEXT DEFAULT (datetime('now','localtime'))
			);
		""")
		# Attendance table
		c.execute("""
			CREATE TABLE IF NOT EXISTS attendance (
				id TEXT PRIMARY KEY,
				student_id TEXT NOT NULL,
				class_id TEXT NOT NULL,
				date TEXT NOT NULL,
				is_present INTEGER NOT NULL DEFAULT 0,
				created_at TEXT DEFAULT (datetime('now','localtime'))
			);
		""")
		# Student fee ledger
		c.execute("""
			CREATE TABLE IF NOT EXISTS student_payments (
				id TEXT PRIMARY KEY,
				student_id TEXT NOT NULL,
				grade TEXT NOT NULL,
				month TEXT NOT NULL,
				year TEXT NOT NULL,
				date TEXT NOT NULL,
				total_fee REAL NOT NULL DEFAULT 0,
				paid_amount REAL NOT NULL DEFAULT 0,
				outstanding_amount REAL NOT NULL DEFAULT 0,
				status TEXT NOT NULL,
				remarks TEXT,
				created_at TEXT DEFAULT (datetime('now','localtime')),
				updated_at TEXT DEFAULT (datetime('now','localtime'))
			);
		""")
		# Teacher payouts; month holds the "Month Year" period
		c.execute("""
			CREATE TABLE IF NOT EXISTS teacher_payments (
				id TEXT PRIMARY KEY,
				teacher_id TEXT NOT NULL,
				month TEXT NOT NULL,
				grade TEXT NOT NULL DEFAULT 'All',
				total_classes INTEGER NOT NULL DEFAULT 0,
				total_hours REAL NOT NULL DEFAULT 0,
				amount_payable REAL NOT NULL DEFAULT 0,
				amount_paid REAL NOT NULL DEFAULT 0,
				created_at TEXT DEFAULT (datetime('now','localtime')),
				updated_at TEXT DEFAULT (datetime('now','localtime'))
			);
		""")
		# Academy profile, a single row keyed 'main'
		c.execute("""
			CREATE TABLE IF NOT EXISTS academy_info (
				id TEXT PRIMARY KEY,
				name TEXT NOT NULL,
				address TEXT,
				email TEXT,
				contact TEXT
			);
		""")
		# Settings table
		c.execute("""
			CREATE TABLE IF NOT EXISTS settings (
				key TEXT PRIMARY KEY,
				value TEXT NOT NULL
			);
		""")

		# Lookup indexes
		c.execute("CREATE INDEX IF NOT EXISTS idx_teachers_status ON teachers(status);")
		c.execute("CREATE INDEX IF NOT EXISTS idx_students_grade ON students(grade);")
		c.execute("CREATE INDEX IF NOT EXISTS idx_schedules_teacher_period ON schedules(teacher_id, month, year, grade);")
		c.execute("CREATE INDEX IF NOT EXISTS idx_schedules_date ON schedules(date);")
		c.execute("CREATE INDEX IF NOT EXISTS idx_attendance_class ON attendance(class_id);")
		c.execute("CREATE INDEX IF NOT EXISTS idx_attendance_student ON attendance(student_id);")
		c.execute("CREATE INDEX IF NOT EXISTS idx_student_payments_student ON student_payments(student_id);")
		c.execute("CREATE INDEX IF NOT EXISTS idx_student_payments_period ON student_payments(grade, month, year);")
		c.execute("CREATE INDEX IF NOT EXISTS idx_teacher_payments_month ON teacher_payments(month, grade);")
		c.execute("CREATE INDEX IF NOT EXISTS idx_teacher_payments_teacher ON teacher_payments(teacher_id);")

		# default preferences only on a fresh database
		c.execute("SELECT COUNT(*) FROM settings")
		if c.fetchone()[0] == 0:
			c.execute("INSERT INTO settings (key, value) VALUES (?, ?)", ("whatsapp_enabled", "1"))
			c.execute("INSERT INTO settings (key, value) VALUES (?, ?)", ("currency_prefix", "Rs."))

		conn.commit()
	finally:
		conn.close()

	migrate_schedules_rate_override()
	migrate_teacher_payments_date()
	migrate_academy_info_logo_path()
