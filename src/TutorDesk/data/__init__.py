"""Data layer package: database connection, schema, migrations and table repositories."""

from .schema import create_tables
from .repos.settings_repo import (
	set_setting, get_setting, get_setting_bool, set_setting_bool, ensure_bool_setting
)
from .repos.teachers_repo import (
	fetch_teachers, get_teacher_by_id, insert_teacher, update_teacher_by_id, delete_teacher_by_id
)
from .repos.students_repo import (
	fetch_students, insert_student, update_student_by_id, delete_student_by_id
)
from .repos.schedules_repo import (
	fetch_schedules, fetch_schedules_for_period, get_schedule_by_id,
	insert_schedule, update_schedule_by_id, delete_schedule_by_id
)
from .repos.attendance_repo import (
	fetch_attendance, fetch_attendance_for_class, class_has_attendance, insert_attendance
)
from .repos.student_payments_repo import (
	fetch_student_payments, fetch_student_payments_by_student, fetch_student_payments_for_period,
	insert_student_payment, update_student_payment_by_id, delete_student_payment_by_id
)
from .repos.teacher_payments_repo import (
	fetch_teacher_payments, fetch_teacher_payments_for_month,
	insert_teacher_payment, update_teacher_payment_by_id, delete_teacher_payment_by_id
)
from .repos.academy_repo import get_academy_info, save_academy_info
