import shutil

from PySide6.QtWidgets import (
    QWidget, QVBoxLayout, QHBoxLayout, QGridLayout, QPushButton, QFileDialog, QMessageBox,
    QLabel, QGroupBox, QTableWidget, QTableWidgetItem, QHeaderView
)
from PySide6.QtCore import Qt

from TutorDesk import __version__
from TutorDesk.paths import get_db_path
from TutorDesk.core.reports import dashboard_stats, finance_totals, recent_student_payments
from TutorDesk.core.utils import format_currency
from TutorDesk.ui.windows.teacher_manager import TeacherManager
from TutorDesk.ui.windows.student_manager import StudentManager
from TutorDesk.ui.windows.schedule_manager import ScheduleManager
from TutorDesk.ui.windows.attendance_window import AttendanceWindow
from TutorDesk.ui.windows.student_payments_window import StudentPaymentsWindow
from TutorDesk.ui.windows.teacher_payout_window import TeacherPayoutWindow
from TutorDesk.ui.windows.salary_slip_window import SalarySlipWindow
from TutorDesk.ui.windows.academy_info_window import AcademyInfoWindow
from TutorDesk.ui.reports.reports_window import ReportsWindow


class DashboardWindow(QWidget):
    def __init__(self, state, username="admin"):
        super().__init__()
        self.state = state
        self.username = username
        self.setWindowTitle("Admin Dashboard")
        self.setGeometry(150, 150, 900, 600)

        layout = QHBoxLayout()
        layout.setSpacing(12)
        button_style = "font-size: 15px; padding: 10px;"

        # ----------- navigation ------------
        nav = QVBoxLayout()
        buttons_top = [
            ("🧑‍🏫 Teachers", TeacherManager),
            ("🎓 Students", StudentManager),
            ("📅 Class Schedules", ScheduleManager),
            ("📋 Attendance", AttendanceWindow),
            ("💰 Student Payments", StudentPaymentsWindow),
            ("💵 Teacher Payouts", TeacherPayoutWindow),
            ("🧾 Salary Slips", SalarySlipWindow),
        ]
        for title, window_cls in buttons_top:
            btn = QPushButton(title)
            btn.setStyleSheet(button_style)
            btn.clicked.connect(lambda _=False, cls=window_cls: self.open_window(cls))
            nav.addWidget(btn)

        nav.addSpacing(20)
        buttons_bottom = [
            ("📊 Reports", lambda: self.open_window(ReportsWindow)),
            ("🏫 Academy Profile", lambda: self.open_window(AcademyInfoWindow)),
            ("📥 Backup Database", self.backup_database),
            ("📤 Restore Backup", self.restore_database),
            ("❌ Exit", self.close),
        ]
        for title, handler in buttons_bottom:
            btn = QPushButton(title)
            btn.setStyleSheet(button_style)
            btn.clicked.connect(handler)
            nav.addWidget(btn)

        version_label = QLabel(f"Version: {__version__}")
        version_label.setStyleSheet("color: gray; font-size: 12px; margin-top: 15px;")
        version_label.setAlignment(Qt.AlignCenter)
        nav.addWidget(version_label)
        nav.addStretch()

        # ----------- overview ------------
        overview = QVBoxLayout()
        self.lbl_academy = QLabel()
        self.lbl_academy.setStyleSheet("font-size: 18px; font-weight: bold;")
        overview.addWidget(self.lbl_academy)

        stats_box = QGroupBox("Overview")
        self.stats_grid = QGridLayout()
        self.stat_labels = {}
        for i, (key, caption) in enumerate([
            ("active_students", "Active Students"),
            ("teachers", "Teachers"),
            ("total_revenue", "Revenue"),
            ("classes", "Classes"),
            ("total_outstanding", "Outstanding Fees"),
            ("total_teacher_payout", "Teacher Payouts"),
        ]):
            self.stats_grid.addWidget(QLabel(caption), i // 3 * 2, i % 3)
            value = QLabel("0")
            value.setStyleSheet("font-size: 16px; font-weight: bold;")
            self.stats_grid.addWidget(value, i // 3 * 2 + 1, i % 3)
            self.stat_labels[key] = value
        stats_box.setLayout(self.stats_grid)
        overview.addWidget(stats_box)

        self.lbl_grades = QLabel()
        self.lbl_grades.setStyleSheet("color: #555;")
        overview.addWidget(self.lbl_grades)

        overview.addWidget(QLabel("Recent payments:"))
        self.table_recent = QTableWidget(0, 4)
        self.table_recent.setHorizontalHeaderLabels(["Student", "Month", "Paid", "Status"])
        self.table_recent.horizontalHeader().setSectionResizeMode(QHeaderView.Stretch)
        self.table_recent.setEditTriggers(QTableWidget.NoEditTriggers)
        overview.addWidget(self.table_recent)

        layout.addLayout(nav, 1)
        layout.addLayout(overview, 3)
        self.setLayout(layout)

        self.windows = {}
        if self.state.bus is not None:
            self.state.bus.subscribe(self.refresh)
        self.refresh()

    def refresh(self, *_):
        self.lbl_academy.setText(f"{self.state.academy_info.name}  ·  {self.username}")
        stats = dashboard_stats(self.state)
        totals = finance_totals(self.state)
        self.stat_labels["active_students"].setText(str(stats["active_students"]))
        self.stat_labels["teachers"].setText(str(stats["teachers"]))
        self.stat_labels["classes"].setText(str(stats["classes"]))
        self.stat_labels["total_revenue"].setText(format_currency(stats["total_revenue"]))
        self.stat_labels["total_outstanding"].setText(format_currency(totals["total_outstanding"]))
        self.stat_labels["total_teacher_payout"].setText(format_currency(totals["total_teacher_payout"]))
        self.lbl_grades.setText("   ".join(f"{g}: {n}" for g, n in stats["students_per_grade"].items()))

        recent = recent_student_payments(self.state)
        self.table_recent.setRowCount(len(recent))
        for row, p in enumerate(recent):
            values = [self.state.student_name(p.student_id), f"{p.month} {p.year}",
                      format_currency(p.paid_amount), p.status.value]
            for col, value in enumerate(values):
                self.table_recent.setItem(row, col, QTableWidgetItem(value))

    def open_window(self, window_cls):
        window = window_cls(self.state)
        self.windows[window_cls.__name__] = window
        window.show()

    def backup_database(self):
        filename, _ = QFileDialog.getSaveFileName(self, "Save Database Backup", "tutordesk_backup.db",
                                                  "SQLite Files (*.db)")
        if filename:
            try:
                shutil.copyfile(get_db_path(), filename)
                QMessageBox.information(self, "Backup Saved", f"Backup written to:\n{filename}")
            except OSError as e:
                QMessageBox.critical(self, "Backup Failed", f"Could not write the backup:\n{e}")

    def restore_database(self):
        filename, _ = QFileDialog.getOpenFileName(self, "Choose Backup to Restore", "", "SQLite Files (*.db)")
        if filename:
            try:
                shutil.copyfile(filename, get_db_path())
            except OSError as e:
                QMessageBox.critical(self, "Restore Failed", f"Could not restore the backup:\n{e}")
                return
            self.state.reload()
            if self.state.bus is not None:
                self.state.bus.publish("all")
            else:
                self.refresh()
            QMessageBox.information(self, "Restore Complete", "The backup was restored.")
