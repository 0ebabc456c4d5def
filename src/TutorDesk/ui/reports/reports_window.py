import logging

from PySide6.QtWidgets import (
    QWidget, QVBoxLayout, QHBoxLayout, QLabel, QPushButton, QMessageBox, QComboBox,
    QTableWidget, QTableWidgetItem, QHeaderView
)

from TutorDesk.config import get_reports_dir
from TutorDesk.core.exporter import export_dual_reports
from TutorDesk.core.reports import (
    attendance_by_subject_report, finance_totals, schedule_report, student_payment_report,
    teacher_directory_report, teacher_payment_report,
)
from TutorDesk.core.utils import format_currency

logger = logging.getLogger(__name__)

REPORTS = [
    ("Student Payments", student_payment_report),
    ("Teacher Directory", teacher_directory_report),
    ("Teacher Payments", teacher_payment_report),
    ("Class Schedules", schedule_report),
    ("Attendance by Subject", attendance_by_subject_report),
]


class ReportsWindow(QWidget):
    def __init__(self, state):
        super().__init__()
        self.state = state
        self.setWindowTitle("Reports")
        self.setGeometry(200, 150, 1200, 650)

        layout = QVBoxLayout()

        top_row = QHBoxLayout()
        self.combo_report = QComboBox()
        for caption, builder in REPORTS:
            self.combo_report.addItem(caption, builder)
        self.combo_report.currentIndexChanged.connect(self.load_report)
        btn_export = QPushButton("📤 Export PDF + Excel")
        btn_export.clicked.connect(self.export_report)
        top_row.addWidget(QLabel("Report:"))
        top_row.addWidget(self.combo_report, 1)
        top_row.addWidget(btn_export)
        layout.addLayout(top_row)

        self.summary_label = QLabel()
        self.summary_label.setStyleSheet("font-size: 14px; font-weight: bold; color: #333;")
        layout.addWidget(self.summary_label)

        self.table = QTableWidget()
        self.table.setEditTriggers(QTableWidget.NoEditTriggers)
        layout.addWidget(self.table)

        self.setLayout(layout)
        self.report = None
        if self.state.bus is not None:
            self.state.bus.subscribe(self.load_report)
        self.load_report()

    def load_report(self, *_):
        builder = self.combo_report.currentData()
        self.report = builder(self.state)
        self.table.setColumnCount(len(self.report.headers))
        self.table.setHorizontalHeaderLabels(self.report.headers)
        self.table.horizontalHeader().setSectionResizeMode(QHeaderView.Stretch)
        self.table.setRowCount(len(self.report.rows))
        for row, values in enumerate(self.report.rows):
            for col, value in enumerate(values):
                self.table.setItem(row, col, QTableWidgetItem(str(value)))

        totals = finance_totals(self.state)
        self.summary_label.setText(
            f"Collections: {format_currency(totals['total_collections'])}   "
            f"Outstanding: {format_currency(totals['total_outstanding'])}   "
            f"Teacher payouts: {format_currency(totals['total_teacher_payout'])}"
        )

    def export_report(self):
        if self.report is None:
            return
        try:
            pdf_path, xlsx_path = export_dual_reports(self.state.academy_info, self.report, get_reports_dir())
        except OSError as e:
            logger.error("Export of %s failed: %s", self.report.title, e)
            QMessageBox.critical(self, "Export Failed", f"Could not write the report:\n{e}")
            return
        QMessageBox.information(self, "Report Exported", f"Saved:\n{pdf_path}\n{xlsx_path}")
