from PySide6.QtWidgets import (
    QWidget, QVBoxLayout, QHBoxLayout, QLabel, QLineEdit, QPushButton, QMessageBox, QComboBox,
    QTableWidget, QTableWidgetItem, QHeaderView
)

from TutorDesk.config import get_reports_dir
from TutorDesk.core.exporter import export_dual_reports
from TutorDesk.core.models import GRADE_ALL, Grade
from TutorDesk.core.reports import salary_breakdown_report
from TutorDesk.core.utils import MONTHS, current_period


class SalarySlipWindow(QWidget):
    def __init__(self, state):
        super().__init__()
        self.state = state
        self.setWindowTitle("Salary Slips")
        self.setGeometry(250, 200, 1000, 600)

        layout = QVBoxLayout()

        filter_row = QHBoxLayout()
        self.combo_teacher = QComboBox()
        self.combo_month = QComboBox()
        self.combo_month.addItems(MONTHS)
        self.input_year = QLineEdit()
        self.combo_scope = QComboBox()
        self.combo_scope.addItem("All Grades", GRADE_ALL)
        for grade in Grade:
            self.combo_scope.addItem(grade.label, grade.value)
        month, year = current_period()
        self.combo_month.setCurrentText(month)
        self.input_year.setText(year)
        for w in (self.combo_teacher, self.combo_month, self.combo_scope):
            w.currentIndexChanged.connect(self.load_breakdown)
        self.input_year.editingFinished.connect(self.load_breakdown)

        filter_row.addWidget(QLabel("Teacher:"))
        filter_row.addWidget(self.combo_teacher)
        filter_row.addWidget(self.combo_month)
        filter_row.addWidget(self.input_year)
        filter_row.addWidget(self.combo_scope)
        layout.addLayout(filter_row)

        self.lbl_title = QLabel()
        self.lbl_title.setStyleSheet("font-size: 15px; font-weight: bold;")
        layout.addWidget(self.lbl_title)

        self.table = QTableWidget()
        self.table.setEditTriggers(QTableWidget.NoEditTriggers)
        layout.addWidget(self.table)

        self.btn_export = QPushButton("📤 Export Salary Slip (PDF + Excel)")
        self.btn_export.clicked.connect(self.export_slip)
        layout.addWidget(self.btn_export)

        self.setLayout(layout)
        self.report = None
        if self.state.bus is not None:
            self.state.bus.subscribe(self.refresh)
        self.refresh()

    def refresh(self, *_):
        current = self.combo_teacher.currentData()
        self.combo_teacher.blockSignals(True)
        self.combo_teacher.clear()
        for t in self.state.teachers:
            self.combo_teacher.addItem(t.name, t.id)
        index = self.combo_teacher.findData(current)
        self.combo_teacher.setCurrentIndex(index if index >= 0 else 0)
        self.combo_teacher.blockSignals(False)
        self.load_breakdown()

    def load_breakdown(self, *_):
        teacher_id = self.combo_teacher.currentData()
        if not teacher_id:
            self.report = None
            self.table.setRowCount(0)
            self.lbl_title.setText("No teachers yet.")
            self.btn_export.setEnabled(False)
            return
        self.report = salary_breakdown_report(
            self.state, teacher_id, self.combo_month.currentText(), self.input_year.text().strip(),
            self.combo_scope.currentData(),
        )
        self.lbl_title.setText(self.report.title)
        self.table.setColumnCount(len(self.report.headers))
        self.table.setHorizontalHeaderLabels(self.report.headers)
        self.table.horizontalHeader().setSectionResizeMode(QHeaderView.Stretch)
        self.table.setRowCount(len(self.report.rows))
        for row, values in enumerate(self.report.rows):
            for col, value in enumerate(values):
                self.table.setItem(row, col, QTableWidgetItem(str(value)))
        self.btn_export.setEnabled(True)

    def export_slip(self):
        if self.report is None:
            return
        try:
            pdf_path, xlsx_path = export_dual_reports(self.state.academy_info, self.report, get_reports_dir())
        except OSError as e:
            QMessageBox.critical(self, "Export Failed", f"Could not write the salary slip:\n{e}")
            return
        QMessageBox.information(self, "Salary Slip Exported", f"Saved:\n{pdf_path}\n{xlsx_path}")
