import logging

from PySide6.QtWidgets import (
    QWidget, QVBoxLayout, QHBoxLayout, QLabel, QComboBox, QDateEdit,
    QPushButton, QTableWidget, QTableWidgetItem, QHeaderView, QMessageBox, QCheckBox
)
from PySide6.QtCore import Qt, QDate

from TutorDesk.core.attendance_gate import AttendanceAlreadyMarkedError
from TutorDesk.core.models import Grade

logger = logging.getLogger(__name__)


class AttendanceWindow(QWidget):
    def __init__(self, state):
        super().__init__()
        self.state = state
        self.setWindowTitle("Attendance")
        self.setGeometry(300, 200, 700, 550)

        layout = QVBoxLayout()

        # --------- date and grade ----------
        filter_layout = QHBoxLayout()
        filter_layout.addWidget(QLabel("Date:"))
        self.date_session = QDateEdit(QDate.currentDate())
        self.date_session.setCalendarPopup(True)
        self.date_session.setDisplayFormat("yyyy-MM-dd")
        self.date_session.dateChanged.connect(self.load_sessions)
        filter_layout.addWidget(self.date_session)

        filter_layout.addWidget(QLabel("Grade:"))
        self.combo_grade = QComboBox()
        self.combo_grade.addItem("All Grades", None)
        for grade in Grade:
            self.combo_grade.addItem(grade.label, grade)
        self.combo_grade.currentIndexChanged.connect(self.load_sessions)
        filter_layout.addWidget(self.combo_grade)
        layout.addLayout(filter_layout)

        # --------- session ----------
        session_layout = QHBoxLayout()
        session_layout.addWidget(QLabel("Session:"))
        self.combo_session = QComboBox()
        self.combo_session.currentIndexChanged.connect(self.load_students)
        session_layout.addWidget(self.combo_session)
        layout.addLayout(session_layout)

        self.lbl_status = QLabel()
        self.lbl_status.setStyleSheet("font-weight: bold;")
        layout.addWidget(self.lbl_status)

        # --------- roll ----------
        self.table = QTableWidget(0, 3)
        self.table.setHorizontalHeaderLabels(["ID", "Student", "Present"])
        self.table.setColumnHidden(0, True)
        self.table.horizontalHeader().setSectionResizeMode(QHeaderView.Stretch)
        self.table.setEditTriggers(QTableWidget.NoEditTriggers)
        layout.addWidget(self.table)

        btn_row = QHBoxLayout()
        self.btn_all_present = QPushButton("Mark All Present")
        self.btn_all_present.clicked.connect(lambda: self.set_all(True))
        self.btn_save = QPushButton("💾 Save Attendance")
        self.btn_save.clicked.connect(self.save_attendance)
        btn_row.addWidget(self.btn_all_present)
        btn_row.addWidget(self.btn_save)
        layout.addLayout(btn_row)

        self.setLayout(layout)
        if self.state.bus is not None:
            self.state.bus.subscribe(self.load_sessions)
        self.load_sessions()

    def _date(self):
        return self.date_session.date().toString("yyyy-MM-dd")

    def load_sessions(self, *_):
        grade = self.combo_grade.currentData()
        current = self.combo_session.currentData()
        sessions = [
            s for s in self.state.schedules
            if s.date == self._date() and (grade is None or s.grade == grade)
        ]
        sessions.sort(key=lambda s: s.start_time)
        self.combo_session.blockSignals(True)
        self.combo_session.clear()
        for s in sessions:
            marked = " ✔" if self.state.is_session_marked(s.id) else ""
            self.combo_session.addItem(
                f"{s.start_time}-{s.end_time}  {s.grade.label}  {s.subject}  "
                f"({self.state.teacher_name(s.teacher_id)}){marked}",
                s.id,
            )
        index = self.combo_session.findData(current)
        self.combo_session.setCurrentIndex(index if index >= 0 else 0)
        self.combo_session.blockSignals(False)
        self.load_students()

    def load_students(self, *_):
        class_id = self.combo_session.currentData()
        self.table.setRowCount(0)
        if not class_id:
            self.lbl_status.setText("No sessions on this date.")
            self._set_editable(False)
            return

        marked = self.state.is_session_marked(class_id)
        recorded = {a.student_id: a.is_present for a in self.state.attendance if a.class_id == class_id}
        students = self.state.students_for_session(class_id)
        if marked:
            self.lbl_status.setText("Attendance already marked for this session.")
        else:
            self.lbl_status.setText(f"{len(students)} students expected.")

        self.table.setRowCount(len(students))
        for row, student in enumerate(students):
            self.table.setItem(row, 0, QTableWidgetItem(student.id))
            self.table.setItem(row, 1, QTableWidgetItem(student.name))
            box = QCheckBox()
            box.setChecked(recorded.get(student.id, False))
            box.setEnabled(not marked)
            cell = QWidget()
            cell_layout = QHBoxLayout(cell)
            cell_layout.addWidget(box)
            cell_layout.setAlignment(Qt.AlignCenter)
            cell_layout.setContentsMargins(0, 0, 0, 0)
            self.table.setCellWidget(row, 2, cell)
        self._set_editable(not marked and bool(students))

    def _set_editable(self, editable):
        self.btn_save.setEnabled(editable)
        self.btn_all_present.setEnabled(editable)

    def _checkbox(self, row):
        return self.table.cellWidget(row, 2).findChild(QCheckBox)

    def set_all(self, present):
        for row in range(self.table.rowCount()):
            self._checkbox(row).setChecked(present)

    def save_attendance(self):
        class_id = self.combo_session.currentData()
        if not class_id:
            return
        present_map = {
            self.table.item(row, 0).text(): self._checkbox(row).isChecked()
            for row in range(self.table.rowCount())
        }
        try:
            saved = self.state.mark_attendance(class_id, present_map)
        except AttendanceAlreadyMarkedError:
            QMessageBox.warning(self, "Already Marked", "Attendance for this session has already been recorded.")
            self.load_students()
            return
        present = sum(1 for a in saved if a.is_present)
        QMessageBox.information(self, "Attendance Saved", f"{present} of {len(saved)} students present.")
