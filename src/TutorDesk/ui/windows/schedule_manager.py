import sqlite3
from dataclasses import replace

from PySide6.QtWidgets import (
    QWidget, QVBoxLayout, QHBoxLayout, QLabel, QLineEdit, QPushButton, QMessageBox, QFormLayout,
    QComboBox, QCheckBox, QDoubleSpinBox, QDateEdit, QTimeEdit, QTableWidget, QTableWidgetItem,
    QHeaderView
)
from PySide6.QtCore import QDate, QTime

from TutorDesk.core.models import Grade, Status
from TutorDesk.core.utils import calculate_hours, format_hours


class ScheduleManager(QWidget):
    def __init__(self, state):
        super().__init__()
        self.state = state
        self.setWindowTitle("Class Schedules")
        self.setGeometry(250, 200, 1000, 650)

        layout = QVBoxLayout()
        layout.setSpacing(10)

        self.combo_grade = QComboBox()
        for grade in Grade:
            self.combo_grade.addItem(grade.label, grade)
        self.combo_grade.currentIndexChanged.connect(self.load_teacher_options)

        self.combo_teacher = QComboBox()
        self.combo_teacher.currentIndexChanged.connect(self.fill_subject)
        self.input_subject = QLineEdit()

        self.date_session = QDateEdit(QDate.currentDate())
        self.date_session.setCalendarPopup(True)
        self.date_session.setDisplayFormat("yyyy-MM-dd")

        self.time_start = QTimeEdit(QTime(15, 0))
        self.time_end = QTimeEdit(QTime(17, 0))
        for w in (self.time_start, self.time_end):
            w.setDisplayFormat("HH:mm")
            w.timeChanged.connect(self.update_duration)
        self.lbl_duration = QLabel()

        self.check_override = QCheckBox("Override teacher rate for this session")
        self.input_override = QDoubleSpinBox()
        self.input_override.setRange(0, 10_000_000)
        self.input_override.setDecimals(2)
        self.input_override.setEnabled(False)
        self.check_override.toggled.connect(self.input_override.setEnabled)

        form_layout = QFormLayout()
        form_layout.addRow("Grade:", self.combo_grade)
        form_layout.addRow("Teacher:", self.combo_teacher)
        form_layout.addRow("Subject:", self.input_subject)
        form_layout.addRow("Date:", self.date_session)
        form_layout.addRow("Start:", self.time_start)
        form_layout.addRow("End:", self.time_end)
        form_layout.addRow("Duration:", self.lbl_duration)
        form_layout.addRow(self.check_override, self.input_override)
        layout.addLayout(form_layout)

        self.btn_add = QPushButton("➕ Add Session")
        self.btn_add.clicked.connect(self.add_session)
        self.btn_update = QPushButton("✏ Update Session")
        self.btn_update.clicked.connect(self.update_session)
        self.btn_delete = QPushButton("🗑 Delete Session")
        self.btn_delete.clicked.connect(self.delete_session)
        self.btn_clear = QPushButton("🧹 Clear Form")
        self.btn_clear.clicked.connect(self.clear_form)
        button_row = QHBoxLayout()
        for btn in (self.btn_add, self.btn_update, self.btn_delete, self.btn_clear):
            button_row.addWidget(btn)
        layout.addLayout(button_row)

        self.table = QTableWidget(0, 8)
        self.table.setHorizontalHeaderLabels(
            ["ID", "Date", "Grade", "Subject", "Teacher", "Time", "Duration", "Rate Override"]
        )
        self.table.horizontalHeader().setSectionResizeMode(QHeaderView.Stretch)
        self.table.setEditTriggers(QTableWidget.NoEditTriggers)
        self.table.setSelectionBehavior(QTableWidget.SelectRows)
        self.table.itemClicked.connect(self.fill_form)
        layout.addWidget(self.table)

        self.setLayout(layout)
        self.selected_schedule_id = None
        if self.state.bus is not None:
            self.state.bus.subscribe(self.refresh)
        self.refresh()
        self.update_duration()

    def refresh(self, *_):
        self.load_teacher_options()
        self.load_schedules()

    def load_teacher_options(self, *_):
        grade = self.combo_grade.currentData()
        current = self.combo_teacher.currentData()
        self.combo_teacher.blockSignals(True)
        self.combo_teacher.clear()
        for t in self.state.teachers:
            if t.status == Status.ACTIVE and (not t.grades or grade in t.grades):
                self.combo_teacher.addItem(f"{t.name} ({t.subject})", t.id)
        index = self.combo_teacher.findData(current)
        self.combo_teacher.setCurrentIndex(index if index >= 0 else 0)
        self.combo_teacher.blockSignals(False)
        self.fill_subject()

    def fill_subject(self, *_):
        teacher = self.state.get_teacher(self.combo_teacher.currentData())
        if teacher is not None and not self.input_subject.text().strip():
            self.input_subject.setText(teacher.subject)

    def update_duration(self, *_):
        hours = calculate_hours(self._start(), self._end())
        self.lbl_duration.setText(format_hours(hours))

    def _start(self):
        return self.time_start.time().toString("HH:mm")

    def _end(self):
        return self.time_end.time().toString("HH:mm")

    def _override(self):
        return self.input_override.value() if self.check_override.isChecked() else None

    def load_schedules(self):
        schedules = sorted(self.state.schedules, key=lambda s: (s.date, s.start_time), reverse=True)
        self.table.setRowCount(len(schedules))
        for row, s in enumerate(schedules):
            values = [
                s.id, s.date, s.grade.label, s.subject, self.state.teacher_name(s.teacher_id),
                f"{s.start_time} - {s.end_time}", format_hours(s.total_hours),
                "" if s.rate_override is None else f"{s.rate_override:,.2f}",
            ]
            for col, value in enumerate(values):
                self.table.setItem(row, col, QTableWidgetItem(value))

    def add_session(self):
        teacher_id = self.combo_teacher.currentData()
        if not teacher_id:
            QMessageBox.warning(self, "Missing Teacher", "Choose a teacher for this grade first.")
            return
        if calculate_hours(self._start(), self._end()) == 0:
            reply = QMessageBox.question(self, "Zero Duration", "The session ends before it starts. Save anyway?")
            if reply != QMessageBox.Yes:
                return
        try:
            self.state.add_schedule(
                self.combo_grade.currentData(),
                self.input_subject.text().strip(),
                teacher_id,
                self.date_session.date().toString("yyyy-MM-dd"),
                self._start(),
                self._end(),
                self._override(),
            )
        except (ValueError, sqlite3.Error) as e:
            QMessageBox.warning(self, "Invalid Session", str(e))
            return
        self.clear_form()

    def update_session(self):
        schedule = self.state.get_schedule(self.selected_schedule_id)
        if schedule is None:
            return
        updated = replace(
            schedule,
            grade=self.combo_grade.currentData(),
            subject=self.input_subject.text().strip(),
            teacher_id=self.combo_teacher.currentData() or schedule.teacher_id,
            rate_override=self._override(),
        ).with_date(self.date_session.date().toString("yyyy-MM-dd")).with_times(self._start(), self._end())
        try:
            self.state.update_schedule(updated)
        except (ValueError, sqlite3.Error) as e:
            QMessageBox.warning(self, "Invalid Session", str(e))
            return
        self.clear_form()

    def delete_session(self):
        schedule = self.state.get_schedule(self.selected_schedule_id)
        if schedule is None:
            return
        reply = QMessageBox.question(self, "Delete Session", f"Delete the {schedule.subject} session on {schedule.date}?")
        if reply == QMessageBox.Yes:
            self.state.delete_schedule(schedule.id)
            self.clear_form()

    def fill_form(self, item):
        schedule = self.state.get_schedule(self.table.item(item.row(), 0).text())
        if schedule is None:
            return
        self.selected_schedule_id = schedule.id
        self.combo_grade.setCurrentIndex(self.combo_grade.findData(schedule.grade))
        index = self.combo_teacher.findData(schedule.teacher_id)
        if index >= 0:
            self.combo_teacher.setCurrentIndex(index)
        self.input_subject.setText(schedule.subject)
        self.date_session.setDate(QDate.fromString(schedule.date, "yyyy-MM-dd"))
        self.time_start.setTime(QTime.fromString(schedule.start_time, "HH:mm"))
        self.time_end.setTime(QTime.fromString(schedule.end_time, "HH:mm"))
        self.check_override.setChecked(schedule.rate_override is not None)
        self.input_override.setValue(schedule.rate_override or 0)

    def clear_form(self):
        self.selected_schedule_id = None
        self.input_subject.clear()
        self.check_override.setChecked(False)
        self.input_override.setValue(0)
        self.fill_subject()
