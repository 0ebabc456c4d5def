import sqlite3
from dataclasses import replace

from PySide6.QtWidgets import (
    QWidget, QVBoxLayout, QHBoxLayout, QLabel, QLineEdit, QPushButton, QMessageBox,
    QFormLayout, QComboBox, QCheckBox, QDoubleSpinBox, QTableWidget, QTableWidgetItem, QHeaderView
)

from TutorDesk.core.models import Grade, PaymentType, Status
from TutorDesk.core.utils import format_currency


class TeacherManager(QWidget):
    def __init__(self, state):
        super().__init__()
        self.state = state
        self.setWindowTitle("Teacher Management")
        self.setGeometry(250, 250, 900, 600)

        layout = QVBoxLayout()
        layout.setSpacing(10)
        layout.setContentsMargins(15, 15, 15, 15)

        self.input_name = QLineEdit()
        self.input_name.setPlaceholderText("Full name")
        self.input_name.textChanged.connect(self.check_form_validity)

        self.input_subject = QLineEdit()
        self.input_subject.setPlaceholderText("Subject taught")

        grades_row = QHBoxLayout()
        self.grade_checks = {}
        for grade in Grade:
            box = QCheckBox(grade.label)
            self.grade_checks[grade] = box
            grades_row.addWidget(box)

        self.combo_payment_type = QComboBox()
        for pt in PaymentType:
            self.combo_payment_type.addItem(pt.value, pt)

        self.input_rate = QDoubleSpinBox()
        self.input_rate.setRange(0, 10_000_000)
        self.input_rate.setDecimals(2)

        self.input_contact = QLineEdit()
        self.input_whatsapp = QLineEdit()
        self.input_whatsapp.setPlaceholderText("WhatsApp number (optional)")

        self.combo_status = QComboBox()
        for st in Status:
            self.combo_status.addItem(st.value, st)

        form_layout = QFormLayout()
        form_layout.addRow("Name:", self.input_name)
        form_layout.addRow("Subject:", self.input_subject)
        form_layout.addRow("Grades:", grades_row)
        form_layout.addRow("Payment type:", self.combo_payment_type)
        form_layout.addRow("Rate:", self.input_rate)
        form_layout.addRow("Contact:", self.input_contact)
        form_layout.addRow("WhatsApp:", self.input_whatsapp)
        form_layout.addRow("Status:", self.combo_status)
        layout.addLayout(form_layout)

        self.btn_add = QPushButton("➕ Add Teacher")
        self.btn_add.clicked.connect(self.add_teacher)
        self.btn_update = QPushButton("✏ Update Teacher")
        self.btn_update.clicked.connect(self.update_teacher)
        self.btn_delete = QPushButton("🗑 Delete Teacher")
        self.btn_delete.clicked.connect(self.delete_teacher)
        self.btn_clear = QPushButton("🧹 Clear Form")
        self.btn_clear.clicked.connect(self.clear_form)
        button_row = QHBoxLayout()
        for btn in (self.btn_add, self.btn_update, self.btn_delete, self.btn_clear):
            button_row.addWidget(btn)
        layout.addLayout(button_row)

        self.search_input = QLineEdit()
        self.search_input.setPlaceholderText("Search by name or subject")
        self.search_input.textChanged.connect(self.load_teachers)
        layout.addWidget(self.search_input)

        self.table = QTableWidget(0, 6)
        self.table.setHorizontalHeaderLabels(["ID", "Name", "Subject", "Grades", "Rate", "Status"])
        self.table.horizontalHeader().setSectionResizeMode(QHeaderView.Stretch)
        self.table.setEditTriggers(QTableWidget.NoEditTriggers)
        self.table.setSelectionBehavior(QTableWidget.SelectRows)
        self.table.itemClicked.connect(self.fill_form)
        layout.addWidget(self.table)

        self.lbl_count = QLabel()
        self.lbl_count.setStyleSheet("font-size: 13px; color: gray; margin-top: 5px;")
        layout.addWidget(self.lbl_count)

        self.setLayout(layout)
        self.selected_teacher_id = None
        if self.state.bus is not None:
            self.state.bus.subscribe(self.load_teachers)
        self.load_teachers()
        self.check_form_validity()

    def _selected_grades(self):
        return tuple(g for g, box in self.grade_checks.items() if box.isChecked())

    def check_form_validity(self):
        has_name = bool(self.input_name.text().strip())
        self.btn_add.setEnabled(has_name and self.selected_teacher_id is None)
        self.btn_update.setEnabled(has_name and self.selected_teacher_id is not None)
        self.btn_delete.setEnabled(self.selected_teacher_id is not None)

    def load_teachers(self, *_):
        term = self.search_input.text().strip().lower()
        teachers = [t for t in self.state.teachers
                    if term in t.name.lower() or term in t.subject.lower()]
        self.table.setRowCount(len(teachers))
        for row, t in enumerate(teachers):
            values = [t.id, t.name, t.subject, ", ".join(g.value for g in t.grades),
                      f"{format_currency(t.rate)} / {t.rate_unit}", t.status.value]
            for col, value in enumerate(values):
                self.table.setItem(row, col, QTableWidgetItem(value))
        self.lbl_count.setText(f"Teachers: {len(teachers)}")

    def add_teacher(self):
        try:
            self.state.add_teacher(
                self.input_name.text().strip(),
                self.input_subject.text().strip(),
                self._selected_grades(),
                self.combo_payment_type.currentData(),
                self.input_rate.value(),
                self.input_contact.text().strip(),
                self.input_whatsapp.text().strip(),
                self.combo_status.currentData(),
            )
        except (ValueError, sqlite3.Error) as e:
            QMessageBox.warning(self, "Invalid Teacher", str(e))
            return
        self.clear_form()

    def update_teacher(self):
        teacher = self.state.get_teacher(self.selected_teacher_id)
        if teacher is None:
            return
        updated = replace(
            teacher,
            name=self.input_name.text().strip(),
            subject=self.input_subject.text().strip(),
            grades=self._selected_grades(),
            payment_type=self.combo_payment_type.currentData(),
            rate=self.input_rate.value(),
            contact=self.input_contact.text().strip(),
            whatsapp=self.input_whatsapp.text().strip(),
            status=self.combo_status.currentData(),
        )
        try:
            self.state.update_teacher(updated)
        except (ValueError, sqlite3.Error) as e:
            QMessageBox.warning(self, "Invalid Teacher", str(e))
            return
        self.clear_form()

    def delete_teacher(self):
        teacher = self.state.get_teacher(self.selected_teacher_id)
        if teacher is None:
            return
        reply = QMessageBox.question(
            self, "Delete Teacher",
            f"Delete {teacher.name}? Existing sessions and payouts will show the teacher as Unknown.",
        )
        if reply == QMessageBox.Yes:
            self.state.delete_teacher(teacher.id)
            self.clear_form()

    def fill_form(self, item):
        teacher = self.state.get_teacher(self.table.item(item.row(), 0).text())
        if teacher is None:
            return
        self.selected_teacher_id = teacher.id
        self.input_name.setText(teacher.name)
        self.input_subject.setText(teacher.subject)
        for grade, box in self.grade_checks.items():
            box.setChecked(grade in teacher.grades)
        self.combo_payment_type.setCurrentIndex(self.combo_payment_type.findData(teacher.payment_type))
        self.input_rate.setValue(teacher.rate)
        self.input_contact.setText(teacher.contact)
        self.input_whatsapp.setText(teacher.whatsapp)
        self.combo_status.setCurrentIndex(self.combo_status.findData(teacher.status))
        self.check_form_validity()

    def clear_form(self):
        self.selected_teacher_id = None
        self.input_name.clear()
        self.input_subject.clear()
        for box in self.grade_checks.values():
            box.setChecked(False)
        self.combo_payment_type.setCurrentIndex(0)
        self.input_rate.setValue(0)
        self.input_contact.clear()
        self.input_whatsapp.clear()
        self.combo_status.setCurrentIndex(0)
        self.check_form_validity()
