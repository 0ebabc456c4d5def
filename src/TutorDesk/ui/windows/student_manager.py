import sqlite3
from dataclasses import replace

from PySide6.QtWidgets import (
    QWidget, QVBoxLayout, QHBoxLayout, QLabel, QLineEdit, QPushButton, QMessageBox,
    QFormLayout, QComboBox, QTableWidget, QTableWidgetItem, QHeaderView
)

from TutorDesk.core.models import Grade, Status


class StudentManager(QWidget):
    def __init__(self, state):
        super().__init__()
        self.state = state
        self.setWindowTitle("Student Management")
        self.setGeometry(250, 250, 900, 600)

        layout = QVBoxLayout()
        layout.setSpacing(10)
        layout.setContentsMargins(15, 15, 15, 15)

        self.input_name = QLineEdit()
        self.input_name.textChanged.connect(self.check_form_validity)
        self.input_guardian = QLineEdit()
        self.combo_grade = QComboBox()
        for grade in Grade:
            self.combo_grade.addItem(grade.label, grade)
        self.input_contact = QLineEdit()
        self.input_whatsapp = QLineEdit()
        self.input_whatsapp.setPlaceholderText("Guardian's WhatsApp number")
        self.combo_status = QComboBox()
        for st in Status:
            self.combo_status.addItem(st.value, st)

        form_layout = QFormLayout()
        form_layout.addRow("Name:", self.input_name)
        form_layout.addRow("Guardian:", self.input_guardian)
        form_layout.addRow("Grade:", self.combo_grade)
        form_layout.addRow("Contact:", self.input_contact)
        form_layout.addRow("WhatsApp:", self.input_whatsapp)
        form_layout.addRow("Status:", self.combo_status)
        layout.addLayout(form_layout)

        self.btn_add = QPushButton("➕ Add Student")
        self.btn_add.clicked.connect(self.add_student)
        self.btn_update = QPushButton("✏ Update Student")
        self.btn_update.clicked.connect(self.update_student)
        self.btn_delete = QPushButton("🗑 Delete Student")
        self.btn_delete.clicked.connect(self.delete_student)
        self.btn_clear = QPushButton("🧹 Clear Form")
        self.btn_clear.clicked.connect(self.clear_form)
        button_row = QHBoxLayout()
        for btn in (self.btn_add, self.btn_update, self.btn_delete, self.btn_clear):
            button_row.addWidget(btn)
        layout.addLayout(button_row)

        filter_row = QHBoxLayout()
        self.search_input = QLineEdit()
        self.search_input.setPlaceholderText("Search by student or guardian name")
        self.search_input.textChanged.connect(self.load_students)
        self.combo_filter_grade = QComboBox()
        self.combo_filter_grade.addItem("All Grades", None)
        for grade in Grade:
            self.combo_filter_grade.addItem(grade.label, grade)
        self.combo_filter_grade.currentIndexChanged.connect(self.load_students)
        filter_row.addWidget(self.search_input)
        filter_row.addWidget(self.combo_filter_grade)
        layout.addLayout(filter_row)

        self.table = QTableWidget(0, 6)
        self.table.setHorizontalHeaderLabels(["ID", "Name", "Guardian", "Grade", "WhatsApp", "Status"])
        self.table.horizontalHeader().setSectionResizeMode(QHeaderView.Stretch)
        self.table.setEditTriggers(QTableWidget.NoEditTriggers)
        self.table.setSelectionBehavior(QTableWidget.SelectRows)
        self.table.itemClicked.connect(self.fill_form)
        layout.addWidget(self.table)

        self.lbl_count = QLabel()
        self.lbl_count.setStyleSheet("font-size: 13px; color: gray; margin-top: 5px;")
        layout.addWidget(self.lbl_count)

        self.setLayout(layout)
        self.selected_student_id = None
        if self.state.bus is not None:
            self.state.bus.subscribe(self.load_students)
        self.load_students()
        self.check_form_validity()

    def check_form_validity(self):
        has_name = bool(self.input_name.text().strip())
        self.btn_add.setEnabled(has_name and self.selected_student_id is None)
        self.btn_update.setEnabled(has_name and self.selected_student_id is not None)
        self.btn_delete.setEnabled(self.selected_student_id is not None)

    def load_students(self, *_):
        term = self.search_input.text().strip().lower()
        grade = self.combo_filter_grade.currentData()
        students = [
            s for s in self.state.students
            if (grade is None or s.grade == grade)
            and (term in s.name.lower() or term in s.guardian_name.lower())
        ]
        self.table.setRowCount(len(students))
        for row, s in enumerate(students):
            values = [s.id, s.name, s.guardian_name, s.grade.label, s.whatsapp or s.contact, s.status.value]
            for col, value in enumerate(values):
                self.table.setItem(row, col, QTableWidgetItem(value))
        self.lbl_count.setText(f"Students: {len(students)}")

    def add_student(self):
        try:
            self.state.add_student(
                self.input_name.text().strip(),
                self.input_guardian.text().strip(),
                self.combo_grade.currentData(),
                self.input_contact.text().strip(),
                self.input_whatsapp.text().strip(),
                self.combo_status.currentData(),
            )
        except sqlite3.Error as e:
            QMessageBox.critical(self, "Save Failed", str(e))
            return
        self.clear_form()

    def update_student(self):
        student = self.state.get_student(self.selected_student_id)
        if student is None:
            return
        self.state.update_student(replace(
            student,
            name=self.input_name.text().strip(),
            guardian_name=self.input_guardian.text().strip(),
            grade=self.combo_grade.currentData(),
            contact=self.input_contact.text().strip(),
            whatsapp=self.input_whatsapp.text().strip(),
            status=self.combo_status.currentData(),
        ))
        self.clear_form()

    def delete_student(self):
        student = self.state.get_student(self.selected_student_id)
        if student is None:
            return
        reply = QMessageBox.question(self, "Delete Student", f"Delete {student.name}?")
        if reply == QMessageBox.Yes:
            self.state.delete_student(student.id)
            self.clear_form()

    def fill_form(self, item):
        student = self.state.get_student(self.table.item(item.row(), 0).text())
        if student is None:
            return
        self.selected_student_id = student.id
        self.input_name.setText(student.name)
        self.input_guardian.setText(student.guardian_name)
        self.combo_grade.setCurrentIndex(self.combo_grade.findData(student.grade))
        self.input_contact.setText(student.contact)
        self.input_whatsapp.setText(student.whatsapp)
        self.combo_status.setCurrentIndex(self.combo_status.findData(student.status))
        self.check_form_validity()

    def clear_form(self):
        self.selected_student_id = None
        self.input_name.clear()
        self.input_guardian.clear()
        self.combo_grade.setCurrentIndex(0)
        self.input_contact.clear()
        self.input_whatsapp.clear()
        self.combo_status.setCurrentIndex(0)
        self.check_form_validity()
