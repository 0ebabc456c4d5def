import sqlite3

from PySide6.QtWidgets import (
    QWidget, QVBoxLayout, QHBoxLayout, QLabel, QLineEdit, QPushButton, QMessageBox, QFormLayout,
    QComboBox, QDoubleSpinBox, QDateEdit, QTableWidget, QTableWidgetItem, QHeaderView
)
from PySide6.QtCore import QDate
from PySide6.QtGui import QColor

from TutorDesk.core.models import Grade, PaymentStatus
from TutorDesk.core.reconciliation import StudentPaymentDraft
from TutorDesk.core.utils import MONTHS, current_period, format_currency

STATUS_COLORS = {
    PaymentStatus.PAID: QColor("#DCFCE7"),
    PaymentStatus.PARTIAL: QColor("#FEF9C3"),
    PaymentStatus.UNPAID: QColor("#FEE2E2"),
}


class StudentPaymentsWindow(QWidget):
    def __init__(self, state):
        super().__init__()
        self.state = state
        self.setWindowTitle("Student Payments")
        self.setGeometry(250, 200, 1100, 650)
        self.draft = self.state.new_student_payment_draft()

        layout = QVBoxLayout()

        self.combo_student = QComboBox()
        self.combo_student.currentIndexChanged.connect(self.on_student_changed)

        self.combo_grade = QComboBox()
        for grade in Grade:
            self.combo_grade.addItem(grade.label, grade)

        self.combo_month = QComboBox()
        self.combo_month.addItems(MONTHS)
        self.input_year = QLineEdit()

        self.date_payment = QDateEdit(QDate.currentDate())
        self.date_payment.setCalendarPopup(True)
        self.date_payment.setDisplayFormat("yyyy-MM-dd")

        self.input_total_fee = QDoubleSpinBox()
        self.input_paid = QDoubleSpinBox()
        for w in (self.input_total_fee, self.input_paid):
            w.setRange(0, 10_000_000)
            w.setDecimals(2)
            w.valueChanged.connect(self.on_amounts_changed)

        self.lbl_outstanding = QLabel()
        self.lbl_status = QLabel()
        self.input_remarks = QLineEdit()

        form_layout = QFormLayout()
        form_layout.addRow("Student:", self.combo_student)
        form_layout.addRow("Grade:", self.combo_grade)
        form_layout.addRow("Month:", self.combo_month)
        form_layout.addRow("Year:", self.input_year)
        form_layout.addRow("Date:", self.date_payment)
        form_layout.addRow("Total fee:", self.input_total_fee)
        form_layout.addRow("Paid amount:", self.input_paid)
        form_layout.addRow("Outstanding:", self.lbl_outstanding)
        form_layout.addRow("Status:", self.lbl_status)
        form_layout.addRow("Remarks:", self.input_remarks)
        layout.addLayout(form_layout)

        self.btn_save = QPushButton("💾 Save Payment")
        self.btn_save.clicked.connect(self.save_payment)
        self.btn_delete = QPushButton("🗑 Delete Payment")
        self.btn_delete.clicked.connect(self.delete_payment)
        self.btn_new = QPushButton("🧹 New Entry")
        self.btn_new.clicked.connect(self.reset_form)
        btn_row = QHBoxLayout()
        for btn in (self.btn_save, self.btn_delete, self.btn_new):
            btn_row.addWidget(btn)
        layout.addLayout(btn_row)

        self.search_input = QLineEdit()
        self.search_input.setPlaceholderText("Filter by student name")
        self.search_input.textChanged.connect(self.load_payments)
        layout.addWidget(self.search_input)

        self.table = QTableWidget(0, 9)
        self.table.setHorizontalHeaderLabels(
            ["ID", "Student", "Grade", "Month", "Date", "Total Fee", "Paid", "Outstanding", "Status"]
        )
        self.table.horizontalHeader().setSectionResizeMode(QHeaderView.Stretch)
        self.table.setEditTriggers(QTableWidget.NoEditTriggers)
        self.table.setSelectionBehavior(QTableWidget.SelectRows)
        self.table.itemClicked.connect(self.edit_payment)
        layout.addWidget(self.table)

        self.setLayout(layout)
        if self.state.bus is not None:
            self.state.bus.subscribe(self.refresh)
        self.refresh()
        self.reset_form()

    def refresh(self, *_):
        current = self.combo_student.currentData()
        self.combo_student.blockSignals(True)
        self.combo_student.clear()
        for s in self.state.students:
            self.combo_student.addItem(f"{s.name} ({s.grade.label})", s.id)
        index = self.combo_student.findData(current)
        self.combo_student.setCurrentIndex(index if index >= 0 else 0)
        self.combo_student.blockSignals(False)
        self.load_payments()

    def load_payments(self, *_):
        term = self.search_input.text().strip().lower()
        payments = [p for p in reversed(self.state.student_payments)
                    if term in self.state.student_name(p.student_id).lower()]
        self.table.setRowCount(len(payments))
        for row, p in enumerate(payments):
            values = [
                p.id, self.state.student_name(p.student_id), p.grade.label, f"{p.month} {p.year}", p.date,
                format_currency(p.total_fee), format_currency(p.paid_amount),
                format_currency(p.outstanding_amount), p.status.value,
            ]
            for col, value in enumerate(values):
                item = QTableWidgetItem(value)
                item.setBackground(STATUS_COLORS[p.status])
                self.table.setItem(row, col, item)

    def on_student_changed(self, *_):
        student = self.state.get_student(self.combo_student.currentData())
        if student is not None:
            self.combo_grade.setCurrentIndex(self.combo_grade.findData(student.grade))

    def on_amounts_changed(self, *_):
        self.draft.total_fee = self.input_total_fee.value()
        self.draft.paid_amount = self.input_paid.value()
        self.lbl_outstanding.setText(format_currency(self.draft.outstanding_amount))
        self.lbl_status.setText(self.draft.status.value)

    def _load_draft(self, draft: StudentPaymentDraft):
        self.draft = draft
        index = self.combo_student.findData(draft.student_id)
        if index >= 0:
            self.combo_student.setCurrentIndex(index)
        self.combo_grade.setCurrentIndex(self.combo_grade.findData(draft.grade))
        self.combo_month.setCurrentText(draft.month)
        self.input_year.setText(draft.year)
        self.date_payment.setDate(QDate.fromString(draft.date, "yyyy-MM-dd"))
        self.input_total_fee.setValue(draft.total_fee)
        self.input_paid.setValue(draft.paid_amount)
        self.input_remarks.setText(draft.remarks)
        self.btn_delete.setEnabled(draft.is_edit)
        self.btn_save.setText("💾 Update Payment" if draft.is_edit else "💾 Save Payment")
        self.on_amounts_changed()

    def reset_form(self):
        month, year = current_period()
        self._load_draft(StudentPaymentDraft(
            student_id=self.combo_student.currentData() or "",
            grade=self.combo_grade.currentData() or Grade.G6,
            month=month,
            year=year,
        ))

    def edit_payment(self, item):
        payment_id = self.table.item(item.row(), 0).text()
        payment = next((p for p in self.state.student_payments if p.id == payment_id), None)
        if payment is not None:
            self._load_draft(StudentPaymentDraft.from_record(payment))

    def save_payment(self):
        if not self.combo_student.currentData():
            QMessageBox.warning(self, "Missing Student", "Choose a student first.")
            return
        self.draft.student_id = self.combo_student.currentData()
        self.draft.grade = self.combo_grade.currentData()
        self.draft.month = self.combo_month.currentText()
        self.draft.year = self.input_year.text().strip()
        self.draft.date = self.date_payment.date().toString("yyyy-MM-dd")
        self.draft.remarks = self.input_remarks.text().strip()
        try:
            self.state.save_student_payment(self.draft)
        except (ValueError, sqlite3.Error) as e:
            QMessageBox.warning(self, "Invalid Payment", str(e))
            return
        self.reset_form()

    def delete_payment(self):
        if not self.draft.is_edit:
            return
        reply = QMessageBox.question(self, "Delete Payment", "Delete this payment record?")
        if reply == QMessageBox.Yes:
            self.state.delete_student_payment(self.draft.payment_id)
            self.reset_form()
