import sqlite3

from PySide6.QtWidgets import (
    QWidget, QVBoxLayout, QHBoxLayout, QLabel, QLineEdit, QPushButton, QMessageBox, QFormLayout,
    QComboBox, QDoubleSpinBox, QTableWidget, QTableWidgetItem, QHeaderView
)

from TutorDesk.core.models import GRADE_ALL, Grade
from TutorDesk.core.reconciliation import payout_status
from TutorDesk.core.utils import MONTHS, format_currency, format_hours


class TeacherPayoutWindow(QWidget):
    """Record what each teacher was paid for a month against the live payable."""

    def __init__(self, state):
        super().__init__()
        self.state = state
        self.setWindowTitle("Teacher Payouts")
        self.setGeometry(250, 200, 1100, 650)
        self.draft = self.state.new_payout_draft()

        layout = QVBoxLayout()

        self.combo_teacher = QComboBox()
        self.combo_month = QComboBox()
        self.combo_month.addItems(MONTHS)
        self.input_year = QLineEdit()
        self.combo_scope = QComboBox()
        self.combo_scope.addItem("All Grades", GRADE_ALL)
        for grade in Grade:
            self.combo_scope.addItem(grade.label, grade.value)

        self.lbl_classes = QLabel()
        self.lbl_hours = QLabel()
        self.lbl_payable = QLabel()
        self.lbl_payable.setStyleSheet("font-weight: bold;")
        self.input_paid = QDoubleSpinBox()
        self.input_paid.setRange(0, 100_000_000)
        self.input_paid.setDecimals(2)
        self.lbl_status = QLabel()

        form_layout = QFormLayout()
        form_layout.addRow("Teacher:", self.combo_teacher)
        form_layout.addRow("Month:", self.combo_month)
        form_layout.addRow("Year:", self.input_year)
        form_layout.addRow("Grade scope:", self.combo_scope)
        form_layout.addRow("Classes:", self.lbl_classes)
        form_layout.addRow("Hours:", self.lbl_hours)
        form_layout.addRow("Payable:", self.lbl_payable)
        form_layout.addRow("Amount paid:", self.input_paid)
        form_layout.addRow("Status:", self.lbl_status)
        layout.addLayout(form_layout)

        self.btn_save = QPushButton("💾 Record Payout")
        self.btn_save.clicked.connect(self.save_payout)
        self.btn_delete = QPushButton("🗑 Delete Payout")
        self.btn_delete.clicked.connect(self.delete_payout)
        self.btn_new = QPushButton("🧹 New Payout")
        self.btn_new.clicked.connect(self.reset_form)
        btn_row = QHBoxLayout()
        for btn in (self.btn_save, self.btn_delete, self.btn_new):
            btn_row.addWidget(btn)
        layout.addLayout(btn_row)

        self.table = QTableWidget(0, 9)
        self.table.setHorizontalHeaderLabels(
            ["ID", "Teacher", "Month", "Scope", "Classes", "Hours", "Payable", "Paid", "Status"]
        )
        self.table.horizontalHeader().setSectionResizeMode(QHeaderView.Stretch)
        self.table.setEditTriggers(QTableWidget.NoEditTriggers)
        self.table.setSelectionBehavior(QTableWidget.SelectRows)
        self.table.itemClicked.connect(self.edit_payout)
        layout.addWidget(self.table)

        self.setLayout(layout)

        self.combo_teacher.currentIndexChanged.connect(self.on_selection_changed)
        self.combo_month.currentIndexChanged.connect(self.on_selection_changed)
        self.input_year.editingFinished.connect(self.on_selection_changed)
        self.combo_scope.currentIndexChanged.connect(self.on_selection_changed)
        self.input_paid.valueChanged.connect(self.on_paid_edited)

        if self.state.bus is not None:
            self.state.bus.subscribe(self.refresh)
        self.refresh()
        self._load_draft(self.draft)

    def refresh(self, *_):
        current = self.combo_teacher.currentData()
        self.combo_teacher.blockSignals(True)
        self.combo_teacher.clear()
        for t in self.state.teachers:
            self.combo_teacher.addItem(f"{t.name} ({t.payment_type.value})", t.id)
        index = self.combo_teacher.findData(current)
        self.combo_teacher.setCurrentIndex(index if index >= 0 else 0)
        self.combo_teacher.blockSignals(False)
        # sessions may have changed under an open draft
        if self.draft.teacher_id:
            self.draft.refresh()
            self.show_computation()
        self.load_payouts()

    def load_payouts(self):
        payouts = self.state.teacher_payments
        self.table.setRowCount(len(payouts))
        for row, p in enumerate(payouts):
            values = [
                p.id, self.state.teacher_name(p.teacher_id), p.month, p.grade, str(p.total_classes),
                format_hours(p.total_hours), format_currency(p.amount_payable),
                format_currency(p.amount_paid), payout_status(p.amount_paid, p.amount_payable).value,
            ]
            for col, value in enumerate(values):
                self.table.setItem(row, col, QTableWidgetItem(value))

    def on_selection_changed(self, *_):
        self.draft.select(
            teacher_id=self.combo_teacher.currentData() or "",
            month=self.combo_month.currentText(),
            year=self.input_year.text().strip(),
            grade_scope=self.combo_scope.currentData(),
        )
        self.show_computation()

    def on_paid_edited(self, value):
        if value != self.draft.amount_paid:
            self.draft.set_amount_paid(value)
        self.lbl_status.setText(self.draft.status.value)

    def show_computation(self):
        c = self.draft.computation
        self.lbl_classes.setText(str(c.total_classes))
        self.lbl_hours.setText(format_hours(c.total_hours))
        self.lbl_payable.setText(format_currency(c.amount_payable))
        self.input_paid.blockSignals(True)
        self.input_paid.setValue(self.draft.amount_paid)
        self.input_paid.blockSignals(False)
        self.lbl_status.setText(self.draft.status.value)

    def _load_draft(self, draft):
        self.draft = draft
        for combo, value in ((self.combo_teacher, draft.teacher_id), (self.combo_scope, draft.grade_scope)):
            combo.blockSignals(True)
            index = combo.findData(value)
            if index >= 0:
                combo.setCurrentIndex(index)
            combo.blockSignals(False)
        self.combo_month.blockSignals(True)
        self.combo_month.setCurrentText(draft.month)
        self.combo_month.blockSignals(False)
        self.input_year.setText(draft.year)
        if not draft.teacher_id and self.combo_teacher.currentData():
            draft.select(teacher_id=self.combo_teacher.currentData())
        self.btn_delete.setEnabled(draft.payment_id is not None)
        self.btn_save.setText("💾 Update Payout" if draft.payment_id else "💾 Record Payout")
        self.show_computation()

    def reset_form(self):
        self._load_draft(self.state.new_payout_draft(teacher_id=self.combo_teacher.currentData() or ""))

    def edit_payout(self, item):
        payment_id = self.table.item(item.row(), 0).text()
        payment = next((p for p in self.state.teacher_payments if p.id == payment_id), None)
        if payment is not None:
            self._load_draft(self.state.edit_payout_draft(payment))

    def save_payout(self):
        if not self.draft.teacher_id:
            QMessageBox.warning(self, "Missing Teacher", "Choose a teacher first.")
            return
        try:
            record = self.state.commit_payout(self.draft)
        except (ValueError, sqlite3.Error) as e:
            QMessageBox.warning(self, "Payout Not Saved", str(e))
            return
        QMessageBox.information(
            self, "Payout Recorded",
            f"{self.state.teacher_name(record.teacher_id)}: {format_currency(record.amount_paid)} "
            f"of {format_currency(record.amount_payable)} for {record.month}.",
        )
        self.reset_form()

    def delete_payout(self):
        if not self.draft.payment_id:
            return
        reply = QMessageBox.question(self, "Delete Payout", "Delete this payout record?")
        if reply == QMessageBox.Yes:
            self.state.delete_teacher_payment(self.draft.payment_id)
            self.reset_form()
