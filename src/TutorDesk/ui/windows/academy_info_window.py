from PySide6.QtWidgets import (
    QWidget, QVBoxLayout, QHBoxLayout, QLabel, QLineEdit, QPushButton, QMessageBox, QFormLayout,
    QCheckBox, QFileDialog
)
from PySide6.QtGui import QPixmap
from PySide6.QtCore import Qt

from TutorDesk.core.models import AcademyProfile
from TutorDesk.data import get_setting, get_setting_bool, set_setting, set_setting_bool


class AcademyInfoWindow(QWidget):
    """Academy profile used on every exported report, plus messaging settings."""

    def __init__(self, state):
        super().__init__()
        self.state = state
        self.setWindowTitle("Academy Profile")
        self.setGeometry(300, 250, 500, 450)

        layout = QVBoxLayout()
        form_layout = QFormLayout()

        self.input_name = QLineEdit()
        self.input_address = QLineEdit()
        self.input_email = QLineEdit()
        self.input_contact = QLineEdit()
        form_layout.addRow("Name:", self.input_name)
        form_layout.addRow("Address:", self.input_address)
        form_layout.addRow("Email:", self.input_email)
        form_layout.addRow("Contact:", self.input_contact)

        logo_row = QHBoxLayout()
        self.input_logo = QLineEdit()
        self.input_logo.setReadOnly(True)
        btn_browse = QPushButton("Browse…")
        btn_browse.clicked.connect(self.choose_logo)
        btn_clear_logo = QPushButton("Remove")
        btn_clear_logo.clicked.connect(lambda: self.set_logo(""))
        logo_row.addWidget(self.input_logo)
        logo_row.addWidget(btn_browse)
        logo_row.addWidget(btn_clear_logo)
        form_layout.addRow("Logo:", logo_row)

        self.lbl_preview = QLabel()
        self.lbl_preview.setAlignment(Qt.AlignCenter)
        self.lbl_preview.setFixedHeight(100)
        form_layout.addRow(self.lbl_preview)

        self.input_currency = QLineEdit()
        form_layout.addRow("Currency prefix:", self.input_currency)
        self.check_whatsapp = QCheckBox("Send WhatsApp receipts for new student payments")
        form_layout.addRow(self.check_whatsapp)
        layout.addLayout(form_layout)

        btn_save = QPushButton("💾 Save")
        btn_save.clicked.connect(self.save)
        layout.addWidget(btn_save)

        self.setLayout(layout)
        self.load()

    def load(self):
        info = self.state.academy_info
        self.input_name.setText(info.name)
        self.input_address.setText(info.address)
        self.input_email.setText(info.email)
        self.input_contact.setText(info.contact)
        self.set_logo(info.logo_path or "")
        self.input_currency.setText(get_setting("currency_prefix", "Rs."))
        self.check_whatsapp.setChecked(get_setting_bool("whatsapp_enabled", True))

    def choose_logo(self):
        filename, _ = QFileDialog.getOpenFileName(self, "Choose Logo", "", "Images (*.png *.jpg *.jpeg)")
        if filename:
            self.set_logo(filename)

    def set_logo(self, path):
        self.input_logo.setText(path)
        pixmap = QPixmap(path) if path else QPixmap()
        if pixmap.isNull():
            self.lbl_preview.clear()
        else:
            self.lbl_preview.setPixmap(pixmap.scaledToHeight(100, Qt.SmoothTransformation))

    def save(self):
        name = self.input_name.text().strip()
        if not name:
            QMessageBox.warning(self, "Missing Name", "The academy name cannot be empty.")
            return
        self.state.update_academy_info(AcademyProfile(
            name=name,
            address=self.input_address.text().strip(),
            email=self.input_email.text().strip(),
            contact=self.input_contact.text().strip(),
            logo_path=self.input_logo.text().strip() or None,
        ))
        set_setting("currency_prefix", self.input_currency.text().strip() or "Rs.")
        set_setting_bool("whatsapp_enabled", self.check_whatsapp.isChecked())
        QMessageBox.information(self, "Saved", "Academy profile saved.")
