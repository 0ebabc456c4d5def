from PySide6.QtWidgets import QMainWindow, QWidget, QFormLayout, QLineEdit, QPushButton, QMessageBox

from TutorDesk.core.auth import check_credentials
from TutorDesk.ui.dashboard_window import DashboardWindow


class LoginWindow(QMainWindow):
    def __init__(self, state):
        super().__init__()
        self.state = state
        self.setWindowTitle("Admin Login")
        self.setGeometry(400, 50, 350, 150)

        central_widget = QWidget()
        form_layout = QFormLayout()

        self.input_username = QLineEdit()
        form_layout.addRow("Username:", self.input_username)

        self.input_password = QLineEdit()
        self.input_password.setEchoMode(QLineEdit.Password)
        form_layout.addRow("Password:", self.input_password)

        self.btn_login = QPushButton("Login")
        self.btn_login.clicked.connect(self.handle_login)
        form_layout.addRow(self.btn_login)

        self.input_password.returnPressed.connect(self.btn_login.click)
        self.input_username.returnPressed.connect(self.input_password.setFocus)

        central_widget.setLayout(form_layout)
        self.setCentralWidget(central_widget)

    def handle_login(self):
        username = self.input_username.text().strip()
        password = self.input_password.text()

        if check_credentials(username, password):
            self.dashboard = DashboardWindow(self.state, username)
            self.dashboard.show()
            self.close()
        else:
            QMessageBox.warning(self, "Login Failed", "Incorrect username or password.")
