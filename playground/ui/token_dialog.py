"""GitHub token dialog."""

from typing import Optional

from PyQt6.QtWidgets import QDialog, QHBoxLayout, QLabel, QLineEdit, QPushButton, QVBoxLayout


class TokenDialog(QDialog):
    def __init__(self, token: Optional[str] = None, parent=None):
        super().__init__(parent)
        self.token = token
        self.init_ui()

    def init_ui(self):
        self.setWindowTitle("GitHub Token")
        layout = QVBoxLayout()

        layout.addWidget(QLabel("Personal access token (gist scope):"))
        self.token_input = QLineEdit()
        self.token_input.setEchoMode(QLineEdit.EchoMode.Password)
        self.token_input.setText(self.token or "")
        layout.addWidget(self.token_input)

        btn_layout = QHBoxLayout()
        save_btn = QPushButton("Save")
        save_btn.clicked.connect(self.save_token)
        btn_layout.addWidget(save_btn)

        sign_out_btn = QPushButton("Sign Out")
        sign_out_btn.clicked.connect(self.clear_token)
        btn_layout.addWidget(sign_out_btn)

        cancel_btn = QPushButton("Cancel")
        cancel_btn.clicked.connect(self.reject)
        btn_layout.addWidget(cancel_btn)

        layout.addLayout(btn_layout)
        self.setLayout(layout)

    def save_token(self):
        self.token = self.token_input.text().strip() or None
        self.accept()

    def clear_token(self):
        self.token = None
        self.accept()
