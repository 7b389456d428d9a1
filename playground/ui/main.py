"""Main UI window for the playground."""

import asyncio
import logging
import sys
from datetime import datetime
from pathlib import Path

import qasync
from PyQt6.QtWidgets import (
    QApplication, QComboBox, QHBoxLayout, QLabel, QMainWindow, QPushButton,
    QStatusBar, QTextEdit, QVBoxLayout, QWidget
)

from ..app import build_app_state, schedule_start
from ..config import PlaygroundConfig
from ..errors import PlaygroundError
from ..state import AppState
from ..state import events as ev
from ..utils.logger import setup_logging
from ..versions.catalog import VersionCatalog
from ..versions.models import DownloadState
from .token_dialog import TokenDialog

logger = logging.getLogger(__name__)

STATE_LABELS = {
    DownloadState.UNKNOWN: "",
    DownloadState.DOWNLOADING: " (downloading)",
    DownloadState.READY: " (ready)",
    DownloadState.FAILED: " (failed)",
}


class MainWindow(QMainWindow):
    def __init__(self, state: AppState):
        super().__init__()
        self.state = state

        self.init_ui()
        self.bind_state()
        self.on_catalog_changed(state.catalog)

    def init_ui(self):
        """Initialize the user interface."""
        self.setWindowTitle("Runtime Playground")
        self.setGeometry(100, 100, 1000, 700)

        central_widget = QWidget()
        self.setCentralWidget(central_widget)

        layout = QVBoxLayout(central_widget)

        # Top bar
        top_layout = QHBoxLayout()

        top_layout.addWidget(QLabel("Version:"))
        self.version_combo = QComboBox()
        self.version_combo.currentIndexChanged.connect(self.on_version_selected)
        top_layout.addWidget(self.version_combo)

        self.retry_btn = QPushButton("Retry")
        self.retry_btn.setEnabled(False)
        self.retry_btn.clicked.connect(self.on_retry)
        top_layout.addWidget(self.retry_btn)

        top_layout.addStretch()

        self.console_btn = QPushButton("Console")
        self.console_btn.clicked.connect(self.state.toggle_console)
        top_layout.addWidget(self.console_btn)

        self.auth_btn = QPushButton("GitHub Token")
        self.auth_btn.clicked.connect(self.state.toggle_auth_dialog)
        top_layout.addWidget(self.auth_btn)

        layout.addLayout(top_layout)

        self.console = QTextEdit()
        self.console.setReadOnly(True)
        self.console.setVisible(self.state.is_console_showing)
        layout.addWidget(self.console)

        # Status bar
        self.status = QStatusBar()
        self.setStatusBar(self.status)
        self.status.showMessage("Ready")

    def bind_state(self):
        events = self.state.events
        self._unsubscribers = [
            events.on(ev.CATALOG_CHANGED, self.on_catalog_changed),
            events.on(ev.ACTIVE_VERSION_CHANGED, self.on_active_version_changed),
            events.on(ev.VERSION_FAILED, self.on_version_failed),
            events.on(ev.CONSOLE_TOGGLED, self.console.setVisible),
            events.on(ev.AUTH_DIALOG_TOGGLED, self.on_auth_dialog_toggled),
        ]

    def on_catalog_changed(self, catalog: VersionCatalog):
        """Rebuild the version list, keeping the active version selected."""
        self.version_combo.blockSignals(True)
        self.version_combo.clear()
        for identifier, record in catalog.items():
            self.version_combo.addItem(f"v{identifier}{STATE_LABELS[record.state]}", identifier)
        self.version_combo.setCurrentIndex(self.version_combo.findData(self.state.active_version))
        self.version_combo.blockSignals(False)
        self.update_retry_button()

    def on_active_version_changed(self, version: str):
        self.append_console(f"Switching to v{version}")
        self.version_combo.blockSignals(True)
        self.version_combo.setCurrentIndex(self.version_combo.findData(version))
        self.version_combo.blockSignals(False)
        self.update_retry_button()

    def on_version_failed(self, failure):
        version, error = failure
        self.append_console(f"Download of v{version} failed: {error}")
        self.status.showMessage(f"v{version} failed to download")

    def on_auth_dialog_toggled(self, showing: bool):
        if not showing:
            return
        dialog = TokenDialog(self.state.github_token, self)
        if dialog.exec():
            self.state.github_token = dialog.token
        self.state.toggle_auth_dialog()

    def update_retry_button(self):
        record = self.state.catalog.get(self.state.active_version)
        self.retry_btn.setEnabled(record is not None and record.state is DownloadState.FAILED)

    @qasync.asyncSlot(int)
    async def on_version_selected(self, index: int):
        version = self.version_combo.itemData(index)
        if version:
            await self.switch_version(version)

    @qasync.asyncSlot()
    async def on_retry(self):
        await self.switch_version(self.state.active_version, retry=True)

    async def switch_version(self, version: str, retry: bool = False):
        self.status.showMessage(f"Loading v{version}...")
        try:
            if retry:
                record = await self.state.retry(version)
            else:
                record = await self.state.switch_to(version)
        except PlaygroundError as e:
            logger.warning("Switch to %s failed: %s", version, e)
            self.append_console(str(e))
            self.status.showMessage("Version switch failed")
            return
        if record.state is DownloadState.READY:
            self.status.showMessage(f"v{record.identifier} ready")

    def append_console(self, text):
        """Append text to console with timestamp."""
        timestamp = datetime.now().strftime("%H:%M:%S")
        self.console.append(f"[{timestamp}] {text}")

    def closeEvent(self, event):
        for unsubscribe in self._unsubscribers:
            unsubscribe()
        event.accept()


def main():
    """Main entry point."""
    config = PlaygroundConfig.from_env()
    setup_logging(config.log_dir)

    app = QApplication(sys.argv)

    # Apply dark theme
    theme_path = Path(__file__).parent.parent / "resources" / "themes" / "dark.qss"
    if theme_path.exists():
        with open(theme_path, 'r', encoding='utf-8') as f:
            app.setStyleSheet(f.read())

    # Set up event loop
    loop = qasync.QEventLoop(app)
    asyncio.set_event_loop(loop)

    state, _mirror = build_app_state(config)

    window = MainWindow(state)
    window.show()

    with loop:
        window.startup = schedule_start(state)
        loop.run_forever()


if __name__ == "__main__":
    main()
