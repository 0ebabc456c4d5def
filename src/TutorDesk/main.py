import sys
import traceback
import logging

from PySide6.QtWidgets import QApplication

from TutorDesk.paths import APP_DATA_DIR, LOG_PATH, get_db_path, get_sync_stamp_path
from TutorDesk.config import load_environment, is_sync_enabled

logger = logging.getLogger(__name__)


def _ensure_logging():
    root = logging.getLogger()
    if root.handlers:
        return  # respect existing setup
    APP_DATA_DIR.mkdir(parents=True, exist_ok=True)
    formatter = logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s")

    file_handler = logging.FileHandler(LOG_PATH, encoding="utf-8")
    file_handler.setLevel(logging.INFO)
    file_handler.setFormatter(formatter)
    root.setLevel(logging.INFO)
    root.addHandler(file_handler)

    # frozen builds have no console
    if not getattr(sys, "frozen", False) and sys.__stdout__ is not None:
        console_handler = logging.StreamHandler(sys.__stdout__)
        console_handler.setLevel(logging.INFO)
        console_handler.setFormatter(formatter)
        root.addHandler(console_handler)


def log_uncaught_exceptions(exctype, value, tb):
    logger.error("Uncaught exception:\n%s", "".join(traceback.format_exception(exctype, value, tb)))


def build_state():
    """AppState wired to the change bus and the WhatsApp notifier."""
    from TutorDesk.core.app_state import AppState
    from TutorDesk.core.messaging import WhatsAppNotifier
    from TutorDesk.core.sync import ChangeBus

    stamp = get_sync_stamp_path() if is_sync_enabled() else None
    bus = ChangeBus(stamp_path=stamp)
    return AppState(bus=bus, notifier=WhatsAppNotifier()).initialize()


def main():
    load_environment()
    _ensure_logging()
    sys.excepthook = log_uncaught_exceptions

    logger.info("Starting TutorDesk; database at %s", get_db_path())
    app = QApplication(sys.argv)
    app.setApplicationName("TutorDesk")

    try:
        state = build_state()
    except Exception:
        logger.exception("Critical error during startup")
        raise

    from TutorDesk.ui.login_window import LoginWindow
    window = LoginWindow(state)
    window.show()
    return app.exec()


if __name__ == "__main__":
    sys.exit(main())
