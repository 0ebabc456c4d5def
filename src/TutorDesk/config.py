import os
import logging
from pathlib import Path

from dotenv import load_dotenv

from TutorDesk.paths import APP_DATA_DIR, resource_path

logger = logging.getLogger(__name__)

_TRUE_VALUES = {"1", "true", "yes", "on", "enable", "enabled"}


def load_environment():
    """Load .env from the bundled resources first, then from the working directory."""
    env_path = resource_path(".env")
    if env_path.exists():
        load_dotenv(env_path)
        logger.info("Loaded environment from %s", env_path)
    else:
        load_dotenv()


def _env_flag(name, default=True):
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    return raw.strip().lower() in _TRUE_VALUES


def get_reports_dir() -> Path:
    raw = os.getenv("TUTORDESK_REPORTS_DIR")
    path = Path(raw) if raw else APP_DATA_DIR / "reports"
    path.mkdir(parents=True, exist_ok=True)
    return path


def is_sync_enabled() -> bool:
    return _env_flag("TUTORDESK_SYNC", True)


def get_admin_credentials():
    username = (os.getenv("ADMIN_USERNAME") or "admin").strip()
    password = os.getenv("ADMIN_PASSWORD") or "admin"
    return username, password
