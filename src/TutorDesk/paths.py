from pathlib import Path
import platform, os, sys

APP_NAME = "TutorDesk"

def get_app_data_dir() -> Path:
    sysname = platform.system()
    if sysname == "Windows":
        base = Path(os.getenv("LOCALAPPDATA", Path.home() / "AppData" / "Local"))
        return base / APP_NAME
    elif sysname == "Darwin":  # macOS
        return Path.home() / "Library" / "Application Support" / APP_NAME
    else: # Linux / others
        base = Path(os.getenv("XDG_DATA_HOME", Path.home() / ".local" / "share"))
        return base / APP_NAME

APP_DATA_DIR = get_app_data_dir()

DEFAULT_DB_PATH = APP_DATA_DIR / "tutordesk.db"
LOG_PATH = APP_DATA_DIR / "tutordesk.log"


def get_db_path() -> Path:
    """Database file in use; TUTORDESK_DB_PATH wins over the data directory."""
    override = os.getenv("TUTORDESK_DB_PATH")
    if override:
        return Path(override)
    APP_DATA_DIR.mkdir(parents=True, exist_ok=True)
    return DEFAULT_DB_PATH


def get_sync_stamp_path() -> Path:
    # lives next to the database so every instance sharing the file sees it
    return get_db_path().with_suffix(".sync")


def resource_path(*parts: str) -> Path:
    if getattr(sys, "frozen", False):
        base = Path(getattr(sys, "_MEIPASS", "."))
    else:
        base = Path(__file__).resolve().parent
    return (base / Path(*parts)).resolve()
