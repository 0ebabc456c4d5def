from pathlib import Path

from TutorDesk.config import get_reports_dir, is_sync_enabled
from TutorDesk.paths import get_db_path, get_sync_stamp_path


def test_db_path_override(tmp_path, monkeypatch):
    monkeypatch.setenv("TUTORDESK_DB_PATH", str(tmp_path / "x.db"))
    assert get_db_path() == tmp_path / "x.db"
    assert get_sync_stamp_path() == tmp_path / "x.sync"


def test_reports_dir_is_created(tmp_path, monkeypatch):
    target = tmp_path / "exports"
    monkeypatch.setenv("TUTORDESK_REPORTS_DIR", str(target))
    assert get_reports_dir() == Path(target)
    assert target.is_dir()


def test_sync_flag(monkeypatch):
    monkeypatch.delenv("TUTORDESK_SYNC", raising=False)
    assert is_sync_enabled()
    monkeypatch.setenv("TUTORDESK_SYNC", "0")
    assert not is_sync_enabled()
    monkeypatch.setenv("TUTORDESK_SYNC", "yes")
    assert is_sync_enabled()
