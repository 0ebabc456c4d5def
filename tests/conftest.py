import pytest
from PySide6.QtCore import QCoreApplication

from TutorDesk.core.app_state import AppState
from TutorDesk.core.models import (
    ClassSchedule, Grade, PaymentType, Status, Student, Teacher, build_schedule,
)
from TutorDesk.core.sync import ChangeBus
from TutorDesk.data import create_tables


@pytest.fixture(scope="session")
def qapp():
    app = QCoreApplication.instance() or QCoreApplication([])
    yield app


@pytest.fixture
def db(tmp_path, monkeypatch):
    """A fresh database file for each test."""
    path = tmp_path / "tutordesk.db"
    monkeypatch.setenv("TUTORDESK_DB_PATH", str(path))
    create_tables()
    return path


class RecordingNotifier:
    def __init__(self):
        self.sent = []

    def send_payment_notification(self, student, payment):
        self.sent.append((student.id, payment.id))
        return {"status": "sent", "message": ""}


@pytest.fixture
def notifier():
    return RecordingNotifier()


@pytest.fixture
def bus(qapp):
    return ChangeBus()


@pytest.fixture
def state(db, bus, notifier):
    return AppState(bus=bus, notifier=notifier).initialize()


def make_teacher(id="TCH-1", payment_type=PaymentType.HOURLY, rate=500.0, grades=(Grade.G8,), name="Nimal Perera"):
    return Teacher(
        id=id, name=name, subject="Mathematics", grades=tuple(grades), payment_type=payment_type,
        rate=rate, contact="0771234567", whatsapp="", status=Status.ACTIVE,
    )


def make_session(id, start="15:00", end="17:00", date="2025-03-10", teacher_id="TCH-1", grade="8",
                 rate_override=None) -> ClassSchedule:
    return build_schedule(id, grade, "Mathematics", teacher_id, date, start, end, rate_override)


def make_student(id="STU-1", name="Kasun Silva", grade=Grade.G8, status=Status.ACTIVE, whatsapp="+94 77 123 4567"):
    return Student(id=id, name=name, guardian_name="Sunil Silva", grade=grade, contact="", whatsapp=whatsapp,
                   status=status)
