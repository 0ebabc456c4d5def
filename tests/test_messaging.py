from urllib.parse import unquote

from TutorDesk.core.messaging import (
    MessageStatus, WhatsAppNotifier, build_student_payment_message, build_whatsapp_link,
)
from TutorDesk.core.models import PaymentStatus, StudentPayment
from TutorDesk.data import set_setting_bool

from conftest import make_student


def _payment(paid=2500.0):
    return StudentPayment(
        id="PAY-1", student_id="STU-1", grade="8", month="March", year="2025", date="2025-03-05",
        total_fee=2500.0, paid_amount=paid, outstanding_amount=0.0, status=PaymentStatus.PAID,
    )


def test_message_text():
    text = build_student_payment_message(make_student(), _payment())
    assert text == (
        "Dear Parent,\nPayment received successfully.\nStudent Name: Kasun Silva\n"
        "Grade: 8\nMonth: March\nAmount Paid: Rs 2500\nThank you."
    )
    assert "Rs 1250.50" in build_student_payment_message(make_student(), _payment(1250.5))


def test_link_keeps_digits_only():
    url = build_whatsapp_link("+94 77-123 4567", "Hi there")
    assert url.startswith("https://wa.me/94771234567?text=")
    assert unquote(url.split("text=")[1]) == "Hi there"


def test_notifier_opens_link(db):
    opened = []
    notifier = WhatsAppNotifier(opener=lambda url: opened.append(url) or True)
    result = notifier.send_payment_notification(make_student(), _payment())
    assert result["status"] == MessageStatus.SENT
    assert opened and opened[0].startswith("https://wa.me/94771234567")


def test_notifier_disabled_by_setting(db):
    set_setting_bool("whatsapp_enabled", False)
    opened = []
    notifier = WhatsAppNotifier(opener=opened.append)
    result = notifier.send_payment_notification(make_student(), _payment())
    assert result["status"] == MessageStatus.DISABLED
    assert opened == []


def test_notifier_fails_without_number(db):
    notifier = WhatsAppNotifier(opener=lambda url: True)
    result = notifier.send_payment_notification(make_student(whatsapp=""), _payment())
    assert result["status"] == MessageStatus.FAILED


def test_notifier_reports_failed_open(db):
    notifier = WhatsAppNotifier(opener=lambda url: False)
    result = notifier.send_payment_notification(make_student(), _payment())
    assert result["status"] == MessageStatus.FAILED
