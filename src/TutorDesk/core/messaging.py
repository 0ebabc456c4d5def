import logging
import re
import webbrowser
from enum import Enum
from urllib.parse import quote

from TutorDesk.data.repos.settings_repo import get_setting_bool

logger = logging.getLogger(__name__)

WHATSAPP_URL = "https://wa.me/{phone}?text={text}"


class MessageStatus(Enum):
    SENT = "sent"
    FAILED = "failed"
    DISABLED = "disabled"


def _amount_text(amount) -> str:
    amount = float(amount)
    return str(int(amount)) if amount.is_integer() else f"{amount:.2f}"


def build_student_payment_message(student, payment) -> str:
    grade = getattr(payment.grade, "value", payment.grade)
    return (
        "Dear Parent,\n"
        "Payment received successfully.\n"
        f"Student Name: {student.name}\n"
        f"Grade: {grade}\n"
        f"Month: {payment.month}\n"
        f"Amount Paid: Rs {_amount_text(payment.paid_amount)}\n"
        "Thank you."
    )


def build_whatsapp_link(phone: str, message: str) -> str:
    digits = re.sub(r"\D", "", phone or "")
    return WHATSAPP_URL.format(phone=digits, text=quote(message, safe=""))


class WhatsAppNotifier:
    """Opens a WhatsApp deep link with the fee receipt text for the guardian."""

    def __init__(self, opener=None):
        # opener(url) -> bool, defaults to the system browser
        self.opener = opener or webbrowser.open

    def is_enabled(self) -> bool:
        return get_setting_bool("whatsapp_enabled", True)

    def send_payment_notification(self, student, payment):
        if not self.is_enabled():
            logger.info("WhatsApp notification skipped for payment %s: disabled", payment.id)
            return {"status": MessageStatus.DISABLED, "message": "WhatsApp notifications are disabled"}

        phone = (student.whatsapp or student.contact or "").strip()
        if not re.sub(r"\D", "", phone):
            logger.warning("No WhatsApp number for student %s; receipt not sent", student.id)
            return {"status": MessageStatus.FAILED, "message": "Student has no WhatsApp number"}

        url = build_whatsapp_link(phone, build_student_payment_message(student, payment))
        opened = self.opener(url)
        if opened is False:
            logger.warning("Could not open WhatsApp link for student %s", student.id)
            return {"status": MessageStatus.FAILED, "message": "Could not open the messaging link"}

        logger.info("WhatsApp receipt opened for student %s (payment %s)", student.id, payment.id)
        return {"status": MessageStatus.SENT, "message": "Receipt message opened"}
