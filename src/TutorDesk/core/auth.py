import hmac
import logging

from TutorDesk.config import get_admin_credentials
from TutorDesk.core.utils import hash_password

logger = logging.getLogger(__name__)


def check_credentials(username: str, password: str) -> bool:
    """Compare against the single admin account configured in the environment."""
    admin_user, admin_password = get_admin_credentials()
    ok = (username or "").strip() == admin_user and hmac.compare_digest(
        hash_password(password or ""), hash_password(admin_password)
    )
    if not ok:
        logger.warning("Failed login attempt for user %r", username)
    return ok
