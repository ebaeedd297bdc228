"""Single-use password reset tokens issued after a successful reset-code check"""
import logging
import secrets
import threading
import time
from typing import Callable, Dict, Any, Optional

from config.app_config import AppConfig
from service.otp_service import build_store, get_otp_service

# Set up logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


class ResetTokenService:

    def __init__(self, store=None, expiry_seconds: float = None, clock: Callable[[], float] = time.time):
        self.store = store if store is not None else build_store('resetTokens')
        self.expiry_seconds = expiry_seconds if expiry_seconds is not None else AppConfig.RESET_TOKEN_EXPIRY_SECONDS
        self.clock = clock
        self._lock = threading.Lock()

    def issue(self, email: str, account_type: str = 'user') -> Dict[str, Any]:
        """
        Create a reset token for an email address

        Args:
            email: Account email the token resets
            account_type: "user" or "admin"

        Returns:
            Dictionary with resetToken and expiryTime (epoch seconds)
        """
        token = secrets.token_hex(32)
        entry = {
            'entryId': token,
            'email': email,
            'accountType': account_type,
            'expiryTime': self.clock() + self.expiry_seconds
        }
        self.store.put(token, entry)
        logger.info(f"Reset token issued for {email} ({account_type})")
        return {'resetToken': token, 'expiryTime': entry['expiryTime']}


    def consume(self, token: str, account_type: str = 'user') -> Dict[str, Any]:
        """
        Remove a token and return the email it belongs to.

        Fails with INVALID_TOKEN (unknown, already used or for the other
        account type) or TOKEN_EXPIRED.
        """
        with self._lock:
            entry = self.store.get(token) if token else None

            if not entry or entry.get('accountType') != account_type:
                return {
                    'success': False,
                    'error': 'INVALID_TOKEN',
                    'message': 'Invalid or expired reset token'
                }

            self.store.delete(token)

            if self.clock() > entry['expiryTime']:
                return {
                    'success': False,
                    'error': 'TOKEN_EXPIRED',
                    'message': 'Reset token expired. Please request a new code.'
                }

        logger.info(f"Reset token consumed for {entry['email']}")
        return {'success': True, 'email': entry['email']}

    def cleanup(self) -> int:
        """Delete tokens past their expiry. Returns the number removed"""
        now = self.clock()
        cleaned = 0
        with self._lock:
            for token, entry in self.store.items():
                if entry['expiryTime'] <= now:
                    self.store.delete(token)
                    cleaned += 1

        if cleaned:
            logger.info(f"Cleaned up {cleaned} expired reset tokens")
        return cleaned


_reset_token_service: Optional[ResetTokenService] = None


def get_reset_token_service() -> ResetTokenService:
    global _reset_token_service
    if _reset_token_service is None:
        _reset_token_service = ResetTokenService()
        get_otp_service().add_sweep_task(_reset_token_service.cleanup)
    return _reset_token_service
