"""One-time codes for email verification and password reset.

Entries are keyed by ``email:purpose``. Each entry expires after
``AppConfig.OTP_EXPIRY_SECONDS`` and allows ``AppConfig.OTP_MAX_ATTEMPTS``
verification attempts. Expired entries are removed three ways: on access,
by a per-entry timer, and by a periodic sweep running in a daemon thread.

The default store lives in process memory, so pending codes are lost on
restart and are not shared between instances. Set ``OTP_STORE=firestore``
to keep them in the ``otps`` collection when running more than one instance.
"""
import logging
import math
import secrets
import threading
import time
from datetime import datetime
from typing import Any, Callable, Dict, List, Optional, Tuple

from config.app_config import AppConfig
from config.firebase_config import get_db

# Set up logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


class MemoryCodeStore:
    """Process-local store. Flask serves requests on threads, so every access holds the lock"""

    def __init__(self):
        self._entries: Dict[str, Dict[str, Any]] = {}
        self._lock = threading.Lock()

    def get(self, key: str) -> Optional[Dict[str, Any]]:
        with self._lock:
            entry = self._entries.get(key)
            return dict(entry) if entry else None

    def put(self, key: str, entry: Dict[str, Any]) -> None:
        with self._lock:
            self._entries[key] = dict(entry)

    def delete(self, key: str) -> bool:
        with self._lock:
            return self._entries.pop(key, None) is not None

    def delete_if_same(self, key: str, entry_id: str) -> bool:
        """Delete `key` only while it still holds the entry identified by `entry_id`"""
        with self._lock:
            current = self._entries.get(key)
            if current and current.get('entryId') == entry_id:
                del self._entries[key]
                return True
            return False

    def items(self) -> List[Tuple[str, Dict[str, Any]]]:
        with self._lock:
            return [(key, dict(entry)) for key, entry in self._entries.items()]

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()


class FirestoreCodeStore:
    """Shared store backed by a Firestore collection, one document per key"""

    def __init__(self, collection_name: str):
        self.collection_name = collection_name

    @property
    def collection(self):
        return get_db().collection(self.collection_name)

    def get(self, key: str) -> Optional[Dict[str, Any]]:
        doc = self.collection.document(key).get()
        return doc.to_dict() if doc.exists else None

    def put(self, key: str, entry: Dict[str, Any]) -> None:
        self.collection.document(key).set(entry)

    def delete(self, key: str) -> bool:
        doc_ref = self.collection.document(key)
        if not doc_ref.get().exists:
            return False
        doc_ref.delete()
        return True

    def delete_if_same(self, key: str, entry_id: str) -> bool:
        current = self.get(key)
        if current and current.get('entryId') == entry_id:
            self.collection.document(key).delete()
            return True
        return False

    def items(self) -> List[Tuple[str, Dict[str, Any]]]:
        return [(doc.id, doc.to_dict()) for doc in self.collection.stream()]

    def clear(self) -> None:
        for key, _ in self.items():
            self.collection.document(key).delete()


def build_store(collection_name: str):
    """Pick the store implementation configured by OTP_STORE"""
    if AppConfig.OTP_STORE == 'firestore':
        return FirestoreCodeStore(collection_name)
    return MemoryCodeStore()


class OTPService:
    """Issue, verify and expire one-time codes"""

    def __init__(self, store=None, expiry_seconds: float = None, max_attempts: int = None,
                 cleanup_interval: float = None, clock: Callable[[], float] = time.time,
                 start_sweeper: bool = True):
        self.store = store if store is not None else build_store('otps')
        self.expiry_seconds = expiry_seconds if expiry_seconds is not None else AppConfig.OTP_EXPIRY_SECONDS
        self.max_attempts = max_attempts if max_attempts is not None else AppConfig.OTP_MAX_ATTEMPTS
        self.cleanup_interval = cleanup_interval if cleanup_interval is not None else AppConfig.OTP_CLEANUP_INTERVAL_SECONDS
        self.clock = clock
        self._lock = threading.Lock()
        self._timers: Dict[str, threading.Timer] = {}
        self._stop_event = threading.Event()
        self._sweeper: Optional[threading.Thread] = None
        self._sweep_tasks: List[Callable[[], int]] = [self.cleanup]

        if start_sweeper:
            self.start_cleanup()

    @staticmethod
    def _key(email: str, purpose: str) -> str:
        return f"{email}:{purpose}"

    @staticmethod
    def generate_otp() -> str:
        """Uniformly random 6-digit numeric code"""
        return str(secrets.randbelow(900000) + 100000)

    def store_otp(self, email: str, otp: str, purpose: str = 'password_reset') -> Dict[str, Any]:
        """
        Store a code for (email, purpose), replacing any previous one

        Args:
            email: Address the code was sent to
            otp: The code
            purpose: password_reset, email_verification, ...

        Returns:
            Dictionary with success, expiryTime (epoch seconds) and attemptsRemaining
        """
        key = self._key(email, purpose)
        now = self.clock()
        entry = {
            'entryId': secrets.token_hex(8),
            'otp': str(otp),
            'email': email,
            'purpose': purpose,
            'expiryTime': now + self.expiry_seconds,
            'attempts': 0,
            'createdAt': now
        }

        with self._lock:
            self.store.put(key, entry)
            self._schedule_expiry(key, entry['entryId'])

        logger.info(f"OTP stored for {email} ({purpose}), expires in {self.expiry_seconds}s")

        return {
            'success': True,
            'expiryTime': entry['expiryTime'],
            'attemptsRemaining': self.max_attempts
        }

    def _schedule_expiry(self, key: str, entry_id: str) -> None:
        previous = self._timers.pop(key, None)
        if previous:
            previous.cancel()

        timer = threading.Timer(self.expiry_seconds, self._expire, args=(key, entry_id))
        timer.daemon = True
        self._timers[key] = timer
        timer.start()

    def _expire(self, key: str, entry_id: str) -> None:
        with self._lock:
            # A replaced entry has a new entryId, so its successor survives
            if self.store.delete_if_same(key, entry_id):
                logger.info(f"Auto-cleaned expired OTP for {key}")
            timer = self._timers.get(key)
            if timer is not None and timer is threading.current_thread():
                del self._timers[key]

    def verify_otp(self, email: str, input_otp: str, purpose: str = 'password_reset') -> Dict[str, Any]:
        """
        Check a submitted code.

        Fails with OTP_NOT_FOUND, OTP_EXPIRED, MAX_ATTEMPTS_EXCEEDED or
        INVALID_OTP. Every check counts as an attempt; a correct code
        deletes the entry.
        """
        key = self._key(email, purpose)

        with self._lock:
            entry = self.store.get(key)

            if not entry:
                logger.warning(f"OTP verification failed: no OTP found for {email} ({purpose})")
                return {
                    'success': False,
                    'error': 'OTP_NOT_FOUND',
                    'message': 'No OTP found. Please request a new one.'
                }

            if self.clock() > entry['expiryTime']:
                self.store.delete(key)
                logger.warning(f"OTP verification failed: expired OTP for {email}")
                return {
                    'success': False,
                    'error': 'OTP_EXPIRED',
                    'message': 'OTP has expired. Please request a new one.'
                }

            if entry['attempts'] >= self.max_attempts:
                self.store.delete(key)
                logger.warning(f"OTP verification failed: max attempts exceeded for {email}")
                return {
                    'success': False,
                    'error': 'MAX_ATTEMPTS_EXCEEDED',
                    'message': 'Maximum verification attempts exceeded. Please request a new OTP.'
                }

            entry['attempts'] += 1

            if entry['otp'] != str(input_otp):
                self.store.put(key, entry)
                remaining = self.max_attempts - entry['attempts']
                logger.warning(
                    f"OTP verification failed: invalid OTP for {email} "
                    f"(attempt {entry['attempts']}/{self.max_attempts})"
                )
                return {
                    'success': False,
                    'error': 'INVALID_OTP',
                    'message': f'Invalid OTP. {remaining} attempts remaining.',
                    'attemptsRemaining': remaining
                }

            self.store.delete(key)

        logger.info(f"OTP verified successfully for {email} ({purpose})")
        return {
            'success': True,
            'message': 'OTP verified successfully',
            'email': entry['email'],
            'purpose': entry['purpose']
        }

    def get_otp_status(self, email: str, purpose: str = 'password_reset') -> Dict[str, Any]:
        key = self._key(email, purpose)
        with self._lock:
            entry = self.store.get(key)

            if not entry:
                return {'exists': False, 'message': 'No active OTP found'}

            remaining = entry['expiryTime'] - self.clock()
            if remaining <= 0:
                self.store.delete(key)
                return {'exists': False, 'message': 'OTP has expired'}

        return {
            'exists': True,
            'remainingTime': math.ceil(remaining),
            'attemptsRemaining': self.max_attempts - entry['attempts'],
            'createdAt': datetime.utcfromtimestamp(entry['createdAt']).isoformat()
        }

    def invalidate_otp(self, email: str, purpose: str = 'password_reset') -> bool:
        with self._lock:
            deleted = self.store.delete(self._key(email, purpose))
        if deleted:
            logger.info(f"OTP invalidated for {email} ({purpose})")
        return deleted

    def get_active_otps(self) -> List[Dict[str, Any]]:
        """Active codes for admin monitoring; the code itself is never included"""
        now = self.clock()
        active = []
        for _, entry in self.store.items():
            if entry['expiryTime'] > now:
                active.append({
                    'email': entry['email'],
                    'purpose': entry['purpose'],
                    'remainingTime': math.ceil(entry['expiryTime'] - now),
                    'attempts': entry['attempts'],
                    'createdAt': datetime.utcfromtimestamp(entry['createdAt']).isoformat()
                })
        return active

    def cleanup(self) -> int:
        """Delete every entry past its expiry. Returns the number removed"""
        now = self.clock()
        cleaned = 0
        with self._lock:
            for key, entry in self.store.items():
                if entry['expiryTime'] <= now:
                    self.store.delete(key)
                    cleaned += 1

        if cleaned:
            logger.info(f"Cleaned up {cleaned} expired OTPs")
        return cleaned

    def start_cleanup(self) -> None:
        if self._sweeper and self._sweeper.is_alive():
            return
        self._stop_event.clear()
        self._sweeper = threading.Thread(target=self._sweep_loop, name='otp-sweeper', daemon=True)
        self._sweeper.start()
        logger.info(f"OTP cleanup service started (interval: {self.cleanup_interval}s)")

    def sweep(self) -> None:
        """One periodic pass: OTP cleanup plus every registered task"""
        for task in list(self._sweep_tasks):
            try:
                task()
            except Exception as e:
                logger.error(f"Sweep task failed: {str(e)}")

    def _sweep_loop(self) -> None:
        while not self._stop_event.wait(self.cleanup_interval):
            self.sweep()

    def add_sweep_task(self, task: Callable[[], int]) -> None:
        """Run `task` on every periodic sweep alongside the OTP cleanup"""
        self._sweep_tasks.append(task)

    def stop(self) -> None:
        """Stop the sweep thread and cancel pending expiry timers"""
        self._stop_event.set()
        with self._lock:
            for timer in self._timers.values():
                timer.cancel()
            self._timers.clear()

    def get_stats(self) -> Dict[str, Any]:
        now = self.clock()
        entries = self.store.items()
        active = sum(1 for _, entry in entries if entry['expiryTime'] > now)
        return {
            'active': active,
            'expired': len(entries) - active,
            'total': len(entries),
            'maxAttempts': self.max_attempts,
            'expiryMinutes': self.expiry_seconds / 60
        }


_otp_service: Optional[OTPService] = None


def get_otp_service() -> OTPService:
    """Shared OTPService for the process"""
    global _otp_service
    if _otp_service is None:
        _otp_service = OTPService()
    return _otp_service
