import threading
import time

import pytest

from service.otp_service import OTPService, MemoryCodeStore
from service.reset_token_service import ResetTokenService


class FakeClock:
    def __init__(self, now=1_000_000.0):
        self.now = now

    def __call__(self):
        return self.now

    def advance(self, seconds):
        self.now += seconds


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def otps(clock):
    service = OTPService(store=MemoryCodeStore(), expiry_seconds=600, max_attempts=3,
                         cleanup_interval=300, clock=clock, start_sweeper=False)
    yield service
    service.stop()


def test_generate_otp_is_six_digits():
    for _ in range(50):
        code = OTPService.generate_otp()
        assert len(code) == 6
        assert code.isdigit()


def test_store_reports_attempts_and_expiry(otps, clock):
    result = otps.store_otp('a@example.com', '123456')
    assert result['success'] is True
    assert result['attemptsRemaining'] == 3
    assert result['expiryTime'] == clock.now + 600


def test_correct_code_verifies_once(otps):
    otps.store_otp('a@example.com', '123456')

    assert otps.verify_otp('a@example.com', '123456')['success'] is True
    second = otps.verify_otp('a@example.com', '123456')
    assert second['success'] is False
    assert second['error'] == 'OTP_NOT_FOUND'


def test_wrong_code_counts_down_attempts(otps):
    otps.store_otp('a@example.com', '123456')

    first = otps.verify_otp('a@example.com', '000000')
    assert first['error'] == 'INVALID_OTP'
    assert first['attemptsRemaining'] == 2

    second = otps.verify_otp('a@example.com', '000000')
    assert second['attemptsRemaining'] == 1


def test_correct_code_rejected_after_max_attempts(otps):
    otps.store_otp('a@example.com', '123456')
    for _ in range(3):
        assert otps.verify_otp('a@example.com', '999999')['error'] == 'INVALID_OTP'

    result = otps.verify_otp('a@example.com', '123456')
    assert result['success'] is False
    assert result['error'] == 'MAX_ATTEMPTS_EXCEEDED'

    # The entry is gone afterwards
    assert otps.verify_otp('a@example.com', '123456')['error'] == 'OTP_NOT_FOUND'


def test_expired_code_is_rejected_and_removed(otps, clock):
    otps.store_otp('a@example.com', '123456')
    clock.advance(601)

    result = otps.verify_otp('a@example.com', '123456')
    assert result['error'] == 'OTP_EXPIRED'
    assert otps.store.get('a@example.com:password_reset') is None


def test_purposes_are_independent(otps):
    otps.store_otp('a@example.com', '111111', 'email_verification')
    otps.store_otp('a@example.com', '222222', 'password_reset')

    assert otps.verify_otp('a@example.com', '222222', 'email_verification')['error'] == 'INVALID_OTP'
    assert otps.verify_otp('a@example.com', '111111', 'email_verification')['success'] is True
    assert otps.verify_otp('a@example.com', '222222', 'password_reset')['success'] is True


def test_new_code_replaces_old_one(otps):
    otps.store_otp('a@example.com', '111111')
    otps.store_otp('a@example.com', '222222')

    assert otps.verify_otp('a@example.com', '111111')['error'] == 'INVALID_OTP'
    assert otps.verify_otp('a@example.com', '222222')['success'] is True


def test_cleanup_sweeps_only_expired(otps, clock):
    otps.store_otp('old@example.com', '111111')
    clock.advance(400)
    otps.store_otp('new@example.com', '222222')
    clock.advance(250)

    assert otps.cleanup() == 1
    assert otps.store.get('old@example.com:password_reset') is None
    assert otps.store.get('new@example.com:password_reset') is not None


def test_status_and_stats(otps, clock):
    assert otps.get_otp_status('a@example.com')['exists'] is False

    otps.store_otp('a@example.com', '123456')
    otps.verify_otp('a@example.com', '000000')
    clock.advance(100)

    status = otps.get_otp_status('a@example.com')
    assert status['exists'] is True
    assert status['remainingTime'] == 500
    assert status['attemptsRemaining'] == 2

    stats = otps.get_stats()
    assert stats['active'] == 1
    assert stats['maxAttempts'] == 3

    active = otps.get_active_otps()
    assert active[0]['email'] == 'a@example.com'
    assert 'otp' not in active[0]


def test_invalidate(otps):
    otps.store_otp('a@example.com', '123456')
    assert otps.invalidate_otp('a@example.com') is True
    assert otps.invalidate_otp('a@example.com') is False


def test_timer_removes_entry_without_access():
    service = OTPService(store=MemoryCodeStore(), expiry_seconds=0.05, start_sweeper=False)
    try:
        service.store_otp('a@example.com', '123456')
        deadline = time.time() + 2
        while service.store.get('a@example.com:password_reset') is not None and time.time() < deadline:
            time.sleep(0.01)
        assert service.store.get('a@example.com:password_reset') is None
    finally:
        service.stop()


def test_timer_of_replaced_code_leaves_successor():
    store = MemoryCodeStore()
    service = OTPService(store=store, expiry_seconds=600, start_sweeper=False)
    try:
        service.store_otp('a@example.com', '111111')
        first_id = store.get('a@example.com:password_reset')['entryId']
        service.store_otp('a@example.com', '222222')

        # A stale timer firing for the first entry must not delete the second
        service._expire('a@example.com:password_reset', first_id)
        assert store.get('a@example.com:password_reset')['otp'] == '222222'
    finally:
        service.stop()


def test_sweeper_thread_runs_cleanup():
    clock = FakeClock()
    service = OTPService(store=MemoryCodeStore(), expiry_seconds=600, cleanup_interval=0.02,
                         clock=clock, start_sweeper=False)
    try:
        service.store_otp('a@example.com', '123456')
        clock.advance(601)
        service.start_cleanup()
        deadline = time.time() + 2
        while service.store.items() and time.time() < deadline:
            time.sleep(0.01)
        assert service.store.items() == []
    finally:
        service.stop()


def test_reset_token_single_use(clock):
    tokens = ResetTokenService(store=MemoryCodeStore(), expiry_seconds=900, clock=clock)
    issued = tokens.issue('a@example.com')

    assert tokens.consume(issued['resetToken']) == {'success': True, 'email': 'a@example.com'}
    assert tokens.consume(issued['resetToken'])['error'] == 'INVALID_TOKEN'


def test_reset_token_checks_account_type_and_expiry(clock):
    tokens = ResetTokenService(store=MemoryCodeStore(), expiry_seconds=900, clock=clock)
    admin_token = tokens.issue('admin@example.com', 'admin')['resetToken']
    assert tokens.consume(admin_token, 'user')['error'] == 'INVALID_TOKEN'

    user_token = tokens.issue('a@example.com', 'user')['resetToken']
    clock.advance(901)
    assert tokens.consume(user_token, 'user')['error'] == 'TOKEN_EXPIRED'
    assert tokens.consume('not-a-token', 'user')['error'] == 'INVALID_TOKEN'


def test_reset_token_store_empty_after_consume(clock):
    tokens = ResetTokenService(store=MemoryCodeStore(), expiry_seconds=900, clock=clock)
    issued = [tokens.issue(f'user{i}@example.com')['resetToken'] for i in range(5)]

    for token in issued:
        assert tokens.consume(token)['success'] is True
    assert tokens.store.items() == []


def test_reset_token_cleanup_drops_expired(clock):
    tokens = ResetTokenService(store=MemoryCodeStore(), expiry_seconds=900, clock=clock)
    tokens.issue('a@example.com')
    assert tokens.cleanup() == 0

    clock.advance(901)
    tokens.issue('b@example.com')
    assert tokens.cleanup() == 1
    assert [entry['email'] for _, entry in tokens.store.items()] == ['b@example.com']


def test_sweep_runs_registered_tasks(otps, clock):
    tokens = ResetTokenService(store=MemoryCodeStore(), expiry_seconds=900, clock=clock)
    otps.add_sweep_task(tokens.cleanup)
    tokens.issue('a@example.com')
    otps.store_otp('a@example.com', '123456')

    clock.advance(901)
    otps.sweep()

    assert tokens.store.items() == []
    assert otps.store.items() == []


def test_sweep_continues_after_failing_task(otps, clock):
    tokens = ResetTokenService(store=MemoryCodeStore(), expiry_seconds=900, clock=clock)

    def broken():
        raise RuntimeError('store offline')

    otps.add_sweep_task(broken)
    otps.add_sweep_task(tokens.cleanup)
    tokens.issue('a@example.com')
    clock.advance(901)
    otps.sweep()

    assert tokens.store.items() == []


def test_invalidate_then_status_reports_missing(otps):
    otps.store_otp('a@example.com', '123456')
    assert otps.get_otp_status('a@example.com')['exists'] is True

    assert otps.invalidate_otp('a@example.com') is True
    assert otps.get_otp_status('a@example.com')['exists'] is False
    assert otps.invalidate_otp('a@example.com') is False


def test_status_and_invalidate_wait_for_lock(otps):
    otps.store_otp('a@example.com', '123456')
    results = []

    otps._lock.acquire()
    worker = threading.Thread(target=lambda: results.append(otps.invalidate_otp('a@example.com')))
    worker.start()
    worker.join(0.1)
    assert results == []
    otps._lock.release()

    worker.join(2)
    assert results == [True]
