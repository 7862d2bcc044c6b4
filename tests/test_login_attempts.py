import pytest

from src.print_tracker.print_tracker.security.login_attempts import LoginAttemptGuard


@pytest.fixture
def guard(clock):
    return LoginAttemptGuard(max_attempts=10, window_minutes=15, lockout_minutes=15, clock=clock)


def test_remaining_attempts_count_down(guard):
    first = guard.record_attempt("alice", "10.0.0.1", success=False)
    second = guard.record_attempt("alice", "10.0.0.1", success=False)

    assert first.remaining_attempts == 9
    assert second.remaining_attempts == 8
    assert not second.locked


def test_success_after_nine_failures_clears_the_counter(guard):
    for _ in range(9):
        guard.record_attempt("alice", "10.0.0.1", success=False)

    guard.record_attempt("alice", "10.0.0.1", success=True)
    result = guard.record_attempt("alice", "10.0.0.1", success=False)

    assert result.remaining_attempts == 9
    assert not guard.is_locked("alice")


def test_tenth_failure_locks_the_account(guard):
    results = [guard.record_attempt("alice", "10.0.0.1", success=False) for _ in range(10)]

    assert results[-1].locked
    assert results[-1].remaining_attempts == 0
    status = guard.check_allowed("alice")
    assert status.locked
    assert status.minutes_remaining == 15


def test_lock_is_per_username_across_addresses(guard):
    for _ in range(10):
        guard.record_attempt("alice", "10.0.0.1", success=False)

    assert guard.check_allowed("alice").locked
    assert not guard.check_allowed("bob").locked


def test_counters_are_per_address(guard):
    for _ in range(9):
        guard.record_attempt("alice", "10.0.0.1", success=False)
    result = guard.record_attempt("alice", "10.0.0.2", success=False)

    assert result.remaining_attempts == 9
    assert not guard.is_locked("alice")


def test_unlocked_after_lockout_elapses(guard, clock):
    for _ in range(10):
        guard.record_attempt("alice", "10.0.0.1", success=False)

    clock.advance(14 * 60 + 30)
    status = guard.check_allowed("alice")
    assert status.locked
    assert status.minutes_remaining == 1

    clock.advance(31)
    assert not guard.check_allowed("alice").locked


def test_attempt_window_restarts_after_expiry(guard, clock):
    for _ in range(5):
        guard.record_attempt("alice", "10.0.0.1", success=False)

    clock.advance(15 * 60 + 1)
    result = guard.record_attempt("alice", "10.0.0.1", success=False)

    assert result.remaining_attempts == 9


def test_sweep_evicts_expired_records(guard, clock):
    for _ in range(10):
        guard.record_attempt("alice", "10.0.0.1", success=False)
    guard.record_attempt("bob", "10.0.0.9", success=False)

    assert guard.sweep() == 0
    clock.advance(15 * 60 + 1)
    # alice's attempt record, alice's lock and bob's attempt record
    assert guard.sweep() == 3
    assert not guard.is_locked("alice")
