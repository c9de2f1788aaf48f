# tests/test_retry.py
import pytest
from sqlalchemy.exc import IntegrityError, OperationalError, ProgrammingError

from gameforge.errors import StorageError, StorageUnavailableError
from gameforge.storage.retry import is_non_retryable, run_with_retry


class Flaky:
    """Fails with the given errors in order, then returns 'ok'."""

    def __init__(self, *errors):
        self.errors = list(errors)
        self.calls = 0

    def __call__(self):
        self.calls += 1
        if self.errors:
            raise self.errors.pop(0)
        return "ok"


def test_succeeds_after_transient_failures():
    delays = []
    op = Flaky(ConnectionError("connection reset by peer"), TimeoutError("timed out"))

    assert run_with_retry(op, "get_user(user-1)", base_delay=0.5, sleep=delays.append) == "ok"
    assert op.calls == 3
    assert delays == [0.5, 1.0]


def test_gives_up_after_three_attempts():
    delays = []
    op = Flaky(*[ConnectionError(f"timeout #{n}") for n in range(1, 5)])

    with pytest.raises(StorageUnavailableError) as info:
        run_with_retry(op, "get_all_assets", sleep=delays.append)

    assert op.calls == 3
    assert delays == [1.0, 2.0]
    assert str(info.value) == "Database operation failed after 3 attempts: timeout #3"
    assert info.value.context == "get_all_assets"
    assert isinstance(info.value, StorageError)
    assert isinstance(info.value.__cause__, ConnectionError)


def test_validation_error_is_raised_immediately():
    delays = []
    op = Flaky(ValueError("validation failed for field email"))

    with pytest.raises(ValueError, match="validation failed"):
        run_with_retry(op, "create_user(x)", sleep=delays.append)

    assert op.calls == 1
    assert delays == []


def test_no_retry_after_success():
    delays = []
    op = Flaky()
    assert run_with_retry(op, "noop", sleep=delays.append) == "ok"
    assert op.calls == 1
    assert delays == []


@pytest.mark.parametrize(
    "message",
    [
        "Validation error on insert",
        "password authentication failed for user \"app\"",
        "authorization denied",
        "syntax error at or near \"SELEC\"",
        "column \"nickname\" does not exist",
        "relation \"users\" does not exist",
        "no such table: users",
        "no such column: users.banner",
    ],
)
def test_permanent_messages(message):
    assert is_non_retryable(RuntimeError(message))


@pytest.mark.parametrize(
    "message",
    [
        "connection reset by peer",
        "server closed the connection unexpectedly",
        "timeout expired",
        "database \"gameforge\" does not exist yet",
    ],
)
def test_transient_messages(message):
    assert not is_non_retryable(RuntimeError(message))


def test_integrity_and_programming_errors_are_permanent():
    assert is_non_retryable(IntegrityError("INSERT", {}, Exception("UNIQUE constraint failed")))
    assert is_non_retryable(ProgrammingError("SELECT", {}, Exception("bad parameter")))
    assert not is_non_retryable(OperationalError("SELECT 1", {}, Exception("could not connect to server")))
