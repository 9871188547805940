from unittest.mock import Mock

import pytest
from sqlalchemy.exc import OperationalError

from gachaapi.utils.retry import retry_transient_read


def _operational_error():
    return OperationalError("SELECT 1", {}, Exception("server closed the connection"))


class FakeRepository:
    def __init__(self, failures: int):
        self.db = Mock()
        self.failures = failures
        self.calls = 0

    def read(self):
        self.calls += 1
        if self.calls <= self.failures:
            raise _operational_error()
        return "rows"


class TestRetryTransientRead:
    """읽기 재시도 데코레이터 테스트"""

    def test_recovers_after_transient_errors(self):
        sleeps = []
        repo = FakeRepository(failures=2)
        read = retry_transient_read(attempts=3, backoff_seconds=0.1, sleep=sleeps.append)(
            FakeRepository.read
        )

        assert read(repo) == "rows"
        assert repo.calls == 3
        assert sleeps == [0.1, 0.2]
        assert repo.db.rollback.call_count == 2

    def test_gives_up_after_max_attempts(self):
        sleeps = []
        repo = FakeRepository(failures=5)
        read = retry_transient_read(attempts=3, backoff_seconds=0.1, sleep=sleeps.append)(
            FakeRepository.read
        )

        with pytest.raises(OperationalError):
            read(repo)

        assert repo.calls == 3
        assert len(sleeps) == 2

    def test_other_errors_are_not_retried(self):
        calls = []

        @retry_transient_read(attempts=3, backoff_seconds=0, sleep=lambda _: None)
        def read():
            calls.append(1)
            raise ValueError("bad input")

        with pytest.raises(ValueError):
            read()

        assert len(calls) == 1

    def test_defaults_come_from_settings(self, monkeypatch):
        from gachaapi.config import settings

        monkeypatch.setattr(settings, "DB_READ_RETRY_COUNT", 2)
        sleeps = []
        repo = FakeRepository(failures=5)
        read = retry_transient_read(sleep=sleeps.append)(FakeRepository.read)

        with pytest.raises(OperationalError):
            read(repo)

        assert repo.calls == 2
