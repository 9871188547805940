import threading
from unittest.mock import Mock, patch

import pytest

from gachaapi.config import Settings
from gachaapi.core.exceptions import IdempotencyKeyReusedError, InvalidAmountError
from gachaapi.models import PointTransaction, UserBalance
from gachaapi.services.point_service import PointService


@pytest.fixture
def mock_db():
    return Mock()


@pytest.fixture
def point_service(mock_db):
    with patch("gachaapi.services.point_service.PointsRepository") as mock_repo_class:
        mock_repo = Mock()
        mock_repo_class.return_value = mock_repo

        service = PointService(mock_db, Settings(CHARGE_MAX_AMOUNT=5000))
        service.points_repo = mock_repo
        return service


class TestChargeValidation:
    """충전 금액 검증은 DB 작업 전에 수행"""

    @pytest.mark.parametrize("amount", [None, 0, -1])
    def test_invalid_amount_never_touches_wallet(self, point_service, amount):
        with pytest.raises(InvalidAmountError):
            point_service.charge("u1", amount)

        point_service.points_repo.credit.assert_not_called()
        point_service.points_repo.find_by_ref_id.assert_not_called()
        point_service.db.commit.assert_not_called()

    def test_amount_over_configured_maximum(self, point_service):
        with pytest.raises(InvalidAmountError) as exc_info:
            point_service.charge("u1", 5001)

        assert exc_info.value.status_code == 400
        assert exc_info.value.details == {"amount": 5001, "max": 5000}

    def test_charge_commits_once(self, point_service):
        # Arrange
        point_service.points_repo.credit.return_value = 1500

        # Act
        result = point_service.charge("u1", 500)

        # Assert
        assert result.new_balance == 1500
        point_service.points_repo.credit.assert_called_once_with("u1", 500)
        kwargs = point_service.points_repo.record_transaction.call_args.kwargs
        assert kwargs["delta_points"] == 500
        assert kwargs["balance_after"] == 1500
        assert kwargs["ref_id"].startswith("charge:u1:")
        point_service.db.commit.assert_called_once()

    def test_charge_rolls_back_on_failure(self, point_service):
        point_service.points_repo.credit.side_effect = RuntimeError("connection lost")

        with pytest.raises(RuntimeError):
            point_service.charge("u1", 500)

        point_service.db.rollback.assert_called_once()
        point_service.db.commit.assert_not_called()

    def test_idempotent_replay_skips_credit(self, point_service):
        point_service.points_repo.find_by_ref_id.return_value = Mock(
            delta_points=500, balance_after=900
        )

        result = point_service.charge("u1", 500, idempotency_key="abc")

        assert result.new_balance == 900
        point_service.points_repo.find_by_ref_id.assert_called_once_with("charge:u1:abc")
        point_service.points_repo.credit.assert_not_called()

    def test_replay_with_different_amount_is_rejected(self, point_service):
        """같은 키로 금액이 다른 충전은 재생하지 않고 거부"""
        point_service.points_repo.find_by_ref_id.return_value = Mock(
            delta_points=500, balance_after=900
        )

        with pytest.raises(IdempotencyKeyReusedError) as exc_info:
            point_service.charge("u1", 700, idempotency_key="abc")

        assert exc_info.value.details["previous_amount"] == 500
        point_service.points_repo.credit.assert_not_called()
        point_service.db.commit.assert_not_called()


class TestConcurrentCharge:
    """동시 충전이 서로의 증가분을 덮어쓰지 않음"""

    def test_two_concurrent_charges_sum(self, file_session_factory):
        # Given: 잔액 0에서 1000 충전 두 건이 동시에 도착
        settings = Settings()
        barrier = threading.Barrier(2, timeout=30)
        errors = []

        def charge():
            session = file_session_factory()
            try:
                barrier.wait()
                PointService(session, settings).charge("u1", 1000)
            except Exception as e:  # 스레드 예외를 메인 스레드로 전달
                errors.append(e)
            finally:
                session.close()

        threads = [threading.Thread(target=charge) for _ in range(2)]

        # When
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        # Then
        assert errors == []
        session = file_session_factory()
        try:
            assert session.get(UserBalance, "u1").current_points == 2000
            balances = sorted(
                e.balance_after for e in session.query(PointTransaction).all()
            )
            assert balances == [1000, 2000]
        finally:
            session.close()
