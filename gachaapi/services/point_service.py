import logging
import uuid
from typing import Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from gachaapi.config import Settings
from gachaapi.core.exceptions import IdempotencyKeyReusedError, InvalidAmountError
from gachaapi.models.points import PointTransaction, TransactionType
from gachaapi.repositories.points_repository import PointsRepository
from gachaapi.schemas.points import (
    ChargeResponse,
    PointTransactionsResponse,
    WalletBalanceResponse,
)

logger = logging.getLogger(__name__)


class PointService:
    """포인트 관련 비즈니스 로직을 담당하는 서비스"""

    def __init__(self, db: Session, settings: Settings):
        self.db = db
        self.settings = settings
        self.points_repo = PointsRepository(db)

    def get_balance(self, user_id: str) -> WalletBalanceResponse:
        """사용자 포인트 잔액 조회 (지갑이 없으면 0)"""
        current_points = self.points_repo.read_balance(user_id)
        logger.info(f"Retrieved balance for user {user_id}: {current_points}")
        return WalletBalanceResponse(user_id=user_id, current_points=current_points)

    def get_transactions(
        self, user_id: str, limit: int = 50, offset: int = 0
    ) -> PointTransactionsResponse:
        """사용자 포인트 원장 조회

        Args:
            user_id: 사용자 ID
            limit: 페이지 크기 (최대 100)
            offset: 오프셋
        """
        if limit > 100:
            limit = 100

        ledger = self.points_repo.get_user_transactions(
            user_id=user_id, limit=limit, offset=offset
        )
        logger.info(
            f"Retrieved ledger for user {user_id}: {ledger.total_count} entries"
        )
        return ledger

    def validate_amount(self, amount: Optional[int]) -> int:
        """충전 금액 검증 - DB 작업 전에 수행"""
        if amount is None:
            raise InvalidAmountError("Amount is required")
        if amount <= 0:
            raise InvalidAmountError(
                "Amount must be positive", details={"amount": amount}
            )
        if amount > self.settings.CHARGE_MAX_AMOUNT:
            raise InvalidAmountError(
                f"Amount exceeds the maximum of {self.settings.CHARGE_MAX_AMOUNT}",
                details={"amount": amount, "max": self.settings.CHARGE_MAX_AMOUNT},
            )
        return amount

    def charge(
        self, user_id: str, amount: Optional[int], idempotency_key: Optional[str] = None
    ) -> ChargeResponse:
        """포인트 충전

        잔액 증가는 UPSERT 한 문장으로 처리하므로 동시 충전도 유실되지 않습니다.
        같은 Idempotency-Key로 재요청하면 충전 없이 이전 결과를 반환합니다.
        금액이 다르면 IdempotencyKeyReusedError.
        """
        amount = self.validate_amount(amount)

        ref_id = (
            f"charge:{user_id}:{idempotency_key}"
            if idempotency_key
            else f"charge:{user_id}:{uuid.uuid4().hex}"
        )

        if idempotency_key:
            previous = self.points_repo.find_by_ref_id(ref_id)
            if previous is not None:
                logger.info(f"Replaying charge {ref_id} for user {user_id}")
                return self._replay(previous, amount, idempotency_key)

        try:
            new_balance = self.points_repo.credit(user_id, amount)
            self.points_repo.record_transaction(
                user_id=user_id,
                transaction_type=TransactionType.CHARGE.value,
                delta_points=amount,
                balance_after=new_balance,
                reason="Point charge",
                ref_id=ref_id,
            )
            self.db.commit()
        except IntegrityError:
            self.db.rollback()
            previous = self.points_repo.find_by_ref_id(ref_id) if idempotency_key else None
            if previous is None:
                raise
            logger.info(f"Concurrent duplicate charge {ref_id}, returning first result")
            return self._replay(previous, amount, idempotency_key)
        except Exception as e:
            self.db.rollback()
            logger.error(f"Failed to charge points for user {user_id}: {str(e)}")
            raise

        logger.info(f"Charged {amount} points for user {user_id}: balance {new_balance}")
        return ChargeResponse(message=f"{amount} points charged!", new_balance=new_balance)

    @staticmethod
    def _replay(
        previous: PointTransaction, amount: int, idempotency_key: str
    ) -> ChargeResponse:
        if previous.delta_points != amount:
            raise IdempotencyKeyReusedError(
                idempotency_key,
                details={"amount": amount, "previous_amount": previous.delta_points},
            )
        return ChargeResponse(
            message="This charge was already processed",
            new_balance=previous.balance_after,
        )
