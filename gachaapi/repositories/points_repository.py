"""
포인트 리포지토리 - 지갑 잔액과 원장

핵심 특징:
- 잔액 증감은 항상 단일 SQL 문으로 처리 (읽고-계산하고-쓰기 금지)
- 충전/적립은 UPSERT 증가식, 차감은 잔액 조건부 UPDATE
- 모든 거래는 ref_id로 원장에 한 번만 기록됨 (멱등성)
"""

from typing import Optional

from sqlalchemy import desc, func, update
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.orm import Session

from gachaapi.models.points import PointTransaction, UserBalance
from gachaapi.repositories.base import BaseRepository
from gachaapi.schemas.points import PointTransactionEntry, PointTransactionsResponse
from gachaapi.utils.retry import retry_transient_read


class PointsRepository(BaseRepository[PointTransaction, PointTransactionEntry]):
    """포인트 리포지토리 - 포인트 관련 모든 데이터베이스 작업 처리"""

    def __init__(self, db: Session):
        super().__init__(PointTransaction, PointTransactionEntry, db)

    def _to_entry(self, model_instance: PointTransaction) -> PointTransactionEntry:
        data = {
            "id": model_instance.id,
            "transaction_type": model_instance.transaction_type,
            "delta_points": model_instance.delta_points,
            "balance_after": model_instance.balance_after,
            "reason": model_instance.reason,
            "user_item_id": model_instance.user_item_id,
            "created_at": (
                model_instance.created_at.strftime("%Y-%m-%d %H:%M:%S")
                if model_instance.created_at
                else ""
            ),
        }
        return PointTransactionEntry(**data)

    def _insert(self):
        """현재 DB 방언에 맞는 INSERT (ON CONFLICT 지원)"""
        dialect = self.db.get_bind().dialect.name
        if dialect == "sqlite":
            return sqlite.insert(UserBalance)
        return postgresql.insert(UserBalance)

    # ------------------------------------------------------------------
    # 잔액
    # ------------------------------------------------------------------

    def get_balance(self, user_id: str) -> int:
        """현재 잔액 (지갑이 없으면 0)"""
        points = (
            self.db.query(UserBalance.current_points)
            .filter(UserBalance.user_id == user_id)
            .scalar()
        )
        return points or 0

    @retry_transient_read()
    def read_balance(self, user_id: str) -> int:
        """트랜잭션 밖에서의 잔액 조회 (일시 장애 시 재시도)"""
        return self.get_balance(user_id)

    def credit(self, user_id: str, points: int) -> int:
        """원자적 적립 - 지갑이 없으면 생성. 적립 후 잔액 반환

        INSERT ... ON CONFLICT (user_id) DO UPDATE
            SET current_points = user_balances.current_points + :points
        """
        stmt = self._insert().values(user_id=user_id, current_points=points)
        stmt = stmt.on_conflict_do_update(
            index_elements=[UserBalance.user_id],
            set_={
                "current_points": UserBalance.current_points + points,
                "updated_at": func.now(),
            },
        ).returning(UserBalance.current_points)
        return self.db.execute(stmt).scalar_one()

    def debit_if_sufficient(self, user_id: str, points: int) -> Optional[int]:
        """잔액이 충분할 때만 차감. 차감 후 잔액, 부족하면 None"""
        stmt = (
            update(UserBalance)
            .where(
                UserBalance.user_id == user_id,
                UserBalance.current_points >= points,
            )
            .values(current_points=UserBalance.current_points - points)
            .returning(UserBalance.current_points)
        )
        return self.db.execute(stmt).scalar_one_or_none()

    # ------------------------------------------------------------------
    # 원장
    # ------------------------------------------------------------------

    def record_transaction(
        self,
        user_id: str,
        transaction_type: str,
        delta_points: int,
        balance_after: int,
        reason: str,
        ref_id: str,
        user_item_id: Optional[str] = None,
    ) -> PointTransaction:
        """원장 항목 추가 (커밋은 호출자 트랜잭션에서)"""
        entry = PointTransaction(
            user_id=user_id,
            transaction_type=transaction_type,
            delta_points=delta_points,
            balance_after=balance_after,
            reason=reason,
            ref_id=ref_id,
            user_item_id=user_item_id,
        )
        self.db.add(entry)
        self.db.flush()
        return entry

    def find_by_ref_id(self, ref_id: str) -> Optional[PointTransaction]:
        """멱등성 체크용 조회"""
        return (
            self.db.query(PointTransaction)
            .filter(PointTransaction.ref_id == ref_id)
            .first()
        )

    @retry_transient_read()
    def get_user_transactions(
        self, user_id: str, limit: int = 50, offset: int = 0
    ) -> PointTransactionsResponse:
        """사용자 포인트 원장 조회 (최신순, 페이징)"""
        model_instances, total_count = self._paginate(
            self.db.query(PointTransaction).filter(PointTransaction.user_id == user_id),
            desc(PointTransaction.id),
            limit=limit,
            offset=offset,
        )

        return PointTransactionsResponse(
            balance=self.get_balance(user_id),
            entries=[self._to_entry(instance) for instance in model_instances],
            total_count=total_count,
            has_next=offset + limit < total_count,
        )
