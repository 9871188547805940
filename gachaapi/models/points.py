"""
포인트 지갑 데이터 모델

- UserBalance: 사용자별 현재 잔액 (한 행). 증감은 항상 단일 조건부 UPDATE/UPSERT로 처리
- PointTransaction: 모든 포인트 변동의 원장. ref_id 유니크 제약으로 멱등성 보장
"""

import enum

from sqlalchemy import CheckConstraint, Column, Index, Integer, String, Text
from sqlalchemy.schema import UniqueConstraint

from gachaapi.models.base import Base, BaseModel, BigIntegerPK, TimestampMixin


class TransactionType(str, enum.Enum):
    CHARGE = "charge"
    DRAW = "draw"
    CONVERSION = "conversion"


class UserBalance(Base, TimestampMixin):
    __tablename__ = "user_balances"
    __table_args__ = (
        CheckConstraint("current_points >= 0", name="ck_user_balances_non_negative"),
    )

    # 인증 서비스의 사용자 ID (sub 클레임)
    user_id = Column(String(36), primary_key=True)

    # 현재 포인트 - 음수 불가
    current_points = Column(Integer, nullable=False, default=0)


class PointTransaction(BaseModel):
    """
    포인트 원장 테이블 - 모든 포인트 거래 내역을 저장

    1. 불변성: 한번 생성된 레코드는 수정되지 않음
    2. 멱등성: ref_id를 통해 중복 처리 방지 (Idempotency-Key 재요청)
    3. 정합성: balance_after로 거래 직후 잔액 추적
    """

    __tablename__ = "point_transactions"
    __table_args__ = (
        UniqueConstraint("ref_id", name="uq_point_transactions_ref_id"),
        Index("idx_point_transactions_user_id", "user_id", "id"),
    )

    id = Column(BigIntegerPK, primary_key=True, autoincrement=True)
    user_id = Column(String(36), nullable=False)

    # charge | draw | conversion
    transaction_type = Column(String(20), nullable=False)

    # 양수면 증가, 음수면 감소
    delta_points = Column(Integer, nullable=False)
    balance_after = Column(Integer, nullable=False)
    reason = Column(Text, nullable=False)

    # 형식 예시: "charge:<user>:<key>", "draw:<user>:<key>"
    ref_id = Column(String(200), nullable=False)

    # draw / conversion 거래의 대상 아이템
    user_item_id = Column(String(36), nullable=True)
