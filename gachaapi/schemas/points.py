from typing import List, Optional

from pydantic import BaseModel, Field


class ChargeRequest(BaseModel):
    """포인트 충전 요청 - 금액 검증은 400 응답을 위해 서비스에서 수행"""

    amount: Optional[int] = Field(None, description="충전 포인트")


class ChargeResponse(BaseModel):
    message: str
    new_balance: int = Field(..., description="충전 후 잔액")


class WalletBalanceResponse(BaseModel):
    """포인트 잔액 응답"""

    user_id: str
    current_points: int = Field(..., description="현재 포인트 잔액")


class PointTransactionEntry(BaseModel):
    """포인트 원장 항목"""

    id: int = Field(..., description="원장 항목 ID")
    transaction_type: str = Field(..., description="거래 타입")
    delta_points: int = Field(..., description="포인트 변화량")
    balance_after: int = Field(..., description="거래 후 잔액")
    reason: str = Field(..., description="거래 사유")
    user_item_id: Optional[str] = Field(None, description="관련 보유 아이템 ID")
    created_at: str = Field(..., description="생성 시간")

    class Config:
        from_attributes = True


class PointTransactionsResponse(BaseModel):
    """포인트 원장 조회 응답"""

    balance: int = Field(..., description="현재 잔액")
    entries: List[PointTransactionEntry] = Field(..., description="원장 항목 목록")
    total_count: int = Field(..., description="전체 항목 수")
    has_next: bool = Field(..., description="다음 페이지 존재 여부")
