from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field


class GachaSummary(BaseModel):
    """가챠 목록/상세 공통 정보"""

    id: str = Field(..., description="가챠 ID")
    name: str = Field(..., description="가챠 이름")
    description: Optional[str] = Field(None, description="설명")
    thumbnail_url: Optional[str] = Field(None, description="썸네일 URL")
    price: int = Field(..., description="1회 가격 (포인트)")
    current_stock: int = Field(..., description="남은 수량")
    total_stock: int = Field(..., description="전체 수량")
    category: Optional[str] = Field(None, description="카테고리")
    status: str = Field(..., description="판매 상태")
    created_at: Optional[datetime] = Field(None, description="등록 시각")

    class Config:
        from_attributes = True


class GachaCatalogResponse(BaseModel):
    """판매 중인 가챠 목록"""

    gachas: List[GachaSummary] = Field(..., description="가챠 목록 (최신순)")
    total_count: int = Field(..., description="전체 개수")


class PrizePoolEntry(BaseModel):
    """가챠에 포함된 경품"""

    item_id: str = Field(..., description="경품 ID")
    name: str = Field(..., description="경품 이름")
    rarity: Optional[str] = Field(None, description="레어도")
    image_url: Optional[str] = Field(None, description="이미지 URL")
    default_point_conversion_rate: int = Field(..., description="포인트 환산율")
    weight: int = Field(..., description="가중치")
    remaining_quantity: int = Field(..., description="남은 수량")
    probability: float = Field(..., description="현재 당첨 확률 (0~1)")


class GachaDetailResponse(BaseModel):
    """가챠 상세 + 경품 풀"""

    gacha: GachaSummary
    items: List[PrizePoolEntry] = Field(default_factory=list)


class DrawnItem(BaseModel):
    """가챠로 획득한 아이템"""

    user_item_id: str = Field(..., description="보유 아이템 ID")
    item_id: str = Field(..., description="경품 ID")
    name: str = Field(..., description="경품 이름")
    rarity: Optional[str] = None
    image_url: Optional[str] = None
    default_point_conversion_rate: int = 0
    status: str
    acquired_at: datetime


class DrawResponse(BaseModel):
    """가챠 추첨 결과"""

    message: str
    item: DrawnItem
    balance_after: int = Field(..., description="추첨 후 포인트 잔액")
    remaining_stock: int = Field(..., description="추첨 후 남은 수량")
