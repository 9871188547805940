from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field


class ItemDetail(BaseModel):
    name: str
    rarity: Optional[str] = None
    image_url: Optional[str] = None
    default_point_conversion_rate: int = 0

    class Config:
        from_attributes = True


class OwnedItem(BaseModel):
    """보유 아이템 + 경품 마스터 정보"""

    id: str = Field(..., description="보유 아이템 ID")
    acquired_at: datetime = Field(..., description="획득 시각")
    status: str = Field(..., description="상태")
    is_convertible: bool = Field(..., description="포인트 변환/발송 가능 여부")
    item: ItemDetail

    class Config:
        from_attributes = True


class OwnedItemsResponse(BaseModel):
    items: List[OwnedItem]
    total_count: int
    has_next: bool


class ConvertResponse(BaseModel):
    """포인트 변환 결과"""

    message: str
    converted_points: int = Field(..., description="적립된 포인트")
    new_balance: int = Field(..., description="변환 후 잔액")


class ShipmentResponse(BaseModel):
    message: str
    user_item_id: str
    status: str
