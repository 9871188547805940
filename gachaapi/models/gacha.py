"""
오리파(가챠) 상품 및 경품 풀 모델

- Gacha: 판매 중인 가챠 상품 (가격, 재고)
- Item: 경품 마스터 (레어도, 포인트 환산율)
- GachaItem: 가챠와 경품의 연결 - 가중치와 남은 수량을 가진 경품 풀 항목
"""

import enum
from typing import List, Optional

from sqlalchemy import CheckConstraint, ForeignKey, Index, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy.schema import UniqueConstraint

from gachaapi.models.base import BaseModel, new_uuid


class GachaStatus(str, enum.Enum):
    ACTIVE = "active"
    INACTIVE = "inactive"


class Gacha(BaseModel):
    __tablename__ = "gachas"
    __table_args__ = (
        CheckConstraint("price > 0", name="ck_gachas_price_positive"),
        CheckConstraint("current_stock >= 0", name="ck_gachas_stock_non_negative"),
        CheckConstraint(
            "current_stock <= total_stock", name="ck_gachas_stock_within_total"
        ),
        Index("idx_gachas_status_created_at", "status", "created_at"),
    )

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_uuid)
    name: Mapped[str] = mapped_column(Text, nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    thumbnail_url: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    price: Mapped[int] = mapped_column(Integer, nullable=False)
    current_stock: Mapped[int] = mapped_column(Integer, nullable=False)
    total_stock: Mapped[int] = mapped_column(Integer, nullable=False)
    category: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    status: Mapped[str] = mapped_column(
        String(20), default=GachaStatus.ACTIVE.value, nullable=False
    )

    pool: Mapped[List["GachaItem"]] = relationship(
        back_populates="gacha", lazy="selectin"
    )

    def __repr__(self):
        return f"<Gacha(id={self.id}, name={self.name}, stock={self.current_stock}/{self.total_stock})>"


class Item(BaseModel):
    __tablename__ = "items"
    __table_args__ = (
        CheckConstraint(
            "default_point_conversion_rate >= 0",
            name="ck_items_conversion_rate_non_negative",
        ),
    )

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_uuid)
    name: Mapped[str] = mapped_column(Text, nullable=False)
    rarity: Mapped[Optional[str]] = mapped_column(String(20), nullable=True)
    image_url: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    default_point_conversion_rate: Mapped[int] = mapped_column(
        Integer, default=0, nullable=False
    )


class GachaItem(BaseModel):
    """경품 풀 항목 - 실효 가중치는 weight * remaining_quantity"""

    __tablename__ = "gacha_items"
    __table_args__ = (
        UniqueConstraint("gacha_id", "item_id", name="uq_gacha_items_gacha_item"),
        CheckConstraint("weight >= 1", name="ck_gacha_items_weight_positive"),
        CheckConstraint(
            "remaining_quantity >= 0", name="ck_gacha_items_quantity_non_negative"
        ),
    )

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_uuid)
    gacha_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("gachas.id", ondelete="CASCADE"), nullable=False, index=True
    )
    item_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("items.id"), nullable=False
    )
    weight: Mapped[int] = mapped_column(Integer, default=1, nullable=False)
    remaining_quantity: Mapped[int] = mapped_column(Integer, nullable=False)

    gacha: Mapped["Gacha"] = relationship(back_populates="pool")
    item: Mapped["Item"] = relationship(lazy="joined")
