import enum
from datetime import datetime
from typing import Optional

from sqlalchemy import DateTime, ForeignKey, Index, Integer, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from gachaapi.models.base import BaseModel, new_uuid, utcnow
from gachaapi.models.gacha import Item


class UserItemStatus(str, enum.Enum):
    ACQUIRED = "acquired"
    KEPT = "kept"
    CONVERTED = "converted"
    SHIPPING_REQUESTED = "shipping_requested"
    SHIPPED = "shipped"

    @classmethod
    def actionable(cls) -> tuple:
        """포인트 변환 / 발송 신청이 가능한 상태"""
        return (cls.ACQUIRED.value, cls.KEPT.value)


class UserItem(BaseModel):
    """사용자가 가챠로 획득한 아이템"""

    __tablename__ = "user_items"
    __table_args__ = (
        Index("idx_user_items_user_acquired", "user_id", "acquired_at"),
    )

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_uuid)
    user_id: Mapped[str] = mapped_column(String(36), nullable=False)
    item_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("items.id"), nullable=False
    )
    gacha_id: Mapped[Optional[str]] = mapped_column(
        String(36), ForeignKey("gachas.id", ondelete="SET NULL"), nullable=True
    )
    status: Mapped[str] = mapped_column(
        String(30), default=UserItemStatus.ACQUIRED.value, nullable=False
    )
    acquired_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, nullable=False
    )
    converted_at: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True), nullable=True
    )
    converted_points: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)

    item: Mapped[Item] = relationship(lazy="joined")

    def __repr__(self):
        return f"<UserItem(id={self.id}, user_id={self.user_id}, status={self.status})>"
