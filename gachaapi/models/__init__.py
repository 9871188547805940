# 모든 모델을 로드하여 Base.metadata에 등록

from .base import Base
from .gacha import Gacha, GachaItem, GachaStatus, Item
from .points import PointTransaction, TransactionType, UserBalance
from .user import User
from .user_item import UserItem, UserItemStatus

__all__ = [
    "Base",
    "Gacha",
    "GachaItem",
    "GachaStatus",
    "Item",
    "PointTransaction",
    "TransactionType",
    "UserBalance",
    "User",
    "UserItem",
    "UserItemStatus",
]
