from gachaapi.repositories.gacha_repository import GachaRepository
from gachaapi.repositories.points_repository import PointsRepository
from gachaapi.repositories.user_item_repository import UserItemRepository
from gachaapi.repositories.user_repository import UserRepository

__all__ = [
    "GachaRepository",
    "PointsRepository",
    "UserItemRepository",
    "UserRepository",
]
