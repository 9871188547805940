import logging

from sqlalchemy.orm import Session

from gachaapi.core.exceptions import (
    BaseAPIException,
    UserItemNotConvertibleError,
    UserItemNotFoundError,
)
from gachaapi.models.base import utcnow
from gachaapi.models.points import TransactionType
from gachaapi.models.user_item import UserItemStatus
from gachaapi.repositories.points_repository import PointsRepository
from gachaapi.repositories.user_item_repository import UserItemRepository
from gachaapi.schemas.user_item import (
    ConvertResponse,
    OwnedItemsResponse,
    ShipmentResponse,
)

logger = logging.getLogger(__name__)


class UserItemService:
    """보유 아이템 조회 / 포인트 변환 / 발송 신청"""

    def __init__(self, db: Session):
        self.db = db
        self.user_item_repo = UserItemRepository(db)
        self.points_repo = PointsRepository(db)

    def list_user_items(
        self, user_id: str, limit: int = 50, offset: int = 0
    ) -> OwnedItemsResponse:
        items, total_count = self.user_item_repo.list_for_user(
            user_id=user_id, limit=limit, offset=offset
        )
        logger.info(f"Retrieved {len(items)} items for user {user_id}")
        return OwnedItemsResponse(
            items=items,
            total_count=total_count,
            has_next=offset + limit < total_count,
        )

    def convert_to_points(self, user_id: str, user_item_id: str) -> ConvertResponse:
        """보유 아이템을 포인트로 변환

        - 존재하지 않거나 본인 소유가 아니면 동일하게 USER_ITEM_NOT_FOUND
        - acquired/kept 상태에서만 변환 가능 (조건부 UPDATE로 1회만 성공)
        - 상태 변경, 포인트 적립, 원장 기록은 하나의 트랜잭션
        """
        try:
            user_item = self.user_item_repo.get_owned(user_item_id, user_id)
            if user_item is None:
                raise UserItemNotFoundError(user_item_id)

            points = user_item.item.default_point_conversion_rate
            changed = self.user_item_repo.transition_status(
                user_item_id,
                user_id,
                from_statuses=UserItemStatus.actionable(),
                to_status=UserItemStatus.CONVERTED.value,
                converted_at=utcnow(),
                converted_points=points,
            )
            if not changed:
                self.db.refresh(user_item)
                raise UserItemNotConvertibleError(user_item_id, user_item.status)

            new_balance = self.points_repo.credit(user_id, points)
            self.points_repo.record_transaction(
                user_id=user_id,
                transaction_type=TransactionType.CONVERSION.value,
                delta_points=points,
                balance_after=new_balance,
                reason=f"Item conversion: {user_item.item.name}",
                ref_id=f"conversion:{user_item_id}",
                user_item_id=user_item_id,
            )
            self.db.commit()
        except BaseAPIException:
            self.db.rollback()
            raise
        except Exception as e:
            self.db.rollback()
            logger.error(f"Conversion failed for item {user_item_id}: {str(e)}")
            raise

        logger.info(
            f"User {user_id} converted item {user_item_id} into {points} points"
        )
        return ConvertResponse(
            message="Item converted to points!",
            converted_points=points,
            new_balance=new_balance,
        )

    def request_shipment(self, user_id: str, user_item_id: str) -> ShipmentResponse:
        """실물 발송 신청 - acquired/kept 상태에서 shipping_requested로 전이"""
        try:
            user_item = self.user_item_repo.get_owned(user_item_id, user_id)
            if user_item is None:
                raise UserItemNotFoundError(user_item_id)

            changed = self.user_item_repo.transition_status(
                user_item_id,
                user_id,
                from_statuses=UserItemStatus.actionable(),
                to_status=UserItemStatus.SHIPPING_REQUESTED.value,
            )
            if not changed:
                self.db.refresh(user_item)
                raise UserItemNotConvertibleError(user_item_id, user_item.status)

            self.db.commit()
        except BaseAPIException:
            self.db.rollback()
            raise
        except Exception as e:
            self.db.rollback()
            logger.error(f"Shipment request failed for item {user_item_id}: {str(e)}")
            raise

        logger.info(f"User {user_id} requested shipment of item {user_item_id}")
        return ShipmentResponse(
            message="Shipment requested",
            user_item_id=user_item_id,
            status=UserItemStatus.SHIPPING_REQUESTED.value,
        )
