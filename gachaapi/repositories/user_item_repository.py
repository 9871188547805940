from typing import Any, Iterable, List, Optional, Tuple

from sqlalchemy import desc, update
from sqlalchemy.orm import Session

from gachaapi.models.user_item import UserItem, UserItemStatus
from gachaapi.repositories.base import BaseRepository
from gachaapi.schemas.user_item import ItemDetail, OwnedItem
from gachaapi.utils.retry import retry_transient_read


class UserItemRepository(BaseRepository[UserItem, OwnedItem]):
    """보유 아이템 리포지토리"""

    def __init__(self, db: Session):
        super().__init__(UserItem, OwnedItem, db)

    def _to_schema(self, model_instance: UserItem) -> Optional[OwnedItem]:
        if model_instance is None:
            return None
        return OwnedItem(
            id=model_instance.id,
            acquired_at=model_instance.acquired_at,
            status=model_instance.status,
            is_convertible=model_instance.status in UserItemStatus.actionable(),
            item=ItemDetail.model_validate(model_instance.item),
        )

    @retry_transient_read()
    def list_for_user(
        self, user_id: str, limit: int = 50, offset: int = 0
    ) -> Tuple[List[OwnedItem], int]:
        """보유 아이템 목록 (최근 획득순) + 전체 개수"""
        model_instances, total_count = self._paginate(
            self.db.query(UserItem).filter(UserItem.user_id == user_id),
            desc(UserItem.acquired_at),
            UserItem.id,
            limit=limit,
            offset=offset,
        )
        return [self._to_schema(instance) for instance in model_instances], total_count

    def get_owned(self, user_item_id: str, user_id: str) -> Optional[UserItem]:
        """본인 소유 아이템 조회 (타인 소유는 None)"""
        return (
            self.db.query(UserItem)
            .filter(UserItem.id == user_item_id, UserItem.user_id == user_id)
            .first()
        )

    def create(self, user_id: str, item_id: str, gacha_id: str) -> UserItem:
        """추첨 결과 아이템 생성 (커밋은 호출자 트랜잭션에서)"""
        instance = UserItem(
            user_id=user_id,
            item_id=item_id,
            gacha_id=gacha_id,
            status=UserItemStatus.ACQUIRED.value,
        )
        self.db.add(instance)
        self.db.flush()
        self.db.refresh(instance)
        return instance

    def transition_status(
        self,
        user_item_id: str,
        user_id: str,
        from_statuses: Iterable[str],
        to_status: str,
        **values: Any,
    ) -> bool:
        """조건부 상태 전이 - 현재 상태가 from_statuses일 때만 변경"""
        stmt = (
            update(UserItem)
            .where(
                UserItem.id == user_item_id,
                UserItem.user_id == user_id,
                UserItem.status.in_(list(from_statuses)),
            )
            .values(status=to_status, **values)
        )
        return self.db.execute(stmt).rowcount == 1
