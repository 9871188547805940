from typing import List, Optional

from sqlalchemy import desc, select, update
from sqlalchemy.orm import Session, lazyload

from gachaapi.models.gacha import Gacha, GachaItem, GachaStatus
from gachaapi.repositories.base import BaseRepository
from gachaapi.schemas.gacha import GachaSummary
from gachaapi.utils.retry import retry_transient_read


class GachaRepository(BaseRepository[Gacha, GachaSummary]):
    """가챠 상품 및 경품 풀 리포지토리"""

    def __init__(self, db: Session):
        super().__init__(Gacha, GachaSummary, db)

    # ------------------------------------------------------------------
    # 조회 (재시도 가능)
    # ------------------------------------------------------------------

    @retry_transient_read()
    def list_active(self) -> List[GachaSummary]:
        """판매 중인 가챠 목록 (최신순)"""
        model_instances = (
            self.db.query(Gacha)
            .filter(Gacha.status == GachaStatus.ACTIVE.value)
            .order_by(desc(Gacha.created_at), Gacha.id)
            .all()
        )
        return [self._to_schema(instance) for instance in model_instances]

    @retry_transient_read()
    def get_with_pool(self, gacha_id: str) -> Optional[Gacha]:
        """가챠 + 경품 풀 (pool은 selectin 로딩)"""
        return self.db.query(Gacha).filter(Gacha.id == gacha_id).first()

    # ------------------------------------------------------------------
    # 추첨 트랜잭션 내부에서만 사용 (재시도 금지)
    # ------------------------------------------------------------------

    def lock_for_draw(self, gacha_id: str) -> Optional[Gacha]:
        """가챠 행 잠금 (SELECT ... FOR UPDATE) - 같은 가챠의 추첨을 직렬화"""
        return self.db.execute(
            select(Gacha)
            .where(Gacha.id == gacha_id)
            .options(lazyload(Gacha.pool))
            .with_for_update()
            .execution_options(populate_existing=True)
        ).scalar_one_or_none()

    def decrement_stock(self, gacha_id: str) -> Optional[int]:
        """재고 1 차감 (조건부). 차감 후 재고를 반환하고, 재고가 없으면 None"""
        stmt = (
            update(Gacha)
            .where(
                Gacha.id == gacha_id,
                Gacha.status == GachaStatus.ACTIVE.value,
                Gacha.current_stock > 0,
            )
            .values(current_stock=Gacha.current_stock - 1)
            .returning(Gacha.current_stock)
        )
        return self.db.execute(stmt).scalar_one_or_none()

    def get_available_pool(self, gacha_id: str) -> List[GachaItem]:
        """남은 수량이 있는 경품 풀 항목"""
        return list(
            self.db.execute(
                select(GachaItem)
                .where(
                    GachaItem.gacha_id == gacha_id,
                    GachaItem.remaining_quantity > 0,
                )
                .order_by(GachaItem.created_at, GachaItem.id)
            ).scalars()
        )

    def take_pool_entry(self, gacha_item_id: str) -> bool:
        """경품 풀 항목 수량 1 차감 (조건부)"""
        stmt = (
            update(GachaItem)
            .where(
                GachaItem.id == gacha_item_id,
                GachaItem.remaining_quantity > 0,
            )
            .values(remaining_quantity=GachaItem.remaining_quantity - 1)
        )
        return self.db.execute(stmt).rowcount == 1
