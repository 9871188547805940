import logging
import uuid
from typing import Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from gachaapi.core.exceptions import (
    BaseAPIException,
    DrawTargetNotFoundError,
    GachaInactiveError,
    GachaNotFoundError,
    GachaOutOfStockError,
    IdempotencyKeyReusedError,
    InsufficientPointsError,
    PrizePoolExhaustedError,
)
from gachaapi.models.gacha import Gacha, GachaStatus
from gachaapi.models.points import PointTransaction, TransactionType
from gachaapi.models.user_item import UserItem
from gachaapi.repositories.gacha_repository import GachaRepository
from gachaapi.repositories.points_repository import PointsRepository
from gachaapi.repositories.user_item_repository import UserItemRepository
from gachaapi.schemas.gacha import (
    DrawnItem,
    DrawResponse,
    GachaCatalogResponse,
    GachaDetailResponse,
    GachaSummary,
    PrizePoolEntry,
)
from gachaapi.services.prize_selector import PrizeSelector

logger = logging.getLogger(__name__)


class GachaService:
    """가챠 카탈로그 조회 및 추첨 트랜잭션"""

    def __init__(self, db: Session, selector: PrizeSelector):
        self.db = db
        self.selector = selector
        self.gacha_repo = GachaRepository(db)
        self.points_repo = PointsRepository(db)
        self.user_item_repo = UserItemRepository(db)

    # ------------------------------------------------------------------
    # 조회
    # ------------------------------------------------------------------

    def list_active_gachas(self) -> GachaCatalogResponse:
        gachas = self.gacha_repo.list_active()
        return GachaCatalogResponse(gachas=gachas, total_count=len(gachas))

    def get_gacha_detail(self, gacha_id: str) -> GachaDetailResponse:
        """가챠 상세 + 경품별 현재 당첨 확률"""
        gacha = self.gacha_repo.get_with_pool(gacha_id)
        if gacha is None:
            raise GachaNotFoundError(gacha_id)

        probabilities = self.selector.probabilities(gacha.pool)
        items = [
            PrizePoolEntry(
                item_id=entry.item.id,
                name=entry.item.name,
                rarity=entry.item.rarity,
                image_url=entry.item.image_url,
                default_point_conversion_rate=entry.item.default_point_conversion_rate,
                weight=entry.weight,
                remaining_quantity=entry.remaining_quantity,
                probability=probability,
            )
            for entry, probability in zip(gacha.pool, probabilities)
        ]
        return GachaDetailResponse(gacha=GachaSummary.model_validate(gacha), items=items)

    # ------------------------------------------------------------------
    # 추첨
    # ------------------------------------------------------------------

    def draw(
        self, user_id: str, gacha_id: str, idempotency_key: Optional[str] = None
    ) -> DrawResponse:
        """가챠 1회 추첨 - 단일 트랜잭션

        1. 가챠 행 잠금 후 판매 상태 확인
        2. 재고 조건부 차감
        3. 포인트 조건부 차감
        4. 경품 풀에서 가중치 추첨 후 수량 조건부 차감
        5. 보유 아이템 생성 + 원장 기록

        어느 단계든 실패하면 전체 롤백되어 재고/포인트/경품 수량이 변하지 않습니다.
        Idempotency-Key가 같으면 이전 결과를 그대로 돌려줍니다.
        같은 키로 다른 가챠를 추첨하면 IdempotencyKeyReusedError.
        """
        ref_id = (
            f"draw:{user_id}:{idempotency_key}"
            if idempotency_key
            else f"draw:{user_id}:{uuid.uuid4().hex}"
        )

        if idempotency_key:
            previous = self.points_repo.find_by_ref_id(ref_id)
            if previous is not None:
                logger.info(f"Replaying draw {ref_id} for user {user_id}")
                return self._replay(previous, gacha_id, idempotency_key)

        try:
            response = self._draw_in_transaction(user_id, gacha_id, ref_id)
            self.db.commit()
        except BaseAPIException as e:
            self.db.rollback()
            logger.info(f"Draw rejected for user {user_id} on gacha {gacha_id}: {e}")
            raise
        except IntegrityError:
            self.db.rollback()
            previous = self.points_repo.find_by_ref_id(ref_id) if idempotency_key else None
            if previous is None:
                raise
            logger.info(f"Concurrent duplicate draw {ref_id}, returning first result")
            return self._replay(previous, gacha_id, idempotency_key)
        except Exception as e:
            self.db.rollback()
            logger.error(f"Draw failed for user {user_id} on gacha {gacha_id}: {str(e)}")
            raise

        logger.info(
            f"User {user_id} drew {response.item.name} from gacha {gacha_id} "
            f"(stock left: {response.remaining_stock})"
        )
        return response

    def _draw_in_transaction(
        self, user_id: str, gacha_id: str, ref_id: str
    ) -> DrawResponse:
        gacha = self.gacha_repo.lock_for_draw(gacha_id)
        if gacha is None:
            raise DrawTargetNotFoundError(gacha_id)
        if gacha.status != GachaStatus.ACTIVE.value:
            raise GachaInactiveError(gacha_id)

        remaining_stock = self.gacha_repo.decrement_stock(gacha_id)
        if remaining_stock is None:
            raise GachaOutOfStockError(gacha_id)

        price = gacha.price
        balance_after = self.points_repo.debit_if_sufficient(user_id, price)
        if balance_after is None:
            raise InsufficientPointsError(
                required=price, available=self.points_repo.get_balance(user_id)
            )

        # 다른 트랜잭션이 먼저 소진한 항목은 제외하고 다시 추첨
        entry = None
        entries = self.gacha_repo.get_available_pool(gacha_id)
        while entries and entry is None:
            candidate = self.selector.choose(entries)
            if candidate is None:
                break
            if self.gacha_repo.take_pool_entry(candidate.id):
                entry = candidate
            else:
                entries = [e for e in entries if e.id != candidate.id]

        if entry is None:
            raise PrizePoolExhaustedError(gacha_id)

        user_item = self.user_item_repo.create(
            user_id=user_id, item_id=entry.item_id, gacha_id=gacha_id
        )
        self.points_repo.record_transaction(
            user_id=user_id,
            transaction_type=TransactionType.DRAW.value,
            delta_points=-price,
            balance_after=balance_after,
            reason=f"Gacha draw: {gacha.name}",
            ref_id=ref_id,
            user_item_id=user_item.id,
        )

        return DrawResponse(
            message="Successfully drew a gacha!",
            item=self._to_drawn_item(user_item),
            balance_after=balance_after,
            remaining_stock=remaining_stock,
        )

    def _replay(
        self, previous: PointTransaction, gacha_id: str, idempotency_key: str
    ) -> DrawResponse:
        user_item = self.db.get(UserItem, previous.user_item_id)
        if user_item is None or user_item.gacha_id != gacha_id:
            raise IdempotencyKeyReusedError(
                idempotency_key, details={"gacha_id": gacha_id}
            )

        gacha = self.db.get(Gacha, gacha_id)
        return DrawResponse(
            message="This draw was already processed",
            item=self._to_drawn_item(user_item),
            balance_after=previous.balance_after,
            remaining_stock=gacha.current_stock if gacha else 0,
        )

    @staticmethod
    def _to_drawn_item(user_item: UserItem) -> DrawnItem:
        return DrawnItem(
            user_item_id=user_item.id,
            item_id=user_item.item_id,
            name=user_item.item.name,
            rarity=user_item.item.rarity,
            image_url=user_item.item.image_url,
            default_point_conversion_rate=user_item.item.default_point_conversion_rate,
            status=user_item.status,
            acquired_at=user_item.acquired_at,
        )
