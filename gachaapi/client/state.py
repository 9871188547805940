"""
화면 상태 - 마이페이지 / 가챠 상세

서버 응답을 그대로 보관하고, 변경 작업 후의 갱신 규칙만 담당합니다.
"""

from dataclasses import dataclass, field
from typing import List, Optional

from gachaapi.client.storefront_client import StorefrontClient
from gachaapi.models.gacha import GachaStatus
from gachaapi.schemas.gacha import DrawResponse, GachaDetailResponse
from gachaapi.schemas.user_item import ConvertResponse, OwnedItem


@dataclass
class MyPageState:
    client: StorefrontClient
    items: List[OwnedItem] = field(default_factory=list)
    points: int = 0
    loaded: bool = False

    def load(self) -> None:
        """보유 아이템과 잔액을 서버에서 읽어옴"""
        self.items = self.client.list_my_items().items
        self.points = self.client.get_balance().current_points
        self.loaded = True

    def convert(self, user_item_id: str) -> ConvertResponse:
        """포인트 변환 - 성공 시 다시 읽지 않고 로컬 상태만 갱신

        실패하면 StorefrontAPIError가 그대로 전파되고 상태는 변하지 않습니다.
        """
        result = self.client.convert(user_item_id)
        self.items = [item for item in self.items if item.id != user_item_id]
        self.points += result.converted_points
        return result


@dataclass
class GachaDetailState:
    client: StorefrontClient
    gacha_id: str
    detail: Optional[GachaDetailResponse] = None
    balance: Optional[int] = None
    last_draw: Optional[DrawResponse] = None

    def load(self) -> None:
        self.detail = self.client.get_gacha(self.gacha_id)
        if self.client.access_token:
            self.balance = self.client.get_balance().current_points

    @property
    def can_draw(self) -> bool:
        if self.detail is None:
            return False
        gacha = self.detail.gacha
        if gacha.status != GachaStatus.ACTIVE.value or gacha.current_stock <= 0:
            return False
        return self.balance is None or self.balance >= gacha.price

    def draw(self) -> DrawResponse:
        """추첨 후 재고와 잔액은 서버에서 다시 읽음"""
        result = self.client.draw(self.gacha_id)
        self.last_draw = result
        self.load()
        return result
