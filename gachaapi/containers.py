from dependency_injector import containers, providers

from gachaapi.config import Settings
from gachaapi.services.gacha_service import GachaService
from gachaapi.services.point_service import PointService
from gachaapi.services.prize_selector import PrizeSelector
from gachaapi.services.user_item_service import UserItemService


class Container(containers.DeclarativeContainer):
    """Application container.

    서비스는 요청마다 새 DB 세션으로 생성되어야 하므로 Factory로 등록하고,
    세션은 deps 모듈에서 FastAPI Depends(get_db)로 주입합니다.
    """

    wiring_config = containers.WiringConfiguration(modules=["gachaapi.deps"])

    config = providers.Singleton(Settings)

    # 운영: SystemRandom / 테스트: override로 시드 고정
    prize_selector = providers.Singleton(PrizeSelector)

    gacha_service = providers.Factory(GachaService, selector=prize_selector)
    user_item_service = providers.Factory(UserItemService)
    point_service = providers.Factory(PointService, settings=config)
