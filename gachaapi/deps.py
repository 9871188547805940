from typing import Callable

from dependency_injector.wiring import inject, Provide
from fastapi import Depends
from sqlalchemy.orm import Session

from gachaapi.containers import Container
from gachaapi.database.session import get_db
from gachaapi.services.gacha_service import GachaService
from gachaapi.services.point_service import PointService
from gachaapi.services.user_item_service import UserItemService


@inject
def get_gacha_service(
    db: Session = Depends(get_db),
    factory: Callable[..., GachaService] = Depends(
        Provide[Container.gacha_service.provider]
    ),
) -> GachaService:
    return factory(db=db)


@inject
def get_user_item_service(
    db: Session = Depends(get_db),
    factory: Callable[..., UserItemService] = Depends(
        Provide[Container.user_item_service.provider]
    ),
) -> UserItemService:
    return factory(db=db)


@inject
def get_point_service(
    db: Session = Depends(get_db),
    factory: Callable[..., PointService] = Depends(
        Provide[Container.point_service.provider]
    ),
) -> PointService:
    return factory(db=db)
