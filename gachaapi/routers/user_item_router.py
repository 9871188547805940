"""
보유 아이템 API 라우터

- GET  /api/me/items: 내 보유 아이템 목록 (최근 획득순)
- POST /api/user-items/{user_item_id}/convert: 포인트로 변환
- POST /api/user-items/{user_item_id}/ship: 실물 발송 신청

모든 엔드포인트는 Bearer 토큰 인증 필요
"""

import logging

from fastapi import APIRouter, Depends, Path, Query

from gachaapi.core.auth_middleware import get_current_user
from gachaapi.core.exceptions import BaseAPIException, InternalServerError
from gachaapi.deps import get_user_item_service
from gachaapi.schemas.auth import AuthenticatedUser
from gachaapi.schemas.pagination import PaginationLimits
from gachaapi.schemas.user_item import (
    ConvertResponse,
    OwnedItemsResponse,
    ShipmentResponse,
)
from gachaapi.services.user_item_service import UserItemService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["user-items"])


@router.get("/me/items", response_model=OwnedItemsResponse)
def get_my_items(
    limit: int = Query(
        PaginationLimits.USER_ITEMS["default"],
        ge=PaginationLimits.USER_ITEMS["min"],
        le=PaginationLimits.USER_ITEMS["max"],
        description="페이지 크기",
    ),
    offset: int = Query(0, ge=0, description="오프셋"),
    current_user: AuthenticatedUser = Depends(get_current_user),
    user_item_service: UserItemService = Depends(get_user_item_service),
) -> OwnedItemsResponse:
    """내 보유 아이템 목록 - 모든 상태 포함, is_convertible로 변환 가능 여부 표시"""
    try:
        return user_item_service.list_user_items(
            user_id=current_user.id, limit=limit, offset=offset
        )
    except BaseAPIException:
        raise
    except Exception as e:
        logger.error(f"Failed to get items for user {current_user.id}: {str(e)}")
        raise InternalServerError("Failed to retrieve items")


@router.post("/user-items/{user_item_id}/convert", response_model=ConvertResponse)
def convert_user_item(
    user_item_id: str = Path(..., description="보유 아이템 ID"),
    current_user: AuthenticatedUser = Depends(get_current_user),
    user_item_service: UserItemService = Depends(get_user_item_service),
) -> ConvertResponse:
    """
    보유 아이템을 포인트로 변환

    HTTP Status:
        200: 변환 성공 - 적립 포인트와 변환 후 잔액
        400: 없는 아이템 / 타인 소유 / 이미 처리된 아이템
        401: 인증 실패
    """
    try:
        return user_item_service.convert_to_points(
            user_id=current_user.id, user_item_id=user_item_id
        )
    except BaseAPIException:
        raise
    except Exception as e:
        logger.error(f"Conversion error for item {user_item_id}: {str(e)}")
        raise InternalServerError("An error occurred while converting the item")


@router.post("/user-items/{user_item_id}/ship", response_model=ShipmentResponse)
def request_shipment(
    user_item_id: str = Path(..., description="보유 아이템 ID"),
    current_user: AuthenticatedUser = Depends(get_current_user),
    user_item_service: UserItemService = Depends(get_user_item_service),
) -> ShipmentResponse:
    """실물 발송 신청 - 변환과 같은 상태 규칙"""
    try:
        return user_item_service.request_shipment(
            user_id=current_user.id, user_item_id=user_item_id
        )
    except BaseAPIException:
        raise
    except Exception as e:
        logger.error(f"Shipment request error for item {user_item_id}: {str(e)}")
        raise InternalServerError("An error occurred while requesting shipment")
