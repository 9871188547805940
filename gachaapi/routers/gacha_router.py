"""
가챠 API 라우터

- GET  /api/gachas: 판매 중인 가챠 목록 (최신순)
- GET  /api/gachas/{gacha_id}: 가챠 상세 + 경품 풀/확률
- POST /api/gacha/{gacha_id}/draw: 가챠 1회 추첨 (Bearer 토큰 필요)
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Header, Path

from gachaapi.core.auth_middleware import get_current_user
from gachaapi.core.exceptions import BaseAPIException, InternalServerError
from gachaapi.deps import get_gacha_service
from gachaapi.schemas.auth import AuthenticatedUser
from gachaapi.schemas.gacha import (
    DrawResponse,
    GachaCatalogResponse,
    GachaDetailResponse,
)
from gachaapi.services.gacha_service import GachaService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["gacha"])


@router.get("/gachas", response_model=GachaCatalogResponse)
def list_gachas(
    gacha_service: GachaService = Depends(get_gacha_service),
) -> GachaCatalogResponse:
    """판매 중인 가챠 목록 - 인증 불필요"""
    try:
        return gacha_service.list_active_gachas()
    except BaseAPIException:
        raise
    except Exception as e:
        logger.error(f"Failed to list gachas: {str(e)}")
        raise InternalServerError("Failed to retrieve gachas")


@router.get("/gachas/{gacha_id}", response_model=GachaDetailResponse)
def get_gacha(
    gacha_id: str = Path(..., description="가챠 ID"),
    gacha_service: GachaService = Depends(get_gacha_service),
) -> GachaDetailResponse:
    """가챠 상세 조회

    HTTP Status:
        200: 성공
        404: 존재하지 않는 가챠
    """
    try:
        return gacha_service.get_gacha_detail(gacha_id)
    except BaseAPIException:
        raise
    except Exception as e:
        logger.error(f"Failed to get gacha {gacha_id}: {str(e)}")
        raise InternalServerError("Failed to retrieve gacha")


@router.post("/gacha/{gacha_id}/draw", response_model=DrawResponse)
def draw_gacha(
    gacha_id: str = Path(..., description="가챠 ID"),
    idempotency_key: Optional[str] = Header(
        None, alias="Idempotency-Key", max_length=100
    ),
    current_user: AuthenticatedUser = Depends(get_current_user),
    gacha_service: GachaService = Depends(get_gacha_service),
) -> DrawResponse:
    """
    가챠 1회 추첨

    인증 필요: Bearer 토큰

    HTTP Status:
        200: 추첨 성공 - 획득 아이템, 잔액, 남은 수량
        400: 판매 중지 / 품절 / 포인트 부족 / 경품 소진
        401: 인증 실패
        404: 존재하지 않는 가챠
        500: 내부 서버 오류 (상태 변화 없음)
    """
    try:
        return gacha_service.draw(
            user_id=current_user.id,
            gacha_id=gacha_id,
            idempotency_key=idempotency_key,
        )
    except BaseAPIException:
        raise
    except Exception as e:
        logger.error(f"Gacha draw error for user {current_user.id}: {str(e)}")
        raise InternalServerError("An error occurred while drawing the gacha")
