"""
포인트 API 라우터

- POST /api/charge: 포인트 충전 (Idempotency-Key 지원)
- GET  /api/me/balance: 내 포인트 잔액
- GET  /api/me/transactions: 내 포인트 원장 (최신순)

모든 엔드포인트는 Bearer 토큰 인증 필요
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Header, Query

from gachaapi.core.auth_middleware import get_current_user
from gachaapi.core.exceptions import BaseAPIException, InternalServerError
from gachaapi.deps import get_point_service
from gachaapi.schemas.auth import AuthenticatedUser
from gachaapi.schemas.pagination import PaginationLimits
from gachaapi.schemas.points import (
    ChargeRequest,
    ChargeResponse,
    PointTransactionsResponse,
    WalletBalanceResponse,
)
from gachaapi.services.point_service import PointService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["points"])


@router.post("/charge", response_model=ChargeResponse)
def charge_points(
    request: ChargeRequest,
    idempotency_key: Optional[str] = Header(
        None, alias="Idempotency-Key", max_length=100
    ),
    current_user: AuthenticatedUser = Depends(get_current_user),
    point_service: PointService = Depends(get_point_service),
) -> ChargeResponse:
    """
    포인트 충전

    HTTP Status:
        200: 충전 성공 - 충전 후 잔액
        400: 금액 누락 / 0 이하 / 상한 초과
        401: 인증 실패
        422: 정수가 아닌 금액
    """
    try:
        return point_service.charge(
            user_id=current_user.id,
            amount=request.amount,
            idempotency_key=idempotency_key,
        )
    except BaseAPIException:
        raise
    except Exception as e:
        logger.error(f"Charge error for user {current_user.id}: {str(e)}")
        raise InternalServerError("An error occurred while charging points")


@router.get("/me/balance", response_model=WalletBalanceResponse)
def get_my_balance(
    current_user: AuthenticatedUser = Depends(get_current_user),
    point_service: PointService = Depends(get_point_service),
) -> WalletBalanceResponse:
    """내 포인트 잔액 - 지갑이 없으면 0"""
    try:
        return point_service.get_balance(current_user.id)
    except BaseAPIException:
        raise
    except Exception as e:
        logger.error(f"Failed to get balance for user {current_user.id}: {str(e)}")
        raise InternalServerError("Failed to retrieve balance")


@router.get("/me/transactions", response_model=PointTransactionsResponse)
def get_my_transactions(
    limit: int = Query(
        PaginationLimits.POINT_TRANSACTIONS["default"],
        ge=PaginationLimits.POINT_TRANSACTIONS["min"],
        le=PaginationLimits.POINT_TRANSACTIONS["max"],
        description="페이지 크기",
    ),
    offset: int = Query(0, ge=0, description="오프셋"),
    current_user: AuthenticatedUser = Depends(get_current_user),
    point_service: PointService = Depends(get_point_service),
) -> PointTransactionsResponse:
    """
    내 포인트 원장 조회

    사용 예시:
        GET /api/me/transactions?limit=20&offset=0
    """
    try:
        return point_service.get_transactions(
            user_id=current_user.id, limit=limit, offset=offset
        )
    except BaseAPIException:
        raise
    except Exception as e:
        logger.error(f"Failed to get ledger for user {current_user.id}: {str(e)}")
        raise InternalServerError("Failed to retrieve transactions")
