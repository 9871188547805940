from fastapi import HTTPException, status
from typing import Optional, Dict, Any


class BaseAPIException(HTTPException):
    """Base exception for API errors"""

    def __init__(
        self,
        status_code: int,
        error_code: str,
        message: str,
        details: Optional[Dict[str, Any]] = None,
        headers: Optional[Dict[str, str]] = None,
    ):
        self.error_code = error_code
        self.message = message
        self.details = details or {}

        super().__init__(
            status_code=status_code,
            detail={
                "success": False,
                "message": message,
                "error": {
                    "code": error_code,
                    "message": message,
                    "details": self.details,
                },
            },
            headers=headers,
        )

    def __str__(self) -> str:  # Ensure str(e) returns the human message
        return self.message


class AuthenticationError(BaseAPIException):
    """Authentication related errors"""

    def __init__(self, message: str = "User not authenticated", details: Optional[Dict] = None):
        super().__init__(
            status_code=status.HTTP_401_UNAUTHORIZED,
            error_code="AUTH_001",
            message=message,
            details=details,
            headers={"WWW-Authenticate": "Bearer"},
        )


class BusinessLogicError(BaseAPIException):
    """Business logic errors"""

    def __init__(self, error_code: str, message: str, details: Optional[Dict] = None):
        super().__init__(
            status_code=status.HTTP_400_BAD_REQUEST,
            error_code=error_code,
            message=message,
            details=details,
        )


class NotFoundError(BaseAPIException):
    """Resource not found errors"""

    def __init__(self, message: str = "Resource not found", details: Optional[Dict] = None):
        super().__init__(
            status_code=status.HTTP_404_NOT_FOUND,
            error_code="NOT_FOUND_001",
            message=message,
            details=details,
        )


class InternalServerError(BaseAPIException):
    """Internal server errors"""

    def __init__(self, message: str = "Internal server error", details: Optional[Dict] = None):
        super().__init__(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            error_code="INTERNAL_001",
            message=message,
            details=details,
        )


# ============================================================================
# 도메인 에러 - 사용자에게 그대로 노출되는 4xx
# ============================================================================


class GachaNotFoundError(NotFoundError):
    def __init__(self, gacha_id: str):
        super().__init__(message="Gacha not found", details={"gacha_id": gacha_id})


class DrawTargetNotFoundError(BusinessLogicError):
    """추첨 대상 가챠 없음 - 추첨 경로의 도메인 에러는 모두 400"""

    def __init__(self, gacha_id: str):
        super().__init__(
            error_code="GACHA_NOT_FOUND",
            message="Gacha not found",
            details={"gacha_id": gacha_id},
        )


class GachaInactiveError(BusinessLogicError):
    def __init__(self, gacha_id: str):
        super().__init__(
            error_code="GACHA_INACTIVE",
            message="This gacha is not on sale",
            details={"gacha_id": gacha_id},
        )


class GachaOutOfStockError(BusinessLogicError):
    def __init__(self, gacha_id: str):
        super().__init__(
            error_code="GACHA_OUT_OF_STOCK",
            message="This gacha is out of stock",
            details={"gacha_id": gacha_id},
        )


class PrizePoolExhaustedError(BusinessLogicError):
    def __init__(self, gacha_id: str):
        super().__init__(
            error_code="PRIZE_POOL_EXHAUSTED",
            message="No prizes remain in this gacha",
            details={"gacha_id": gacha_id},
        )


class InsufficientPointsError(BusinessLogicError):
    def __init__(self, required: int, available: int):
        super().__init__(
            error_code="INSUFFICIENT_POINTS",
            message=f"Insufficient points. Required: {required}, Available: {available}",
            details={"required": required, "available": available},
        )


class UserItemNotFoundError(BusinessLogicError):
    def __init__(self, user_item_id: str):
        super().__init__(
            error_code="USER_ITEM_NOT_FOUND",
            message="Item not found",
            details={"user_item_id": user_item_id},
        )


class UserItemNotConvertibleError(BusinessLogicError):
    def __init__(self, user_item_id: str, current_status: str):
        super().__init__(
            error_code="USER_ITEM_NOT_CONVERTIBLE",
            message=f"Item cannot be processed in its current status ({current_status})",
            details={"user_item_id": user_item_id, "status": current_status},
        )


class InvalidAmountError(BusinessLogicError):
    def __init__(self, message: str = "Amount must be positive", details: Optional[Dict] = None):
        super().__init__(error_code="INVALID_AMOUNT", message=message, details=details)


class IdempotencyKeyReusedError(BusinessLogicError):
    """같은 Idempotency-Key로 다른 요청을 보낸 경우"""

    def __init__(self, idempotency_key: str, details: Optional[Dict] = None):
        super().__init__(
            error_code="IDEMPOTENCY_KEY_REUSED",
            message="Idempotency-Key was already used for a different request",
            details={"idempotency_key": idempotency_key, **(details or {})},
        )
