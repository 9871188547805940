"""
스토어프론트 API 클라이언트 (마이페이지 / 가챠 상세 화면용)

- GET은 전송 오류(httpx.TransportError) 시 지수 백오프로 재시도
- POST는 재시도하지 않음 - 대신 매 요청마다 Idempotency-Key를 붙여
  호출자가 같은 키로 안전하게 다시 보낼 수 있게 함
"""

import logging
import time
import uuid
from typing import Any, Callable, Dict, Optional

import httpx

from gachaapi.schemas.gacha import DrawResponse, GachaCatalogResponse, GachaDetailResponse
from gachaapi.schemas.points import (
    ChargeResponse,
    PointTransactionsResponse,
    WalletBalanceResponse,
)
from gachaapi.schemas.user_item import ConvertResponse, OwnedItemsResponse, ShipmentResponse

logger = logging.getLogger(__name__)


class StorefrontAPIError(Exception):
    """서버가 에러 응답을 돌려준 경우 - message는 서버 메시지 그대로"""

    def __init__(self, status_code: int, message: str, code: Optional[str] = None):
        super().__init__(message)
        self.status_code = status_code
        self.message = message
        self.code = code


class StorefrontClient:
    """스토어프론트 HTTP 클라이언트"""

    def __init__(
        self,
        http: httpx.Client,
        access_token: Optional[str] = None,
        max_retries: int = 3,
        backoff_seconds: float = 0.2,
        sleep: Callable[[float], None] = time.sleep,
    ):
        """
        Args:
            http: base_url이 설정된 httpx.Client (테스트에서는 TestClient)
            access_token: 인증 서비스가 발급한 액세스 토큰
            max_retries: GET 최대 시도 횟수
            backoff_seconds: 첫 재시도 대기 시간, 이후 2배씩 증가
        """
        self._http = http
        self.access_token = access_token
        self._max_retries = max(1, max_retries)
        self._backoff_seconds = backoff_seconds
        self._sleep = sleep

    def _headers(self, extra: Optional[Dict[str, str]] = None) -> Dict[str, str]:
        headers: Dict[str, str] = {}
        if self.access_token:
            headers["Authorization"] = f"Bearer {self.access_token}"
        if extra:
            headers.update(extra)
        return headers

    @staticmethod
    def _raise_for_error(response: httpx.Response) -> None:
        if response.is_success:
            return

        message = response.reason_phrase or "Request failed"
        code = None
        try:
            body = response.json()
        except ValueError:
            body = None
        if isinstance(body, dict):
            message = body.get("message") or message
            error = body.get("error")
            if isinstance(error, dict):
                code = error.get("code")

        raise StorefrontAPIError(response.status_code, message, code)

    def _get(self, path: str, params: Optional[Dict[str, Any]] = None) -> Any:
        delay = self._backoff_seconds
        for attempt in range(1, self._max_retries + 1):
            try:
                response = self._http.get(path, params=params, headers=self._headers())
            except httpx.TransportError as e:
                if attempt == self._max_retries:
                    logger.error(f"GET {path} failed after {attempt} attempts: {e}")
                    raise
                logger.warning(
                    f"GET {path} transport error on attempt {attempt}, retrying in {delay:.2f}s: {e}"
                )
                self._sleep(delay)
                delay *= 2
                continue

            self._raise_for_error(response)
            return response.json()

    def _post(
        self,
        path: str,
        json: Optional[Dict[str, Any]] = None,
        idempotency_key: Optional[str] = None,
    ) -> Any:
        headers = self._headers({"Idempotency-Key": idempotency_key or uuid.uuid4().hex})
        response = self._http.post(path, json=json, headers=headers)
        self._raise_for_error(response)
        return response.json()

    # ------------------------------------------------------------------
    # 가챠
    # ------------------------------------------------------------------

    def list_gachas(self) -> GachaCatalogResponse:
        return GachaCatalogResponse.model_validate(self._get("/api/gachas"))

    def get_gacha(self, gacha_id: str) -> GachaDetailResponse:
        return GachaDetailResponse.model_validate(self._get(f"/api/gachas/{gacha_id}"))

    def draw(self, gacha_id: str, idempotency_key: Optional[str] = None) -> DrawResponse:
        return DrawResponse.model_validate(
            self._post(f"/api/gacha/{gacha_id}/draw", idempotency_key=idempotency_key)
        )

    # ------------------------------------------------------------------
    # 보유 아이템
    # ------------------------------------------------------------------

    def list_my_items(self, limit: int = 50, offset: int = 0) -> OwnedItemsResponse:
        return OwnedItemsResponse.model_validate(
            self._get("/api/me/items", params={"limit": limit, "offset": offset})
        )

    def convert(self, user_item_id: str) -> ConvertResponse:
        return ConvertResponse.model_validate(
            self._post(f"/api/user-items/{user_item_id}/convert")
        )

    def request_shipment(self, user_item_id: str) -> ShipmentResponse:
        return ShipmentResponse.model_validate(
            self._post(f"/api/user-items/{user_item_id}/ship")
        )

    # ------------------------------------------------------------------
    # 포인트
    # ------------------------------------------------------------------

    def get_balance(self) -> WalletBalanceResponse:
        return WalletBalanceResponse.model_validate(self._get("/api/me/balance"))

    def list_transactions(
        self, limit: int = 50, offset: int = 0
    ) -> PointTransactionsResponse:
        return PointTransactionsResponse.model_validate(
            self._get("/api/me/transactions", params={"limit": limit, "offset": offset})
        )

    def charge(
        self, amount: int, idempotency_key: Optional[str] = None
    ) -> ChargeResponse:
        return ChargeResponse.model_validate(
            self._post("/api/charge", json={"amount": amount}, idempotency_key=idempotency_key)
        )
