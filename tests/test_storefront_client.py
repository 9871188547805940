import httpx
import pytest

from gachaapi.client.state import GachaDetailState, MyPageState
from gachaapi.client.storefront_client import StorefrontAPIError, StorefrontClient
from gachaapi.core.security import create_access_token
from tests.helpers import USER_ID


@pytest.fixture
def storefront(client):
    """TestClient(httpx.Client)를 그대로 전송 계층으로 사용"""
    return StorefrontClient(client, access_token=create_access_token(USER_ID))


def _mock_client(handler, **kwargs):
    http = httpx.Client(transport=httpx.MockTransport(handler), base_url="http://storefront")
    return StorefrontClient(http, access_token="token", **kwargs)


class TestStorefrontClientRetry:
    """GET만 재시도, POST는 재시도하지 않음"""

    def test_get_retries_transport_errors(self):
        calls = []
        sleeps = []

        def handler(request):
            calls.append(request)
            if len(calls) < 3:
                raise httpx.ConnectError("connection refused", request=request)
            return httpx.Response(200, json={"user_id": USER_ID, "current_points": 42})

        storefront = _mock_client(handler, max_retries=3, backoff_seconds=0.5, sleep=sleeps.append)

        assert storefront.get_balance().current_points == 42
        assert len(calls) == 3
        assert sleeps == [0.5, 1.0]
        assert calls[0].headers["Authorization"] == "Bearer token"

    def test_get_gives_up(self):
        def handler(request):
            raise httpx.ConnectError("connection refused", request=request)

        storefront = _mock_client(handler, max_retries=2, sleep=lambda _: None)

        with pytest.raises(httpx.ConnectError):
            storefront.list_gachas()

    def test_post_is_never_retried(self):
        calls = []

        def handler(request):
            calls.append(request)
            raise httpx.ConnectError("connection refused", request=request)

        storefront = _mock_client(handler, max_retries=5, sleep=lambda _: None)

        with pytest.raises(httpx.ConnectError):
            storefront.charge(100)

        assert len(calls) == 1
        assert calls[0].headers["Idempotency-Key"]

    def test_error_message_passed_through(self):
        def handler(request):
            return httpx.Response(
                400,
                json={
                    "success": False,
                    "message": "This gacha is out of stock",
                    "error": {"code": "GACHA_OUT_OF_STOCK", "message": "x", "details": {}},
                },
            )

        storefront = _mock_client(handler)

        with pytest.raises(StorefrontAPIError) as exc_info:
            storefront.draw("g1")

        assert exc_info.value.status_code == 400
        assert exc_info.value.message == "This gacha is out of stock"
        assert exc_info.value.code == "GACHA_OUT_OF_STOCK"


class TestMyPageState:
    """마이페이지 상태 갱신 규칙"""

    def test_convert_updates_local_state_without_reload(
        self, storefront, make_user_item, make_item, fund
    ):
        # Given
        keep = make_user_item(item=make_item(name="Keep", rate=10))
        sell = make_user_item(item=make_item(name="Sell", rate=700))
        fund(USER_ID, 300)
        state = MyPageState(storefront)
        state.load()
        assert state.points == 300
        assert len(state.items) == 2

        # When
        result = state.convert(sell.id)

        # Then
        assert result.converted_points == 700
        assert state.points == 1000
        assert [item.id for item in state.items] == [keep.id]

    def test_failed_convert_leaves_state(self, storefront, make_user_item):
        converted = make_user_item(status="converted")
        state = MyPageState(storefront)
        state.load()

        with pytest.raises(StorefrontAPIError) as exc_info:
            state.convert(converted.id)

        assert exc_info.value.code == "USER_ITEM_NOT_CONVERTIBLE"
        assert state.points == 0
        assert len(state.items) == 1


class TestGachaDetailState:
    """가챠 상세 상태 - 추첨 후 서버 값으로 갱신"""

    def test_draw_reloads_stock_and_balance(self, storefront, make_gacha, fund):
        gacha = make_gacha(price=500, stock=1)
        fund(USER_ID, 500)
        state = GachaDetailState(storefront, gacha.id)
        state.load()
        assert state.can_draw is True

        result = state.draw()

        assert result.balance_after == 0
        assert state.detail.gacha.current_stock == 0
        assert state.balance == 0
        assert state.can_draw is False

    def test_cannot_draw_without_enough_points(self, storefront, make_gacha, fund):
        gacha = make_gacha(price=500)
        fund(USER_ID, 100)
        state = GachaDetailState(storefront, gacha.id)

        state.load()

        assert state.can_draw is False
