from datetime import datetime

from gachaapi.models import PointTransaction, UserBalance, UserItem
from tests.helpers import OTHER_USER_ID, USER_ID, auth_headers


class TestMyItems:
    """보유 아이템 목록 API 테스트"""

    def test_list_my_items_newest_first(self, client, make_user_item, make_item):
        # Given
        dragon = make_item(name="Holo Dragon", rarity="SSR", rate=5000)
        older = make_user_item(acquired_at=datetime(2024, 1, 1, 10, 0, 0))
        newer = make_user_item(item=dragon, acquired_at=datetime(2024, 2, 1, 10, 0, 0))
        converted = make_user_item(
            status="converted", acquired_at=datetime(2024, 3, 1, 10, 0, 0)
        )
        make_user_item(user_id=OTHER_USER_ID)

        # When
        response = client.get("/api/me/items", headers=auth_headers())

        # Then
        assert response.status_code == 200
        data = response.json()
        assert data["total_count"] == 3
        assert data["has_next"] is False
        assert [i["id"] for i in data["items"]] == [converted.id, newer.id, older.id]
        assert data["items"][0]["is_convertible"] is False
        assert data["items"][1]["is_convertible"] is True
        assert data["items"][1]["item"]["name"] == "Holo Dragon"
        assert data["items"][1]["item"]["default_point_conversion_rate"] == 5000

    def test_list_my_items_pagination(self, client, make_user_item):
        for day in range(1, 4):
            make_user_item(acquired_at=datetime(2024, 1, day))

        response = client.get("/api/me/items?limit=2&offset=0", headers=auth_headers())

        data = response.json()
        assert len(data["items"]) == 2
        assert data["has_next"] is True

    def test_list_my_items_limit_out_of_range(self, client):
        response = client.get("/api/me/items?limit=101", headers=auth_headers())

        assert response.status_code == 422
        assert response.json()["error"]["code"] == "VALIDATION_001"

    def test_list_my_items_requires_token(self, client):
        response = client.get("/api/me/items")

        assert response.status_code == 401


class TestConvertUserItem:
    """포인트 변환 API 테스트"""

    def test_convert_credits_points(self, client, db, make_user_item, make_item, fund):
        """변환 성공: 상태 converted, 잔액 += 환산율, 원장 기록"""
        # Given
        item = make_item(name="Shiny Knight", rate=1200)
        user_item = make_user_item(item=item)
        fund(USER_ID, 300)

        # When
        response = client.post(
            f"/api/user-items/{user_item.id}/convert", headers=auth_headers()
        )

        # Then
        assert response.status_code == 200
        data = response.json()
        assert data["converted_points"] == 1200
        assert data["new_balance"] == 1500

        db.expire_all()
        stored = db.get(UserItem, user_item.id)
        assert stored.status == "converted"
        assert stored.converted_points == 1200
        assert stored.converted_at is not None
        assert db.get(UserBalance, USER_ID).current_points == 1500

        entry = db.query(PointTransaction).one()
        assert entry.transaction_type == "conversion"
        assert entry.ref_id == f"conversion:{user_item.id}"
        assert entry.delta_points == 1200

    def test_convert_creates_wallet_when_missing(self, client, make_user_item, make_item):
        user_item = make_user_item(item=make_item(rate=80))

        response = client.post(
            f"/api/user-items/{user_item.id}/convert", headers=auth_headers()
        )

        assert response.status_code == 200
        assert response.json()["new_balance"] == 80

    def test_convert_twice_fails(self, client, db, make_user_item, make_item, fund):
        """두 번째 변환은 도메인 에러, 잔액은 한 번만 증가"""
        user_item = make_user_item(item=make_item(rate=500))
        fund(USER_ID, 0)

        first = client.post(
            f"/api/user-items/{user_item.id}/convert", headers=auth_headers()
        )
        second = client.post(
            f"/api/user-items/{user_item.id}/convert", headers=auth_headers()
        )

        assert first.status_code == 200
        assert second.status_code == 400
        data = second.json()
        assert data["error"]["code"] == "USER_ITEM_NOT_CONVERTIBLE"
        assert data["error"]["details"]["status"] == "converted"

        db.expire_all()
        assert db.get(UserBalance, USER_ID).current_points == 500
        assert db.query(PointTransaction).count() == 1

    def test_convert_other_users_item(self, client, db, make_user_item):
        """타인 소유 아이템은 존재하지 않는 것과 같은 응답"""
        user_item = make_user_item(user_id=OTHER_USER_ID)

        response = client.post(
            f"/api/user-items/{user_item.id}/convert", headers=auth_headers()
        )

        assert response.status_code == 400
        assert response.json()["error"]["code"] == "USER_ITEM_NOT_FOUND"
        db.expire_all()
        assert db.get(UserItem, user_item.id).status == "acquired"

    def test_convert_unknown_item(self, client):
        response = client.post(
            "/api/user-items/missing/convert", headers=auth_headers()
        )

        assert response.status_code == 400
        assert response.json()["message"] == "Item not found"

    def test_convert_requires_token(self, client, make_user_item):
        user_item = make_user_item()

        response = client.post(f"/api/user-items/{user_item.id}/convert")

        assert response.status_code == 401

    def test_convert_kept_item(self, client, make_user_item):
        user_item = make_user_item(status="kept")

        response = client.post(
            f"/api/user-items/{user_item.id}/convert", headers=auth_headers()
        )

        assert response.status_code == 200


class TestShipUserItem:
    """발송 신청 API 테스트"""

    def test_request_shipment(self, client, db, make_user_item):
        user_item = make_user_item()

        response = client.post(
            f"/api/user-items/{user_item.id}/ship", headers=auth_headers()
        )

        assert response.status_code == 200
        assert response.json()["status"] == "shipping_requested"
        db.expire_all()
        assert db.get(UserItem, user_item.id).status == "shipping_requested"

    def test_shipped_item_cannot_be_converted(self, client, make_user_item):
        user_item = make_user_item()
        client.post(f"/api/user-items/{user_item.id}/ship", headers=auth_headers())

        response = client.post(
            f"/api/user-items/{user_item.id}/convert", headers=auth_headers()
        )

        assert response.status_code == 400
        assert response.json()["error"]["code"] == "USER_ITEM_NOT_CONVERTIBLE"

    def test_converted_item_cannot_be_shipped(self, client, make_user_item):
        user_item = make_user_item(status="converted")

        response = client.post(
            f"/api/user-items/{user_item.id}/ship", headers=auth_headers()
        )

        assert response.status_code == 400
        assert response.json()["error"]["code"] == "USER_ITEM_NOT_CONVERTIBLE"
