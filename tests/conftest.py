import os

# gachaapi.config가 import 되기 전에 테스트 환경 설정
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["SUPABASE_JWT_SECRET"] = "test-jwt-secret"
os.environ["DB_READ_RETRY_BACKOFF_SECONDS"] = "0"

import random
from datetime import datetime
from typing import Iterable, Optional, Tuple

import pytest
from dependency_injector import providers
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.pool import StaticPool

from gachaapi.database.connection import create_session_factory
from gachaapi.database.session import get_db
from gachaapi.main import create_app
from gachaapi.models import Base, Gacha, GachaItem, Item, UserBalance, UserItem
from gachaapi.services.prize_selector import PrizeSelector
from tests.helpers import USER_ID


@pytest.fixture
def engine():
    """인메모리 SQLite - 모든 세션이 하나의 연결을 공유"""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return create_session_factory(engine)


@pytest.fixture
def file_session_factory(tmp_path):
    """스레드 동시성 테스트용 파일 SQLite - 연결마다 별도 트랜잭션"""
    engine = create_engine(
        f"sqlite:///{tmp_path / 'storefront.db'}",
        connect_args={"check_same_thread": False, "timeout": 30},
    )
    Base.metadata.create_all(engine)
    yield create_session_factory(engine)
    engine.dispose()


@pytest.fixture
def db(session_factory):
    session = session_factory()
    yield session
    session.close()


@pytest.fixture
def app(session_factory):
    app = create_app()

    def override_get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    app.container.prize_selector.override(
        providers.Object(PrizeSelector(random.Random(1234)))
    )
    yield app
    app.container.prize_selector.reset_override()
    app.dependency_overrides.clear()


@pytest.fixture
def client(app):
    return TestClient(app)


# ----------------------------------------------------------------------
# 시드 헬퍼
# ----------------------------------------------------------------------


@pytest.fixture
def make_item(db):
    def _make(
        name: str = "Common Slime Card",
        rarity: str = "N",
        rate: int = 50,
    ) -> Item:
        item = Item(name=name, rarity=rarity, default_point_conversion_rate=rate)
        db.add(item)
        db.commit()
        return item

    return _make


@pytest.fixture
def make_gacha(db, make_item):
    """가챠 + 경품 풀 생성. pool: (item, weight, quantity) 목록"""

    def _make(
        price: int = 100,
        pool: Optional[Iterable[Tuple[Item, int, int]]] = None,
        stock: Optional[int] = None,
        status: str = "active",
        name: str = "Test Oripa",
        created_at: Optional[datetime] = None,
    ) -> Gacha:
        if pool is None:
            pool = [(make_item(), 1, 10)]
        pool = list(pool)
        total = sum(quantity for _, _, quantity in pool)
        stock = total if stock is None else stock

        gacha = Gacha(
            name=name,
            price=price,
            current_stock=stock,
            total_stock=max(stock, total),
            status=status,
        )
        if created_at is not None:
            gacha.created_at = created_at
        db.add(gacha)
        db.flush()

        for item, weight, quantity in pool:
            db.add(
                GachaItem(
                    gacha_id=gacha.id,
                    item_id=item.id,
                    weight=weight,
                    remaining_quantity=quantity,
                )
            )
        db.commit()
        return gacha

    return _make


@pytest.fixture
def fund(db):
    """지갑 잔액 직접 설정"""

    def _fund(user_id: str, points: int) -> None:
        wallet = db.get(UserBalance, user_id)
        if wallet is None:
            db.add(UserBalance(user_id=user_id, current_points=points))
        else:
            wallet.current_points = points
        db.commit()

    return _fund


@pytest.fixture
def make_user_item(db, make_item):
    def _make(
        user_id: str = USER_ID,
        item: Optional[Item] = None,
        status: str = "acquired",
        acquired_at: Optional[datetime] = None,
    ) -> UserItem:
        item = item or make_item()
        user_item = UserItem(user_id=user_id, item_id=item.id, status=status)
        if acquired_at is not None:
            user_item.acquired_at = acquired_at
        db.add(user_item)
        db.commit()
        return user_item

    return _make
