from functools import lru_cache

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker

from gachaapi.config import Settings, settings


def create_db_engine(settings: Settings) -> Engine:
    url = settings.database_url
    if url.startswith("sqlite"):
        return create_engine(
            url,
            connect_args={"check_same_thread": False},
        )

    return create_engine(
        url,
        pool_size=settings.DB_POOL_SIZE,
        max_overflow=settings.DB_MAX_OVERFLOW,
        pool_pre_ping=True,  # 연결 유효성 검사
        pool_recycle=3600,  # 1시간마다 연결 재생성
        connect_args={"options": f"-csearch_path={settings.POSTGRES_SCHEMA}"},
    )


def create_session_factory(engine: Engine) -> sessionmaker:
    # expire_on_commit=False: commit 이후에도 같은 요청 안에서 속성 접근 가능
    return sessionmaker(
        autocommit=False,
        autoflush=False,
        bind=engine,
        expire_on_commit=False,
    )


@lru_cache
def get_engine() -> Engine:
    """첫 사용 시점에 엔진 생성 (import 시 DB 드라이버를 요구하지 않음)"""
    return create_db_engine(settings)


@lru_cache
def get_session_factory() -> sessionmaker:
    return create_session_factory(get_engine())
