"""
읽기 전용 DB 호출의 일시적 장애 재시도

쓰기(추첨, 변환, 충전)는 절대 재시도하지 않음 - 중복 차감/중복 지급 위험.
"""

import functools
import logging
import time
from typing import Callable, Optional, TypeVar

from sqlalchemy.exc import OperationalError

from gachaapi.config import settings

logger = logging.getLogger(__name__)

T = TypeVar("T")


def retry_transient_read(
    attempts: Optional[int] = None,
    backoff_seconds: Optional[float] = None,
    sleep: Callable[[float], None] = time.sleep,
):
    """OperationalError 발생 시 지수 백오프로 재시도하는 데코레이터

    Args:
        attempts: 최대 시도 횟수 (기본값: settings.DB_READ_RETRY_COUNT)
        backoff_seconds: 첫 대기 시간, 이후 2배씩 증가
            (기본값: settings.DB_READ_RETRY_BACKOFF_SECONDS)
        sleep: 대기 함수 (테스트에서 교체)

    리포지토리 메서드에 붙이면 재시도 전에 세션을 롤백하여
    실패한 트랜잭션 상태를 정리합니다.
    """

    def decorator(func: Callable[..., T]) -> Callable[..., T]:
        @functools.wraps(func)
        def wrapper(*args, **kwargs) -> T:
            max_attempts = max(1, attempts or settings.DB_READ_RETRY_COUNT)
            delay = (
                backoff_seconds
                if backoff_seconds is not None
                else settings.DB_READ_RETRY_BACKOFF_SECONDS
            )

            for attempt in range(1, max_attempts + 1):
                try:
                    return func(*args, **kwargs)
                except OperationalError as e:
                    if attempt == max_attempts:
                        logger.error(
                            f"{func.__qualname__} failed after {max_attempts} attempts: {e}"
                        )
                        raise

                    db = getattr(args[0], "db", None) if args else None
                    if db is not None:
                        db.rollback()

                    logger.warning(
                        f"{func.__qualname__} transient error on attempt {attempt}, retrying in {delay:.2f}s: {e}"
                    )
                    sleep(delay)
                    delay *= 2

            raise RuntimeError("unreachable")

        return wrapper

    return decorator
