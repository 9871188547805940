from abc import ABC
from typing import TypeVar, Generic, Optional, List, Dict, Any, Tuple, Type
from sqlalchemy.orm import Query, Session
from pydantic import BaseModel

T = TypeVar("T")
SchemaType = TypeVar("SchemaType", bound=BaseModel)


class BaseRepository(Generic[T, SchemaType], ABC):
    """모든 리포지토리의 베이스 클래스 - Pydantic 응답 보장"""

    def __init__(
        self, model_class: Type[T], schema_class: Type[SchemaType], db: Session
    ):
        self.model_class = model_class
        self.schema_class = schema_class
        self.db = db

    def _to_schema(self, model_instance: Any) -> Optional[SchemaType]:
        """SQLAlchemy 모델을 Pydantic 스키마로 변환"""
        if model_instance is None:
            return None
        return self.schema_class.model_validate(model_instance)

    @staticmethod
    def _paginate(
        query: Query, *order_by: Any, limit: int, offset: int
    ) -> Tuple[List[Any], int]:
        """정렬된 한 페이지와 전체 개수"""
        total_count = query.count()
        instances = query.order_by(*order_by).limit(limit).offset(offset).all()
        return instances, total_count

    def find_all(
        self,
        filters: Optional[Dict[str, Any]] = None,
        limit: Optional[int] = None,
    ) -> List[SchemaType]:
        """조건에 맞는 레코드 조회 - Pydantic 스키마 리스트 반환"""
        query = self.db.query(self.model_class)

        if filters:
            for key, value in filters.items():
                if hasattr(self.model_class, key):
                    query = query.filter(getattr(self.model_class, key) == value)

        if limit:
            query = query.limit(limit)

        return [self._to_schema(instance) for instance in query.all()]
