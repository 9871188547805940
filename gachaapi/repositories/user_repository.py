from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel
from sqlalchemy.orm import Session

from gachaapi.models.user import User
from gachaapi.repositories.base import BaseRepository


class UserProfile(BaseModel):
    id: str
    email: Optional[str] = None
    nickname: Optional[str] = None
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class UserRepository(BaseRepository[User, UserProfile]):
    def __init__(self, db: Session):
        super().__init__(User, UserProfile, db)

    def sample(self, limit: int = 1) -> List[UserProfile]:
        """연결 확인용 - 사용자 행 일부 조회"""
        return self.find_all(limit=limit)
