from typing import Optional

from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column

from gachaapi.models.base import BaseModel


class User(BaseModel):
    """인증 서비스 사용자의 공개 프로필 (인증 자체는 외부 서비스가 담당)"""

    __tablename__ = "users"

    id: Mapped[str] = mapped_column(String(36), primary_key=True)
    email: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    nickname: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)

    def __repr__(self):
        return f"<User(id={self.id}, email={self.email})>"
