from typing import Optional

from pydantic import BaseModel


class AuthenticatedUser(BaseModel):
    """검증된 액세스 토큰에서 추출한 사용자 정보"""

    id: str
    email: Optional[str] = None
    role: Optional[str] = None
