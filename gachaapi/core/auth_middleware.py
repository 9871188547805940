from typing import Optional

from fastapi import Depends
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials

from gachaapi.core.exceptions import AuthenticationError
from gachaapi.core.security import decode_access_token
from gachaapi.schemas.auth import AuthenticatedUser

# JWT Bearer 토큰 스킴 - 누락 시 401을 직접 응답하기 위해 auto_error 끔
security = HTTPBearer(auto_error=False)


def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
) -> AuthenticatedUser:
    """필수 사용자 인증 - 유효한 토큰이 필요함"""
    if not credentials:
        raise AuthenticationError()

    return decode_access_token(credentials.credentials)

