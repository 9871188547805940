from datetime import datetime, timedelta, timezone
from typing import Optional

from jose import jwt, JWTError
from pydantic import BaseModel, ValidationError

from gachaapi.config import Settings, settings as default_settings
from gachaapi.core.exceptions import AuthenticationError
from gachaapi.schemas.auth import AuthenticatedUser


class TokenPayload(BaseModel):
    sub: str  # 인증 서비스의 사용자 ID
    email: Optional[str] = None
    role: Optional[str] = None


def create_access_token(
    user_id: str,
    email: Optional[str] = None,
    expires_delta: Optional[timedelta] = None,
    settings: Settings = default_settings,
) -> str:
    """인증 서비스와 같은 형식의 액세스 토큰 발급 (로컬 개발/테스트용)"""
    expire = datetime.now(timezone.utc) + (
        expires_delta or timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
    )
    to_encode = {"sub": user_id, "email": email, "role": "authenticated", "exp": expire}
    if settings.JWT_AUDIENCE:
        to_encode["aud"] = settings.JWT_AUDIENCE

    return jwt.encode(
        to_encode, settings.SUPABASE_JWT_SECRET, algorithm=settings.JWT_ALGORITHM
    )


def decode_access_token(
    token: str, settings: Settings = default_settings
) -> AuthenticatedUser:
    """토큰 서명/만료/대상 검증 후 사용자 정보 반환"""
    if not settings.SUPABASE_JWT_SECRET:
        raise AuthenticationError("Authentication is not configured")

    try:
        payload = jwt.decode(
            token,
            settings.SUPABASE_JWT_SECRET,
            algorithms=[settings.JWT_ALGORITHM],
            audience=settings.JWT_AUDIENCE,
            options={"verify_aud": bool(settings.JWT_AUDIENCE)},
        )
        token_data = TokenPayload.model_validate(payload)
    except (JWTError, ValidationError):
        raise AuthenticationError("Invalid authentication credentials")

    return AuthenticatedUser(
        id=token_data.sub, email=token_data.email, role=token_data.role
    )
