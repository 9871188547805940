from typing import Dict

from gachaapi.core.security import create_access_token

USER_ID = "11111111-1111-1111-1111-111111111111"
OTHER_USER_ID = "22222222-2222-2222-2222-222222222222"


def auth_headers(user_id: str = USER_ID) -> Dict[str, str]:
    """인증 서비스와 같은 형식의 실제 토큰"""
    token = create_access_token(user_id, email=f"{user_id[:4]}@example.com")
    return {"Authorization": f"Bearer {token}"}
