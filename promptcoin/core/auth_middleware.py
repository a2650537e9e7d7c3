"""
인증 경계

코인 경제는 사용자 계정을 직접 관리하지 않습니다. 인증 협력 서비스가 발급한
Bearer JWT 를 검증해 user_id 를 얻고, 요청 본문의 사용자 식별자는 절대 신뢰하지 않습니다.
"""

from datetime import datetime, timedelta, timezone
from typing import Optional

from fastapi import Depends, Header
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from jose import jwt, JWTError
from pydantic import ValidationError as PydanticValidationError

from promptcoin.config import Settings, settings as default_settings
from promptcoin.core.exceptions import AuthenticationError, AuthorizationError
from promptcoin.schemas.auth import AuthenticatedUser, TokenPayload

# JWT Bearer 토큰 스킴
security = HTTPBearer(auto_error=False)


def create_access_token(
    user_id: int,
    role: str = "user",
    expires_delta: Optional[timedelta] = None,
    settings: Settings = default_settings,
) -> str:
    """테스트 및 내부 도구용 토큰 발급"""
    expire = datetime.now(timezone.utc) + (expires_delta or timedelta(hours=1))
    to_encode = {"user_id": user_id, "role": role, "exp": expire}
    return jwt.encode(to_encode, settings.SECRET_KEY, algorithm=settings.JWT_ALGORITHM)


def decode_access_token(token: str, settings: Settings = default_settings) -> AuthenticatedUser:
    try:
        payload = jwt.decode(
            token, settings.SECRET_KEY, algorithms=[settings.JWT_ALGORITHM]
        )
        token_data = TokenPayload.model_validate(payload)
    except (JWTError, PydanticValidationError):
        raise AuthenticationError("Invalid authentication credentials")

    return AuthenticatedUser(id=token_data.user_id, role=token_data.role)


def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
) -> AuthenticatedUser:
    """필수 사용자 인증 - 유효한 토큰이 필요함"""
    if not credentials:
        raise AuthenticationError("Authentication required")

    return decode_access_token(credentials.credentials)


def require_admin(
    current_user: AuthenticatedUser = Depends(get_current_user),
) -> AuthenticatedUser:
    """관리자 권한이 필요한 엔드포인트용 의존성"""
    if not current_user.is_admin:
        raise AuthorizationError("Admin access required")
    return current_user


def verify_internal_token(
    x_internal_token: Optional[str] = Header(None, alias="X-Internal-Token"),
) -> None:
    """내부 협력 서비스(조회수 집계 등) 호출 검증"""
    expected = default_settings.INTERNAL_AUTH_TOKEN
    if not expected or x_internal_token != expected:
        raise AuthenticationError("Invalid internal token")
