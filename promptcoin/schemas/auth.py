from pydantic import BaseModel


class TokenPayload(BaseModel):
    user_id: int
    role: str = "user"


class AuthenticatedUser(BaseModel):
    """인증 협력 서비스가 검증한 사용자"""

    id: int
    role: str = "user"

    @property
    def is_admin(self) -> bool:
        return self.role in ("admin", "super_admin")
