from enum import Enum

from pydantic import BaseModel, Field


class AccrualStatus(str, Enum):
    CREDITED = "CREDITED"
    NOTHING_TO_CREDIT = "NOTHING_TO_CREDIT"


class ViewAccrualRequest(BaseModel):
    """조회수 협력 서비스가 보내는 누적 조회수"""

    user_id: int = Field(..., gt=0)
    total_views: int = Field(..., ge=0, description="사용자 게시물의 누적 유효 조회수")


class ViewAccrualResponse(BaseModel):
    success: bool = True
    status: AccrualStatus
    coins_credited: int
    credited_units: int = Field(..., description="누적 적립 완료 단위 (워터마크)")
    balance_after: int
