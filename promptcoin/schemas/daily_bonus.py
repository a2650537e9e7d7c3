from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, Field


class ClaimStatus(str, Enum):
    CLAIMED = "CLAIMED"
    ALREADY_CLAIMED = "ALREADY_CLAIMED"


class DailyLoginClaimResponse(BaseModel):
    """일일 보너스 수령 응답 - 이미 수령한 경우 success=False"""

    success: bool
    status: ClaimStatus
    coins: int = 0
    consecutive_days: int = 0
    login_date: str
    balance_after: Optional[int] = None
    message: str


class DailyLoginStatusResponse(BaseModel):
    login_date: str
    claimed_today: bool
    reward: int = Field(..., description="오늘 받은(또는 받을) 보상")
    consecutive_days: int = Field(..., description="오늘 수령 시(또는 수령한) 연속 일수")


class StreakMilestoneItem(BaseModel):
    milestone: int
    reward: int
    claimed: bool
    claimable: bool


class StreakStatusResponse(BaseModel):
    current_streak: int
    milestones: List[StreakMilestoneItem]


class StreakMilestoneClaimResponse(BaseModel):
    success: bool
    status: ClaimStatus
    milestone: int
    coins: int = 0
    balance_after: Optional[int] = None
    message: str
