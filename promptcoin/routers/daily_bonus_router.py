"""
일일 로그인 보너스 API 라우터

- GET /daily-bonus/status: 오늘 수령 여부와 보상
- POST /daily-bonus/claim: 오늘 보너스 수령 (이미 수령 시 success=false, ALREADY_CLAIMED)
- GET /daily-bonus/streak: 연속 일수와 마일스톤 상태
- POST /daily-bonus/streak/{milestone}/claim: 마일스톤 보상 수령
"""

from fastapi import APIRouter, Depends, Path

from promptcoin.core.auth_middleware import get_current_user
from promptcoin.deps import get_daily_bonus_service
from promptcoin.schemas.auth import AuthenticatedUser
from promptcoin.schemas.daily_bonus import (
    DailyLoginClaimResponse,
    DailyLoginStatusResponse,
    StreakMilestoneClaimResponse,
    StreakStatusResponse,
)
from promptcoin.services.daily_bonus_service import DailyBonusService

router = APIRouter(prefix="/daily-bonus", tags=["daily-bonus"])


@router.get("/status", response_model=DailyLoginStatusResponse)
def get_daily_bonus_status(
    current_user: AuthenticatedUser = Depends(get_current_user),
    daily_bonus_service: DailyBonusService = Depends(get_daily_bonus_service),
) -> DailyLoginStatusResponse:
    return daily_bonus_service.get_daily_login_status(current_user.id)


@router.post("/claim", response_model=DailyLoginClaimResponse)
def claim_daily_bonus(
    current_user: AuthenticatedUser = Depends(get_current_user),
    daily_bonus_service: DailyBonusService = Depends(get_daily_bonus_service),
) -> DailyLoginClaimResponse:
    return daily_bonus_service.claim_daily_login(current_user.id)


@router.get("/streak", response_model=StreakStatusResponse)
def get_streak_status(
    current_user: AuthenticatedUser = Depends(get_current_user),
    daily_bonus_service: DailyBonusService = Depends(get_daily_bonus_service),
) -> StreakStatusResponse:
    return daily_bonus_service.get_streak_status(current_user.id)


@router.post("/streak/{milestone}/claim", response_model=StreakMilestoneClaimResponse)
def claim_streak_milestone(
    milestone: int = Path(..., gt=0),
    current_user: AuthenticatedUser = Depends(get_current_user),
    daily_bonus_service: DailyBonusService = Depends(get_daily_bonus_service),
) -> StreakMilestoneClaimResponse:
    return daily_bonus_service.claim_streak_milestone(current_user.id, milestone)
