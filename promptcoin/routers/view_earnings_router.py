from fastapi import APIRouter, Depends

from promptcoin.core.auth_middleware import verify_internal_token
from promptcoin.deps import get_view_earnings_service
from promptcoin.schemas.view_earnings import ViewAccrualRequest, ViewAccrualResponse
from promptcoin.services.view_earnings_service import ViewEarningsService

# 조회수 집계 협력 서비스 전용 (X-Internal-Token)
router = APIRouter(
    prefix="/internal/view-earnings",
    tags=["internal"],
    dependencies=[Depends(verify_internal_token)],
)


@router.post("/accrue", response_model=ViewAccrualResponse)
def accrue_view_earnings(
    request: ViewAccrualRequest,
    view_earnings_service: ViewEarningsService = Depends(get_view_earnings_service),
) -> ViewAccrualResponse:
    """누적 조회수를 받아 아직 적립하지 않은 단위만큼 코인 입금"""
    return view_earnings_service.accrue_view_earnings(request.user_id, request.total_views)
