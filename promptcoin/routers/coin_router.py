"""
코인 계정 API 라우터

사용자용 엔드포인트:
- POST /coins/account: 내 코인 계정 생성 (이미 있으면 그대로 반환)
- GET /coins/balance: 내 코인 잔액
- GET /coins/ledger: 내 코인 원장 (최신순)
- GET /coins/earnings: 수익 대시보드 요약
- GET /coins/integrity/my: 내 잔액 정합성 검증

관리자용 엔드포인트:
- POST /coins/admin/adjust: 코인 조정
- GET /coins/admin/balance/{user_id}: 사용자 잔액 조회
- GET /coins/admin/integrity/user/{user_id}: 사용자 정합성 검증
- GET /coins/admin/integrity/global: 전체 정합성 검증

내부 협력 서비스용:
- POST /coins/internal/accounts/{user_id}: 회원 가입 시 계정 생성 (X-Internal-Token)
"""

from fastapi import APIRouter, Depends, Path, Query

from promptcoin.core.auth_middleware import (
    get_current_user,
    require_admin,
    verify_internal_token,
)
from promptcoin.deps import get_coin_service
from promptcoin.schemas.auth import AuthenticatedUser
from promptcoin.schemas.coins import (
    AdminAdjustmentRequest,
    BalanceMutationResult,
    CoinBalanceResponse,
    CoinIntegrityCheckResponse,
    CoinLedgerResponse,
    EarningsSummaryResponse,
)
from promptcoin.services.coin_service import CoinService

router = APIRouter(prefix="/coins", tags=["coins"])


@router.post("/account", response_model=CoinBalanceResponse)
def open_my_account(
    current_user: AuthenticatedUser = Depends(get_current_user),
    coin_service: CoinService = Depends(get_coin_service),
) -> CoinBalanceResponse:
    return coin_service.open_account(current_user.id)


@router.get("/balance", response_model=CoinBalanceResponse)
def get_my_balance(
    current_user: AuthenticatedUser = Depends(get_current_user),
    coin_service: CoinService = Depends(get_coin_service),
) -> CoinBalanceResponse:
    """
    내 코인 잔액 조회

    HTTP Status:
        200: 성공
        401: 인증 실패
        404: 코인 계정 없음 (ACCOUNT_404)
    """
    return coin_service.get_balance(current_user.id)


@router.get("/ledger", response_model=CoinLedgerResponse)
def get_my_ledger(
    limit: int = Query(50, ge=1, le=100, description="페이지 크기"),
    offset: int = Query(0, ge=0, description="오프셋"),
    current_user: AuthenticatedUser = Depends(get_current_user),
    coin_service: CoinService = Depends(get_coin_service),
) -> CoinLedgerResponse:
    """
    내 코인 원장 조회 - 최신순 페이징

    Query Parameters:
        limit: 한 페이지 항목 수 (1-100, 기본: 50)
        offset: 건너뛸 항목 수 (기본: 0)
    """
    return coin_service.get_ledger(current_user.id, limit=limit, offset=offset)


@router.get("/earnings", response_model=EarningsSummaryResponse)
def get_my_earnings(
    current_user: AuthenticatedUser = Depends(get_current_user),
    coin_service: CoinService = Depends(get_coin_service),
) -> EarningsSummaryResponse:
    return coin_service.get_earnings_summary(current_user.id)


@router.get("/integrity/my", response_model=CoinIntegrityCheckResponse)
def verify_my_integrity(
    current_user: AuthenticatedUser = Depends(get_current_user),
    coin_service: CoinService = Depends(get_coin_service),
) -> CoinIntegrityCheckResponse:
    return coin_service.verify_user_integrity(current_user.id)


# ============================================================================
# 관리자 엔드포인트
# ============================================================================


@router.post("/admin/adjust", response_model=BalanceMutationResult)
def admin_adjust_coins(
    request: AdminAdjustmentRequest,
    admin_user: AuthenticatedUser = Depends(require_admin),
    coin_service: CoinService = Depends(get_coin_service),
) -> BalanceMutationResult:
    """
    관리자 코인 조정 - 양수는 지급, 음수는 차감 (잔액이 음수가 되면 BALANCE_001)
    """
    return coin_service.admin_adjust(admin_user.id, request)


@router.get("/admin/balance/{user_id}", response_model=CoinBalanceResponse)
def admin_get_balance(
    user_id: int = Path(..., gt=0),
    admin_user: AuthenticatedUser = Depends(require_admin),
    coin_service: CoinService = Depends(get_coin_service),
) -> CoinBalanceResponse:
    return coin_service.get_balance(user_id)


@router.get("/admin/integrity/user/{user_id}", response_model=CoinIntegrityCheckResponse)
def admin_verify_user_integrity(
    user_id: int = Path(..., gt=0),
    admin_user: AuthenticatedUser = Depends(require_admin),
    coin_service: CoinService = Depends(get_coin_service),
) -> CoinIntegrityCheckResponse:
    return coin_service.verify_user_integrity(user_id)


@router.get("/admin/integrity/global", response_model=CoinIntegrityCheckResponse)
def admin_verify_global_integrity(
    admin_user: AuthenticatedUser = Depends(require_admin),
    coin_service: CoinService = Depends(get_coin_service),
) -> CoinIntegrityCheckResponse:
    """전체 계정 정합성 검증 - 불일치 계정 ID 목록 포함"""
    return coin_service.verify_global_integrity()


# ============================================================================
# 내부 협력 서비스 엔드포인트
# ============================================================================


@router.post(
    "/internal/accounts/{user_id}",
    response_model=CoinBalanceResponse,
    dependencies=[Depends(verify_internal_token)],
)
def internal_open_account(
    user_id: int = Path(..., gt=0),
    coin_service: CoinService = Depends(get_coin_service),
) -> CoinBalanceResponse:
    return coin_service.open_account(user_id)
