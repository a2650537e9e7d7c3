from pydantic import BaseModel, Field, field_validator
from typing import List, Optional


class CoinBalanceResponse(BaseModel):
    """코인 잔액 응답"""

    user_id: int = Field(..., description="사용자 ID")
    coin_balance: int = Field(..., ge=0, description="현재 코인 잔액")
    total_earnings: int = Field(..., ge=0, description="누적 수익")

    class Config:
        from_attributes = True


class CoinLedgerEntry(BaseModel):
    """코인 원장 항목"""

    id: int = Field(..., description="원장 항목 ID")
    transaction_type: str = Field(..., description="CREDIT 또는 DEBIT")
    delta: int = Field(..., description="코인 변화량")
    balance_after: int = Field(..., description="변동 후 잔액")
    reason: str = Field(..., description="변동 사유")
    ref_id: str = Field(..., description="참조 ID")
    description: Optional[str] = Field(None, description="설명")
    created_at: str = Field(..., description="생성 시간")


class CoinLedgerResponse(BaseModel):
    """코인 원장 조회 응답"""

    balance: int = Field(..., description="현재 잔액")
    entries: List[CoinLedgerEntry] = Field(..., description="원장 항목 목록")
    total_count: int = Field(..., description="전체 항목 수")
    has_next: bool = Field(..., description="다음 페이지 존재 여부")


class BalanceMutationResult(BaseModel):
    """잔액 변경 결과 - 변경 직후의 권위 있는 잔액을 함께 반환"""

    success: bool = True
    transaction_id: Optional[int] = None
    delta: int
    balance_after: int
    total_earnings: int
    message: str = "Transaction completed successfully"


class AdminAdjustmentRequest(BaseModel):
    """관리자 코인 조정 요청"""

    user_id: int = Field(..., gt=0, description="사용자 ID")
    amount: int = Field(..., description="조정할 코인 (양수: 추가, 음수: 차감)")
    reason: str = Field(..., min_length=1, max_length=255, description="조정 사유")

    @field_validator("amount")
    @classmethod
    def validate_non_zero(cls, v: int) -> int:
        if v == 0:
            raise ValueError("Adjustment amount must be non-zero")
        return v


class CoinIntegrityCheckResponse(BaseModel):
    """코인 정합성 검증 응답"""

    status: str = Field(..., description="검증 상태 (OK, MISMATCH)")
    user_id: Optional[int] = Field(None, description="사용자 ID (단일 사용자 검증 시)")
    calculated_balance: Optional[int] = Field(None, description="원장 델타 합계")
    recorded_balance: Optional[int] = Field(None, description="계정에 기록된 잔액")
    total_account_balance: Optional[int] = Field(None, description="전체 계정 잔액 합계")
    total_deltas: Optional[int] = Field(None, description="전체 델타 합계")
    account_count: Optional[int] = Field(None, description="계정 수")
    mismatched_user_ids: List[int] = Field(default_factory=list, description="불일치 계정")
    entry_count: Optional[int] = Field(None, description="원장 항목 수")
    verified_at: str = Field(..., description="검증 시간")


class EarningsSummaryResponse(BaseModel):
    """수익 대시보드 요약"""

    user_id: int
    coin_balance: int
    total_earnings: int
    gift_earnings: int
    view_earnings: int
    daily_bonus_earnings: int
    milestone_earnings: int
