"""
코인 원장 데이터 모델

계정별 코인 잔액(CoinAccount)과 모든 잔액 변동을 기록하는 원장(CoinLedger)을 정의합니다.
잔액 변경은 BalanceMutator 를 통해서만 일어나며, 변경마다 원장 항목이 하나씩 추가됩니다.
"""

import enum

from sqlalchemy import BigInteger, Boolean, CheckConstraint, Column, String, Text
from sqlalchemy.schema import UniqueConstraint

from promptcoin.models.base import BaseModel, BigIntId


class LedgerReason(str, enum.Enum):
    """잔액 변동 사유"""

    GIFT_SENT = "GIFT_SENT"
    GIFT_RECEIVED = "GIFT_RECEIVED"
    TEMPLATE_UNLOCK = "TEMPLATE_UNLOCK"
    DAILY_BONUS = "DAILY_BONUS"
    VIEW_EARNINGS = "VIEW_EARNINGS"
    STREAK_MILESTONE = "STREAK_MILESTONE"
    COIN_PURCHASE = "COIN_PURCHASE"
    ADMIN_ADJUSTMENT = "ADMIN_ADJUSTMENT"


# total_earnings 에 합산되는 수익성 입금 사유 (구매/관리자 조정은 제외)
EARNING_REASONS = frozenset(
    {
        LedgerReason.GIFT_RECEIVED,
        LedgerReason.DAILY_BONUS,
        LedgerReason.VIEW_EARNINGS,
        LedgerReason.STREAK_MILESTONE,
    }
)


class CoinAccount(BaseModel):
    """
    코인 계정 - 사용자별 현재 잔액

    - coin_balance 는 항상 0 이상 (DB 체크 제약으로도 보장)
    - total_earnings 는 수익성 입금에서만 증가하며 감소하지 않음
    - credited_view_units 는 조회수 적립 워터마크 (잔액 행과 함께 잠금)
    """

    __tablename__ = "coin_accounts"
    __table_args__ = (
        CheckConstraint("coin_balance >= 0", name="ck_coin_accounts_balance_non_negative"),
        CheckConstraint("total_earnings >= 0", name="ck_coin_accounts_earnings_non_negative"),
    )

    user_id = Column(BigInteger, primary_key=True, autoincrement=False)
    coin_balance = Column(BigInteger, nullable=False, default=0)
    total_earnings = Column(BigInteger, nullable=False, default=0)
    credited_view_units = Column(BigInteger, nullable=False, default=0)


class CoinLedger(BaseModel):
    """
    코인 원장 - 불변(append-only) 잔액 변동 기록

    (user_id, ref_id) 는 유니크하여 같은 원인으로 두 번 기록되는 것을 막습니다.
    ref_id 예시: "gift_sent:12", "daily_bonus:2025-01-01", "payment:cs_test_123"
    """

    __tablename__ = "coin_ledger"
    __table_args__ = (UniqueConstraint("user_id", "ref_id", name="uq_coin_ledger_user_ref"),)

    id = Column(BigIntId, primary_key=True, autoincrement=True)
    user_id = Column(BigInteger, nullable=False, index=True)

    # 변동량 - 양수면 입금, 음수면 출금
    delta = Column(BigInteger, nullable=False)

    # 변동 후 잔액
    balance_after = Column(BigInteger, nullable=False)

    reason = Column(String(32), nullable=False)
    is_earning = Column(Boolean, nullable=False, default=False)
    ref_id = Column(Text, nullable=False)
    description = Column(Text)
