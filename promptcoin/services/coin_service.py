from datetime import datetime, timezone
from uuid import uuid4
from sqlalchemy.orm import Session
import logging

from promptcoin.core.exceptions import AccountNotFoundError, ConflictError
from promptcoin.models.coins import LedgerReason
from promptcoin.repositories.coin_repository import CoinRepository
from promptcoin.repositories.daily_login_repository import DailyLoginRepository
from promptcoin.repositories.gift_repository import GiftRepository
from promptcoin.repositories.view_earnings_repository import ViewEarningsRepository
from promptcoin.schemas.coins import (
    AdminAdjustmentRequest,
    BalanceMutationResult,
    CoinBalanceResponse,
    CoinIntegrityCheckResponse,
    CoinLedgerResponse,
    EarningsSummaryResponse,
)
from promptcoin.services.balance_mutator import BalanceMutator

logger = logging.getLogger(__name__)


class CoinService:
    """코인 계정/원장 조회 및 관리 기능을 담당하는 서비스"""

    def __init__(self, db: Session):
        self.db = db
        self.coin_repo = CoinRepository(db)
        self.gift_repo = GiftRepository(db)
        self.daily_login_repo = DailyLoginRepository(db)
        self.view_earnings_repo = ViewEarningsRepository(db)
        self.mutator = BalanceMutator(db)

    def open_account(self, user_id: int) -> CoinBalanceResponse:
        """코인 계정 생성 (이미 있으면 기존 계정 반환)

        인증 협력 서비스가 회원 가입 시 호출합니다. 잔액 0으로 시작합니다.
        """
        account = self.coin_repo.get_account(user_id)
        if account is None:
            try:
                with self.mutator.atomic():
                    account = self.coin_repo.add_account(user_id)
                logger.info(f"Opened coin account for user {user_id}")
            except ConflictError:
                # 동시에 다른 요청이 먼저 만든 경우
                account = self.coin_repo.get_account(user_id)
                if account is None:
                    raise

        return CoinBalanceResponse.model_validate(account)

    def get_balance(self, user_id: int) -> CoinBalanceResponse:
        """사용자 코인 잔액 조회

        Raises:
            AccountNotFoundError: 계정이 없는 경우
        """
        balance = self.coin_repo.get_by_id(user_id)
        if balance is None:
            raise AccountNotFoundError(user_id)
        return balance

    def get_ledger(
        self, user_id: int, limit: int = 50, offset: int = 0
    ) -> CoinLedgerResponse:
        """사용자 원장 조회 (최신순, 최대 100건)"""
        if limit > 100:
            limit = 100

        balance = self.get_balance(user_id)
        total_count = self.coin_repo.count_ledger_entries(user_id)
        entries = self.coin_repo.get_ledger_entries(user_id, limit=limit, offset=offset)

        return CoinLedgerResponse(
            balance=balance.coin_balance,
            entries=entries,
            total_count=total_count,
            has_next=offset + limit < total_count,
        )

    def get_earnings_summary(self, user_id: int) -> EarningsSummaryResponse:
        """수익 대시보드 - 잔액, 누적 수익, 수익원별 합계"""
        balance = self.get_balance(user_id)

        return EarningsSummaryResponse(
            user_id=user_id,
            coin_balance=balance.coin_balance,
            total_earnings=balance.total_earnings,
            gift_earnings=self.gift_repo.sum_received(user_id),
            view_earnings=self.view_earnings_repo.sum_coins_earned(user_id),
            daily_bonus_earnings=self.daily_login_repo.sum_coins_earned(user_id),
            milestone_earnings=self.daily_login_repo.sum_milestone_coins(user_id),
        )

    def admin_adjust(
        self, admin_id: int, request: AdminAdjustmentRequest
    ) -> BalanceMutationResult:
        """관리자 코인 조정 - 수익으로 분류하지 않음"""
        ref_id = f"admin_adjustment:{admin_id}:{uuid4().hex}"
        result = self.mutator.apply_delta_for_user(
            user_id=request.user_id,
            delta=request.amount,
            reason=LedgerReason.ADMIN_ADJUSTMENT,
            ref_id=ref_id,
            description=f"Admin adjustment by {admin_id}: {request.reason}",
        )
        logger.info(
            f"Admin {admin_id} adjusted user {request.user_id} by {request.amount:+d}"
        )
        return result

    def verify_user_integrity(self, user_id: int) -> CoinIntegrityCheckResponse:
        """
        사용자 잔액 정합성 검증

        원장 델타 합계와 계정에 기록된 잔액이 같아야 합니다.
        """
        balance = self.get_balance(user_id)
        calculated = self.coin_repo.sum_deltas(user_id)

        return CoinIntegrityCheckResponse(
            status="OK" if calculated == balance.coin_balance else "MISMATCH",
            user_id=user_id,
            calculated_balance=calculated,
            recorded_balance=balance.coin_balance,
            entry_count=self.coin_repo.count_ledger_entries(user_id),
            verified_at=datetime.now(timezone.utc).strftime("%Y-%m-%d %H:%M:%S"),
        )

    def verify_global_integrity(self) -> CoinIntegrityCheckResponse:
        """
        전체 시스템 정합성 검증

        모든 계정에 대해 원장 델타 합계와 잔액을 비교하고 불일치 계정을 보고합니다.
        대량 데이터에서는 시간이 걸리므로 관리자/배치 용도로만 사용합니다.
        """
        balances = self.coin_repo.list_account_balances()
        deltas = self.coin_repo.sum_deltas_by_user()

        mismatched = sorted(
            user_id
            for user_id in set(balances) | set(deltas)
            if balances.get(user_id, 0) != deltas.get(user_id, 0)
        )

        return CoinIntegrityCheckResponse(
            status="OK" if not mismatched else "MISMATCH",
            total_account_balance=sum(balances.values()),
            total_deltas=sum(deltas.values()),
            account_count=len(balances),
            mismatched_user_ids=mismatched,
            verified_at=datetime.now(timezone.utc).strftime("%Y-%m-%d %H:%M:%S"),
        )

