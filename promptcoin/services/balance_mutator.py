"""
잔액 변경 단일 관문 (Balance Mutator)

모든 코인 잔액 변경은 이 클래스를 거칩니다.

핵심 원칙:
1. 원자성 - atomic() 블록 안의 잔액 변경과 감사 기록은 함께 커밋되거나 함께 롤백됩니다
2. 음수 잔액 금지 - 차감 후 잔액이 0 미만이면 InsufficientFundsError, 상태 변경 없음
3. 계정별 직렬화 - lock() 으로 계정 행을 FOR UPDATE 잠금 (여러 계정은 user_id 오름차순)
4. 수익 분류 - 수익성 사유의 입금만 total_earnings 에 합산

DB 오류 매핑:
- IntegrityError -> ConflictError (유니크 경합, 호출자가 "이미 처리됨"으로 해석)
- 그 외 SQLAlchemyError -> LedgerUnavailableError
"""

import logging
from contextlib import contextmanager
from typing import Dict, Iterator, Optional

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from promptcoin.core.exceptions import (
    AccountNotFoundError,
    ConflictError,
    InsufficientFundsError,
    LedgerUnavailableError,
)
from promptcoin.models.coins import CoinAccount, CoinLedger, EARNING_REASONS, LedgerReason
from promptcoin.repositories.coin_repository import CoinRepository
from promptcoin.schemas.coins import BalanceMutationResult

logger = logging.getLogger(__name__)


class BalanceMutator:
    """잔액 변경과 트랜잭션 경계를 담당"""

    def __init__(self, db: Session):
        self.db = db
        self.coin_repo = CoinRepository(db)

    @contextmanager
    def atomic(self) -> Iterator[None]:
        """블록 전체를 하나의 DB 트랜잭션으로 커밋, 예외 시 전부 롤백"""
        try:
            yield
            self.db.commit()
        except IntegrityError as e:
            self.db.rollback()
            logger.warning(f"Ledger transaction conflict: {e.orig}")
            raise ConflictError(
                "The operation conflicted with a concurrent update",
                details={"constraint": str(e.orig)},
            ) from e
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Ledger transaction failed: {type(e).__name__}: {e}")
            raise LedgerUnavailableError() from e
        except Exception:
            self.db.rollback()
            raise

    def lock(self, *user_ids: int) -> Dict[int, CoinAccount]:
        """계정 행 잠금 - 하나라도 없으면 AccountNotFoundError"""
        accounts = self.coin_repo.lock_accounts(user_ids)
        for user_id in user_ids:
            if user_id not in accounts:
                raise AccountNotFoundError(user_id)
        return accounts

    def apply_delta(
        self,
        account: CoinAccount,
        delta: int,
        reason: LedgerReason,
        ref_id: str,
        description: Optional[str] = None,
        insufficient_message: Optional[str] = None,
    ) -> CoinLedger:
        """잠금된 계정에 delta 적용 후 원장 항목 추가 (커밋은 atomic() 이 수행)

        Args:
            account: lock() 으로 잠근 계정
            delta: 변동량 (양수=입금, 음수=출금, 0 불가)
            reason: 변동 사유
            ref_id: (user_id, ref_id) 유니크 참조 ID
            description: 원장 설명
            insufficient_message: 잔액 부족 시 사용자에게 보여줄 메시지

        Raises:
            InsufficientFundsError: 차감 후 잔액이 음수가 되는 경우 (아무것도 변경하지 않음)
        """
        if delta == 0:
            raise ValueError("delta must be non-zero")

        current_balance = account.coin_balance
        new_balance = current_balance + delta
        if new_balance < 0:
            raise InsufficientFundsError(
                insufficient_message or "You don't have enough coins",
                details={"required": -delta, "available": current_balance},
            )

        is_earning = delta > 0 and reason in EARNING_REASONS
        account.coin_balance = new_balance
        if is_earning:
            account.total_earnings = account.total_earnings + delta

        return self.coin_repo.add_ledger_entry(
            user_id=account.user_id,
            delta=delta,
            balance_after=new_balance,
            reason=reason.value,
            ref_id=ref_id,
            is_earning=is_earning,
            description=description,
        )

    def apply_delta_for_user(
        self,
        user_id: int,
        delta: int,
        reason: LedgerReason,
        ref_id: str,
        description: Optional[str] = None,
    ) -> BalanceMutationResult:
        """단일 계정 잔액 변경을 독립 트랜잭션으로 수행"""
        with self.atomic():
            account = self.lock(user_id)[user_id]
            entry = self.apply_delta(account, delta, reason, ref_id, description)

        logger.info(
            f"Applied {delta:+d} coins to user {user_id} ({reason.value}), balance {account.coin_balance}"
        )
        return BalanceMutationResult(
            transaction_id=entry.id,
            delta=delta,
            balance_after=account.coin_balance,
            total_earnings=account.total_earnings,
        )
