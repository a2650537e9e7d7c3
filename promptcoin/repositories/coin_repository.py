"""
코인 원장 리포지토리 - 계정 잔액과 원장 항목에 대한 데이터 접근

핵심 특징:
- lock_accounts 는 SELECT ... FOR UPDATE 로 계정 행을 잠그며, 여러 계정은 user_id 오름차순으로 잠가
  교착 상태를 피합니다
- 원장 항목은 (user_id, ref_id) 유니크로 같은 원인의 중복 기록을 막습니다
- 이 리포지토리는 commit 하지 않습니다 (트랜잭션 경계는 BalanceMutator 담당)
"""

from typing import Dict, Iterable, List, Optional

from sqlalchemy import desc, asc, func
from sqlalchemy.orm import Session

from promptcoin.models.coins import CoinAccount, CoinLedger
from promptcoin.schemas.coins import CoinBalanceResponse, CoinLedgerEntry
from promptcoin.repositories.base import BaseRepository


class CoinRepository(BaseRepository[CoinAccount, CoinBalanceResponse]):
    """코인 계정/원장 리포지토리"""

    def __init__(self, db: Session):
        super().__init__(CoinAccount, CoinBalanceResponse, db)

    def _to_ledger_entry(self, model_instance: CoinLedger) -> CoinLedgerEntry:
        """원장 모델을 응답 스키마로 변환 - delta 부호로 CREDIT/DEBIT 결정"""
        delta = model_instance.delta
        return CoinLedgerEntry(
            id=model_instance.id,
            transaction_type="CREDIT" if delta > 0 else "DEBIT",
            delta=delta,
            balance_after=model_instance.balance_after,
            reason=model_instance.reason,
            ref_id=model_instance.ref_id,
            description=model_instance.description,
            created_at=(
                model_instance.created_at.strftime("%Y-%m-%d %H:%M:%S")
                if model_instance.created_at
                else ""
            ),
        )

    # ------------------------------------------------------------------
    # 계정
    # ------------------------------------------------------------------

    def get_account(self, user_id: int) -> Optional[CoinAccount]:
        return self.db.get(CoinAccount, user_id)

    def add_account(self, user_id: int) -> CoinAccount:
        account = CoinAccount(
            user_id=user_id, coin_balance=0, total_earnings=0, credited_view_units=0
        )
        self.db.add(account)
        self.db.flush()
        return account

    def lock_accounts(self, user_ids: Iterable[int]) -> Dict[int, CoinAccount]:
        """계정 행을 user_id 오름차순으로 FOR UPDATE 잠금 후 반환

        populate_existing 으로 세션 캐시가 아닌 잠금 시점의 최신 값을 읽습니다.
        """
        ordered_ids = sorted(set(user_ids))
        accounts = (
            self.db.query(CoinAccount)
            .filter(CoinAccount.user_id.in_(ordered_ids))
            .order_by(asc(CoinAccount.user_id))
            .populate_existing()
            .with_for_update()
            .all()
        )
        return {account.user_id: account for account in accounts}

    # ------------------------------------------------------------------
    # 원장
    # ------------------------------------------------------------------

    def add_ledger_entry(
        self,
        user_id: int,
        delta: int,
        balance_after: int,
        reason: str,
        ref_id: str,
        is_earning: bool,
        description: Optional[str] = None,
    ) -> CoinLedger:
        entry = CoinLedger(
            user_id=user_id,
            delta=delta,
            balance_after=balance_after,
            reason=reason,
            ref_id=ref_id,
            is_earning=is_earning,
            description=description,
        )
        self.db.add(entry)
        self.db.flush()
        return entry

    def count_ledger_entries(self, user_id: int) -> int:
        return self.db.query(CoinLedger).filter(CoinLedger.user_id == user_id).count()

    def get_ledger_entries(
        self, user_id: int, limit: int = 50, offset: int = 0
    ) -> List[CoinLedgerEntry]:
        """사용자 원장 조회 (최신순)"""
        model_instances = (
            self.db.query(CoinLedger)
            .filter(CoinLedger.user_id == user_id)
            .order_by(desc(CoinLedger.id))
            .limit(limit)
            .offset(offset)
            .all()
        )
        return [self._to_ledger_entry(instance) for instance in model_instances]

    def sum_deltas(self, user_id: int) -> int:
        """사용자 원장 델타 합계"""
        result = (
            self.db.query(func.sum(CoinLedger.delta))
            .filter(CoinLedger.user_id == user_id)
            .scalar()
        )
        return result or 0

    def sum_deltas_by_user(self) -> Dict[int, int]:
        rows = (
            self.db.query(CoinLedger.user_id, func.sum(CoinLedger.delta))
            .group_by(CoinLedger.user_id)
            .all()
        )
        return {user_id: total or 0 for user_id, total in rows}

    def list_account_balances(self) -> Dict[int, int]:
        rows = self.db.query(CoinAccount.user_id, CoinAccount.coin_balance).all()
        return {user_id: balance for user_id, balance in rows}
