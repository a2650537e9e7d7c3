"""
프리미엄 템플릿 해제 서비스

템플릿은 (user_id, template_id) 당 한 번만 구매됩니다.

- 작성자 본인, 무료 템플릿, 이미 해제한 사용자는 차감 없이 ALREADY_UNLOCKED
- 동시에 같은 템플릿을 해제하는 두 요청은 계정 행 잠금으로 직렬화되고,
  그래도 유니크 제약에 걸린 쪽은 롤백 후 ALREADY_UNLOCKED 로 응답
"""

import logging

from sqlalchemy.orm import Session

from promptcoin.core.exceptions import (
    AccountNotFoundError,
    ConflictError,
    UnknownTemplateError,
)
from promptcoin.models.coins import LedgerReason
from promptcoin.models.templates import PromptTemplate
from promptcoin.repositories.coin_repository import CoinRepository
from promptcoin.repositories.template_repository import TemplateRepository
from promptcoin.schemas.templates import (
    TemplateAccessResponse,
    TemplateUnlockResponse,
    UnlockStatus,
)
from promptcoin.services.balance_mutator import BalanceMutator

logger = logging.getLogger(__name__)


class TemplateUnlockService:
    def __init__(self, db: Session):
        self.db = db
        self.template_repo = TemplateRepository(db)
        self.coin_repo = CoinRepository(db)
        self.mutator = BalanceMutator(db)

    def _get_template(self, template_id: int) -> PromptTemplate:
        template = self.template_repo.get_template(template_id)
        if template is None:
            raise UnknownTemplateError(template_id)
        return template

    def _current_balance(self, user_id: int) -> int:
        account = self.coin_repo.get_account(user_id)
        if account is None:
            raise AccountNotFoundError(user_id)
        return account.coin_balance

    def _already_unlocked(self, user_id: int, template_id: int) -> TemplateUnlockResponse:
        return TemplateUnlockResponse(
            status=UnlockStatus.ALREADY_UNLOCKED,
            template_id=template_id,
            coins_spent=0,
            balance_after=self._current_balance(user_id),
            message="Template already unlocked",
        )

    def get_template_access(self, user_id: int, template_id: int) -> TemplateAccessResponse:
        """템플릿 접근 권한 조회 - 무료 템플릿은 항상 해제 상태"""
        template = self._get_template(template_id)
        is_creator = template.creator_id == user_id
        unlocked = (
            not template.is_premium
            or is_creator
            or self.template_repo.get_unlock(user_id, template_id) is not None
        )

        return TemplateAccessResponse(
            template_id=template_id,
            is_premium=template.is_premium,
            is_creator=is_creator,
            unlocked=unlocked,
            unlock_cost=template.unlock_cost if template.is_premium else 0,
        )

    def unlock_template(self, user_id: int, template_id: int) -> TemplateUnlockResponse:
        """
        템플릿 해제

        Raises:
            UnknownTemplateError: 템플릿이 없는 경우
            AccountNotFoundError: 코인 계정이 없는 경우
            InsufficientFundsError: 잔액이 unlock_cost 보다 적은 경우 (해제 기록 생성 안 됨)
        """
        template = self._get_template(template_id)

        if (
            not template.is_premium
            or template.unlock_cost <= 0
            or template.creator_id == user_id
        ):
            return self._already_unlocked(user_id, template_id)

        if self.template_repo.get_unlock(user_id, template_id) is not None:
            return self._already_unlocked(user_id, template_id)

        cost = template.unlock_cost
        try:
            with self.mutator.atomic():
                account = self.mutator.lock(user_id)[user_id]

                # 잠금 대기 중 다른 요청이 먼저 해제했을 수 있음
                if self.template_repo.get_unlock(user_id, template_id) is not None:
                    return self._already_unlocked(user_id, template_id)

                self.template_repo.add_unlock(user_id, template_id, cost)
                self.mutator.apply_delta(
                    account,
                    -cost,
                    LedgerReason.TEMPLATE_UNLOCK,
                    ref_id=f"template_unlock:{template_id}",
                    description=f"Unlocked template {template.name}",
                    insufficient_message="You don't have enough coins to unlock this template",
                )
        except ConflictError:
            if self.template_repo.get_unlock(user_id, template_id) is None:
                raise
            logger.warning(
                f"Concurrent unlock of template {template_id} by user {user_id} resolved to ALREADY_UNLOCKED"
            )
            return self._already_unlocked(user_id, template_id)

        logger.info(
            f"User {user_id} unlocked template {template_id} for {cost} coins, balance {account.coin_balance}"
        )

        return TemplateUnlockResponse(
            status=UnlockStatus.UNLOCKED,
            template_id=template_id,
            coins_spent=cost,
            balance_after=account.coin_balance,
            message="Template unlocked!",
        )
