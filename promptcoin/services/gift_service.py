from typing import Optional
from sqlalchemy.orm import Session
import logging

from promptcoin.config import settings
from promptcoin.core.exceptions import SelfGiftNotAllowedError, UnknownGiftError
from promptcoin.models.coins import LedgerReason
from promptcoin.repositories.gift_repository import GiftRepository
from promptcoin.schemas.gifts import (
    GiftCatalogResponse,
    GiftHistoryResponse,
    SendGiftRequest,
    SendGiftResponse,
)
from promptcoin.services.balance_mutator import BalanceMutator

logger = logging.getLogger(__name__)


class GiftService:
    """가상 선물 전송 서비스 - 송신자 차감과 수신자 입금을 한 트랜잭션으로 처리"""

    def __init__(self, db: Session):
        self.db = db
        self.gift_repo = GiftRepository(db)
        self.mutator = BalanceMutator(db)

    def list_catalog(self) -> GiftCatalogResponse:
        gifts = self.gift_repo.get_catalog()
        return GiftCatalogResponse(gifts=gifts, total_count=len(gifts))

    def send_gift(self, sender_id: int, request: SendGiftRequest) -> SendGiftResponse:
        """
        선물 전송

        처리 순서:
        1. 자기 자신에게 선물 금지
        2. 카탈로그 항목 확인 (가격은 전송 시점의 coin_cost 로 고정)
        3. 두 계정을 user_id 오름차순으로 잠금
        4. 선물 거래 기록 생성 후 송신자 차감, 수신자 입금 (수익 분류)

        어느 단계에서 실패해도 전체가 롤백됩니다.

        Raises:
            SelfGiftNotAllowedError: 송신자와 수신자가 같은 경우
            UnknownGiftError: 선물이 카탈로그에 없는 경우
            AccountNotFoundError: 송신자 또는 수신자 계정이 없는 경우
            InsufficientFundsError: 송신자 잔액 부족
        """
        recipient_id = request.recipient_id
        if sender_id == recipient_id:
            raise SelfGiftNotAllowedError()

        gift = self.gift_repo.get_gift(request.gift_id)
        if gift is None:
            raise UnknownGiftError(request.gift_id)

        cost = gift.coin_cost

        with self.mutator.atomic():
            accounts = self.mutator.lock(sender_id, recipient_id)
            sender = accounts[sender_id]
            recipient = accounts[recipient_id]

            transaction = self.gift_repo.add_transaction(
                sender_id=sender_id,
                recipient_id=recipient_id,
                gift_id=gift.id,
                coin_amount=cost,
                post_id=request.post_id,
            )
            self.mutator.apply_delta(
                sender,
                -cost,
                LedgerReason.GIFT_SENT,
                ref_id=f"gift_sent:{transaction.id}",
                description=f"Sent {gift.name} to user {recipient_id}",
                insufficient_message="You don't have enough coins to send this gift",
            )
            self.mutator.apply_delta(
                recipient,
                cost,
                LedgerReason.GIFT_RECEIVED,
                ref_id=f"gift_received:{transaction.id}",
                description=f"Received {gift.name} from user {sender_id}",
            )

        logger.info(
            f"Gift {gift.id} ({cost} coins) sent from user {sender_id} to user {recipient_id}, "
            f"transaction {transaction.id}"
        )

        return SendGiftResponse(
            transaction_id=transaction.id,
            gift_id=gift.id,
            coin_amount=cost,
            sender_balance=sender.coin_balance,
            recipient_id=recipient_id,
            message=f"Sent {gift.name}!",
        )

    def get_history(self, user_id: int, limit: Optional[int] = None) -> GiftHistoryResponse:
        """보내거나 받은 선물 내역 (최신순)"""
        transactions = self.gift_repo.get_history(
            user_id, limit=limit or settings.GIFT_HISTORY_LIMIT
        )
        return GiftHistoryResponse(transactions=transactions, total_count=len(transactions))
