from typing import List, Optional, Tuple

from sqlalchemy import asc, desc, func, or_
from sqlalchemy.orm import Session

from promptcoin.models.gifts import GiftTransaction, VirtualGift
from promptcoin.schemas.gifts import GiftHistoryItem, VirtualGiftItem
from promptcoin.repositories.base import BaseRepository


class GiftRepository(BaseRepository[VirtualGift, VirtualGiftItem]):
    """선물 카탈로그 및 선물 거래 리포지토리"""

    def __init__(self, db: Session):
        super().__init__(VirtualGift, VirtualGiftItem, db)

    def get_catalog(self) -> List[VirtualGiftItem]:
        """선물 카탈로그 (가격 오름차순)"""
        gifts = self.db.query(VirtualGift).order_by(asc(VirtualGift.coin_cost), asc(VirtualGift.id)).all()
        return [self._to_schema(gift) for gift in gifts]

    def get_gift(self, gift_id: int) -> Optional[VirtualGift]:
        return self.db.get(VirtualGift, gift_id)

    def add_transaction(
        self,
        sender_id: int,
        recipient_id: int,
        gift_id: int,
        coin_amount: int,
        post_id: Optional[int] = None,
    ) -> GiftTransaction:
        transaction = GiftTransaction(
            sender_id=sender_id,
            recipient_id=recipient_id,
            gift_id=gift_id,
            coin_amount=coin_amount,
            post_id=post_id,
        )
        self.db.add(transaction)
        self.db.flush()
        return transaction

    def get_history(self, user_id: int, limit: int = 20) -> List[GiftHistoryItem]:
        """보내거나 받은 선물 거래 (최신순) - 선물 이름/아이콘 포함"""
        rows: List[Tuple[GiftTransaction, VirtualGift]] = (
            self.db.query(GiftTransaction, VirtualGift)
            .join(VirtualGift, VirtualGift.id == GiftTransaction.gift_id)
            .filter(
                or_(
                    GiftTransaction.sender_id == user_id,
                    GiftTransaction.recipient_id == user_id,
                )
            )
            .order_by(desc(GiftTransaction.id))
            .limit(limit)
            .all()
        )

        return [
            GiftHistoryItem(
                id=transaction.id,
                direction="sent" if transaction.sender_id == user_id else "received",
                sender_id=transaction.sender_id,
                recipient_id=transaction.recipient_id,
                post_id=transaction.post_id,
                gift_id=transaction.gift_id,
                gift_name=gift.name,
                gift_icon=gift.icon,
                coin_amount=transaction.coin_amount,
                created_at=(
                    transaction.created_at.strftime("%Y-%m-%d %H:%M:%S")
                    if transaction.created_at
                    else ""
                ),
            )
            for transaction, gift in rows
        ]

    def sum_received(self, user_id: int) -> int:
        """받은 선물 코인 합계"""
        result = (
            self.db.query(func.sum(GiftTransaction.coin_amount))
            .filter(GiftTransaction.recipient_id == user_id)
            .scalar()
        )
        return result or 0
