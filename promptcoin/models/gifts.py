from sqlalchemy import BigInteger, CheckConstraint, Column, ForeignKey, Integer, Text

from promptcoin.models.base import BaseModel, BigIntId


class VirtualGift(BaseModel):
    """가상 선물 카탈로그 - 거래에 참조된 이후 coin_cost 는 변경하지 않음"""

    __tablename__ = "virtual_gifts"
    __table_args__ = (CheckConstraint("coin_cost > 0", name="ck_virtual_gifts_cost_positive"),)

    id = Column(BigIntId, primary_key=True, autoincrement=True)
    name = Column(Text, nullable=False)
    icon = Column(Text, nullable=False)
    coin_cost = Column(Integer, nullable=False)


class GiftTransaction(BaseModel):
    """선물 거래 기록 - 송신자 출금과 수신자 입금을 한 건으로 묶는 감사 기록"""

    __tablename__ = "gift_transactions"
    __table_args__ = (
        CheckConstraint("sender_id <> recipient_id", name="ck_gift_transactions_no_self_gift"),
        CheckConstraint("coin_amount > 0", name="ck_gift_transactions_amount_positive"),
    )

    id = Column(BigIntId, primary_key=True, autoincrement=True)
    sender_id = Column(BigInteger, nullable=False, index=True)
    recipient_id = Column(BigInteger, nullable=False, index=True)
    post_id = Column(BigInteger, nullable=True)
    gift_id = Column(BigIntId, ForeignKey("virtual_gifts.id"), nullable=False)
    coin_amount = Column(Integer, nullable=False)
