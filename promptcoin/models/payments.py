from sqlalchemy import BigInteger, Column, Integer, String, Text
from sqlalchemy.schema import UniqueConstraint

from promptcoin.models.base import BaseModel, BigIntId


class PaymentEvent(BaseModel):
    """처리 완료된 외부 결제 이벤트 - external_event_id 로 웹훅 중복 수신 차단"""

    __tablename__ = "payment_events"
    __table_args__ = (
        UniqueConstraint("external_event_id", name="uq_payment_events_external_event_id"),
    )

    id = Column(BigIntId, primary_key=True, autoincrement=True)
    external_event_id = Column(Text, nullable=False)
    provider = Column(String(32), nullable=False, default="stripe")
    user_id = Column(BigInteger, nullable=False, index=True)
    coins = Column(Integer, nullable=False)
    package_id = Column(Text)
