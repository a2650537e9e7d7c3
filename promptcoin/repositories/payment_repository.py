from typing import Optional

from sqlalchemy.orm import Session

from promptcoin.models.payments import PaymentEvent


class PaymentRepository:
    """처리된 결제 이벤트 리포지토리 (웹훅 멱등성)"""

    def __init__(self, db: Session):
        self.db = db

    def get_event(self, external_event_id: str) -> Optional[PaymentEvent]:
        return (
            self.db.query(PaymentEvent)
            .filter(PaymentEvent.external_event_id == external_event_id)
            .first()
        )

    def add_event(
        self,
        external_event_id: str,
        user_id: int,
        coins: int,
        package_id: Optional[str] = None,
        provider: str = "stripe",
    ) -> PaymentEvent:
        event = PaymentEvent(
            external_event_id=external_event_id,
            user_id=user_id,
            coins=coins,
            package_id=package_id,
            provider=provider,
        )
        self.db.add(event)
        self.db.flush()
        return event
