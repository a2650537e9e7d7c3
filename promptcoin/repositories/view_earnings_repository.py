from datetime import date

from sqlalchemy import func
from sqlalchemy.orm import Session

from promptcoin.models.view_earnings import ViewEarning


class ViewEarningsRepository:
    def __init__(self, db: Session):
        self.db = db

    def add_batch(
        self,
        user_id: int,
        view_count: int,
        coins_earned: int,
        credited_units_after: int,
        earning_date: date,
    ) -> ViewEarning:
        batch = ViewEarning(
            user_id=user_id,
            view_count=view_count,
            coins_earned=coins_earned,
            credited_units_after=credited_units_after,
            earning_date=earning_date,
        )
        self.db.add(batch)
        self.db.flush()
        return batch

    def sum_coins_earned(self, user_id: int) -> int:
        result = (
            self.db.query(func.sum(ViewEarning.coins_earned))
            .filter(ViewEarning.user_id == user_id)
            .scalar()
        )
        return result or 0
