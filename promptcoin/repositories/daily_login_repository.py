from datetime import date
from typing import List, Optional

from sqlalchemy import func
from sqlalchemy.orm import Session

from promptcoin.models.daily_login import DailyLogin, StreakMilestoneClaim


class DailyLoginRepository:
    """일일 로그인 보상 및 연속 마일스톤 리포지토리"""

    def __init__(self, db: Session):
        self.db = db

    def get_login(self, user_id: int, login_date: date) -> Optional[DailyLogin]:
        return (
            self.db.query(DailyLogin)
            .filter(DailyLogin.user_id == user_id, DailyLogin.login_date == login_date)
            .first()
        )

    def add_login(
        self, user_id: int, login_date: date, coins_earned: int, consecutive_days: int
    ) -> DailyLogin:
        login = DailyLogin(
            user_id=user_id,
            login_date=login_date,
            coins_earned=coins_earned,
            consecutive_days=consecutive_days,
        )
        self.db.add(login)
        self.db.flush()
        return login

    def sum_coins_earned(self, user_id: int) -> int:
        result = (
            self.db.query(func.sum(DailyLogin.coins_earned))
            .filter(DailyLogin.user_id == user_id)
            .scalar()
        )
        return result or 0

    def get_milestone_claim(self, user_id: int, milestone: int) -> Optional[StreakMilestoneClaim]:
        return (
            self.db.query(StreakMilestoneClaim)
            .filter(
                StreakMilestoneClaim.user_id == user_id,
                StreakMilestoneClaim.milestone == milestone,
            )
            .first()
        )

    def list_claimed_milestones(self, user_id: int) -> List[int]:
        rows = (
            self.db.query(StreakMilestoneClaim.milestone)
            .filter(StreakMilestoneClaim.user_id == user_id)
            .all()
        )
        return [milestone for (milestone,) in rows]

    def add_milestone_claim(
        self, user_id: int, milestone: int, coins_earned: int
    ) -> StreakMilestoneClaim:
        claim = StreakMilestoneClaim(
            user_id=user_id, milestone=milestone, coins_earned=coins_earned
        )
        self.db.add(claim)
        self.db.flush()
        return claim

    def sum_milestone_coins(self, user_id: int) -> int:
        result = (
            self.db.query(func.sum(StreakMilestoneClaim.coins_earned))
            .filter(StreakMilestoneClaim.user_id == user_id)
            .scalar()
        )
        return result or 0
