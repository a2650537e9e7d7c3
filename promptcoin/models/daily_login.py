from sqlalchemy import BigInteger, Column, Date, Integer
from sqlalchemy.schema import UniqueConstraint

from promptcoin.models.base import BaseModel, BigIntId


class DailyLogin(BaseModel):
    """일일 로그인 보상 기록 - (user_id, login_date) 당 한 건"""

    __tablename__ = "daily_logins"
    __table_args__ = (
        UniqueConstraint("user_id", "login_date", name="uq_daily_logins_user_date"),
    )

    id = Column(BigIntId, primary_key=True, autoincrement=True)
    user_id = Column(BigInteger, nullable=False, index=True)
    login_date = Column(Date, nullable=False)
    coins_earned = Column(Integer, nullable=False)
    consecutive_days = Column(Integer, nullable=False, default=1)


class StreakMilestoneClaim(BaseModel):
    """연속 로그인 마일스톤 보상 수령 기록 - (user_id, milestone) 당 한 건"""

    __tablename__ = "streak_milestone_claims"
    __table_args__ = (
        UniqueConstraint("user_id", "milestone", name="uq_streak_milestone_claims_user_milestone"),
    )

    id = Column(BigIntId, primary_key=True, autoincrement=True)
    user_id = Column(BigInteger, nullable=False, index=True)
    milestone = Column(Integer, nullable=False)
    coins_earned = Column(Integer, nullable=False)
