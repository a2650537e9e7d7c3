from sqlalchemy import BigInteger, Column, Date, Integer

from promptcoin.models.base import BaseModel, BigIntId


class ViewEarning(BaseModel):
    """조회수 적립 배치 기록"""

    __tablename__ = "view_earnings"

    id = Column(BigIntId, primary_key=True, autoincrement=True)
    user_id = Column(BigInteger, nullable=False, index=True)
    view_count = Column(BigInteger, nullable=False)  # 적립 시점의 누적 조회수
    coins_earned = Column(Integer, nullable=False)
    credited_units_after = Column(BigInteger, nullable=False)
    earning_date = Column(Date, nullable=False)
