from datetime import date
from typing import Optional
from sqlalchemy.orm import Session
import logging

from promptcoin.config import Settings, settings as default_settings
from promptcoin.models.coins import LedgerReason
from promptcoin.repositories.view_earnings_repository import ViewEarningsRepository
from promptcoin.schemas.view_earnings import AccrualStatus, ViewAccrualResponse
from promptcoin.services.balance_mutator import BalanceMutator
from promptcoin.utils.timezone_utils import get_economy_today

logger = logging.getLogger(__name__)


class ViewEarningsService:
    """조회수 수익 적립 - VIEWS_PER_COIN 조회당 1코인

    적립 완료 단위(워터마크)는 계정 행에 저장되어 잔액과 함께 잠깁니다.
    같은 조회수가 두 번 적립되지 않고, 누적 조회수가 줄어도 회수하지 않습니다.
    """

    def __init__(self, db: Session, settings: Settings = default_settings):
        self.db = db
        self.settings = settings
        self.view_earnings_repo = ViewEarningsRepository(db)
        self.mutator = BalanceMutator(db)

    def accrue_view_earnings(
        self, user_id: int, total_views: int, earning_date: Optional[date] = None
    ) -> ViewAccrualResponse:
        """
        누적 조회수를 코인으로 적립

        Args:
            user_id: 게시물 작성자 ID
            total_views: 조회수 협력 서비스가 집계한 누적 유효 조회수
            earning_date: 배치 기록 날짜 (기본: 경제 타임존의 오늘)
        """
        earning_date = earning_date or get_economy_today(self.settings.ECONOMY_TIMEZONE)
        earnable_units = total_views // self.settings.VIEWS_PER_COIN

        with self.mutator.atomic():
            account = self.mutator.lock(user_id)[user_id]
            credited_units = account.credited_view_units
            newly_earnable = earnable_units - credited_units

            if newly_earnable <= 0:
                return ViewAccrualResponse(
                    status=AccrualStatus.NOTHING_TO_CREDIT,
                    coins_credited=0,
                    credited_units=credited_units,
                    balance_after=account.coin_balance,
                )

            account.credited_view_units = earnable_units
            self.view_earnings_repo.add_batch(
                user_id=user_id,
                view_count=total_views,
                coins_earned=newly_earnable,
                credited_units_after=earnable_units,
                earning_date=earning_date,
            )
            self.mutator.apply_delta(
                account,
                newly_earnable,
                LedgerReason.VIEW_EARNINGS,
                ref_id=f"view_earnings:{earnable_units}",
                description=f"View earnings for {newly_earnable * self.settings.VIEWS_PER_COIN} views",
            )

        logger.info(
            f"Credited {newly_earnable} view coins to user {user_id} (watermark {earnable_units})"
        )

        return ViewAccrualResponse(
            status=AccrualStatus.CREDITED,
            coins_credited=newly_earnable,
            credited_units=earnable_units,
            balance_after=account.coin_balance,
        )
