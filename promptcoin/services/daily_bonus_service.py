"""
일일 로그인 보너스 서비스

보상 규칙:
- 하루(ECONOMY_TIMEZONE 기준 날짜)에 한 번만 수령
- 연속 일수: 어제 기록이 있으면 어제 연속 일수 + 1, 없으면 1
- 보상: base + min(연속 일수 - 1, max_steps) * step  (기본 5, 7, 9, ... 최대 17)
- 연속 마일스톤(7/30/100일)은 사용자별 한 번씩 추가 보상

같은 사용자의 수령 요청은 계정 행 잠금으로 직렬화되어 연속 일수가 중복 계산되지 않습니다.
"""

import logging
from datetime import date
from typing import Optional

from sqlalchemy.orm import Session

from promptcoin.config import Settings, settings as default_settings
from promptcoin.core.exceptions import (
    AccountNotFoundError,
    BusinessLogicError,
    ConflictError,
    ValidationError,
)
from promptcoin.models.coins import LedgerReason
from promptcoin.repositories.coin_repository import CoinRepository
from promptcoin.repositories.daily_login_repository import DailyLoginRepository
from promptcoin.schemas.daily_bonus import (
    ClaimStatus,
    DailyLoginClaimResponse,
    DailyLoginStatusResponse,
    StreakMilestoneClaimResponse,
    StreakMilestoneItem,
    StreakStatusResponse,
)
from promptcoin.services.balance_mutator import BalanceMutator
from promptcoin.utils.timezone_utils import get_economy_today, previous_day

logger = logging.getLogger(__name__)


class DailyBonusService:
    def __init__(self, db: Session, settings: Settings = default_settings):
        self.db = db
        self.settings = settings
        self.daily_login_repo = DailyLoginRepository(db)
        self.coin_repo = CoinRepository(db)
        self.mutator = BalanceMutator(db)

    def calculate_reward(self, consecutive_days: int) -> int:
        """연속 일수별 보상 (1일차 5, 7일차 이후 17 고정)"""
        steps = min(max(consecutive_days, 1) - 1, self.settings.DAILY_BONUS_MAX_STREAK_STEPS)
        return self.settings.DAILY_BONUS_BASE + steps * self.settings.DAILY_BONUS_STEP

    def _today(self, login_date: Optional[date]) -> date:
        return login_date or get_economy_today(self.settings.ECONOMY_TIMEZONE)

    def _next_consecutive_days(self, user_id: int, today: date) -> int:
        yesterday = self.daily_login_repo.get_login(user_id, previous_day(today))
        return yesterday.consecutive_days + 1 if yesterday else 1

    def _current_balance(self, user_id: int) -> int:
        account = self.coin_repo.get_account(user_id)
        if account is None:
            raise AccountNotFoundError(user_id)
        return account.coin_balance

    def _already_claimed(self, user_id: int, today: date) -> DailyLoginClaimResponse:
        existing = self.daily_login_repo.get_login(user_id, today)
        return DailyLoginClaimResponse(
            success=False,
            status=ClaimStatus.ALREADY_CLAIMED,
            coins=0,
            consecutive_days=existing.consecutive_days if existing else 0,
            login_date=today.isoformat(),
            balance_after=self._current_balance(user_id),
            message="Already claimed",
        )

    def claim_daily_login(
        self, user_id: int, login_date: Optional[date] = None
    ) -> DailyLoginClaimResponse:
        """
        일일 보너스 수령

        Args:
            user_id: 인증된 사용자 ID
            login_date: 기준 날짜 (기본: 경제 타임존의 오늘)

        Returns:
            DailyLoginClaimResponse: 이미 수령한 날이면 success=False, status=ALREADY_CLAIMED
        """
        today = self._today(login_date)

        if self.daily_login_repo.get_login(user_id, today) is not None:
            return self._already_claimed(user_id, today)

        try:
            with self.mutator.atomic():
                account = self.mutator.lock(user_id)[user_id]

                if self.daily_login_repo.get_login(user_id, today) is not None:
                    return self._already_claimed(user_id, today)

                consecutive_days = self._next_consecutive_days(user_id, today)
                coins = self.calculate_reward(consecutive_days)

                self.daily_login_repo.add_login(user_id, today, coins, consecutive_days)
                self.mutator.apply_delta(
                    account,
                    coins,
                    LedgerReason.DAILY_BONUS,
                    ref_id=f"daily_bonus:{today.isoformat()}",
                    description=f"Daily login bonus (day {consecutive_days})",
                )
        except ConflictError:
            if self.daily_login_repo.get_login(user_id, today) is None:
                raise
            logger.warning(
                f"Concurrent daily claim for user {user_id} on {today} resolved to ALREADY_CLAIMED"
            )
            return self._already_claimed(user_id, today)

        logger.info(
            f"User {user_id} claimed daily bonus {coins} coins (streak {consecutive_days}) on {today}"
        )

        return DailyLoginClaimResponse(
            success=True,
            status=ClaimStatus.CLAIMED,
            coins=coins,
            consecutive_days=consecutive_days,
            login_date=today.isoformat(),
            balance_after=account.coin_balance,
            message=f"+{coins} coins! Day {consecutive_days} streak",
        )

    def get_daily_login_status(
        self, user_id: int, login_date: Optional[date] = None
    ) -> DailyLoginStatusResponse:
        """오늘 수령 여부와 오늘(받은 또는 받을) 보상"""
        today = self._today(login_date)
        existing = self.daily_login_repo.get_login(user_id, today)

        if existing is not None:
            return DailyLoginStatusResponse(
                login_date=today.isoformat(),
                claimed_today=True,
                reward=existing.coins_earned,
                consecutive_days=existing.consecutive_days,
            )

        consecutive_days = self._next_consecutive_days(user_id, today)
        return DailyLoginStatusResponse(
            login_date=today.isoformat(),
            claimed_today=False,
            reward=self.calculate_reward(consecutive_days),
            consecutive_days=consecutive_days,
        )

    def get_current_streak(self, user_id: int, login_date: Optional[date] = None) -> int:
        """현재 유지 중인 연속 일수 - 오늘 또는 어제 기록이 없으면 0"""
        today = self._today(login_date)
        latest = self.daily_login_repo.get_login(user_id, today) or self.daily_login_repo.get_login(
            user_id, previous_day(today)
        )
        return latest.consecutive_days if latest else 0

    def get_streak_status(
        self, user_id: int, login_date: Optional[date] = None
    ) -> StreakStatusResponse:
        current_streak = self.get_current_streak(user_id, login_date)
        claimed = set(self.daily_login_repo.list_claimed_milestones(user_id))

        milestones = [
            StreakMilestoneItem(
                milestone=milestone,
                reward=reward,
                claimed=milestone in claimed,
                claimable=milestone not in claimed and current_streak >= milestone,
            )
            for milestone, reward in sorted(self.settings.STREAK_MILESTONES.items())
        ]
        return StreakStatusResponse(current_streak=current_streak, milestones=milestones)

    def claim_streak_milestone(
        self, user_id: int, milestone: int, login_date: Optional[date] = None
    ) -> StreakMilestoneClaimResponse:
        """
        연속 로그인 마일스톤 보상 수령 (사용자별 마일스톤당 1회)

        Raises:
            ValidationError: 정의되지 않은 마일스톤
            BusinessLogicError: 현재 연속 일수가 마일스톤에 미달
        """
        reward = self.settings.STREAK_MILESTONES.get(milestone)
        if reward is None:
            raise ValidationError(
                "Unknown streak milestone",
                details={
                    "milestone": milestone,
                    "available": sorted(self.settings.STREAK_MILESTONES),
                },
            )

        if self.daily_login_repo.get_milestone_claim(user_id, milestone) is not None:
            return self._milestone_already_claimed(user_id, milestone)

        current_streak = self.get_current_streak(user_id, login_date)
        if current_streak < milestone:
            raise BusinessLogicError(
                error_code="STREAK_001",
                message=f"Reach a {milestone}-day streak to claim this reward",
                details={"milestone": milestone, "current_streak": current_streak},
            )

        try:
            with self.mutator.atomic():
                account = self.mutator.lock(user_id)[user_id]

                if self.daily_login_repo.get_milestone_claim(user_id, milestone) is not None:
                    return self._milestone_already_claimed(user_id, milestone)

                self.daily_login_repo.add_milestone_claim(user_id, milestone, reward)
                self.mutator.apply_delta(
                    account,
                    reward,
                    LedgerReason.STREAK_MILESTONE,
                    ref_id=f"streak_milestone:{milestone}",
                    description=f"{milestone}-day streak milestone",
                )
        except ConflictError:
            if self.daily_login_repo.get_milestone_claim(user_id, milestone) is None:
                raise
            return self._milestone_already_claimed(user_id, milestone)

        logger.info(f"User {user_id} claimed {milestone}-day streak milestone for {reward} coins")

        return StreakMilestoneClaimResponse(
            success=True,
            status=ClaimStatus.CLAIMED,
            milestone=milestone,
            coins=reward,
            balance_after=account.coin_balance,
            message=f"+{reward} coins for your {milestone}-day streak!",
        )

    def _milestone_already_claimed(
        self, user_id: int, milestone: int
    ) -> StreakMilestoneClaimResponse:
        return StreakMilestoneClaimResponse(
            success=False,
            status=ClaimStatus.ALREADY_CLAIMED,
            milestone=milestone,
            coins=0,
            balance_after=self._current_balance(user_id),
            message="Milestone already claimed",
        )
