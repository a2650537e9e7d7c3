from unittest.mock import patch

import pytest

from promptcoin.core.exceptions import InsufficientFundsError, UnknownTemplateError
from promptcoin.models import CoinAccount, CoinLedger, TemplateUnlock
from promptcoin.schemas.templates import UnlockStatus
from promptcoin.services.template_unlock_service import TemplateUnlockService


class TestTemplateUnlockService:
    """TemplateUnlockService 테스트"""

    def test_unlock_charges_once(self, db, make_account, make_template):
        # Given
        make_account(1, balance=100)
        template = make_template(unlock_cost=50)
        service = TemplateUnlockService(db)

        # When
        first = service.unlock_template(1, template.id)
        second = service.unlock_template(1, template.id)

        # Then
        assert first.status == UnlockStatus.UNLOCKED
        assert first.coins_spent == 50
        assert first.balance_after == 50
        assert second.status == UnlockStatus.ALREADY_UNLOCKED
        assert second.coins_spent == 0
        assert second.balance_after == first.balance_after
        assert db.query(TemplateUnlock).count() == 1

    def test_insufficient_funds_creates_no_unlock(self, db, make_account, make_template):
        make_account(1, balance=30)
        template = make_template(unlock_cost=50)

        with pytest.raises(InsufficientFundsError) as exc_info:
            TemplateUnlockService(db).unlock_template(1, template.id)

        assert exc_info.value.message == "You don't have enough coins to unlock this template"
        assert db.get(CoinAccount, 1).coin_balance == 30
        assert db.query(TemplateUnlock).count() == 0

    def test_creator_bypasses_paywall(self, db, make_account, make_template):
        make_account(900, balance=10)
        template = make_template(creator_id=900, unlock_cost=50)

        result = TemplateUnlockService(db).unlock_template(900, template.id)

        assert result.status == UnlockStatus.ALREADY_UNLOCKED
        assert result.balance_after == 10
        assert db.query(TemplateUnlock).count() == 0

    def test_free_template_is_noop(self, db, make_account, make_template):
        make_account(1, balance=10)
        template = make_template(is_premium=False, unlock_cost=0)

        result = TemplateUnlockService(db).unlock_template(1, template.id)

        assert result.status == UnlockStatus.ALREADY_UNLOCKED
        assert result.coins_spent == 0

    def test_unknown_template(self, db, make_account):
        make_account(1, balance=10)

        with pytest.raises(UnknownTemplateError):
            TemplateUnlockService(db).unlock_template(1, 12345)

    def test_racing_unlock_resolves_to_already_unlocked(self, db, make_account, make_template):
        """다른 요청이 먼저 커밋했지만 이 요청은 아직 해제 기록을 보지 못한 경우"""
        # Given
        make_account(1, balance=100)
        template = make_template(unlock_cost=50)
        service = TemplateUnlockService(db)
        service.unlock_template(1, template.id)

        real_get_unlock = service.template_repo.get_unlock
        calls = {"count": 0}

        def stale_then_real(user_id, template_id):
            calls["count"] += 1
            if calls["count"] <= 2:
                return None
            return real_get_unlock(user_id, template_id)

        # When
        with patch.object(service.template_repo, "get_unlock", side_effect=stale_then_real):
            result = service.unlock_template(1, template.id)

        # Then - 차감 1회, 해제 기록 1개
        assert result.status == UnlockStatus.ALREADY_UNLOCKED
        assert db.get(CoinAccount, 1).coin_balance == 50
        assert db.query(TemplateUnlock).count() == 1
        assert (
            db.query(CoinLedger)
            .filter(CoinLedger.ref_id == f"template_unlock:{template.id}")
            .count()
            == 1
        )

    def test_access_reflects_unlock(self, db, make_account, make_template):
        make_account(1, balance=100)
        template = make_template(unlock_cost=50)
        service = TemplateUnlockService(db)

        before = service.get_template_access(1, template.id)
        service.unlock_template(1, template.id)
        after = service.get_template_access(1, template.id)

        assert before.unlocked is False
        assert before.unlock_cost == 50
        assert after.unlocked is True

    def test_access_for_creator_and_free_template(self, db, make_template):
        premium = make_template(creator_id=900, unlock_cost=50)
        free = make_template(is_premium=False, unlock_cost=0, name="Free")
        service = TemplateUnlockService(db)

        creator_access = service.get_template_access(900, premium.id)
        free_access = service.get_template_access(1, free.id)

        assert creator_access.is_creator is True
        assert creator_access.unlocked is True
        assert free_access.unlocked is True
        assert free_access.unlock_cost == 0
