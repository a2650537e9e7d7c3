import pytest

from promptcoin.core.exceptions import AccountNotFoundError, InsufficientFundsError
from promptcoin.models import CoinAccount
from promptcoin.schemas.coins import AdminAdjustmentRequest
from promptcoin.schemas.gifts import SendGiftRequest
from promptcoin.services.coin_service import CoinService
from promptcoin.services.daily_bonus_service import DailyBonusService
from promptcoin.services.gift_service import GiftService


class TestCoinService:
    """CoinService 테스트"""

    def test_open_account_starts_at_zero(self, db):
        service = CoinService(db)

        result = service.open_account(7)

        assert result.user_id == 7
        assert result.coin_balance == 0
        assert result.total_earnings == 0

    def test_open_account_is_idempotent(self, db, make_account):
        make_account(7, balance=40)

        result = CoinService(db).open_account(7)

        assert result.coin_balance == 40
        assert db.query(CoinAccount).count() == 1

    def test_get_balance_missing_account(self, db):
        with pytest.raises(AccountNotFoundError):
            CoinService(db).get_balance(1)

    def test_get_ledger_newest_first_and_paginated(self, db, make_account):
        # Given
        make_account(1, balance=100)
        service = CoinService(db)
        service.admin_adjust(99, AdminAdjustmentRequest(user_id=1, amount=-10, reason="fix"))
        service.admin_adjust(99, AdminAdjustmentRequest(user_id=1, amount=5, reason="bonus"))

        # When
        ledger = service.get_ledger(1, limit=2, offset=0)

        # Then
        assert ledger.balance == 95
        assert ledger.total_count == 3
        assert ledger.has_next is True
        assert [entry.delta for entry in ledger.entries] == [5, -10]
        assert ledger.entries[1].transaction_type == "DEBIT"
        assert ledger.entries[0].balance_after == 95

    def test_get_ledger_caps_limit(self, db, make_account):
        make_account(1, balance=1)

        ledger = CoinService(db).get_ledger(1, limit=500)

        assert ledger.has_next is False
        assert len(ledger.entries) == 1

    def test_admin_adjust_is_not_earning(self, db, make_account):
        make_account(1)

        result = CoinService(db).admin_adjust(
            99, AdminAdjustmentRequest(user_id=1, amount=30, reason="compensation")
        )

        assert result.balance_after == 30
        assert result.total_earnings == 0

    def test_admin_adjust_cannot_go_negative(self, db, make_account):
        make_account(1, balance=5)

        with pytest.raises(InsufficientFundsError):
            CoinService(db).admin_adjust(
                99, AdminAdjustmentRequest(user_id=1, amount=-6, reason="clawback")
            )

    def test_earnings_summary_breaks_down_sources(self, db, make_account, make_gift):
        # Given
        make_account(1, balance=100)
        make_account(2)
        gift = make_gift(coin_cost=30)
        GiftService(db).send_gift(1, SendGiftRequest(recipient_id=2, gift_id=gift.id))
        DailyBonusService(db).claim_daily_login(2)

        # When
        summary = CoinService(db).get_earnings_summary(2)

        # Then
        assert summary.gift_earnings == 30
        assert summary.daily_bonus_earnings == 5
        assert summary.view_earnings == 0
        assert summary.milestone_earnings == 0
        assert summary.total_earnings == 35
        assert summary.coin_balance == 35

    def test_user_integrity_ok(self, db, make_account, make_gift):
        make_account(1, balance=100)
        make_account(2)
        gift = make_gift(coin_cost=30)
        GiftService(db).send_gift(1, SendGiftRequest(recipient_id=2, gift_id=gift.id))

        result = CoinService(db).verify_user_integrity(1)

        assert result.status == "OK"
        assert result.calculated_balance == 70
        assert result.recorded_balance == 70
        assert result.entry_count == 2

    def test_global_integrity_reports_mismatch(self, db, make_account):
        # Given - 원장을 거치지 않고 잔액을 직접 변경
        make_account(1, balance=10)
        make_account(2, balance=20)
        db.get(CoinAccount, 2).coin_balance = 999
        db.commit()

        # When
        result = CoinService(db).verify_global_integrity()

        # Then
        assert result.status == "MISMATCH"
        assert result.mismatched_user_ids == [2]
        assert result.account_count == 2
        assert result.total_deltas == 30

    def test_global_integrity_ok(self, db, make_account):
        make_account(1, balance=10)
        make_account(2)
        CoinService(db).admin_adjust(
            99, AdminAdjustmentRequest(user_id=2, amount=3, reason="x")
        )

        result = CoinService(db).verify_global_integrity()

        assert result.status == "OK"
        assert result.total_account_balance == result.total_deltas == 13
