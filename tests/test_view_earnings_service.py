from datetime import date

import pytest

from promptcoin.core.exceptions import AccountNotFoundError
from promptcoin.models import CoinAccount, ViewEarning
from promptcoin.schemas.view_earnings import AccrualStatus
from promptcoin.services.view_earnings_service import ViewEarningsService


class TestViewEarningsService:
    """ViewEarningsService 테스트"""

    def test_credits_floor_of_views(self, db, make_account):
        make_account(1)

        result = ViewEarningsService(db).accrue_view_earnings(1, 57, earning_date=date(2024, 3, 1))

        assert result.status == AccrualStatus.CREDITED
        assert result.coins_credited == 5
        assert result.credited_units == 5
        account = db.get(CoinAccount, 1)
        assert account.coin_balance == 5
        assert account.total_earnings == 5
        assert account.credited_view_units == 5

    def test_same_views_never_credited_twice(self, db, make_account):
        # Given
        make_account(1)
        service = ViewEarningsService(db)
        service.accrue_view_earnings(1, 57)

        # When
        again = service.accrue_view_earnings(1, 59)

        # Then
        assert again.status == AccrualStatus.NOTHING_TO_CREDIT
        assert again.coins_credited == 0
        assert db.get(CoinAccount, 1).coin_balance == 5
        assert db.query(ViewEarning).count() == 1

    def test_only_new_units_are_credited(self, db, make_account):
        make_account(1)
        service = ViewEarningsService(db)
        service.accrue_view_earnings(1, 57)

        result = service.accrue_view_earnings(1, 123)

        assert result.coins_credited == 7
        assert result.credited_units == 12
        assert db.get(CoinAccount, 1).coin_balance == 12

        batches = db.query(ViewEarning).order_by(ViewEarning.id).all()
        assert [b.coins_earned for b in batches] == [5, 7]
        assert batches[1].view_count == 123
        assert batches[1].credited_units_after == 12

    def test_lower_view_count_does_not_reverse(self, db, make_account):
        make_account(1)
        service = ViewEarningsService(db)
        service.accrue_view_earnings(1, 100)

        result = service.accrue_view_earnings(1, 40)

        assert result.status == AccrualStatus.NOTHING_TO_CREDIT
        assert result.credited_units == 10
        assert db.get(CoinAccount, 1).coin_balance == 10

    def test_under_one_unit_is_noop(self, db, make_account):
        make_account(1)

        result = ViewEarningsService(db).accrue_view_earnings(1, 9)

        assert result.status == AccrualStatus.NOTHING_TO_CREDIT
        assert db.query(ViewEarning).count() == 0

    def test_missing_account(self, db):
        with pytest.raises(AccountNotFoundError):
            ViewEarningsService(db).accrue_view_earnings(1, 100)
