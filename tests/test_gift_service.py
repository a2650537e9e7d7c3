import pytest

from promptcoin.core.exceptions import (
    AccountNotFoundError,
    InsufficientFundsError,
    SelfGiftNotAllowedError,
    UnknownGiftError,
)
from promptcoin.models import CoinAccount, CoinLedger, GiftTransaction
from promptcoin.schemas.gifts import SendGiftRequest
from promptcoin.services.gift_service import GiftService


class TestGiftService:
    """GiftService 테스트"""

    def test_send_gift_conserves_coins(self, db, make_account, make_gift):
        # Given - A 100코인, B 10코인, 30코인 선물
        make_account(1, balance=100)
        make_account(2, balance=10)
        gift = make_gift(coin_cost=30)

        # When
        result = GiftService(db).send_gift(
            1, SendGiftRequest(recipient_id=2, gift_id=gift.id, post_id=55)
        )

        # Then
        assert result.sender_balance == 70
        assert result.coin_amount == 30
        assert db.get(CoinAccount, 1).coin_balance == 70
        assert db.get(CoinAccount, 2).coin_balance == 40

        transactions = db.query(GiftTransaction).all()
        assert len(transactions) == 1
        assert transactions[0].coin_amount == 30
        assert transactions[0].post_id == 55
        assert transactions[0].id == result.transaction_id

    def test_recipient_credit_counts_as_earnings(self, db, make_account, make_gift):
        make_account(1, balance=100)
        make_account(2)
        gift = make_gift(coin_cost=30)

        GiftService(db).send_gift(1, SendGiftRequest(recipient_id=2, gift_id=gift.id))

        assert db.get(CoinAccount, 2).total_earnings == 30
        assert db.get(CoinAccount, 1).total_earnings == 0

    def test_gift_writes_paired_ledger_entries(self, db, make_account, make_gift):
        make_account(1, balance=100)
        make_account(2)
        gift = make_gift(coin_cost=30)

        result = GiftService(db).send_gift(1, SendGiftRequest(recipient_id=2, gift_id=gift.id))

        sent = db.query(CoinLedger).filter(CoinLedger.ref_id == f"gift_sent:{result.transaction_id}").one()
        received = (
            db.query(CoinLedger)
            .filter(CoinLedger.ref_id == f"gift_received:{result.transaction_id}")
            .one()
        )
        assert sent.delta == -30
        assert received.delta == 30

    def test_self_gift_not_allowed(self, db, make_account, make_gift):
        make_account(1, balance=100)
        gift = make_gift()

        with pytest.raises(SelfGiftNotAllowedError):
            GiftService(db).send_gift(1, SendGiftRequest(recipient_id=1, gift_id=gift.id))

        assert db.get(CoinAccount, 1).coin_balance == 100

    def test_unknown_gift(self, db, make_account):
        make_account(1, balance=100)
        make_account(2)

        with pytest.raises(UnknownGiftError):
            GiftService(db).send_gift(1, SendGiftRequest(recipient_id=2, gift_id=999))

    def test_insufficient_funds_rolls_back_everything(self, db, make_account, make_gift):
        # Given
        make_account(1, balance=10)
        make_account(2, balance=5)
        gift = make_gift(coin_cost=30)

        # When
        with pytest.raises(InsufficientFundsError) as exc_info:
            GiftService(db).send_gift(1, SendGiftRequest(recipient_id=2, gift_id=gift.id))

        # Then
        assert exc_info.value.message == "You don't have enough coins to send this gift"
        assert db.get(CoinAccount, 1).coin_balance == 10
        assert db.get(CoinAccount, 2).coin_balance == 5
        assert db.query(GiftTransaction).count() == 0

    def test_missing_recipient_account_leaves_sender_untouched(self, db, make_account, make_gift):
        make_account(1, balance=100)
        gift = make_gift(coin_cost=30)

        with pytest.raises(AccountNotFoundError):
            GiftService(db).send_gift(1, SendGiftRequest(recipient_id=2, gift_id=gift.id))

        assert db.get(CoinAccount, 1).coin_balance == 100
        assert db.query(GiftTransaction).count() == 0

    def test_catalog_sorted_by_cost(self, db, make_gift):
        make_gift(name="Crown", coin_cost=100)
        make_gift(name="Heart", coin_cost=10)

        catalog = GiftService(db).list_catalog()

        assert catalog.total_count == 2
        assert [g.name for g in catalog.gifts] == ["Heart", "Crown"]

    def test_history_has_direction(self, db, make_account, make_gift):
        # Given
        make_account(1, balance=100)
        make_account(2, balance=100)
        gift = make_gift(name="Heart", coin_cost=10)
        service = GiftService(db)
        service.send_gift(1, SendGiftRequest(recipient_id=2, gift_id=gift.id))
        service.send_gift(2, SendGiftRequest(recipient_id=1, gift_id=gift.id))

        # When
        history = service.get_history(1)

        # Then
        assert history.total_count == 2
        assert [item.direction for item in history.transactions] == ["received", "sent"]
        assert history.transactions[0].gift_name == "Heart"

    def test_sequence_of_gifts_never_goes_negative(self, db, make_account, make_gift):
        make_account(1, balance=50)
        make_account(2)
        gift = make_gift(coin_cost=20)
        service = GiftService(db)

        outcomes = []
        for _ in range(4):
            try:
                service.send_gift(1, SendGiftRequest(recipient_id=2, gift_id=gift.id))
                outcomes.append("sent")
            except InsufficientFundsError:
                outcomes.append("insufficient")

        assert outcomes == ["sent", "sent", "insufficient", "insufficient"]
        assert db.get(CoinAccount, 1).coin_balance == 10
        assert db.get(CoinAccount, 2).coin_balance == 40
