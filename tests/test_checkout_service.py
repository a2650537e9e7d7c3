from unittest.mock import Mock

import pytest

from promptcoin.core.exceptions import PaymentError, ValidationError
from promptcoin.models import CoinAccount, PaymentEvent
from promptcoin.schemas.checkout import PaymentStatus
from promptcoin.services.checkout_service import CheckoutService


@pytest.fixture
def mock_gateway():
    return Mock()


@pytest.fixture
def checkout_service(db, mock_gateway):
    return CheckoutService(db, gateway=mock_gateway)


def completed_event(session_id="cs_test_1", metadata=None):
    return {
        "id": "evt_1",
        "type": "checkout.session.completed",
        "data": {
            "object": {
                "id": session_id,
                "metadata": metadata
                if metadata is not None
                else {"user_id": "1", "coins": "150", "package_id": "pack_150"},
            }
        },
    }


class TestCheckoutService:
    """CheckoutService 테스트"""

    def test_list_packages(self, checkout_service):
        packages = checkout_service.list_packages().packages

        assert [p.id for p in packages] == ["pack_50", "pack_150", "pack_400"]
        assert [p.coins for p in packages] == [50, 150, 400]

    def test_create_checkout_session_sends_metadata(self, checkout_service, mock_gateway):
        # Given
        mock_gateway.create_checkout_session.return_value = {
            "id": "cs_test_1",
            "url": "https://checkout.stripe.com/c/pay/cs_test_1",
        }

        # When
        result = checkout_service.create_checkout_session(1, "pack_150")

        # Then
        assert result.session_id == "cs_test_1"
        kwargs = mock_gateway.create_checkout_session.call_args.kwargs
        assert kwargs["metadata"] == {"user_id": "1", "coins": "150", "package_id": "pack_150"}

    def test_unknown_package(self, checkout_service, mock_gateway):
        with pytest.raises(ValidationError):
            checkout_service.create_checkout_session(1, "pack_9999")

        mock_gateway.create_checkout_session.assert_not_called()

    def test_payment_credit_is_not_earning(self, db, make_account, checkout_service):
        make_account(1)

        result = checkout_service.on_payment_completed(1, 150, "cs_test_1")

        assert result.status == PaymentStatus.CREDITED
        assert result.balance_after == 150
        account = db.get(CoinAccount, 1)
        assert account.coin_balance == 150
        assert account.total_earnings == 0

    def test_replayed_event_credits_once(self, db, make_account, checkout_service):
        # Given
        make_account(1)
        checkout_service.on_payment_completed(1, 150, "cs_test_1")

        # When
        replay = checkout_service.on_payment_completed(1, 150, "cs_test_1")

        # Then
        assert replay.success is True
        assert replay.status == PaymentStatus.DUPLICATE_EVENT
        assert replay.coins_credited == 0
        assert db.get(CoinAccount, 1).coin_balance == 150
        assert db.query(PaymentEvent).count() == 1

    def test_webhook_completed_event(self, db, make_account, checkout_service, mock_gateway):
        make_account(1)
        mock_gateway.construct_event.return_value = completed_event()

        result = checkout_service.handle_webhook(b"{}", "t=1,v1=sig")

        assert result.status == PaymentStatus.CREDITED
        assert result.external_event_id == "cs_test_1"
        event = db.query(PaymentEvent).one()
        assert event.package_id == "pack_150"

    def test_webhook_missing_metadata(self, make_account, checkout_service, mock_gateway):
        make_account(1)
        mock_gateway.construct_event.return_value = completed_event(metadata={})

        with pytest.raises(PaymentError) as exc_info:
            checkout_service.handle_webhook(b"{}", "t=1,v1=sig")

        assert exc_info.value.message == "Missing metadata"

    def test_webhook_other_events_ignored(self, db, checkout_service, mock_gateway):
        mock_gateway.construct_event.return_value = {
            "id": "evt_2",
            "type": "payment_intent.created",
            "data": {"object": {}},
        }

        result = checkout_service.handle_webhook(b"{}", "t=1,v1=sig")

        assert result.status == PaymentStatus.IGNORED
        assert db.query(PaymentEvent).count() == 0
