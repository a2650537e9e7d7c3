import hashlib
import hmac
import json
import time
from unittest.mock import Mock, patch

import pytest
import stripe

from promptcoin.config import Settings
from promptcoin.core.exceptions import PaymentError
from promptcoin.services.stripe_gateway import StripeGateway

WEBHOOK_SECRET = "whsec_test_secret"


def sign(payload: str, secret: str = WEBHOOK_SECRET) -> str:
    timestamp = int(time.time())
    signed = f"{timestamp}.{payload}".encode("utf-8")
    signature = hmac.new(secret.encode("utf-8"), signed, hashlib.sha256).hexdigest()
    return f"t={timestamp},v1={signature}"


@pytest.fixture
def gateway():
    return StripeGateway(
        Settings(STRIPE_SECRET_KEY="sk_test_dummy", STRIPE_WEBHOOK_SECRET=WEBHOOK_SECRET)
    )


class TestStripeGateway:
    """StripeGateway 테스트"""

    def test_construct_event_with_valid_signature(self, gateway):
        payload = json.dumps({"id": "evt_1", "type": "checkout.session.completed"})

        event = gateway.construct_event(payload.encode("utf-8"), sign(payload))

        assert event["type"] == "checkout.session.completed"

    def test_construct_event_rejects_bad_signature(self, gateway):
        payload = json.dumps({"id": "evt_1"})

        with pytest.raises(PaymentError):
            gateway.construct_event(payload.encode("utf-8"), sign(payload, secret="whsec_other"))

    def test_construct_event_returns_plain_dict(self, gateway):
        payload = json.dumps(
            {
                "id": "evt_1",
                "type": "checkout.session.completed",
                "data": {"object": {"id": "cs_1", "metadata": {"user_id": "1"}}},
            }
        )

        event = gateway.construct_event(payload.encode("utf-8"), sign(payload))

        assert type(event) is dict
        assert event["data"]["object"]["metadata"] == {"user_id": "1"}

    def test_construct_event_rejects_non_utf8_body(self, gateway):
        with pytest.raises(PaymentError) as exc_info:
            gateway.construct_event(b"\xff\xfe\x00bad", "t=1,v1=abc")

        assert exc_info.value.message == "Invalid webhook payload"

    def test_construct_event_rejects_signed_non_json_body(self, gateway):
        payload = "not json"

        with pytest.raises(PaymentError) as exc_info:
            gateway.construct_event(payload.encode("utf-8"), sign(payload))

        assert exc_info.value.message == "Invalid webhook payload"

    def test_construct_event_requires_signature(self, gateway):
        with pytest.raises(PaymentError):
            gateway.construct_event(b"{}", "")

    def test_construct_event_requires_configured_secret(self):
        gateway = StripeGateway(Settings(STRIPE_WEBHOOK_SECRET=""))
        payload = json.dumps({"id": "evt_1"})

        with pytest.raises(PaymentError):
            gateway.construct_event(payload.encode("utf-8"), sign(payload))

    @patch("promptcoin.services.stripe_gateway.stripe.checkout.Session.create")
    def test_create_checkout_session(self, mock_create, gateway):
        mock_create.return_value = Mock(id="cs_test_1", url="https://checkout.stripe.com/c/pay/cs_test_1")

        result = gateway.create_checkout_session("price_150", {"user_id": "1"})

        assert result == {"id": "cs_test_1", "url": "https://checkout.stripe.com/c/pay/cs_test_1"}
        kwargs = mock_create.call_args.kwargs
        assert kwargs["mode"] == "payment"
        assert kwargs["line_items"] == [{"price": "price_150", "quantity": 1}]
        assert kwargs["metadata"] == {"user_id": "1"}

    @patch("promptcoin.services.stripe_gateway.stripe.checkout.Session.create")
    def test_create_checkout_session_stripe_error(self, mock_create, gateway):
        mock_create.side_effect = stripe.StripeError("boom")

        with pytest.raises(PaymentError):
            gateway.create_checkout_session("price_150", {"user_id": "1"})
