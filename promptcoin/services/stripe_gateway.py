import logging
from typing import Any, Dict

import stripe

from promptcoin.config import Settings
from promptcoin.core.exceptions import PaymentError

logger = logging.getLogger(__name__)


class StripeGateway:
    """Stripe 결제 협력 서비스 어댑터 - Checkout 세션 생성과 웹훅 서명 검증"""

    def __init__(self, settings: Settings):
        self.settings = settings

    def create_checkout_session(
        self, price_id: str, metadata: Dict[str, str]
    ) -> Dict[str, str]:
        """payment 모드 Checkout 세션 생성 후 {id, url} 반환"""
        try:
            session = stripe.checkout.Session.create(
                api_key=self.settings.STRIPE_SECRET_KEY,
                mode="payment",
                line_items=[{"price": price_id, "quantity": 1}],
                success_url=self.settings.CHECKOUT_SUCCESS_URL,
                cancel_url=self.settings.CHECKOUT_CANCEL_URL,
                metadata=metadata,
            )
        except stripe.StripeError as e:
            logger.error(f"Stripe checkout session creation failed: {e}")
            raise PaymentError("Could not start checkout. Please try again.")

        return {"id": session.id, "url": session.url}

    def construct_event(self, payload: bytes, signature: str) -> Dict[str, Any]:
        """웹훅 서명 검증 후 이벤트를 dict 로 반환

        Raises:
            PaymentError: 서명 헤더가 없거나 검증 실패, 본문이 올바른 JSON 이 아닌 경우
        """
        if not signature:
            raise PaymentError("Missing Stripe signature")
        if not self.settings.STRIPE_WEBHOOK_SECRET:
            logger.error("STRIPE_WEBHOOK_SECRET is not configured; rejecting webhook")
            raise PaymentError("Webhook verification is not configured")

        try:
            event = stripe.Webhook.construct_event(
                payload, signature, self.settings.STRIPE_WEBHOOK_SECRET
            )
        except stripe.SignatureVerificationError as e:
            logger.warning(f"Stripe webhook signature verification failed: {e}")
            raise PaymentError("Invalid Stripe signature")
        except ValueError:
            # UnicodeDecodeError 포함
            logger.warning("Stripe webhook payload could not be decoded")
            raise PaymentError("Invalid webhook payload")

        return event.to_dict()
