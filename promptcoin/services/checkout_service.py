"""
코인 구매 결제 서비스

- Stripe Checkout 세션 생성 (패키지 메타데이터 포함)
- 결제 완료 웹훅 처리: 외부 이벤트 ID(checkout session id) 기준 멱등 입금
- 구매 코인은 수익으로 분류하지 않음
"""

import logging
from typing import Any, Dict, Optional

from sqlalchemy.orm import Session

from promptcoin.config import Settings, settings as default_settings
from promptcoin.core.exceptions import ConflictError, PaymentError, ValidationError
from promptcoin.models.coins import LedgerReason
from promptcoin.repositories.coin_repository import CoinRepository
from promptcoin.repositories.payment_repository import PaymentRepository
from promptcoin.schemas.checkout import (
    CheckoutSessionResponse,
    CoinPackage,
    CoinPackagesResponse,
    PaymentCompletedResponse,
    PaymentStatus,
)
from promptcoin.services.balance_mutator import BalanceMutator
from promptcoin.services.stripe_gateway import StripeGateway

logger = logging.getLogger(__name__)

CHECKOUT_COMPLETED_EVENT = "checkout.session.completed"


class CheckoutService:
    def __init__(
        self,
        db: Session,
        gateway: StripeGateway,
        settings: Settings = default_settings,
    ):
        self.db = db
        self.gateway = gateway
        self.settings = settings
        self.payment_repo = PaymentRepository(db)
        self.coin_repo = CoinRepository(db)
        self.mutator = BalanceMutator(db)

    def list_packages(self) -> CoinPackagesResponse:
        packages = [
            CoinPackage(
                id=package_id,
                coins=int(package["coins"]),
                price=str(package["price"]),
                price_id=str(package["price_id"]),
            )
            for package_id, package in self.settings.COIN_PACKAGES.items()
        ]
        return CoinPackagesResponse(packages=packages)

    def create_checkout_session(
        self, user_id: int, package_id: str
    ) -> CheckoutSessionResponse:
        """코인 패키지 구매용 Checkout 세션 생성

        Raises:
            ValidationError: 알 수 없는 패키지
            PaymentError: Stripe 호출 실패
        """
        package = self.settings.COIN_PACKAGES.get(package_id)
        if package is None:
            raise ValidationError(
                "Invalid package",
                details={"package_id": package_id, "available": list(self.settings.COIN_PACKAGES)},
            )

        session = self.gateway.create_checkout_session(
            price_id=str(package["price_id"]),
            metadata={
                "user_id": str(user_id),
                "coins": str(package["coins"]),
                "package_id": package_id,
            },
        )
        logger.info(f"Created checkout session {session['id']} for user {user_id} ({package_id})")

        return CheckoutSessionResponse(session_id=session["id"], url=session["url"])

    def handle_webhook(self, payload: bytes, signature: Optional[str]) -> PaymentCompletedResponse:
        """Stripe 웹훅 처리 - checkout.session.completed 외 이벤트는 무시"""
        event = self.gateway.construct_event(payload, signature or "")
        event_type = event.get("type")

        if event_type != CHECKOUT_COMPLETED_EVENT:
            logger.info(f"Ignoring Stripe event {event.get('id')} of type {event_type}")
            return PaymentCompletedResponse(
                status=PaymentStatus.IGNORED,
                external_event_id=str(event.get("id", "")),
            )

        session: Dict[str, Any] = event.get("data", {}).get("object", {})
        metadata = session.get("metadata") or {}
        try:
            user_id = int(metadata["user_id"])
            coins = int(metadata["coins"])
        except (KeyError, TypeError, ValueError):
            logger.error(f"Checkout session {session.get('id')} is missing metadata: {metadata}")
            raise PaymentError("Missing metadata", details={"session_id": session.get("id")})

        return self.on_payment_completed(
            user_id=user_id,
            coins=coins,
            external_event_id=str(session.get("id")),
            package_id=metadata.get("package_id"),
        )

    def on_payment_completed(
        self,
        user_id: int,
        coins: int,
        external_event_id: str,
        package_id: Optional[str] = None,
    ) -> PaymentCompletedResponse:
        """
        결제 완료 입금 (external_event_id 기준 멱등)

        같은 이벤트가 다시 전달되면 입금 없이 DUPLICATE_EVENT 로 성공 응답합니다.
        """
        if coins <= 0:
            raise ValidationError("Purchased coins must be positive", details={"coins": coins})

        if self.payment_repo.get_event(external_event_id) is not None:
            return self._duplicate(user_id, external_event_id)

        try:
            with self.mutator.atomic():
                account = self.mutator.lock(user_id)[user_id]

                if self.payment_repo.get_event(external_event_id) is not None:
                    return self._duplicate(user_id, external_event_id)

                self.payment_repo.add_event(
                    external_event_id=external_event_id,
                    user_id=user_id,
                    coins=coins,
                    package_id=package_id,
                )
                self.mutator.apply_delta(
                    account,
                    coins,
                    LedgerReason.COIN_PURCHASE,
                    ref_id=f"payment:{external_event_id}",
                    description=f"Purchased {coins} coins",
                )
        except ConflictError:
            if self.payment_repo.get_event(external_event_id) is None:
                raise
            return self._duplicate(user_id, external_event_id)

        logger.info(
            f"Credited {coins} purchased coins to user {user_id} for payment {external_event_id}"
        )

        return PaymentCompletedResponse(
            status=PaymentStatus.CREDITED,
            external_event_id=external_event_id,
            coins_credited=coins,
            balance_after=account.coin_balance,
        )

    def _duplicate(self, user_id: int, external_event_id: str) -> PaymentCompletedResponse:
        logger.warning(f"Duplicate payment event {external_event_id} for user {user_id} ignored")
        account = self.coin_repo.get_account(user_id)
        return PaymentCompletedResponse(
            status=PaymentStatus.DUPLICATE_EVENT,
            external_event_id=external_event_id,
            coins_credited=0,
            balance_after=account.coin_balance if account else 0,
        )
