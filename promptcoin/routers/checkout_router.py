"""
코인 구매 API 라우터

- GET /checkout/packages: 코인 패키지 목록
- POST /checkout/session: Stripe Checkout 세션 생성
- POST /checkout/webhook: Stripe 웹훅 (stripe-signature 헤더로 인증)
"""

from typing import Optional

from fastapi import APIRouter, Depends, Header, Request
from starlette.concurrency import run_in_threadpool

from promptcoin.core.auth_middleware import get_current_user
from promptcoin.deps import get_checkout_service
from promptcoin.schemas.auth import AuthenticatedUser
from promptcoin.schemas.checkout import (
    CheckoutSessionRequest,
    CheckoutSessionResponse,
    CoinPackagesResponse,
    PaymentCompletedResponse,
)
from promptcoin.services.checkout_service import CheckoutService

router = APIRouter(prefix="/checkout", tags=["checkout"])


@router.get("/packages", response_model=CoinPackagesResponse)
def list_coin_packages(
    checkout_service: CheckoutService = Depends(get_checkout_service),
) -> CoinPackagesResponse:
    return checkout_service.list_packages()


@router.post("/session", response_model=CheckoutSessionResponse)
def create_checkout_session(
    request: CheckoutSessionRequest,
    current_user: AuthenticatedUser = Depends(get_current_user),
    checkout_service: CheckoutService = Depends(get_checkout_service),
) -> CheckoutSessionResponse:
    return checkout_service.create_checkout_session(current_user.id, request.package_id)


@router.post("/webhook", response_model=PaymentCompletedResponse)
async def stripe_webhook(
    request: Request,
    stripe_signature: Optional[str] = Header(None, alias="stripe-signature"),
    checkout_service: CheckoutService = Depends(get_checkout_service),
) -> PaymentCompletedResponse:
    """
    Stripe 웹훅 수신

    서명 검증에 원본 바이트가 필요하므로 본문을 직접 읽고,
    DB 작업(행 잠금 대기 포함)은 스레드풀에서 실행합니다.
    같은 checkout session 이 다시 전달되면 status=DUPLICATE_EVENT 로 200 응답합니다.
    """
    payload = await request.body()
    return await run_in_threadpool(
        checkout_service.handle_webhook, payload, stripe_signature
    )
