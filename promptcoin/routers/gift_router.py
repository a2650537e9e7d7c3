"""
가상 선물 API 라우터

- GET /gifts/catalog: 선물 카탈로그 (가격 오름차순)
- POST /gifts/send: 선물 전송 (송신자는 토큰의 사용자)
- GET /gifts/history: 보내거나 받은 선물 내역
"""

from typing import Optional

from fastapi import APIRouter, Depends, Query

from promptcoin.core.auth_middleware import get_current_user
from promptcoin.deps import get_gift_service
from promptcoin.schemas.auth import AuthenticatedUser
from promptcoin.schemas.gifts import (
    GiftCatalogResponse,
    GiftHistoryResponse,
    SendGiftRequest,
    SendGiftResponse,
)
from promptcoin.services.gift_service import GiftService

router = APIRouter(prefix="/gifts", tags=["gifts"])


@router.get("/catalog", response_model=GiftCatalogResponse)
def get_gift_catalog(
    gift_service: GiftService = Depends(get_gift_service),
) -> GiftCatalogResponse:
    return gift_service.list_catalog()


@router.post("/send", response_model=SendGiftResponse)
def send_gift(
    request: SendGiftRequest,
    current_user: AuthenticatedUser = Depends(get_current_user),
    gift_service: GiftService = Depends(get_gift_service),
) -> SendGiftResponse:
    """
    선물 전송 - 송신자 차감과 수신자 입금이 한 트랜잭션으로 처리됨

    HTTP Status:
        200: 성공 (sender_balance 는 전송 직후 잔액)
        400: 잔액 부족 (BALANCE_001) 또는 자기 자신에게 전송 (GIFT_001)
        404: 알 수 없는 선물 (GIFT_404) 또는 계정 없음 (ACCOUNT_404)
    """
    return gift_service.send_gift(current_user.id, request)


@router.get("/history", response_model=GiftHistoryResponse)
def get_my_gift_history(
    limit: Optional[int] = Query(None, ge=1, le=100, description="조회 건수 (기본: 20)"),
    current_user: AuthenticatedUser = Depends(get_current_user),
    gift_service: GiftService = Depends(get_gift_service),
) -> GiftHistoryResponse:
    return gift_service.get_history(current_user.id, limit=limit)
