from pydantic import BaseModel, Field
from typing import List, Optional


class VirtualGiftItem(BaseModel):
    id: int
    name: str
    icon: str
    coin_cost: int

    class Config:
        from_attributes = True


class GiftCatalogResponse(BaseModel):
    gifts: List[VirtualGiftItem]
    total_count: int


class SendGiftRequest(BaseModel):
    """선물 전송 요청 - 송신자는 인증 토큰에서 결정"""

    recipient_id: int = Field(..., gt=0, description="수신자 ID")
    gift_id: int = Field(..., gt=0, description="선물 카탈로그 ID")
    post_id: Optional[int] = Field(None, gt=0, description="선물과 연결할 게시물 ID")


class SendGiftResponse(BaseModel):
    success: bool = True
    transaction_id: int
    gift_id: int
    coin_amount: int
    sender_balance: int
    recipient_id: int
    message: str


class GiftHistoryItem(BaseModel):
    id: int
    direction: str = Field(..., description="sent 또는 received")
    sender_id: int
    recipient_id: int
    post_id: Optional[int] = None
    gift_id: int
    gift_name: Optional[str] = None
    gift_icon: Optional[str] = None
    coin_amount: int
    created_at: str


class GiftHistoryResponse(BaseModel):
    transactions: List[GiftHistoryItem]
    total_count: int
