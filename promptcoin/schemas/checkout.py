from enum import Enum
from typing import List

from pydantic import BaseModel, Field


class CoinPackage(BaseModel):
    id: str
    coins: int
    price: str
    price_id: str


class CoinPackagesResponse(BaseModel):
    packages: List[CoinPackage]


class CheckoutSessionRequest(BaseModel):
    package_id: str = Field(..., min_length=1)


class CheckoutSessionResponse(BaseModel):
    session_id: str
    url: str


class PaymentStatus(str, Enum):
    CREDITED = "CREDITED"
    DUPLICATE_EVENT = "DUPLICATE_EVENT"
    IGNORED = "IGNORED"


class PaymentCompletedResponse(BaseModel):
    success: bool = True
    status: PaymentStatus
    external_event_id: str
    coins_credited: int = 0
    balance_after: int = 0
