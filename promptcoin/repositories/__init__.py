# Repository layer - Data access with Pydantic responses

from .base import BaseRepository
from .coin_repository import CoinRepository
from .gift_repository import GiftRepository
from .template_repository import TemplateRepository
from .daily_login_repository import DailyLoginRepository
from .view_earnings_repository import ViewEarningsRepository
from .payment_repository import PaymentRepository

__all__ = [
    "BaseRepository",
    "CoinRepository",
    "GiftRepository",
    "TemplateRepository",
    "DailyLoginRepository",
    "ViewEarningsRepository",
    "PaymentRepository",
]
