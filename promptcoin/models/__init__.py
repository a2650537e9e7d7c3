from promptcoin.models.base import Base
from promptcoin.models.coins import CoinAccount, CoinLedger, LedgerReason, EARNING_REASONS
from promptcoin.models.gifts import VirtualGift, GiftTransaction
from promptcoin.models.templates import PromptTemplate, TemplateUnlock
from promptcoin.models.daily_login import DailyLogin, StreakMilestoneClaim
from promptcoin.models.view_earnings import ViewEarning
from promptcoin.models.payments import PaymentEvent

__all__ = [
    "Base",
    "CoinAccount",
    "CoinLedger",
    "LedgerReason",
    "EARNING_REASONS",
    "VirtualGift",
    "GiftTransaction",
    "PromptTemplate",
    "TemplateUnlock",
    "DailyLogin",
    "StreakMilestoneClaim",
    "ViewEarning",
    "PaymentEvent",
]
