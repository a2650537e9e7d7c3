from .auth import AuthenticatedUser, TokenPayload
from .coins import CoinBalanceResponse, CoinLedgerResponse, BalanceMutationResult
from .gifts import SendGiftRequest, SendGiftResponse
from .templates import TemplateUnlockResponse
from .daily_bonus import DailyLoginClaimResponse
from .view_earnings import ViewAccrualResponse
from .checkout import PaymentCompletedResponse
