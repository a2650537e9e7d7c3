from dependency_injector.wiring import inject, Provide
from fastapi import Depends
from sqlalchemy.orm import Session

from promptcoin.config import Settings
from promptcoin.containers import Container
from promptcoin.database.session import get_db

# Services
from promptcoin.services.coin_service import CoinService
from promptcoin.services.gift_service import GiftService
from promptcoin.services.template_unlock_service import TemplateUnlockService
from promptcoin.services.daily_bonus_service import DailyBonusService
from promptcoin.services.view_earnings_service import ViewEarningsService
from promptcoin.services.checkout_service import CheckoutService
from promptcoin.services.stripe_gateway import StripeGateway


def get_coin_service(db: Session = Depends(get_db)) -> CoinService:
    return CoinService(db=db)


def get_gift_service(db: Session = Depends(get_db)) -> GiftService:
    return GiftService(db=db)


def get_template_unlock_service(db: Session = Depends(get_db)) -> TemplateUnlockService:
    return TemplateUnlockService(db=db)


@inject
def get_daily_bonus_service(
    db: Session = Depends(get_db),
    settings: Settings = Depends(Provide[Container.config.config]),
) -> DailyBonusService:
    return DailyBonusService(db=db, settings=settings)


@inject
def get_view_earnings_service(
    db: Session = Depends(get_db),
    settings: Settings = Depends(Provide[Container.config.config]),
) -> ViewEarningsService:
    return ViewEarningsService(db=db, settings=settings)


@inject
def get_checkout_service(
    db: Session = Depends(get_db),
    gateway: StripeGateway = Depends(Provide[Container.services.stripe_gateway]),
    settings: Settings = Depends(Provide[Container.config.config]),
) -> CheckoutService:
    return CheckoutService(db=db, gateway=gateway, settings=settings)
