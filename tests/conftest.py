import os

# promptcoin 모듈 임포트 전에 테스트 환경 설정
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["SECRET_KEY"] = "test-secret-key"
os.environ["INTERNAL_AUTH_TOKEN"] = "internal-test-token"
os.environ["STRIPE_SECRET_KEY"] = "sk_test_dummy"
os.environ["STRIPE_WEBHOOK_SECRET"] = "whsec_test_secret"
os.environ["LOG_FORMAT"] = "simple"

import pytest
from fastapi.testclient import TestClient

from promptcoin.core.auth_middleware import create_access_token
from promptcoin.database.connection import SessionLocal, engine
from promptcoin.database.session import get_db
from promptcoin.models import Base, CoinAccount, PromptTemplate, VirtualGift
from promptcoin.models.coins import LedgerReason
from promptcoin.services.balance_mutator import BalanceMutator


@pytest.fixture
def db():
    """인메모리 sqlite 세션 - 테스트마다 스키마 재생성"""
    Base.metadata.create_all(bind=engine)
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def make_account(db):
    """코인 계정 생성 - 초기 잔액은 관리자 조정 원장으로 기록해 정합성 유지"""

    def _make(user_id: int, balance: int = 0) -> CoinAccount:
        account = CoinAccount(
            user_id=user_id, coin_balance=0, total_earnings=0, credited_view_units=0
        )
        db.add(account)
        db.commit()
        if balance:
            BalanceMutator(db).apply_delta_for_user(
                user_id, balance, LedgerReason.ADMIN_ADJUSTMENT, ref_id=f"seed:{user_id}"
            )
        return account

    return _make


@pytest.fixture
def make_gift(db):
    def _make(name: str = "Trophy", coin_cost: int = 30, icon: str = "🏆") -> VirtualGift:
        gift = VirtualGift(name=name, icon=icon, coin_cost=coin_cost)
        db.add(gift)
        db.commit()
        return gift

    return _make


@pytest.fixture
def make_template(db):
    def _make(
        creator_id: int = 900,
        unlock_cost: int = 50,
        is_premium: bool = True,
        name: str = "Neon portrait",
    ) -> PromptTemplate:
        template = PromptTemplate(
            creator_id=creator_id,
            name=name,
            is_premium=is_premium,
            unlock_cost=unlock_cost,
        )
        db.add(template)
        db.commit()
        return template

    return _make


@pytest.fixture
def app(db):
    """테스트 앱 - 요청 세션을 테스트 세션으로 교체"""
    from promptcoin.main import create_app

    application = create_app()

    def override_get_db():
        yield db

    application.dependency_overrides[get_db] = override_get_db
    yield application
    application.dependency_overrides.clear()


@pytest.fixture
def client(app):
    """테스트 클라이언트 픽스처"""
    return TestClient(app)


@pytest.fixture
def auth_headers():
    def _headers(user_id: int, role: str = "user"):
        return {"Authorization": f"Bearer {create_access_token(user_id, role=role)}"}

    return _headers


@pytest.fixture
def internal_headers():
    return {"X-Internal-Token": "internal-test-token"}
