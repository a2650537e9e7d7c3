from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import Any, Dict, Optional
from urllib.parse import quote_plus


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file="promptcoin/.env",
        env_file_encoding="utf-8",
        extra="allow",
    )
    # Application
    APP_NAME: str = "PromptShare Coin API"
    PROJECT_NAME: str = "PromptShare Coin Economy"
    API_V1_STR: str = "/api/v1"
    ENVIRONMENT: str = "development"
    DEBUG: bool = False
    LOG_LEVEL: str = "INFO"
    LOG_FORMAT: str = "json"  # json | simple

    # Database
    POSTGRES_HOST: str = "localhost"
    POSTGRES_PORT: int = 5432
    POSTGRES_USERNAME: str = "postgres"
    POSTGRES_PASSWORD: str = "postgres"
    POSTGRES_DATABASE: str = "postgres"
    POSTGRES_SCHEMA: str = "public"

    # 설정되면 POSTGRES_* 보다 우선 (테스트에서는 sqlite URL 사용)
    DATABASE_URL: Optional[str] = None
    DB_POOL_SIZE: int = 10
    DB_MAX_OVERFLOW: int = 20

    @property
    def database_url(self) -> str:
        """Construct database URL from individual components"""
        if self.DATABASE_URL:
            return self.DATABASE_URL

        # URL encode the password to handle special characters
        encoded_password = quote_plus(self.POSTGRES_PASSWORD)
        return f"postgresql+psycopg2://{self.POSTGRES_USERNAME}:{encoded_password}@{self.POSTGRES_HOST}:{self.POSTGRES_PORT}/{self.POSTGRES_DATABASE}"

    # Security
    SECRET_KEY: str = "change-me"
    JWT_ALGORITHM: str = "HS256"
    INTERNAL_AUTH_TOKEN: str = ""  # 조회수 집계 등 내부 협력 서비스 호출용

    # Payments (Stripe)
    STRIPE_SECRET_KEY: str = ""
    STRIPE_WEBHOOK_SECRET: str = ""
    CHECKOUT_SUCCESS_URL: str = "http://localhost:5173/earnings?purchase=success"
    CHECKOUT_CANCEL_URL: str = "http://localhost:5173/earnings?purchase=cancelled"
    COIN_PACKAGES: Dict[str, Dict[str, Any]] = {
        "pack_50": {"coins": 50, "price_id": "price_1So9TDRlYXMejvUL6ifpcWMT", "price": "$1.99"},
        "pack_150": {"coins": 150, "price_id": "price_1So9TNRlYXMejvULWIjJtcjs", "price": "$4.99"},
        "pack_400": {"coins": 400, "price_id": "price_1So9TXRlYXMejvULQ47elr0S", "price": "$9.99"},
    }

    # Economy rules
    ECONOMY_TIMEZONE: str = "UTC"  # 일일 보너스 "오늘" 판정 기준 (클라이언트 로컬 시간 사용 안 함)
    DAILY_BONUS_BASE: int = 5  # 연속 1일차 보상
    DAILY_BONUS_STEP: int = 2  # 연속일마다 추가 보상
    DAILY_BONUS_MAX_STREAK_STEPS: int = 6  # 7일차 이후 17코인 고정
    VIEWS_PER_COIN: int = 10  # 조회수 10회당 1코인
    STREAK_MILESTONES: Dict[int, int] = {7: 25, 30: 100, 100: 500}
    GIFT_HISTORY_LIMIT: int = 20


settings = Settings()
