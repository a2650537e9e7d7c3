from sqlalchemy import BigInteger, Boolean, Column, DateTime, ForeignKey, Integer, Text, func
from sqlalchemy.schema import UniqueConstraint

from promptcoin.models.base import BaseModel, BigIntId


class PromptTemplate(BaseModel):
    """프롬프트 템플릿 메타데이터 (카탈로그 협력 서비스가 관리, 여기서는 읽기 전용)"""

    __tablename__ = "prompt_templates"

    id = Column(BigIntId, primary_key=True, autoincrement=True)
    creator_id = Column(BigInteger, nullable=False, index=True)
    name = Column(Text, nullable=False)
    description = Column(Text)
    is_premium = Column(Boolean, nullable=False, default=False)
    unlock_cost = Column(Integer, nullable=False, default=0)


class TemplateUnlock(BaseModel):
    """템플릿 해제 기록 - (user_id, template_id) 당 한 번만 존재"""

    __tablename__ = "template_unlocks"
    __table_args__ = (
        UniqueConstraint("user_id", "template_id", name="uq_template_unlocks_user_template"),
    )

    id = Column(BigIntId, primary_key=True, autoincrement=True)
    user_id = Column(BigInteger, nullable=False, index=True)
    template_id = Column(BigIntId, ForeignKey("prompt_templates.id"), nullable=False)
    coins_spent = Column(Integer, nullable=False, default=0)
    unlocked_at = Column(DateTime(timezone=True), server_default=func.now())
