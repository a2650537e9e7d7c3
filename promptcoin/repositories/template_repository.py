from typing import Optional

from sqlalchemy.orm import Session

from promptcoin.models.templates import PromptTemplate, TemplateUnlock


class TemplateRepository:
    """템플릿 메타데이터(읽기 전용) 및 해제 기록 리포지토리"""

    def __init__(self, db: Session):
        self.db = db

    def get_template(self, template_id: int) -> Optional[PromptTemplate]:
        return self.db.get(PromptTemplate, template_id)

    def get_unlock(self, user_id: int, template_id: int) -> Optional[TemplateUnlock]:
        return (
            self.db.query(TemplateUnlock)
            .filter(
                TemplateUnlock.user_id == user_id,
                TemplateUnlock.template_id == template_id,
            )
            .first()
        )

    def add_unlock(self, user_id: int, template_id: int, coins_spent: int) -> TemplateUnlock:
        """해제 기록 추가 - 유니크 제약 위반 시 flush 에서 IntegrityError"""
        unlock = TemplateUnlock(
            user_id=user_id, template_id=template_id, coins_spent=coins_spent
        )
        self.db.add(unlock)
        self.db.flush()
        return unlock
