from fastapi import APIRouter, Depends, Path

from promptcoin.core.auth_middleware import get_current_user
from promptcoin.deps import get_template_unlock_service
from promptcoin.schemas.auth import AuthenticatedUser
from promptcoin.schemas.templates import TemplateAccessResponse, TemplateUnlockResponse
from promptcoin.services.template_unlock_service import TemplateUnlockService

router = APIRouter(prefix="/templates", tags=["templates"])


@router.get("/{template_id}/access", response_model=TemplateAccessResponse)
def get_template_access(
    template_id: int = Path(..., gt=0),
    current_user: AuthenticatedUser = Depends(get_current_user),
    unlock_service: TemplateUnlockService = Depends(get_template_unlock_service),
) -> TemplateAccessResponse:
    return unlock_service.get_template_access(current_user.id, template_id)


@router.post("/{template_id}/unlock", response_model=TemplateUnlockResponse)
def unlock_template(
    template_id: int = Path(..., gt=0),
    current_user: AuthenticatedUser = Depends(get_current_user),
    unlock_service: TemplateUnlockService = Depends(get_template_unlock_service),
) -> TemplateUnlockResponse:
    """
    프리미엄 템플릿 해제

    이미 해제했거나 작성자 본인이면 차감 없이 status=ALREADY_UNLOCKED 로 200 응답합니다.
    """
    return unlock_service.unlock_template(current_user.id, template_id)
