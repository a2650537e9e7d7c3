from enum import Enum

from pydantic import BaseModel


class UnlockStatus(str, Enum):
    UNLOCKED = "UNLOCKED"
    ALREADY_UNLOCKED = "ALREADY_UNLOCKED"


class TemplateUnlockResponse(BaseModel):
    success: bool = True
    status: UnlockStatus
    template_id: int
    coins_spent: int
    balance_after: int
    message: str


class TemplateAccessResponse(BaseModel):
    template_id: int
    is_premium: bool
    is_creator: bool
    unlocked: bool
    unlock_cost: int
