from fastapi import HTTPException, status
from typing import Optional, Dict, Any

class BaseAPIException(HTTPException):
    """Base exception for API errors"""
    def __init__(
        self,
        status_code: int,
        error_code: str,
        message: str,
        details: Optional[Dict[str, Any]] = None
    ):
        self.error_code = error_code
        self.message = message
        self.details = details or {}

        super().__init__(
            status_code=status_code,
            detail={
                "success": False,
                "error": {
                    "code": error_code,
                    "message": message,
                    "details": self.details
                }
            }
        )

    def __str__(self) -> str:  # Ensure str(e) returns the human message
        return self.message

class AuthenticationError(BaseAPIException):
    """Authentication related errors"""
    def __init__(self, message: str = "Authentication failed", details: Optional[Dict] = None):
        super().__init__(
            status_code=status.HTTP_401_UNAUTHORIZED,
            error_code="AUTH_001",
            message=message,
            details=details
        )

class AuthorizationError(BaseAPIException):
    """Authorization related errors"""
    def __init__(self, message: str = "Access forbidden", details: Optional[Dict] = None):
        super().__init__(
            status_code=status.HTTP_403_FORBIDDEN,
            error_code="AUTH_002",
            message=message,
            details=details
        )

class ValidationError(BaseAPIException):
    """Validation errors"""
    def __init__(self, message: str = "Validation failed", details: Optional[Dict] = None):
        super().__init__(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            error_code="VALIDATION_001",
            message=message,
            details=details
        )

class NotFoundError(BaseAPIException):
    """Resource not found errors"""
    def __init__(
        self,
        message: str = "Resource not found",
        details: Optional[Dict] = None,
        error_code: str = "NOT_FOUND_001",
    ):
        super().__init__(
            status_code=status.HTTP_404_NOT_FOUND,
            error_code=error_code,
            message=message,
            details=details
        )

class AccountNotFoundError(NotFoundError):
    """Coin account does not exist"""
    def __init__(self, user_id: Any):
        super().__init__(
            message="Coin account not found",
            details={"user_id": user_id},
            error_code="ACCOUNT_404",
        )

class UnknownGiftError(NotFoundError):
    """Referenced gift catalog entry does not exist"""
    def __init__(self, gift_id: Any):
        super().__init__(
            message="This gift is no longer available",
            details={"gift_id": gift_id},
            error_code="GIFT_404",
        )

class UnknownTemplateError(NotFoundError):
    """Referenced template does not exist"""
    def __init__(self, template_id: Any):
        super().__init__(
            message="Template not found",
            details={"template_id": template_id},
            error_code="TEMPLATE_404",
        )

class ConflictError(BaseAPIException):
    """Resource conflict errors"""
    def __init__(self, message: str = "Resource conflict", details: Optional[Dict] = None):
        super().__init__(
            status_code=status.HTTP_409_CONFLICT,
            error_code="CONFLICT_001",
            message=message,
            details=details
        )

class InternalServerError(BaseAPIException):
    """Internal server errors"""
    def __init__(self, message: str = "Internal server error", details: Optional[Dict] = None):
        super().__init__(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            error_code="INTERNAL_001",
            message=message,
            details=details
        )

class LedgerUnavailableError(BaseAPIException):
    """Persistence layer failed; the operation may not be assumed applied"""
    def __init__(
        self,
        message: str = "Coins are temporarily unavailable. Please try again later.",
        details: Optional[Dict] = None,
    ):
        super().__init__(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            error_code="LEDGER_503",
            message=message,
            details=details
        )

class InsufficientFundsError(BaseAPIException):
    """Balance would go negative"""
    def __init__(self, message: str = "You don't have enough coins", details: Optional[Dict] = None):
        super().__init__(
            status_code=status.HTTP_400_BAD_REQUEST,
            error_code="BALANCE_001",
            message=message,
            details=details
        )

class SelfGiftNotAllowedError(BaseAPIException):
    """Sender and recipient are the same account"""
    def __init__(self, message: str = "You can't send a gift to yourself", details: Optional[Dict] = None):
        super().__init__(
            status_code=status.HTTP_400_BAD_REQUEST,
            error_code="GIFT_001",
            message=message,
            details=details
        )

class PaymentError(BaseAPIException):
    """Payment provider errors"""
    def __init__(self, message: str = "Payment could not be processed", details: Optional[Dict] = None):
        super().__init__(
            status_code=status.HTTP_400_BAD_REQUEST,
            error_code="PAYMENT_001",
            message=message,
            details=details
        )

class BusinessLogicError(BaseAPIException):
    """Business logic errors"""
    def __init__(self, error_code: str, message: str, details: Optional[Dict] = None):
        super().__init__(
            status_code=status.HTTP_400_BAD_REQUEST,
            error_code=error_code,
            message=message,
            details=details
        )
