import logging
import traceback
from typing import Any, Dict

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError
from starlette.exceptions import HTTPException as StarletteHTTPException

from .exceptions import BaseAPIException, InternalServerError, LedgerUnavailableError

logger = logging.getLogger("promptcoin")


def _request_context(request: Request) -> Dict[str, Any]:
    client = request.client.host if request.client else "-"
    return {
        "method": request.method,
        "url": str(request.url),
        "client": client,
    }


def _error_body(code: str, message: str, details: Dict[str, Any]) -> Dict[str, Any]:
    return {
        "success": False,
        "error": {"code": code, "message": message, "details": details},
    }


async def handle_base_api_exception(request, exc):
    ctx = _request_context(request)
    log = logger.error if getattr(exc, "status_code", 500) >= 500 else logger.warning
    log(
        f"[{exc.error_code}] {ctx['method']} {ctx['url']} from {ctx['client']} -> {exc.status_code}: {exc.message}"
    )
    return JSONResponse(status_code=exc.status_code, content=exc.detail)  # type: ignore[arg-type]


async def handle_http_exception(request, exc):
    ctx = _request_context(request)
    error_msg = f"[HTTPException] {ctx['method']} {ctx['url']} from {ctx['client']} -> {exc.status_code}: {exc.detail}"

    if getattr(exc, "status_code", 500) >= 500:
        # 500번대 에러는 스택 트레이스 포함
        tb_str = "".join(traceback.format_tb(exc.__traceback__))
        logger.error(f"{error_msg}\n\nStack Trace:\n{tb_str}")
    else:
        logger.warning(error_msg)

    # BaseAPIException 처럼 이미 구조화된 detail 이면 그대로 전달
    if isinstance(exc.detail, dict) and "error" in exc.detail:  # type: ignore[truthy-bool]
        content = exc.detail  # type: ignore[assignment]
    else:
        content = _error_body("HTTP_ERROR", str(exc.detail), {})
    return JSONResponse(
        status_code=exc.status_code,
        content=content,
        headers=getattr(exc, "headers", None),
    )


async def handle_validation_error(request, exc):
    ctx = _request_context(request)
    logger.warning(
        f"[ValidationError] {ctx['method']} {ctx['url']} from {ctx['client']} -> 422: {exc.errors()}"
    )
    content = _error_body(
        "VALIDATION_001", "Validation failed", {"errors": jsonable_encoder(exc.errors())}
    )
    return JSONResponse(status_code=422, content=content)


async def handle_database_error(request, exc):
    """트랜잭션 밖으로 새어 나온 DB 오류 - 원장 사용 불가로 응답"""
    ctx = _request_context(request)
    logger.error(
        f"[LedgerUnavailable] {ctx['method']} {ctx['url']} from {ctx['client']} -> {type(exc).__name__}: {exc}"
    )
    unavailable = LedgerUnavailableError()
    return JSONResponse(status_code=unavailable.status_code, content=unavailable.detail)  # type: ignore[arg-type]


async def handle_unexpected_error(request, exc):
    ctx = _request_context(request)

    # 전체 스택 트레이스 포함
    tb_str = "".join(traceback.format_exception(type(exc), exc, exc.__traceback__))
    logger.error(
        f"[Unhandled Error] {ctx['method']} {ctx['url']} from {ctx['client']}\n"
        f"Exception Type: {type(exc).__name__}\n"
        f"Exception Message: {str(exc)}\n\n"
        f"Full Stack Trace:\n{tb_str}"
    )

    # 내부 오류 메시지는 사용자에게 노출하지 않음
    internal = InternalServerError()
    return JSONResponse(status_code=internal.status_code, content=internal.detail)  # type: ignore[arg-type]


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(BaseAPIException, handle_base_api_exception)
    app.add_exception_handler(StarletteHTTPException, handle_http_exception)
    app.add_exception_handler(RequestValidationError, handle_validation_error)
    app.add_exception_handler(SQLAlchemyError, handle_database_error)
    app.add_exception_handler(Exception, handle_unexpected_error)
