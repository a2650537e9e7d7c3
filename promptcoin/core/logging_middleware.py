import logging
import time
import uuid

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint

# Use the promptcoin logger so it goes to the JSON handler
logger = logging.getLogger("promptcoin")


class LoggingMiddleware(BaseHTTPMiddleware):
    """요청/응답 로깅 - 요청마다 X-Request-ID 를 발급해 응답 헤더로 돌려줌"""

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        start = time.time()
        request_id = request.headers.get("x-request-id") or uuid.uuid4().hex[:12]
        method = request.method
        path = request.url.path
        client = request.client.host if request.client else "-"

        logger.info(f"[Request {request_id}] {method} {path} from {client}")
        try:
            response = await call_next(request)
        except Exception:
            logger.exception(f"[Unhandled Error {request_id}] {method} {path} from {client}")
            raise

        duration_ms = (time.time() - start) * 1000
        message = f"[Response {request_id}] {method} {path} -> {response.status_code} in {duration_ms:.1f}ms"
        if response.status_code >= 500:
            logger.error(message)
        elif response.status_code >= 400:
            logger.warning(message)
        else:
            logger.info(message)

        response.headers["X-Request-ID"] = request_id
        return response
