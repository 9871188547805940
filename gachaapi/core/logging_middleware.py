import logging
import time
import uuid

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint

logger = logging.getLogger("gachaapi")

REQUEST_ID_HEADER = "X-Request-ID"


class LoggingMiddleware(BaseHTTPMiddleware):
    """요청/응답 로깅 - 요청마다 request id를 붙여 서버 로그와 응답을 연결"""

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        start = time.perf_counter()
        request_id = request.headers.get(REQUEST_ID_HEADER) or uuid.uuid4().hex
        request.state.request_id = request_id
        prefix = f"[{request_id}] {request.method} {request.url.path}"
        client = request.client.host if request.client else "-"

        logger.info(f"{prefix} from {client}")
        try:
            response = await call_next(request)
        except Exception:
            logger.exception(f"{prefix} failed before a response was produced")
            raise

        duration_ms = (time.perf_counter() - start) * 1000
        message = f"{prefix} -> {response.status_code} in {duration_ms:.1f}ms"
        if response.status_code >= 500:
            logger.error(message)
        elif response.status_code >= 400:
            logger.warning(message)
        else:
            logger.info(message)

        response.headers[REQUEST_ID_HEADER] = request_id
        return response
