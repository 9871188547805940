import logging
import traceback
from typing import Any, Dict, Optional

from fastapi import Request
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse

from .exceptions import InternalServerError

logger = logging.getLogger("gachaapi")


def _request_prefix(request: Request) -> str:
    """[request-id] METHOD path from client"""
    request_id = getattr(request.state, "request_id", "-")
    client = request.client.host if request.client else "-"
    return f"[{request_id}] {request.method} {request.url.path} from {client}"


def _error_body(code: str, message: str, details: Dict[str, Any]) -> Dict[str, Any]:
    return {
        "success": False,
        "message": message,
        "error": {"code": code, "message": message, "details": details},
    }


def _log(
    request: Request,
    label: str,
    status_code: int,
    detail: Any,
    exc: Optional[BaseException] = None,
) -> None:
    """4xx는 warning, 5xx는 스택 트레이스와 함께 error"""
    message = f"[{label}] {_request_prefix(request)} -> {status_code}: {detail}"
    if status_code < 500:
        logger.warning(message)
        return

    if exc is not None:
        tb_str = "".join(traceback.format_exception(type(exc), exc, exc.__traceback__))
        message = f"{message}\n\nStack Trace:\n{tb_str}"
    logger.error(message)


async def handle_base_api_exception(request, exc):
    """도메인/인증 에러 - 메시지를 그대로 사용자에게 전달"""
    _log(request, exc.error_code, exc.status_code, exc.message)
    return JSONResponse(
        status_code=exc.status_code,
        content=exc.detail,  # type: ignore[arg-type]
        headers=getattr(exc, "headers", None),
    )


async def handle_http_exception(request, exc):
    """라우팅 404/405 등 프레임워크 HTTPException 정규화"""
    _log(request, "HTTPException", exc.status_code, exc.detail, exc)

    if isinstance(exc.detail, dict) and "error" in exc.detail:
        content = exc.detail
    else:
        content = _error_body("HTTP_ERROR", str(exc.detail), {})
    return JSONResponse(
        status_code=exc.status_code,
        content=content,
        headers=getattr(exc, "headers", None),
    )


async def handle_validation_error(request, exc):
    errors = jsonable_encoder(exc.errors())
    _log(request, "ValidationError", 422, errors)
    return JSONResponse(
        status_code=422,
        content=_error_body("VALIDATION_001", "Validation failed", {"errors": errors}),
    )


async def handle_unexpected_error(request, exc):
    _log(
        request,
        f"Unhandled {type(exc).__name__}",
        500,
        str(exc),
        exc,
    )

    # 내부 정보는 노출하지 않음
    internal = InternalServerError("An unexpected error occurred")
    return JSONResponse(status_code=internal.status_code, content=internal.detail)  # type: ignore[arg-type]
