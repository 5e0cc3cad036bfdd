"""Error Handler Middleware

전역 에러 핸들링
"""

from typing import Callable

from fastapi import FastAPI, Request, Response
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware

from backend.app.core.config import settings
from backend.app.core.errors import ErrorCode, RestBookError
from backend.app.core.logging import get_logger

logger = get_logger(__name__)


def get_status_code(error_code: ErrorCode) -> int:
    """에러 코드에 따른 HTTP 상태 코드"""
    code_value = error_code.value

    # E1xxx: 요청 텍스트 에러 (400)
    if code_value.startswith("E1"):
        return 400

    # E2xxx: 전송 에러 (502, 504)
    if code_value.startswith("E2"):
        if error_code == ErrorCode.TRANSPORT_TIMEOUT:
            return 504
        return 502

    # E3xxx: 실행 에러 (404, 409)
    if code_value.startswith("E3"):
        if error_code == ErrorCode.EXECUTION_NOT_FOUND:
            return 404
        return 409

    if error_code == ErrorCode.VALIDATION_ERROR:
        return 422

    # E4xxx, E5xxx: 내부 에러 (500)
    return 500


class ErrorHandlerMiddleware(BaseHTTPMiddleware):
    """전역 에러 핸들러 미들웨어"""

    async def dispatch(
        self,
        request: Request,
        call_next: Callable,
    ) -> Response:
        try:
            response = await call_next(request)
            return response

        except RestBookError as e:
            logger.error(
                "REST Book error",
                error_code=e.code.value,
                message=e.message,
                path=request.url.path,
            )

            return JSONResponse(
                status_code=get_status_code(e.code),
                content={
                    "success": False,
                    "error": e.to_detail().model_dump(),
                },
            )

        except Exception as e:
            logger.exception(
                "Unexpected error",
                path=request.url.path,
                error=str(e),
            )

            return JSONResponse(
                status_code=500,
                content={
                    "success": False,
                    "error": {
                        "code": ErrorCode.INTERNAL_ERROR.value,
                        "message": "Internal server error",
                        "details": {"error": str(e)} if settings.DEBUG else {},
                    },
                },
            )


def setup_error_handlers(app: FastAPI) -> None:
    """에러 핸들러 설정

    Args:
        app: FastAPI 앱
    """
    app.add_middleware(ErrorHandlerMiddleware)

    @app.exception_handler(RestBookError)
    async def rest_book_error_handler(
        request: Request,
        exc: RestBookError,
    ) -> JSONResponse:
        """RestBookError 핸들러"""
        logger.error(
            "REST Book error",
            error_code=exc.code.value,
            message=exc.message,
        )

        return JSONResponse(
            status_code=get_status_code(exc.code),
            content={
                "success": False,
                "error": exc.to_detail().model_dump(),
            },
        )

    @app.exception_handler(ValueError)
    async def value_error_handler(
        request: Request,
        exc: ValueError,
    ) -> JSONResponse:
        """ValueError 핸들러"""
        return JSONResponse(
            status_code=400,
            content={
                "success": False,
                "error": {
                    "code": ErrorCode.VALIDATION_ERROR.value,
                    "message": str(exc),
                },
            },
        )

    @app.exception_handler(Exception)
    async def general_exception_handler(
        request: Request,
        exc: Exception,
    ) -> JSONResponse:
        """일반 예외 핸들러"""
        logger.exception("Unhandled exception", error=str(exc))

        return JSONResponse(
            status_code=500,
            content={
                "success": False,
                "error": {
                    "code": ErrorCode.INTERNAL_ERROR.value,
                    "message": "Internal server error",
                },
            },
        )
