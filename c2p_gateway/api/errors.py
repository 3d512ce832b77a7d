"""Rendering of normalized gateway errors as HTTP responses"""

from datetime import datetime, timezone

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from c2p_gateway.domain.errors import NormalizedError
from c2p_gateway.domain.exceptions import PaymentGatewayError

_STATUS_BY_CODE = {
    "HTTP_400": 400,
    "HTTP_403": 403,
    "HTTP_429": 429,
    "C2P_001": 422,
    "C2P_002": 422,
    "CONFIG_001": 500,
    "CRYPTO_001": 500,
    "SYS_001": 503,
    "SYS_002": 500,
}

_STATUS_BY_PREFIX = {
    "VAL_": 400,
    "AUTH_": 500,
    "SEARCH_": 404,
    "NET_": 504,
}


def http_status_for(error: NormalizedError) -> int:
    """HTTP status the web layer uses for a terminal gateway error"""
    if error.code in _STATUS_BY_CODE:
        return _STATUS_BY_CODE[error.code]
    for prefix, status in _STATUS_BY_PREFIX.items():
        if error.code.startswith(prefix):
            return status
    return 502


def error_response(error: NormalizedError) -> JSONResponse:
    return JSONResponse(
        status_code=http_status_for(error),
        content={
            "success": False,
            "status": "error",
            "message": error.user_message,
            "details": {
                "error_code": error.code,
                "severity": error.severity.value,
                "retryable": error.retryable,
                "timestamp": datetime.now(timezone.utc).isoformat(),
            },
        },
    )


def register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(PaymentGatewayError)
    async def payment_gateway_error_handler(request: Request, exc: PaymentGatewayError) -> JSONResponse:
        return error_response(exc.error)
