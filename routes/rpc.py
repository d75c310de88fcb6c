"""
JSON-RPC endpoint.

POST /rpc with an X-API-Key header. Every response, success or error,
uses the JSON-RPC 2.0 envelope.
"""

import json
import secrets
from typing import Any, Optional

from fastapi import APIRouter, Request
from fastapi.concurrency import run_in_threadpool
from fastapi.responses import JSONResponse
from pydantic import ValidationError as PydanticValidationError
import structlog

from config.settings import get_settings
from exceptions import AppError
from exceptions.errors import (
    RPC_CONFIGURATION_ERROR,
    RPC_INTERNAL_ERROR,
    RPC_INVALID_REQUEST,
    RPC_PARSE_ERROR,
    RPC_SERVER_ERROR,
)
from models.rpc import JSONRPC_VERSION, JsonRpcError, JsonRpcRequest, JsonRpcResponse
from services.rpc_dispatcher import get_rpc_dispatcher

logger = structlog.get_logger(__name__)

router = APIRouter()

API_KEY_HEADER = "X-API-Key"


# ===================
# RESPONSE HELPERS
# ===================

def rpc_error(
    status_code: int,
    code: int,
    message: str,
    request_id: Any = None,
    data: Optional[dict] = None
) -> JSONResponse:
    """Build a JSON-RPC error response."""
    response = JsonRpcResponse(
        error=JsonRpcError(code=code, message=message, data=data),
        id=request_id
    )
    return JSONResponse(status_code=status_code, content=response.to_payload())


def rpc_result(result: Any, request_id: Any) -> JSONResponse:
    response = JsonRpcResponse(result=result, id=request_id)
    return JSONResponse(status_code=200, content=response.to_payload())


def _request_id(body: Any) -> Any:
    if isinstance(body, dict):
        request_id = body.get("id")
        if isinstance(request_id, (str, int)) and not isinstance(request_id, bool):
            return request_id
    return None


def _check_api_key(request: Request, request_id: Any) -> Optional[JSONResponse]:
    """None when the caller is authorized, otherwise the error response."""
    expected = get_settings().mcp_api_key
    if not expected:
        logger.error("api_key_not_configured")
        return rpc_error(
            500,
            RPC_CONFIGURATION_ERROR,
            "Server configuration error: API Key not set",
            request_id
        )

    provided = request.headers.get(API_KEY_HEADER)
    if not provided or not secrets.compare_digest(provided, expected):
        logger.warning("api_key_rejected", has_key=bool(provided))
        return rpc_error(
            401,
            RPC_SERVER_ERROR,
            "Unauthorized: Invalid or missing API Key",
            request_id
        )

    return None


# ===================
# ROUTES
# ===================

@router.post("/rpc")
async def handle_rpc(request: Request):
    """
    Execute one JSON-RPC call.

    Raises:
        400: Parse error / invalid request
        401: Missing or wrong API key
        4xx/5xx: Method errors, status taken from the AppError
    """
    raw = await request.body()
    try:
        body = json.loads(raw) if raw else None
    except ValueError:
        body = None
        parse_failed = True
    else:
        parse_failed = False

    request_id = _request_id(body)

    denied = _check_api_key(request, request_id)
    if denied is not None:
        return denied

    if parse_failed:
        return rpc_error(400, RPC_PARSE_ERROR, "Parse error", request_id)

    try:
        call = JsonRpcRequest.model_validate(body)
    except PydanticValidationError:
        return rpc_error(400, RPC_INVALID_REQUEST, "Invalid Request", request_id)
    if call.jsonrpc != JSONRPC_VERSION:
        return rpc_error(400, RPC_INVALID_REQUEST, "Invalid Request", request_id)

    logger.info("rpc_request_received", request_id=call.id, method=call.method)

    dispatcher = get_rpc_dispatcher()
    try:
        result = await run_in_threadpool(dispatcher.dispatch, call.method, call.params)
    except AppError as e:
        logger.error(
            "rpc_request_failed",
            request_id=call.id,
            method=call.method,
            code=e.code,
            error=e.message
        )
        error = e.to_rpc_error()
        return rpc_error(
            e.status_code,
            error["code"],
            error["message"],
            call.id,
            error["data"]
        )
    except Exception as e:
        logger.error(
            "rpc_unexpected_error",
            request_id=call.id,
            method=call.method,
            error=str(e),
            error_type=type(e).__name__
        )
        return rpc_error(
            500,
            RPC_INTERNAL_ERROR,
            "An internal error occurred",
            call.id,
            {"error": str(e)} if get_settings().debug else None
        )

    logger.info("rpc_request_succeeded", request_id=call.id, method=call.method)
    return rpc_result(result, call.id)
