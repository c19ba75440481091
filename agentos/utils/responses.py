"""
Response envelope helpers for the commission API
"""
from typing import Any, Optional

from fastapi import status
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from agentos.schemas.common import ErrorResponse, ResponseBase


def to_json(value: Any) -> Any:
    """Serialize models (also inside lists and dicts) with their camelCase aliases"""
    if isinstance(value, BaseModel):
        return value.model_dump(mode="json", by_alias=True)
    if isinstance(value, (list, tuple)):
        return [to_json(v) for v in value]
    if isinstance(value, dict):
        return {k: to_json(v) for k, v in value.items()}
    return value


def success_response(
    data: Any = None,
    message: Optional[str] = None,
    status_code: int = status.HTTP_200_OK
) -> JSONResponse:
    """
    Create success response

    Args:
        data: Response data, models are dumped camelCase
        message: Optional success message
        status_code: HTTP status code
    """
    response = ResponseBase(message=message).model_dump(exclude_none=True)

    if data is not None:
        response["data"] = to_json(data)

    return JSONResponse(content=response, status_code=status_code)


def error_response(
    error: str,
    detail: Optional[str] = None,
    status_code: int = status.HTTP_400_BAD_REQUEST
) -> JSONResponse:
    """Create error response with `ok: false`"""
    response = ErrorResponse(error=error, detail=detail)
    return JSONResponse(content=response.model_dump(exclude_none=True), status_code=status_code)
