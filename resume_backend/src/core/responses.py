"""Response envelope helpers.

Every body leaving the API is wrapped as ``{"success": true, "data": ...}`` or
``{"success": false, "message": "..."}``. Controllers build a ``Success`` or
``Failure`` outcome and the routers turn it into a ``JSONResponse`` with
``api_response``.
"""
from __future__ import annotations

from http import HTTPStatus
from typing import Any, Union

from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field


class Success(BaseModel):
    """Successful outcome carrying the payload for the ``data`` key."""
    data: Any = Field(None, description="Payload returned to the client")
    status_code: int = Field(default=HTTPStatus.OK, description="HTTP status to emit")


class Failure(BaseModel):
    """Rejected or failed outcome carrying a client-safe message."""
    message: str = Field(..., description="Client-facing error message")
    status_code: int = Field(
        default=HTTPStatus.INTERNAL_SERVER_ERROR, description="HTTP status to emit"
    )


Outcome = Union[Success, Failure]


# PUBLIC_INTERFACE
def get_status_text(code: int) -> str:
    """Return the canonical reason phrase for an HTTP status code (e.g. 201 -> 'Created')."""
    return HTTPStatus(int(code)).phrase


# PUBLIC_INTERFACE
def success_response(data: Any, status_code: int = HTTPStatus.OK) -> Success:
    return Success(data=data, status_code=int(status_code))


# PUBLIC_INTERFACE
def failed_response(message: str, status_code: int = HTTPStatus.INTERNAL_SERVER_ERROR) -> Failure:
    return Failure(message=message, status_code=int(status_code))


def envelope(outcome: Outcome) -> dict[str, Any]:
    """Build the JSON-ready envelope body for an outcome."""
    if isinstance(outcome, Success):
        return {"success": True, "data": jsonable_encoder(outcome.data)}
    return {"success": False, "message": outcome.message}


# PUBLIC_INTERFACE
def api_response(outcome: Outcome) -> JSONResponse:
    """Map an outcome to the HTTP response sent to the client."""
    return JSONResponse(status_code=outcome.status_code, content=envelope(outcome))
