"""Uniform success/failure envelope returned by every endpoint."""

from typing import Any

from fastapi import status
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse
from pydantic import BaseModel, ConfigDict, Field


class ApiResponse(BaseModel):
    """Success envelope."""

    model_config = ConfigDict(populate_by_name=True)

    status_code: int = Field(serialization_alias="statusCode")
    data: Any = None
    message: str = "Success"
    success: bool = True


class ApiErrorResponse(BaseModel):
    """Failure envelope."""

    model_config = ConfigDict(populate_by_name=True)

    status_code: int = Field(serialization_alias="statusCode")
    data: None = None
    message: str
    success: bool = False
    errors: list[Any] = []


def api_response(
    data: Any = None,
    message: str = "Success",
    status_code: int = status.HTTP_200_OK,
) -> JSONResponse:
    """Wrap ``data`` in the success envelope."""
    envelope = ApiResponse(
        status_code=status_code,
        data=jsonable_encoder(data, by_alias=True),
        message=message,
        success=status_code < 400,
    )
    return JSONResponse(
        status_code=status_code,
        content=envelope.model_dump(by_alias=True),
    )


def api_error_response(
    status_code: int, message: str, errors: list[Any] | None = None
) -> JSONResponse:
    """Wrap an error in the failure envelope."""
    envelope = ApiErrorResponse(
        status_code=status_code,
        message=message,
        errors=jsonable_encoder(errors or []),
    )
    return JSONResponse(
        status_code=status_code,
        content=envelope.model_dump(by_alias=True),
    )
