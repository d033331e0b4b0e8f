"""
Typed business exceptions and their HTTP mapping.

Business logic raises these instead of ``HTTPException`` so the same code can
run outside a request (tests, scripts). ``register_exception_handlers`` maps
them to JSON error bodies on the FastAPI app.
"""
from __future__ import annotations

import logging
from enum import Enum
from typing import Any, Dict, Optional

from fastapi import FastAPI, status
from sqlalchemy.orm.exc import StaleDataError
from starlette.requests import Request
from starlette.responses import JSONResponse

logger = logging.getLogger(__name__)


class PortalException(Exception):
    """Base class for all business exceptions."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    title = "Internal Server Error"

    def __init__(self, message: str | Enum, param_name: Optional[str] = None):
        if isinstance(message, Enum):
            message = message.name
        super().__init__(message)
        self.message = message
        self.param_name = param_name

    def __str__(self) -> str:
        return self.message


class NotFoundException(PortalException):
    status_code = status.HTTP_404_NOT_FOUND
    title = "Not Found"


class ForbiddenException(PortalException):
    status_code = status.HTTP_403_FORBIDDEN
    title = "Forbidden"


class ConflictException(PortalException):
    status_code = status.HTTP_409_CONFLICT
    title = "Conflict"


class ControllerArgumentException(PortalException):
    """Invalid request argument; ``param_name`` names the offending field."""

    status_code = status.HTTP_400_BAD_REQUEST
    title = "Bad Request"


class UnexpectedConditionException(PortalException):
    """Persistent data is in a state the workflow cannot handle."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    title = "Unexpected Condition"


class ServiceException(PortalException):
    """An outbound collaborator (identity provider admin API) failed."""

    status_code = status.HTTP_502_BAD_GATEWAY
    title = "Bad Gateway"


class NetworkErrors(str, Enum):
    NETWORK_COMPANY_NOT_FOUND = "NETWORK_COMPANY_NOT_FOUND"
    NETWORK_CONFLICT_ONLY_ONE_APPLICATION_PER_COMPANY = "NETWORK_CONFLICT_ONLY_ONE_APPLICATION_PER_COMPANY"
    NETWORK_CONFLICT_APP_NOT_CREATED_STATE = "NETWORK_CONFLICT_APP_NOT_CREATED_STATE"
    NETWORK_ARG_ALL_AGREEMNTS_COMPANY_SHOULD_AGREED = "NETWORK_ARG_ALL_AGREEMNTS_COMPANY_SHOULD_AGREED"
    NETWORK_ARG_NOT_ACTIVE_AGREEMENTS = "NETWORK_ARG_NOT_ACTIVE_AGREEMENTS"
    NETWORK_CONFLICT_PROCESS_MUST_EXIST = "NETWORK_CONFLICT_PROCESS_MUST_EXIST"
    NETWORK_COMPANY_APPLICATION_NOT_EXIST = "NETWORK_COMPANY_APPLICATION_NOT_EXIST"
    NETWORK_FORBIDDEN_USER_NOT_ALLOWED_DECLINE_APPLICATION = "NETWORK_FORBIDDEN_USER_NOT_ALLOWED_DECLINE_APPLICATION"
    NETWORK_CONFLICT_EXTERNAL_REGISTRATIONS_DECLINED = "NETWORK_CONFLICT_EXTERNAL_REGISTRATIONS_DECLINED"
    NETWORK_CONFLICT_CHECK_APPLICATION_STATUS = "NETWORK_CONFLICT_CHECK_APPLICATION_STATUS"
    NETWORK_NOT_FOUND_EXTERNAL_ID = "NETWORK_NOT_FOUND_EXTERNAL_ID"


def _error_body(exc_status: int, title: str, message: str, param_name: Optional[str]) -> Dict[str, Any]:
    return {
        "type": title.lower().replace(" ", "_"),
        "title": title,
        "status": exc_status,
        "errors": {param_name or "detail": [message]},
    }


def register_exception_handlers(app: FastAPI) -> None:
    """Attach handlers translating business exceptions into HTTP responses."""

    @app.exception_handler(PortalException)
    async def _portal_exception_handler(request: Request, exc: PortalException):
        if exc.status_code >= 500:
            logger.error("request_failed path=%s error=%s", request.url.path, exc.message)
        else:
            logger.info("request_rejected path=%s status=%s error=%s", request.url.path, exc.status_code, exc.message)
        return JSONResponse(
            _error_body(exc.status_code, exc.title, exc.message, exc.param_name),
            status_code=exc.status_code,
        )

    @app.exception_handler(StaleDataError)
    async def _stale_data_handler(request: Request, exc: StaleDataError):
        logger.warning("concurrent_update path=%s", request.url.path)
        return JSONResponse(
            _error_body(status.HTTP_409_CONFLICT, "Conflict", "the entity was modified concurrently", None),
            status_code=status.HTTP_409_CONFLICT,
        )


__all__ = [
    "PortalException",
    "NotFoundException",
    "ForbiddenException",
    "ConflictException",
    "ControllerArgumentException",
    "UnexpectedConditionException",
    "ServiceException",
    "NetworkErrors",
    "register_exception_handlers",
]
