"""
Error response models for resource controllers.
"""

import logging
from http import HTTPStatus
from typing import TYPE_CHECKING, Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field

from .exceptions import ParameterMissingError, rescue_status
from .models import Response

if TYPE_CHECKING:
    from .config import ResourcesConfig

logger = logging.getLogger(__name__)


class ErrorResponse(BaseModel):
    """Standard error payload for rescued request-time errors.

    A rescued authorization failure carries the same message as a missing record,
    so the payload does not reveal that the record exists.
    """

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "error": "Not Found",
                "details": [{"type": "missing", "loc": ["params", "post"], "msg": "param is missing"}],
                "request_id": "req-123456",
            }
        }
    )

    error: str = Field(
        ...,
        description="Human-readable error message describing what went wrong"
    )

    details: Optional[List[Dict[str, Any]]] = Field(
        None,
        description="Detailed errors, e.g. the missing parameter"
    )

    request_id: Optional[str] = Field(
        None,
        description="Unique identifier for this specific request"
    )

    def model_dump_json(self, **kwargs):
        """Override to exclude unset optional fields by default."""
        kwargs.setdefault('exclude_none', True)
        return super().model_dump_json(**kwargs)

    @classmethod
    def from_exception(cls, exc: BaseException, status_code: int,
                       request_id: Optional[str] = None) -> "ErrorResponse":
        """Build the payload for ``exc`` rescued as ``status_code``.

        Args:
            exc: The rescued exception
            status_code: The status it was mapped to
            request_id: Optional request identifier

        Returns:
            ErrorResponse whose message is the status phrase
        """
        details = None
        if isinstance(exc, ParameterMissingError):
            details = [{"type": "missing", "loc": ["params", exc.param], "msg": str(exc)}]
        return cls(error=HTTPStatus(status_code).phrase, details=details, request_id=request_id)


def rescue_response(exc: BaseException, config: Optional["ResourcesConfig"] = None,
                    request_id: Optional[str] = None) -> Optional[Response]:
    """Turn a request-time exception into a JSON error response.

    Args:
        exc: The exception that escaped ``ResourceController.process``
        config: Configuration passed to :func:`rescue_status`
        request_id: Optional request identifier to include in the payload

    Returns:
        Response with an :class:`ErrorResponse` body, or None if ``exc`` is not rescued
    """
    status_code = rescue_status(exc, config)
    if status_code is None:
        return None
    payload = ErrorResponse.from_exception(exc, status_code, request_id=request_id)
    logger.debug(f"Rescued {type(exc).__name__} with {int(status_code)}")
    return Response(
        status_code=int(status_code),
        content_type="application/json",
        body=payload.model_dump_json(),
    )
