"""
Custom exceptions for restmachine-resources.

Configuration-time errors (unknown actions, unresolvable resources) are raised
while controllers are being declared. Request-time errors (authorization,
lookup, missing parameters) propagate out of ``ResourceController.process`` to
the host application, which can translate them with :func:`rescue_status`.
"""

import logging
from http import HTTPStatus
from typing import TYPE_CHECKING, Any, Optional

if TYPE_CHECKING:
    from .config import ResourcesConfig

logger = logging.getLogger(__name__)


class ResourceError(Exception):
    """Base exception for restmachine-resources errors."""

    pass


class InvalidActionError(ResourceError, ValueError):
    """Raised when an unknown action name is passed to the inclusion macro."""

    def __init__(self, action: Any):
        self.action = action
        super().__init__(f"Invalid action: {action!r}")


class UnknownModelError(ResourceError, LookupError):
    """Raised when a resource name does not map to a registered model class."""

    def __init__(self, name: str, message: Optional[str] = None):
        self.name = name
        super().__init__(message or f"No model registered under {name!r}")


class InvalidResourceNameError(UnknownModelError):
    """Raised when a resource name is empty or malformed."""

    def __init__(self, name: str):
        super().__init__(name, f"Invalid resource name: {name!r}")


class NotAuthorizedError(ResourceError):
    """Raised when a policy denies a query for a record."""

    def __init__(self, query: Optional[str] = None, record: Any = None, policy: Any = None,
                 message: Optional[str] = None):
        self.query = query
        self.record = record
        self.policy = policy
        if message is None:
            record_name = record.__name__ if isinstance(record, type) else type(record).__name__
            message = f"not allowed to {query} this {record_name}"
        super().__init__(message)


class PolicyNotFoundError(ResourceError, LookupError):
    """Raised when no policy is registered for a model class."""

    pass


class NotFoundError(ResourceError, LookupError):
    """Raised when a record cannot be found."""

    pass


class ActionNotFoundError(NotFoundError):
    """Raised when a controller is asked to process an action it does not enable."""

    def __init__(self, controller: str, action: str):
        self.controller = controller
        self.action = action
        super().__init__(f"The action {action!r} could not be found for {controller}")


class ParameterMissingError(ResourceError, KeyError):
    """Raised when a required request parameter is missing or empty."""

    def __init__(self, param: str):
        self.param = param
        super().__init__(param)

    def __str__(self) -> str:
        return f"param is missing or the value is empty: {self.param}"


class MissingTranslationError(ResourceError, KeyError):
    """Raised when no translation exists for a key and its fallbacks."""

    def __init__(self, locale: str, key: str):
        self.locale = locale
        self.key = key
        super().__init__(f"{locale}.{key}")

    def __str__(self) -> str:
        return f"translation missing: {self.locale}.{self.key}"


def rescue_status(exc: BaseException, config: Optional["ResourcesConfig"] = None) -> Optional[int]:
    """Map a request-time exception to the HTTP status the host should respond with.

    ``NotAuthorizedError`` maps to ``config.forbidden_status``, which is 404 unless
    configured otherwise, so a denied request looks the same as a missing record.

    Args:
        exc: The exception that escaped a controller action
        config: Configuration to read ``forbidden_status`` from (defaults to the global config)

    Returns:
        The status code, or None if the exception is not one this package knows about
    """
    if isinstance(exc, NotAuthorizedError):
        if config is None:
            from .config import get_config
            config = get_config()
        logger.info(f"Rescuing {type(exc).__name__} as {config.forbidden_status}: {exc}")
        return config.forbidden_status
    if isinstance(exc, NotFoundError):
        return HTTPStatus.NOT_FOUND
    if isinstance(exc, ParameterMissingError):
        return HTTPStatus.BAD_REQUEST
    return None
