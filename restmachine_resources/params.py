"""
Per-request parameter filtering ("strong parameters").

Only attributes the record's policy permits for the current action are ever
assigned to a model; everything else in the request is dropped.
"""

import logging
from typing import TYPE_CHECKING, Any, Dict, Iterable, Mapping, Protocol

from .exceptions import ParameterMissingError

if TYPE_CHECKING:
    from .controller import ResourceController

logger = logging.getLogger(__name__)


def require(params: Mapping[str, Any], key: str) -> Mapping[str, Any]:
    """Return ``params[key]``, which must be a non-empty mapping.

    Raises:
        ParameterMissingError: If the key is absent, empty, or not a mapping
    """
    value = params.get(key)
    if not isinstance(value, Mapping) or not value:
        raise ParameterMissingError(key)
    return value


def permit(attributes: Mapping[str, Any], allowed: Iterable[str]) -> Dict[str, Any]:
    """Return only the entries of ``attributes`` whose keys are in ``allowed``."""
    allowed = set(allowed)
    permitted = {key: value for key, value in attributes.items() if key in allowed}
    dropped = set(attributes) - set(permitted)
    if dropped:
        logger.debug(f"Unpermitted parameters: {sorted(dropped)}")
    return permitted


class ParameterFilter(Protocol):
    """Interface resource controllers use to filter request params for a record."""

    def permitted_attributes(self, controller: "ResourceController", record: Any) -> Dict[str, Any]:
        ...


class PolicyParameterFilter:
    """Filters the resource's params through the policy's permitted attributes."""

    def permitted_attributes(self, controller: "ResourceController", record: Any) -> Dict[str, Any]:
        param_key = controller.resource_binding().param_key
        attributes = require(controller.params, param_key)
        policy = controller.policy(record)
        return permit(attributes, policy.permitted_attributes_for(controller.action_name))
