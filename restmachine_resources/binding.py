"""
Resource binding: from a controller's declared resource to a model class and state names.

A controller at path ``"admin/posts"`` manages the model registered as
``"Admin.Post"``. It keeps the loaded record as ``post`` and the loaded
collection as ``posts``. Namespace segments select the model but never appear in
the accessor names.
"""

import logging
import re
from dataclasses import dataclass
from typing import Optional

from .exceptions import InvalidResourceNameError
from .inflection import classify, pluralize, singularize, underscore
from .registry import ModelRegistry, models

logger = logging.getLogger(__name__)

_SEGMENT = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")


@dataclass(frozen=True)
class ResourceBinding:
    """The resolved names and model for one controller class."""

    resource_name: str
    model_class: type
    plural_accessor: str
    singular_accessor: str

    @property
    def param_key(self) -> str:
        """Request params key that carries this resource's attributes."""
        return self.singular_accessor


def _normalize(name: str) -> str:
    name = underscore(name.strip().strip("/"))
    segments = name.split("/") if name else []
    if not segments or not all(_SEGMENT.match(segment) for segment in segments):
        raise InvalidResourceNameError(name)
    return name


def resolve_binding(controller_path: str, resource_name: Optional[str] = None,
                    model_class: Optional[type] = None,
                    registry: Optional[ModelRegistry] = None) -> ResourceBinding:
    """Resolve the binding for a controller.

    Args:
        controller_path: The controller's path, e.g. ``"admin/posts"``
        resource_name: Explicit resource name overriding the controller path, e.g. ``"locations"``
        model_class: Explicit model class; skips the registry and derives names from the class
        registry: Registry to resolve the model name in (defaults to the global registry)

    Returns:
        The ResourceBinding

    Raises:
        InvalidResourceNameError: If the resource name is empty or malformed
        UnknownModelError: If no model is registered under the classified name
    """
    if model_class is not None:
        singular = underscore(model_class.__name__)
        plural = pluralize(singular)
        binding = ResourceBinding(
            resource_name=plural,
            model_class=model_class,
            plural_accessor=plural,
            singular_accessor=singular,
        )
    else:
        name = _normalize(resource_name if resource_name is not None else controller_path)
        registry = registry if registry is not None else models
        found = registry.lookup(classify(name))
        plural = pluralize(singularize(name.split("/")[-1]))
        binding = ResourceBinding(
            resource_name=plural,
            model_class=found,
            plural_accessor=plural,
            singular_accessor=singularize(plural),
        )

    logger.debug(
        f"Resolved binding for {controller_path!r}: model={binding.model_class.__name__}, "
        f"accessors=({binding.plural_accessor}, {binding.singular_accessor})"
    )
    return binding
