"""
Default implementations of the seven conventional REST actions.

Each behavior is a plain function written against the :class:`ResourceController`
hooks (``find_model``, ``vest``, ``policy_scope``, ...), so it can be installed on
any controller class as a method. ``ACTIONS`` is the static table the inclusion
macro selects from.
"""

from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType
from typing import TYPE_CHECKING, Any, Callable, Mapping, Optional

if TYPE_CHECKING:
    from .controller import ResourceController

SuccessCallback = Optional[Callable[[], Any]]


class ActionName(str, Enum):
    """The conventional REST actions."""

    LIST = "list"
    SHOW = "show"
    NEW = "new"
    CREATE = "create"
    EDIT = "edit"
    UPDATE = "update"
    DESTROY = "destroy"


def list_resources(self: "ResourceController") -> None:
    """Load every record the current user may see into the plural state."""
    self.authorize(self.model_class)
    self.resources = self.policy_scope(self.find_collection())


def show_resource(self: "ResourceController") -> None:
    """Load the requested record into the singular state."""
    self.resource = self.authorize(self.find_model())


def new_resource(self: "ResourceController") -> None:
    """Build a new record for the form.

    When ``prefill_new`` is on and the request carries resource params, the record
    is vested with them (a pre-filled form); otherwise it is built blank.
    """
    if self.prefill_new and self.resource_binding().param_key in self.params:
        self.resource = self.vest(self.new_model())
    else:
        self.resource = self.authorize(self.new_model())


def create_resource(self: "ResourceController", on_success: SuccessCallback = None) -> None:
    """Build, vest and save a new record.

    Args:
        on_success: Called instead of redirecting to the new record after a successful save
    """
    self.resource = record = self.vest(self.new_model())
    if self.save_model(record):
        _succeed(self, on_success, lambda: self.redirect_to(self.location_for(record)))
    else:
        _fail_and_render(self, ActionName.CREATE)


def edit_resource(self: "ResourceController") -> None:
    """Load the requested record for the edit form."""
    self.resource = self.authorize(self.find_model())


def update_resource(self: "ResourceController", on_success: SuccessCallback = None) -> None:
    """Vest the requested record with the submitted params and save it.

    Args:
        on_success: Called instead of redirecting to the record after a successful save
    """
    self.resource = record = self.vest(self.find_model())
    if self.save_model(record):
        _succeed(self, on_success, lambda: self.redirect_to(self.location_for(record)))
    else:
        _fail_and_render(self, ActionName.UPDATE)


def destroy_resource(self: "ResourceController", on_success: SuccessCallback = None) -> None:
    """Destroy the requested record.

    A record that refuses to be destroyed leaves an error message and redirects back
    to the referring page, or to the record itself when there is no referrer.

    Args:
        on_success: Called instead of redirecting to the list after a successful destroy
    """
    self.resource = record = self.authorize(self.find_model())
    if self.destroy_model(record):
        _succeed(self, on_success, lambda: self.redirect_to(self.location_for()))
    else:
        error_key = self.config.error_key
        self.flash[error_key] = self.flash_message(error_key)
        self.redirect_back(fallback_location=self.location_for(record))


def _succeed(self: "ResourceController", on_success: SuccessCallback, default: Callable[[], Any]) -> None:
    success_key = self.config.success_key
    self.flash[success_key] = self.flash_message(success_key)
    if on_success is not None:
        on_success()
    else:
        default()
    # A message meant for the page after a redirect must not leak into a later request.
    if not self.redirected:
        self.flash.discard(success_key)


def _fail_and_render(self: "ResourceController", action: ActionName) -> None:
    error_key = self.config.error_key
    self.flash.now[error_key] = self.flash_message(error_key)
    self.render(ACTIONS[action.value].form_template)


@dataclass(frozen=True)
class ActionDescriptor:
    """A named action behavior.

    Attributes:
        name: The action name
        behavior: Function installed as the controller method
        form_template: View re-rendered when persistence fails (create/update only)
    """

    name: ActionName
    behavior: Callable[..., None]
    form_template: Optional[str] = None


ACTIONS: Mapping[str, ActionDescriptor] = MappingProxyType({
    descriptor.name.value: descriptor
    for descriptor in (
        ActionDescriptor(ActionName.LIST, list_resources),
        ActionDescriptor(ActionName.SHOW, show_resource),
        ActionDescriptor(ActionName.NEW, new_resource),
        ActionDescriptor(ActionName.CREATE, create_resource, form_template="new"),
        ActionDescriptor(ActionName.EDIT, edit_resource),
        ActionDescriptor(ActionName.UPDATE, update_resource, form_template="edit"),
        ActionDescriptor(ActionName.DESTROY, destroy_resource),
    )
})

ALL_ACTIONS = tuple(ACTIONS)
