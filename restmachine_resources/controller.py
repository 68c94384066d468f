"""
Resource controllers and the action inclusion macro.

A resource controller is instantiated once per request and carries everything that
request needs: the request itself, the flash, the loaded record or collection, and
the collaborators used for authorization, parameter filtering and message lookup.
Which of the seven conventional actions it answers is decided when the class is
declared::

    class PostsController(ResourceController, actions=["list", "show"]):
        pass

    @resource_actions()                 # all seven actions
    class CommentsController(ResourceController):
        namespace = "admin"             # model "Admin.Comment", path "admin/comments"

    response = PostsController(request).process("show")
"""

import logging
from types import MappingProxyType
from typing import Any, Callable, Dict, FrozenSet, Iterable, Mapping, Optional, Union

from .actions import ACTIONS, ALL_ACTIONS, ActionDescriptor, ActionName
from .authorization import AnonymousUserProvider, Authorizer, CurrentUserProvider, PolicyAuthorizer
from .binding import ResourceBinding, resolve_binding
from .config import ResourcesConfig, get_config
from .exceptions import ActionNotFoundError, InvalidActionError, NotFoundError
from .flash import Flash
from .i18n import TranslationService, get_translator
from .inflection import humanize, underscore
from .messages import MessageResolver
from .models import Request, Response
from .params import ParameterFilter, PolicyParameterFilter
from .registry import ModelRegistry
from .search import SearchRegistry, searches

logger = logging.getLogger(__name__)

ActionSpec = Union[str, ActionName]

_UNSET = object()


class ResourceState:
    """The record and collection loaded by the current action.

    Besides the generic ``resource``/``resources`` slots, values are reachable under
    the binding's accessor names, so a posts controller can use ``state.post`` and
    ``state.posts``.
    """

    def __init__(self, binding: Callable[[], ResourceBinding]):
        object.__setattr__(self, "_binding", binding)
        object.__setattr__(self, "resource", None)
        object.__setattr__(self, "resources", None)

    def _slot_for(self, name: str) -> Optional[str]:
        binding = self._binding()
        if name == binding.singular_accessor:
            return "resource"
        if name == binding.plural_accessor:
            return "resources"
        return None

    def __getattr__(self, name: str) -> Any:
        if name.startswith("_"):
            raise AttributeError(name)
        slot = self._slot_for(name)
        if slot is None:
            raise AttributeError(f"{type(self).__name__} has no attribute {name!r}")
        return object.__getattribute__(self, slot)

    def __setattr__(self, name: str, value: Any) -> None:
        if name in ("resource", "resources"):
            object.__setattr__(self, name, value)
            return
        slot = self._slot_for(name)
        if slot is None:
            raise AttributeError(f"{type(self).__name__} has no attribute {name!r}")
        object.__setattr__(self, slot, value)

    def as_dict(self) -> Dict[str, Any]:
        """View assigns keyed by accessor name."""
        binding = self._binding()
        return {
            binding.singular_accessor: self.resource,
            binding.plural_accessor: self.resources,
        }


class ResourceController:
    """Base class for controllers serving a conventional REST resource.

    Class Attributes:
        namespace: Namespace path, e.g. ``"admin"``. Selects ``Admin.<Model>`` and prefixes
                   the controller path and message keys.
        resource_name: Explicit resource name when the controller name does not match it,
                       e.g. ``"locations"`` for a ``PlacesController``.
        resource_model: Explicit model class; skips registry lookup.
        prefill_new: Whether ``new`` vests the record with request params. ``None`` uses
                     ``config.prefill_new``.
        search_class: Explicit search class for the ``list`` action.
        config: Per-class configuration (defaults to the global config).
        model_registry / search_registry: Registries to resolve names in.
        authorizer / parameter_filter / translator / current_user_provider: Default
            collaborators; each can also be passed per instance.
        enabled_actions: Names of the actions this controller answers (set by :func:`activate`).
        action_table: Read-only mapping of enabled action names to descriptors.
    """

    namespace: Optional[str] = None
    resource_name: Optional[str] = None
    resource_model: Optional[type] = None
    prefill_new: Optional[bool] = None
    search_class: Optional[type] = None

    config: Optional[ResourcesConfig] = None
    model_registry: Optional[ModelRegistry] = None
    search_registry: Optional[SearchRegistry] = None

    authorizer: Optional[Authorizer] = None
    parameter_filter: Optional[ParameterFilter] = None
    translator: Optional[TranslationService] = None
    current_user_provider: Optional[CurrentUserProvider] = None

    enabled_actions: FrozenSet[str] = frozenset()
    action_table: Mapping[str, ActionDescriptor] = MappingProxyType({})

    def __init_subclass__(cls, actions: Optional[Iterable[ActionSpec]] = None,
                          resource: Optional[str] = None, model: Optional[type] = None, **kwargs: Any):
        """Activate actions declared as class keywords.

        ``class PostsController(ResourceController, actions=["list", "show"])`` is
        equivalent to ``activate(PostsController, ["list", "show"])``.
        """
        super().__init_subclass__(**kwargs)
        if actions is not None:
            activate(cls, actions, resource=resource, model=model)
        elif resource is not None or model is not None:
            raise TypeError(f"{cls.__name__}: resource/model keywords require actions=...")

    def __init__(self, request: Optional[Request] = None, *, flash: Optional[Flash] = None,
                 authorizer: Optional[Authorizer] = None,
                 parameter_filter: Optional[ParameterFilter] = None,
                 translator: Optional[TranslationService] = None,
                 current_user_provider: Optional[CurrentUserProvider] = None,
                 config: Optional[ResourcesConfig] = None):
        cls = type(self)
        self.request = request if request is not None else Request()
        self.flash = flash if flash is not None else Flash()
        self.response: Optional[Response] = None
        self.action_name: Optional[str] = None
        self.search: Any = None
        self.state = ResourceState(cls.resource_binding)

        self.config = config or cls.config or get_config()
        if self.prefill_new is None:
            self.prefill_new = self.config.prefill_new

        self.authorizer = authorizer or cls.authorizer or PolicyAuthorizer()
        self.parameter_filter = parameter_filter or cls.parameter_filter or PolicyParameterFilter()
        self.current_user_provider = (
            current_user_provider or cls.current_user_provider or AnonymousUserProvider()
        )
        self.messages = MessageResolver(translator or cls.translator or get_translator(), self.config)
        self._current_user: Any = _UNSET

    # -- class-level naming and binding -------------------------------------------------

    @classmethod
    def controller_name(cls) -> str:
        """Underscored class name without the ``Controller`` suffix, e.g. ``"blog_posts"``."""
        name = cls.__name__
        if name.endswith("Controller") and name != "Controller":
            name = name[:-len("Controller")]
        return underscore(name)

    @classmethod
    def controller_path(cls) -> str:
        """Namespace plus controller name, e.g. ``"admin/blog_posts"``."""
        if cls.namespace:
            return f"{cls.namespace.strip('/')}/{cls.controller_name()}"
        return cls.controller_name()

    @classmethod
    def resource_binding(cls) -> ResourceBinding:
        """Resolve (once per class) the model and accessor names for this controller."""
        binding = cls.__dict__.get("_resource_binding")
        if binding is None:
            binding = resolve_binding(
                cls.controller_path(),
                resource_name=cls.resource_name,
                model_class=cls.resource_model,
                registry=cls.model_registry,
            )
            cls._resource_binding = binding
        return binding

    @classmethod
    def reset_resource_binding(cls) -> None:
        """Forget the cached binding so it is resolved again on next access."""
        if "_resource_binding" in cls.__dict__:
            del cls._resource_binding

    @classmethod
    def model_search_class(cls) -> type:
        """Search class for the ``list`` action.

        Raises:
            LookupError: If neither ``search_class`` nor a registered ``"{Model}Search"`` exists
        """
        if cls.search_class is not None:
            return cls.search_class
        registry = cls.search_registry if cls.search_registry is not None else searches
        return registry.lookup(f"{cls.resource_binding().model_class.__name__}Search")

    @classmethod
    def has_model_search(cls) -> bool:
        try:
            cls.model_search_class()
        except LookupError:
            return False
        return True

    # -- request state ---------------------------------------------------------------------

    @property
    def params(self) -> Dict[str, Any]:
        return self.request.params

    @property
    def model_class(self) -> type:
        return self.resource_binding().model_class

    @property
    def resource(self) -> Any:
        """The singular resource state (e.g. the loaded post)."""
        return self.state.resource

    @resource.setter
    def resource(self, value: Any) -> None:
        self.state.resource = value

    @property
    def resources(self) -> Any:
        """The plural resource state (e.g. the loaded posts)."""
        return self.state.resources

    @resources.setter
    def resources(self, value: Any) -> None:
        self.state.resources = value

    @property
    def current_user(self) -> Any:
        if self._current_user is _UNSET:
            self._current_user = self.current_user_provider.current_user(self.request)
        return self._current_user

    # -- collaborator hooks ------------------------------------------------------------------

    def authorize(self, record: Any, query: Optional[str] = None) -> Any:
        """Authorize ``record`` for ``query`` (defaults to the current action) and return it."""
        return self.authorizer.authorize(self.current_user, record, query or self.action_name)

    def policy(self, record: Any) -> Any:
        return self.authorizer.policy(self.current_user, record)

    def policy_scope(self, scope: Any) -> Any:
        return self.authorizer.policy_scope(self.current_user, self.model_class, scope)

    def permitted_attributes(self, record: Any) -> Dict[str, Any]:
        return self.parameter_filter.permitted_attributes(self, record)

    def find_collection(self) -> Any:
        """All records, or the search results when a model search class exists."""
        if self.has_model_search():
            self.search = self.model_search_class()(self.params.get("q") or {})
            return self.search.results(self.model_class.all())
        return self.model_class.all()

    def find_model(self) -> Any:
        """The record named by the ``id`` param.

        Raises:
            NotFoundError: If there is no ``id`` param or the model layer cannot find the record
        """
        if "id" not in self.params:
            raise NotFoundError(f"Couldn't find {self.model_class.__name__} without an id")
        return self.model_class.find(self.params["id"])

    def new_model(self) -> Any:
        return self.model_class()

    def assign_attributes(self, record: Any) -> Any:
        """Assign the permitted request params to ``record`` without saving it."""
        record.assign_attributes(self.permitted_attributes(record))
        return record

    def vest(self, record: Any) -> Any:
        """Authorize ``record`` and assign the permitted params to it."""
        return self.assign_attributes(self.authorize(record))

    def save_model(self, record: Any) -> bool:
        return bool(record.save())

    def destroy_model(self, record: Any) -> bool:
        return bool(record.destroy())

    # -- messages ------------------------------------------------------------------------------

    def flash_options(self) -> Dict[str, Any]:
        """Interpolation values for flash messages.

        ``locale`` and ``default`` are reserved by the translator and cannot be used.
        """
        name = humanize(self.resource_binding().singular_accessor).lower()
        return {
            "resource_name": name,
            "resource_capitalized": name[:1].upper() + name[1:],
        }

    def flash_message(self, status: str) -> str:
        """The message for ``status`` in this controller and action."""
        return self.messages.resolve(
            type(self).controller_path(), self.action_name or "", status, **self.flash_options()
        )

    # -- responses -----------------------------------------------------------------------------

    def location_for(self, record: Any = None) -> str:
        """Path of ``record``, or of the collection when no record is given."""
        base = "/" + type(self).controller_path()
        if record is None:
            return base
        to_param = getattr(record, "to_param", None)
        ident = to_param() if callable(to_param) else getattr(record, "id")
        return f"{base}/{ident}"

    def view_assigns(self) -> Dict[str, Any]:
        assigns = self.state.as_dict()
        assigns["flash"] = self.flash
        if self.search is not None:
            assigns["search"] = self.search
        return assigns

    def redirect_to(self, location: str, status_code: int = 302) -> Response:
        self.response = Response.redirect(location, status_code)
        return self.response

    def redirect_back(self, fallback_location: str, status_code: int = 302) -> Response:
        """Redirect to the referring page, or to ``fallback_location`` without a Referer."""
        return self.redirect_to(self.request.referer or fallback_location, status_code)

    def render(self, template: Optional[str] = None, status_code: int = 200,
               content_type: Optional[str] = None) -> Response:
        """Render a view of this controller (``"new"``) or any view (``"shared/form"``)."""
        template = template or self.action_name or ""
        if "/" not in template:
            template = f"{type(self).controller_path()}/{template}"
        self.response = Response.render(template, self.view_assigns(), status_code, content_type)
        return self.response

    @property
    def performed(self) -> bool:
        return self.response is not None

    @property
    def redirected(self) -> bool:
        return self.response is not None and int(self.response.status_code) in self.config.redirect_codes

    # -- dispatch --------------------------------------------------------------------------------

    def default_action(self, name: ActionSpec, **kwargs: Any) -> None:
        """Run the default behavior for action ``name``, even if the class overrides it."""
        key = name.value if isinstance(name, ActionName) else name
        if key not in ACTIONS:
            raise InvalidActionError(name)
        ACTIONS[key].behavior(self, **kwargs)

    def process(self, action: ActionSpec) -> Response:
        """Run an enabled action and return its response directive.

        Authorization, lookup and parameter errors propagate to the caller.

        Raises:
            ActionNotFoundError: If the action is not enabled on this controller
        """
        name = action.value if isinstance(action, ActionName) else action
        if name not in self.enabled_actions:
            raise ActionNotFoundError(type(self).__name__, name)
        self.action_name = name
        logger.debug(f"Processing {type(self).__name__}#{name}")
        getattr(self, name)()
        if self.response is None:
            self.render(name)
        return self.response


def _normalize_actions(actions: Optional[Union[ActionSpec, Iterable[ActionSpec]]]) -> list:
    if actions is None:
        return []
    if isinstance(actions, (str, ActionName)):
        actions = [actions]
    names = []
    for action in actions:
        key = action.value if isinstance(action, ActionName) else action
        if not isinstance(key, str) or key not in ACTIONS:
            raise InvalidActionError(action)
        names.append(key)
    return names


def activate(controller_cls: type, actions: Optional[Union[ActionSpec, Iterable[ActionSpec]]] = None, *,
             resource: Optional[str] = None, model: Optional[type] = None) -> type:
    """Enable default action behaviors on a controller class.

    Every name is validated before anything changes, so an invalid name leaves the
    class untouched. With no names, all seven actions are enabled. A method the class
    body defines itself is kept; the default stays reachable via ``default_action``.

    Args:
        controller_cls: The ResourceController subclass
        actions: Action names (strings or ActionName), or None for all
        resource: Explicit resource name, e.g. ``"locations"``
        model: Explicit model class

    Returns:
        The controller class

    Raises:
        InvalidActionError: If any name is not one of the seven actions
    """
    selected = _normalize_actions(actions) or list(ALL_ACTIONS)

    if resource is not None:
        controller_cls.resource_name = resource
    if model is not None:
        controller_cls.resource_model = model
    controller_cls.reset_resource_binding()

    for name in selected:
        behavior = ACTIONS[name].behavior
        own = controller_cls.__dict__.get(name)
        if own is not None and own is not behavior:
            logger.debug(f"{controller_cls.__name__} defines {name!r} itself; keeping it")
            continue
        setattr(controller_cls, name, behavior)

    enabled = frozenset(controller_cls.enabled_actions) | frozenset(selected)
    controller_cls.enabled_actions = enabled
    controller_cls.action_table = MappingProxyType(
        {name: ACTIONS[name] for name in ALL_ACTIONS if name in enabled}
    )
    logger.debug(f"Activated {sorted(selected)} on {controller_cls.__name__}")
    return controller_cls


def resource_actions(*actions: ActionSpec, resource: Optional[str] = None,
                     model: Optional[type] = None) -> Callable[[type], type]:
    """Class decorator form of :func:`activate`.

    Example::

        @resource_actions("list", "show", resource="locations")
        class PlacesController(ResourceController):
            pass
    """
    names = _normalize_actions(actions)

    def decorator(controller_cls: type) -> type:
        return activate(controller_cls, names, resource=resource, model=model)

    return decorator
