"""
Authorization collaborators.

Resource controllers authorize through an :class:`Authorizer`. The default,
:class:`PolicyAuthorizer`, looks up a :class:`Policy` subclass for the record's
model and asks it a query named after the current action::

    @policies.register(Post)
    class PostPolicy(Policy):
        permitted_attributes = ("title", "body")

        def show(self):
            return True

        def update(self):
            return self.user is not None and self.record.author_id == self.user.id

        class Scope(Policy.Scope):
            def resolve(self):
                return [post for post in self.scope if post.published]
"""

import logging
from typing import Any, Optional, Protocol, Sequence, Type

from .exceptions import NotAuthorizedError, PolicyNotFoundError
from .registry import Registry

logger = logging.getLogger(__name__)


class Policy:
    """Base policy: denies everything and scopes nothing.

    Query methods are named after controller actions. ``new`` and ``edit`` delegate
    to ``create`` and ``update`` respectively.
    """

    #: Attribute names a request may assign to the record.
    permitted_attributes: Sequence[str] = ()

    def __init__(self, user: Any, record: Any):
        self.user = user
        self.record = record

    def list(self) -> bool:
        return False

    def show(self) -> bool:
        return False

    def create(self) -> bool:
        return False

    def new(self) -> bool:
        return self.create()

    def update(self) -> bool:
        return False

    def edit(self) -> bool:
        return self.update()

    def destroy(self) -> bool:
        return False

    def permitted_attributes_for(self, action: Optional[str]) -> Sequence[str]:
        """Attributes permitted for ``action``.

        A ``permitted_attributes_for_<action>`` attribute or method wins over
        ``permitted_attributes``.
        """
        specific = getattr(self, f"permitted_attributes_for_{action}", None) if action else None
        if specific is not None:
            return specific() if callable(specific) else specific
        attributes = self.permitted_attributes
        return attributes() if callable(attributes) else attributes

    class Scope:
        """Filters a collection down to what ``user`` may see."""

        def __init__(self, user: Any, scope: Any):
            self.user = user
            self.scope = scope

        def resolve(self) -> Any:
            return self.scope


class PolicyRegistry(Registry[Type[Policy]]):
    """Maps model class names to their policies."""

    missing_error = PolicyNotFoundError

    def register(self, model_class: Any, name: Optional[str] = None):  # type: ignore[override]
        """Decorator registering a policy for ``model_class``."""
        def decorator(policy_class: Type[Policy]) -> Type[Policy]:
            return super(PolicyRegistry, self).register(policy_class, name or _model_key(model_class))
        return decorator

    def policy_for(self, model_class: type) -> Type[Policy]:
        """Find the policy for a model class, honoring a ``policy_class`` attribute on the model."""
        explicit = getattr(model_class, "policy_class", None)
        if explicit is not None:
            return explicit
        try:
            return self.lookup(_model_key(model_class))
        except PolicyNotFoundError:
            raise PolicyNotFoundError(f"unable to find policy for {model_class.__name__}") from None


def _model_key(model_class: Any) -> str:
    return f"{model_class.__module__}.{model_class.__qualname__}"


#: Default policy registry.
policies = PolicyRegistry()


class Authorizer(Protocol):
    """Interface resource controllers authorize through."""

    def authorize(self, user: Any, record: Any, query: str) -> Any:
        ...

    def policy_scope(self, user: Any, model_class: type, scope: Any) -> Any:
        ...

    def policy(self, user: Any, record: Any) -> Any:
        ...


class PolicyAuthorizer:
    """Authorizer backed by :class:`Policy` classes found in a :class:`PolicyRegistry`."""

    def __init__(self, registry: Optional[PolicyRegistry] = None):
        self.registry = registry if registry is not None else policies

    def policy(self, user: Any, record: Any) -> Policy:
        """Instantiate the policy for ``record`` (a model instance or class)."""
        model_class = record if isinstance(record, type) else type(record)
        return self.registry.policy_for(model_class)(user, record)

    def authorize(self, user: Any, record: Any, query: str) -> Any:
        """Return ``record`` if the policy allows ``query``.

        Raises:
            NotAuthorizedError: If the query is denied or the policy does not define it
        """
        policy = self.policy(user, record)
        check = getattr(policy, query, None)
        if not callable(check) or not check():
            logger.info(f"{type(policy).__name__} denied {query!r}")
            raise NotAuthorizedError(query=query, record=record, policy=policy)
        return record

    def policy_scope(self, user: Any, model_class: type, scope: Any) -> Any:
        """Resolve the policy scope for ``model_class`` over ``scope``."""
        policy_class = self.registry.policy_for(model_class)
        return policy_class.Scope(user, scope).resolve()


class CurrentUserProvider(Protocol):
    """Supplies the user a request is made on behalf of."""

    def current_user(self, request: Any) -> Any:
        ...


class AnonymousUserProvider:
    """Default provider for applications without authentication: every request is anonymous."""

    def current_user(self, request: Any) -> Any:
        return None
