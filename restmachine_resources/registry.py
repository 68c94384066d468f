"""
Registries that map names to classes.

Resource controllers find their model by class name (``"Post"``, or
``"Admin.Post"`` for a namespaced model), so models must be registered
before a controller first resolves its binding. ``Registry`` is also the base
for the policy and search registries.
"""

import logging
from typing import Callable, Dict, Generic, Iterator, Optional, Type, TypeVar

from .exceptions import UnknownModelError
from .inflection import camelize

logger = logging.getLogger(__name__)

T = TypeVar("T")


def qualified_name(cls: type, namespace: Optional[str] = None) -> str:
    """Return the registry name for ``cls``, e.g. ``"Admin.Post"`` for namespace ``"admin"``."""
    if not namespace:
        return cls.__name__
    return f"{camelize(namespace.strip('/'))}.{cls.__name__}"


class Registry(Generic[T]):
    """A name -> class mapping with decorator-style registration."""

    #: Exception raised by :meth:`lookup` for unknown names.
    missing_error: Callable[[str], Exception] = KeyError

    def __init__(self):
        self._entries: Dict[str, T] = {}

    def register(self, value: T, name: str) -> T:
        """Register ``value`` under ``name``, replacing any previous entry."""
        if name in self._entries and self._entries[name] is not value:
            logger.debug(f"Replacing {type(self).__name__} entry {name!r}")
        self._entries[name] = value
        return value

    def lookup(self, name: str) -> T:
        """Return the entry named ``name``, raising ``missing_error`` if absent."""
        try:
            return self._entries[name]
        except KeyError:
            raise self.missing_error(name) from None

    def get(self, name: str, default: Optional[T] = None) -> Optional[T]:
        return self._entries.get(name, default)

    def unregister(self, name: str) -> None:
        self._entries.pop(name, None)

    def clear(self) -> None:
        self._entries.clear()

    def __contains__(self, name: object) -> bool:
        return name in self._entries

    def __iter__(self) -> Iterator[str]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)


class ModelRegistry(Registry[type]):
    """Global type registry consulted by resource binding."""

    missing_error = UnknownModelError

    def add(self, model_class: Type[T], namespace: Optional[str] = None, name: Optional[str] = None) -> Type[T]:
        """Register a model class under its (optionally namespaced) class name."""
        self.register(model_class, name or qualified_name(model_class, namespace))
        return model_class


#: Default registry used when a controller does not declare its own.
models = ModelRegistry()


def register_model(model_class: Optional[type] = None, *, namespace: Optional[str] = None,
                   name: Optional[str] = None, registry: Optional[ModelRegistry] = None):
    """Register a model class so controllers can find it by name.

    Can be used bare or with arguments::

        @register_model
        class Post(MemoryModel):
            ...

        @register_model(namespace="admin")
        class Post(MemoryModel):   # registered as "Admin.Post"
            ...
    """
    target = registry if registry is not None else models

    def decorator(cls):
        return target.add(cls, namespace=namespace, name=name)

    if model_class is not None:
        return decorator(model_class)
    return decorator
