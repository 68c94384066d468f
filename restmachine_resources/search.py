"""
Optional search objects for the ``list`` action.

When a controller has a search class, ``find_collection`` builds it from the
``q`` request param and returns its results instead of every record::

    @searches.register(Post)
    class PostSearch(ModelSearch):
        def filter_title(self, records, value):
            return [post for post in records if value.lower() in post.title.lower()]
"""

import logging
from typing import Any, Dict, Mapping, Optional

from .registry import Registry

logger = logging.getLogger(__name__)


class ModelSearch:
    """Applies ``filter_<name>`` methods for each present, non-empty search param."""

    def __init__(self, params: Optional[Mapping[str, Any]] = None):
        self.params: Dict[str, Any] = dict(params or {})

    def results(self, collection: Any) -> Any:
        for name, value in self.params.items():
            if value in (None, ""):
                continue
            apply = getattr(self, f"filter_{name}", None)
            if apply is None:
                logger.debug(f"{type(self).__name__} ignoring unknown criteria {name!r}")
                continue
            collection = apply(collection, value)
        return collection


class SearchRegistry(Registry[type]):
    """Maps ``"{Model}Search"`` names to search classes."""

    missing_error = LookupError

    def register(self, model_class: type, name: Optional[str] = None):  # type: ignore[override]
        """Decorator registering a search class for ``model_class``."""
        def decorator(search_class: type) -> type:
            return super(SearchRegistry, self).register(search_class, name or f"{model_class.__name__}Search")
        return decorator


#: Default search registry.
searches = SearchRegistry()
