"""
Request and response models exchanged between the host application and resource controllers.

The host builds a :class:`Request` for each inbound call. Controller actions finish by
choosing a :class:`Response` directive - a redirect or a render - which the host turns
into an actual HTTP response.
"""

import logging
from dataclasses import dataclass, field
from enum import Enum
from http import HTTPStatus
from typing import Any, Dict, Iterator, Mapping, Optional, Tuple, Union

# Set up logger for this module
logger = logging.getLogger(__name__)


class Headers:
    """
    Case-insensitive, single-value headers container.

    HTTP header names are case-insensitive per RFC 7230, so ``Referer`` and
    ``referer`` address the same entry. The first-seen casing is kept for iteration.

    Example::

        headers = Headers({"Referer": "/posts"})
        headers.get("referer")   # Returns '/posts'
        headers["Location"] = "/posts/1"
    """

    def __init__(self, data: Optional[Union[Mapping[str, str], "Headers"]] = None):
        # Internal storage: Dict[lowercase_name, Tuple[original_name, value]]
        self._headers: Dict[str, Tuple[str, str]] = {}
        if isinstance(data, Headers):
            self._headers = dict(data._headers)
        elif data:
            for key, value in data.items():
                self.set(key, value)

    def get(self, name: str, default: Optional[str] = None) -> Optional[str]:
        """Get a header value, or ``default`` when absent."""
        if not isinstance(name, str):
            return default
        entry = self._headers.get(name.lower())
        return entry[1] if entry else default

    def set(self, name: str, value: str) -> None:
        """Set a header, replacing any existing value."""
        existing = self._headers.get(name.lower())
        original = existing[0] if existing else name
        self._headers[name.lower()] = (original, value)

    def __setitem__(self, name: str, value: str) -> None:
        self.set(name, value)

    def __getitem__(self, name: str) -> str:
        value = self.get(name)
        if value is None:
            raise KeyError(name)
        return value

    def __delitem__(self, name: str) -> None:
        if not isinstance(name, str) or name.lower() not in self._headers:
            raise KeyError(name)
        del self._headers[name.lower()]

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and name.lower() in self._headers

    def __iter__(self) -> Iterator[str]:
        return (original for original, _ in self._headers.values())

    def __len__(self) -> int:
        return len(self._headers)

    def items(self):
        """Return (name, value) pairs using the original casing."""
        return list(self._headers.values())

    def to_dict(self) -> Dict[str, str]:
        """Convert to a plain dict."""
        return dict(self._headers.values())

    def __eq__(self, other: object) -> bool:
        if isinstance(other, Headers):
            return {k: v for k, (_, v) in self._headers.items()} == \
                {k: v for k, (_, v) in other._headers.items()}
        if isinstance(other, Mapping):
            return self == Headers(other)
        return NotImplemented

    def __repr__(self):
        return f"Headers({self.items()!r})"


class HTTPMethod(Enum):
    """Enumeration of supported HTTP methods."""

    GET = "GET"
    POST = "POST"
    PUT = "PUT"
    DELETE = "DELETE"
    PATCH = "PATCH"


@dataclass
class Request:
    """Represents an inbound request as seen by a resource controller.

    ``params`` is the merged, already-parsed parameter mapping (query string,
    form body and path parameters), with resource attributes nested under the
    resource's param key, e.g. ``{"id": "3", "post": {"title": "Hello"}}``.
    """

    method: HTTPMethod = HTTPMethod.GET
    path: str = "/"
    headers: Union[Dict[str, str], Headers] = field(default_factory=dict)
    params: Dict[str, Any] = field(default_factory=dict)
    path_params: Optional[Dict[str, str]] = None
    format: str = "html"

    def __post_init__(self):
        """Ensure headers is a Headers instance and path params are visible as params."""
        if not isinstance(self.headers, Headers):
            self.headers = Headers(self.headers)
        if self.path_params:
            merged = dict(self.params)
            merged.update(self.path_params)
            self.params = merged

    @property
    def referer(self) -> Optional[str]:
        """The Referer header, if the client sent one."""
        return self.headers.get("Referer")


@dataclass
class Response:
    """A response directive chosen by a controller action.

    Either a redirect (``location`` set, 3xx status) or a render (``template`` set,
    with ``context`` holding the view assigns). The host application is responsible
    for turning a render directive into a body.
    """

    status_code: int = HTTPStatus.OK
    headers: Union[Dict[str, str], Headers] = field(default_factory=dict)
    location: Optional[str] = None
    template: Optional[str] = None
    context: Dict[str, Any] = field(default_factory=dict)
    content_type: Optional[str] = None
    body: Any = None

    def __post_init__(self):
        if not isinstance(self.headers, Headers):
            self.headers = Headers(self.headers)
        if self.location is not None:
            self.headers["Location"] = self.location
        if self.content_type:
            self.headers["Content-Type"] = self.content_type

    @classmethod
    def redirect(cls, location: str, status_code: int = HTTPStatus.FOUND) -> "Response":
        """Build a redirect directive."""
        return cls(status_code=status_code, location=location)

    @classmethod
    def render(cls, template: str, context: Optional[Dict[str, Any]] = None,
               status_code: int = HTTPStatus.OK, content_type: Optional[str] = None) -> "Response":
        """Build a render directive."""
        return cls(status_code=status_code, template=template, context=dict(context or {}),
                   content_type=content_type)
