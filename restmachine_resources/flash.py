"""
Flash notification queue.

A flash holds short user-facing messages keyed by kind (``"success"``,
``"error"``, ...). Entries written with ``flash[key] = value`` are carried into the
next request; entries written through ``flash.now`` are visible only while the
current request is being handled. The host stores :meth:`Flash.to_session_value`
in its session at the end of a request and passes it to :meth:`Flash.from_session`
at the start of the next one.
"""

import logging
from typing import Any, Dict, Iterator, Optional, Set

logger = logging.getLogger(__name__)


class FlashNow:
    """Write-through view of a :class:`Flash` whose entries are discarded at the end of the request."""

    def __init__(self, flash: "Flash"):
        self._flash = flash

    def __setitem__(self, key: str, value: Any) -> None:
        self._flash[key] = value
        self._flash.discard(key)

    def __getitem__(self, key: str) -> Any:
        return self._flash[key]

    def get(self, key: str, default: Any = None) -> Any:
        return self._flash.get(key, default)


class Flash:
    """Response-scoped message store with carry-forward and this-request-only writes."""

    def __init__(self, messages: Optional[Dict[str, Any]] = None, discard: Optional[Set[str]] = None):
        self._messages: Dict[str, Any] = dict(messages or {})
        self._discard: Set[str] = set(discard or ())
        self.now = FlashNow(self)

    @classmethod
    def from_session(cls, value: Optional[Dict[str, Any]]) -> "Flash":
        """Load the messages stored by the previous request.

        Loaded messages are visible during this request and then dropped, unless
        they are explicitly kept.
        """
        messages = dict((value or {}).get("flashes") or {})
        return cls(messages, discard=set(messages))

    def to_session_value(self) -> Optional[Dict[str, Any]]:
        """Return the messages to carry into the next request, or None if there are none."""
        flashes = {key: value for key, value in self._messages.items() if key not in self._discard}
        if not flashes:
            return None
        return {"flashes": flashes}

    def __setitem__(self, key: str, value: Any) -> None:
        self._discard.discard(key)
        self._messages[key] = value

    def __getitem__(self, key: str) -> Any:
        return self._messages[key]

    def __contains__(self, key: object) -> bool:
        return key in self._messages

    def __iter__(self) -> Iterator[str]:
        return iter(self._messages)

    def __len__(self) -> int:
        return len(self._messages)

    def get(self, key: str, default: Any = None) -> Any:
        return self._messages.get(key, default)

    def keys(self):
        return self._messages.keys()

    def items(self):
        return self._messages.items()

    def to_dict(self) -> Dict[str, Any]:
        """All messages visible in this request, including ``now`` entries."""
        return dict(self._messages)

    def delete(self, key: str) -> Any:
        """Remove a message immediately."""
        self._discard.discard(key)
        return self._messages.pop(key, None)

    def discard(self, key: Optional[str] = None) -> None:
        """Keep a message (or all messages) visible now, but drop it at the end of the request."""
        if key is None:
            self._discard.update(self._messages)
        else:
            self._discard.add(key)
        logger.debug(f"Discarding flash {key if key is not None else '(all)'}")

    def keep(self, key: Optional[str] = None) -> None:
        """Carry a message (or all messages) into the next request."""
        if key is None:
            self._discard.clear()
        else:
            self._discard.discard(key)

    def is_discarded(self, key: str) -> bool:
        """Whether ``key`` will be dropped at the end of the request."""
        return key in self._discard

    def __repr__(self):
        return f"Flash({self._messages!r}, discard={sorted(self._discard)!r})"
