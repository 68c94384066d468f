"""
Flash message resolution.

A message is looked up through a prioritized list of keys, most specific first::

    flash.{controller_path}.{action}.{status}
    flash.{controller_path}.{action}.{status}_html
    flash.{action}.{status}
    flash.{action}.{status}_html
    flash.{status}
    flash.{status}_html

``controller_path`` uses the key separator between namespace segments, so
``Admin::DraftsController#update`` with status ``success`` first tries
``flash.admin.drafts.update.success``.
"""

import logging
from typing import Any, List, Optional

from .config import ResourcesConfig, get_config
from .i18n import TranslationService, get_translator

logger = logging.getLogger(__name__)


class MessageResolver:
    """Builds message key chains and resolves them against a translation service.

    Args:
        translator: Translation service (defaults to the process-wide translator)
        config: Supplies the scope, raw suffix and key separator (defaults to the global config)
    """

    def __init__(self, translator: Optional[TranslationService] = None,
                 config: Optional[ResourcesConfig] = None):
        self.config = config or get_config()
        self.translator = translator if translator is not None else get_translator()

    def keys(self, controller_path: str, action: str, status: str) -> List[str]:
        """Return the candidate lookup keys for a message, most specific first."""
        sep = self.config.key_separator
        controller_key = sep.join(segment for segment in controller_path.split("/") if segment)
        scope = self.config.message_scope
        prefix = f"{scope}{sep}" if scope else ""

        bases = [
            sep.join(part for part in (controller_key, action, str(status)) if part),
            f"{action}{sep}{status}",
            str(status),
        ]
        keys: List[str] = []
        for base in bases:
            keys.append(f"{prefix}{base}")
            keys.append(f"{prefix}{base}{self.config.raw_suffix}")
        return keys

    def resolve(self, controller_path: str, action: str, status: str, **values: Any) -> str:
        """Resolve the message for ``status`` in the given controller and action.

        Args:
            controller_path: Controller path, e.g. ``"admin/posts"``
            action: Current action name
            status: Message status, e.g. ``"success"`` or ``"error"``
            **values: Interpolation values for the message template

        Returns:
            The first translation found in key priority order
        """
        keys = self.keys(controller_path, action, status)
        logger.debug(f"Resolving flash message via {keys}")
        return self.translator.translate(keys[0], default=keys[1:], **values)
