"""
Translation catalogue used to look up flash messages.

Catalogues are nested mappings per locale, loaded from YAML files or stored
directly::

    en:
      flash:
        success: "Success!"
        create:
          success: "{{ resource_capitalized }} created."
        posts:
          create:
            success_html: "<b>Congratulations</b> on your new {{ resource_name }}!"

Message bodies are Jinja2 templates rendered with the interpolation values.
A body that is not a valid template is logged and returned as written.
Keys ending in the raw suffix (``_html`` by default) hold trusted markup: their
interpolated values are escaped and the result is returned as
:class:`markupsafe.Markup`. All other keys return a plain ``str``, which the view
layer escapes on output.
"""

import logging
from pathlib import Path
from typing import Any, Dict, Iterable, List, Mapping, Optional, Protocol, Sequence, Union

import yaml
from jinja2 import Environment, StrictUndefined, TemplateError, TemplateSyntaxError
from markupsafe import Markup

from .exceptions import MissingTranslationError, ResourceError

logger = logging.getLogger(__name__)


class TranslationError(ResourceError):
    """Raised when a translation exists but cannot be interpolated."""

    pass


class TranslationService(Protocol):
    """Interface the message resolver needs from a translation backend."""

    def translate(self, key: str, default: Union[str, Sequence[str], None] = None,
                  **values: Any) -> str:
        ...


def _deep_merge(target: Dict[str, Any], source: Mapping[str, Any]) -> None:
    for key, value in source.items():
        key = str(key)
        if isinstance(value, Mapping) and isinstance(target.get(key), dict):
            _deep_merge(target[key], value)
        elif isinstance(value, Mapping):
            target[key] = {}
            _deep_merge(target[key], value)
        else:
            target[key] = value


class Translator:
    """Dict-backed translation service with ordered fallback keys.

    Args:
        locale: Default locale for lookups
        raw_suffix: Key suffix marking trusted markup
        separator: Separator between key segments
        raise_on_missing: Raise MissingTranslationError instead of returning a placeholder

    Example:
        translator = Translator()
        translator.store_translations("en", {"flash": {"success": "Done!"}})
        translator.translate("flash.posts.create.success", default=["flash.success"])  # 'Done!'
    """

    def __init__(self, locale: str = "en", raw_suffix: str = "_html", separator: str = ".",
                 raise_on_missing: bool = False):
        self.locale = locale
        self.raw_suffix = raw_suffix
        self.separator = separator
        self.raise_on_missing = raise_on_missing
        self._catalogues: Dict[str, Dict[str, Any]] = {}
        self._plain_env = Environment(autoescape=False, undefined=StrictUndefined)  # nosec B701
        self._raw_env = Environment(autoescape=True, undefined=StrictUndefined)

    def store_translations(self, locale: str, data: Mapping[str, Any]) -> None:
        """Deep-merge ``data`` into the catalogue for ``locale``.

        Storing ``None`` for a leaf removes that translation.
        """
        _deep_merge(self._catalogues.setdefault(locale, {}), data)

    def load_file(self, path: Union[str, Path]) -> None:
        """Load a YAML file whose top-level keys are locales."""
        with open(path, "r", encoding="utf-8") as fh:
            data = yaml.safe_load(fh) or {}
        if not isinstance(data, Mapping):
            raise TranslationError(f"Translation file {path} must contain a mapping of locales")
        for locale, translations in data.items():
            if isinstance(translations, Mapping):
                self.store_translations(str(locale), translations)
        logger.debug(f"Loaded translations from {path}")

    def load_path(self, paths: Iterable[Union[str, Path]]) -> None:
        """Load every ``*.yml``/``*.yaml`` file in the given files or directories."""
        for entry in paths:
            entry = Path(entry)
            if entry.is_dir():
                files: List[Path] = sorted(list(entry.glob("*.yml")) + list(entry.glob("*.yaml")))
            else:
                files = [entry]
            for file in files:
                self.load_file(file)

    def lookup(self, key: str, locale: Optional[str] = None) -> Optional[str]:
        """Return the raw template stored under ``key``, or None."""
        node: Any = self._catalogues.get(locale or self.locale, {})
        for segment in key.split(self.separator):
            if not isinstance(node, Mapping) or segment not in node:
                return None
            node = node[segment]
        if node is None or isinstance(node, Mapping):
            return None
        return str(node)

    def exists(self, key: str, locale: Optional[str] = None) -> bool:
        return self.lookup(key, locale) is not None

    def is_raw_key(self, key: str) -> bool:
        return key.endswith(self.raw_suffix) or key.split(self.separator)[-1] == self.raw_suffix.lstrip("_")

    def translate(self, key: str, default: Union[str, Sequence[str], None] = None,
                  locale: Optional[str] = None, **values: Any) -> str:
        """Translate ``key``, falling back to each key in ``default`` in order.

        A message that does not parse as a template is returned verbatim.

        Args:
            key: Primary lookup key
            default: Fallback key or ordered list of fallback keys
            locale: Locale override
            **values: Interpolation values for the message template

        Returns:
            The rendered message - ``Markup`` when it came from a raw key, ``str`` otherwise

        Raises:
            MissingTranslationError: If nothing matched and ``raise_on_missing`` is set
            TranslationError: If the template references an interpolation value that was not given
        """
        if default is None:
            fallbacks: List[str] = []
        elif isinstance(default, str):
            fallbacks = [default]
        else:
            fallbacks = list(default)
        locale = locale or self.locale

        for candidate in [key] + fallbacks:
            template = self.lookup(candidate, locale)
            if template is None:
                continue
            if candidate != key:
                logger.debug(f"Translation {key!r} fell back to {candidate!r}")
            return self._interpolate(candidate, template, values)

        if self.raise_on_missing:
            raise MissingTranslationError(locale, key)
        logger.warning(f"translation missing: {locale}.{key}")
        return f"translation missing: {locale}.{key}"

    def _interpolate(self, key: str, template: str, values: Mapping[str, Any]) -> str:
        raw = self.is_raw_key(key)
        env = self._raw_env if raw else self._plain_env
        try:
            compiled = env.from_string(template)
        except TemplateSyntaxError as e:
            logger.warning(f"Translation {key!r} is not a valid template, using it verbatim: {e}")
            return Markup(template) if raw else template
        try:
            rendered = compiled.render(**values)
        except TemplateError as e:
            raise TranslationError(f"Failed to interpolate translation {key!r}: {e}") from e
        return Markup(rendered) if raw else rendered


_default_translator: Optional[Translator] = None


def get_translator() -> Translator:
    """Return the process-wide translator, creating it from the global config on first use."""
    global _default_translator
    if _default_translator is None:
        from .config import get_config
        config = get_config()
        _default_translator = Translator(
            locale=config.locale,
            raw_suffix=config.raw_suffix,
            separator=config.key_separator,
            raise_on_missing=config.raise_on_missing_translation,
        )
    return _default_translator


def set_translator(translator: Optional[Translator]) -> None:
    """Install (or with None, reset) the process-wide translator."""
    global _default_translator
    _default_translator = translator
