"""
Configuration for restmachine-resources.

Values are resolved with the same priority restmachine uses for its metrics
settings: explicit argument, then ``RESTMACHINE_RESOURCES_*`` environment
variable, then the built-in default.
"""

import logging
import os
from dataclasses import dataclass, fields, replace
from typing import Any, Dict, Optional, Tuple

logger = logging.getLogger(__name__)

ENV_PREFIX = "RESTMACHINE_RESOURCES_"

_TRUE_VALUES = ('true', '1', 'yes', 'on')
_FALSE_VALUES = ('false', '0', 'no', 'off')


@dataclass(frozen=True)
class ResourcesConfig:
    """Settings shared by every resource controller.

    Attributes:
        message_scope: Prefix for every flash message lookup key. Set to an empty
                       string to look keys up at the top level of the catalogue.
        raw_suffix: Key suffix that marks a translation as trusted markup.
        key_separator: Separator between translation key segments.
        locale: Locale used for message lookups.
        redirect_codes: Status codes that count as a redirect. A success message is
                        only carried into the next request when the response is one of these.
        forbidden_status: Status the host should use for ``NotAuthorizedError``.
                          404 by default so that denied records look missing; use 403
                          to surface the denial.
        prefill_new: Whether the ``new`` action treats resource params in the request
                     as a pre-filled submission (authorize and assign) instead of
                     building a blank record.
        raise_on_missing_translation: Raise ``MissingTranslationError`` instead of
                                      returning a "translation missing" placeholder.
        success_key: Flash key for success messages.
        error_key: Flash key for failure messages.

    Examples:
        # Surface authorization failures as 403
        ResourcesConfig(forbidden_status=403)

        # Read overrides from the environment
        ResourcesConfig.from_env()
    """

    message_scope: str = "flash"
    raw_suffix: str = "_html"
    key_separator: str = "."
    locale: str = "en"
    redirect_codes: Tuple[int, ...] = (301, 302, 303, 307, 308)
    forbidden_status: int = 404
    prefill_new: bool = True
    raise_on_missing_translation: bool = False
    success_key: str = "success"
    error_key: str = "error"

    @classmethod
    def from_env(cls, environ: Optional[Dict[str, str]] = None, **overrides: Any) -> "ResourcesConfig":
        """Build a config from ``RESTMACHINE_RESOURCES_*`` environment variables.

        Args:
            environ: Mapping to read from (defaults to ``os.environ``)
            **overrides: Explicit values, which win over the environment

        Returns:
            A new ResourcesConfig
        """
        environ = os.environ if environ is None else environ
        values: Dict[str, Any] = {}
        for config_field in fields(cls):
            raw = environ.get(ENV_PREFIX + config_field.name.upper())
            if raw is None:
                continue
            try:
                values[config_field.name] = _coerce(raw, config_field.default)
            except ValueError:
                logger.warning(
                    f"Ignoring invalid value {raw!r} for {ENV_PREFIX}{config_field.name.upper()}"
                )
        values.update(overrides)
        return cls(**values)


def _coerce(raw: str, default: Any) -> Any:
    if isinstance(default, bool):
        value = raw.strip().lower()
        if value in _TRUE_VALUES:
            return True
        if value in _FALSE_VALUES:
            return False
        raise ValueError(raw)
    if isinstance(default, int):
        return int(raw)
    if isinstance(default, tuple):
        return tuple(int(part) for part in raw.split(",") if part.strip())
    return raw


_config: Optional[ResourcesConfig] = None


def get_config() -> ResourcesConfig:
    """Return the process-wide config, reading the environment on first use."""
    global _config
    if _config is None:
        _config = ResourcesConfig.from_env()
    return _config


def configure(config: Optional[ResourcesConfig] = None, **overrides: Any) -> ResourcesConfig:
    """Replace the process-wide config.

    Args:
        config: A complete config to install. Defaults to the current config.
        **overrides: Individual fields to change

    Returns:
        The installed config
    """
    global _config
    base = config if config is not None else get_config()
    _config = replace(base, **overrides) if overrides else base
    return _config


def reset_config() -> None:
    """Forget the process-wide config so the next ``get_config`` rereads the environment."""
    global _config
    _config = None
