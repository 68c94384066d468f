"""
View rendering for render directives.

Controllers only choose a template (``"posts/new"``) and its assigns; the host calls
:func:`render_response` to produce the body with Jinja2.
"""

import logging
import os
from typing import Any, Mapping, Optional

from jinja2 import Environment, FileSystemLoader, PackageLoader, select_autoescape
from jinja2.loaders import BaseLoader

from .models import Response

logger = logging.getLogger(__name__)

#: Template file extension per request format.
FORMAT_EXTENSIONS = {"html": ".html", "js": ".js", "json": ".json"}

#: Content type per request format.
FORMAT_CONTENT_TYPES = {
    "html": "text/html; charset=utf-8",
    "js": "text/javascript; charset=utf-8",
    "json": "application/json",
}


def _loader_for(package: str) -> BaseLoader:
    if os.path.isdir(package):
        return FileSystemLoader(package)
    candidate = os.path.join(os.getcwd(), package)
    if os.path.isdir(candidate):
        return FileSystemLoader(candidate)
    try:
        return PackageLoader(package)
    except (ImportError, ValueError) as e:
        raise ValueError(f"Could not find template directory or package '{package}'") from e


def render(template: str, package: str = "views", unsafe: bool = False,
           context: Optional[Mapping[str, Any]] = None) -> str:
    """
    Render a template file using Jinja2.

    Args:
        template: Path to the template relative to the views directory, e.g. ``"posts/show.html"``
        package: Directory path or package name holding the templates. Defaults to "views".
        unsafe: If True, autoescape is disabled (use with caution).
        context: Variables passed to the template.

    Returns:
        The rendered template as a string.

    Raises:
        ValueError: If the templates or the template itself cannot be found
    """
    env = Environment(  # nosec B701
        loader=_loader_for(package),
        autoescape=select_autoescape() if not unsafe else False,
    )
    try:
        return env.get_template(template).render(**dict(context or {}))
    except Exception as e:
        raise ValueError(f"Failed to render template '{template}' from '{package}': {e}") from e


def render_response(response: Response, package: str = "views", format: str = "html",
                    **extra_context: Any) -> Response:
    """Fill in the body of a render directive.

    Redirects and responses that already carry a body are returned unchanged.

    Example:
        response = PostsController(request).process("show")
        render_response(response, package="./templates")   # renders posts/show.html
    """
    if response.template is None or response.body is not None:
        return response
    extension = FORMAT_EXTENSIONS.get(format, f".{format}")
    context = dict(response.context)
    context.update(extra_context)
    logger.debug(f"Rendering {response.template}{extension}")
    response.body = render(response.template + extension, package=package, context=context)
    if "Content-Type" not in response.headers:
        content_type: Optional[str] = response.content_type or FORMAT_CONTENT_TYPES.get(format)
        if content_type:
            response.content_type = content_type
            response.headers["Content-Type"] = content_type
    return response
