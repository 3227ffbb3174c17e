"""
Documentation pages.

Renders a Swagger UI or ReDoc page that loads a document from ``spec_url``.
Templates live in ``charter/docs/templates`` and are rendered with Jinja2.
"""

from __future__ import annotations

from typing import Any, Dict, Optional

from jinja2 import Environment, PackageLoader, select_autoescape

SWAGGER_UI_VERSION = "5.11.0"
DOC_STYLES = ("swagger", "redoc")

_env: Optional[Environment] = None


def _environment() -> Environment:
    global _env
    if _env is None:
        _env = Environment(
            loader=PackageLoader("charter.docs", "templates"),
            autoescape=select_autoescape(enabled_extensions=["html"]),
            trim_blocks=True,
            lstrip_blocks=True,
        )
    return _env


def render_swagger_ui(
    title: str,
    spec_url: str = "/openapi.json",
    *,
    theme: str = "light",
    extra_config: Optional[Dict[str, Any]] = None,
) -> str:
    """
    Render a Swagger UI page.

    Args:
        title: Page title
        spec_url: URL the page fetches the document from
        theme: ``light`` or ``dark``
        extra_config: Additional ``SwaggerUIBundle`` options
    """
    template = _environment().get_template("swagger.html")
    return template.render(
        title=title,
        spec_url=spec_url,
        version=SWAGGER_UI_VERSION,
        theme=theme,
        extra_config=extra_config or {},
    )


def render_redoc(title: str, spec_url: str = "/openapi.json") -> str:
    """Render a ReDoc page."""
    return _environment().get_template("redoc.html").render(title=title, spec_url=spec_url)


def render_docs(style: str, title: str, spec_url: str = "/openapi.json") -> str:
    if style == "redoc":
        return render_redoc(title, spec_url)
    return render_swagger_ui(title, spec_url)


__all__ = ["render_swagger_ui", "render_redoc", "render_docs", "SWAGGER_UI_VERSION", "DOC_STYLES"]
