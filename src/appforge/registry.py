"""
appforge.registry - Template Registry
=====================================

Static catalog of the templates appforge can generate, plus the base files
shared by every project.

The catalog is data: adding a template means adding a ``TemplateDescriptor``
to ``TEMPLATES`` and a directory of assets under ``appforge/templates/``.
No other code changes.

Asset Layout
------------
    templates/
    ├── base/            files common to every project
    ├── blank/           template-specific files, one directory per key
    ├── calculator/
    ├── form/
    ├── chart/
    └── snippets/        Jinja2 snippets (not template assets)

Assets are read through Jinja2's ``PackageLoader`` but returned as raw
source; substitution happens in ``appforge.placeholders``.
"""

from __future__ import annotations

from functools import cache

from jinja2 import Environment, PackageLoader, TemplateNotFound, select_autoescape

from appforge.errors import TemplateFileNotFoundError, UnknownTemplateError
from appforge.models import TemplateDescriptor


# =============================================================================
# Catalog
# =============================================================================

_UI_FILES = ("mcp-app.html.tmpl", "mcp-app.ts.tmpl", "mcp-app.css.tmpl")

TEMPLATES: dict[str, TemplateDescriptor] = {
    descriptor.key: descriptor
    for descriptor in (
        TemplateDescriptor(
            key="blank",
            name="Blank",
            description="Minimal MCP App with a single button to send messages",
            files=_UI_FILES,
        ),
        TemplateDescriptor(
            key="calculator",
            name="Calculator",
            description="Interactive calculator that sends results to the agent",
            files=_UI_FILES,
        ),
        TemplateDescriptor(
            key="form",
            name="Form",
            description="Form template with inputs that sends data to the agent",
            files=_UI_FILES,
        ),
        TemplateDescriptor(
            key="chart",
            name="Chart",
            description="Canvas-based bar chart with interactive data",
            files=_UI_FILES,
        ),
    )
}

BASE_FILES: tuple[str, ...] = (
    "main.ts.tmpl",
    "server.ts.tmpl",
    "package.json.tmpl",
    "vite.config.ts.tmpl",
    "tsconfig.json.tmpl",
    "tsconfig.server.json.tmpl",
    "global.css.tmpl",
)

BASE_DIR = "base"
TEMPLATE_SUFFIX = ".tmpl"


def list_templates() -> list[TemplateDescriptor]:
    """Return every template descriptor in registry order."""
    return list(TEMPLATES.values())


def resolve(key: str) -> TemplateDescriptor:
    """
    Look up a template by key.

    Raises
    ------
    UnknownTemplateError
        If ``key`` is not registered.
    """
    try:
        return TEMPLATES[key]
    except KeyError:
        raise UnknownTemplateError(key, tuple(TEMPLATES)) from None


def output_name(asset_name: str) -> str:
    """Strip the ``.tmpl`` suffix from an asset name."""
    return asset_name.removesuffix(TEMPLATE_SUFFIX)


# =============================================================================
# Asset Loading
# =============================================================================

@cache
def create_jinja_env() -> Environment:
    """
    Create the Jinja2 environment over ``appforge/templates``.

    Autoescaping is disabled because everything we emit is source code.
    The environment is shared; it is only read from after creation.
    """
    return Environment(
        loader=PackageLoader("appforge", "templates"),
        autoescape=select_autoescape([]),
        keep_trailing_newline=True,
    )


def _read_asset(path: str) -> str:
    env = create_jinja_env()
    source, _filename, _uptodate = env.loader.get_source(env, path)
    return source


def load_base_template(file_name: str) -> str:
    """
    Read a base asset.

    Raises
    ------
    TemplateFileNotFoundError
        If ``base/<file_name>`` does not exist.
    """
    try:
        return _read_asset(f"{BASE_DIR}/{file_name}")
    except TemplateNotFound:
        raise TemplateFileNotFoundError(f"Template file not found: {file_name}") from None


def load_template(key: str, file_name: str) -> str:
    """
    Read an asset for a template, falling back to the base set.

    Parameters
    ----------
    key : str
        Template key; its own directory is searched first.

    file_name : str
        Asset name including the ``.tmpl`` suffix.

    Raises
    ------
    TemplateFileNotFoundError
        If neither ``<key>/<file_name>`` nor ``base/<file_name>`` exists.
    """
    try:
        return _read_asset(f"{key}/{file_name}")
    except TemplateNotFound:
        return load_base_template(file_name)
