"""
appforge.errors - Exception Taxonomy
====================================

Exceptions raised inside the appforge core. The generator and the tool
appender convert these into result objects before they reach callers;
they are public so that library users calling the lower-level helpers
(``registry.resolve``, ``registry.load_template``) can catch them.
"""

from __future__ import annotations


class AppForgeError(Exception):
    """Base class for all appforge errors."""


class UnknownTemplateError(AppForgeError, KeyError):
    """
    Raised when a template key is not in the registry.

    Attributes
    ----------
    key : str
        The key that was requested.

    available : tuple[str, ...]
        Every valid template key, in registry order.
    """

    def __init__(self, key: str, available: tuple[str, ...]) -> None:
        self.key = key
        self.available = available
        super().__init__(key)

    def __str__(self) -> str:
        return f"Unknown template: {self.key}. Available: {', '.join(self.available)}"


class TemplateFileNotFoundError(AppForgeError, FileNotFoundError):
    """Raised when a template asset exists neither in the template nor in base."""


class MarkerNotFoundError(AppForgeError):
    """Raised when the insertion marker is missing from a server file."""


class ManifestUnreadableError(AppForgeError):
    """Raised when a project's package.json cannot be read or parsed."""
