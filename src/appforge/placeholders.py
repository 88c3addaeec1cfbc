"""
appforge.placeholders - Placeholder Substitution and Naming
===========================================================

Pure string helpers used while rendering template assets.

Template assets contain markers of the form ``{{NAME}}``. ``substitute``
replaces them textually; it is not a template language, so there are no
filters, no whitespace tolerance (``{{ NAME }}`` is left alone) and no
escaping.

Examples
--------
>>> substitute("Hello {{NAME}}", {"NAME": "world"})
'Hello world'
>>> substitute("By {{AUTHOR}}", {"AUTHOR": None})
'By {{AUTHOR}}'
>>> to_display_name("my-cool-app")
'My Cool App'
>>> to_tool_name("my-cool-app")
'my_cool_app'
"""

from __future__ import annotations

import re
from collections.abc import Mapping


def marker(key: str) -> str:
    """Return the marker text for a placeholder key (``NAME`` -> ``{{NAME}}``)."""
    return "{{" + key + "}}"


def substitute(text: str, placeholders: Mapping[str, str | None]) -> str:
    """
    Replace every ``{{KEY}}`` marker with its value.

    Keys whose value is ``None`` or empty are skipped, so their markers
    survive verbatim. Replacement values are not escaped; a value that
    itself contains a marker may be replaced again by a later key.

    Parameters
    ----------
    text : str
        Raw template text.

    placeholders : Mapping[str, str | None]
        Marker names (without braces) to replacement values.

    Returns
    -------
    str
        The substituted text.
    """
    result = text
    for key, value in placeholders.items():
        if value:
            result = result.replace(marker(key), value)
    return result


def to_kebab_case(name: str) -> str:
    """
    Normalize a free-form name to kebab-case.

    ``"MyCoolApp"`` and ``"my_cool app"`` both become ``"my-cool-app"``.
    Only the boundary ``create_app`` operation applies this; the generator
    takes names as given.
    """
    name = re.sub(r"([a-z])([A-Z])", r"\1-\2", name)
    name = re.sub(r"[\s_]+", "-", name)
    return name.lower()


def to_display_name(name: str) -> str:
    """Split on ``-`` and upper-case the first letter of every word."""
    return " ".join(word[:1].upper() + word[1:] for word in name.split("-"))


def to_tool_name(name: str) -> str:
    """Replace ``-`` with ``_``; every other character is kept as-is."""
    return name.replace("-", "_")
