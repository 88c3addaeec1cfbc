"""
appforge.models - Pydantic Models for Scaffolding Requests
==========================================================

This module defines the data models shared by the registry, the generator,
the validator and the CLI. We use Pydantic for the same reasons everywhere:

1. **Validation**: bad input is rejected before anything touches the disk
2. **Immutability**: registry entries are frozen and can be shared freely
3. **Serialization**: settings load straight from TOML dictionaries

Architecture Notes
------------------
    TemplateDescriptor   one entry of the template registry (frozen)
    Placeholders         values substituted into template assets
    GenerateOptions      input of ``generate_project``
    AddToolOptions       input of ``add_tool_to_project``
    Settings             tool-wide knobs, optionally loaded from TOML

Result objects (``GeneratedProject``, ``ValidationResult``...) are plain
dataclasses living next to the code that produces them.

Usage Example
-------------
>>> from appforge.models import GenerateOptions, Placeholders
>>> options = GenerateOptions(
...     name="quote-builder",
...     description="Build quotes",
...     template="form",
...     output_dir="/tmp/x",
... )
>>> Placeholders.from_options(options).display_name
'Quote Builder'
"""

from __future__ import annotations

import tomllib
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, field_validator

from appforge.placeholders import to_display_name, to_tool_name


# =============================================================================
# Registry Models
# =============================================================================

class TemplateDescriptor(BaseModel):
    """
    One selectable template.

    Attributes
    ----------
    key : str
        Registry key used on the command line and in the ``generate``
        operation (e.g. ``"form"``).

    name : str
        Human-readable name shown in listings.

    description : str
        One-line description of what the template's UI does.

    files : tuple[str, ...]
        Template-specific asset names, in the order they are written.
    """

    model_config = ConfigDict(frozen=True)

    key: str = Field(min_length=1)
    name: str
    description: str
    files: tuple[str, ...]


# =============================================================================
# Generation Models
# =============================================================================

class Placeholders(BaseModel):
    """
    Values substituted into template assets.

    Each field maps to one ``{{MARKER}}`` in the asset text. ``author`` is
    optional: when it is missing its marker is left in place rather than
    replaced by an empty string.
    """

    name: str
    display_name: str
    description: str
    tool_name: str
    version: str
    author: str | None = None

    def markers(self) -> dict[str, str | None]:
        """
        Mapping of marker names to values, as consumed by ``substitute``.

        Returns
        -------
        dict[str, str | None]
            Keys are the bare marker names (``NAME``, ``DISPLAY_NAME``...).
        """
        return {
            "NAME": self.name,
            "DISPLAY_NAME": self.display_name,
            "DESCRIPTION": self.description,
            "TOOL_NAME": self.tool_name,
            "VERSION": self.version,
            "AUTHOR": self.author,
        }

    @classmethod
    def from_options(cls, options: GenerateOptions) -> Placeholders:
        """Derive the placeholder set for one generation request."""
        return cls(
            name=options.name,
            display_name=to_display_name(options.name),
            description=options.description,
            tool_name=to_tool_name(options.name),
            version=options.version,
            author=options.author,
        )


class GenerateOptions(BaseModel):
    """
    Input for a single project generation.

    The template key is a plain string. An unknown key is reported by
    ``generate_project``, not rejected here.

    Attributes
    ----------
    name : str
        Project identifier, used verbatim as the directory name.

    description : str
        Free-form description written into package.json and the UI.

    template : str
        Template registry key.

    output_dir : Path
        Parent directory; the project lands in ``output_dir / name``.

    version : str
        Project version, ``"1.0.0"`` unless given.

    author : str | None
        Optional author name.
    """

    name: str = Field(min_length=1)
    description: str
    template: str
    output_dir: Path
    version: str = "1.0.0"
    author: str | None = None

    @field_validator("version", mode="before")
    @classmethod
    def default_empty_version(cls, v: str | None) -> str:
        """Treat a missing or blank version as the default."""
        if v is None or not str(v).strip():
            return "1.0.0"
        return v

    @property
    def project_dir(self) -> Path:
        """``output_dir / name``."""
        return self.output_dir / self.name


class AddToolOptions(BaseModel):
    """Input for appending tool scaffolding to a generated server file."""

    project_path: Path
    tool_name: str = Field(min_length=1)
    tool_title: str
    tool_description: str

    @property
    def server_path(self) -> Path:
        """Path of the server file that receives the scaffolding."""
        return self.project_path / "server.ts"


# =============================================================================
# Settings
# =============================================================================

class Settings(BaseModel):
    """
    Tool-wide settings.

    Attributes
    ----------
    node_command : str
        Command written into the host configuration snippet. The default is
        a placeholder the operator is expected to replace.

    node_binary : str
        Executable probed by the validator's runtime version check.

    bun_binary : str
        Executable probed by the validator's bundler check.

    min_node_major : int
        Lowest accepted Node major version.

    command_timeout : float
        Seconds to wait for each version probe.

    Examples
    --------
    >>> Settings().min_node_major
    20
    """

    model_config = ConfigDict(extra="forbid")

    node_command: str = "/path/to/node/v22/bin/node"
    node_binary: str = "node"
    bun_binary: str = "bun"
    min_node_major: int = Field(default=20, ge=1)
    command_timeout: float = Field(default=10.0, gt=0)

    @classmethod
    def from_toml(cls, path: Path) -> Settings:
        """
        Load settings from a TOML file.

        The file may hold the keys at top level or under an ``[appforge]``
        table.

        Raises
        ------
        FileNotFoundError
            If the file doesn't exist.
        ValueError
            If ``appforge`` is present but is not a table.
        ValidationError
            If the file has unknown keys or invalid values.
        """
        with open(path, "rb") as f:
            data = tomllib.load(f)

        section = data.get("appforge", data)
        if not isinstance(section, dict):
            raise ValueError(f"[appforge] in {path} must be a table")
        return cls(**section)
