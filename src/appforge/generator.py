"""
appforge.generator - Project Generation and Tool Scaffolding
============================================================

This module materializes new MCP App projects from the template registry
and patches generated server files with extra tool scaffolding.

Architecture
------------
Generation follows a fixed pipeline:

    1. Resolve the template key (no disk writes before this succeeds)
    2. Derive the placeholder set from the request
    3. Create ``<output_dir>/<name>/`` and its ``src/`` directory
    4. Write the base files at the project root
    5. Write the template files (markup at root, the rest in ``src/``)
    6. Move the shared stylesheet into ``src/``
    7. Write ``.gitignore``
    8. Render the host configuration snippet

The pipeline is not atomic. When a step fails, whatever was
written stays on disk and the result lists the files recorded so far, so
the caller can inspect the partial tree and retry.

Usage Example
-------------
>>> from appforge.generator import generate_project
>>> from appforge.models import GenerateOptions
>>> result = generate_project(GenerateOptions(
...     name="quote-builder",
...     description="Build quotes",
...     template="form",
...     output_dir="/tmp/x",
... ))
>>> result.success
True
>>> result.files[:2]
['main.ts', 'server.ts']

See Also
--------
- registry.py: Template catalog and asset loading
- placeholders.py: Marker substitution
- validator.py: Checks run against generated projects
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path

from rich.console import Console
from rich.panel import Panel

from appforge.errors import MarkerNotFoundError, UnknownTemplateError
from appforge.models import AddToolOptions, GenerateOptions, Placeholders, Settings
from appforge.placeholders import substitute
from appforge.registry import (
    BASE_FILES,
    create_jinja_env,
    load_base_template,
    load_template,
    output_name,
    resolve,
)


# =============================================================================
# Module-Level Configuration
# =============================================================================

# Progress goes to stderr so stdout stays usable by transports
console = Console(stderr=True)

SRC_DIR = "src"

# The one template file that lives at the project root instead of src/
MARKUP_FILE = "mcp-app.html"

STYLESHEET_ASSET = "global.css.tmpl"

GITIGNORE_CONTENT = "node_modules/\ndist/\n"

# Launch flag the generated entry point expects
STDIO_FLAG = "--stdio"

SERVER_FILE = "server.ts"
SERVER_MARKER = "return server;"
TOOL_BLOCK_TEMPLATE = "snippets/tool_block.ts.j2"


# =============================================================================
# Result Data Classes
# =============================================================================


@dataclass
class GeneratedProject:
    """
    Result of a project generation.

    Attributes
    ----------
    success : bool
        Whether every step completed.

    project_path : Path
        ``output_dir / name``, whether or not it was created.

    files : list[str]
        Relative POSIX paths written, in write order. On success every
        entry exists on disk.

    config_snippet : str
        JSON text describing how a host application launches the built
        project. Empty unless ``success`` is True.

    errors : list[str]
        Error messages; empty on success.
    """

    success: bool
    project_path: Path
    files: list[str] = field(default_factory=list)
    config_snippet: str = ""
    errors: list[str] = field(default_factory=list)


@dataclass
class AddToolResult:
    """Outcome of ``add_tool_to_project``."""

    success: bool
    message: str


# =============================================================================
# Generation Steps
# =============================================================================


def create_directory_structure(project_path: Path) -> list[Path]:
    """
    Create the project root and its ``src/`` directory.

    Existing directories are reused, so generating into an existing tree
    overwrites files rather than failing.

    Returns
    -------
    list[Path]
        The two directories, root first.
    """
    src_path = project_path / SRC_DIR
    project_path.mkdir(parents=True, exist_ok=True)
    src_path.mkdir(exist_ok=True)
    return [project_path, src_path]


def write_project_file(project_path: Path, relative_path: str, content: str) -> str:
    """Write ``content`` under ``project_path`` and return the relative path."""
    (project_path / relative_path).write_text(content, encoding="utf-8")
    return relative_path


def template_file_destination(file_name: str) -> str:
    """Relative destination of a template-specific output file."""
    if file_name == MARKUP_FILE:
        return file_name
    return f"{SRC_DIR}/{file_name}"


def render_config_snippet(name: str, project_path: Path, settings: Settings) -> str:
    """
    Render the host configuration snippet for a project.

    The command is ``settings.node_command``, which by default is a
    placeholder path the operator must replace.
    """
    return json.dumps(
        {
            name: {
                "command": settings.node_command,
                "args": [f"{project_path}/dist/index.js", STDIO_FLAG],
            },
        },
        indent=2,
    )


# =============================================================================
# Main Generation Function
# =============================================================================


def generate_project(
    options: GenerateOptions,
    settings: Settings | None = None,
    *,
    verbose: bool = False,
) -> GeneratedProject:
    """
    Create a new MCP App project.

    Parameters
    ----------
    options : GenerateOptions
        Name, description, template key, output directory and optional
        version/author.

    settings : Settings | None
        Tool-wide settings; defaults are used when omitted.

    verbose : bool, default=False
        If True, narrate each step on stderr.

    Returns
    -------
    GeneratedProject
        Never raises: an unknown template or any I/O error is reported via
        ``success=False`` and ``errors``.

    Notes
    -----
    The shared stylesheet is written at the root with the other base files,
    written again into ``src/``, and the root copy is then deleted. Only the
    ``src/`` copy is recorded.
    """
    settings = settings or Settings()
    project_path = options.project_dir
    result = GeneratedProject(success=False, project_path=project_path)

    try:
        descriptor = resolve(options.template)
    except UnknownTemplateError as e:
        result.errors.append(str(e))
        return result

    markers = Placeholders.from_options(options).markers()

    try:
        if verbose:
            console.print(
                Panel(
                    f"[bold blue]Creating project:[/] [green]{options.name}[/]\n"
                    f"[dim]Template: {descriptor.key} | Version: {options.version}[/]",
                    title="[bold]appforge[/]",
                    border_style="blue",
                )
            )

        create_directory_structure(project_path)

        # Base files, all at the root
        for asset in BASE_FILES:
            content = substitute(load_base_template(asset), markers)
            result.files.append(
                write_project_file(project_path, output_name(asset), content)
            )
            if verbose:
                console.print(f"  Created {output_name(asset)}")

        # Template files
        for asset in descriptor.files:
            content = substitute(load_template(descriptor.key, asset), markers)
            destination = template_file_destination(output_name(asset))
            result.files.append(write_project_file(project_path, destination, content))
            if verbose:
                console.print(f"  Created {destination}")

        # Stylesheet belongs in src/, not at the root
        stylesheet = output_name(STYLESHEET_ASSET)
        content = substitute(load_base_template(STYLESHEET_ASSET), markers)
        result.files.append(
            write_project_file(project_path, f"{SRC_DIR}/{stylesheet}", content)
        )
        (project_path / stylesheet).unlink(missing_ok=True)
        if stylesheet in result.files:
            result.files.remove(stylesheet)

        result.files.append(write_project_file(project_path, ".gitignore", GITIGNORE_CONTENT))

        result.config_snippet = render_config_snippet(options.name, project_path, settings)
        result.success = True

        if verbose:
            console.print(f"[green]✓[/] Project created at {project_path}")

    except Exception as e:
        result.errors.append(str(e))
        if verbose:
            console.print(f"[bold red]Error:[/] {e}")
            console.print("[dim]Partial project left on disk for inspection.[/]")

    return result


# =============================================================================
# Add Tool to Existing Project
# =============================================================================


def render_tool_block(tool_name: str, tool_title: str, tool_description: str) -> str:
    """Render the declarative scaffolding block for one additional tool."""
    template = create_jinja_env().get_template(TOOL_BLOCK_TEMPLATE)
    return template.render(
        tool_name=tool_name,
        tool_title=tool_title,
        tool_description=tool_description,
    )


def insert_before_marker(content: str, block: str, marker: str = SERVER_MARKER) -> str:
    """
    Insert ``block`` right before the first occurrence of ``marker``.

    The marker keeps the two-space indentation of the generated server
    function. Calling this twice inserts the block twice.

    Raises
    ------
    MarkerNotFoundError
        If ``marker`` does not occur in ``content``.
    """
    if marker not in content:
        raise MarkerNotFoundError(f"Could not find '{marker}' in {SERVER_FILE}")
    return content.replace(marker, f"{block}  {marker}", 1)


def add_tool_to_project(options: AddToolOptions) -> AddToolResult:
    """
    Append scaffolding for one more tool to a generated ``server.ts``.

    The inserted handlers are not merged with the existing ones; the
    returned message tells the operator to do that by hand.

    Returns
    -------
    AddToolResult
        ``success=False`` with the file untouched when the marker is
        missing or the file cannot be read.
    """
    server_path = options.server_path

    try:
        with open(server_path, encoding="utf-8", newline="") as f:
            content = f.read()

        block = render_tool_block(
            options.tool_name,
            options.tool_title,
            options.tool_description,
        )
        updated = insert_before_marker(content, block)

        with open(server_path, "w", encoding="utf-8", newline="") as f:
            f.write(updated)

    except Exception as e:
        return AddToolResult(success=False, message=str(e))

    return AddToolResult(
        success=True,
        message=(
            f'Tool "{options.tool_name}" added to {SERVER_FILE}. '
            "Note: You may need to manually merge with existing tool handlers."
        ),
    )
