"""
appforge.operations - Boundary Operations
=========================================

The four operations appforge exposes to a request/response transport:

    create_app              generate a project
    list_templates_tool     describe the registry
    validate_project_tool   run the validation checklist
    add_tool                append tool scaffolding to server.ts

Each returns a ``ToolResult``: a success flag plus a markdown text payload.
None of them raises; failures come back as ``success=False`` with the
error text as payload. A transport only needs ``OPERATIONS`` (names and
descriptions), ``input_schema`` (JSON Schema of each operation's arguments)
and these functions.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field, ValidationError

from appforge.generator import add_tool_to_project, generate_project
from appforge.models import AddToolOptions, GenerateOptions, Settings
from appforge.placeholders import to_kebab_case
from appforge.registry import TEMPLATES, list_templates
from appforge.validator import validate_project


@dataclass
class ToolResult:
    """Payload returned by a boundary operation."""

    success: bool
    text: str

    @property
    def is_error(self) -> bool:
        return not self.success


OPERATIONS: dict[str, str] = {
    "create_mcp_app": (
        "Generate a new MCP App project with UI. Creates a complete project "
        "structure with all necessary files for building an MCP App."
    ),
    "list_templates": "List all available MCP App templates with their descriptions.",
    "validate_project": (
        "Validate an existing MCP App project to check for common issues "
        "and missing dependencies."
    ),
    "add_tool": (
        "Add a new tool to an existing MCP App project. Note: This adds basic "
        "scaffolding that may need manual adjustment."
    ),
}


# =============================================================================
# Operation Inputs
# =============================================================================

class CreateAppInput(BaseModel):
    """Arguments of ``create_mcp_app``."""

    name: str = Field(description="Project name in kebab-case (e.g., 'my-awesome-app')")
    description: str = Field(description="Description of what the app does")
    template: str = Field(
        description="Template to use: blank (minimal), calculator, form, or chart",
        json_schema_extra={"enum": list(TEMPLATES)},
    )
    output_dir: str = Field(
        description="Absolute path to the output directory where the project will be created",
    )
    version: str | None = Field(default=None, description="Version number (default: 1.0.0)")
    author: str | None = Field(default=None, description="Author name")


class ListTemplatesInput(BaseModel):
    """``list_templates`` takes no arguments."""


class ValidateProjectInput(BaseModel):
    """Arguments of ``validate_project``."""

    project_path: str = Field(description="Absolute path to the MCP App project directory")


class AddToolInput(BaseModel):
    """Arguments of ``add_tool``."""

    project_path: str = Field(description="Absolute path to the MCP App project directory")
    tool_name: str = Field(
        description="Name for the new tool (snake_case, e.g., 'my_new_tool')",
    )
    tool_title: str = Field(description="Display title for the tool")
    tool_description: str = Field(description="Description of what the tool does")


OPERATION_INPUTS: dict[str, type[BaseModel]] = {
    "create_mcp_app": CreateAppInput,
    "list_templates": ListTemplatesInput,
    "validate_project": ValidateProjectInput,
    "add_tool": AddToolInput,
}


def input_schema(operation: str) -> dict[str, Any]:
    """
    JSON Schema of an operation's arguments, for transports to publish.

    Raises
    ------
    KeyError
        If ``operation`` is not in ``OPERATIONS``.
    """
    return OPERATION_INPUTS[operation].model_json_schema()


def create_app(
    name: str,
    description: str,
    template: str,
    output_dir: str | Path,
    version: str | None = None,
    author: str | None = None,
    settings: Settings | None = None,
) -> ToolResult:
    """Kebab-case ``name`` and generate the project."""
    settings = settings or Settings()

    try:
        options = GenerateOptions(
            name=to_kebab_case(name),
            description=description,
            template=template,
            output_dir=Path(output_dir),
            version=version,
            author=author,
        )
    except ValidationError as e:
        return ToolResult(False, f"Failed to create project:\n{e}")

    result = generate_project(options, settings)

    if not result.success:
        errors = "\n".join(result.errors) or "Unknown error"
        return ToolResult(False, f"Failed to create project:\n{errors}")

    files = "\n".join(f"- {f}" for f in result.files)
    text = f"""Project created successfully!

**Project Path:** {result.project_path}

**Files Created:**
{files}

**Next Steps:**
1. cd {result.project_path}
2. npm install
3. npm run build

**Host Config (add to your MCP client configuration):**
```json
{result.config_snippet}
```

Remember to replace "{settings.node_command}" with your actual Node v{settings.min_node_major}+ path.
You can find it with: `which node` or `nvm which {settings.min_node_major}`"""
    return ToolResult(True, text)


def list_templates_tool() -> ToolResult:
    """Describe every registered template."""
    lines = "\n".join(
        f"- **{t.key}** ({t.name}): {t.description}" for t in list_templates()
    )
    text = f"""Available MCP App Templates:

{lines}

Use these template names with the `create_mcp_app` tool."""
    return ToolResult(True, text)


def validate_project_tool(project_path: str | Path, settings: Settings | None = None) -> ToolResult:
    """Run the checklist; an inaccessible path is reported, not raised."""
    settings = settings or Settings()

    try:
        result = validate_project(Path(project_path), settings)
    except OSError as e:
        return ToolResult(False, f"Failed to validate project: {e}")

    checks = "\n".join(f"{c.status.icon} **{c.name}**: {c.message}" for c in result.checks)
    status = "✅ Valid" if result.valid else "❌ Invalid"
    text = f"""Validation Results for: {project_path}

**Status:** {status}
**Summary:** {result.summary}

**Checks:**
{checks}"""

    if not result.valid:
        text += f"""

**To fix issues:**
- Ensure Node >= {settings.min_node_major} is installed
- Install Bun: curl -fsSL https://bun.sh/install | bash
- Run: npm install
- Run: npm run build"""

    return ToolResult(True, text)


def add_tool(
    project_path: str | Path,
    tool_name: str,
    tool_title: str,
    tool_description: str,
) -> ToolResult:
    """Append tool scaffolding to the project's server.ts."""
    try:
        options = AddToolOptions(
            project_path=Path(project_path),
            tool_name=tool_name,
            tool_title=tool_title,
            tool_description=tool_description,
        )
    except ValidationError as e:
        return ToolResult(False, f"Failed to add tool: {e}")

    result = add_tool_to_project(options)

    if not result.success:
        return ToolResult(False, f"Failed to add tool: {result.message}")

    text = f"""Tool added successfully!

{result.message}

**Important:** After adding the tool, you'll need to:
1. Review server.ts and merge the tool handlers
2. Run `npm run build` to rebuild
3. Restart your MCP client to pick up changes"""
    return ToolResult(True, text)
