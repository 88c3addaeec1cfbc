"""
appforge - MCP App Project Scaffolding
======================================

A small tool that creates starter MCP App projects (a TypeScript MCP server
plus a single-file HTML UI bundled by Vite) from named templates, and
validates that a project still has the expected shape.

Features
--------
- **Templates**: blank, calculator, form and chart starters
- **Placeholders**: ``{{NAME}}``-style markers filled from the request
- **Validation**: pass/warn/fail checklist for toolchain, files,
  package.json and build output
- **Tool scaffolding**: append a new tool block to a generated server

Quick Start
-----------
```bash
appforge new quote-builder --template form --description "Build quotes"
appforge validate quote-builder
```

Example
-------
>>> from appforge import GenerateOptions, generate_project
>>> result = generate_project(GenerateOptions(
...     name="quote-builder", description="Build quotes",
...     template="form", output_dir="/tmp/x",
... ))
>>> result.success
True

Architecture
------------
- ``registry``: template catalog and asset loading
- ``placeholders``: marker substitution and name derivations
- ``generator``: project generation and tool scaffolding
- ``validator``: project validation checklist
- ``operations``: the four boundary operations for transports
- ``cli``: Typer command line interface
- ``models``: Pydantic models for requests and settings
"""

# =============================================================================
# Package Metadata
# =============================================================================
__version__ = "0.1.0"
__license__ = "MIT"

# =============================================================================
# Public API Exports
# =============================================================================

from appforge.generator import GeneratedProject, add_tool_to_project, generate_project
from appforge.models import AddToolOptions, GenerateOptions, Settings
from appforge.registry import list_templates
from appforge.validator import ValidationResult, validate_project


__all__ = [
    "AddToolOptions",
    "GenerateOptions",
    "GeneratedProject",
    "Settings",
    "ValidationResult",
    "__version__",
    "add_tool_to_project",
    "generate_project",
    "list_templates",
    "validate_project",
]
