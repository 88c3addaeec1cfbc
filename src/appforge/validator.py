"""
appforge.validator - Project Validation Checklist
=================================================

This module inspects an MCP App project directory and its host environment
and reports a pass/warn/fail checklist.

Checks
------
1. **Environment**
   - Node version (major >= 20 by default)
   - Bun available (used by the build script)

2. **Structure**
   - Required top-level files
   - ``src/`` directory

3. **Manifest** (package.json)
   - Required dependencies and devDependencies
   - Build script contents

4. **Build Output**
   - ``dist/index.js`` and ``dist/mcp-app.html``; only ever warns, since
     a fresh project has not been built yet

Every check runs regardless of earlier failures. The only exception is the
manifest group: when package.json cannot be read, a single failing
``package.json`` check replaces the dependency and build-script checks.

Usage
-----
>>> from pathlib import Path
>>> from appforge.validator import validate_project
>>> result = validate_project(Path("./quote-builder"))
>>> result.summary
'16 passed, 1 warnings, 0 failed'

See Also
--------
- generator.py: Produces the projects validated here
"""

from __future__ import annotations

import json
import re
import subprocess
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any

from appforge.errors import ManifestUnreadableError
from appforge.models import Settings


class CheckStatus(str, Enum):
    """
    Outcome of a single check.

    Only ``FAIL`` affects the overall verdict; warnings are advisory.
    """

    PASS = "pass"
    WARN = "warn"
    FAIL = "fail"

    @property
    def icon(self) -> str:
        """Emoji used when rendering checks as text."""
        icons = {
            CheckStatus.PASS: "✅",
            CheckStatus.WARN: "⚠️",
            CheckStatus.FAIL: "❌",
        }
        return icons[self]


@dataclass
class ValidationCheck:
    """
    One named check.

    Attributes
    ----------
    name : str
        Display name, e.g. ``"File: server.ts"``.

    status : CheckStatus
        pass, warn or fail.

    message : str
        Human-readable detail.
    """

    name: str
    status: CheckStatus
    message: str


@dataclass
class ValidationResult:
    """
    Result of validating a project.

    Attributes
    ----------
    project_path : Path
        Path to the validated project.

    checks : list[ValidationCheck]
        Checks in the order they ran.
    """

    project_path: Path
    checks: list[ValidationCheck] = field(default_factory=list)

    @property
    def pass_count(self) -> int:
        """Number of passing checks."""
        return sum(1 for c in self.checks if c.status == CheckStatus.PASS)

    @property
    def warn_count(self) -> int:
        """Number of warnings."""
        return sum(1 for c in self.checks if c.status == CheckStatus.WARN)

    @property
    def fail_count(self) -> int:
        """Number of failing checks."""
        return sum(1 for c in self.checks if c.status == CheckStatus.FAIL)

    @property
    def valid(self) -> bool:
        """True iff no check failed."""
        return self.fail_count == 0

    @property
    def summary(self) -> str:
        return (
            f"{self.pass_count} passed, {self.warn_count} warnings, "
            f"{self.fail_count} failed"
        )


# =============================================================================
# Expectations
# =============================================================================

REQUIRED_FILES = (
    "main.ts",
    "server.ts",
    "package.json",
    "vite.config.ts",
    "tsconfig.json",
    "tsconfig.server.json",
    "mcp-app.html",
)

REQUIRED_DIRS = ("src",)

MANIFEST_FILE = "package.json"

REQUIRED_DEPENDENCIES = (
    "@modelcontextprotocol/ext-apps",
    "@modelcontextprotocol/sdk",
)

REQUIRED_DEV_DEPENDENCIES = ("cross-env", "vite-plugin-singlefile", "vite")

# Substrings the build script must contain
BUILD_SCRIPT_REQUIREMENTS = ("npx", "bun build", "cross-env INPUT=")

BUILD_OUTPUT_DIR = "dist"
BUILD_ARTIFACTS = ("index.js", "mcp-app.html")


# =============================================================================
# Environment Checks
# =============================================================================


def _probe_version(binary: str, timeout: float) -> str | None:
    """Run ``<binary> --version``; None if it can't be run or exits non-zero."""
    try:
        completed = subprocess.run(
            [binary, "--version"],
            capture_output=True,
            text=True,
            check=True,
            timeout=timeout,
        )
    except (subprocess.CalledProcessError, subprocess.TimeoutExpired, OSError):
        return None
    return completed.stdout.strip()


def parse_major_version(version: str) -> int | None:
    """
    Extract the major version from ``node --version`` output.

    Examples
    --------
    >>> parse_major_version("v22.11.0")
    22
    >>> parse_major_version("garbage") is None
    True
    """
    match = re.match(r"v?(\d+)", version.strip())
    if match is None:
        return None
    return int(match.group(1))


def check_node_version(settings: Settings) -> ValidationCheck:
    """Check the Node runtime is at least ``settings.min_node_major``."""
    name = "Node Version"
    version = _probe_version(settings.node_binary, settings.command_timeout)
    major = parse_major_version(version) if version else None

    if major is None:
        return ValidationCheck(name, CheckStatus.FAIL, "Could not detect Node version")

    required = settings.min_node_major
    if major >= required:
        return ValidationCheck(
            name,
            CheckStatus.PASS,
            f"{version} (>= {required} required for import.meta.dirname)",
        )
    return ValidationCheck(
        name,
        CheckStatus.FAIL,
        f"{version} is too old. Node >= {required} required for import.meta.dirname",
    )


def check_bun(settings: Settings) -> ValidationCheck:
    """Check that Bun is installed."""
    version = _probe_version(settings.bun_binary, settings.command_timeout)
    if version is None:
        return ValidationCheck("Bun", CheckStatus.FAIL, "Bun not found. Install from https://bun.sh")
    return ValidationCheck(
        "Bun", CheckStatus.PASS, f"Bun {version} installed (required for build)"
    )


# =============================================================================
# Structure Checks
# =============================================================================


def check_required_files(path: Path) -> list[ValidationCheck]:
    """One check per required top-level file."""
    checks = []
    for file_name in REQUIRED_FILES:
        if (path / file_name).exists():
            checks.append(ValidationCheck(f"File: {file_name}", CheckStatus.PASS, "Exists"))
        else:
            checks.append(ValidationCheck(f"File: {file_name}", CheckStatus.FAIL, "Missing"))
    return checks


def check_required_dirs(path: Path) -> list[ValidationCheck]:
    """One check per required directory."""
    checks = []
    for dir_name in REQUIRED_DIRS:
        dir_path = path / dir_name
        name = f"Directory: {dir_name}"
        if dir_path.is_dir():
            checks.append(ValidationCheck(name, CheckStatus.PASS, "Exists"))
        elif dir_path.exists():
            checks.append(ValidationCheck(name, CheckStatus.FAIL, "Not a directory"))
        else:
            checks.append(ValidationCheck(name, CheckStatus.FAIL, "Missing"))
    return checks


# =============================================================================
# Manifest Checks
# =============================================================================


def read_manifest(path: Path) -> dict[str, Any]:
    """
    Read and parse ``package.json``.

    Raises
    ------
    ManifestUnreadableError
        If the file is missing, unreadable, not JSON, or not a JSON object.
    """
    manifest_path = path / MANIFEST_FILE
    try:
        data = json.loads(manifest_path.read_text(encoding="utf-8"))
    except (OSError, UnicodeDecodeError, json.JSONDecodeError) as e:
        raise ManifestUnreadableError(f"Could not read {MANIFEST_FILE}: {e}") from e

    if not isinstance(data, dict):
        raise ManifestUnreadableError(f"{MANIFEST_FILE} must contain a JSON object")
    return data


def _section(manifest: dict[str, Any], key: str) -> dict[str, Any]:
    value = manifest.get(key)
    return value if isinstance(value, dict) else {}


def check_dependencies(manifest: dict[str, Any]) -> list[ValidationCheck]:
    """Check required dependencies and devDependencies are declared."""
    checks = []

    dependencies = _section(manifest, "dependencies")
    for dep in REQUIRED_DEPENDENCIES:
        if dependencies.get(dep):
            checks.append(
                ValidationCheck(f"Dependency: {dep}", CheckStatus.PASS, str(dependencies[dep]))
            )
        else:
            checks.append(
                ValidationCheck(f"Dependency: {dep}", CheckStatus.FAIL, "Missing from dependencies")
            )

    dev_dependencies = _section(manifest, "devDependencies")
    for dep in REQUIRED_DEV_DEPENDENCIES:
        if dev_dependencies.get(dep):
            checks.append(
                ValidationCheck(
                    f"DevDependency: {dep}", CheckStatus.PASS, str(dev_dependencies[dep])
                )
            )
        else:
            checks.append(
                ValidationCheck(
                    f"DevDependency: {dep}", CheckStatus.FAIL, "Missing from devDependencies"
                )
            )

    return checks


def check_build_script(manifest: dict[str, Any]) -> ValidationCheck:
    """Check ``scripts.build`` runs vite through cross-env and bundles with bun."""
    name = "Build Script"
    build = _section(manifest, "scripts").get("build")

    if not isinstance(build, str) or not build:
        return ValidationCheck(name, CheckStatus.FAIL, "No build script defined")

    missing = [part for part in BUILD_SCRIPT_REQUIREMENTS if part not in build]
    if missing:
        return ValidationCheck(name, CheckStatus.WARN, f"Missing: {', '.join(missing)}")
    return ValidationCheck(name, CheckStatus.PASS, "Contains npx, bun build, and cross-env INPUT")


# =============================================================================
# Build Output Check
# =============================================================================


def check_build_output(path: Path) -> ValidationCheck:
    """
    Check for build artifacts in ``dist/``.

    Never fails: a project that has not been built yet only gets a warning.
    """
    name = "Build Output"
    dist_path = path / BUILD_OUTPUT_DIR

    if not dist_path.exists():
        return ValidationCheck(
            name, CheckStatus.WARN, "dist/ not found. Run npm install && npm run build"
        )
    if not dist_path.is_dir():
        return ValidationCheck(
            name, CheckStatus.WARN, "dist exists but is not a directory. Run npm run build"
        )

    try:
        present = {entry.name for entry in dist_path.iterdir()}
    except OSError as e:
        return ValidationCheck(name, CheckStatus.WARN, f"Could not read dist/: {e}")

    missing = [artifact for artifact in BUILD_ARTIFACTS if artifact not in present]
    if missing:
        return ValidationCheck(
            name,
            CheckStatus.WARN,
            f"dist/ exists but missing: {', '.join(missing)}. Run npm run build",
        )
    return ValidationCheck(name, CheckStatus.PASS, "dist/index.js and dist/mcp-app.html exist")


# =============================================================================
# Main Validation Function
# =============================================================================


def validate_project(path: Path, settings: Settings | None = None) -> ValidationResult:
    """
    Validate an MCP App project.

    Parameters
    ----------
    path : Path
        Project root directory.

    settings : Settings | None
        Tool-wide settings; controls the probed binaries and the minimum
        Node version.

    Returns
    -------
    ValidationResult
        Every check that ran, in order.

    Raises
    ------
    FileNotFoundError
        If the path does not exist.
    NotADirectoryError
        If the path is not a directory.
    """
    settings = settings or Settings()
    path = Path(path).resolve()

    if not path.exists():
        raise FileNotFoundError(f"Path does not exist: {path}")
    if not path.is_dir():
        raise NotADirectoryError(f"Path is not a directory: {path}")

    result = ValidationResult(project_path=path)

    result.checks.append(check_node_version(settings))
    result.checks.append(check_bun(settings))
    result.checks.extend(check_required_files(path))
    result.checks.extend(check_required_dirs(path))

    try:
        manifest = read_manifest(path)
    except ManifestUnreadableError as e:
        result.checks.append(ValidationCheck(MANIFEST_FILE, CheckStatus.FAIL, str(e)))
    else:
        result.checks.extend(check_dependencies(manifest))
        result.checks.append(check_build_script(manifest))

    result.checks.append(check_build_output(path))

    return result
