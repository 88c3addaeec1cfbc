"""
Tests for appforge.validator
============================

Test Organization
-----------------
- TestParseMajorVersion: Version string parsing
- TestEnvironmentChecks: Node and Bun probes
- TestStructureChecks: Required files and directories
- TestManifestChecks: Dependencies and build script
- TestBuildOutput: dist/ artifacts
- TestValidateProject: Full checklist against generated projects
"""

import json
import subprocess
from pathlib import Path
from unittest.mock import patch

import pytest

from appforge.errors import ManifestUnreadableError
from appforge.generator import generate_project
from appforge.models import GenerateOptions, Settings
from appforge.registry import TEMPLATES
from appforge.validator import (
    CheckStatus,
    ValidationCheck,
    ValidationResult,
    check_build_output,
    check_build_script,
    check_bun,
    check_dependencies,
    check_node_version,
    check_required_dirs,
    check_required_files,
    parse_major_version,
    read_manifest,
    validate_project,
)


def node_reports(version: str):
    """Patch subprocess.run so ``node --version`` prints ``version``."""

    def run(args, **kwargs):
        return subprocess.CompletedProcess(args, 0, stdout=version, stderr="")

    return patch("appforge.validator.subprocess.run", side_effect=run)


def checks_by_name(result: ValidationResult) -> dict[str, ValidationCheck]:
    return {c.name: c for c in result.checks}


# =============================================================================
# Version Parsing Tests
# =============================================================================

class TestParseMajorVersion:
    """Tests for parse_major_version."""

    @pytest.mark.parametrize(
        ("version", "expected"),
        [
            ("v22.11.0", 22),
            ("v20.0.0", 20),
            ("18.19.1", 18),
            (" v21.1.0\n", 21),
        ],
    )
    def test_parses(self, version: str, expected: int) -> None:
        assert parse_major_version(version) == expected

    @pytest.mark.parametrize("version", ["", "node", "vX.1"])
    def test_unparsable(self, version: str) -> None:
        assert parse_major_version(version) is None


# =============================================================================
# Environment Check Tests
# =============================================================================

class TestEnvironmentChecks:
    """Tests for the Node and Bun checks."""

    def test_node_recent(self, fake_toolchain: list[list[str]]) -> None:
        check = check_node_version(Settings())

        assert check.status == CheckStatus.PASS
        assert check.message == "v22.11.0 (>= 20 required for import.meta.dirname)"
        assert fake_toolchain == [["node", "--version"]]

    def test_node_too_old(self) -> None:
        with node_reports("v18.19.1\n"):
            check = check_node_version(Settings())

        assert check.status == CheckStatus.FAIL
        assert check.message == (
            "v18.19.1 is too old. Node >= 20 required for import.meta.dirname"
        )

    def test_node_exact_minimum(self) -> None:
        with node_reports("v20.0.0\n"):
            assert check_node_version(Settings()).status == CheckStatus.PASS

    def test_node_unparsable(self) -> None:
        with node_reports("unknown\n"):
            check = check_node_version(Settings())

        assert check.status == CheckStatus.FAIL
        assert check.message == "Could not detect Node version"

    def test_node_missing(self, missing_toolchain: None) -> None:
        check = check_node_version(Settings())

        assert check.status == CheckStatus.FAIL
        assert check.message == "Could not detect Node version"

    def test_node_exits_nonzero(self) -> None:
        error = subprocess.CalledProcessError(1, ["node", "--version"])
        with patch("appforge.validator.subprocess.run", side_effect=error):
            assert check_node_version(Settings()).status == CheckStatus.FAIL

    def test_node_timeout(self) -> None:
        error = subprocess.TimeoutExpired(["node", "--version"], 10)
        with patch("appforge.validator.subprocess.run", side_effect=error):
            assert check_node_version(Settings()).status == CheckStatus.FAIL

    def test_custom_minimum(self, fake_toolchain: list[list[str]]) -> None:
        check = check_node_version(Settings(min_node_major=24))

        assert check.status == CheckStatus.FAIL
        assert "Node >= 24" in check.message

    def test_custom_binaries(self, fake_toolchain: list[list[str]]) -> None:
        settings = Settings(node_binary="node", bun_binary="bun")
        check_node_version(settings)
        check_bun(settings)

        assert fake_toolchain == [["node", "--version"], ["bun", "--version"]]

    def test_bun_present(self, fake_toolchain: list[list[str]]) -> None:
        check = check_bun(Settings())

        assert check.status == CheckStatus.PASS
        assert check.message == "Bun 1.1.38 installed (required for build)"

    def test_bun_missing(self, missing_toolchain: None) -> None:
        check = check_bun(Settings())

        assert check.status == CheckStatus.FAIL
        assert "https://bun.sh" in check.message


# =============================================================================
# Structure Check Tests
# =============================================================================

class TestStructureChecks:
    """Tests for the file and directory checks."""

    def test_empty_directory(self, tmp_path: Path) -> None:
        checks = check_required_files(tmp_path)

        assert len(checks) == 7
        assert all(c.status == CheckStatus.FAIL for c in checks)
        assert checks[0].name == "File: main.ts"
        assert checks[0].message == "Missing"

    def test_generated_project(self, generated_project: Path) -> None:
        checks = check_required_files(generated_project) + check_required_dirs(generated_project)

        assert all(c.status == CheckStatus.PASS for c in checks)

    def test_src_is_a_file(self, tmp_path: Path) -> None:
        (tmp_path / "src").write_text("")

        (check,) = check_required_dirs(tmp_path)

        assert check.name == "Directory: src"
        assert check.status == CheckStatus.FAIL
        assert check.message == "Not a directory"


# =============================================================================
# Manifest Check Tests
# =============================================================================

class TestManifestChecks:
    """Tests for package.json parsing and checks."""

    def test_read_manifest(self, generated_project: Path) -> None:
        manifest = read_manifest(generated_project)
        assert manifest["name"] == "quote-builder"

    def test_read_manifest_missing(self, tmp_path: Path) -> None:
        with pytest.raises(ManifestUnreadableError, match="Could not read package.json"):
            read_manifest(tmp_path)

    def test_read_manifest_invalid_json(self, tmp_path: Path) -> None:
        (tmp_path / "package.json").write_text("{not json")
        with pytest.raises(ManifestUnreadableError):
            read_manifest(tmp_path)

    def test_read_manifest_not_object(self, tmp_path: Path) -> None:
        (tmp_path / "package.json").write_text("[]")
        with pytest.raises(ManifestUnreadableError, match="JSON object"):
            read_manifest(tmp_path)

    def test_dependencies_present(self, generated_project: Path) -> None:
        checks = check_dependencies(read_manifest(generated_project))

        assert len(checks) == 5
        assert all(c.status == CheckStatus.PASS for c in checks)
        assert [c.name for c in checks] == [
            "Dependency: @modelcontextprotocol/ext-apps",
            "Dependency: @modelcontextprotocol/sdk",
            "DevDependency: cross-env",
            "DevDependency: vite-plugin-singlefile",
            "DevDependency: vite",
        ]

    def test_dependencies_missing(self) -> None:
        checks = check_dependencies({"dependencies": {"@modelcontextprotocol/sdk": "^1.0.0"}})

        statuses = [c.status for c in checks]
        assert statuses.count(CheckStatus.PASS) == 1
        assert statuses.count(CheckStatus.FAIL) == 4
        assert checks[0].message == "Missing from dependencies"
        assert checks[2].message == "Missing from devDependencies"

    def test_dependency_version_reported(self) -> None:
        checks = check_dependencies({"dependencies": {"@modelcontextprotocol/sdk": "^1.2.3"}})
        assert checks[1].message == "^1.2.3"

    def test_sections_of_wrong_type(self) -> None:
        checks = check_dependencies({"dependencies": [], "devDependencies": "x"})
        assert all(c.status == CheckStatus.FAIL for c in checks)

    def test_build_script_complete(self, generated_project: Path) -> None:
        check = check_build_script(read_manifest(generated_project))

        assert check.status == CheckStatus.PASS
        assert check.message == "Contains npx, bun build, and cross-env INPUT"

    def test_build_script_partial(self) -> None:
        check = check_build_script({"scripts": {"build": "npx vite build"}})

        assert check.status == CheckStatus.WARN
        assert check.message == "Missing: bun build, cross-env INPUT="

    @pytest.mark.parametrize(
        "manifest",
        [{}, {"scripts": {}}, {"scripts": {"build": ""}}, {"scripts": "build"}],
    )
    def test_build_script_absent(self, manifest: dict) -> None:
        check = check_build_script(manifest)

        assert check.status == CheckStatus.FAIL
        assert check.message == "No build script defined"


# =============================================================================
# Build Output Tests
# =============================================================================

class TestBuildOutput:
    """Tests for check_build_output."""

    def test_not_built(self, tmp_path: Path) -> None:
        check = check_build_output(tmp_path)

        assert check.status == CheckStatus.WARN
        assert "npm install && npm run build" in check.message

    def test_built(self, tmp_path: Path) -> None:
        (tmp_path / "dist").mkdir()
        (tmp_path / "dist" / "index.js").write_text("")
        (tmp_path / "dist" / "mcp-app.html").write_text("")

        check = check_build_output(tmp_path)

        assert check.status == CheckStatus.PASS
        assert check.message == "dist/index.js and dist/mcp-app.html exist"

    def test_partial(self, tmp_path: Path) -> None:
        (tmp_path / "dist").mkdir()
        (tmp_path / "dist" / "index.js").write_text("")

        check = check_build_output(tmp_path)

        assert check.status == CheckStatus.WARN
        assert check.message == "dist/ exists but missing: mcp-app.html. Run npm run build"

    def test_dist_is_a_file(self, tmp_path: Path) -> None:
        (tmp_path / "dist").write_text("")

        assert check_build_output(tmp_path).status == CheckStatus.WARN


# =============================================================================
# Full Validation Tests
# =============================================================================

class TestValidateProject:
    """Tests for validate_project."""

    def test_fresh_project(self, generated_project: Path, fake_toolchain: list[list[str]]) -> None:
        """A freshly generated, un-built project is valid with one warning."""
        result = validate_project(generated_project)

        assert result.valid
        assert result.pass_count == 16
        assert result.warn_count == 1
        assert result.fail_count == 0
        assert result.summary == "16 passed, 1 warnings, 0 failed"
        assert result.checks[-1].name == "Build Output"
        assert result.checks[-1].status == CheckStatus.WARN

    def test_check_order(self, generated_project: Path, fake_toolchain: list[list[str]]) -> None:
        names = [c.name for c in validate_project(generated_project).checks]

        assert names[:2] == ["Node Version", "Bun"]
        assert names[2] == "File: main.ts"
        assert names[9] == "Directory: src"
        assert names[-2:] == ["Build Script", "Build Output"]

    def test_built_project(self, generated_project: Path, fake_toolchain: list[list[str]]) -> None:
        dist = generated_project / "dist"
        dist.mkdir()
        (dist / "index.js").write_text("")
        (dist / "mcp-app.html").write_text("")

        result = validate_project(generated_project)

        assert result.pass_count == 17
        assert result.warn_count == 0

    def test_missing_toolchain(self, generated_project: Path, missing_toolchain: None) -> None:
        result = validate_project(generated_project)

        assert not result.valid
        assert result.fail_count == 2
        assert checks_by_name(result)["File: server.ts"].status == CheckStatus.PASS

    def test_old_node(self, generated_project: Path) -> None:
        with node_reports("v18.0.0\n"):
            result = validate_project(generated_project)

        assert not result.valid
        assert checks_by_name(result)["Node Version"].status == CheckStatus.FAIL

    def test_missing_file(self, generated_project: Path, fake_toolchain: list[list[str]]) -> None:
        (generated_project / "vite.config.ts").unlink()

        result = validate_project(generated_project)

        assert not result.valid
        assert checks_by_name(result)["File: vite.config.ts"].status == CheckStatus.FAIL
        assert result.fail_count == 1

    def test_unreadable_manifest(
        self, generated_project: Path, fake_toolchain: list[list[str]]
    ) -> None:
        """A broken package.json replaces the dependency and script checks."""
        (generated_project / "package.json").write_text("{broken")

        result = validate_project(generated_project)
        names = [c.name for c in result.checks]

        assert "package.json" in names
        assert checks_by_name(result)["package.json"].status == CheckStatus.FAIL
        assert "Build Script" not in names
        assert not any(n.startswith("Dependency:") for n in names)
        assert len(result.checks) == 2 + 7 + 1 + 1 + 1

    def test_counts_add_up(self, tmp_path: Path, missing_toolchain: None) -> None:
        result = validate_project(tmp_path)

        assert (
            result.pass_count + result.warn_count + result.fail_count
            == len(result.checks)
        )
        assert result.valid == (result.fail_count == 0)

    def test_empty_directory(self, tmp_path: Path, fake_toolchain: list[list[str]]) -> None:
        result = validate_project(tmp_path)

        assert not result.valid
        assert result.fail_count == 7 + 1 + 1

    def test_path_missing(self, tmp_path: Path) -> None:
        with pytest.raises(FileNotFoundError):
            validate_project(tmp_path / "nope")

    def test_path_is_file(self, tmp_path: Path) -> None:
        target = tmp_path / "file.txt"
        target.write_text("")
        with pytest.raises(NotADirectoryError):
            validate_project(target)

    def test_build_script_warning_keeps_valid(
        self, generated_project: Path, fake_toolchain: list[list[str]]
    ) -> None:
        manifest_path = generated_project / "package.json"
        manifest = json.loads(manifest_path.read_text())
        manifest["scripts"]["build"] = "vite build"
        manifest_path.write_text(json.dumps(manifest))

        result = validate_project(generated_project)

        assert result.valid
        assert checks_by_name(result)["Build Script"].status == CheckStatus.WARN
        assert result.warn_count == 2

    @pytest.mark.parametrize("template", list(TEMPLATES))
    def test_every_template_is_structurally_sound(
        self, temp_project_dir: Path, template: str, fake_toolchain: list[list[str]]
    ) -> None:
        """Generate then validate leaves no file, directory or manifest failures."""
        options = GenerateOptions(
            name=f"{template}-app",
            description="desc",
            template=template,
            output_dir=temp_project_dir,
        )
        generated = generate_project(options)
        assert generated.success, generated.errors

        result = validate_project(generated.project_path)

        structural = [
            c for c in result.checks
            if c.name.startswith(("File:", "Directory:", "Dependency:", "DevDependency:"))
        ]
        assert len(structural) == 7 + 1 + 5
        assert all(c.status == CheckStatus.PASS for c in structural)
        assert result.valid
