"""Materializer: writes a validated configuration to disk as a Mastra project."""

import json
from pathlib import Path
from typing import Optional, Union

from config import settings
from contracts import MaterializationResult, ProjectConfiguration, ScaffoldStatus
from scaffold import templates


# A project without these is not usable
ESSENTIAL_FILES = ("package.json", "tsconfig.json", "src/mastra/index.ts")


def _is_single_segment(name: str) -> bool:
    """True when name is one directory name that stays inside its parent."""
    if name in ("", ".", "..") or "/" in name or "\\" in name:
        return False
    return Path(name).name == name


class ProjectMaterializer:
    """Writes the project tree and reports on existing ones."""

    def materialize(
        self,
        config: ProjectConfiguration,
        output_path: Optional[Union[str, Path]] = None,
    ) -> MaterializationResult:
        """Write package.json, tsconfig.json, .env and the src/mastra sources.

        Args:
            config: A configuration that passed validation
            output_path: Parent directory (default from settings)

        Returns:
            MaterializationResult; failures are reported, not raised
        """
        base = Path(output_path) if output_path is not None else settings.get_output_path()
        if not _is_single_segment(config.project_name):
            message = f"Scaffolding failed: project name '{config.project_name}' is not a single directory name"
            return MaterializationResult(
                success=False,
                project_path=str(base),
                message=message,
                logs=[message],
            )
        project_dir = base / config.project_name
        src_dir = project_dir / "src" / "mastra"
        logs = [f"Creating project at: {project_dir}"]

        try:
            for sub in ("agents", "tools", "workflows"):
                (src_dir / sub).mkdir(parents=True, exist_ok=True)

            (project_dir / "package.json").write_text(
                json.dumps(templates.package_json(config), indent=2), encoding="utf-8"
            )
            logs.append("✓ Generated package.json")

            (project_dir / "tsconfig.json").write_text(
                json.dumps(templates.tsconfig_json(), indent=2), encoding="utf-8"
            )
            logs.append("✓ Generated tsconfig.json")

            (project_dir / ".env").write_text(templates.ENV_FILE, encoding="utf-8")
            logs.append("✓ Generated .env file")

            (src_dir / "tools" / "index.ts").write_text(templates.tools_index(config.tools), encoding="utf-8")
            logs.append("✓ Generated tools/index.ts")

            (src_dir / "agents" / "index.ts").write_text(templates.agents_index(config.agents), encoding="utf-8")
            logs.append("✓ Generated agents/index.ts")

            (src_dir / "workflows" / "index.ts").write_text(
                templates.workflows_index(config.workflows), encoding="utf-8"
            )
            logs.append(
                "✓ Generated workflows/index.ts" if config.workflows
                else "✓ Generated empty workflows/index.ts"
            )

            (src_dir / "index.ts").write_text(templates.mastra_index(config), encoding="utf-8")
            logs.append("✓ Generated main index.ts")

        except (OSError, ValueError) as e:
            logs.append(f"Scaffolding failed with error: {e}")
            return MaterializationResult(
                success=False,
                project_path=str(base),
                message=f"Scaffolding failed: {e}",
                logs=logs,
            )

        return MaterializationResult(
            success=True,
            project_path=str(project_dir),
            message=f"Project '{config.project_name}' scaffolded successfully!",
            logs=logs,
        )

    def check_status(
        self,
        project_name: str,
        output_path: Optional[Union[str, Path]] = None,
    ) -> ScaffoldStatus:
        """Report whether a materialized project exists and has its essential files."""
        base = Path(output_path) if output_path is not None else settings.get_output_path()
        if not _is_single_segment(project_name):
            return ScaffoldStatus(
                exists=False,
                is_valid=False,
                path=str(base),
                files=[],
                message=f"Project name is not a single directory name: {project_name}",
            )
        project_dir = base / project_name

        if not project_dir.exists():
            return ScaffoldStatus(
                exists=False,
                is_valid=False,
                path=str(project_dir),
                files=[],
                message=f"Project directory does not exist: {project_dir}",
            )
        if not project_dir.is_dir():
            return ScaffoldStatus(
                exists=False,
                is_valid=False,
                path=str(project_dir),
                files=[],
                message=f"Path exists but is not a directory: {project_dir}",
            )

        try:
            files = sorted(
                p.relative_to(project_dir).as_posix() for p in project_dir.rglob("*") if p.is_file()
            )
        except OSError as e:
            return ScaffoldStatus(
                exists=True,
                is_valid=False,
                path=str(project_dir),
                files=[],
                message=f"Error checking project: {e}",
            )

        present = {name: name in files for name in ESSENTIAL_FILES}
        is_valid = all(present.values())
        if is_valid:
            message = f"Project is valid and ready to use at: {project_dir}"
        else:
            missing = ", ".join(name for name, ok in present.items() if not ok)
            message = f"Project exists but missing essential files: {missing}"

        return ScaffoldStatus(
            exists=True,
            is_valid=is_valid,
            path=str(project_dir),
            files=files,
            message=message,
        )
