"""Baseline application scaffolding via ``create-next-app``.

The external command is treated as opaque: it is run with fixed flags in the
output directory, inherits our standard streams so the user sees its prompts
and progress, and only its exit code is inspected.
"""

from __future__ import annotations

from pathlib import Path

from nextforge.config import Config
from nextforge.utils import ensure_dir, run_command


class ScaffoldError(Exception):
    """Raised when the baseline application could not be created."""


async def create_next_app(config: Config) -> Path:
    """Lay down the baseline Next.js application for ``config.project_name``.

    Returns:
        Path to the new project root.

    Raises:
        ScaffoldError: If the project directory already exists, or the
            scaffolding command exits non-zero.
    """
    project_path = config.project_path
    if project_path.exists():
        raise ScaffoldError(f"Directory already exists: {project_path}")

    ensure_dir(config.output_dir)
    cmd = config.scaffold_command()

    returncode, _, stderr = await run_command(
        cmd,
        cwd=config.output_dir,
        timeout=config.scaffold.timeout,
        capture=False,
    )
    if returncode != 0:
        detail = f": {stderr}" if stderr else ""
        raise ScaffoldError(
            f"Command failed with exit code {returncode}: {' '.join(cmd)}{detail}"
        )

    return project_path
