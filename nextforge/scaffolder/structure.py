"""Fixed directory layout added on top of the baseline application."""

from __future__ import annotations

import asyncio
from pathlib import Path

PROJECT_DIRECTORIES: tuple[str, ...] = (
    "components",
    "components/ui",
    "components/sections",
    "components/layout",
    "components/features",
    "lib",
    "types",
    "hooks",
    "styles",
    "public/images",
)


async def create_project_structure(project_root: str | Path) -> list[Path]:
    """Ensure every directory in ``PROJECT_DIRECTORIES`` exists under *project_root*.

    Idempotent. Any ``OSError`` (e.g. permission denied) propagates.

    Returns:
        The ten directory paths, in declaration order.
    """
    root = Path(project_root)
    created: list[Path] = []
    for rel in PROJECT_DIRECTORIES:
        dir_path = root / rel
        await asyncio.to_thread(dir_path.mkdir, parents=True, exist_ok=True)
        created.append(dir_path)
    return created
