"""nextforge scaffolder -- lays down the project before any code is synthesised.

Quick usage::

    from nextforge.scaffolder import create_next_app, create_project_structure

    project_path = await create_next_app(config)
    await create_project_structure(project_path)
"""

from nextforge.scaffolder.create_app import ScaffoldError, create_next_app
from nextforge.scaffolder.structure import PROJECT_DIRECTORIES, create_project_structure

__all__ = [
    "PROJECT_DIRECTORIES",
    "ScaffoldError",
    "create_next_app",
    "create_project_structure",
]
