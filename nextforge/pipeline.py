"""nextforge pipeline orchestrator.

Implements the five-stage generation run:

Stage 1: SCAFFOLD   -- Lay down the baseline app with create-next-app.
Stage 2: PLAN       -- Classify the description into a project plan.
Stage 3: STRUCTURE  -- Create the fixed directory layout.
Stage 4: COMPONENTS -- Generate one source file per planned component.
Stage 5: TYPES      -- Generate type definitions for the plan's data structures.

Stages run strictly in order and the first failure ends the run. Nothing
already written is cleaned up.

Usage::

    nextforge my-site "a landing page with a hero and pricing table"
    python -m nextforge.pipeline my-site "a blog" --theme dark --style playful
"""

from __future__ import annotations

import argparse
import asyncio
import sys
import time
import traceback
from pathlib import Path
from typing import Any

from dotenv import load_dotenv
from pydantic import ValidationError
from rich.markup import escape
from rich.panel import Panel

from nextforge import __version__
from nextforge.chat_client import ChatClient
from nextforge.config import Config
from nextforge.planner import (
    ComponentSpec,
    PlanningError,
    PlanParseError,
    ProjectPlan,
    analyze_requirements,
)
from nextforge.planner.models import validate_file_stem
from nextforge.prompts import PromptRenderer
from nextforge.scaffolder import ScaffoldError, create_next_app, create_project_structure
from nextforge.synthesizer import (
    ComponentSynthesizer,
    SynthesisError,
    TypeDefinitionError,
    synthesize_types,
)
from nextforge.utils import (
    STAGE_NAMES,
    console,
    create_progress,
    ensure_dir,
    format_duration,
    print_error,
    print_stage_header,
    print_success,
    print_summary_table,
    print_warning,
)

# ---------------------------------------------------------------------------
# Exceptions
# ---------------------------------------------------------------------------


class PipelineError(Exception):
    """Raised when a pipeline stage fails irrecoverably."""

    def __init__(self, stage: int, message: str) -> None:
        self.stage = stage
        super().__init__(f"Stage {stage} ({STAGE_NAMES.get(stage, '?')}): {message}")


# ---------------------------------------------------------------------------
# Pipeline Orchestrator
# ---------------------------------------------------------------------------


class Pipeline:
    """Drives one generation run from scaffold to type definitions.

    Attributes:
        config: Run configuration.
        client: Chat client passed to every stage that talks to the model.
        renderer: Prompt renderer shared by the planner and synthesizers.
        plan: The project plan, available once stage 2 has completed.
        state: Dictionary that accumulates results from each stage.
    """

    _STAGE_METHODS: dict[int, str] = {
        1: "stage1_scaffold",
        2: "stage2_plan",
        3: "stage3_structure",
        4: "stage4_components",
        5: "stage5_types",
    }

    def __init__(self, config: Config, client: ChatClient | None = None) -> None:
        self.config = config
        self.client = client or ChatClient(
            base_url=config.chat.base_url,
            api_key=config.chat.api_key,
            model=config.chat.model,
            timeout=config.chat.timeout,
        )
        self.renderer = PromptRenderer()
        self.description = ""
        self.plan: ProjectPlan | None = None
        self.state: dict[str, Any] = {
            "stages_completed": [],
            "stages_failed": [],
            "success": False,
        }

    async def run(self, description: str) -> dict[str, Any]:
        """Execute all five stages for *description*.

        Returns:
            The final state dictionary, including a top-level ``success``
            boolean and an ``error`` message when a stage failed.
        """
        self.description = description
        run_start = time.monotonic()

        console.print(
            Panel(
                f"[bold bright_cyan]Creating your custom Next.js application[/bold bright_cyan]\n"
                f"Project : {self.config.project_name}\n"
                f"Output  : {self.config.project_path.resolve()}\n"
                f"Model   : {self.client.model}\n"
                f"Theme   : {self.config.generation.theme}\n"
                f"Style   : {self.config.generation.style}",
                title="[bold]nextforge[/bold]",
                border_style="bright_cyan",
            )
        )

        for stage_num in sorted(self._STAGE_METHODS):
            stage_name = STAGE_NAMES[stage_num]
            print_stage_header(stage_num, stage_name)

            stage_start = time.monotonic()
            try:
                method = getattr(self, self._STAGE_METHODS[stage_num])
                self.state[f"stage{stage_num}"] = await method()
                self.state["stages_completed"].append(stage_num)
                print_success(
                    f"Stage {stage_num} ({stage_name}) completed in "
                    f"{format_duration(time.monotonic() - stage_start)}"
                )

            except PipelineError as exc:
                self.state["stages_failed"].append(stage_num)
                self.state["error"] = str(exc)
                print_error(f"Error creating project: {escape(str(exc))}")
                break

            except Exception as exc:
                self.state["stages_failed"].append(stage_num)
                self.state["error"] = str(exc)
                print_error(f"Error creating project: {escape(str(exc))}")
                console.print(traceback.format_exc(), style="dim", markup=False)
                break

        self.state["success"] = not self.state["stages_failed"]
        self.state["total_duration"] = format_duration(time.monotonic() - run_start)
        self._print_final_summary()
        return self.state

    # ------------------------------------------------------------------
    # Stage 1: SCAFFOLD
    # ------------------------------------------------------------------

    async def stage1_scaffold(self) -> dict[str, Any]:
        """Run create-next-app, or just make sure the project root exists."""
        project_path = self.config.project_path

        if not self.config.scaffold.enabled:
            print_warning("  Scaffolding disabled -- using existing project directory.")
            ensure_dir(project_path)
            return {"project_path": str(project_path), "scaffolded": False}

        console.print(
            f"  Installing Next.js application: [bold]{' '.join(self.config.scaffold_command())}[/bold]"
        )
        try:
            await create_next_app(self.config)
        except ScaffoldError as exc:
            raise PipelineError(1, str(exc)) from exc

        return {"project_path": str(project_path), "scaffolded": True}

    # ------------------------------------------------------------------
    # Stage 2: PLAN
    # ------------------------------------------------------------------

    async def stage2_plan(self) -> dict[str, Any]:
        """Ask the model for a project plan."""
        generation = self.config.generation

        with create_progress() as progress:
            progress.add_task("Analyzing project requirements...", total=None)
            try:
                plan = await analyze_requirements(
                    self.client,
                    self.description,
                    theme=generation.theme,
                    style=generation.style,
                    renderer=self.renderer,
                )
            except PlanParseError as exc:
                progress.stop()
                print_error("Failed to parse JSON:")
                console.print(exc.raw, markup=False, highlight=False)
                raise PipelineError(2, str(exc)) from exc
            except PlanningError as exc:
                raise PipelineError(2, str(exc)) from exc

        self.plan = plan

        print_summary_table(
            {
                "Components": ", ".join(plan.component_names()) or "(none)",
                "Pages": ", ".join(f"{p.name} ({p.route})" for p in plan.pages) or "(none)",
                "Features": str(len(plan.features)),
                "Data structures": ", ".join(plan.data_structures) or "(none)",
            },
            title="Project Plan",
        )

        return {
            "components": len(plan.components),
            "pages": len(plan.pages),
            "features": len(plan.features),
            "data_structures": len(plan.data_structures),
        }

    # ------------------------------------------------------------------
    # Stage 3: STRUCTURE
    # ------------------------------------------------------------------

    async def stage3_structure(self) -> dict[str, Any]:
        """Create the fixed directory layout."""
        try:
            created = await create_project_structure(self.config.project_path)
        except OSError as exc:
            raise PipelineError(3, f"Could not create project structure: {exc}") from exc

        console.print(f"  {len(created)} directories ready under [bold]{self.config.project_path}[/bold]")
        return {"directories": [str(p) for p in created]}

    # ------------------------------------------------------------------
    # Stage 4: COMPONENTS
    # ------------------------------------------------------------------

    async def stage4_components(self) -> dict[str, Any]:
        """Generate every planned component."""
        plan = self._require_plan(4)
        generation = self.config.generation

        if not plan.components:
            print_warning("  Plan has no components -- nothing to generate.")
            return {"files": []}

        synthesizer = ComponentSynthesizer(
            self.client,
            self.config.components_path,
            renderer=self.renderer,
            extension=generation.component_extension,
            max_concurrent=generation.max_concurrent_components,
        )

        with create_progress() as progress:
            task_id = progress.add_task("Generating components...", total=None)

            def _on_component(component: ComponentSpec) -> None:
                progress.update(task_id, description=f"Generating {component.name}...")

            try:
                written = await synthesizer.synthesize_all(plan.components, on_component=_on_component)
            except SynthesisError as exc:
                raise PipelineError(4, str(exc)) from exc
            except OSError as exc:
                raise PipelineError(4, f"Could not write component: {exc}") from exc

        for path in written:
            console.print(f"  [green]+[/green] {path.relative_to(self.config.project_path)}")

        return {"files": [str(p) for p in written]}

    # ------------------------------------------------------------------
    # Stage 5: TYPES
    # ------------------------------------------------------------------

    async def stage5_types(self) -> dict[str, Any]:
        """Generate ``types/index.ts`` when the plan declares data structures."""
        plan = self._require_plan(5)

        if not plan.data_structures:
            console.print("  [dim]No data structures declared -- skipping.[/dim]")
            return {"skipped": True}

        with create_progress() as progress:
            progress.add_task("Generating type definitions...", total=None)
            try:
                path = await synthesize_types(
                    self.client,
                    plan.data_structures,
                    self.config.types_path,
                    renderer=self.renderer,
                )
            except TypeDefinitionError as exc:
                raise PipelineError(5, str(exc)) from exc
            except OSError as exc:
                raise PipelineError(5, f"Could not write type definitions: {exc}") from exc

        console.print(f"  [green]+[/green] {path.relative_to(self.config.project_path)}")
        return {"skipped": False, "file": str(path)}

    # ------------------------------------------------------------------

    def _require_plan(self, stage: int) -> ProjectPlan:
        if self.plan is None:
            raise PipelineError(stage, "No project plan available (stage 2 has not run)")
        return self.plan

    def _print_final_summary(self) -> None:
        """Print the closing panel, with next steps on success."""
        if self.state.get("success"):
            console.print()
            console.print(
                Panel(
                    "[bold green]Your custom Next.js application is ready![/bold green]\n\n"
                    f"Duration : {self.state['total_duration']}\n\n"
                    "Next steps:\n"
                    f"  [cyan]cd {self.config.project_path}[/cyan]\n"
                    "  [cyan]npm run dev[/cyan]",
                    title="[bold]Done[/bold]",
                    border_style="bold green",
                )
            )
            return

        failed = ", ".join(str(s) for s in self.state.get("stages_failed", []))
        console.print()
        console.print(
            Panel(
                "[bold red]PROJECT GENERATION FAILED[/bold red]\n\n"
                f"Duration  : {self.state['total_duration']}\n"
                f"Completed : {', '.join(str(s) for s in self.state['stages_completed']) or 'none'}\n"
                f"Failed    : {failed}\n"
                f"Output    : {self.config.project_path.resolve()} (left as-is)",
                title="[bold]Aborted[/bold]",
                border_style="bold red",
            )
        )


# ---------------------------------------------------------------------------
# CLI entry point
# ---------------------------------------------------------------------------


def build_parser() -> argparse.ArgumentParser:
    """Return the argument parser for the ``nextforge`` command."""
    parser = argparse.ArgumentParser(
        prog="nextforge",
        description="Scaffold a Next.js application and generate its components with an LLM",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=(
            "Examples:\n"
            '  nextforge my-site "a landing page with a hero and pricing table"\n'
            '  nextforge shop "an online store" --theme dark --style playful\n'
            '  nextforge blog "a personal blog" --skip-scaffold -o ./sites\n'
        ),
    )

    parser.add_argument("project_name", help="Name of the Next.js project")
    parser.add_argument("description", help="Description of your project and desired components")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument(
        "--theme",
        default=None,
        help='Theme color scheme (default: "modern")',
    )
    parser.add_argument(
        "--style",
        default=None,
        help='Design style (default: "minimal")',
    )
    parser.add_argument(
        "--api-key",
        default=None,
        help="API key for the completion endpoint (default: $XAI_API_KEY)",
    )
    parser.add_argument(
        "--model",
        default=None,
        help="Model identifier (default: grok-2-1212)",
    )
    parser.add_argument(
        "--base-url",
        default=None,
        help="Base URL of the OpenAI-compatible API (default: https://api.x.ai/v1)",
    )
    parser.add_argument(
        "--output", "-o",
        default=None,
        help="Parent directory for the project (default: current directory)",
    )
    parser.add_argument(
        "--skip-scaffold",
        action="store_true",
        help="Do not run create-next-app; generate into an existing directory",
    )
    parser.add_argument(
        "--max-concurrent",
        type=int,
        default=None,
        help="Maximum component completions in flight (default: 1, sequential)",
    )
    return parser


def main(argv: list[str] | None = None) -> None:
    """CLI entry point for ``nextforge`` and ``python -m nextforge.pipeline``."""
    args = build_parser().parse_args(argv)
    load_dotenv()

    try:
        config = Config.from_env()
        config.project_name = validate_file_stem(args.project_name, "project name")
        if args.output:
            config.output_dir = Path(args.output)
        if args.api_key:
            config.chat.api_key = args.api_key
        if args.model:
            config.chat.model = args.model
        if args.base_url:
            config.chat.base_url = args.base_url
        if args.theme:
            config.generation.theme = args.theme
        if args.style:
            config.generation.style = args.style
        if args.max_concurrent is not None:
            if args.max_concurrent < 1:
                raise ValueError("--max-concurrent must be at least 1")
            config.generation.max_concurrent_components = args.max_concurrent
        if args.skip_scaffold:
            config.scaffold.enabled = False
    except (ValidationError, ValueError) as exc:
        console.print(f"[bold red]Error:[/bold red] Invalid configuration: {exc}")
        sys.exit(1)

    if not config.chat.api_key:
        console.print(
            "[bold red]Error:[/bold red] No API key. Pass --api-key or set XAI_API_KEY."
        )
        sys.exit(1)

    pipeline = Pipeline(config)
    result = asyncio.run(pipeline.run(args.description))

    if not result.get("success"):
        sys.exit(1)


if __name__ == "__main__":
    main()
