"""Danf generator run loop.

Runs the four phases of a generation:

Phase 1: PROMPTING -- Ask the questions, merge the answers into props.
Phase 2: WRITING   -- Generate the project files and the ``.yo-rc.json`` state.
Phase 3: INSTALL   -- Install the npm dependencies of the new project.
Phase 4: END       -- Print what was generated and how to start it.

Usage::

    python -m danf_generator -o ./my-app
    python -m danf_generator --yes --skip-install -a app.name=blog
"""

from __future__ import annotations

import argparse
import asyncio
import sys
import time
import traceback
from collections.abc import Mapping, Sequence
from datetime import datetime, timezone
from typing import Any

from rich.panel import Panel

from danf_generator import __version__
from danf_generator.answers.keypath import AnswerKeyError
from danf_generator.answers.prompts import Prompter, parse_answer_overrides
from danf_generator.answers.props import PropsError, build_props, summary
from danf_generator.config import GeneratorConfig
from danf_generator.scaffolder import ProjectGenerator, ScaffoldError, TemplateRenderer
from danf_generator.utils import (
    PHASE_NAMES,
    console,
    format_duration,
    load_json,
    print_error,
    print_phase_header,
    print_success,
    print_summary_table,
    print_warning,
    run_command,
    save_json,
)

GENERATOR_NAME = "generator-danf"
DOCUMENTATION_URL = "https://github.com/gnodi/danf/blob/master/resource/private/doc/index.md"

# ---------------------------------------------------------------------------
# Exceptions
# ---------------------------------------------------------------------------


class GeneratorError(Exception):
    """Raised when a generator phase fails irrecoverably."""

    def __init__(self, phase: int, message: str) -> None:
        self.phase = phase
        super().__init__(f"Phase {phase} ({PHASE_NAMES.get(phase, '?')}): {message}")


# ---------------------------------------------------------------------------
# Pipeline
# ---------------------------------------------------------------------------


class Pipeline:
    """Drives one generator run.

    Attributes:
        config: Settings for the run.
        prompter: Source of the answers.
        answers: Flat answers collected in phase 1.
        props: Nested template context built from the answers.
        state: Accumulated results of each phase.
    """

    def __init__(self, config: GeneratorConfig, prompter: Prompter | None = None) -> None:
        self.config = config
        self.prompter = prompter or Prompter(interactive=config.interactive)
        self.answers: dict[str, str] = {}
        self.props: dict[str, Any] = {}
        self.state: dict[str, Any] = {
            "started_at": datetime.now(timezone.utc).isoformat(),
            "phases_completed": [],
            "phases_failed": [],
            "success": False,
        }

    _PHASE_METHODS: dict[int, str] = {
        1: "phase1_prompting",
        2: "phase2_writing",
        3: "phase3_install",
        4: "phase4_end",
    }

    async def run(self, preset: Mapping[str, str] | None = None) -> dict[str, Any]:
        """Execute every phase in order, stopping at the first failure.

        Args:
            preset: Answers supplied up front, keyed by key-path.

        Returns:
            The final state dictionary, including a top-level ``success``
            boolean.
        """
        run_start = time.monotonic()
        all_success = True

        for phase_num in sorted(self._PHASE_METHODS):
            phase_name = PHASE_NAMES[phase_num]
            print_phase_header(phase_num, phase_name)

            phase_start = time.monotonic()
            try:
                method = getattr(self, self._PHASE_METHODS[phase_num])
                if phase_num == 1:
                    result = await method(preset)
                else:
                    result = await method()
                self.state[f"phase{phase_num}"] = result
                self.state["phases_completed"].append(phase_num)

            except GeneratorError as exc:
                all_success = False
                self.state["phases_failed"].append(phase_num)
                self.state["error"] = str(exc)
                print_error(
                    f"{phase_name} failed after "
                    f"{format_duration(time.monotonic() - phase_start)}: {exc}"
                )
                break

            except Exception as exc:
                all_success = False
                self.state["phases_failed"].append(phase_num)
                self.state["error"] = traceback.format_exc()
                print_error(f"{phase_name} failed unexpectedly: {exc}")
                console.print(f"[dim]{self.state['error']}[/dim]")
                break

        total_elapsed = time.monotonic() - run_start
        self.state["success"] = all_success
        self.state["total_duration"] = format_duration(total_elapsed)
        self.state["finished_at"] = datetime.now(timezone.utc).isoformat()
        return self.state

    # ------------------------------------------------------------------
    # Phase 1: PROMPTING
    # ------------------------------------------------------------------

    async def phase1_prompting(self, preset: Mapping[str, str] | None = None) -> dict[str, Any]:
        """Collect the answers and build the template props.

        No file has been written yet, so a bad key-path aborts the run
        cleanly.
        """
        if self.config.interactive:
            self.prompter.greet()
        self.answers = self.prompter.ask(preset={**self._previous_answers(), **(preset or {})})

        try:
            self.props = build_props(self.answers)
        except AnswerKeyError as exc:
            raise GeneratorError(1, f"Invalid answer key {exc.key!r}: {exc}") from exc
        except PropsError as exc:
            raise GeneratorError(1, str(exc)) from exc

        return {"answers": dict(self.answers)}

    def _previous_answers(self) -> dict[str, str]:
        """Answers saved by an earlier run in the same directory, if any."""
        if not self.config.state_path.exists():
            return {}
        try:
            saved = load_json(self.config.state_path).get(GENERATOR_NAME, {})
        except (OSError, ValueError) as exc:
            print_warning(f"  Ignoring unreadable {self.config.state_path.name}: {exc}")
            return {}
        answers = saved.get("answers", {}) if isinstance(saved, dict) else {}
        if not isinstance(answers, dict):
            return {}
        return {str(key): str(value) for key, value in answers.items()}

    # ------------------------------------------------------------------
    # Phase 2: WRITING
    # ------------------------------------------------------------------

    async def phase2_writing(self) -> dict[str, Any]:
        """Write the project files, then the generator state file."""
        renderer = TemplateRenderer(self.config.template_dir)
        generator = ProjectGenerator(self.props, renderer)
        try:
            written = await generator.generate(self.config.output_dir, force=self.config.force)
        except ScaffoldError as exc:
            raise GeneratorError(2, str(exc)) from exc

        await save_json(
            {GENERATOR_NAME: {"version": __version__, "answers": self.answers}},
            self.config.state_path,
        )
        console.print(
            f"  [green]+[/green] {len(written)} file(s) written to "
            f"{self.config.output_dir.resolve()}"
        )
        return {
            "output_dir": str(self.config.output_dir.resolve()),
            "files_written": len(written),
        }

    # ------------------------------------------------------------------
    # Phase 3: INSTALL
    # ------------------------------------------------------------------

    async def phase3_install(self) -> dict[str, Any]:
        """Run the install command in the new project."""
        command = self.config.install_command
        if self.config.skip_install:
            print_warning(f"  Skipping `{command}`.")
            return {"skipped": True}

        console.print(f"  Running [bold]{command}[/bold]...")
        returncode, _stdout, stderr = await run_command(
            command,
            cwd=self.config.output_dir,
            timeout=self.config.install_timeout,
        )
        if returncode != 0:
            raise GeneratorError(3, f"`{command}` exited with code {returncode}: {stderr}")
        return {"skipped": False, "command": command}

    # ------------------------------------------------------------------
    # Phase 4: END
    # ------------------------------------------------------------------

    async def phase4_end(self) -> dict[str, Any]:
        """Print the congratulations and the next steps."""
        module_name = self.props["module"]["name"]
        repository_name = self.props["repository"]["name"]

        print_summary_table(summary(self.props), title="Generated project")
        console.print(
            Panel(
                "[bold yellow]Congratulations, the generation has been successful![/bold yellow]\n"
                f"The name of your danf application/module is [bold]{module_name}[/bold]. "
                f"The recommended name for your repository is [bold]{repository_name}[/bold].\n\n"
                "Execute [bold]node danf serve[/bold] to start the server.\n"
                "Take a look at [bold]http://localhost:3080[/bold] now!",
                border_style="yellow",
            )
        )
        print_success("Have a great time developing with Danf!")
        console.print(f"[dim]The documentation is available at {DOCUMENTATION_URL}[/dim]")
        return {"module": module_name, "repository": repository_name}


# ---------------------------------------------------------------------------
# CLI entry point
# ---------------------------------------------------------------------------


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="danf-generator",
        description="Scaffold a new danf application/module",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=(
            "Examples:\n"
            "  python -m danf_generator -o ./my-app\n"
            "  python -m danf_generator --yes --skip-install -a app.name=blog\n"
        ),
    )
    parser.add_argument(
        "--output", "-o",
        default=None,
        help="Directory the project is generated in (default: current directory)",
    )
    parser.add_argument(
        "--answer", "-a",
        action="append",
        default=[],
        metavar="KEY=VALUE",
        help="Answer a question up front, e.g. author.name='Jane Doe' (repeatable)",
    )
    parser.add_argument(
        "--yes", "-y",
        action="store_true",
        help="Do not ask; use the given answers and the defaults",
    )
    parser.add_argument(
        "--skip-install",
        action="store_true",
        help="Do not install the npm dependencies",
    )
    parser.add_argument(
        "--force",
        action="store_true",
        help="Overwrite files that already exist",
    )
    parser.add_argument(
        "--template-dir",
        default=None,
        help="Use templates from this directory instead of the bundled ones",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def main(argv: Sequence[str] | None = None) -> None:
    """CLI entry point for ``python -m danf_generator``."""
    args = build_parser().parse_args(argv)

    try:
        preset = parse_answer_overrides(args.answer)
    except ValueError as exc:
        print_error(f"Error: {exc}")
        sys.exit(1)

    update: dict[str, Any] = {}
    if args.output:
        update["output_dir"] = args.output
    if args.template_dir:
        update["template_dir"] = args.template_dir
    if args.yes:
        update["interactive"] = False
    if args.skip_install:
        update["skip_install"] = True
    if args.force:
        update["force"] = True
    try:
        config = GeneratorConfig.from_env()
        config = GeneratorConfig.model_validate({**config.model_dump(), **update})
    except ValueError as exc:
        print_error(f"Invalid configuration: {exc}")
        sys.exit(1)

    pipeline = Pipeline(config)
    result = asyncio.run(pipeline.run(preset))

    if not result.get("success"):
        sys.exit(1)
