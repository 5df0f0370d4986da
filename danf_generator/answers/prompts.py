"""Questions asked to the user before generating a project.

Each question is identified by the key-path its answer is stored under.
The :class:`Prompter` collects the answers as a flat mapping, either
interactively through ``rich.prompt`` or from preset values and defaults
when running unattended.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence

from pydantic import BaseModel, Field
from rich.console import Console
from rich.panel import Panel
from rich.prompt import Prompt

from danf_generator.utils import console as default_console


class PromptSpec(BaseModel):
    """A single question."""

    name: str = Field(..., description="Key-path the answer is stored under")
    message: str = Field(..., description="Question shown to the user")
    default: str = Field(default="", description="Answer used when none is given")


DEFAULT_PROMPTS: list[PromptSpec] = [
    PromptSpec(name="app.name", message="The application name", default="test"),
    PromptSpec(
        name="app.description",
        message="The application description",
        default="This is a danf test application",
    ),
    PromptSpec(
        name="repository.username",
        message="The username owning the repository",
        default="johndorg",
    ),
    PromptSpec(name="author.name", message="Your name", default="John Doe"),
    PromptSpec(name="author.email", message="Your email", default="john@doe.js"),
    PromptSpec(
        name="author.url",
        message="The URL of your personal site or repository provider account",
        default="https://johndoe.js",
    ),
]


class Prompter:
    """Collects answers to a list of :class:`PromptSpec`.

    Args:
        interactive: Ask on the console.  When ``False`` every answer comes
            from the preset values or the prompt defaults.
        console: Rich console used for the greeting and the questions.
    """

    def __init__(self, interactive: bool = True, console: Console | None = None) -> None:
        self.interactive = interactive
        self.console = console or default_console

    def greet(self) -> None:
        """Print the greeting banner and the privacy notice."""
        self.console.print(
            Panel(
                "Did I say 42? I wanted to say [bold blue]Danf[/bold blue]! "
                "I don't remember the question...",
                border_style="bright_cyan",
            )
        )
        self.console.print(
            "All the following questions will help you to configure a new danf "
            "application/module ready to be shared with others."
        )
        self.console.print(
            "[dim]These data will not be used for anything else.[/dim]\n"
        )

    def ask(
        self,
        prompts: Sequence[PromptSpec] | None = None,
        preset: Mapping[str, str] | None = None,
    ) -> dict[str, str]:
        """Return the answers keyed by key-path, in prompt order.

        Preset values replace the defaults (and skip the question when
        running unattended).  Preset keys matching no prompt are appended
        after the prompted answers.
        """
        prompts = DEFAULT_PROMPTS if prompts is None else prompts
        preset = dict(preset or {})

        answers: dict[str, str] = {}
        for spec in prompts:
            default = preset.pop(spec.name, spec.default)
            if self.interactive:
                answers[spec.name] = Prompt.ask(
                    spec.message, default=default, console=self.console
                )
            else:
                answers[spec.name] = default

        answers.update(preset)
        return answers


def parse_answer_overrides(items: Sequence[str]) -> dict[str, str]:
    """Parse ``KEY=VALUE`` command-line items into a flat answers mapping.

    Raises:
        ValueError: An item has no ``=`` or an empty key.
    """
    overrides: dict[str, str] = {}
    for item in items:
        key, sep, value = item.partition("=")
        key = key.strip()
        if not sep or not key:
            raise ValueError(f"Invalid answer {item!r}: expected KEY=VALUE")
        overrides[key] = value
    return overrides
