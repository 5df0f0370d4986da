"""Console output, install command and state-file helpers.

Every phase of a generator run reports through the shared Rich ``console``
below; nothing in the package uses ``logging``.
"""

from __future__ import annotations

import asyncio
import json
from pathlib import Path
from typing import Any

from rich.console import Console
from rich.rule import Rule
from rich.table import Table

console = Console()

PHASE_NAMES: dict[int, str] = {
    1: "PROMPTING",
    2: "WRITING",
    3: "INSTALL",
    4: "END",
}

PHASE_COLORS: dict[int, str] = {
    1: "bright_cyan",
    2: "bright_green",
    3: "bright_yellow",
    4: "bright_blue",
}

# ---------------------------------------------------------------------------
# Install command
# ---------------------------------------------------------------------------


async def run_command(command: str, cwd: Path, timeout: int) -> tuple[int, str, str]:
    """Run *command* through the shell inside *cwd*.

    Returns:
        ``(returncode, stdout, stderr)`` with both streams decoded and
        stripped.  A command still running after *timeout* seconds is
        killed and reported with return code ``-1``.
    """
    process = await asyncio.create_subprocess_shell(
        command,
        cwd=str(cwd),
        stdout=asyncio.subprocess.PIPE,
        stderr=asyncio.subprocess.PIPE,
    )
    try:
        out, err = await asyncio.wait_for(process.communicate(), timeout=timeout)
    except asyncio.TimeoutError:
        process.kill()
        await process.wait()
        return -1, "", f"`{command}` did not finish within {timeout}s"

    return (
        process.returncode or 0,
        out.decode("utf-8", errors="replace").strip(),
        err.decode("utf-8", errors="replace").strip(),
    )


# ---------------------------------------------------------------------------
# State file
# ---------------------------------------------------------------------------


def load_json(path: Path) -> dict[str, Any]:
    """Read a JSON object from *path*.

    Raises:
        OSError: The file cannot be read.
        ValueError: The file is not JSON, or holds something other than an
            object.
    """
    data = json.loads(path.read_text(encoding="utf-8"))
    if not isinstance(data, dict):
        raise ValueError(f"{path.name} does not hold a JSON object")
    return data


async def save_json(data: dict[str, Any], path: Path) -> None:
    """Write *data* as indented JSON with a trailing newline."""
    text = json.dumps(data, indent=2, ensure_ascii=False) + "\n"
    await asyncio.to_thread(path.write_text, text, "utf-8")


def format_duration(seconds: float) -> str:
    """``"0.4s"`` under a minute, ``"2m 05s"`` above."""
    seconds = max(seconds, 0.0)
    if seconds < 60:
        return f"{seconds:.1f}s"
    minutes, rest = divmod(int(seconds), 60)
    return f"{minutes}m {rest:02d}s"


# ---------------------------------------------------------------------------
# Rich output
# ---------------------------------------------------------------------------


def print_phase_header(phase: int, name: str) -> None:
    color = PHASE_COLORS.get(phase, "white")
    console.print()
    console.print(Rule(f"[bold {color}]{phase}. {name}[/bold {color}]", style=color))


def print_summary_table(rows: dict[str, str], title: str) -> None:
    """Render *rows* as a two-column table."""
    table = Table(title=title, header_style="bold cyan")
    table.add_column("Item", style="dim", no_wrap=True)
    table.add_column("Value")
    for label, value in rows.items():
        table.add_row(label, value)
    console.print(table)


def _styled(message: str, style: str) -> None:
    console.print(f"[{style}]{message}[/{style}]")


def print_success(message: str) -> None:
    _styled(message, "bold green")


def print_error(message: str) -> None:
    _styled(message, "bold red")


def print_warning(message: str) -> None:
    _styled(message, "bold yellow")
