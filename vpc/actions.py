"""GitHub Actions runner surface: log lines, step outputs, exported env vars."""

import os
import uuid
from pathlib import Path

from rich.console import Console

# Runner logs are plain text; soft_wrap keeps long URLs on one line.
console = Console(soft_wrap=True, highlight=False, markup=False, emoji=False)


def info(message: str) -> None:
    console.print(message)


def warning(message: str) -> None:
    console.print(f"::warning::{_escape(message)}")


def error(message: str) -> None:
    console.print(f"::error::{_escape(message)}")


def set_failed(message: str) -> None:
    """Mark the step failed with message as the visible reason."""
    error(message)


def _escape(message: str) -> str:
    return message.replace("%", "%25").replace("\r", "%0D").replace("\n", "%0A")


def _append_file_command(env_var: str, name: str, value: str) -> bool:
    """Append name/value to the runner file named by env_var. Returns False if unset."""
    path = os.environ.get(env_var)
    if not path:
        return False
    delimiter = f"ghadelimiter_{uuid.uuid4()}"
    with Path(path).open("a", encoding="utf-8") as fh:
        fh.write(f"{name}<<{delimiter}\n{value}\n{delimiter}\n")
    return True


def set_output(name: str, value: str) -> None:
    """Expose value to later steps as steps.<id>.outputs.<name>."""
    if not _append_file_command("GITHUB_OUTPUT", name, value):
        # Outside a runner: print the legacy workflow command so the value is visible.
        console.print(f"::set-output name={name}::{_escape(value)}")


def export_variable(name: str, value: str) -> None:
    """Set name for this process (and its children) and for later steps."""
    os.environ[name] = value
    _append_file_command("GITHUB_ENV", name, value)
