"""External command registry.

Any executable named ``tk-<name>`` on ``PATH`` is available as
``tk <name>``.  Built-in commands always take precedence.  The handler
runs with the caller's stdio and receives, in its environment:

- ``TICKETS_DIR``: absolute path of the tickets directory
- ``TK_SCRIPT``: the program that invoked it

Its exit status becomes tk's exit status.
"""

from __future__ import annotations

import os
import shutil
import subprocess
import sys
from dataclasses import dataclass
from pathlib import Path

from ticket.constants import PLUGIN_PREFIX, PLUGIN_SCRIPT_ENV, TICKETS_DIR_ENV


@dataclass(frozen=True)
class ExternalCommand:
    """An external command found on the search path."""

    name: str
    path: Path


def find_command(name: str, search_path: str | None = None) -> ExternalCommand | None:
    """Look up the ``tk-<name>`` executable for a command name."""
    if not name or os.sep in name:
        return None
    found = shutil.which(f"{PLUGIN_PREFIX}{name}", path=search_path)
    if found is None:
        return None
    return ExternalCommand(name=name, path=Path(found))


def discover_commands(search_path: str | None = None) -> dict[str, ExternalCommand]:
    """Map every ``tk-*`` executable on the search path to its command name.

    Earlier path entries shadow later ones, like the shell does.
    """
    raw = search_path if search_path is not None else os.environ.get("PATH", "")
    commands: dict[str, ExternalCommand] = {}
    for entry in raw.split(os.pathsep):
        directory = Path(entry) if entry else Path.cwd()
        if not directory.is_dir():
            continue
        try:
            candidates = sorted(directory.glob(f"{PLUGIN_PREFIX}*"))
        except OSError:
            continue
        for candidate in candidates:
            name = candidate.name[len(PLUGIN_PREFIX) :]
            if (
                name
                and name not in commands
                and candidate.is_file()
                and os.access(candidate, os.X_OK)
            ):
                commands[name] = ExternalCommand(name=name, path=candidate)
    return commands


def run_command(
    command: ExternalCommand,
    args: list[str],
    tickets_dir: str | Path,
    script: str | None = None,
) -> int:
    """Run an external command and return its exit status."""
    env = {
        **os.environ,
        TICKETS_DIR_ENV: str(Path(tickets_dir).resolve()),
        PLUGIN_SCRIPT_ENV: script or sys.argv[0],
    }
    completed = subprocess.run(
        [str(command.path), *args],
        env=env,
        check=False,
    )
    return completed.returncode
