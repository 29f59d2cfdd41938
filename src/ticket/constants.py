"""Constants for the tk CLI."""

from __future__ import annotations

import re


def parse_tags(raw: str) -> list[str]:
    """Parse a tags string that may be comma-separated, space-separated, or both.

    Examples:
        "ui,backend"   -> ["ui", "backend"]
        "ui backend"   -> ["ui", "backend"]
        ""             -> []
    """
    return [tag for tag in re.split(r"[,\s]+", raw) if tag]


# Directory and file layout
TICKETS_DIRNAME = ".tickets"
TICKETS_DIR_ENV = "TICKETS_DIR"
TICKET_SUFFIX = ".md"
CONFIG_FILENAME = "config.toml"

# Front matter marker delimiting the header block
HEADER_MARKER = "---"

# Header fields, in the order they are written for new tickets
FIELD_ORDER = (
    "id",
    "status",
    "deps",
    "links",
    "created",
    "type",
    "priority",
    "assignee",
    "external-ref",
    "parent",
    "tags",
)

# Default values
DEFAULT_TITLE = "Untitled"
DEFAULT_TYPE = "task"
DEFAULT_PRIORITY = 2
DEFAULT_PRUNE_DAYS = 30
DEFAULT_CLOSED_LIMIT = 20
DEFAULT_PREFIX = "tk"

TICKET_TYPES = ("bug", "feature", "task", "epic", "chore")
PRIORITY_RANGE = range(5)

# Statuses that count as "work still to do" and as "finished"
ACTIVE_STATUSES = frozenset({"open", "in_progress"})
CLOSED_STATUSES = frozenset({"closed", "done"})

# ID generation
ID_SUFFIX_ALPHABET = "0123456789abcdefghijklmnopqrstuvwxyz"
ID_SUFFIX_LENGTH = 4
ID_MAX_RETRIES = 50

# Body section that collects timestamped notes
NOTES_HEADING = "## Notes"

# External command lookup
PLUGIN_PREFIX = "tk-"
PLUGIN_SCRIPT_ENV = "TK_SCRIPT"

# Color mappings for CLI display
PRIORITY_COLORS = {
    0: "bright_red",
    1: "yellow",
    2: "white",
    3: "cyan",
    4: "bright_black",
}

STATUS_COLORS = {
    "open": "bright_green",
    "in_progress": "bright_blue",
    "closed": "white",
    "done": "white",
}
