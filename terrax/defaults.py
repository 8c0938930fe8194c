"""Default values shared by config loading, the column model and the executor."""

from __future__ import annotations

DEFAULT_COMMANDS: tuple[str, ...] = (
    "plan",
    "apply",
    "validate",
    "fmt",
    "init",
    "output",
    "refresh",
    "destroy",
)

DEFAULT_MAX_NAVIGATION_COLUMNS = 3
MIN_MAX_NAVIGATION_COLUMNS = 1

DEFAULT_HISTORY_MAX_ENTRIES = 500
MIN_HISTORY_MAX_ENTRIES = 10

# Marks the project root; history is grouped per project by this file.
DEFAULT_ROOT_CONFIG_FILE = "root.hcl"
DEFAULT_LOG_FORMAT = "pretty"

# Runs of this command are followed by the plan review screen.
PLAN_COMMAND = "plan"
# Concurrent ``terraform show`` processes when terragrunt.parallelism is unset.
DEFAULT_PLAN_PARALLELISM = 4
