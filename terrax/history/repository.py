"""JSON-lines history file: append, load, trim and id allocation.

Each line holds one ``ExecutionLogEntry``. Reads skip malformed lines; a
missing file behaves like an empty history.
"""

from __future__ import annotations

import json
import logging
import os
from pathlib import Path

from .types import ExecutionLogEntry

logger = logging.getLogger(__name__)


class FileRepository:
    """History persistence backed by one JSONL file."""

    def __init__(self, file_path: Path) -> None:
        self.file_path = Path(file_path)

    def append(self, entry: ExecutionLogEntry) -> None:
        self.file_path.parent.mkdir(parents=True, exist_ok=True)
        line = json.dumps(entry.to_dict(), ensure_ascii=False)
        with self.file_path.open("a", encoding="utf-8") as handle:
            handle.write(line + "\n")

    def _read_lines(self) -> list[str]:
        try:
            return self.file_path.read_text(encoding="utf-8").splitlines()
        except FileNotFoundError:
            return []

    def load_all(self) -> list[ExecutionLogEntry]:
        """Return every readable entry, most recent first."""
        entries: list[ExecutionLogEntry] = []
        for number, line in enumerate(self._read_lines(), start=1):
            if not line.strip():
                continue
            try:
                entries.append(ExecutionLogEntry.from_dict(json.loads(line)))
            except ValueError as exc:
                logger.debug("skipping history line %d: %s", number, exc)
        entries.reverse()
        return entries

    def trim(self, max_entries: int) -> None:
        """Keep only the newest ``max_entries`` lines, replacing the file atomically."""
        if max_entries <= 0:
            raise ValueError(f"max_entries must be positive, got: {max_entries}")
        lines = self._read_lines()
        if len(lines) <= max_entries:
            return

        temp_path = self.file_path.with_name(self.file_path.name + ".tmp")
        try:
            with temp_path.open("w", encoding="utf-8") as handle:
                for line in lines[-max_entries:]:
                    handle.write(line + "\n")
            os.replace(temp_path, self.file_path)
        except OSError:
            temp_path.unlink(missing_ok=True)
            raise

    def next_id(self) -> int:
        last_id = 0
        for line in self._read_lines():
            try:
                data = json.loads(line)
            except ValueError:
                continue
            value = data.get("id") if isinstance(data, dict) else None
            if isinstance(value, int) and not isinstance(value, bool) and value > last_id:
                last_id = value
        return last_id + 1
