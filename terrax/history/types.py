"""Execution history record type."""

from __future__ import annotations

from dataclasses import asdict, dataclass
from datetime import datetime, timezone

EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


def _parse_timestamp(value: object) -> datetime:
    if value in (None, ""):
        return EPOCH
    if not isinstance(value, str):
        raise ValueError(f"invalid timestamp: {value!r}")
    text = value.strip()
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    parsed = datetime.fromisoformat(text)
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def _int_field(data: dict, key: str) -> int:
    value = data.get(key, 0)
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ValueError(f"invalid {key}: {value!r}")
    return int(value)


def _str_field(data: dict, key: str) -> str:
    value = data.get(key, "")
    if value is None:
        return ""
    if not isinstance(value, str):
        raise ValueError(f"invalid {key}: {value!r}")
    return value


@dataclass(frozen=True)
class ExecutionLogEntry:
    """One executed command, stored as a single JSON line.

    ``stack_path`` is relative to the project root for display;
    ``absolute_path`` is what gets executed again.
    """

    id: int
    timestamp: datetime
    user: str
    stack_path: str
    absolute_path: str
    command: str
    exit_code: int = 0
    duration_s: float = 0.0
    summary: str = ""

    @property
    def succeeded(self) -> bool:
        return self.exit_code == 0

    def to_dict(self) -> dict[str, object]:
        data = asdict(self)
        data["timestamp"] = self.timestamp.isoformat()
        return data

    @classmethod
    def from_dict(cls, data: object) -> ExecutionLogEntry:
        """Decode one stored record; raises ``ValueError`` on malformed input.

        Records written before ``absolute_path`` existed reuse ``stack_path``.
        """
        if not isinstance(data, dict):
            raise ValueError("history record is not an object")
        duration = data.get("duration_s", 0.0)
        if isinstance(duration, bool) or not isinstance(duration, (int, float)):
            raise ValueError(f"invalid duration_s: {duration!r}")
        stack_path = _str_field(data, "stack_path")
        absolute_path = _str_field(data, "absolute_path") or stack_path
        return cls(
            id=_int_field(data, "id"),
            timestamp=_parse_timestamp(data.get("timestamp")),
            user=_str_field(data, "user"),
            stack_path=stack_path,
            absolute_path=absolute_path,
            command=_str_field(data, "command"),
            exit_code=_int_field(data, "exit_code"),
            duration_s=float(duration),
            summary=_str_field(data, "summary"),
        )
