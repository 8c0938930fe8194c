"""Declarative key tables: key tokens map to named actions.

Models own the action implementations; a ``KeyMap`` only resolves which
action a token triggers and renders the footer hint line.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class KeyBinding:
    action: str
    keys: tuple[str, ...]
    hint: str = ""


class KeyMap:
    """Ordered bindings; when two bindings share a key the later one wins."""

    def __init__(self, *bindings: KeyBinding) -> None:
        self.bindings = bindings
        self._actions = {key: binding.action for binding in bindings for key in binding.keys}

    def action_for(self, key: str) -> str | None:
        return self._actions.get(key)

    def hints(self) -> str:
        """Footer text built from the bindings that carry a hint, in binding order."""
        return "  ".join(binding.hint for binding in self.bindings if binding.hint)
