"""Public runtime entry points: interactive sessions, terminal control and config."""

from __future__ import annotations


def run_navigation_session(*args, **kwargs):
    """Run the column browser; the loop and terminal modules load on first use."""
    from .loop import run_navigation_session as _run_navigation_session

    return _run_navigation_session(*args, **kwargs)


def run_history_session(*args, **kwargs):
    """Browse ``entries`` and return the one chosen with Enter, or ``None``."""
    from .loop import run_history_session as _run_history_session

    return _run_history_session(*args, **kwargs)


def run_plan_review_session(*args, **kwargs):
    from .loop import run_plan_review_session as _run_plan_review_session

    return _run_plan_review_session(*args, **kwargs)


def __getattr__(name: str):
    if name in {"SessionIO", "run_session"}:
        from . import loop as _loop

        return getattr(_loop, name)
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")


__all__ = [
    "SessionIO",
    "run_history_session",
    "run_navigation_session",
    "run_plan_review_session",
    "run_session",
]
