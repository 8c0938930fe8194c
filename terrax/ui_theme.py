"""ANSI palette used by the column browser, history and plan review renderers."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class UITheme:
    """Semantic ANSI palette used by renderers."""

    name: str
    reset: str
    reverse: str
    divider: str
    header: str
    breadcrumb: str
    column_title: str
    column_title_focused: str
    selected: str
    selected_unfocused: str
    item: str
    stack_item: str
    overflow_arrow: str
    page_dot_active: str
    page_dot_inactive: str
    filter_prompt: str
    filter_query: str
    footer: str
    history_success: str
    history_failure: str
    plan_add: str
    plan_change: str
    plan_destroy: str
    plan_muted: str


DEFAULT_THEME = UITheme(
    name="default",
    reset="\033[0m",
    reverse="\033[7m",
    divider="\033[2m",
    header="\033[1;38;5;81m",
    breadcrumb="\033[38;5;229m",
    column_title="\033[2;38;5;250m",
    column_title_focused="\033[1;38;5;45m",
    selected="\033[1;38;5;81m",
    selected_unfocused="\033[38;5;110m",
    item="\033[38;5;252m",
    stack_item="\033[38;5;42m",
    overflow_arrow="\033[1;38;5;214m",
    page_dot_active="\033[38;5;81m",
    page_dot_inactive="\033[2;38;5;250m",
    filter_prompt="\033[1;38;5;81m",
    filter_query="\033[38;5;229m",
    footer="\033[2;38;5;250m",
    history_success="\033[38;5;42m",
    history_failure="\033[38;5;203m",
    plan_add="\033[38;5;42m",
    plan_change="\033[38;5;214m",
    plan_destroy="\033[38;5;196m",
    plan_muted="\033[38;5;240m",
)
