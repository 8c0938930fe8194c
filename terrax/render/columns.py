"""Frame composition for the column browser.

Rows, top to bottom: header, breadcrumb, column titles, separator, one row per
visible item, page dots, footer. The commands column is always painted first,
followed by the navigation columns inside the sliding window.
"""

from __future__ import annotations

from ..ansi import clip_ansi_line, pad_to_width, truncate_text
from ..columns.filtering import FilteredView
from ..columns.layout import OVERFLOW_GUTTER_WIDTH, max_item_text_width
from ..columns.model import COMMANDS_COLUMN, MODE_FILTER_EDITING, NavigationModel
from ..columns.pagination import current_page, paginated_range, total_pages
from ..stack.types import StackNode
from ..ui_theme import DEFAULT_THEME, UITheme
from .chrome import build_status_line, selected_with_ansi, styled

HEADER_TEXT = "TerraX  Terragrunt stack navigator"
CURSOR = "▸ "
LEFT_ARROW = "◀"
RIGHT_ARROW = "▶"
PAGE_DOT_ACTIVE = "●"
PAGE_DOT_INACTIVE = "○"
NO_MATCHES_TEXT = "(no matches)"

FILTER_HINT_PREFIX = "type to filter"


def _column_title(model: NavigationModel, column_id: int) -> str:
    if column_id == COMMANDS_COLUMN:
        return "Commands"
    return f"Level {column_id}"


def _title_cell(model: NavigationModel, column_id: int, theme: UITheme, width: int) -> str:
    column_filter = model.column_filters.get(column_id)
    focused = column_id == model.focused_column
    if column_filter is not None:
        editing = model.active_filter_column == column_id
        query = column_filter.query
        if editing:
            query = query[: column_filter.cursor] + "▏" + query[column_filter.cursor :]
        text = styled("/", theme.filter_prompt) + styled(
            truncate_text(query, max(1, width - 1)), theme.filter_query
        )
        return pad_to_width(clip_ansi_line(text, width), width)
    title = truncate_text(_column_title(model, column_id), width)
    style = theme.column_title_focused if focused else theme.column_title
    return pad_to_width(styled(title, style), width)


def _item_label(item: object) -> str:
    if isinstance(item, StackNode):
        return item.label
    return str(item)


def _item_style(item: object, theme: UITheme) -> str:
    if isinstance(item, StackNode) and item.is_stack:
        return theme.stack_item
    return theme.item


def _column_rows(
    model: NavigationModel,
    column_id: int,
    view: FilteredView,
    theme: UITheme,
    width: int,
) -> list[str]:
    rows: list[str] = []
    page_size = model.page_size
    text_width = max_item_text_width(width)
    if not len(view):
        if view.is_filtered:
            rows.append(pad_to_width(styled(truncate_text(NO_MATCHES_TEXT, width), theme.footer), width))
        return rows + [" " * width] * (page_size - len(rows))

    selected = view.filtered_index_of(model.selected_full_index(column_id))
    focused = column_id == model.focused_column
    start, end = paginated_range(model.scroll_offset(column_id), page_size, len(view))
    for position in range(start, end):
        item = view.items[position]
        label = truncate_text(_item_label(item), text_width)
        if position == selected:
            line = CURSOR + label
            if focused:
                rows.append(selected_with_ansi(pad_to_width(styled(line, theme.selected), width)))
            else:
                rows.append(pad_to_width(styled(line, theme.selected_unfocused), width))
        else:
            rows.append(pad_to_width("  " + styled(label, _item_style(item, theme)), width))
    return rows + [" " * width] * (page_size - len(rows))


def _page_dots(model: NavigationModel, column_id: int, view: FilteredView, theme: UITheme, width: int) -> str:
    pages = total_pages(len(view), model.page_size)
    if pages <= 1:
        return " " * width
    page = current_page(model.scroll_offset(column_id), model.page_size)
    dots = []
    for number in range(1, pages + 1):
        if number == page:
            dots.append(styled(PAGE_DOT_ACTIVE, theme.page_dot_active))
        else:
            dots.append(styled(PAGE_DOT_INACTIVE, theme.page_dot_inactive))
    return pad_to_width(clip_ansi_line("".join(dots), width), width)


def _gutter(arrow: str, show: bool, theme: UITheme, left: bool) -> str:
    if not show:
        return " " * OVERFLOW_GUTTER_WIDTH
    glyph = styled(arrow, theme.overflow_arrow)
    return glyph + " " if left else " " + glyph


def render_navigation_frame(model: NavigationModel, theme: UITheme = DEFAULT_THEME) -> list[str]:
    """Compose the full browser frame for ``model``; returns one string per row."""
    layout = model.layout
    width = max(1, layout.width)
    column_width = layout.column_width
    column_ids = [COMMANDS_COLUMN] + [depth + 1 for depth in model.visible_depths]
    views = {column_id: model.filtered_view(column_id) for column_id in column_ids}

    lines: list[str] = [clip_ansi_line(styled(HEADER_TEXT, theme.header), width)]
    breadcrumb = model.breadcrumb_path()
    crumb = f"📁 {breadcrumb}" if breadcrumb is not None else "📁 (no stacks found)"
    lines.append(clip_ansi_line(styled(truncate_text(crumb, width - 1), theme.breadcrumb), width))

    blank_gutter = " " * OVERFLOW_GUTTER_WIDTH
    lines.append(
        clip_ansi_line(
            blank_gutter
            + "".join(_title_cell(model, cid, theme, column_width) for cid in column_ids)
            + blank_gutter,
            width,
        )
    )
    separator = styled("─" * max(0, column_width - 1), theme.divider) + " "
    lines.append(clip_ansi_line(blank_gutter + separator * len(column_ids) + blank_gutter, width))

    columns = [_column_rows(model, cid, views[cid], theme, column_width) for cid in column_ids]
    for row in range(model.page_size):
        arrows_visible = row == 0
        left = _gutter(LEFT_ARROW, arrows_visible and model.has_left_overflow, theme, left=True)
        right = _gutter(RIGHT_ARROW, arrows_visible and model.has_right_overflow, theme, left=False)
        body = "".join(column[row] for column in columns)
        lines.append(clip_ansi_line(left + body + right, width))

    lines.append(
        clip_ansi_line(
            blank_gutter
            + "".join(_page_dots(model, cid, views[cid], theme, column_width) for cid in column_ids)
            + blank_gutter,
            width,
        )
    )

    hints = model.keymap.hints()
    if model.mode == MODE_FILTER_EDITING:
        hints = f"{FILTER_HINT_PREFIX}  {hints}"
    status = build_status_line(hints, width, f"{model.selected_command_name} ")
    lines.append(styled(status, theme.footer))
    return lines
