"""Turn wizard state into Rich renderables.

``WizardRenderer`` is stateless apart from its theme: every method reads the
component it is given and returns a fresh renderable.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence

from rich import box
from rich.console import Group, RenderableType
from rich.padding import Padding
from rich.panel import Panel
from rich.text import Text

from khelper.constants.values import (
    APP_SUBTITLE,
    APP_TITLE,
    CURSOR_MARKER,
    HEADER_ALL,
    HEADER_RECENT,
    MSG_LOADING,
    MSG_NO_ITEMS,
    MSG_NO_LOG_SELECTED,
    MSG_NO_MATCHES,
)
from khelper.keyboard.wizard import (
    INPUT_HELP,
    LOG_VIEWER_HELP,
    RESULT_HELP,
    SELECTOR_HELP,
)
from khelper.presentation.theme import Theme
from khelper.wizard.controller import WizardController
from khelper.wizard.log_viewer import LogViewer, find_occurrences
from khelper.wizard.query import TextQuery
from khelper.wizard.selector import FuzzySelector
from khelper.wizard.states import (
    AWAIT_INPUT,
    EXECUTING,
    SELECT_ASSET_FOLDER,
    SELECT_CONFIG,
    SHOW_RESULT,
    VIEW_LOGS,
)


def _styled_positions(text: str, positions: Iterable[int], base, highlight) -> Text:
    rendered = Text(text, style=base)
    for pos in positions:
        rendered.stylize(highlight, pos, pos + 1)
    return rendered


def _styled_spans(text: str, spans: Iterable[tuple[int, int]], base, highlight) -> Text:
    rendered = Text(text, style=base)
    for start, end in spans:
        rendered.stylize(highlight, start, min(end, len(text)))
    return rendered


class WizardRenderer:
    """Renders the wizard with a fixed theme."""

    def __init__(self, theme: Theme) -> None:
        self.theme = theme

    # ------------------------------------------------------------------
    # Whole screen
    # ------------------------------------------------------------------

    def render(self, controller: WizardController) -> RenderableType:
        if controller.state == VIEW_LOGS and controller.viewer is not None:
            body = Group(
                self.render_log_viewer(controller.viewer),
                Text(""),
                self.render_help(LOG_VIEWER_HELP),
            )
            return Padding(body, (1, 2))

        parts: list[RenderableType] = [
            self.render_header(
                controller.context_path,
                controller.target.namespace,
                controller.target.resource,
            )
        ]
        parts.extend(self._render_banner(controller))
        parts.append(self._render_body(controller))
        parts.append(Text(""))
        parts.append(self.render_help(self._help_for(controller)))
        return Padding(Group(*parts), (1, 2))

    def _help_for(self, controller: WizardController) -> Sequence[tuple[str, str]]:
        if controller.state == AWAIT_INPUT:
            return INPUT_HELP
        if controller.state in (SHOW_RESULT, EXECUTING):
            return RESULT_HELP
        return SELECTOR_HELP

    def _render_banner(self, controller: WizardController) -> list[RenderableType]:
        banner: list[RenderableType] = []
        if controller.notice:
            banner.append(Text(controller.notice, style=self.theme.warning_style))
        if controller.pending_context:
            banner.append(self.render_loading(f"Connecting to {controller.pending_context}..."))
        elif controller.in_detour:
            changing_config = controller.state == SELECT_CONFIG or controller.entering_config_path
            what = "kubeconfig" if changing_config else "namespace"
            banner.append(Text(f"Changing {what}...", style=self.theme.info))
        if banner:
            banner.append(Text(""))
        return banner

    def _render_body(self, controller: WizardController) -> RenderableType:
        state = controller.state
        if state == AWAIT_INPUT:
            info = None
            if controller.action and controller.action.folder_base_path and controller.target.folder:
                info = f"Target: {controller.action.folder_base_path}/{controller.target.folder}"
            return self.render_input(controller.input_prompt, controller.value_input, info)
        if state == EXECUTING:
            return self.render_loading("Executing command...")
        if state == SHOW_RESULT:
            return self.render_result(controller.result, controller.error)
        selector = controller.active_selector
        if selector is None:
            return Text("")
        if state == SELECT_ASSET_FOLDER:
            return Group(
                Text("Select asset folder to deploy to:", style=self.theme.info),
                Text(""),
                self.render_selector(selector),
            )
        return self.render_selector(selector)

    # ------------------------------------------------------------------
    # Pieces
    # ------------------------------------------------------------------

    def render_header(self, context_path: str, namespace: str, resource: str) -> Panel:
        t = self.theme
        lines = Text()
        lines.append(f"🚀 {APP_TITLE} - {APP_SUBTITLE}", style=t.title)
        lines.append("\n\n")
        for label, value in (
            ("Kubeconfig", context_path),
            ("Namespace", namespace),
            ("Deployment", resource),
        ):
            lines.append(f"{label}: ", style=t.label)
            if value:
                lines.append(value, style=t.value)
            else:
                lines.append("(default)" if label == "Kubeconfig" else "-", style=t.info)
            lines.append("\n")
        lines.rstrip()
        return Panel(lines, box=box.ROUNDED, border_style=t.primary, padding=(1, 2))

    def render_help(self, items: Sequence[tuple[str, str]]) -> Text:
        return Text(" • ".join(f"{keys}: {what}" for keys, what in items), style=self.theme.help)

    def render_loading(self, message: str = MSG_LOADING) -> Text:
        return Text(f"⏳ {message}", style=self.theme.info)

    def render_error(self, message: str) -> Text:
        return Text(f"✗ {message}", style=self.theme.error_style)

    def render_query(self, query: TextQuery, *, focused: bool = True) -> Panel:
        t = self.theme
        if query.value:
            content = Text("> ", style=t.secondary)
            content.append(query.value, style=t.value)
        else:
            content = Text("> ", style=t.secondary)
            content.append(query.placeholder, style=t.placeholder)
        border = t.secondary if focused else t.primary
        return Panel(content, box=box.ROUNDED, border_style=border, padding=(0, 1))

    def render_selector(self, selector: FuzzySelector) -> RenderableType:
        t = self.theme
        parts: list[RenderableType] = [
            Text(selector.title, style=t.label),
            self.render_query(selector.query),
        ]
        if selector.loading:
            parts.append(self.render_loading())
            return Group(*parts)
        if selector.error is not None:
            parts.append(self.render_error(str(selector.error)))
            return Group(*parts)
        if selector.total == 0:
            message = MSG_NO_ITEMS if not selector.items and not selector.recent else MSG_NO_MATCHES
            parts.append(Text(f"  {message}", style=t.info))
            return Group(*parts)

        rows = Text()
        for row in selector.visible_rows():
            if row.recent_header:
                rows.append(f"  {HEADER_RECENT}\n", style=t.info)
            if row.all_header:
                rows.append(f"  {HEADER_ALL}\n", style=t.info)
            base = t.selected if row.selected else t.item
            prefix = CURSOR_MARKER if row.selected else "  "
            rows.append(f"  {prefix}", style=base)
            rows.append_text(_styled_positions(row.match.text, row.match.positions, base, t.match))
            rows.append("\n")
        if selector.total > selector.max_visible:
            rows.append(f"\n  [{selector.cursor + 1}/{selector.total}]", style=t.info)
        rows.rstrip()
        parts.append(rows)
        return Group(*parts)

    def render_input(self, prompt: str, query: TextQuery, info: str | None = None) -> RenderableType:
        parts: list[RenderableType] = []
        if info:
            parts.extend([Text(info, style=self.theme.info), Text("")])
        parts.append(Text(prompt, style=self.theme.label))
        parts.append(self.render_query(query))
        return Group(*parts)

    def render_result(self, result: str | None, error: Exception | None) -> RenderableType:
        t = self.theme
        parts: list[RenderableType] = []
        if error is not None:
            parts.append(self.render_error(str(error)))
        else:
            parts.extend([Text("Result:", style=t.success), Text(""), Text(result or "", style=t.value)])
        parts.extend([Text(""), Text("Press Enter to continue...", style=t.info)])
        return Group(*parts)

    def render_log_viewer(self, viewer: LogViewer) -> RenderableType:
        t = self.theme
        query = viewer.search_query()

        status = Text()
        if viewer.streaming:
            status.append("● LIVE ", style=t.live)
        search_style = t.label if viewer.search_focused else t.help
        status.append("🔍 Search: ", style=search_style)
        status.append(query or viewer.search.placeholder, style=t.value if query else t.placeholder)

        stats = Text(
            f"{len(viewer.filtered_lines)}/{len(viewer.all_lines)} lines"
            f" • Selected: {viewer.selected_index + 1 if viewer.filtered_lines else 0}",
            style=t.info,
        )
        parts: list[RenderableType] = [status, stats]
        if viewer.note:
            parts.append(Text(viewer.note, style=t.warning_style))
        if viewer.search_focused and not query and viewer.recent_searches:
            parts.append(Text("Recent: " + ", ".join(viewer.recent_searches), style=t.help))

        listing = Text()
        for index, line in viewer.visible_lines():
            selected = index == viewer.selected_index
            base = t.selected if selected else t.item
            listing.append(CURSOR_MARKER if selected else "  ", style=base)
            listing.append_text(_styled_spans(line, find_occurrences(line, query), base, t.match))
            listing.append("\n")
        listing.rstrip()
        parts.append(Text("─── Matching Logs ───", style=t.label))
        parts.append(listing)

        detail_lines = viewer.detail_lines()
        if detail_lines:
            detail = Text("\n").join(
                _styled_spans(line, find_occurrences(line, query), t.value, t.match)
                for line in detail_lines[: viewer.detail_height]
            )
        else:
            detail = Text(MSG_NO_LOG_SELECTED, style=t.info)
        parts.append(
            Panel(
                detail,
                title="─── Full Log Entry ───",
                box=box.ROUNDED,
                border_style=t.primary,
                width=viewer.pane_width,
            )
        )
        return Group(*parts)


__all__ = ["WizardRenderer"]
