"""Export-Modul: Tabellenzeilen für die Rich-Anzeige der Gruppen."""

from export.tui_renderer import (
    GROUP_COLUMNS,
    render_assignment_rows,
    render_group_header,
    render_group_rows,
    render_session_rows,
    render_subscription_rows,
)

__all__ = [
    "GROUP_COLUMNS",
    "render_assignment_rows",
    "render_group_header",
    "render_group_rows",
    "render_session_rows",
    "render_subscription_rows",
]
