"""Compose the full screen from the dispatcher's current state."""

from __future__ import annotations

from rich.console import Group

from awstui_core.controllers import DomainController, ViewKind
from awstui_core.dispatcher import Dispatcher
from awstui_core.keys import HELP, STATE_HELP
from awstui_core.panels.details import render as render_details
from awstui_core.panels.header import render as render_header
from awstui_core.panels.listing import render as render_listing
from awstui_core.panels.logs import render as render_logs
from awstui_core.panels.menu import render as render_menu
from awstui_core.panels.status import render as render_status


def help_text(controller: DomainController | None) -> str:
    if controller is None:
        return HELP["menu"]
    if controller.confirm.active:
        return HELP["confirm"]
    specific = STATE_HELP.get(controller.state.value)
    if specific:
        return specific
    return HELP[controller.view_kind.value]


def _body(controller: DomainController, theme: dict[str, str], loading: bool):
    kind = controller.view_kind
    if kind is ViewKind.LOGS:
        return render_logs(controller.paginator, theme, loading=loading)
    if kind is ViewKind.DETAILS:
        crumbs = controller.breadcrumb()
        return render_details(crumbs[-1] if crumbs else "Details", controller.detail_rows(), theme)
    listing = controller.active_list()
    if listing is None:
        return render_details(controller.domain.value, [], theme)
    return render_listing(listing, theme, loading=loading)


def render(dispatcher: Dispatcher, theme: dict[str, str], session_label: str = ""):
    controller = dispatcher.controller
    if controller is None:
        header = render_header([], theme, session_label)
        body = render_menu(dispatcher.choices, dispatcher.cursor, theme)
        confirming = False
    else:
        header = render_header(controller.breadcrumb(), theme, session_label)
        body = _body(controller, theme, loading=dispatcher.busy)
        confirming = controller.confirm.active

    status = render_status(
        status=controller.confirm.prompt if confirming else dispatcher.status,
        error=dispatcher.error,
        busy=dispatcher.busy,
        confirming=confirming,
        help_text=help_text(controller),
        theme=theme,
    )
    return Group(header, body, status)
