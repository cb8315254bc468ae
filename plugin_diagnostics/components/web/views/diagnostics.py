# SPDX-FileCopyrightText: 2026 Christian-Hauke Poensgen
# SPDX-FileCopyrightText: 2026 Maximilian Dolling
# SPDX-FileContributor: AUTHORS.md
#
# SPDX-License-Identifier: BSD-3-Clause

"""JSON API views over the shared diagnostics session."""

from __future__ import annotations

import json
from typing import TYPE_CHECKING

from django.http import HttpResponse, JsonResponse
from pydantic.alias_generators import to_snake

from plugin_diagnostics.components.web.services import get_session
from plugin_diagnostics.core.csv_export import export_filename
from plugin_diagnostics.shared.timeutil import to_ms

from .decorators import require_get, require_post

if TYPE_CHECKING:
    from django.http import HttpRequest

    from plugin_diagnostics.shared.schemas.domain import ActionResult

_HISTORY_NOT_FOUND = "History entry not found"


class _InvalidPayloadError(ValueError):
    pass


def _read_json(request: HttpRequest) -> dict[str, object]:
    if not request.body:
        return {}
    try:
        payload = json.loads(request.body)
    except (json.JSONDecodeError, UnicodeDecodeError) as exc:
        message = f"Invalid JSON body: {exc}"
        raise _InvalidPayloadError(message) from exc
    if not isinstance(payload, dict):
        message = "JSON body must be an object"
        raise _InvalidPayloadError(message)
    return payload


def _error(message: str, status: int = 400) -> JsonResponse:
    return JsonResponse({"error": message}, status=status)


def _snapshot(**extra: object) -> JsonResponse:
    return JsonResponse({**get_session().snapshot(), **extra})


def _action(result: ActionResult, *, failure_status: int = 400) -> JsonResponse:
    status = failure_status if result.level == "error" else 200
    return JsonResponse(result.model_dump(by_alias=True), status=status)


@require_get
def overview(_request: HttpRequest) -> JsonResponse:
    """Return the current page, history view and hints."""
    return _snapshot()


@require_post
def update_filters(request: HttpRequest) -> JsonResponse:
    """Apply a partial update of filter and history view fields.

    Keys use the persisted camelCase names, e.g. ``pluginFilter`` or
    ``historySortMode``; ``historyViewMode`` sets both pinned flags.
    """
    try:
        payload = _read_json(request)
        get_session().update(**{to_snake(key): value for key, value in payload.items()})
    except ValueError as exc:
        return _error(str(exc))
    return _snapshot()


@require_post
def quick_range(request: HttpRequest) -> JsonResponse:
    """Apply a custom range covering the last N minutes."""
    try:
        payload = _read_json(request)
        minutes = payload.get("minutes")
        if isinstance(minutes, bool) or not isinstance(minutes, int):
            message = "minutes must be an integer"
            raise _InvalidPayloadError(message)
        get_session().apply_quick_range(minutes)
    except ValueError as exc:
        return _error(str(exc))
    return _snapshot()


@require_post
def last_range(_request: HttpRequest) -> JsonResponse:
    """Re-apply the last applied custom range."""
    applied = get_session().apply_last_range()
    return _snapshot(applied=applied)


@require_post
def clear_range(_request: HttpRequest) -> JsonResponse:
    """Clear the custom range bounds."""
    get_session().clear_range()
    return _snapshot()


@require_post
def reset(_request: HttpRequest) -> JsonResponse:
    """Restore default filters."""
    get_session().reset_all_filters()
    return _snapshot()


@require_post
def history_apply(_request: HttpRequest, history_id: str) -> JsonResponse:
    """Apply a stored range."""
    if not get_session().apply_history_item(history_id):
        return _error(_HISTORY_NOT_FOUND, status=404)
    return _snapshot()


@require_post
def history_pin(_request: HttpRequest, history_id: str) -> JsonResponse:
    """Toggle the pinned flag of a stored range."""
    if not get_session().toggle_history_pinned(history_id):
        return _error(_HISTORY_NOT_FOUND, status=404)
    return _snapshot()


@require_post
def history_rename(request: HttpRequest, history_id: str) -> JsonResponse:
    """Relabel a stored range."""
    try:
        label = _read_json(request).get("label", "")
    except ValueError as exc:
        return _error(str(exc))
    if not isinstance(label, str):
        return _error("label must be a string")
    if not get_session().rename_history_item(history_id, label):
        return _error(_HISTORY_NOT_FOUND, status=404)
    return _snapshot()


@require_post
def history_delete(_request: HttpRequest, history_id: str) -> JsonResponse:
    """Delete a stored range."""
    if not get_session().remove_history_item(history_id):
        return _error(_HISTORY_NOT_FOUND, status=404)
    return _snapshot()


@require_post
def history_clear(_request: HttpRequest) -> JsonResponse:
    """Delete every stored range."""
    get_session().clear_history()
    return _snapshot()


@require_get
def history_export(_request: HttpRequest) -> JsonResponse:
    """Return the history export envelope."""
    return JsonResponse(get_session().history_export_payload(), json_dumps_params={"indent": 2})


@require_post
def history_import(request: HttpRequest) -> JsonResponse:
    """Replace the history with the JSON request body."""
    try:
        raw = request.body.decode("utf-8")
    except UnicodeDecodeError as exc:
        return _error(f"Invalid request body: {exc}")
    return _action(get_session().import_history_json(raw))


@require_get
def tasks_csv(_request: HttpRequest) -> HttpResponse:
    """Download the filtered task list as CSV."""
    session = get_session()
    response = HttpResponse(session.export_csv(), content_type="text/csv; charset=utf-8")
    filename = export_filename(to_ms(session.now()))
    response["Content-Disposition"] = f'attachment; filename="{filename}"'
    return response


@require_post
def task_cancel(_request: HttpRequest, task_id: str) -> JsonResponse:
    """Request cancellation of a task."""
    return _action(get_session().cancel_task(task_id))


@require_get
def task_detail(_request: HttpRequest, task_id: str) -> JsonResponse:
    """Load and select the detail of a task."""
    session = get_session()
    result = session.load_task_detail(task_id)
    if result.level == "error":
        return _action(result, failure_status=502)
    if not result.ok:
        return _error(result.message, status=404)
    detail = session.selected_detail
    return JsonResponse({"task": detail.model_dump(by_alias=True) if detail is not None else None})


@require_post
def refresh(_request: HttpRequest) -> JsonResponse:
    """Reload plugins and the task snapshot."""
    get_session().reload()
    return _snapshot()
