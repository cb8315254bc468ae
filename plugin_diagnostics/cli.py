# SPDX-FileCopyrightText: 2026 Christian-Hauke Poensgen
# SPDX-FileCopyrightText: 2026 Maximilian Dolling
# SPDX-FileContributor: AUTHORS.md
#
# SPDX-License-Identifier: BSD-3-Clause

"""CLI entrypoints for Plugin Diagnostics."""

from __future__ import annotations

import json
from pathlib import Path
from typing import TYPE_CHECKING, TextIO

import click

from plugin_diagnostics.config import (
    MAX_PORT,
    DiagnosticsConfig,
    FrontendConfig,
    StorageConfigSqlite,
    get_settings,
    set_settings,
)
from plugin_diagnostics.components.web import services
from plugin_diagnostics.core.logging.setup import configure_process_logging
from plugin_diagnostics.core.queue_client import MemoryTaskQueueClient

if TYPE_CHECKING:
    from collections.abc import Callable

    from plugin_diagnostics.core.session import DiagnosticsSession
    from plugin_diagnostics.shared.schemas.domain import ActionResult

_TASKS_HELP = "Task snapshot JSON file ({tasks, queueStats, plugins} or a bare task list)."


def _apply_storage(config: DiagnosticsConfig, db_path: Path | None, storage_key: str | None) -> DiagnosticsConfig:
    if db_path is None and storage_key is None:
        return config
    updates: dict[str, object] = {}
    if storage_key is not None:
        updates["storage_key"] = storage_key
    if db_path is not None:
        storage = StorageConfigSqlite(db_path=db_path, storage_key=config.storage.storage_key)
    else:
        storage = config.storage
    return config.model_copy(update={"storage": storage.model_copy(update=updates)})


def _apply_frontend_overrides(
    config: DiagnosticsConfig,
    host: str | None,
    port: int | None,
    *,
    debug: bool | None,
    tasks_path: Path | None,
) -> DiagnosticsConfig:
    frontend = config.frontend or FrontendConfig()
    updates: dict[str, object] = {}
    if host is not None:
        updates["host"] = host
    if port is not None:
        updates["port"] = port
    if debug is not None:
        updates["debug"] = debug
    if tasks_path is not None:
        updates["tasks_snapshot_path"] = tasks_path
    return config.model_copy(update={"frontend": frontend.model_copy(update=updates)})


def _load_client(tasks_path: Path | None) -> MemoryTaskQueueClient:
    if tasks_path is None:
        return MemoryTaskQueueClient()
    try:
        return MemoryTaskQueueClient.from_snapshot_file(tasks_path)
    except (OSError, ValueError) as exc:
        message = f"Cannot read task snapshot {tasks_path}: {exc}"
        raise click.BadParameter(message, param_hint="--tasks") from exc


def _open_session(ctx: click.Context, tasks_path: Path | None = None) -> DiagnosticsSession:
    config = ctx.find_object(DiagnosticsConfig) or get_settings()
    session = services.build_session(config, client=_load_client(tasks_path))
    ctx.call_on_close(session.stop)
    return session


def _report(ctx: click.Context, result: ActionResult) -> None:
    click.echo(result.message, err=not result.ok)
    if not result.ok:
        ctx.exit(1)


def _tasks_option[F: Callable[..., object]](func: F) -> F:
    return click.option(
        "--tasks",
        "tasks_path",
        type=click.Path(exists=True, dir_okay=False, path_type=Path),
        default=None,
        help=_TASKS_HELP,
    )(func)


@click.group(help="Inspect and manage plugin task diagnostics filters.")
@click.option(
    "--db",
    "db_path",
    envvar="PLUGIN_DIAGNOSTICS_DB",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="SQLite file holding the persisted filters (in-memory when omitted).",
)
@click.option("--storage-key", default=None, help="Key the filter state is stored under.")
@click.pass_context
def main(ctx: click.Context, db_path: Path | None, storage_key: str | None) -> None:
    """Resolve configuration shared by every subcommand."""
    ctx.obj = _apply_storage(get_settings(), db_path, storage_key)


@main.command(help="Serve the diagnostics JSON API with the development server.")
@click.option("--host", default=None, help="Bind the API to this host.")
@click.option("--port", default=None, type=click.IntRange(1, MAX_PORT), help="Bind the API to this port.")
@click.option("--debug/--no-debug", default=None, help="Enable or disable Django debug mode.")
@_tasks_option
@click.pass_context
def serve(
    ctx: click.Context,
    host: str | None,
    port: int | None,
    tasks_path: Path | None,
    *,
    debug: bool | None,
) -> None:
    """Start the API and the periodic refresh."""
    from plugin_diagnostics.components.web import devserver  # noqa: PLC0415

    config = _apply_frontend_overrides(ctx.obj, host, port, debug=debug, tasks_path=tasks_path)
    set_settings(config)
    configure_process_logging(config, component="web")
    session = _open_session(ctx, tasks_path)
    services.set_session(session)
    session.start_auto_refresh()
    frontend = config.frontend or FrontendConfig()
    devserver.serve(frontend.host, frontend.port)


@main.command(help="Print the current dashboard view as JSON.")
@_tasks_option
@click.pass_context
def show(ctx: click.Context, tasks_path: Path | None) -> None:
    """Dump the session snapshot."""
    session = _open_session(ctx, tasks_path)
    click.echo(json.dumps(session.snapshot(), ensure_ascii=False, indent=2))


@main.command("export-history", help="Print the range history export JSON.")
@click.option("--copy", "copy", is_flag=True, default=False, help="Copy to the clipboard instead of printing.")
@click.pass_context
def export_history(ctx: click.Context, *, copy: bool) -> None:
    """Export the range history."""
    session = _open_session(ctx)
    if copy:
        _report(ctx, session.export_history_json())
        return
    if not session.state.history:
        click.echo("No range history to export", err=True)
        ctx.exit(1)
    click.echo(json.dumps(session.history_export_payload(), ensure_ascii=False, indent=2))


@main.command("import-history", help="Replace the range history from a JSON file, or - for stdin.")
@click.argument("source", type=click.File("r", encoding="utf-8"))
@click.pass_context
def import_history(ctx: click.Context, source: TextIO) -> None:
    """Import a range history payload."""
    session = _open_session(ctx)
    _report(ctx, session.import_history_json(source.read()))


@main.command("export-csv", help="Write the filtered task list as CSV.")
@_tasks_option
@click.option(
    "-o",
    "--output",
    type=click.Path(dir_okay=False, writable=True, path_type=Path),
    default=None,
    help="Output file (stdout when omitted).",
)
@click.pass_context
def export_csv(ctx: click.Context, tasks_path: Path | None, output: Path | None) -> None:
    """Render the filtered tasks as CSV."""
    session = _open_session(ctx, tasks_path)
    text = session.export_csv()
    if output is None:
        click.echo(text)
        return
    output.write_text(f"{text}\n", encoding="utf-8")
    click.echo(f"Wrote {len(session.filtered_tasks())} tasks to {output}", err=True)


@main.command(help="Reset every filter to its default; the range history is kept.")
@click.pass_context
def reset(ctx: click.Context) -> None:
    """Reset the persisted filters."""
    session = _open_session(ctx)
    session.reset_all_filters()
    click.echo("Filters reset")


if __name__ == "__main__":  # pragma: no cover
    main()
