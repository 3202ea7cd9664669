"""Operation-specific Rich renderers for ServiceResult.

Each renderer writes to a Rich Console (backed by StringIO). The caller
extracts the rendered text via ``get_output(console)``.

Renderers are dispatched by ``result.op`` in :func:`render_result`.
Unknown ops fall through to a generic key-value renderer.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from rich.text import Text

from tasktrack.output.console import (
    category_marker,
    create_console,
    get_output,
    task_checkbox,
    task_style,
)

if TYPE_CHECKING:
    from rich.console import Console

    from tasktrack.services.result import ServiceResult


# ── Public API ────────────────────────────────────────────────────────


def render_result(result: ServiceResult, *, verbose: bool = False, show_ids: bool = True) -> str:
    """Render a ServiceResult to a styled string via Rich.

    Returns plain text (no ANSI) when Rich detects no terminal,
    which is the case inside Click's CliRunner and piped output.
    """
    console = create_console()

    if result.ok:
        renderer = _OP_RENDERERS.get(result.op, _render_generic)
        renderer(result, console, verbose=verbose, show_ids=show_ids)
    else:
        _render_error(result, console, verbose=verbose)

    return get_output(console).rstrip("\n")


def render_quiet(result: ServiceResult) -> str:
    """Render minimal output for ``--quiet`` mode."""
    if not result.ok:
        msg = result.error.message if result.error else "Unknown error"
        return f"ERROR: {result.op} — {msg}"

    if result.op == "show":
        return "\n".join(str(c["id"]) for c in result.data.get("categories", []))

    if "id" in result.data:
        return str(result.data["id"])
    return f"OK: {result.op}"


# ── Helpers ───────────────────────────────────────────────────────────


def _status_line(console: Console, result: ServiceResult) -> None:
    label = Text("OK", style="tt.ok")
    op = Text(f"  {result.op}", style="tt.op")
    console.print(label, op, end="")
    if result.data.get("changed") is False:
        console.print(Text("  (no change)", style="dim"), end="")
    console.print()


def _field(console: Console, key: str, value: Any) -> None:
    k = Text(f"  {key}: ", style="tt.key")
    style = "tt.id" if key == "id" or key.endswith("_id") else ""
    console.print(k, Text(str(value), style=style), end="")
    console.print()


# ── Error renderer ────────────────────────────────────────────────────


def _render_error(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    err = result.error
    msg = err.message if err else "Unknown error"
    label = Text("ERROR", style="tt.error")
    op = Text(f"  {result.op}", style="tt.op")
    console.print(label, op, Text(" — "), Text(msg))

    if err is not None:
        console.print(Text(f"  code: {err.code}", style="dim"))
        if verbose and err.detail:
            console.print(Text("  detail:", style="dim"))
            for k, v in err.detail.items():
                console.print(Text(f"    {k}: {v}"))


# ── Mutation renderer ─────────────────────────────────────────────────


def _render_mutation(
    result: ServiceResult,
    console: Console,
    *,
    verbose: bool = False,
    show_ids: bool = True,
) -> None:
    _status_line(console, result)
    for key in ("id", "name", "category_id", "title", "done", "collapsed"):
        if key not in result.data:
            continue
        if not show_ids and (key == "id" or key.endswith("_id")):
            continue
        _field(console, key, result.data[key])
    if result.data.get("tasks_removed"):
        _field(console, "tasks_removed", result.data["tasks_removed"])


def _render_reset(
    result: ServiceResult,
    console: Console,
    *,
    verbose: bool = False,
    show_ids: bool = True,
) -> None:
    _status_line(console, result)
    _field(console, "categories_removed", result.data.get("categories_removed", 0))
    _field(console, "tasks_removed", result.data.get("tasks_removed", 0))


# ── Board renderer ────────────────────────────────────────────────────


def _render_board(
    result: ServiceResult,
    console: Console,
    *,
    verbose: bool = False,
    show_ids: bool = True,
) -> None:
    categories = result.data.get("categories", [])
    if not categories:
        console.print(Text("No categories", style="dim"))
        return

    for index, category in enumerate(categories):
        if index:
            console.print()
        collapsed = bool(category.get("collapsed"))
        header = Text()
        header.append(category_marker(collapsed))
        header.append(" ")
        header.append(str(category["name"]), style="tt.category")
        header.append(
            f"  ({category.get('done_count', 0)}/{category.get('task_count', 0)} done)",
            style="dim",
        )
        if show_ids:
            header.append(f"  {category['id']}", style="tt.id")
        console.print(header)

        if collapsed:
            console.print(Text("    (collapsed)", style="tt.collapsed"))
            continue

        tasks = category.get("tasks", [])
        if not tasks:
            console.print(Text("    (no tasks)", style="dim"))
        for task in tasks:
            done = bool(task.get("done"))
            line = Text("    ")
            line.append(f"{task_checkbox(done)} ")
            line.append(str(task["title"]), style=task_style(done))
            if show_ids:
                line.append(f"  {task['id']}", style="tt.id")
            console.print(line)

    if verbose:
        console.print()
        console.print(
            Text(
                f"{result.data.get('count', len(categories))} categories, "
                f"{result.data.get('task_count', 0)} tasks",
                style="dim",
            )
        )


# ── Fallback ──────────────────────────────────────────────────────────


def _render_generic(
    result: ServiceResult,
    console: Console,
    *,
    verbose: bool = False,
    show_ids: bool = True,
) -> None:
    _status_line(console, result)
    for key, value in result.data.items():
        if key == "changed":
            continue
        _field(console, key, value)


_OP_RENDERERS: dict[str, Any] = {
    "show": _render_board,
    "reset": _render_reset,
    "add_category": _render_mutation,
    "rename_category": _render_mutation,
    "remove_category": _render_mutation,
    "set_collapsed": _render_mutation,
    "add_task": _render_mutation,
    "toggle_task": _render_mutation,
    "rename_task": _render_mutation,
    "remove_task": _render_mutation,
}
